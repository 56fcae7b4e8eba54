"""Tests for Sort descriptors."""

from __future__ import annotations

import pytest

from customer_data.models import Customer
from customer_data.sorting import Direction, Order, Sort


class TestSort:
    """Test building and rendering orderings."""

    def test_by_renders_column_order(self) -> None:
        (term,) = Sort.by("username").to_order_by(Customer)

        assert str(term) == "customer.username ASC"

    def test_unsafe_renders_raw_expression(self) -> None:
        (term,) = Sort.unsafe("LENGTH(password)", direction=Direction.DESC).to_order_by(Customer)

        assert str(term) == "LENGTH(password) DESC"

    def test_and_concatenates_orders(self) -> None:
        sort = Sort.by("up", direction=Direction.DESC).and_(Sort.by("username"))

        assert sort.orders == (
            Order("up", Direction.DESC),
            Order("username", Direction.ASC),
        )

    def test_descending_flips_every_order(self) -> None:
        sort = Sort.by("username", "up").descending()

        assert all(order.direction == Direction.DESC for order in sort.orders)

    def test_unsorted(self) -> None:
        sort = Sort.unsorted()

        assert not sort.is_sorted()
        assert sort.to_order_by(Customer) == []

    def test_requires_at_least_one_term(self) -> None:
        with pytest.raises(ValueError):
            Sort.by()
        with pytest.raises(ValueError):
            Sort.unsafe()

    def test_unknown_property_raises_on_render(self) -> None:
        sort = Sort.by("email")

        with pytest.raises(ValueError, match="unknown property 'email'"):
            sort.to_order_by(Customer)
