"""Tests for the Customer model and its builder."""

from __future__ import annotations

from sqlalchemy import inspect

from customer_data.models import GOOD_VOTE_THRESHOLD, Customer, CustomerBuilder


class TestCustomerBuilder:
    """Test fluent construction of transient customers."""

    def test_builder_sets_fields(self) -> None:
        customer = Customer.builder().username("ces518").password("pjy3859").up(3).build()

        assert customer.username == "ces518"
        assert customer.password == "pjy3859"
        assert customer.up == 3
        assert customer.id is None

    def test_builder_is_chainable(self) -> None:
        builder = Customer.builder()

        assert isinstance(builder, CustomerBuilder)
        assert builder.username("x") is builder

    def test_built_customer_is_transient(self) -> None:
        customer = Customer.builder().username("ces518").password("pjy3859").build()

        assert inspect(customer).transient

    def test_builder_creates_independent_instances(self) -> None:
        builder = Customer.builder().username("ces518").password("pjy3859")

        first, second = builder.build(), builder.build()

        assert first is not second
        assert first.username == second.username

    def test_builder_accepts_explicit_id(self) -> None:
        customer = Customer.builder().id(7).username("ces518").password("pjy3859").build()

        assert customer.id == 7


class TestCustomer:
    """Test entity helpers."""

    def test_repr_hides_password(self) -> None:
        customer = Customer(id=1, username="ces518", password="pjy3859", up=2)

        assert repr(customer) == "<Customer(id=1, username=ces518, up=2)>"
        assert "pjy3859" not in repr(customer)

    def test_is_good_threshold(self) -> None:
        assert Customer(up=GOOD_VOTE_THRESHOLD).is_good
        assert not Customer(up=GOOD_VOTE_THRESHOLD - 1).is_good
        assert not Customer().is_good

    def test_table_columns(self) -> None:
        assert [c.name for c in Customer.__table__.columns] == ["id", "username", "password", "up"]
