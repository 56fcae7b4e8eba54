"""
Ordering Descriptors for Repository Queries.

A `Sort` is an ordered list of `Order` entries. Each entry either names a
mapped column (`Sort.by`) or carries a raw SQL expression (`Sort.unsafe`).
Property names are checked against the entity when the sort is applied, and
raw expressions are passed through `sqlalchemy.text` untouched, so they must
never be built from user input.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from sqlalchemy import asc, desc, inspect, text
from sqlalchemy.sql.expression import UnaryExpression

from .models import Base


class Direction(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class Order:
    """
    A single ordering term.

    Attributes:
        expression: A column name, or a raw SQL expression when `unsafe` is set.
        direction: Ascending or descending.
        unsafe: Whether `expression` is raw SQL rather than a column name.
    """

    expression: str
    direction: Direction = Direction.ASC
    unsafe: bool = False


@dataclass(frozen=True)
class Sort:
    orders: tuple[Order, ...] = ()

    @classmethod
    def unsorted(cls) -> Sort:
        return cls()

    @classmethod
    def by(cls, *properties: str, direction: Direction = Direction.ASC) -> Sort:
        """Orders by one or more mapped columns in the same direction."""
        if not properties:
            raise ValueError("Sort.by() needs at least one property")
        return cls(tuple(Order(name, Direction(direction)) for name in properties))

    @classmethod
    def unsafe(cls, *expressions: str, direction: Direction = Direction.ASC) -> Sort:
        """
        Orders by raw SQL expressions such as ``LENGTH(password)``.

        The expressions are not validated or escaped.
        """
        if not expressions:
            raise ValueError("Sort.unsafe() needs at least one expression")
        return cls(tuple(Order(expr, Direction(direction), unsafe=True) for expr in expressions))

    def and_(self, other: Sort) -> Sort:
        return Sort(self.orders + other.orders)

    def descending(self) -> Sort:
        return Sort(tuple(Order(o.expression, Direction.DESC, o.unsafe) for o in self.orders))

    def is_sorted(self) -> bool:
        return bool(self.orders)

    def to_order_by(self, entity: type[Base]) -> list[UnaryExpression]:
        """
        Renders the orders as `ORDER BY` terms for `entity`.

        Raises:
            ValueError: If a safe order names a column `entity` does not map.
        """
        columns = inspect(entity).columns
        terms = []
        for order in self.orders:
            if order.unsafe:
                target = text(order.expression)
            elif order.expression in columns:
                target = getattr(entity, order.expression)
            else:
                raise ValueError(
                    f"Cannot sort {entity.__name__} by unknown property {order.expression!r}"
                )
            terms.append(desc(target) if order.direction == Direction.DESC else asc(target))
        return terms
