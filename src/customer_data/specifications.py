"""
Composable Query Specifications.

A specification is a small expression tree describing a filter over an
entity's columns. Leaves are `Predicate` nodes (column, operator, value) and
inner nodes are the boolean connectives `And`, `Or` and `Not`. Trees are built
left to right exactly as the caller composes them:

    spec = CustomerSpecs.is_good() & Predicate("username", Operator.STARTS_WITH, "ces")

Specifications are never evaluated in memory. `ClauseBuilder` walks the tree
and produces a SQLAlchemy boolean clause that the repository places in the
`WHERE` clause of a `select()`, so filtering always happens in the database.
Query-by-example probes are lowered into the same tree (see
`query_by_example`) and share this translation.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from sqlalchemy import and_, func, inspect, not_, or_, true
from sqlalchemy.sql.expression import ColumnElement

from .models import GOOD_VOTE_THRESHOLD, Base


class Operator(str, Enum):
    """Comparison operators a `Predicate` can apply to a column."""

    EQ = "eq"
    NE = "ne"
    LT = "lt"
    LE = "le"
    GT = "gt"
    GE = "ge"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    CONTAINS = "contains"
    IS_NULL = "is_null"


_OPERATORS: dict[Operator, Callable[[Any, Any], ColumnElement[bool]]] = {
    Operator.EQ: lambda column, value: column == value,
    Operator.NE: lambda column, value: column != value,
    Operator.LT: lambda column, value: column < value,
    Operator.LE: lambda column, value: column <= value,
    Operator.GT: lambda column, value: column > value,
    Operator.GE: lambda column, value: column >= value,
    # autoescape keeps '%' and '_' in user input literal.
    Operator.STARTS_WITH: lambda column, value: column.startswith(value, autoescape=True),
    Operator.ENDS_WITH: lambda column, value: column.endswith(value, autoescape=True),
    Operator.CONTAINS: lambda column, value: column.contains(value, autoescape=True),
    Operator.IS_NULL: lambda column, value: column.is_(None),
}


class Specification:
    """
    Base class of every node in a specification tree.

    Provides the combinators; both the method form (`and_`, `or_`, `not_`) and
    the operator form (`&`, `|`, `~`) build new nodes and never mutate
    existing ones.
    """

    def and_(self, other: Specification) -> Specification:
        return And(self, other)

    def or_(self, other: Specification) -> Specification:
        return Or(self, other)

    def not_(self) -> Specification:
        return Not(self)

    def __and__(self, other: Specification) -> Specification:
        return self.and_(other)

    def __or__(self, other: Specification) -> Specification:
        return self.or_(other)

    def __invert__(self) -> Specification:
        return self.not_()


@dataclass(frozen=True)
class Predicate(Specification):
    """
    A single column comparison.

    Attributes:
        field: Name of a mapped column on the target entity.
        operator: The comparison to apply.
        value: Right-hand operand; ignored by `Operator.IS_NULL`.
        ignore_case: Compare string values case-insensitively via `lower()`.
    """

    field: str
    operator: Operator = Operator.EQ
    value: Any = None
    ignore_case: bool = False


@dataclass(frozen=True)
class And(Specification):
    left: Specification
    right: Specification


@dataclass(frozen=True)
class Or(Specification):
    left: Specification
    right: Specification


@dataclass(frozen=True)
class Not(Specification):
    operand: Specification


class ClauseBuilder:
    """
    Translates a specification tree into a SQLAlchemy boolean clause.

    The builder is bound to one mapped entity class; predicate field names are
    resolved against that entity's column attributes.
    """

    def __init__(self, entity: type[Base]):
        """
        Args:
            entity: The mapped class whose columns predicates refer to.
        """
        self.entity = entity
        self._columns = inspect(entity).columns

    def visit(self, spec: Specification | None) -> ColumnElement[bool]:
        """
        Returns the clause for `spec`; `None` yields an always-true clause.

        Raises:
            TypeError: If `spec` is not a specification node.
            ValueError: If a predicate names an unknown column.
        """
        if spec is None:
            return true()
        if isinstance(spec, Predicate):
            return self.visit_predicate(spec)
        if isinstance(spec, And):
            return and_(self.visit(spec.left), self.visit(spec.right))
        if isinstance(spec, Or):
            return or_(self.visit(spec.left), self.visit(spec.right))
        if isinstance(spec, Not):
            return not_(self.visit(spec.operand))
        raise TypeError(f"Unsupported specification node: {type(spec).__name__}")

    def visit_predicate(self, predicate: Predicate) -> ColumnElement[bool]:
        column = self.column(predicate.field)
        value = predicate.value
        if predicate.ignore_case and isinstance(value, str):
            column = func.lower(column)
            value = value.lower()
        return _OPERATORS[Operator(predicate.operator)](column, value)

    def column(self, name: str) -> Any:
        """Resolves a column attribute on the bound entity by name."""
        if name not in self._columns:
            raise ValueError(f"{self.entity.__name__} has no column named {name!r}")
        return getattr(self.entity, name)


def to_clause(spec: Specification | None, entity: type[Base]) -> ColumnElement[bool]:
    """Shorthand for `ClauseBuilder(entity).visit(spec)`."""
    return ClauseBuilder(entity).visit(spec)


class CustomerSpecs:
    """Predefined specifications over `Customer`."""

    @staticmethod
    def is_good() -> Specification:
        """Customers whose vote counter reached `GOOD_VOTE_THRESHOLD`."""
        return Predicate("up", Operator.GE, GOOD_VOTE_THRESHOLD)

    @staticmethod
    def is_bad() -> Specification:
        """Customers below `GOOD_VOTE_THRESHOLD`; the complement of `is_good`."""
        return Predicate("up", Operator.LT, GOOD_VOTE_THRESHOLD)

    @staticmethod
    def username_starts_with(prefix: str) -> Specification:
        return Predicate("username", Operator.STARTS_WITH, prefix)
