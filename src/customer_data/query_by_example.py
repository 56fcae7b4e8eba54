"""
Query-by-Example.

An `Example` pairs a sparse field mask (column name -> required value) with an
`ExampleMatcher` policy. The mask is usually taken from a partially populated
probe entity: every mapped column whose value is not `None` takes part in the
match. The matcher decides whether all populated fields must match
(`MatchMode.ALL`) or any one of them is enough (`MatchMode.ANY`), and how
string values are compared.

Examples are lowered into `specifications` trees, so the repository evaluates
them with the same `ClauseBuilder` it uses for hand-written specifications.

Limitations: only flat equality-style constraints on the entity's own
columns. Nested objects, ranges and aggregate conditions ("more than 10
votes") need a `Specification` instead.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from functools import reduce
from types import MappingProxyType
from typing import Any

from sqlalchemy import inspect

from .models import Base
from .specifications import And, Operator, Or, Predicate, Specification


class MatchMode(str, Enum):
    """How the populated fields of a probe are combined."""

    ALL = "all"
    ANY = "any"


class StringMatcher(str, Enum):
    """How string-valued fields of a probe are compared."""

    EXACT = "exact"
    STARTING = "starting"
    ENDING = "ending"
    CONTAINING = "containing"


_STRING_OPERATORS = {
    StringMatcher.EXACT: Operator.EQ,
    StringMatcher.STARTING: Operator.STARTS_WITH,
    StringMatcher.ENDING: Operator.ENDS_WITH,
    StringMatcher.CONTAINING: Operator.CONTAINS,
}


@dataclass(frozen=True)
class ExampleMatcher:
    """
    Immutable matching policy for an `Example`.

    Every `with_*` method returns a new matcher and leaves the receiver
    unchanged, so matchers can be shared and refined freely.
    """

    mode: MatchMode = MatchMode.ALL
    ignored_paths: frozenset[str] = field(default_factory=frozenset)
    string_matcher: StringMatcher = StringMatcher.EXACT
    ignore_case: bool = False

    @classmethod
    def matching(cls) -> ExampleMatcher:
        return cls.matching_all()

    @classmethod
    def matching_all(cls) -> ExampleMatcher:
        return cls(mode=MatchMode.ALL)

    @classmethod
    def matching_any(cls) -> ExampleMatcher:
        return cls(mode=MatchMode.ANY)

    def with_ignore_paths(self, *paths: str) -> ExampleMatcher:
        return replace(self, ignored_paths=self.ignored_paths | frozenset(paths))

    def with_string_matcher(self, string_matcher: StringMatcher) -> ExampleMatcher:
        return replace(self, string_matcher=string_matcher)

    def with_ignore_case(self, ignore_case: bool = True) -> ExampleMatcher:
        return replace(self, ignore_case=ignore_case)

    def is_ignored(self, path: str) -> bool:
        return path in self.ignored_paths


class Example:
    """
    A probe's populated fields together with the matcher that combines them.

    Attributes:
        entity: The mapped class the example queries.
        fields: Read-only mapping of column name to required value.
        matcher: The matching policy.
    """

    def __init__(
        self,
        entity: type[Base],
        fields: Mapping[str, Any],
        matcher: ExampleMatcher | None = None,
    ):
        self.entity = entity
        self.matcher = matcher or ExampleMatcher.matching_all()
        columns = inspect(entity).columns
        unknown = sorted(name for name in fields if name not in columns)
        if unknown:
            raise ValueError(f"{entity.__name__} has no columns named {', '.join(unknown)}")
        self.fields = MappingProxyType(
            {name: value for name, value in fields.items() if not self.matcher.is_ignored(name)}
        )

    @classmethod
    def of(cls, probe: Base, matcher: ExampleMatcher | None = None) -> Example:
        """
        Builds an example from a probe entity.

        Columns left at `None` on the probe are not part of the match.

        Args:
            probe: A (usually transient) instance with only the fields of
                interest populated.
            matcher: Matching policy; defaults to `ExampleMatcher.matching_all()`.
        """
        entity = type(probe)
        fields = {
            attr.key: getattr(probe, attr.key)
            for attr in inspect(entity).column_attrs
            if getattr(probe, attr.key) is not None
        }
        return cls(entity, fields, matcher)

    @classmethod
    def from_fields(
        cls, entity: type[Base], matcher: ExampleMatcher | None = None, **fields: Any
    ) -> Example:
        """Builds an example from an explicit field mask."""
        return cls(entity, fields, matcher)

    def to_specification(self) -> Specification | None:
        """
        Lowers the example into a specification tree.

        Returns:
            The folded `And`/`Or` tree of per-field predicates, or `None` when
            no field is populated (which matches every row).
        """
        predicates = [self._predicate(name, value) for name, value in self.fields.items()]
        if not predicates:
            return None
        combine = And if self.matcher.mode == MatchMode.ALL else Or
        return reduce(combine, predicates)

    def _predicate(self, name: str, value: Any) -> Predicate:
        if isinstance(value, str):
            return Predicate(
                name,
                _STRING_OPERATORS[self.matcher.string_matcher],
                value,
                ignore_case=self.matcher.ignore_case,
            )
        return Predicate(name, Operator.EQ, value)

    def __repr__(self) -> str:
        return (
            f"<Example(entity={self.entity.__name__}, fields={sorted(self.fields)}, "
            f"mode={self.matcher.mode.value})>"
        )
