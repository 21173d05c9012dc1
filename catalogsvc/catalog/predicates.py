"""Composable predicate tree evaluated by record stores.

A predicate is built once from filter criteria and then either evaluated
in process (``matches``) or compiled to SQL by the SQLAlchemy store. Both
paths must agree, so matching rules live on the nodes themselves.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any


def canonical(value: Any) -> Any:
    """Return the comparable form of a value (enum members compare by name)."""
    if isinstance(value, Enum):
        return value.name
    return value


class Predicate(ABC):
    """Base class for predicate nodes."""

    @abstractmethod
    def matches(self, record: Any) -> bool:
        """Evaluate the predicate against a record.

        Args:
            record: Object exposing the referenced fields as attributes.

        Returns:
            True if the record satisfies the predicate.
        """


class TextMode(str, Enum):
    """How a text clause compares."""

    PREFIX = "prefix"
    CONTAINS = "contains"


@dataclass(frozen=True)
class MatchAll(Predicate):
    """Matches every record."""

    def matches(self, record: Any) -> bool:
        return True


@dataclass(frozen=True)
class Equals(Predicate):
    """Exact equality on a scalar field."""

    field: str
    value: Any

    def matches(self, record: Any) -> bool:
        return canonical(getattr(record, self.field)) == canonical(self.value)


@dataclass(frozen=True)
class Range(Predicate):
    """Inclusive bounds on an ordered field; None leaves a side open."""

    field: str
    lower: Any = None
    upper: Any = None

    def matches(self, record: Any) -> bool:
        value = getattr(record, self.field)
        if self.lower is not None and value < self.lower:
            return False
        if self.upper is not None and value > self.upper:
            return False
        return True


@dataclass(frozen=True)
class TextMatch(Predicate):
    """Case-insensitive prefix or substring match on a text field."""

    field: str
    text: str
    mode: TextMode = TextMode.CONTAINS

    def matches(self, record: Any) -> bool:
        value = getattr(record, self.field)
        if not isinstance(value, str):
            return False
        haystack = value.lower()
        needle = self.text.lower()
        if self.mode is TextMode.PREFIX:
            return haystack.startswith(needle)
        return needle in haystack


@dataclass(frozen=True)
class ContainsElement(Predicate):
    """A multi-valued field holds the given element."""

    field: str
    value: str

    def matches(self, record: Any) -> bool:
        return self.value in getattr(record, self.field)


@dataclass(frozen=True)
class And(Predicate):
    """Conjunction of clauses."""

    clauses: tuple[Predicate, ...]

    def matches(self, record: Any) -> bool:
        return all(clause.matches(record) for clause in self.clauses)


@dataclass(frozen=True)
class Or(Predicate):
    """Disjunction of clauses."""

    clauses: tuple[Predicate, ...]

    def matches(self, record: Any) -> bool:
        return any(clause.matches(record) for clause in self.clauses)


def all_of(*clauses: Predicate) -> Predicate:
    """AND-combine clauses, dropping MatchAll.

    Returns:
        MatchAll when nothing remains, the clause itself when one remains.
    """
    remaining = tuple(c for c in clauses if not isinstance(c, MatchAll))
    if not remaining:
        return MatchAll()
    if len(remaining) == 1:
        return remaining[0]
    return And(remaining)


def any_of(*clauses: Predicate) -> Predicate:
    """OR-combine clauses.

    Raises:
        ValueError: If no clause is given; an empty disjunction matches nothing.
    """
    if not clauses:
        raise ValueError("any_of() requires at least one clause")
    if len(clauses) == 1:
        return clauses[0]
    return Or(tuple(clauses))
