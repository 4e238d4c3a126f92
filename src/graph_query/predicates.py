"""Predicates and element filters used by views.

Predicates are small callables with a ``test`` method; an ElementFilter
binds predicates to selections of element identifiers and properties.

Public API:
    Predicate: Protocol every predicate satisfies.
    IsEqual, IsIn, IsMoreThan, IsLessThan, Exists, Not, And, Or: Built-ins.
    ElementFilter: Conjunction of (selection, predicate) clauses.
    PREDICATES: Registry of built-in predicate classes by name.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Protocol, runtime_checkable

from .elements import Element, IdentifierType


@runtime_checkable
class Predicate(Protocol):
    """A boolean test over a single (possibly tuple) input."""

    def test(self, value: Any) -> bool:
        ...


class _BasePredicate:
    def __call__(self, value: Any) -> bool:
        return self.test(value)


@dataclass(frozen=True)
class IsEqual(_BasePredicate):
    """True when the input equals ``value``."""

    value: Any

    def test(self, value: Any) -> bool:
        return value == self.value


@dataclass(frozen=True)
class IsIn(_BasePredicate):
    """True when the input is one of ``values``."""

    values: tuple

    def __init__(self, *values: Any) -> None:
        # Accept IsIn("a", "b") as well as IsIn(["a", "b"]).
        if len(values) == 1 and isinstance(values[0], (list, tuple, set, frozenset)):
            values = tuple(values[0])
        object.__setattr__(self, "values", tuple(values))

    def test(self, value: Any) -> bool:
        return value in self.values


@dataclass(frozen=True)
class IsMoreThan(_BasePredicate):
    """True when the input is greater than ``value``.

    None inputs, and inputs that cannot be ordered against ``value``,
    never pass.
    """

    value: Any
    or_equal_to: bool = False

    def test(self, value: Any) -> bool:
        if value is None:
            return False
        try:
            return value >= self.value if self.or_equal_to else value > self.value
        except TypeError:
            return False


@dataclass(frozen=True)
class IsLessThan(_BasePredicate):
    """True when the input is less than ``value``."""

    value: Any
    or_equal_to: bool = False

    def test(self, value: Any) -> bool:
        if value is None:
            return False
        try:
            return value <= self.value if self.or_equal_to else value < self.value
        except TypeError:
            return False


@dataclass(frozen=True)
class Exists(_BasePredicate):
    """True when the input is not None."""

    def test(self, value: Any) -> bool:
        return value is not None


@dataclass(frozen=True)
class Not(_BasePredicate):
    predicate: Predicate

    def test(self, value: Any) -> bool:
        return not self.predicate.test(value)


@dataclass(frozen=True)
class And(_BasePredicate):
    predicates: tuple

    def __init__(self, *predicates: Predicate) -> None:
        object.__setattr__(self, "predicates", tuple(predicates))

    def test(self, value: Any) -> bool:
        return all(p.test(value) for p in self.predicates)


@dataclass(frozen=True)
class Or(_BasePredicate):
    predicates: tuple

    def __init__(self, *predicates: Predicate) -> None:
        object.__setattr__(self, "predicates", tuple(predicates))

    def test(self, value: Any) -> bool:
        return any(p.test(value) for p in self.predicates)


PREDICATES: dict[str, type] = {
    cls.__name__: cls
    for cls in (IsEqual, IsIn, IsMoreThan, IsLessThan, Exists, Not, And, Or)
}


@dataclass(frozen=True)
class FilterClause:
    """A predicate applied to the values selected from an element."""

    selection: tuple
    predicate: Predicate

    def test(self, element: Element) -> bool:
        values = tuple(element.select(key) for key in self.selection)
        if len(values) == 1:
            return self.predicate.test(values[0])
        return self.predicate.test(values)


@dataclass(frozen=True)
class ElementFilter:
    """Conjunction of filter clauses evaluated against an element.

    Example:
        ElementFilter.Builder()
            .select(IdentifierType.VERTEX)
            .execute(IsEqual("A1"))
            .build()
    """

    clauses: tuple = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "clauses", tuple(self.clauses))
        for clause in self.clauses:
            if not isinstance(clause, FilterClause):
                raise TypeError("clauses must contain FilterClause objects")

    def test(self, element: Element) -> bool:
        """Return True when every clause passes. Predicate errors propagate."""
        return all(clause.test(element) for clause in self.clauses)

    def __len__(self) -> int:
        return len(self.clauses)

    class Builder:
        """Fluent builder pairing ``select`` calls with ``execute`` calls."""

        def __init__(self) -> None:
            self._clauses: list[FilterClause] = []
            self._selection: tuple | None = None

        def select(self, *keys: IdentifierType | str) -> ElementFilter.Builder:
            if not keys:
                raise ValueError("select requires at least one key")
            self._selection = tuple(keys)
            return self

        def execute(self, predicate: Predicate) -> ElementFilter.Builder:
            if self._selection is None:
                raise ValueError("execute called before select")
            if not isinstance(predicate, Predicate):
                raise TypeError("predicate must implement test(value)")
            self._clauses.append(FilterClause(self._selection, predicate))
            self._selection = None
            return self

        def build(self) -> ElementFilter:
            if self._selection is not None:
                raise ValueError("select has no matching execute")
            return ElementFilter(tuple(self._clauses))

    @classmethod
    def of(cls, clauses: Iterable[tuple[Iterable, Predicate]]) -> ElementFilter:
        """Build a filter from ``(selection, predicate)`` pairs."""
        return cls(tuple(FilterClause(tuple(sel), pred) for sel, pred in clauses))


__all__ = [
    "And",
    "ElementFilter",
    "Exists",
    "FilterClause",
    "IsEqual",
    "IsIn",
    "IsLessThan",
    "IsMoreThan",
    "Not",
    "Or",
    "PREDICATES",
    "Predicate",
]
