"""
Storage-agnostic ``Where`` expressions and ordering.

A ``Where`` is a plain mapping from field name to an operator mapping::

    {"name": {"eq": "Ada"}, "age": {"gte": 18, "lt": 65}}

The reserved key ``and`` holds a list of nested expressions that are
conjoined with the enclosing one::

    {"status": {"eq": "active"}, "and": [{"score": {"gt": 10}}]}

``iterate_where`` walks every ``(field, operator, value)`` leaf; the
persistence layer decides what each leaf means for its engine.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal

from .exceptions import InvalidWhereError

AND_KEY = "and"

Where = Mapping[str, Any]


class Operator(str, Enum):
    """Closed set of operators a Where leaf may use."""

    EQ = "eq"
    NEQ = "neq"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    IN = "in"
    NIN = "nin"
    CONTAINS = "contains"


def parse_operator(raw: Operator | str) -> Operator:
    """Coerce an operator key to :class:`Operator`."""
    if isinstance(raw, Operator):
        return raw
    try:
        return Operator(str(raw).lower())
    except ValueError as e:
        raise InvalidWhereError(f"Unknown Where operator: {raw!r}") from e


def coerce_operator(raw: Operator | str) -> Operator | str:
    """Like :func:`parse_operator`, but hand back unknown keys unchanged."""
    try:
        return parse_operator(raw)
    except InvalidWhereError:
        return raw


def walk_where(where: Where | None) -> Iterator[tuple[str, Operator | str, Any]]:
    """Yield ``(field, operator, value)`` for every leaf, depth-first.

    Operator keys outside :class:`Operator` are yielded as the raw key so
    each consumer decides whether to drop or reject them.
    """
    if not where:
        return
    if not isinstance(where, Mapping):
        raise InvalidWhereError(f"Where expression must be a mapping: {where!r}")
    for field, condition in where.items():
        if field == AND_KEY:
            continue
        if not isinstance(condition, Mapping):
            raise InvalidWhereError(
                f"Condition for field {field!r} must map operators to values"
            )
        for op, value in condition.items():
            yield field, coerce_operator(op), value
    nested = where.get(AND_KEY)
    if nested is None:
        return
    if isinstance(nested, Mapping):
        nested = [nested]
    for sub in nested:
        yield from walk_where(sub)


def iterate_where(
    where: Where | None,
    callback: Callable[[str, Operator | str, Any], None],
) -> None:
    """Invoke ``callback`` once per leaf of ``where``.

    Traversal order is deterministic: fields in insertion order, the
    operators of each field in insertion order, then nested ``and``
    expressions depth-first.
    """
    for field, op, value in walk_where(where):
        callback(field, op, value)


@dataclass(frozen=True)
class OrderBy:
    """Single-field sort request. ``direction`` is 1 (asc) or -1 (desc)."""

    field: str
    direction: Literal[1, -1] = 1

    @classmethod
    def parse(cls, raw: OrderBy | Mapping[str, Any] | None) -> OrderBy | None:
        """Accept an ``OrderBy`` or ``{"field": ..., "value": 1|-1|"asc"|"desc"}``."""
        if raw is None or isinstance(raw, OrderBy):
            return raw
        if not raw:
            return None
        field = raw.get("field")
        if not field:
            raise InvalidWhereError(f"orderBy requires a field: {dict(raw)!r}")
        value = raw.get("value", raw.get("direction", 1))
        if isinstance(value, str):
            lowered = value.lower()
            if lowered not in ("asc", "desc"):
                raise InvalidWhereError(f"Invalid sort direction: {value!r}")
            return cls(field=field, direction=-1 if lowered == "desc" else 1)
        if value not in (1, -1):
            raise InvalidWhereError(f"Invalid sort direction: {value!r}")
        return cls(field=field, direction=value)
