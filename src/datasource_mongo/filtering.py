"""
In-memory record matching.

Used for relation scans, where records are fetched in full and matched in
process rather than pushed down as a Mongo filter. Operators are evaluated
through a :class:`MemoryOperatorRegistry` so every :class:`Operator` has an
in-memory meaning, including the ones the Mongo translator drops.

Usage::

    registry = build_default_registry()
    registry.evaluate(Operator.GT, 5, 3)  # True

    select_matching(records, field_equals("author_id", "42"))
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from .where import Operator, Where, walk_where

MemoryOperatorFunc = Callable[[Any, Any], bool]
RecordPredicate = Callable[[Mapping[str, Any]], bool]


class MemoryOperatorRegistry:
    """Registry of evaluation functions keyed by :class:`Operator`."""

    def __init__(self) -> None:
        self._operators: dict[Operator, MemoryOperatorFunc] = {}

    def register(self, name: Operator, func: MemoryOperatorFunc) -> None:
        self._operators[name] = func

    def has(self, name: Operator) -> bool:
        return name in self._operators

    @property
    def supported_operators(self) -> set[Operator]:
        return set(self._operators)

    def evaluate(self, name: Operator, field_value: Any, condition_value: Any) -> bool:
        """
        Look up the operator and evaluate.

        Raises:
            ValueError: If the operator is not registered.
        """
        func = self._operators.get(name)
        if func is None:
            raise ValueError(f"Unsupported operator for in-memory evaluation: {name}")
        return func(field_value, condition_value)


def _ordered(compare: MemoryOperatorFunc) -> MemoryOperatorFunc:
    def evaluate(field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        try:
            return bool(compare(field_value, condition_value))
        except TypeError:
            return False

    return evaluate


def _contains(field_value: Any, condition_value: Any) -> bool:
    if field_value is None:
        return False
    if isinstance(field_value, str):
        return str(condition_value) in field_value
    try:
        return condition_value in field_value
    except TypeError:
        return False


def _as_list(value: Any) -> list[Any]:
    return list(value) if isinstance(value, (list, tuple, set)) else [value]


def build_default_registry() -> MemoryOperatorRegistry:
    """Registry covering every :class:`Operator`."""
    registry = MemoryOperatorRegistry()
    registry.register(Operator.EQ, lambda a, b: bool(a == b))
    registry.register(Operator.NEQ, lambda a, b: bool(a != b))
    registry.register(Operator.GT, _ordered(lambda a, b: a > b))
    registry.register(Operator.GTE, _ordered(lambda a, b: a >= b))
    registry.register(Operator.LT, _ordered(lambda a, b: a < b))
    registry.register(Operator.LTE, _ordered(lambda a, b: a <= b))
    registry.register(Operator.IN, lambda a, b: a in _as_list(b))
    registry.register(Operator.NIN, lambda a, b: a not in _as_list(b))
    registry.register(Operator.CONTAINS, _contains)
    return registry


_DEFAULT_REGISTRY = build_default_registry()


def field_equals(field: str, value: Any) -> RecordPredicate:
    """Predicate matching records whose ``field`` equals ``value``."""

    def predicate(record: Mapping[str, Any]) -> bool:
        return bool(record.get(field) == value)

    return predicate


def where_predicate(
    where: Where | None,
    registry: MemoryOperatorRegistry | None = None,
) -> RecordPredicate:
    """Predicate satisfied when every leaf of ``where`` holds.

    Leaves whose key is not an :class:`Operator` add no constraint.
    """
    reg = registry or _DEFAULT_REGISTRY
    leaves = [
        (field, op, value)
        for field, op, value in walk_where(where)
        if isinstance(op, Operator)
    ]

    def predicate(record: Mapping[str, Any]) -> bool:
        return all(
            reg.evaluate(op, record.get(field), value) for field, op, value in leaves
        )

    return predicate


def select_matching(
    records: Iterable[dict[str, Any]], predicate: RecordPredicate
) -> list[dict[str, Any]]:
    """Records satisfying ``predicate``, in input order."""
    return [record for record in records if predicate(record)]


def filter_records(
    records: Iterable[dict[str, Any]],
    where: Where | None,
    registry: MemoryOperatorRegistry | None = None,
) -> list[dict[str, Any]]:
    """Records satisfying every leaf of ``where``, in input order."""
    return select_matching(records, where_predicate(where, registry))
