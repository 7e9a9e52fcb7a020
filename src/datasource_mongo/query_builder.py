"""Mongo query builder from Where expressions."""

from __future__ import annotations

import logging
from typing import Any

from .exceptions import UnsupportedOperatorError
from .where import Operator, OrderBy, Where, iterate_where

logger = logging.getLogger("datasource_mongo.query")

_MONGO_OP_MAP: dict[Operator, str] = {
    Operator.EQ: "$eq",
    Operator.GT: "$gt",
    Operator.GTE: "$gte",
    Operator.LT: "$lt",
    Operator.LTE: "$lte",
}


class MongoQueryBuilder:
    """Compiles Where expressions and ordering to MongoDB query documents.

    Operators without a native form (``neq``, ``in``, ``nin``, ``contains``)
    and keys outside :class:`Operator` (``regex`` and the like) are dropped
    with a warning, or rejected with :class:`UnsupportedOperatorError` when
    ``strict`` is set.
    """

    def __init__(self, *, strict: bool = False) -> None:
        self._strict = strict

    @property
    def strict(self) -> bool:
        return self._strict

    def translate(self, where: Where | None) -> dict[str, Any]:
        """Build a Mongo filter from ``where``. ``None``/empty matches all.

        Leaves on one field share an operator document; a field/operator
        pair seen again is kept as an extra ``$and`` clause so every leaf
        still constrains the result.
        """
        per_field: dict[str, dict[str, Any]] = {}
        repeated: list[dict[str, Any]] = []

        def visit(field: str, op: Operator | str, value: Any) -> None:
            match op:
                case (
                    Operator.EQ
                    | Operator.GT
                    | Operator.GTE
                    | Operator.LT
                    | Operator.LTE
                ):
                    mongo_op = _MONGO_OP_MAP[Operator(op)]
                    ops = per_field.setdefault(field, {})
                    if mongo_op in ops:
                        repeated.append({field: {mongo_op: value}})
                    else:
                        ops[mongo_op] = value
                case _:
                    self._unsupported(field, op)

        iterate_where(where, visit)
        query = {field: _collapse(ops) for field, ops in per_field.items()}
        if repeated:
            query["$and"] = repeated
        return query

    def build_sort(self, order_by: OrderBy | None) -> list[tuple[str, int]]:
        """Build MongoDB sort tuples. ``None`` means store-natural order."""
        if order_by is None:
            return []
        return [(order_by.field, order_by.direction)]

    def _unsupported(self, field: str, op: Operator | str) -> None:
        if self._strict:
            raise UnsupportedOperatorError(field, op)
        logger.warning(
            "Dropping unsupported Where operator %r on field %r",
            getattr(op, "value", op),
            field,
        )


def _collapse(ops: dict[str, Any]) -> Any:
    # Lone equality compiles to {field: value}
    if set(ops) == {"$eq"}:
        return ops["$eq"]
    return ops
