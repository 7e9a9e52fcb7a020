"""Identity normalization for documents leaving the store."""

from __future__ import annotations

from typing import Any

INTERNAL_ID_FIELD = "_id"
LOGICAL_ID_FIELD = "id"


def stringify_id(value: Any) -> str:
    """Return the logical string form of a store identity (ObjectId, UUID, int)."""
    return str(value)


def normalize_record(doc: dict[str, Any]) -> dict[str, Any]:
    """Drop ``_id`` and make sure a present ``id`` is a string.

    Mutates and returns ``doc``; every other field passes through unchanged.
    """
    doc.pop(INTERNAL_ID_FIELD, None)
    if doc.get(LOGICAL_ID_FIELD) is not None:
        doc[LOGICAL_ID_FIELD] = stringify_id(doc[LOGICAL_ID_FIELD])
    return doc
