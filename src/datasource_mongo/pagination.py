"""Relay-style cursor pagination over materialized record lists.

The cursor of a record is its logical ``id``. ``after``/``before`` narrow the
window, then ``first``/``last`` cap it from the front or the back.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Pagination(BaseModel):
    """Page request: ``first``/``after`` to page forward, ``last``/``before`` back."""

    model_config = ConfigDict(frozen=True)

    first: int | None = Field(default=None, ge=0)
    last: int | None = Field(default=None, ge=0)
    before: str | None = None
    after: str | None = None


class PaginatedResponse(BaseModel):
    """A page of records plus the metadata callers need to request the next one."""

    data: list[dict[str, Any]] = Field(default_factory=list)
    total: int = 0
    has_next_page: bool = False
    has_previous_page: bool = False


def _cursor_index(
    records: Sequence[Mapping[str, Any]], cursor: str | None
) -> int | None:
    if cursor is None:
        return None
    for index, record in enumerate(records):
        if str(record.get("id")) == cursor:
            return index
    return None


def paginate(
    records: Sequence[dict[str, Any]],
    pagination: Pagination | Mapping[str, Any] | None = None,
) -> PaginatedResponse:
    """Slice ``records`` according to ``pagination``.

    Unknown cursors leave their side of the window open.
    """
    if pagination is None:
        return PaginatedResponse(data=list(records), total=len(records))
    if not isinstance(pagination, Pagination):
        pagination = Pagination.model_validate(pagination)

    start = 0
    end = len(records)
    after_index = _cursor_index(records, pagination.after)
    if after_index is not None:
        start = after_index + 1
    before_index = _cursor_index(records, pagination.before)
    if before_index is not None:
        end = before_index
    window = list(records[start:end]) if start < end else []

    has_previous = start > 0
    has_next = end < len(records)
    if pagination.first is not None:
        has_next = has_next or len(window) > pagination.first
        window = window[: pagination.first]
    if pagination.last is not None:
        has_previous = has_previous or len(window) > pagination.last
        window = window[-pagination.last :] if pagination.last else []

    return PaginatedResponse(
        data=window,
        total=len(records),
        has_next_page=has_next,
        has_previous_page=has_previous,
    )
