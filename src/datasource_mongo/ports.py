"""IDataSource — storage-agnostic data-access protocol."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .pagination import PaginatedResponse, Pagination
    from .where import OrderBy, Where


@runtime_checkable
class IDataSource(Protocol):
    """
    Data-access contract shared by every storage engine.

    The resolution layer calls these operations without knowing the engine;
    each adapter translates ``Where`` expressions into its native filter.
    Read operations return plain dicts carrying a string ``id`` and never the
    engine's internal identity. Zero matches is never an error: single-record
    reads return ``None`` and writes do nothing.

    Relations come in three shapes::

        # to-one / one-to-many: match on a foreign key stored in the record
        author = await books.find_one_by_relation("author_id", "42")

        # many-to-many: ids kept by the adapter itself
        await users.add_id_to_many_relation("user", "group", "u1", "g1")
        await users.find_many_from_many_relation("user", "group", "u1")  # ["g1"]
    """

    async def find(
        self,
        pagination: Pagination | Mapping[str, Any] | None = None,
        where: Where | None = None,
        order_by: OrderBy | Mapping[str, Any] | None = None,
    ) -> PaginatedResponse: ...

    async def find_one(self, where: Where | None) -> dict[str, Any] | None: ...

    async def find_one_by_id(self, id: str) -> dict[str, Any] | None: ...

    async def create(self, payload: Mapping[str, Any]) -> dict[str, Any] | None: ...

    async def update(self, where: Where | None, payload: Mapping[str, Any]) -> None: ...

    async def delete(self, where: Where | None) -> None: ...

    async def find_one_by_relation(
        self, foreign_key: str, foreign_id: str
    ) -> dict[str, Any] | None: ...

    async def update_one_relation(
        self, id: str, foreign_key: str, foreign_id: str
    ) -> None: ...

    async def find_many_from_one_relation(
        self, foreign_key: str, foreign_id: str
    ) -> list[dict[str, Any]]: ...

    async def find_many_from_many_relation(
        self, source_side_name: str, target_side_name: str, source_side_id: str
    ) -> list[str]: ...

    async def add_id_to_many_relation(
        self,
        source_side_name: str,
        target_side_name: str,
        source_side_id: str,
        target_side_id: str,
    ) -> None: ...

    async def remove_id_from_many_relation(
        self,
        source_side_name: str,
        target_side_name: str,
        source_side_id: str,
        target_side_id: str,
    ) -> None: ...
