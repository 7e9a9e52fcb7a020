"""MongoDataSource — IDataSource over a single MongoDB collection."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from bson import ObjectId
from pymongo import ReturnDocument

from .exceptions import NotImplementedCapabilityError
from .filtering import field_equals, select_matching
from .normalization import INTERNAL_ID_FIELD, LOGICAL_ID_FIELD, normalize_record
from .pagination import PaginatedResponse, Pagination, paginate
from .ports import IDataSource
from .query_builder import MongoQueryBuilder
from .relation_index import RelationIndex
from .where import OrderBy, Where

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .connection import MongoConnectionManager

logger = logging.getLogger("datasource_mongo.data_source")


class MongoDataSource(IDataSource):
    """
    Data source backed by one MongoDB collection.

    ``Where`` expressions are compiled by :class:`MongoQueryBuilder`; every
    document read back has ``_id`` removed and a string ``id``. Many-to-many
    relations live in a :class:`RelationIndex` owned by this instance (or
    injected, to share it between data sources) and never reach MongoDB.

    ``create`` is two store calls (insert, then stamp ``id``); a failure
    between them leaves the document without a logical ``id``.
    """

    def __init__(
        self,
        connection: MongoConnectionManager,
        collection: str,
        *,
        database: str | None = None,
        relation_index: RelationIndex | None = None,
        query_builder: MongoQueryBuilder | None = None,
        strict_where: bool = False,
    ) -> None:
        self._connection = connection
        self._collection_name = collection
        self._database = database
        self._relations = relation_index or RelationIndex()
        self._query_builder = query_builder or MongoQueryBuilder(strict=strict_where)

    @property
    def collection_name(self) -> str:
        return self._collection_name

    @property
    def relation_index(self) -> RelationIndex:
        return self._relations

    def _collection(self) -> Any:
        return self._connection.get_collection(
            self._collection_name, database=self._database
        )

    async def _fetch(
        self,
        filter_query: dict[str, Any],
        *,
        sort: list[tuple[str, int]] | None = None,
        projection: dict[str, int] | None = None,
    ) -> list[dict[str, Any]]:
        logger.debug(
            "find on %s: filter=%r sort=%r", self._collection_name, filter_query, sort
        )
        kwargs: dict[str, Any] = {}
        if sort:
            kwargs["sort"] = sort
        if projection is not None:
            kwargs["projection"] = projection
        cursor = self._collection().find(filter_query, **kwargs)
        return [normalize_record(doc) async for doc in cursor]

    # -- CRUD ----------------------------------------------------------------

    async def find(
        self,
        pagination: Pagination | Mapping[str, Any] | None = None,
        where: Where | None = None,
        order_by: OrderBy | Mapping[str, Any] | None = None,
    ) -> PaginatedResponse:
        """Filter, optionally sort, then paginate. No sort keeps store order."""
        filter_query = self._query_builder.translate(where)
        sort = self._query_builder.build_sort(OrderBy.parse(order_by))
        records = await self._fetch(filter_query, sort=sort)
        return paginate(records, pagination)

    async def find_one(self, where: Where | None) -> dict[str, Any] | None:
        records = await self._fetch(self._query_builder.translate(where))
        return records[0] if records else None

    async def find_one_by_id(self, id: str) -> dict[str, Any] | None:
        """Look up by store identity; hex strings are matched as ObjectId."""
        store_id: Any = ObjectId(id) if ObjectId.is_valid(id) else id
        records = await self._fetch({INTERNAL_ID_FIELD: store_id})
        return records[0] if records else None

    async def create(self, payload: Mapping[str, Any]) -> dict[str, Any] | None:
        """Insert ``payload`` and return it with ``id`` set to the new ``_id``."""
        coll = self._collection()
        # insert_one writes _id back into the dict it is given
        result = await coll.insert_one(dict(payload))
        if not result.acknowledged:
            logger.warning(
                "Insert into %s was not acknowledged", self._collection_name
            )
            return None
        inserted_id = result.inserted_id
        doc = await coll.find_one_and_update(
            {INTERNAL_ID_FIELD: inserted_id},
            {"$set": {LOGICAL_ID_FIELD: str(inserted_id)}},
            projection={INTERNAL_ID_FIELD: 0},
            return_document=ReturnDocument.AFTER,
        )
        logger.debug("Created %s in %s", inserted_id, self._collection_name)
        return normalize_record(doc) if doc is not None else None

    async def update(self, where: Where | None, payload: Mapping[str, Any]) -> None:
        """Merge ``payload`` into the first matching document, if any."""
        filter_query = self._query_builder.translate(where)
        result = await self._collection().update_one(
            filter_query, {"$set": dict(payload)}
        )
        logger.debug(
            "update on %s: filter=%r matched=%s",
            self._collection_name,
            filter_query,
            result.matched_count,
        )

    async def delete(self, where: Where | None) -> None:
        """Remove the first matching document, if any."""
        filter_query = self._query_builder.translate(where)
        result = await self._collection().delete_one(filter_query)
        logger.debug(
            "delete on %s: filter=%r deleted=%s",
            self._collection_name,
            filter_query,
            result.deleted_count,
        )

    # -- to-one / one-to-many --------------------------------------------------

    async def _scan_by_foreign_key(
        self, foreign_key: str, foreign_id: str
    ) -> list[dict[str, Any]]:
        records = await self._fetch({}, projection={INTERNAL_ID_FIELD: 0})
        return select_matching(records, field_equals(foreign_key, foreign_id))

    async def find_one_by_relation(
        self, foreign_key: str, foreign_id: str
    ) -> dict[str, Any] | None:
        matches = await self._scan_by_foreign_key(foreign_key, foreign_id)
        return matches[0] if matches else None

    async def update_one_relation(
        self, id: str, foreign_key: str, foreign_id: str
    ) -> None:
        raise NotImplementedCapabilityError("update_one_relation")

    async def find_many_from_one_relation(
        self, foreign_key: str, foreign_id: str
    ) -> list[dict[str, Any]]:
        return await self._scan_by_foreign_key(foreign_key, foreign_id)

    # -- many-to-many ----------------------------------------------------------

    async def find_many_from_many_relation(
        self, source_side_name: str, target_side_name: str, source_side_id: str
    ) -> list[str]:
        return await self._relations.get(
            source_side_name, target_side_name, source_side_id
        )

    async def add_id_to_many_relation(
        self,
        source_side_name: str,
        target_side_name: str,
        source_side_id: str,
        target_side_id: str,
    ) -> None:
        await self._relations.add(
            source_side_name, target_side_name, source_side_id, target_side_id
        )

    async def remove_id_from_many_relation(
        self,
        source_side_name: str,
        target_side_name: str,
        source_side_id: str,
        target_side_id: str,
    ) -> None:
        await self._relations.remove(
            source_side_name, target_side_name, source_side_id, target_side_id
        )
