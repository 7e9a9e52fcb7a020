"""
In-process many-to-many relation index.

MongoDB collections carry no join table for many-to-many associations, so
the data source keeps one in memory::

    {"{source}_{target}": {source_id: [target_id, ...]}}

The index lives as long as its owner and is never written to the store.
"""

from __future__ import annotations

import asyncio
import copy
import logging

logger = logging.getLogger("datasource_mongo.relations")


class RelationIndex:
    """Ordered, duplicate-tolerant target-id lists keyed by relation and source id.

    All access goes through one ``asyncio.Lock``; reads hand back copies.
    The lock serializes coroutines on a single event loop only. An index
    shared across threads or event loops is not protected and must be
    guarded by the caller.
    """

    def __init__(self) -> None:
        self._table: dict[str, dict[str, list[str]]] = {}
        self._lock = asyncio.Lock()

    @staticmethod
    def relation_name(source_side_name: str, target_side_name: str) -> str:
        return f"{source_side_name}_{target_side_name}"

    async def get(
        self, source_side_name: str, target_side_name: str, source_side_id: str
    ) -> list[str]:
        """Target ids for ``source_side_id``; empty when nothing was added."""
        name = self.relation_name(source_side_name, target_side_name)
        async with self._lock:
            return list(self._table.get(name, {}).get(source_side_id, []))

    async def add(
        self,
        source_side_name: str,
        target_side_name: str,
        source_side_id: str,
        target_side_id: str,
    ) -> None:
        """Append ``target_side_id``, creating the bucket on first write."""
        name = self.relation_name(source_side_name, target_side_name)
        async with self._lock:
            bucket = self._table.setdefault(name, {})
            bucket.setdefault(source_side_id, []).append(target_side_id)
        logger.debug("Linked %s[%s] -> %s", name, source_side_id, target_side_id)

    async def remove(
        self,
        source_side_name: str,
        target_side_name: str,
        source_side_id: str,
        target_side_id: str,
    ) -> None:
        """Remove every occurrence of ``target_side_id``. Unknown keys are a no-op."""
        name = self.relation_name(source_side_name, target_side_name)
        async with self._lock:
            targets = self._table.get(name, {}).get(source_side_id)
            if targets is None:
                return
            targets[:] = [t for t in targets if t != target_side_id]
        logger.debug("Unlinked %s[%s] -> %s", name, source_side_id, target_side_id)

    async def snapshot(self) -> dict[str, dict[str, list[str]]]:
        """Deep copy of the whole table."""
        async with self._lock:
            return copy.deepcopy(self._table)

    async def clear(self) -> None:
        async with self._lock:
            self._table.clear()
