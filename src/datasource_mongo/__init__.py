"""MongoDB data source for storage-agnostic data access.

Implements the ``IDataSource`` contract (find/create/update/delete plus
to-one, one-to-many and many-to-many relations) over a Motor collection.
"""

from __future__ import annotations

from .connection import MongoConnectionManager
from .data_source import MongoDataSource
from .exceptions import (
    DataSourceError,
    InvalidWhereError,
    MongoConnectionError,
    MongoPersistenceError,
    MongoQueryError,
    NotImplementedCapabilityError,
    UnsupportedOperatorError,
)
from .filtering import (
    MemoryOperatorRegistry,
    build_default_registry,
    field_equals,
    filter_records,
    select_matching,
)
from .normalization import normalize_record, stringify_id
from .pagination import PaginatedResponse, Pagination, paginate
from .ports import IDataSource
from .query_builder import MongoQueryBuilder
from .relation_index import RelationIndex
from .where import Operator, OrderBy, Where, iterate_where

__all__ = [
    # Core
    "IDataSource",
    "MongoConnectionManager",
    "MongoDataSource",
    "RelationIndex",
    # Query
    "MongoQueryBuilder",
    "Operator",
    "OrderBy",
    "Where",
    "iterate_where",
    # Utilities
    "MemoryOperatorRegistry",
    "build_default_registry",
    "field_equals",
    "filter_records",
    "select_matching",
    "normalize_record",
    "stringify_id",
    "Pagination",
    "PaginatedResponse",
    "paginate",
    # Exceptions
    "DataSourceError",
    "MongoPersistenceError",
    "MongoConnectionError",
    "MongoQueryError",
    "InvalidWhereError",
    "UnsupportedOperatorError",
    "NotImplementedCapabilityError",
]
