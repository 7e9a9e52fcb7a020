"""Data-source exceptions for the MongoDB adapter."""

from __future__ import annotations


class DataSourceError(Exception):
    """Root exception for the datasource-mongo package."""


class MongoPersistenceError(DataSourceError):
    """Base for MongoDB persistence errors."""


class MongoConnectionError(MongoPersistenceError):
    """Raised when connection to MongoDB fails."""


class MongoQueryError(MongoPersistenceError):
    """Raised when a query or compilation fails."""


class InvalidWhereError(MongoQueryError):
    """Raised when a Where expression or ordering cannot be parsed."""


class UnsupportedOperatorError(MongoQueryError):
    """Raised in strict mode when a Where leaf has no native Mongo form."""

    def __init__(self, field: str, operator: object) -> None:
        self.field = field
        self.operator = operator
        op_name = getattr(operator, "value", operator)
        super().__init__(
            f"Operator {op_name!r} on field {field!r} has no MongoDB translation"
        )


class NotImplementedCapabilityError(DataSourceError, NotImplementedError):
    """Raised by data-source operations this adapter does not provide."""

    def __init__(self, capability: str) -> None:
        self.capability = capability
        super().__init__(f"{capability} is not implemented by this data source")
