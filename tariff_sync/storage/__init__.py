"""
Storage service.

PostgreSQL persistence for tariff records and registered spreadsheet IDs.
"""

from .db_operations import (
    PersistenceError,
    QueryTimeoutError,
    SchemaError,
    StorageError,
    TariffStorage,
)

__all__ = [
    "TariffStorage",
    "StorageError",
    "SchemaError",
    "PersistenceError",
    "QueryTimeoutError",
]
