"""Tariff Source Base Class.

This module defines the record type produced by the extractor and the
abstract interface every tariff provider adapter implements, so the fetch
job can work against the real API or a test double interchangeably.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

# Numeric tariff fields, in sheet/column order
TARIFF_NUMERIC_FIELDS = (
    "box_delivery_and_storage_expr",
    "box_delivery_base",
    "box_delivery_liter",
    "box_storage_base",
    "box_storage_liter",
)


class ProviderError(Exception):
    """Raised when the tariff provider cannot deliver a usable snapshot.

    Covers transport errors, non-2xx responses and malformed payloads.
    The fetch job treats this as retryable.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class TariffRecord:
    """One warehouse's box tariff for one calendar date.

    ``None`` in a numeric field means the tariff is not offered at that
    warehouse, never zero. ``dt_till_max``/``dt_next_box`` are kept as the
    opaque strings the provider sends. Timestamps are assigned by storage.
    """

    date: date
    warehouse_name: str
    box_delivery_and_storage_expr: Optional[Decimal] = None
    box_delivery_base: Optional[Decimal] = None
    box_delivery_liter: Optional[Decimal] = None
    box_storage_base: Optional[Decimal] = None
    box_storage_liter: Optional[Decimal] = None
    dt_till_max: Optional[str] = None
    dt_next_box: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def identity(self) -> tuple:
        """Unique key of the record in storage."""
        return (self.date, self.warehouse_name)

    def to_db_params(self) -> Dict[str, Any]:
        """Column values for an insert; timestamps are left to the database."""
        return {
            "date": self.date,
            "warehouse_name": self.warehouse_name,
            "box_delivery_and_storage_expr": self.box_delivery_and_storage_expr,
            "box_delivery_base": self.box_delivery_base,
            "box_delivery_liter": self.box_delivery_liter,
            "box_storage_base": self.box_storage_base,
            "box_storage_liter": self.box_storage_liter,
            "dt_till_max": self.dt_till_max,
            "dt_next_box": self.dt_next_box,
        }

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "TariffRecord":
        """Build a record from a ``RealDictCursor`` row."""
        return cls(
            date=row["date"],
            warehouse_name=row["warehouse_name"],
            box_delivery_and_storage_expr=row.get("box_delivery_and_storage_expr"),
            box_delivery_base=row.get("box_delivery_base"),
            box_delivery_liter=row.get("box_delivery_liter"),
            box_storage_base=row.get("box_storage_base"),
            box_storage_liter=row.get("box_storage_liter"),
            dt_till_max=row.get("dt_till_max"),
            dt_next_box=row.get("dt_next_box"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )


class TariffSource(ABC):
    """Abstract base class for tariff provider adapters.

    Implementations issue exactly one request per ``fetch`` call and do not
    retry internally - retry policy belongs to the caller.

    Usage:
        class MyProviderAdapter(TariffSource):
            def __init__(self, api_key: str):
                super().__init__(source_name="my_provider")
                self.api_key = api_key

            def fetch(self, tariff_date=None):
                ...
    """

    def __init__(self, source_name: str):
        """
        Initialize the adapter.

        Args:
            source_name: Unique identifier for this data source
        """
        self.source_name = source_name

    @abstractmethod
    def fetch(self, tariff_date: Optional[date] = None) -> List[TariffRecord]:
        """Fetch the tariff snapshot for a single date.

        Args:
            tariff_date: Calendar date to request. Defaults to today.

        Returns:
            Records stamped with the requested date. May be empty.

        Raises:
            ProviderError: On transport errors, non-2xx statuses, or a
                response that does not have the expected shape.
        """

    def __repr__(self) -> str:
        """String representation of the adapter."""
        return f"{self.__class__.__name__}(source='{self.source_name}')"
