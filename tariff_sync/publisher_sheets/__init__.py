"""
Google Sheets publisher package.

Fans the latest tariff snapshot out to every configured spreadsheet,
collecting one PublishResult per sheet.
"""

from .base import (
    PublishResult,
    SheetClient,
    SheetsPublisher,
    SinkError,
    SinkNotFoundError,
    SinkPermissionError,
    SinkUnreachableError,
)
from .exporter import NOT_AVAILABLE, SHEET_HEADER, build_sheet_values

__all__ = [
    "PublishResult",
    "SheetClient",
    "SheetsPublisher",
    "SinkError",
    "SinkNotFoundError",
    "SinkPermissionError",
    "SinkUnreachableError",
    "NOT_AVAILABLE",
    "SHEET_HEADER",
    "build_sheet_values",
]
