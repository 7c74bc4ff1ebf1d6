"""
Spreadsheet sink: per-sheet error types, results, and the fan-out publisher.

Each sheet is verified, cleared and rewritten on its own. A failure is
recorded in that sheet's PublishResult and never reaches the other sheets.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from ..source_extractor.base import TariffRecord
from .exporter import build_sheet_values

logger = logging.getLogger(__name__)


class SinkError(Exception):
    """A failure isolated to a single spreadsheet."""

    kind = "unreachable"

    def __init__(self, sheet_id: str, message: str):
        super().__init__(message)
        self.sheet_id = sheet_id


class SinkNotFoundError(SinkError):
    kind = "not_found"


class SinkPermissionError(SinkError):
    kind = "permission_denied"


class SinkUnreachableError(SinkError):
    kind = "unreachable"


@dataclass(frozen=True)
class PublishResult:
    """
    Outcome of publishing to one spreadsheet.

    `error_kind` is one of SinkError kinds for access failures, or
    ``"write_failed"`` when clearing/writing failed after access was verified.
    """

    sheet_id: str
    success: bool
    error: Optional[str] = None
    error_kind: Optional[str] = None


class SheetClient(Protocol):
    """
    Protocol for a spreadsheet API client.

    `get_metadata` raises a SinkError subclass when the sheet is missing,
    not shared, or unreachable.
    """

    def get_metadata(self, sheet_id: str) -> dict[str, Any]:
        """Fetch minimal metadata (title) to verify access."""

    def clear(self, sheet_id: str) -> None:
        """Clear the managed cell range."""

    def write(self, sheet_id: str, values: list[list[Any]]) -> dict[str, Any]:
        """Write rows starting at the origin cell."""


class SheetsPublisher:
    """
    Pushes a tariff snapshot to each spreadsheet independently.

    Sheets are processed sequentially in the order given; a failure on one
    sheet is recorded in its result and never stops the others.
    """

    def __init__(self, client: SheetClient):
        self._client = client

    def publish(self, records: Sequence[TariffRecord], sheet_ids: Sequence[str]) -> list[PublishResult]:
        """
        Publish ``records`` (in the given order) to every sheet in ``sheet_ids``.

        Returns:
            Exactly one PublishResult per sheet ID, in input order.
        """
        values = build_sheet_values(records)
        logger.info(
            "Prepared data for Google Sheets",
            extra={"rows": len(values), "columns": len(values[0]), "sheets": len(sheet_ids)},
        )

        return [self._publish_one(sheet_id, values) for sheet_id in sheet_ids]

    def _publish_one(self, sheet_id: str, values: list[list[Any]]) -> PublishResult:
        logger.info("Processing sheet %s", sheet_id)

        try:
            metadata = self._client.get_metadata(sheet_id)
        except SinkError as e:
            logger.error("Access check failed for sheet %s: %s", sheet_id, e, extra={"error_kind": e.kind})
            return PublishResult(sheet_id, False, str(e), e.kind)
        except Exception as e:
            error = SinkUnreachableError(sheet_id, f"Cannot access sheet {sheet_id}: {e}")
            logger.error("Access check failed for sheet %s: %s", sheet_id, error, extra={"error_kind": error.kind})
            return PublishResult(sheet_id, False, str(error), error.kind)

        title = (metadata or {}).get("properties", {}).get("title")
        logger.info('Access verified to sheet "%s" (%s)', title, sheet_id)

        try:
            self._client.clear(sheet_id)
            response = self._client.write(sheet_id, values)
        except Exception as e:
            logger.error(
                "Failed to update sheet %s: %s",
                sheet_id,
                e,
                exc_info=True,
                extra={"error_type": type(e).__name__},
            )
            return PublishResult(sheet_id, False, str(e), "write_failed")

        logger.info(
            "Sheet %s updated",
            sheet_id,
            extra={
                "updated_cells": (response or {}).get("updatedCells"),
                "updated_range": (response or {}).get("updatedRange"),
            },
        )
        return PublishResult(sheet_id, True)
