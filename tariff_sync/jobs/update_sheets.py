"""
Publish job: push the latest persisted snapshot to every spreadsheet.

Spreadsheet sync is optional. A missing sheets client, no sheet IDs, or an
empty snapshot make the run a logged no-op. Per-sheet failures are reported
but never fail the job; only reading from storage can raise.
"""

import logging
from collections.abc import Sequence
from typing import Optional

from ..publisher_sheets.base import PublishResult, SheetsPublisher
from ..storage.db_operations import TariffStorage

logger = logging.getLogger(__name__)


class UpdateSheetsJob:
    """Read-and-publish unit of work."""

    name = "update_sheets"

    def __init__(
        self,
        storage: TariffStorage,
        publisher: Optional[SheetsPublisher],
        configured_sheet_ids: Sequence[str] = (),
    ):
        """
        Args:
            storage: Source of the latest snapshot and of registered sheet IDs
            publisher: Sheets publisher, or None if the client failed to initialize
            configured_sheet_ids: Sheet IDs from configuration
        """
        self.storage = storage
        self.publisher = publisher
        self.configured_sheet_ids = tuple(configured_sheet_ids)

    def resolve_sheet_ids(self) -> list[str]:
        """Configured IDs followed by registered ones, without duplicates."""
        sheet_ids: list[str] = []
        for sheet_id in (*self.configured_sheet_ids, *self.storage.get_sheet_ids()):
            if sheet_id and sheet_id not in sheet_ids:
                sheet_ids.append(sheet_id)
        return sheet_ids

    def run(self) -> list[PublishResult]:
        """
        Publish the latest tariffs.

        Returns:
            One PublishResult per sheet (empty when the run was a no-op)

        Raises:
            StorageError: If sheet IDs or the snapshot cannot be read
        """
        logger.info("Starting sheets update")

        if self.publisher is None:
            logger.warning("Google Sheets client not available - skipping sheets update")
            return []

        sheet_ids = self.resolve_sheet_ids()
        if not sheet_ids:
            logger.warning("No sheet IDs configured or registered - skipping sheets update")
            return []

        tariffs = self.storage.get_latest_tariffs()
        logger.info("Retrieved %d tariffs from database", len(tariffs))

        if not tariffs:
            logger.warning("No current tariffs found in database - nothing to publish")
            return []

        results = self.publisher.publish(tariffs, sheet_ids)
        succeeded = sum(1 for result in results if result.success)

        if succeeded == len(sheet_ids):
            logger.info("Successfully updated all %d sheets", succeeded)
        else:
            logger.warning("Updated only %d/%d sheets", succeeded, len(sheet_ids))
            for failed in (result for result in results if not result.success):
                logger.error(
                    "Failed to update sheet %s: %s",
                    failed.sheet_id,
                    failed.error or "Unknown error",
                    extra={"error_kind": failed.error_kind},
                )

        return results
