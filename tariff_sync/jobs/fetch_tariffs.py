"""
Fetch job: pull the tariff snapshot from the provider and persist it.

Only provider failures are retried (3 attempts, fixed 5 second delay).
A storage failure propagates immediately: the fetched data is still valid
and calling the provider again would not fix the database.
"""

import logging
import time
from datetime import date, datetime, timezone
from typing import Callable, Optional

from ..source_extractor.base import ProviderError, TariffSource
from ..source_extractor.retry import retry_with_backoff
from ..storage.db_operations import TariffStorage

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3
RETRY_DELAY_SECONDS = 5.0


class FetchTariffsJob:
    """Fetch-and-persist unit of work."""

    name = "fetch_tariffs"

    def __init__(
        self,
        source: TariffSource,
        storage: TariffStorage,
        max_attempts: int = MAX_ATTEMPTS,
        retry_delay: float = RETRY_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        self.source = source
        self.storage = storage
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self._sleep = sleep

    def run(self, tariff_date: Optional[date] = None) -> int:
        """
        Fetch tariffs for ``tariff_date`` (today by default) and upsert them.

        Returns:
            Number of tariffs saved (0 when the provider returned nothing)

        Raises:
            ProviderError: After every attempt failed; nothing is written
            StorageError: If persisting fails (not retried)
        """
        start_time = datetime.now(timezone.utc)

        fetch = retry_with_backoff(
            max_retries=self.max_attempts - 1,
            initial_delay=self.retry_delay,
            backoff_factor=1.0,
            exceptions=(ProviderError,),
            sleep=self._sleep,
            operation=f"{self.source.source_name} tariffs request",
        )(self.source.fetch)

        logger.info(
            "Fetching tariffs",
            extra={
                "source": self.source.source_name,
                "date": tariff_date.isoformat() if tariff_date else "today",
                "max_attempts": self.max_attempts,
            },
        )

        try:
            tariffs = fetch(tariff_date)
        except ProviderError as e:
            logger.error(
                "All %d attempts to fetch tariffs failed: %s",
                self.max_attempts,
                e,
                extra={"status_code": e.status_code},
            )
            raise

        if not tariffs:
            logger.warning("Provider returned an empty tariff list")
            return 0

        first = tariffs[0]
        logger.debug(
            "Sample tariff",
            extra={
                "date": first.date.isoformat(),
                "warehouse": first.warehouse_name,
                "delivery": str(first.box_delivery_and_storage_expr),
            },
        )

        saved = self.storage.upsert_tariffs_batch(tariffs)

        logger.info(
            "Saved %d tariffs",
            saved,
            extra={"duration_seconds": (datetime.now(timezone.utc) - start_time).total_seconds()},
        )
        return saved
