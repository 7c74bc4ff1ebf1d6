"""Mock Adapter for Testing.

This adapter simulates the tariff provider for tests and dry runs.
It doesn't make HTTP requests, but follows the same contract.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from ..base import ProviderError, TariffRecord, TariffSource


class MockTariffSource(TariffSource):
    """Mock adapter that returns generated tariffs.

    Useful for:
    - Unit testing the fetch job without hitting the real API
    - Exercising retry behaviour with scripted failures

    Example:
        source = MockTariffSource(num_warehouses=3, fail_times=2)
        source.fetch()  # raises ProviderError
        source.fetch()  # raises ProviderError
        records = source.fetch()
        assert len(records) == 3
    """

    def __init__(self, num_warehouses: int = 5, fail_times: int = 0):
        """Initialize the mock adapter.

        Args:
            num_warehouses: Number of warehouse records returned per fetch
            fail_times: Number of leading fetch calls that raise ProviderError
        """
        super().__init__(source_name="mock_tariffs")
        self.num_warehouses = num_warehouses
        self.fail_times = fail_times
        self.attempt_count = 0
        self.requested_dates: list[date] = []

    def fetch(self, tariff_date: Optional[date] = None) -> list[TariffRecord]:
        """Return generated tariffs, failing for the first ``fail_times`` calls."""
        tariff_date = tariff_date or date.today()
        self.attempt_count += 1
        self.requested_dates.append(tariff_date)

        if self.attempt_count <= self.fail_times:
            raise ProviderError(
                f"Simulated provider failure (attempt {self.attempt_count})",
                status_code=503,
            )

        return [self._generate_record(i, tariff_date) for i in range(self.num_warehouses)]

    def _generate_record(self, index: int, tariff_date: date) -> TariffRecord:
        """Generate a deterministic record; every third warehouse has no storage tariff."""
        base = Decimal(40 + index * 5)
        return TariffRecord(
            date=tariff_date,
            warehouse_name=f"Склад {index + 1:02d}",
            box_delivery_and_storage_expr=Decimal(100 + index * 10),
            box_delivery_base=base,
            box_delivery_liter=Decimal("9.8") + index,
            box_storage_base=None if index % 3 == 2 else Decimal("0.1"),
            box_storage_liter=None if index % 3 == 2 else Decimal("0.1"),
            dt_till_max="2026-10-31",
            dt_next_box="",
        )
