"""
Pytest configuration and shared fixtures

This file contains test fixtures that can be used across all tests.
Fixtures are reusable components that set up test preconditions.
"""

import os
from datetime import date
from decimal import Decimal

import pytest

from tariff_sync.source_extractor.base import TariffRecord


class InMemoryStorage:
    """
    Storage double with the TariffStorage methods the jobs use.

    Mirrors the upsert semantics: the (date, warehouse_name) key is unique
    and later writes overwrite earlier ones.
    """

    def __init__(self, sheet_ids=None, today=None):
        self.rows = {}
        self.upsert_calls = []
        self.sheet_ids = list(sheet_ids or [])
        self.today = today or date.today()
        self.fail_upsert = None
        self.fail_read = None

    def upsert_tariffs_batch(self, records):
        if self.fail_upsert:
            raise self.fail_upsert
        if not records:
            return 0
        self.upsert_calls.append(list(records))
        for record in records:
            self.rows[record.identity] = record
        return len({r.identity for r in records})

    def get_latest_tariffs(self):
        if self.fail_read:
            raise self.fail_read
        current = [r for r in self.rows.values() if r.date >= self.today]
        return sorted(
            current,
            key=lambda r: (
                r.box_delivery_and_storage_expr is None,
                r.box_delivery_and_storage_expr or 0,
                r.warehouse_name,
            ),
        )

    def get_sheet_ids(self):
        return list(self.sheet_ids)


@pytest.fixture(scope="session")
def database_url() -> str:
    """
    Provide database URL for integration tests.

    Integration tests truncate the tariff tables, so they only run against
    an explicitly configured TEST_DATABASE_URL.
    """
    url = os.getenv("TEST_DATABASE_URL")
    if not url:
        pytest.skip("TEST_DATABASE_URL not set")
    return url


@pytest.fixture(scope="function")
def sample_wb_response() -> dict:
    """
    Provide a typical Wildberries box tariffs response.

    Includes a "-" sentinel, comma decimals, and an empty value.
    """
    return {
        "response": {
            "data": {
                "dtNextBox": "",
                "dtTillMax": "2026-10-31",
                "warehouseList": [
                    {
                        "warehouseName": "Коледино",
                        "boxDeliveryAndStorageExpr": "160",
                        "boxDeliveryBase": "48",
                        "boxDeliveryLiter": "11,2",
                        "boxStorageBase": "0,1",
                        "boxStorageLiter": "0,1",
                    },
                    {
                        "warehouseName": "Электросталь",
                        "boxDeliveryAndStorageExpr": "145",
                        "boxDeliveryBase": "46,4",
                        "boxDeliveryLiter": "10,8",
                        "boxStorageBase": "-",
                        "boxStorageLiter": "",
                    },
                ],
            }
        }
    }


@pytest.fixture(scope="function")
def sample_tariffs() -> list:
    """Provide a small batch of tariff records dated today."""
    today = date.today()
    return [
        TariffRecord(
            date=today,
            warehouse_name="Коледино",
            box_delivery_and_storage_expr=Decimal("160"),
            box_delivery_base=Decimal("48"),
            box_delivery_liter=Decimal("11.2"),
            box_storage_base=Decimal("0.1"),
            box_storage_liter=Decimal("0.1"),
            dt_till_max="2026-10-31",
        ),
        TariffRecord(
            date=today,
            warehouse_name="Электросталь",
            box_delivery_and_storage_expr=Decimal("145"),
            box_delivery_base=Decimal("46.4"),
            box_delivery_liter=Decimal("10.8"),
            dt_till_max="2026-10-31",
        ),
    ]


@pytest.fixture(scope="function")
def memory_storage() -> InMemoryStorage:
    return InMemoryStorage()


# Mark tests based on their type for selective running
def pytest_configure(config):
    """
    Register custom pytest markers.

    - pytest -m unit        (run only unit tests)
    - pytest -m integration (run only integration tests)
    - pytest -m "not slow"  (skip slow tests)
    """
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test (isolated, fast)"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (requires PostgreSQL)"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running (>1 second)"
    )
