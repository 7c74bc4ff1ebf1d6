"""Tariff Provider Adapters.

Concrete implementations of the TariffSource interface.

Available adapters:
- WBTariffsAdapter: Wildberries box tariffs API (wb_tariffs_adapter.py)
- MockTariffSource: For testing purposes (mock_adapter.py)
"""

from .mock_adapter import MockTariffSource
from .wb_tariffs_adapter import WBTariffsAdapter

__all__ = ["MockTariffSource", "WBTariffsAdapter"]
