"""
Wildberries box tariffs adapter.

Fetches the box delivery/storage tariffs for a single date from the
Wildberries common API and maps every warehouse entry to a TariffRecord.

Expected response shape:
    {"response": {"data": {"dtNextBox": ..., "dtTillMax": ...,
                           "warehouseList": [{"warehouseName": ..., ...}]}}}
"""

import logging
from datetime import date
from typing import Any, Optional

import requests

from ...normalizer import clean_optional_text, parse_number
from ..base import ProviderError, TariffRecord, TariffSource

logger = logging.getLogger(__name__)

# Constants
DEFAULT_API_URL = "https://common-api.wildberries.ru/api/v1/tariffs/box"
API_TIMEOUT_SECONDS = 10
ERROR_BODY_PREVIEW_CHARS = 200

# warehouseList entry key -> TariffRecord field
WAREHOUSE_FIELD_MAP = {
    "boxDeliveryAndStorageExpr": "box_delivery_and_storage_expr",
    "boxDeliveryBase": "box_delivery_base",
    "boxDeliveryLiter": "box_delivery_liter",
    "boxStorageBase": "box_storage_base",
    "boxStorageLiter": "box_storage_liter",
}


class WBTariffsAdapter(TariffSource):
    """
    Adapter for the Wildberries box tariffs endpoint.

    One ``fetch`` call issues exactly one GET request. Retries are the
    responsibility of the fetch job.
    """

    def __init__(
        self,
        api_key: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = API_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the Wildberries adapter.

        Args:
            api_key: Wildberries API token, sent as a bearer credential
            api_url: Tariffs endpoint URL
            timeout: Request timeout in seconds
            session: Optional requests session (a new one is created if omitted)

        Raises:
            ValueError: If the API key is empty
        """
        super().__init__(source_name="wildberries")

        if not api_key:
            raise ValueError("WB_API_KEY must be configured")

        self.api_key = api_key
        self.api_url = api_url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.api_call_count = 0

        logger.info(
            "Wildberries adapter initialized",
            extra={"source": self.source_name, "api_url": self.api_url},
        )

    @classmethod
    def from_config(cls, config, session: Optional[requests.Session] = None) -> "WBTariffsAdapter":
        """Build the adapter from a PipelineConfig."""
        return cls(
            api_key=config.wb_api_key,
            api_url=config.wb_api_url,
            timeout=config.wb_request_timeout,
            session=session,
        )

    def fetch(self, tariff_date: Optional[date] = None) -> list[TariffRecord]:
        """
        Fetch box tariffs for one date.

        Args:
            tariff_date: Date to request (defaults to today)

        Returns:
            List of TariffRecord stamped with ``tariff_date``

        Raises:
            ProviderError: On transport error, non-2xx status, or malformed body
        """
        tariff_date = tariff_date or date.today()
        payload = self._make_api_call(tariff_date)
        records = self.parse_response(payload, tariff_date)

        logger.info(
            "Fetched tariffs from Wildberries",
            extra={
                "date": tariff_date.isoformat(),
                "warehouses": len(records),
                "total_api_calls": self.api_call_count,
            },
        )
        return records

    def _make_api_call(self, tariff_date: date) -> dict[str, Any]:
        """Issue the GET request and return the decoded JSON body."""
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        params = {"date": tariff_date.strftime("%Y-%m-%d")}

        self.api_call_count += 1

        logger.debug(
            "Making Wildberries API call",
            extra={"params": params, "call_count": self.api_call_count},
        )

        try:
            response = self.session.get(
                self.api_url, headers=headers, params=params, timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise ProviderError(f"WB API request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            body = (response.text or "")[:ERROR_BODY_PREVIEW_CHARS]
            raise ProviderError(
                f"WB API: HTTP {response.status_code}: {body or 'server error'}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProviderError("WB API: malformed response (body is not JSON)") from e

    def parse_response(self, payload: Any, tariff_date: date) -> list[TariffRecord]:
        """
        Validate the response shape and map warehouse entries to records.

        Raises:
            ProviderError: If the nested structure is missing or of the wrong type
        """
        try:
            data = payload["response"]["data"]
            warehouses = data["warehouseList"]
        except (KeyError, TypeError) as e:
            raise ProviderError("WB API: malformed response") from e

        if not isinstance(warehouses, list):
            raise ProviderError("WB API: malformed response (warehouseList is not a list)")

        # Shared across every warehouse in the response
        dt_till_max = clean_optional_text(data.get("dtTillMax"))
        dt_next_box = clean_optional_text(data.get("dtNextBox"))

        records = []
        for entry in warehouses:
            if not isinstance(entry, dict):
                raise ProviderError("WB API: malformed response (warehouse entry is not an object)")

            warehouse_name = clean_optional_text(entry.get("warehouseName"))
            if warehouse_name is None:
                raise ProviderError("WB API: malformed response (warehouseName missing)")

            numeric = {
                field: parse_number(entry.get(key))
                for key, field in WAREHOUSE_FIELD_MAP.items()
            }
            records.append(
                TariffRecord(
                    date=tariff_date,
                    warehouse_name=warehouse_name,
                    dt_till_max=dt_till_max,
                    dt_next_box=dt_next_box,
                    **numeric,
                )
            )

        return records

    def __repr__(self) -> str:
        """String representation of the adapter."""
        return (
            f"WBTariffsAdapter(source='{self.source_name}', "
            f"api_calls={self.api_call_count})"
        )
