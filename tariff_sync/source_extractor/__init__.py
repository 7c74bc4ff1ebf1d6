"""Source Extractor Service.

Fetches tariff snapshots from the external provider.

Main components:
- TariffSource: Abstract base class for provider adapters
- TariffRecord: One warehouse's tariff for one date
- ProviderError: Retryable provider failure
- retry_with_backoff: Retry decorator used by the fetch job
"""

from .base import TARIFF_NUMERIC_FIELDS, ProviderError, TariffRecord, TariffSource
from .retry import retry_with_backoff

__all__ = [
    "TARIFF_NUMERIC_FIELDS",
    "ProviderError",
    "TariffRecord",
    "TariffSource",
    "retry_with_backoff",
]
