"""
Row projection for the spreadsheet sink.

The header, column order and the ``N/A`` marker are read by people, so they
must stay exactly as they are.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional, Sequence

from ..source_extractor.base import TARIFF_NUMERIC_FIELDS, TariffRecord

NOT_AVAILABLE = "N/A"

SHEET_HEADER = [
    "Склад",
    "Доставка (выр)",
    "Доставка (база)",
    "Доставка (литр)",
    "Хранение (база)",
    "Хранение (литр)",
    "Действует до",
]


def format_decimal(value: Optional[Decimal]) -> str:
    """Render a tariff value, or ``N/A`` when it is not offered."""
    if value is None:
        return NOT_AVAILABLE
    return str(value)


def format_valid_until(value: Optional[str]) -> str:
    """
    Render the provider's ``dtTillMax`` as ``YYYY-MM-DD``.

    Timezone-aware values are converted to UTC first. Strings that are not
    ISO-8601 are passed through unchanged.
    """
    if not value:
        return NOT_AVAILABLE

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return value

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date().isoformat()


def tariff_to_row(record: TariffRecord) -> list[str]:
    """One sheet row in ``SHEET_HEADER`` column order."""
    return [
        record.warehouse_name or NOT_AVAILABLE,
        *(format_decimal(getattr(record, field)) for field in TARIFF_NUMERIC_FIELDS),
        format_valid_until(record.dt_till_max),
    ]


def build_sheet_values(records: Sequence[TariffRecord]) -> list[list[Any]]:
    """Header row followed by one row per record, in the order given."""
    return [list(SHEET_HEADER), *(tariff_to_row(record) for record in records)]
