"""
Normalization helpers for Wildberries tariff payloads.

The provider encodes numbers as strings with ``,`` as the fractional
separator and ``-`` as an explicit "no value" marker. Anything that does not
parse cleanly becomes ``None`` - these helpers never raise.

Examples:
    >>> parse_number("1,5")
    Decimal('1.5')
    >>> parse_number("-") is None
    True
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

logger = logging.getLogger(__name__)

MISSING_VALUE_MARKER = "-"


def parse_number(value: Any) -> Optional[Decimal]:
    """
    Parse a provider decimal string into a ``Decimal``.

    Args:
        value: Raw value from the API, usually a string like ``"1,5"``.
            Numbers are accepted as-is.

    Returns:
        Parsed Decimal, or None for missing, sentinel, or garbage input.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, Decimal)):
        parsed = Decimal(value)
        return parsed if parsed.is_finite() else None
    if isinstance(value, float):
        return parse_number(repr(value))

    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text or text == MISSING_VALUE_MARKER:
        return None

    # Thousands may be grouped with regular or non-breaking spaces
    text = text.replace("\u00a0", "").replace(" ", "").replace(",", ".", 1)

    try:
        parsed = Decimal(text)
    except InvalidOperation:
        logger.debug("Unparsable numeric value", extra={"value": value})
        return None

    # NaN / Infinity are valid Decimal literals but never valid tariffs
    if not parsed.is_finite():
        return None

    return parsed


def clean_optional_text(value: Any) -> Optional[str]:
    """Return a stripped string, or None for empty/non-string values."""
    if not isinstance(value, str):
        return None
    text = value.strip()
    return text or None
