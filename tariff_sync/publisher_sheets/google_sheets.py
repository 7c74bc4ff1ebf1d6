"""
Google Sheets API client.

Thin wrapper over the Sheets v4 API with a service account. Access errors
from the metadata call are classified into SinkError subclasses so the
publisher can report them per sheet.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from .base import SinkError, SinkNotFoundError, SinkPermissionError, SinkUnreachableError

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
CLEAR_RANGE = "A1:Z1000"
WRITE_ORIGIN = "A1"
VALUE_INPUT_OPTION = "USER_ENTERED"


def classify_access_error(sheet_id: str, error: Exception, service_account_email: Optional[str] = None) -> SinkError:
    """Map an API error from the metadata call to a SinkError subclass."""
    status = getattr(getattr(error, "resp", None), "status", None)
    try:
        status = int(status) if status is not None else None
    except (TypeError, ValueError):
        status = None

    if status == 404:
        return SinkNotFoundError(sheet_id, f"Sheet not found: {sheet_id}. Please check the sheet ID.")
    if status == 403:
        share_with = f" Share it with {service_account_email} (Editor)." if service_account_email else ""
        return SinkPermissionError(
            sheet_id,
            f"Permission denied: Sheet {sheet_id} is not shared with the service account.{share_with}",
        )
    return SinkUnreachableError(sheet_id, f"Cannot access sheet {sheet_id}: {error}")


class GoogleSheetsClient:
    """
    Google Sheets v4 client authorised by a service account.

    Args:
        credentials_info: Parsed service-account JSON
        service: Pre-built API resource (for tests); built from the
            credentials when omitted
    """

    def __init__(self, credentials_info: Mapping[str, Any], service: Any = None):
        self.service_account_email = credentials_info.get("client_email")

        if service is None:
            credentials = service_account.Credentials.from_service_account_info(
                dict(credentials_info), scopes=SCOPES
            )
            service = build("sheets", "v4", credentials=credentials, cache_discovery=False)

        self._spreadsheets = service.spreadsheets()

        logger.info(
            "Google Sheets client initialized",
            extra={"service_account": self.service_account_email},
        )

    def get_metadata(self, sheet_id: str) -> dict[str, Any]:
        try:
            return self._spreadsheets.get(
                spreadsheetId=sheet_id, fields="properties.title"
            ).execute()
        except HttpError as e:
            raise classify_access_error(sheet_id, e, self.service_account_email) from e
        except OSError as e:
            raise SinkUnreachableError(sheet_id, f"Cannot access sheet {sheet_id}: {e}") from e

    def clear(self, sheet_id: str) -> None:
        logger.info("Clearing existing data in sheet %s", sheet_id)
        self._spreadsheets.values().clear(
            spreadsheetId=sheet_id, range=CLEAR_RANGE, body={}
        ).execute()

    def write(self, sheet_id: str, values: list[list[Any]]) -> dict[str, Any]:
        logger.info("Inserting %d rows into sheet %s", len(values), sheet_id)
        return self._spreadsheets.values().update(
            spreadsheetId=sheet_id,
            range=WRITE_ORIGIN,
            valueInputOption=VALUE_INPUT_OPTION,
            body={"values": values},
        ).execute()


def build_sheets_client(credentials_info: Optional[Mapping[str, Any]]) -> Optional[GoogleSheetsClient]:
    """
    Build the client, or return None when sheets sync cannot be enabled.

    Missing or rejected credentials are logged, not raised: spreadsheet sync
    is optional.
    """
    if not credentials_info:
        logger.warning("GOOGLE_CREDENTIALS not configured - Google Sheets sync disabled")
        return None

    try:
        return GoogleSheetsClient(credentials_info)
    except (ValueError, KeyError) as e:
        logger.error(
            "Failed to initialize Google Sheets client",
            extra={"error": str(e), "error_type": type(e).__name__},
        )
        return None
