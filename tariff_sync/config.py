"""
Pipeline configuration loader.

This module builds the single immutable ``PipelineConfig`` the process uses.
Values come from the environment (optionally seeded from a ``.env`` file) and
from an optional YAML file (``config/pipeline.yml``) holding schedules and
sheet IDs. Environment variables win over YAML values.

Components receive the config (or values taken from it) through their
constructors and never read the environment themselves.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml
from apscheduler.triggers.cron import CronTrigger
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_CRON = "0 * * * *"
DEFAULT_WB_API_URL = "https://common-api.wildberries.ru/api/v1/tariffs/box"
DEFAULT_WB_REQUEST_TIMEOUT = 10.0


@dataclass(frozen=True)
class PipelineConfig:
    """Process-wide configuration, constructed once at startup."""

    wb_api_key: str
    database_url: str
    wb_api_url: str = DEFAULT_WB_API_URL
    wb_request_timeout: float = DEFAULT_WB_REQUEST_TIMEOUT
    google_credentials: Optional[Mapping[str, Any]] = field(default=None, repr=False)
    google_sheet_ids: tuple[str, ...] = ()
    tariffs_update_cron: str = DEFAULT_CRON
    sheets_update_cron: str = DEFAULT_CRON
    timezone: Optional[str] = None


def _project_root() -> Path:
    """Return the project root path based on this file's location."""
    return Path(__file__).resolve().parent.parent


def parse_sheet_ids(raw: Any) -> tuple[str, ...]:
    """
    Parse sheet IDs from a comma-separated string or a YAML list.

    Blank entries are dropped; order and first occurrence are preserved.
    """
    if raw is None:
        return ()
    if isinstance(raw, str):
        items = raw.split(",")
    elif isinstance(raw, (list, tuple)):
        items = [str(item) for item in raw]
    else:
        raise ValueError("GOOGLE_SHEET_IDS must be a comma-separated string or a list")

    ids: list[str] = []
    for item in items:
        sheet_id = item.strip()
        if sheet_id and sheet_id not in ids:
            ids.append(sheet_id)
    return tuple(ids)


def parse_google_credentials(raw: Any) -> Optional[dict[str, Any]]:
    """
    Parse service-account credentials from a JSON string or mapping.

    Escaped ``\\n`` sequences in the private key are unescaped, which is how
    keys usually survive a trip through a ``.env`` file.

    Raises:
        ValueError: If the JSON is invalid or required fields are missing
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None

    if isinstance(raw, str):
        try:
            credentials = json.loads(raw.strip())
        except json.JSONDecodeError as exc:
            raise ValueError(f"GOOGLE_CREDENTIALS is not valid JSON: {exc}") from exc
    elif isinstance(raw, Mapping):
        credentials = dict(raw)
    else:
        raise ValueError("GOOGLE_CREDENTIALS must be a JSON object")

    if not isinstance(credentials, dict):
        raise ValueError("GOOGLE_CREDENTIALS must be a JSON object")
    if not credentials.get("client_email") or not credentials.get("private_key"):
        raise ValueError("GOOGLE_CREDENTIALS must contain client_email and private_key")

    credentials["private_key"] = credentials["private_key"].replace("\\n", "\n")
    return credentials


def validate_cron(expression: str, name: str) -> str:
    """Ensure a 5-field cron expression is accepted by the scheduler."""
    try:
        CronTrigger.from_crontab(expression)
    except ValueError as exc:
        raise ValueError(f"{name} is not a valid cron expression: {expression!r} ({exc})") from exc
    return expression


def _database_url_from_parts(env: Mapping[str, str]) -> str:
    host = env.get("POSTGRES_HOST", "localhost")
    port = env.get("POSTGRES_PORT", "5432")
    if not port.isdigit():
        raise ValueError(f"POSTGRES_PORT must be numeric, got: {port}")
    database = env.get("POSTGRES_DB", "postgres")
    user = env.get("POSTGRES_USER", "postgres")
    password = env.get("POSTGRES_PASSWORD", "postgres")
    return f"postgresql://{user}:{password}@{host}:{port}/{database}"


def _load_yaml(path: Path) -> Mapping[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            raw_config = yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        logger.error("Failed to parse pipeline configuration: %s", exc)
        raise ValueError(f"Invalid YAML in pipeline configuration: {exc}") from exc

    if not raw_config:
        logger.warning("Pipeline configuration file is empty: %s", path)
        return {}
    if not isinstance(raw_config, Mapping):
        raise ValueError("Pipeline configuration must be a mapping")
    return raw_config


def load_config(
    config_path: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    env_file: Optional[str] = None,
) -> PipelineConfig:
    """
    Load and validate the pipeline configuration.

    Args:
        config_path: Optional YAML file. When omitted, ``config/pipeline.yml``
            relative to the project root is used if it exists.
        env: Mapping to read variables from. Defaults to ``os.environ`` after
            loading ``.env``; tests pass a plain dict.
        env_file: Explicit ``.env`` path for ``load_dotenv``.

    Returns:
        Frozen PipelineConfig

    Raises:
        FileNotFoundError: If an explicit config_path does not exist
        ValueError: If a value is missing or invalid
    """
    if env is None:
        load_dotenv(env_file)
        env = os.environ

    if config_path:
        path = Path(config_path)
        if not path.exists():
            logger.error("Pipeline configuration file not found: %s", path)
            raise FileNotFoundError(f"Pipeline configuration file not found: {path}")
        file_config = _load_yaml(path)
    else:
        default_path = _project_root() / "config" / "pipeline.yml"
        file_config = _load_yaml(default_path) if default_path.exists() else {}

    schedules = file_config.get("schedules") or {}
    if not isinstance(schedules, Mapping):
        raise ValueError("`schedules` section must be a mapping")

    wb_api_key = (env.get("WB_API_KEY") or "").strip()
    if not wb_api_key:
        raise ValueError("WB_API_KEY must be set in environment")

    timeout_raw = env.get("WB_REQUEST_TIMEOUT", str(DEFAULT_WB_REQUEST_TIMEOUT))
    try:
        wb_request_timeout = float(timeout_raw)
    except ValueError as exc:
        raise ValueError(f"WB_REQUEST_TIMEOUT must be numeric, got: {timeout_raw}") from exc

    sheet_ids_raw = env.get("GOOGLE_SHEET_IDS")
    if sheet_ids_raw is None:
        sheet_ids_raw = file_config.get("google_sheet_ids")

    tariffs_cron = env.get("TARIFFS_UPDATE_CRON") or schedules.get("tariffs_update") or DEFAULT_CRON
    sheets_cron = env.get("SHEETS_UPDATE_CRON") or schedules.get("sheets_update") or DEFAULT_CRON

    config = PipelineConfig(
        wb_api_key=wb_api_key,
        wb_api_url=env.get("WB_API_URL") or file_config.get("wb_api_url") or DEFAULT_WB_API_URL,
        wb_request_timeout=wb_request_timeout,
        database_url=env.get("DATABASE_URL") or _database_url_from_parts(env),
        google_credentials=parse_google_credentials(env.get("GOOGLE_CREDENTIALS")),
        google_sheet_ids=parse_sheet_ids(sheet_ids_raw),
        tariffs_update_cron=validate_cron(tariffs_cron, "TARIFFS_UPDATE_CRON"),
        sheets_update_cron=validate_cron(sheets_cron, "SHEETS_UPDATE_CRON"),
        timezone=env.get("TIMEZONE") or file_config.get("timezone"),
    )

    logger.info(
        "Loaded pipeline configuration",
        extra={
            "sheet_ids_count": len(config.google_sheet_ids),
            "google_credentials": config.google_credentials is not None,
            "tariffs_update_cron": config.tariffs_update_cron,
            "sheets_update_cron": config.sheets_update_cron,
        },
    )
    return config


__all__ = ["PipelineConfig", "load_config", "parse_sheet_ids", "parse_google_credentials"]
