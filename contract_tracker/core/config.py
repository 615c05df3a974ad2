"""Runtime configuration for the spreadsheet-backed contract store.

Values come from Streamlit secrets when the dashboard runs inside Streamlit,
otherwise from the environment, optionally seeded from ``secrets/sheets.env``.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from contract_tracker.core.headers import COLUMN_MAP

DEFAULT_SERVICE_ACCOUNT_PATHS = [
    Path("secrets/service_account.json"),
    Path("credentials/service_account.json"),
]
DEFAULT_ENV_FILE = Path("secrets/sheets.env")
DEFAULT_WORKSHEET = "Contratos"
DEFAULT_LOCK_TIMEOUT = 30.0

logger = logging.getLogger(__name__)


@dataclass
class StoreConfig:
    """Everything the store and codec need to reach and read the sheet."""

    spreadsheet_id: str = ""
    worksheet_title: str = DEFAULT_WORKSHEET
    service_account_path: Optional[Path] = None
    column_map: Dict[str, str] = field(default_factory=lambda: dict(COLUMN_MAP))
    lock_timeout: float = DEFAULT_LOCK_TIMEOUT
    enforce_unique_keys: bool = False
    # Read slash-separated text dates as dd/mm/yyyy instead of mm/dd/yyyy.
    day_first: bool = False


def get_config_value(key: str, default: str = "") -> str:
    """Get a configuration value from Streamlit secrets or environment variables.

    Streamlit secrets are only consulted inside a running Streamlit app; the
    API server and CLI read the environment.
    """
    try:
        import streamlit as st
        from streamlit import runtime
        if runtime.exists() and hasattr(st, 'secrets') and key in st.secrets:
            return str(st.secrets[key])
    except (ImportError, FileNotFoundError, KeyError):
        pass

    return os.getenv(key, default)


def load_env_file(path: Path) -> None:
    """Seed ``os.environ`` from a ``KEY=value`` file; existing variables win."""
    if not path.exists():
        return

    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except OSError as exc:
        logger.debug("Could not load env file %s: %s", path, exc)
        return
    for line in lines:
        key, sep, value = line.strip().partition("=")
        key = key.strip()
        if not sep or not key or key.startswith("#") or key in os.environ:
            continue
        os.environ[key] = value.strip().strip('"').strip("'")


def _flag(key: str) -> bool:
    return get_config_value(key, "0").strip().lower() in {"1", "true", "yes"}


def _default_service_account_path() -> Optional[Path]:
    for candidate in DEFAULT_SERVICE_ACCOUNT_PATHS:
        if candidate.exists():
            return candidate
    return None


def _parse_timeout(raw: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring invalid CONTRACTS_LOCK_TIMEOUT %r", raw)
        return DEFAULT_LOCK_TIMEOUT
    return value if value > 0 else DEFAULT_LOCK_TIMEOUT


def load_store_config(env_file: Path | None = None) -> StoreConfig:
    """Resolve the store configuration from secrets, env files, and the environment."""

    load_env_file(Path(env_file or os.getenv("CONTRACTS_ENV_FILE", DEFAULT_ENV_FILE)))

    account_value = get_config_value("CONTRACTS_SERVICE_ACCOUNT")
    account_path = Path(account_value) if account_value else _default_service_account_path()

    config = StoreConfig(
        spreadsheet_id=get_config_value("CONTRACTS_SPREADSHEET_ID"),
        worksheet_title=get_config_value("CONTRACTS_WORKSHEET", DEFAULT_WORKSHEET),
        service_account_path=account_path,
        lock_timeout=_parse_timeout(
            get_config_value("CONTRACTS_LOCK_TIMEOUT", str(DEFAULT_LOCK_TIMEOUT))
        ),
        enforce_unique_keys=_flag("CONTRACTS_ENFORCE_UNIQUE"),
        day_first=_flag("CONTRACTS_DATE_DAY_FIRST"),
    )
    if not config.spreadsheet_id:
        logger.warning("CONTRACTS_SPREADSHEET_ID is not set; the sheets store cannot be opened.")
    return config


def api_base_url() -> str:
    """Return the configured contracts API URL used by the client."""

    return get_config_value("CONTRACTS_API_URL", "http://127.0.0.1:8000").rstrip("/")
