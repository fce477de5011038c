"""Runtime settings shared by the data server and the dashboard."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

REPO_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_DATA_DIR = (REPO_ROOT / ".." / "cellular_planning_results").resolve()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _get_int(source: Mapping[str, str], key: str, default: int) -> int:
    raw_value = source.get(key)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except (TypeError, ValueError):
        return default


def _get_bool(source: Mapping[str, str], key: str, default: bool) -> bool:
    raw_value = source.get(key)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    api_base_url: str
    row_limit: int
    host: str
    port: int
    wifi_probe: bool
    log_level: str


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build settings from the environment (a ``.env`` file is honoured)."""

    if environ is None:
        load_dotenv()
        environ = os.environ

    data_dir = environ.get("CELLPLAN_DATA_DIR")
    return Settings(
        data_dir=Path(data_dir).expanduser() if data_dir else DEFAULT_DATA_DIR,
        api_base_url=environ.get("CELLPLAN_API_BASE_URL", "http://localhost:8000/api").rstrip("/"),
        row_limit=max(_get_int(environ, "CELLPLAN_ROW_LIMIT", 10000), 1),
        host=environ.get("CELLPLAN_HOST", "0.0.0.0"),
        port=_get_int(environ, "CELLPLAN_PORT", 8000),
        wifi_probe=_get_bool(environ, "CELLPLAN_WIFI_PROBE", False),
        log_level=environ.get("CELLPLAN_LOG_LEVEL", "INFO").upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
