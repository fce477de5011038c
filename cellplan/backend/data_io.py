"""Flat-file loading for the data server."""

from __future__ import annotations

import io
import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from ..analysis.signal_stats import as_number

logger = logging.getLogger(__name__)

SUMMARY_FILE = "summary_statistics.json"
TOWERS_FILE = "all_users_tower_recommendations.csv"
COVERAGE_FILE = "all_users_coverage_summary.csv"
LOCATION_FILE = "cellular_merged_with_location.csv"
COMBINED_FILE = "all_users_combined.csv"
USER_DATA_FILE = "processed_data.csv"
USER_SUMMARY_FILE = "coverage_summary.csv"

DEFAULT_ROW_LIMIT = 10000

_NULL_TOKENS = {"", "null", "undefined"}


class DataFileNotFound(FileNotFoundError):
    """A requested data file is missing or its name is not acceptable."""


def _coerce_value(value: Any) -> Any:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return None
    text = str(value).strip()
    if text.startswith('"'):
        text = text[1:]
    if text.endswith('"'):
        text = text[:-1]
    if text in _NULL_TOKENS:
        return None
    try:
        number = float(text)
    except ValueError:
        return text
    return number if math.isfinite(number) else text


def parse_csv_text(text: str) -> List[Dict[str, Any]]:
    """Parse CSV text into row dicts.

    Quoted fields may contain commas. Empty, ``null`` and ``undefined``
    values become None, numeric values become floats and anything else stays
    a trimmed string. Extra fields beyond the header are dropped.
    """

    text = text.strip()
    if not text:
        return []
    n_cols = len(text.splitlines()[0].split(","))
    df = pd.read_csv(
        io.StringIO(text),
        dtype=str,
        keep_default_na=False,
        skipinitialspace=True,
        engine="python",
        index_col=False,
        on_bad_lines=lambda fields: fields[:n_cols],
    )
    df.columns = df.columns.str.strip()
    return [
        {column: _coerce_value(value) for column, value in row.items()}
        for row in df.to_dict(orient="records")
    ]


def _require(path: Path) -> Path:
    if not path.is_file():
        raise DataFileNotFound(str(path))
    return path


def read_csv_records(path: Path) -> List[Dict[str, Any]]:
    text = _require(path).read_text(encoding="utf-8")
    return parse_csv_text(text)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-finite JSON constant: {name}")


def read_json(path: Path) -> Any:
    with _require(path).open("r", encoding="utf-8") as file:
        return json.load(file, parse_constant=_reject_constant)


def user_dir(data_dir: Path, user: str) -> Path:
    """Directory holding one user's files; ``user`` must be a plain name."""

    if not user or user in {".", ".."} or Path(user).name != user or "\\" in user:
        raise DataFileNotFound(f"Invalid user name: {user!r}")
    return data_dir / user


def resolve_signal_file(data_dir: Path, user: Optional[str] = None) -> Path:
    """Pick the signal file for a user, or the combined dataset.

    The combined view prefers the file with x/y coordinates and falls back to
    the plain merge of all users.
    """

    if user and user != "all":
        return _require(user_dir(data_dir, user) / USER_DATA_FILE)
    preferred = data_dir / LOCATION_FILE
    if preferred.is_file():
        return preferred
    logger.info("%s not found, falling back to %s", LOCATION_FILE, COMBINED_FILE)
    return _require(data_dir / COMBINED_FILE)


def _fill_rssi(row: Dict[str, Any]) -> Dict[str, Any]:
    if not row.get("rssi") and row.get("signal_strength") is not None:
        row["rssi"] = as_number(row["signal_strength"])
    if row.get("rssi") is not None:
        row["rssi"] = as_number(row["rssi"])
    return row


def load_signal_records(
    data_dir: Path,
    user: Optional[str] = None,
    limit: int = DEFAULT_ROW_LIMIT,
) -> List[Dict[str, Any]]:
    """Signal rows for ``user`` (or everyone), capped at ``limit`` rows.

    Rows without a usable ``rssi`` borrow ``signal_strength`` when present.
    """

    path = resolve_signal_file(data_dir, user)
    rows = read_csv_records(path)[:limit]
    logger.info("Loaded %d signal rows from %s", len(rows), path)
    return [_fill_rssi(row) for row in rows]


def load_user_summary(data_dir: Path, user: str) -> List[Dict[str, Any]]:
    return read_csv_records(user_dir(data_dir, user) / USER_SUMMARY_FILE)
