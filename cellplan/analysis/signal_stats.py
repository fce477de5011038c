"""Descriptive statistics and fixed-threshold bucketing of RSSI samples."""

from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, Optional

import numpy as np
import pandas as pd

from .positions import normalize_position, position_icon, position_rank

QUALITY_LEVELS = ("excellent", "good", "fair", "poor")

RSSI_BIN_EDGES = [-140, -120, -100, -80, -60, -40, -20, 0]


def as_number(value: Any) -> Optional[float]:
    """Return ``value`` as a float, or None when it is missing or not numeric."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, np.integer, np.floating)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def valid_rssi(value: Any) -> bool:
    """RSSI readings are negative dBm; zero means "not measured"."""

    number = as_number(value)
    return number is not None and number != 0 and number < 0


def classify_rssi(rssi: float) -> str:
    if rssi > -70:
        return "excellent"
    if rssi > -85:
        return "good"
    if rssi > -100:
        return "fair"
    return "poor"


def rssi_values(records: Iterable[Dict[str, Any]]) -> List[float]:
    values = []
    for record in records:
        number = as_number(record.get("rssi"))
        if number is not None:
            values.append(number)
    return values


def quality_counts(values: Iterable[float]) -> Dict[str, int]:
    counts = {level: 0 for level in QUALITY_LEVELS}
    total = 0
    for value in values:
        counts[classify_rssi(value)] += 1
        total += 1
    counts["total"] = total
    return counts


def describe(values: Iterable[Any]) -> Optional[Dict[str, float]]:
    """Summary statistics of a sample, or None when nothing numeric is left.

    Median and quartiles are order statistics picked by index
    (``sorted[n // 2]``, ``sorted[floor(n * q)]``) and ``std`` is the
    population standard deviation.
    """

    nums = np.array([v for v in (as_number(x) for x in values) if v is not None], dtype=float)
    if nums.size == 0:
        return None
    ordered = np.sort(nums)
    n = ordered.size
    return {
        "count": int(n),
        "mean": float(nums.mean()),
        "min": float(ordered[0]),
        "max": float(ordered[-1]),
        "median": float(ordered[n // 2]),
        "std": float(nums.std()),
        "q1": float(ordered[int(math.floor(n * 0.25))]),
        "q3": float(ordered[int(math.floor(n * 0.75))]),
    }


def rssi_histogram(values: Iterable[float]) -> List[Dict[str, Any]]:
    values = list(values)
    bins = []
    for lo, hi in zip(RSSI_BIN_EDGES[:-1], RSSI_BIN_EDGES[1:]):
        bins.append({
            "range": f"{lo} to {hi}",
            "count": sum(1 for v in values if lo <= v < hi),
            "mid": (lo + hi) / 2,
        })
    return bins


def _has_position(record: Dict[str, Any]) -> bool:
    position = record.get("body_position")
    return isinstance(position, str) and position.strip() != ""


def group_by_position(records: Iterable[Dict[str, Any]], strict: bool = True) -> Dict[str, List[float]]:
    """Collect RSSI values per normalized body position.

    With ``strict`` only negative, non-zero readings are kept; otherwise any
    numeric reading counts.
    """

    groups: Dict[str, List[float]] = {}
    for record in records:
        if not _has_position(record):
            continue
        rssi = record.get("rssi")
        if strict and not valid_rssi(rssi):
            continue
        number = as_number(rssi)
        if number is None:
            continue
        groups.setdefault(normalize_position(record["body_position"]), []).append(number)
    return groups


def position_stats(records: Iterable[Dict[str, Any]], strict: bool = True) -> List[Dict[str, Any]]:
    stats = []
    for position, values in group_by_position(records, strict=strict).items():
        summary = describe(values)
        if summary is None:
            continue
        stats.append({"position": position, "icon": position_icon(position), **summary})
    stats.sort(key=lambda s: position_rank(s["position"]))
    return stats


def quality_by_position(records: List[Dict[str, Any]], stats: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    rows = []
    for stat in stats:
        position = stat["position"]
        values = [
            v for v in (
                as_number(r.get("rssi")) for r in records
                if normalize_position(r.get("body_position")) == position
            )
            if v is not None
        ]
        counts = quality_counts(values)
        rows.append({
            "position": f"{stat['icon']} {position}",
            "excellent": counts["excellent"],
            "good": counts["good"],
            "fair": counts["fair"],
            "poor": counts["poor"],
        })
    return rows


def radar_scores(stats: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Scale per-position statistics onto 0..100 axes for a radar chart."""

    if not stats:
        return []
    max_count = max(s["count"] for s in stats)
    return [
        {
            "position": s["position"],
            "Mean RSSI": max(0.0, s["mean"] + 140),
            "Stability": min(100.0, s["std"] * 10),
            "Count": min(100.0, s["count"] / max_count * 100),
        }
        for s in stats
    ]


def cell_performance(records: Iterable[Dict[str, Any]], limit: int = 20) -> List[Dict[str, Any]]:
    rows = [
        {"cell_id": r.get("cell_id"), "rssi": as_number(r.get("rssi"))}
        for r in records
        if r.get("cell_id") and as_number(r.get("rssi")) is not None
    ]
    if not rows:
        return []
    df = pd.DataFrame(rows)
    df["cell_id"] = df["cell_id"].astype(str)
    per_cell = (
        df.groupby("cell_id", sort=False)["rssi"]
        .agg(mean_rssi="mean", samples="count")
        .reset_index()
        .sort_values("samples", ascending=False, kind="stable")
        .head(limit)
    )
    return [
        {
            "cell_id": row.cell_id[:8] + "...",
            "mean": float(row.mean_rssi),
            "count": int(row.samples),
        }
        for row in per_cell.itertuples(index=False)
    ]


def time_series(records: Iterable[Dict[str, Any]], limit: int = 500) -> List[Dict[str, Any]]:
    timed = [
        r for r in records
        if as_number(r.get("timestamp")) and as_number(r.get("rssi")) is not None
    ]
    timed.sort(key=lambda r: as_number(r.get("timestamp")) or 0.0)
    return [
        {
            "time": idx,
            "rssi": as_number(r.get("rssi")),
            "position": normalize_position(r.get("body_position")),
        }
        for idx, r in enumerate(timed[:limit])
    ]


def summarize_signals(records: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Headline counts for the analysis pages."""

    values = rssi_values(records)
    nonzero = [v for v in values if v]
    return {
        "records_with_rssi": len(values),
        "records_with_location": sum(
            1 for r in records
            if as_number(r.get("x")) is not None and as_number(r.get("y")) is not None
        ),
        "unique_cells": len({r.get("cell_id") for r in records if r.get("cell_id")}),
        "unique_positions": len({
            normalize_position(r.get("body_position")) for r in records if _has_position(r)
        }),
        "mean_rssi": float(np.mean(nonzero)) if nonzero else None,
    }


def priority_counts(towers: Iterable[Dict[str, Any]]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for tower in towers:
        priority = tower.get("priority") or "medium"
        counts[priority] = counts.get(priority, 0) + 1
    return counts


def total_recommended(towers: Iterable[Dict[str, Any]]) -> int:
    total = 0
    for tower in towers:
        number = as_number(tower.get("recommended_towers"))
        total += int(number) if number else 1
    return total
