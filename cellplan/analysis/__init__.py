"""Pure analysis helpers shared by the data server and the dashboard."""

from __future__ import annotations

__all__ = [
    "ALGORITHMS",
    "CoverageGap",
    "GridCell",
    "SignalPoint",
    "TowerSuggestion",
    "coverage_stats",
    "find_coverage_gaps",
    "recommend_towers",
    "normalize_position",
    "classify_rssi",
    "describe",
]

from .coverage import (
    ALGORITHMS,
    CoverageGap,
    GridCell,
    SignalPoint,
    TowerSuggestion,
    coverage_stats,
    find_coverage_gaps,
    recommend_towers,
)
from .positions import normalize_position
from .signal_stats import classify_rssi, describe
