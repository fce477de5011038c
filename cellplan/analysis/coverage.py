"""Coverage-gap detection and tower placement suggestions.

Signal samples with coordinates are binned onto a square grid, cells whose
average RSSI falls below a threshold become coverage gaps, and one of three
strategies turns the gaps into suggested tower positions:

- ``coverage``: greedy, highest priority first, skipping gaps already within
  reach of a placed tower;
- ``density``: the gaps with the most samples;
- ``kmeans``: a short, fixed number of Lloyd iterations over gap positions.

The results are visualization aids and make no optimality claims.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

import numpy as np

from .signal_stats import as_number, classify_rssi

ALGORITHMS = ("coverage", "density", "kmeans")

PRIORITY_RANK = {"high": 3, "medium": 2, "low": 1}

DEFAULT_THRESHOLD = -85.0
DEFAULT_GRID_SIZE = 2.0
DEFAULT_TOWER_COUNT = 5

COVERAGE_RADIUS = 4.0
KMEANS_RADIUS = 5.0
KMEANS_ITERATIONS = 10

LOCAL_GRID_SIZE = 1.0
LOCAL_POINT_LIMIT = 5000

SIGNAL_BINS = [
    ("-30 to -50", -50, -30),
    ("-50 to -70", -70, -50),
    ("-70 to -85", -85, -70),
    ("-85 to -100", -100, -85),
    ("-100 to -120", -120, -100),
]


@dataclass
class SignalPoint:
    x: float
    y: float
    rssi: float
    timestamp: Optional[float] = None


@dataclass
class GridCell:
    x: float
    y: float
    rssis: List[float] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.rssis)

    @property
    def avg_rssi(self) -> float:
        return sum(self.rssis) / len(self.rssis)

    @property
    def quality(self) -> str:
        return classify_rssi(self.avg_rssi)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "avg_rssi": self.avg_rssi,
            "count": self.count,
            "quality": self.quality,
        }


@dataclass
class CoverageGap:
    x: float
    y: float
    avg_rssi: float
    count: int
    priority: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class TowerSuggestion:
    id: int
    x: float
    y: float
    priority: str
    estimated_coverage: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def gap_priority(avg_rssi: float) -> str:
    if avg_rssi < -100:
        return "high"
    if avg_rssi < -90:
        return "medium"
    return "low"


def location_points(records: Iterable[Dict[str, Any]]) -> List[SignalPoint]:
    """Records carrying x, y and a negative RSSI, as points."""

    points = []
    for record in records:
        x = as_number(record.get("x"))
        y = as_number(record.get("y"))
        rssi = as_number(record.get("rssi"))
        if x is None or y is None or rssi is None or rssi >= 0:
            continue
        points.append(SignalPoint(x, y, rssi, as_number(record.get("timestamp"))))
    return points


def bin_points(points: Iterable[SignalPoint], grid_size: float) -> List[GridCell]:
    """Group points by the lower-left corner of their grid cell.

    Cells come back in first-seen order.
    """

    if grid_size <= 0:
        raise ValueError(f"grid_size must be positive, got {grid_size}")
    grid: Dict[Tuple[float, float], GridCell] = {}
    for point in points:
        gx = math.floor(point.x / grid_size) * grid_size
        gy = math.floor(point.y / grid_size) * grid_size
        cell = grid.get((gx, gy))
        if cell is None:
            cell = grid[(gx, gy)] = GridCell(gx, gy)
        cell.rssis.append(point.rssi)
    return list(grid.values())


def find_coverage_gaps(
    points: Iterable[SignalPoint],
    threshold: float = DEFAULT_THRESHOLD,
    grid_size: float = DEFAULT_GRID_SIZE,
) -> List[CoverageGap]:
    gaps = []
    for cell in bin_points(points, grid_size):
        avg = cell.avg_rssi
        if avg < threshold:
            gaps.append(CoverageGap(cell.x, cell.y, avg, cell.count, gap_priority(avg)))
    gaps.sort(key=lambda g: g.count, reverse=True)
    return gaps


def _by_priority(gaps: List[CoverageGap]) -> List[CoverageGap]:
    return sorted(gaps, key=lambda g: PRIORITY_RANK[g.priority], reverse=True)


def _distance(ax: float, ay: float, bx: float, by: float) -> float:
    return math.hypot(ax - bx, ay - by)


def _coverage_greedy(gaps: List[CoverageGap], tower_count: int) -> List[TowerSuggestion]:
    towers: List[TowerSuggestion] = []
    covered = set()
    for gap in _by_priority(gaps)[:tower_count]:
        if (gap.x, gap.y) in covered:
            continue
        towers.append(TowerSuggestion(
            id=len(towers) + 1,
            x=gap.x,
            y=gap.y,
            priority=gap.priority,
            estimated_coverage=min(100, gap.count * 3),
        ))
        for other in gaps:
            if _distance(other.x, other.y, gap.x, gap.y) < COVERAGE_RADIUS:
                covered.add((other.x, other.y))
    return towers


def _density(gaps: List[CoverageGap], tower_count: int) -> List[TowerSuggestion]:
    densest = sorted(gaps, key=lambda g: g.count, reverse=True)[:tower_count]
    return [
        TowerSuggestion(
            id=idx + 1,
            x=gap.x,
            y=gap.y,
            priority=gap.priority,
            estimated_coverage=min(100, gap.count * 2),
        )
        for idx, gap in enumerate(densest)
    ]


def _kmeans(gaps: List[CoverageGap], tower_count: int) -> List[TowerSuggestion]:
    k = min(tower_count, len(gaps))
    seeds = _by_priority(gaps)[:k]
    centroids = np.array([[g.x, g.y] for g in seeds], dtype=float)
    coords = np.array([[g.x, g.y] for g in gaps], dtype=float)

    for _ in range(KMEANS_ITERATIONS):
        dists = np.hypot(
            coords[:, None, 0] - centroids[None, :, 0],
            coords[:, None, 1] - centroids[None, :, 1],
        )
        # argmin keeps the first centroid on ties
        labels = np.argmin(dists, axis=1)
        for idx in range(k):
            members = coords[labels == idx]
            if len(members):
                centroids[idx] = members.mean(axis=0)

    towers = []
    for idx, (cx, cy) in enumerate(centroids):
        nearby = next(
            (g for g in gaps if abs(g.x - cx) < 1 and abs(g.y - cy) < 1),
            None,
        )
        in_reach = sum(1 for g in gaps if _distance(g.x, g.y, cx, cy) < KMEANS_RADIUS)
        towers.append(TowerSuggestion(
            id=idx + 1,
            x=float(cx),
            y=float(cy),
            priority=nearby.priority if nearby else "medium",
            estimated_coverage=min(100, in_reach * 10),
        ))
    return towers


def recommend_towers(
    gaps: List[CoverageGap],
    tower_count: int = DEFAULT_TOWER_COUNT,
    algorithm: str = "coverage",
) -> List[TowerSuggestion]:
    """Suggest up to ``tower_count`` tower positions for the given gaps.

    ``gaps`` is expected in the order :func:`find_coverage_gaps` returns
    them (most samples first).
    """

    if algorithm not in ALGORITHMS:
        raise ValueError(f"Unknown placement algorithm: {algorithm!r}")
    if not gaps or tower_count <= 0:
        return []
    if algorithm == "kmeans":
        return _kmeans(gaps, tower_count)
    if algorithm == "density":
        return _density(gaps, tower_count)
    return _coverage_greedy(gaps, tower_count)


def coverage_stats(
    records: Iterable[Dict[str, Any]],
    towers: Iterable[TowerSuggestion],
    threshold: float = DEFAULT_THRESHOLD,
) -> Dict[str, Any]:
    """Current and projected coverage given a set of suggested towers."""

    total = 0
    weak = 0
    for record in records:
        x = as_number(record.get("x"))
        y = as_number(record.get("y"))
        rssi = as_number(record.get("rssi"))
        if x is None or y is None or rssi is None:
            continue
        total += 1
        if rssi < threshold:
            weak += 1

    estimated = sum(t.estimated_coverage for t in towers)
    improvement = min(100.0, estimated / max(1, weak) * 100)
    if total:
        weak_pct = weak / total * 100
        current = (total - weak) / total * 100
        projected = min(100.0, (total - weak + estimated) / total * 100)
    else:
        weak_pct = current = projected = 0.0
    return {
        "total_points": total,
        "weak_points": weak,
        "weak_percentage": round(weak_pct, 1),
        "estimated_improvement": round(improvement, 1),
        "current_coverage": round(current, 1),
        "projected_coverage": round(projected, 1),
    }


# ---------- Local planner ----------

def _synthesize_points(records: List[Dict[str, Any]]) -> List[SignalPoint]:
    """Lay cells out on a grid when the data has no coordinates.

    Each cell id gets a slot 5 units apart; rows with a blank cell id share
    one slot. Samples are jittered within the slot by their timestamp and row
    index.
    """

    valid = []
    for record in records:
        rssi = as_number(record.get("rssi"))
        if rssi is None or not (-140 < rssi < 0) or "cell_id" not in record:
            continue
        valid.append((record, rssi))
    if not valid:
        return []

    groups: List[Any] = []
    seen = set()
    for record, _ in valid:
        cell_id = record["cell_id"]
        if cell_id not in seen:
            seen.add(cell_id)
            groups.append(cell_id)

    n_groups = len(groups)
    cols = math.ceil(math.sqrt(n_groups))
    positions = {}
    for idx, cell_id in enumerate(groups):
        x = (idx % cols) * 5 - cols * 2.5
        y = (idx // cols) * 5 - (n_groups // cols) * 2.5
        positions[cell_id] = (x, y)

    points = []
    for i, (record, rssi) in enumerate(valid):
        px, py = positions[record["cell_id"]]
        timestamp = as_number(record.get("timestamp"))
        time_var = (timestamp % 1000) / 1000 if timestamp else 0.0
        points.append(SignalPoint(
            x=px + (time_var - 0.5) * 2,
            y=py + ((i % 10) / 10 - 0.5) * 2,
            rssi=rssi,
            timestamp=timestamp,
        ))
    return points


def network_points(records: List[Dict[str, Any]], limit: int = LOCAL_POINT_LIMIT) -> List[SignalPoint]:
    points = [p for p in location_points(records) if p.rssi > -140]
    if not points:
        points = _synthesize_points(records)
    return points[:limit]


def coverage_grid(points: Iterable[SignalPoint], grid_size: float = LOCAL_GRID_SIZE) -> List[GridCell]:
    return bin_points(points, grid_size)


def local_coverage_stats(points: List[SignalPoint]) -> Dict[str, Any]:
    if not points:
        return {
            "total": 0,
            "excellent": 0,
            "good": 0,
            "fair": 0,
            "poor": 0,
            "avg_rssi": 0.0,
            "coverage_percent": 0.0,
        }
    counts = {"excellent": 0, "good": 0, "fair": 0, "poor": 0}
    for point in points:
        counts[classify_rssi(point.rssi)] += 1
    n = len(points)
    return {
        "total": n,
        **counts,
        "avg_rssi": sum(p.rssi for p in points) / n,
        "coverage_percent": (counts["excellent"] + counts["good"]) / n * 100,
    }


def signal_distribution(points: List[SignalPoint]) -> List[Dict[str, Any]]:
    return [
        {
            "range": label,
            "min": lo,
            "max": hi,
            "count": sum(1 for p in points if lo <= p.rssi < hi),
        }
        for label, lo, hi in SIGNAL_BINS
    ]


def weak_areas(grid: List[GridCell], limit: int = 10) -> List[Dict[str, Any]]:
    weak = sorted(
        (cell for cell in grid if cell.quality in ("poor", "fair")),
        key=lambda cell: cell.avg_rssi,
    )
    return [
        {
            "id": idx + 1,
            "x": round(cell.x, 2),
            "y": round(cell.y, 2),
            "avg_rssi": round(cell.avg_rssi, 2),
            "count": cell.count,
            "quality": cell.quality,
        }
        for idx, cell in enumerate(weak[:limit])
    ]
