"""Random-walk indoor signal mapper.

No device sensors are read: positions follow a jittered heading and RSSI is
drawn uniformly around a fixed baseline.
"""

from __future__ import annotations

import json
import math
import time
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

import numpy as np

from .coverage import SignalPoint, bin_points
from .signal_stats import quality_counts

STEP_LENGTH = 0.1
TURN_JITTER = 0.3
BASE_RSSI = -85.0
RSSI_SPREAD = 10.0
INDOOR_GRID_SIZE = 0.5


@dataclass
class Measurement:
    id: str
    x: float
    y: float
    rssi: float
    timestamp: int
    room: Optional[str] = None


class IndoorWalker:
    def __init__(self, seed: Optional[int] = None):
        self.rng = np.random.default_rng(seed)
        self.reset()

    def reset(self) -> None:
        self.x = 0.0
        self.y = 0.0
        self.angle = 0.0
        self._counter = 0

    def step(self, room: Optional[str] = None) -> Measurement:
        self.angle += (self.rng.random() - 0.5) * TURN_JITTER
        self.x += math.cos(self.angle) * STEP_LENGTH
        self.y += math.sin(self.angle) * STEP_LENGTH
        rssi = BASE_RSSI + (self.rng.random() - 0.5) * RSSI_SPREAD

        now_ms = int(time.time() * 1000)
        self._counter += 1
        return Measurement(
            id=f"{now_ms}-{self._counter}",
            x=self.x,
            y=self.y,
            rssi=float(rssi),
            timestamp=now_ms,
            room=room or None,
        )

    def walk(self, steps: int, room: Optional[str] = None) -> List[Measurement]:
        return [self.step(room) for _ in range(steps)]


def indoor_stats(measurements: List[Measurement]) -> Dict[str, Any]:
    counts = quality_counts(m.rssi for m in measurements)
    avg = sum(m.rssi for m in measurements) / len(measurements) if measurements else 0.0
    return {
        "total": counts["total"],
        "excellent": counts["excellent"],
        "good": counts["good"],
        "fair": counts["fair"],
        "poor": counts["poor"],
        "avg_rssi": avg,
    }


def indoor_grid(measurements: List[Measurement], grid_size: float = INDOOR_GRID_SIZE) -> List[Dict[str, Any]]:
    points = [SignalPoint(m.x, m.y, m.rssi) for m in measurements]
    return [
        {"x": cell.x, "y": cell.y, "avg_rssi": cell.avg_rssi, "count": cell.count}
        for cell in bin_points(points, grid_size)
    ]


def rooms(measurements: List[Measurement]) -> List[str]:
    seen: List[str] = []
    for m in measurements:
        if m.room and m.room not in seen:
            seen.append(m.room)
    return seen


def export_session(measurements: List[Measurement]) -> str:
    payload = {
        "measurements": [asdict(m) for m in measurements],
        "stats": indoor_stats(measurements),
        "timestamp": int(time.time() * 1000),
    }
    return json.dumps(payload, indent=2)
