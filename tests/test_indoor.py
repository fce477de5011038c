import json
import math

import pytest

from cellplan.analysis import indoor


def test_walker_steps_are_fixed_length():
    walker = indoor.IndoorWalker(seed=7)
    samples = walker.walk(50)
    prev = (0.0, 0.0)
    for m in samples:
        assert math.hypot(m.x - prev[0], m.y - prev[1]) == pytest.approx(indoor.STEP_LENGTH)
        assert -90 <= m.rssi <= -80
        prev = (m.x, m.y)
    assert len({m.id for m in samples}) == 50


def test_walker_is_reproducible_with_seed():
    a = [m.rssi for m in indoor.IndoorWalker(seed=1).walk(5)]
    b = [m.rssi for m in indoor.IndoorWalker(seed=1).walk(5)]
    assert a == b


def test_reset_returns_to_origin():
    walker = indoor.IndoorWalker(seed=3)
    walker.walk(10)
    walker.reset()
    assert (walker.x, walker.y, walker.angle) == (0.0, 0.0, 0.0)


def test_stats_grid_and_rooms():
    measurements = [
        indoor.Measurement("1", 0.1, 0.1, -60, 0, "Kitchen"),
        indoor.Measurement("2", 0.2, 0.3, -80, 1, "Kitchen"),
        indoor.Measurement("3", 1.2, 0.1, -101, 2, "Hall"),
        indoor.Measurement("4", 1.3, 0.2, -90, 3, None),
    ]
    stats = indoor.indoor_stats(measurements)
    assert (stats["excellent"], stats["good"], stats["fair"], stats["poor"]) == (1, 1, 1, 1)
    assert stats["avg_rssi"] == pytest.approx(-82.75)

    grid = indoor.indoor_grid(measurements)
    assert [(c["x"], c["y"], c["count"]) for c in grid] == [(0.0, 0.0, 2), (1.0, 0.0, 2)]
    assert grid[0]["avg_rssi"] == -70

    assert indoor.rooms(measurements) == ["Kitchen", "Hall"]

    exported = json.loads(indoor.export_session(measurements))
    assert len(exported["measurements"]) == 4
    assert exported["stats"]["total"] == 4


def test_empty_stats():
    assert indoor.indoor_stats([])["avg_rssi"] == 0.0
    assert indoor.indoor_grid([]) == []
