import pytest

from cellplan.analysis.coverage import (
    CoverageGap,
    SignalPoint,
    bin_points,
    coverage_grid,
    coverage_stats,
    find_coverage_gaps,
    gap_priority,
    local_coverage_stats,
    location_points,
    network_points,
    recommend_towers,
    signal_distribution,
    weak_areas,
)


@pytest.fixture
def gaps(signal_records):
    return find_coverage_gaps(location_points(signal_records))


def test_location_points_skips_incomplete_and_positive(signal_records):
    records = signal_records + [{"x": 1, "y": 1, "rssi": 5}, {"x": "2", "y": 2, "rssi": "-70"}]
    points = location_points(records)
    assert len(points) == 8
    assert points[-1] == SignalPoint(2.0, 2.0, -70.0)


def test_bin_points_uses_floor_of_cell():
    cells = bin_points([SignalPoint(-0.5, 3.9, -80), SignalPoint(-1.9, 2.1, -90)], 2.0)
    assert len(cells) == 1
    assert (cells[0].x, cells[0].y) == (-2.0, 2.0)
    assert cells[0].avg_rssi == -85
    assert cells[0].count == 2


def test_bin_points_rejects_non_positive_grid():
    with pytest.raises(ValueError):
        bin_points([SignalPoint(0, 0, -80)], 0)


def test_gap_priority_thresholds():
    assert gap_priority(-100.5) == "high"
    assert gap_priority(-100) == "medium"
    assert gap_priority(-90) == "low"


def test_find_coverage_gaps_sorted_by_count(gaps):
    assert [(g.x, g.y) for g in gaps] == [(10.0, 10.0), (0.0, 0.0), (2.0, 0.0)]
    assert [g.count for g in gaps] == [3, 2, 1]
    assert [g.priority for g in gaps] == ["low", "high", "medium"]
    assert gaps[1].avg_rssi == -104


def test_find_coverage_gaps_threshold_is_strict():
    points = [SignalPoint(0, 0, -85)]
    assert find_coverage_gaps(points, threshold=-85) == []
    assert len(find_coverage_gaps(points, threshold=-84)) == 1


def test_coverage_greedy_skips_covered_gaps(gaps):
    towers = recommend_towers(gaps, tower_count=5, algorithm="coverage")
    assert [(t.id, t.x, t.y) for t in towers] == [(1, 0.0, 0.0), (2, 10.0, 10.0)]
    assert [t.priority for t in towers] == ["high", "low"]
    assert [t.estimated_coverage for t in towers] == [6, 9]


def test_coverage_greedy_respects_tower_count(gaps):
    towers = recommend_towers(gaps, tower_count=1)
    assert len(towers) == 1
    assert towers[0].priority == "high"


def test_density_picks_busiest_gaps(gaps):
    towers = recommend_towers(gaps, tower_count=2, algorithm="density")
    assert [(t.x, t.y) for t in towers] == [(10.0, 10.0), (0.0, 0.0)]
    assert [t.estimated_coverage for t in towers] == [6, 4]


def test_kmeans_converges_on_gap_clusters(gaps):
    towers = recommend_towers(gaps, tower_count=2, algorithm="kmeans")
    assert len(towers) == 2
    assert towers[0].x == pytest.approx(1.0)
    assert towers[0].y == pytest.approx(0.0)
    assert towers[1].x == pytest.approx(10.0)
    assert towers[1].y == pytest.approx(10.0)
    # No gap lies strictly within one unit of (1, 0) on both axes.
    assert towers[0].priority == "medium"
    assert towers[1].priority == "low"
    assert towers[0].estimated_coverage == 20
    assert towers[1].estimated_coverage == 10


def test_kmeans_empty_cluster_keeps_its_seed():
    gaps = [
        CoverageGap(x=0.0, y=0.0, avg_rssi=-110.0, count=5, priority="high"),
        CoverageGap(x=0.0, y=0.0, avg_rssi=-105.0, count=3, priority="high"),
    ]
    towers = recommend_towers(gaps, tower_count=2, algorithm="kmeans")
    # Both gaps tie between the identical seeds and join the first cluster.
    assert [(t.x, t.y) for t in towers] == [(0.0, 0.0), (0.0, 0.0)]
    assert [t.priority for t in towers] == ["high", "high"]


def test_kmeans_tie_goes_to_first_centroid():
    gaps = [
        CoverageGap(x=0.0, y=0.0, avg_rssi=-110.0, count=4, priority="high"),
        CoverageGap(x=4.0, y=0.0, avg_rssi=-105.0, count=3, priority="high"),
        CoverageGap(x=2.0, y=0.0, avg_rssi=-86.0, count=2, priority="low"),
    ]
    towers = recommend_towers(gaps, tower_count=2, algorithm="kmeans")
    # The midpoint gap joins (0, 0), pulling that centroid to (1, 0).
    assert towers[0].x == pytest.approx(1.0)
    assert towers[0].y == pytest.approx(0.0)
    assert towers[1].x == pytest.approx(4.0)
    assert towers[1].y == pytest.approx(0.0)
    assert [t.priority for t in towers] == ["medium", "high"]
    assert [t.estimated_coverage for t in towers] == [30, 30]


def test_kmeans_never_exceeds_gap_count(gaps):
    towers = recommend_towers(gaps, tower_count=10, algorithm="kmeans")
    assert [t.id for t in towers] == [1, 2, 3]


def test_recommend_towers_without_gaps():
    assert recommend_towers([], 5, "kmeans") == []


def test_recommend_towers_unknown_algorithm(gaps):
    with pytest.raises(ValueError):
        recommend_towers(gaps, 3, "genetic")


def test_coverage_stats(signal_records, gaps):
    towers = recommend_towers(gaps, 5, "coverage")
    stats = coverage_stats(signal_records, towers, threshold=-85)
    assert stats["total_points"] == 7
    assert stats["weak_points"] == 6
    assert stats["weak_percentage"] == 85.7
    assert stats["current_coverage"] == 14.3
    assert stats["estimated_improvement"] == 100.0
    assert stats["projected_coverage"] == 100.0


def test_coverage_stats_without_points():
    stats = coverage_stats([], [], threshold=-85)
    assert stats["total_points"] == 0
    assert stats["current_coverage"] == 0.0
    assert stats["projected_coverage"] == 0.0


def test_network_points_prefers_real_coordinates(signal_records):
    records = signal_records + [{"x": 1, "y": 1, "rssi": -150}]
    points = network_points(records)
    assert len(points) == 7


def test_network_points_synthesizes_layout_from_cells():
    records = [
        {"cell_id": "A", "rssi": -80, "timestamp": 1500},
        {"cell_id": "B", "rssi": -90},
        {"cell_id": "A", "rssi": -150},
        {"rssi": -70},
    ]
    points = network_points(records)
    assert len(points) == 2
    assert points[0].x == pytest.approx(-5.0)
    assert points[0].y == pytest.approx(-3.5)
    assert points[1].x == pytest.approx(-1.0)
    assert points[1].y == pytest.approx(-3.3)


def test_network_points_groups_blank_cell_ids():
    records = [
        {"cell_id": None, "rssi": -80, "timestamp": 1500},
        {"cell_id": None, "rssi": -90},
    ]
    points = network_points(records)
    assert len(points) == 2
    assert points[0].x == pytest.approx(-2.5)
    assert points[0].y == pytest.approx(-3.5)
    assert points[1].x == pytest.approx(-3.5)
    assert points[1].y == pytest.approx(-3.3)


def test_local_coverage_summary():
    points = [SignalPoint(0, 0, -60), SignalPoint(0.2, 0.2, -80), SignalPoint(3, 3, -110), SignalPoint(3.5, 3, -95)]
    stats = local_coverage_stats(points)
    assert stats["total"] == 4
    assert (stats["excellent"], stats["good"], stats["fair"], stats["poor"]) == (1, 1, 1, 1)
    assert stats["coverage_percent"] == 50.0
    assert stats["avg_rssi"] == pytest.approx(-86.25)

    dist = signal_distribution(points)
    assert [b["count"] for b in dist] == [0, 1, 1, 1, 1]

    grid = coverage_grid(points, 1.0)
    areas = weak_areas(grid)
    assert [a["avg_rssi"] for a in areas] == [-102.5]
    assert areas[0]["quality"] == "poor"
    assert areas[0]["id"] == 1


def test_local_coverage_stats_empty():
    assert local_coverage_stats([])["total"] == 0
