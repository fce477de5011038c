import json

import pytest
from fastapi.testclient import TestClient

from cellplan.backend.main import app, get_data_dir

COMBINED_CSV = """timestamp,cell_id,rssi,body_position,x,y
1000,11,-105,Hand,0.5,0.5
1001,11,-103,hand,1.0,1.5
1002,12,-95,Bag,2.5,0.1
1003,13,-87,Hips,10,10
1004,13,-88,hips,10.5,11
1005,13,-86,Torso,11,10
1006,14,-60,Torso,4.1,4.1
"""

TOWERS_CSV = """cluster_id,num_cells,avg_signal_dbm,recommended_towers,priority
"north, ridge",4,-101.5,2,high
south,2,-92,,
"""

COVERAGE_CSV = """cell_id,rssi_mean,rssi_std,rssi_min,rssi_max,rssi_count,stability_score,coverage_score,low_quality
11,-104,1,-105,-103,2,0.9,0.1,True
"""

SUMMARY = {
    "total_records": 7,
    "unique_cell_ids": 4,
    "mean_rssi": -89.1,
    "median_rssi": -88,
}


@pytest.fixture
def data_dir(tmp_path):
    (tmp_path / "all_users_combined.csv").write_text(COMBINED_CSV, encoding="utf-8")
    (tmp_path / "all_users_tower_recommendations.csv").write_text(TOWERS_CSV, encoding="utf-8")
    (tmp_path / "all_users_coverage_summary.csv").write_text(COVERAGE_CSV, encoding="utf-8")
    (tmp_path / "summary_statistics.json").write_text(json.dumps(SUMMARY), encoding="utf-8")

    alice = tmp_path / "alice"
    alice.mkdir()
    (alice / "processed_data.csv").write_text(
        "timestamp,cell_id,rssi,signal_strength,body_position\n"
        "1,7,0,-91,Pocket\n"
        "2,7,-80,,Pocket\n",
        encoding="utf-8",
    )
    (alice / "coverage_summary.csv").write_text(COVERAGE_CSV, encoding="utf-8")
    return tmp_path


@pytest.fixture
def empty_dir(tmp_path):
    empty = tmp_path / "empty"
    empty.mkdir()
    return empty


@pytest.fixture
def client(data_dir):
    app.dependency_overrides[get_data_dir] = lambda: data_dir
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def signal_records():
    return [
        {"x": 0.5, "y": 0.5, "rssi": -105.0},
        {"x": 1.0, "y": 1.5, "rssi": -103.0},
        {"x": 2.5, "y": 0.1, "rssi": -95.0},
        {"x": 10.0, "y": 10.0, "rssi": -87.0},
        {"x": 10.5, "y": 11.0, "rssi": -88.0},
        {"x": 11.0, "y": 10.0, "rssi": -86.0},
        {"x": 4.1, "y": 4.1, "rssi": -60.0},
        {"x": None, "y": 3.0, "rssi": -120.0},
    ]
