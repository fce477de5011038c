from pathlib import Path

from cellplan.config import DEFAULT_DATA_DIR, load_settings


def test_defaults():
    settings = load_settings({})
    assert settings.data_dir == DEFAULT_DATA_DIR
    assert settings.api_base_url == "http://localhost:8000/api"
    assert settings.row_limit == 10000
    assert settings.port == 8000
    assert settings.wifi_probe is False
    assert settings.log_level == "INFO"


def test_overrides_and_malformed_numbers():
    settings = load_settings({
        "CELLPLAN_DATA_DIR": "/srv/results",
        "CELLPLAN_API_BASE_URL": "http://api:9000/api/",
        "CELLPLAN_ROW_LIMIT": "lots",
        "CELLPLAN_PORT": "9000",
        "CELLPLAN_WIFI_PROBE": "yes",
        "CELLPLAN_LOG_LEVEL": "debug",
    })
    assert settings.data_dir == Path("/srv/results")
    assert settings.api_base_url == "http://api:9000/api"
    assert settings.row_limit == 10000
    assert settings.port == 9000
    assert settings.wifi_probe is True
    assert settings.log_level == "DEBUG"
