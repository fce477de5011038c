"""HTTP client for the data server.

Every call swallows transport and decoding errors after logging them, so
pages can render with empty data when the server is down.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from ..config import load_settings

logger = logging.getLogger(__name__)

API_BASE_URL = load_settings().api_base_url


def _get(path: str, timeout: float = 10) -> Any:
    r = requests.get(f"{API_BASE_URL}{path}", timeout=timeout)
    r.raise_for_status()
    return r.json()


def _post(path: str, payload: Dict[str, Any], timeout: float = 30) -> Any:
    r = requests.post(f"{API_BASE_URL}{path}", json=payload, timeout=timeout)
    r.raise_for_status()
    return r.json()


def check_health() -> bool:
    root = API_BASE_URL[: -len("/api")] if API_BASE_URL.endswith("/api") else API_BASE_URL
    try:
        return requests.get(f"{root}/health", timeout=5).status_code == 200
    except requests.RequestException:
        return False


def get_summary() -> Optional[Dict[str, Any]]:
    try:
        return _get("/summary")
    except (requests.RequestException, ValueError) as e:
        logger.error("Error fetching summary: %s", e)
        return None


def _get_list(path: str, what: str) -> List[Dict[str, Any]]:
    try:
        data = _get(path)
    except (requests.RequestException, ValueError) as e:
        logger.error("Error fetching %s: %s", what, e)
        return []
    return data if isinstance(data, list) else []


def get_towers() -> List[Dict[str, Any]]:
    return _get_list("/towers", "towers")


def get_coverage() -> List[Dict[str, Any]]:
    return _get_list("/coverage", "coverage")


def get_data(user: Optional[str] = None) -> List[Dict[str, Any]]:
    path = f"/data/{user}" if user and user != "all" else "/data"
    return _get_list(path, "data")


def get_user_summary(user: str) -> List[Dict[str, Any]]:
    return _get_list(f"/user/{user}/summary", "user summary")


def get_wifi() -> Optional[Dict[str, Any]]:
    try:
        return _get("/wifi")
    except (requests.RequestException, ValueError) as e:
        logger.error("Error fetching WiFi info: %s", e)
        return None


def plan_towers(
    tower_count: int,
    coverage_threshold: float,
    algorithm: str,
    grid_size: float = 2.0,
    user: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    payload = {
        "tower_count": tower_count,
        "coverage_threshold": coverage_threshold,
        "algorithm": algorithm,
        "grid_size": grid_size,
        "user": user,
    }
    try:
        return _post("/plan", payload)
    except (requests.RequestException, ValueError) as e:
        logger.error("Error planning towers: %s", e)
        return None


def local_plan(grid_size: float = 1.0, user: Optional[str] = None) -> Optional[Dict[str, Any]]:
    try:
        return _post("/local_plan", {"grid_size": grid_size, "user": user})
    except (requests.RequestException, ValueError) as e:
        logger.error("Error fetching local plan: %s", e)
        return None
