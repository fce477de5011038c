"""Current WiFi connection details.

By default a fixed demo record is served. When probing is enabled the macOS
``airport -I`` utility is queried and its output parsed; any failure falls
back to the demo record.
"""

from __future__ import annotations

import logging
import re
import subprocess
from typing import Any, Dict

logger = logging.getLogger(__name__)

AIRPORT_CMD = [
    "/System/Library/PrivateFrameworks/Apple80211.framework/Versions/Current/Resources/airport",
    "-I",
]

_FIXED_FIELDS = {
    "security": "WPA2/WPA3",
    "speed": "150 Mbps",
    "ip_address": "192.168.1.100",
    "subnet": "255.255.255.0",
    "gateway": "192.168.1.1",
}

DEMO_WIFI: Dict[str, Any] = {
    "ssid": "Your WiFi Network",
    "bssid": "XX:XX:XX:XX:XX:XX",
    "signal_strength": -65,
    "frequency": 2400,
    "channel": 6,
    "quality": "good",
    **_FIXED_FIELDS,
}


def classify_wifi_rssi(rssi: float) -> str:
    if rssi > -50:
        return "excellent"
    if rssi > -70:
        return "good"
    if rssi > -85:
        return "fair"
    return "poor"


def parse_airport_output(text: str) -> Dict[str, Any]:
    ssid = re.search(r"(?m)^\s*SSID: (.+)$", text)
    rssi = re.search(r"agrCtlRSSI: (-?\d+)", text)
    bssid = re.search(r"BSSID: ([a-fA-F0-9:]+)", text)
    channel = re.search(r"channel: (\d+)", text)

    signal = int(rssi.group(1)) if rssi else -70
    channel_no = int(channel.group(1)) if channel else 0
    return {
        "ssid": ssid.group(1).strip() if ssid else "Unknown",
        "bssid": bssid.group(1) if bssid else "N/A",
        "signal_strength": signal,
        "frequency": 2400 if channel_no <= 14 else 5000,
        "channel": channel_no,
        "quality": classify_wifi_rssi(signal),
        **_FIXED_FIELDS,
    }


def get_wifi_info(probe: bool = False, timeout: float = 5.0) -> Dict[str, Any]:
    if not probe:
        return dict(DEMO_WIFI)
    try:
        result = subprocess.run(
            AIRPORT_CMD, capture_output=True, text=True, timeout=timeout, check=True
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.warning("WiFi probe failed, serving demo data: %s", e)
        return dict(DEMO_WIFI)
    return parse_airport_output(result.stdout)
