import subprocess

from cellplan.backend import wifi

AIRPORT_SAMPLE = """\
     agrCtlRSSI: -48
     agrExtRSSI: 0
          state: running
        op mode: station
     lastTxRate: 867
        maxRate: 867
          BSSID: a1:b2:c3:d4:e5:f6
           SSID: HomeNet 5G
            MCS: 9
        channel: 36,80
"""


def test_classify_wifi_rssi():
    assert wifi.classify_wifi_rssi(-49) == "excellent"
    assert wifi.classify_wifi_rssi(-50) == "good"
    assert wifi.classify_wifi_rssi(-70) == "fair"
    assert wifi.classify_wifi_rssi(-85) == "poor"


def test_parse_airport_output():
    info = wifi.parse_airport_output(AIRPORT_SAMPLE)
    assert info["ssid"] == "HomeNet 5G"
    assert info["bssid"] == "a1:b2:c3:d4:e5:f6"
    assert info["signal_strength"] == -48
    assert info["channel"] == 36
    assert info["frequency"] == 5000
    assert info["quality"] == "excellent"


def test_parse_airport_output_defaults():
    info = wifi.parse_airport_output("")
    assert info["ssid"] == "Unknown"
    assert info["bssid"] == "N/A"
    assert info["signal_strength"] == -70
    assert info["frequency"] == 2400
    assert info["quality"] == "fair"


def test_demo_record_without_probe():
    info = wifi.get_wifi_info()
    assert info == wifi.DEMO_WIFI
    info["ssid"] = "changed"
    assert wifi.DEMO_WIFI["ssid"] == "Your WiFi Network"


def test_probe_failure_falls_back_to_demo(monkeypatch):
    def missing(*args, **kwargs):
        raise FileNotFoundError("airport")

    monkeypatch.setattr(wifi.subprocess, "run", missing)
    assert wifi.get_wifi_info(probe=True) == wifi.DEMO_WIFI


def test_probe_parses_command_output(monkeypatch):
    def fake_run(cmd, **kwargs):
        return subprocess.CompletedProcess(cmd, 0, stdout=AIRPORT_SAMPLE, stderr="")

    monkeypatch.setattr(wifi.subprocess, "run", fake_run)
    assert wifi.get_wifi_info(probe=True)["ssid"] == "HomeNet 5G"
