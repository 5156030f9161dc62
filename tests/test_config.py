from __future__ import annotations

from pathlib import Path

import pytest

from elangdf.config import DfConfig
from elangdf.exceptions import DfConfigError


def test_defaults() -> None:
    config = DfConfig()

    assert config.base_url == "http://192.168.17.17:8087"
    assert config.poll_interval == 1.0
    assert config.accuracy_threshold == 100.0
    assert config.ip_fallback_accuracy == 5000.0
    assert config.settings_path.name == "elangdf-config.json"


def test_base_url_trailing_slash_is_stripped() -> None:
    assert DfConfig(base_url="http://10.0.0.2:8087/").base_url == "http://10.0.0.2:8087"


def test_invalid_poll_interval_rejected() -> None:
    with pytest.raises(DfConfigError):
        DfConfig(poll_interval=0)


def test_from_env_reads_typed_values(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("ELANGDF_BASE_URL", "http://10.1.1.1:9000")
    monkeypatch.setenv("ELANGDF_POLL_INTERVAL", "0.5")
    monkeypatch.setenv("ELANGDF_GPSD_PORT", "3000")
    monkeypatch.setenv("ELANGDF_GPSD_ENABLED", "no")
    monkeypatch.setenv("ELANGDF_SETTINGS_DIR", str(tmp_path))

    config = DfConfig.from_env()

    assert config.base_url == "http://10.1.1.1:9000"
    assert config.poll_interval == 0.5
    assert config.gpsd_port == 3000
    assert config.gpsd_enabled is False
    assert config.settings_path == tmp_path / "elangdf-config.json"


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ELANGDF_POLL_INTERVAL", "0.5")
    monkeypatch.setenv("ELANGDF_GPSD_ENABLED", "no")

    config = DfConfig.from_env(poll_interval=2.0, gpsd_enabled=True)

    assert config.poll_interval == 2.0
    assert config.gpsd_enabled is True


def test_from_env_bad_number(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ELANGDF_UDP_PORT", "eighty")

    with pytest.raises(DfConfigError):
        DfConfig.from_env()
