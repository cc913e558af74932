from __future__ import annotations

from pathlib import Path

import pytest

from iotcmd.core.errors import SettingsError
from iotcmd.core.model import TransportOption
from iotcmd.core.settings import load_settings


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    monkeypatch.delenv("IOTCMD_DEVICE_ID", raising=False)
    monkeypatch.delenv("IOTCMD_TRANSPORT", raising=False)
    return tmp_path


def _write_settings(tmp_path: Path, content: str) -> None:
    path = tmp_path / "cfg" / "iotcmd" / "config.yaml"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_defaults_without_file() -> None:
    settings = load_settings()
    assert settings.device_id == ""
    assert settings.transport is TransportOption.AUTO
    assert settings.log_level == "WARNING"


def test_file_values(tmp_path: Path) -> None:
    _write_settings(tmp_path, 'device_id: "dev-file"\ntransport: MQTT\nlog_level: DEBUG\n')
    settings = load_settings()
    assert settings.device_id == "dev-file"
    assert settings.transport is TransportOption.MQTT
    assert settings.log_level == "DEBUG"


def test_environment_overrides_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _write_settings(tmp_path, 'device_id: "dev-file"\ntransport: MQTT\n')
    monkeypatch.setenv("IOTCMD_DEVICE_ID", "dev-env")
    monkeypatch.setenv("IOTCMD_TRANSPORT", "BLE")
    settings = load_settings()
    assert settings.device_id == "dev-env"
    assert settings.transport is TransportOption.BLE


def test_unknown_key_rejected(tmp_path: Path) -> None:
    _write_settings(tmp_path, "api_key: secret\n")
    with pytest.raises(SettingsError):
        load_settings()


def test_unknown_env_transport_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("IOTCMD_TRANSPORT", "Zigbee")
    with pytest.raises(SettingsError):
        load_settings()


def test_duplicate_keys_rejected(tmp_path: Path) -> None:
    _write_settings(tmp_path, "transport: BLE\ntransport: MQTT\n")
    with pytest.raises(SettingsError):
        load_settings()


def test_empty_file_uses_defaults(tmp_path: Path) -> None:
    _write_settings(tmp_path, "")
    settings = load_settings()
    assert settings.device_id == ""
    assert settings.transport is TransportOption.AUTO


def test_non_mapping_file_reports_settings(tmp_path: Path) -> None:
    _write_settings(tmp_path, "- BLE\n")
    with pytest.raises(SettingsError) as exc:
        load_settings()
    assert str(exc.value).startswith("Settings file ")
    assert "catalog" not in str(exc.value)
