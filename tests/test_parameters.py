from __future__ import annotations

import pytest

from iotcmd.core.catalog import default_catalog
from iotcmd.core.errors import ParameterResolutionError, ReadOnlyParameterError
from iotcmd.core.parameters import ParameterValueStore, initial_values


def _command(command_id: str):
    return default_catalog().lookup(command_id)


def test_initialize_fills_device_id_and_defaults() -> None:
    store = initial_values(_command("controlDevice"), "dev-123")
    assert store.snapshot() == {
        "devId": "dev-123",
        "elements": "0",
        "attribute": "1",
        "values": "255,0,0",
    }


def test_device_id_is_pinned_across_reinitialization() -> None:
    store = initial_values(_command("getDeviceState"), "dev-123")

    with pytest.raises(ReadOnlyParameterError):
        store.set("devId", "dev-456")

    store.initialize()
    assert store["devId"] == "dev-123"


def test_caller_device_id_replaced_once_active_id_known() -> None:
    store = ParameterValueStore(
        _command("getDeviceState"),
        device_id="dev-123",
        values={"devId": "dev-456"},
    )
    store.initialize()
    assert store["devId"] == "dev-123"
    assert store.is_read_only("devId")


def test_device_id_editable_without_active_device() -> None:
    store = initial_values(_command("getDeviceState"), "")
    assert "devId" not in store
    assert not store.is_read_only("devId")
    store.set("devId", "dev-789")
    store.initialize()
    assert store["devId"] == "dev-789"


def test_reinitialize_keeps_user_edits() -> None:
    store = initial_values(_command("setCountdown"), "dev-1")
    store.set("minutes", "5")
    store.set("elements", "")
    store.initialize()
    assert store["minutes"] == "5"
    assert store["elements"] == "0"


def test_optional_without_default_stays_absent() -> None:
    store = initial_values(_command("bindDeviceSmartCmd"), "dev-1")
    assert "delay" not in store
    assert "attrValue" not in store
    assert store["elm"] == "0"


def test_empty_optional_value_is_not_supplied() -> None:
    store = initial_values(_command("bindDeviceSmartCmd"), "dev-1")
    store.set("delay", "")
    assert store.snapshot()["delay"] == ""
    assert "delay" not in store.supplied()


def test_missing_required_reports_blank_required_slots() -> None:
    store = initial_values(_command("requestConnectWifi"), "dev-1")
    assert [p.name for p in store.missing_required()] == ["ssid", "pwd"]
    store.update({"ssid": "Home", "pwd": "secret"})
    assert store.missing_required() == ()


def test_unknown_parameter_rejected() -> None:
    store = initial_values(_command("rebootDevice"), "dev-1")
    with pytest.raises(ParameterResolutionError) as exc:
        store.set("force", "true")
    assert "Declared: devId" in str(exc.value)


def test_no_parameter_command_initializes_empty() -> None:
    store = initial_values(_command("stopWileDirectBle"), "dev-1")
    assert len(store) == 0
    assert store.supplied() == {}


def test_update_is_all_or_nothing() -> None:
    store = initial_values(_command("connect"), "dev-1")
    with pytest.raises(ParameterResolutionError):
        store.update({"groupAddr": "49154", "force": "true"})
    assert store["groupAddr"] == "49153"

    with pytest.raises(ReadOnlyParameterError):
        store.update({"groupAddr": "49154", "devId": "dev-2"})
    assert store["groupAddr"] == "49153"


def test_whitespace_text_counts_as_supplied() -> None:
    store = initial_values(_command("requestConnectWifi"), "dev-1")
    store.update({"ssid": " ", "pwd": ""})
    assert store.supplied() == {"devId": "dev-1", "ssid": " "}
    assert [p.name for p in store.missing_required()] == ["pwd"]
