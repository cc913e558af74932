from __future__ import annotations

from typing import Any

from iotcmd.api import AckCode, Client, CommandDefinition, TransportOption, format_payload


class FakeDispatcher:
    def dispatch(self, command: CommandDefinition, parameters: dict[str, Any], *, transport: TransportOption) -> Any:
        return 42


def test_public_client_lists_commands() -> None:
    client = Client(dispatcher=FakeDispatcher())
    commands = client.list_commands()
    assert len(commands) == 24
    assert client.get_command("connect").display_name == "Connect (Bind to Group)"
    assert client.commands_by_category()[0][0].label == "Device State & Control"


def test_public_client_prepare_and_execute() -> None:
    client = Client(dispatcher=FakeDispatcher(), device_id="dev-123")
    store = client.prepare("connect", groupAddr="49154")
    assert store["devId"] == "dev-123"
    assert store["groupAddr"] == "49154"

    record = client.execute(store, transport=TransportOption.MQTT)
    assert record.payload == AckCode(42)
    assert format_payload(record.payload) == "ACK Code: 42"
    assert client.history()[-1].id == record.id


def test_public_client_run_and_clear() -> None:
    client = Client(device_id="dev-123")
    record = client.run("rebootDevice")
    assert record.outcome is not None
    assert record.outcome.is_success
    assert len(client.history()) == 1
    client.clear_history()
    assert client.history() == ()
