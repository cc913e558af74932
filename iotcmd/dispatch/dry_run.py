"""Local dispatcher that records calls and answers with canned results."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from iotcmd.core.model import CommandDefinition, ConnectivityInfo, TransportOption
from iotcmd.core.payload import LogBlocks

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispatchedCall:
    command_id: str
    parameters: dict[str, Any]
    transport: TransportOption


@dataclass
class DryRunDispatcher:
    """Answers every command without touching a device.

    State queries echo the target, WiFi scans find nothing, log queries return
    no blocks, and commands without a completion callback return ``None``.
    """

    ack_code: int = 0
    calls: list[DispatchedCall] = field(default_factory=list)

    def dispatch(
        self,
        command: CommandDefinition,
        parameters: dict[str, Any],
        *,
        transport: TransportOption,
    ) -> Any:
        self.calls.append(DispatchedCall(command_id=command.id, parameters=dict(parameters), transport=transport))
        LOGGER.debug("Dry-run %s via %s with %s", command.id, transport.value, parameters)

        if not command.has_completion_callback:
            return None
        if command.id == "getDeviceState":
            return f"Device {parameters.get('devId', '<unknown>')}: no state (dry run)"
        if command.id == "requestScanWifi":
            return []
        if command.id == "requestConnectWifi":
            return [ConnectivityInfo(wifi_connected=False, cloud_connected=False, ssid=parameters.get("ssid"))]
        if command.id == "getLogAttrBlocks":
            return LogBlocks(blocks=())
        return self.ack_code
