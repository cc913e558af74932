"""Rendering of command response payloads."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from iotcmd.core.model import (
    AckCode,
    ConnectivityInfo,
    ConnectivityList,
    DeviceStateText,
    EmptyPayload,
    LogBlockCount,
    ResponsePayload,
    WifiNetworkInfo,
    WifiNetworkList,
)


# Commands whose dispatcher result is a list, by the payload they answer with.
LIST_PAYLOADS: dict[str, type[ConnectivityList] | type[WifiNetworkList]] = {
    "requestConnectWifi": ConnectivityList,
    "requestScanWifi": WifiNetworkList,
}


@dataclass(frozen=True)
class LogBlocks:
    """Typed dispatcher result for log attribute block queries."""

    blocks: tuple[Any, ...]


def _connection_state(connected: bool) -> str:
    return "Connected" if connected else "Disconnected"


def _format_connectivity(items: Sequence[ConnectivityInfo]) -> str:
    lines: list[str] = []
    for index, info in enumerate(items):
        lines.append(f"Interface {index}:")
        lines.append(f"  WiFi: {_connection_state(info.wifi_connected)}")
        lines.append(f"  Cloud: {_connection_state(info.cloud_connected)}")
        if info.ssid is not None:
            lines.append(f"  SSID: {info.ssid}")
        if info.rssi is not None:
            lines.append(f"  Signal: {info.rssi} dBm")
    return "\n".join(lines)


def _format_wifi_networks(items: Sequence[WifiNetworkInfo]) -> str:
    lines = [f"Found {len(items)} networks:"]
    lines.extend(f"  - {network.ssid}" for network in items)
    return "\n".join(lines)


def format_payload(payload: ResponsePayload) -> str:
    if isinstance(payload, DeviceStateText):
        return payload.text
    if isinstance(payload, AckCode):
        return f"ACK Code: {payload.code}"
    if isinstance(payload, ConnectivityList):
        return _format_connectivity(payload.items)
    if isinstance(payload, WifiNetworkList):
        return _format_wifi_networks(payload.items)
    if isinstance(payload, LogBlockCount):
        return f"Log Blocks: {payload.count} entries"
    if isinstance(payload, EmptyPayload):
        return ""
    raise TypeError(f"Unsupported response payload: {payload!r}")


def has_displayable_data(payload: ResponsePayload) -> bool:
    return not isinstance(payload, EmptyPayload)


def payload_from_result(value: Any, command_id: str | None = None) -> ResponsePayload:
    """Wrap a typed dispatcher result into its response payload variant.

    List results are checked against the variant the producing command is
    known to answer with, so an empty interface list stays a connectivity
    payload. Without a command id, an empty list reads as a WiFi scan.
    """
    if value is None:
        return EmptyPayload()
    if isinstance(value, (DeviceStateText, AckCode, ConnectivityList, WifiNetworkList, LogBlockCount, EmptyPayload)):
        return value
    if isinstance(value, bool):
        raise TypeError(f"Cannot map boolean result {value!r} to a response payload")
    if isinstance(value, int):
        return AckCode(code=value)
    if isinstance(value, str):
        return DeviceStateText(text=value)
    if isinstance(value, LogBlocks):
        return LogBlockCount(count=len(value.blocks))
    if isinstance(value, Sequence):
        return _list_payload(tuple(value), command_id)
    raise TypeError(f"Cannot map result of type {type(value).__name__} to a response payload")


def _list_payload(items: tuple[Any, ...], command_id: str | None) -> ResponsePayload:
    expected = LIST_PAYLOADS.get(command_id) if command_id else None
    if expected is None:
        if items and all(isinstance(item, ConnectivityInfo) for item in items):
            expected = ConnectivityList
        else:
            expected = WifiNetworkList

    item_type = ConnectivityInfo if expected is ConnectivityList else WifiNetworkInfo
    if not all(isinstance(item, item_type) for item in items):
        source = f"'{command_id}'" if command_id else "dispatcher"
        raise TypeError(f"Result of {source} is not a list of {item_type.__name__}")
    return expected(items=items)
