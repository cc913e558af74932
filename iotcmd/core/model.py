"""Core data models used across catalog, ledger, service, and CLI."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class ParameterType(str, Enum):
    STRING = "string"
    INT = "int"
    INT_ARRAY = "int_array"
    DOUBLE = "double"
    BOOL = "bool"
    UINT8 = "uint8"
    UINT8_ARRAY = "uint8_array"

    @property
    def display_name(self) -> str:
        return _PARAMETER_TYPE_NAMES[self]

    @property
    def format_hint(self) -> str | None:
        if self is ParameterType.INT_ARRAY:
            return "Format: 1,2,3 or [1,2,3]"
        if self is ParameterType.UINT8_ARRAY:
            return "Format: 0,255,128 (values 0-255)"
        return None


_PARAMETER_TYPE_NAMES = {
    ParameterType.STRING: "Text",
    ParameterType.INT: "Integer",
    ParameterType.INT_ARRAY: "Integer Array",
    ParameterType.DOUBLE: "Decimal",
    ParameterType.BOOL: "Boolean",
    ParameterType.UINT8: "Byte (0-255)",
    ParameterType.UINT8_ARRAY: "Byte Array",
}


class TransportOption(str, Enum):
    BLE = "BLE"
    MQTT = "MQTT"
    AUTO = "Auto"


@dataclass(frozen=True)
class Category:
    key: str
    label: str
    rank: int
    icon: str


@dataclass(frozen=True)
class ParameterSchema:
    name: str
    display_name: str
    type: ParameterType
    default_value: str = ""
    placeholder: str = ""
    is_required: bool = True
    help_text: str | None = None

    def is_blank(self, value: str) -> bool:
        """Whether ``value`` counts as not supplied; text keeps whitespace-only input."""
        if self.type is ParameterType.STRING:
            return value == ""
        return not value.strip()


@dataclass(frozen=True)
class CommandDefinition:
    id: str
    display_name: str
    category: Category
    description: str
    parameters: tuple[ParameterSchema, ...]
    has_completion_callback: bool = True

    @property
    def has_parameters(self) -> bool:
        return bool(self.parameters)

    @property
    def required_parameters(self) -> tuple[ParameterSchema, ...]:
        return tuple(p for p in self.parameters if p.is_required)

    @property
    def optional_parameters(self) -> tuple[ParameterSchema, ...]:
        return tuple(p for p in self.parameters if not p.is_required)

    @property
    def requires_device_id(self) -> bool:
        return any(p.name == DEVICE_ID_PARAMETER for p in self.parameters)

    def parameter(self, name: str) -> ParameterSchema | None:
        for schema in self.parameters:
            if schema.name == name:
                return schema
        return None


DEVICE_ID_PARAMETER = "devId"


@dataclass(frozen=True)
class ConnectivityInfo:
    wifi_connected: bool
    cloud_connected: bool
    ssid: str | None = None
    rssi: int | None = None


@dataclass(frozen=True)
class WifiNetworkInfo:
    ssid: str
    rssi: int | None = None


@dataclass(frozen=True)
class DeviceStateText:
    text: str


@dataclass(frozen=True)
class AckCode:
    code: int


@dataclass(frozen=True)
class ConnectivityList:
    items: tuple[ConnectivityInfo, ...]


@dataclass(frozen=True)
class WifiNetworkList:
    items: tuple[WifiNetworkInfo, ...]


@dataclass(frozen=True)
class LogBlockCount:
    count: int


@dataclass(frozen=True)
class EmptyPayload:
    pass


ResponsePayload = DeviceStateText | AckCode | ConnectivityList | WifiNetworkList | LogBlockCount | EmptyPayload


@dataclass(frozen=True)
class ExecutionOutcome:
    is_success: bool
    message: str

    @classmethod
    def success(cls, message: str) -> ExecutionOutcome:
        return cls(is_success=True, message=message)

    @classmethod
    def failure(cls, message: str) -> ExecutionOutcome:
        return cls(is_success=False, message=message)


@dataclass(frozen=True)
class ExecutionRecord:
    id: str
    timestamp: datetime
    command: CommandDefinition
    parameters: Mapping[str, str]
    transport: TransportOption
    outcome: ExecutionOutcome | None = None
    payload: ResponsePayload = field(default_factory=EmptyPayload)
    ui_expanded: bool = False

    @property
    def is_pending(self) -> bool:
        return self.outcome is None

    @property
    def formatted_timestamp(self) -> str:
        return self.timestamp.strftime("%H:%M:%S")
