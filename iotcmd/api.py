"""Stable public API for building tooling on top of iotcmd.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

from collections.abc import Mapping

from iotcmd.core.catalog import CommandCatalog, default_catalog
from iotcmd.core.entities import DeviceGroup, Location, parse_groups, parse_locations
from iotcmd.core.errors import (
    CatalogLoadError,
    CatalogValidationError,
    CommandNotFoundError,
    DispatchError,
    InvalidRecordStateError,
    IotcmdError,
    ParameterCoercionError,
    ParameterResolutionError,
    ReadOnlyParameterError,
    SettingsError,
)
from iotcmd.core.ledger import ExecutionLedger
from iotcmd.core.model import (
    AckCode,
    Category,
    CommandDefinition,
    ConnectivityInfo,
    ConnectivityList,
    DeviceStateText,
    EmptyPayload,
    ExecutionOutcome,
    ExecutionRecord,
    LogBlockCount,
    ParameterSchema,
    ParameterType,
    ResponsePayload,
    TransportOption,
    WifiNetworkInfo,
    WifiNetworkList,
)
from iotcmd.core.parameters import ParameterValueStore
from iotcmd.core.payload import LogBlocks, format_payload, has_displayable_data
from iotcmd.core.service import CommandService
from iotcmd.dispatch.base import Dispatcher

__all__ = [
    "IotcmdError",
    "CatalogLoadError",
    "CatalogValidationError",
    "CommandNotFoundError",
    "DispatchError",
    "InvalidRecordStateError",
    "ParameterCoercionError",
    "ParameterResolutionError",
    "ReadOnlyParameterError",
    "SettingsError",
    "AckCode",
    "Category",
    "CommandCatalog",
    "CommandDefinition",
    "ConnectivityInfo",
    "ConnectivityList",
    "DeviceStateText",
    "EmptyPayload",
    "ExecutionLedger",
    "ExecutionOutcome",
    "ExecutionRecord",
    "LogBlockCount",
    "LogBlocks",
    "ParameterSchema",
    "ParameterType",
    "ParameterValueStore",
    "ResponsePayload",
    "TransportOption",
    "WifiNetworkInfo",
    "WifiNetworkList",
    "Dispatcher",
    "Location",
    "DeviceGroup",
    "default_catalog",
    "format_payload",
    "has_displayable_data",
    "parse_groups",
    "parse_locations",
    "Client",
]


class Client:
    """Public client for the command catalog and execution history.

    A `Client` wraps the packaged catalog, one execution ledger, and a
    dispatcher behind a stable API intended for third-party tools
    (GUI/TUI/services/scripts). Without an explicit dispatcher, commands are
    answered by the local dry-run dispatcher.
    """

    def __init__(
        self,
        *,
        dispatcher: Dispatcher | None = None,
        device_id: str = "",
    ) -> None:
        self._service = CommandService(dispatcher=dispatcher)
        self.device_id = device_id

    @property
    def catalog(self) -> CommandCatalog:
        return self._service.catalog

    def list_commands(self) -> tuple[CommandDefinition, ...]:
        return self._service.list_commands()

    def get_command(self, command_id: str) -> CommandDefinition:
        return self._service.command(command_id)

    def commands_by_category(self) -> tuple[tuple[Category, tuple[CommandDefinition, ...]], ...]:
        return self._service.catalog.categories_ordered()

    def prepare(self, command_id: str, **overrides: str) -> ParameterValueStore:
        return self._service.prepare(command_id, self.device_id, overrides)

    def execute(
        self,
        store: ParameterValueStore,
        *,
        transport: TransportOption = TransportOption.AUTO,
    ) -> ExecutionRecord:
        return self._service.execute(store, transport)

    def run(
        self,
        command_id: str,
        parameters: Mapping[str, str] | None = None,
        *,
        transport: TransportOption = TransportOption.AUTO,
    ) -> ExecutionRecord:
        return self._service.run(
            command_id,
            device_id=self.device_id,
            overrides=parameters,
            transport=transport,
        )

    def history(self) -> tuple[ExecutionRecord, ...]:
        return self._service.history()

    def clear_history(self) -> None:
        self._service.clear_history()
