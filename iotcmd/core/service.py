"""Service layer used by the public API and the CLI."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from iotcmd.core.catalog import CommandCatalog, default_catalog
from iotcmd.core.errors import IotcmdError
from iotcmd.core.ledger import ExecutionLedger
from iotcmd.core.model import (
    CommandDefinition,
    EmptyPayload,
    ExecutionOutcome,
    ExecutionRecord,
    TransportOption,
)
from iotcmd.core.parameters import ParameterValueStore, initial_values
from iotcmd.core.payload import payload_from_result
from iotcmd.dispatch.base import Dispatcher
from iotcmd.dispatch.coercion import coerce_parameters
from iotcmd.dispatch.dry_run import DryRunDispatcher

LOGGER = logging.getLogger(__name__)

FIRE_AND_FORGET_MESSAGE = "Command sent (no completion callback)"


class CommandService:
    def __init__(
        self,
        *,
        catalog: CommandCatalog | None = None,
        ledger: ExecutionLedger | None = None,
        dispatcher: Dispatcher | None = None,
    ) -> None:
        self.catalog = catalog if catalog is not None else default_catalog()
        self.ledger = ledger if ledger is not None else ExecutionLedger()
        self.dispatcher = dispatcher if dispatcher is not None else DryRunDispatcher()

    def list_commands(self) -> tuple[CommandDefinition, ...]:
        return self.catalog.list_all()

    def command(self, command_id: str) -> CommandDefinition:
        return self.catalog.lookup(command_id)

    def prepare(
        self,
        command_id: str,
        device_id: str = "",
        overrides: Mapping[str, str] | None = None,
    ) -> ParameterValueStore:
        store = initial_values(self.catalog.lookup(command_id), device_id)
        if overrides:
            store.update(overrides)
        return store

    def execute(
        self,
        store: ParameterValueStore,
        transport: TransportOption = TransportOption.AUTO,
    ) -> ExecutionRecord:
        """Run the bound command and return its completed ledger record.

        Coercion and dispatch failures complete the record as a failure; only
        ledger contract violations propagate.
        """
        command = store.command
        record_id = self.ledger.begin(command, store.snapshot(), transport)

        try:
            arguments = coerce_parameters(command, store.supplied())
            result = self.dispatcher.dispatch(command, arguments, transport=transport)
        except IotcmdError as exc:
            LOGGER.warning("%s failed: %s", command.id, exc)
            return self.ledger.complete(record_id, ExecutionOutcome.failure(str(exc)))
        except Exception as exc:
            LOGGER.warning("%s failed in dispatcher: %s", command.id, exc, exc_info=True)
            return self.ledger.complete(record_id, ExecutionOutcome.failure(f"{command.display_name} failed: {exc}"))

        if not command.has_completion_callback:
            return self.ledger.complete(
                record_id,
                ExecutionOutcome.success(FIRE_AND_FORGET_MESSAGE),
                EmptyPayload(),
            )

        try:
            payload = payload_from_result(result, command.id)
        except TypeError as exc:
            return self.ledger.complete(record_id, ExecutionOutcome.failure(str(exc)))
        return self.ledger.complete(
            record_id,
            ExecutionOutcome.success(f"{command.display_name} succeeded"),
            payload,
        )

    def run(
        self,
        command_id: str,
        *,
        device_id: str = "",
        overrides: Mapping[str, str] | None = None,
        transport: TransportOption = TransportOption.AUTO,
    ) -> ExecutionRecord:
        return self.execute(self.prepare(command_id, device_id, overrides), transport)

    def history(self) -> tuple[ExecutionRecord, ...]:
        return self.ledger.all()

    def clear_history(self) -> None:
        self.ledger.clear()
