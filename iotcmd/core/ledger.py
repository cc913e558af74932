"""Append-only history of command invocations."""

from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Callable, Mapping
from dataclasses import replace
from datetime import datetime
from types import MappingProxyType

from iotcmd.core.errors import InvalidRecordStateError
from iotcmd.core.model import (
    CommandDefinition,
    EmptyPayload,
    ExecutionOutcome,
    ExecutionRecord,
    ResponsePayload,
    TransportOption,
)

LOGGER = logging.getLogger(__name__)


class ExecutionLedger:
    """Ordered record of every attempted invocation, oldest first.

    A record is appended pending by `begin` and receives its outcome exactly
    once through `complete`. Records are never removed individually; `clear`
    drops the whole history. All mutations hold a single lock.
    """

    def __init__(self, *, clock: Callable[[], datetime] = datetime.now) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._records: list[ExecutionRecord] = []
        self._index: dict[str, int] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def begin(
        self,
        command: CommandDefinition,
        parameters: Mapping[str, str],
        transport: TransportOption = TransportOption.AUTO,
    ) -> str:
        record = ExecutionRecord(
            id=uuid.uuid4().hex,
            timestamp=self._clock(),
            command=command,
            parameters=MappingProxyType(dict(parameters)),
            transport=transport,
        )
        with self._lock:
            self._index[record.id] = len(self._records)
            self._records.append(record)
        LOGGER.info("Started %s via %s (record %s)", command.id, transport.value, record.id)
        return record.id

    def complete(self, record_id: str, outcome: ExecutionOutcome, payload: ResponsePayload | None = None) -> ExecutionRecord:
        with self._lock:
            position = self._index.get(record_id)
            if position is None:
                raise InvalidRecordStateError(f"No execution record with id '{record_id}'")
            record = self._records[position]
            if record.outcome is not None:
                raise InvalidRecordStateError(f"Execution record '{record_id}' is already completed")
            completed = replace(record, outcome=outcome, payload=payload if payload is not None else EmptyPayload())
            self._records[position] = completed
        LOGGER.info(
            "Completed %s (record %s): %s %s",
            completed.command.id,
            record_id,
            "success" if outcome.is_success else "failure",
            outcome.message,
        )
        return completed

    def set_expanded(self, record_id: str, expanded: bool) -> None:
        with self._lock:
            position = self._index.get(record_id)
            if position is None:
                raise InvalidRecordStateError(f"No execution record with id '{record_id}'")
            self._records[position] = replace(self._records[position], ui_expanded=expanded)

    def all(self) -> tuple[ExecutionRecord, ...]:
        with self._lock:
            return tuple(self._records)

    def clear(self) -> None:
        with self._lock:
            dropped = len(self._records)
            self._records.clear()
            self._index.clear()
        LOGGER.debug("Cleared %d execution records", dropped)
