"""Per-invocation parameter values bound to a command definition."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping

from iotcmd.core.errors import ParameterResolutionError, ReadOnlyParameterError
from iotcmd.core.model import DEVICE_ID_PARAMETER, CommandDefinition, ParameterSchema

LOGGER = logging.getLogger(__name__)


class ParameterValueStore:
    """String-encoded values chosen for one pending invocation.

    The store never parses or validates values; it only applies the defaulting
    rules. Parameters that were never supplied stay absent, which is distinct
    from being supplied as an empty string.
    """

    def __init__(
        self,
        command: CommandDefinition,
        *,
        device_id: str = "",
        values: Mapping[str, str] | None = None,
    ) -> None:
        self.command = command
        self.device_id = device_id
        self._values: dict[str, str] = {}
        for name, value in (values or {}).items():
            self._schema(name)
            self._values[name] = value

    def __getitem__(self, name: str) -> str:
        return self._values[name]

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def get(self, name: str, default: str | None = None) -> str | None:
        return self._values.get(name, default)

    def _schema(self, name: str) -> ParameterSchema:
        schema = self.command.parameter(name)
        if schema is None:
            declared = ", ".join(p.name for p in self.command.parameters) or "<none>"
            raise ParameterResolutionError(
                f"Command '{self.command.id}' does not declare parameter '{name}'. Declared: {declared}"
            )
        return schema

    def is_read_only(self, name: str) -> bool:
        return name == DEVICE_ID_PARAMETER and bool(self.device_id)

    def initialize(self) -> ParameterValueStore:
        """Apply device id auto-fill and schema defaults; safe to call repeatedly."""
        for schema in self.command.parameters:
            if schema.name == DEVICE_ID_PARAMETER and self.device_id:
                previous = self._values.get(schema.name)
                if previous and previous != self.device_id:
                    LOGGER.debug("Replacing %s=%r with active device %r", schema.name, previous, self.device_id)
                self._values[schema.name] = self.device_id
                continue
            if self._values.get(schema.name):
                continue
            if schema.default_value:
                self._values[schema.name] = schema.default_value
        return self

    def set(self, name: str, value: str) -> None:
        self._schema(name)
        if self.is_read_only(name):
            raise ReadOnlyParameterError(
                f"Parameter '{name}' is bound to the active device '{self.device_id}' and cannot be edited"
            )
        self._values[name] = value

    def unset(self, name: str) -> None:
        self._schema(name)
        if self.is_read_only(name):
            raise ReadOnlyParameterError(f"Parameter '{name}' cannot be cleared while a device is active")
        self._values.pop(name, None)

    def update(self, values: Mapping[str, str]) -> None:
        """Set several values at once; nothing is applied if any name is rejected."""
        for name in values:
            self._schema(name)
            if self.is_read_only(name):
                raise ReadOnlyParameterError(
                    f"Parameter '{name}' is bound to the active device '{self.device_id}' and cannot be edited"
                )
        self._values.update(values)

    def snapshot(self) -> dict[str, str]:
        """Copy of the values exactly as set, empty strings included."""
        return dict(self._values)

    def supplied(self) -> dict[str, str]:
        """Values a dispatcher should send; empty entries count as absent."""
        return {
            name: value
            for name, value in self._values.items()
            if not self._schema(name).is_blank(value)
        }

    def missing_required(self) -> tuple[ParameterSchema, ...]:
        return tuple(
            schema
            for schema in self.command.required_parameters
            if schema.is_blank(self._values.get(schema.name, ""))
        )


def initial_values(
    command: CommandDefinition,
    device_id: str = "",
    values: Mapping[str, str] | None = None,
) -> ParameterValueStore:
    return ParameterValueStore(command, device_id=device_id, values=values).initialize()
