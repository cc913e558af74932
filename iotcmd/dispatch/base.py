"""Dispatcher interfaces."""

from __future__ import annotations

from typing import Any, Protocol

from iotcmd.core.model import CommandDefinition, TransportOption


class Dispatcher(Protocol):
    def dispatch(
        self,
        command: CommandDefinition,
        parameters: dict[str, Any],
        *,
        transport: TransportOption,
    ) -> Any:
        """Perform the remote call and return its typed result, or raise."""
