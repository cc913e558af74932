"""Read-only registry of the device commands."""

from __future__ import annotations

from functools import lru_cache

from iotcmd.core.catalog_loader import load_catalog
from iotcmd.core.errors import CatalogValidationError, CommandNotFoundError
from iotcmd.core.model import Category, CommandDefinition


class CommandCatalog:
    """Immutable, ordered view over a set of command definitions.

    Commands keep the order in which the catalog document declares them.
    Categories are ordered by their fixed rank, never by name.
    """

    def __init__(self, commands: tuple[CommandDefinition, ...]) -> None:
        by_id: dict[str, CommandDefinition] = {}
        for command in commands:
            if command.id in by_id:
                raise CatalogValidationError(f"Duplicate command id '{command.id}'")
            by_id[command.id] = command
        self._commands = tuple(commands)
        self._by_id = by_id

        categories: dict[str, Category] = {}
        for command in commands:
            categories.setdefault(command.category.key, command.category)
        self._categories = tuple(sorted(categories.values(), key=lambda c: c.rank))

    def __len__(self) -> int:
        return len(self._commands)

    def __contains__(self, command_id: object) -> bool:
        return command_id in self._by_id

    def list_all(self) -> tuple[CommandDefinition, ...]:
        return self._commands

    def lookup(self, command_id: str) -> CommandDefinition:
        command = self._by_id.get(command_id)
        if command is None:
            raise CommandNotFoundError(
                f"Unknown command '{command_id}'. Use 'iotcmd list' to inspect available commands."
            )
        return command

    def categories(self) -> tuple[Category, ...]:
        return self._categories

    def commands_in(self, category: Category | str) -> tuple[CommandDefinition, ...]:
        key = category if isinstance(category, str) else category.key
        return tuple(c for c in self._commands if c.category.key == key)

    def categories_ordered(self) -> tuple[tuple[Category, tuple[CommandDefinition, ...]], ...]:
        return tuple((category, self.commands_in(category)) for category in self._categories)


@lru_cache(maxsize=1)
def default_catalog() -> CommandCatalog:
    """Process-wide catalog built from the packaged document on first use."""
    return CommandCatalog(load_catalog())
