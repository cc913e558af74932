"""Typer CLI entrypoint."""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from iotcmd.core.entities import parse_groups, parse_locations
from iotcmd.core.errors import IotcmdError
from iotcmd.core.model import TransportOption
from iotcmd.core.payload import format_payload, has_displayable_data
from iotcmd.core.service import CommandService
from iotcmd.core.settings import load_settings

app = typer.Typer(help="IoT device command catalog and execution ledger")


@app.callback()
def main(
    log_level: str | None = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING or ERROR"),
) -> None:
    level = log_level
    if level is None:
        try:
            level = load_settings().log_level
        except IotcmdError:
            level = "WARNING"
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True,
    )


def _parse_assignments(assignments: list[str]) -> dict[str, str]:
    values: dict[str, str] = {}
    for item in assignments:
        name, sep, value = item.partition("=")
        if not sep or not name:
            raise typer.BadParameter(f"Expected NAME=VALUE, got '{item}'", param_hint="--param")
        values[name.strip()] = value
    return values


@app.command("list")
def list_commands() -> None:
    """List available commands grouped by category."""
    try:
        service = CommandService()
        for category, commands in service.catalog.categories_ordered():
            typer.echo(f"{category.label}:")
            for command in commands:
                marker = "" if command.has_completion_callback else " [no callback]"
                typer.echo(f"  {command.id}: {command.display_name}{marker}")
    except IotcmdError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("show")
def show_command(command_id: str) -> None:
    """Show the description and parameters of a command."""
    try:
        command = CommandService().command(command_id)
        typer.echo(f"{command.id}: {command.display_name} ({command.category.label})")
        typer.echo(f"  {command.description}")
        if not command.has_parameters:
            typer.echo("  No parameters required")
            return
        for schema in command.parameters:
            required = "*" if schema.is_required else ""
            line = f"  {schema.name}{required} [{schema.type.display_name}]"
            if schema.default_value:
                line += f" default={schema.default_value}"
            if schema.placeholder:
                line += f" ({schema.placeholder})"
            typer.echo(line)
            hint = schema.help_text or schema.type.format_hint
            if hint:
                typer.echo(f"      {hint}")
    except IotcmdError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("run")
def run_command(
    command_id: str,
    device: str | None = typer.Option(None, "--device", help="Active device id (fills devId)"),
    param: list[str] = typer.Option([], "--param", "-p", help="Parameter override NAME=VALUE"),
    transport: TransportOption | None = typer.Option(None, "--transport", help="BLE, MQTT or Auto"),
) -> None:
    """Run a command through the dry-run dispatcher and print its record."""
    try:
        settings = load_settings()
        service = CommandService()
        record = service.run(
            command_id,
            device_id=device if device is not None else settings.device_id,
            overrides=_parse_assignments(param),
            transport=transport or settings.transport,
        )
        typer.echo(f"[{record.formatted_timestamp}] {record.command.id} via {record.transport.value}")
        for name, value in record.parameters.items():
            typer.echo(f"  {name}={value}")
        if record.outcome is None:
            typer.echo("Pending")
            return
        status = "Success" if record.outcome.is_success else "Failure"
        typer.echo(f"{status}: {record.outcome.message}")
        if has_displayable_data(record.payload):
            typer.echo(format_payload(record.payload))
        if not record.outcome.is_success:
            raise typer.Exit(code=1)
    except IotcmdError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("parse")
def parse_entities(
    kind: str = typer.Argument(..., help="locations or groups"),
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
) -> None:
    """Decode a backend list response and print the records it contains."""
    data = path.read_bytes()
    if kind == "locations":
        records = parse_locations(data)
    elif kind == "groups":
        records = parse_groups(data)
    else:
        typer.echo(f"Error: Unknown entity kind '{kind}'. Use 'locations' or 'groups'.", err=True)
        raise typer.Exit(code=1)

    if records is None:
        typer.echo("No data")
        return
    for record in records:
        typer.echo(f"{record.uuid} {record.display_name}")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
