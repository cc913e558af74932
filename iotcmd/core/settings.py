"""Local settings read from the XDG config directory."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from jsonschema import ValidationError

from iotcmd.core.catalog_loader import load_schema_validator, read_yaml
from iotcmd.core.errors import CatalogLoadError, CatalogValidationError, SettingsError
from iotcmd.core.model import TransportOption

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    device_id: str = ""
    transport: TransportOption = TransportOption.AUTO
    log_level: str = "WARNING"


def settings_path() -> Path:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "iotcmd/config.yaml"


def load_settings(path: Path | None = None) -> Settings:
    path = path or settings_path()
    values: dict[str, str] = {}

    if path.is_file():
        try:
            doc = read_yaml(path, kind="settings", allow_empty=True)
        except (CatalogLoadError, CatalogValidationError) as exc:
            raise SettingsError(str(exc)) from exc
        try:
            load_schema_validator("settings.schema.json").validate(doc)
        except ValidationError as exc:
            raise SettingsError(f"Invalid settings in {path}: {exc.message}") from exc
        values.update(doc)
        LOGGER.debug("Loaded settings from %s", path)

    if os.environ.get("IOTCMD_DEVICE_ID"):
        values["device_id"] = os.environ["IOTCMD_DEVICE_ID"]
    if os.environ.get("IOTCMD_TRANSPORT"):
        values["transport"] = os.environ["IOTCMD_TRANSPORT"]

    transport = values.get("transport", TransportOption.AUTO.value)
    try:
        transport_option = TransportOption(transport)
    except ValueError as exc:
        allowed = ", ".join(option.value for option in TransportOption)
        raise SettingsError(f"Unknown transport '{transport}'. Allowed: {allowed}") from exc

    return Settings(
        device_id=values.get("device_id", ""),
        transport=transport_option,
        log_level=values.get("log_level", "WARNING"),
    )
