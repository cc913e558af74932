"""Command catalog loading and validation for the YAML-based catalog document."""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from iotcmd.core.errors import CatalogLoadError, CatalogValidationError
from iotcmd.core.model import Category, CommandDefinition, ParameterSchema, ParameterType

LOGGER = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


UniqueKeyLoader.yaml_implicit_resolvers = {
    key: list(value) for key, value in yaml.SafeLoader.yaml_implicit_resolvers.items()
}

for first_char, mappings in list(UniqueKeyLoader.yaml_implicit_resolvers.items()):
    UniqueKeyLoader.yaml_implicit_resolvers[first_char] = [
        (tag, regexp)
        for tag, regexp in mappings
        if tag != "tag:yaml.org,2002:bool"
    ]


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise CatalogValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@lru_cache(maxsize=None)
def load_schema_validator(schema_name: str) -> Any:
    schema_text = resources.files("iotcmd.schemas").joinpath(schema_name).read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def read_yaml(path: Path | Traversable, *, kind: str = "catalog", allow_empty: bool = False) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CatalogLoadError(f"Could not read {kind} file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise CatalogValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if loaded is None and allow_empty:
        return {}
    if not isinstance(loaded, dict):
        raise CatalogValidationError(f"{kind.capitalize()} file {path} must contain a mapping at root")
    return loaded


def normalize_bool(value: Any, *, context: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    raise CatalogValidationError(f"{context} must be boolean true/false")


def _build_categories(doc: dict[str, Any]) -> dict[str, Category]:
    categories: dict[str, Category] = {}
    ranks: set[int] = set()
    for entry in doc["categories"]:
        if entry["key"] in categories:
            raise CatalogValidationError(f"Duplicate category '{entry['key']}'")
        if entry["rank"] in ranks:
            raise CatalogValidationError(f"Category '{entry['key']}' reuses rank {entry['rank']}")
        ranks.add(entry["rank"])
        categories[entry["key"]] = Category(
            key=entry["key"],
            label=entry["label"],
            rank=int(entry["rank"]),
            icon=entry["icon"],
        )
    return categories


def _build_parameter(entry: dict[str, Any], *, context: str) -> ParameterSchema:
    return ParameterSchema(
        name=entry["name"],
        display_name=entry["display_name"],
        type=ParameterType(entry["type"]),
        default_value=entry.get("default", ""),
        placeholder=entry.get("placeholder", ""),
        is_required=normalize_bool(entry.get("required", True), context=f"{context}.required"),
        help_text=entry.get("help"),
    )


def build_catalog(doc: dict[str, Any], source: Path | Traversable | str) -> tuple[CommandDefinition, ...]:
    validator = load_schema_validator("catalog.schema.json")
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise CatalogValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    categories = _build_categories(doc)
    commands: list[CommandDefinition] = []
    seen_ids: set[str] = set()

    for entry in doc["commands"]:
        command_id = entry["id"]
        if command_id in seen_ids:
            raise CatalogValidationError(f"Duplicate command id '{command_id}' in {source}")
        seen_ids.add(command_id)

        category = categories.get(entry["category"])
        if category is None:
            raise CatalogValidationError(
                f"Command '{command_id}' references unknown category '{entry['category']}'"
            )

        parameters: list[ParameterSchema] = []
        seen_names: set[str] = set()
        for param_entry in entry["parameters"]:
            context = f"{command_id}.{param_entry['name']}"
            if param_entry["name"] in seen_names:
                raise CatalogValidationError(f"{context} is declared more than once")
            seen_names.add(param_entry["name"])
            parameters.append(_build_parameter(param_entry, context=context))

        commands.append(
            CommandDefinition(
                id=command_id,
                display_name=entry["name"],
                category=category,
                description=entry["description"],
                parameters=tuple(parameters),
                has_completion_callback=normalize_bool(
                    entry.get("completion_callback", True),
                    context=f"{command_id}.completion_callback",
                ),
            )
        )

    LOGGER.debug("Loaded %d commands in %d categories from %s", len(commands), len(categories), source)
    return tuple(commands)


def load_catalog(path: Path | None = None) -> tuple[CommandDefinition, ...]:
    """Load command definitions from `path`, or from the packaged catalog."""
    source: Path | Traversable
    if path is None:
        source = resources.files("iotcmd.catalog").joinpath("commands.yaml")
    else:
        source = path
    return build_catalog(read_yaml(source), source)
