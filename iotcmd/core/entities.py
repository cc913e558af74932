"""Backend entities (locations, groups) and their lenient list decoding.

Backend versions disagree on the envelope of list responses, so decoding tries,
in order:

1. a bare JSON array of strictly valid records;
2. an object whose ``data`` field holds such an array;
3. a loosely typed array of maps, extracted field by field, where an element
   missing a required field is dropped instead of failing the batch.

A payload that fits none of these yields ``None``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from iotcmd.core.catalog_loader import load_schema_validator

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class LocationBleMeshInfo:
    uuid: str | None = None
    network_keys: tuple[str, ...] | None = None
    app_keys: tuple[str, ...] | None = None


@dataclass(frozen=True)
class LocationExtraInfo:
    ble_mesh: LocationBleMeshInfo | None = None
    mesh_addr: int | None = None
    group_element_ids: dict[str, int] | None = None


@dataclass(frozen=True)
class Location:
    uuid: str
    label: str
    desc: str | None = None
    user_id: str | None = None
    extra_info: LocationExtraInfo | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def display_name(self) -> str:
        return self.label or "Unnamed Location"

    @property
    def mesh_uuid(self) -> str | None:
        if self.extra_info is None or self.extra_info.ble_mesh is None:
            return None
        return self.extra_info.ble_mesh.uuid

    @property
    def mesh_address(self) -> int | None:
        return self.extra_info.mesh_addr if self.extra_info else None


@dataclass(frozen=True)
class GroupExtraInfo:
    element_id: int | None = None


@dataclass(frozen=True)
class DeviceGroup:
    uuid: str
    label: str
    desc: str | None = None
    user_id: str | None = None
    location_id: str | None = None
    type: int | None = None
    element_id: int | None = None
    extra_info: GroupExtraInfo | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def display_name(self) -> str:
        return self.label or "Unnamed Group"

    @property
    def is_room(self) -> bool:
        return self.type == 0


def _str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _str_list(value: Any) -> tuple[str, ...] | None:
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return tuple(value)
    return None


def _int_map(value: Any) -> dict[str, int] | None:
    if not isinstance(value, dict):
        return None
    result: dict[str, int] = {}
    for key, item in value.items():
        number = _int(item)
        if number is None:
            return None
        result[key] = number
    return result


def location_from_dict(raw: dict[str, Any]) -> Location | None:
    uuid = _str(raw.get("uuid"))
    label = _str(raw.get("label"))
    if uuid is None or label is None:
        return None

    extra_info: LocationExtraInfo | None = None
    extra = raw.get("extraInfo")
    if isinstance(extra, dict):
        ble_mesh: LocationBleMeshInfo | None = None
        mesh = extra.get("bleMesh")
        if isinstance(mesh, dict):
            ble_mesh = LocationBleMeshInfo(
                uuid=_str(mesh.get("uuid")),
                network_keys=_str_list(mesh.get("networkKeys")),
                app_keys=_str_list(mesh.get("appKeys")),
            )
        extra_info = LocationExtraInfo(
            ble_mesh=ble_mesh,
            mesh_addr=_int(extra.get("meshAddr")),
            group_element_ids=_int_map(extra.get("groupElementIds")),
        )

    return Location(
        uuid=uuid,
        label=label,
        desc=_str(raw.get("desc")),
        user_id=_str(raw.get("userId")),
        extra_info=extra_info,
        created_at=_str(raw.get("createdAt")),
        updated_at=_str(raw.get("updatedAt")),
    )


def group_from_dict(raw: dict[str, Any]) -> DeviceGroup | None:
    uuid = _str(raw.get("uuid"))
    label = _str(raw.get("label"))
    if uuid is None or label is None:
        return None

    extra_info: GroupExtraInfo | None = None
    extra = raw.get("extraInfo")
    if isinstance(extra, dict):
        extra_info = GroupExtraInfo(element_id=_int(extra.get("elementId")))

    return DeviceGroup(
        uuid=uuid,
        label=label,
        desc=_str(raw.get("desc")),
        user_id=_str(raw.get("userId")),
        location_id=_str(raw.get("locationId")),
        type=_int(raw.get("type")),
        element_id=_int(raw.get("elementId")),
        extra_info=extra_info,
        created_at=_str(raw.get("createdAt")),
        updated_at=_str(raw.get("updatedAt")),
    )


def _strict_list(
    items: Any,
    schema_name: str,
    build: Callable[[dict[str, Any]], T | None],
) -> list[T] | None:
    if not isinstance(items, list):
        return None
    validator = load_schema_validator(schema_name)
    if not all(validator.is_valid(item) for item in items):
        return None
    records: list[T] = []
    for item in items:
        record = build(item)
        if record is None:
            return None
        records.append(record)
    return records


def _lenient_list(
    items: Any,
    build: Callable[[dict[str, Any]], T | None],
) -> list[T] | None:
    if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
        return None
    records: list[T] = []
    for position, item in enumerate(items):
        record = build(item)
        if record is None:
            LOGGER.debug("Dropping element %d without required fields: %s", position, sorted(item))
            continue
        records.append(record)
    return records


def _parse_list(
    data: bytes | str,
    schema_name: str,
    build: Callable[[dict[str, Any]], T | None],
) -> list[T] | None:
    try:
        decoded = json.loads(data)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        LOGGER.debug("Response is not JSON: %s", exc)
        return None

    direct = _strict_list(decoded, schema_name, build)
    if direct is not None:
        return direct

    if isinstance(decoded, dict):
        wrapped = _strict_list(decoded.get("data"), schema_name, build)
        if wrapped is not None:
            return wrapped

    loose = _lenient_list(decoded, build)
    if loose is None:
        LOGGER.debug("Response matched none of the known list shapes")
    return loose


def parse_locations(data: bytes | str) -> list[Location] | None:
    return _parse_list(data, "location.schema.json", location_from_dict)


def parse_groups(data: bytes | str) -> list[DeviceGroup] | None:
    return _parse_list(data, "group.schema.json", group_from_dict)
