"""Conversion of string-encoded parameter values into typed dispatcher arguments."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from iotcmd.core.errors import ParameterCoercionError
from iotcmd.core.model import CommandDefinition, ParameterSchema, ParameterType

_TRUE_WORDS = {"true", "1", "yes", "on"}
_FALSE_WORDS = {"false", "0", "no", "off"}


def _parse_int(text: str, *, context: str) -> int:
    cleaned = text.strip()
    try:
        if cleaned.lower().startswith(("0x", "-0x")):
            return int(cleaned, 16)
        return int(cleaned)
    except ValueError as exc:
        raise ParameterCoercionError(f"{context}: invalid integer '{text}'") from exc


def _parse_int_list(text: str, *, context: str) -> list[int]:
    cleaned = text.strip()
    if cleaned.startswith("[") and cleaned.endswith("]"):
        cleaned = cleaned[1:-1]
    if not cleaned.strip():
        raise ParameterCoercionError(f"{context}: value required")
    return [_parse_int(part, context=context) for part in cleaned.split(",")]


def _check_byte(value: int, *, context: str) -> int:
    if not 0 <= value <= 255:
        raise ParameterCoercionError(f"{context}: {value} is outside byte range 0-255")
    return value


def coerce_value(schema: ParameterSchema, raw: str) -> Any:
    context = f"Parameter '{schema.name}'"
    kind = schema.type

    if kind is ParameterType.STRING:
        return raw
    if kind is ParameterType.INT:
        return _parse_int(raw, context=context)
    if kind is ParameterType.INT_ARRAY:
        return _parse_int_list(raw, context=context)
    if kind is ParameterType.UINT8:
        return _check_byte(_parse_int(raw, context=context), context=context)
    if kind is ParameterType.UINT8_ARRAY:
        return bytes(_check_byte(v, context=context) for v in _parse_int_list(raw, context=context))
    if kind is ParameterType.DOUBLE:
        try:
            return float(raw.strip())
        except ValueError as exc:
            raise ParameterCoercionError(f"{context}: invalid decimal '{raw}'") from exc
    if kind is ParameterType.BOOL:
        lowered = raw.strip().lower()
        if lowered in _TRUE_WORDS:
            return True
        if lowered in _FALSE_WORDS:
            return False
        raise ParameterCoercionError(f"{context}: expected true/false, got '{raw}'")
    raise ParameterCoercionError(f"{context}: unsupported parameter type '{kind}'")


def coerce_parameters(command: CommandDefinition, values: Mapping[str, str]) -> dict[str, Any]:
    """Coerce supplied values; absent or empty optional parameters are omitted."""
    coerced: dict[str, Any] = {}
    missing: list[str] = []
    for schema in command.parameters:
        raw = values.get(schema.name, "")
        if schema.is_blank(raw):
            if schema.is_required:
                missing.append(schema.name)
            continue
        coerced[schema.name] = coerce_value(schema, raw)
    if missing:
        raise ParameterCoercionError(
            f"Command '{command.id}' is missing required parameters: {', '.join(missing)}"
        )
    return coerced
