"""
Serialization of event field values for Slack messages

Field values can be arbitrary Python objects. They are converted into plain
JSON-compatible structures before being rendered into the metadata block of
a message.
"""

import json
from dataclasses import dataclass, fields, is_dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from pathlib import PurePath
from typing import Any, Callable, Dict, Iterable, Optional, Set, Tuple, Type
from uuid import UUID

from .exceptions import SerializationError


@dataclass
class SerializationConfig:
    """Configuration for field value serialization"""

    datetime_format: str = "iso"  # iso or timestamp
    decimal_as_float: bool = False
    enum_as_value: bool = True
    dataclass_as_dict: bool = True
    max_collection_size: Optional[int] = None
    truncate_strings: Optional[int] = None

    # Raise SerializationError instead of falling back to a repr
    strict: bool = False

    def __post_init__(self):
        if self.datetime_format not in ("iso", "timestamp"):
            raise ValueError("datetime_format must be 'iso' or 'timestamp'")
        if self.max_collection_size is not None and self.max_collection_size <= 0:
            raise ValueError("max_collection_size must be positive")
        if self.truncate_strings is not None and self.truncate_strings <= 0:
            raise ValueError("truncate_strings must be positive")


DEFAULT_CONFIG = SerializationConfig()


def _serialize_datetime(dt: datetime, config: SerializationConfig) -> Any:
    if config.datetime_format == "timestamp":
        return dt.timestamp()
    return dt.isoformat()


def _serialize_decimal(value: Decimal, config: SerializationConfig) -> Any:
    return float(value) if config.decimal_as_float else str(value)


def _serialize_enum(value: Enum, config: SerializationConfig) -> Any:
    if config.enum_as_value:
        return value.value
    return {"name": value.name, "value": value.value}


def _serialize_bytes(value: bytes, config: SerializationConfig) -> Any:
    try:
        return value.decode("utf-8")
    except UnicodeDecodeError:
        hex_data = value.hex()
        if len(hex_data) > 100:
            hex_data = hex_data[:100] + "..."
        return {"type": "binary", "hex": hex_data, "size": len(value)}


_SERIALIZERS: Dict[Type, Callable[[Any, SerializationConfig], Any]] = {
    datetime: _serialize_datetime,
    date: lambda d, config: d.isoformat(),
    time: lambda t, config: t.isoformat(),
    timedelta: lambda td, config: td.total_seconds(),
    Decimal: _serialize_decimal,
    UUID: lambda u, config: str(u),
    PurePath: lambda p, config: str(p),
    Enum: _serialize_enum,
    bytes: _serialize_bytes,
    bytearray: lambda b, config: _serialize_bytes(bytes(b), config),
    complex: lambda c, config: {"real": c.real, "imag": c.imag},
}


def _find_serializer(obj: Any) -> Optional[Callable[[Any, SerializationConfig], Any]]:
    for cls in type(obj).__mro__:
        serializer = _SERIALIZERS.get(cls)
        if serializer is not None:
            return serializer
    return None


def _unserializable(obj: Any, config: SerializationConfig) -> Any:
    if config.strict:
        raise SerializationError(
            f"object of type {type(obj).__name__} is not serializable"
        )
    try:
        obj_repr = repr(obj)[:200]
    except Exception as e:
        obj_repr = f"<repr failed: {str(e)[:50]}>"
    return {"__unserializable__": type(obj).__name__, "__repr__": obj_repr}


def to_json_value(
    obj: Any,
    config: Optional[SerializationConfig] = None,
    _seen: Optional[Set[int]] = None,
) -> Any:
    """
    Convert a field value into a JSON-compatible structure

    Args:
        obj: Value to convert
        config: Optional serialization configuration

    Returns:
        A structure made of dicts, lists, strings, numbers, booleans and None

    Raises:
        SerializationError: On circular references, or on unsupported types
            when ``config.strict`` is set
    """
    config = config or DEFAULT_CONFIG

    if obj is None:
        return None

    serializer = _find_serializer(obj)
    if serializer is not None:
        return serializer(obj, config)

    if isinstance(obj, (bool, int, float)):
        return obj

    if isinstance(obj, str):
        if config.truncate_strings and len(obj) > config.truncate_strings:
            return obj[: config.truncate_strings] + "..."
        return obj

    if isinstance(obj, (list, tuple, set, frozenset, dict)) or is_dataclass(obj):
        _seen = _seen if _seen is not None else set()
        if id(obj) in _seen:
            raise SerializationError("circular reference detected")
        _seen.add(id(obj))
        try:
            return _serialize_container(obj, config, _seen)
        finally:
            _seen.discard(id(obj))

    return _unserializable(obj, config)


def _serialize_container(obj: Any, config: SerializationConfig, seen: Set[int]) -> Any:
    if isinstance(obj, dict):
        result = {}
        for count, (key, value) in enumerate(obj.items()):
            if config.max_collection_size and count >= config.max_collection_size:
                result["..."] = f"({len(obj) - count} more items)"
                break
            result[key if isinstance(key, str) else str(key)] = to_json_value(
                value, config, seen
            )
        return result

    if is_dataclass(obj) and not isinstance(obj, type):
        if not config.dataclass_as_dict:
            return {"__type__": type(obj).__name__}
        return {
            f.name: to_json_value(getattr(obj, f.name), config, seen)
            for f in fields(obj)
        }

    if is_dataclass(obj):
        return _unserializable(obj, config)

    items = []
    for i, item in enumerate(obj):
        if config.max_collection_size and i >= config.max_collection_size:
            items.append(f"... ({len(obj) - i} more items)")
            break
        items.append(to_json_value(item, config, seen))
    return items


def render_mapping(
    items: Iterable[Tuple[str, Any]], config: Optional[SerializationConfig] = None
) -> str:
    """
    Render key/value pairs as pretty-printed JSON

    Pairs are collected into a plain mapping first, so a repeated key keeps
    its last value. Keys keep their first insertion position.

    Raises:
        SerializationError: If any value cannot be encoded
    """
    data: Dict[str, Any] = {}
    for key, value in items:
        data[key] = to_json_value(value, config)

    try:
        return json.dumps(data, indent=2, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"cannot encode event fields: {e}") from e
