"""
Tests for field value serialization
"""

import json
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from pathlib import Path
from uuid import UUID

import pytest

from slack_logging import SerializationConfig, SerializationError
from slack_logging.serializers import render_mapping, to_json_value


class Color(Enum):
    RED = "red"


@dataclass
class Point:
    x: int
    y: int


class TestSerializationConfig:
    def test_default_config(self):
        config = SerializationConfig()
        assert config.datetime_format == "iso"
        assert config.decimal_as_float is False
        assert config.max_collection_size is None
        assert config.strict is False

    def test_validation(self):
        with pytest.raises(ValueError, match="datetime_format"):
            SerializationConfig(datetime_format="custom")
        with pytest.raises(ValueError, match="max_collection_size"):
            SerializationConfig(max_collection_size=0)


class TestToJsonValue:
    def test_primitives_pass_through(self):
        assert to_json_value(3) == 3
        assert to_json_value(1.5) == 1.5
        assert to_json_value(True) is True
        assert to_json_value("text") == "text"
        assert to_json_value(None) is None

    def test_common_types(self):
        assert to_json_value(datetime(2024, 1, 15, 10, 30)) == "2024-01-15T10:30:00"
        assert (
            to_json_value(datetime(2024, 1, 15, tzinfo=timezone.utc))
            == "2024-01-15T00:00:00+00:00"
        )
        assert to_json_value(date(2024, 1, 15)) == "2024-01-15"
        assert to_json_value(timedelta(seconds=90)) == 90.0
        assert to_json_value(Decimal("1.10")) == "1.10"
        assert to_json_value(UUID(int=1)) == "00000000-0000-0000-0000-000000000001"
        assert to_json_value(Path("/tmp/x")) == "/tmp/x"
        assert to_json_value(Color.RED) == "red"
        assert to_json_value(b"abc") == "abc"

    def test_config_options(self):
        config = SerializationConfig(
            decimal_as_float=True, enum_as_value=False, datetime_format="timestamp"
        )
        assert to_json_value(Decimal("1.5"), config) == 1.5
        assert to_json_value(Color.RED, config) == {"name": "RED", "value": "red"}
        ts = datetime(2024, 1, 15, tzinfo=timezone.utc)
        assert to_json_value(ts, config) == ts.timestamp()

    def test_containers(self):
        value = {"ids": (1, 2), "point": Point(1, 2), 7: {"nested": True}}
        assert to_json_value(value) == {
            "ids": [1, 2],
            "point": {"x": 1, "y": 2},
            "7": {"nested": True},
        }

    def test_large_collections_kept_by_default(self):
        values = list(range(150))
        assert to_json_value(values) == values
        mapping = {str(i): i for i in range(150)}
        assert to_json_value(mapping) == mapping

    def test_large_collections_are_truncated(self):
        config = SerializationConfig(max_collection_size=3)
        assert to_json_value(list(range(5)), config) == [0, 1, 2, "... (2 more items)"]

    def test_string_truncation(self):
        config = SerializationConfig(truncate_strings=4)
        assert to_json_value("abcdefgh", config) == "abcd..."

    def test_unserializable_falls_back_to_repr(self):
        class Opaque:
            def __repr__(self):
                return "<opaque>"

        assert to_json_value(Opaque()) == {
            "__unserializable__": "Opaque",
            "__repr__": "<opaque>",
        }

    def test_strict_mode_raises(self):
        with pytest.raises(SerializationError):
            to_json_value(object(), SerializationConfig(strict=True))

    def test_circular_reference_raises(self):
        data = {"a": 1}
        data["self"] = data
        with pytest.raises(SerializationError, match="circular"):
            to_json_value(data)

    def test_shared_reference_is_not_circular(self):
        shared = [1]
        assert to_json_value({"a": shared, "b": shared}) == {"a": [1], "b": [1]}


class TestRenderMapping:
    def test_pretty_printed(self):
        assert render_mapping([("retries", 3)]) == '{\n  "retries": 3\n}'

    def test_empty(self):
        assert render_mapping([]) == "{}"

    def test_duplicate_keys_last_write_wins(self):
        rendered = render_mapping([("a", 1), ("b", 2), ("a", 3)])
        assert json.loads(rendered) == {"a": 3, "b": 2}
        assert list(json.loads(rendered)) == ["a", "b"]

    def test_values_are_exact(self):
        items = [("float", 0.1), ("big", 2**62), ("text", "ünïcode")]
        assert json.loads(render_mapping(items)) == dict(items)
