"""Tests for the JSON codec."""
from __future__ import annotations

import json
from dataclasses import dataclass

import pytest

from jsonfs.codec import deserialize_object, serialize_object
from jsonfs.errors import InvalidArgumentError


@dataclass
class Point:
    x: int
    y: int


class Tagged:
    def __init__(self, tag: str) -> None:
        self.tag = tag

    def to_dict(self) -> dict:
        return {"tag": self.tag}

    @classmethod
    def from_dict(cls, d: dict) -> "Tagged":
        return cls(d["tag"])


def test_dataclass_round_trip():
    text = serialize_object(Point(1, 2))
    assert json.loads(text) == {"x": 1, "y": 2}
    assert deserialize_object(text, Point) == Point(1, 2)


def test_to_dict_and_from_dict_are_used():
    text = serialize_object(Tagged("t"))
    assert json.loads(text) == {"tag": "t"}
    assert deserialize_object(text, Tagged).tag == "t"


def test_plain_values():
    assert serialize_object("test") == '"test"'
    assert deserialize_object('"test"', str) == "test"
    assert deserialize_object("[1, 2]", list) == [1, 2]
    assert deserialize_object('{"a": 1}', "widget") == {"a": 1}
    assert deserialize_object("3", float) == 3.0


def test_non_ascii_is_kept_readable():
    assert serialize_object({"name": "café"}) == '{"name": "café"}'


def test_required_arguments():
    with pytest.raises(InvalidArgumentError):
        serialize_object(None)
    with pytest.raises(InvalidArgumentError):
        deserialize_object("", str)


def test_malformed_json_raises():
    with pytest.raises(json.JSONDecodeError):
        deserialize_object("{nope", Point)


def test_plain_types_are_not_coerced():
    with pytest.raises(TypeError):
        deserialize_object("1.5", int)
    with pytest.raises(TypeError):
        deserialize_object('{"k": 1}', str)
    with pytest.raises(TypeError):
        deserialize_object("true", int)
    assert deserialize_object("true", bool) is True
