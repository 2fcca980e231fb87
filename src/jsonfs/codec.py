"""JSON encode/decode for stored items.

Objects are encoded via ``to_dict()`` when they define one, via
``dataclasses.asdict`` for dataclasses, and as-is otherwise. Decoding mirrors
that with ``from_dict()``, dataclass construction, or a plain type call.
"""

from __future__ import annotations

import dataclasses
import json
from typing import Any

from jsonfs.errors import InvalidArgumentError, require


def _to_jsonable(obj: Any) -> Any:
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    return obj


def serialize_object(obj: Any, *, indent: int | None = None) -> str:
    """Encode obj as a JSON document. Raises TypeError for unsupported values."""
    if obj is None:
        msg = "obj is required"
        raise InvalidArgumentError(msg)
    return json.dumps(_to_jsonable(obj), ensure_ascii=False, indent=indent)


def deserialize_object(text: str, item_type: type | str | None = None) -> Any:
    """Decode a JSON document, building item_type from it when it is a class.

    A string (or None) item_type returns the plain decoded value. Plain
    types are never coerced: a value of the wrong type raises TypeError
    (ints are accepted as floats). Raises json.JSONDecodeError on malformed
    input.
    """
    require(text, "text")
    data = json.loads(text)
    if item_type is None or isinstance(item_type, str):
        return data

    from_dict = getattr(item_type, "from_dict", None)
    if callable(from_dict):
        return from_dict(data)
    if dataclasses.is_dataclass(item_type):
        return item_type(**data)
    if isinstance(data, item_type) and not (isinstance(data, bool) and item_type is not bool):
        return data
    if item_type is float and isinstance(data, int) and not isinstance(data, bool):
        return float(data)
    msg = f"Expected {item_type.__name__}, got {type(data).__name__}"
    raise TypeError(msg)
