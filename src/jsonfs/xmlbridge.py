"""Convert between JSON documents and XML.

Mapping:
    {"a": {"@id": "1", "#text": "x"}}   <->  <a id="1">x</a>
    {"a": {"b": [1, 2]}}                <->  <a><b>1</b><b>2</b></a>
    {"a": null}                         <->  <a />

XML carries no types, so scalars come back from xml_to_json as strings.
"""

from __future__ import annotations

import json
import xml.etree.ElementTree as ET
from typing import Any

from jsonfs.errors import InvalidArgumentError, require

_ATTR_PREFIX = "@"
_TEXT_KEY = "#text"


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _build(tag: str, value: Any) -> list[ET.Element]:
    if isinstance(value, list):
        elements: list[ET.Element] = []
        for v in value:
            elements.extend(_build(tag, v))
        return elements
    el = ET.Element(tag)
    if isinstance(value, dict):
        for key, child in value.items():
            if key.startswith(_ATTR_PREFIX):
                el.set(key[len(_ATTR_PREFIX):], _scalar(child))
            elif key == _TEXT_KEY:
                el.text = _scalar(child)
            else:
                el.extend(_build(key, child))
    elif value is not None:
        el.text = _scalar(value)
    return [el]


def json_to_xml(json_text: str, root_name: str | None = None) -> str:
    """Convert a JSON object to an XML string.

    Without root_name the object must have exactly one key, which names the
    root element. With root_name the whole document becomes its content.
    """
    require(json_text, "json_text")
    try:
        data = json.loads(json_text)
    except json.JSONDecodeError as exc:
        msg = f"Invalid JSON: {exc}"
        raise InvalidArgumentError(msg) from exc

    if root_name:
        if isinstance(data, list):
            data = {"item": data}
        root = _build(root_name, data)[0]
    else:
        if not isinstance(data, dict) or len(data) != 1:
            msg = "JSON root object must have exactly one property (or pass root_name)"
            raise InvalidArgumentError(msg)
        (tag, value), = data.items()
        if isinstance(value, list):
            msg = f"JSON root property {tag!r} is an array (pass root_name)"
            raise InvalidArgumentError(msg)
        root = _build(tag, value)[0]
    return ET.tostring(root, encoding="unicode")


def _parse(el: ET.Element) -> Any:
    attrs: dict[str, Any] = {_ATTR_PREFIX + k: v for k, v in el.attrib.items()}
    children = list(el)
    text = (el.text or "").strip()
    if not attrs and not children:
        return text or None

    out = attrs
    for child in children:
        value = _parse(child)
        if child.tag not in out:
            out[child.tag] = value
        elif isinstance(out[child.tag], list):
            out[child.tag].append(value)
        else:
            out[child.tag] = [out[child.tag], value]
    if text:
        out[_TEXT_KEY] = text
    return out


def xml_to_json(xml_text: str, *, indent: int | None = None) -> str:
    """Convert an XML string to a JSON object keyed by the root element name."""
    require(xml_text, "xml_text")
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as exc:
        msg = f"Invalid XML: {exc}"
        raise InvalidArgumentError(msg) from exc
    return json.dumps({root.tag: _parse(root)}, ensure_ascii=False, indent=indent)
