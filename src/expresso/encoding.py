"""Payload encoding: turns a payload variant into body bytes and a media type."""

from __future__ import annotations

import json
import mimetypes
import re
from collections.abc import Mapping
from typing import Any
from xml.etree import ElementTree

import anyio
import yaml

from expresso.exceptions import PayloadError, UnsupportedPayload
from expresso.payloads import (
    HTML,
    JSON,
    PAYLOAD_TYPES,
    XML,
    YAML,
    File,
    Payload,
    Template,
    Text,
)

MEDIA_TEXT = "text/plain"
MEDIA_HTML = "text/html"
MEDIA_JSON = "application/json"
MEDIA_XML = "application/xml"
MEDIA_YAML = "application/x-yaml"
MEDIA_OCTET = "application/octet-stream"

_XML_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_.-]*$")


async def encode(payload: object, *, timeout: float = 10.0) -> tuple[bytes, str]:
    """Encode ``payload`` and return ``(body, media_type)``.

    Raises UnsupportedPayload for objects outside the payload union and
    PayloadError for any serialization, rendering or file read failure.
    """
    if not isinstance(payload, PAYLOAD_TYPES):
        raise UnsupportedPayload(payload)

    try:
        if isinstance(payload, File):
            return await _read_file(payload, timeout)
        return _encode(payload)
    except Exception as exc:
        raise PayloadError(
            f"Unable to encode {type(payload).__name__} payload: {exc}", cause=exc
        ) from exc


def _encode(payload: Payload) -> tuple[bytes, str]:
    if isinstance(payload, Text):
        return payload.content.encode("utf-8"), MEDIA_TEXT
    if isinstance(payload, HTML):
        return payload.content.encode("utf-8"), MEDIA_HTML
    if isinstance(payload, JSON):
        return dump_json(payload.data), MEDIA_JSON
    if isinstance(payload, XML):
        return dump_xml(payload.data, payload.root), MEDIA_XML
    if isinstance(payload, YAML):
        return dump_yaml(payload.data), MEDIA_YAML
    if isinstance(payload, Template):
        rendered = payload.template.render(**payload.properties)
        return rendered.encode("utf-8"), payload.media_type
    raise UnsupportedPayload(payload)


async def _read_file(payload: File, timeout: float) -> tuple[bytes, str]:
    media_type = (
        payload.media_type
        or mimetypes.guess_type(str(payload.path))[0]
        or MEDIA_OCTET
    )
    with anyio.fail_after(timeout):
        content = await anyio.Path(payload.path).read_bytes()
    return content, media_type


def dump_json(data: Any) -> bytes:
    return json.dumps(
        data,
        ensure_ascii=False,
        allow_nan=False,
        indent=None,
        separators=(",", ":"),
    ).encode("utf-8")


def dump_yaml(data: Any) -> bytes:
    return yaml.safe_dump(
        data, sort_keys=False, allow_unicode=True, default_flow_style=False
    ).encode("utf-8")


def dump_xml(data: Any, root: str = "response") -> bytes:
    """Serialize mappings, sequences and scalars under a ``root`` element.

    Mapping keys become child elements, sequence items become ``<item>``
    children, ``None`` leaves an empty element.
    """
    element = ElementTree.Element(_xml_tag(root))
    _fill_xml(element, data, set())
    return ElementTree.tostring(element, encoding="unicode").encode("utf-8")


def _fill_xml(element: ElementTree.Element, value: Any, seen: set[int]) -> None:
    if isinstance(value, Mapping):
        _enter(value, seen)
        for key, item in value.items():
            _fill_xml(ElementTree.SubElement(element, _xml_tag(key)), item, seen)
        seen.discard(id(value))
    elif isinstance(value, (list, tuple, set, frozenset)):
        _enter(value, seen)
        for item in value:
            _fill_xml(ElementTree.SubElement(element, "item"), item, seen)
        seen.discard(id(value))
    elif value is None:
        return
    elif isinstance(value, bool):
        element.text = "true" if value else "false"
    elif isinstance(value, (str, int, float)):
        element.text = str(value)
    else:
        raise TypeError(
            f"Object of type {type(value).__name__} is not XML serializable"
        )


def _enter(value: Any, seen: set[int]) -> None:
    if id(value) in seen:
        raise ValueError("Circular reference detected")
    seen.add(id(value))


def _xml_tag(name: Any) -> str:
    if not isinstance(name, str) or not _XML_NAME.match(name):
        raise ValueError(f"Invalid XML element name: {name!r}")
    return name
