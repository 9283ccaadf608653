"""Payload variants, the Formatted set, and the fixed error payloads."""

from __future__ import annotations

from dataclasses import dataclass, field
from os import PathLike
from typing import Any, Union

import jinja2


@dataclass(frozen=True)
class Text:
    """Plain text body sent as ``text/plain``."""

    content: str


@dataclass(frozen=True)
class HTML:
    """Markup sent as-is as ``text/html``."""

    content: str


@dataclass(frozen=True)
class JSON:
    data: Any


@dataclass(frozen=True)
class XML:
    """Structural data serialized under a single ``root`` element."""

    data: Any
    root: str = "response"


@dataclass(frozen=True)
class YAML:
    data: Any


@dataclass(frozen=True)
class File:
    """File read from disk; ``media_type`` is guessed from the name when omitted."""

    path: str | PathLike[str]
    media_type: str | None = None


@dataclass(frozen=True)
class Template:
    """Jinja2 template rendered against ``properties``."""

    template: jinja2.Template
    properties: dict[str, Any] = field(default_factory=dict)
    media_type: str = "text/html"


Payload = Union[Text, HTML, JSON, XML, YAML, File, Template]

PAYLOAD_TYPES: tuple[type, ...] = (Text, HTML, JSON, XML, YAML, File, Template)


@dataclass(frozen=True)
class Formatted:
    """Variants of one logical payload, chosen between by the Accept header.

    ``default`` is mandatory and is sent whenever the requested format is
    unknown or has no entry here.
    """

    default: Payload
    text: Text | None = None
    html: HTML | None = None
    json: JSON | None = None
    xml: XML | None = None
    yaml: YAML | None = None


def error_formats(status: int, message: str) -> Formatted:
    """Build the fixed ``{"status", "error"}`` payload in every format."""
    data = {"status": status, "error": message}
    title = f"Error - {message}"
    return Formatted(
        text=Text(title),
        html=HTML(
            f"<html><head><title>{title}</title></head><body>{title}</body></html>"
        ),
        json=JSON(data),
        xml=XML(data, root="error"),
        yaml=YAML(data),
        default=JSON(data),
    )


UNREADABLE_REQUEST = "Unable to process the request"
INTERNAL_ERROR = "Internal Server Error"
NOT_FOUND = "Not Found"
