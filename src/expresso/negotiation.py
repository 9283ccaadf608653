"""Content negotiation: pick one variant of a Formatted set by Accept header."""

from __future__ import annotations

from expresso.payloads import Formatted, Payload

# Media type -> attribute of Formatted
ACCEPT_TABLE: dict[str, str] = {
    "text/plain": "text",
    "text/html": "html",
    "application/json": "json",
    "application/xml": "xml",
    "application/x-yaml": "yaml",
    "text/yaml": "yaml",
}


def preferred_media_type(accept: str | None) -> str:
    """Return the first comma-separated token of an Accept header.

    Quality values and wildcards are not interpreted.
    """
    if not accept:
        return ""
    return accept.split(",", 1)[0].strip()


def negotiate(accept: str | None, formats: Formatted) -> Payload:
    """Return the variant of ``formats`` matching ``accept``, else the default."""
    attr = ACCEPT_TABLE.get(preferred_media_type(accept))
    if attr is None:
        return formats.default
    variant: Payload | None = getattr(formats, attr)
    if variant is None:
        return formats.default
    return variant
