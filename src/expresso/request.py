"""RequestView: immutable snapshot of an inbound request."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import anyio
from starlette.datastructures import URL, Headers, QueryParams
from starlette.requests import Request

from expresso.exceptions import RequestReadError

FORM_URLENCODED = "application/x-www-form-urlencoded"


def media_type_of(headers: Headers) -> str:
    """Content-Type without parameters, lower-cased; empty when absent."""
    return headers.get("content-type", "").split(";")[0].strip().lower()


class Method(str, Enum):
    """Standard HTTP verbs, plus ``UNKNOWN`` for anything else."""

    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    CONNECT = "CONNECT"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: str) -> Method:
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class Params:
    """Ordered route parameters bound by the router. Names are unique."""

    items: tuple[tuple[str, str], ...] = ()

    @classmethod
    def from_mapping(cls, mapping: dict[str, Any]) -> Params:
        return cls(tuple((name, str(value)) for name, value in mapping.items()))

    def by_name(self, name: str) -> str:
        for key, value in self.items:
            if key == name:
                return value
        return ""

    def as_dict(self) -> dict[str, str]:
        return dict(self.items)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __contains__(self, name: object) -> bool:
        return any(key == name for key, _ in self.items)


@dataclass(frozen=True)
class RequestView:
    """Read-only view of one request, shared by every middleware in a chain."""

    method: Method
    raw_method: str
    url: URL
    headers: Headers
    body: bytes = b""
    query_params: QueryParams = field(default_factory=QueryParams)
    params: Params = field(default_factory=Params)

    @property
    def path(self) -> str:
        return self.url.path

    @property
    def content_type(self) -> str:
        """Media type of the body without parameters, e.g. ``application/json``."""
        return media_type_of(self.headers)

    @property
    def accept(self) -> str:
        return self.headers.get("accept", "")


async def build_request_view(request: Request, *, timeout: float = 10.0) -> RequestView:
    """Read the request body once and freeze the request into a RequestView.

    Raises RequestReadError when the body cannot be read in full within
    ``timeout`` seconds; no partial view is ever returned.
    """
    try:
        with anyio.fail_after(timeout):
            body = await request.body()
    except Exception as exc:
        raise RequestReadError("Unable to read request body", cause=exc) from exc

    headers = request.headers
    query_params = request.query_params

    if media_type_of(headers) == FORM_URLENCODED:
        form = QueryParams(body.decode("latin-1"))
        query_params = QueryParams(
            list(form.multi_items()) + list(query_params.multi_items())
        )

    return RequestView(
        method=Method.parse(request.method),
        raw_method=request.method,
        url=request.url,
        headers=headers,
        body=body,
        query_params=query_params,
        params=Params.from_mapping(request.path_params),
    )
