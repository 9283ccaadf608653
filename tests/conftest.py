"""Shared pytest fixtures for expresso tests."""

from __future__ import annotations

from typing import Any

import pytest
from starlette.datastructures import URL, Headers, QueryParams
from starlette.requests import Request

from expresso.config import Settings
from expresso.context import RequestContext
from expresso.request import Method, Params, RequestView


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment, without ANSI colours."""
    return Settings(_env_file=None, log_color=False)


@pytest.fixture
def make_request() -> Any:
    """Factory for Starlette Request objects backed by a raw ASGI scope.

    ``disconnect=True`` makes the client vanish before the body is sent.
    """

    def _make(
        method: str = "GET",
        path: str = "/",
        headers: dict[str, str] | None = None,
        query_string: str = "",
        body: bytes = b"",
        path_params: dict[str, Any] | None = None,
        disconnect: bool = False,
    ) -> Request:
        scope: dict[str, Any] = {
            "type": "http",
            "method": method,
            "scheme": "http",
            "server": ("testserver", 80),
            "path": path,
            "query_string": query_string.encode(),
            "headers": [
                (k.lower().encode(), v.encode()) for k, v in (headers or {}).items()
            ],
            "root_path": "",
            "path_params": path_params or {},
        }
        if disconnect:
            messages: list[dict[str, Any]] = [{"type": "http.disconnect"}]
        else:
            messages = [{"type": "http.request", "body": body, "more_body": False}]

        async def receive() -> dict[str, Any]:
            if messages:
                return messages.pop(0)
            return {"type": "http.disconnect"}

        return Request(scope, receive)

    return _make


@pytest.fixture
def make_view() -> Any:
    """Factory for RequestView snapshots without going through a Request."""

    def _make(
        method: str = "GET",
        path: str = "/",
        headers: dict[str, str] | None = None,
        query_string: str = "",
        body: bytes = b"",
        params: dict[str, str] | None = None,
    ) -> RequestView:
        return RequestView(
            method=Method.parse(method),
            raw_method=method,
            url=URL(f"http://testserver{path}?{query_string}".rstrip("?")),
            headers=Headers(headers or {}),
            body=body,
            query_params=QueryParams(query_string),
            params=Params.from_mapping(params or {}),
        )

    return _make


@pytest.fixture
def make_context(make_view: Any, settings: Settings) -> Any:
    """Factory for RequestContext objects around a fresh RequestView."""

    def _make(**kwargs: Any) -> RequestContext:
        return RequestContext(request=make_view(**kwargs), settings=settings)

    return _make
