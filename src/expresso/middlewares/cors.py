"""CORS middleware: static access-control headers on every response."""

from __future__ import annotations

from dataclasses import dataclass

from expresso._types import Middleware
from expresso.context import RequestContext


@dataclass(frozen=True)
class Cors:
    origin: str = "*"
    methods: str = "GET, POST, PUT, PATCH, DELETE, OPTIONS"
    headers: str = "*"


def cors(config: Cors | None = None) -> Middleware:
    """Return a middleware that sets the CORS headers and advances the chain."""
    config = config or Cors()

    def cors_middleware(ctx: RequestContext) -> None:
        headers = ctx.response.headers
        headers["access-control-allow-origin"] = config.origin
        headers["access-control-allow-methods"] = config.methods
        headers["access-control-allow-headers"] = config.headers
        ctx.next()

    return cors_middleware
