"""App: route registration and serving on top of Starlette and uvicorn."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

import uvicorn
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import BaseRoute, Mount, Route
from starlette.staticfiles import StaticFiles
from starlette.types import Receive, Scope, Send

from expresso._types import ErrorHandler, Middleware
from expresso.chain import Chain
from expresso.config import Settings, configure_logging, get_settings
from expresso.context import RequestContext
from expresso.dispatcher import Endpoint, chain_endpoint
from expresso.hooks import ChainHook
from expresso.payloads import NOT_FOUND, error_formats


async def not_found(ctx: RequestContext) -> None:
    """Default not-found middleware: a negotiated 404 error payload."""
    await ctx.response.status(404).formatted(error_formats(404, NOT_FOUND))


@dataclass(frozen=True)
class _RouteDef:
    method: str
    path: str
    middlewares: tuple[Middleware | Chain, ...]


@dataclass(frozen=True)
class _StaticDef:
    path: str
    directory: str | os.PathLike[str]


def _head_first(item: _RouteDef | _StaticDef) -> int:
    return 0 if isinstance(item, _RouteDef) and item.method == "HEAD" else 1


class App:
    """A set of routes, each bound to its own middleware chain.

    The app is an ASGI application; the underlying Starlette instance is
    built on first use and rebuilt after any registration.
    """

    def __init__(
        self, settings: Settings | None = None, *, debug: bool | None = None
    ) -> None:
        self.settings = settings or get_settings()
        self.debug = self.settings.debug if debug is None else debug
        self._routes: list[_RouteDef | _StaticDef] = []
        self._hooks: list[ChainHook] = []
        self._not_found: tuple[Middleware | Chain, ...] = (not_found,)
        self._error_handler: ErrorHandler | None = None
        self._asgi: Starlette | None = None

    def route(self, method: str, path: str, *middlewares: Middleware | Chain) -> None:
        self._routes.append(_RouteDef(method.upper(), path, middlewares))
        self._asgi = None

    def get(self, path: str, *middlewares: Middleware | Chain) -> None:
        self.route("GET", path, *middlewares)

    def post(self, path: str, *middlewares: Middleware | Chain) -> None:
        self.route("POST", path, *middlewares)

    def put(self, path: str, *middlewares: Middleware | Chain) -> None:
        self.route("PUT", path, *middlewares)

    def patch(self, path: str, *middlewares: Middleware | Chain) -> None:
        self.route("PATCH", path, *middlewares)

    def delete(self, path: str, *middlewares: Middleware | Chain) -> None:
        self.route("DELETE", path, *middlewares)

    def head(self, path: str, *middlewares: Middleware | Chain) -> None:
        self.route("HEAD", path, *middlewares)

    def options(self, path: str, *middlewares: Middleware | Chain) -> None:
        self.route("OPTIONS", path, *middlewares)

    def serve_static(self, path: str, directory: str | os.PathLike[str]) -> None:
        """Serve files below ``directory`` under the ``path`` prefix."""
        self._routes.append(_StaticDef(path, directory))
        self._asgi = None

    def handle_not_found(self, *middlewares: Middleware | Chain) -> None:
        self._not_found = middlewares
        self._asgi = None

    def handle_error(self, handler: ErrorHandler) -> None:
        """Register ``handler(ctx, exc)`` for exceptions raised by middlewares."""
        self._error_handler = handler
        self._asgi = None

    def add_hook(self, hook: ChainHook) -> None:
        self._hooks.append(hook)
        self._asgi = None

    def build(self) -> Starlette:
        if self._asgi is not None:
            return self._asgi

        # Starlette answers HEAD on GET routes; explicit HEAD chains go first.
        routes: list[BaseRoute] = []
        for item in sorted(self._routes, key=_head_first):
            if isinstance(item, _StaticDef):
                static = StaticFiles(directory=item.directory)
                routes.append(Mount(item.path, app=static))
            else:
                endpoint = self._endpoint(item.middlewares)
                routes.append(Route(item.path, endpoint, methods=[item.method]))

        not_found_endpoint = self._endpoint(self._not_found)

        async def handle_404(request: Request, exc: Exception) -> Response:
            return await not_found_endpoint(request)

        self._asgi = Starlette(
            debug=self.debug,
            routes=routes,
            exception_handlers={404: handle_404},
        )
        return self._asgi

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self.build()(scope, receive, send)

    def listen_and_serve(
        self, host: str | None = None, port: int | None = None, **options: Any
    ) -> None:
        configure_logging(self.settings)
        uvicorn.run(
            self,
            host=host or self.settings.host,
            port=port if port is not None else self.settings.port,
            h11_max_incomplete_event_size=self.settings.max_header_bytes,
            timeout_keep_alive=max(int(self.settings.read_timeout), 1),
            log_level=self.settings.log_level.lower(),
            **options,
        )

    def listen_and_serve_tls(
        self,
        certfile: str,
        keyfile: str,
        host: str | None = None,
        port: int | None = None,
        **options: Any,
    ) -> None:
        self.listen_and_serve(
            host, port, ssl_certfile=certfile, ssl_keyfile=keyfile, **options
        )

    def _endpoint(self, middlewares: tuple[Middleware | Chain, ...]) -> Endpoint:
        chain = Chain(*middlewares, debug=self.debug)
        for hook in self._hooks:
            chain.add_hook(hook)
        return chain_endpoint(
            chain, settings=self.settings, error_handler=self._error_handler
        )
