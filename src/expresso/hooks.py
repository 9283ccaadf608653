"""Lifecycle hooks observed by run_chain()."""

from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any

from expresso._types import Middleware
from expresso.context import RequestContext
from expresso.exceptions import MiddlewareError


class ChainHook:
    """Observer of one chain execution.

    ``on_middleware`` fires after every middleware that ran, with the
    wrapped exception when it raised. Every method defaults to a no-op.
    """

    async def on_chain_start(self, ctx: RequestContext) -> None:
        pass

    async def on_middleware(
        self,
        ctx: RequestContext,
        middleware: Middleware,
        error: MiddlewareError | None,
    ) -> None:
        pass

    async def on_chain_end(self, ctx: RequestContext) -> None:
        pass


class _CallbackHook(ChainHook):
    # Callbacks may be plain functions or coroutine functions.
    def __init__(self, callback: Callable[..., Any]) -> None:
        self.callback = callback

    async def _fire(self, *args: Any) -> None:
        result = self.callback(*args)
        if inspect.isawaitable(result):
            await result


class BeforeChain(_CallbackHook):
    """Calls ``callback(ctx)`` before the first middleware runs."""

    async def on_chain_start(self, ctx: RequestContext) -> None:
        await self._fire(ctx)


class AfterChain(_CallbackHook):
    """Calls ``callback(ctx)`` once the chain stops, however it stopped."""

    async def on_chain_end(self, ctx: RequestContext) -> None:
        await self._fire(ctx)


class AfterMiddleware(_CallbackHook):
    """Calls ``callback(ctx, middleware, error)`` after each middleware."""

    async def on_middleware(
        self,
        ctx: RequestContext,
        middleware: Middleware,
        error: MiddlewareError | None,
    ) -> None:
        await self._fire(ctx, middleware, error)
