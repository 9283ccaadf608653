"""chain_endpoint(): runs a Chain for each request and returns its response."""

from __future__ import annotations

import inspect
import logging
import time
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from starlette.requests import Request
from starlette.responses import Response

from expresso._types import ErrorHandler
from expresso.chain import Chain, ResolvedChain, invoke, middleware_name
from expresso.config import Settings, get_settings
from expresso.context import RequestContext
from expresso.exceptions import MiddlewareError, RequestReadError
from expresso.payloads import INTERNAL_ERROR, UNREADABLE_REQUEST, error_formats
from expresso.request import build_request_view
from expresso.response import ResponseWriter
from expresso.trace import ChainOutcome, ChainTrace

if TYPE_CHECKING:
    from expresso.hooks import ChainHook

log = logging.getLogger(__name__)

Endpoint = Callable[[Request], Awaitable[Response]]


def chain_endpoint(
    chain: Chain,
    *,
    settings: Settings | None = None,
    error_handler: ErrorHandler | None = None,
) -> Endpoint:
    """Return a Starlette endpoint that executes the chain for every request."""
    resolved = chain.resolve()

    async def endpoint(request: Request) -> Response:
        current = settings or get_settings()
        try:
            view = await build_request_view(request, timeout=current.read_timeout)
        except RequestReadError as exc:
            log.warning(
                "%s %s: %s (%r)",
                request.method,
                request.url.path,
                exc.detail,
                exc.cause,
            )
            return await unreadable_request_response(
                request.headers.get("accept", ""), current
            )

        ctx = RequestContext(request=view, settings=current)
        await run_chain(resolved, ctx, error_handler=error_handler)
        ctx.dump()
        return ctx.response.to_response()

    return endpoint


async def unreadable_request_response(
    accept: str, settings: Settings | None = None
) -> Response:
    """The fixed 500 response sent when a request body cannot be read."""
    writer = ResponseWriter(accept=accept, settings=settings)
    await writer.status(500).formatted(error_formats(500, UNREADABLE_REQUEST))
    return writer.to_response()


async def run_chain(
    resolved: ResolvedChain,
    ctx: RequestContext,
    *,
    error_handler: ErrorHandler | None = None,
) -> None:
    """Invoke middlewares in order until one does not call ``ctx.next()``.

    An exception raised by a middleware ends the chain; it is logged, handed
    to ``error_handler`` and, if nothing was sent yet, answered with a 500.
    A failing hook is logged and skipped; it never ends the chain.
    """
    trace = ChainTrace() if resolved.debug else None

    for hook in resolved.hooks:
        await _fire(ctx, hook, "on_chain_start", ctx)

    outcome: ChainOutcome = "COMPLETED"
    error: MiddlewareError | None = None
    for middleware in resolved.middlewares:
        name = middleware_name(middleware)
        ctx.abort()
        started = time.perf_counter()
        try:
            await invoke(middleware, ctx)
        except Exception as exc:
            error = MiddlewareError(f"Unhandled error in {name}: {exc}", cause=exc)
            if trace is not None:
                trace.record(name, started, "FAILED", str(exc))
            for hook in resolved.hooks:
                await _fire(ctx, hook, "on_middleware", ctx, middleware, error)
            await _handle_error(ctx, error, error_handler)
            outcome = "ERROR"
            break

        advancing = ctx.advancing
        if trace is not None:
            trace.record(name, started, "NEXT" if advancing else "HALTED")
        for hook in resolved.hooks:
            await _fire(ctx, hook, "on_middleware", ctx, middleware, None)
        if not advancing:
            outcome = "HALTED"
            break

    if trace is not None:
        trace.finish(outcome, error)
        ctx.trace = trace

    for hook in resolved.hooks:
        await _fire(ctx, hook, "on_chain_end", ctx)


async def _fire(ctx: RequestContext, hook: ChainHook, event: str, *args: Any) -> None:
    try:
        await getattr(hook, event)(*args)
    except Exception as exc:
        hook_name = type(hook).__name__
        ctx.logger.error(f"{hook_name}.{event} failed: {exc}")
        log.exception("%s.%s failed", hook_name, event)


async def _handle_error(
    ctx: RequestContext,
    error: MiddlewareError,
    error_handler: ErrorHandler | None,
) -> None:
    ctx.logger.error(error.detail)
    log.error(
        "%s %s: %s",
        ctx.request.raw_method,
        ctx.request.path,
        error.detail,
        exc_info=error.cause,
    )

    if error_handler is not None:
        try:
            result = error_handler(ctx, error.cause or error)
            if inspect.isawaitable(result):
                await result
        except Exception as exc:
            ctx.logger.error(f"Error handler failed: {exc}")
            log.exception("Error handler failed")

    if not ctx.response.committed:
        await ctx.response.status(500).formatted(error_formats(500, INTERNAL_ERROR))
