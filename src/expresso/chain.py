"""Chain: ordered container of middlewares for one route."""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import TYPE_CHECKING

from expresso._types import Middleware

if TYPE_CHECKING:
    from expresso.context import RequestContext
    from expresso.hooks import ChainHook


@dataclass(frozen=True)
class ResolvedChain:
    """Immutable, pre-computed execution plan."""

    middlewares: tuple[Middleware, ...]
    hooks: tuple[ChainHook, ...] = ()
    debug: bool = False


class Chain:
    """Ordered container of middlewares. Nested chains are flattened in place."""

    def __init__(self, *middlewares: Middleware | Chain, debug: bool = False) -> None:
        self._items: list[Middleware | Chain] = list(middlewares)
        self._hooks: list[ChainHook] = []
        self._debug = debug
        self._resolved: ResolvedChain | None = None

    def add(self, *middlewares: Middleware | Chain) -> Chain:
        self._items.extend(middlewares)
        self._resolved = None
        return self

    def add_hook(self, hook: ChainHook) -> Chain:
        self._hooks.append(hook)
        self._resolved = None
        return self

    def resolve(self) -> ResolvedChain:
        if self._resolved is not None:
            return self._resolved

        flat: list[Middleware] = []
        self._flatten(self._items, flat)

        self._resolved = ResolvedChain(
            middlewares=tuple(flat),
            hooks=tuple(self._hooks),
            debug=self._debug,
        )
        return self._resolved

    @staticmethod
    def _flatten(items: list[Middleware | Chain], out: list[Middleware]) -> None:
        for item in items:
            if isinstance(item, Chain):
                Chain._flatten(item._items, out)
            elif callable(item):
                out.append(item)
            else:
                raise TypeError(f"Middleware must be callable, got {item!r}")


async def invoke(middleware: Middleware, ctx: RequestContext) -> None:
    """Run one middleware to completion, awaiting it when it is async."""
    result = middleware(ctx)
    if inspect.isawaitable(result):
        await result


def middleware_name(middleware: Middleware) -> str:
    return getattr(middleware, "__name__", None) or type(middleware).__name__
