"""Shared type aliases."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from expresso.context import RequestContext

# A middleware receives the request context; it may be sync or async.
Middleware = Callable[["RequestContext"], Union[Awaitable[None], None]]

# Called with the context and the exception a middleware raised.
ErrorHandler = Callable[["RequestContext", Exception], Union[Awaitable[None], None]]

# Validates an API key and returns the identity it belongs to, or None.
ValidateCallback = Callable[[str], Awaitable[Any]]
