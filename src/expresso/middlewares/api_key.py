"""API key authentication middleware."""

from __future__ import annotations

from expresso._types import ValidateCallback
from expresso.context import RequestContext
from expresso.payloads import error_formats


class APIKeyAuthentication:
    """Reads an API key from a header, falling back to a query parameter.

    The key is passed to ``validate``; a non-None result is stored in
    ``ctx.extras["api_key"]`` and the chain advances. A missing key, a
    rejected key or a failing callback ends the chain with a 401.
    """

    def __init__(
        self,
        validate: ValidateCallback,
        *,
        header: str = "api-key",
        query_param: str = "api-key",
    ) -> None:
        self._validate = validate
        self._header = header
        self._query_param = query_param

    async def __call__(self, ctx: RequestContext) -> None:
        key = ctx.request.headers.get(self._header, "")
        if not key:
            ctx.logger.info(
                f"{self._header} not found in headers, checking query params"
            )
            key = ctx.request.query_params.get(self._query_param, "")

        identity = None
        if key:
            try:
                identity = await self._validate(key)
            except Exception as exc:
                ctx.logger.error(f"api key validation failed: {exc}")

        if identity is None:
            await ctx.response.status(401).formatted(
                error_formats(401, "invalid api key")
            )
            return

        ctx.logger.debug("api key matched")
        ctx.extras["api_key"] = identity
        ctx.next()
