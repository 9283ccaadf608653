"""ResponseWriter: status bookkeeping and a single terminal write."""

from __future__ import annotations

import logging
from collections.abc import Callable

from starlette.datastructures import MutableHeaders
from starlette.responses import Response

from expresso.config import Settings, get_settings
from expresso.encoding import encode
from expresso.exceptions import PayloadError, ResponseCommitted
from expresso.logger import RequestLogger
from expresso.negotiation import negotiate
from expresso.payloads import INTERNAL_ERROR, Formatted, error_formats

log = logging.getLogger(__name__)

POWERED_BY_HEADER = "x-powered-by"


class ResponseWriter:
    """Accumulates a status code and headers, then commits exactly one response.

    The first of ``send``, ``send_status`` or ``redirect`` commits the
    response. Any later write, including ``status``, is ignored and recorded
    as an error on the request logger; the committed response is never
    replaced.
    """

    def __init__(
        self,
        *,
        accept: str = "",
        logger: Callable[[], RequestLogger] | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.headers = MutableHeaders()
        self.status_code = 200
        self.media_type: str | None = None
        self._accept = accept
        self._logger = logger
        self._settings = settings or get_settings()
        self._response: Response | None = None

    @property
    def committed(self) -> bool:
        return self._response is not None

    def status(self, code: int) -> ResponseWriter:
        if self._guard("status"):
            return self
        self.status_code = code
        self._record_status(code)
        return self

    async def send(self, payload: object) -> None:
        if self._guard("send"):
            return
        try:
            body, media_type = await encode(
                payload, timeout=self._settings.write_timeout
            )
        except PayloadError as exc:
            self._log_error(exc.detail)
            log.warning("Payload could not be sent: %s", exc.detail)
            await self._send_error(500, INTERNAL_ERROR)
            return
        self._write(body, media_type)

    async def formatted(self, formats: Formatted) -> None:
        """Send the variant of ``formats`` preferred by the request's Accept header."""
        await self.send(negotiate(self._accept, formats))

    def send_status(self, code: int) -> None:
        if self._guard("send_status"):
            return
        self.status_code = code
        self._record_status(code)
        self._commit(Response(status_code=code, headers=self.headers))

    def redirect(self, url: str, status: int = 302) -> None:
        if self._guard("redirect"):
            return
        self.status_code = status
        self._record_status(status)
        self.headers["location"] = url
        self._commit(Response(status_code=status, headers=self.headers))

    def to_response(self) -> Response:
        """Return the committed response, or an empty one with the pending status."""
        if self._response is not None:
            return self._response
        return Response(status_code=self.status_code, headers=self.headers)

    async def _send_error(self, status: int, message: str) -> None:
        self.status_code = status
        self._record_status(status)
        payload = negotiate(self._accept, error_formats(status, message))
        body, media_type = await encode(payload)
        self._write(body, media_type)

    def _write(self, body: bytes, media_type: str) -> None:
        self.headers[POWERED_BY_HEADER] = self._settings.powered_by
        self.media_type = media_type
        self._commit(
            Response(
                content=body,
                status_code=self.status_code,
                headers=self.headers,
                media_type=media_type,
            )
        )

    def _commit(self, response: Response) -> None:
        if self._response is not None:
            raise ResponseCommitted()
        self._response = response

    def _guard(self, operation: str) -> bool:
        if self._response is None:
            return False
        self._log_error(f"{operation} ignored: {ResponseCommitted().detail}")
        return True

    def _record_status(self, code: int) -> None:
        if self._logger is not None:
            self._logger().status_code = code

    def _log_error(self, message: str) -> None:
        if self._logger is not None:
            self._logger().error(message)
