"""Exception hierarchy for request reading, payload encoding and middleware failures."""

from __future__ import annotations


class ExpressoException(Exception):
    """Base for all expresso exceptions."""


class RequestReadError(ExpressoException):
    """The inbound request could not be read as a whole."""

    def __init__(self, detail: str, *, cause: Exception | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.cause = cause


class PayloadError(ExpressoException):
    """A payload variant could not be encoded, read or rendered."""

    def __init__(self, detail: str, *, cause: Exception | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.cause = cause


class UnsupportedPayload(PayloadError):
    """The object handed to ``send`` is not a payload variant."""

    def __init__(self, payload: object) -> None:
        super().__init__(f"Unsupported response type: {type(payload).__name__}")
        self.payload = payload


class ResponseCommitted(ExpressoException):
    """A write was attempted after the response was committed."""

    def __init__(self, detail: str = "Response already committed") -> None:
        super().__init__(detail)
        self.detail = detail


class MiddlewareError(ExpressoException):
    """Wraps an unexpected exception raised by a middleware."""

    def __init__(self, detail: str, *, cause: Exception | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.cause = cause
