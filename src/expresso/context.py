"""RequestContext: per-request state shared by the middlewares of one chain."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from expresso.config import Settings, get_settings
from expresso.logger import RequestLogger
from expresso.request import RequestView
from expresso.response import ResponseWriter
from expresso.trace import ChainTrace


@dataclass
class RequestContext:
    """Binds a RequestView, its ResponseWriter, an extras store and a logger.

    A middleware must call ``next()`` to let the following middleware run;
    the flag is cleared before every middleware.
    """

    request: RequestView
    settings: Settings = field(default_factory=get_settings, repr=False)
    extras: dict[Any, Any] = field(default_factory=dict)
    response: ResponseWriter = field(init=False, repr=False)
    trace: ChainTrace | None = field(default=None, init=False, repr=False)
    _advance: bool = field(default=False, init=False, repr=False)
    _logger: RequestLogger | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.response = ResponseWriter(
            accept=self.request.accept,
            logger=lambda: self.logger,
            settings=self.settings,
        )

    @property
    def logger(self) -> RequestLogger:
        """The request logger, created on first access."""
        if self._logger is None:
            self._logger = RequestLogger(
                self.request.method.value,
                self.request.path,
                status_code=self.response.status_code,
                colorize=self.settings.log_color,
            )
        return self._logger

    @property
    def advancing(self) -> bool:
        return self._advance

    def next(self) -> None:
        self._advance = True

    def abort(self) -> None:
        self._advance = False

    def dump(self) -> None:
        """Flush the request log if anything was recorded."""
        if self._logger is not None:
            self._logger.dump()
