"""RequestLogger: buffered per-request log dumped as one grouped block."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

request_log = logging.getLogger("expresso.request")

SEPARATOR = "+---"
_RESET = "\033[0m"

_METHOD_COLORS = {
    "GET": "\033[0;32m",
    "POST": "\033[0;33m",
    "PUT": "\033[0;34m",
    "DELETE": "\033[0;35m",
    "PATCH": "\033[0;36m",
    "OPTIONS": "\033[0;37m",
    "HEAD": "\033[0;38m",
    "TRACE": "\033[0;39m",
    "CONNECT": "\033[0;40m",
}
_UNKNOWN_COLOR = "\033[0;43m"


class LogLevel(str, Enum):
    INFO = "INFO"
    ERROR = "ERROR"
    DEBUG = "DEBUG"

    @property
    def color(self) -> str:
        return {
            "INFO": "\033[0;32m",
            "ERROR": "\033[0;31m",
            "DEBUG": "\033[0;34m",
        }[self.value]


@dataclass(frozen=True)
class LogEntry:
    level: LogLevel
    message: str


class RequestLogger:
    """Collects leveled messages for one request.

    Nothing is written until ``dump()``, which emits the method, path, final
    status code and every entry in call order as a single log record.
    """

    def __init__(
        self, method: str, path: str, *, status_code: int = 200, colorize: bool = True
    ) -> None:
        self.method = method
        self.path = path
        self.status_code = status_code
        self.colorize = colorize
        self._entries: list[LogEntry] = []

    @property
    def entries(self) -> tuple[LogEntry, ...]:
        return tuple(self._entries)

    def info(self, message: str) -> None:
        self._entries.append(LogEntry(LogLevel.INFO, message))

    def error(self, message: str) -> None:
        self._entries.append(LogEntry(LogLevel.ERROR, message))

    def debug(self, message: str) -> None:
        self._entries.append(LogEntry(LogLevel.DEBUG, message))

    def render(self) -> str | None:
        if not self._entries:
            return None
        lines = [SEPARATOR, f"{self._method()} {self.path} {self._status()}"]
        lines.extend(
            f"{self._level(entry.level)} {entry.message}" for entry in self._entries
        )
        lines.append(SEPARATOR)
        return "\n".join(lines)

    def dump(self) -> None:
        block = self.render()
        if block is None:
            return
        request_log.info(block)

    def _method(self) -> str:
        if not self.colorize:
            return f"| {self.method}"
        color = _METHOD_COLORS.get(self.method)
        if color is None:
            return f"| {_UNKNOWN_COLOR}UNKNOWN{_RESET}"
        return f"| {color}{self.method}{_RESET}"

    def _status(self) -> str:
        if not self.colorize:
            return str(self.status_code)
        if 200 <= self.status_code < 300:
            return f"\033[0;32m{self.status_code}{_RESET}"
        if self.status_code >= 300:
            return f"\033[0;35m{self.status_code}{_RESET}"
        return str(self.status_code)

    def _level(self, level: LogLevel) -> str:
        if not self.colorize:
            return f"| {level.value}"
        return f"{level.color}| {level.value}{_RESET}"
