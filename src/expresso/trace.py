"""Per-request execution trace recorded when a chain runs in debug mode."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Literal

from expresso.exceptions import MiddlewareError

StepOutcome = Literal["NEXT", "HALTED", "FAILED"]
ChainOutcome = Literal["COMPLETED", "HALTED", "ERROR"]


@dataclass(frozen=True)
class TraceEntry:
    middleware_name: str
    duration_ms: float
    outcome: StepOutcome
    reason: str | None = None


@dataclass
class ChainTrace:
    """Entries in execution order plus the overall outcome of the chain."""

    entries: list[TraceEntry] = field(default_factory=list)
    total_duration_ms: float = 0.0
    outcome: ChainOutcome = "COMPLETED"
    error: MiddlewareError | None = None
    started: float = field(default_factory=time.perf_counter, repr=False)

    def record(
        self,
        name: str,
        since: float,
        outcome: StepOutcome,
        reason: str | None = None,
    ) -> None:
        elapsed = (time.perf_counter() - since) * 1000
        self.entries.append(TraceEntry(name, elapsed, outcome, reason))

    def finish(self, outcome: ChainOutcome, error: MiddlewareError | None) -> None:
        self.outcome = outcome
        self.error = error
        self.total_duration_ms = (time.perf_counter() - self.started) * 1000

    @property
    def halted_at(self) -> str | None:
        """Name of the middleware that stopped the chain, if any."""
        if self.outcome == "COMPLETED" or not self.entries:
            return None
        return self.entries[-1].middleware_name
