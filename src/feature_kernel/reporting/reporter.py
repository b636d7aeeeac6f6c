from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from feature_kernel.kernel.results import RunResult


@runtime_checkable
class Reporter(Protocol):
    # Progress arrives at feature/scenario/retry/step boundaries; report exactly once per run.
    async def progress(self, event: str, info: str | None = None) -> None:
        raise NotImplementedError("Reporter.progress must be implemented")

    async def report(self, result: RunResult) -> None:
        raise NotImplementedError("Reporter.report must be implemented")


@dataclass(slots=True)
class NoOpReporter(Reporter):
    # Default reporter when the caller configures none.
    async def progress(self, event: str, info: str | None = None) -> None:
        _ = (event, info)

    async def report(self, result: RunResult) -> None:
        _ = result


@dataclass(slots=True)
class FanoutReporter(Reporter):
    # Forwards every call to each reporter in order, awaiting one before the next.
    reporters: Sequence[Reporter] = field(default_factory=list)

    async def progress(self, event: str, info: str | None = None) -> None:
        for reporter in self.reporters:
            await reporter.progress(event, info)

    async def report(self, result: RunResult) -> None:
        for reporter in self.reporters:
            await reporter.report(result)
