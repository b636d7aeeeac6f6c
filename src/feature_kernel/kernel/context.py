from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Literal, TypeAlias

from feature_kernel.kernel.model import Feature, Scenario
from feature_kernel.kernel.store import Store

ProgressEvent: TypeAlias = Literal["feature", "scenario", "retry", "step", "step passed", "step error"]
ProgressSink: TypeAlias = Callable[..., Awaitable[None]]


async def _no_progress(event: str, info: str | None = None) -> None:
    _ = (event, info)


@dataclass(slots=True)
class RunnerContext:
    # Handed to every step handler; store and session are shared across the whole run.
    store: Store
    progress: ProgressSink = _no_progress
    session: object = field(default_factory=SimpleNamespace)
    feature: Feature | None = None
    scenario: Scenario | None = None
    attempt: int = 1
