from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

LOG_LEVELS = ("debug", "info", "warning", "error")


@dataclass(frozen=True, slots=True)
class LogMessage:
    # One line of a test-run log: runner lifecycle (retries, reporter failures)
    # or a rendered feature/scenario/step result. Fields carry step text,
    # timings and expected/actual values.
    level: str
    message: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
    fields: dict[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.level or not self.message:
            raise ValueError("LogMessage requires non-empty level/message")
        if self.level not in LOG_LEVELS:
            raise ValueError(f"LogMessage.level must be one of: {list(LOG_LEVELS)}")


class LogSink(Protocol):
    def emit(self, message: LogMessage) -> None:
        raise NotImplementedError("LogSink.emit must be implemented")
