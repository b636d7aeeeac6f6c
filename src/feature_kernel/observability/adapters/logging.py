from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import TextIO

from feature_kernel.observability.domain.logging import LogMessage, LogSink


def encode_line(message: LogMessage) -> str:
    # Run logs are line-delimited JSON so they can be tailed while features execute.
    return json.dumps(log_to_dict(message), separators=(",", ":"), ensure_ascii=False, default=str)


class StdoutLogSink:
    # Console rendering of run progress and results; the stream is resolved per emit
    # so pytest's capsys and redirected stdout both see the lines.
    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def emit(self, message: LogMessage) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        stream.write(encode_line(message) + "\n")


class JsonlLogSink:
    """Run log written to a ``--log-path`` file.

    The file is opened in append mode so consecutive runs accumulate in one
    log, and every record is flushed so a crashed step pack still leaves the
    lines written up to that point.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        path.parent.mkdir(parents=True, exist_ok=True)
        self._file: TextIO | None = path.open("a", encoding="utf-8")

    @property
    def closed(self) -> bool:
        return self._file is None

    def emit(self, message: LogMessage) -> None:
        if self._file is None:
            raise ValueError(f"Run log {self.path} is already closed")
        self._file.write(encode_line(message) + "\n")
        self._file.flush()

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None


class MemoryLogSink:
    # Keeps messages in memory for embedding callers and tests.
    def __init__(self) -> None:
        self.messages: list[LogMessage] = []

    def emit(self, message: LogMessage) -> None:
        self.messages.append(message)

    def find(self, message: str) -> list[LogMessage]:
        return [item for item in self.messages if item.message == message]


def build_log_sink(settings: dict[str, object]) -> LogSink:
    name = settings.get("name", "stdout")
    if name == "stdout":
        return StdoutLogSink()
    if name == "memory":
        return MemoryLogSink()
    if name == "jsonl":
        path = settings.get("path")
        if not isinstance(path, str) or not path:
            raise ValueError("logging.path must be a non-empty string for the jsonl sink")
        return JsonlLogSink(Path(path))
    raise ValueError(f"Unknown log sink: {name}")


def log_to_dict(message: LogMessage) -> dict[str, object]:
    return {
        "level": message.level,
        "message": message.message,
        "timestamp": message.timestamp.isoformat().replace("+00:00", "Z"),
        "fields": message.fields,
    }
