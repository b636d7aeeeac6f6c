from .adapters import JsonlLogSink, MemoryLogSink, StdoutLogSink, build_log_sink
from .domain import LogMessage, LogSink

__all__ = ["LogMessage", "LogSink", "StdoutLogSink", "JsonlLogSink", "MemoryLogSink", "build_log_sink"]
