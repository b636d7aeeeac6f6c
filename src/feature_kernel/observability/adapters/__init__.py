from .logging import JsonlLogSink, MemoryLogSink, StdoutLogSink, build_log_sink, encode_line, log_to_dict

__all__ = ["StdoutLogSink", "JsonlLogSink", "MemoryLogSink", "build_log_sink", "encode_line", "log_to_dict"]
