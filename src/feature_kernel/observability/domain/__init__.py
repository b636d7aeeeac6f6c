from .logging import LOG_LEVELS, LogMessage, LogSink

__all__ = ["LOG_LEVELS", "LogMessage", "LogSink"]
