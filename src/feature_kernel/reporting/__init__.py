from .log_reporter import LogReporter
from .reporter import FanoutReporter, NoOpReporter, Reporter
from .summary import Counts, RunSummary, summarize

__all__ = [
    "Reporter",
    "NoOpReporter",
    "FanoutReporter",
    "LogReporter",
    "Counts",
    "RunSummary",
    "summarize",
]
