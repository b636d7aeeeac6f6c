from __future__ import annotations

import time

from feature_kernel.kernel.errors import AssertionFailure, StepRunnerNotDefinedError
from feature_kernel.kernel.results import FeatureResult, RunResult, ScenarioResult, StepResult
from feature_kernel.observability.domain.logging import LogMessage, LogSink
from feature_kernel.reporting.reporter import Reporter
from feature_kernel.reporting.summary import summarize


class LogReporter(Reporter):
    """Reporter that renders progress and the result tree as structured log messages.

    Progress messages carry ``elapsed_ms`` since the previous progress event.
    On ``report`` one message is emitted per feature, scenario and step, followed
    by a ``run summary`` message with feature/scenario counts.
    """

    def __init__(self, sink: LogSink, *, print_progress: bool = False, print_results: bool = False) -> None:
        self._sink = sink
        self._print_progress = print_progress
        self._print_results = print_results
        self._last_progress: float | None = None

    async def progress(self, event: str, info: str | None = None) -> None:
        if not self._print_progress:
            return
        fields: dict[str, object] = {"event": event}
        if info:
            fields["info"] = info
        now = time.perf_counter()
        if self._last_progress is not None:
            fields["elapsed_ms"] = round((now - self._last_progress) * 1000, 3)
        self._last_progress = now
        level = "error" if event == "step error" else "info"
        self._sink.emit(LogMessage(level=level, message="progress", fields=fields))

    async def report(self, result: RunResult) -> None:
        for feature_result in result.feature_results:
            self._emit_feature(feature_result)
            for scenario_result in feature_result.scenario_results:
                self._emit_scenario(scenario_result)
                for step_result in scenario_result.step_results:
                    self._emit_step(step_result)

        summary = summarize(result)
        fields = summary.as_fields()
        if result.run_time_ms is not None:
            fields["run_time_ms"] = result.run_time_ms
        if result.error is not None:
            fields["error"] = str(result.error)
        self._sink.emit(
            LogMessage(level="info" if result.success else "error", message="run summary", fields=fields)
        )

    def _emit_feature(self, result: FeatureResult) -> None:
        fields: dict[str, object] = {
            "name": result.feature.name,
            "status": _status(result.success, result.skipped),
            "tags": sorted(tag.name for tag in result.feature.tags),
        }
        if result.run_time_ms is not None:
            fields["run_time_ms"] = result.run_time_ms
        self._sink.emit(LogMessage(level="info", message="feature", fields=fields))

    def _emit_scenario(self, result: ScenarioResult) -> None:
        fields: dict[str, object] = {
            "type": result.scenario.type.value,
            "name": result.scenario.name,
            "status": _status(result.success, result.skipped),
            "tries": result.tries,
        }
        if result.run_time_ms is not None:
            fields["run_time_ms"] = result.run_time_ms
        self._sink.emit(LogMessage(level="info", message="scenario", fields=fields))

    def _emit_step(self, result: StepResult) -> None:
        fields: dict[str, object] = {
            "text": result.step.display_text,
            "status": _status(result.success, result.skipped),
        }
        if result.run_time_ms is not None:
            fields["run_time_ms"] = result.run_time_ms
        if self._print_results and result.result is not None:
            fields["result"] = result.result
        error = result.error
        if error is not None:
            fields["error"] = str(error)
            if isinstance(error, StepRunnerNotDefinedError) and error.step.display_text != error.step.text:
                fields["raw_text"] = error.step.text
            if isinstance(error, AssertionFailure):
                fields["expected"] = error.expected
                fields["actual"] = error.actual
        level = "error" if error is not None else "info"
        self._sink.emit(LogMessage(level=level, message="step", fields=fields))


def _status(success: bool, skipped: bool) -> str:
    if skipped:
        return "skipped"
    return "passed" if success else "failed"
