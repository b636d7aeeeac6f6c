from __future__ import annotations

import asyncio
import inspect
import time
from collections.abc import Awaitable, Callable, Iterable
from types import SimpleNamespace
from typing import TypeAlias

from feature_kernel.kernel.context import ProgressEvent, RunnerContext
from feature_kernel.kernel.errors import RunLoadError, as_step_error
from feature_kernel.kernel.model import Feature, Scenario, Step, normalize_output
from feature_kernel.kernel.results import FeatureResult, RunResult, ScenarioResult, StepResult
from feature_kernel.kernel.step_registry import StepRegistry
from feature_kernel.kernel.store import Store
from feature_kernel.observability.domain.logging import LogMessage, LogSink
from feature_kernel.reporting.reporter import NoOpReporter, Reporter

FeatureSource: TypeAlias = (
    Iterable[Feature] | Callable[[], Iterable[Feature]] | Callable[[], Awaitable[Iterable[Feature]]]
)


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 3)


class FeatureRunner:
    """Runs features scenario by scenario against a step registry.

    Execution is strictly sequential: each handler is awaited to completion
    before the next step starts, so the shared store and session need no
    locking. Step failures never escape ``run``; they are recorded on the
    result tree and drive the skip/retry rules:

    - a skipped feature or scenario marks every descendant skipped without
      invoking handlers;
    - the first failing step of a try skips the rest of that try;
    - a failing scenario is retried as a whole up to ``max_tries`` times and
      the store is kept between tries.
    """

    def __init__(
        self,
        registry: StepRegistry,
        reporter: Reporter | None = None,
        *,
        store: Store | None = None,
        session: object | None = None,
        retry_delay_s: float = 0.0,
        log_sink: LogSink | None = None,
    ) -> None:
        if retry_delay_s < 0:
            raise ValueError("retry_delay_s must be >= 0")
        self.registry = registry
        self.reporter = reporter if reporter is not None else NoOpReporter()
        self.store = store if store is not None else Store()
        self.session = session if session is not None else SimpleNamespace()
        self._retry_delay_s = retry_delay_s
        self._log_sink = log_sink

    def run_sync(self, source: FeatureSource) -> RunResult:
        return asyncio.run(self.run(source))

    async def run(self, source: FeatureSource) -> RunResult:
        started = time.perf_counter()
        try:
            features = await _load(source)
        except Exception as exc:  # noqa: BLE001 - load failures become RunResult.error
            error = exc if isinstance(exc, RunLoadError) else RunLoadError(str(exc))
            if error is not exc:
                error.__cause__ = exc
            self._log("error", "feature loading failed", error=str(error))
            result = RunResult.load_failed(error, run_time_ms=_elapsed_ms(started))
            await self._report(result)
            return result

        feature_results = [await self.run_feature(feature) for feature in features]
        result = RunResult.from_features(feature_results, run_time_ms=_elapsed_ms(started))
        self._log(
            "info" if result.success else "error",
            "run finished",
            success=result.success,
            features=len(feature_results),
            run_time_ms=result.run_time_ms,
        )
        await self._report(result)
        return result

    async def run_feature(self, feature: Feature) -> FeatureResult:
        if feature.skip:
            return FeatureResult.skipped_feature(feature)
        await self._progress("feature", feature.name)
        started = time.perf_counter()
        # No fail-fast across scenarios: every scenario runs regardless of earlier failures.
        scenario_results = [await self.run_scenario(scenario, feature) for scenario in feature.scenarios]
        return FeatureResult.from_scenarios(feature, scenario_results, run_time_ms=_elapsed_ms(started))

    async def run_scenario(self, scenario: Scenario, feature: Feature | None = None) -> ScenarioResult:
        if scenario.skip:
            return ScenarioResult.skipped_scenario(scenario)
        await self._progress("scenario", scenario.name)
        started = time.perf_counter()
        step_results: list[StepResult] = []
        attempt = 0
        for attempt in range(1, scenario.max_tries + 1):
            if attempt > 1:
                label = scenario.name or scenario.type.value
                await self._progress("retry", f"{label} ({attempt}/{scenario.max_tries})")
                self._log("warning", "scenario retry", scenario=scenario.name, attempt=attempt)
                if self._retry_delay_s:
                    await asyncio.sleep(self._retry_delay_s)
            ctx = RunnerContext(
                store=self.store,
                progress=self._progress,
                session=self.session,
                feature=feature,
                scenario=scenario,
                attempt=attempt,
            )
            step_results = await self._run_attempt(scenario, ctx)
            if all(r.success for r in step_results):
                break
        success = all(r.success for r in step_results)
        return ScenarioResult(
            scenario=scenario,
            step_results=tuple(step_results),
            success=success,
            tries=attempt,
            run_time_ms=_elapsed_ms(started),
        )

    async def _run_attempt(self, scenario: Scenario, ctx: RunnerContext) -> list[StepResult]:
        results: list[StepResult] = []
        steps = scenario.steps
        for index, step in enumerate(steps):
            result = await self.run_step(step, ctx)
            results.append(result)
            if not result.success:
                # Fail fast within a try: remaining steps are recorded as skipped, in order.
                results.extend(StepResult.skipped_step(rest) for rest in steps[index + 1 :])
                break
        return results

    async def run_step(self, step: Step, ctx: RunnerContext) -> StepResult:
        try:
            # Interpolate on every try so values written by earlier steps are picked up.
            step = step.interpolate(ctx.store)
            runner, groups = self.registry.find_runner(step)
        except Exception as exc:  # noqa: BLE001 - captured into StepResult
            return await self._step_failed(step, exc, None)

        await self._progress("step", step.display_text)
        started = time.perf_counter()
        try:
            value = runner.run(groups, step, ctx)
            if inspect.isawaitable(value):
                value = await value
            output = normalize_output(value)
        except Exception as exc:  # noqa: BLE001 - captured into StepResult
            return await self._step_failed(step, exc, _elapsed_ms(started))
        run_time_ms = _elapsed_ms(started)
        await self._progress("step passed", step.display_text)
        return StepResult.passed(step, output, run_time_ms)

    async def _step_failed(self, step: Step, exc: Exception, run_time_ms: float | None) -> StepResult:
        error = as_step_error(exc)
        await self._progress("step error", f"{step.display_text}: {error}")
        return StepResult.failed(step, error, run_time_ms)

    async def _progress(self, event: ProgressEvent, info: str | None = None) -> None:
        try:
            await self.reporter.progress(event, info)
        except Exception as exc:  # noqa: BLE001 - reporter failures stay out of the run
            self._log("error", "reporter progress failed", event=event, error=f"{type(exc).__name__}: {exc}")

    async def _report(self, result: RunResult) -> None:
        try:
            await self.reporter.report(result)
        except Exception as exc:  # noqa: BLE001 - reporter failures stay out of the run
            self._log("error", "reporter report failed", error=f"{type(exc).__name__}: {exc}")

    def _log(self, level: str, message: str, **fields: object) -> None:
        if self._log_sink is not None:
            self._log_sink.emit(LogMessage(level=level, message=message, fields=fields))


async def _load(source: FeatureSource) -> list[Feature]:
    # Loading is fully materialised before any scenario runs.
    loaded = source() if callable(source) else source
    if inspect.isawaitable(loaded):
        loaded = await loaded
    return list(loaded)
