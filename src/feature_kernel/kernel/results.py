from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from feature_kernel.kernel.errors import RunLoadError, StepError
from feature_kernel.kernel.model import Feature, Scenario, Step, StepOutput

# Result records are produced once per unit and never mutated afterwards.


@dataclass(frozen=True, slots=True)
class StepResult:
    step: Step
    success: bool
    skipped: bool = False
    error: StepError | None = None
    result: StepOutput = None
    run_time_ms: float | None = None

    @classmethod
    def passed(cls, step: Step, result: StepOutput, run_time_ms: float) -> StepResult:
        return cls(step=step, success=True, result=result, run_time_ms=run_time_ms)

    @classmethod
    def failed(cls, step: Step, error: StepError, run_time_ms: float | None = None) -> StepResult:
        return cls(step=step, success=False, error=error, run_time_ms=run_time_ms)

    @classmethod
    def skipped_step(cls, step: Step) -> StepResult:
        return cls(step=step, success=False, skipped=True)


@dataclass(frozen=True, slots=True)
class ScenarioResult:
    scenario: Scenario
    step_results: tuple[StepResult, ...]
    success: bool
    skipped: bool = False
    tries: int = 1
    run_time_ms: float | None = None

    @classmethod
    def skipped_scenario(cls, scenario: Scenario) -> ScenarioResult:
        # A scenario that never ran still reports one (unexecuted) try.
        return cls(
            scenario=scenario,
            step_results=tuple(StepResult.skipped_step(step) for step in scenario.steps),
            success=True,
            skipped=True,
        )


@dataclass(frozen=True, slots=True)
class FeatureResult:
    feature: Feature
    scenario_results: tuple[ScenarioResult, ...]
    success: bool
    skipped: bool = False
    run_time_ms: float | None = None

    @classmethod
    def from_scenarios(
        cls,
        feature: Feature,
        scenario_results: Sequence[ScenarioResult],
        run_time_ms: float | None = None,
    ) -> FeatureResult:
        return cls(
            feature=feature,
            scenario_results=tuple(scenario_results),
            success=all(r.success for r in scenario_results if not r.skipped),
            run_time_ms=run_time_ms,
        )

    @classmethod
    def skipped_feature(cls, feature: Feature) -> FeatureResult:
        return cls(
            feature=feature,
            scenario_results=tuple(ScenarioResult.skipped_scenario(s) for s in feature.scenarios),
            success=True,
            skipped=True,
        )


@dataclass(frozen=True, slots=True)
class RunResult:
    feature_results: tuple[FeatureResult, ...]
    success: bool
    run_time_ms: float | None = None
    error: RunLoadError | None = None

    @classmethod
    def from_features(
        cls,
        feature_results: Sequence[FeatureResult],
        run_time_ms: float | None = None,
    ) -> RunResult:
        return cls(
            feature_results=tuple(feature_results),
            success=all(r.success for r in feature_results if not r.skipped),
            run_time_ms=run_time_ms,
        )

    @classmethod
    def load_failed(
        cls,
        error: RunLoadError,
        feature_results: Sequence[FeatureResult] = (),
        run_time_ms: float | None = None,
    ) -> RunResult:
        return cls(
            feature_results=tuple(feature_results),
            success=False,
            run_time_ms=run_time_ms,
            error=error,
        )
