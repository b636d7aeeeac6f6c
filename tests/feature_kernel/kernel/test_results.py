from __future__ import annotations

import dataclasses

import pytest

from feature_kernel.kernel.errors import HandlerError, RunLoadError
from feature_kernel.kernel.model import Feature, Scenario, ScenarioType, Step, Tag, normalize_output
from feature_kernel.kernel.results import FeatureResult, RunResult, ScenarioResult, StepResult


def _scenario_result(success: bool, skipped: bool = False) -> ScenarioResult:
    scenario = Scenario(steps=(Step(text="x"),))
    return ScenarioResult(scenario=scenario, step_results=(), success=success, skipped=skipped)


def test_feature_success_ignores_skipped_scenarios() -> None:
    feature = Feature(name="f", scenarios=())
    result = FeatureResult.from_scenarios(feature, [_scenario_result(True), _scenario_result(False, skipped=True)])
    assert result.success is True


def test_feature_fails_when_any_scenario_fails() -> None:
    feature = Feature(name="f", scenarios=())
    result = FeatureResult.from_scenarios(feature, [_scenario_result(True), _scenario_result(False)])
    assert result.success is False


def test_skipped_feature_propagates_to_steps() -> None:
    scenario = Scenario(name="s", steps=(Step(text="a"), Step(text="b")))
    result = FeatureResult.skipped_feature(Feature(name="f", scenarios=(scenario,), skip=True))
    assert result.skipped is True
    assert result.scenario_results[0].skipped is True
    assert [r.skipped for r in result.scenario_results[0].step_results] == [True, True]
    assert result.scenario_results[0].tries == 1


def test_load_failure_is_never_successful() -> None:
    result = RunResult.load_failed(RunLoadError("boom"))
    assert result.success is False
    assert result.feature_results == ()


def test_results_are_immutable() -> None:
    step_result = StepResult.failed(Step(text="a"), HandlerError(ValueError("x")))
    with pytest.raises(dataclasses.FrozenInstanceError):
        step_result.success = True  # type: ignore[misc]


def test_scenario_rejects_zero_tries() -> None:
    with pytest.raises(ValueError):
        Scenario(steps=(), max_tries=0)


def test_model_normalises_collections() -> None:
    scenario = Scenario(steps=[Step(text="a")], tags={Tag("smoke")}, type=ScenarioType.OUTLINE)
    assert isinstance(scenario.steps, tuple)
    assert scenario.tags == frozenset({Tag("smoke")})
    assert scenario.type.value == "Scenario Outline"


def test_normalize_output_closed_variant() -> None:
    assert normalize_output(None) is None
    assert normalize_output("text") == "text"
    assert normalize_output({"a": 1}) == {"a": 1}
    assert normalize_output((1, 2)) == [1, 2]
    assert normalize_output(b"raw") == "raw"
    assert normalize_output(200) == "200"
