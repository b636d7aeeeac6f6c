from .assertions import expect_equal, expect_in, expect_true
from .context import ProgressEvent, RunnerContext
from .errors import (
    AssertionFailure,
    HandlerError,
    InterpolationError,
    RunLoadError,
    StepError,
    StepRunnerNotDefinedError,
    as_step_error,
)
from .interpolation import interpolate, placeholders
from .model import Feature, Scenario, ScenarioType, Step, StepOutput, Tag
from .results import FeatureResult, RunResult, ScenarioResult, StepResult
from .runner import FeatureRunner, FeatureSource
from .step_registry import MatchGroups, Matcher, StepHandler, StepPack, StepRegistry, StepRunner, regex_matcher
from .store import Store

# Kernel exports cover the model, the registry and the runner.
__all__ = [
    "AssertionFailure",
    "HandlerError",
    "InterpolationError",
    "RunLoadError",
    "StepError",
    "StepRunnerNotDefinedError",
    "as_step_error",
    "expect_equal",
    "expect_in",
    "expect_true",
    "ProgressEvent",
    "RunnerContext",
    "interpolate",
    "placeholders",
    "Feature",
    "Scenario",
    "ScenarioType",
    "Step",
    "StepOutput",
    "Tag",
    "FeatureResult",
    "RunResult",
    "ScenarioResult",
    "StepResult",
    "FeatureRunner",
    "FeatureSource",
    "MatchGroups",
    "Matcher",
    "StepHandler",
    "StepPack",
    "StepRegistry",
    "StepRunner",
    "regex_matcher",
    "Store",
]
