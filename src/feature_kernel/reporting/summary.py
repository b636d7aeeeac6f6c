from __future__ import annotations

from dataclasses import asdict, dataclass

from feature_kernel.kernel.results import RunResult


@dataclass(frozen=True, slots=True)
class Counts:
    failed: int = 0
    skipped: int = 0
    passed: int = 0

    @property
    def total(self) -> int:
        return self.failed + self.skipped + self.passed


@dataclass(frozen=True, slots=True)
class RunSummary:
    features: Counts
    scenarios: Counts
    success: bool

    def as_fields(self) -> dict[str, object]:
        return {
            "success": self.success,
            "features": {**asdict(self.features), "total": self.features.total},
            "scenarios": {**asdict(self.scenarios), "total": self.scenarios.total},
        }


def summarize(result: RunResult) -> RunSummary:
    """Count failed/skipped/passed features and scenarios of a run.

    Scenarios under a skipped feature count as skipped.
    """
    features = {"failed": 0, "skipped": 0, "passed": 0}
    scenarios = {"failed": 0, "skipped": 0, "passed": 0}
    for feature_result in result.feature_results:
        if feature_result.skipped:
            features["skipped"] += 1
        elif feature_result.success:
            features["passed"] += 1
        else:
            features["failed"] += 1
        for scenario_result in feature_result.scenario_results:
            if feature_result.skipped or scenario_result.skipped:
                scenarios["skipped"] += 1
            elif scenario_result.success:
                scenarios["passed"] += 1
            else:
                scenarios["failed"] += 1
    return RunSummary(features=Counts(**features), scenarios=Counts(**scenarios), success=result.success)
