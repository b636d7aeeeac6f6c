from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import yaml
from pydantic import ValidationError

from feature_kernel.features.models import FeatureDoc, FeatureFileDoc, ScenarioDoc, StepDoc
from feature_kernel.kernel.errors import RunLoadError
from feature_kernel.kernel.model import Feature, Scenario, Step, Tag


def load_features(path: Path, *, default_max_tries: int = 1) -> list[Feature]:
    """Load a YAML feature document into kernel Feature values.

    Scenarios without ``max_tries`` get ``default_max_tries``. Any read,
    YAML or schema problem is raised as RunLoadError so the runner can
    surface it on the run result.
    """
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise RunLoadError(f"Cannot read features {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise RunLoadError(f"Invalid YAML in features {path}: {exc}") from exc
    return parse_features(raw, default_max_tries=default_max_tries, origin=str(path))


def parse_features(raw: object, *, default_max_tries: int = 1, origin: str = "<features>") -> list[Feature]:
    if not isinstance(raw, dict):
        raise RunLoadError(f"{origin}: feature document root must be a mapping")
    try:
        doc = FeatureFileDoc.model_validate(raw)
    except ValidationError as exc:
        raise RunLoadError(f"{origin}: {exc}") from exc
    return [_feature(item, default_max_tries) for item in doc.features]


def feature_source(path: Path, *, default_max_tries: int = 1) -> Callable[[], list[Feature]]:
    # Deferred loader so FeatureRunner.run turns load failures into RunResult.error.
    def load() -> list[Feature]:
        return load_features(path, default_max_tries=default_max_tries)

    return load


def _feature(doc: FeatureDoc, default_max_tries: int) -> Feature:
    return Feature(
        name=doc.name,
        tags=frozenset(Tag(name) for name in doc.tags),
        skip=doc.skip,
        scenarios=tuple(_scenario(item, default_max_tries) for item in doc.scenarios),
    )


def _scenario(doc: ScenarioDoc, default_max_tries: int) -> Scenario:
    return Scenario(
        type=doc.type,
        name=doc.name,
        tags=frozenset(Tag(name) for name in doc.tags),
        skip=doc.skip,
        max_tries=doc.max_tries if doc.max_tries is not None else default_max_tries,
        steps=tuple(_step(item) for item in doc.steps),
    )


def _step(doc: StepDoc | str) -> Step:
    if isinstance(doc, str):
        return Step(text=doc)
    return Step(text=doc.text, argument=doc.argument)
