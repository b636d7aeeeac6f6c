from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from feature_kernel.kernel.model import ScenarioType

# Document models for YAML feature files; converted to kernel values by the loader.


def _tag_names(value: list[str]) -> list[str]:
    names = [item.lstrip("@").strip() for item in value]
    if any(not name for name in names):
        raise ValueError("tags must be non-empty names")
    return names


class StepDoc(BaseModel):
    model_config = ConfigDict(extra="forbid")
    text: str = Field(min_length=1)
    argument: str | None = None


class ScenarioDoc(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str | None = None
    type: ScenarioType = ScenarioType.SCENARIO
    tags: list[str] = Field(default_factory=list)
    skip: bool = False
    max_tries: int | None = Field(default=None, ge=1)
    # Plain strings are shorthand for steps without an argument.
    steps: list[StepDoc | str] = Field(default_factory=list)

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, value: list[str]) -> list[str]:
        return _tag_names(value)


class FeatureDoc(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = Field(min_length=1)
    tags: list[str] = Field(default_factory=list)
    skip: bool = False
    scenarios: list[ScenarioDoc] = Field(default_factory=list)

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, value: list[str]) -> list[str]:
        return _tag_names(value)


class FeatureFileDoc(BaseModel):
    model_config = ConfigDict(extra="forbid")
    features: list[FeatureDoc]
