from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, TypeAlias

from feature_kernel.kernel.interpolation import interpolate

if TYPE_CHECKING:
    from feature_kernel.kernel.store import Store

# Closed variant for step handler results: text, structured value or ordered values.
StepOutput: TypeAlias = str | Mapping[str, object] | Sequence[object] | None


@dataclass(frozen=True, slots=True)
class Tag:
    name: str


class ScenarioType(str, Enum):
    SCENARIO = "Scenario"
    OUTLINE = "Scenario Outline"


@dataclass(frozen=True, slots=True)
class Step:
    # Raw text/argument never change; interpolated fields are filled on a copy per try.
    text: str
    argument: str | None = None
    interpolated_text: str | None = None
    interpolated_argument: str | None = None

    @property
    def display_text(self) -> str:
        return self.interpolated_text if self.interpolated_text is not None else self.text

    def interpolate(self, store: Store) -> Step:
        text = interpolate(self.text, store)
        argument = interpolate(self.argument, store) if self.argument is not None else None
        return replace(self, interpolated_text=text, interpolated_argument=argument)


@dataclass(frozen=True, slots=True)
class Scenario:
    steps: tuple[Step, ...]
    name: str | None = None
    type: ScenarioType = ScenarioType.SCENARIO
    tags: frozenset[Tag] = field(default_factory=frozenset)
    skip: bool = False
    max_tries: int = 1

    def __post_init__(self) -> None:
        if self.max_tries < 1:
            raise ValueError("Scenario.max_tries must be >= 1")
        object.__setattr__(self, "steps", tuple(self.steps))
        object.__setattr__(self, "tags", frozenset(self.tags))


@dataclass(frozen=True, slots=True)
class Feature:
    name: str
    scenarios: tuple[Scenario, ...]
    tags: frozenset[Tag] = field(default_factory=frozenset)
    skip: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "scenarios", tuple(self.scenarios))
        object.__setattr__(self, "tags", frozenset(self.tags))


def normalize_output(value: object) -> StepOutput:
    # Handler results outside the closed variant are coerced into it.
    if value is None or isinstance(value, (str, Mapping)):
        return value
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)
