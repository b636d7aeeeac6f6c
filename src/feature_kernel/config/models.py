from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from feature_kernel.config.validator import validate_step_pack_names

# Config models map YAML sections to typed structures.


class EngineConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    retry_delay_s: float = Field(default=0.0, ge=0)
    # Applied by the feature loader to scenarios that declare no max_tries.
    default_max_tries: int = Field(default=1, ge=1)


class ReportingConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    print_progress: bool = False
    print_results: bool = False


class LoggingConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    sink: Literal["stdout", "jsonl", "memory"] = "stdout"
    path: str | None = None

    @model_validator(mode="after")
    def jsonl_requires_path(self) -> LoggingConfig:
        if self.sink == "jsonl" and not self.path:
            raise ValueError("logging.path is required for the jsonl sink")
        return self

    def sink_settings(self) -> dict[str, object]:
        settings: dict[str, object] = {"name": self.sink}
        if self.path:
            settings["path"] = self.path
        return settings


class RunConfig(BaseModel):
    # Root of the run configuration file.
    model_config = ConfigDict(extra="forbid")
    engine: EngineConfig = Field(default_factory=EngineConfig)
    reporting: ReportingConfig = Field(default_factory=ReportingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    step_packs: list[str] = Field(default_factory=list)

    @field_validator("step_packs")
    @classmethod
    def valid_step_packs(cls, value: list[str]) -> list[str]:
        return validate_step_pack_names(value)
