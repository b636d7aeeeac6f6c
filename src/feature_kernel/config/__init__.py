from .loader import load_run_config, load_yaml_config, parse_run_config
from .models import EngineConfig, LoggingConfig, ReportingConfig, RunConfig
from .validator import ConfigError, validate_step_pack_names

__all__ = [
    "ConfigError",
    "validate_step_pack_names",
    "load_yaml_config",
    "load_run_config",
    "parse_run_config",
    "RunConfig",
    "EngineConfig",
    "ReportingConfig",
    "LoggingConfig",
]
