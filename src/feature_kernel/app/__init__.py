from .cli import apply_cli_overrides, build_parser, parse_args
from .runtime import build_registry, load_step_pack, run, run_with_config

__all__ = [
    "apply_cli_overrides",
    "build_parser",
    "parse_args",
    "build_registry",
    "load_step_pack",
    "run",
    "run_with_config",
]
