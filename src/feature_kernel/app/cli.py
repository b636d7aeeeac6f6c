from __future__ import annotations

import argparse
from collections.abc import Sequence

from feature_kernel.config.models import RunConfig
from feature_kernel.config.validator import validate_step_pack_names


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="feature-kernel", description="Run YAML feature files against step packs")
    parser.add_argument("--features", required=True, help="Path to YAML feature document")
    parser.add_argument("--config", help="Path to YAML run config")
    parser.add_argument(
        "--steps",
        action="append",
        default=[],
        help="Step pack module (repeatable; registration order follows the flag order)",
    )
    parser.add_argument("--print-progress", action="store_true", default=None)
    parser.add_argument("--print-results", action="store_true", default=None)
    parser.add_argument("--log-path", help="Write structured logs to this JSONL file instead of stdout")
    return parser


def parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def apply_cli_overrides(config: RunConfig, args: argparse.Namespace) -> RunConfig:
    # CLI flags take precedence over the config file; config packs register first.
    update: dict[str, object] = {}
    if args.steps:
        update["step_packs"] = validate_step_pack_names(
            [*config.step_packs, *(name for name in args.steps if name not in config.step_packs)]
        )
    reporting: dict[str, object] = {}
    if args.print_progress is not None:
        reporting["print_progress"] = args.print_progress
    if args.print_results is not None:
        reporting["print_results"] = args.print_results
    if reporting:
        update["reporting"] = config.reporting.model_copy(update=reporting)
    if args.log_path:
        update["logging"] = config.logging.model_copy(update={"sink": "jsonl", "path": args.log_path})
    return config.model_copy(update=update) if update else config
