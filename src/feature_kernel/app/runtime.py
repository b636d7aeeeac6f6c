from __future__ import annotations

import importlib
from pathlib import Path
from types import ModuleType, SimpleNamespace

from feature_kernel.app.cli import apply_cli_overrides, parse_args
from feature_kernel.config.loader import load_run_config
from feature_kernel.config.models import RunConfig
from feature_kernel.config.validator import ConfigError
from feature_kernel.features.loader import feature_source
from feature_kernel.kernel.results import RunResult
from feature_kernel.kernel.runner import FeatureRunner
from feature_kernel.kernel.step_registry import StepRegistry, StepRunner
from feature_kernel.observability.adapters.logging import JsonlLogSink, build_log_sink
from feature_kernel.observability.domain.logging import LogMessage, LogSink
from feature_kernel.reporting.log_reporter import LogReporter

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG_ERROR = 2


def build_registry(step_packs: list[str]) -> StepRegistry:
    # Packs register in the listed order, which decides first-match-wins between them.
    registry = StepRegistry()
    for name in step_packs:
        registry.extend(load_step_pack(name))
    return registry


def load_step_pack(name: str) -> list[StepRunner]:
    try:
        module = importlib.import_module(name)
    except Exception as exc:
        # Any failure while the pack body executes is a configuration problem, not a run failure.
        raise ConfigError(f"Cannot import step pack {name}: {type(exc).__name__}: {exc}") from exc
    return _pack_runners(module)


def _pack_runners(module: ModuleType) -> list[StepRunner]:
    factory = getattr(module, "step_runners", None)
    if callable(factory):
        runners = list(factory())
    else:
        runners = list(getattr(module, "STEP_RUNNERS", None) or [])
    if not runners:
        raise ConfigError(f"Step pack {module.__name__} defines no step_runners() or STEP_RUNNERS")
    for runner in runners:
        if not isinstance(runner, StepRunner):
            raise ConfigError(f"Step pack {module.__name__} returned a non-StepRunner: {runner!r}")
    return runners


def run_with_config(config: RunConfig, features_path: Path, *, log_sink: LogSink | None = None) -> RunResult:
    sink = log_sink if log_sink is not None else open_log_sink(config)
    try:
        registry = build_registry(config.step_packs)
        reporter = LogReporter(
            sink,
            print_progress=config.reporting.print_progress,
            print_results=config.reporting.print_results,
        )
        sink.emit(
            LogMessage(
                level="info",
                message="run started",
                fields={"features": str(features_path), "step_packs": config.step_packs, "runners": len(registry)},
            )
        )
        runner = FeatureRunner(
            registry,
            reporter,
            session=SimpleNamespace(),
            retry_delay_s=config.engine.retry_delay_s,
            log_sink=sink,
        )
        return runner.run_sync(feature_source(features_path, default_max_tries=config.engine.default_max_tries))
    finally:
        # Caller-provided sinks stay open; the caller owns them.
        if isinstance(sink, JsonlLogSink) and log_sink is None:
            sink.close()


def open_log_sink(config: RunConfig) -> LogSink:
    settings = config.logging.sink_settings()
    try:
        return build_log_sink(settings)
    except OSError as exc:
        raise ConfigError(f"Cannot open run log {settings.get('path')}: {exc}") from exc


def run(argv: list[str] | None = None) -> int:
    # Command line entrypoint; exit code reflects run success.
    args = parse_args(argv)
    try:
        config = load_run_config(Path(args.config) if args.config else None)
        config = apply_cli_overrides(config, args)
        result = run_with_config(config, Path(args.features))
    except ConfigError as exc:
        sink = build_log_sink({"name": "stdout"})
        sink.emit(LogMessage(level="error", message="config error", fields={"error": str(exc)}))
        return EXIT_CONFIG_ERROR
    return EXIT_OK if result.success else EXIT_FAILED


def main() -> int:
    return run(None)
