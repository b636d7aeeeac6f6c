from __future__ import annotations

import json
from pathlib import Path
from types import SimpleNamespace

import pytest

from feature_kernel.app import runtime
from feature_kernel.app.cli import apply_cli_overrides, parse_args
from feature_kernel.app.runtime import (
    EXIT_CONFIG_ERROR,
    EXIT_FAILED,
    EXIT_OK,
    build_registry,
    load_step_pack,
    run,
)
from feature_kernel.config.loader import parse_run_config
from feature_kernel.config.validator import ConfigError
from feature_kernel.observability.adapters.logging import JsonlLogSink

_PACK = '''
from feature_kernel.kernel.assertions import expect_equal
from feature_kernel.kernel.step_registry import StepPack

pack = StepPack()


@pack.step(r"^I create item (\\w+)$")
async def create(groups, step, ctx):
    ctx.store["id"] = groups[0]
    return {"id": groups[0]}


@pack.step(r"^the item id is (\\w+)$")
async def check(groups, step, ctx):
    expect_equal(ctx.store["id"], groups[0])


def step_runners():
    return list(pack)
'''

_FEATURES = """
features:
  - name: items
    scenarios:
      - name: create
        steps:
          - I create item abc
          - the item id is {{id}}
"""


@pytest.fixture
def pack_module(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    name = f"item_steps_{tmp_path.name.replace('-', '_')}"
    (tmp_path / f"{name}.py").write_text(_PACK, encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))
    return name


def _write(tmp_path: Path, name: str, text: str) -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_parse_args_reads_flags() -> None:
    args = parse_args(
        ["--features", "f.yml", "--config", "c.yml", "--steps", "a", "--steps", "b", "--print-progress"]
    )
    assert args.features == "f.yml"
    assert args.config == "c.yml"
    assert args.steps == ["a", "b"]
    assert args.print_progress is True
    assert args.print_results is None


def test_cli_overrides_take_precedence() -> None:
    config = parse_run_config({"step_packs": ["base"], "reporting": {"print_results": False}})
    args = SimpleNamespace(steps=["extra", "base"], print_progress=None, print_results=True, log_path="x.jsonl")

    updated = apply_cli_overrides(config, args)
    assert updated.step_packs == ["base", "extra"]
    assert updated.reporting.print_results is True
    assert updated.reporting.print_progress is False
    assert updated.logging.sink_settings() == {"name": "jsonl", "path": "x.jsonl"}
    assert config.step_packs == ["base"]


def test_load_step_pack_imports_runners(pack_module: str) -> None:
    runners = load_step_pack(pack_module)
    assert [runner.name for runner in runners] == ["create", "check"]
    assert len(build_registry([pack_module])) == 2


def test_load_step_pack_rejects_unknown_module() -> None:
    with pytest.raises(ConfigError):
        load_step_pack("no_such_step_pack_module")


def test_run_passes_and_logs_to_jsonl(tmp_path: Path, pack_module: str) -> None:
    features = _write(tmp_path, "features.yml", _FEATURES)
    log_path = tmp_path / "run.jsonl"
    code = run(["--features", str(features), "--steps", pack_module, "--log-path", str(log_path)])

    assert code == EXIT_OK
    messages = [json.loads(line) for line in log_path.read_text(encoding="utf-8").splitlines()]
    summary = [m for m in messages if m["message"] == "run summary"][0]
    assert summary["fields"]["success"] is True
    assert summary["fields"]["scenarios"]["passed"] == 1


def test_run_reports_failure_exit_code(tmp_path: Path, pack_module: str) -> None:
    features = _write(tmp_path, "features.yml", _FEATURES.replace("{{id}}", "other"))
    code = run(["--features", str(features), "--steps", pack_module, "--log-path", str(tmp_path / "l.jsonl")])
    assert code == EXIT_FAILED


def test_run_missing_features_is_a_failed_run(tmp_path: Path, pack_module: str) -> None:
    code = run(["--features", str(tmp_path / "absent.yml"), "--steps", pack_module, "--log-path", str(tmp_path / "l.jsonl")])
    assert code == EXIT_FAILED


def test_run_config_error_exit_code(tmp_path: Path) -> None:
    config = _write(tmp_path, "run.yml", "engine:\n  default_max_tries: 0\n")
    features = _write(tmp_path, "features.yml", _FEATURES)
    assert run(["--features", str(features), "--config", str(config)]) == EXIT_CONFIG_ERROR


@pytest.fixture
def broken_pack(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    name = f"broken_steps_{tmp_path.name.replace('-', '_')}"
    (tmp_path / f"{name}.py").write_text("raise RuntimeError('boom at import')\n", encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))
    return name


def test_load_step_pack_wraps_errors_raised_by_the_module_body(broken_pack: str) -> None:
    with pytest.raises(ConfigError) as info:
        load_step_pack(broken_pack)
    assert "boom at import" in str(info.value)
    assert isinstance(info.value.__cause__, RuntimeError)


def test_run_step_pack_raising_on_import_is_a_config_error(tmp_path: Path, broken_pack: str) -> None:
    features = _write(tmp_path, "features.yml", _FEATURES)
    assert run(["--features", str(features), "--steps", broken_pack]) == EXIT_CONFIG_ERROR


def test_run_log_is_closed_when_a_step_pack_fails(
    tmp_path: Path, broken_pack: str, monkeypatch: pytest.MonkeyPatch
) -> None:
    opened: list[JsonlLogSink] = []

    def _open(config):
        sink = JsonlLogSink(tmp_path / "run.jsonl")
        opened.append(sink)
        return sink

    monkeypatch.setattr(runtime, "open_log_sink", _open)
    features = _write(tmp_path, "features.yml", _FEATURES)
    code = run(["--features", str(features), "--steps", broken_pack, "--log-path", str(tmp_path / "run.jsonl")])

    assert code == EXIT_CONFIG_ERROR
    assert len(opened) == 1
    assert opened[0].closed is True


def test_run_unwritable_log_path_is_a_config_error(tmp_path: Path, pack_module: str) -> None:
    # A regular file where the log directory should be makes the path unwritable.
    blocker = _write(tmp_path, "blocker", "not a directory")
    features = _write(tmp_path, "features.yml", _FEATURES)
    code = run(["--features", str(features), "--steps", pack_module, "--log-path", str(blocker / "run.jsonl")])
    assert code == EXIT_CONFIG_ERROR
