# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the lintharvest command line interface."""

from __future__ import annotations

from importlib import import_module
from pathlib import Path

import pytest
from typer.testing import CliRunner

from lintharvest.cli.app import RunTarget, app, source_flags
from lintharvest.core.errors import DiagnosticError
from lintharvest.core.models import DiagnosticSource
from lintharvest.core.severity import Severity
from lintharvest.runtime.container import build_services

cli_module = import_module("lintharvest.cli.app")
runner = CliRunner()


@pytest.fixture
def inject_sources(monkeypatch: pytest.MonkeyPatch):
    """Route the CLI's container through ``build_services`` with fake adapters."""

    captured: dict[str, object] = {}

    def _install(sources):
        def _build(settings):
            captured["settings"] = settings
            return build_services(settings, sources=sources)

        monkeypatch.setattr(cli_module, "build_services", _build)
        return captured

    return _install


def _project(tmp_path: Path) -> Path:
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "a.ts").write_text("const a = 1\n", encoding="utf-8")
    return tmp_path


def test_source_flags_selection() -> None:
    assert source_flags(None) == {}
    assert source_flags(RunTarget.ALL) == {"eslint": True, "typescript": True, "vitest": True}
    assert source_flags(RunTarget.VITEST) == {"eslint": False, "typescript": False, "vitest": True}


def test_report_exits_one_when_errors_found(tmp_path: Path, make_diagnostic, fake_source, inject_sources) -> None:
    root = _project(tmp_path)
    inject_sources([fake_source("eslint", [make_diagnostic(file_path="src/a.ts")]), fake_source("typescript")])

    result = runner.invoke(app, ["report", "--cwd", str(root)])

    assert result.exit_code == 1, result.output
    assert (root / ".lintharvest" / "eslint" / "errors" / "src_a.ts.json").is_file()


def test_report_no_exit_on_error_returns_zero(tmp_path: Path, make_diagnostic, fake_source, inject_sources) -> None:
    root = _project(tmp_path)
    inject_sources([fake_source("eslint", [make_diagnostic(file_path="src/a.ts")])])

    result = runner.invoke(app, ["report", "--cwd", str(root), "--no-exit-on-error", "--run", "eslint"])

    assert result.exit_code == 0, result.output


def test_report_warnings_only_exit_zero(tmp_path: Path, make_diagnostic, fake_source, inject_sources) -> None:
    root = _project(tmp_path)
    warning = make_diagnostic(file_path="src/a.ts", severity=Severity.WARNING)
    inject_sources([fake_source("eslint", [warning]), fake_source("typescript")])

    result = runner.invoke(app, ["diagnostics", "--cwd", str(root), "-o", "out"])

    assert result.exit_code == 0, result.output
    assert (root / "out" / "eslint" / "errors" / "src_a.ts.json").is_file()


def test_run_option_limits_sources(tmp_path: Path, make_diagnostic, fake_source, inject_sources) -> None:
    root = _project(tmp_path)
    eslint = fake_source("eslint")
    vitest = fake_source(
        "vitest",
        [make_diagnostic(source=DiagnosticSource.VITEST, file_path="src/a.ts", code="test-failure")],
    )
    inject_sources([eslint, vitest])

    result = runner.invoke(app, ["report", "--cwd", str(root), "--run", "vitest"])

    assert result.exit_code == 1, result.output
    assert eslint.calls == 0
    assert vitest.calls == 1


def test_all_sources_failing_is_fatal(tmp_path: Path, fake_source, inject_sources) -> None:
    root = _project(tmp_path)
    inject_sources(
        [
            fake_source("eslint", error=DiagnosticError("eslint broke", source="eslint")),
            fake_source("typescript", error=DiagnosticError("tsc broke", source="typescript")),
        ],
    )

    result = runner.invoke(app, ["report", "--cwd", str(root)])

    assert result.exit_code == 2
    assert "All diagnostic sources failed" in result.output
    assert "[debug]" not in result.output


def test_verbose_failure_shows_error_context(tmp_path: Path, fake_source, inject_sources) -> None:
    root = _project(tmp_path)
    inject_sources([fake_source("eslint", error=DiagnosticError("eslint broke", source="eslint"))])

    result = runner.invoke(app, ["report", "--cwd", str(root), "--verbose"])

    assert result.exit_code == 2
    assert "All diagnostic sources failed" in result.output
    assert "[debug] sources=['eslint']" in result.output


def test_blank_pattern_is_rejected(tmp_path: Path, fake_source, inject_sources) -> None:
    root = _project(tmp_path)
    inject_sources([fake_source("eslint")])

    result = runner.invoke(app, ["report", "--cwd", str(root), "--patterns", " "])

    assert result.exit_code == 2


def test_missing_root_is_fatal(tmp_path: Path) -> None:
    result = runner.invoke(app, ["report", "--cwd", str(tmp_path / "missing")])

    assert result.exit_code == 2


def test_timeout_and_patterns_reach_configuration(tmp_path: Path, fake_source, inject_sources, monkeypatch) -> None:
    root = _project(tmp_path)
    seen: dict[str, object] = {}

    class _Recorder:
        name = "eslint"

        async def collect(self, config):
            seen["config"] = config
            return []

    inject_sources([_Recorder()])
    monkeypatch.delenv("LINTHARVEST_TIMEOUT", raising=False)

    result = runner.invoke(
        app,
        ["report", "--cwd", str(root), "--run", "eslint", "-t", "500", "-p", "lib/**/*.ts", "-p", "test/**/*.ts"],
    )

    assert result.exit_code == 0, result.output
    config = seen["config"]
    assert config.timeout == 500
    assert config.patterns == ("lib/**/*.ts", "test/**/*.ts")
    assert config.root_path == root.resolve()
