# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the ESLint, TypeScript, and Vitest source adapters."""

from __future__ import annotations

import asyncio
import json
import subprocess
from collections.abc import Sequence
from pathlib import Path

import pytest

from lintharvest.config import build_collection_config
from lintharvest.core.errors import DiagnosticError, SourceTimeoutError
from lintharvest.core.models import DiagnosticSource
from lintharvest.core.sanitize import Sanitizer
from lintharvest.core.severity import Severity
from lintharvest.sources import (
    TEST_FAILURE_CODE,
    EslintSource,
    SourceAdapter,
    TypeScriptSource,
    VitestSource,
    parse_eslint,
    parse_tsc,
    parse_vitest,
)
from lintharvest.sources.process import CommandOptions, TimedOutProcess


class _Runner:
    def __init__(self, stdout: str = "", *, returncode: int = 0, stderr: str = "") -> None:
        self.stdout = stdout
        self.returncode = returncode
        self.stderr = stderr
        self.calls: list[tuple[list[str], CommandOptions]] = []

    def __call__(self, args: Sequence[str], *, options: CommandOptions) -> subprocess.CompletedProcess[str]:
        self.calls.append((list(args), options))
        return subprocess.CompletedProcess(list(args), self.returncode, self.stdout, self.stderr)


def test_parse_eslint_maps_severity_and_rule() -> None:
    payload = [
        {
            "filePath": "/repo/src/a.ts",
            "messages": [
                {"ruleId": "semi", "severity": 2, "message": "Missing semicolon.", "line": 3, "column": 9},
                {"ruleId": None, "severity": 1, "message": "Parsing hint", "line": 1, "column": 1},
                {
                    "ruleId": "prefer-const",
                    "severity": 0,
                    "message": "Use const",
                    "line": 4,
                    "column": 2,
                    "endLine": 4,
                    "endColumn": 7,
                    "fix": {"range": [10, 13], "text": "const"},
                },
            ],
        },
        {"filePath": "/repo/src/clean.ts", "messages": []},
    ]

    diagnostics = parse_eslint(payload)

    assert [diagnostic.severity for diagnostic in diagnostics] == [Severity.ERROR, Severity.WARNING, Severity.INFO]
    assert diagnostics[0].id == "eslint:/repo/src/a.ts:3:9:semi"
    assert diagnostics[1].code == "unknown"
    assert diagnostics[2].end_column == 7
    assert diagnostics[2].fix is not None
    assert diagnostics[2].fix.replacement == "const"
    assert "10-13" in diagnostics[2].fix.description


def test_parse_tsc_reads_compiler_lines() -> None:
    stdout = [
        "src/a.ts(12,5): error TS2322: Type 'string' is not assignable to type 'number'.",
        "  Types of property 'x' are incompatible.",
        "src/b.ts(1,1): warning TS6133: 'y' is declared but never used.",
        "Found 2 errors.",
    ]

    diagnostics = parse_tsc(stdout)

    assert len(diagnostics) == 2
    assert diagnostics[0].source is DiagnosticSource.TYPESCRIPT
    assert diagnostics[0].code == "TS2322"
    assert diagnostics[0].line == 12 and diagnostics[0].column == 5
    assert diagnostics[0].detail == "Types of property 'x' are incompatible."
    assert diagnostics[1].severity is Severity.WARNING


def test_parse_vitest_reports_failed_assertions_only() -> None:
    payload = {
        "testResults": [
            {
                "name": "/repo/tests/a.test.ts",
                "assertionResults": [
                    {"status": "passed", "fullName": "ok"},
                    {
                        "status": "failed",
                        "fullName": "math adds",
                        "failureMessages": ["AssertionError: expected 3 to be 4\n    at a.test.ts:5:3"],
                        "location": {"line": 5, "column": 3},
                    },
                    {"status": "failed", "title": "no location", "failureMessages": []},
                ],
            },
        ],
    }

    diagnostics = parse_vitest(payload)

    assert len(diagnostics) == 2
    assert diagnostics[0].code == TEST_FAILURE_CODE
    assert diagnostics[0].message == "math adds: AssertionError: expected 3 to be 4"
    assert (diagnostics[0].line, diagnostics[0].column) == (5, 3)
    assert (diagnostics[1].line, diagnostics[1].column) == (1, 1)
    assert all(diagnostic.severity is Severity.ERROR for diagnostic in diagnostics)


def test_eslint_source_builds_command_and_parses(tmp_path: Path) -> None:
    payload = [{"filePath": "a.ts", "messages": [{"ruleId": "semi", "severity": 2, "message": "x", "line": 1}]}]
    runner = _Runner(json.dumps(payload), returncode=1)
    source = EslintSource(command=("npx", "eslint"), runner=runner)
    config = build_collection_config(
        root_path=tmp_path,
        patterns=("src/**/*.ts",),
        ignore_patterns=("dist/**",),
        timeout=2000,
    )

    diagnostics = asyncio.run(source.collect(config))

    args, options = runner.calls[0]
    assert args[:4] == ["npx", "eslint", "--format", "json"]
    assert args[-1] == "src/**/*.ts"
    assert ["--ignore-pattern", "dist/**"] == args[args.index("--ignore-pattern") : args.index("--ignore-pattern") + 2]
    assert options.cwd == tmp_path
    assert options.timeout == 2.0
    assert isinstance(source, SourceAdapter)
    assert source.name == "eslint"
    assert len(diagnostics) == 1


def test_eslint_source_rejects_invalid_json(tmp_path: Path) -> None:
    source = EslintSource(runner=_Runner("not json"))

    with pytest.raises(DiagnosticError, match="not valid JSON"):
        source.collect_sync(build_collection_config(root_path=tmp_path))


def test_unexpected_exit_code_raises(tmp_path: Path) -> None:
    source = EslintSource(runner=_Runner("", returncode=2, stderr="config missing"))

    with pytest.raises(DiagnosticError, match="config missing") as excinfo:
        source.collect_sync(build_collection_config(root_path=tmp_path))

    assert excinfo.value.source == "eslint"


def test_missing_executable_raises_diagnostic_error(tmp_path: Path) -> None:
    def _missing(_args: Sequence[str], *, options: CommandOptions) -> subprocess.CompletedProcess[str]:
        raise FileNotFoundError("Executable 'tsc' was not found on PATH")

    source = TypeScriptSource(runner=_missing)

    with pytest.raises(DiagnosticError, match="not found"):
        source.collect_sync(build_collection_config(root_path=tmp_path))


def test_killed_process_maps_to_timeout(tmp_path: Path) -> None:
    def _killed(args: Sequence[str], *, options: CommandOptions) -> subprocess.CompletedProcess[str]:
        return TimedOutProcess(args, stdout="", stderr="killed", timeout=1.0)

    source = VitestSource(runner=_killed)

    with pytest.raises(SourceTimeoutError, match="timed out after 1000ms"):
        source.collect_sync(build_collection_config(root_path=tmp_path, timeout=1000))


def test_tool_exiting_124_is_reported_as_failure(tmp_path: Path) -> None:
    source = EslintSource(runner=_Runner("", returncode=124, stderr="boom"))

    with pytest.raises(DiagnosticError, match="exited with status 124") as excinfo:
        source.collect_sync(build_collection_config(root_path=tmp_path))

    assert not isinstance(excinfo.value, SourceTimeoutError)


def test_typescript_source_uses_project_flag(tmp_path: Path) -> None:
    runner = _Runner("src/a.ts(1,2): error TS1005: ';' expected.\n", returncode=2)
    source = TypeScriptSource(runner=runner)
    config = build_collection_config(root_path=tmp_path, config_path=tmp_path / "tsconfig.json", timeout=0)

    diagnostics = source.collect_sync(config)

    args, options = runner.calls[0]
    assert args == ["tsc", "--noEmit", "--pretty", "false", "-p", str(tmp_path / "tsconfig.json")]
    assert options.timeout is None
    assert diagnostics[0].code == "TS1005"


def test_vitest_source_skips_banner_before_json(tmp_path: Path) -> None:
    report = {"testResults": [{"name": "t.test.ts", "assertionResults": [{"status": "failed", "title": "t"}]}]}
    runner = _Runner("RUN v1.6.0\n" + json.dumps(report), returncode=1)

    diagnostics = VitestSource(runner=runner).collect_sync(build_collection_config(root_path=tmp_path))

    assert runner.calls[0][0][:3] == ["vitest", "run", "--reporter=json"]
    assert diagnostics[0].file_path == "t.test.ts"


def test_sources_sanitize_messages_by_default(tmp_path: Path) -> None:
    root = tmp_path.resolve()
    message = f"password=hunter2 rejected for '{root}/src/util.ts'"
    payload = [{"filePath": "a.ts", "messages": [{"ruleId": "no-unresolved", "severity": 2, "message": message}]}]
    source = EslintSource(runner=_Runner(json.dumps(payload), returncode=1))

    sanitized = source.collect_sync(build_collection_config(root_path=root))
    raw = source.collect_sync(build_collection_config(root_path=root, sanitize=False))

    assert sanitized[0].message == "password=[REDACTED] rejected for './src/util.ts'"
    assert raw[0].message == message


def test_parse_tsc_and_vitest_sanitize_detail() -> None:
    sanitizer = Sanitizer(root=Path("/repo"), home=None)
    tsc = parse_tsc(
        [
            "src/a.ts(1,1): error TS2307: Cannot find module '/repo/src/b'.",
            "  Resolved from /home/dev/.cache/b.d.ts",
        ],
        sanitizer=sanitizer,
    )
    vitest = parse_vitest(
        {
            "testResults": [
                {
                    "name": "/repo/a.test.ts",
                    "assertionResults": [
                        {
                            "status": "failed",
                            "title": "env",
                            "failureMessages": ["Error: secret: s3cr3t\n at /repo/a.ts"],
                        },
                    ],
                },
            ],
        },
        sanitizer=sanitizer,
    )

    assert tsc[0].message == "Cannot find module './src/b'."
    assert tsc[0].detail == "Resolved from /~/.cache/b.d.ts"
    assert vitest[0].message == "env: Error: secret=[REDACTED]"
    assert vitest[0].detail == "Error: secret=[REDACTED]\n at ./a.ts"
    assert vitest[0].file_path.endswith("a.test.ts")
