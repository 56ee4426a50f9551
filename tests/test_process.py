# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the subprocess execution helper."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest

from lintharvest.sources.process import TIMEOUT_RETURNCODE, CommandOptions, TimedOutProcess, run_command


def test_run_command_captures_output(tmp_path: Path) -> None:
    completed = run_command([sys.executable, "-c", "print('hi')"], options=CommandOptions(cwd=tmp_path))

    assert completed.returncode == 0
    assert completed.stdout.strip() == "hi"
    assert not isinstance(completed, TimedOutProcess)


def test_run_command_rejects_unknown_executable() -> None:
    with pytest.raises(FileNotFoundError):
        run_command(["definitely-not-a-real-tool-xyz"])


def test_exit_status_124_is_not_a_timeout() -> None:
    completed = run_command([sys.executable, "-c", "import sys; sys.exit(124)"])

    assert completed.returncode == 124
    assert not isinstance(completed, TimedOutProcess)


def test_run_command_timeout_returns_timed_out_process(monkeypatch: pytest.MonkeyPatch) -> None:
    def _timeout(*_args, **kwargs):
        raise subprocess.TimeoutExpired(cmd=["tool"], timeout=kwargs["timeout"])

    monkeypatch.setattr(subprocess, "run", _timeout)

    completed = run_command([sys.executable], options=CommandOptions(timeout=0.5))

    assert isinstance(completed, TimedOutProcess)
    assert completed.timeout == 0.5
    assert completed.returncode == TIMEOUT_RETURNCODE
    assert "timed out after 0.5s" in completed.stderr
