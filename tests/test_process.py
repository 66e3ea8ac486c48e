# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the subprocess wrapper."""

import sys
from pathlib import Path

import pytest

from cssaudit.process import run_command


def test_run_command_captures_output(tmp_path: Path) -> None:
    result = run_command([sys.executable, "-c", "print('one'); print('two')"], cwd=tmp_path)

    assert result.returncode == 0
    assert result.lines == ["one", "two"]


def test_run_command_reports_timeout_as_exit_code() -> None:
    result = run_command([sys.executable, "-c", "import time; time.sleep(5)"], timeout=0.2)

    assert result.returncode == 124
    assert "timed out" in result.stderr


def test_run_command_requires_executable_on_path() -> None:
    with pytest.raises(FileNotFoundError):
        run_command(["css-audit-no-such-binary"])


def test_run_command_rejects_empty_command() -> None:
    with pytest.raises(ValueError):
        run_command([])
