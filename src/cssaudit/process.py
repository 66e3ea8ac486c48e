# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shell-free execution of external helpers such as ``git``."""

from __future__ import annotations

import shutil

# Bandit: subprocess usage is intentional; the wrapper never enables ``shell=True``.
import subprocess  # nosec B404
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final

DEFAULT_TIMEOUT: Final[float] = 60.0
TIMEOUT_EXIT_CODE: Final[int] = 124


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Exit status and captured output of one command."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def lines(self) -> list[str]:
        """Return standard output split into lines."""

        return self.stdout.splitlines()


def run_command(
    command: Sequence[str],
    *,
    cwd: Path | None = None,
    timeout: float | None = DEFAULT_TIMEOUT,
) -> CommandResult:
    """Run ``command`` with captured text output.

    A command that exceeds ``timeout`` is reported with exit status
    ``TIMEOUT_EXIT_CODE`` instead of raising.

    Args:
        command: Program and arguments.
        cwd: Working directory for the command.
        timeout: Seconds before the command is abandoned, or ``None``.

    Returns:
        CommandResult: Exit status plus stdout and stderr text.

    Raises:
        ValueError: If ``command`` is empty.
        FileNotFoundError: If the executable is not on ``PATH``.
    """

    if not command:
        raise ValueError("command must not be empty")
    executable = shutil.which(command[0])
    if executable is None:
        raise FileNotFoundError(f"Executable '{command[0]}' was not found on PATH")
    try:
        completed = subprocess.run(  # nosec B603 - arguments are passed as a list
            [executable, *command[1:]],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            stdin=subprocess.DEVNULL,
            check=False,
        )
    except subprocess.TimeoutExpired:
        return CommandResult(TIMEOUT_EXIT_CODE, stderr=f"{command[0]} timed out after {timeout}s")
    return CommandResult(completed.returncode, completed.stdout or "", completed.stderr or "")


__all__ = ["DEFAULT_TIMEOUT", "TIMEOUT_EXIT_CODE", "CommandResult", "run_command"]
