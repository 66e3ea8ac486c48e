# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Git-based change detection."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Final

from ..errors import TargetResolutionError
from ..filesystem.paths import normalize_posix
from ..process import run_command

GIT_NOT_FOUND: Final[int] = 127

GitRunner = Callable[[Sequence[str], Path], tuple[int, list[str]]]


class GitDiscovery:
    """Collect files changed relative to a git reference."""

    def __init__(self, *, runner: GitRunner | None = None) -> None:
        """Create a git discovery strategy.

        Args:
            runner: Optional command runner returning ``(returncode, stdout_lines)``.
                A default based on :func:`run_command` is used when omitted.
        """

        self._runner = runner or self._default_runner

    @property
    def identifier(self) -> str:
        """Return the identifier for the git discovery strategy."""

        return "git"

    def changed_files(self, root: Path, since: str) -> list[str]:
        """Return files added, copied, modified or renamed since ``since``.

        The diff base is the merge-base of ``since`` and ``HEAD`` so that
        commits landing on a diverged base branch are not reported.

        Args:
            root: Repository root directory.
            since: Git reference to compare against.

        Returns:
            list[str]: Sorted repository-relative POSIX paths that still exist.

        Raises:
            TargetResolutionError: If ``since`` does not name a commit.
        """

        self.verify_ref(root, since)
        base = self._merge_base(root, since) or since
        returncode, lines = self._runner(
            ["git", "diff", "--name-only", "--diff-filter=ACMR", base, "HEAD", "--"],
            root,
        )
        if returncode != 0:
            raise TargetResolutionError(f"git diff against '{since}' failed")
        changed: set[str] = set()
        for raw in lines:
            relative = normalize_posix(raw)
            if relative and (root / relative).is_file():
                changed.add(relative)
        return sorted(changed)

    def verify_ref(self, root: Path, ref: str) -> None:
        """Ensure ``ref`` resolves to a commit.

        Args:
            root: Repository root directory.
            ref: Git reference supplied by the caller.

        Raises:
            TargetResolutionError: If ``ref`` is empty or does not resolve.
        """

        if not ref or ref.startswith("-"):
            raise TargetResolutionError(f"invalid git reference '{ref}'")
        returncode, _ = self._runner(["git", "rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}"], root)
        if returncode == GIT_NOT_FOUND:
            raise TargetResolutionError("git executable not found; --changed requires git")
        if returncode != 0:
            raise TargetResolutionError(f"invalid git reference '{ref}'")

    def _merge_base(self, root: Path, since: str) -> str | None:
        """Return the merge-base of ``since`` and ``HEAD`` when computable."""

        returncode, lines = self._runner(["git", "merge-base", since, "HEAD"], root)
        if returncode != 0 or not lines:
            return None
        return lines[0].strip() or None

    @staticmethod
    def _default_runner(cmd: Sequence[str], root: Path) -> tuple[int, list[str]]:
        """Execute ``cmd`` returning the exit status and stdout lines.

        Args:
            cmd: Git command to execute.
            root: Repository root directory.

        Returns:
            tuple[int, list[str]]: Exit status and raw stdout lines. A missing
            git executable is reported as status ``GIT_NOT_FOUND``.
        """

        try:
            result = run_command(cmd, cwd=root)
        except FileNotFoundError:
            return GIT_NOT_FOUND, []
        return result.returncode, result.lines


__all__ = ["GIT_NOT_FOUND", "GitDiscovery", "GitRunner"]
