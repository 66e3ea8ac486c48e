# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import subprocess
from collections.abc import Callable
from pathlib import Path

import pytest

from cssaudit.config import AuditConfig
from cssaudit.indexing import build_workspace_index
from cssaudit.options import AuditOptions
from cssaudit.targets import TargetResolver
from cssaudit.tools.base import ToolContext

BUTTON_MODULE = """\
.button {
  color: var(--foreground);
}

.legacy {
  display: none;
}
"""

BUTTON_COMPONENT = """\
import styles from './button.module.css';

export function Button() {
  return <button className={styles.button}>Go</button>;
}
"""


def _write_file(root: Path, relative: str, content: str = "") -> Path:
    """Create ``relative`` under ``root`` with ``content``."""

    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def _git(repo: Path, *args: str) -> str:
    """Run a git command in ``repo`` and return its stdout."""

    completed = subprocess.run(
        ["git", *args],
        cwd=repo,
        check=True,
        capture_output=True,
        text=True,
    )
    return completed.stdout


def _init_git_repo(repo: Path) -> None:
    """Initialise ``repo`` as a git repository with one commit of its contents."""

    _git(repo, "init")
    _git(repo, "config", "user.name", "CssAuditTest")
    _git(repo, "config", "user.email", "css-audit@example.com")
    _git(repo, "config", "commit.gpgsign", "false")
    _git(repo, "add", ".")
    _git(repo, "commit", "-m", "initial")


@pytest.fixture
def button_repo(tmp_path: Path) -> Path:
    """Repository with one style module holding an unused ``.legacy`` class."""

    _write_file(tmp_path, "button.module.css", BUTTON_MODULE)
    _write_file(tmp_path, "button.tsx", BUTTON_COMPONENT)
    return tmp_path


@pytest.fixture
def make_options() -> Callable[..., AuditOptions]:
    """Return a factory for quiet :class:`AuditOptions`."""

    def _factory(root: Path, **overrides: object) -> AuditOptions:
        values: dict[str, object] = {"root": root, "ci": True, "color": False, "emoji": False}
        values.update(overrides)
        return AuditOptions(**values)

    return _factory


@pytest.fixture
def write_file() -> Callable[..., Path]:
    """Return a helper writing text files beneath a root directory."""

    return _write_file


@pytest.fixture
def git() -> Callable[..., str]:
    """Return a helper running git commands inside a repository."""

    return _git


@pytest.fixture
def init_git_repo() -> Callable[[Path], None]:
    """Return a helper initialising a repository and committing its contents."""

    return _init_git_repo


@pytest.fixture
def make_context() -> Callable[..., ToolContext]:
    """Return a factory building a full-workspace :class:`ToolContext`."""

    def _factory(root: Path, **overrides: object) -> ToolContext:
        values: dict[str, object] = {"root": root, "ci": True, "color": False, "emoji": False}
        values.update(overrides)
        options = AuditOptions(**values)
        targets = TargetResolver().enumerate_workspace(root)
        index = build_workspace_index(
            root,
            (),
            targets.ts_files,
            targets.tsx_files,
            targets.css_module_files,
        )
        return ToolContext(root=root, config=AuditConfig(), options=options, targets=targets, index=index)

    return _factory
