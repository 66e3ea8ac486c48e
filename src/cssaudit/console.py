# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared Rich consoles for audit output."""

from __future__ import annotations

import sys
from functools import lru_cache

from rich.console import Console


def stdout_is_tty() -> bool:
    """Return ``True`` when stdout is attached to a terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


@lru_cache(maxsize=8)
def _build_console(color: bool, emoji: bool, tty: bool) -> Console:
    colored = color and tty
    return Console(
        color_system="auto" if colored else None,
        force_terminal=tty,
        no_color=not colored,
        emoji=emoji,
        highlight=False,
        soft_wrap=True,
    )


def audit_console(*, color: bool, emoji: bool) -> Console:
    """Return a console honouring the ``color`` and ``emoji`` preferences.

    Colour is only emitted when stdout is a terminal, so piping a report
    into a file never embeds ANSI escapes. Consoles are cached per
    combination of preferences and terminal state.

    Args:
        color: Whether coloured output was requested.
        emoji: Whether emoji glyphs may be rendered.

    Returns:
        Console: Console writing to stdout.
    """

    return _build_console(color, emoji, stdout_is_tty())


__all__ = ["audit_console", "stdout_is_tty"]
