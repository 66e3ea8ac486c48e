# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Status lines printed while an audit runs.

Each level pairs a glyph with a colour. Glyphs are dropped when emoji are
disabled and colour is only applied when the console may use it.
"""

from __future__ import annotations

from typing import Final, NamedTuple

from rich.text import Text

from .console import audit_console, stdout_is_tty


class _Level(NamedTuple):
    glyph: str
    style: str


_LEVELS: Final[dict[str, _Level]] = {
    "info": _Level("ℹ️ ", "cyan"),
    "ok": _Level("✅ ", "green"),
    "warn": _Level("⚠️ ", "yellow"),
    "fail": _Level("❌ ", "red"),
}


def emoji(symbol: str, enable: bool) -> str:
    """Return ``symbol`` when ``enable`` is set, otherwise an empty string."""

    return symbol if enable else ""


def _emit(level: str, msg: str, *, use_emoji: bool, use_color: bool | None) -> None:
    glyph, style = _LEVELS[level]
    colored = stdout_is_tty() if use_color is None else use_color
    line = Text(f"{emoji(glyph, use_emoji)}{msg}", style=style if colored else "")
    audit_console(color=colored, emoji=use_emoji).print(line)


def info(msg: str, *, use_emoji: bool = True, use_color: bool | None = None) -> None:
    """Print a progress message."""

    _emit("info", msg, use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool = True, use_color: bool | None = None) -> None:
    """Print a success message."""

    _emit("ok", msg, use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool = True, use_color: bool | None = None) -> None:
    """Print a recoverable problem such as a malformed config file."""

    _emit("warn", msg, use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool = True, use_color: bool | None = None) -> None:
    """Print the message for a failed run."""

    _emit("fail", msg, use_emoji=use_emoji, use_color=use_color)


__all__ = ["emoji", "fail", "info", "ok", "warn"]
