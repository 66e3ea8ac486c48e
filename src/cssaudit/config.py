# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Optional JSON configuration file handling."""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .options import AuditOptions

CONFIG_FILENAME: Final[str] = ".css-audit.config.json"

WarnCallback = Callable[[str], None]


class AuditConfig(BaseModel):
    """File-based overrides for include/exclude globs and per-tool settings."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()
    tools: dict[str, dict[str, Any]] = Field(default_factory=dict)

    def tool_config(self, tool_id: str) -> Mapping[str, Any]:
        """Return the configuration object for ``tool_id`` (empty when absent)."""

        return self.tools.get(tool_id, {})


def resolve_config_path(options: AuditOptions) -> Path:
    """Return the configuration file location for ``options``."""

    if options.config_path is None:
        return options.root / CONFIG_FILENAME
    if options.config_path.is_absolute():
        return options.config_path
    return options.root / options.config_path


def load_config(options: AuditOptions, *, warn: WarnCallback | None = None) -> AuditConfig:
    """Load the audit configuration, falling back to CLI-derived defaults.

    A non-empty ``include``/``exclude`` list in the file replaces the CLI
    list. A missing file is silent; an unreadable or malformed file emits one
    warning and is otherwise ignored.

    Args:
        options: Resolved run options supplying defaults and the root.
        warn: Optional callback used to report malformed files.

    Returns:
        AuditConfig: Effective configuration for the run.
    """

    defaults = AuditConfig(include=options.include, exclude=options.exclude)
    path = resolve_config_path(options)
    if not path.is_file():
        return defaults
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        loaded = AuditConfig.model_validate(raw)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as exc:
        if warn is not None:
            warn(f"Ignoring invalid config {path}: {_summarise(exc)}")
        return defaults
    return AuditConfig(
        include=loaded.include or options.include,
        exclude=loaded.exclude or options.exclude,
        tools=loaded.tools,
    )


def _summarise(exc: Exception) -> str:
    """Return the first line of ``exc`` for single-line warnings."""

    text = str(exc).strip()
    return text.splitlines()[0] if text else exc.__class__.__name__


__all__ = ["CONFIG_FILENAME", "AuditConfig", "load_config", "resolve_config_path"]
