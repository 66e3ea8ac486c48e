# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolved run options handed to the orchestrator by the CLI layer."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import ConfigError
from .severity import Severity

DEFAULT_SINCE: Final[str] = "HEAD~1"
DEFAULT_BASELINE_NAME: Final[str] = ".css-audit-baseline.json"
CI_REPORT_DIR: Final[str] = "reports/css-audit"


class ReportFormat(str, Enum):
    """Report renderings supported by the reporter."""

    PRETTY = "pretty"
    JSON = "json"
    JUNIT = "junit"


_CI_REPORT_SUFFIX: Final[dict[ReportFormat, str]] = {
    ReportFormat.JSON: "json",
    ReportFormat.JUNIT: "xml",
}


class AuditOptions(BaseModel):
    """Options controlling a single audit run."""

    model_config = ConfigDict(frozen=True)

    root: Path = Field(default_factory=Path.cwd)
    changed: bool = False
    since: str = DEFAULT_SINCE
    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()
    tools: tuple[str, ...] = ()
    skip_tools: tuple[str, ...] = ()
    baseline_path: Path | None = None
    no_baseline: bool = False
    update_baseline: bool = False
    force: bool = False
    fail_on: Severity = Severity.ERROR
    format: ReportFormat = ReportFormat.PRETTY
    output_path: Path | None = None
    ci: bool = False
    config_path: Path | None = None
    jobs: int = Field(default=1, ge=1)
    color: bool = True
    emoji: bool = True

    @field_validator("include", "exclude", "tools", "skip_tools", mode="before")
    @classmethod
    def _split_lists(cls, value: object) -> object:
        """Accept comma-separated strings alongside sequences."""

        if value is None:
            return ()
        if isinstance(value, str):
            value = [value]
        if isinstance(value, (list, tuple)):
            entries: list[str] = []
            for item in value:
                entries.extend(part.strip() for part in str(item).split(",") if part.strip())
            return tuple(entries)
        return value

    def check_combinations(self) -> None:
        """Reject option combinations that would corrupt durable state.

        Raises:
            ConfigError: If a changed-only run asks to rewrite the baseline
                without ``force``.
        """

        if self.update_baseline and self.changed and not self.force:
            raise ConfigError("--update-baseline cannot be combined with --changed unless --force is set")

    @property
    def resolved_baseline_path(self) -> Path:
        """Return the baseline path, defaulting to the repository root."""

        if self.baseline_path is None:
            return self.root / DEFAULT_BASELINE_NAME
        if self.baseline_path.is_absolute():
            return self.baseline_path
        return self.root / self.baseline_path

    @property
    def resolved_output_path(self) -> Path | None:
        """Return where the report should be written, if anywhere.

        CI runs with a machine-readable format and no explicit path write to
        the conventional ``reports/css-audit`` location.
        """

        if self.output_path is not None:
            return self.output_path if self.output_path.is_absolute() else self.root / self.output_path
        if self.ci and self.format is not ReportFormat.PRETTY:
            return self.root / CI_REPORT_DIR / f"report.{_CI_REPORT_SUFFIX[self.format]}"
        return None


__all__ = [
    "CI_REPORT_DIR",
    "DEFAULT_BASELINE_NAME",
    "DEFAULT_SINCE",
    "AuditOptions",
    "ReportFormat",
]
