# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the audit pipeline."""

from __future__ import annotations

import hashlib
import re
from collections.abc import Iterable
from enum import Enum
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .severity import Severity

_FINGERPRINT_LENGTH: Final[int] = 16
_WHITESPACE_RE: Final[re.Pattern[str]] = re.compile(r"\s+")

CAMEL_CONFIG: Final[ConfigDict] = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def compute_fingerprint(tool: str, rule_id: str, file: str | None, *shape: object) -> str:
    """Return a stable identity hash for a finding.

    Line and column information must never be passed in ``shape``: the
    fingerprint has to survive unrelated edits that shift code around.

    Args:
        tool: Identifier of the tool producing the finding.
        rule_id: Rule identifier within the tool.
        file: Repository-relative POSIX path, when the finding has one.
        *shape: Extra identity parts such as a class name or a normalised message.

    Returns:
        str: Hex digest prefix identifying the logical issue.
    """

    parts = [tool, rule_id, file or ""]
    parts.extend(_WHITESPACE_RE.sub(" ", str(part)).strip() for part in shape)
    digest = hashlib.sha1("\x1f".join(parts).encode("utf-8"), usedforsecurity=False)
    return digest.hexdigest()[:_FINGERPRINT_LENGTH]


class Finding(BaseModel):
    """One issue instance reported by a tool."""

    model_config = ConfigDict(frozen=True, **CAMEL_CONFIG)

    tool: str
    rule_id: str
    severity: Severity
    message: str
    file: str | None = None
    line: int | None = None
    col: int | None = None
    hint: str | None = None
    fingerprint: str = ""

    @model_validator(mode="before")
    @classmethod
    def _default_fingerprint(cls, data: Any) -> Any:
        """Derive a fingerprint from identity fields when the tool omitted one."""

        if not isinstance(data, dict) or data.get("fingerprint"):
            return data
        tool = str(data.get("tool", ""))
        rule_id = str(data.get("rule_id", data.get("ruleId", "")))
        message = str(data.get("message", ""))
        return {**data, "fingerprint": compute_fingerprint(tool, rule_id, data.get("file"), message)}

    @property
    def baseline_key(self) -> str:
        """Return the ``tool:ruleId:fingerprint`` key used by the baseline."""

        return f"{self.tool}:{self.rule_id}:{self.fingerprint}"

    def to_payload(self) -> dict[str, Any]:
        """Return the camelCase JSON payload for reports."""

        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ScanMode(str, Enum):
    """Whether a run covers the whole tree or only changed files."""

    CHANGED = "changed"
    FULL = "full"


class TargetSet(BaseModel):
    """Immutable classification of the files examined by one run."""

    model_config = ConfigDict(frozen=True, **CAMEL_CONFIG)

    mode: ScanMode
    since_ref: str | None = None
    changed_files: tuple[str, ...] = ()
    css_files: tuple[str, ...] = ()
    css_module_files: tuple[str, ...] = ()
    ts_files: tuple[str, ...] = ()
    tsx_files: tuple[str, ...] = ()
    all_files: tuple[str, ...] = ()

    @model_validator(mode="after")
    def _check_partition(self) -> TargetSet:
        """Ensure every classified file also appears in ``all_files``."""

        universe = set(self.all_files)
        for bucket in (self.css_files, self.css_module_files, self.ts_files, self.tsx_files):
            missing = [path for path in bucket if path not in universe]
            if missing:
                raise ValueError(f"classified files missing from all_files: {missing[:3]}")
        return self

    @property
    def logic_files(self) -> tuple[str, ...]:
        """Return logic files from both logic buckets without duplicates."""

        return tuple(dict.fromkeys((*self.ts_files, *self.tsx_files)))


class WorkspaceIndex(BaseModel):
    """Cross-file relationships shared read-only by every tool."""

    model_config = ConfigDict(frozen=True, **CAMEL_CONFIG)

    css_module_importers: dict[str, frozenset[str]] = Field(default_factory=dict)
    impacted_css_modules: frozenset[str] | None = None

    def importers_of(self, style_module: str) -> frozenset[str]:
        """Return the logic files importing ``style_module``."""

        return self.css_module_importers.get(style_module, frozenset())


class ToolRunResult(BaseModel):
    """Findings and counters returned by a single tool invocation."""

    model_config = ConfigDict(validate_assignment=True)

    findings: list[Finding] = Field(default_factory=list)
    stats: dict[str, int] = Field(default_factory=dict)


class RankedCount(BaseModel):
    """A name paired with an occurrence count."""

    model_config = ConfigDict(frozen=True)

    name: str
    count: int


class SeverityCounts(BaseModel):
    """Number of findings per severity."""

    model_config = ConfigDict(validate_assignment=True)

    error: int = 0
    warn: int = 0
    info: int = 0

    @classmethod
    def from_findings(cls, findings: Iterable[Finding]) -> SeverityCounts:
        """Count ``findings`` by severity."""

        counts = cls()
        for finding in findings:
            key = finding.severity.value
            setattr(counts, key, getattr(counts, key) + 1)
        return counts


class AuditStats(BaseModel):
    """Aggregate statistics describing one run."""

    model_config = ConfigDict(validate_assignment=True, **CAMEL_CONFIG)

    total_findings: int = 0
    new_count: int = 0
    suppressed_count: int = 0
    by_severity: SeverityCounts = Field(default_factory=SeverityCounts)
    by_tool: dict[str, int] = Field(default_factory=dict)
    tools_run: list[str] = Field(default_factory=list)
    failed_tools: list[str] = Field(default_factory=list)
    top_rule_ids: list[RankedCount] = Field(default_factory=list)
    top_files: list[RankedCount] = Field(default_factory=list)
    tool_stats: dict[str, dict[str, int]] = Field(default_factory=dict)
    mode: ScanMode = ScanMode.FULL
    since_ref: str | None = None
    changed_files_count: int = 0


class AuditResult(BaseModel):
    """Outcome of a full orchestrator run handed to the reporter."""

    model_config = ConfigDict(validate_assignment=True)

    findings: list[Finding] = Field(default_factory=list)
    suppressed: list[Finding] = Field(default_factory=list)
    stats: AuditStats = Field(default_factory=AuditStats)


__all__ = [
    "AuditResult",
    "AuditStats",
    "Finding",
    "RankedCount",
    "ScanMode",
    "SeverityCounts",
    "TargetSet",
    "ToolRunResult",
    "WorkspaceIndex",
    "compute_fingerprint",
]
