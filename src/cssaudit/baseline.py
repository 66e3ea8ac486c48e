# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Persisted ledger of accepted findings and its refresh algorithm."""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Callable, Collection, Iterable
from datetime import UTC, datetime
from pathlib import Path
from typing import Final, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import BaselineWriteError
from .models import CAMEL_CONFIG, Finding
from .severity import Severity
from .tools.base import ToolContext, ToolDescriptor

BASELINE_VERSION: Final[str] = "1.0"

Clock = Callable[[], str]
WarnCallback = Callable[[str], None]


def utc_timestamp() -> str:
    """Return the current UTC time as an ISO-8601 string with millisecond precision."""

    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class BaselineEntry(BaseModel):
    """Summary of one accepted finding."""

    model_config = ConfigDict(frozen=True, extra="ignore", **CAMEL_CONFIG)

    tool: str
    rule_id: str
    file: str | None = None
    fingerprint: str
    severity: Severity
    message: str
    last_seen: str

    @property
    def key(self) -> str:
        """Return the ``tool:ruleId:fingerprint`` key for this entry."""

        return f"{self.tool}:{self.rule_id}:{self.fingerprint}"

    @classmethod
    def from_finding(cls, finding: Finding, *, last_seen: str) -> BaselineEntry:
        """Summarise ``finding`` into an entry stamped with ``last_seen``."""

        return cls(
            tool=finding.tool,
            rule_id=finding.rule_id,
            file=finding.file,
            fingerprint=finding.fingerprint,
            severity=finding.severity,
            message=finding.message,
            last_seen=last_seen,
        )


class Baseline(BaseModel):
    """The baseline document."""

    model_config = ConfigDict(frozen=True, extra="ignore", **CAMEL_CONFIG)

    version: str = BASELINE_VERSION
    timestamp: str = Field(default_factory=utc_timestamp)
    findings: dict[str, BaselineEntry] = Field(default_factory=dict)

    def __contains__(self, finding: object) -> bool:
        return isinstance(finding, Finding) and finding.baseline_key in self.findings

    def to_json(self) -> str:
        """Serialise the document with entries in key order."""

        payload = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        payload["findings"] = dict(sorted(payload["findings"].items()))
        return json.dumps(payload, indent=2) + "\n"


class BaselinePartition(NamedTuple):
    """Findings split into known and new issues."""

    suppressed: list[Finding]
    new: list[Finding]


def empty_baseline(*, clock: Clock = utc_timestamp) -> Baseline:
    """Return an empty baseline with a fresh timestamp."""

    return Baseline(version=BASELINE_VERSION, timestamp=clock(), findings={})


def read_baseline(path: Path, *, warn: WarnCallback | None = None, clock: Clock = utc_timestamp) -> Baseline:
    """Load the baseline at ``path``.

    A missing file yields an empty baseline silently. An unreadable or
    malformed file yields an empty baseline after one warning.

    Args:
        path: Baseline file location.
        warn: Optional callback used to report corruption.
        clock: Timestamp factory for the empty fallback.

    Returns:
        Baseline: Parsed or empty baseline.
    """

    if not path.is_file():
        return empty_baseline(clock=clock)
    try:
        return Baseline.model_validate(json.loads(path.read_text(encoding="utf-8")))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as exc:
        if warn is not None:
            first_line = str(exc).strip().splitlines()[0] if str(exc).strip() else exc.__class__.__name__
            warn(f"Ignoring unreadable baseline {path}: {first_line}")
        return empty_baseline(clock=clock)


def write_baseline(path: Path, baseline: Baseline) -> None:
    """Atomically write ``baseline`` to ``path``, creating parent directories.

    Raises:
        BaselineWriteError: If the directory or file cannot be written.
    """

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    except OSError as exc:
        raise BaselineWriteError(f"cannot write baseline {path}: {exc.strerror or exc}") from exc
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(baseline.to_json())
        os.replace(temp_name, path)
    except OSError as exc:
        Path(temp_name).unlink(missing_ok=True)
        raise BaselineWriteError(f"cannot write baseline {path}: {exc.strerror or exc}") from exc


def filter_against_baseline(findings: Iterable[Finding], baseline: Baseline) -> BaselinePartition:
    """Partition ``findings`` by whether their key already exists in ``baseline``."""

    suppressed: list[Finding] = []
    new: list[Finding] = []
    for finding in findings:
        (suppressed if finding in baseline else new).append(finding)
    return BaselinePartition(suppressed=suppressed, new=new)


def default_baseline_include(finding: Finding, _ctx: ToolContext | None) -> bool:
    """Persist every finding that is not informational."""

    return finding.severity is not Severity.INFO


def update_baseline(
    baseline: Baseline,
    findings: Iterable[Finding],
    tools: Iterable[ToolDescriptor],
    ctx: ToolContext | None,
    *,
    clock: Clock = utc_timestamp,
) -> Baseline:
    """Refresh ``baseline`` from the findings of the tools that ran.

    Entries owned by tools that did not run are carried over untouched. For
    each current finding the owning tool's inclusion predicate (or the
    default) decides between upserting an entry, keeping any prior
    ``lastSeen``, and removing it. Entries of tools that ran whose fingerprint
    no current finding reproduces are pruned.

    Args:
        baseline: Baseline loaded at the start of the run.
        findings: Normalised findings from every tool that ran.
        tools: Tools that ran this invocation.
        ctx: Shared context handed to inclusion predicates.
        clock: Timestamp factory for ``lastSeen`` and the document timestamp.

    Returns:
        Baseline: New document with the same version and a refreshed timestamp.
    """

    ran = {tool.id: tool for tool in tools}
    now = clock()
    entries: dict[str, BaselineEntry] = dict(baseline.findings)
    current: list[Finding] = [finding for finding in findings if finding.tool in ran]

    for finding in current:
        tool = ran[finding.tool]
        predicate = tool.baseline_include or default_baseline_include
        key = finding.baseline_key
        if predicate(finding, ctx):
            previous = entries.get(key)
            entries[key] = BaselineEntry.from_finding(
                finding,
                last_seen=previous.last_seen if previous is not None else now,
            )
        else:
            entries.pop(key, None)

    reproduced = {(finding.tool, finding.fingerprint) for finding in current}
    entries = {
        key: entry
        for key, entry in entries.items()
        if entry.tool not in ran or (entry.tool, entry.fingerprint) in reproduced
    }
    return Baseline(version=baseline.version, timestamp=now, findings=entries)


def prune_baseline(baseline: Baseline, existing_files: Collection[str]) -> Baseline:
    """Drop entries whose file is not in ``existing_files``.

    Entries without a file are always kept.
    """

    kept = {
        key: entry for key, entry in baseline.findings.items() if entry.file is None or entry.file in existing_files
    }
    return baseline.model_copy(update={"findings": kept})


def existing_baseline_files(root: Path, baseline: Baseline) -> set[str]:
    """Return the files referenced by ``baseline`` that still exist under ``root``."""

    files = {entry.file for entry in baseline.findings.values() if entry.file}
    return {file for file in files if (root / file).exists()}


__all__ = [
    "BASELINE_VERSION",
    "Baseline",
    "BaselineEntry",
    "BaselinePartition",
    "default_baseline_include",
    "empty_baseline",
    "existing_baseline_files",
    "filter_against_baseline",
    "prune_baseline",
    "read_baseline",
    "update_baseline",
    "utc_timestamp",
    "write_baseline",
]
