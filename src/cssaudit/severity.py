# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity related types and helpers."""

from __future__ import annotations

from enum import Enum
from typing import Final


class Severity(str, Enum):
    """Severity levels attached to audit findings."""

    ERROR = "error"
    WARN = "warn"
    INFO = "info"


_SEVERITY_RANK: Final[dict[Severity, int]] = {
    Severity.INFO: 0,
    Severity.WARN: 1,
    Severity.ERROR: 2,
}

SEVERITY_ORDER: Final[tuple[Severity, ...]] = (Severity.ERROR, Severity.WARN, Severity.INFO)


def severity_rank(severity: Severity | str) -> int:
    """Return the numeric rank of ``severity`` (higher is more severe).

    Args:
        severity: Severity member or its string value.

    Returns:
        int: Rank used for threshold comparisons.
    """

    return _SEVERITY_RANK[Severity(severity)]


def meets_threshold(severity: Severity | str, fail_on: Severity | str) -> bool:
    """Return ``True`` when ``severity`` is at or above ``fail_on``.

    Args:
        severity: Severity of the finding under evaluation.
        fail_on: Configured failure threshold.

    Returns:
        bool: ``True`` when the finding should fail the run.
    """

    return severity_rank(severity) >= severity_rank(fail_on)


__all__ = ["SEVERITY_ORDER", "Severity", "meets_threshold", "severity_rank"]
