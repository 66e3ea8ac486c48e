# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy for fatal audit failures.

Only failures that must abort the run live here. Problems in individual
source files, configuration files, baselines, or tools are logged and
recovered from by the component that encounters them.
"""

from __future__ import annotations


class AuditError(RuntimeError):
    """Base class for errors that abort an audit run."""


class RootResolutionError(AuditError):
    """Raised when the repository root cannot be resolved or read."""


class TargetResolutionError(AuditError):
    """Raised when changed-file resolution cannot proceed (bad git reference)."""


class ConfigError(AuditError):
    """Raised when resolved options contain an invalid combination."""


class BaselineWriteError(AuditError):
    """Raised when the baseline document cannot be persisted."""


class ReportWriteError(AuditError):
    """Raised when a report cannot be written to its output path."""


__all__ = [
    "AuditError",
    "BaselineWriteError",
    "ConfigError",
    "ReportWriteError",
    "RootResolutionError",
    "TargetResolutionError",
]
