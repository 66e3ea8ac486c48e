# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Filesystem helpers shared across the audit pipeline."""

from __future__ import annotations

from .paths import normalize_posix, resolve_repo_path

__all__ = ["normalize_posix", "resolve_repo_path"]
