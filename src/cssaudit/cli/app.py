# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point."""

from __future__ import annotations

import typer

from .audit import audit_command

app = typer.Typer(
    name="css-audit",
    help="Audit CSS for regressions against a committed baseline.",
    add_completion=False,
    no_args_is_help=False,
)
app.command(name="audit")(audit_command)


def main() -> None:
    """Console-script entry point."""

    app()


__all__ = ["app", "main"]
