# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Emit machine-readable reports for orchestrator results."""

from __future__ import annotations

import json
import re
import xml.etree.ElementTree as ET
from typing import Final

from ..models import AuditResult, Finding
from ..severity import Severity

XML_DECLARATION: Final[str] = '<?xml version="1.0" encoding="UTF-8"?>'
SUITE_NAME: Final[str] = "css-audit"
UNKNOWN_CLASSNAME: Final[str] = "<unknown>"
_TEST_NAME_RE: Final[re.Pattern[str]] = re.compile(r"[/:]")
_FAILING: Final[frozenset[Severity]] = frozenset({Severity.ERROR, Severity.WARN})


def format_json(result: AuditResult) -> str:
    """Return ``{summary, findings, suppressed}`` as indented JSON."""

    payload = {
        "summary": result.stats.model_dump(mode="json", by_alias=True),
        "findings": [finding.to_payload() for finding in result.findings],
        "suppressed": [finding.to_payload() for finding in result.suppressed],
    }
    return json.dumps(payload, indent=2) + "\n"


def _message(finding: Finding) -> str:
    return f"{finding.message} - {finding.hint}" if finding.hint else finding.message


def _testcase(parent: ET.Element, finding: Finding) -> None:
    classname = finding.file or UNKNOWN_CLASSNAME
    case = ET.SubElement(
        parent,
        "testcase",
        classname=classname,
        name=_TEST_NAME_RE.sub("_", f"{finding.tool}.{finding.rule_id}"),
    )
    if finding.severity not in _FAILING:
        return
    message = _message(finding)
    failure = ET.SubElement(case, "failure", message=message, type=finding.severity.value)
    location = f":{finding.line}" if finding.line is not None else ""
    failure.text = f"{classname}{location}: {message}"


def format_junit(result: AuditResult) -> str:
    """Return a JUnit XML document with one test case per new finding.

    Error and warn findings render as failures; info findings are passing
    cases. Attribute and text content are escaped by ElementTree.
    """

    counts = result.stats.by_severity
    suites = ET.Element("testsuites")
    suite = ET.SubElement(
        suites,
        "testsuite",
        name=SUITE_NAME,
        tests=str(len(result.findings)),
        failures=str(counts.error + counts.warn),
        errors=str(counts.error),
    )
    for finding in result.findings:
        _testcase(suite, finding)
    ET.indent(suites, space="  ")
    return f"{XML_DECLARATION}\n{ET.tostring(suites, encoding='unicode')}\n"


__all__ = ["format_json", "format_junit"]
