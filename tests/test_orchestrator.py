# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""End-to-end tests for the orchestrator."""

import json
import threading
import time
from collections.abc import Callable
from pathlib import Path

import pytest

import cssaudit.logging as audit_logging
from cssaudit.discovery import GitDiscovery
from cssaudit.errors import ConfigError, RootResolutionError
from cssaudit.models import Finding, ScanMode, ToolRunResult
from cssaudit.options import AuditOptions
from cssaudit.orchestration import Orchestrator, compute_exit_code, normalize_findings
from cssaudit.severity import Severity
from cssaudit.targets import FileKind, TargetResolver
from cssaudit.tools import FilesScope, ToolDescriptor, ToolRegistry

OptionsFactory = Callable[..., AuditOptions]
DEFAULT_CHECKS = ["css-unused-classes", "css-orphaned-modules", "css-best-practices", "css-overlapping-rules"]


def _fake_git(changed: list[str]):
    def runner(cmd, root):
        if cmd[1] == "diff":
            return 0, list(changed)
        if cmd[1] == "merge-base":
            return 0, ["abc123"]
        return 0, []

    return lambda warn: TargetResolver(git=GitDiscovery(runner=runner), warn=warn)


def _static_tool(tool_id: str, *findings: Finding, **kwargs: object) -> ToolDescriptor:
    return ToolDescriptor(
        id=tool_id,
        title=tool_id,
        run=lambda ctx, cfg: ToolRunResult(findings=list(findings)),
        **kwargs,
    )


def _warn(tool: str, message: str, file: str = "a.css") -> Finding:
    return Finding(tool=tool, rule_id="rule", severity=Severity.WARN, file=file, message=message)


def test_empty_workspace_has_no_findings(tmp_path: Path, make_options: OptionsFactory) -> None:
    result = Orchestrator().run(make_options(tmp_path))

    assert result.findings == []
    assert result.stats.tools_run == DEFAULT_CHECKS
    assert result.stats.mode is ScanMode.FULL
    assert compute_exit_code(result.findings, Severity.INFO) == 0


def test_unused_class_is_reported(button_repo: Path, make_options: OptionsFactory) -> None:
    result = Orchestrator().run(make_options(button_repo))

    assert [(f.tool, f.rule_id, f.file, f.line) for f in result.findings] == [
        ("css-unused-classes", "unused-class", "button.module.css", 5),
    ]
    assert result.stats.by_tool["css-unused-classes"] == 1
    assert result.stats.by_tool["css-best-practices"] == 0
    assert result.stats.by_severity.warn == 1
    assert compute_exit_code(result.findings, Severity.ERROR) == 0
    assert compute_exit_code(result.findings, Severity.WARN) == 1


def test_baseline_update_suppresses_known_findings(button_repo: Path, make_options: OptionsFactory) -> None:
    orchestrator = Orchestrator()

    first = orchestrator.run(make_options(button_repo, update_baseline=True))
    second = orchestrator.run(make_options(button_repo))

    baseline = json.loads((button_repo / ".css-audit-baseline.json").read_text(encoding="utf-8"))
    assert len(first.findings) == 1
    assert len(baseline["findings"]) == 1
    assert baseline["version"] == "1.0"
    assert second.findings == []
    assert second.stats.suppressed_count == 1
    assert compute_exit_code(second.findings, Severity.WARN) == 0


def test_fixed_findings_leave_the_baseline(
    button_repo: Path,
    make_options: OptionsFactory,
    write_file: Callable[..., Path],
) -> None:
    orchestrator = Orchestrator()
    orchestrator.run(make_options(button_repo, update_baseline=True))
    write_file(button_repo, "button.module.css", ".button {\n  color: var(--foreground);\n}\n")

    orchestrator.run(make_options(button_repo, update_baseline=True))

    baseline = json.loads((button_repo / ".css-audit-baseline.json").read_text(encoding="utf-8"))
    assert baseline["findings"] == {}


def test_new_findings_are_reported_next_to_suppressed_ones(
    button_repo: Path,
    make_options: OptionsFactory,
    write_file: Callable[..., Path],
) -> None:
    orchestrator = Orchestrator()
    orchestrator.run(make_options(button_repo, update_baseline=True))
    source = (button_repo / "button.module.css").read_text(encoding="utf-8")
    write_file(button_repo, "button.module.css", source + "\n.fresh {\n  display: block;\n}\n")

    result = orchestrator.run(make_options(button_repo))

    assert [f.message for f in result.findings] == ["Unused CSS class: .fresh"]
    assert [f.message for f in result.suppressed] == ["Unused CSS class: .legacy"]


def test_repeated_runs_produce_identical_results(
    button_repo: Path,
    make_options: OptionsFactory,
    write_file: Callable[..., Path],
) -> None:
    orchestrator = Orchestrator()
    orchestrator.run(make_options(button_repo, update_baseline=True))
    write_file(button_repo, "styles/a.css", ".card {\n  margin: 0;\n  padding: 0;\n  color: #fff;\n}\n")
    write_file(
        button_repo,
        "styles/b.css",
        ".panel {\n  padding: 0;\n  margin: 0;\n  color: #fff;\n}\n.panel {\n  display: block;\n}\n",
    )

    first = orchestrator.run(make_options(button_repo))
    second = orchestrator.run(make_options(button_repo))

    assert {f.tool for f in first.findings} == {"css-best-practices", "css-overlapping-rules"}
    assert "duplicate-declarations" in {f.rule_id for f in first.findings}
    assert first.suppressed
    assert [f.model_dump() for f in second.findings] == [f.model_dump() for f in first.findings]
    assert [f.model_dump() for f in second.suppressed] == [f.model_dump() for f in first.suppressed]


def test_no_baseline_reports_everything(button_repo: Path, make_options: OptionsFactory) -> None:
    orchestrator = Orchestrator()
    orchestrator.run(make_options(button_repo, update_baseline=True))

    result = orchestrator.run(make_options(button_repo, no_baseline=True))

    assert len(result.findings) == 1
    assert result.suppressed == []


def test_changed_mode_audits_modules_of_changed_importers(button_repo: Path, make_options: OptionsFactory) -> None:
    orchestrator = Orchestrator(resolver_factory=_fake_git(["button.tsx"]))

    result = orchestrator.run(make_options(button_repo, changed=True, since="main"))

    assert [f.message for f in result.findings] == ["Unused CSS class: .legacy"]
    assert result.stats.mode is ScanMode.CHANGED
    assert result.stats.since_ref == "main"
    assert result.stats.changed_files_count == 1


def test_changed_mode_ignores_unrelated_modules(
    button_repo: Path,
    make_options: OptionsFactory,
    write_file: Callable[..., Path],
) -> None:
    write_file(button_repo, "other.css", ".z { margin: 0; }\n")
    orchestrator = Orchestrator(resolver_factory=_fake_git(["other.css"]))

    result = orchestrator.run(make_options(button_repo, changed=True))

    assert result.findings == []


def test_changed_mode_refuses_baseline_update_without_force(button_repo: Path, make_options: OptionsFactory) -> None:
    with pytest.raises(ConfigError):
        Orchestrator().run(make_options(button_repo, changed=True, update_baseline=True))


def test_missing_root_is_fatal(tmp_path: Path, make_options: OptionsFactory) -> None:
    with pytest.raises(RootResolutionError):
        Orchestrator().run(make_options(tmp_path / "missing"))


def test_tool_failure_is_isolated(tmp_path: Path, make_options: OptionsFactory) -> None:
    def explode(ctx, cfg):
        raise RuntimeError("boom")

    registry = ToolRegistry(
        [
            ToolDescriptor(id="broken", title="Broken", run=explode),
            _static_tool("healthy", _warn("healthy", "still reported")),
        ],
    )

    result = Orchestrator(registry).run(make_options(tmp_path))

    assert result.stats.failed_tools == ["broken"]
    assert result.stats.tools_run == ["healthy"]
    assert [f.message for f in result.findings] == ["still reported"]


def test_failed_tool_keeps_its_baseline_entries(tmp_path: Path, make_options: OptionsFactory) -> None:
    known = _warn("flaky", "known issue")
    (tmp_path / "a.css").write_text("", encoding="utf-8")
    Orchestrator(ToolRegistry([_static_tool("flaky", known)])).run(make_options(tmp_path, update_baseline=True))

    def explode(ctx, cfg):
        raise RuntimeError("offline")

    Orchestrator(ToolRegistry([ToolDescriptor(id="flaky", title="Flaky", run=explode)])).run(
        make_options(tmp_path, update_baseline=True),
    )

    baseline = json.loads((tmp_path / ".css-audit-baseline.json").read_text(encoding="utf-8"))
    assert list(baseline["findings"]) == [known.baseline_key]


def test_duplicate_fingerprints_are_collapsed(tmp_path: Path, make_options: OptionsFactory) -> None:
    twin = _warn("one", "same issue")
    registry = ToolRegistry([_static_tool("one", twin, twin)])

    result = Orchestrator(registry).run(make_options(tmp_path))

    assert result.findings == [twin]
    assert result.stats.total_findings == 2
    assert normalize_findings([twin, twin]) == [twin]


def test_tool_filters_narrow_targets(
    tmp_path: Path,
    make_options: OptionsFactory,
    write_file: Callable[..., Path],
) -> None:
    write_file(tmp_path, "src/a.css")
    write_file(tmp_path, "src/legacy/b.css")
    seen: list[tuple[str, ...]] = []

    def record(ctx, cfg):
        seen.append(ctx.targets.css_files)
        return ToolRunResult()

    tool = ToolDescriptor(
        id="recorder",
        title="Recorder",
        scope=FilesScope(kinds=(FileKind.CSS,)),
        exclude=("legacy/",),
        run=record,
    )

    Orchestrator(ToolRegistry([tool])).run(make_options(tmp_path))

    assert seen == [("src/a.css",)]


def test_parallel_execution_keeps_registry_order(
    tmp_path: Path,
    make_options: OptionsFactory,
    write_file: Callable[..., Path],
) -> None:
    write_file(tmp_path, "a.css")

    def slow(ctx, cfg):
        time.sleep(0.05)
        return ToolRunResult(findings=[_warn("slow", "slow finding")])

    registry = ToolRegistry(
        [
            ToolDescriptor(id="slow", title="Slow", scope=FilesScope(kinds=(FileKind.CSS,)), run=slow),
            _static_tool("fast", _warn("fast", "fast finding"), scope=FilesScope(kinds=(FileKind.CSS,))),
        ],
    )

    result = Orchestrator(registry).run(make_options(tmp_path, jobs=4))

    assert [f.tool for f in result.findings] == ["slow", "fast"]


def test_parallel_progress_lines_come_from_calling_thread(
    tmp_path: Path,
    make_options: OptionsFactory,
    write_file: Callable[..., Path],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    write_file(tmp_path, "a.css")
    lines: list[tuple[str, str]] = []
    monkeypatch.setattr(
        audit_logging,
        "info",
        lambda msg, **_kwargs: lines.append((msg, threading.current_thread().name)),
    )
    scope = FilesScope(kinds=(FileKind.CSS,))
    registry = ToolRegistry(
        [
            ToolDescriptor(id="first", title="First", scope=scope, run=lambda ctx, cfg: ToolRunResult()),
            ToolDescriptor(id="second", title="Second", scope=scope, run=lambda ctx, cfg: ToolRunResult()),
        ],
    )

    Orchestrator(registry).run(make_options(tmp_path, jobs=2, ci=False, no_baseline=True))

    running = [(msg, thread) for msg, thread in lines if msg.startswith("Running")]
    main = threading.main_thread().name
    assert running == [("Running First...", main), ("Running Second...", main)]


def test_config_file_overrides_filters_and_tool_settings(
    button_repo: Path,
    make_options: OptionsFactory,
    write_file: Callable[..., Path],
) -> None:
    write_file(button_repo, "legacy/old.css", ".x { color: #fff; }\n")
    write_file(
        button_repo,
        ".css-audit.config.json",
        json.dumps({"exclude": ["legacy/"], "tools": {"css-unused-classes": {"ignoreClasses": ["legacy"]}}}),
    )

    result = Orchestrator().run(make_options(button_repo))

    assert result.findings == []


def test_purge_runs_only_when_named(
    button_repo: Path,
    make_options: OptionsFactory,
    write_file: Callable[..., Path],
) -> None:
    orphan = write_file(button_repo, "orphan.module.css", ".x {}\n")

    Orchestrator().run(make_options(button_repo, force=True))
    assert orphan.exists()

    result = Orchestrator().run(make_options(button_repo, tools=("css-purge-styles",)))

    assert not orphan.exists()
    assert result.stats.tools_run == ["css-purge-styles"]
