# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""High level orchestration for running registered CSS audit tools."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from functools import partial

from .. import logging as console_log
from ..baseline import (
    Baseline,
    empty_baseline,
    existing_baseline_files,
    filter_against_baseline,
    prune_baseline,
    read_baseline,
    update_baseline,
    utc_timestamp,
    write_baseline,
)
from ..config import AuditConfig, load_config
from ..indexing import build_workspace_index
from ..models import AuditResult, Finding, ScanMode, TargetSet, ToolRunResult, WorkspaceIndex
from ..options import AuditOptions
from ..targets import TargetResolver, ensure_root
from ..tools.base import FilesScope, ToolContext, ToolDescriptor
from ..tools.builtins import default_registry
from ..tools.registry import ToolRegistry
from .selection import select_tools
from .stats import compute_stats
from .targeting import apply_tool_filters, narrow_targets, resolve_tool_targets

MessageCallback = Callable[[str], None]


@dataclass(slots=True)
class ToolOutcome:
    """Result of invoking one tool, successful or not."""

    order: int
    tool: ToolDescriptor
    result: ToolRunResult | None = None
    error: str | None = None
    target_count: int = 0

    @property
    def ok(self) -> bool:
        """Return whether the tool completed without raising."""

        return self.error is None


@dataclass(slots=True)
class _RunLoggers:
    log: MessageCallback
    warn: MessageCallback


@dataclass(slots=True)
class ExecutionState:
    """Outcomes accumulated while tools execute."""

    outcomes: list[ToolOutcome] = field(default_factory=list)

    def ordered(self) -> list[ToolOutcome]:
        """Return outcomes sorted by registry order."""

        return sorted(self.outcomes, key=lambda outcome: outcome.order)


def normalize_findings(findings: Iterable[Finding]) -> list[Finding]:
    """Return ``findings`` de-duplicated by fingerprint, keeping the first occurrence."""

    seen: dict[str, Finding] = {}
    for finding in findings:
        seen.setdefault(finding.fingerprint, finding)
    return list(seen.values())


def _silent(_message: str) -> None:
    """Discard ``_message``."""


class Orchestrator:
    """Coordinates target resolution, indexing, tool execution and the baseline."""

    def __init__(
        self,
        registry: ToolRegistry | None = None,
        *,
        resolver_factory: Callable[[MessageCallback], TargetResolver] | None = None,
        debug_logger: MessageCallback | None = None,
        clock: Callable[[], str] = utc_timestamp,
    ) -> None:
        """Create an orchestrator with the supplied collaborators.

        Args:
            registry: Registry that resolves available tools. Defaults to the
                built-in registry.
            resolver_factory: Callable building a :class:`TargetResolver` from a
                warning callback; used to inject fake git or filesystem discovery.
            debug_logger: Optional callback tracing selection and targeting.
            clock: Timestamp factory used by baseline updates.
        """

        self._registry = registry if registry is not None else default_registry()
        self._resolver_factory = resolver_factory or (lambda warn: TargetResolver(warn=warn))
        self._debug_logger = debug_logger
        self._clock = clock

    @property
    def registry(self) -> ToolRegistry:
        """Return the registry consulted by this orchestrator."""

        return self._registry

    def _debug(self, message: str) -> None:
        """Emit ``message`` to the configured debug logger when available."""

        if self._debug_logger:
            self._debug_logger(message)

    def run(self, options: AuditOptions) -> AuditResult:
        """Execute one audit run.

        Args:
            options: Resolved run options.

        Returns:
            AuditResult: New and suppressed findings plus aggregate statistics.

        Raises:
            ConfigError: If the option combination is rejected.
            RootResolutionError: If the repository root is unusable.
            TargetResolutionError: If changed files cannot be computed.
            BaselineWriteError: If a requested baseline update cannot be written.
        """

        options.check_combinations()
        root = ensure_root(options.root)
        options = options.model_copy(update={"root": root})
        loggers = self._loggers(options)

        config = load_config(options, warn=loggers.warn)
        resolver = self._resolver_factory(loggers.warn)
        targets = resolver.build(options, include=config.include, exclude=config.exclude)
        self._debug(f"targets: mode={targets.mode.value} files={len(targets.all_files)}")
        index = self._build_index(resolver, options, config, targets, loggers)
        ctx = ToolContext(
            root=root,
            config=config,
            options=options,
            targets=targets,
            index=index,
            log=loggers.log,
            warn=loggers.warn,
        )

        selection = select_tools(self._registry, options, debug=self._debug_logger)
        for unknown in selection.unknown:
            loggers.warn(f"Unknown tool '{unknown}' requested; available: {', '.join(self._registry)}")

        state = self._execute(selection.tools, ctx, config, options)
        succeeded = [outcome for outcome in state.ordered() if outcome.ok]
        failed = [outcome.tool.id for outcome in state.ordered() if not outcome.ok]

        raw_findings = [finding for outcome in succeeded for finding in outcome.result.findings]
        normalized = normalize_findings(raw_findings)

        baseline = self._load_baseline(options, loggers)
        if options.no_baseline:
            suppressed: list[Finding] = []
            new = list(normalized)
        else:
            suppressed, new = filter_against_baseline(normalized, baseline)

        if options.update_baseline:
            self._refresh_baseline(options, baseline, normalized, [outcome.tool for outcome in succeeded], ctx)
            loggers.log(f"Baseline updated: {options.resolved_baseline_path}")

        stats = compute_stats(
            raw_findings=raw_findings,
            new=new,
            suppressed=suppressed,
            tools_run=[outcome.tool.id for outcome in succeeded],
            failed_tools=failed,
            tool_stats={outcome.tool.id: outcome.result.stats for outcome in succeeded if outcome.result.stats},
            targets=targets,
        )
        return AuditResult(findings=new, suppressed=suppressed, stats=stats)

    def _loggers(self, options: AuditOptions) -> _RunLoggers:
        """Return tool-facing log callbacks, silenced in CI mode."""

        if options.ci:
            return _RunLoggers(log=_silent, warn=_silent)
        return _RunLoggers(
            log=partial(console_log.info, use_emoji=options.emoji, use_color=options.color),
            warn=partial(console_log.warn, use_emoji=options.emoji, use_color=options.color),
        )

    def _build_index(
        self,
        resolver: TargetResolver,
        options: AuditOptions,
        config: AuditConfig,
        targets: TargetSet,
        loggers: _RunLoggers,
    ) -> WorkspaceIndex:
        """Build the workspace index over the complete workspace.

        In changed mode the importer map still needs every logic file and
        style module, so the full tree is enumerated for the index only.
        """

        changed_mode = targets.mode is ScanMode.CHANGED
        universe = (
            resolver.enumerate_workspace(options.root, config.include, config.exclude) if changed_mode else targets
        )
        index = build_workspace_index(
            options.root,
            targets.changed_files,
            universe.ts_files,
            universe.tsx_files,
            universe.css_module_files,
            changed_mode=changed_mode,
            jobs=options.jobs,
            warn=loggers.warn,
        )
        self._debug(
            f"index: modules={len(index.css_module_importers)} "
            f"impacted={'n/a' if index.impacted_css_modules is None else len(index.impacted_css_modules)}",
        )
        return index

    def _execute(
        self,
        tools: Sequence[ToolDescriptor],
        ctx: ToolContext,
        config: AuditConfig,
        options: AuditOptions,
    ) -> ExecutionState:
        """Run ``tools`` sequentially, or files-scoped tools in parallel when ``jobs > 1``."""

        state = ExecutionState()
        runner = partial(self._run_tool, ctx=ctx, config=config)
        scheduled = [(self._registry.position(tool.id), tool) for tool in tools]
        parallel = [item for item in scheduled if options.jobs > 1 and isinstance(item[1].scope, FilesScope)]
        serial = scheduled
        if len(parallel) > 1:
            serial = [item for item in scheduled if not isinstance(item[1].scope, FilesScope)]
            with ThreadPoolExecutor(max_workers=options.jobs) as executor:
                futures = []
                for order, tool in parallel:
                    ctx.log(f"Running {tool.title}...")
                    futures.append(executor.submit(runner, order, tool))
                for future in as_completed(futures):
                    state.outcomes.append(future.result())
        for order, tool in serial:
            ctx.log(f"Running {tool.title}...")
            state.outcomes.append(runner(order, tool))
        for outcome in state.ordered():
            if outcome.ok:
                ctx.log(f"  {outcome.tool.id}: {len(outcome.result.findings)} finding(s)")
            else:
                ctx.warn(f"Tool {outcome.tool.id} failed: {outcome.error}")
        return state

    def _run_tool(self, order: int, tool: ToolDescriptor, *, ctx: ToolContext, config: AuditConfig) -> ToolOutcome:
        """Invoke ``tool`` on its narrowed targets, isolating any exception."""

        candidates = resolve_tool_targets(tool, ctx.targets, ctx.index)
        files = apply_tool_filters(candidates, tool)
        self._debug(f"{tool.id}: {len(candidates)} candidate(s), {len(files)} after filters")
        tool_ctx = ctx.with_targets(narrow_targets(ctx.targets, files))
        try:
            produced = tool.run(tool_ctx, config.tool_config(tool.id))
            result = produced if isinstance(produced, ToolRunResult) else ToolRunResult.model_validate(produced)
        except Exception as exc:  # tool failures are isolated to the tool
            error = f"{exc.__class__.__name__}: {exc}"
            return ToolOutcome(order=order, tool=tool, error=error, target_count=len(files))
        return ToolOutcome(order=order, tool=tool, result=result, target_count=len(files))

    def _load_baseline(self, options: AuditOptions, loggers: _RunLoggers) -> Baseline:
        """Read the baseline unless it is neither consulted nor refreshed."""

        if options.no_baseline and not options.update_baseline:
            return empty_baseline(clock=self._clock)
        return read_baseline(options.resolved_baseline_path, warn=loggers.warn, clock=self._clock)

    def _refresh_baseline(
        self,
        options: AuditOptions,
        baseline: Baseline,
        findings: Sequence[Finding],
        tools_run: Sequence[ToolDescriptor],
        ctx: ToolContext,
    ) -> Baseline:
        """Prune, update and write the baseline."""

        pruned = prune_baseline(baseline, existing_baseline_files(options.root, baseline))
        updated = update_baseline(pruned, findings, tools_run, ctx, clock=self._clock)
        write_baseline(options.resolved_baseline_path, updated)
        self._debug(f"baseline: {len(baseline.findings)} -> {len(updated.findings)} entries")
        return updated


__all__ = ["ExecutionState", "Orchestrator", "ToolOutcome", "normalize_findings"]
