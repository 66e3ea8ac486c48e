# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the built-in CSS analyzers."""

from collections.abc import Callable
from pathlib import Path

from cssaudit.severity import Severity
from cssaudit.tools.base import ToolContext
from cssaudit.tools.builtins import best_practices, orphaned_modules, overlapping_rules, purge_styles, unused_classes
from cssaudit.tools.builtins.unused_classes import collect_class_usage
from cssaudit.tools.css import parse_rules

ContextFactory = Callable[..., ToolContext]


def test_unused_classes_reports_unreferenced_class(button_repo: Path, make_context: ContextFactory) -> None:
    result = unused_classes.run(make_context(button_repo), {})

    assert [(f.file, f.line, f.message) for f in result.findings] == [
        ("button.module.css", 5, "Unused CSS class: .legacy"),
    ]
    assert result.findings[0].severity is Severity.WARN
    assert result.stats["cssModulesProcessed"] == 1


def test_unused_classes_fingerprint_survives_line_shift(
    button_repo: Path,
    make_context: ContextFactory,
    write_file: Callable[..., Path],
) -> None:
    before = unused_classes.run(make_context(button_repo), {}).findings[0]
    original = (button_repo / "button.module.css").read_text(encoding="utf-8")
    write_file(button_repo, "button.module.css", "\n\n\n" + original)

    after = unused_classes.run(make_context(button_repo), {}).findings[0]

    assert after.line == before.line + 3
    assert after.fingerprint == before.fingerprint


def test_unused_classes_skips_dynamic_access(
    tmp_path: Path,
    make_context: ContextFactory,
    write_file: Callable[..., Path],
) -> None:
    write_file(tmp_path, "chip.module.css", ".primary {}\n.secondary {}\n")
    write_file(
        tmp_path,
        "Chip.tsx",
        "import styles from './chip.module.css';\nexport const Chip = ({ v }) => <i className={styles[v]} />;\n",
    )

    result = unused_classes.run(make_context(tmp_path), {})

    assert result.findings == []
    assert result.stats["dynamicModulesSkipped"] == 1


def test_unused_classes_honours_literal_brackets_and_ignore_list(
    tmp_path: Path,
    make_context: ContextFactory,
    write_file: Callable[..., Path],
) -> None:
    write_file(tmp_path, "card.module.css", ".card-title {}\n.body {}\n.stale {}\n")
    write_file(
        tmp_path,
        "Card.tsx",
        "import css from './card.module.css';\n"
        "export const Card = () => <div className={css['card-title']}><p className={css.body} /></div>;\n",
    )
    ctx = make_context(tmp_path)

    assert [f.message for f in unused_classes.run(ctx, {}).findings] == ["Unused CSS class: .stale"]
    assert unused_classes.run(ctx, {"ignoreClasses": ["stale"]}).findings == []


def test_collect_class_usage_distinguishes_bindings() -> None:
    source = "styles.a; other.b; mystyles.c; styles?.d; styles['e']"

    used, dynamic = collect_class_usage(source, "styles")

    assert used == {"a", "d", "e"}
    assert dynamic is False


def test_orphaned_modules_flags_unimported_modules(
    button_repo: Path,
    make_context: ContextFactory,
    write_file: Callable[..., Path],
) -> None:
    write_file(button_repo, "old/orphan.module.css", ".x {}\n")

    result = orphaned_modules.run(make_context(button_repo), {})

    assert [(f.file, f.rule_id) for f in result.findings] == [("old/orphan.module.css", "orphaned-module")]


def test_best_practices_flags_literal_colours_and_important() -> None:
    text = """.card {
  color: #fff;
  background: hsl(var(--background));
  border-color: rgba(0, 0, 0, 0.5);
  --brand: #123456;
  margin: 0 !important;
}
"""

    findings = best_practices.check_file("card.css", text, is_token_file=False)

    assert [(f.rule_id, f.line, f.severity) for f in findings] == [
        ("hardcoded-color", 2, Severity.WARN),
        ("hardcoded-color", 4, Severity.WARN),
        ("important-declaration", 6, Severity.INFO),
    ]
    assert findings[0].message == "Hardcoded color #fff in 'color'"


def test_best_practices_token_files_may_hold_colours() -> None:
    findings = best_practices.check_file("styles/tokens/colors.css", ".x { color: #000; }\n", is_token_file=True)

    assert findings == []


def test_best_practices_repeated_declarations_get_distinct_fingerprints() -> None:
    findings = best_practices.check_file("a.css", ".a { color: #fff; }\n.a { color: #fff; }\n", is_token_file=False)

    assert len(findings) == 2
    assert findings[0].fingerprint != findings[1].fingerprint


def test_best_practices_run_uses_token_paths(
    tmp_path: Path,
    make_context: ContextFactory,
    write_file: Callable[..., Path],
) -> None:
    write_file(tmp_path, "styles/tokens/colors.css", ".x { color: #000; }\n")
    write_file(tmp_path, "theme/palette.css", ".y { color: #000; }\n")
    ctx = make_context(tmp_path)

    default_files = {f.file for f in best_practices.run(ctx, {}).findings}
    custom_files = {f.file for f in best_practices.run(ctx, {"tokenPaths": ["theme/"]}).findings}

    assert default_files == {"theme/palette.css"}
    assert custom_files == {"styles/tokens/colors.css"}


def test_duplicate_selectors_respect_at_rule_context() -> None:
    text = ".btn { color: red; }\n.btn { margin: 0; }\n@media print {\n  .btn { color: black; }\n}\n"

    findings = overlapping_rules.duplicate_selectors("a.css", parse_rules(text))

    assert [(f.rule_id, f.line) for f in findings] == [("duplicate-selector", 2)]
    assert "line 1" in (findings[0].hint or "")


def test_duplicate_blocks_reported_across_files() -> None:
    parsed = {
        "a.css": parse_rules(".x { margin: 0; padding: 0; }\n"),
        "b.css": parse_rules(".y { padding: 0;  margin: 0; }\n.z { margin: 0; }\n"),
    }

    findings = overlapping_rules.duplicate_blocks(parsed)

    assert [(f.file, f.severity) for f in findings] == [("b.css", Severity.INFO)]
    assert "a.css" in findings[0].message


def test_duplicate_block_fingerprint_ignores_reference_file() -> None:
    block = ".card { margin: 0; padding: 0; }\n"
    before = overlapping_rules.duplicate_blocks({"b.css": parse_rules(block), "c.css": parse_rules(block)})
    after = overlapping_rules.duplicate_blocks(
        {"a.css": parse_rules(block), "b.css": parse_rules(block), "c.css": parse_rules(block)},
    )

    fingerprints_before = {f.file: f.fingerprint for f in before}
    fingerprints_after = {f.file: f.fingerprint for f in after}
    assert "b.css" in before[0].message
    assert "a.css" in after[-1].message
    assert fingerprints_after["c.css"] == fingerprints_before["c.css"]


def test_purge_styles_dry_run_keeps_files(
    button_repo: Path,
    make_context: ContextFactory,
    write_file: Callable[..., Path],
) -> None:
    orphan = write_file(button_repo, "orphan.module.css", ".x {}\n")

    result = purge_styles.run(make_context(button_repo), {"dryRun": True})

    assert orphan.exists()
    assert [f.message for f in result.findings] == ["Would remove orphaned CSS module"]
    assert result.stats["modulesRemoved"] == 0


def test_purge_styles_removes_orphans(
    button_repo: Path,
    make_context: ContextFactory,
    write_file: Callable[..., Path],
) -> None:
    orphan = write_file(button_repo, "orphan.module.css", ".x {}\n")

    result = purge_styles.run(make_context(button_repo), {})

    assert not orphan.exists()
    assert (button_repo / "button.module.css").exists()
    assert [(f.file, f.message) for f in result.findings] == [("orphan.module.css", "Removed orphaned CSS module")]
