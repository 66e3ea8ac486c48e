# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Cross-file relationships shared by every tool in a run.

The index is a text-scanning heuristic, not a module resolver: imports that
cannot be resolved to an existing style module are dropped silently.
"""

from __future__ import annotations

import posixpath
import re
from collections.abc import Callable, Iterable, Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .filesystem.paths import normalize_posix, resolve_repo_path
from .models import WorkspaceIndex
from .targets import CSS_MODULE_SUFFIX

DEFAULT_ALIAS_PREFIX: Final[str] = "@/"

_STYLE_MODULE_IMPORT_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"""import\s+(?:\*\s+as\s+)?(?P<binding>[A-Za-z_$][\w$]*)\s+from\s+['"](?P<spec>[^'"]+\.module\.css)['"]"""),
    re.compile(
        r"""import\s+(?P<binding>[A-Za-z_$][\w$]*)\s*,\s*\{[^}]*\}\s*from\s+['"](?P<spec>[^'"]+\.module\.css)['"]""",
    ),
    re.compile(
        r"""(?:const|let|var)\s+(?P<binding>[A-Za-z_$][\w$]*)\s*=\s*require\(\s*['"](?P<spec>[^'"]+\.module\.css)['"]\s*\)""",
    ),
)

WarnCallback = Callable[[str], None]


@dataclass(frozen=True, slots=True)
class StyleModuleImport:
    """One style-module import statement found in a logic file."""

    binding: str
    specifier: str


def iter_style_module_imports(source: str) -> Iterator[StyleModuleImport]:
    """Yield style-module imports declared in ``source``.

    Args:
        source: Text of a logic file.

    Yields:
        StyleModuleImport: Binding name and raw module specifier, in source order.
    """

    seen: set[tuple[int, str]] = set()
    matches: list[tuple[int, StyleModuleImport]] = []
    for pattern in _STYLE_MODULE_IMPORT_PATTERNS:
        for match in pattern.finditer(source):
            key = (match.start(), match.group("spec"))
            if key in seen:
                continue
            seen.add(key)
            matches.append((match.start(), StyleModuleImport(match.group("binding"), match.group("spec"))))
    for _, item in sorted(matches, key=lambda pair: pair[0]):
        yield item


def resolve_import(
    root: Path,
    importer: str,
    specifier: str,
    *,
    alias_prefix: str = DEFAULT_ALIAS_PREFIX,
) -> str | None:
    """Resolve ``specifier`` imported from ``importer`` to a repository path.

    Relative specifiers resolve against the importer's directory and
    ``alias_prefix`` specifiers against the repository root.

    Args:
        root: Repository root directory.
        importer: Repository-relative path of the importing file.
        specifier: Module specifier as written in the import.
        alias_prefix: Root alias prefix (``@/`` by default).

    Returns:
        str | None: Repository-relative POSIX path of an existing file, or
        ``None`` when the specifier is a package import, escapes the root, or
        points nowhere.
    """

    if specifier.startswith("."):
        candidate = posixpath.join(posixpath.dirname(importer), specifier)
    elif alias_prefix and specifier.startswith(alias_prefix):
        candidate = specifier[len(alias_prefix) :]
    else:
        return None
    relative = normalize_posix(candidate)
    if not relative or relative.startswith("../") or relative == "..":
        return None
    if not resolve_repo_path(root, relative).is_file():
        return None
    return relative


def scan_importer(
    root: Path,
    importer: str,
    *,
    alias_prefix: str = DEFAULT_ALIAS_PREFIX,
    warn: WarnCallback | None = None,
) -> list[tuple[str, str]]:
    """Return ``(style_module, binding)`` pairs imported by ``importer``.

    Unreadable files are reported through ``warn`` and yield no pairs.
    """

    try:
        source = resolve_repo_path(root, importer).read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        if warn is not None:
            warn(f"Skipping unreadable file {importer}: {exc.strerror or exc}")
        return []
    pairs: list[tuple[str, str]] = []
    for item in iter_style_module_imports(source):
        resolved = resolve_import(root, importer, item.specifier, alias_prefix=alias_prefix)
        if resolved is not None:
            pairs.append((resolved, item.binding))
    return pairs


def compute_impacted_css_modules(
    changed_files: Iterable[str],
    importers: dict[str, frozenset[str]],
) -> frozenset[str]:
    """Return style modules affected by ``changed_files``.

    A module is impacted when it changed itself or when one of its importers
    changed.
    """

    changed = {normalize_posix(path) for path in changed_files}
    impacted = {path for path in changed if path.endswith(CSS_MODULE_SUFFIX)}
    for module, module_importers in importers.items():
        if not changed.isdisjoint(module_importers):
            impacted.add(module)
    return frozenset(impacted)


def build_workspace_index(
    root: Path,
    changed_files: Sequence[str],
    ts_files: Sequence[str],
    tsx_files: Sequence[str],
    css_module_files: Sequence[str],
    *,
    changed_mode: bool = False,
    alias_prefix: str = DEFAULT_ALIAS_PREFIX,
    jobs: int = 1,
    warn: WarnCallback | None = None,
) -> WorkspaceIndex:
    """Build the shared workspace index.

    Args:
        root: Repository root directory.
        changed_files: Files changed since the reference (changed mode).
        ts_files: Non-component logic files to scan for imports.
        tsx_files: Component logic files to scan for imports.
        css_module_files: Style modules known to the run.
        changed_mode: When ``True`` also compute ``impacted_css_modules``.
        alias_prefix: Root alias prefix understood in import specifiers.
        jobs: Maximum number of threads used to read logic files.
        warn: Callback receiving messages about unreadable files.

    Returns:
        WorkspaceIndex: Importer map and, in changed mode, impacted modules.
    """

    logic_files = list(dict.fromkeys((*ts_files, *tsx_files)))
    importers: dict[str, set[str]] = {}
    if css_module_files and logic_files:
        known_modules = set(css_module_files)

        def _scan(importer: str) -> list[tuple[str, str]]:
            return scan_importer(root, importer, alias_prefix=alias_prefix, warn=warn)

        if jobs > 1 and len(logic_files) > 1:
            with ThreadPoolExecutor(max_workers=jobs) as executor:
                scanned = list(executor.map(_scan, logic_files))
        else:
            scanned = [_scan(importer) for importer in logic_files]
        for importer, pairs in zip(logic_files, scanned, strict=True):
            for module, _binding in pairs:
                if module in known_modules:
                    importers.setdefault(module, set()).add(importer)

    frozen = {module: frozenset(files) for module, files in sorted(importers.items())}
    impacted = compute_impacted_css_modules(changed_files, frozen) if changed_mode else None
    return WorkspaceIndex(css_module_importers=frozen, impacted_css_modules=impacted)


__all__ = [
    "DEFAULT_ALIAS_PREFIX",
    "StyleModuleImport",
    "build_workspace_index",
    "compute_impacted_css_modules",
    "iter_style_module_imports",
    "resolve_import",
    "scan_importer",
]
