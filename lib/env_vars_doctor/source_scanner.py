"""Static scan of source trees for environment variable references.

Recognized forms, with uppercase names only::

    process.env.KEY
    process.env["KEY"]  /  process.env['KEY']
    import.meta.env.KEY

Results are advisory. A regex scan cannot see indirect access, so a
name reported unused may still be read at runtime.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path

from .config import DoctorConfig
from .models import DiagnoseResult, EnvUsage, SourceScanResult, Workspace
from .registry import PluginRegistry

logger = logging.getLogger(__name__)

ENV_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"process\.env\.([A-Z][A-Z0-9_]*)"),
    re.compile(r"process\.env\[[\"']([A-Z][A-Z0-9_]*)[\"']\]"),
    re.compile(r"import\.meta\.env\.([A-Z][A-Z0-9_]*)"),
)

# The tool's own config files mention variable names without reading them.
SKIP_FILES = frozenset(
    f"env-vars-doctor.config.{ext}" for ext in ("js", "ts", "mjs", "cjs")
)

BUILTIN_IGNORED_MISSING = frozenset({"NODE_ENV"})


def _skip_dir(name: str, skip_dirs: frozenset[str]) -> bool:
    return name in skip_dirs or name.startswith(".")


def _scan_file(file: Path, extensions: frozenset[str]) -> bool:
    return file.suffix in extensions and file.name not in SKIP_FILES


def extract_usages(line: str, line_number: int, relative_path: str) -> list[tuple[str, EnvUsage]]:
    """Every ``(name, usage)`` referenced on one line, pattern by pattern."""
    found = []
    for pattern in ENV_PATTERNS:
        for match in pattern.finditer(line):
            usage = EnvUsage(file=relative_path, line=line_number, pattern=match.group(0))
            found.append((match.group(1), usage))
    return found


class _Scan:
    """Accumulates one scan's result."""

    def __init__(self, extensions: Iterable[str], skip_dirs: Iterable[str]) -> None:
        self.extensions = frozenset(extensions)
        self.skip_dirs = frozenset(skip_dirs)
        self.result = SourceScanResult()

    def file(self, path: Path, base: Path) -> None:
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            logger.warning("scanner: skipping %s: not UTF-8 text", path)
            return

        relative = path.relative_to(base).as_posix()
        lines = text.split("\n")
        self.result.files_scanned += 1
        self.result.lines_scanned += len(lines)
        for number, line in enumerate(lines, start=1):
            for name, usage in extract_usages(line, number, relative):
                self.result.usages.setdefault(name, []).append(usage)

    def directory(self, path: Path, base: Path) -> None:
        for entry in sorted(path.iterdir(), key=lambda p: p.name):
            # Links are not followed, so a cycle under the tree cannot recurse.
            if entry.is_symlink():
                continue
            if entry.is_dir():
                if not _skip_dir(entry.name, self.skip_dirs):
                    self.directory(entry, base)
            elif entry.is_file() and _scan_file(entry, self.extensions):
                self.file(entry, base)


def scan(
    root: str | Path,
    extensions: Iterable[str],
    skip_dirs: Iterable[str],
    base: str | Path | None = None,
) -> SourceScanResult:
    """Walk ``root`` depth-first and collect every variable reference.

    Paths in the result are relative to ``base`` (default: ``root``).
    A missing root scans nothing.
    """
    root = Path(root)
    scanner = _Scan(extensions, skip_dirs)
    if root.is_dir():
        scanner.directory(root, Path(base) if base is not None else root)
    return scanner.result


def scan_workspace_sources(workspace: Workspace, config: DoctorConfig) -> SourceScanResult:
    """Scan ``<workspace>/<source_dir>`` plus source files at the workspace root."""
    settings = config.scanning
    scanner = _Scan(settings.extensions, settings.skip_dirs)
    base = Path(workspace.path)

    source_dir = base / config.project.workspaces.source_dir
    if source_dir.is_dir():
        scanner.directory(source_dir, base)

    if base.is_dir():
        for entry in sorted(base.iterdir(), key=lambda p: p.name):
            if entry.is_file() and _scan_file(entry, scanner.extensions):
                scanner.file(entry, base)

    logger.debug(
        "scanner: %s: %d file(s), %d name(s)",
        workspace.name,
        scanner.result.files_scanned,
        len(scanner.result.usages),
    )
    return scanner.result


def scan_package_sources(root: str | Path, config: DoctorConfig) -> SourceScanResult:
    """Scan ``packages/*/<source_dir>`` for every workspace pattern under ``packages``."""
    root = Path(root)
    settings = config.scanning
    scanner = _Scan(settings.extensions, settings.skip_dirs)
    source_dir = config.project.workspaces.source_dir
    patterns = config.project.workspaces.patterns or ["apps/*", "packages/*"]

    seen: set[Path] = set()
    for pattern in patterns:
        if not pattern.startswith("packages"):
            continue
        packages_dir = root / pattern.split("/")[0]
        if packages_dir in seen or not packages_dir.is_dir():
            continue
        seen.add(packages_dir)
        for package in sorted(packages_dir.iterdir(), key=lambda p: p.name):
            src = package / source_dir
            if package.is_dir() and src.is_dir():
                scanner.directory(src, package)

    return scanner.result


def merge_scan_results(results: Iterable[SourceScanResult]) -> SourceScanResult:
    """Concatenate scan results, keeping usages in order."""
    merged = SourceScanResult()
    for result in results:
        merged.files_scanned += result.files_scanned
        merged.lines_scanned += result.lines_scanned
        for name, usages in result.usages.items():
            merged.usages.setdefault(name, []).extend(usages)
    return merged


def ignored_missing(
    config: DoctorConfig, registry: PluginRegistry | None = None
) -> set[str]:
    """Names never reported missing: built-ins, configured and plugin-provided."""
    names = set(BUILTIN_IGNORED_MISSING) | set(config.scanning.ignore_missing)
    if registry is not None:
        names |= set(registry.ignore_missing)
    return names


def diagnose(
    usages: Mapping[str, Sequence[EnvUsage]],
    declared: Iterable[str],
    ignore_missing: Iterable[str] = BUILTIN_IGNORED_MISSING,
    ignore_unused: Iterable[str] = (),
) -> DiagnoseResult:
    """Cross-check referenced names against declared names.

    ``missing`` and ``defined`` follow the order names were first seen in
    ``usages``; ``unused`` follows the order of ``declared``.
    """
    declared_names = list(dict.fromkeys(declared))
    declared_set = set(declared_names)
    skip_missing = set(ignore_missing)
    skip_unused = set(ignore_unused)

    missing: dict[str, list[EnvUsage]] = {}
    defined: list[str] = []
    for name, found in usages.items():
        if name in declared_set:
            defined.append(name)
        elif name not in skip_missing:
            missing[name] = list(found)

    unused = [
        name
        for name in declared_names
        if name not in usages and name not in skip_unused
    ]
    return DiagnoseResult(missing=missing, unused=unused, defined=defined)
