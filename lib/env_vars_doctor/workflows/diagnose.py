"""Diagnose: cross-check source code references against declared schemas."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from ..backends import create_store
from ..config import DoctorConfig
from ..models import Workspace
from ..parser import parse_example_file
from ..protocol import EnvFileStore
from ..registry import PluginRegistry
from ..source_scanner import (
    diagnose,
    ignored_missing,
    merge_scan_results,
    scan_package_sources,
    scan_workspace_sources,
)
from ..workspaces import root_env_paths
from .reports import DiagnoseReport

logger = logging.getLogger(__name__)


def run_diagnose(
    workspaces: Sequence[Workspace],
    root: str | Path,
    config: DoctorConfig | None = None,
    registry: PluginRegistry | None = None,
    store: EnvFileStore | None = None,
) -> DiagnoseReport:
    """Scan every workspace and shared package, then diagnose.

    Declared names are the union of the root schema and every workspace
    schema.
    """
    config = config or DoctorConfig()
    store = store if store is not None else create_store()
    sources = registry.value_sources if registry is not None else []
    root = Path(root)

    declared = list(parse_example_file(root_env_paths(config, root)[0], store, sources).names)
    for workspace in workspaces:
        for name in parse_example_file(workspace.example_path, store, sources).names:
            if name not in declared:
                declared.append(name)

    scans = [scan_workspace_sources(w, config) for w in workspaces]
    scans.append(scan_package_sources(root, config))
    merged = merge_scan_results(scans)

    result = diagnose(
        merged.usages,
        declared,
        ignore_missing=ignored_missing(config, registry),
        ignore_unused=config.scanning.ignore_unused,
    )
    logger.info(
        "diagnose: %d file(s) scanned, %d missing, %d unused",
        merged.files_scanned,
        len(result.missing),
        len(result.unused),
    )
    return DiagnoseReport(
        files_scanned=merged.files_scanned,
        lines_scanned=merged.lines_scanned,
        declared=declared,
        result=result,
    )
