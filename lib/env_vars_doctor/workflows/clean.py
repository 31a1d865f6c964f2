"""Clean: delete generated values files."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..backends import create_store
from ..models import Workspace
from ..protocol import EnvFileStore
from ..reconciler import ReconcileOptions
from ..wrappers import DryRunWrapper
from .reports import CleanReport

logger = logging.getLogger(__name__)


def run_clean(
    workspaces: Sequence[Workspace],
    store: EnvFileStore | None = None,
    options: ReconcileOptions | None = None,
    include_root: bool = True,
    force: bool = False,
    dry_run: bool = False,
) -> CleanReport:
    """Delete the values file of each workspace, and the root one.

    In interactive mode, without ``force``, the deletion is confirmed
    through ``options.prompt`` first. With ``dry_run`` nothing is removed
    and the report lists what would be.
    """
    options = options or ReconcileOptions()
    base = store if store is not None else create_store()
    active: EnvFileStore = DryRunWrapper(base) if dry_run else base

    targets = []
    if include_root and active.exists(options.root_local_path):
        targets.append(options.root_local_path)
    for workspace in workspaces:
        path = workspace.local_path
        if path not in targets and active.exists(path):
            targets.append(path)

    if not targets:
        logger.info("clean: no values files found")
        return CleanReport()

    if options.interactive and not force:
        answer = options.prompt(f"Delete {len(targets)} values file(s)? (y/N): ").strip()
        if answer.lower() != "y":
            return CleanReport(cancelled=True)

    for path in targets:
        active.delete(path)
    logger.info("clean: deleted %d file(s)", len(targets))
    return CleanReport(deleted=targets)
