"""Sync: create or complete the values files of a set of workspaces.

Shared variables (declared by the root example file) are resolved once.
A value already set in any workspace is reused, so each shared variable
is asked for at most once, then written to the root values file and to
every workspace. App-specific variables are then resolved per workspace.

A workspace that redeclares a shared name in its own example file owns
that name: its definition resolves it and shared values never replace it.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from ..backends import create_store
from ..envfile import parse_local_file
from ..models import EnvLocalValues, Workspace
from ..parser import parse_example_file
from ..protocol import EnvFileStore, ValueSource
from ..reconciler import (
    ReconcileOptions,
    WorkspaceReconciliation,
    apply_updates,
    compare_schema_to_actual,
    compute_canonical_shared_values,
    reconcile_workspace,
    resolve_missing,
    workspace_schema,
)
from ..registry import PluginRegistry
from ..resolver import ValueResolver
from ..wrappers import DryRunWrapper
from .reports import SyncReport

logger = logging.getLogger(__name__)


def _own_names(
    workspace: Workspace,
    options: ReconcileOptions,
    store: EnvFileStore,
    sources: Sequence[ValueSource],
) -> set[str]:
    """Names declared by the workspace's own example file."""
    if Path(workspace.example_path) == Path(options.root_example_path):
        return set()
    return set(parse_example_file(workspace.example_path, store, sources).names)


def _first_values(
    workspaces: Sequence[Workspace], own_names: Sequence[set[str]], store: EnvFileStore
) -> dict[str, str]:
    """First non-empty value of every name, in workspace order.

    A value for a name the workspace redeclares is its own, not a shared one.
    """
    values: dict[str, str] = {}
    for workspace, own in zip(workspaces, own_names):
        for name, value in parse_local_file(workspace.local_path, store).values.items():
            if value and name not in own and name not in values:
                values[name] = value
    return values


def _missing_from(path: Path, values: dict[str, str], store: EnvFileStore) -> dict[str, str]:
    current = parse_local_file(path, store).values
    return {name: value for name, value in values.items() if not current.get(name)}


async def run_sync(
    workspaces: Sequence[Workspace],
    registry: PluginRegistry | None = None,
    store: EnvFileStore | None = None,
    options: ReconcileOptions | None = None,
    all_workspaces: Sequence[Workspace] | None = None,
    dry_run: bool = False,
) -> SyncReport:
    """Resolve and write every missing variable of ``workspaces``.

    ``all_workspaces`` (default: ``workspaces``) is the population used to
    pick canonical shared values when only some workspaces are synced.
    With ``dry_run`` nothing is written; the planned file contents are in
    ``report.pending_writes``. ``report.added`` counts values that were
    actually new, so a second run on unchanged input adds nothing.
    """
    options = options or ReconcileOptions()
    registry = registry if registry is not None else PluginRegistry()
    resolver = ValueResolver(registry)
    base = store if store is not None else create_store()
    dry = DryRunWrapper(base) if dry_run else None
    active: EnvFileStore = dry if dry is not None else base
    sources = registry.value_sources
    report = SyncReport()

    if not workspaces:
        return report

    await registry.before_sync(workspaces)

    root_schema = parse_example_file(options.root_example_path, active, sources)
    shared_names = root_schema.names
    population = all_workspaces if all_workspaces is not None else workspaces
    shared_values = compute_canonical_shared_values(
        shared_names,
        [parse_local_file(w.local_path, active).values for w in population],
    )
    own_names = [_own_names(w, options, active, sources) for w in workspaces]
    if not root_schema.definitions:
        logger.info("sync: no root example file at %s", options.root_example_path)

    if root_schema.definitions:
        existing = _first_values(workspaces, own_names, active)
        shared_pass = WorkspaceReconciliation(
            result=compare_schema_to_actual(
                root_schema.definitions, EnvLocalValues(values=existing), workspaces[0]
            )
        )
        context = options.context_for(workspaces[0], existing)
        await resolve_missing(shared_pass.result.missing, context, resolver, shared_pass)
        report.skipped_required.extend(shared_pass.skipped_required)
        report.skipped_optional.extend(shared_pass.skipped_optional)
        report.warnings.extend(shared_pass.warnings)

        # Only non-empty shared values are distributed.
        resolved_shared = {d.name: existing[d.name] for d in shared_pass.result.valid}
        for definition in shared_pass.result.missing:
            value = shared_pass.updates.get(definition.name)
            if value:
                resolved_shared[definition.name] = value
                report.added += 1
            elif definition.name in shared_pass.updates:
                if definition.is_required:
                    report.skipped_required.append(definition.name)
                else:
                    report.skipped_optional.append(definition.name)
        resolved_shared = {n: resolved_shared[n] for n in shared_names if n in resolved_shared}

        root_local = options.root_local_path
        apply_updates(
            root_local,
            _missing_from(root_local, resolved_shared, active),
            root_schema.definitions,
            active,
        )
        for workspace, own in zip(workspaces, own_names):
            schema = workspace_schema(workspace, options.root_example_path, active, sources)
            missing = _missing_from(workspace.local_path, resolved_shared, active)
            apply_updates(
                workspace.local_path,
                {name: value for name, value in missing.items() if name not in own},
                schema,
                active,
            )

    for workspace, own in zip(workspaces, own_names):
        reconciliation = await reconcile_workspace(
            workspace,
            resolver,
            active,
            options,
            shared_values=shared_values,
            shared_names=shared_names,
            skip_names=[name for name in shared_names if name not in own],
        )
        schema = workspace_schema(workspace, options.root_example_path, active, sources)
        applied = apply_updates(workspace.local_path, reconciliation.updates, schema, active)

        report.added += len(applied)
        report.skipped_required.extend(reconciliation.skipped_required)
        report.skipped_optional.extend(reconciliation.skipped_optional)
        report.warnings.extend(reconciliation.warnings)
        report.results.append(
            compare_schema_to_actual(
                schema,
                parse_local_file(workspace.local_path, active),
                workspace,
                shared_values,
                shared_names,
            )
        )

    await registry.after_sync(report.results)

    if dry is not None:
        report.pending_writes = dry.pending_writes
    logger.info(
        "sync: %d workspace(s), %d added, %d skipped, %d warning(s)",
        len(workspaces),
        report.added,
        len(report.skipped_required) + len(report.skipped_optional),
        len(report.warnings),
    )
    return report
