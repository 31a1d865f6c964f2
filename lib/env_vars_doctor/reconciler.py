"""Reconciler: compares an effective schema with actual values.

``compare_schema_to_actual`` is a pure classification. The
``reconcile_*`` functions run one pass over a workspace: parse, merge,
compare, resolve each missing variable in order, and collect the
updates for a single batched rewrite.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from .config import DoctorConfig
from .envfile import parse_local_file, update_local_content
from .models import (
    EnvLocalValues,
    EnvVarDefinition,
    ReconciliationResult,
    RequirementLevel,
    Workspace,
)
from .parser import merge_schemas, parse_example_file
from .protocol import EnvFileStore, Prompter, ResolverContext, ValueSource
from .resolver import ValueResolver
from .workspaces import root_env_paths

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------


def compare_schema_to_actual(
    schema: Sequence[EnvVarDefinition],
    actual: EnvLocalValues,
    workspace: Workspace,
    shared_values: Mapping[str, str] | None = None,
    shared_names: Iterable[str] | None = None,
) -> ReconciliationResult:
    """Classify every schema entry against the actual values.

    Deprecated entries are never missing; they are reported only while
    still present. An empty value counts as missing. Overrides are
    recorded only when both shared inputs are given.
    """
    valid: list[EnvVarDefinition] = []
    missing: list[EnvVarDefinition] = []
    deprecated: list[str] = []
    overrides: dict[str, str] = {}
    shared = set(shared_names) if shared_names is not None else set()
    values = actual.values

    for definition in schema:
        value = values.get(definition.name)
        if definition.requirement == RequirementLevel.DEPRECATED:
            if value is not None:
                deprecated.append(definition.name)
        elif value:
            valid.append(definition)
            if shared_values is not None and definition.name in shared:
                canonical = shared_values.get(definition.name)
                if canonical is not None and canonical != value:
                    overrides[definition.name] = value
        else:
            missing.append(definition)

    declared = {d.name for d in schema}
    extra = [name for name in values if name not in declared]

    return ReconciliationResult(
        workspace=workspace,
        valid=valid,
        missing=missing,
        extra=extra,
        deprecated_still_present=deprecated,
        overrides=overrides,
    )


def compute_canonical_shared_values(
    shared_names: Iterable[str],
    values_by_workspace: Iterable[Mapping[str, str]],
) -> dict[str, str]:
    """Pick the most common non-empty value of each shared name.

    On equal counts the value seen first (in workspace order) wins.
    Names with no non-empty value anywhere are left out.
    """
    names = list(shared_names)
    counts: dict[str, dict[str, int]] = {name: {} for name in names}
    for values in values_by_workspace:
        for name in names:
            value = values.get(name)
            if value:
                counts[name][value] = counts[name].get(value, 0) + 1

    canonical: dict[str, str] = {}
    for name, tally in counts.items():
        best, best_count = "", 0
        for value, count in tally.items():
            if count > best_count:
                best, best_count = value, count
        if best:
            canonical[name] = best
    return canonical


def workspace_schema(
    workspace: Workspace,
    root_example_path: Path,
    store: EnvFileStore,
    sources: Sequence[ValueSource] = (),
) -> list[EnvVarDefinition]:
    """The effective schema of a workspace: root schema overridden by its own."""
    shared = parse_example_file(root_example_path, store, sources)
    if Path(workspace.example_path) == Path(root_example_path):
        return list(shared.definitions)
    specific = parse_example_file(workspace.example_path, store, sources)
    return merge_schemas(shared, specific)


# ---------------------------------------------------------------------------
# Reconciliation
# ---------------------------------------------------------------------------


@dataclass
class ReconcileOptions:
    """Settings shared by every workspace of one pass."""

    config: DoctorConfig = field(default_factory=DoctorConfig)
    root_dir: Path = field(default_factory=Path.cwd)
    interactive: bool = False
    environ: Mapping[str, str] = field(default_factory=lambda: os.environ)
    prompt: Prompter = input

    @property
    def root_example_path(self) -> Path:
        return root_env_paths(self.config, self.root_dir)[0]

    @property
    def root_local_path(self) -> Path:
        return root_env_paths(self.config, self.root_dir)[1]

    def context_for(self, workspace: Workspace, values: Mapping[str, str]) -> ResolverContext:
        """A fresh context for one workspace, seeded with a copy of its values."""
        return ResolverContext(
            workspace=workspace,
            current_values=dict(values),
            interactive=self.interactive,
            config=self.config,
            root_dir=Path(self.root_dir),
            environ=self.environ,
            prompt=self.prompt,
        )


@dataclass
class WorkspaceReconciliation:
    """Outcome of one workspace's pass."""

    result: ReconciliationResult
    updates: dict[str, str] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)
    skipped_required: list[str] = field(default_factory=list)
    skipped_optional: list[str] = field(default_factory=list)


async def resolve_missing(
    definitions: Iterable[EnvVarDefinition],
    context: ResolverContext,
    resolver: ValueResolver,
    outcome: WorkspaceReconciliation,
) -> None:
    """Resolve definitions in order, feeding each value back into the context."""
    for definition in definitions:
        resolved = await resolver.resolve(definition, context)
        if resolved.warning:
            outcome.warnings.append(resolved.warning)
        if resolved.skipped:
            if definition.is_required:
                outcome.skipped_required.append(definition.name)
            else:
                outcome.skipped_optional.append(definition.name)
            continue
        outcome.updates[definition.name] = resolved.value
        context.current_values[definition.name] = resolved.value


async def reconcile_workspace(
    workspace: Workspace,
    resolver: ValueResolver,
    store: EnvFileStore,
    options: ReconcileOptions | None = None,
    shared_values: Mapping[str, str] | None = None,
    shared_names: Iterable[str] | None = None,
    skip_names: Iterable[str] = (),
) -> WorkspaceReconciliation:
    """Compare one workspace and resolve its missing variables.

    Names in ``skip_names`` are classified but not resolved. Nothing is
    written; pass the updates to ``apply_updates``.
    """
    options = options or ReconcileOptions()
    sources = resolver.registry.value_sources
    schema = workspace_schema(workspace, options.root_example_path, store, sources)
    actual = parse_local_file(workspace.local_path, store)
    result = compare_schema_to_actual(schema, actual, workspace, shared_values, shared_names)

    outcome = WorkspaceReconciliation(result=result)
    skip = set(skip_names)
    context = options.context_for(workspace, actual.values)
    await resolve_missing(
        (d for d in result.missing if d.name not in skip), context, resolver, outcome
    )

    logger.debug(
        "reconciler: %s valid=%d missing=%d updates=%d",
        workspace.name,
        len(result.valid),
        len(result.missing),
        len(outcome.updates),
    )
    return outcome


def apply_updates(
    path: Path,
    updates: Mapping[str, str],
    schema: Sequence[EnvVarDefinition],
    store: EnvFileStore,
) -> dict[str, str]:
    """Rewrite one values file with all updates at once.

    Updates equal to the value already in the file are dropped. Returns
    the values actually changed; when that is empty nothing is written.
    """
    actual = parse_local_file(path, store)
    changes = {
        name: value for name, value in updates.items() if actual.values.get(name) != value
    }
    if not changes:
        return changes
    store.write_text(path, update_local_content(actual, changes, schema))
    logger.info("reconciler: wrote %d value(s) to %s", len(changes), path)
    return changes


@dataclass
class ReconcileAllResult:
    reconciliations: list[WorkspaceReconciliation] = field(default_factory=list)
    total_updates: int = 0
    warnings: list[str] = field(default_factory=list)

    @property
    def results(self) -> list[ReconciliationResult]:
        return [r.result for r in self.reconciliations]


async def reconcile_all(
    workspaces: Sequence[Workspace],
    resolver: ValueResolver,
    store: EnvFileStore,
    options: ReconcileOptions | None = None,
    dry_run: bool = False,
) -> ReconcileAllResult:
    """Reconcile workspaces one after another and write their updates."""
    options = options or ReconcileOptions()
    outcome = ReconcileAllResult()
    sources = resolver.registry.value_sources

    for workspace in workspaces:
        reconciliation = await reconcile_workspace(workspace, resolver, store, options)
        outcome.reconciliations.append(reconciliation)
        outcome.warnings.extend(reconciliation.warnings)
        if dry_run or not reconciliation.updates:
            continue
        schema = workspace_schema(workspace, options.root_example_path, store, sources)
        applied = apply_updates(workspace.local_path, reconciliation.updates, schema, store)
        outcome.total_updates += len(applied)

    return outcome
