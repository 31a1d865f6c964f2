"""Postinstall: a quick environment check after installing dependencies."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from ..backends import create_store
from ..ci import is_ci
from ..envfile import parse_local_file
from ..models import EnvVarDefinition, RequirementLevel, Workspace
from ..parser import parse_example_file
from ..protocol import EnvFileStore
from ..reconciler import ReconcileOptions
from ..registry import PluginRegistry
from .check import run_ci
from .reports import PostinstallReport


def _record(report: PostinstallReport, definition: EnvVarDefinition) -> None:
    if definition.requirement == RequirementLevel.REQUIRED:
        names = report.missing_required
    elif definition.requirement == RequirementLevel.OPTIONAL:
        names = report.missing_optional
    else:
        return
    if definition.name not in names:
        names.append(definition.name)


def run_postinstall(
    workspaces: Sequence[Workspace],
    registry: PluginRegistry | None = None,
    store: EnvFileStore | None = None,
    options: ReconcileOptions | None = None,
    environ: Mapping[str, str] | None = None,
) -> PostinstallReport:
    """Under CI run the ``ci`` check; otherwise list what is still missing.

    A shared variable counts as missing when any workspace with an example
    file lacks it. App-specific variables are checked per workspace.
    """
    options = options or ReconcileOptions()
    environ = environ if environ is not None else options.environ
    store = store if store is not None else create_store()

    if is_ci(options.config, environ):
        return PostinstallReport(ci=run_ci(workspaces, registry, store, options, environ))

    sources = registry.value_sources if registry is not None else []
    with_schema = [w for w in workspaces if store.exists(w.example_path)]
    values = [parse_local_file(w.local_path, store).values for w in with_schema]

    report = PostinstallReport()
    for definition in parse_example_file(options.root_example_path, store, sources).definitions:
        if any(not actual.get(definition.name) for actual in values):
            _record(report, definition)

    for workspace, actual in zip(with_schema, values):
        for definition in parse_example_file(workspace.example_path, store, sources).definitions:
            if not actual.get(definition.name):
                _record(report, definition)
    return report
