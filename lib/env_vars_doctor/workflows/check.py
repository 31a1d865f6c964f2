"""Compare-only workflows: check, status and ci.

None of these prompt or write.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from ..backends import create_store
from ..ci import detected_platform, should_skip
from ..envfile import parse_local_file
from ..models import RequirementLevel, Workspace
from ..parser import parse_example_file
from ..protocol import EnvFileStore
from ..reconciler import ReconcileOptions, compare_schema_to_actual, workspace_schema
from ..registry import PluginRegistry
from .reports import CheckReport, CiReport, CiWorkspaceReport

logger = logging.getLogger(__name__)


def run_check(
    workspaces: Sequence[Workspace],
    registry: PluginRegistry | None = None,
    store: EnvFileStore | None = None,
    options: ReconcileOptions | None = None,
) -> CheckReport:
    """Classify every workspace. ``report.ok`` is False if a required value is missing."""
    options = options or ReconcileOptions()
    store = store if store is not None else create_store()
    sources = registry.value_sources if registry is not None else []

    report = CheckReport()
    for workspace in workspaces:
        schema = workspace_schema(workspace, options.root_example_path, store, sources)
        actual = parse_local_file(workspace.local_path, store)
        report.results.append(compare_schema_to_actual(schema, actual, workspace))

    logger.debug("check: %d workspace(s), ok=%s", len(workspaces), report.ok)
    return report


def run_status(
    workspaces: Sequence[Workspace],
    registry: PluginRegistry | None = None,
    store: EnvFileStore | None = None,
    options: ReconcileOptions | None = None,
) -> CheckReport:
    """Like ``run_check``, with overrides measured against the root values file."""
    options = options or ReconcileOptions()
    store = store if store is not None else create_store()
    sources = registry.value_sources if registry is not None else []

    shared_names = parse_example_file(options.root_example_path, store, sources).names
    shared_values = parse_local_file(options.root_local_path, store).values

    report = CheckReport()
    for workspace in workspaces:
        schema = workspace_schema(workspace, options.root_example_path, store, sources)
        actual = parse_local_file(workspace.local_path, store)
        report.results.append(
            compare_schema_to_actual(schema, actual, workspace, shared_values, shared_names)
        )
    return report


def run_ci(
    workspaces: Sequence[Workspace],
    registry: PluginRegistry | None = None,
    store: EnvFileStore | None = None,
    options: ReconcileOptions | None = None,
    environ: Mapping[str, str] | None = None,
) -> CiReport:
    """Check each workspace's effective schema against the process environment.

    Variables whose directive kind is listed in ``ci.skip_directives``
    are not checked. When the configured skip variable is set, nothing is
    checked and ``report.skipped`` is True.
    """
    options = options or ReconcileOptions()
    environ = environ if environ is not None else options.environ
    config = options.config

    if should_skip(config, environ):
        logger.info("ci: skipped, %s is set", config.ci.skip_env_var)
        return CiReport(skipped=True)

    store = store if store is not None else create_store()
    sources = registry.value_sources if registry is not None else []
    skip_directives = set(config.ci.skip_directives)

    report = CiReport(platform=detected_platform(config, environ))
    for workspace in workspaces:
        section = CiWorkspaceReport(workspace=workspace.name)
        for definition in workspace_schema(
            workspace, options.root_example_path, store, sources
        ):
            if definition.requirement == RequirementLevel.DEPRECATED:
                continue
            if definition.directive.kind in skip_directives:
                section.skipped.append(definition.name)
            elif environ.get(definition.name):
                section.present.append(definition.name)
            elif definition.is_required:
                section.missing_required.append(definition.name)
            else:
                section.missing_optional.append(definition.name)
        report.workspaces.append(section)

    return report
