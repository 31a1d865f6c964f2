"""Export: render a workspace's current values for deployment."""

from __future__ import annotations

import json
from collections.abc import Sequence

from ..backends import create_store
from ..envfile import parse_local_file
from ..models import RequirementLevel, Workspace
from ..parser import parse_example_file
from ..protocol import EnvFileStore
from ..reconciler import ReconcileOptions, workspace_schema
from ..registry import PluginRegistry

EXPORT_FORMATS = ("json", "shell", "values", "vercel")


def export_values(
    workspace: Workspace,
    store: EnvFileStore,
    options: ReconcileOptions,
    registry: PluginRegistry | None = None,
) -> dict[str, str]:
    """Non-empty values of every declared variable, in schema order."""
    sources = registry.value_sources if registry is not None else []
    schema = workspace_schema(workspace, options.root_example_path, store, sources)
    values = parse_local_file(workspace.local_path, store).values
    return {d.name: values[d.name] for d in schema if values.get(d.name)}


def export_summary(
    workspaces: Sequence[Workspace],
    registry: PluginRegistry | None = None,
    store: EnvFileStore | None = None,
    options: ReconcileOptions | None = None,
) -> dict[str, dict[str, list[str]]]:
    """Per-workspace names split by requirement and by shared/app-specific."""
    options = options or ReconcileOptions()
    store = store if store is not None else create_store()
    sources = registry.value_sources if registry is not None else []
    shared = set(parse_example_file(options.root_example_path, store, sources).names)

    summary = {}
    for workspace in workspaces:
        schema = workspace_schema(workspace, options.root_example_path, store, sources)
        summary[workspace.name] = {
            "required": [d.name for d in schema if d.requirement == RequirementLevel.REQUIRED],
            "optional": [d.name for d in schema if d.requirement == RequirementLevel.OPTIONAL],
            "app_specific": [d.name for d in schema if d.name not in shared],
            "shared": [d.name for d in schema if d.name in shared],
        }
    return summary


def _shell_quote(value: str) -> str:
    return "'" + value.replace("'", "'\\''") + "'"


def run_export(
    workspace: Workspace,
    format: str = "values",
    registry: PluginRegistry | None = None,
    store: EnvFileStore | None = None,
    options: ReconcileOptions | None = None,
) -> str:
    """Render one workspace in ``format``. Raises ValueError for unknown formats."""
    if format not in EXPORT_FORMATS:
        raise ValueError(f"Unknown format: {format}. Use: {', '.join(EXPORT_FORMATS)}")
    options = options or ReconcileOptions()
    store = store if store is not None else create_store()

    if format == "json":
        return json.dumps(export_summary([workspace], registry, store, options), indent=2)

    values = export_values(workspace, store, options, registry)
    if format == "shell":
        lines = [f"export {k}={_shell_quote(v)}" for k, v in values.items()]
    elif format == "vercel":
        lines = [f'{k}="{v}"' for k, v in values.items()]
    else:
        lines = [f"{k}={v}" for k, v in values.items()]
    return "\n".join(lines) + ("\n" if lines else "")
