"""Schema and reconciliation engine for environment variable files.

A commented example file declares the variables a workspace needs; this
package compares it with the workspace's actual values file:
- parser / directives: example-file text to an ordered EnvSchema
- reconciler: effective schema vs actual values, then resolution of what is missing
- resolver / sources: how a missing variable gets a value, plugins first
- source_scanner: variable references in source code vs declared names
- workflows: sync, check, status, ci, diagnose, export, clean and postinstall built on the above
"""

from .backends import LocalFileStore, create_store
from .config import DoctorConfig, LoadedConfig, load_config, load_config_file
from .directives import BUILTIN_RULES, DirectiveRule, ParsedComment, parse_comment
from .envfile import format_env_file, parse_local, parse_local_file, update_local_content
from .loader import init_plugins, load_plugins
from .models import (
    DiagnoseResult,
    DirectiveKind,
    EnvLocalValues,
    EnvSchema,
    EnvUsage,
    EnvVarDefinition,
    ReconciliationResult,
    RequirementLevel,
    ResolvedValue,
    SourceScanResult,
    Workspace,
)
from .parser import merge_schemas, parse_example, parse_example_file
from .protocol import DeploymentProvider, EnvFileStore, ResolverContext, ValueSource
from .reconciler import (
    ReconcileOptions,
    WorkspaceReconciliation,
    apply_updates,
    compare_schema_to_actual,
    compute_canonical_shared_values,
    reconcile_all,
    reconcile_workspace,
)
from .registry import Plugin, PluginHooks, PluginRegistry, ValueSourceProvider
from .resolver import ValueResolver
from .source_scanner import diagnose, scan
from .workspaces import discover_workspaces

__all__ = [
    "BUILTIN_RULES",
    "DeploymentProvider",
    "DiagnoseResult",
    "DirectiveKind",
    "DirectiveRule",
    "DoctorConfig",
    "EnvFileStore",
    "EnvLocalValues",
    "EnvSchema",
    "EnvUsage",
    "EnvVarDefinition",
    "LoadedConfig",
    "LocalFileStore",
    "ParsedComment",
    "Plugin",
    "PluginHooks",
    "PluginRegistry",
    "ReconcileOptions",
    "ReconciliationResult",
    "RequirementLevel",
    "ResolvedValue",
    "ResolverContext",
    "SourceScanResult",
    "ValueResolver",
    "ValueSource",
    "ValueSourceProvider",
    "Workspace",
    "WorkspaceReconciliation",
    "apply_updates",
    "compare_schema_to_actual",
    "compute_canonical_shared_values",
    "create_store",
    "diagnose",
    "discover_workspaces",
    "format_env_file",
    "init_plugins",
    "load_config",
    "load_config_file",
    "load_plugins",
    "merge_schemas",
    "parse_comment",
    "parse_example",
    "parse_example_file",
    "parse_local",
    "parse_local_file",
    "reconcile_all",
    "reconcile_workspace",
    "scan",
    "update_local_content",
]
