"""Contracts between the engine and its collaborators.

- ResolverContext: the state threaded through one workspace's resolution pass
- ValueSource: a plugin-provided directive kind and its resolver
- DeploymentProvider: a plugin-provided deployment target (contract only)
- EnvFileStore: read/write access to example and values files
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from re import Pattern
from typing import Any, Protocol, runtime_checkable

from .config import DoctorConfig
from .models import EnvVarDefinition, ResolvedValue, Workspace

Prompter = Callable[[str], str]


@dataclass
class ResolverContext:
    """Per-workspace, per-pass resolution state.

    ``current_values`` is mutated as variables resolve so that later
    ``copy`` directives in the same pass see earlier results. A context
    belongs to exactly one workspace and is never shared across passes.
    """

    workspace: Workspace
    current_values: dict[str, str] = field(default_factory=dict)
    interactive: bool = False
    config: DoctorConfig = field(default_factory=DoctorConfig)
    root_dir: Path = field(default_factory=Path.cwd)
    environ: Mapping[str, str] = field(default_factory=lambda: os.environ)
    prompt: Prompter = input


@runtime_checkable
class ValueSource(Protocol):
    """Resolves values for one plugin-registered directive kind.

    Implementations may also define ``is_available(context)`` (returning a
    bool or an awaitable bool) and ``unavailable_message``; both are
    optional and looked up with getattr.
    """

    @property
    def directive_kind(self) -> str:
        """Directive kind this source claims, e.g. 'vault'."""
        ...

    @property
    def pattern(self) -> Pattern[str]:
        """Pattern matched against example-file comments."""
        ...

    async def resolve(
        self, definition: EnvVarDefinition, context: ResolverContext
    ) -> ResolvedValue:
        """Produce a value for a missing variable."""
        ...


@dataclass(frozen=True)
class DeploymentTarget:
    name: str
    id: str | None = None


@runtime_checkable
class DeploymentProvider(Protocol):
    """Pushes resolved values to a hosting platform."""

    @property
    def name(self) -> str: ...

    async def get_targets(
        self, workspace: Workspace, context: ResolverContext
    ) -> list[DeploymentTarget]:
        """List the targets (e.g. production, preview) for a workspace."""
        ...

    async def deploy(
        self,
        workspace: Workspace,
        values: dict[str, str],
        target: DeploymentTarget,
        context: ResolverContext,
    ) -> dict[str, Any]:
        """Deploy values. Returns ``{"success": bool, "message": str}``."""
        ...


@runtime_checkable
class EnvFileStore(Protocol):
    """Uniform access to example and values files."""

    def read_text(self, path: Path) -> str | None:
        """Return file content, or None when the file does not exist."""
        ...

    def write_text(self, path: Path, content: str) -> None:
        """Write content, creating parent directories."""
        ...

    def exists(self, path: Path) -> bool: ...

    def delete(self, path: Path) -> None:
        """Remove a file. Missing files are ignored."""
        ...
