"""Workspace discovery for monorepos and single projects.

Callers that already know their workspaces can skip this module and
build ``Workspace`` values directly.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from .config import DoctorConfig
from .models import Workspace

logger = logging.getLogger(__name__)

DEFAULT_PATTERNS = ["apps/*", "packages/*"]
WORKSPACE_MARKER = "package.json"


def _read_package_json(root: Path) -> dict[str, Any] | None:
    path = root / WORKSPACE_MARKER
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        logger.warning("workspaces: cannot parse %s: %s", path, exc)
        return None
    return data if isinstance(data, dict) else None


def _read_pnpm_patterns(root: Path) -> list[str]:
    path = root / "pnpm-workspace.yaml"
    if not path.is_file():
        return []
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        logger.warning("workspaces: cannot parse %s: %s", path, exc)
        return []
    if not isinstance(data, dict):
        return []
    return [str(p) for p in data.get("packages") or []]


def is_monorepo(root: Path) -> bool:
    """True when the root carries any workspace manager configuration."""
    if (root / "pnpm-workspace.yaml").exists() or (root / "lerna.json").exists():
        return True
    package_json = _read_package_json(root)
    return bool(package_json and package_json.get("workspaces"))


def detect_patterns(root: Path, detection: str = "auto") -> list[str]:
    """Workspace glob patterns from the package manager configuration."""
    if detection == "manual":
        return []

    if detection in ("auto", "pnpm"):
        patterns = _read_pnpm_patterns(root)
        if patterns:
            return patterns

    if detection in ("auto", "npm", "yarn"):
        package_json = _read_package_json(root) or {}
        workspaces = package_json.get("workspaces")
        if isinstance(workspaces, list):
            return [str(p) for p in workspaces]
        if isinstance(workspaces, dict) and workspaces.get("packages"):
            return [str(p) for p in workspaces["packages"]]

    return list(DEFAULT_PATTERNS)


def _workspace_at(path: Path, config: DoctorConfig, name: str | None = None) -> Workspace:
    project = config.project
    return Workspace(
        name=name or path.name or "root",
        path=path,
        example_path=path / project.root_env_example,
        local_path=path / project.root_env_local,
    )


def root_env_paths(config: DoctorConfig, root: Path) -> tuple[Path, Path]:
    """Return ``(example_path, local_path)`` of the shared root files."""
    root = Path(root)
    return root / config.project.root_env_example, root / config.project.root_env_local


def discover_workspaces(root: str | Path, config: DoctorConfig | None = None) -> list[Workspace]:
    """Find every workspace under ``root``, sorted by name.

    A directory counts as a workspace when it matches a pattern and holds
    a ``package.json``. A root that is not a monorepo and matches nothing
    is its own single workspace, provided it has an example file.
    """
    root = Path(root)
    config = config or DoctorConfig()
    settings = config.project.workspaces
    patterns = settings.patterns or detect_patterns(root, settings.detection)

    found: dict[Path, Workspace] = {}
    for pattern in patterns:
        for match in sorted(root.glob(pattern)):
            if not match.is_dir() or not (match / WORKSPACE_MARKER).is_file():
                continue
            found.setdefault(match, _workspace_at(match, config))

    if not found and not is_monorepo(root):
        single = _workspace_at(root, config)
        if single.example_path.exists():
            logger.debug("workspaces: single-project mode at %s", root)
            return [single]

    workspaces = sorted(found.values(), key=lambda w: w.name)
    logger.debug("workspaces: found %d under %s", len(workspaces), root)
    return workspaces


def find_workspace(
    name: str, root: str | Path, config: DoctorConfig | None = None
) -> Workspace | None:
    for workspace in discover_workspaces(root, config):
        if workspace.name == name:
            return workspace
    return None


def detect_current_workspace(
    root: str | Path, config: DoctorConfig | None = None, cwd: str | Path | None = None
) -> Workspace | None:
    """The workspace containing ``cwd`` (default: the process cwd), or None."""
    current = Path(cwd or Path.cwd()).resolve()
    for workspace in discover_workspaces(root, config):
        base = workspace.path.resolve()
        if current == base or base in current.parents:
            return workspace
    return None


def has_example(workspace: Workspace) -> bool:
    return workspace.example_path.exists()


def has_local(workspace: Workspace) -> bool:
    return workspace.local_path.exists()
