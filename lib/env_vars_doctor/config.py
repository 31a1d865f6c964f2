"""Configuration model and loader.

Every field carries a default, so a partial user file merges with the
defaults by construction. Keys are accepted in snake_case or camelCase.
"""

from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

MODULE_NAME = "env-vars-doctor"

SEARCH_PLACES: tuple[str, ...] = (
    f".{MODULE_NAME}rc",
    f".{MODULE_NAME}rc.json",
    f".{MODULE_NAME}rc.yaml",
    f".{MODULE_NAME}rc.yml",
    f"{MODULE_NAME}.config.yaml",
    f"{MODULE_NAME}.config.json",
    "pyproject.toml",
)


class _Section(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WorkspaceConfig(_Section):
    detection: Literal["auto", "pnpm", "npm", "yarn", "manual"] = "auto"
    patterns: list[str] = Field(
        default_factory=list, description="Glob patterns; empty means detect"
    )
    source_dir: str = "src"


class ProjectConfig(_Section):
    root_env_example: str = ".env.local.example"
    root_env_local: str = ".env.local"
    workspaces: WorkspaceConfig = Field(default_factory=WorkspaceConfig)


class ScanningConfig(_Section):
    extensions: list[str] = Field(
        default_factory=lambda: [".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs"]
    )
    skip_dirs: list[str] = Field(
        default_factory=lambda: ["node_modules", "dist", ".next", "build", "coverage", ".git"]
    )
    ignore_missing: list[str] = Field(
        default_factory=list, description="Platform-provided names never reported missing"
    )
    ignore_unused: list[str] = Field(
        default_factory=list, description="Names consumed by dependencies, never reported unused"
    )


class CIConfig(_Section):
    skip_env_var: str = "SKIP_ENV_DOCTOR"
    skip_directives: list[str] = Field(default_factory=lambda: ["local-only", "prompt"])
    detection: dict[str, list[str]] = Field(
        default_factory=lambda: {
            "ci": ["CI", "CONTINUOUS_INTEGRATION"],
            "github": ["GITHUB_ACTIONS"],
            "vercel": ["VERCEL"],
            "netlify": ["NETLIFY"],
        }
    )


class ExternalPluginRef(_Section):
    name: str = Field(..., description="Importable module name of the plugin")
    options: dict[str, Any] = Field(default_factory=dict)


class PluginsConfig(_Section):
    external: list[ExternalPluginRef] = Field(default_factory=list)


class DoctorConfig(_Section):
    version: Literal["1"] = "1"
    project: ProjectConfig = Field(default_factory=ProjectConfig)
    scanning: ScanningConfig = Field(default_factory=ScanningConfig)
    ci: CIConfig = Field(default_factory=CIConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)


class LoadedConfig(BaseModel):
    """Result of a config lookup."""

    config: DoctorConfig
    path: Path | None = None
    found: bool = False


def _read_raw(path: Path) -> dict[str, Any] | None:
    """Parse a config file into a dict. Returns None if it holds no config."""
    text = path.read_text(encoding="utf-8")
    if path.name == "pyproject.toml":
        return tomllib.loads(text).get("tool", {}).get(MODULE_NAME)
    if path.suffix == ".json":
        data = json.loads(text) if text.strip() else None
    else:
        # Extensionless rc files are YAML, which also accepts JSON.
        data = yaml.safe_load(text)
    if data is None:
        return None
    if not isinstance(data, dict):
        raise ValueError(f"expected a mapping at the top level, got {type(data).__name__}")
    return data


def load_config_file(path: str | Path) -> LoadedConfig:
    """Load one explicit config file and merge it with the defaults."""
    path = Path(path)
    try:
        raw = _read_raw(path)
        if raw is None:
            return LoadedConfig(config=DoctorConfig(), path=path, found=False)
        config = DoctorConfig.model_validate(raw)
    except (ValueError, yaml.YAMLError, tomllib.TOMLDecodeError) as exc:
        raise ValueError(f"Failed to load {MODULE_NAME} config from {path}: {exc}") from exc
    logger.debug("config: loaded %s", path)
    return LoadedConfig(config=config, path=path, found=True)


def load_config(search_from: str | Path | None = None) -> LoadedConfig:
    """Search upward from ``search_from`` (default: cwd) for a config file.

    Returns the defaults with ``found=False`` when nothing is found. A
    ``pyproject.toml`` without a ``[tool.env-vars-doctor]`` table is
    passed over and the search continues.
    """
    start = Path(search_from or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        for name in SEARCH_PLACES:
            candidate = directory / name
            if not candidate.is_file():
                continue
            loaded = load_config_file(candidate)
            if loaded.found:
                return loaded
    return LoadedConfig(config=DoctorConfig(), path=None, found=False)
