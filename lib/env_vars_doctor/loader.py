"""Loads external plugins named in the configuration.

A plugin module exposes one of, checked in this order:

- ``create_plugin(options)`` returning a ``Plugin``
- a module-level ``plugin`` attribute holding a ``Plugin``
- a callable ``default(options)`` returning a ``Plugin``
"""

from __future__ import annotations

import importlib
import logging
from types import ModuleType
from typing import Any

from .config import DoctorConfig
from .registry import Plugin, PluginRegistry

logger = logging.getLogger(__name__)


def plugin_from_module(module: ModuleType, options: dict[str, Any]) -> Plugin | None:
    """Extract a Plugin from an imported module, or None if it exports none."""
    factory = getattr(module, "create_plugin", None)
    if callable(factory):
        return factory(options)

    plugin = getattr(module, "plugin", None)
    if isinstance(plugin, Plugin):
        return plugin

    default = getattr(module, "default", None)
    if callable(default):
        return default(options)

    return None


def load_plugins(
    config: DoctorConfig, registry: PluginRegistry | None = None
) -> PluginRegistry:
    """Import and register every external plugin, then freeze the registry.

    A plugin that fails to import, exports nothing usable or fails to
    register is logged and skipped; the rest still load.
    """
    registry = registry if registry is not None else PluginRegistry()

    for ref in config.plugins.external:
        try:
            module = importlib.import_module(ref.name)
            plugin = plugin_from_module(module, dict(ref.options))
            if plugin is None:
                logger.warning("loader: plugin %r does not export a valid plugin", ref.name)
                continue
            registry.register(plugin)
        except Exception as exc:
            logger.warning("loader: failed to load external plugin %r: %s", ref.name, exc)

    registry.freeze()
    logger.debug("loader: %d plugin(s) loaded", len(registry.plugins))
    return registry


async def init_plugins(
    config: DoctorConfig, registry: PluginRegistry | None = None
) -> PluginRegistry:
    """Load plugins and run their ``on_init`` hooks once."""
    registry = load_plugins(config, registry)
    await registry.on_init(config)
    return registry
