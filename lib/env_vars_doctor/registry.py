"""PluginRegistry: the plugins loaded for one process.

Built once at startup, frozen, and then passed explicitly to the parser,
the resolver and the scanner. Nothing reads it as ambient global state.
"""

from __future__ import annotations

import inspect
import logging
import re
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from .models import EnvVarDefinition, ResolvedValue, Workspace
from .protocol import DeploymentProvider, ResolverContext, ValueSource

logger = logging.getLogger(__name__)

ResolveFn = Callable[[EnvVarDefinition, ResolverContext], Awaitable[ResolvedValue]]


@dataclass
class ValueSourceProvider:
    """Plain-function implementation of the ValueSource protocol."""

    directive_kind: str
    pattern: re.Pattern[str]
    resolve: ResolveFn
    is_available: Callable[[ResolverContext], Any] | None = None
    unavailable_message: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.pattern, str):
            self.pattern = re.compile(self.pattern, re.IGNORECASE)


@dataclass
class PluginHooks:
    """Optional lifecycle callbacks. Each may be sync or async."""

    on_init: Callable[..., Any] | None = None
    before_sync: Callable[..., Any] | None = None
    after_sync: Callable[..., Any] | None = None
    before_resolve: Callable[..., Any] | None = None
    after_resolve: Callable[..., Any] | None = None


@dataclass
class Plugin:
    """A bundle of value sources, deployment providers and hooks."""

    name: str
    version: str = "0.0.0"
    description: str = ""
    sources: list[ValueSource] = field(default_factory=list)
    deployment_providers: list[DeploymentProvider] = field(default_factory=list)
    hooks: PluginHooks = field(default_factory=PluginHooks)
    ignore_missing: list[str] = field(default_factory=list)


async def maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class PluginRegistry:
    """Registry of loaded plugins and their contributions."""

    def __init__(self) -> None:
        self._plugins: dict[str, Plugin] = {}
        self._frozen = False

    def register(self, plugin: Plugin) -> None:
        """Register a plugin. Raises ValueError on duplicate name."""
        if self._frozen:
            raise RuntimeError("Plugin registry is frozen; register plugins at startup")
        if plugin.name in self._plugins:
            raise ValueError(f"Plugin '{plugin.name}' already registered")
        for source in plugin.sources:
            if not isinstance(source, ValueSource):
                raise TypeError(
                    f"Plugin '{plugin.name}' value source {source!r} does not "
                    "implement directive_kind, pattern and resolve"
                )
        self._plugins[plugin.name] = plugin
        logger.info(
            "registry: plugin %r registered %d value source(s), %d deployment provider(s)",
            plugin.name,
            len(plugin.sources),
            len(plugin.deployment_providers),
        )

    def freeze(self) -> None:
        """Disallow further registration."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def plugins(self) -> list[Plugin]:
        return list(self._plugins.values())

    @property
    def value_sources(self) -> list[ValueSource]:
        """All value sources, in registration order."""
        return [s for p in self._plugins.values() for s in p.sources]

    @property
    def deployment_providers(self) -> list[DeploymentProvider]:
        return [d for p in self._plugins.values() for d in p.deployment_providers]

    @property
    def ignore_missing(self) -> list[str]:
        return [name for p in self._plugins.values() for name in p.ignore_missing]

    def find_value_source(self, directive_kind: str) -> ValueSource | None:
        """First registered value source claiming a directive kind, or None."""
        for source in self.value_sources:
            if source.directive_kind == directive_kind:
                return source
        return None

    def find_deployment_provider(self, name: str) -> DeploymentProvider | None:
        for provider in self.deployment_providers:
            if provider.name == name:
                return provider
        return None

    # -- Hooks ----------------------------------------------------------------

    async def _run_hook(self, hook_name: str, *args: Any) -> None:
        for plugin in self._plugins.values():
            hook = getattr(plugin.hooks, hook_name)
            if hook is not None:
                await maybe_await(hook(*args))

    async def on_init(self, config: Any) -> None:
        await self._run_hook("on_init", config)

    async def before_sync(self, workspaces: Sequence[Workspace]) -> None:
        await self._run_hook("before_sync", workspaces)

    async def after_sync(self, results: Sequence[Any]) -> None:
        await self._run_hook("after_sync", results)

    async def before_resolve(
        self, definition: EnvVarDefinition, context: ResolverContext
    ) -> None:
        await self._run_hook("before_resolve", definition, context)

    async def after_resolve(
        self,
        definition: EnvVarDefinition,
        result: ResolvedValue,
        context: ResolverContext,
    ) -> None:
        await self._run_hook("after_resolve", definition, result, context)
