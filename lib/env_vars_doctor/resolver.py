"""ValueResolver: decides how a missing variable gets its value.

Order of precedence for one definition:
1. a non-empty value already in ``context.current_values`` (``existing``)
2. a registered plugin value source claiming the directive kind
3. the built-in strategy for the directive kind
Unknown kinds with no plugin fall back to ``placeholder``.
"""

from __future__ import annotations

import logging

from .models import DirectiveKind, EnvVarDefinition, ResolvedValue
from .protocol import ResolverContext, ValueSource
from .registry import PluginRegistry, maybe_await
from .sources import BUILTIN_STRATEGIES, resolve_placeholder

logger = logging.getLogger(__name__)


class ValueResolver:
    """Resolves values through plugins first, then the built-in strategies."""

    def __init__(self, registry: PluginRegistry | None = None) -> None:
        self._registry = registry if registry is not None else PluginRegistry()

    @property
    def registry(self) -> PluginRegistry:
        return self._registry

    async def resolve(
        self, definition: EnvVarDefinition, context: ResolverContext
    ) -> ResolvedValue:
        """Resolve one definition. Expected conditions never raise."""
        existing = context.current_values.get(definition.name)
        if existing:
            return ResolvedValue(value=existing, source="existing")

        await self._registry.before_resolve(definition, context)
        result = await self._dispatch(definition, context)
        await self._registry.after_resolve(definition, result, context)

        logger.debug(
            "resolver: %s -> source=%s skipped=%s",
            definition.name,
            result.source,
            result.skipped,
        )
        return result

    async def _dispatch(
        self, definition: EnvVarDefinition, context: ResolverContext
    ) -> ResolvedValue:
        kind = definition.directive.kind
        source = self._registry.find_value_source(kind)
        if source is not None:
            return await self._resolve_with_plugin(source, definition, context)

        try:
            strategy = BUILTIN_STRATEGIES[DirectiveKind(kind)]
        except ValueError:
            logger.debug("resolver: no source for directive kind %r, using placeholder", kind)
            strategy = resolve_placeholder
        return await strategy(definition, context)

    async def _resolve_with_plugin(
        self,
        source: ValueSource,
        definition: EnvVarDefinition,
        context: ResolverContext,
    ) -> ResolvedValue:
        is_available = getattr(source, "is_available", None)
        if is_available is not None and not await maybe_await(is_available(context)):
            message = getattr(source, "unavailable_message", None) or (
                f'Plugin source "{source.directive_kind}" is not available'
            )
            logger.warning("resolver: %s: %s", definition.name, message)
            return ResolvedValue(
                value=definition.example_value, source="placeholder", warning=message
            )
        return await source.resolve(definition, context)
