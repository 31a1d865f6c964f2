"""Copy, default and placeholder resolution."""

from __future__ import annotations

from ..models import CopyDirective, DefaultDirective, EnvVarDefinition, ResolvedValue
from ..protocol import ResolverContext


async def resolve_copy(definition: EnvVarDefinition, context: ResolverContext) -> ResolvedValue:
    """Take another variable's current value; an absent source yields ''."""
    directive = definition.directive
    if not isinstance(directive, CopyDirective):
        return ResolvedValue(
            value=definition.example_value,
            source="placeholder",
            warning="No source variable specified for copy directive",
        )

    source_value = context.current_values.get(directive.source)
    if source_value is not None:
        return ResolvedValue(value=source_value, source="copied")
    return ResolvedValue(
        value="",
        source="copied",
        warning=(
            f"Source variable {directive.source} not found for copying to {definition.name}"
        ),
    )


async def resolve_default(
    definition: EnvVarDefinition, context: ResolverContext
) -> ResolvedValue:
    directive = definition.directive
    if isinstance(directive, DefaultDirective) and directive.value is not None:
        return ResolvedValue(value=directive.value, source="default")
    return ResolvedValue(value=definition.example_value, source="default")


async def resolve_placeholder(
    definition: EnvVarDefinition, context: ResolverContext
) -> ResolvedValue:
    warning = None
    if definition.is_required:
        warning = f"Placeholder used for required variable: {definition.name}"
    return ResolvedValue(value=definition.example_value, source="placeholder", warning=warning)
