"""``[local-only]`` variables: only needed for local development."""

from __future__ import annotations

from ..ci import is_ci
from ..models import EnvVarDefinition, ResolvedValue
from ..protocol import ResolverContext
from .copy import resolve_default


def should_skip_local_only(context: ResolverContext) -> bool:
    return not context.interactive or is_ci(context.config, context.environ)


async def resolve_local_only(
    definition: EnvVarDefinition, context: ResolverContext
) -> ResolvedValue:
    if should_skip_local_only(context):
        return ResolvedValue(value="", source="default", skipped=True)
    return await resolve_default(definition, context)
