"""``[computed:KIND]`` variables.

No compute kinds are implemented: every kind falls back to the example
value with a warning naming the kind.
"""

from __future__ import annotations

from ..models import ComputedDirective, EnvVarDefinition, ResolvedValue
from ..protocol import ResolverContext


async def resolve_computed(
    definition: EnvVarDefinition, context: ResolverContext
) -> ResolvedValue:
    directive = definition.directive
    compute_type = directive.compute_type if isinstance(directive, ComputedDirective) else None
    warning = (
        f"Computed type '{compute_type}' not supported, using example value"
        if compute_type
        else "No compute type specified, using example value"
    )
    return ResolvedValue(value=definition.example_value, source="placeholder", warning=warning)
