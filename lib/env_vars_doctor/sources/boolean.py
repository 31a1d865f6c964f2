"""Yes/no prompting for ``[boolean]`` variables."""

from __future__ import annotations

from ..models import BooleanDirective, EnvVarDefinition, ResolvedValue
from ..protocol import ResolverContext


def default_is_yes(definition: EnvVarDefinition, directive: BooleanDirective) -> bool:
    """Whether the example value reads as affirmative."""
    example = definition.example_value
    return example == directive.yes or example.lower() in ("true", "yes")


async def resolve_boolean(
    definition: EnvVarDefinition, context: ResolverContext
) -> ResolvedValue:
    directive = definition.directive
    if not isinstance(directive, BooleanDirective):
        directive = BooleanDirective()
    yes_default = default_is_yes(definition, directive)
    default_value = directive.yes if yes_default else directive.no

    if not context.interactive:
        return ResolvedValue(
            value=default_value,
            source="default",
            warning=f"Non-interactive mode: using {default_value} for {definition.name}",
        )

    hint = definition.description or definition.name
    values_hint = (
        f" ({directive.yes}/{directive.no})"
        if (directive.yes, directive.no) != ("true", "false")
        else ""
    )
    choices = "Y/n" if yes_default else "y/N"
    answer = context.prompt(f"? {hint}{values_hint}\n  {definition.name} ({choices}): ").strip()

    if not answer:
        return ResolvedValue(value=default_value, source="prompted")
    value = directive.yes if answer.lower().startswith("y") else directive.no
    return ResolvedValue(value=value, source="prompted")
