"""Interactive prompting for ``[prompt]`` variables."""

from __future__ import annotations

from ..models import EnvVarDefinition, ResolvedValue
from ..protocol import ResolverContext


def placeholder_for(definition: EnvVarDefinition) -> str:
    return definition.example_value or f"REPLACE_ME_{definition.name}"


async def resolve_prompt(
    definition: EnvVarDefinition, context: ResolverContext
) -> ResolvedValue:
    """Ask for a value.

    Non-interactive runs never block: they return the example value or a
    ``REPLACE_ME_<NAME>`` marker with a warning. An empty answer takes
    the example value; with no example, a required variable asks whether
    to skip and otherwise asks again.
    """
    if not context.interactive:
        return ResolvedValue(
            value=placeholder_for(definition),
            source="placeholder",
            warning=f"Non-interactive mode: using placeholder for {definition.name}",
        )

    hint = definition.description or definition.name
    default_hint = f" (default: {definition.example_value})" if definition.example_value else ""
    skip_hint = (
        " (Enter to skip)" if not definition.is_required and not definition.example_value else ""
    )
    question = f"? {hint}\n  Enter {definition.name}{default_hint}{skip_hint}: "

    while True:
        answer = context.prompt(question).strip()
        if answer:
            return ResolvedValue(value=answer, source="prompted")
        if definition.example_value:
            return ResolvedValue(value=definition.example_value, source="prompted")
        if not definition.is_required:
            return ResolvedValue(value="", source="prompted", skipped=True)

        skip = context.prompt("  No value provided. Skip for now? (y/N): ").strip()
        if skip.lower() == "y":
            return ResolvedValue(
                value="",
                source="prompted",
                skipped=True,
                warning=f"Skipped required variable: {definition.name}",
            )
