"""Built-in value sources, keyed by directive kind."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from ..models import DirectiveKind, EnvVarDefinition, ResolvedValue
from ..protocol import ResolverContext
from .boolean import resolve_boolean
from .computed import resolve_computed
from .copy import resolve_copy, resolve_default, resolve_placeholder
from .local_only import resolve_local_only, should_skip_local_only
from .prompt import resolve_prompt

Strategy = Callable[[EnvVarDefinition, ResolverContext], Awaitable[ResolvedValue]]

BUILTIN_STRATEGIES: dict[DirectiveKind, Strategy] = {
    DirectiveKind.PROMPT: resolve_prompt,
    DirectiveKind.BOOLEAN: resolve_boolean,
    DirectiveKind.COMPUTED: resolve_computed,
    DirectiveKind.COPY: resolve_copy,
    DirectiveKind.DEFAULT: resolve_default,
    DirectiveKind.LOCAL_ONLY: resolve_local_only,
    DirectiveKind.PLACEHOLDER: resolve_placeholder,
}

__all__ = [
    "BUILTIN_STRATEGIES",
    "Strategy",
    "resolve_boolean",
    "resolve_computed",
    "resolve_copy",
    "resolve_default",
    "resolve_local_only",
    "resolve_placeholder",
    "resolve_prompt",
    "should_skip_local_only",
]
