"""Directive-tag extraction from a finished comment string.

Tags are bracket-delimited tokens anywhere in the comment, e.g.
``# API key [required] [default:abc]``. The requirement tag is extracted
first. Then plugin patterns are tried in registration order, then the
built-in rules in ``BUILTIN_RULES`` order; the first match wins.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from .models import (
    BooleanDirective,
    ComputedDirective,
    CopyDirective,
    DefaultDirective,
    Directive,
    LocalOnlyDirective,
    PlaceholderDirective,
    PluginDirective,
    PromptDirective,
    RequirementLevel,
)
from .protocol import ValueSource

REQUIREMENT_PATTERN = re.compile(r"\[(required|optional|deprecated)\]", re.IGNORECASE)


@dataclass(frozen=True)
class DirectiveRule:
    """One built-in directive: its tag, its pattern, and how to build it."""

    tag: str
    pattern: re.Pattern[str]
    build: Callable[[re.Match[str]], Directive]


BUILTIN_RULES: tuple[DirectiveRule, ...] = (
    DirectiveRule(
        "prompt",
        re.compile(r"\[prompt\]", re.IGNORECASE),
        lambda m: PromptDirective(),
    ),
    DirectiveRule(
        "computed",
        re.compile(r"\[computed:(\w+)\]", re.IGNORECASE),
        lambda m: ComputedDirective(compute_type=m.group(1)),
    ),
    DirectiveRule(
        "copy",
        re.compile(r"\[copy:([A-Z_][A-Z0-9_]*)\]", re.IGNORECASE),
        lambda m: CopyDirective(source=m.group(1)),
    ),
    DirectiveRule(
        "default",
        # The value runs to the first closing bracket, so it cannot contain ']'.
        re.compile(r"\[default:([^\]]+)\]", re.IGNORECASE),
        lambda m: DefaultDirective(value=m.group(1)),
    ),
    DirectiveRule(
        "boolean",
        re.compile(r"\[boolean(?::([^/\]]+)/([^\]]+))?\]", re.IGNORECASE),
        lambda m: BooleanDirective(yes=m.group(1) or "true", no=m.group(2) or "false"),
    ),
    DirectiveRule(
        "local-only",
        re.compile(r"\[local-only\]", re.IGNORECASE),
        lambda m: LocalOnlyDirective(),
    ),
    DirectiveRule(
        "placeholder",
        re.compile(r"\[placeholder\]", re.IGNORECASE),
        lambda m: PlaceholderDirective(),
    ),
)


@dataclass(frozen=True)
class ParsedComment:
    requirement: RequirementLevel
    directive: Directive
    description: str


def _clean_description(text: str) -> str:
    text = re.sub(r"^#\s*", "", text)
    return re.sub(r"\s+", " ", text).strip()


def match_directive(
    comment: str, sources: Sequence[ValueSource] = ()
) -> tuple[Directive, str | None]:
    """Find the directive in a comment.

    Returns the directive and the matched text to strip from the
    description (None when nothing matched and the placeholder default
    applies).
    """
    for source in sources:
        match = source.pattern.search(comment)
        if match:
            return PluginDirective(kind=source.directive_kind, raw=match.group(0)), match.group(0)

    for rule in BUILTIN_RULES:
        match = rule.pattern.search(comment)
        if match:
            return rule.build(match), match.group(0)

    return PlaceholderDirective(), None


def parse_comment(comment: str, sources: Sequence[ValueSource] = ()) -> ParsedComment:
    """Split a comment into requirement level, directive and description.

    Malformed tags that match no pattern are left in the description and
    the directive falls back to ``placeholder``.
    """
    requirement = RequirementLevel.OPTIONAL
    description = comment

    req_match = REQUIREMENT_PATTERN.search(comment)
    if req_match:
        requirement = RequirementLevel(req_match.group(1).lower())
        description = description.replace(req_match.group(0), "", 1)

    directive, matched = match_directive(comment, sources)
    if matched:
        description = description.replace(matched, "", 1)

    return ParsedComment(
        requirement=requirement,
        directive=directive,
        description=_clean_description(description),
    )
