"""Tests for directive-tag extraction."""

from __future__ import annotations

import re

from env_vars_doctor.directives import BUILTIN_RULES, match_directive, parse_comment
from env_vars_doctor.models import (
    BooleanDirective,
    ComputedDirective,
    CopyDirective,
    DefaultDirective,
    LocalOnlyDirective,
    PlaceholderDirective,
    PluginDirective,
    PromptDirective,
    RequirementLevel,
    ResolvedValue,
)
from env_vars_doctor.registry import ValueSourceProvider


async def _vault(definition, context):
    return ResolvedValue(value="secret", source="vault")


VAULT = ValueSourceProvider(directive_kind="vault", pattern=r"\[vault:[^\]]+\]", resolve=_vault)


# ---------------------------------------------------------------------------
# Rule table
# ---------------------------------------------------------------------------


class TestBuiltinRules:
    def test_priority_order(self):
        assert [r.tag for r in BUILTIN_RULES] == [
            "prompt",
            "computed",
            "copy",
            "default",
            "boolean",
            "local-only",
            "placeholder",
        ]

    def test_rules_are_case_insensitive(self):
        assert all(r.pattern.flags & re.IGNORECASE for r in BUILTIN_RULES)


# ---------------------------------------------------------------------------
# Individual directives
# ---------------------------------------------------------------------------


class TestBuiltinDirectives:
    def test_prompt(self):
        assert parse_comment("Key [prompt]").directive == PromptDirective()

    def test_computed(self):
        assert parse_comment("[computed:uuid]").directive == ComputedDirective(compute_type="uuid")

    def test_copy(self):
        assert parse_comment("[copy:DATABASE_URL]").directive == CopyDirective(
            source="DATABASE_URL"
        )

    def test_default_keeps_spaces(self):
        assert parse_comment("[default:abc def]").directive == DefaultDirective(value="abc def")

    def test_boolean_plain(self):
        assert parse_comment("[boolean]").directive == BooleanDirective()

    def test_boolean_custom_values(self):
        assert parse_comment("[boolean:on/off]").directive == BooleanDirective(yes="on", no="off")

    def test_local_only(self):
        assert parse_comment("[local-only]").directive == LocalOnlyDirective()

    def test_explicit_placeholder(self):
        assert parse_comment("[placeholder]").directive == PlaceholderDirective()

    def test_no_tag_defaults_to_placeholder(self):
        assert parse_comment("Just a description").directive == PlaceholderDirective()

    def test_first_rule_in_priority_wins(self):
        assert parse_comment("[default:x] [prompt]").directive == PromptDirective()

    def test_malformed_tag_falls_back_to_placeholder(self):
        parsed = parse_comment("Broken [default:]")
        assert parsed.directive == PlaceholderDirective()
        assert parsed.description == "Broken [default:]"


# ---------------------------------------------------------------------------
# Requirement and description
# ---------------------------------------------------------------------------


class TestRequirementAndDescription:
    def test_optional_by_default(self):
        assert parse_comment("desc").requirement == RequirementLevel.OPTIONAL

    def test_requirement_anywhere(self):
        parsed = parse_comment("API key [required] for billing")
        assert parsed.requirement == RequirementLevel.REQUIRED
        assert parsed.description == "API key for billing"

    def test_requirement_case_insensitive(self):
        assert parse_comment("[DEPRECATED]").requirement == RequirementLevel.DEPRECATED

    def test_tags_removed_mid_sentence(self):
        assert parse_comment("Use [prompt] to set the key").description == "Use to set the key"

    def test_only_first_occurrence_removed(self):
        assert parse_comment("[prompt] again [prompt]").description == "again [prompt]"

    def test_empty_comment(self):
        parsed = parse_comment("")
        assert parsed.requirement == RequirementLevel.OPTIONAL
        assert parsed.directive == PlaceholderDirective()
        assert parsed.description == ""


# ---------------------------------------------------------------------------
# Plugin directives
# ---------------------------------------------------------------------------


class TestPluginDirectives:
    def test_plugin_pattern_matched(self):
        parsed = parse_comment("DB password [vault:db/pass]", [VAULT])
        assert parsed.directive == PluginDirective(kind="vault", raw="[vault:db/pass]")
        assert parsed.description == "DB password"

    def test_plugin_takes_priority_over_builtin(self):
        directive, matched = match_directive("[prompt] [vault:x]", [VAULT])
        assert directive.kind == "vault"
        assert matched == "[vault:x]"

    def test_string_pattern_compiled_case_insensitive(self):
        parsed = parse_comment("[VAULT:x]", [VAULT])
        assert parsed.directive.kind == "vault"

    def test_first_registered_source_wins(self):
        other = ValueSourceProvider(directive_kind="other", pattern=r"\[vault:", resolve=_vault)
        assert parse_comment("[vault:x]", [other, VAULT]).directive.kind == "other"
