"""Tests for env_vars_doctor models — enums, directives and results."""

from __future__ import annotations

from pathlib import Path

import pydantic
import pytest

from env_vars_doctor.models import (
    BooleanDirective,
    CopyDirective,
    DefaultDirective,
    DiagnoseResult,
    DirectiveKind,
    EnvSchema,
    EnvUsage,
    EnvVarDefinition,
    PlaceholderDirective,
    PluginDirective,
    ReconciliationResult,
    RequirementLevel,
    ResolvedValue,
    Workspace,
)

WS = Workspace(
    name="web",
    path=Path("/repo/apps/web"),
    example_path=Path("/repo/apps/web/.env.local.example"),
    local_path=Path("/repo/apps/web/.env.local"),
)


class TestEnums:
    def test_requirement_values(self):
        assert RequirementLevel.REQUIRED == "required"
        assert RequirementLevel.OPTIONAL == "optional"
        assert RequirementLevel.DEPRECATED == "deprecated"

    def test_local_only_kind_is_hyphenated(self):
        assert DirectiveKind.LOCAL_ONLY == "local-only"
        assert DirectiveKind("local-only") is DirectiveKind.LOCAL_ONLY

    def test_every_directive_kind(self):
        assert {k.value for k in DirectiveKind} == {
            "prompt",
            "placeholder",
            "computed",
            "copy",
            "default",
            "boolean",
            "local-only",
        }


class TestDirectives:
    def test_boolean_defaults(self):
        d = BooleanDirective()
        assert (d.yes, d.no) == ("true", "false")

    def test_default_value_is_optional(self):
        assert DefaultDirective().value is None

    def test_directives_are_frozen(self):
        d = CopyDirective(source="A")
        with pytest.raises(pydantic.ValidationError):
            d.source = "B"

    def test_definition_validates_directive_from_dict(self):
        d = EnvVarDefinition.model_validate(
            {"name": "X", "directive": {"kind": "copy", "source": "Y"}}
        )
        assert isinstance(d.directive, CopyDirective)
        assert d.directive.source == "Y"

    def test_plugin_directive_carries_raw_text(self):
        d = PluginDirective(kind="vault", raw="[vault:db/pass]")
        assert d.kind == "vault"
        assert d.raw == "[vault:db/pass]"


class TestEnvVarDefinition:
    def test_defaults(self):
        d = EnvVarDefinition(name="FOO")
        assert d.example_value == ""
        assert d.requirement == RequirementLevel.OPTIONAL
        assert isinstance(d.directive, PlaceholderDirective)
        assert d.description == ""

    def test_is_required(self):
        assert EnvVarDefinition(name="A", requirement="required").is_required
        assert not EnvVarDefinition(name="A").is_required

    def test_schema_names_in_order(self):
        schema = EnvSchema(
            definitions=[EnvVarDefinition(name="B"), EnvVarDefinition(name="A")]
        )
        assert schema.names == ["B", "A"]


class TestReconciliationResult:
    def test_missing_split_by_requirement(self):
        result = ReconciliationResult(
            workspace=WS,
            missing=[
                EnvVarDefinition(name="R", requirement=RequirementLevel.REQUIRED),
                EnvVarDefinition(name="O"),
            ],
        )
        assert [d.name for d in result.missing_required] == ["R"]
        assert [d.name for d in result.missing_optional] == ["O"]

    def test_is_frozen(self):
        result = ReconciliationResult(workspace=WS)
        with pytest.raises(pydantic.ValidationError):
            result.extra = ["X"]


class TestResolvedValue:
    def test_empty_is_not_skipped(self):
        r = ResolvedValue(value="", source="copied")
        assert r.skipped is False
        assert r.warning is None


class TestDiagnoseResult:
    def test_counts(self):
        usage = EnvUsage(file="src/a.ts", line=1, pattern="process.env.BAR")
        result = DiagnoseResult(missing={"BAR": [usage]}, unused=["X", "Y"], defined=["FOO"])
        assert result.counts == {"missing": 1, "unused": 2, "defined": 1}
