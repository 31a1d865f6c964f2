"""Data models shared by the parser, reconciler, resolver and scanner.

- Directive variants: one frozen model per directive kind
- EnvVarDefinition / EnvSchema: what an example file declares
- EnvLocalValues: what a values file actually holds
- ReconciliationResult: the classification of one workspace
- ResolvedValue: the outcome of resolving one variable
- EnvUsage / SourceScanResult / DiagnoseResult: source scanning output
"""

from enum import Enum
from pathlib import Path
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class RequirementLevel(str, Enum):
    """How strongly a variable is needed."""

    REQUIRED = "required"
    OPTIONAL = "optional"
    DEPRECATED = "deprecated"


class DirectiveKind(str, Enum):
    """Built-in directive kinds. Plugins may add kinds outside this set."""

    PROMPT = "prompt"
    PLACEHOLDER = "placeholder"
    COMPUTED = "computed"
    COPY = "copy"
    DEFAULT = "default"
    BOOLEAN = "boolean"
    LOCAL_ONLY = "local-only"


# ---------------------------------------------------------------------------
# Directives
# ---------------------------------------------------------------------------


class PromptDirective(BaseModel):
    """Ask for the value interactively."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["prompt"] = "prompt"


class PlaceholderDirective(BaseModel):
    """Use the example value as-is."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["placeholder"] = "placeholder"


class ComputedDirective(BaseModel):
    """Generate the value programmatically (currently falls back to the example)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["computed"] = "computed"
    compute_type: str = Field(..., description="What to compute, e.g. 'port'")


class CopyDirective(BaseModel):
    """Take the current value of another variable."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["copy"] = "copy"
    source: str = Field(..., description="Name of the variable to copy from")


class DefaultDirective(BaseModel):
    """Use a literal fallback value."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["default"] = "default"
    value: str | None = Field(
        default=None, description="Literal default (None means use the example value)"
    )


class BooleanDirective(BaseModel):
    """Yes/no question mapped to two literal strings."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["boolean"] = "boolean"
    yes: str = Field(default="true", description="Value written for a yes answer")
    no: str = Field(default="false", description="Value written for a no answer")


class LocalOnlyDirective(BaseModel):
    """Only meaningful outside CI; skipped when non-interactive."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["local-only"] = "local-only"


class PluginDirective(BaseModel):
    """A directive kind registered by an external value source."""

    model_config = ConfigDict(frozen=True)

    kind: str = Field(..., description="Directive kind claimed by the plugin")
    raw: str = Field(..., description="The matched directive text, e.g. '[vault:db/pass]'")


Directive = Union[
    PromptDirective,
    PlaceholderDirective,
    ComputedDirective,
    CopyDirective,
    DefaultDirective,
    BooleanDirective,
    LocalOnlyDirective,
    PluginDirective,
]


# ---------------------------------------------------------------------------
# Schema and values
# ---------------------------------------------------------------------------


class EnvVarDefinition(BaseModel):
    """A single variable declared by an example file."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Variable name, unique within a schema")
    example_value: str = Field(default="", description="Value given in the example file")
    requirement: RequirementLevel = Field(default=RequirementLevel.OPTIONAL)
    directive: Directive = Field(default_factory=PlaceholderDirective)
    description: str = Field(default="", description="Comment text with tags removed")
    raw_comment: str = Field(default="", description="Accumulated comment, unprocessed")

    @property
    def is_required(self) -> bool:
        return self.requirement == RequirementLevel.REQUIRED


class EnvSchema(BaseModel):
    """Ordered definitions parsed from one example file."""

    source_path: str = Field(default="", description="File the schema was read from")
    definitions: list[EnvVarDefinition] = Field(default_factory=list)

    @property
    def names(self) -> list[str]:
        return [d.name for d in self.definitions]


class EnvLocalValues(BaseModel):
    """Values currently held by a workspace's values file."""

    values: dict[str, str] = Field(default_factory=dict)
    comments: dict[str, str] = Field(
        default_factory=dict, description="Comment line directly above each variable"
    )
    original_text: str = Field(
        default="", description="File content verbatim, used for non-destructive rewrites"
    )


class Workspace(BaseModel):
    """One project in the workspace tree."""

    model_config = ConfigDict(frozen=True)

    name: str
    path: Path
    example_path: Path = Field(..., description="The workspace's example (schema) file")
    local_path: Path = Field(..., description="The workspace's actual values file")


# ---------------------------------------------------------------------------
# Reconciliation and resolution
# ---------------------------------------------------------------------------


class ReconciliationResult(BaseModel):
    """Classification of every variable of one workspace in one pass."""

    model_config = ConfigDict(frozen=True)

    workspace: Workspace
    valid: list[EnvVarDefinition] = Field(default_factory=list)
    missing: list[EnvVarDefinition] = Field(default_factory=list)
    extra: list[str] = Field(
        default_factory=list, description="Names present in the values file but not declared"
    )
    deprecated_still_present: list[str] = Field(default_factory=list)
    overrides: dict[str, str] = Field(
        default_factory=dict,
        description="Shared names whose value here differs from the canonical value",
    )

    @property
    def missing_required(self) -> list[EnvVarDefinition]:
        return [d for d in self.missing if d.requirement == RequirementLevel.REQUIRED]

    @property
    def missing_optional(self) -> list[EnvVarDefinition]:
        return [d for d in self.missing if d.requirement == RequirementLevel.OPTIONAL]


class ResolvedValue(BaseModel):
    """Outcome of resolving one variable."""

    value: str = Field(default="", description="The resolved value (may be empty)")
    source: str = Field(..., description="How it was resolved, e.g. 'existing', 'prompted'")
    skipped: bool = Field(
        default=False, description="True means nothing will be written for this variable"
    )
    warning: str | None = Field(default=None, description="Degraded-resolution notice")


# ---------------------------------------------------------------------------
# Source scanning
# ---------------------------------------------------------------------------


class EnvUsage(BaseModel):
    """One reference to a variable in source code."""

    file: str = Field(..., description="Path relative to the scanned base")
    line: int = Field(..., description="1-based line number")
    pattern: str = Field(..., description="The matched text, e.g. 'process.env.FOO'")


class SourceScanResult(BaseModel):
    """Variable references found under a source tree."""

    usages: dict[str, list[EnvUsage]] = Field(default_factory=dict)
    files_scanned: int = 0
    lines_scanned: int = 0


class DiagnoseResult(BaseModel):
    """Cross-check of referenced names against declared names.

    ``unused`` is best-effort: static scanning cannot see indirect access
    such as ``process.env[name]`` with a computed name.
    """

    missing: dict[str, list[EnvUsage]] = Field(
        default_factory=dict, description="Referenced but not declared, with evidence"
    )
    unused: list[str] = Field(default_factory=list, description="Declared but never referenced")
    defined: list[str] = Field(default_factory=list, description="Referenced and declared")

    @property
    def counts(self) -> dict[str, int]:
        return {
            "missing": len(self.missing),
            "unused": len(self.unused),
            "defined": len(self.defined),
        }
