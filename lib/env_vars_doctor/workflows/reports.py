"""Report models returned by the workflows.

Reports are plain data. Formatting them and turning them into exit
codes is left to the caller.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from ..models import DiagnoseResult, ReconciliationResult


class SyncReport(BaseModel):
    results: list[ReconciliationResult] = Field(default_factory=list)
    added: int = Field(default=0, description="Values resolved and written (or planned)")
    skipped_required: list[str] = Field(default_factory=list)
    skipped_optional: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    pending_writes: dict[Path, str] = Field(
        default_factory=dict, description="Planned file contents of a dry run"
    )

    @property
    def ok(self) -> bool:
        return not self.skipped_required


class CheckReport(BaseModel):
    """Outcome of a compare-only pass."""

    results: list[ReconciliationResult] = Field(default_factory=list)

    @property
    def missing_required(self) -> dict[str, list[str]]:
        return {
            r.workspace.name: [d.name for d in r.missing_required]
            for r in self.results
            if r.missing_required
        }

    @property
    def missing_optional(self) -> dict[str, list[str]]:
        return {
            r.workspace.name: [d.name for d in r.missing_optional]
            for r in self.results
            if r.missing_optional
        }

    @property
    def deprecated(self) -> dict[str, list[str]]:
        return {
            r.workspace.name: list(r.deprecated_still_present)
            for r in self.results
            if r.deprecated_still_present
        }

    @property
    def ok(self) -> bool:
        return not self.missing_required


class CiWorkspaceReport(BaseModel):
    workspace: str
    present: list[str] = Field(default_factory=list)
    missing_required: list[str] = Field(default_factory=list)
    missing_optional: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(
        default_factory=list, description="Names whose directive is not checked in CI"
    )

    @property
    def checked(self) -> int:
        return len(self.present) + len(self.missing_required) + len(self.missing_optional)


class CiReport(BaseModel):
    skipped: bool = Field(default=False, description="True when the skip variable was set")
    platform: str | None = None
    workspaces: list[CiWorkspaceReport] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(not w.missing_required for w in self.workspaces)


class DiagnoseReport(BaseModel):
    files_scanned: int = 0
    lines_scanned: int = 0
    declared: list[str] = Field(default_factory=list)
    result: DiagnoseResult = Field(default_factory=DiagnoseResult)

    @property
    def ok(self) -> bool:
        return not self.result.missing


class CleanReport(BaseModel):
    deleted: list[Path] = Field(default_factory=list, description="Values files removed (or planned)")
    cancelled: bool = Field(default=False, description="True when the confirmation was declined")


class PostinstallReport(BaseModel):
    """Install-time summary.

    Under CI this carries the ``ci`` report; locally it lists the names
    still missing and never fails.
    """

    ci: CiReport | None = None
    missing_required: list[str] = Field(default_factory=list)
    missing_optional: list[str] = Field(default_factory=list)

    @property
    def ready(self) -> bool:
        return not self.missing_required and not self.missing_optional

    @property
    def ok(self) -> bool:
        return self.ci.ok if self.ci is not None else True
