"""Workflows built on the engine: sync, check, status, ci, diagnose, export, clean, postinstall."""

from .check import run_check, run_ci, run_status
from .clean import run_clean
from .diagnose import run_diagnose
from .export import EXPORT_FORMATS, export_summary, export_values, run_export
from .postinstall import run_postinstall
from .reports import (
    CheckReport,
    CiReport,
    CiWorkspaceReport,
    CleanReport,
    DiagnoseReport,
    PostinstallReport,
    SyncReport,
)
from .sync import run_sync

__all__ = [
    "CheckReport",
    "CiReport",
    "CiWorkspaceReport",
    "CleanReport",
    "DiagnoseReport",
    "EXPORT_FORMATS",
    "PostinstallReport",
    "SyncReport",
    "export_summary",
    "export_values",
    "run_check",
    "run_ci",
    "run_clean",
    "run_diagnose",
    "run_export",
    "run_postinstall",
    "run_status",
    "run_sync",
]
