"""Tests for the source usage scanner and the diagnostic cross-check."""

from __future__ import annotations

import logging
from pathlib import Path

from env_vars_doctor.config import DoctorConfig
from env_vars_doctor.models import EnvUsage, Workspace
from env_vars_doctor.registry import Plugin, PluginRegistry
from env_vars_doctor.source_scanner import (
    BUILTIN_IGNORED_MISSING,
    diagnose,
    extract_usages,
    ignored_missing,
    merge_scan_results,
    scan,
    scan_package_sources,
    scan_workspace_sources,
)

EXTENSIONS = [".ts", ".js"]
SKIP_DIRS = ["node_modules", "dist"]


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


# ---------------------------------------------------------------------------
# Line extraction
# ---------------------------------------------------------------------------


class TestExtractUsages:
    def test_dotted_access(self):
        [(name, usage)] = extract_usages("const a = process.env.API_URL", 3, "src/a.ts")
        assert name == "API_URL"
        assert usage == EnvUsage(file="src/a.ts", line=3, pattern="process.env.API_URL")

    def test_bracket_access_both_quotes(self):
        found = extract_usages("""process.env["A"] + process.env['B']""", 1, "x.ts")
        assert [name for name, _ in found] == ["A", "B"]

    def test_import_meta(self):
        [(name, usage)] = extract_usages("import.meta.env.VITE_KEY", 1, "x.ts")
        assert name == "VITE_KEY"
        assert usage.pattern == "import.meta.env.VITE_KEY"

    def test_lowercase_not_matched(self):
        assert extract_usages("process.env.lower", 1, "x.ts") == []

    def test_several_on_one_line(self):
        found = extract_usages("process.env.A || process.env.B", 1, "x.ts")
        assert [name for name, _ in found] == ["A", "B"]


# ---------------------------------------------------------------------------
# Directory walk
# ---------------------------------------------------------------------------


class TestScan:
    def test_foo_and_bar(self, tmp_path):
        _write(tmp_path / "index.ts", 'const a = process.env.FOO\nconst b = process.env["BAR"]\n')
        result = scan(tmp_path, EXTENSIONS, SKIP_DIRS)
        assert result.files_scanned == 1
        assert result.lines_scanned == 3
        assert result.usages["FOO"][0].line == 1
        assert result.usages["BAR"][0].line == 2

        diagnosis = diagnose(result.usages, ["FOO"])
        assert list(diagnosis.missing) == ["BAR"]
        assert diagnosis.missing["BAR"] == result.usages["BAR"]
        assert diagnosis.defined == ["FOO"]
        assert diagnosis.unused == []

    def test_skips_configured_and_dot_dirs(self, tmp_path):
        _write(tmp_path / "node_modules" / "lib.js", "process.env.DEP")
        _write(tmp_path / ".cache" / "x.js", "process.env.CACHED")
        _write(tmp_path / "src" / "app.ts", "process.env.APP")
        assert set(scan(tmp_path, EXTENSIONS, SKIP_DIRS).usages) == {"APP"}

    def test_extension_filter(self, tmp_path):
        _write(tmp_path / "README.md", "process.env.DOCS")
        _write(tmp_path / "a.ts", "process.env.CODE")
        assert set(scan(tmp_path, EXTENSIONS, SKIP_DIRS).usages) == {"CODE"}

    def test_own_config_file_skipped(self, tmp_path):
        _write(tmp_path / "env-vars-doctor.config.ts", "process.env.SELF")
        assert scan(tmp_path, EXTENSIONS, SKIP_DIRS).files_scanned == 0

    def test_usages_in_encounter_order(self, tmp_path):
        _write(tmp_path / "a.ts", "process.env.X")
        _write(tmp_path / "b" / "c.ts", "process.env.X")
        _write(tmp_path / "d.ts", "process.env.X")
        files = [u.file for u in scan(tmp_path, EXTENSIONS, SKIP_DIRS).usages["X"]]
        assert files == ["a.ts", "b/c.ts", "d.ts"]

    def test_non_utf8_file_skipped(self, tmp_path, caplog):
        (tmp_path / "bin.js").write_bytes(b"\xff\xfe process.env.BINARY")
        _write(tmp_path / "ok.js", "process.env.OK")
        with caplog.at_level(logging.WARNING, logger="env_vars_doctor.source_scanner"):
            result = scan(tmp_path, EXTENSIONS, SKIP_DIRS)
        assert set(result.usages) == {"OK"}
        assert result.files_scanned == 1
        assert "not UTF-8" in caplog.text

    def test_symlinked_directory_not_followed(self, tmp_path):
        src = tmp_path / "src"
        _write(src / "lib" / "a.ts", "process.env.FOO")
        (src / "lib" / "loop").symlink_to(src, target_is_directory=True)
        result = scan(src, EXTENSIONS, SKIP_DIRS)
        assert result.files_scanned == 1
        assert [u.file for u in result.usages["FOO"]] == ["lib/a.ts"]

    def test_missing_root(self, tmp_path):
        result = scan(tmp_path / "absent", EXTENSIONS, SKIP_DIRS)
        assert result.files_scanned == 0
        assert result.usages == {}


# ---------------------------------------------------------------------------
# Diagnosis
# ---------------------------------------------------------------------------


class TestDiagnose:
    USAGE = EnvUsage(file="a.ts", line=1, pattern="process.env.X")

    def test_node_env_ignored_by_default(self):
        assert diagnose({"NODE_ENV": [self.USAGE]}, []).missing == {}

    def test_ignore_missing(self):
        result = diagnose({"VERCEL_URL": [self.USAGE]}, [], ignore_missing={"VERCEL_URL"})
        assert result.missing == {}
        assert result.defined == []

    def test_declared_and_ignored_is_defined(self):
        assert diagnose({"NODE_ENV": [self.USAGE]}, ["NODE_ENV"]).defined == ["NODE_ENV"]

    def test_unused_in_declared_order(self):
        result = diagnose({}, ["B", "A", "C"], ignore_unused=["C"])
        assert result.unused == ["B", "A"]


# ---------------------------------------------------------------------------
# Workspace and package scans
# ---------------------------------------------------------------------------


class TestWorkspaceScans:
    def test_workspace_source_dir_and_root_files(self, tmp_path):
        app = tmp_path / "apps" / "web"
        _write(app / "src" / "page.ts", "process.env.PAGE")
        _write(app / "next.config.js", "process.env.CONFIG")
        _write(app / "scripts" / "seed.ts", "process.env.SCRIPT")
        ws = Workspace(
            name="web", path=app, example_path=app / ".env.local.example", local_path=app / ".env.local"
        )
        result = scan_workspace_sources(ws, DoctorConfig())
        assert set(result.usages) == {"PAGE", "CONFIG"}
        assert result.usages["PAGE"][0].file == "src/page.ts"
        assert result.usages["CONFIG"][0].file == "next.config.js"

    def test_package_sources(self, tmp_path):
        _write(tmp_path / "packages" / "db" / "src" / "client.ts", "process.env.DATABASE_URL")
        _write(tmp_path / "packages" / "db" / "test.ts", "process.env.OUTSIDE_SRC")
        _write(tmp_path / "apps" / "web" / "src" / "a.ts", "process.env.APP_ONLY")
        result = scan_package_sources(tmp_path, DoctorConfig())
        assert set(result.usages) == {"DATABASE_URL"}
        assert result.usages["DATABASE_URL"][0].file == "src/client.ts"

    def test_merge(self, tmp_path):
        _write(tmp_path / "one" / "a.ts", "process.env.X")
        _write(tmp_path / "two" / "b.ts", "process.env.X\nprocess.env.Y")
        merged = merge_scan_results(
            [scan(tmp_path / "one", EXTENSIONS, SKIP_DIRS), scan(tmp_path / "two", EXTENSIONS, SKIP_DIRS)]
        )
        assert merged.files_scanned == 2
        assert [u.file for u in merged.usages["X"]] == ["a.ts", "b.ts"]
        assert list(merged.usages) == ["X", "Y"]


class TestIgnoredMissing:
    def test_union_of_sources(self):
        config = DoctorConfig.model_validate({"scanning": {"ignoreMissing": ["CONFIGURED"]}})
        registry = PluginRegistry()
        registry.register(Plugin(name="p", ignore_missing=["FROM_PLUGIN"]))
        assert ignored_missing(config, registry) == {"NODE_ENV", "CONFIGURED", "FROM_PLUGIN"}

    def test_builtin_set(self):
        assert BUILTIN_IGNORED_MISSING == {"NODE_ENV"}
        assert ignored_missing(DoctorConfig()) == {"NODE_ENV"}
