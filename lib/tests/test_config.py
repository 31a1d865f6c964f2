"""Tests for DoctorConfig defaults and config file loading."""

from __future__ import annotations

import json

import pytest

from env_vars_doctor.config import (
    DoctorConfig,
    SEARCH_PLACES,
    load_config,
    load_config_file,
)


class TestDefaults:
    def test_project_defaults(self):
        config = DoctorConfig()
        assert config.project.root_env_example == ".env.local.example"
        assert config.project.root_env_local == ".env.local"
        assert config.project.workspaces.detection == "auto"
        assert config.project.workspaces.patterns == []
        assert config.project.workspaces.source_dir == "src"

    def test_scanning_defaults(self):
        scanning = DoctorConfig().scanning
        assert ".tsx" in scanning.extensions
        assert "node_modules" in scanning.skip_dirs
        assert scanning.ignore_missing == []

    def test_ci_defaults(self):
        ci = DoctorConfig().ci
        assert ci.skip_env_var == "SKIP_ENV_DOCTOR"
        assert ci.skip_directives == ["local-only", "prompt"]
        assert ci.detection["github"] == ["GITHUB_ACTIONS"]

    def test_camel_case_keys(self):
        config = DoctorConfig.model_validate(
            {"project": {"rootEnvExample": ".env.example", "workspaces": {"sourceDir": "app"}}}
        )
        assert config.project.root_env_example == ".env.example"
        assert config.project.workspaces.source_dir == "app"
        assert config.project.root_env_local == ".env.local"

    def test_snake_case_keys(self):
        config = DoctorConfig.model_validate({"scanning": {"ignore_missing": ["VERCEL_URL"]}})
        assert config.scanning.ignore_missing == ["VERCEL_URL"]


class TestLoadConfigFile:
    def test_yaml_rc(self, tmp_path):
        path = tmp_path / ".env-vars-doctorrc.yaml"
        path.write_text("ci:\n  skipEnvVar: NO_CHECK\n")
        loaded = load_config_file(path)
        assert loaded.found
        assert loaded.path == path
        assert loaded.config.ci.skip_env_var == "NO_CHECK"

    def test_extensionless_rc_is_yaml(self, tmp_path):
        path = tmp_path / ".env-vars-doctorrc"
        path.write_text(json.dumps({"scanning": {"ignoreUnused": ["SENTRY_DSN"]}}))
        assert load_config_file(path).config.scanning.ignore_unused == ["SENTRY_DSN"]

    def test_json(self, tmp_path):
        path = tmp_path / "env-vars-doctor.config.json"
        path.write_text(json.dumps({"plugins": {"external": [{"name": "my_plugin"}]}}))
        loaded = load_config_file(path)
        assert loaded.config.plugins.external[0].name == "my_plugin"
        assert loaded.config.plugins.external[0].options == {}

    def test_pyproject_table(self, tmp_path):
        path = tmp_path / "pyproject.toml"
        path.write_text('[tool.env-vars-doctor.project]\nroot_env_local = ".env"\n')
        assert load_config_file(path).config.project.root_env_local == ".env"

    def test_pyproject_without_table(self, tmp_path):
        path = tmp_path / "pyproject.toml"
        path.write_text('[project]\nname = "x"\n')
        loaded = load_config_file(path)
        assert not loaded.found
        assert loaded.config == DoctorConfig()

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / ".env-vars-doctorrc.yml"
        path.write_text("")
        assert not load_config_file(path).found

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / ".env-vars-doctorrc.yaml"
        path.write_text("ci: [unclosed\n")
        with pytest.raises(ValueError, match="Failed to load env-vars-doctor config"):
            load_config_file(path)

    def test_top_level_list(self, tmp_path):
        path = tmp_path / ".env-vars-doctorrc.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError, match="expected a mapping"):
            load_config_file(path)

    def test_validation_error_names_file(self, tmp_path):
        path = tmp_path / "env-vars-doctor.config.json"
        path.write_text(json.dumps({"version": "2"}))
        with pytest.raises(ValueError, match="env-vars-doctor.config.json"):
            load_config_file(path)


class TestLoadConfig:
    def test_search_order_starts_with_rc(self):
        assert SEARCH_PLACES[0] == ".env-vars-doctorrc"
        assert SEARCH_PLACES[-1] == "pyproject.toml"

    def test_found_in_start_directory(self, tmp_path):
        (tmp_path / ".env-vars-doctorrc.json").write_text('{"ci": {"skipEnvVar": "X"}}')
        loaded = load_config(tmp_path)
        assert loaded.found
        assert loaded.config.ci.skip_env_var == "X"

    def test_walks_upward(self, tmp_path):
        (tmp_path / "env-vars-doctor.config.yaml").write_text("ci:\n  skipEnvVar: UP\n")
        nested = tmp_path / "apps" / "web"
        nested.mkdir(parents=True)
        assert load_config(nested).config.ci.skip_env_var == "UP"

    def test_pyproject_without_table_is_passed_over(self, tmp_path):
        (tmp_path / ".env-vars-doctorrc.yaml").write_text("ci:\n  skipEnvVar: ROOT\n")
        nested = tmp_path / "apps" / "web"
        nested.mkdir(parents=True)
        (nested / "pyproject.toml").write_text('[project]\nname = "web"\n')
        assert load_config(nested).config.ci.skip_env_var == "ROOT"

    def test_nearest_file_wins(self, tmp_path):
        (tmp_path / ".env-vars-doctorrc.yaml").write_text("ci:\n  skipEnvVar: ROOT\n")
        nested = tmp_path / "apps" / "web"
        nested.mkdir(parents=True)
        (nested / ".env-vars-doctorrc.yaml").write_text("ci:\n  skipEnvVar: WEB\n")
        assert load_config(nested).config.ci.skip_env_var == "WEB"
