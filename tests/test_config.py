"""
Tests for configuration loading, validation, and the config check use case.
"""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from shorthand.core.config.loader import (
    CONFIG_ENV_VAR,
    ConfigError,
    default_config_path,
    load_config,
    parse_config,
)
from shorthand.core.models.config import ShorthandConfig, valid_repo_format
from shorthand.core.use_cases.config_check import check_config


class TestShorthandConfig:
    """Model defaults and validation."""

    def test_defaults(self):
        config = ShorthandConfig()
        assert config.repos == {}
        assert config.users == {}
        assert config.default_repo == ""
        assert config.server_host == "127.0.0.1"
        assert config.server_port == 7347
        assert not config.rpc_enabled
        assert config.rpc_url == ""

    def test_rpc_url(self):
        config = ShorthandConfig(api_token="t", server_port=9999)
        assert config.rpc_enabled
        assert config.rpc_url == "http://127.0.0.1:9999"

    @pytest.mark.parametrize("value", ["a/b", "zerowidth/dot.files"])
    def test_valid_repo_format(self, value: str):
        assert valid_repo_format(value)

    @pytest.mark.parametrize("value", ["a", "a/", "/b", "a/b/c"])
    def test_invalid_repo_format(self, value: str):
        assert not valid_repo_format(value)

    def test_invalid_repo_value(self):
        with pytest.raises(ValueError):
            ShorthandConfig(repos={"df": "dotfiles"})

    def test_invalid_default_repo(self):
        with pytest.raises(ValueError):
            ShorthandConfig(default_repo="zerowidth")

    def test_collisions(self):
        config = ShorthandConfig(repos={"x": "a/b", "y": "c/d"}, users={"x": "someone"})
        assert config.shorthand_collisions() == ["x"]


class TestParseConfig:
    """YAML text to model."""

    def test_full_document(self):
        config = parse_config(textwrap.dedent("""\
            repos:
              df: zerowidth/dotfiles
            users:
              zw: zerowidth
            default_repo: zerowidth/default
            api_token: abc
            server_port: 8000
        """))
        assert config.repos == {"df": "zerowidth/dotfiles"}
        assert config.users == {"zw": "zerowidth"}
        assert config.default_repo == "zerowidth/default"
        assert config.api_token == "abc"
        assert config.server_port == 8000

    def test_empty_document(self):
        assert parse_config("") == ShorthandConfig()

    def test_invalid_yaml(self):
        with pytest.raises(ConfigError, match="Invalid YAML"):
            parse_config("repos: [unclosed")

    def test_not_a_mapping(self):
        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            parse_config("- a\n- b\n")

    def test_invalid_values(self):
        with pytest.raises(ConfigError, match="Invalid configuration"):
            parse_config("repos:\n  df: not-a-repo\n")


class TestLoadConfig:
    """Reading from disk."""

    def test_load(self, config_file: Path):
        config = load_config(config_file)
        assert config.repos == {"df": "zerowidth/dotfiles"}

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "missing.yml")

    def test_env_override(self, config_file: Path, monkeypatch):
        monkeypatch.setenv(CONFIG_ENV_VAR, str(config_file))
        assert default_config_path() == config_file
        assert load_config().default_repo == "zerowidth/default"

    def test_default_path(self, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        assert default_config_path() == Path("~/.gh-shorthand.yml").expanduser()


class TestConfigCheck:
    """The config check use case."""

    def test_valid(self, config_file: Path):
        result = check_config(config_file)
        assert result.valid
        assert result.errors == []
        assert result.warnings == []
        data = result.to_dict()
        assert data["repo_count"] == 1
        assert data["user_count"] == 1
        assert data["rpc_enabled"] is True

    def test_missing(self, tmp_path: Path):
        result = check_config(tmp_path / "nope.yml")
        assert not result.valid
        assert "not found" in result.errors[0]
        assert result.to_dict()["repo_count"] == 0

    def test_collision_warning(self, tmp_path: Path):
        path = tmp_path / "c.yml"
        path.write_text("repos:\n  dupe: a/b\nusers:\n  dupe: someone\napi_token: t\n")
        result = check_config(path)
        assert result.valid
        assert any("dupe" in w for w in result.warnings)

    def test_empty_config_warnings(self, tmp_path: Path):
        path = tmp_path / "c.yml"
        path.write_text("")
        result = check_config(path)
        assert result.valid
        assert any("No repo or user shorthands" in w for w in result.warnings)
        assert any("api_token" in w for w in result.warnings)
