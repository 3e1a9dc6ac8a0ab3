"""Tests for configuration system."""

import json
from pathlib import Path

import pytest

from shellcall.core.config import (
    RuntimeSettings,
    ShellCallConfig,
    configure,
    is_verbose,
    load_config,
    load_env_overrides,
    load_project_config,
    load_user_config,
    merge_configs,
    set_echo,
    set_verbose,
    settings,
)
from shellcall.core.exceptions import ConfigurationError

ENV_KEYS = ["SHELLCALL_VERBOSE", "SHELLCALL_ECHO", "SHELLCALL_SHELL", "SHELLCALL_LOG_LEVEL"]


@pytest.fixture
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def fake_home(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setattr(Path, "home", lambda: home)
    return home


class TestShellCallConfig:
    def test_default_config(self):
        config = ShellCallConfig()
        assert config.verbose is False
        assert config.echo is True
        assert config.shell is None
        assert config.log_level == "WARNING"

    def test_validation_verbose_type(self):
        with pytest.raises(ConfigurationError, match="verbose must be a boolean"):
            ShellCallConfig(verbose="yes")

    def test_validation_echo_type(self):
        with pytest.raises(ConfigurationError, match="echo must be a boolean"):
            ShellCallConfig(echo=1)

    def test_validation_empty_shell(self):
        with pytest.raises(ConfigurationError, match="shell must be a non-empty path"):
            ShellCallConfig(shell="")

    def test_validation_log_level(self):
        with pytest.raises(ConfigurationError, match="log_level must be one of"):
            ShellCallConfig(log_level="LOUD")

    def test_lowercase_log_level_accepted(self):
        assert ShellCallConfig(log_level="debug").log_level == "debug"

    def test_from_dict_ignores_unknown_keys(self):
        config = ShellCallConfig.from_dict({"verbose": True, "unknown": 1})
        assert config.verbose is True

    def test_round_trip_dict(self):
        config = ShellCallConfig(verbose=True, shell="/bin/bash")
        assert ShellCallConfig.from_dict(config.to_dict()) == config


class TestLoadUserConfig:
    def test_missing_profile_gives_defaults(self, fake_home):
        assert load_user_config("nope") == ShellCallConfig()

    def test_load_profile(self, fake_home):
        profile_dir = fake_home / ".shellcall" / "profiles"
        profile_dir.mkdir(parents=True)
        (profile_dir / "ci.json").write_text(json.dumps({"verbose": True, "echo": False}))

        config = load_user_config("ci")
        assert config.verbose is True
        assert config.echo is False

    def test_load_invalid_json(self, fake_home):
        profile_dir = fake_home / ".shellcall" / "profiles"
        profile_dir.mkdir(parents=True)
        (profile_dir / "bad.json").write_text("{invalid json")

        with pytest.raises(ConfigurationError, match="Invalid JSON"):
            load_user_config("bad")

    def test_load_non_object(self, fake_home):
        profile_dir = fake_home / ".shellcall" / "profiles"
        profile_dir.mkdir(parents=True)
        (profile_dir / "list.json").write_text("[1, 2]")

        with pytest.raises(ConfigurationError, match="expected a JSON object"):
            load_user_config("list")


class TestLoadProjectConfig:
    def test_load_nonexistent_project_config(self, tmp_path):
        assert load_project_config(tmp_path) is None

    def test_load_valid_project_config(self, tmp_path):
        config_dir = tmp_path / ".shellcall"
        config_dir.mkdir()
        (config_dir / "config.json").write_text(json.dumps({"shell": "/bin/bash"}))

        config = load_project_config(tmp_path)
        assert config is not None
        assert config.shell == "/bin/bash"

    def test_load_project_config_current_dir(self, tmp_path, monkeypatch):
        config_dir = tmp_path / ".shellcall"
        config_dir.mkdir()
        (config_dir / "config.json").write_text(json.dumps({"verbose": True}))

        monkeypatch.chdir(tmp_path)

        config = load_project_config()
        assert config is not None
        assert config.verbose is True

    def test_load_invalid_project_json(self, tmp_path):
        config_dir = tmp_path / ".shellcall"
        config_dir.mkdir()
        (config_dir / "config.json").write_text("not json")

        with pytest.raises(ConfigurationError, match="Invalid JSON"):
            load_project_config(tmp_path)


@pytest.mark.usefixtures("clean_env")
class TestLoadEnvOverrides:
    def test_no_env_vars(self):
        assert load_env_overrides() == {}

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("1", True), ("true", True), ("YES", True), ("0", False), ("off", False)],
    )
    def test_verbose_override(self, monkeypatch, raw, expected):
        monkeypatch.setenv("SHELLCALL_VERBOSE", raw)
        assert load_env_overrides()["verbose"] is expected

    def test_all_overrides(self, monkeypatch):
        monkeypatch.setenv("SHELLCALL_VERBOSE", "1")
        monkeypatch.setenv("SHELLCALL_ECHO", "0")
        monkeypatch.setenv("SHELLCALL_SHELL", "/bin/bash")
        monkeypatch.setenv("SHELLCALL_LOG_LEVEL", "DEBUG")

        assert load_env_overrides() == {
            "verbose": True,
            "echo": False,
            "shell": "/bin/bash",
            "log_level": "DEBUG",
        }

    def test_invalid_bool(self, monkeypatch):
        monkeypatch.setenv("SHELLCALL_ECHO", "sometimes")
        with pytest.raises(ConfigurationError, match="Invalid SHELLCALL_ECHO"):
            load_env_overrides()


class TestMergeConfigs:
    def test_base_only(self):
        base = ShellCallConfig(verbose=True)
        assert merge_configs(base) == base

    def test_project_overrides_base(self):
        base = ShellCallConfig(shell="/bin/sh")
        project = ShellCallConfig(shell="/bin/bash")
        assert merge_configs(base, project).shell == "/bin/bash"

    def test_project_defaults_do_not_override(self):
        base = ShellCallConfig(verbose=True)
        project = ShellCallConfig()
        assert merge_configs(base, project).verbose is True

    def test_env_overrides_everything(self):
        base = ShellCallConfig(echo=True)
        project = ShellCallConfig(echo=False)
        merged = merge_configs(base, project, {"echo": True})
        assert merged.echo is True


@pytest.mark.usefixtures("clean_env")
class TestLoadConfig:
    def test_precedence(self, tmp_path, fake_home, monkeypatch):
        profile_dir = fake_home / ".shellcall" / "profiles"
        profile_dir.mkdir(parents=True)
        (profile_dir / "default.json").write_text(
            json.dumps({"verbose": True, "shell": "/bin/sh"})
        )

        project = tmp_path / "project"
        (project / ".shellcall").mkdir(parents=True)
        (project / ".shellcall" / "config.json").write_text(json.dumps({"shell": "/bin/bash"}))

        monkeypatch.setenv("SHELLCALL_LOG_LEVEL", "INFO")

        config = load_config("default", project)
        assert config.verbose is True
        assert config.shell == "/bin/bash"
        assert config.log_level == "INFO"


class TestRuntimeSettings:
    def test_update(self):
        runtime = RuntimeSettings(ShellCallConfig())
        runtime.update(verbose=True)
        assert runtime.config.verbose is True
        assert runtime.config.echo is True

    def test_update_validates(self):
        runtime = RuntimeSettings(ShellCallConfig())
        with pytest.raises(ConfigurationError):
            runtime.update(log_level="LOUD")

    def test_verbose_flag(self):
        set_verbose(True)
        assert is_verbose() is True
        set_verbose(False)
        assert is_verbose() is False

    def test_set_echo(self):
        set_echo(False)
        assert settings.config.echo is False

    def test_configure_replaces_settings(self):
        configure(ShellCallConfig(verbose=True, echo=False, log_level="ERROR"))
        assert settings.config.verbose is True
        assert settings.config.echo is False
