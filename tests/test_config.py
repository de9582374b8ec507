"""Tests for configuration loading and models."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from agentctl.config.loader import _apply_env_overrides, get_default_config, load_config
from agentctl.config.models import (
    AgentctlConfig,
    ConfigError,
    LaunchAgentConfig,
    LaunchctlConfig,
    ModeConfig,
)
from agentctl.config.paths import ENV_VAR, get_agentctl_home


class TestModeConfig:
    def test_defaults(self):
        config = ModeConfig(label="io.example.agent", executable=Path("/bin/agent"))
        assert config.arguments == []
        assert config.environment == {}

    def test_label_stripped(self):
        config = ModeConfig(label="  io.example.agent ", executable=Path("/bin/agent"))
        assert config.label == "io.example.agent"

    @pytest.mark.parametrize("label", ["", "io example", "io/example"])
    def test_invalid_label(self, label: str):
        with pytest.raises(ValidationError):
            ModeConfig(label=label, executable=Path("/bin/agent"))


class TestLaunchctlConfig:
    def test_defaults(self):
        config = LaunchctlConfig()
        assert config.path == "launchctl"
        assert config.style == "legacy"
        assert config.timeout == 10.0

    def test_invalid_style(self):
        with pytest.raises(ValidationError):
            LaunchctlConfig(style="systemd")

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            LaunchctlConfig(timeout=0)


class TestLaunchAgentConfig:
    def test_empty_version(self, agent_config):
        data = agent_config.model_dump()
        data["version"] = "  "
        with pytest.raises(ValidationError):
            LaunchAgentConfig.model_validate(data)

    def test_default_launch_agents_dir(self):
        config = get_default_config()
        expected = Path.home() / "Library" / "LaunchAgents"
        assert config.agent.launch_agents_dir == expected


class TestLoadConfig:
    def test_load(self, config_file: Path, tmp_path: Path, monkeypatch):
        monkeypatch.delenv("AGENTCTL_RELEASE_ONLY", raising=False)
        monkeypatch.delenv("AGENTCTL_LAUNCHCTL", raising=False)

        config = load_config(config_file)

        assert isinstance(config, AgentctlConfig)
        assert config.release_only is True
        assert config.agent.version == "2.0.1"
        assert config.agent.release.label == "io.example.agent"
        assert config.agent.release.arguments == ["serve"]
        assert config.agent.launch_agents_dir == tmp_path / "LaunchAgents"
        assert config.launchctl.style == "domain"
        assert config.launchctl.timeout == 7.5

    def test_missing_explicit_path(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError, match="not found"):
            load_config(tmp_path / "missing.toml")

    def test_no_default_file(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(
            "agentctl.config.loader.get_config_path",
            lambda: tmp_path / "home" / "config.toml",
        )
        with pytest.raises(FileNotFoundError, match="No config file found"):
            load_config()

    def test_default_search_current_dir(
        self, tmp_path: Path, config_toml_content: str, monkeypatch
    ):
        (tmp_path / "agentctl.toml").write_text(config_toml_content)
        monkeypatch.chdir(tmp_path)

        config = load_config()
        assert config.agent.version == "2.0.1"

    def test_invalid_toml(self, tmp_path: Path):
        path = tmp_path / "bad.toml"
        path.write_text("not valid toml [[[")
        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(path)

    def test_invalid_config(self, tmp_path: Path):
        path = tmp_path / "bad.toml"
        path.write_text('[agent]\nversion = "1.0"\n')
        with pytest.raises(ConfigError, match="Invalid config"):
            load_config(path)

    def test_env_overrides(self, config_file: Path, monkeypatch):
        monkeypatch.setenv("AGENTCTL_RELEASE_ONLY", "0")
        monkeypatch.setenv("AGENTCTL_LAUNCHCTL", "/opt/bin/launchctl")

        config = load_config(config_file)

        assert config.release_only is False
        assert config.launchctl.path == "/opt/bin/launchctl"


class TestApplyEnvOverrides:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [("1", True), ("true", True), ("YES", True), ("0", False), ("no", False)],
    )
    def test_release_only(self, value: str, expected: bool, monkeypatch):
        monkeypatch.setenv("AGENTCTL_RELEASE_ONLY", value)
        monkeypatch.delenv("AGENTCTL_LAUNCHCTL", raising=False)
        assert _apply_env_overrides({}) == {"release_only": expected}

    def test_no_overrides(self, monkeypatch):
        monkeypatch.delenv("AGENTCTL_RELEASE_ONLY", raising=False)
        monkeypatch.delenv("AGENTCTL_LAUNCHCTL", raising=False)
        assert _apply_env_overrides({"a": 1}) == {"a": 1}


class TestDefaultConfig:
    def test_labels_differ_between_modes(self):
        config = get_default_config()
        assert config.agent.release.label != config.agent.development.label
        assert config.release_only is False


class TestPaths:
    def test_home_from_env(self, tmp_path: Path, monkeypatch):
        get_agentctl_home.cache_clear()
        monkeypatch.setenv(ENV_VAR, str(tmp_path / "home"))
        try:
            assert get_agentctl_home() == (tmp_path / "home").resolve()
        finally:
            get_agentctl_home.cache_clear()

    def test_home_default(self, monkeypatch):
        get_agentctl_home.cache_clear()
        monkeypatch.delenv(ENV_VAR, raising=False)
        try:
            assert get_agentctl_home() == Path.home() / ".agentctl"
        finally:
            get_agentctl_home.cache_clear()
