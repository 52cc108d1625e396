"""Tests for guardian configuration."""
import pytest
from pathlib import Path

from config_guardian.config import (
    GuardianConfig,
    ConfigError,
    DEFAULT_TRACKED_PATHS,
    load_config,
)
from config_guardian.config.settings import normalize_tracked_paths


class TestTrackedPaths:
    """Tests for tracked path validation."""

    def test_defaults(self):
        """Default whitelist matches the Claude config layout."""
        assert DEFAULT_TRACKED_PATHS == ("CLAUDE.md", "plugins", "skills", "settings.json")
        assert GuardianConfig().tracked_paths == DEFAULT_TRACKED_PATHS

    def test_duplicates_dropped_in_order(self):
        assert normalize_tracked_paths(["skills", "CLAUDE.md", "skills/", "skills"]) == (
            "skills",
            "CLAUDE.md",
        )

    def test_blank_entries_ignored(self):
        assert normalize_tracked_paths([" skills ", "", "  "]) == ("skills",)

    @pytest.mark.parametrize("bad", ["/etc/passwd", "../outside", "skills/../../x"])
    def test_escaping_paths_rejected(self, bad):
        with pytest.raises(ConfigError):
            normalize_tracked_paths([bad])

    def test_whole_repository_rejected(self):
        with pytest.raises(ConfigError):
            normalize_tracked_paths(["."])

    def test_empty_set_rejected(self):
        with pytest.raises(ConfigError):
            GuardianConfig(tracked_paths=())


class TestGuardianConfig:
    """Tests for GuardianConfig construction."""

    def test_repo_path_expanded(self):
        config = GuardianConfig(repo_path="~/somewhere")
        assert config.repo_path == Path.home() / "somewhere"

    def test_invalid_push_attempts(self):
        with pytest.raises(ConfigError):
            GuardianConfig(push_attempts=0)

    def test_with_overrides_ignores_none(self):
        config = GuardianConfig()
        assert config.with_overrides(push=None) is config
        assert config.with_overrides(push=False).push is False

    def test_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CONFIG_GUARDIAN_REPO", str(tmp_path))
        monkeypatch.setenv("CONFIG_GUARDIAN_TRACKED", "CLAUDE.md, agents")
        monkeypatch.setenv("CONFIG_GUARDIAN_PUSH", "0")
        monkeypatch.setenv("CONFIG_GUARDIAN_PUSH_ATTEMPTS", "3")
        monkeypatch.setenv("CONFIG_GUARDIAN_DISABLE", "1")

        config = GuardianConfig.from_env()

        assert config.repo_path == tmp_path
        assert config.tracked_paths == ("CLAUDE.md", "agents")
        assert config.push is False
        assert config.push_attempts == 3
        assert config.enabled is False

    def test_from_env_bad_number(self, monkeypatch):
        monkeypatch.setenv("CONFIG_GUARDIAN_PUSH_TIMEOUT", "soon")
        with pytest.raises(ConfigError):
            GuardianConfig.from_env()

    def test_from_file(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            f"repo_path: {tmp_path}\n"
            "tracked_paths:\n"
            "  - skills\n"
            "  - settings.json\n"
            "push: false\n"
            "push_timeout: 5\n"
        )

        config = GuardianConfig.from_file(config_file)

        assert config.repo_path == tmp_path
        assert config.tracked_paths == ("skills", "settings.json")
        assert config.push is False
        assert config.push_timeout == 5.0

    def test_from_file_rejects_non_list_paths(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("tracked_paths: skills\n")
        with pytest.raises(ConfigError):
            GuardianConfig.from_file(config_file)

    def test_from_file_invalid_yaml(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("tracked_paths: [skills\n")
        with pytest.raises(ConfigError):
            GuardianConfig.from_file(config_file)

    def test_from_file_missing(self, tmp_path):
        with pytest.raises(ConfigError):
            GuardianConfig.from_file(tmp_path / "missing.yaml")


class TestLoadConfig:
    """Tests for layered configuration loading."""

    def test_precedence(self, monkeypatch, tmp_path):
        """CLI overrides beat env, env beats file."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("push_attempts: 4\npush: false\ntracked_paths: [skills]\n")
        monkeypatch.setenv("CONFIG_GUARDIAN_PUSH_ATTEMPTS", "5")

        config = load_config(config_file, tracked_paths=("CLAUDE.md",))

        assert config.push is False  # file
        assert config.push_attempts == 5  # env over file
        assert config.tracked_paths == ("CLAUDE.md",)  # CLI over file

    def test_config_file_from_env(self, monkeypatch, tmp_path):
        config_file = tmp_path / "env-config.yaml"
        config_file.write_text("push: false\n")
        monkeypatch.setenv("CONFIG_GUARDIAN_CONFIG", str(config_file))

        assert load_config().push is False

    def test_no_config_file(self):
        config = load_config()
        assert config.tracked_paths == DEFAULT_TRACKED_PATHS
        assert config.push is True
