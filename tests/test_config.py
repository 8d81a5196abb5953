"""
Tests for configuration.
"""
import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

from convex_auth_keys.config import RunOptions, Settings, load_settings


@pytest.mark.unit
class TestSettings:
    """Test settings loading."""

    def test_default_values(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        settings = load_settings()

        assert settings.env_file_name == ".env.local"
        assert settings.probe_timeout_seconds == 0.5
        assert settings.debug is False
        assert settings.env_file_path == (tmp_path / ".env.local").resolve()

    def test_environment_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CONVEX_AUTH_KEYS_PROJECT_ROOT", str(tmp_path))
        monkeypatch.setenv("CONVEX_AUTH_KEYS_PROBE_TIMEOUT_SECONDS", "2.5")
        monkeypatch.setenv("CONVEX_AUTH_KEYS_DEBUG", "true")

        settings = load_settings()
        assert settings.project_root == tmp_path
        assert settings.probe_timeout_seconds == 2.5
        assert settings.debug is True

    def test_none_overrides_are_ignored(self, monkeypatch):
        monkeypatch.setenv("CONVEX_AUTH_KEYS_ENV_FILE_NAME", ".env.test")
        assert load_settings(env_file_name=None).env_file_name == ".env.test"

    def test_absolute_env_file(self, tmp_path):
        settings = Settings(project_root=Path.cwd(), env_file_name=str(tmp_path / "custom.env"))
        assert settings.env_file_path == (tmp_path / "custom.env").resolve()

    def test_non_positive_timeout_fails(self):
        with pytest.raises(ValidationError):
            Settings(probe_timeout_seconds=0)

    def test_local_convex_bin(self, tmp_path):
        settings = Settings(project_root=tmp_path)
        name = "convex.cmd" if sys.platform == "win32" else "convex"
        assert settings.local_convex_bin == (tmp_path / "node_modules" / ".bin" / name).resolve()


@pytest.mark.unit
class TestRunOptions:
    """Test flag combination."""

    def test_setup_implies_write_and_sync(self):
        options = RunOptions.from_flags(write=False, sync_convex=False, setup=True, apply=False)
        assert options.write and options.sync_convex
        assert not options.apply

    def test_flags_are_independent(self):
        options = RunOptions.from_flags(write=False, sync_convex=True, setup=False, apply=True)
        assert options == RunOptions(write=False, sync_convex=True, apply=True)

    def test_options_are_frozen(self):
        options = RunOptions()
        with pytest.raises(ValidationError):
            options.write = True
