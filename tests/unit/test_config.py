"""Unit tests for BridgeSettings and load_config."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from breezybridge.config import (
    PROJECT_CONFIG_NAME,
    BridgeSettings,
    get_user_config_path,
    load_config,
)
from breezybridge.constants import (
    CORE_MODULE,
    DEFAULT_BACKEND_MODULES,
    MINIMUM_RUNTIME_VERSION,
)
from breezybridge.exceptions import ConfigError, InitializationError


@pytest.fixture
def isolated_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME at an empty directory so no user config is picked up."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


class TestDefaults:
    """Tests for default settings values."""

    def test_defaults(self, clean_env: None, isolated_home: Path, temp_dir: Path) -> None:
        """Test defaults match the runtime constants."""
        os.chdir(temp_dir)
        settings = BridgeSettings()

        assert settings.core_module == CORE_MODULE
        assert settings.backends == list(DEFAULT_BACKEND_MODULES)
        assert settings.extensions == []
        assert settings.minimum_version == MINIMUM_RUNTIME_VERSION
        assert settings.load_plugins is False
        assert settings.warm_caches is True
        assert settings.auto_initialize is False

    def test_extension_modules(self, clean_env: None) -> None:
        """Test extension toggles map to runtime plugin modules."""
        settings = BridgeSettings(extensions=["github", "launchpad"])

        assert settings.extension_modules == [
            "breezy.plugins.github",
            "breezy.plugins.launchpad",
        ]

    def test_duplicate_extensions_are_dropped(self, clean_env: None) -> None:
        """Test repeated toggles collapse while keeping order."""
        settings = BridgeSettings(extensions=["gitlab", "github", "gitlab"])

        assert settings.extensions == ["gitlab", "github"]

    def test_unknown_extension_rejected(self, clean_env: None) -> None:
        """Test only known extension names validate."""
        with pytest.raises(ValueError):
            BridgeSettings(extensions=["mercurial"])


class TestSources:
    """Tests for environment and YAML sources."""

    def test_env_override(self, clean_env: None, isolated_home: Path, temp_dir: Path) -> None:
        """Test BREEZYBRIDGE_* variables override defaults."""
        os.chdir(temp_dir)
        with patch.dict(
            os.environ,
            {
                "BREEZYBRIDGE_LOAD_PLUGINS": "true",
                "BREEZYBRIDGE_EXTENSIONS": '["gitlab"]',
            },
        ):
            settings = load_config()

        assert settings.load_plugins is True
        assert settings.extensions == ["gitlab"]

    def test_project_yaml(
        self,
        clean_env: None,
        isolated_home: Path,
        temp_dir: Path,
        sample_config_yaml: str,
    ) -> None:
        """Test ./breezybridge.yaml is read."""
        os.chdir(temp_dir)
        (temp_dir / PROJECT_CONFIG_NAME).write_text(sample_config_yaml)

        settings = load_config()

        assert settings.extensions == ["github", "launchpad"]
        assert settings.load_plugins is True
        assert settings.warm_caches is False
        assert settings.minimum_version == (3, 2, 0)

    def test_env_beats_project_yaml(
        self,
        clean_env: None,
        isolated_home: Path,
        temp_dir: Path,
        sample_config_yaml: str,
    ) -> None:
        """Test environment variables take priority over the project file."""
        os.chdir(temp_dir)
        (temp_dir / PROJECT_CONFIG_NAME).write_text(sample_config_yaml)

        with patch.dict(os.environ, {"BREEZYBRIDGE_WARM_CACHES": "true"}):
            settings = load_config()

        assert settings.warm_caches is True

    def test_user_yaml(self, clean_env: None, isolated_home: Path, temp_dir: Path) -> None:
        """Test the user file is read when there is no project file."""
        os.chdir(temp_dir)
        user_config = get_user_config_path()
        user_config.parent.mkdir(parents=True)
        user_config.write_text("auto_initialize: true\n")

        settings = load_config()

        assert settings.auto_initialize is True

    def test_empty_yaml_uses_defaults(
        self, clean_env: None, isolated_home: Path, temp_dir: Path
    ) -> None:
        """Test an empty config file is tolerated."""
        os.chdir(temp_dir)
        (temp_dir / PROJECT_CONFIG_NAME).write_text("")

        settings = load_config()

        assert settings.core_module == CORE_MODULE


class TestLoadConfigErrors:
    """Tests for configuration failures."""

    def test_invalid_yaml(self, clean_env: None, isolated_home: Path, temp_dir: Path) -> None:
        """Test malformed YAML raises ConfigError."""
        os.chdir(temp_dir)
        (temp_dir / PROJECT_CONFIG_NAME).write_text("extensions: [github\n")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config()

    def test_invalid_value(self, clean_env: None, isolated_home: Path, temp_dir: Path) -> None:
        """Test validation failures name the offending field."""
        os.chdir(temp_dir)
        (temp_dir / PROJECT_CONFIG_NAME).write_text("minimum_version: three\n")

        with pytest.raises(ConfigError) as exc_info:
            load_config()

        assert exc_info.value.field is not None
        assert exc_info.value.field.startswith("minimum_version")
        assert isinstance(exc_info.value, InitializationError)

    def test_user_config_path(self, isolated_home: Path) -> None:
        """Test the user config lives under ~/.config/breezybridge."""
        assert get_user_config_path() == (
            isolated_home / ".config" / "breezybridge" / "config.yaml"
        )
