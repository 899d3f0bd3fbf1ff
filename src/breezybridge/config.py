from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from breezybridge.constants import (
    CORE_MODULE,
    DEFAULT_BACKEND_MODULES,
    EXTENSION_MODULES,
    MINIMUM_RUNTIME_VERSION,
    ExtensionName,
)
from breezybridge.exceptions import ConfigError
from breezybridge.logging import get_logger

__all__ = [
    "BridgeSettings",
    "load_config",
    "get_user_config_path",
    "PROJECT_CONFIG_NAME",
]

logger = get_logger(__name__)

#: File name of the per-project configuration file
PROJECT_CONFIG_NAME = "breezybridge.yaml"


class YamlConfigSource(PydanticBaseSettingsSource):
    """Custom settings source that loads from YAML files."""

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        yaml_file: Path | None = None,
    ):
        super().__init__(settings_cls)
        self.yaml_file = yaml_file
        self._config_data: dict[str, Any] = {}
        if yaml_file and yaml_file.exists():
            try:
                with open(yaml_file) as f:
                    loaded = yaml.safe_load(f)
                    if loaded is None:
                        logger.warning(
                            "config_file_empty", path=str(yaml_file)
                        )
                    elif loaded:
                        self._config_data = loaded
            except yaml.YAMLError as e:
                raise ConfigError(
                    message=f"Invalid YAML in {yaml_file}: {e}",
                    field=None,
                    value=None,
                ) from e

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        """Get value for a specific field from the YAML config."""
        if field_name in self._config_data:
            return self._config_data[field_name], field_name, False
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Return the complete config data."""
        return self._config_data


class BridgeSettings(BaseSettings):
    """Settings consumed by the runtime initializer.

    Attributes:
        core_module: Top-level module of the embedded VCS runtime.
        backends: Backend modules imported at startup.
        extensions: Optional extensions to load. Initialization fails if an
            enabled extension cannot be imported.
        minimum_version: Oldest acceptable ``version_info`` of the runtime.
        load_plugins: Load every installed runtime plugin at startup.
        warm_caches: Prime the format registry and configuration stacks
            during startup so that later threads never race to build them.
        auto_initialize: Initialize lazily on first use instead of
            requiring an explicit ``init()`` call.

    Example breezybridge.yaml:
        extensions:
          - github
          - launchpad
        load_plugins: true
    """

    model_config = SettingsConfigDict(
        env_prefix="BREEZYBRIDGE_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    core_module: str = CORE_MODULE
    backends: list[str] = Field(
        default_factory=lambda: list(DEFAULT_BACKEND_MODULES)
    )
    extensions: list[ExtensionName] = Field(default_factory=list)
    minimum_version: tuple[int, int, int] = MINIMUM_RUNTIME_VERSION
    load_plugins: bool = False
    warm_caches: bool = True
    auto_initialize: bool = False

    @field_validator("extensions")
    @classmethod
    def dedupe_extensions(cls, v: list[ExtensionName]) -> list[ExtensionName]:
        """Drop repeated toggles while keeping their order."""
        return list(dict.fromkeys(v))

    @property
    def extension_modules(self) -> list[str]:
        """Foreign modules required by the enabled extensions."""
        return [EXTENSION_MODULES[name] for name in self.extensions]

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize the order of settings sources.

        Priority (highest to lowest):
        1. Init arguments (explicit ``BridgeSettings(...)``)
        2. Environment variables (BREEZYBRIDGE_*)
        3. Project YAML config (./breezybridge.yaml)
        4. User YAML config (~/.config/breezybridge/config.yaml)
        """
        return (
            init_settings,
            env_settings,
            YamlConfigSource(settings_cls, Path.cwd() / PROJECT_CONFIG_NAME),
            YamlConfigSource(settings_cls, get_user_config_path()),
        )


def get_user_config_path() -> Path:
    """Get the path to the user configuration file.

    Returns:
        Path to ~/.config/breezybridge/config.yaml
    """
    return Path.home() / ".config" / "breezybridge" / "config.yaml"


def load_config() -> BridgeSettings:
    """Load settings with hierarchy: defaults -> user -> project -> env.

    Returns:
        BridgeSettings instance with merged configuration.

    Raises:
        ConfigError: If configuration is invalid.
    """
    if not (Path.cwd() / PROJECT_CONFIG_NAME).exists():
        logger.debug("project_config_missing", using="defaults")

    try:
        return BridgeSettings()
    except ValidationError as e:
        first_error = e.errors()[0]
        field = ".".join(str(loc) for loc in first_error["loc"])
        raise ConfigError(
            message=f"Invalid configuration: {first_error['msg']}",
            field=field,
            value=first_error.get("input"),
        ) from e
