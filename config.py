"""
Modsync - Minecraft Mod Inventory Reconciliation
"""
import tomllib
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import (
    BaseSettings,
    SettingsConfigDict,
    SettingsError,
    TomlConfigSettingsSource
)

from core.exceptions import ConfigError
from core.jar_name import ARCHIVE_SUFFIX
from core.mods_toml import MODS_TOML_ENTRY
from core.matching import FUZZY_MATCH_THRESHOLD

DEFAULT_CONFIG_PATH = "./config.toml"


class LocalConfig(BaseModel):
    """[local] section of config.toml."""
    path: str = "./mods"


class RemoteConfig(BaseModel):
    """[remote] section of config.toml."""
    host: str
    path: str


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application Info
    APP_NAME: str = "Modsync"
    APP_VERSION: str = "1.0.2"
    DEBUG: bool = False

    # Scanning
    METADATA_ENTRY: str = MODS_TOML_ENTRY
    ARCHIVE_EXTENSION: str = ARCHIVE_SUFFIX
    SSH_COMMAND: str = "ssh"

    # Matching
    FUZZY_MATCH_THRESHOLD: float = Field(default=FUZZY_MATCH_THRESHOLD, ge=0.0, le=1.0)

    # Output
    COLOR: bool = True

    # Sections (lowercase, as written in config.toml)
    local: LocalConfig = Field(default_factory=LocalConfig)
    remote: Optional[RemoteConfig] = None

    model_config = SettingsConfigDict(
        env_prefix="MODSYNC_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings
    ):
        # The environment overrides config.toml
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            TomlConfigSettingsSource(settings_cls),
            file_secret_settings
        )


def load_settings(config_path: str = DEFAULT_CONFIG_PATH) -> Settings:
    """
    Load settings from a TOML config file plus the environment.

    Raises:
        FileNotFoundError: Config file does not exist
        ConfigError: Config file is not valid TOML or fails validation
    """
    if not Path(config_path).is_file():
        raise FileNotFoundError(f"{config_path} not exists!")

    class FileSettings(Settings):
        model_config = SettingsConfigDict(toml_file=config_path)

    try:
        return FileSettings()
    except (tomllib.TOMLDecodeError, SettingsError) as e:
        raise ConfigError(f"Cannot parse config file '{config_path}': {e}") from e
    except ValidationError as e:
        raise ConfigError(f"Invalid config file '{config_path}': {e}") from e
