"""Configuration management using Pydantic for validation."""

from pathlib import Path
from typing import Any, Dict

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


class RelationsConfig(BaseSettings):
    """Defaults applied to relationships that leave an option unset."""

    model_config = SettingsConfigDict(env_prefix="API_RELATIONS_", case_sensitive=False)

    default_local_key: str = "id"
    case_insensitive: bool = False

    @field_validator("default_local_key")
    @classmethod
    def validate_local_key(cls, v: str) -> str:
        """Validate the default local key is a usable field name."""
        if not v.strip():
            raise ValueError("default_local_key must not be empty")
        return v.strip()


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="API_RELATIONS_LOG_", case_sensitive=False)

    level: str = "INFO"
    file: str | None = None
    rotation: str = "10 MB"
    retention: int = 3

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate level is a loguru level name."""
        upper_value = v.upper()
        if upper_value not in _LOG_LEVELS:
            raise ValueError(f"Invalid log level '{v}'. Must be one of {sorted(_LOG_LEVELS)}.")
        return upper_value


class Config(BaseSettings):
    """Main configuration class."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="API_RELATIONS_",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__",
    )

    relations: RelationsConfig = Field(default_factory=RelationsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @staticmethod
    def _deep_merge_dict(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
        """Deep-merge two dicts (overrides win)."""
        merged: Dict[str, Any] = dict(base)
        for key, value in overrides.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = Config._deep_merge_dict(merged[key], value)
            else:
                merged[key] = value
        return merged

    @classmethod
    def from_yaml(cls, yaml_path: str | Path = "config/config.yaml") -> "Config":
        """Load configuration from YAML file and environment variables.

        Precedence (highest to lowest):
        1) Environment variables / .env
        2) YAML file
        3) Model defaults

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            Config instance with loaded settings

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            ValueError: If the YAML root is not a mapping
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {yaml_path}")

        with open(yaml_path) as f:
            yaml_config = yaml.safe_load(f) or {}

        if not isinstance(yaml_config, dict):
            raise ValueError(f"YAML config root must be a mapping/dict: {yaml_path}")

        # Nested BaseSettings read their own env prefix, so each section's env
        # overrides are computed separately and layered over the YAML values.
        env_overrides = cls().model_dump(exclude_defaults=True)
        for section, settings_cls in (("relations", RelationsConfig), ("logging", LoggingConfig)):
            section_env = settings_cls().model_dump(exclude_defaults=True)
            if section_env:
                env_overrides[section] = cls._deep_merge_dict(
                    env_overrides.get(section, {}), section_env
                )

        merged = cls._deep_merge_dict(yaml_config, env_overrides)

        return cls(**merged)


# Global configuration instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance.

    Raises:
        RuntimeError: If configuration hasn't been initialized
    """
    global _config
    if _config is None:
        raise RuntimeError("Configuration not initialized. Call load_config() first.")
    return _config


def load_config(yaml_path: str | Path = "config/config.yaml") -> Config:
    """Load configuration and make it the global instance."""
    global _config
    _config = Config.from_yaml(yaml_path)
    return _config


def reset_config() -> None:
    """Reset global configuration (mainly for testing)."""
    global _config
    _config = None


def relations_defaults() -> RelationsConfig:
    """Relation defaults from the loaded configuration, else env and model defaults."""
    if _config is not None:
        return _config.relations
    return RelationsConfig()
