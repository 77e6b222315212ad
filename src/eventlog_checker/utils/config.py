"""
Configuration management for eventlog_checker.

This module provides the optional YAML/JSON configuration file, logging
settings and the default state directory.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional

import yaml
from loguru import logger
from pydantic import BaseModel, Field, ValidationError, field_validator

from ..exceptions import ConfigurationError


WORKDIR_ENV = "EVENTLOG_CHECKER_WORKDIR"
STATE_SUBDIR = "check-windows-eventlog"


def default_state_dir() -> Path:
    """State directory under the plugin work directory or the OS temp dir."""
    workdir = os.environ.get(WORKDIR_ENV) or tempfile.gettempdir()
    return Path(workdir) / STATE_SUBDIR


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field("WARNING", description="Logging level")
    format: str = Field(
        "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        description="Log format"
    )
    file_path: Optional[str] = Field(None, description="Log file path")
    rotation: str = Field("10 MB", description="Log rotation size")
    retention: str = Field("30 days", description="Log retention period")

    @field_validator('level')
    @classmethod
    def validate_level(cls, v):
        """Validate logging level."""
        valid_levels = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid logging level. Must be one of: {valid_levels}")
        return v.upper()


class AppConfig(BaseModel):
    """Main application configuration."""

    check_name: str = Field("Event Log", description="Name shown in check output")
    state_dir: Optional[str] = Field(None, description="Default state directory")
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class ConfigManager:
    """Loads the optional configuration file."""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = Path(config_path) if config_path else None
        self._config: AppConfig = self._load_config()

    def _load_config(self) -> AppConfig:
        """
        Load configuration from file.

        Raises:
            ConfigurationError: if the file cannot be parsed or validated
        """
        if self.config_path is None or not self.config_path.exists():
            return AppConfig()

        logger.debug(f"Loading configuration from {self.config_path}")
        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                if self.config_path.suffix.lower() in ['.yaml', '.yml']:
                    config_data = yaml.safe_load(f) or {}
                elif self.config_path.suffix.lower() == '.json':
                    config_data = json.load(f)
                else:
                    raise ConfigurationError(f"Unsupported config file format: {self.config_path.suffix}")
            return AppConfig(**config_data)
        except (OSError, yaml.YAMLError, json.JSONDecodeError, ValidationError, TypeError) as e:
            raise ConfigurationError(f"Error loading configuration {self.config_path}: {e}") from e

    @property
    def config(self) -> AppConfig:
        """Get current configuration."""
        return self._config

    def get_state_dir(self, override: Optional[str] = None) -> Path:
        """Explicit directory, then configured one, then the default."""
        if override:
            return Path(override)
        if self.config.state_dir:
            return Path(self.config.state_dir)
        return default_state_dir()
