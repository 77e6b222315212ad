"""Utils package for eventlog_checker."""

from .config import AppConfig, ConfigManager, LoggingConfig, default_state_dir
from .helpers import FormatHelper, StateFileHelper, TimeHelper

__all__ = [
    "AppConfig",
    "ConfigManager",
    "LoggingConfig",
    "default_state_dir",
    "FormatHelper",
    "StateFileHelper",
    "TimeHelper",
]
