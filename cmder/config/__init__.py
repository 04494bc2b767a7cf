"""Module de configuration."""

from cmder.config.settings import (
    CmderSettings,
    env_bool,
    settings_from_env,
)
from cmder.config.loader import load_settings
from cmder.config.manager import (
    CmderConfig,
    get_config,
    get_logger,
    set_dry_run,
    set_logger,
)

__all__ = [
    "CmderSettings",
    "env_bool",
    "settings_from_env",
    "load_settings",
    "CmderConfig",
    "get_config",
    "get_logger",
    "set_dry_run",
    "set_logger",
]
