import logging
from pathlib import Path
from typing import Optional
from platformdirs import user_config_dir
from .core.settings import SettingsManager


logger = logging.getLogger(__name__)


CONFIG_DIR = Path(user_config_dir("gridtrace"))
CONFIG_FILE = CONFIG_DIR / "config.yaml"

# Initialized to None so importing this module has no side effects.
# The application calls initialize_managers() once at startup.
settings_mgr: Optional[SettingsManager] = None


def initialize_managers(config_file: Optional[Path] = None) -> SettingsManager:
    """
    Loads the settings from `config_file` (the per-user config file by
    default). Safe to call more than once.
    """
    global settings_mgr

    if settings_mgr is not None:
        return settings_mgr

    path = Path(config_file) if config_file else CONFIG_FILE
    logger.info(f"Initializing configuration from {path}")
    settings_mgr = SettingsManager(path)
    logger.info(
        f"Config loaded: {settings_mgr.settings.max_rows}x"
        f"{settings_mgr.settings.max_cols} max subdivisions"
    )
    return settings_mgr
