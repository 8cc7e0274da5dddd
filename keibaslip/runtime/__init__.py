"""Runtime infrastructure for keibaslip.

This package provides process/runtime services including:
- Logging setup via get_logger()
- Settings from the environment via get_settings(), load_settings()

HTTP clients (ai_client, vision_client) and the FastAPI app (slip_server)
are imported from their modules directly.

Usage:
    from keibaslip.runtime import get_logger, get_settings

    logger = get_logger(__name__)
    settings = get_settings()
"""

from keibaslip.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    LOG_LEVEL_NAMES,
    configure_logging,
    get_logger,
    parse_log_level,
    set_log_level,
)
from keibaslip.runtime.settings import (
    Settings,
    get_settings,
    load_settings,
    reset_settings,
)

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    "parse_log_level",
    "LOG_LEVEL_NAMES",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    # Settings
    "Settings",
    "get_settings",
    "load_settings",
    "reset_settings",
]
