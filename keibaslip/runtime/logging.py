"""Logging setup for the keibaslip package.

Every module takes its logger through ``get_logger(__name__)``. The first call
attaches one stderr handler to the ``keibaslip`` logger; nothing is attached to
the root logger, so embedding applications keep control of their own output.

The level comes from ``KEIBASLIP_LOG_LEVEL`` (DEBUG, INFO, WARNING, ERROR;
default INFO) and can be changed later with ``set_log_level``, which the CLI
does for ``--log-level``.
"""

import logging
import os
import sys

DEFAULT_LOG_LEVEL = logging.INFO

LOGGER_NAMESPACE = "keibaslip"
LOG_LEVEL_ENV = "KEIBASLIP_LOG_LEVEL"

LOG_LEVELS: dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}
LOG_LEVEL_NAMES: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR")

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
# Line numbers only at DEBUG, where they are worth the noise.
LOG_FORMAT_DEBUG = "%(levelname)s [%(name)s:%(lineno)d] %(message)s"

_handler: logging.Handler | None = None


def parse_log_level(name: str | None) -> int | None:
    """Map a level name such as 'debug' or 'WARN' to a logging level (None if unknown)."""
    if not name:
        return None
    return LOG_LEVELS.get(name.strip().upper())


def _formatter_for(level: int) -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT_DEBUG if level <= logging.DEBUG else LOG_FORMAT)


def configure_logging(level: int | None = None) -> None:
    """Attach the package handler once; later calls are no-ops."""
    global _handler
    if _handler is not None:
        return

    if level is None:
        level = parse_log_level(os.environ.get(LOG_LEVEL_ENV)) or DEFAULT_LOG_LEVEL

    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(_formatter_for(level))

    package_logger = logging.getLogger(LOGGER_NAMESPACE)
    package_logger.setLevel(level)
    package_logger.addHandler(_handler)
    package_logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Logger for a module; names outside the package are nested under it."""
    configure_logging()
    if name == LOGGER_NAMESPACE or name.startswith(f"{LOGGER_NAMESPACE}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


def set_log_level(level: int) -> None:
    """Change the package log level at runtime, switching the format for DEBUG."""
    configure_logging(level)
    logging.getLogger(LOGGER_NAMESPACE).setLevel(level)
    if _handler is not None:
        _handler.setFormatter(_formatter_for(level))
