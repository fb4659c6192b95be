"""Centralized logging configuration for billscan.

Usage:
    from billscan.runtime import get_logger
    logger = get_logger(__name__)

The level comes from ``--log-level`` on the CLI, else ``BILLSCAN_LOG_LEVEL``
(DEBUG, INFO, WARNING, ERROR or a number), else INFO. The upload server hands
the same level to uvicorn so request logs and scan logs agree.

Receipt text can hold personal data (names, card digits), so modules log
counts and statuses at INFO and keep recognized text for DEBUG.
"""

import logging
import os
import sys

DEFAULT_LOG_LEVEL = logging.INFO
LOG_LEVEL_ENV = "BILLSCAN_LOG_LEVEL"

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
LOG_FORMAT_DEBUG = "%(levelname)s [%(name)s:%(lineno)d] %(message)s"

LOGGER_NAMESPACE = "billscan"

_logging_configured = False


def parse_log_level(value: str | int) -> int:
    """Turn ``"debug"``, ``"WARN"``, ``"10"`` or ``10`` into a logging level.

    Raises:
        ValueError: unknown level name
    """
    if isinstance(value, int):
        return value
    name = value.strip().upper()
    if name.isdigit():
        return int(name)
    if name == "WARN":
        name = "WARNING"
    level = logging.getLevelNamesMapping().get(name)
    if level is None:
        raise ValueError(f"Unknown log level: {value!r}")
    return level


def _formatter_for(level: int) -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT_DEBUG if level <= logging.DEBUG else LOG_FORMAT)


def configure_logging(level: int | None = None) -> None:
    """Attach a stderr handler to the billscan namespace once per process.

    Args:
        level: Log level to use. If None, reads BILLSCAN_LOG_LEVEL; an
               unreadable value falls back to DEFAULT_LOG_LEVEL with a warning.
    """
    global _logging_configured

    if _logging_configured:
        return

    bad_env_value = None
    if level is None:
        env_value = os.environ.get(LOG_LEVEL_ENV, "")
        level = DEFAULT_LOG_LEVEL
        if env_value.strip():
            try:
                level = parse_log_level(env_value)
            except ValueError:
                bad_env_value = env_value

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_formatter_for(level))

    package_logger = logging.getLogger(LOGGER_NAMESPACE)
    package_logger.setLevel(level)
    package_logger.addHandler(handler)
    package_logger.propagate = False

    _logging_configured = True

    if bad_env_value is not None:
        package_logger.warning("Ignoring %s=%r; using %s", LOG_LEVEL_ENV, bad_env_value, logging.getLevelName(level))


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given module name.

    Module names already inside the package (``billscan.receipt...``) are used
    as-is; anything else is nested under the ``billscan`` namespace.
    """
    configure_logging()

    if name == LOGGER_NAMESPACE or name.startswith(f"{LOGGER_NAMESPACE}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


def set_log_level(level: int | str) -> None:
    """Change the log level at runtime (accepts names like ``"debug"``)."""
    configure_logging()
    level = parse_log_level(level)
    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(level)

    for handler in logger.handlers:
        handler.setFormatter(_formatter_for(level))


def uvicorn_log_level() -> str:
    """Current billscan level as the lowercase name uvicorn expects."""
    level = logging.getLogger(LOGGER_NAMESPACE).getEffectiveLevel()
    if level <= logging.DEBUG:
        return "debug"
    if level <= logging.INFO:
        return "info"
    if level <= logging.WARNING:
        return "warning"
    if level <= logging.ERROR:
        return "error"
    return "critical"
