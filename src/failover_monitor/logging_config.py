"""
Centralized logging configuration for the failover monitor.

Provides a single setup_logging function that configures logging with:
- Console output on stdout
- Optional file output to {LOG_DIRECTORY}/{service_name}.log
- Fresh log file on each start unless LOG_APPEND is set
"""

import logging
import logging.handlers
import sys
import threading
from pathlib import Path
from typing import Optional

from .config import ConfigurationError, env_bool, env_str

# Thread-safe lock for logging configuration
_config_lock = threading.Lock()
_MODULE_LOGGER = logging.getLogger(__name__)
_LOG_FORMAT = "%(asctime)s.%(msecs)03d - %(name)s - %(levelname)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_NOISY_LOGGERS = ("kazoo", "kazoo.client", "kazoo.protocol.connection", "redis", "redis.asyncio", "asyncio")


def _resolve_level() -> int:
    raw_level = env_str("LOG_LEVEL", or_value="INFO")
    level = logging.getLevelName(str(raw_level).upper())
    if not isinstance(level, int):
        raise ConfigurationError.invalid_value("LOG_LEVEL", raw_level, "expected a standard logging level name")
    return level


def _close_handlers(logger: logging.Logger) -> None:
    """Close all handlers for a logger, logging any errors."""
    for handler in list(logger.handlers):
        try:
            handler.close()
        except OSError as exc:  # Best-effort cleanup operation  # policy_guard: allow-silent-handler
            _MODULE_LOGGER.debug("Handler close failed for logger '%s': %s", logger.name, exc)
        logger.removeHandler(handler)


def _build_formatter() -> logging.Formatter:
    return logging.Formatter(_LOG_FORMAT, _DATE_FORMAT)


def _build_console_handler(level: int) -> logging.Handler:
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(_build_formatter())
    console_handler.setLevel(level)
    return console_handler


def _configure_file_handler(service_name: Optional[str], level: int) -> Optional[logging.Handler]:
    if not service_name:
        return None

    logs_dir = Path(str(env_str("LOG_DIRECTORY", or_value="logs"))).expanduser()
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"{service_name}.log"
    file_mode = "a" if env_bool("LOG_APPEND", or_value=False) else "w"

    file_handler = logging.handlers.WatchedFileHandler(log_path, mode=file_mode)
    file_handler.setFormatter(_build_formatter())
    file_handler.setLevel(level)
    return file_handler


def _suppress_noisy_third_parties() -> None:
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_logging(service_name: Optional[str] = None) -> None:
    """Configure root logging for the application; replaces any existing handlers."""

    with _config_lock:
        level = _resolve_level()
        root_logger = logging.getLogger()
        _close_handlers(root_logger)

        root_logger.addHandler(_build_console_handler(level))
        file_handler = _configure_file_handler(service_name, level)
        if file_handler:
            root_logger.addHandler(file_handler)

        root_logger.setLevel(level)
        _suppress_noisy_third_parties()


__all__ = ["setup_logging"]
