"""Console logging for applications that have not configured logging themselves.

Importing thds.lazyval.log applies this configuration, unless the root logger
already has handlers.
"""

import logging
import logging.config
import typing as ty

from .kw_formatter import CompactFormatter
from .kw_logger import LOGLEVEL

_BASE_LOG_CONFIG: ty.Dict[str, ty.Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {"default": {"()": CompactFormatter}},
    "handlers": {"console": {"class": "logging.StreamHandler", "formatter": "default"}},
    "root": {"handlers": ["console"]},
}


def set_logger_to_console_level(config: dict, logger_name: str, level: int) -> dict:
    """Returns a new dictConfig with `logger_name` emitting to the console at `level`.

    '*' names the root logger.
    """
    if logger_name == "*":
        return dict(config, root=dict(config["root"], level=level))
    loggers = dict(config.get("loggers") or dict())
    # propagate=False so that records are not emitted a second time by the root handler.
    loggers[logger_name] = {"level": level, "handlers": ["console"], "propagate": False}
    return dict(config, loggers=loggers)


def configure_console_logging() -> bool:
    if logging.getLogger().hasHandlers():
        return False
    logging.config.dictConfig(set_logger_to_console_level(_BASE_LOG_CONFIG, "*", LOGLEVEL()))
    return True
