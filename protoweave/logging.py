"""Logging for the protoweave CLI and the protoc plugin.

protoc reads the plugin response from standard output and forwards the plugin's
standard error to the user, so every handler configured here writes to stderr.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Mapping

_LOGGER_NAME = "protoweave"

VERBOSE_ENV = "PROTOWEAVE_VERBOSE"

PLUGIN_FORMAT = "[protoweave] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_FALSE_VALUES = {"", "0", "false", "no", "off"}


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the protoweave hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def verbose_from_env(environ: Mapping[str, str] | None = None) -> bool:
    """Whether ``PROTOWEAVE_VERBOSE`` asks for debug output.

    protoc passes no flags to a plugin besides the request parameter, which
    already carries the configuration path, so verbosity travels in the environment.
    """
    value = (os.environ if environ is None else environ).get(VERBOSE_ENV, "")
    return value.strip().lower() not in _FALSE_VALUES


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Route protoweave records to stderr and, optionally, to ``log_file``."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Repeated invocations in one process must not duplicate output.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter(PLUGIN_FORMAT))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger


def configure_plugin_logging(environ: Mapping[str, str] | None = None) -> logging.Logger:
    """Configure logging for a protoc plugin run from its environment."""
    return configure_logging(verbose=verbose_from_env(environ))


__all__ = [
    "VERBOSE_ENV",
    "configure_logging",
    "configure_plugin_logging",
    "get_logger",
    "verbose_from_env",
]
