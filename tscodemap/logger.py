"""
Logging for tscodemap.

Configured from the environment:
- TSCODEMAP_LOG_LEVEL: DEBUG, INFO, WARNING or ERROR (default: INFO)
"""

import json
import logging
import os
import sys
from functools import wraps
from typing import Any, Optional

from tscodemap.errors import MalformedNodeError

LOGGER_NAME = "tscodemap"

LEVEL_ALIASES = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    if level is None:
        level = os.environ.get("TSCODEMAP_LOG_LEVEL", "INFO")
    log_level = LEVEL_ALIASES.get(level.strip().upper(), logging.INFO)

    formatter = logging.Formatter(
        "[%(asctime)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.propagate = False
    return logger


class ApplicationLogger:
    """Logger that attaches a context mapping to every record."""

    def __init__(self, name: str = LOGGER_NAME):
        self.logger = logging.getLogger(name)

    @staticmethod
    def _format(context: Any, message: str) -> str:
        if not context:
            return message
        return f"{message} | context={json.dumps(context, default=str)}"

    def debug(self, context: Any, message: str) -> None:
        self.logger.debug(self._format(context, message))

    def log(self, context: Any, message: str) -> None:
        self.logger.info(self._format(context, message))

    def warn(self, context: Any, message: str) -> None:
        self.logger.warning(self._format(context, message))

    def error(self, context: Any, message: str, error: BaseException) -> None:
        self.logger.error(
            self._format(context, message),
            exc_info=(type(error), error, error.__traceback__),
        )


def log_error(error: BaseException, method_name: str, props: Any) -> None:
    context = {
        "method": method_name,
        "props": json.dumps(props, default=str),
    }
    ApplicationLogger().error(context, str(error) or type(error).__name__, error)


def describe_node(node, parsed_file=None) -> dict:
    """Identity of a node for log context: kind, file and 1-based line."""
    identity = {"node": getattr(node, "type", repr(node))}
    start = getattr(node, "start_point", None)
    if start is not None:
        identity["line"] = start[0] + 1
    if parsed_file is not None:
        identity["file"] = getattr(parsed_file, "path", str(parsed_file))
    return identity


def log_errors(method_name: str):
    """Log failures of an extractor with node/file context, then re-raise.

    The wrapped method must take ``(self, node, parsed_file, ...)``. Errors
    that are not already ``MalformedNodeError`` are wrapped in one.
    """
    def decorator(func):
        @wraps(func)
        def wrapper(self, node, parsed_file, *args, **kwargs):
            try:
                return func(self, node, parsed_file, *args, **kwargs)
            except Exception as e:
                log_error(e, method_name, describe_node(node, parsed_file))
                if isinstance(e, MalformedNodeError):
                    raise
                raise MalformedNodeError(f"{method_name} failed: {e}") from e

        return wrapper

    return decorator
