"""Logging configuration and error reporting helpers."""

from __future__ import annotations

from collections.abc import Callable
import logging
from typing import Any, Union, TypeVar

from balanced_dag.errors import BalancedDagError

DEFAULT_LOGGER_NAME = "balanced_dag"
DEFAULT_LOG_LEVEL = logging.INFO
DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_T = TypeVar("_T")


def resolve_log_level(level: Union[int, str]) -> int:
    if isinstance(level, int) and not isinstance(level, bool):
        return level
    if isinstance(level, str):
        value = logging.getLevelName(level.strip().upper())
        if isinstance(value, int):
            return value
    raise ValueError(f"Unknown log level: {level!r}.")


def configure_logging(
    level: Union[int, str] = DEFAULT_LOG_LEVEL,
    *,
    logger_name: str = DEFAULT_LOGGER_NAME,
    fmt: str = DEFAULT_LOG_FORMAT,
    force: bool = False,
) -> logging.Logger:
    level = resolve_log_level(level)
    logging.basicConfig(level=level, format=fmt, force=force)
    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    return logger


def get_user_message(exc: BaseException) -> str:
    if isinstance(exc, BalancedDagError):
        return exc.user_message
    return f"Unexpected error: {exc}"


def log_exception(
    logger: logging.Logger,
    exc: BaseException,
    *,
    show_traceback: bool = False,
) -> str:
    user_message = get_user_message(exc)
    logger.error(user_message)
    if isinstance(exc, BalancedDagError) and exc.context:
        logger.debug("Error context: %s", exc.log_message())
    if show_traceback:
        logger.error("Detailed traceback:", exc_info=exc)
    else:
        logger.debug("Detailed traceback:", exc_info=exc)
    return user_message


def run_with_error_handling(
    func: Callable[..., _T],
    *args: Any,
    logger: logging.Logger,
    show_traceback: bool = False,
    **kwargs: Any,
) -> _T:
    try:
        return func(*args, **kwargs)
    except Exception as exc:
        log_exception(logger, exc, show_traceback=show_traceback)
        raise


__all__ = [
    "DEFAULT_LOGGER_NAME",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_LOG_FORMAT",
    "configure_logging",
    "get_user_message",
    "log_exception",
    "resolve_log_level",
    "run_with_error_handling",
]
