from __future__ import annotations

import logging
import sys
import typing

import structlog

if typing.TYPE_CHECKING:
    from modedit.settings import LoggingSettings


_LEVELS: typing.Final[dict[str, int]] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def _is_tty_handler(handler: logging.Handler) -> bool:
    return isinstance(handler, logging.StreamHandler) and getattr(
        handler, "stream", None
    ) in (sys.stdout, sys.stderr)


def configure_logging(settings: LoggingSettings) -> logging.Handler:
    """Route all log records to the configured file.

    The terminal belongs to the editor screen, so stdout/stderr stream
    handlers are removed from the root logger.
    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if _is_tty_handler(handler) or getattr(handler, "_modedit", False):
            root_logger.removeHandler(handler)

    handler: logging.Handler
    if settings.file is None:
        handler = logging.NullHandler()
    else:
        handler = logging.FileHandler(
            settings.file,
            mode="a",
            encoding="utf-8",
            delay=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
    setattr(handler, "_modedit", True)
    root_logger.addHandler(handler)
    root_logger.setLevel(_LEVELS[settings.level.value])
    return handler


structlog.configure(
    wrapper_class=structlog.make_filtering_bound_logger(logging.NOTSET),
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
    processors=[
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", utc=False),
        structlog.dev.ConsoleRenderer(colors=False),
    ],
)

logger: structlog.BoundLogger = structlog.get_logger("modedit")
