"""Logging utilities."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Annotated

from loguru import logger
from typing_extensions import Doc

if TYPE_CHECKING:
    from pathlib import Path

    from loguru import Record

_PACKAGE = "sponsortally"


def _update_record(record: Record) -> None:
    record["pkg"] = record["extra"].get("pkg") or (record["name"] or "").split(".", 1)[0]  # type: ignore[typeddict-unknown-key]


class _InterceptHandler(logging.Handler):
    def _main(self, record: logging.LogRecord) -> bool:
        return record.name.split(".", 1)[0] == _PACKAGE

    def emit(self, record: logging.LogRecord) -> None:
        # Get corresponding Loguru level if it exists.
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # HTTP libraries are chatty: demote their INFO messages.
        if level == "INFO" and not self._main(record):
            level = "DEBUG"

        # Find caller from where originated the logged message.
        frame, depth = sys._getframe(6), 6
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore[assignment]
            depth += 1

        message = record.getMessage().replace("\n", " ")
        logger.opt(depth=depth, exception=record.exc_info).bind(pkg=record.name.split(".", 1)[0]).log(level, message)


intercept_handler = _InterceptHandler()


def configure_logging(
    level: Annotated[str, Doc("Log level (name).")],
    path: Annotated[str | Path | None, Doc("Log file path.")] = None,
) -> None:
    """Configure logging."""
    sink = path or sys.stderr
    log_level = {
        "TRACE": logging.DEBUG - 5,  # 5
        "DEBUG": logging.DEBUG,  # 10
        "INFO": logging.INFO,  # 20
        "SUCCESS": logging.INFO + 5,  # 25
        "WARNING": logging.WARNING,  # 30
        "ERROR": logging.ERROR,  # 40
        "CRITICAL": logging.CRITICAL,  # 50
    }.get(level.upper(), logging.INFO)
    logging.basicConfig(handlers=[intercept_handler], level=0, force=True)
    loguru_format = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | <cyan>{pkg}</cyan> - <level>{message}</level>"
    )
    handler = {"sink": sink, "level": log_level, "format": loguru_format}
    logger.configure(handlers=[handler], patcher=_update_record)  # type: ignore[list-item]


logger = logger.patch(_update_record)
