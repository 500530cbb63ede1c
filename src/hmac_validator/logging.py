"""structlog wiring shared by the package."""

from __future__ import annotations

import logging

import structlog
from structlog.typing import FilteringBoundLogger


def setup_logging(*, debug: bool = False) -> None:
    level = logging.DEBUG if debug else logging.INFO
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )


def get_logger(name: str | None = None) -> FilteringBoundLogger:
    if name is None:
        return structlog.get_logger()
    return structlog.get_logger(name)
