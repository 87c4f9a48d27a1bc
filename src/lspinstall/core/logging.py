"""
structlog configuration.

The terminal belongs to the status window, so log events are routed through
stdlib logging into a file handler instead of stderr.
"""

from __future__ import annotations

import logging
from pathlib import Path

import structlog

from lspinstall.core.config import LspInstallConfig

_HANDLER_NAME = "lspinstall-file"


def configure_logging(config: LspInstallConfig, log_path: Path | None = None) -> Path:
    """Configure structlog + stdlib logging. Returns the log file path in use."""
    path = log_path or config.log_path
    path.parent.mkdir(parents=True, exist_ok=True)

    if config.logging.format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.FileHandler(path, encoding="utf-8")
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=shared_processors,
        )
    )

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)
            existing.close()
    root.addHandler(handler)
    root.setLevel(config.logging.level)
    return path
