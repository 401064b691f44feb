# libs/observability/logging.py
from __future__ import annotations

import logging
import structlog

_CONFIGURED = False


def _level_to_int(level: str | int) -> int:
    """Accept 'INFO' / 'info' / 20 / logging.INFO and return an int level."""
    if isinstance(level, int):
        return level
    lvl = getattr(logging, str(level).strip().upper(), None)
    return lvl if isinstance(lvl, int) else logging.INFO


def setup_logging(level: str | int = "INFO", *, json: bool = True) -> None:
    """
    Configure stdlib logging + structlog once per process.
    json=False switches to the console renderer for local runs.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    lvl = _level_to_int(level)

    logging.basicConfig(
        level=lvl,
        format="%(asctime)s %(levelname)-7s %(name)s - %(message)s",
    )

    renderer = structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,             # request-scoped fields (message_id, ...)
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(lvl),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _CONFIGURED = True
