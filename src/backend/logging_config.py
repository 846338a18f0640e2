# Author: Bradley R. Kinnard — logs or it didn't happen

"""
Structlog over stdlib logging. JSON by default, colors when VERBOSE is set.
Request ID comes from a contextvar so thread-pool analysis logs still carry it.
"""

import logging
import os
import sys
from contextvars import ContextVar
import structlog

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)


def set_request_id(rid: str) -> None:
    request_id_ctx.set(rid)


def _add_request_id(logger, method, event_dict):
    # CLI runs have no request, leave the field out rather than lie
    rid = request_id_ctx.get()
    if rid is not None:
        event_dict["request_id"] = rid
    return event_dict


def setup_logging(level: str = "INFO", stream=None) -> None:
    """Configure once, from lifespan or CLI main. VERBOSE=1 for the pretty console renderer."""
    verbose = os.getenv("VERBOSE", "").lower() in ("1", "true", "yes")

    shared = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        _add_request_id,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    renderer = structlog.dev.ConsoleRenderer(colors=True) if verbose else structlog.processors.JSONRenderer()

    structlog.configure(
        processors=shared + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    )

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
