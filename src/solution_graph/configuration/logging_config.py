"""
Structured JSON logging for the solution graph service.

Log events are dotted lower-case names (``artifact.skipped``) with keyword
context. Request-scoped fields (repository, branch, solution) are bound via
contextvars and merged into every event logged while the request runs.
"""
import logging
import sys
from contextlib import contextmanager

import structlog

SENSITIVE_FIELDS = ['password', 'secret', 'token', 'authorization']

def filter_sensitive_data(logger, log_method, event_dict):
    """
    A structlog processor masking credentials before rendering.
    """
    for field in SENSITIVE_FIELDS:
        if field in event_dict:
            event_dict[field] = '[FILTERED]'
    return event_dict

def _resolve_level(log_level):
    if isinstance(log_level, int):
        return log_level
    level = logging.getLevelName(str(log_level).upper())
    return level if isinstance(level, int) else logging.INFO

def configure_logging(log_level=logging.INFO, stream=None, force_reconfigure=False):
    """Configure structlog on top of stdlib logging; ``log_level`` may be a name like ``"debug"``."""
    if not force_reconfigure and hasattr(structlog, '_configured'):
        return

    level = _resolve_level(log_level)
    logging.basicConfig(
        format="%(message)s",
        stream=stream or sys.stdout,
        level=level,
        force=True
    )
    logging.root.setLevel(level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            filter_sensitive_data,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    structlog._configured = True

@contextmanager
def bound_request_context(**fields):
    """Bind non-empty ``fields`` for the duration of one request."""
    values = {k: v for k, v in fields.items() if v not in (None, '')}
    structlog.contextvars.bind_contextvars(**values)
    try:
        yield
    finally:
        structlog.contextvars.unbind_contextvars(*values)
