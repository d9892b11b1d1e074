from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import Optional, TextIO


# Context variables for enriched logging
correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)
configuration_name_var: ContextVar[Optional[str]] = ContextVar("configuration_name", default=None)


class LoggingContextFilter(logging.Filter):
    """
    Logging filter that injects correlation_id and configuration name from
    contextvars into each log record so formatters can include them.

    If no values are present in the context, placeholders are used.
    """

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        cid = correlation_id_var.get()
        cfg = configuration_name_var.get()
        setattr(record, "correlation_id", cid or "-")
        setattr(record, "configuration", cfg or "-")
        return True


# PUBLIC_INTERFACE
def configure_logging(level: int | str = logging.INFO, stream: TextIO | None = None) -> None:
    """Configure root logging with a structured format and context filter."""
    handler = logging.StreamHandler(stream=stream or sys.stdout)
    fmt = (
        "%(asctime)s | %(levelname)s | %(name)s | cid=%(correlation_id)s | config=%(configuration)s | "
        "%(message)s"
    )
    formatter = logging.Formatter(fmt=fmt)
    handler.setFormatter(formatter)
    handler.addFilter(LoggingContextFilter())

    root = logging.getLogger()
    # Remove pre-existing default handlers configured elsewhere (e.g., basicConfig)
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)
