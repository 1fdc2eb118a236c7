"""
Logging for the binder operator.

Every line carries a trace_id. Flows log with the uid of the pod they act
on, so one pod's bind or unbind can be followed across worker threads.

BINDER_LOG_LEVEL picks the level (default INFO) and BINDER_LOG_FORMAT picks
json or text output (default json).
"""

import logging
import os
import sys
from typing import Optional

from pythonjsonlogger import jsonlogger

NO_TRACE = "N/A"

JSON_FIELDS = "%(asctime)s %(name)s %(levelname)s %(message)s %(trace_id)s"
TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s [%(trace_id)s] %(message)s"

# Client libraries that log every request at INFO
QUIET_LOGGERS = ("urllib3", "kubernetes", "kopf")


def setup_logging() -> None:
    """Replace the root handlers with a single stdout handler."""
    level = logging.getLevelName(os.getenv("BINDER_LOG_LEVEL", "INFO").upper())
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(TraceIDFilter())
    if os.getenv("BINDER_LOG_FORMAT", "json").lower() == "json":
        handler.setFormatter(jsonlogger.JsonFormatter(
            JSON_FIELDS,
            rename_fields={"asctime": "timestamp", "name": "logger", "levelname": "level"},
        ))
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    root = logging.getLogger()
    root.setLevel(level)
    for old in root.handlers[:]:
        root.removeHandler(old)
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str, trace_id: Optional[str] = None) -> logging.LoggerAdapter:
    """
    Logger bound to a trace id.

    Args:
        name: Logger name (typically __name__)
        trace_id: Pod uid of the flow being logged

    Returns:
        LoggerAdapter whose records carry trace_id plus any per-call extra
    """
    return _TraceAdapter(logging.getLogger(name), {"trace_id": trace_id or NO_TRACE})


class _TraceAdapter(logging.LoggerAdapter):
    # The stdlib adapter replaces per-call extra; merge it instead.
    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


class TraceIDFilter(logging.Filter):
    """Fills trace_id on records logged without get_logger()."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "trace_id"):
            record.trace_id = NO_TRACE  # type: ignore
        return True
