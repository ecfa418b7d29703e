# loverituals/observability/logger.py

# structured JSON logger
import logging
import sys

from opentelemetry import trace
from pythonjsonlogger.json import JsonFormatter

from loverituals.utils.logger import setup_file_loggers


class TraceIdFilter(logging.Filter):
    """Inject trace_id into the record when a span is active."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "trace_id"):
            ctx = trace.get_current_span().get_span_context()
            record.trace_id = f"{ctx.trace_id:032x}" if ctx and ctx.trace_id else None
        return True


def _build_formatter() -> logging.Formatter:
    return JsonFormatter(
        fmt="%(asctime)s %(levelname)s %(name)s %(message)s %(pathname)s %(lineno)d %(trace_id)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )


def configure_logging(settings, logs_path: str | None = None) -> None:
    """Configure root logging and align the file loggers to JSON formatting.

    - Sets the root level from settings.LOG_LEVEL.
    - Optionally attaches the access/error file handlers under logs_path.
    - Adds a JSON console handler (stdout), once.
    - Injects trace_id when tracing is enabled.
    """
    root = logging.getLogger()
    root.setLevel(settings.LOG_LEVEL)

    formatter = _build_formatter()
    trace_filter = TraceIdFilter()

    if logs_path:
        setup_file_loggers(logs_path)

    for logger_name in ("access", "error"):
        lg = logging.getLogger(logger_name)
        for h in lg.handlers:
            h.setFormatter(formatter)
            h.addFilter(trace_filter)

    have_console = any(
        isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stdout
        for h in root.handlers
    )
    if not have_console:
        console = logging.StreamHandler(stream=sys.stdout)
        console.setLevel(settings.LOG_LEVEL)
        console.setFormatter(formatter)
        console.addFilter(trace_filter)
        root.addHandler(console)

    logging.getLogger("startup").info("logging configured")
