import logging
import sys
from typing import TextIO

# Fields the report pipeline attaches via ``extra``, rendered first in this order.
REPORT_LOG_FIELDS = (
    "report_filename",
    "subject_identifier",
    "content_identifier",
    "stage",
    "cursor_y",
    "floor_y",
    "size_bytes",
    "backend",
    "error",
)

_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))) | {
    "message",
    "asctime",
    "report_fields",
}


def _format_value(value: object) -> str:
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


class ReportFieldsFormatter(logging.Formatter):
    """Renders ``extra`` fields as ``key=value`` after the event name.

    Known report fields keep a stable order so lines for one document line up;
    anything else follows alphabetically.
    """

    def format(self, record: logging.LogRecord) -> str:
        extras = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        }
        ordered = [key for key in REPORT_LOG_FIELDS if key in extras]
        ordered += sorted(key for key in extras if key not in REPORT_LOG_FIELDS)
        pairs = " ".join(f"{key}={_format_value(extras[key])}" for key in ordered)
        record.report_fields = f" | {pairs}" if pairs else ""
        return super().format(record)


def setup_logging(level: str, stream: TextIO | None = None) -> logging.Handler:
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(
        ReportFieldsFormatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s%(report_fields)s")
    )
    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(level.upper())

    # Logo and Pinata calls would otherwise log every request at INFO.
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(max(root_logger.level, logging.WARNING))
    return handler
