import io
import logging

import pytest

from medreport.core.logging import ReportFieldsFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("medreport.core.pdf_service", logging.INFO, __file__, 10, "report_pdf_composed", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_puts_report_fields_first() -> None:
    formatter = ReportFieldsFormatter("%(levelname)s | %(message)s%(report_fields)s")

    line = formatter.format(
        _record(url="https://logo.example", size_bytes=1200, report_filename="Medical_Report_PAT-1.pdf")
    )

    assert line == (
        "INFO | report_pdf_composed | report_filename=Medical_Report_PAT-1.pdf "
        "size_bytes=1200 url=https://logo.example"
    )


def test_formatter_renders_cursor_floats_compactly() -> None:
    formatter = ReportFieldsFormatter("%(message)s%(report_fields)s")

    line = formatter.format(_record(cursor_y=-35.0, floor_y=140.0, subject_identifier="PAT-1"))

    assert line == "report_pdf_composed | subject_identifier=PAT-1 cursor_y=-35 floor_y=140"


def test_formatter_without_extra_fields() -> None:
    formatter = ReportFieldsFormatter("%(levelname)s | %(message)s%(report_fields)s")

    assert formatter.format(_record()) == "INFO | report_pdf_composed"


@pytest.fixture
def restore_root_logger():
    root_logger = logging.getLogger()
    handlers, level = list(root_logger.handlers), root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


def test_setup_logging_installs_single_formatted_handler(restore_root_logger) -> None:
    stream = io.StringIO()

    handler = setup_logging("info", stream=stream)
    logging.getLogger("medreport.core.report_service").info(
        "report_uploaded", extra={"content_identifier": "QmReportHash"}
    )

    assert logging.getLogger().handlers == [handler]
    assert logging.getLogger("httpx").level == logging.WARNING
    assert stream.getvalue().rstrip().endswith(
        "| INFO | medreport.core.report_service | report_uploaded | content_identifier=QmReportHash"
    )
