from __future__ import annotations

import dataclasses

import pytest

from medreport.core.report_input import (
    DiagnosticFindings,
    ReportValidationError,
    Urgency,
    diagnostic_findings_from_payload,
    parse_diagnostic_json,
    validate_report_input,
)


def test_validate_returns_parsed_urgency(sample_report) -> None:
    assert validate_report_input(sample_report) is Urgency.LOW


@pytest.mark.parametrize(
    ("field_path", "replacement"),
    [
        ("subject_identifier", ""),
        ("report_title", "   "),
        ("report_date", ""),
    ],
)
def test_validate_rejects_missing_top_level_fields(sample_report, field_path: str, replacement: str) -> None:
    report = dataclasses.replace(sample_report, **{field_path: replacement})

    with pytest.raises(ReportValidationError) as exc_info:
        validate_report_input(report)

    assert exc_info.value.field_name == field_path


def test_validate_rejects_missing_issuer_name(sample_report) -> None:
    report = dataclasses.replace(sample_report, issuer=dataclasses.replace(sample_report.issuer, name=""))

    with pytest.raises(ReportValidationError, match="issuer.name"):
        validate_report_input(report)


def test_validate_rejects_missing_summary(report_factory) -> None:
    with pytest.raises(ReportValidationError, match="diagnostics.summary"):
        validate_report_input(report_factory(summary=""))


def test_validate_rejects_string_instead_of_list(report_factory) -> None:
    with pytest.raises(ReportValidationError, match="recommended_tests"):
        validate_report_input(report_factory(recommended_tests="CBC"))


@pytest.mark.parametrize("field_name", ["critical_findings", "recommended_tests", "suggested_treatment"])
def test_validate_rejects_missing_list_field(report_factory, field_name: str) -> None:
    with pytest.raises(ReportValidationError) as exc_info:
        validate_report_input(report_factory(**{field_name: None}))

    assert exc_info.value.field_name == f"diagnostics.{field_name}"


def test_validate_rejects_non_string_list_item(report_factory) -> None:
    with pytest.raises(ReportValidationError) as exc_info:
        validate_report_input(report_factory(recommended_tests=("CBC", None)))

    assert exc_info.value.field_name == "diagnostics.recommended_tests"


@pytest.mark.parametrize("field_path", ["issuer", "diagnostics"])
def test_validate_rejects_missing_nested_profile(sample_report, field_path: str) -> None:
    report = dataclasses.replace(sample_report, **{field_path: None})

    with pytest.raises(ReportValidationError) as exc_info:
        validate_report_input(report)

    assert exc_info.value.field_name == field_path


def test_validate_rejects_unknown_urgency(report_factory) -> None:
    with pytest.raises(ReportValidationError, match="Unknown urgency 'Unknown'"):
        validate_report_input(report_factory(urgency="Unknown"))


def test_optional_issuer_fields_are_not_required(sample_report) -> None:
    issuer = dataclasses.replace(sample_report.issuer, hospital=None, email=None)

    assert validate_report_input(dataclasses.replace(sample_report, issuer=issuer)) is Urgency.LOW


def test_parse_diagnostic_json_strips_markdown_fence() -> None:
    text = """```json
    {
      "summary": "Stable viral illness",
      "critical_findings": [],
      "recommended_tests": ["CBC", " "],
      "suggested_treatment": ["Rest", "Fluids"],
      "urgency": "Medium"
    }
    ```"""

    findings = parse_diagnostic_json(text)

    assert findings == DiagnosticFindings(
        summary="Stable viral illness",
        urgency=Urgency.MEDIUM,
        critical_findings=(),
        recommended_tests=("CBC",),
        suggested_treatment=("Rest", "Fluids"),
    )


def test_parse_diagnostic_json_rejects_invalid_json() -> None:
    with pytest.raises(ReportValidationError, match="not valid JSON"):
        parse_diagnostic_json("Here is your summary: {")


def test_parse_diagnostic_json_rejects_non_object() -> None:
    with pytest.raises(ReportValidationError, match="JSON object"):
        parse_diagnostic_json('["summary"]')


@pytest.mark.parametrize(
    ("payload", "field_name"),
    [
        ({"critical_findings": [], "recommended_tests": [], "suggested_treatment": [], "urgency": "Low"}, "summary"),
        ({"summary": "x", "critical_findings": "none", "recommended_tests": [], "suggested_treatment": [], "urgency": "Low"}, "critical_findings"),
        ({"summary": "x", "critical_findings": [None], "recommended_tests": [], "suggested_treatment": [], "urgency": "Low"}, "critical_findings"),
        ({"summary": "x", "critical_findings": [], "recommended_tests": [], "suggested_treatment": []}, "urgency"),
        ({"summary": "x", "critical_findings": [], "recommended_tests": [], "suggested_treatment": [], "urgency": "Soon"}, "urgency"),
    ],
)
def test_payload_validation_reports_failing_field(payload: dict, field_name: str) -> None:
    with pytest.raises(ReportValidationError) as exc_info:
        diagnostic_findings_from_payload(payload)

    assert exc_info.value.field_name == field_name
