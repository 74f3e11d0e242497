from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import json
import re
from typing import Any


class ReportValidationError(ValueError):
    def __init__(self, message: str, *, field_name: str | None = None) -> None:
        super().__init__(message)
        self.field_name = field_name


class Urgency(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @classmethod
    def parse(cls, value: Urgency | str) -> Urgency:
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(item.value for item in cls)
            raise ReportValidationError(
                f"Unknown urgency {value!r}; expected one of: {allowed}",
                field_name="urgency",
            ) from None


@dataclass(frozen=True, slots=True)
class IssuerProfile:
    name: str
    specialization: str
    hospital: str | None = None
    email: str | None = None


@dataclass(frozen=True, slots=True)
class DiagnosticFindings:
    summary: str
    urgency: Urgency | str
    critical_findings: tuple[str, ...] = ()
    recommended_tests: tuple[str, ...] = ()
    suggested_treatment: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ReportInput:
    issuer: IssuerProfile
    subject_identifier: str
    report_title: str
    report_date: str
    diagnostics: DiagnosticFindings
    description: str = field(default="", compare=False)


_LIST_FIELDS = ("critical_findings", "recommended_tests", "suggested_treatment")

_REQUIRED_TEXT_FIELDS = (
    ("issuer.name", lambda report: report.issuer.name),
    ("issuer.specialization", lambda report: report.issuer.specialization),
    ("subject_identifier", lambda report: report.subject_identifier),
    ("report_title", lambda report: report.report_title),
    ("report_date", lambda report: report.report_date),
    ("diagnostics.summary", lambda report: report.diagnostics.summary),
)


def validate_report_input(report: ReportInput) -> Urgency:
    """Check the input contract and return the parsed urgency.

    Raises ``ReportValidationError`` on the first missing field.
    """
    if not isinstance(report.issuer, IssuerProfile):
        raise ReportValidationError("Missing required field issuer", field_name="issuer")
    if not isinstance(report.diagnostics, DiagnosticFindings):
        raise ReportValidationError("Missing required field diagnostics", field_name="diagnostics")

    for field_name, getter in _REQUIRED_TEXT_FIELDS:
        value = getter(report)
        if not isinstance(value, str) or not value.strip():
            raise ReportValidationError(f"Missing required field {field_name}", field_name=field_name)

    diagnostics = report.diagnostics
    for field_name in _LIST_FIELDS:
        items = getattr(diagnostics, field_name)
        if not isinstance(items, (list, tuple)) or not all(isinstance(item, str) for item in items):
            raise ReportValidationError(
                f"diagnostics.{field_name} must be a sequence of strings",
                field_name=f"diagnostics.{field_name}",
            )
    return Urgency.parse(diagnostics.urgency)


_JSON_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def parse_diagnostic_json(text: str) -> DiagnosticFindings:
    """Parse the analyzer's JSON answer, tolerating a markdown code fence around it."""
    cleaned = _JSON_FENCE_RE.sub("", (text or "").strip())
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ReportValidationError(f"Diagnostic payload is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ReportValidationError("Diagnostic payload must be a JSON object")
    return diagnostic_findings_from_payload(payload)


def diagnostic_findings_from_payload(payload: dict[str, Any]) -> DiagnosticFindings:
    summary = payload.get("summary")
    if not isinstance(summary, str) or not summary.strip():
        raise ReportValidationError("Diagnostic payload has no summary", field_name="summary")

    lists: dict[str, tuple[str, ...]] = {}
    for name in _LIST_FIELDS:
        raw = payload.get(name)
        if not isinstance(raw, list):
            raise ReportValidationError(f"Diagnostic payload field {name} must be a list", field_name=name)
        if not all(isinstance(item, str) for item in raw):
            raise ReportValidationError(
                f"Diagnostic payload field {name} must contain only strings",
                field_name=name,
            )
        lists[name] = tuple(item.strip() for item in raw if item.strip())

    urgency = payload.get("urgency")
    if not urgency:
        raise ReportValidationError("Diagnostic payload has no urgency", field_name="urgency")

    return DiagnosticFindings(
        summary=summary.strip(),
        urgency=Urgency.parse(str(urgency).strip()),
        **lists,
    )
