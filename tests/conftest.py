from __future__ import annotations

from io import BytesIO

from PIL import Image
import pytest

from medreport.core.report_input import DiagnosticFindings, IssuerProfile, ReportInput


def make_png_bytes(size: tuple[int, int] = (64, 32)) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", size, (200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


def make_report(**diagnostics_overrides) -> ReportInput:
    diagnostics = {
        "summary": "Acute viral upper respiratory infection, likely self-limiting.",
        "critical_findings": (),
        "recommended_tests": ("CBC",),
        "suggested_treatment": ("Rest", "Fluids"),
        "urgency": "Low",
    }
    diagnostics.update(diagnostics_overrides)
    return ReportInput(
        issuer=IssuerProfile(
            name="Asha Verma",
            specialization="General Medicine",
            hospital="City Care Hospital",
            email="asha.verma@example.org",
        ),
        subject_identifier="PAT-1042",
        report_title="URI follow-up",
        report_date="2026-10-19",
        diagnostics=DiagnosticFindings(**diagnostics),
    )


@pytest.fixture
def png_bytes() -> bytes:
    return make_png_bytes()


@pytest.fixture
def sample_report() -> ReportInput:
    return make_report()


@pytest.fixture
def report_factory():
    return make_report
