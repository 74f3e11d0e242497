#!/usr/bin/env python3
"""Render a sample medical report to disk, optionally uploading it.

    python scripts/render_sample_report.py --output-dir storage/samples --no-logo
"""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from medreport.core.config import settings
from medreport.core.logging import setup_logging
from medreport.core.logo import LogoLoader
from medreport.core.report_input import (
    DiagnosticFindings,
    IssuerProfile,
    ReportInput,
    ReportValidationError,
)
from medreport.core.report_service import ReportService
from medreport.core.storage import LocalReportStorage, ReportStorageError


def build_sample_report(subject_identifier: str, urgency: str) -> ReportInput:
    return ReportInput(
        issuer=IssuerProfile(
            name="Asha Verma",
            specialization="General Medicine",
            hospital="City Care Hospital",
            email="asha.verma@example.org",
        ),
        subject_identifier=subject_identifier,
        report_title="Upper respiratory infection follow-up",
        report_date="2026-10-19",
        diagnostics=DiagnosticFindings(
            summary=(
                "Patient presenting with acute viral upper respiratory infection (URI) symptoms, "
                "likely self-limiting."
            ),
            critical_findings=(),
            recommended_tests=(
                "Rapid antigen tests for Influenza A/B, RSV, and COVID-19 (if not already performed)",
                "Complete Blood Count (CBC) with differential",
            ),
            suggested_treatment=(
                "Symptomatic relief: antipyretics for fever and body aches",
                "Adequate hydration with clear fluids",
                "Rest",
            ),
            urgency=urgency,
        ),
    )


async def _run(args: argparse.Namespace) -> int:
    report = build_sample_report(args.subject, args.urgency)
    storage = None if args.upload else LocalReportStorage(Path(args.output_dir) / "uploads")
    service = ReportService(
        storage=storage,
        logo_loader=LogoLoader(url="" if args.no_logo else None),
    )

    try:
        document = await service.compose(report)
        path = document.write_to(Path(args.output_dir))
        print(f"[OK] report written: {path}")

        if args.upload:
            content_id = await service.upload(document)
            print(f"[OK] uploaded via {settings.storage_backend}: {content_id}")
    finally:
        service.close()
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--output-dir", default="storage/samples", help="Directory for the rendered PDF")
    parser.add_argument("--subject", default="PAT-0001", help="Patient identifier printed on the report")
    parser.add_argument("--urgency", default="Low", help="Low, Medium or High")
    parser.add_argument("--no-logo", action="store_true", help="Skip the logo download")
    parser.add_argument("--upload", action="store_true", help="Upload with the configured storage backend")
    args = parser.parse_args(argv)

    setup_logging(settings.log_level)
    try:
        return asyncio.run(_run(args))
    except ReportValidationError as exc:
        print(f"[ERROR] invalid report: {exc}")
        return 2
    except ReportStorageError as exc:
        print(f"[ERROR] upload failed: {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
