from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from io import BytesIO
import logging
from pathlib import Path
import re

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from medreport.core.config import settings
from medreport.core.layout import LayoutState
from medreport.core.logo import EmbeddedImage, LogoLoader
from medreport.core.report_input import (
    DiagnosticFindings,
    IssuerProfile,
    ReportInput,
    Urgency,
    validate_report_input,
)
from medreport.core.report_theme import DEFAULT_REPORT_THEME, ReportTheme
from medreport.core.section_composer import (
    ReportFonts,
    SectionComposer,
    bullet_prefix,
    ordinal_prefix,
)


_FONT_REGULAR_NAME = "MedreportRegular"
_FONT_BOLD_NAME = "MedreportBold"
_FONT_ITALIC_NAME = "MedreportItalic"

_FONT_FAMILY: ReportFonts | None = None

_NOT_AVAILABLE = "N/A"
_FILENAME_UNSAFE_RE = re.compile(r"[^\w.-]+")


def _register_font_family() -> ReportFonts:
    global _FONT_FAMILY
    if _FONT_FAMILY is not None:
        return _FONT_FAMILY

    logger = logging.getLogger(__name__)
    defaults = ReportFonts()
    family = ReportFonts(
        body=_register_font_variant(
            font_name=_FONT_REGULAR_NAME,
            path=settings.pdf_font_regular_path,
            fallback=defaults.body,
            logger=logger,
        ),
        bold=_register_font_variant(
            font_name=_FONT_BOLD_NAME,
            path=settings.pdf_font_bold_path,
            fallback=defaults.bold,
            logger=logger,
        ),
        italic=_register_font_variant(
            font_name=_FONT_ITALIC_NAME,
            path=settings.pdf_font_italic_path,
            fallback=defaults.italic,
            logger=logger,
        ),
        title=defaults.title,
    )
    _FONT_FAMILY = family
    return family


def _register_font_variant(
    *,
    font_name: str,
    path: str | None,
    fallback: str,
    logger: logging.Logger,
) -> str:
    if not path:
        return fallback
    font_path = Path(path)
    if not font_path.exists():
        logger.warning(
            "pdf_font_path_missing",
            extra={"font_name": font_name, "font_path": str(font_path), "fallback": fallback},
        )
        return fallback
    try:
        pdfmetrics.registerFont(TTFont(font_name, str(font_path)))
    except Exception as exc:
        logger.warning(
            "pdf_font_register_failed",
            extra={"font_name": font_name, "font_path": str(font_path), "error": str(exc)},
        )
        return fallback
    return font_name


def build_report_filename(report_kind: str, subject_identifier: str, composed_at: datetime) -> str:
    """``<kind>_<subject>_<UTC ISO timestamp with : . - replaced by _>.pdf``."""
    moment = composed_at.astimezone(timezone.utc)
    iso = f"{moment.strftime('%Y-%m-%dT%H:%M:%S')}.{moment.microsecond // 1000:03d}Z"
    timestamp = re.sub(r"[:.\-]", "_", iso)
    subject = _FILENAME_UNSAFE_RE.sub("_", subject_identifier.strip())
    return f"{report_kind}_{subject}_{timestamp}.pdf"


@dataclass(frozen=True)
class ComposedDocument:
    content: bytes
    filename: str
    composed_at: datetime

    @property
    def content_type(self) -> str:
        return "application/pdf"

    def write_to(self, directory: Path) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / self.filename
        path.write_bytes(self.content)
        return path


class ReportPdfRenderer:
    def __init__(self, theme: ReportTheme | None = None, logger: logging.Logger | None = None) -> None:
        self._theme = theme or DEFAULT_REPORT_THEME
        self._logger = logger or logging.getLogger(__name__)

    def render(
        self,
        report: ReportInput,
        *,
        logo: EmbeddedImage | None = None,
        composed_at: datetime | None = None,
    ) -> ComposedDocument:
        urgency = validate_report_input(report)
        composed_at = composed_at or datetime.now(timezone.utc)
        fonts = _register_font_family()

        buffer = BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=self._theme.page_size)
        pdf.setTitle(f"{settings.report_title}: {report.report_title}")
        pdf.setAuthor(f"Dr. {report.issuer.name}")
        pdf.setCreator(settings.brand_name)

        self._draw_document(pdf, report, urgency, fonts, logo)
        pdf.save()

        document = ComposedDocument(
            content=buffer.getvalue(),
            filename=build_report_filename(settings.report_kind, report.subject_identifier, composed_at),
            composed_at=composed_at,
        )
        self._logger.info(
            "report_pdf_composed",
            extra={"report_filename": document.filename, "size_bytes": len(document.content)},
        )
        return document

    def _draw_document(
        self,
        pdf: canvas.Canvas,
        report: ReportInput,
        urgency: Urgency,
        fonts: ReportFonts,
        logo: EmbeddedImage | None,
    ) -> LayoutState:
        page_width, page_height = self._theme.page_size
        composer = SectionComposer(pdf, fonts, self._theme)

        self._draw_header_band(pdf, fonts, page_width, page_height, logo)

        state = LayoutState.start(page_width, page_height, top_offset=self._theme.body_top_offset)
        state = self._draw_issuer_section(composer, report.issuer, state)
        state = self._draw_subject_section(composer, report, state)
        state = self._draw_findings_section(composer, report.diagnostics, urgency, state)
        self._warn_on_overflow(state, report)

        self._draw_signature(pdf, fonts, report.issuer, page_width)
        self._draw_footer_band(pdf, fonts, page_width)
        self._draw_watermark(pdf, fonts, page_width, page_height)
        return state

    def _draw_header_band(
        self,
        pdf: canvas.Canvas,
        fonts: ReportFonts,
        page_width: float,
        page_height: float,
        logo: EmbeddedImage | None,
    ) -> None:
        theme = self._theme
        band_height = theme.header_band_height
        palette = theme.palette

        pdf.saveState()
        pdf.setFillColorRGB(*palette.band_rgb)
        pdf.rect(0, page_height - band_height, page_width, band_height, stroke=0, fill=1)
        pdf.restoreState()

        if not self._try_draw_logo(pdf, logo, page_width, page_height):
            pdf.setFillColorRGB(*palette.band_text_rgb)
            pdf.setFont(fonts.bold, theme.typography.brand_size)
            pdf.drawString(page_width - 150, page_height - 50, settings.brand_name)

        pdf.setFillColorRGB(*palette.band_text_rgb)
        pdf.setFont(fonts.title, theme.typography.title_size)
        pdf.drawString(40, page_height - 60, settings.report_title)

    def _try_draw_logo(
        self,
        pdf: canvas.Canvas,
        logo: EmbeddedImage | None,
        page_width: float,
        page_height: float,
    ) -> bool:
        if logo is None:
            return False
        band_height = self._theme.header_band_height
        size = logo.scale(settings.logo_scale)
        try:
            pdf.drawImage(
                logo.reader,
                page_width - size.width - 40,
                page_height - band_height / 2 - size.height / 2,
                width=size.width,
                height=size.height,
                mask="auto",
            )
        except Exception as exc:
            self._logger.warning("report_logo_draw_failed", extra={"error": str(exc)})
            return False
        return True

    def _draw_issuer_section(
        self,
        composer: SectionComposer,
        issuer: IssuerProfile,
        state: LayoutState,
    ) -> LayoutState:
        x = self._theme.content_x
        state = state.advance(composer.draw_section_header("Doctor Information", state.cursor_y))
        rows = (
            ("Name:", f"Dr. {issuer.name}"),
            ("Specialization:", issuer.specialization),
            ("Hospital:", issuer.hospital or _NOT_AVAILABLE),
            ("Email:", issuer.email or _NOT_AVAILABLE),
            ("License No:", _NOT_AVAILABLE),
        )
        for label, value in rows:
            state = state.advance(composer.draw_label_value(label, value, x, state.cursor_y))
        return state.gap(self._theme.section_gap)

    def _draw_subject_section(
        self,
        composer: SectionComposer,
        report: ReportInput,
        state: LayoutState,
    ) -> LayoutState:
        x = self._theme.content_x
        state = state.advance(composer.draw_section_header("Patient Information", state.cursor_y))
        rows = (
            ("Patient ID:", report.subject_identifier),
            ("Report Date:", report.report_date),
            ("Report Title:", report.report_title),
        )
        for label, value in rows:
            state = state.advance(composer.draw_label_value(label, value, x, state.cursor_y))
        return state.gap(self._theme.section_gap)

    def _draw_findings_section(
        self,
        composer: SectionComposer,
        diagnostics: DiagnosticFindings,
        urgency: Urgency,
        state: LayoutState,
    ) -> LayoutState:
        theme = self._theme
        x = theme.content_x
        width = theme.paragraph_width

        state = state.advance(composer.draw_section_header("Diagnostic Findings", state.cursor_y))
        state = state.advance(composer.draw_subheading("Summary:", x, state.cursor_y))
        state = state.advance(composer.draw_paragraph(diagnostics.summary, theme.paragraph_x, state.cursor_y, width))
        state = state.gap(theme.block_gap)

        state = state.advance(
            composer.draw_conditional_list(
                "Critical Findings:",
                diagnostics.critical_findings,
                x,
                state.cursor_y,
                width,
                bullet_prefix,
                color=theme.palette.accent_rgb,
            )
        )
        state = state.advance(
            composer.draw_conditional_list(
                "Recommended Tests:",
                diagnostics.recommended_tests,
                x,
                state.cursor_y,
                width,
                ordinal_prefix,
            )
        )
        state = state.advance(
            composer.draw_conditional_list(
                "Suggested Treatment:",
                diagnostics.suggested_treatment,
                x,
                state.cursor_y,
                width,
                ordinal_prefix,
            )
        )
        return state.advance(composer.draw_urgency(urgency, x, state.cursor_y))

    def _warn_on_overflow(self, state: LayoutState, report: ReportInput) -> None:
        floor_y = self._theme.signature_line_y + self._theme.section_gap
        if state.is_below(floor_y):
            self._logger.warning(
                "report_layout_overflow",
                extra={
                    "subject_identifier": report.subject_identifier,
                    "cursor_y": state.cursor_y,
                    "floor_y": floor_y,
                },
            )

    def _draw_signature(
        self,
        pdf: canvas.Canvas,
        fonts: ReportFonts,
        issuer: IssuerProfile,
        page_width: float,
    ) -> None:
        theme = self._theme
        palette = theme.palette
        typography = theme.typography
        line_y = theme.signature_line_y
        text_x = page_width - 240

        pdf.saveState()
        pdf.setStrokeColorRGB(*palette.primary_rgb)
        pdf.setLineWidth(1)
        pdf.line(page_width - 250, line_y, page_width - 70, line_y)
        pdf.restoreState()

        pdf.setFillColorRGB(*palette.primary_rgb)
        pdf.setFont(fonts.bold, typography.signature_name_size)
        pdf.drawString(text_x, line_y - 20, f"Dr. {issuer.name}")

        pdf.setFillColorRGB(*palette.muted_rgb)
        pdf.setFont(fonts.italic, typography.signature_detail_size)
        pdf.drawString(text_x, line_y - 35, issuer.specialization)
        if issuer.hospital:
            pdf.drawString(text_x, line_y - 48, issuer.hospital)

    def _draw_footer_band(self, pdf: canvas.Canvas, fonts: ReportFonts, page_width: float) -> None:
        theme = self._theme
        palette = theme.palette
        typography = theme.typography

        pdf.saveState()
        pdf.setFillColorRGB(*palette.band_rgb)
        pdf.rect(0, 0, page_width, theme.footer_band_height, stroke=0, fill=1)
        pdf.restoreState()

        pdf.setFillColorRGB(*palette.band_text_rgb)
        pdf.setFont(fonts.italic, typography.footer_size)
        pdf.drawString(40, 40, f"This is an electronically generated medical report from {settings.brand_name}.")
        pdf.setFont(fonts.italic, typography.footer_small_size)
        pdf.drawString(40, 25, f"For verification, visit {settings.verification_url}")

    def _draw_watermark(
        self,
        pdf: canvas.Canvas,
        fonts: ReportFonts,
        page_width: float,
        page_height: float,
    ) -> None:
        theme = self._theme
        pdf.saveState()
        pdf.setFillColorRGB(*theme.palette.watermark_rgb)
        pdf.setFillAlpha(theme.watermark_alpha)
        pdf.translate(page_width / 2, page_height / 2)
        pdf.rotate(theme.watermark_angle)
        pdf.setFont(fonts.title, theme.typography.watermark_size)
        pdf.drawCentredString(0, 0, "CONFIDENTIAL")
        pdf.restoreState()


async def compose_report(
    report: ReportInput,
    *,
    renderer: ReportPdfRenderer | None = None,
    logo_loader: LogoLoader | None = None,
    composed_at: datetime | None = None,
) -> ComposedDocument:
    """Validate, fetch the logo (best effort) and lay out one report."""
    validate_report_input(report)
    if logo_loader is None:
        with LogoLoader() as loader:
            logo = await asyncio.to_thread(loader.load)
    else:
        logo = await asyncio.to_thread(logo_loader.load)
    return (renderer or ReportPdfRenderer()).render(report, logo=logo, composed_at=composed_at)
