from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

from reportlab.pdfgen import canvas

from medreport.core.report_input import Urgency
from medreport.core.report_theme import RGB, ReportTheme, resolve_urgency_style
from medreport.core.text_wrap import string_width_measure, wrap_text


ItemPrefix = Callable[[int, str], str]


@dataclass(frozen=True)
class ReportFonts:
    body: str = "Helvetica"
    bold: str = "Helvetica-Bold"
    italic: str = "Helvetica-Oblique"
    title: str = "Times-BoldItalic"


def bullet_prefix(_index: int, item: str) -> str:
    return f"• {item}"


def ordinal_prefix(index: int, item: str) -> str:
    return f"{index}. {item}"


class SectionComposer:
    """Cursor-consuming drawing blocks for the report body.

    Every ``draw_*`` method draws at the ``y`` it is given and returns the
    ``y`` where the next block starts. The composer keeps no cursor of its own.
    """

    def __init__(self, pdf: canvas.Canvas, fonts: ReportFonts, theme: ReportTheme) -> None:
        self._pdf = pdf
        self._fonts = fonts
        self._theme = theme
        self._measure_body = string_width_measure(fonts.body)

    def draw_section_header(self, title: str, y: float) -> float:
        theme = self._theme
        palette = theme.palette
        page_width = theme.page_size[0]
        banner_x = theme.section_header_x

        self._pdf.saveState()
        self._pdf.setFillColorRGB(*palette.secondary_rgb)
        self._pdf.setStrokeColorRGB(*palette.primary_rgb)
        self._pdf.setLineWidth(0.8)
        self._pdf.roundRect(
            banner_x,
            y - 25,
            page_width - banner_x * 2,
            theme.section_header_height,
            5,
            stroke=1,
            fill=1,
        )
        self._pdf.restoreState()

        self._draw_line(
            title,
            banner_x + 15,
            y - 15,
            font=self._fonts.bold,
            size=theme.typography.section_title_size,
            color=palette.primary_rgb,
        )
        return y - theme.section_header_advance

    def draw_label_value(
        self,
        label: str,
        value: str,
        x: float,
        y: float,
        label_width: float | None = None,
    ) -> float:
        typography = self._theme.typography
        palette = self._theme.palette
        offset = self._theme.label_width if label_width is None else label_width
        self._draw_line(label, x, y, font=self._fonts.bold, size=typography.body_size, color=palette.primary_rgb)
        self._draw_line(value, x + offset, y, font=self._fonts.body, size=typography.body_size, color=palette.text_rgb)
        return y - typography.label_line_height

    def draw_paragraph(
        self,
        text: str,
        x: float,
        y: float,
        width_limit: float,
        color: RGB | None = None,
    ) -> float:
        typography = self._theme.typography
        text_color = color or self._theme.palette.text_rgb
        for line in wrap_text(text, width_limit, self._measure_body, typography.body_size):
            self._draw_line(line, x, y, font=self._fonts.body, size=typography.body_size, color=text_color)
            y -= typography.line_height
        return y

    def draw_subheading(self, text: str, x: float, y: float, color: RGB | None = None) -> float:
        typography = self._theme.typography
        self._draw_line(
            text,
            x,
            y,
            font=self._fonts.bold,
            size=typography.subheading_size,
            color=color or self._theme.palette.primary_rgb,
        )
        return y - typography.line_height

    def draw_conditional_list(
        self,
        title: str,
        items: Sequence[str],
        x: float,
        y: float,
        width_limit: float,
        item_prefix: ItemPrefix,
        color: RGB | None = None,
    ) -> float:
        if not items:
            return y
        y = self.draw_subheading(title, x, y, color=color)
        item_x = x + self._theme.list_indent
        for index, item in enumerate(items, start=1):
            y = self.draw_paragraph(item_prefix(index, item), item_x, y, width_limit, color=color)
        return y - self._theme.block_gap

    def draw_urgency(self, urgency: Urgency | str, x: float, y: float) -> float:
        style = resolve_urgency_style(urgency)
        label = Urgency.parse(urgency).value
        typography = self._theme.typography
        label_offset = self._theme.label_width

        self._draw_line(
            "Urgency Level:",
            x,
            y,
            font=self._fonts.bold,
            size=typography.subheading_size,
            color=self._theme.palette.primary_rgb,
        )
        self._draw_line(
            label,
            x + label_offset,
            y,
            font=self._fonts.bold,
            size=typography.subheading_size,
            color=style.fill_rgb,
        )
        self._pdf.saveState()
        self._pdf.setFillColorRGB(*style.fill_rgb)
        self._pdf.circle(x + label_offset - 10, y + 5, style.indicator.radius, stroke=0, fill=1)
        self._pdf.restoreState()
        return y - self._theme.urgency_advance

    def _draw_line(self, text: str, x: float, y: float, *, font: str, size: float, color: RGB) -> None:
        self._pdf.setFillColorRGB(*color)
        self._pdf.setFont(font, size)
        self._pdf.drawString(x, y, text)
