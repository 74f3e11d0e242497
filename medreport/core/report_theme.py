from __future__ import annotations

from dataclasses import dataclass

from medreport.core.report_input import Urgency


RGB = tuple[float, float, float]


@dataclass(frozen=True)
class ReportPalette:
    primary_rgb: RGB
    secondary_rgb: RGB
    accent_rgb: RGB
    text_rgb: RGB
    muted_rgb: RGB
    band_rgb: RGB
    band_text_rgb: RGB
    watermark_rgb: RGB


@dataclass(frozen=True)
class ReportTypography:
    title_size: int
    section_title_size: int
    subheading_size: int
    body_size: int
    line_height: int
    label_line_height: int
    brand_size: int
    signature_name_size: int
    signature_detail_size: int
    footer_size: int
    footer_small_size: int
    watermark_size: int


@dataclass(frozen=True)
class ReportTheme:
    name: str
    page_size: tuple[float, float]
    palette: ReportPalette
    typography: ReportTypography
    header_band_height: float
    footer_band_height: float
    body_top_offset: float
    section_header_x: float
    section_header_height: float
    section_header_advance: float
    section_gap: float
    block_gap: float
    content_x: float
    paragraph_x: float
    paragraph_width: float
    list_indent: float
    label_width: float
    urgency_advance: float
    signature_line_y: float
    watermark_alpha: float
    watermark_angle: float


DEFAULT_REPORT_THEME = ReportTheme(
    name="clinical-blue",
    page_size=(595.0, 842.0),
    palette=ReportPalette(
        primary_rgb=(0.05, 0.25, 0.45),
        secondary_rgb=(0.9, 0.95, 0.98),
        accent_rgb=(0.85, 0.3, 0.1),
        text_rgb=(0.2, 0.2, 0.2),
        muted_rgb=(0.65, 0.65, 0.65),
        band_rgb=(0.1, 0.4, 0.6),
        band_text_rgb=(1.0, 1.0, 1.0),
        watermark_rgb=(0.9, 0.9, 0.9),
    ),
    typography=ReportTypography(
        title_size=32,
        section_title_size=16,
        subheading_size=12,
        body_size=11,
        line_height=15,
        label_line_height=16,
        brand_size=14,
        signature_name_size=12,
        signature_detail_size=10,
        footer_size=10,
        footer_small_size=9,
        watermark_size=48,
    ),
    header_band_height=90,
    footer_band_height=60,
    body_top_offset=120,
    section_header_x=30,
    section_header_height=35,
    section_header_advance=50,
    section_gap=20,
    block_gap=10,
    content_x=60,
    paragraph_x=70,
    paragraph_width=480,
    list_indent=10,
    label_width=100,
    urgency_advance=30,
    signature_line_y=120,
    watermark_alpha=0.1,
    watermark_angle=45,
)


@dataclass(frozen=True)
class UrgencyIndicator:
    shape: str
    radius: float


@dataclass(frozen=True)
class UrgencyStyle:
    fill_rgb: RGB
    indicator: UrgencyIndicator


_FILLED_DOT = UrgencyIndicator(shape="circle", radius=4)

URGENCY_STYLES: dict[Urgency, UrgencyStyle] = {
    Urgency.HIGH: UrgencyStyle(fill_rgb=(0.8, 0.1, 0.1), indicator=_FILLED_DOT),
    Urgency.MEDIUM: UrgencyStyle(fill_rgb=(0.9, 0.6, 0.1), indicator=_FILLED_DOT),
    Urgency.LOW: UrgencyStyle(fill_rgb=(0.2, 0.6, 0.2), indicator=_FILLED_DOT),
}

_missing_styles = set(Urgency) - set(URGENCY_STYLES)
if _missing_styles:
    raise RuntimeError(f"URGENCY_STYLES is missing: {sorted(item.value for item in _missing_styles)}")


def resolve_urgency_style(urgency: Urgency | str) -> UrgencyStyle:
    return URGENCY_STYLES[Urgency.parse(urgency)]
