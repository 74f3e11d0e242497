from __future__ import annotations

from typing import Callable

from reportlab.pdfbase import pdfmetrics


Measure = Callable[[str, float], float]


def string_width_measure(font_name: str) -> Measure:
    """Bind reportlab glyph metrics for *font_name* to a ``measure(text, size)`` callable."""

    def measure(text: str, font_size: float) -> float:
        return pdfmetrics.stringWidth(text, font_name, font_size)

    return measure


def wrap_text(text: str, max_width: float, measure: Measure, font_size: float) -> list[str]:
    """Greedy line breaking of *text* into lines narrower than *max_width*.

    A token that is wider than *max_width* on its own is kept whole on a line
    of its own; words are never split. Empty input yields a single empty line.
    """
    lines: list[str] = []
    current = ""
    for word in text.split():
        candidate = word if not current else f"{current} {word}"
        if measure(candidate, font_size) < max_width:
            current = candidate
            continue
        if current:
            lines.append(current)
        current = word
    lines.append(current)
    return lines
