from __future__ import annotations

from reportlab.pdfbase import pdfmetrics

from medreport.core.text_wrap import string_width_measure, wrap_text


def _fixed_width(text: str, size: float) -> float:
    return len(text) * size * 0.5


SAMPLE = (
    "Patient presenting with acute viral upper respiratory infection symptoms, "
    "likely self-limiting; follow up if fever persists beyond five days."
)


def test_wrapped_lines_rejoin_to_original_words() -> None:
    for width in (40, 80, 150, 480):
        lines = wrap_text(SAMPLE, width, _fixed_width, 10)

        assert " ".join(lines) == " ".join(SAMPLE.split())


def test_lines_stay_narrower_than_limit() -> None:
    lines = wrap_text(SAMPLE, 120, _fixed_width, 10)

    assert len(lines) > 1
    for line in lines:
        assert _fixed_width(line, 10) < 120


def test_empty_text_yields_single_empty_line() -> None:
    assert wrap_text("", 100, _fixed_width, 11) == [""]
    assert wrap_text("   ", 100, _fixed_width, 11) == [""]


def test_overlong_token_is_kept_whole_on_its_own_line() -> None:
    lines = wrap_text("a supercalifragilistic b", 40, _fixed_width, 10)

    assert lines == ["a", "supercalifragilistic", "b"]


def test_overlong_first_token_has_no_empty_line_before_it() -> None:
    lines = wrap_text("supercalifragilistic ok", 40, _fixed_width, 10)

    assert lines == ["supercalifragilistic", "ok"]


def test_width_equal_to_limit_breaks_the_line() -> None:
    # "ab cd" is exactly 25 units wide at size 10.
    assert wrap_text("ab cd", 25, _fixed_width, 10) == ["ab", "cd"]
    assert wrap_text("ab cd", 25.5, _fixed_width, 10) == ["ab cd"]


def test_whitespace_runs_collapse_to_single_spaces() -> None:
    assert wrap_text("one\ttwo\n\nthree", 500, _fixed_width, 10) == ["one two three"]


def test_string_width_measure_uses_reportlab_metrics() -> None:
    measure = string_width_measure("Helvetica-Bold")

    assert measure("Summary:", 12) == pdfmetrics.stringWidth("Summary:", "Helvetica-Bold", 12)
    assert measure("Summary: more", 12) > measure("Summary:", 12)
