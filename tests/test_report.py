import re

from heading_analyzer.headings import analyze_html
from heading_analyzer.report import display_text, export_filename, format_report, summary_severity
from heading_analyzer.schemas import AnalysisResult, HeadingRecord

HEADING_LINE = re.compile(r"^(?P<indent> *)H(?P<level>[1-6]): (?P<text>.*)$")


def _sample_result() -> AnalysisResult:
    return AnalysisResult(
        headings=(
            HeadingRecord(level=1, text="Title"),
            HeadingRecord(level=3, text="Sub", issues=("Skipped heading level: H1 followed by H3.",)),
            HeadingRecord(level=2, text="Other"),
        ),
        summary=(
            "Good: Exactly one H1 tag found.",
            "Issue: Heading levels are skipped (e.g., H1 followed directly by H3).",
        ),
    )


def test_format_report_layout():
    report = format_report("example.com", _sample_result())

    assert report == (
        "Heading Structure Analysis for: example.com\n"
        "========================================\n"
        "\n"
        "Summary:\n"
        "- Good: Exactly one H1 tag found.\n"
        "- Issue: Heading levels are skipped (e.g., H1 followed directly by H3).\n"
        "\n"
        "Headings Found:\n"
        "H1: Title\n"
        "    H3: Sub\n"
        "      -> Issue: Skipped heading level: H1 followed by H3.\n"
        "  H2: Other\n"
        "\n"
        "========================================\n"
    )


def test_format_report_without_headings():
    result = AnalysisResult(headings=(), summary=("Error: No H1 tag found. Every page should have one H1.",))
    report = format_report("https://example.com", result)

    assert "Headings Found:\n\n====" in report


def test_report_heading_lines_round_trip():
    result = analyze_html(
        "<h2>Intro</h2><h1>Main title</h1><h2>Section</h2><h5>Deep</h5><h3>Back up</h3><h6></h6>"
    )
    report = format_report("https://example.com/page", result)

    body = report.split("Headings Found:\n", 1)[1]
    parsed = []
    for line in body.splitlines():
        match = HEADING_LINE.match(line)
        if match:
            level = int(match.group("level"))
            assert len(match.group("indent")) == 2 * (level - 1)
            parsed.append((level, match.group("text")))

    assert parsed == [(h.level, h.text) for h in result.headings]


def test_export_filename_replaces_non_alphanumerics():
    assert export_filename("https://Example.com/a-b?q=1") == "heading_analysis_https___Example_com_a_b_q_1.txt"


def test_summary_severity():
    assert summary_severity("Error: No H1 tag found. Every page should have one H1.") == "error"
    assert summary_severity("Issue: Heading levels are skipped (e.g., H1 followed directly by H3).") == "error"
    assert summary_severity("Warning: Multiple H1 tags found (2).") == "warning"
    assert summary_severity("Good: Exactly one H1 tag found.") == "good"
    assert summary_severity("Something else") == ""


def test_display_text_placeholder():
    assert display_text("") == "(empty)"
    assert display_text("Title") == "Title"


def test_export_filename_replaces_non_ascii_letters():
    assert export_filename("https://exampleſ.com/K") == "heading_analysis_https___example__com__.txt"
    assert export_filename("bücher.de") == "heading_analysis_b_cher_de.txt"
