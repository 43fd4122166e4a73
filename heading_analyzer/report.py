"""Plain-text rendering of analysis results for copy and download."""
from __future__ import annotations

import re

from .schemas import AnalysisResult

RULE = "=" * 40
INDENT = "  "
EMPTY_PLACEHOLDER = "(empty)"

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9]")


def format_report(url: str, result: AnalysisResult) -> str:
    lines = [f"Heading Structure Analysis for: {url}", RULE, "", "Summary:"]
    lines.extend(f"- {item}" for item in result.summary)
    lines.extend(["", "Headings Found:"])
    for heading in result.headings:
        indent = INDENT * (heading.level - 1)
        lines.append(f"{indent}H{heading.level}: {heading.text}")
        for issue in heading.issues:
            lines.append(f"{indent}  -> Issue: {issue}")
    lines.extend(["", RULE])
    return "\n".join(lines) + "\n"


def export_filename(url: str) -> str:
    return f"heading_analysis_{_UNSAFE_FILENAME_CHARS.sub('_', url)}.txt"


def summary_severity(item: str) -> str:
    """Classify a summary line for styling on the results page."""
    if item.startswith("Error:") or item.startswith("Issue:"):
        return "error"
    if item.startswith("Warning:"):
        return "warning"
    if item.startswith("Good:"):
        return "good"
    return ""


def display_text(text: str) -> str:
    return text or EMPTY_PLACEHOLDER
