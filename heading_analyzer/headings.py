"""Heading hierarchy validation for parsed HTML documents."""
from __future__ import annotations

import logging

from bs4 import BeautifulSoup
from bs4.element import (
    CData,
    NavigableString,
    RubyParenthesisString,
    RubyTextString,
    Script,
    Stylesheet,
    TemplateString,
)

from .schemas import AnalysisResult, HeadingRecord
from .scrape import parse_html

logger = logging.getLogger(__name__)

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]
# Same strings as DOM textContent: script, style, template and ruby text count, comments do not.
TEXT_CONTENT_TYPES = (
    NavigableString,
    CData,
    Script,
    Stylesheet,
    TemplateString,
    RubyTextString,
    RubyParenthesisString,
)

NO_H1 = "Error: No H1 tag found. Every page should have one H1."
ONE_H1 = "Good: Exactly one H1 tag found."
MULTIPLE_H1 = "Warning: Multiple H1 tags found ({count}). Best practice is to have only one H1 per page."
SKIPPED_LEVELS = "Issue: Heading levels are skipped (e.g., H1 followed directly by H3)."
LOGICAL_SEQUENCE = "Good: Heading levels follow a logical sequence."
SKIPPED_ISSUE = "Skipped heading level: H{previous} followed by H{level}."


def analyze(document: BeautifulSoup) -> AnalysisResult:
    """Scan every H1-H6 element in document order.

    Only increases of more than one level are reported, and only against the
    immediately preceding heading. The first heading is never flagged, so a
    page opening with an H3 passes the sequence check. Decreases of any size
    are accepted.
    """

    headings: list[HeadingRecord] = []
    last_level = 0
    h1_count = 0

    for index, element in enumerate(document.find_all(HEADING_TAGS)):
        level = int(element.name[1])
        text = element.get_text(types=TEXT_CONTENT_TYPES).strip()
        issues: list[str] = []

        if level == 1:
            h1_count += 1

        if index > 0 and level > last_level + 1:
            issues.append(SKIPPED_ISSUE.format(previous=last_level, level=level))

        headings.append(HeadingRecord(level=level, text=text, issues=tuple(issues)))
        last_level = level

    summary: list[str] = []
    if h1_count == 0:
        summary.append(NO_H1)
    elif h1_count > 1:
        summary.append(MULTIPLE_H1.format(count=h1_count))
    else:
        summary.append(ONE_H1)

    skipped = any(issue.startswith("Skipped") for h in headings for issue in h.issues)
    summary.append(SKIPPED_LEVELS if skipped else LOGICAL_SEQUENCE)

    logger.debug("Analysed %d headings (%d H1)", len(headings), h1_count)
    return AnalysisResult(headings=tuple(headings), summary=tuple(summary))


def analyze_html(html: str) -> AnalysisResult:
    return analyze(parse_html(html))
