"""Shared data structures used across modules."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from pydantic import BaseModel, Field


@dataclass(frozen=True, slots=True)
class HeadingRecord:
    level: int
    text: str
    issues: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    """Headings in document order plus the page-level findings."""

    headings: tuple[HeadingRecord, ...]
    summary: tuple[str, ...]


class HeadingOut(BaseModel):
    level: int = Field(ge=1, le=6)
    text: str
    issues: List[str] = Field(default_factory=list)


class AnalysisOut(BaseModel):
    url: str
    headings: List[HeadingOut]
    summary: List[str]
    report: str

    @classmethod
    def from_result(cls, url: str, result: AnalysisResult, report: str) -> "AnalysisOut":
        return cls(
            url=url,
            headings=[
                HeadingOut(level=h.level, text=h.text, issues=list(h.issues)) for h in result.headings
            ],
            summary=list(result.summary),
            report=report,
        )
