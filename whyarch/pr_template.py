"""Reviewer-friendly pull request templates built from the staged diff."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

__all__ = ["StagedChange", "StagedFile", "PrTemplateReport", "render_pr_template_markdown"]


class StagedChange(Enum):
    """How a staged file differs from HEAD."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class StagedFile:
    """One file in the staged diff and the kind of change made to it."""

    path: Path
    change: StagedChange

    def __post_init__(self) -> None:
        if not isinstance(self.path, Path):
            object.__setattr__(self, "path", Path(os.fspath(self.path)))


@dataclass
class PrTemplateReport:
    """The pieces of a pull request description."""

    title_suggestion: str
    summary: list[str] = field(default_factory=list)
    risk_notes: list[str] = field(default_factory=list)
    test_plan: list[str] = field(default_factory=list)
    staged_files: list[StagedFile] = field(default_factory=list)


def _bullets(title: str, items: list[str]) -> list[str]:
    return [title, *(f"- {item}" for item in items), ""]


def render_pr_template_markdown(report: PrTemplateReport) -> str:
    """Render the report as a Markdown pull request description."""
    lines = [f"# {report.title_suggestion}", ""]
    lines += _bullets("## Summary", report.summary)
    lines += _bullets("## Risk notes", report.risk_notes)
    lines += _bullets("## Test plan", report.test_plan)
    lines += _bullets(
        "## Staged files",
        [f"{staged.path} ({staged.change.value})" for staged in report.staged_files],
    )
    return "\n".join(lines)