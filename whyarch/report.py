"""The explanation report for a query target and its terminal and JSON renderings."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from whyarch.target import QueryKind, QueryTarget

__all__ = [
    "RiskLevel",
    "ConfidenceLevel",
    "ReportMode",
    "WhyReport",
    "format_why_report",
    "format_target_label",
    "infer_language",
    "parse_synth_risk",
]

_LANGUAGES = {
    ".rs": "rust",
    ".js": "javascript",
    ".ts": "typescript",
    ".py": "python",
}


class RiskLevel(Enum):
    """Heuristic or synthesized risk of changing a target."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    def __str__(self) -> str:
        return self.value


class ConfidenceLevel(Enum):
    """How strongly the evidence supports a report."""

    LOW = "low"
    MEDIUM = "medium"
    MEDIUM_HIGH = "medium-high"
    HIGH = "high"

    def __str__(self) -> str:
        return self.value


class ReportMode(Enum):
    """Whether a report came from an LLM or from heuristics alone."""

    SYNTHESIZED = "synthesized"
    HEURISTIC = "heuristic"

    def __str__(self) -> str:
        return self.value


@dataclass
class WhyReport:
    """Why a target exists, what supports that, and how risky changing it is."""

    summary: str
    risk_level: RiskLevel
    risk_summary: str
    change_guidance: str
    confidence: ConfidenceLevel
    mode: ReportMode
    evidence: list[str] = field(default_factory=list)
    inference: list[str] = field(default_factory=list)
    unknowns: list[str] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)
    cost_usd: float | None = None

    def to_json(self) -> str:
        """Serialize the report as pretty-printed JSON."""
        payload = {
            "summary": self.summary,
            "evidence": list(self.evidence),
            "inference": list(self.inference),
            "unknowns": list(self.unknowns),
            "risk_level": self.risk_level.value,
            "risk_summary": self.risk_summary,
            "change_guidance": self.change_guidance,
            "confidence": self.confidence.value,
            "mode": self.mode.value,
            "notes": list(self.notes),
            "cost_usd": self.cost_usd,
        }
        return json.dumps(payload, indent=2, ensure_ascii=False)


def _section(title: str, items: list[str]) -> list[str]:
    if not items:
        return []
    return [title, *(f"  - {item}" for item in items), ""]


def format_why_report(target: str, report: WhyReport, cached: bool) -> str:
    """Render a report for the terminal."""
    lines = [f"why: {target}", ""]
    if cached:
        lines += ["[cached]", ""]

    lines += ["Summary", report.summary, ""]
    lines += [
        f"Risk: {report.risk_level.value} ({report.confidence.value})",
        report.risk_summary,
        report.change_guidance,
        "",
    ]

    lines += _section("Evidence", report.evidence)
    lines += _section("Inference", report.inference)
    lines += _section("Unknowns", report.unknowns)
    lines += _section("Notes", report.notes)

    if report.cost_usd is not None:
        lines.append(f"Estimated cost: ~${report.cost_usd:.4f}")

    return "\n".join(lines)


def format_target_label(target: QueryTarget) -> str:
    """Short human label for a query target, such as ``src/a.rs:42`` or ``src/a.rs:10-20``."""
    path = str(target.path)
    start = target.start_line or 0
    end = target.end_line or 0
    if target.query_kind is QueryKind.LINE:
        return f"{path}:{start}"
    if target.query_kind is QueryKind.RANGE:
        return f"{path}:{start}-{end}"
    return f"{path}:{target.symbol or 'symbol'}"


def infer_language(path: str | os.PathLike[str]) -> str:
    """Guess the source language from a file extension."""
    return _LANGUAGES.get(Path(path).suffix, "unknown")


def parse_synth_risk(value: str) -> RiskLevel:
    """Map a heuristic risk label to a risk level, defaulting to LOW."""
    if value == "HIGH":
        return RiskLevel.HIGH
    if value == "MEDIUM":
        return RiskLevel.MEDIUM
    return RiskLevel.LOW