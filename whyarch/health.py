"""Repository health reports, score trends against earlier snapshots, and CI gating."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

__all__ = [
    "HealthSnapshot",
    "HealthDelta",
    "HealthReport",
    "compute_health_delta",
    "sorted_signal_entries",
    "render_health",
    "health_ci_failure",
]


@dataclass(frozen=True)
class HealthSnapshot:
    """A recorded debt score and its signal counts at a point in time."""

    timestamp: int
    debt_score: int
    details: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class HealthDelta:
    """How the debt score moved relative to the previous snapshot."""

    direction: str
    amount: int
    previous_score: int


@dataclass
class HealthReport:
    """Aggregated repository health: a debt score, its signals, trend and notes."""

    debt_score: int
    signals: dict[str, int] = field(default_factory=dict)
    delta: HealthDelta | None = None
    notes: list[str] = field(default_factory=list)


def compute_health_delta(current_score: int, previous: HealthSnapshot) -> HealthDelta:
    """Compare the current debt score with a previous snapshot."""
    amount = current_score - previous.debt_score
    if amount > 0:
        direction = "↑"
    elif amount < 0:
        direction = "↓"
    else:
        direction = "→"
    return HealthDelta(direction=direction, amount=amount, previous_score=previous.debt_score)


def sorted_signal_entries(signals: Mapping[str, int]) -> list[tuple[str, int]]:
    """Signal counts as (name, count) pairs ordered by name."""
    return sorted(signals.items(), key=lambda entry: entry[0])


def health_ci_failure(report: HealthReport, threshold: int | None) -> str | None:
    """The CI failure message when the debt score exceeds the threshold, else None."""
    if threshold is None or report.debt_score <= threshold:
        return None
    return f"health debt score {report.debt_score} exceeds CI threshold {threshold}"


def render_health(report: HealthReport, ci: int | None = None) -> str:
    """Render the health dashboard for the terminal."""
    lines = ["Repository health", "", f"Debt score: {report.debt_score}"]
    if report.delta is not None:
        delta = report.delta
        lines.append(f"Trend: {delta.direction} {delta.amount} (previous {delta.previous_score})")
    if ci is not None:
        status = "FAIL" if report.debt_score > ci else "PASS"
        lines.append(f"CI gate: {status} (threshold {ci})")
    lines += ["", "Signals"]
    lines += [f"  - {name}: {count}" for name, count in sorted_signal_entries(report.signals)]
    if report.notes:
        lines += ["", "Notes"]
        lines += [f"  - {note}" for note in report.notes]
    return "\n".join(lines) + "\n"