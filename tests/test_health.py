import pytest

from whyarch.health import (
    HealthDelta,
    HealthReport,
    HealthSnapshot,
    compute_health_delta,
    health_ci_failure,
    render_health,
    sorted_signal_entries,
)


def _snapshot(score):
    return HealthSnapshot(timestamp=1, debt_score=score, details={})


def test_health_delta_marks_increasing_scores():
    delta = compute_health_delta(9, _snapshot(5))
    assert delta.direction == "↑"
    assert delta.amount == 4
    assert delta.previous_score == 5


def test_health_delta_marks_decreasing_scores():
    delta = compute_health_delta(2, _snapshot(7))
    assert delta == HealthDelta(direction="↓", amount=-5, previous_score=7)


def test_health_delta_marks_unchanged_scores():
    delta = compute_health_delta(6, _snapshot(6))
    assert delta == HealthDelta(direction="→", amount=0, previous_score=6)


def test_sorted_signal_entries_are_stable_for_terminal_output():
    names = [name for name, _ in sorted_signal_entries({"zeta": 1, "alpha": 2})]
    assert names == ["alpha", "zeta"]


def test_sorted_signal_entries_keep_counts():
    assert sorted_signal_entries({"b": 3, "a": 1}) == [("a", 1), ("b", 3)]


def test_render_health_includes_trend_signals_and_notes():
    report = HealthReport(
        debt_score=8,
        signals={"time_bombs": 2},
        delta=compute_health_delta(8, _snapshot(5)),
        notes=["health uses implemented scanner signals"],
    )
    output = render_health(report, None)
    assert output.startswith("Repository health\n\nDebt score: 8\n")
    assert "Trend: ↑ 3 (previous 5)" in output
    assert "  - time_bombs: 2" in output
    assert "Notes\n  - health uses implemented scanner signals" in output
    assert "CI gate" not in output


def test_render_health_omits_notes_and_trend_when_absent():
    output = render_health(HealthReport(debt_score=1, signals={"a": 1}), None)
    assert "Trend:" not in output
    assert "Notes" not in output
    assert "Signals\n  - a: 1" in output


@pytest.mark.parametrize(
    ("score", "threshold", "status"),
    [(9, 4, "FAIL"), (4, 4, "PASS"), (1, 80, "PASS")],
)
def test_render_health_shows_ci_gate(score, threshold, status):
    output = render_health(HealthReport(debt_score=score), threshold)
    assert f"CI gate: {status} (threshold {threshold})" in output


def test_health_ci_failure_message_when_threshold_exceeded():
    message = health_ci_failure(HealthReport(debt_score=9), 4)
    assert message == "health debt score 9 exceeds CI threshold 4"


def test_health_ci_failure_none_at_or_below_threshold():
    assert health_ci_failure(HealthReport(debt_score=4), 4) is None


def test_health_ci_failure_none_without_threshold():
    assert health_ci_failure(HealthReport(debt_score=100), None) is None