"""Unit tests for severity-weighted scoring."""

import pytest

from compliance.scoring import compute_score, score_band, score_value
from compliance.types import ScoreBand, Violation, ViolationSeverity, ViolationType


def make_violation(severity=ViolationSeverity.CRITICAL, rule_type=ViolationType.DUREE_JOURNALIERE, n=1):
    return Violation(
        id=f"viol-{n}",
        rule_type=rule_type,
        severity=severity,
        employee_ids=("emp-1",),
        shift_ids=(),
        date="2026-02-09",
        message="",
        actual_value=0.0,
        legal_limit=0.0,
    )


class TestScoreValue:
    def test_no_violations(self):
        assert score_value([]) == 100

    def test_penalties_per_severity(self):
        violations = [
            make_violation(ViolationSeverity.CRITICAL),
            make_violation(ViolationSeverity.WARNING),
            make_violation(ViolationSeverity.INFO),
        ]
        assert score_value(violations) == 100 - 15 - 5 - 1

    def test_clamped_at_zero(self):
        assert score_value([make_violation() for _ in range(10)]) == 0


class TestScoreBand:
    @pytest.mark.parametrize("score,band", [
        (100, ScoreBand.EXCELLENT),
        (90, ScoreBand.EXCELLENT),
        (89, ScoreBand.GOOD),
        (70, ScoreBand.GOOD),
        (69, ScoreBand.NEEDS_ATTENTION),
        (50, ScoreBand.NEEDS_ATTENTION),
        (49, ScoreBand.NON_COMPLIANT),
        (30, ScoreBand.NON_COMPLIANT),
        (29, ScoreBand.CRITICAL),
        (0, ScoreBand.CRITICAL),
    ])
    def test_inclusive_lower_bounds(self, score, band):
        assert score_band(score) == band


class TestComputeScore:
    def test_counts_are_complete(self):
        score = compute_score([])
        assert score.score == 100
        assert score.label == "Excellent"
        assert score.by_severity == {"critical": 0, "warning": 0, "info": 0}
        assert set(score.by_type) == {t.value for t in ViolationType}
        assert all(count == 0 for count in score.by_type.values())

    def test_aggregation(self):
        violations = [
            make_violation(ViolationSeverity.CRITICAL, ViolationType.DUREE_JOURNALIERE, 1),
            make_violation(ViolationSeverity.CRITICAL, ViolationType.REPOS_QUOTIDIEN, 2),
            make_violation(ViolationSeverity.WARNING, ViolationType.PAUSE_OBLIGATOIRE, 3),
        ]

        score = compute_score(violations)

        assert score.score == 65
        assert score.band == ScoreBand.NEEDS_ATTENTION
        assert score.total_violations == 3
        assert score.critical_count == 2
        assert score.warning_count == 1
        assert score.info_count == 0
        assert score.by_type["pause_obligatoire"] == 1
        assert score.to_dict()["label"] == "Needs attention"
