"""Severity-weighted compliance scoring."""

from .types import ComplianceScore, ScoreBand, Violation, ViolationSeverity, ViolationType

SEVERITY_PENALTIES = {
    ViolationSeverity.CRITICAL: 15,
    ViolationSeverity.WARNING: 5,
    ViolationSeverity.INFO: 1,
}

# Inclusive lower bounds, checked top-down
SCORE_BANDS = [
    (90, ScoreBand.EXCELLENT),
    (70, ScoreBand.GOOD),
    (50, ScoreBand.NEEDS_ATTENTION),
    (30, ScoreBand.NON_COMPLIANT),
]


def score_value(violations: list[Violation]) -> int:
    """100 minus the severity penalties, clamped to [0, 100]."""
    penalty = sum(SEVERITY_PENALTIES[v.severity] for v in violations)
    return max(0, min(100, 100 - penalty))


def score_band(score: int) -> ScoreBand:
    for lower_bound, band in SCORE_BANDS:
        if score >= lower_bound:
            return band
    return ScoreBand.CRITICAL


def compute_score(violations: list[Violation]) -> ComplianceScore:
    """
    Aggregate a violation set into a ComplianceScore.

    Every severity and every rule type is present in the counts, zero when
    nothing was found.
    """
    by_severity = {severity.value: 0 for severity in ViolationSeverity}
    by_type = {rule_type.value: 0 for rule_type in ViolationType}
    for violation in violations:
        by_severity[violation.severity.value] += 1
        by_type[violation.rule_type.value] += 1

    score = score_value(violations)
    return ComplianceScore(
        score=score,
        band=score_band(score),
        total_violations=len(violations),
        by_severity=by_severity,
        by_type=by_type,
    )
