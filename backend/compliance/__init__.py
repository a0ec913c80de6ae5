"""Labor law compliance module for pharmacy scheduling."""

from .types import (
    ComplianceReport,
    ComplianceScore,
    CoverageResult,
    CoverageSpan,
    DayOpeningHours,
    Employee,
    EmployeeCategory,
    EmployeeCompliance,
    LegalLimits,
    QuickCheckResult,
    ScoreBand,
    Shift,
    ShiftStatus,
    ShiftType,
    TimeSlot,
    Violation,
    ViolationSeverity,
    ViolationType,
    WeeklyOpeningHours,
)
from .engine import ComplianceEngine
from .scoring import compute_score, score_band, score_value
from .validators import (
    BaseValidator,
    DailyLimitValidator,
    InterDayRestValidator,
    PharmacistCoverageValidator,
    ViolationIds,
    WeeklyDurationValidator,
    WeeklyRestValidator,
)

__all__ = [
    "ComplianceReport",
    "ComplianceScore",
    "CoverageResult",
    "CoverageSpan",
    "DayOpeningHours",
    "Employee",
    "EmployeeCategory",
    "EmployeeCompliance",
    "LegalLimits",
    "QuickCheckResult",
    "ScoreBand",
    "Shift",
    "ShiftStatus",
    "ShiftType",
    "TimeSlot",
    "Violation",
    "ViolationSeverity",
    "ViolationType",
    "WeeklyOpeningHours",
    "ComplianceEngine",
    "compute_score",
    "score_band",
    "score_value",
    "BaseValidator",
    "DailyLimitValidator",
    "InterDayRestValidator",
    "PharmacistCoverageValidator",
    "ViolationIds",
    "WeeklyDurationValidator",
    "WeeklyRestValidator",
]
