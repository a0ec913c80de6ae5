"""Equitable duty rotation for pharmacists."""

from .types import (
    ConflictCategory,
    DutyDate,
    DutyType,
    PharmacistStats,
    RotationAssignment,
    RotationConfig,
    RotationConflict,
    RotationResult,
)
from .engine import (
    calculate_stats,
    check_conflict,
    eligible_pharmacists,
    generate_duty_dates,
    generate_rotation,
    rotation_order,
)
from .holidays import french_public_holidays, holidays_between

__all__ = [
    "ConflictCategory",
    "DutyDate",
    "DutyType",
    "PharmacistStats",
    "RotationAssignment",
    "RotationConfig",
    "RotationConflict",
    "RotationResult",
    "calculate_stats",
    "check_conflict",
    "eligible_pharmacists",
    "generate_duty_dates",
    "generate_rotation",
    "rotation_order",
    "french_public_holidays",
    "holidays_between",
]
