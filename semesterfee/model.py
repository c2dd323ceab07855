"""
Central data model definitions used across the project.

This module defines the canonical structure of payment-scheme rows, courses
and the computed fee result so that:
- the parser, the calculator and the UI layers share the same field names
- every stage can be a pure function (records are frozen, edits create copies)
- results can be dumped to JSON without extra glue (to_dict)
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from typing import Any, Dict, List, Tuple, Union


Number = Union[int, float]

# Category name -> tuition rate per credit
TuitionRates = Dict[str, int]

MIN_CREDITS = 1
MAX_CREDITS = 6

# 0%, 5%, ..., 100%
WAIVER_OPTIONS: Tuple[int, ...] = tuple(range(0, 101, 5))


@dataclass(frozen=True)
class PaymentSchemeItem:
    """
    One line of the payment scheme table as shown on the student portal.
    """

    sl: int
    payment_name: str
    course_type: str
    course_category: str
    amount: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CourseData:
    """
    One registered course.

    `type` is the course category used to look up the tuition rate.
    The parser proposes it, the user may correct it.
    """

    code: str
    title: str
    credits: int
    type: str
    section: str = ""
    teacher: str = ""
    waiver_percentage: int = 0
    registration_type: str = "REGULAR"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RegistrationFeesBreakdown:
    campus_development_fee: int = 0
    lab_fee: int = 0
    extra_curricular_fee: int = 0
    semester_fee: int = 0

    @property
    def total(self) -> int:
        return self.campus_development_fee + self.lab_fee + self.extra_curricular_fee + self.semester_fee

    def items(self) -> List[Tuple[str, int]]:
        """
        Labelled rows in the order they appear on the summary.
        """
        return [
            ("Campus Development Fee", self.campus_development_fee),
            ("Lab Fee", self.lab_fee),
            ("Extra Curricular Fee", self.extra_curricular_fee),
            ("Semester Fee", self.semester_fee),
        ]

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["total"] = self.total
        return data


@dataclass(frozen=True)
class TuitionLine:
    """
    Tuition computation for a single course.
    """

    code: str
    title: str
    credits: int
    type: str
    rate_per_credit: int
    fee_before_waiver: int
    waiver_percentage: int
    waiver_amount: Number
    fee_after_waiver: Number

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PaymentResult:
    registration_fees: RegistrationFeesBreakdown
    tuition_rates: TuitionRates
    tuition_fee_total: Number
    tuition_fee_total_after_waiver: Number
    total_waiver_amount: Number
    total_fee_without_waiver: Number
    total_fee_with_waiver: Number
    amount_already_paid: Number
    remaining_amount: Number
    overpaid: Number
    tuition_lines: List[TuitionLine] = field(default_factory=list)
    # Course types without a tuition rate (they were charged 0)
    unmatched_types: List[str] = field(default_factory=list)

    @property
    def registration_fee_total(self) -> int:
        return self.registration_fees.total

    def to_dict(self) -> Dict[str, Any]:
        return {
            "registration_fees": self.registration_fees.to_dict(),
            "registration_fee_breakdown": [
                {"name": name, "amount": amount} for name, amount in self.registration_fees.items()
            ],
            "tuition_rates": dict(self.tuition_rates),
            "registration_fee_total": self.registration_fee_total,
            "tuition_fee_total": self.tuition_fee_total,
            "tuition_fee_total_after_waiver": self.tuition_fee_total_after_waiver,
            "total_waiver_amount": self.total_waiver_amount,
            "total_fee_without_waiver": self.total_fee_without_waiver,
            "total_fee_with_waiver": self.total_fee_with_waiver,
            "amount_already_paid": self.amount_already_paid,
            "remaining_amount": self.remaining_amount,
            "overpaid": self.overpaid,
            "tuition_fee_breakdown": [line.to_dict() for line in self.tuition_lines],
            "unmatched_types": list(self.unmatched_types),
        }


# ---------------------------------------------------------------------------
# Editing helpers
# ---------------------------------------------------------------------------


def validate_credits(credits: int) -> int:
    """
    Raises ValueError unless credits is within MIN_CREDITS..MAX_CREDITS.
    """
    if not (MIN_CREDITS <= credits <= MAX_CREDITS):
        raise ValueError(f"Credits must be between {MIN_CREDITS} and {MAX_CREDITS}, got {credits}")
    return credits


def validate_waiver(percentage: int) -> int:
    """
    Raises ValueError unless percentage is one of WAIVER_OPTIONS.
    """
    if percentage not in WAIVER_OPTIONS:
        raise ValueError(f"Waiver must be 0-100 in steps of 5, got {percentage}")
    return percentage


def with_waiver(course: CourseData, percentage: int) -> CourseData:
    return replace(course, waiver_percentage=validate_waiver(percentage))


def with_credits(course: CourseData, credits: int) -> CourseData:
    return replace(course, credits=validate_credits(credits))


def with_type(course: CourseData, course_type: str) -> CourseData:
    course_type = course_type.strip()
    if not course_type:
        raise ValueError("Course type must not be empty")
    return replace(course, type=course_type)
