"""
Fee calculation.

Given the parsed payment scheme, the course list and the amount already paid,
compute the full fee breakdown.

Rules:
- Registration fee = campus development + lab + extra curricular + semester fee
  (any other non-tuition line of the scheme is ignored)
- Tuition rate per category comes from "Tuition Fee" rows (last row wins)
- Course tuition = rate * credits, minus the course's waiver percentage
- A course whose type has no rate costs 0 (it is listed in unmatched_types)

calculate_payment() is a pure function and never raises.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List, Tuple

from semesterfee.model import (
    CourseData,
    Number,
    PaymentResult,
    PaymentSchemeItem,
    RegistrationFeesBreakdown,
    TuitionLine,
    TuitionRates,
)


# Substrings (lowercase) that route a scheme row into a registration fee field.
# "extra curriculam" is how some portals spell it.
REGISTRATION_FEE_LABELS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("campus_development_fee", ("campus development",)),
    ("lab_fee", ("lab fee",)),
    ("extra_curricular_fee", ("extra curricular", "extra curriculam")),
    ("semester_fee", ("semester fee",)),
)

TUITION_FEE_LABEL = "tuition fee"


def project_scheme(scheme: Iterable[PaymentSchemeItem]) -> Tuple[RegistrationFeesBreakdown, TuitionRates]:
    """
    Split the payment scheme into registration fees and tuition rates.
    """
    fees = RegistrationFeesBreakdown()
    rates: TuitionRates = {}

    for item in scheme:
        name = (item.payment_name or "").lower()
        amount = item.amount or 0

        # First matching label wins for a single row
        for field_name, needles in REGISTRATION_FEE_LABELS:
            if any(n in name for n in needles):
                fees = replace(fees, **{field_name: amount})
                break

        if TUITION_FEE_LABEL in name and item.course_category:
            rates[item.course_category] = amount

    return fees, rates


def _tuition_line(course: CourseData, rates: TuitionRates) -> TuitionLine:
    rate_per_credit = rates.get(course.type, 0)
    fee_before_waiver = rate_per_credit * course.credits
    waiver_amount = fee_before_waiver * course.waiver_percentage / 100
    fee_after_waiver = fee_before_waiver - waiver_amount

    return TuitionLine(
        code=course.code,
        title=course.title,
        credits=course.credits,
        type=course.type,
        rate_per_credit=rate_per_credit,
        fee_before_waiver=fee_before_waiver,
        waiver_percentage=course.waiver_percentage,
        waiver_amount=waiver_amount,
        fee_after_waiver=fee_after_waiver,
    )


def calculate_payment(
    courses: Iterable[CourseData],
    scheme: Iterable[PaymentSchemeItem],
    amount_already_paid: Number = 0,
) -> PaymentResult:
    """
    Compute the complete fee breakdown.
    """
    fees, rates = project_scheme(scheme)

    lines: List[TuitionLine] = []
    unmatched: List[str] = []
    tuition_fee_total: Number = 0
    tuition_fee_total_after_waiver: Number = 0
    total_waiver_amount: Number = 0

    for course in courses:
        line = _tuition_line(course, rates)
        lines.append(line)

        if course.type not in rates and course.type not in unmatched:
            unmatched.append(course.type)

        tuition_fee_total += line.fee_before_waiver
        tuition_fee_total_after_waiver += line.fee_after_waiver
        total_waiver_amount += line.waiver_amount

    total_fee_without_waiver = fees.total + tuition_fee_total
    total_fee_with_waiver = fees.total + tuition_fee_total_after_waiver

    paid = amount_already_paid or 0
    remaining_amount = max(0, total_fee_with_waiver - paid)
    overpaid = max(0, paid - total_fee_with_waiver)

    return PaymentResult(
        registration_fees=fees,
        tuition_rates=rates,
        tuition_fee_total=tuition_fee_total,
        tuition_fee_total_after_waiver=tuition_fee_total_after_waiver,
        total_waiver_amount=total_waiver_amount,
        total_fee_without_waiver=total_fee_without_waiver,
        total_fee_with_waiver=total_fee_with_waiver,
        amount_already_paid=paid,
        remaining_amount=remaining_amount,
        overpaid=overpaid,
        tuition_lines=lines,
        unmatched_types=sorted(unmatched),
    )
