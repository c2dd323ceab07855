"""
Semester fee calculator.

Pure pipeline, usable without the CLI:

    scheme = parse_payment_scheme(pasted_payment_table)
    courses = classify_courses(parse_courses(pasted_course_table), scheme_categories(scheme))
    result = calculate_payment(courses, scheme, amount_already_paid=20000)
"""

from semesterfee.calculate import calculate_payment, project_scheme
from semesterfee.classify import classify_course, classify_courses, closest_type, scheme_categories
from semesterfee.model import (
    CourseData,
    PaymentResult,
    PaymentSchemeItem,
    RegistrationFeesBreakdown,
    TuitionLine,
)
from semesterfee.parse import parse_courses, parse_payment_scheme, parse_portal_text

__all__ = [
    "CourseData",
    "PaymentResult",
    "PaymentSchemeItem",
    "RegistrationFeesBreakdown",
    "TuitionLine",
    "calculate_payment",
    "classify_course",
    "classify_courses",
    "closest_type",
    "parse_courses",
    "parse_payment_scheme",
    "parse_portal_text",
    "project_scheme",
    "scheme_categories",
]
