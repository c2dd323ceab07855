"""
Course type classification.

Two steps:
1. classify_course() proposes a label from the course code and title using
   keyword rules (first matching rule wins).
2. closest_type() maps that label onto a category that really exists in the
   imported payment scheme, so the tuition rate lookup can resolve it.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Iterable, List, Sequence, Tuple

from semesterfee.model import CourseData, PaymentSchemeItem


DEFAULT_TYPE = "Core"

PROJECT_KEYWORDS = (
    "project",
    "thesis",
    "fyp",
    "fydp",
    "defence",
    "defense",
    "internship",
    "practicum",
    "capstone",
)
PROJECT_CODES = ("499", "498", "497", "496")
GENERAL_KEYWORDS = (
    "general",
    "ged",
    "gen",
    "english",
    "bangladesh",
    "philosophy",
    "sociology",
    "psychology",
)
NON_CORE_KEYWORDS = ("non core", "noncore", "elective", "optional")


# A rule receives (lowercased title, lowercased code)
Predicate = Callable[[str, str], bool]


def _contains_any(text: str, words: Iterable[str]) -> bool:
    return any(w in text for w in words)


def _is_ged_lab(title: str, code: str) -> bool:
    return ("lab" in title or "lab" in code) and ("ged" in title or "ged" in code)


def _is_lab(title: str, code: str) -> bool:
    return "lab" in title or "lab" in code


def _is_project(title: str, code: str) -> bool:
    return (
        _contains_any(title, PROJECT_KEYWORDS)
        or _contains_any(code, PROJECT_KEYWORDS)
        or _contains_any(code, PROJECT_CODES)
    )


def _is_general(title: str, code: str) -> bool:
    return _contains_any(title, GENERAL_KEYWORDS) or _contains_any(code, GENERAL_KEYWORDS)


def _is_non_core(title: str, code: str) -> bool:
    return _contains_any(title, NON_CORE_KEYWORDS) or _contains_any(code, NON_CORE_KEYWORDS)


# Evaluated top to bottom, first match wins.
COURSE_TYPE_RULES: Tuple[Tuple[Predicate, str], ...] = (
    (_is_ged_lab, "GED Lab"),
    (_is_lab, "Core Lab"),
    (_is_project, "Project/Thesis/Internship"),
    (_is_general, "General Course"),
    (_is_non_core, "Non Core"),
)


def classify_course(code: str, title: str) -> str:
    """
    Propose a course type label for a course code + title.
    """
    lower_title = (title or "").lower()
    lower_code = (code or "").lower()

    for predicate, label in COURSE_TYPE_RULES:
        if predicate(lower_title, lower_code):
            return label

    return DEFAULT_TYPE


def closest_type(label: str, categories: Sequence[str]) -> str:
    """
    Resolve a proposed label to one of the available categories.

    Order: exact match, case-insensitive match, substring match in either
    direction, first available category. Returns "Core" if there are no
    categories at all.
    """
    if not categories:
        return DEFAULT_TYPE

    if label in categories:
        return label

    lower = label.lower()
    for cat in categories:
        if cat.lower() == lower:
            return cat

    for cat in categories:
        cat_lower = cat.lower()
        if lower in cat_lower or cat_lower in lower:
            return cat

    return categories[0]


def scheme_categories(scheme: Iterable[PaymentSchemeItem]) -> List[str]:
    """
    Distinct course categories of a payment scheme, in scheme order.

    Categories of tuition fee rows are preferred because only those have a
    rate. If the scheme has no tuition rows, every non-empty category is used.
    """
    items = list(scheme)

    def _distinct(rows: Iterable[PaymentSchemeItem]) -> List[str]:
        out: List[str] = []
        for row in rows:
            cat = row.course_category.strip()
            if cat and cat not in out:
                out.append(cat)
        return out

    tuition = _distinct(x for x in items if "tuition fee" in x.payment_name.lower())
    if tuition:
        return tuition
    return _distinct(items)


def classify_courses(courses: Iterable[CourseData], categories: Sequence[str]) -> List[CourseData]:
    """
    Return new course records whose type is resolved against `categories`.
    """
    out: List[CourseData] = []
    for course in courses:
        label = classify_course(course.code, course.title)
        out.append(replace(course, type=closest_type(label, categories)))
    return out
