"""
Parsing (pasted portal tables -> structured records).

- Accepts text copied from the student portal (tab- or space-delimited rows)
- Also accepts the HTML a browser puts on the clipboard (<table> markup)
- Produces PaymentSchemeItem or CourseData records

Important rules:
- A line that does not look like a data row is dropped silently
- An empty result is not an error, the caller decides what to tell the user
"""

from __future__ import annotations

import argparse
import json
import logging
import re
import sys
from pathlib import Path
from typing import List, Optional

from bs4 import BeautifulSoup

from semesterfee.classify import classify_course
from semesterfee.model import MAX_CREDITS, MIN_CREDITS, CourseData, PaymentSchemeItem


log = logging.getLogger(__name__)

TABLE_TYPES = ("payment", "courses")

_MULTI_SPACE = re.compile(r"\s{2,}")
_ANY_SPACE = re.compile(r"\s+")
_LEADING_INT = re.compile(r"^\s*([+-]?[0-9]+)")
_NON_DIGIT = re.compile(r"[^0-9]")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _leading_int(text: str) -> Optional[int]:
    """
    Parse the integer at the start of a string ("3" -> 3, "3.0" -> 3,
    "12abc" -> 12). Returns None if the string does not start with digits.
    """
    m = _LEADING_INT.match(text)
    if not m:
        return None
    return int(m.group(1))


def _is_header(line: str) -> bool:
    lower = line.lower()
    return "sl" in lower and ("payment name" in lower or "course code" in lower)


def split_fields(line: str) -> List[str]:
    """
    Split one row into fields.

    Delimiter cascade:
    1. tab
    2. runs of 2+ spaces (if the tab split gave fewer than 3 fields)
    3. any whitespace (only accepted if it gives at least 5 fields)
    """
    parts = [p.strip() for p in line.split("\t") if p.strip()]
    if len(parts) < 3:
        parts = [p.strip() for p in _MULTI_SPACE.split(line) if p.strip()]
    if len(parts) < 3:
        space_parts = [p for p in _ANY_SPACE.split(line.strip()) if p]
        if len(space_parts) >= 5:
            parts = space_parts
    return parts


def _data_lines(text: str) -> List[str]:
    """
    Non-blank, non-header lines of a pasted table.
    """
    if looks_like_html(text):
        text = html_table_to_text(text)

    out: List[str] = []
    for line in text.splitlines():
        if not line.strip():
            continue
        if _is_header(line):
            continue
        out.append(line)
    return out


# ---------------------------------------------------------------------------
# HTML clipboard support
# ---------------------------------------------------------------------------


def looks_like_html(text: str) -> bool:
    return "<table" in text.lower()


def html_table_to_text(html: str) -> str:
    """
    Convert every <tr> of the markup into one tab-separated line.
    """
    soup = BeautifulSoup(html, "html.parser")

    lines: List[str] = []
    for row in soup.select("tr"):
        cells = row.find_all(["td", "th"])
        if not cells:
            continue
        # Cell text may contain line breaks, keep each cell on one line
        values = [" ".join(cell.get_text(" ", strip=True).split()) for cell in cells]
        lines.append("\t".join(values))

    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Row parsing (CORE LOGIC)
# ---------------------------------------------------------------------------


def parse_payment_line(fields: List[str]) -> Optional[PaymentSchemeItem]:
    """
    Parse one payment scheme row:

        SL  PaymentName  CourseType  CourseCategory  Amount
    """
    if len(fields) < 5:
        return None

    sl = _leading_int(fields[0])
    if sl is None:
        return None

    payment_name = fields[1]
    course_type = fields[2]
    course_category = fields[3]

    digits = _NON_DIGIT.sub("", fields[4])
    amount = int(digits) if digits else 0

    if not payment_name or amount <= 0:
        return None

    return PaymentSchemeItem(
        sl=sl,
        payment_name=payment_name,
        course_type=course_type,
        course_category=course_category,
        amount=amount,
    )


def parse_course_line(fields: List[str]) -> Optional[CourseData]:
    """
    Parse one course registration row:

        SL  CourseCode  CourseTitle...  Credits  [Type]  [Section]  [Teacher...]

    The title may span several fields, it ends at the first field that is a
    valid credit count.
    """
    if len(fields) < 4:
        return None

    if _leading_int(fields[0]) is None:
        return None

    code = fields[1]

    credits = 0
    credits_index = -1
    for i in range(2, len(fields)):
        num = _leading_int(fields[i])
        if num is not None and MIN_CREDITS <= num <= MAX_CREDITS:
            credits = num
            credits_index = i
            break

    if credits_index < 0:
        return None

    title = " ".join(fields[2:credits_index])

    rest = fields[credits_index + 1 :]
    registration_type = rest[0] if len(rest) > 0 and rest[0] else "REGULAR"
    section = rest[1] if len(rest) > 1 else ""
    teacher = " ".join(rest[2:])

    if not code or not title or credits <= 0:
        return None

    return CourseData(
        code=code.upper(),
        title=title,
        credits=credits,
        type=classify_course(code, title),
        section=section,
        teacher=teacher,
        waiver_percentage=0,
        registration_type=registration_type,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_payment_scheme(text: str) -> List[PaymentSchemeItem]:
    """
    Parse a pasted payment scheme table. Unparsable lines are skipped.
    """
    items: List[PaymentSchemeItem] = []
    for line in _data_lines(text):
        item = parse_payment_line(split_fields(line))
        if item is None:
            log.debug("skipped payment line: %r", line)
            continue
        items.append(item)
    return items


def parse_courses(text: str) -> List[CourseData]:
    """
    Parse a pasted course registration table. Unparsable lines are skipped.
    """
    courses: List[CourseData] = []
    for line in _data_lines(text):
        course = parse_course_line(split_fields(line))
        if course is None:
            log.debug("skipped course line: %r", line)
            continue
        courses.append(course)
    return courses


def parse_portal_text(text: str, table_type: str) -> list:
    """
    Dispatch on table_type ("payment" or "courses").
    """
    if table_type == "payment":
        return parse_payment_scheme(text)
    if table_type == "courses":
        return parse_courses(text)
    raise ValueError(f"Unknown table type: {table_type!r} (expected one of {', '.join(TABLE_TYPES)})")


# ---------------------------------------------------------------------------
# CLI connection
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="semesterfee.parse",
        description="Parse a pasted portal table into JSON",
    )
    p.add_argument("table_type", choices=TABLE_TYPES)
    p.add_argument("file", type=str, help="Text file with the pasted table ('-' = stdin)")
    return p


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    if args.file == "-":
        text = sys.stdin.read()
    else:
        try:
            text = Path(args.file).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            print(f"Could not read {args.file}: {e}")
            raise SystemExit(1)

    rows = parse_portal_text(text, args.table_type)
    print(json.dumps([r.to_dict() for r in rows], ensure_ascii=False, indent=2))
    raise SystemExit(0 if rows else 1)


# Entry point for CLI execution
if __name__ == "__main__":
    main()
