"""
CLI (Command Line Interface).

This module provides quick terminal commands for scripting and for testing, e.g.:

    semesterfee scheme <payment.txt>
    semesterfee courses <courses.txt> [--scheme payment.txt]
    semesterfee calculate --scheme payment.txt --courses courses.txt --paid 20000
    semesterfee interactive

Note:
- The step-by-step wizard lives in semesterfee/interactive.py
- This CLI is intentionally simple and prints plain text (no rich formatting)
- Input files hold the tables exactly as copied from the portal ('-' = stdin)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from semesterfee.calculate import calculate_payment, project_scheme
from semesterfee.classify import classify_courses, scheme_categories
from semesterfee.model import CourseData, PaymentSchemeItem, with_type, with_waiver
from semesterfee.parse import parse_courses, parse_payment_scheme
from semesterfee.report import format_money, summary_lines


NO_DATA_MESSAGE = "No valid data found in {}."


def _read_text(path: str) -> Optional[str]:
    """
    Read a pasted table from a file or stdin.

    CLI behavior: never crash on a missing or broken file.
    Print a message and return None so the command can exit with 1.
    """
    if path == "-":
        return sys.stdin.read()
    try:
        return Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        print(f"File not found: {path}")
        return None
    except (OSError, UnicodeDecodeError) as e:
        print(f"Could not read {path}: {e}")
        return None


def _load_scheme(path: str) -> Optional[list[PaymentSchemeItem]]:
    text = _read_text(path)
    if text is None:
        return None
    scheme = parse_payment_scheme(text)
    if not scheme:
        print(NO_DATA_MESSAGE.format(path))
        return None
    return scheme


def _load_courses(path: str) -> Optional[list[CourseData]]:
    text = _read_text(path)
    if text is None:
        return None
    courses = parse_courses(text)
    if not courses:
        print(NO_DATA_MESSAGE.format(path))
        return None
    return courses


def _parse_assignment(value: str) -> tuple[str, str]:
    """
    argparse type for CODE=VALUE options.
    """
    code, sep, rhs = value.partition("=")
    code = code.strip().upper()
    if not sep or not code or not rhs.strip():
        raise argparse.ArgumentTypeError(f"expected CODE=VALUE, got {value!r}")
    return code, rhs.strip()


def _non_negative_number(value: str) -> float:
    try:
        num = float(value.replace(",", ""))
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}")
    if num < 0:
        raise argparse.ArgumentTypeError("amount must not be negative")
    return int(num) if num.is_integer() else num


def _apply_edits(
    courses: list[CourseData],
    waivers: list[tuple[str, str]],
    types: list[tuple[str, str]],
) -> Optional[list[CourseData]]:
    """
    Apply --waiver / --type overrides. Returns None (after printing why)
    on unknown course codes or invalid values.
    """
    by_code = {c.code: i for i, c in enumerate(courses)}
    out = list(courses)

    for code, rhs in waivers:
        if code not in by_code:
            print(f"Unknown course code for --waiver: {code}")
            return None
        try:
            pct = int(rhs.rstrip("%"))
            out[by_code[code]] = with_waiver(out[by_code[code]], pct)
        except ValueError as e:
            print(f"Invalid waiver for {code}: {e}")
            return None

    for code, rhs in types:
        if code not in by_code:
            print(f"Unknown course code for --type: {code}")
            return None
        out[by_code[code]] = with_type(out[by_code[code]], rhs)

    return out


def _cmd_scheme(args: argparse.Namespace) -> int:
    """
    Print the registration fees and tuition rates of a payment scheme.
    """
    scheme = _load_scheme(args.file)
    if scheme is None:
        return 1

    fees, rates = project_scheme(scheme)

    print(f"Imported {len(scheme)} payment items.")
    print("Registration fees:")
    for name, amount in fees.items():
        print(f"  {name}: {format_money(amount)}")
    print(f"  Total: {format_money(fees.total)}")

    print("Tuition rates (per credit):")
    if not rates:
        print("  (none)")
    for category, rate in rates.items():
        print(f"  {category}: {format_money(rate)}")

    return 0


def _cmd_courses(args: argparse.Namespace) -> int:
    """
    Print parsed courses with their proposed course type.
    """
    courses = _load_courses(args.file)
    if courses is None:
        return 1

    if args.scheme:
        scheme = _load_scheme(args.scheme)
        if scheme is None:
            return 1
        courses = classify_courses(courses, scheme_categories(scheme))

    print(f"Imported {len(courses)} courses.")
    for c in courses:
        bits = [c.code, c.title, f"{c.credits} cr", c.type]
        if c.section:
            bits.append(c.section)
        if c.teacher:
            bits.append(c.teacher)
        print(" | ".join(bits))
    print(f"Total credits: {sum(c.credits for c in courses)}")

    return 0


def _cmd_calculate(args: argparse.Namespace) -> int:
    """
    Full calculation: scheme + courses + overrides + amount paid.
    """
    scheme = _load_scheme(args.scheme)
    if scheme is None:
        return 1
    courses = _load_courses(args.courses)
    if courses is None:
        return 1

    courses = classify_courses(courses, scheme_categories(scheme))
    edited = _apply_edits(courses, args.waiver or [], args.type or [])
    if edited is None:
        return 1

    result = calculate_payment(edited, scheme, args.paid)

    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        return 0

    for line in summary_lines(result):
        print(line)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="semesterfee", description="Semester fee calculator")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log skipped lines and other details")
    sub = parser.add_subparsers(dest="command", required=True)

    p_scheme = sub.add_parser("scheme", help="Parse a payment scheme table")
    p_scheme.add_argument("file", type=str, help="Pasted payment scheme ('-' = stdin)")

    p_courses = sub.add_parser("courses", help="Parse a course registration table")
    p_courses.add_argument("file", type=str, help="Pasted course table ('-' = stdin)")
    p_courses.add_argument("--scheme", type=str, default=None, help="Payment scheme used to resolve course types")

    p_calc = sub.add_parser("calculate", help="Calculate the semester fee")
    p_calc.add_argument("--scheme", type=str, required=True, help="Pasted payment scheme file")
    p_calc.add_argument("--courses", type=str, required=True, help="Pasted course table file")
    p_calc.add_argument("--paid", type=_non_negative_number, default=0, help="Amount already paid")
    p_calc.add_argument(
        "--waiver",
        type=_parse_assignment,
        action="append",
        metavar="CODE=PCT",
        help="Waiver percentage for a course (0-100, steps of 5)",
    )
    p_calc.add_argument(
        "--type",
        type=_parse_assignment,
        action="append",
        metavar="CODE=TYPE",
        help="Override the course type of a course",
    )
    p_calc.add_argument("--json", action="store_true", help="Print the result as JSON")

    sub.add_parser("interactive", help="Step-by-step wizard")

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.command == "scheme":
        raise SystemExit(_cmd_scheme(args))
    if args.command == "courses":
        raise SystemExit(_cmd_courses(args))
    if args.command == "calculate":
        raise SystemExit(_cmd_calculate(args))

    if args.command == "interactive":
        from semesterfee.interactive import run_interactive

        run_interactive()
        raise SystemExit(0)

    raise SystemExit(2)
