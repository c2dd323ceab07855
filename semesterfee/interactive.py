from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from rich.console import Console
from rich.markup import escape

from semesterfee.calculate import calculate_payment
from semesterfee.classify import classify_course, classify_courses, closest_type, scheme_categories
from semesterfee.model import (
    MAX_CREDITS,
    MIN_CREDITS,
    CourseData,
    PaymentSchemeItem,
    validate_credits,
    validate_waiver,
    with_credits,
    with_type,
    with_waiver,
)
from semesterfee.parse import parse_courses, parse_payment_scheme
from semesterfee.report import courses_table, format_money, print_summary, scheme_table


console = Console()

STEPS = [
    "Import payment scheme",
    "Import course registration",
    "Review courses",
    "Amount already paid",
    "Summary",
]


@dataclass
class WizardState:
    scheme: list[PaymentSchemeItem] = field(default_factory=list)
    courses: list[CourseData] = field(default_factory=list)
    amount_already_paid: float = 0
    step: int = 1


def _println(msg: str = "") -> None:
    console.print(msg)


def _prompt(msg: str) -> str:
    # Menus use [x] labels, do not read them as markup
    return console.input(msg, markup=False)


def _print_progress(step: int) -> None:
    bits = []
    for i, name in enumerate(STEPS, start=1):
        if i < step:
            bits.append(f"[green]✓ {name}[/]")
        elif i == step:
            bits.append(f"[bold cyan]{i}. {name}[/]")
        else:
            bits.append(f"[dim]{i}. {name}[/]")
    _println("\n=== Semester fee calculator ===")
    _println("  >  ".join(bits))


def _read_pasted_table(what: str) -> Optional[str]:
    """
    Read a pasted table until an empty line.
    A first line of the form '@path' reads the table from a file instead.
    Returns None if the user entered nothing.
    """
    _println(f"Paste the {what} table from the portal and finish with an empty line.")
    _println("(or type @path/to/file.txt, Ctrl+C to quit)")

    lines: list[str] = []
    while True:
        line = _prompt("")
        if not line.strip():
            break
        if not lines and line.startswith("@"):
            path = Path(line[1:].strip()).expanduser()
            try:
                return path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                _println(f"[red]Could not read {escape(str(path))}: {escape(str(e))}[/]")
                return None
        lines.append(line)

    if not lines:
        return None
    return "\n".join(lines)


def _step_scheme(state: WizardState) -> bool:
    text = _read_pasted_table("payment scheme")
    if text is None:
        _println("Please paste some data first.")
        return False

    scheme = parse_payment_scheme(text)
    if not scheme:
        _println("[red]No valid data found.[/] Make sure you copied the whole table including the SL column.")
        return False

    state.scheme = scheme
    console.print(scheme_table(scheme))
    _println(f"Successfully imported {len(scheme)} payment items!")
    return True


def _step_courses(state: WizardState) -> bool:
    text = _read_pasted_table("course registration")
    if text is None:
        _println("Please paste some data first.")
        return False

    courses = parse_courses(text)
    if not courses:
        _println("[red]No valid data found.[/] Make sure you copied the whole table including the SL column.")
        return False

    state.courses = classify_courses(courses, scheme_categories(state.scheme))
    _println(f"Successfully imported {len(courses)} courses!")
    return True


def _pick_course(state: WizardState, action: str) -> Optional[int]:
    pick = _prompt(f"Course number to {action} [blank = cancel]: ").strip()
    if not pick:
        return None
    if not pick.isdigit() or not (1 <= int(pick) <= len(state.courses)):
        _println("Out of range.")
        return None
    return int(pick) - 1


def _pick_type(categories: list[str], current: str) -> Optional[str]:
    if not categories:
        value = _prompt(f"Course type [{current}]: ").strip()
        return value or None

    for i, cat in enumerate(categories, start=1):
        marker = " (current)" if cat == current else ""
        _println(f"{i}) {escape(cat)}{marker}")
    pick = _prompt("Choose type number [blank = keep]: ").strip()
    if not pick:
        return None
    if not pick.isdigit() or not (1 <= int(pick) <= len(categories)):
        _println("Out of range.")
        return None
    return categories[int(pick) - 1]


def _ask_number(msg: str, validate: Callable[[int], int]) -> Optional[int]:
    """
    Prompt until the answer is blank (None) or passes `validate`.
    """
    while True:
        raw = _prompt(msg).strip().rstrip("%")
        if not raw:
            return None
        try:
            return validate(int(raw))
        except ValueError as e:
            _println(f"[red]{escape(str(e))}[/]")


def _edit_course(state: WizardState, categories: list[str]) -> None:
    idx = _pick_course(state, "edit")
    if idx is None:
        return
    course = state.courses[idx]
    _println(f"Editing [bold cyan]{escape(course.code)}[/] {escape(course.title)}")

    new_type = _pick_type(categories, course.type)
    if new_type:
        course = with_type(course, new_type)

    credits = _ask_number(f"Credits {MIN_CREDITS}-{MAX_CREDITS} [{course.credits}]: ", validate_credits)
    if credits is not None:
        course = with_credits(course, credits)

    waiver = _ask_number(f"Waiver % (0-100, steps of 5) [{course.waiver_percentage}]: ", validate_waiver)
    if waiver is not None:
        course = with_waiver(course, waiver)

    state.courses[idx] = course


def _add_course(state: WizardState, categories: list[str]) -> None:
    code = _prompt("Course code (e.g. CSE110): ").strip().upper()
    title = _prompt("Course title: ").strip()
    if not code or not title:
        _println("Please fill in course code, title, and credits.")
        return

    credits = _ask_number(f"Credits {MIN_CREDITS}-{MAX_CREDITS} [blank = cancel]: ", validate_credits)
    if credits is None:
        _println("Please fill in course code, title, and credits.")
        return

    proposed = closest_type(classify_course(code, title), categories)
    course = CourseData(code=code, title=title, credits=credits, type=proposed)

    new_type = _pick_type(categories, course.type)
    if new_type:
        course = with_type(course, new_type)

    state.courses.append(course)
    _println(f"Added: {escape(code)}")


def _step_review(state: WizardState) -> bool:
    """
    Edit loop over the course list. Returns True once the user continues.
    """
    categories = scheme_categories(state.scheme)

    while True:
        console.print(courses_table(state.courses))
        total_credits = sum(c.credits for c in state.courses)
        with_waiver_count = sum(1 for c in state.courses if c.waiver_percentage > 0)
        _println(f"Total credits: {total_credits} | Courses with waiver: {with_waiver_count}")

        choice = _prompt(
            "\n[e] Edit a course\n"
            "[a] Add a course\n"
            "[r] Remove a course\n"
            "[c] Continue\n"
            "Select: "
        ).strip().lower()

        if choice == "e":
            _edit_course(state, categories)
        elif choice == "a":
            _add_course(state, categories)
        elif choice == "r":
            idx = _pick_course(state, "remove")
            if idx is not None:
                removed = state.courses.pop(idx)
                _println(f"Removed: {escape(removed.code)}")
        elif choice == "c":
            if not state.courses:
                _println("Please add at least one course.")
                continue
            return True
        else:
            _println("Invalid choice.")


def _step_paid(state: WizardState) -> bool:
    raw = _prompt(f"Amount already paid [{format_money(state.amount_already_paid)}]: ").strip()
    if not raw:
        return True
    try:
        amount = float(raw.replace(",", ""))
    except ValueError:
        _println("Not a number.")
        return False
    if amount < 0:
        _println("Amount must not be negative.")
        return False
    state.amount_already_paid = int(amount) if amount.is_integer() else amount
    return True


def _step_summary(state: WizardState) -> Optional[int]:
    """
    Show the result. Returns the step to go to next, or None to quit.
    """
    result = calculate_payment(state.courses, state.scheme, state.amount_already_paid)
    print_summary(result, console)

    choice = _prompt(
        "\n[1] Edit courses\n"
        "[2] Change amount paid\n"
        "[3] Start over\n"
        "[0] Exit\n"
        "Select: "
    ).strip()

    if choice == "1":
        return 3
    if choice == "2":
        return 4
    if choice == "3":
        return 1
    if choice == "0":
        return None
    _println("Invalid choice.")
    return 5


def run_interactive(state: Optional[WizardState] = None) -> None:
    """
    Linear wizard: each step must succeed before the next one starts.
    Ctrl+C / Ctrl+D leaves the wizard at any prompt.
    """
    state = state or WizardState()

    try:
        while True:
            _print_progress(state.step)

            if state.step == 1:
                if _step_scheme(state):
                    state.step = 2
            elif state.step == 2:
                if _step_courses(state):
                    state.step = 3
            elif state.step == 3:
                if _step_review(state):
                    state.step = 4
            elif state.step == 4:
                if _step_paid(state):
                    state.step = 5
            else:
                nxt = _step_summary(state)
                if nxt is None:
                    break
                if nxt == 1:
                    state = WizardState()
                state.step = nxt
    except (KeyboardInterrupt, EOFError):
        _println()

    _println("Bye.")
