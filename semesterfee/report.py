"""
Rendering of parsed tables and fee results.

Plain text (summary_lines) is used by the CLI and the tests,
rich tables are used by the interactive wizard.
"""

from __future__ import annotations

from typing import Iterable, List

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from semesterfee.model import CourseData, Number, PaymentResult, PaymentSchemeItem


CURRENCY = "Tk"


def format_money(value: Number) -> str:
    """
    15000 -> '15,000', 1234.5 -> '1,234.50'
    """
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"


def balance_line(result: PaymentResult) -> str:
    if result.remaining_amount > 0:
        return f"Remaining to pay: {CURRENCY} {format_money(result.remaining_amount)}"
    if result.overpaid > 0:
        return f"Overpaid: {CURRENCY} {format_money(result.overpaid)}"
    return "Fully paid."


def summary_lines(result: PaymentResult) -> List[str]:
    """
    Plain text fee summary.
    """
    lines: List[str] = []

    lines.append("Registration fees:")
    for name, amount in result.registration_fees.items():
        lines.append(f"  {name}: {format_money(amount)}")
    lines.append(f"  Total: {format_money(result.registration_fee_total)}")

    lines.append("Tuition fees:")
    if not result.tuition_lines:
        lines.append("  (no courses)")
    for t in result.tuition_lines:
        text = (
            f"  {t.code} | {t.title} | {t.type} | {t.credits} cr x {format_money(t.rate_per_credit)}"
            f" = {format_money(t.fee_before_waiver)}"
        )
        if t.waiver_percentage > 0:
            text += f" - {t.waiver_percentage}% waiver ({format_money(t.waiver_amount)})"
            text += f" = {format_money(t.fee_after_waiver)}"
        lines.append(text)
    lines.append(f"  Total before waiver: {format_money(result.tuition_fee_total)}")
    lines.append(f"  Total waiver: {format_money(result.total_waiver_amount)}")
    lines.append(f"  Total after waiver: {format_money(result.tuition_fee_total_after_waiver)}")

    lines.append(f"Total fee without waiver: {format_money(result.total_fee_without_waiver)}")
    lines.append(f"Total fee with waiver: {format_money(result.total_fee_with_waiver)}")
    lines.append(f"Amount already paid: {format_money(result.amount_already_paid)}")
    lines.append(balance_line(result))

    if result.unmatched_types:
        lines.append(
            "Warning: no tuition rate for course type(s): "
            + ", ".join(result.unmatched_types)
            + " (charged 0)"
        )

    return lines


# ---------------------------------------------------------------------------
# Rich tables
# ---------------------------------------------------------------------------


def scheme_table(scheme: Iterable[PaymentSchemeItem]) -> Table:
    table = Table(title="Payment scheme", box=box.SIMPLE)
    table.add_column("SL", justify="right")
    table.add_column("Payment name")
    table.add_column("Course type")
    table.add_column("Category")
    table.add_column("Amount", justify="right")
    for item in scheme:
        table.add_row(
            str(item.sl),
            escape(item.payment_name),
            escape(item.course_type),
            escape(item.course_category),
            format_money(item.amount),
        )
    return table


def courses_table(courses: Iterable[CourseData]) -> Table:
    table = Table(title="Courses", box=box.SIMPLE)
    table.add_column("#", justify="right")
    table.add_column("Code", style="bold cyan")
    table.add_column("Title")
    table.add_column("Credits", justify="right")
    table.add_column("Type", style="green")
    table.add_column("Section")
    table.add_column("Waiver", justify="right")
    for i, c in enumerate(courses, start=1):
        table.add_row(
            str(i),
            escape(c.code),
            escape(c.title),
            str(c.credits),
            escape(c.type),
            escape(c.section),
            f"{c.waiver_percentage}%",
        )
    return table


def print_summary(result: PaymentResult, console: Console) -> None:
    """
    Print the fee summary as rich tables.
    """
    reg = Table(title="Registration fees", box=box.SIMPLE)
    reg.add_column("Fee")
    reg.add_column("Amount", justify="right")
    for name, amount in result.registration_fees.items():
        reg.add_row(name, format_money(amount))
    reg.add_row("[bold]Total[/]", f"[bold]{format_money(result.registration_fee_total)}[/]")
    console.print(reg)

    tui = Table(title="Tuition fees", box=box.SIMPLE)
    tui.add_column("Course", style="bold cyan")
    tui.add_column("Type", style="green")
    tui.add_column("Credits", justify="right")
    tui.add_column("Rate", justify="right")
    tui.add_column("Before waiver", justify="right")
    tui.add_column("Waiver", justify="right")
    tui.add_column("After waiver", justify="right")
    for t in result.tuition_lines:
        waiver = f"{t.waiver_percentage}% (-{format_money(t.waiver_amount)})" if t.waiver_percentage else ""
        tui.add_row(
            escape(t.code),
            escape(t.type),
            str(t.credits),
            format_money(t.rate_per_credit),
            format_money(t.fee_before_waiver),
            waiver,
            format_money(t.fee_after_waiver),
        )
    tui.add_row(
        "[bold]Total[/]",
        "",
        "",
        "",
        format_money(result.tuition_fee_total),
        f"-{format_money(result.total_waiver_amount)}",
        f"[bold]{format_money(result.tuition_fee_total_after_waiver)}[/]",
    )
    console.print(tui)

    console.print(f"Total fee without waiver: [yellow]{CURRENCY} {format_money(result.total_fee_without_waiver)}[/]")
    console.print(f"Total fee with waiver:    [bold yellow]{CURRENCY} {format_money(result.total_fee_with_waiver)}[/]")
    console.print(f"Amount already paid:      {CURRENCY} {format_money(result.amount_already_paid)}")

    if result.remaining_amount > 0:
        console.print(f"[bold red]{balance_line(result)}[/]")
    elif result.overpaid > 0:
        console.print(f"[bold blue]{balance_line(result)}[/]")
    else:
        console.print(f"[bold green]{balance_line(result)}[/]")

    if result.unmatched_types:
        console.print(
            "[red]Warning:[/] no tuition rate for course type(s): "
            + escape(", ".join(result.unmatched_types))
            + " (charged 0)"
        )
