import io
import unittest

from rich.console import Console

from semesterfee.calculate import calculate_payment
from semesterfee.model import CourseData, PaymentSchemeItem
from semesterfee.report import balance_line, courses_table, format_money, print_summary, summary_lines


SCHEME = [
    PaymentSchemeItem(1, "Semester Fee", "Others", "Others", 3000),
    PaymentSchemeItem(2, "Tuition Fee", "Theory", "Core", 5000),
]
COURSES = [CourseData(code="CSE110", title="Computer Programming", credits=3, type="Core", waiver_percentage=20)]


class TestReport(unittest.TestCase):
    def test_format_money(self) -> None:
        self.assertEqual(format_money(15000), "15,000")
        self.assertEqual(format_money(12000.0), "12,000")
        self.assertEqual(format_money(1234.5), "1,234.50")

    def test_balance_line(self) -> None:
        # total with waiver = 3000 + 12000
        self.assertEqual(balance_line(calculate_payment(COURSES, SCHEME, 5000)), "Remaining to pay: Tk 10,000")
        self.assertEqual(balance_line(calculate_payment(COURSES, SCHEME, 16000)), "Overpaid: Tk 1,000")
        self.assertEqual(balance_line(calculate_payment(COURSES, SCHEME, 15000)), "Fully paid.")

    def test_summary_lines(self) -> None:
        lines = summary_lines(calculate_payment(COURSES, SCHEME))
        self.assertIn("  Semester Fee: 3,000", lines)
        self.assertIn("  Total: 3,000", lines)
        self.assertIn(
            "  CSE110 | Computer Programming | Core | 3 cr x 5,000 = 15,000 - 20% waiver (3,000) = 12,000",
            lines,
        )
        self.assertIn("Total fee with waiver: 15,000", lines)
        self.assertFalse(any(line.startswith("Warning") for line in lines))

    def test_summary_warns_about_unmatched_types(self) -> None:
        courses = [CourseData(code="ENG101", title="English", credits=3, type="General Course")]
        lines = summary_lines(calculate_payment(courses, SCHEME))
        self.assertEqual(lines[-1], "Warning: no tuition rate for course type(s): General Course (charged 0)")

    def test_print_summary_renders(self) -> None:
        buf = io.StringIO()
        console = Console(file=buf, width=120, color_system=None)
        print_summary(calculate_payment(COURSES, SCHEME, 5000), console)
        out = buf.getvalue()
        self.assertIn("CSE110", out)
        self.assertIn("Remaining to pay: Tk 10,000", out)

    def test_markup_in_course_code_is_printed_literally(self) -> None:
        buf = io.StringIO()
        console = Console(file=buf, width=120, color_system=None)
        courses = [CourseData(code="CSE[B]110", title="Computer Programming", credits=3, type="Core")]
        print_summary(calculate_payment(courses, SCHEME), console)
        console.print(courses_table(courses))
        self.assertEqual(buf.getvalue().count("CSE[B]110"), 2)


if __name__ == "__main__":
    unittest.main()
