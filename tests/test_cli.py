"""
Tests for CLI entry points.

These tests focus on:
- Exit codes (missing files / no valid rows -> 1)
- The full calculate command on small pasted tables written to a temp dir
- --waiver / --type overrides and --json output
"""

import contextlib
import io
import json
import tempfile
import unittest
from pathlib import Path

from semesterfee.cli import main


PAYMENT = (
    "SL\tPayment Name\tCourse Type\tCourse Category\tAmount\n"
    "1\tAdmission Fee\tOthers\tOthers\t15000\n"
    "2\tSemester Fee\tOthers\tOthers\t3000\n"
    "3\tTuition Fee\tTheory\tCore\t5000\n"
    "4\tTuition Fee\tLab\tCore Lab\t5500\n"
)

COURSES = (
    "SL\tCourse Code\tCourse Title\tCredit\tType\tSection\tTeacher\n"
    "1\tCSE110\tComputer Programming\t3\tREGULAR\t61_A\tJohn Doe\n"
    "2\tCSE111\tProgramming Lab\t1\tREGULAR\t61_A\tJane Roe\n"
)


class TestCLI(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        d = Path(self._tmp.name)
        self.payment = d / "payment.txt"
        self.courses = d / "courses.txt"
        self.payment.write_text(PAYMENT, encoding="utf-8")
        self.courses.write_text(COURSES, encoding="utf-8")

    def _run(self, argv: list) -> tuple:
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            with self.assertRaises(SystemExit) as ctx:
                main(argv)
        return ctx.exception.code, out.getvalue()

    def test_missing_file_exits_nonzero(self) -> None:
        code, out = self._run(["scheme", str(Path(self._tmp.name) / "nope.txt")])
        self.assertEqual(code, 1)
        self.assertIn("File not found", out)

    def test_no_valid_rows_exits_nonzero(self) -> None:
        junk = Path(self._tmp.name) / "junk.txt"
        junk.write_text("hello world\n", encoding="utf-8")
        code, out = self._run(["courses", str(junk)])
        self.assertEqual(code, 1)
        self.assertIn("No valid data found", out)

    def test_scheme_command(self) -> None:
        code, out = self._run(["scheme", str(self.payment)])
        self.assertEqual(code, 0)
        self.assertIn("Imported 4 payment items.", out)
        self.assertIn("  Semester Fee: 3,000", out)
        self.assertIn("  Core Lab: 5,500", out)

    def test_courses_command_resolves_types(self) -> None:
        code, out = self._run(["courses", str(self.courses), "--scheme", str(self.payment)])
        self.assertEqual(code, 0)
        self.assertIn("CSE111 | Programming Lab | 1 cr | Core Lab", out)
        self.assertIn("Total credits: 4", out)

    def test_calculate_json(self) -> None:
        code, out = self._run(
            [
                "calculate",
                "--scheme",
                str(self.payment),
                "--courses",
                str(self.courses),
                "--paid",
                "10,000",
                "--waiver",
                "cse110=20",
                "--json",
            ]
        )
        self.assertEqual(code, 0)
        data = json.loads(out)
        self.assertEqual(data["registration_fee_total"], 3000)
        # 3 * 5000 * 0.8 + 1 * 5500
        self.assertEqual(data["tuition_fee_total_after_waiver"], 17500)
        self.assertEqual(data["remaining_amount"], 3000 + 17500 - 10000)
        self.assertEqual(data["overpaid"], 0)

    def test_calculate_type_override(self) -> None:
        code, out = self._run(
            [
                "calculate",
                "--scheme",
                str(self.payment),
                "--courses",
                str(self.courses),
                "--type",
                "CSE111=Core",
            ]
        )
        self.assertEqual(code, 0)
        self.assertIn("Total fee with waiver: 23,000", out)

    def test_invalid_waiver_exits_nonzero(self) -> None:
        code, out = self._run(
            ["calculate", "--scheme", str(self.payment), "--courses", str(self.courses), "--waiver", "CSE110=7"]
        )
        self.assertEqual(code, 1)
        self.assertIn("Invalid waiver for CSE110", out)

    def test_unknown_course_code_exits_nonzero(self) -> None:
        code, out = self._run(
            ["calculate", "--scheme", str(self.payment), "--courses", str(self.courses), "--waiver", "MAT999=10"]
        )
        self.assertEqual(code, 1)
        self.assertIn("Unknown course code", out)


if __name__ == "__main__":
    unittest.main()
