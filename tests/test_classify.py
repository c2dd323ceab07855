"""
Unit tests for course type classification and category resolution.

Rule order (first match wins):
lab (GED Lab / Core Lab) -> project family -> general family -> non core -> Core
"""

import unittest

from semesterfee.classify import classify_course, classify_courses, closest_type, scheme_categories
from semesterfee.model import CourseData, PaymentSchemeItem


class TestClassifyCourse(unittest.TestCase):
    def test_lab_rules(self) -> None:
        self.assertEqual(classify_course("CSE111", "Programming Lab"), "Core Lab")
        self.assertEqual(classify_course("GED102", "GED Lab-1"), "GED Lab")
        self.assertEqual(classify_course("CSELAB1", "Circuits"), "Core Lab")

    def test_lab_wins_over_project(self) -> None:
        self.assertEqual(classify_course("CSE499", "Project Lab"), "Core Lab")

    def test_project_rules(self) -> None:
        self.assertEqual(classify_course("CSE400", "Final Year Thesis"), "Project/Thesis/Internship")
        self.assertEqual(classify_course("CSE499", "Capstone"), "Project/Thesis/Internship")
        self.assertEqual(classify_course("BBA498", "Industrial Attachment"), "Project/Thesis/Internship")

    def test_general_rules(self) -> None:
        self.assertEqual(classify_course("ENG101", "English Composition"), "General Course")
        self.assertEqual(classify_course("HUM103", "History of Bangladesh"), "General Course")

    def test_non_core_rule(self) -> None:
        self.assertEqual(classify_course("CSE431", "Elective I: Data Mining"), "Non Core")

    def test_default_core(self) -> None:
        self.assertEqual(classify_course("CSE110", "Computer Programming"), "Core")
        self.assertEqual(classify_course("", ""), "Core")


class TestClosestType(unittest.TestCase):
    CATS = ["Core", "Core Lab", "General Course", "Project/Internship"]

    def test_exact(self) -> None:
        self.assertEqual(closest_type("Core Lab", self.CATS), "Core Lab")

    def test_case_insensitive(self) -> None:
        self.assertEqual(closest_type("general course", self.CATS), "General Course")

    def test_substring_either_direction(self) -> None:
        # "Core" is contained in "Non Core"
        self.assertEqual(closest_type("Non Core", self.CATS), "Core")
        # label contained in a category
        self.assertEqual(closest_type("Internship", self.CATS), "Project/Internship")

    def test_fallback_first_category(self) -> None:
        self.assertEqual(closest_type("Project/Thesis/Internship", ["Theory", "Practical"]), "Theory")

    def test_no_categories(self) -> None:
        self.assertEqual(closest_type("GED Lab", []), "Core")


class TestSchemeCategories(unittest.TestCase):
    def test_tuition_categories_in_order(self) -> None:
        scheme = [
            PaymentSchemeItem(1, "Admission Fee", "Others", "Others", 15000),
            PaymentSchemeItem(2, "Tuition Fee", "Lab", "Core Lab", 5500),
            PaymentSchemeItem(3, "Tuition Fee", "Theory", "Core", 5000),
            PaymentSchemeItem(4, "Tuition Fee", "Theory", "Core", 5200),
        ]
        self.assertEqual(scheme_categories(scheme), ["Core Lab", "Core"])

    def test_without_tuition_rows(self) -> None:
        scheme = [
            PaymentSchemeItem(1, "Admission Fee", "Others", "Others", 15000),
            PaymentSchemeItem(2, "Lab Fee", "Others", "", 2000),
        ]
        self.assertEqual(scheme_categories(scheme), ["Others"])

    def test_classify_courses_returns_new_records(self) -> None:
        courses = [
            CourseData(code="CSE111", title="Programming Lab", credits=1, type="Core"),
            CourseData(code="CSE110", title="Computer Programming", credits=3, type="Core"),
        ]
        out = classify_courses(courses, ["Core", "Core Lab"])
        self.assertEqual([c.type for c in out], ["Core Lab", "Core"])
        # input untouched
        self.assertEqual(courses[0].type, "Core")


if __name__ == "__main__":
    unittest.main()
