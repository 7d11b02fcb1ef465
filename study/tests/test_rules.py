import unittest

from study.logic.parsing.rules import (
    EXAM_NAME_RULES,
    TASK_NAME_RULES,
    WEEK_NUMBER_RULES,
    WEEK_TASKS_RULES,
    list_key,
    plain_string,
    positive_int_key,
    resolve,
    text_key,
)


class TestExtractionRules(unittest.TestCase):
    def test_first_present_wins(self):
        self.assertEqual(resolve({"examName": "A", "exam": "B"}, EXAM_NAME_RULES, "Exam"), "A")
        self.assertEqual(resolve({"exam": "B"}, EXAM_NAME_RULES, "Exam"), "B")
        self.assertEqual(resolve({}, EXAM_NAME_RULES, "Exam"), "Exam")

    def test_blank_text_falls_through(self):
        self.assertEqual(resolve({"examName": "  ", "exam": "B"}, EXAM_NAME_RULES, "Exam"), "B")

    def test_text_key_ignores_non_strings(self):
        self.assertIsNone(text_key("goal")({"goal": 5}))
        self.assertIsNone(text_key("goal")("goal"))

    def test_plain_string_is_verbatim(self):
        self.assertEqual(plain_string("  Read  "), "  Read  ")
        self.assertIsNone(plain_string({"name": "x"}))
        self.assertEqual(resolve("Read", TASK_NAME_RULES, ""), "Read")
        self.assertEqual(resolve({"task": "Quiz"}, TASK_NAME_RULES, ""), "Quiz")

    def test_positive_int_key(self):
        rule = positive_int_key("weekNumber")
        self.assertEqual(rule({"weekNumber": 3}), 3)
        self.assertEqual(rule({"weekNumber": "4"}), 4)
        self.assertEqual(rule({"weekNumber": 2.0}), 2)
        self.assertIsNone(rule({"weekNumber": 0}))
        self.assertIsNone(rule({"weekNumber": -1}))
        self.assertIsNone(rule({"weekNumber": True}))
        self.assertIsNone(rule({"weekNumber": "two"}))

    def test_week_number_synonym(self):
        self.assertEqual(resolve({"weekNumber": 0, "week": 5}, WEEK_NUMBER_RULES, 1), 5)

    def test_container_rules_require_lists(self):
        self.assertIsNone(list_key("tasks")({"tasks": {"a": 1}}))
        self.assertEqual(resolve({"tasks": None, "dailyTasks": ["a"]}, WEEK_TASKS_RULES, []), ["a"])
        self.assertEqual(resolve({"tasks": []}, WEEK_TASKS_RULES, ["fallback"]), [])


if __name__ == '__main__':
    unittest.main()
