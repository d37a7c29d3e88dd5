import unittest

from src.domain.validator import Validator, matches, permitted_value, unique


class TestValidator(unittest.TestCase):
    def test_new_validator_is_valid(self) -> None:
        v = Validator()

        self.assertTrue(v.valid())
        self.assertEqual(dict(v.errors), {})

    def test_check_records_only_failures(self) -> None:
        v = Validator()

        v.check(True, "title", "must be provided")
        v.check(False, "year", "must be provided")

        self.assertFalse(v.valid())
        self.assertEqual(dict(v.errors), {"year": "must be provided"})

    def test_checks_keep_running_after_a_failure(self) -> None:
        v = Validator()

        v.check(False, "title", "must be provided")
        v.check(False, "year", "must be provided")
        v.check(False, "runtime", "must be provided")

        self.assertEqual(set(v.errors), {"title", "year", "runtime"})

    def test_last_failing_check_for_a_key_wins(self) -> None:
        v = Validator()

        v.check(False, "year", "must be provided")
        v.check(False, "year", "must be greater than 1888")
        v.check(True, "year", "must not be in the future")

        self.assertEqual(v.errors["year"], "must be greater than 1888")

    def test_errors_view_is_read_only(self) -> None:
        v = Validator()
        v.add_error("title", "must be provided")

        with self.assertRaises(TypeError):
            v.errors["title"] = "changed"  # type: ignore[index]


class TestHelpers(unittest.TestCase):
    def test_unique(self) -> None:
        self.assertFalse(unique(["drama", "drama"]))
        self.assertTrue(unique(["drama", "war"]))
        self.assertTrue(unique([]))

    def test_permitted_value(self) -> None:
        self.assertTrue(permitted_value("id", "id", "title", "year"))
        self.assertFalse(permitted_value("rating", "id", "title", "year"))

    def test_matches_whole_string(self) -> None:
        pattern = r"[a-z]+@[a-z]+\.[a-z]+"

        self.assertTrue(matches("alice@example.com", pattern))
        self.assertFalse(matches("alice@example.com!", pattern))
