"""
Unit tests for the keyword rule matcher.
"""

import pytest

from tablesift.validations.rule_matcher import KeywordRuleMatcher


@pytest.fixture
def matcher():
    return KeywordRuleMatcher()


# ============================================================================
# MATCHING
# ============================================================================

@pytest.mark.unit
class TestKeywordMatching:
    """Test each keyword clause."""

    @pytest.mark.parametrize("value,expected", [(-1, True), ("-3", True), (5, False), (None, False)])
    def test_negative_age(self, matcher, value, expected):
        assert matcher.matches("age < 0", {"age": value}, ["age"]) is expected

    def test_age_above_120(self, matcher):
        assert matcher.matches("age > 120", {"age": 121}, ["age"])
        assert not matcher.matches("age > 120", {"age": 120}, ["age"])

    @pytest.mark.parametrize("value,expected", [(0, True), (-5, True), (100, False)])
    def test_salary_must_be_positive(self, matcher, value, expected):
        assert matcher.matches("salary must be > 0", {"salary": value}, ["salary"]) is expected

    @pytest.mark.parametrize("value,expected", [(None, True), ("", True), (0, True), ("x", False)])
    def test_null_clause(self, matcher, value, expected):
        assert matcher.matches("no null values", {"a": value}, ["a"]) is expected

    @pytest.mark.parametrize("value,expected", [("bad", True), ("a@b", True), ("a@b.com", False)])
    def test_email_clause(self, matcher, value, expected):
        assert matcher.matches("email must be valid", {"email": value}, ["email"]) is expected

    def test_email_clause_skips_empty(self, matcher):
        assert not matcher.matches("email must be valid", {"email": None}, ["email"])

    def test_unknown_condition_never_matches(self, matcher):
        assert not matcher.matches("score > 5", {"score": 10}, ["score"])

    def test_condition_is_case_insensitive(self, matcher):
        assert matcher.matches("AGE < 0", {"age": -1}, ["age"])

    def test_any_target_column(self, matcher):
        row = {"a": 5, "b": -1}
        assert matcher.matches("age < 0", row, ["a", "b"])


@pytest.mark.unit
class TestClassify:
    """Test rule type classification."""

    @pytest.mark.parametrize("condition,expected", [
        ("age < 0", "custom_age"),
        ("email must contain @", "custom_email"),
        ("salary > 0", "custom_salary"),
        ("no null values", "custom_null"),
        ("score > 5", "custom"),
        ("age and email", "custom_age"),
    ])
    def test_classify(self, matcher, condition, expected):
        assert matcher.classify(condition) == expected
