"""
Unit tests for FixApplicator and its value repair helpers.
"""

import pytest

from tablesift.core.dataset import Dataset
from tablesift.core.exceptions import FixApplicationError
from tablesift.core.results import FixOption, Severity, ValidationResult
from tablesift.fixes.fix_applicator import FixApplicator, cap_age, repair_email
from tablesift.fixes.fix_options import generate_fix_options
from tablesift.validations.custom_rules import CustomRule, CustomRuleEngine


@pytest.fixture
def applicator(config):
    return FixApplicator(config)


@pytest.fixture
def numbers():
    return Dataset.from_records([{"n": 10}, {"n": None}, {"n": 20}, {"n": 30}])


def _result(rows, columns=("n",), rule_type="null_values"):
    return ValidationResult("r", "Rule", Severity.LOW, tuple(rows), "d", "s",
                            can_auto_fix=True, rule_type=rule_type, columns=columns)


# ============================================================================
# FILLS
# ============================================================================

@pytest.mark.unit
class TestFillActions:
    """Test cell fill actions."""

    def test_fill_mean(self, applicator, numbers):
        assert applicator.apply(numbers, _result([1]), "fill_mean").column("n") == [10, 20, 20, 30]

    def test_fill_median(self, applicator):
        ds = Dataset.from_records([{"n": 1}, {"n": None}, {"n": 2}, {"n": 100}])
        assert applicator.apply(ds, _result([1]), "fill_median").column("n")[1] == 2

    def test_fill_mean_fractional(self, applicator):
        ds = Dataset.from_records([{"n": 1}, {"n": 2}, {"n": None}, {"n": 2}])
        assert applicator.apply(ds, _result([2]), "fill_mean").column("n")[2] == pytest.approx(5 / 3)

    def test_fill_zero_unknown_empty(self, applicator, numbers):
        assert applicator.apply(numbers, _result([1]), "fill_zero").column("n")[1] == 0
        assert applicator.apply(numbers, _result([1]), "fill_unknown").column("n")[1] == "Unknown"
        assert applicator.apply(numbers, _result([1]), "fill_empty").column("n")[1] == ""

    def test_fill_today_uses_reference_date(self, applicator):
        ds = Dataset.from_records([{"d": "2024-01-01"}, {"d": None}])
        assert applicator.apply(ds, _result([1], columns=("d",)), "fill_today").column("d")[1] == "2024-06-01"

    def test_fill_mean_on_text_column(self, applicator):
        ds = Dataset.from_records([{"n": "a"}, {"n": None}, {"n": "b"}])

        with pytest.raises(FixApplicationError) as exc_info:
            applicator.apply(ds, _result([1]), "fill_mean")
        assert exc_info.value.action == "fill_mean"

    def test_fill_mean_without_valid_values(self, applicator):
        ds = Dataset.from_records([{"n": 1}, {"n": 2}])

        with pytest.raises(FixApplicationError):
            applicator.apply(ds, _result([0, 1]), "fill_mean")

    def test_input_is_not_modified(self, applicator, numbers):
        applicator.apply(numbers, _result([1]), "fill_zero")
        assert numbers.column("n") == [10, None, 20, 30]


# ============================================================================
# ROW ACTIONS
# ============================================================================

@pytest.mark.unit
class TestRowActions:
    """Test delete, dedupe and flag actions."""

    def test_delete(self, applicator, numbers):
        assert applicator.apply(numbers, _result([1, 3]), "delete").column("n") == [10, 20]

    def test_remove_alias(self, applicator, numbers):
        assert applicator.apply(numbers, _result([0]), "remove").row_count == 3

    def test_out_of_range_rows_ignored(self, applicator, numbers):
        assert applicator.apply(numbers, _result([1, 99, -1]), "delete").row_count == 3

    def test_remove_duplicates_is_idempotent(self, applicator, duplicate_dataset):
        result = _result([2], columns=(), rule_type="duplicates")
        once = applicator.apply(duplicate_dataset, result, "remove_duplicates")
        twice = applicator.apply(once, result, "remove_duplicates")

        assert once.row_count == 2
        assert twice == once

    def test_mark_duplicates(self, applicator, duplicate_dataset):
        result = _result([2], columns=(), rule_type="duplicates")
        marked = applicator.apply(duplicate_dataset, result, "mark_duplicates")

        assert marked.headers[-1] == "is_duplicate"
        assert marked.column("is_duplicate") == [False, False, True]

    def test_mark_issues_reuses_column(self, applicator, numbers):
        marked = applicator.apply(numbers, _result([1]), "mark_issues")
        remarked = applicator.apply(marked, _result([2]), "mark_issues")

        assert remarked.headers.count("has_issue") == 1
        assert remarked.column("has_issue") == [False, True, True, False]

    def test_mark_issues_keeps_user_column(self, applicator):
        ds = Dataset.from_records([{"n": 1, "has_issue": "late"}, {"n": 2, "has_issue": None}])
        marked = applicator.apply(ds, _result([1]), "mark_issues")

        assert marked.column("has_issue") == ["late", None]
        assert marked.headers[-1] == "has_issue_2"
        assert marked.column("has_issue_2") == [False, True]


# ============================================================================
# CUSTOM RULE ACTIONS AND ERRORS
# ============================================================================

@pytest.mark.unit
class TestCustomActions:
    """Test cap, clear and e-mail repair actions."""

    def test_cap_values(self, applicator):
        ds = Dataset.from_records([{"age": -5}, {"age": 30}, {"age": 200}])
        fixed = applicator.apply(ds, _result([0, 2], columns=("age",), rule_type="custom_age"), "cap_values")

        assert fixed.column("age") == [None, 30, 120]

    def test_clear_invalid(self, applicator, people_dataset):
        result = _result([2], columns=("email",), rule_type="custom_email")
        assert applicator.apply(people_dataset, result, "clear_invalid").column("email")[2] is None

    def test_attempt_fix_with_option_object(self, applicator):
        ds = Dataset.from_records([{"email": "carol at example dot com"}])
        option = FixOption("attempt_fix", "Repair", "Repair", "attempt_fix", "1 address")
        fixed = applicator.apply(ds, _result([0], columns=("email",), rule_type="custom_email"), option)

        assert fixed.column("email") == ["carol@example.com"]

    def test_every_option_applies_for_rule_without_columns(self, applicator, people_dataset):
        rule = CustomRule("r1", "No negative ages", "age < 0")
        result = CustomRuleEngine().evaluate(people_dataset, [rule])[0]

        for option in generate_fix_options(result, {"age": "number"}):
            fixed = applicator.apply(people_dataset, result, option)
            assert isinstance(fixed, Dataset)


@pytest.mark.unit
class TestApplyErrors:
    """Test error paths of apply()."""

    def test_unknown_action(self, applicator, numbers):
        with pytest.raises(FixApplicationError, match="Unknown fix action"):
            applicator.apply(numbers, _result([1]), "teleport")

    def test_missing_column(self, applicator, numbers):
        with pytest.raises(FixApplicationError, match="height"):
            applicator.apply(numbers, _result([1], columns=("height",)), "fill_zero")

    def test_cell_action_without_column(self, applicator, numbers):
        with pytest.raises(FixApplicationError):
            applicator.apply(numbers, _result([1], columns=()), "fill_zero")


@pytest.mark.unit
class TestRepairHelpers:
    """Test repair_email and cap_age."""

    @pytest.mark.parametrize("value,expected", [
        ("bob at example dot com", "bob@example.com"),
        ("bob@", "bob@gmail.com"),
        ("bob@example", "bob@example.com"),
        ("bob@example.com", "bob@example.com"),
        (None, None),
    ])
    def test_repair_email(self, value, expected):
        assert repair_email(value) == expected

    @pytest.mark.parametrize("value,expected", [(130, 120), (-1, None), (40, 40), ("old", "old")])
    def test_cap_age(self, value, expected):
        assert cap_age(value) == expected
