"""
Unit tests for suggested cleaning actions and the bulk clean-up helpers.
"""

import pytest

from tablesift.core.dataset import Dataset
from tablesift.core.exceptions import FixApplicationError
from tablesift.fixes.cleaning_actions import (
    CleaningAction,
    apply_cleaning_action,
    delete_rows,
    fill_missing_by_type,
    format_text,
    normalize_formatting,
    remove_duplicates,
    repair_common_values,
    repair_value,
    suggest_cleaning_actions,
)


@pytest.fixture
def messy():
    return Dataset.from_records([
        {"city": "  Leeds ", "code": "abc"},
        {"city": None, "code": "DEF"},
        {"city": "York", "code": "gHi"},
    ])


# ============================================================================
# SUGGESTED ACTIONS
# ============================================================================

@pytest.mark.unit
class TestSuggestCleaningActions:
    """Test per-column suggestions."""

    def test_suggestions(self, messy):
        ids = [a.id for a in suggest_cleaning_actions(messy)]
        assert ids == ["fill_nulls_city", "trim_city", "standardize_case_city", "standardize_case_code"]

    def test_clean_dataset_has_none(self):
        ds = Dataset.from_records([{"code": "abc"}, {"code": "DEF"}])
        assert suggest_cleaning_actions(ds) == []

    def test_description_counts(self, messy):
        fill = suggest_cleaning_actions(messy)[0]
        assert fill.description == "Fill 1 empty value(s) in 'city' with 'N/A'"

    def test_to_dict(self):
        action = CleaningAction("trim_city", "trim", "Trim", "city", row_index=2)
        assert action.to_dict()["row_index"] == 2


@pytest.mark.unit
class TestApplyCleaningAction:
    """Test applying one suggestion."""

    def test_fill_nulls(self, messy):
        action = CleaningAction("fill_nulls_city", "fill_nulls", "Fill", "city")
        assert apply_cleaning_action(messy, action).column("city")[1] == "N/A"

    def test_trim(self, messy):
        action = CleaningAction("trim_city", "trim", "Trim", "city")
        assert apply_cleaning_action(messy, action).column("city") == ["Leeds", None, "York"]

    def test_lowercase_single_cell(self, messy):
        action = CleaningAction("standardize_case_code_2", "standardize_case", "Lower", "code", row_index=2)
        assert apply_cleaning_action(messy, action).column("code") == ["abc", "DEF", "ghi"]

    def test_missing_column(self, messy):
        with pytest.raises(FixApplicationError):
            apply_cleaning_action(messy, CleaningAction("trim_x", "trim", "Trim", "x"))

    def test_unknown_type(self, messy):
        with pytest.raises(FixApplicationError, match="Unknown cleaning action"):
            apply_cleaning_action(messy, CleaningAction("shout_city", "shout", "Shout", "city"))


# ============================================================================
# BULK CLEAN-UPS
# ============================================================================

@pytest.mark.unit
class TestBulkCleanups:
    """Test the whole-dataset helpers."""

    def test_delete_rows(self, messy):
        assert delete_rows(messy, [0, 7]).row_count == 2

    def test_remove_duplicates(self, duplicate_dataset):
        deduped, removed = remove_duplicates(duplicate_dataset)

        assert removed == 1
        assert deduped.row_count == 2

    def test_fill_missing_by_first_value(self):
        ds = Dataset.from_records([{"n": 1, "s": "a", "x": None}, {"n": None, "s": None, "x": None}])
        filled, changed = fill_missing_by_type(ds)

        assert changed == 4
        assert filled.rows[1] == {"n": 0, "s": "Unknown", "x": ""}

    def test_fill_missing_with_inferred_types(self):
        ds = Dataset.from_records([{"n": "1"}, {"n": None}])
        filled, _ = fill_missing_by_type(ds, {"n": "number"})

        assert filled.column("n") == ["1", 0]

    @pytest.mark.parametrize("header,value,expected", [
        ("email", "  Bob@Example.COM ", "bob@example.com"),
        ("full_name", "mary   ann o'neil", "Mary Ann O'neil"),
        ("city", "new york", "New York"),
        ("notes", "  Keep  As Is ", "Keep As Is"),
    ])
    def test_format_text(self, header, value, expected):
        assert format_text(header, value) == expected

    def test_normalize_formatting_counts_changes(self, messy):
        normalized, changed = normalize_formatting(messy)

        assert changed == 1
        assert normalized.column("city")[0] == "Leeds"

    @pytest.mark.parametrize("header,value,expected", [
        ("email", "nobody", "invalid@example.com"),
        ("email", "a@b.com", "a@b.com"),
        ("phone", "(555) 123-4567", "5551234567"),
        ("price", -9.5, 9.5),
        ("price", None, None),
        ("qty", -3, -3),
    ])
    def test_repair_value(self, header, value, expected):
        assert repair_value(header, value) == expected

    def test_repair_common_values(self, people_dataset):
        repaired, changed = repair_common_values(people_dataset)

        assert changed == 1
        assert repaired.column("email")[2] == "invalid@example.com"
