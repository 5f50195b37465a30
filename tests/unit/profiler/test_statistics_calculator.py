"""
Unit tests for StatisticsCalculator and round_half_up.
"""

import pytest

from tablesift.core.dataset import Dataset
from tablesift.profiler.statistics_calculator import StatisticsCalculator, round_half_up


@pytest.fixture
def calculator():
    return StatisticsCalculator()


# ============================================================================
# NUMERIC COLUMNS
# ============================================================================

@pytest.mark.unit
class TestNumericStatistics:
    """Test statistics for number columns."""

    def test_basic_numbers(self, calculator):
        stats = calculator.calculate_statistics([4, 1, 3, 2], "number")

        assert stats.count == 4
        assert stats.unique_values == 4
        assert (stats.min, stats.max) == (1, 4)
        assert stats.mean == 2.5
        assert stats.median == 2.5
        assert stats.std_dev == 1.12
        assert (stats.q1, stats.q3) == (2, 4)

    def test_non_numeric_cells_skipped(self, calculator):
        stats = calculator.calculate_statistics([10, None, "abc", "20"], "number")

        assert stats.count == 2
        assert stats.mean == 15
        assert stats.most_common is None

    def test_unique_values_count_raw_cells(self, calculator):
        stats = calculator.calculate_statistics([10, "abc", 10, "n/a", None], "number")

        assert stats.count == 2
        assert stats.unique_values == 3

    def test_negative_mean_rounds_away_from_zero(self, calculator):
        assert calculator.calculate_statistics([-0.25, 0], "number").mean == -0.13

    def test_infinity_ignored(self, calculator):
        stats = calculator.calculate_statistics([1, "Infinity", 3], "number")
        assert stats.max == 3

    def test_no_numbers(self, calculator):
        stats = calculator.calculate_statistics([None, "x"], "number")

        assert stats.count == 0
        assert stats.mean is None


# ============================================================================
# OTHER COLUMNS
# ============================================================================

@pytest.mark.unit
class TestFrequencyStatistics:
    """Test statistics for non-numeric columns."""

    def test_string_column(self, calculator):
        stats = calculator.calculate_statistics(["a", "b", "a", None], "string")

        assert stats.count == 3
        assert stats.unique_values == 2
        assert stats.most_common == "a"
        assert stats.most_common_count == 2
        assert stats.average_length == 1.0

    def test_tie_goes_to_first_seen(self, calculator):
        assert calculator.calculate_statistics(["y", "x"], "string").most_common == "y"

    def test_average_length_only_for_strings(self, calculator):
        stats = calculator.calculate_statistics(["a@b.com", "c@d.com"], "email")

        assert stats.average_length is None
        assert stats.min is None

    def test_all_columns(self, calculator, people_dataset):
        types = {"name": "string", "age": "number", "email": "email", "salary": "number"}
        stats = calculator.calculate_all(people_dataset, types)

        assert list(stats) == list(people_dataset.headers)
        assert stats["salary"].count == 3
        assert stats["name"].average_length == 4.0

    def test_empty_dataset_column(self, calculator):
        ds = Dataset.from_records([{"x": None}])
        assert calculator.calculate_all(ds, {"x": "unknown"})["x"].count == 0


@pytest.mark.unit
class TestRounding:
    """Test half-up rounding."""

    @pytest.mark.parametrize("value,digits,expected", [
        (2.5, 0, 3),
        (0.125, 2, 0.13),
        (1.04, 1, 1.0),
        (93.75, 0, 94),
        (-0.125, 2, -0.13),
        (-2.5, 0, -3),
    ])
    def test_round_half_up(self, value, digits, expected):
        assert round_half_up(value, digits) == expected
