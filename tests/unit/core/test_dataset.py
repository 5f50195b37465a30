"""
Unit tests for the Dataset model and cell coercion helpers.
"""

import math
from datetime import date, datetime

import numpy as np
import pandas as pd
import pytest

from tablesift.core.dataset import (
    Dataset,
    convert_numpy_types,
    is_blank,
    is_missing,
    is_truthy,
    normalize_number,
    parse_date,
    to_number,
    to_text,
)
from tablesift.core.exceptions import ColumnNotFoundError, DatasetShapeError


# ============================================================================
# CELL HELPERS
# ============================================================================

@pytest.mark.unit
class TestMissingAndBlank:
    """Test null detection helpers."""

    @pytest.mark.parametrize("value", [None, "", float("nan"), pd.NaT, np.nan])
    def test_missing_values(self, value):
        assert is_missing(value)

    @pytest.mark.parametrize("value", [0, False, " ", "0", "text", 1.5])
    def test_present_values(self, value):
        assert not is_missing(value)

    def test_whitespace_is_blank_but_not_missing(self):
        assert is_blank("   ")
        assert not is_missing("   ")


@pytest.mark.unit
class TestTruthiness:
    """Test loose truthiness used by cross-field and rule checks."""

    @pytest.mark.parametrize("value", [None, "", 0, 0.0, False])
    def test_falsy(self, value):
        assert not is_truthy(value)

    @pytest.mark.parametrize("value", ["0", " ", 1, -3, True, date(2024, 1, 1)])
    def test_truthy(self, value):
        assert is_truthy(value)


@pytest.mark.unit
class TestNumberCoercion:
    """Test numeric coercion."""

    @pytest.mark.parametrize("value,expected", [
        (5, 5.0),
        ("12.5", 12.5),
        (" 42 ", 42.0),
        ("-3", -3.0),
        ("1e3", 1000.0),
        ("0x1A", 26.0),
        (True, 1.0),
    ])
    def test_numeric(self, value, expected):
        assert to_number(value) == expected

    def test_infinity_literal(self):
        assert to_number("Infinity") == math.inf
        assert to_number("-Infinity") == -math.inf

    @pytest.mark.parametrize("value", [None, "", "abc", "12abc", "2024-01-15", float("nan")])
    def test_not_numeric(self, value):
        assert to_number(value) is None

    def test_normalize_number(self):
        assert normalize_number(30.0) == 30
        assert isinstance(normalize_number(30.0), int)
        assert normalize_number(2.5) == 2.5


@pytest.mark.unit
class TestTextAndDates:
    """Test text rendering and date parsing."""

    def test_to_text(self):
        assert to_text(None) == ""
        assert to_text(True) == "true"
        assert to_text(30.0) == "30"
        assert to_text(date(2024, 1, 15)) == "2024-01-15"

    def test_parse_iso_string(self):
        assert parse_date("2024-01-15") == datetime(2024, 1, 15)

    def test_parse_month_name(self):
        assert parse_date("March 3, 2020") == datetime(2020, 3, 3)

    def test_parse_epoch_milliseconds(self):
        assert parse_date(0) == datetime(1970, 1, 1)

    @pytest.mark.parametrize("value", [None, "", "hello", "not a date", True])
    def test_unparseable(self, value):
        assert parse_date(value) is None

    def test_convert_numpy_types(self):
        converted = convert_numpy_types({"a": np.int64(3), "b": [np.float64(1.5), np.nan]})
        assert converted == {"a": 3, "b": [1.5, None]}
        assert isinstance(converted["a"], int)


# ============================================================================
# DATASET
# ============================================================================

@pytest.mark.unit
class TestDataset:
    """Test Dataset construction and access."""

    def test_from_records_infers_header_order(self):
        ds = Dataset.from_records([{"a": 1, "b": 2}, {"c": 3}])

        assert ds.headers == ("a", "b", "c")
        assert ds.rows[1] == {"a": None, "b": None, "c": 3}

    def test_duplicate_headers_rejected(self):
        with pytest.raises(DatasetShapeError) as exc_info:
            Dataset(headers=("a", "a"), rows=())
        assert exc_info.value.reason == "duplicate_headers"

    def test_column_access(self):
        ds = Dataset.from_records([{"age": 30}, {"age": None}])

        assert ds.column("age") == [30, None]
        with pytest.raises(ColumnNotFoundError):
            ds.column("salary")

    def test_from_dataframe_converts_nan(self):
        df = pd.DataFrame({"x": [1.0, np.nan], "y": ["a", None]})
        ds = Dataset.from_dataframe(df, name="frame")

        assert ds.name == "frame"
        assert ds.column("x") == [1.0, None]
        assert ds.column("y") == ["a", None]

    def test_to_dataframe_round_trip_shape(self):
        ds = Dataset.from_records([{"a": 1, "b": "x"}, {"a": 2, "b": "y"}])
        df = ds.to_dataframe()

        assert list(df.columns) == ["a", "b"]
        assert len(df) == 2

    def test_with_rows_is_new_dataset(self):
        ds = Dataset.from_records([{"a": 1}], name="orig")
        changed = ds.with_rows([{"a": 2}])

        assert ds.column("a") == [1]
        assert changed.column("a") == [2]
        assert changed.name == "orig"

    def test_counts(self):
        ds = Dataset.from_records([{"a": 1, "b": 2}] * 3)

        assert ds.row_count == 3
        assert ds.column_count == 2
        assert len(ds) == 3
