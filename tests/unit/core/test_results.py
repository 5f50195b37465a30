"""
Tests for the result types: severities, issues, statistics, analysis
snapshots and validation results.
"""

import json

import numpy as np
import pytest

from tablesift.core.results import (
    AnalysisResult,
    ColumnStatistics,
    ContextualIssue,
    CrossFieldIssue,
    FixOption,
    OutlierInfo,
    Severity,
    ValidationResult,
)


def _analysis(**overrides):
    values = dict(
        total_rows=4,
        total_columns=1,
        null_values={"age": 0},
        duplicates=0,
        data_types={"age": "number"},
        statistics={"age": ColumnStatistics(count=4, unique_values=4, min=-5, max=200)},
        outliers={"age": []},
        contextual_issues=[
            ContextualIssue("age", 0, -5, "Negative age value", Severity.CRITICAL, "Fix it"),
            ContextualIssue("age", 3, 200, "Unrealistic age value", Severity.HIGH, "Check it"),
        ],
        cross_field_issues=[],
        quality_score=97,
    )
    values.update(overrides)
    return AnalysisResult(**values)


# ============================================================================
# SEVERITY
# ============================================================================

@pytest.mark.unit
class TestSeverity:
    """Test the four-level severity enum."""

    def test_values(self):
        assert [s.value for s in Severity] == ["low", "medium", "high", "critical"]

    def test_parse_is_case_insensitive(self):
        assert Severity.parse("HIGH") is Severity.HIGH
        assert Severity.parse(" critical ") is Severity.CRITICAL
        assert Severity.parse(Severity.LOW) is Severity.LOW

    def test_parse_rejects_unknown(self):
        with pytest.raises(ValueError, match="urgent"):
            Severity.parse("urgent")

    def test_rank_orders_levels(self):
        assert Severity.LOW.rank < Severity.MEDIUM.rank < Severity.HIGH.rank < Severity.CRITICAL.rank


# ============================================================================
# ISSUES AND STATISTICS
# ============================================================================

@pytest.mark.unit
class TestIssueSerialization:
    """Test to_dict of the issue types."""

    def test_contextual_issue_converts_numpy_value(self):
        issue = ContextualIssue("age", 1, np.int64(200), "Unrealistic age value", Severity.HIGH, "Check")
        data = issue.to_dict()

        assert data["value"] == 200
        assert isinstance(data["value"], int)
        assert data["severity"] == "high"

    def test_cross_field_issue(self):
        issue = CrossFieldIssue(("start_date", "end_date"), 2, "Start date is after end date",
                                Severity.CRITICAL, "Swap")
        assert issue.to_dict()["columns"] == ["start_date", "end_date"]

    def test_outlier_rounds_z_score(self):
        assert OutlierInfo(9, 100, 3.000012345).to_dict() == {"row_index": 9, "value": 100, "z_score": 3.0}

    def test_statistics_omit_inapplicable_fields(self):
        data = ColumnStatistics(count=3, unique_values=2, most_common="a", most_common_count=2).to_dict()

        assert data == {"count": 3, "unique_values": 2, "most_common": "a", "most_common_count": 2}


# ============================================================================
# ANALYSIS RESULT
# ============================================================================

@pytest.mark.unit
class TestAnalysisResult:
    """Test the analysis snapshot."""

    def test_total_issues(self):
        assert _analysis().total_issues == 2

    def test_issues_by_severity(self):
        counts = _analysis().issues_by_severity()
        assert counts == {"low": 0, "medium": 0, "high": 1, "critical": 1}

    def test_to_dict_is_json_ready(self):
        data = _analysis().to_dict()

        assert data["quality_score"] == 97
        assert data["statistics"]["age"]["min"] == -5
        assert data["contextual_issues"][0]["issue"] == "Negative age value"
        json.dumps(data)


# ============================================================================
# VALIDATION RESULT AND FIX OPTION
# ============================================================================

@pytest.mark.unit
class TestValidationResult:
    """Test ValidationResult helpers."""

    def test_single_column_property(self):
        result = ValidationResult("r", "Rule", Severity.LOW, (1,), "d", "s", columns=("age",))
        assert result.column == "age"

    def test_column_none_for_many_columns(self):
        result = ValidationResult("r", "Rule", Severity.LOW, (1,), "d", "s", columns=("a", "b"))
        assert result.column is None

    def test_defaults(self):
        result = ValidationResult("r", "Rule", Severity.LOW, (), "d", "s")

        assert result.can_auto_fix is False
        assert result.rule_type == "custom"
        assert result.columns == ()

    def test_to_dict_includes_fix_scripts_only_when_present(self):
        plain = ValidationResult("r", "Rule", Severity.LOW, (0,), "d", "s").to_dict()
        scripted = ValidationResult("r", "Rule", Severity.LOW, (0,), "d", "s", sql_fix="DELETE").to_dict()

        assert "sql_fix" not in plain
        assert scripted["sql_fix"] == "DELETE"
        assert scripted["affected_rows"] == [0]

    def test_fix_option_to_dict(self):
        option = FixOption("delete", "Delete rows", "Remove rows", "delete", "2 row(s) will be removed")
        assert option.to_dict()["action"] == "delete"
