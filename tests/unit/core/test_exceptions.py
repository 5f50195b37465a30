"""
Unit tests for exception hierarchy.

Tests the TableSift exception classes and their serialization.
"""

import pytest

from tablesift.core.exceptions import (
    TableSiftException,
    ErrorSeverity,
    ConfigError,
    YAMLSizeError,
    ConfigValidationError,
    DataLoadError,
    UnsupportedFormatError,
    DatasetShapeError,
    AnalysisPassError,
    AnalysisCancelledError,
    RuleEvaluationError,
    ColumnNotFoundError,
    FixApplicationError,
)


@pytest.mark.unit
class TestErrorSeverity:
    """Test error severity enum."""

    def test_severity_values(self):
        """Test that all severity levels exist."""
        assert ErrorSeverity.FATAL.value == "fatal"
        assert ErrorSeverity.CRITICAL.value == "critical"
        assert ErrorSeverity.RECOVERABLE.value == "recoverable"
        assert ErrorSeverity.WARNING.value == "warning"


@pytest.mark.unit
class TestTableSiftException:
    """Test base exception class."""

    def test_basic_exception(self):
        exc = TableSiftException("Test error")

        assert str(exc) == "Test error"
        assert exc.message == "Test error"
        assert exc.severity == ErrorSeverity.RECOVERABLE
        assert exc.details == {}
        assert exc.original_exception is None

    def test_exception_serialization(self):
        exc = TableSiftException(
            "Test error",
            severity=ErrorSeverity.CRITICAL,
            details={'column': 'age'},
            original_exception=ValueError("Original")
        )

        result = exc.to_dict()

        assert result['type'] == 'TableSiftException'
        assert result['message'] == 'Test error'
        assert result['severity'] == 'critical'
        assert result['details']['column'] == 'age'
        assert 'Original' in result['original_error']

    def test_serialization_without_original(self):
        assert TableSiftException("Test").to_dict()['original_error'] is None


@pytest.mark.unit
class TestConfigErrors:
    """Test configuration error classes."""

    def test_config_error_is_fatal(self):
        exc = ConfigError("Config error", field="engine")

        assert exc.severity == ErrorSeverity.FATAL
        assert exc.field == "engine"
        assert exc.details['field'] == "engine"

    def test_yaml_size_error(self):
        exc = YAMLSizeError("File too large", file_size=15000000, max_size=10000000)

        assert isinstance(exc, ConfigError)
        assert exc.details['file_size'] == 15000000
        assert exc.details['max_size'] == 10000000

    def test_config_validation_error(self):
        exc = ConfigValidationError(
            "Invalid severity",
            field="rules[0].severity",
            expected="low, medium, high, critical",
            actual="urgent"
        )

        assert isinstance(exc, ConfigError)
        assert exc.details['field'] == "rules[0].severity"
        assert exc.details['actual'] == "urgent"


@pytest.mark.unit
class TestDataErrors:
    """Test loading and dataset shape errors."""

    def test_data_load_error_is_critical(self):
        exc = DataLoadError("File not found", file_path="missing.csv")

        assert exc.severity == ErrorSeverity.CRITICAL
        assert exc.file_path == "missing.csv"
        assert exc.details['file_path'] == "missing.csv"

    def test_unsupported_format_lists_formats(self):
        exc = UnsupportedFormatError("data.json", ".json", ["csv", "excel"])

        assert isinstance(exc, DataLoadError)
        assert "csv" in str(exc)
        assert "excel" in str(exc)

    def test_dataset_shape_error_reason(self):
        exc = DatasetShapeError("Dataset has no rows", reason="empty_rows")

        assert exc.reason == "empty_rows"
        assert exc.details == {'reason': 'empty_rows'}


@pytest.mark.unit
class TestAnalysisErrors:
    """Test analysis pass and cancellation errors."""

    def test_pass_error_names_pass(self):
        exc = AnalysisPassError("statistics", ZeroDivisionError("boom"))

        assert exc.pass_name == "statistics"
        assert "statistics" in str(exc)
        assert exc.severity == ErrorSeverity.CRITICAL

    def test_cancelled_error_is_warning(self):
        exc = AnalysisCancelledError("outliers", rows_processed=5000)

        assert exc.severity == ErrorSeverity.WARNING
        assert exc.pass_name == "outliers"
        assert exc.details['rows_processed'] == 5000


@pytest.mark.unit
class TestRecoverableErrors:
    """Test rule, column and fix errors."""

    def test_rule_evaluation_error(self):
        exc = RuleEvaluationError("Bad rule", rule_id="r1", rule_name="Ages")

        assert exc.severity == ErrorSeverity.RECOVERABLE
        assert exc.rule_id == "r1"
        assert exc.rule_name == "Ages"

    def test_column_not_found_lists_columns(self):
        exc = ColumnNotFoundError("salary", ["name", "age"])

        assert exc.column == "salary"
        assert "name, age" in str(exc)

    def test_fix_application_error(self):
        exc = FixApplicationError("No column", action="fill_mean", column="age")

        assert exc.action == "fill_mean"
        assert exc.details == {'action': 'fill_mean', 'column': 'age'}
