"""
TableSift Exception Hierarchy.

This module defines the exception hierarchy for the TableSift engine,
providing clear categorization of errors and standardized error handling
across profiling, validation and fixing.

Exception Severity Levels:
    - FATAL: Stop all processing immediately (bad configuration)
    - CRITICAL: Stop the current pass, no partial result is produced
    - RECOVERABLE: Log error, skip the failing unit, continue processing
    - WARNING: Log warning, processing continues
"""

from typing import Optional, Dict, Any, List
from enum import Enum


class ErrorSeverity(Enum):
    """
    Classify error severity for handling decisions.

    Attributes:
        FATAL: Unrecoverable error, stop all processing
        CRITICAL: Pass-level error, stop the current analysis pass
        RECOVERABLE: Rule-level error, continue with other rules
        WARNING: Non-critical issue, log and continue
    """
    FATAL = "fatal"
    CRITICAL = "critical"
    RECOVERABLE = "recoverable"
    WARNING = "warning"


class TableSiftException(Exception):
    """
    Base exception for all TableSift errors with enhanced context.

    All TableSift exceptions inherit from this base class, providing:
    - Severity classification for handling decisions
    - Structured details dictionary for logging/reporting
    - Original exception preservation for debugging
    - Serialization support for JSON/dict output

    Attributes:
        message (str): Human-readable error message
        severity (ErrorSeverity): Error severity level
        details (Dict[str, Any]): Additional context (column, rule, pass name, etc.)
        original_exception (Optional[Exception]): Original exception if wrapping

    Example:
        >>> try:
        ...     stats = compute()
        ... except Exception as e:
        ...     raise TableSiftException(
        ...         "Statistics failed",
        ...         severity=ErrorSeverity.RECOVERABLE,
        ...         details={'column': 'age'},
        ...         original_exception=e
        ...     )
    """

    def __init__(
        self,
        message: str,
        severity: ErrorSeverity = ErrorSeverity.RECOVERABLE,
        details: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        """
        Initialize TableSift exception.

        Args:
            message: Human-readable error description
            severity: Error severity level (default: RECOVERABLE)
            details: Additional context dictionary
            original_exception: Original exception if this wraps another error
        """
        super().__init__(message)
        self.message = message
        self.severity = severity
        self.details = details or {}
        self.original_exception = original_exception

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize exception to dictionary for logging/reporting.

        Returns:
            Dictionary containing exception details suitable for JSON serialization
        """
        return {
            'type': self.__class__.__name__,
            'message': self.message,
            'severity': self.severity.value,
            'details': self.details,
            'original_error': str(self.original_exception) if self.original_exception else None
        }


# ============================================================================
# Configuration Errors (Fatal)
# ============================================================================

class ConfigError(TableSiftException):
    """
    Configuration file errors (fatal - stop all processing).

    Raised when:
    - Configuration file not found
    - Invalid YAML syntax
    - Invalid configuration structure

    Attributes:
        field (Optional[str]): Specific config field that caused error
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message,
            severity=ErrorSeverity.FATAL,
            details={'field': field} if field else {}
        )
        self.field = field


class YAMLSizeError(ConfigError):
    """
    YAML file too large or too deeply nested.

    Example:
        >>> raise YAMLSizeError(
        ...     "Config file exceeds 10MB limit",
        ...     file_size=15000000,
        ...     max_size=10000000
        ... )
    """

    def __init__(self, message: str, file_size: Optional[int] = None, max_size: Optional[int] = None):
        super().__init__(message)
        self.details.update({
            'file_size': file_size,
            'max_size': max_size
        })


class ConfigValidationError(ConfigError):
    """
    Configuration is valid YAML but does not match the expected structure.

    Example:
        >>> raise ConfigValidationError(
        ...     "Invalid severity value: 'urgent'",
        ...     field="rules[0].severity",
        ...     expected="low, medium, high, critical",
        ...     actual="urgent"
        ... )
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[str] = None
    ):
        super().__init__(message, field)
        self.details.update({
            'expected': expected,
            'actual': actual
        })


# ============================================================================
# Data Loading Errors (Critical)
# ============================================================================

class DataLoadError(TableSiftException):
    """
    Data file loading errors (critical - no dataset is produced).

    Attributes:
        file_path (str): Path to file that failed to load
    """

    def __init__(
        self,
        message: str,
        file_path: str,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(
            message,
            severity=ErrorSeverity.CRITICAL,
            details={'file_path': file_path},
            original_exception=original_exception
        )
        self.file_path = file_path


class UnsupportedFormatError(DataLoadError):
    """
    File format not supported by the table loader.

    Example:
        >>> raise UnsupportedFormatError(
        ...     "customers.xml",
        ...     format="xml",
        ...     supported_formats=["csv", "excel"]
        ... )
    """

    def __init__(self, file_path: str, format: str, supported_formats: list):
        super().__init__(
            f"Unsupported file format '{format}'. Supported: {', '.join(supported_formats)}",
            file_path
        )
        self.details.update({
            'format': format,
            'supported_formats': supported_formats
        })


# ============================================================================
# Analysis Errors (Critical)
# ============================================================================

class DatasetShapeError(TableSiftException):
    """
    Dataset shape is unusable for a profiling pass.

    Raised when:
    - The header list is empty
    - The dataset has no rows
    - Header names are not unique

    No partial AnalysisResult is produced.

    Example:
        >>> raise DatasetShapeError("No columns found in the dataset", reason="empty_headers")
    """

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(
            message,
            severity=ErrorSeverity.CRITICAL,
            details={'reason': reason} if reason else {}
        )
        self.reason = reason


class AnalysisPassError(TableSiftException):
    """
    Unexpected failure inside one analysis pass.

    The message names the pass that failed so the caller can surface a
    single failure message.

    Example:
        >>> raise AnalysisPassError("statistics", original_exception=ValueError("boom"))
    """

    def __init__(self, pass_name: str, original_exception: Optional[Exception] = None):
        reason = f": {original_exception}" if original_exception else ""
        super().__init__(
            f"Analysis pass '{pass_name}' failed{reason}",
            severity=ErrorSeverity.CRITICAL,
            details={'pass': pass_name},
            original_exception=original_exception
        )
        self.pass_name = pass_name


class AnalysisCancelledError(TableSiftException):
    """Analysis was cancelled through a CancellationToken."""

    def __init__(self, pass_name: Optional[str] = None, rows_processed: Optional[int] = None):
        super().__init__(
            "Analysis cancelled" + (f" during '{pass_name}'" if pass_name else ""),
            severity=ErrorSeverity.WARNING,
            details={'pass': pass_name, 'rows_processed': rows_processed}
        )
        self.pass_name = pass_name


# ============================================================================
# Rule and Fix Errors (Recoverable)
# ============================================================================

class RuleEvaluationError(TableSiftException):
    """
    A custom rule failed to evaluate.

    These errors are caught per rule by the CustomRuleEngine: the rule's
    output is omitted and the validation run continues.

    Example:
        >>> raise RuleEvaluationError(
        ...     "Rule columns must be a list of column names",
        ...     rule_id="r1",
        ...     rule_name="Age check"
        ... )
    """

    def __init__(
        self,
        message: str,
        rule_id: Optional[str] = None,
        rule_name: Optional[str] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(
            message,
            severity=ErrorSeverity.RECOVERABLE,
            details={'rule_id': rule_id, 'rule_name': rule_name},
            original_exception=original_exception
        )
        self.rule_id = rule_id
        self.rule_name = rule_name


class ColumnNotFoundError(TableSiftException):
    """
    Referenced column does not exist in the dataset.

    Example:
        >>> raise ColumnNotFoundError("salary", available_columns=["name", "age"])
    """

    def __init__(self, column: str, available_columns: Optional[List[str]] = None):
        available = available_columns or []
        super().__init__(
            f"Column '{column}' not found. Available columns: {', '.join(available)}",
            severity=ErrorSeverity.RECOVERABLE,
            details={'column': column, 'available_columns': available}
        )
        self.column = column


class FixApplicationError(TableSiftException):
    """
    A fix could not be applied to the dataset.

    Raised for unknown fix actions, fixes that need a column when the
    validation result names none, or numeric fills on non-numeric columns.
    The input dataset is left untouched.
    """

    def __init__(
        self,
        message: str,
        action: Optional[str] = None,
        column: Optional[str] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(
            message,
            severity=ErrorSeverity.RECOVERABLE,
            details={'action': action, 'column': column},
            original_exception=original_exception
        )
        self.action = action
