"""
Result Classes.

This module defines the dataclasses produced by the engine:
- Severity: issue severity levels
- ContextualIssue / CrossFieldIssue: row-level validation findings
- OutlierInfo: one z-score outlier
- ColumnStatistics: per-column descriptive statistics
- AnalysisResult: immutable snapshot of one profiling pass
- ValidationResult: one rule's findings (built-in or custom)
- FixOption: a remedy that can be applied to a ValidationResult
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional, Tuple
from enum import Enum

from tablesift.core.dataset import convert_numpy_types


class Severity(Enum):
    """
    Issue severity levels, from least to most severe.

    Example:
        >>> Severity.parse("HIGH")
        <Severity.HIGH: 'high'>
    """
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @classmethod
    def parse(cls, value: Any) -> "Severity":
        """
        Parse a severity from an enum member or a case-insensitive string.

        Raises:
            ValueError: If the value is not one of the four levels
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(s.value for s in cls)
            raise ValueError(f"Invalid severity '{value}'. Expected one of: {valid}")

    @property
    def rank(self) -> int:
        """Numeric rank (1 = low, 4 = critical)."""
        return list(Severity).index(self) + 1


@dataclass(frozen=True)
class ContextualIssue:
    """
    A defect found in a single cell, judged by its column's semantic role.

    Attributes:
        column: Column where the issue was found
        row: Row index
        value: The offending value
        issue: Short description of what is wrong
        severity: Impact level
        suggestion: How to fix this specific issue
    """
    column: str
    row: int
    value: Any
    issue: str
    severity: Severity
    suggestion: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "column": self.column,
            "row": self.row,
            "value": convert_numpy_types(self.value),
            "issue": self.issue,
            "severity": self.severity.value,
            "suggestion": self.suggestion,
        }


@dataclass(frozen=True)
class CrossFieldIssue:
    """
    A defect in the relationship between two or more columns of one row.

    Attributes:
        columns: Columns involved
        row: Row index
        issue: Description of the relationship problem
        severity: Impact level
        suggestion: How to fix it
    """
    columns: Tuple[str, ...]
    row: int
    issue: str
    severity: Severity
    suggestion: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "columns": list(self.columns),
            "row": self.row,
            "issue": self.issue,
            "severity": self.severity.value,
            "suggestion": self.suggestion,
        }


@dataclass(frozen=True)
class OutlierInfo:
    """A numeric value whose absolute z-score exceeds the outlier threshold."""
    row_index: int
    value: float
    z_score: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "row_index": self.row_index,
            "value": self.value,
            "z_score": round(float(self.z_score), 4),
        }


@dataclass(frozen=True)
class ColumnStatistics:
    """
    Descriptive statistics for one column.

    Numeric columns fill min/max/mean/median/std_dev/q1/q3; every other type
    fills most_common/most_common_count, and string columns also
    average_length. Fields that do not apply stay None.
    """
    count: int = 0
    unique_values: int = 0

    # Numeric statistics
    min: Optional[float] = None
    max: Optional[float] = None
    mean: Optional[float] = None
    median: Optional[float] = None
    std_dev: Optional[float] = None
    q1: Optional[float] = None
    q3: Optional[float] = None

    # Frequency statistics
    most_common: Optional[str] = None
    most_common_count: Optional[int] = None
    average_length: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, omitting statistics that do not apply."""
        return {
            key: value
            for key, value in self.__dict__.items()
            if value is not None
        }


@dataclass(frozen=True)
class AnalysisResult:
    """
    Immutable snapshot of one profiling pass over a dataset.

    Superseded (never mutated) by the next pass.

    Attributes:
        total_rows: Number of rows analysed
        total_columns: Number of columns analysed
        null_values: Null/blank cell count per column
        duplicates: Number of exact duplicate rows
        data_types: Inferred type per column
        statistics: Descriptive statistics per column
        outliers: Z-score outliers per column (empty list for non-numeric)
        contextual_issues: Single-cell issues (capped)
        cross_field_issues: Multi-column issues (capped)
        quality_score: Overall score, integer in [0, 100]
    """
    total_rows: int
    total_columns: int
    null_values: Dict[str, int]
    duplicates: int
    data_types: Dict[str, str]
    statistics: Dict[str, ColumnStatistics]
    outliers: Dict[str, List[OutlierInfo]]
    contextual_issues: List[ContextualIssue]
    cross_field_issues: List[CrossFieldIssue]
    quality_score: int

    @property
    def total_issues(self) -> int:
        return len(self.contextual_issues) + len(self.cross_field_issues)

    def issues_by_severity(self) -> Dict[str, int]:
        """Count contextual plus cross-field issues per severity level."""
        counts = {s.value: 0 for s in Severity}
        for issue in list(self.contextual_issues) + list(self.cross_field_issues):
            counts[issue.severity.value] += 1
        return counts

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "total_rows": self.total_rows,
            "total_columns": self.total_columns,
            "null_values": dict(self.null_values),
            "duplicates": self.duplicates,
            "data_types": dict(self.data_types),
            "statistics": {col: stats.to_dict() for col, stats in self.statistics.items()},
            "outliers": {
                col: [o.to_dict() for o in outliers]
                for col, outliers in self.outliers.items()
            },
            "contextual_issues": [i.to_dict() for i in self.contextual_issues],
            "cross_field_issues": [i.to_dict() for i in self.cross_field_issues],
            "quality_score": self.quality_score,
        }


@dataclass(frozen=True)
class ValidationResult:
    """
    Findings of one validation rule.

    Built-in checks (null values, duplicates) are auto-fixable; custom rules
    never are.

    Attributes:
        id: Unique identifier for this result
        rule: Name of the rule that produced it
        severity: Impact level
        affected_rows: Row indices with this issue (capped)
        description: Human-readable description
        suggestion: Recommended action
        can_auto_fix: Whether a fix can be applied without review
        rule_type: Kind of rule (null_values, duplicates, custom_age, ...)
        columns: Columns the result concerns
        sql_fix: Optional SQL fix template
        python_fix: Optional Python fix template
    """
    id: str
    rule: str
    severity: Severity
    affected_rows: Tuple[int, ...]
    description: str
    suggestion: str
    can_auto_fix: bool = False
    rule_type: str = "custom"
    columns: Tuple[str, ...] = field(default_factory=tuple)
    sql_fix: Optional[str] = None
    python_fix: Optional[str] = None

    @property
    def column(self) -> Optional[str]:
        """The single concerned column, or None when there are zero or several."""
        return self.columns[0] if len(self.columns) == 1 else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            "id": self.id,
            "rule": self.rule,
            "severity": self.severity.value,
            "affected_rows": list(self.affected_rows),
            "description": self.description,
            "suggestion": self.suggestion,
            "can_auto_fix": self.can_auto_fix,
            "rule_type": self.rule_type,
            "columns": list(self.columns),
        }
        if self.sql_fix:
            result["sql_fix"] = self.sql_fix
        if self.python_fix:
            result["python_fix"] = self.python_fix
        return result


@dataclass(frozen=True)
class FixOption:
    """
    A remedy for a ValidationResult. Purely advisory until applied.

    Attributes:
        id: Identifier, unique within one result's options
        name: Short display name
        description: What the fix does
        action: Action tag understood by FixApplicator
        preview: Human preview of the effect
    """
    id: str
    name: str
    description: str
    action: str
    preview: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "action": self.action,
            "preview": self.preview,
        }
