"""
Built-in validation rules.

These run on every validation pass and are the only auto-fixable checks:
- NullValueCheck: empty cells, one result per affected column
- DuplicateRowCheck: exact duplicate rows
"""

import logging
from typing import Any, Dict, List

from tablesift.core import constants
from tablesift.core.dataset import Dataset, is_blank
from tablesift.core.results import Severity, ValidationResult
from tablesift.fixes.fix_scripts import sql_fix_for, python_fix_for
from tablesift.profiler.duplicate_detector import DuplicateDetector
from tablesift.validations.base import ValidationRule

logger = logging.getLogger(__name__)


class NullValueCheck(ValidationRule):
    """
    Detects null, empty and whitespace-only cells.

    Severity depends on the share of rows affected in the column:
    more than 10% is high, more than 5% medium, otherwise low.
    """

    name = "Null values"
    rule_type = "null_values"

    def get_description(self) -> str:
        return "Checks every column for null or empty values"

    def validate(self, dataset: Dataset, context: Dict[str, Any]) -> List[ValidationResult]:
        results = []
        total_rows = dataset.row_count
        max_affected = self._max_affected(context)

        for header in dataset.headers:
            null_rows = [i for i, row in enumerate(dataset.rows) if is_blank(row.get(header))]
            if not null_rows:
                continue

            ratio = len(null_rows) / total_rows if total_rows else 0.0
            if ratio > constants.NULL_HIGH_RATIO:
                severity = Severity.HIGH
            elif ratio > constants.NULL_MEDIUM_RATIO:
                severity = Severity.MEDIUM
            else:
                severity = Severity.LOW

            results.append(ValidationResult(
                id=f"null_values_{header}",
                rule=f"{self.name} in '{header}'",
                severity=severity,
                affected_rows=tuple(null_rows[:max_affected]),
                description=f"{len(null_rows)} null or empty value(s) in column '{header}'",
                suggestion="Fill the missing values or remove the incomplete rows.",
                can_auto_fix=True,
                rule_type=self.rule_type,
                columns=(header,),
                sql_fix=sql_fix_for(self.rule_type, header),
                python_fix=python_fix_for(self.rule_type, header)
            ))

        return results


class DuplicateRowCheck(ValidationRule):
    """
    Detects exact duplicate rows.

    The affected rows are the repeat occurrences; the first occurrence of
    each row is not flagged. More than 5% duplicates is high severity,
    otherwise medium.
    """

    name = "Duplicate rows"
    rule_type = "duplicates"

    def __init__(self):
        self.detector = DuplicateDetector()

    def get_description(self) -> str:
        return "Checks for rows that are exact copies of an earlier row"

    def validate(self, dataset: Dataset, context: Dict[str, Any]) -> List[ValidationResult]:
        duplicate_rows = self.detector.duplicate_indices(dataset)
        if not duplicate_rows:
            return []

        total_rows = dataset.row_count
        ratio = len(duplicate_rows) / total_rows if total_rows else 0.0
        severity = Severity.HIGH if ratio > constants.DUPLICATE_HIGH_RATIO else Severity.MEDIUM

        return [ValidationResult(
            id="duplicates",
            rule=self.name,
            severity=severity,
            affected_rows=tuple(duplicate_rows[:self._max_affected(context)]),
            description=f"{len(duplicate_rows)} duplicate row(s) found",
            suggestion="Remove the duplicate copies, keeping the first occurrence of each row.",
            can_auto_fix=True,
            rule_type=self.rule_type,
            columns=(),
            sql_fix=sql_fix_for(self.rule_type),
            python_fix=python_fix_for(self.rule_type)
        )]


BUILTIN_RULES = (NullValueCheck, DuplicateRowCheck)
