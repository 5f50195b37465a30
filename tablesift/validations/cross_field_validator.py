"""
Cross-Field Validator - consistency checks between columns of one row.

All relationships are guessed from column names, not declared:

    age vs birth date      first "age" column and first "birth"+"date" column
    start vs end date      every ("start"+"date", "end"+"date") column pair
    salary vs experience   first "salary"/"income" and first "experience"/"years"

Only cells that are truthy (non-empty, non-zero) take part in a check.
Issues are reported row-major, then in the order above, and truncated to
the configured cap.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from tablesift.core import constants
from tablesift.core.config import EngineConfig
from tablesift.core.dataset import Dataset, is_truthy, normalize_number, parse_date, to_number
from tablesift.core.observers import CancellationToken
from tablesift.core.results import CrossFieldIssue, Severity

logger = logging.getLogger(__name__)


def _first_header(headers: Sequence[str], *keyword_groups) -> Optional[str]:
    """First header whose lowercase name satisfies any keyword group (all keywords present)."""
    for header in headers:
        lower = header.lower()
        if any(all(k in lower for k in group) for group in keyword_groups):
            return header
    return None


class CrossFieldValidator:
    """
    Example:
        >>> ds = Dataset.from_records([{"start_date": "2024-05-01", "end_date": "2024-01-01"}])
        >>> [i.issue for i in CrossFieldValidator().validate(ds, {})]
        ['Start date is after end date']
    """

    PASS_NAME = "cross_field_validation"

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()

    def validate(
        self,
        dataset: Dataset,
        data_types: Dict[str, str],
        cancel_token: Optional[CancellationToken] = None
    ) -> List[CrossFieldIssue]:
        """
        Run the cross-field checks over every row.

        data_types is accepted for symmetry with the contextual validator;
        the checks only use column names.
        """
        headers = dataset.headers
        age_col = _first_header(headers, ("age",))
        birth_col = _first_header(headers, ("birth", "date"))
        date_pairs = self.date_column_pairs(headers)
        salary_col = _first_header(headers, ("salary",), ("income",))
        experience_col = _first_header(headers, ("experience",), ("years",))

        cap = self.config.max_cross_field_issues
        current_year = self.config.now().year
        issues: List[CrossFieldIssue] = []

        for row_index, row in enumerate(dataset.rows):
            if cancel_token is not None and row_index % self.config.batch_size == 0:
                cancel_token.raise_if_cancelled(self.PASS_NAME, row_index)

            if age_col and birth_col:
                issue = self._check_age_birth(row, row_index, age_col, birth_col, current_year)
                if issue:
                    issues.append(issue)

            for start_col, end_col in date_pairs:
                issue = self._check_date_order(row, row_index, start_col, end_col)
                if issue:
                    issues.append(issue)

            if salary_col and experience_col:
                issue = self._check_salary_experience(row, row_index, salary_col, experience_col)
                if issue:
                    issues.append(issue)

            if len(issues) >= cap:
                logger.debug(f"Cross-field issue cap of {cap} reached at row {row_index}")
                break

        return issues[:cap]

    @staticmethod
    def date_column_pairs(headers: Sequence[str]) -> List[Tuple[str, str]]:
        """Cartesian product of start-date and end-date columns."""
        starts = [h for h in headers if "start" in h.lower() and "date" in h.lower()]
        ends = [h for h in headers if "end" in h.lower() and "date" in h.lower()]
        return [(s, e) for s in starts for e in ends]

    def _check_age_birth(self, row, row_index, age_col, birth_col, current_year) -> Optional[CrossFieldIssue]:
        if not (is_truthy(row.get(age_col)) and is_truthy(row.get(birth_col))):
            return None
        age = to_number(row.get(age_col))
        birth = parse_date(row.get(birth_col))
        if age is None or birth is None:
            return None

        calculated_age = current_year - birth.year
        if abs(age - calculated_age) > constants.AGE_TOLERANCE_YEARS:
            return CrossFieldIssue(
                columns=(age_col, birth_col),
                row=row_index,
                issue=f"Age ({normalize_number(age)}) doesn't match birth date (calculated: {calculated_age})",
                severity=Severity.HIGH,
                suggestion="Verify that age and birth date are consistent."
            )
        return None

    def _check_date_order(self, row, row_index, start_col, end_col) -> Optional[CrossFieldIssue]:
        if not (is_truthy(row.get(start_col)) and is_truthy(row.get(end_col))):
            return None
        start = parse_date(row.get(start_col))
        end = parse_date(row.get(end_col))
        if start is not None and end is not None and start > end:
            return CrossFieldIssue(
                columns=(start_col, end_col),
                row=row_index,
                issue="Start date is after end date",
                severity=Severity.CRITICAL,
                suggestion="Start date should be before or equal to end date."
            )
        return None

    def _check_salary_experience(self, row, row_index, salary_col, experience_col) -> Optional[CrossFieldIssue]:
        if not (is_truthy(row.get(salary_col)) and is_truthy(row.get(experience_col))):
            return None
        salary = to_number(row.get(salary_col))
        experience = to_number(row.get(experience_col))
        if salary is None or experience is None:
            return None

        if experience > constants.SENIOR_EXPERIENCE_YEARS and salary < constants.LOW_SALARY_LIMIT:
            return CrossFieldIssue(
                columns=(salary_col, experience_col),
                row=row_index,
                issue="Low salary for high experience level",
                severity=Severity.MEDIUM,
                suggestion="Verify salary is appropriate for experience level."
            )
        return None
