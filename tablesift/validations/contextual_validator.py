"""
Contextual Validator - single-cell checks keyed by the column's role.

The role of a column is guessed from its name (case-insensitive substring
match) and, for dates, e-mails and phones, from its inferred type:

    "age"                        negative, > 150, > 120
    typed date or "date"         unparseable, future birth date, < 1900, > now + 10y
    typed email or "email"       not local@domain.tld
    typed phone or "phone"       not +?[1-9] followed by 7-15 digits
    "salary"/"income"/"wage"     negative, > 10,000,000
    "percent"/"rate" or "%"      outside [0, 100]

Empty cells are never checked. Issues are reported row-major, then in
header order, then in the order above, and truncated to the configured cap.
"""

import logging
import re
from datetime import datetime
from typing import Dict, List, Any, Optional

from tablesift.core import constants
from tablesift.core.config import EngineConfig
from tablesift.core.dataset import Dataset, is_missing, parse_date, to_number, to_text
from tablesift.core.observers import CancellationToken
from tablesift.core.results import ContextualIssue, Severity
from tablesift.profiler.type_inferrer import EMAIL_PATTERN, PHONE_SEPARATORS

logger = logging.getLogger(__name__)

CONTEXTUAL_PHONE_PATTERN = re.compile(r'^\+?[1-9]\d{7,15}$')

EARLIEST_PLAUSIBLE_DATE = datetime(constants.EARLIEST_PLAUSIBLE_YEAR, 1, 1)


class ContextualValidator:
    """
    Example:
        >>> ds = Dataset.from_records([{"age": -5}, {"age": 30}])
        >>> issues = ContextualValidator().validate(ds, {"age": "number"})
        >>> issues[0].issue, issues[0].severity
        ('Negative age value', <Severity.CRITICAL: 'critical'>)
    """

    PASS_NAME = "contextual_validation"

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()

    def validate(
        self,
        dataset: Dataset,
        data_types: Dict[str, str],
        cancel_token: Optional[CancellationToken] = None
    ) -> List[ContextualIssue]:
        """
        Run every contextual check over the dataset.

        Args:
            dataset: Dataset to check
            data_types: Inferred column types
            cancel_token: Checked between row batches

        Returns:
            Issues in detection order, at most max_contextual_issues
        """
        cap = self.config.max_contextual_issues
        now = self.config.now()
        issues: List[ContextualIssue] = []

        for row_index, row in enumerate(dataset.rows):
            if cancel_token is not None and row_index % self.config.batch_size == 0:
                cancel_token.raise_if_cancelled(self.PASS_NAME, row_index)

            for header in dataset.headers:
                value = row.get(header)
                if is_missing(value):
                    continue
                issues.extend(self.check_value(header, row_index, value, data_types.get(header), now))

            if len(issues) >= cap:
                logger.debug(f"Contextual issue cap of {cap} reached at row {row_index}")
                break

        return issues[:cap]

    def check_value(
        self,
        header: str,
        row_index: int,
        value: Any,
        column_type: Optional[str],
        now: datetime
    ) -> List[ContextualIssue]:
        """All contextual issues for one non-empty cell, in rule order."""
        lower_header = header.lower()
        text = to_text(value)
        found = []

        def add(issue: str, severity: Severity, suggestion: str):
            found.append(ContextualIssue(
                column=header,
                row=row_index,
                value=value,
                issue=issue,
                severity=severity,
                suggestion=suggestion
            ))

        # Age
        if "age" in lower_header:
            age = to_number(value)
            if age is not None:
                if age < 0:
                    add("Negative age value", Severity.CRITICAL,
                        "Age cannot be negative. Consider removing or correcting this value.")
                elif age > constants.AGE_HIGH_LIMIT:
                    add("Unrealistic age value", Severity.HIGH,
                        "Age over 150 is unrealistic. Verify this value.")
                elif age > constants.AGE_MEDIUM_LIMIT:
                    add("Very high age value", Severity.MEDIUM,
                        "Age over 120 is unusual. Please verify.")

        # Dates
        if column_type == constants.TYPE_DATE or "date" in lower_header:
            moment = parse_date(value)
            if moment is None:
                add("Invalid date format", Severity.HIGH,
                    "Use a standard date format (YYYY-MM-DD, MM/DD/YYYY, etc.)")
            else:
                if "birth" in lower_header and moment > now:
                    add("Birth date in the future", Severity.CRITICAL,
                        "Birth date cannot be in the future.")
                if moment < EARLIEST_PLAUSIBLE_DATE:
                    add("Date before 1900", Severity.MEDIUM,
                        "Dates before 1900 may be incorrect.")
                if moment.year > now.year + constants.FUTURE_YEARS_LIMIT:
                    add("Date too far in future", Severity.MEDIUM,
                        "Date seems unrealistically far in the future.")

        # E-mail
        if column_type == constants.TYPE_EMAIL or "email" in lower_header:
            if not EMAIL_PATTERN.match(text):
                add("Invalid email format", Severity.MEDIUM,
                    "Email should follow the format: user@domain.com")

        # Phone
        if column_type == constants.TYPE_PHONE or "phone" in lower_header:
            if not CONTEXTUAL_PHONE_PATTERN.match(PHONE_SEPARATORS.sub('', text)):
                add("Invalid phone number format", Severity.MEDIUM,
                    "Phone number should contain 8-16 digits, optionally starting with +")

        # Salary / income
        if "salary" in lower_header or "income" in lower_header or "wage" in lower_header:
            amount = to_number(value)
            if amount is not None:
                if amount < 0:
                    add("Negative salary/income", Severity.HIGH,
                        "Salary/income cannot be negative.")
                elif amount > constants.SALARY_HIGH_LIMIT:
                    add("Unusually high salary/income", Severity.MEDIUM,
                        "This salary/income value seems unusually high. Please verify.")

        # Percentages
        if "percent" in lower_header or "rate" in lower_header or "%" in text:
            percent = to_number(text.replace("%", "", 1))
            if percent is not None and not constants.PERCENTAGE_MIN <= percent <= constants.PERCENTAGE_MAX:
                add("Percentage out of valid range", Severity.MEDIUM,
                    "Percentage should be between 0 and 100.")

        return found
