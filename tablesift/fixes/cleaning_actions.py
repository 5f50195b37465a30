"""
Interactive cleaning actions and bulk clean-ups.

Two families live here:

Suggested actions
    suggest_cleaning_actions() looks at each column and proposes at most one
    action per kind (fill_nulls, trim, standardize_case). Each action
    targets a whole column or, when row_index is set, a single cell.

Bulk clean-ups
    fill_missing_by_type(), normalize_formatting(), repair_common_values()
    and remove_duplicates() each return the new dataset and the number of
    cells (or rows) they changed.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from tablesift.core import constants
from tablesift.core.dataset import Dataset, is_missing, to_number
from tablesift.core.exceptions import ColumnNotFoundError, FixApplicationError
from tablesift.profiler.duplicate_detector import DuplicateDetector

logger = logging.getLogger(__name__)

CLEAN_FILL_NULLS = "fill_nulls"
CLEAN_TRIM = "trim"
CLEAN_STANDARDIZE_CASE = "standardize_case"

CLEANING_TYPES = (CLEAN_FILL_NULLS, CLEAN_TRIM, CLEAN_STANDARDIZE_CASE)

_WORD_PATTERN = re.compile(r'\w\S*')
_WHITESPACE_RUN = re.compile(r'\s+')
_NON_DIGIT = re.compile(r'[^0-9]')

# Column-name keywords that switch on value-specific formatting
EMAIL_KEYWORDS = ("email",)
TITLE_CASE_KEYWORDS = ("name", "city")
PHONE_KEYWORDS = ("phone",)
PRICE_KEYWORDS = ("price",)

INVALID_EMAIL_PLACEHOLDER = "invalid@example.com"


@dataclass(frozen=True)
class CleaningAction:
    """
    One suggested cleaning step.

    Attributes:
        id: Unique id, "<type>_<column>" (with "_<row>" for single-cell actions)
        type: fill_nulls, trim or standardize_case
        description: Human-readable summary
        column: Target column
        row_index: Single target row, or None for the whole column
    """
    id: str
    type: str
    description: str
    column: str
    row_index: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'type': self.type,
            'description': self.description,
            'column': self.column,
            'row_index': self.row_index,
        }


def _has_case_mix(text: str) -> bool:
    return text != text.lower() and text != text.upper()


def suggest_cleaning_actions(dataset: Dataset) -> List[CleaningAction]:
    """
    Propose cleaning actions for every column that needs them.

    - fill_nulls when the column has missing cells
    - trim when any string has leading or trailing whitespace
    - standardize_case when any string mixes upper and lower case
    """
    suggestions = []
    for header in dataset.headers:
        values = dataset.column(header)
        null_count = sum(1 for v in values if is_missing(v))
        strings = [v for v in values if isinstance(v, str) and v]

        if null_count:
            suggestions.append(CleaningAction(
                id=f"{CLEAN_FILL_NULLS}_{header}",
                type=CLEAN_FILL_NULLS,
                description=f"Fill {null_count} empty value(s) in '{header}' "
                            f"with '{constants.CLEANING_NULL_FILL_VALUE}'",
                column=header
            ))

        untrimmed = sum(1 for v in strings if v != v.strip())
        if untrimmed:
            suggestions.append(CleaningAction(
                id=f"{CLEAN_TRIM}_{header}",
                type=CLEAN_TRIM,
                description=f"Trim whitespace from {untrimmed} value(s) in '{header}'",
                column=header
            ))

        if any(_has_case_mix(v) for v in strings):
            suggestions.append(CleaningAction(
                id=f"{CLEAN_STANDARDIZE_CASE}_{header}",
                type=CLEAN_STANDARDIZE_CASE,
                description=f"Convert the text in '{header}' to lowercase",
                column=header
            ))

    return suggestions


def _clean_value(action_type: str, value: Any) -> Any:
    if action_type == CLEAN_FILL_NULLS:
        return constants.CLEANING_NULL_FILL_VALUE if is_missing(value) else value
    if action_type == CLEAN_TRIM:
        return value.strip() if isinstance(value, str) else value
    if action_type == CLEAN_STANDARDIZE_CASE:
        return value.lower() if isinstance(value, str) else value
    raise FixApplicationError(
        f"Unknown cleaning action '{action_type}'. Available: {', '.join(CLEANING_TYPES)}",
        action=action_type
    )


def apply_cleaning_action(dataset: Dataset, action: CleaningAction) -> Dataset:
    """
    Apply one cleaning action.

    Raises:
        FixApplicationError: Unknown action type or missing column
    """
    if action.column not in dataset.headers:
        raise FixApplicationError(
            f"Column '{action.column}' not found in dataset",
            action=action.type,
            column=action.column,
            original_exception=ColumnNotFoundError(action.column, list(dataset.headers))
        )

    rows = []
    for index, row in enumerate(dataset.rows):
        if action.row_index is None or action.row_index == index:
            row = dict(row)
            row[action.column] = _clean_value(action.type, row.get(action.column))
        rows.append(row)

    logger.debug(f"Applied cleaning action '{action.id}'")
    return dataset.with_rows(rows)


def delete_rows(dataset: Dataset, row_indices: Iterable[int]) -> Dataset:
    """Remove the given rows; indices outside the dataset are ignored."""
    doomed = set(row_indices)
    return dataset.with_rows(row for index, row in enumerate(dataset.rows) if index not in doomed)


def remove_duplicates(dataset: Dataset) -> Tuple[Dataset, int]:
    """Drop exact duplicate rows, keeping first occurrences."""
    deduplicated = DuplicateDetector().deduplicate(dataset)
    return deduplicated, dataset.row_count - deduplicated.row_count


def fill_missing_by_type(dataset: Dataset, data_types: Optional[Dict[str, str]] = None) -> Tuple[Dataset, int]:
    """
    Fill every missing cell with a type-appropriate placeholder.

    Number columns get 0, string columns "Unknown", anything else "".
    Column types come from data_types when given; otherwise the first
    non-missing value decides (a number, or anything else as text).
    """
    data_types = data_types or {}
    fills = {}
    for header in dataset.headers:
        column_type = data_types.get(header)
        if column_type is None:
            present = next((v for v in dataset.column(header) if not is_missing(v)), None)
            if isinstance(present, (int, float)) and not isinstance(present, bool):
                column_type = constants.TYPE_NUMBER
            elif isinstance(present, str):
                column_type = constants.TYPE_STRING
        if column_type == constants.TYPE_NUMBER:
            fills[header] = 0
        elif column_type == constants.TYPE_STRING:
            fills[header] = constants.UNKNOWN_FILL_VALUE
        else:
            fills[header] = ""

    changed = 0
    rows = []
    for row in dataset.rows:
        new_row = dict(row)
        for header in dataset.headers:
            if is_missing(new_row.get(header)):
                new_row[header] = fills[header]
                changed += 1
        rows.append(new_row)
    return dataset.with_rows(rows), changed


def _matches(header: str, keywords: Tuple[str, ...]) -> bool:
    lowered = header.lower()
    return any(keyword in lowered for keyword in keywords)


def _title_case(text: str) -> str:
    return _WORD_PATTERN.sub(lambda m: m.group(0)[0].upper() + m.group(0)[1:].lower(), text)


def format_text(header: str, value: str) -> str:
    """Trim, collapse whitespace runs and apply column-specific casing."""
    text = _WHITESPACE_RUN.sub(" ", value.strip())
    if _matches(header, EMAIL_KEYWORDS):
        text = text.lower()
    elif _matches(header, TITLE_CASE_KEYWORDS):
        text = _title_case(text)
    return text


def normalize_formatting(dataset: Dataset) -> Tuple[Dataset, int]:
    """
    Normalize string formatting in place of the old values.

    Every string is trimmed with inner whitespace runs collapsed. E-mail
    columns are lowercased; name and city columns are title-cased.
    """
    changed = 0
    rows = []
    for row in dataset.rows:
        new_row = dict(row)
        for header in dataset.headers:
            value = new_row.get(header)
            if isinstance(value, str):
                formatted = format_text(header, value)
                if formatted != value:
                    new_row[header] = formatted
                    changed += 1
        rows.append(new_row)
    return dataset.with_rows(rows), changed


def repair_value(header: str, value: Any) -> Any:
    """
    Repair one cell by column-name heuristics.

    E-mail strings without "@" become a placeholder address, phone strings
    keep digits only and negative prices become positive.
    """
    if is_missing(value):
        return value
    if isinstance(value, str):
        if _matches(header, EMAIL_KEYWORDS) and "@" not in value:
            return INVALID_EMAIL_PLACEHOLDER
        if _matches(header, PHONE_KEYWORDS):
            return _NON_DIGIT.sub("", value)
        return value
    if _matches(header, PRICE_KEYWORDS) and not isinstance(value, bool):
        number = to_number(value)
        if number is not None and number < 0:
            return abs(value)
    return value


def repair_common_values(dataset: Dataset) -> Tuple[Dataset, int]:
    """Apply repair_value() to every cell."""
    changed = 0
    rows = []
    for row in dataset.rows:
        new_row = dict(row)
        for header in dataset.headers:
            value = new_row.get(header)
            repaired = repair_value(header, value)
            if repaired != value:
                new_row[header] = repaired
                changed += 1
        rows.append(new_row)
    return dataset.with_rows(rows), changed
