"""
Fix option generation.

Each ValidationResult gets a list of remedies chosen from its rule type
and, for null-value results, the inferred type of the affected column:

    null_values  number  fill_mean, fill_median, fill_zero, delete
                 date    fill_today, delete
                 string  fill_unknown, fill_empty, delete
                 other   fill_empty, delete
                 (all)   + mark_issues
    duplicates           remove_duplicates, mark_duplicates
    custom_age           cap_values, clear_invalid, delete, mark_issues
    custom_email         attempt_fix, clear_invalid, delete, mark_issues
    other custom         [fill_mean, fill_median on numeric columns],
                         clear_invalid, delete, mark_issues

A result that names no column only gets the row-level options.

Options are advisory; FixApplicator performs them.
"""

from typing import Dict, List, Optional

from tablesift.core import constants
from tablesift.core.results import FixOption, ValidationResult

# Action tags understood by FixApplicator
ACTION_DELETE = "delete"
ACTION_REMOVE = "remove"
ACTION_FILL_MEAN = "fill_mean"
ACTION_FILL_MEDIAN = "fill_median"
ACTION_FILL_ZERO = "fill_zero"
ACTION_FILL_UNKNOWN = "fill_unknown"
ACTION_FILL_EMPTY = "fill_empty"
ACTION_FILL_TODAY = "fill_today"
ACTION_REMOVE_DUPLICATES = "remove_duplicates"
ACTION_MARK_DUPLICATES = "mark_duplicates"
ACTION_MARK_ISSUES = "mark_issues"
ACTION_CLEAR_INVALID = "clear_invalid"
ACTION_ATTEMPT_FIX = "attempt_fix"
ACTION_CAP_VALUES = "cap_values"

# Actions that work on whole rows and need no target column
ROW_ACTIONS = frozenset({
    ACTION_DELETE,
    ACTION_REMOVE,
    ACTION_REMOVE_DUPLICATES,
    ACTION_MARK_DUPLICATES,
    ACTION_MARK_ISSUES,
})


def _option(action: str, name: str, description: str, preview: str) -> FixOption:
    return FixOption(id=action, name=name, description=description, action=action, preview=preview)


def _where(result: ValidationResult) -> str:
    column = result.column
    return f"column '{column}'" if column else "the target columns"


def delete_option(result: ValidationResult) -> FixOption:
    n = len(result.affected_rows)
    return _option(ACTION_DELETE, "Delete rows",
                   "Remove every affected row from the dataset.",
                   f"{n} row(s) will be removed")


def mark_issues_option(result: ValidationResult) -> FixOption:
    n = len(result.affected_rows)
    return _option(ACTION_MARK_ISSUES, "Flag rows",
                   f"Add a '{constants.ISSUE_FLAG_COLUMN}' column marking the affected rows.",
                   f"{n} row(s) will be flagged, no data is removed")


def clear_invalid_option(result: ValidationResult) -> FixOption:
    n = len(result.affected_rows)
    return _option(ACTION_CLEAR_INVALID, "Clear invalid values",
                   f"Set the affected cells in {_where(result)} to empty.",
                   f"{n} cell(s) will be cleared, rows are kept")


def fill_mean_option(result: ValidationResult) -> FixOption:
    n = len(result.affected_rows)
    return _option(ACTION_FILL_MEAN, "Fill with mean",
                   f"Replace the affected values in {_where(result)} with the mean of the valid values.",
                   f"{n} cell(s) will be set to the column mean")


def fill_median_option(result: ValidationResult) -> FixOption:
    n = len(result.affected_rows)
    return _option(ACTION_FILL_MEDIAN, "Fill with median",
                   f"Replace the affected values in {_where(result)} with the median of the valid values.",
                   f"{n} cell(s) will be set to the column median")


def generate_fix_options(
    result: ValidationResult,
    data_types: Optional[Dict[str, str]] = None
) -> List[FixOption]:
    """
    Build the fix options for one validation result.

    Args:
        result: Result to remedy
        data_types: Inferred column types (from the latest AnalysisResult)

    Returns:
        Options in display order; ids are unique within the list
    """
    data_types = data_types or {}
    column_type = data_types.get(result.column) if result.column else None
    n = len(result.affected_rows)
    options: List[FixOption] = []

    if result.rule_type == "null_values":
        if column_type == constants.TYPE_NUMBER:
            options += [
                fill_mean_option(result),
                fill_median_option(result),
                _option(ACTION_FILL_ZERO, "Fill with zero",
                        "Replace the empty cells with 0.",
                        f"{n} cell(s) will be set to 0"),
            ]
        elif column_type == constants.TYPE_DATE:
            options.append(_option(ACTION_FILL_TODAY, "Fill with today's date",
                                   "Replace the empty cells with today's date (YYYY-MM-DD).",
                                   f"{n} cell(s) will be set to today's date"))
        elif column_type == constants.TYPE_STRING:
            options += [
                _option(ACTION_FILL_UNKNOWN, "Fill with 'Unknown'",
                        f"Replace the empty cells with '{constants.UNKNOWN_FILL_VALUE}'.",
                        f"{n} cell(s) will be set to '{constants.UNKNOWN_FILL_VALUE}'"),
                _option(ACTION_FILL_EMPTY, "Fill with empty text",
                        "Replace the empty cells with an empty string.",
                        f"{n} cell(s) will be set to ''"),
            ]
        else:
            options.append(_option(ACTION_FILL_EMPTY, "Fill with empty text",
                                   "Replace the empty cells with an empty string.",
                                   f"{n} cell(s) will be set to ''"))
        options += [delete_option(result), mark_issues_option(result)]

    elif result.rule_type == "duplicates":
        options += [
            _option(ACTION_REMOVE_DUPLICATES, "Remove duplicates",
                    "Keep the first occurrence of each row and drop the copies.",
                    f"{n} duplicate row(s) will be removed"),
            _option(ACTION_MARK_DUPLICATES, "Flag duplicates",
                    f"Add a '{constants.DUPLICATE_FLAG_COLUMN}' column marking the copies.",
                    f"{n} row(s) will be flagged, no data is removed"),
        ]

    elif result.rule_type == "custom_age":
        options += [
            _option(ACTION_CAP_VALUES, "Cap ages",
                    f"Clamp ages above {constants.AGE_CAP_VALUE} to {constants.AGE_CAP_VALUE} "
                    "and clear negative ages.",
                    f"Up to {n} value(s) will be capped or cleared"),
            clear_invalid_option(result),
            delete_option(result),
            mark_issues_option(result),
        ]

    elif result.rule_type == "custom_email":
        options += [
            _option(ACTION_ATTEMPT_FIX, "Repair e-mail addresses",
                    "Rewrite ' at ' to '@' and ' dot ' to '.', and complete missing domains.",
                    f"Up to {n} address(es) will be rewritten"),
            clear_invalid_option(result),
            delete_option(result),
            mark_issues_option(result),
        ]

    else:
        if column_type == constants.TYPE_NUMBER:
            options += [fill_mean_option(result), fill_median_option(result)]
        options += [
            clear_invalid_option(result),
            delete_option(result),
            mark_issues_option(result),
        ]

    if not result.columns:
        options = [option for option in options if option.action in ROW_ACTIONS]

    return options
