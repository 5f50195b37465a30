"""
Fix Applicator - applies a chosen FixOption to a dataset.

Every action returns a new Dataset; the input is never modified. The
affected rows come from the ValidationResult and are fixed at detection
time: re-applying the same fix does not re-run the rule.
"""

import logging
import math
from typing import Any, Callable, Dict, List, Optional, Set, Tuple, Union

import numpy as np

from tablesift.core import constants
from tablesift.core.config import EngineConfig
from tablesift.core.dataset import Dataset, is_missing, normalize_number, to_number, to_text
from tablesift.core.exceptions import FixApplicationError
from tablesift.core.results import FixOption, ValidationResult
from tablesift.fixes import fix_options as actions
from tablesift.profiler.duplicate_detector import DuplicateDetector
from tablesift.profiler.type_inferrer import TypeInferrer

logger = logging.getLogger(__name__)


class FixApplicator:
    """
    Applies fix actions to datasets.

    Example:
        >>> ds = Dataset.from_records([{"n": 10}, {"n": None}, {"n": 20}, {"n": 30}])
        >>> result = ValidationResult("null_values_n", "Null values in 'n'", Severity.LOW,
        ...                           (1,), "1 empty", "Fill", True, "null_values", ("n",))
        >>> FixApplicator().apply(ds, result, "fill_mean").column("n")
        [10, 20, 20, 30]
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()
        self.duplicate_detector = DuplicateDetector()
        self.type_inferrer = TypeInferrer(self.config)
        self.actions: Dict[str, Callable[[Dataset, Set[int], Tuple[str, ...]], Dataset]] = {
            actions.ACTION_DELETE: self._delete_rows,
            actions.ACTION_REMOVE: self._delete_rows,
            actions.ACTION_FILL_MEAN: self._fill_mean,
            actions.ACTION_FILL_MEDIAN: self._fill_median,
            actions.ACTION_FILL_ZERO: self._fill_zero,
            actions.ACTION_FILL_UNKNOWN: self._fill_unknown,
            actions.ACTION_FILL_EMPTY: self._fill_empty,
            actions.ACTION_FILL_TODAY: self._fill_today,
            actions.ACTION_REMOVE_DUPLICATES: self._remove_duplicates,
            actions.ACTION_MARK_DUPLICATES: self._mark_duplicates,
            actions.ACTION_MARK_ISSUES: self._mark_issues,
            actions.ACTION_CLEAR_INVALID: self._clear_invalid,
            actions.ACTION_ATTEMPT_FIX: self._attempt_email_fix,
            actions.ACTION_CAP_VALUES: self._cap_values,
        }

    ROW_ACTIONS = actions.ROW_ACTIONS

    def apply(
        self,
        dataset: Dataset,
        result: ValidationResult,
        option: Union[FixOption, str]
    ) -> Dataset:
        """
        Apply one fix.

        Args:
            dataset: Current dataset
            result: The result whose affected rows are fixed
            option: FixOption or bare action tag

        Returns:
            New dataset

        Raises:
            FixApplicationError: Unknown action, missing target column, or a
                numeric fill on a non-numeric column
        """
        action = option.action if isinstance(option, FixOption) else option
        handler = self.actions.get(action)
        if handler is None:
            raise FixApplicationError(
                f"Unknown fix action '{action}'. Available: {', '.join(sorted(self.actions))}",
                action=action
            )

        columns = tuple(result.columns)
        if action not in self.ROW_ACTIONS:
            if not columns:
                raise FixApplicationError(
                    f"Fix action '{action}' needs a target column, but result '{result.id}' names none",
                    action=action
                )
            missing = [c for c in columns if c not in dataset.headers]
            if missing:
                raise FixApplicationError(
                    f"Column '{missing[0]}' not found in dataset",
                    action=action,
                    column=missing[0]
                )

        affected = {i for i in result.affected_rows if 0 <= i < dataset.row_count}
        logger.debug(f"Applying '{action}' to {len(affected)} row(s) for result '{result.id}'")
        return handler(dataset, affected, columns)

    # ------------------------------------------------------------------
    # Row actions
    # ------------------------------------------------------------------

    def _delete_rows(self, dataset: Dataset, affected: Set[int], columns) -> Dataset:
        return dataset.with_rows(
            row for index, row in enumerate(dataset.rows) if index not in affected
        )

    def _remove_duplicates(self, dataset: Dataset, affected: Set[int], columns) -> Dataset:
        return self.duplicate_detector.deduplicate(dataset)

    def _mark_duplicates(self, dataset: Dataset, affected: Set[int], columns) -> Dataset:
        return self._add_flag_column(dataset, affected, self.config.duplicate_flag_column)

    def _mark_issues(self, dataset: Dataset, affected: Set[int], columns) -> Dataset:
        return self._add_flag_column(dataset, affected, self.config.issue_flag_column)

    @staticmethod
    def _add_flag_column(dataset: Dataset, affected: Set[int], flag_column: str) -> Dataset:
        """
        Flag the affected rows in a boolean column.

        An existing flag column keeps its earlier flags. A column of the same
        name holding other data is left alone and a numbered name is used.
        """
        previous = [False] * dataset.row_count
        if flag_column in dataset.headers:
            existing = dataset.column(flag_column)
            if all(is_missing(v) or isinstance(v, (bool, np.bool_)) for v in existing):
                previous = [False if is_missing(v) else bool(v) for v in existing]
            else:
                base, suffix = flag_column, 2
                while flag_column in dataset.headers:
                    flag_column = f"{base}_{suffix}"
                    suffix += 1
                logger.info(f"Column '{base}' holds data, flagging rows in '{flag_column}'")

        headers = dataset.headers if flag_column in dataset.headers else dataset.headers + (flag_column,)
        rows = []
        for index, row in enumerate(dataset.rows):
            new_row = dict(row)
            new_row[flag_column] = index in affected or previous[index]
            rows.append(new_row)
        return dataset.with_rows(rows, headers=headers)

    # ------------------------------------------------------------------
    # Cell actions
    # ------------------------------------------------------------------

    @staticmethod
    def _map_cells(
        dataset: Dataset,
        affected: Set[int],
        columns: Tuple[str, ...],
        transform: Callable[[Any], Any]
    ) -> Dataset:
        rows = []
        for index, row in enumerate(dataset.rows):
            if index in affected:
                row = dict(row)
                for column in columns:
                    row[column] = transform(row.get(column))
            rows.append(row)
        return dataset.with_rows(rows)

    def _valid_numbers(self, dataset: Dataset, affected: Set[int], column: str, action: str) -> List[float]:
        values = dataset.column(column)
        column_type = self.type_inferrer.infer_column_type(values)
        if column_type != constants.TYPE_NUMBER:
            raise FixApplicationError(
                f"Fix action '{action}' needs a numeric column, '{column}' is {column_type}",
                action=action,
                column=column
            )
        numbers = []
        for index, value in enumerate(values):
            if index in affected or is_missing(value):
                continue
            number = to_number(value)
            if number is not None and math.isfinite(number):
                numbers.append(number)
        if not numbers:
            raise FixApplicationError(
                f"Column '{column}' has no valid numeric values to aggregate",
                action=action,
                column=column
            )
        return numbers

    def _fill_aggregate(self, dataset: Dataset, affected: Set[int], columns, action: str, aggregate) -> Dataset:
        for column in columns:
            fill_value = normalize_number(float(aggregate(self._valid_numbers(dataset, affected, column, action))))
            dataset = self._map_cells(dataset, affected, (column,), lambda _v, fill=fill_value: fill)
        return dataset

    def _fill_mean(self, dataset: Dataset, affected: Set[int], columns) -> Dataset:
        return self._fill_aggregate(dataset, affected, columns, actions.ACTION_FILL_MEAN, np.mean)

    def _fill_median(self, dataset: Dataset, affected: Set[int], columns) -> Dataset:
        return self._fill_aggregate(dataset, affected, columns, actions.ACTION_FILL_MEDIAN, np.median)

    def _fill_zero(self, dataset: Dataset, affected: Set[int], columns) -> Dataset:
        return self._map_cells(dataset, affected, columns, lambda _v: 0)

    def _fill_unknown(self, dataset: Dataset, affected: Set[int], columns) -> Dataset:
        return self._map_cells(dataset, affected, columns, lambda _v: constants.UNKNOWN_FILL_VALUE)

    def _fill_empty(self, dataset: Dataset, affected: Set[int], columns) -> Dataset:
        return self._map_cells(dataset, affected, columns, lambda _v: "")

    def _fill_today(self, dataset: Dataset, affected: Set[int], columns) -> Dataset:
        today = self.config.today().isoformat()
        return self._map_cells(dataset, affected, columns, lambda _v: today)

    def _clear_invalid(self, dataset: Dataset, affected: Set[int], columns) -> Dataset:
        return self._map_cells(dataset, affected, columns, lambda _v: None)

    def _attempt_email_fix(self, dataset: Dataset, affected: Set[int], columns) -> Dataset:
        return self._map_cells(dataset, affected, columns, repair_email)

    def _cap_values(self, dataset: Dataset, affected: Set[int], columns) -> Dataset:
        return self._map_cells(dataset, affected, columns, cap_age)


def repair_email(value: Any) -> Any:
    """
    Best-effort e-mail rewrite.

    " at " -> "@", " dot " -> ".", a trailing "@" gets "gmail.com" and an
    address with "@" but no "." gets ".com". Missing values are left alone.
    """
    if is_missing(value):
        return value
    text = to_text(value).replace(" at ", "@").replace(" dot ", ".")
    if text.endswith("@"):
        text += "gmail.com"
    elif "@" in text and "." not in text:
        text += ".com"
    return text


def cap_age(value: Any) -> Any:
    """Clamp ages above the cap to the cap; negative ages become None."""
    number = None if is_missing(value) else to_number(value)
    if number is None:
        return value
    if number > constants.AGE_CAP_VALUE:
        return constants.AGE_CAP_VALUE
    if number < 0:
        return None
    return value
