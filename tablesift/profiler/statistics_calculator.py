"""
Statistics Calculator - Per-Column Descriptive Statistics.

Branches on the inferred column type:

    number  - count, unique_values, min, max, mean, median, std_dev, q1, q3
    other   - count, unique_values, most_common, most_common_count
    string  - additionally average_length

Design Decisions:
    - Non-numeric cells in a number column are "not applicable" and skipped,
      but unique_values counts every distinct non-null raw value.
    - Standard deviation is the population form (ddof=0).
    - Quartiles use index truncation (sorted[floor(n * p)]), no interpolation.
    - Mean and std_dev round half-up to 2 decimals, average_length to 1.
    - most_common ties go to the value encountered first.

Usage:
    calculator = StatisticsCalculator()
    stats = calculator.calculate_statistics([10, 20, 30], "number")
"""

import logging
import math
from collections import Counter
from typing import Dict, List, Any

import numpy as np

from tablesift.core import constants
from tablesift.core.dataset import Dataset, is_missing, normalize_number, to_number, to_text
from tablesift.core.results import ColumnStatistics

logger = logging.getLogger(__name__)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with halves away from zero (2.5 -> 3, -0.125 -> -0.13)."""
    factor = 10 ** digits
    return math.copysign(math.floor(abs(value) * factor + 0.5) / factor, value)


class StatisticsCalculator:
    """
    Descriptive statistics for dataset columns.

    Pure: results depend only on the values and the type passed in.

    Example:
        >>> calc = StatisticsCalculator()
        >>> stats = calc.calculate_statistics([1, 2, 3, 4], "number")
        >>> stats.median
        2.5
    """

    def calculate_all(self, dataset: Dataset, data_types: Dict[str, str]) -> Dict[str, ColumnStatistics]:
        """Calculate statistics for every column of a dataset."""
        return {
            header: self.calculate_statistics(dataset.column(header), data_types[header])
            for header in dataset.headers
        }

    def calculate_statistics(self, values: List[Any], column_type: str) -> ColumnStatistics:
        """
        Calculate statistics for one column.

        Args:
            values: All values of the column, nulls included
            column_type: Inferred type tag

        Returns:
            ColumnStatistics for the column
        """
        if column_type == constants.TYPE_NUMBER:
            return self._calculate_numeric_stats(values)
        return self._calculate_frequency_stats(values, column_type)

    def _calculate_numeric_stats(self, values: List[Any]) -> ColumnStatistics:
        present = [v for v in values if not is_missing(v)]
        unique_values = len(set(present))

        numbers = []
        for value in present:
            number = to_number(value)
            if number is not None and math.isfinite(number):
                numbers.append(number)

        if not numbers:
            return ColumnStatistics(count=0, unique_values=unique_values)

        numeric_array = np.sort(np.array(numbers, dtype=np.float64))
        n = len(numeric_array)

        return ColumnStatistics(
            count=n,
            unique_values=unique_values,
            min=normalize_number(float(numeric_array[0])),
            max=normalize_number(float(numeric_array[-1])),
            mean=round_half_up(float(np.mean(numeric_array)), 2),
            median=normalize_number(float(np.median(numeric_array))),
            std_dev=round_half_up(float(np.std(numeric_array)), 2),
            q1=normalize_number(float(numeric_array[int(n * 0.25)])),
            q3=normalize_number(float(numeric_array[int(n * 0.75)])),
        )

    def _calculate_frequency_stats(self, values: List[Any], column_type: str) -> ColumnStatistics:
        texts = [to_text(v) for v in values if not is_missing(v)]
        if not texts:
            return ColumnStatistics(count=0, unique_values=0)

        most_common, most_common_count = Counter(texts).most_common(1)[0]

        average_length = None
        if column_type == constants.TYPE_STRING:
            average_length = round_half_up(float(np.mean([len(t) for t in texts])), 1)

        return ColumnStatistics(
            count=len(texts),
            unique_values=len(set(texts)),
            most_common=most_common,
            most_common_count=most_common_count,
            average_length=average_length,
        )
