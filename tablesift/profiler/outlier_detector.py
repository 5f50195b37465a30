"""
Z-score outlier detection for numeric columns.

A value is an outlier when |value - mean| / std exceeds the threshold
(2.5 by default), using the population standard deviation. Columns with
fewer than four numeric values, or with zero spread, have no outliers.
"""

import logging
import math
from typing import Dict, List, Any, Optional

import numpy as np

from tablesift.core import constants
from tablesift.core.config import EngineConfig
from tablesift.core.dataset import Dataset, is_missing, normalize_number, to_number
from tablesift.core.results import OutlierInfo

logger = logging.getLogger(__name__)


class OutlierDetector:
    """
    Example:
        >>> detector = OutlierDetector()
        >>> detector.detect_outliers([10, 10, 10, 10])
        []
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()

    def detect_all(self, dataset: Dataset, data_types: Dict[str, str]) -> Dict[str, List[OutlierInfo]]:
        """Outliers per column; non-numeric columns map to an empty list."""
        outliers = {}
        for header in dataset.headers:
            if data_types.get(header) == constants.TYPE_NUMBER:
                outliers[header] = self.detect_outliers(dataset.column(header))
            else:
                outliers[header] = []
        return outliers

    def detect_outliers(self, values: List[Any]) -> List[OutlierInfo]:
        """
        Detect outliers in one numeric column.

        Args:
            values: All values of the column; row index = position

        Returns:
            Outliers sorted by descending z-score, capped per column
        """
        indexed = []
        for index, value in enumerate(values):
            if is_missing(value):
                continue
            number = to_number(value)
            if number is not None and math.isfinite(number):
                indexed.append((index, number))

        if len(indexed) < self.config.outlier_min_values:
            return []

        numeric_array = np.array([number for _, number in indexed], dtype=np.float64)
        mean = float(np.mean(numeric_array))
        std = float(np.std(numeric_array))
        if std == 0:
            return []

        outliers = []
        for index, number in indexed:
            z_score = abs(number - mean) / std
            if z_score > self.config.outlier_z_threshold:
                outliers.append(OutlierInfo(
                    row_index=index,
                    value=normalize_number(number),
                    z_score=z_score
                ))

        outliers.sort(key=lambda o: o.z_score, reverse=True)
        return outliers[:self.config.max_outliers_per_column]
