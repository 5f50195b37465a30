"""
Quality Scorer - single 0-100 score for a dataset.

    score = 100
          - 0.5 * null%        (null cells as % of all cells)
          - 2.0 * duplicate%   (duplicate rows as % of rows)
          - 1.5 * issue%       (contextual + cross-field issues as % of rows)
          + 5                  (when more than 3 distinct column types exist)

clamped to [0, 100] and rounded half-up. The issue count is not bounded by
the row count, so issue% alone can push the score to 0.
"""

import logging
from typing import Dict

from tablesift.core import constants
from tablesift.profiler.statistics_calculator import round_half_up

logger = logging.getLogger(__name__)


class QualityScorer:
    """
    Example:
        >>> QualityScorer().calculate_score(
        ...     total_rows=10, total_columns=2, null_count=0,
        ...     duplicates=0, issue_count=0, data_types={"a": "number", "b": "string"})
        100
    """

    def __init__(
        self,
        null_weight: float = constants.NULL_PENALTY_WEIGHT,
        duplicate_weight: float = constants.DUPLICATE_PENALTY_WEIGHT,
        issue_weight: float = constants.ISSUE_PENALTY_WEIGHT,
        diversity_bonus: float = constants.TYPE_DIVERSITY_BONUS
    ):
        self.null_weight = null_weight
        self.duplicate_weight = duplicate_weight
        self.issue_weight = issue_weight
        self.diversity_bonus = diversity_bonus

    def calculate_score(
        self,
        total_rows: int,
        total_columns: int,
        null_count: int,
        duplicates: int,
        issue_count: int,
        data_types: Dict[str, str]
    ) -> int:
        """
        Calculate the quality score.

        Zero cells or zero rows make the matching percentage 0.

        Returns:
            Integer score in [0, 100]
        """
        total_cells = total_rows * total_columns
        null_percentage = (null_count / total_cells) * 100 if total_cells > 0 else 0.0
        duplicate_percentage = (duplicates / total_rows) * 100 if total_rows > 0 else 0.0
        issue_percentage = (issue_count / total_rows) * 100 if total_rows > 0 else 0.0

        score = 100.0
        score -= self.null_weight * null_percentage
        score -= self.duplicate_weight * duplicate_percentage
        score -= self.issue_weight * issue_percentage

        if len(set(data_types.values())) > constants.TYPE_DIVERSITY_MIN_TYPES:
            score += self.diversity_bonus

        score = max(0.0, min(100.0, score))
        return int(round_half_up(score))
