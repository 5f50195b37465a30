"""
Column profiling passes.

Key Components:
- TypeInferrer: per-column type tags from a value sample
- StatisticsCalculator: numeric and frequency statistics
- OutlierDetector: z-score outliers for number columns
- DuplicateDetector: exact duplicate rows
- QualityScorer: overall 0-100 score
"""

from .duplicate_detector import DuplicateDetector
from .outlier_detector import OutlierDetector
from .quality_scorer import QualityScorer
from .statistics_calculator import StatisticsCalculator
from .type_inferrer import TypeInferrer

__all__ = [
    'DuplicateDetector',
    'OutlierDetector',
    'QualityScorer',
    'StatisticsCalculator',
    'TypeInferrer',
]
