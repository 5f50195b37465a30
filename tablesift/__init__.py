"""
TableSift - data profiling, validation and cleaning for tabular datasets.

Typical use:

    >>> from tablesift import ProfilingEngine, load_dataset
    >>> dataset = load_dataset("customers.csv")
    >>> engine = ProfilingEngine()
    >>> result = engine.analyze(dataset)
    >>> result.quality_score
    87
"""

__version__ = "0.1.0"

from tablesift.core.config import EngineConfig, ProjectConfig
from tablesift.core.dataset import Dataset
from tablesift.core.engine import ProfilingEngine
from tablesift.core.observers import CancellationToken
from tablesift.core.results import (
    AnalysisResult,
    FixOption,
    Severity,
    ValidationResult,
)
from tablesift.fixes.history import DatasetHistory
from tablesift.loaders.table_loader import load_dataset
from tablesift.validations.custom_rules import CustomRule, RuleSet

__all__ = [
    '__version__',
    'AnalysisResult',
    'CancellationToken',
    'CustomRule',
    'Dataset',
    'DatasetHistory',
    'EngineConfig',
    'FixOption',
    'ProfilingEngine',
    'ProjectConfig',
    'RuleSet',
    'Severity',
    'ValidationResult',
    'load_dataset',
]
