"""
Base class for built-in validation rules.

Built-in rules look at a whole dataset and report zero or more
ValidationResults. Unlike custom rules they are always on and their
results can be fixed automatically.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from tablesift.core import constants
from tablesift.core.dataset import Dataset
from tablesift.core.results import ValidationResult


class ValidationRule(ABC):
    """
    Abstract base class for built-in validation rules.

    Subclasses implement get_description() and validate().

    Attributes:
        name (str): Display name of the rule
        rule_type (str): Tag used to pick fix options and fix scripts
    """

    name: str = ""
    rule_type: str = ""

    @abstractmethod
    def get_description(self) -> str:
        """Get human-readable description."""
        pass

    @abstractmethod
    def validate(self, dataset: Dataset, context: Dict[str, Any]) -> List[ValidationResult]:
        """
        Run the rule.

        Args:
            dataset: Dataset to check
            context: Validation context (max_affected_rows, data_types, ...)

        Returns:
            Results for every problem found; empty when the data is clean
        """
        pass

    @staticmethod
    def _max_affected(context: Dict[str, Any]) -> int:
        return context.get("max_affected_rows", constants.MAX_AFFECTED_ROWS)
