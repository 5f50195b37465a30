"""
Rule condition matching for custom rules.

A custom rule's condition is free text such as "age < 0" or "email must be
valid". KeywordRuleMatcher does not parse it: it looks for a handful of
keywords and applies a fixed check for each one it finds. Conditions that
mention none of the keywords never match.

    "null"                   any target cell is empty (or zero/False)
    "age < 0"                a numeric target value is negative
    "age > 120"              a numeric target value is above 120
    "salary" and "> 0"       a numeric target value is zero or negative
    "email"                  a non-empty target value lacks "@" or "."

The clauses are not exclusive; a row is affected when any of them fires.
RuleMatcher is the seam where a real expression parser can be plugged in.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Sequence

from tablesift.core.dataset import is_missing, is_truthy, to_number, to_text


class RuleMatcher(ABC):
    """Decides whether a row is affected by a custom rule."""

    @abstractmethod
    def matches(self, condition: str, row: Dict[str, Any], columns: Sequence[str]) -> bool:
        """
        Args:
            condition: The rule's condition text
            row: One dataset row
            columns: Target columns (already resolved; never empty)

        Returns:
            True when the row is affected
        """
        pass

    @abstractmethod
    def classify(self, condition: str) -> str:
        """Rule type tag used to pick fix options (custom_age, custom_email, ...)."""
        pass


class KeywordRuleMatcher(RuleMatcher):
    """
    Example:
        >>> matcher = KeywordRuleMatcher()
        >>> matcher.matches("age < 0", {"age": -1}, ["age"])
        True
        >>> matcher.matches("age < 0", {"age": 5}, ["age"])
        False
    """

    def matches(self, condition: str, row: Dict[str, Any], columns: Sequence[str]) -> bool:
        cond = condition.lower()

        if "null" in cond and any(not is_truthy(row.get(c)) for c in columns):
            return True

        for column in columns:
            value = row.get(column)
            number = None if is_missing(value) else to_number(value)
            if number is None:
                continue
            if "age < 0" in cond and number < 0:
                return True
            if "age > 120" in cond and number > 120:
                return True
            if "salary" in cond and "> 0" in cond and number <= 0:
                return True

        if "email" in cond:
            for column in columns:
                value = row.get(column)
                if is_missing(value):
                    continue
                text = to_text(value)
                if "@" not in text or "." not in text:
                    return True

        return False

    def classify(self, condition: str) -> str:
        cond = condition.lower()
        if "age" in cond:
            return "custom_age"
        if "email" in cond:
            return "custom_email"
        if "salary" in cond:
            return "custom_salary"
        if "null" in cond:
            return "custom_null"
        return "custom"
