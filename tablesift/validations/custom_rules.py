"""
Custom Rules - user-authored validation rules and their evaluation.

Rules are plain value objects. A RuleSet holds the rules attached to one
dataset and is changed only through add/update/delete/toggle, each of which
returns a new RuleSet. CustomRuleEngine evaluates the active rules of a set
against a dataset and produces one ValidationResult per rule that matched
at least one row.

Example YAML (the 'rules' section of a TableSift config file):

    rules:
      - id: negative_age
        name: Age must not be negative
        condition: "age < 0"
        severity: critical
        columns: [age]
      - id: contact_email
        name: Contact e-mail looks valid
        condition: "email must contain @ and ."
        severity: medium
        columns: [email]
        active: false
"""

import logging
import threading
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Optional, Tuple

from tablesift.core import constants
from tablesift.core.dataset import Dataset
from tablesift.core.exceptions import (
    AnalysisCancelledError,
    ColumnNotFoundError,
    ConfigValidationError,
    RuleEvaluationError
)
from tablesift.core.observers import CancellationToken
from tablesift.core.results import Severity, ValidationResult
from tablesift.validations.rule_matcher import RuleMatcher, KeywordRuleMatcher

logger = logging.getLogger(__name__)

CUSTOM_RULE_SUGGESTION = "Review the affected rows manually and correct values that violate this rule."


@dataclass(frozen=True)
class CustomRule:
    """
    A user-authored validation rule.

    Attributes:
        id: Unique identifier within a RuleSet
        name: Display name
        condition: Natural-language condition matched by keywords
        description: Optional longer description
        severity: Severity of the findings
        columns: Target columns (empty = all columns)
        active: Inactive rules are skipped during validation
    """
    id: str
    name: str
    condition: str
    description: str = ""
    severity: Severity = Severity.MEDIUM
    columns: Tuple[str, ...] = field(default_factory=tuple)
    active: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: Optional[int] = None) -> "CustomRule":
        """
        Build a rule from a config dictionary.

        Raises:
            ConfigValidationError: On missing or malformed fields
        """
        prefix = f"rules[{index}]" if index is not None else "rule"

        for key in ("id", "name", "condition"):
            value = data.get(key)
            if not isinstance(value, str) or not value.strip():
                raise ConfigValidationError(
                    f"Rule field '{key}' is required and must be a non-empty string",
                    field=f"{prefix}.{key}",
                    expected="non-empty string",
                    actual=repr(value)
                )

        try:
            severity = Severity.parse(data.get("severity", Severity.MEDIUM.value))
        except ValueError as e:
            raise ConfigValidationError(
                str(e),
                field=f"{prefix}.severity",
                expected=", ".join(s.value for s in Severity),
                actual=str(data.get("severity"))
            )

        columns = data.get("columns") or []
        if isinstance(columns, str):
            columns = [columns]
        if not isinstance(columns, list) or not all(isinstance(c, str) for c in columns):
            raise ConfigValidationError(
                "Rule 'columns' must be a list of column names",
                field=f"{prefix}.columns",
                expected="list of strings",
                actual=repr(columns)
            )

        active = data.get("active", True)
        if not isinstance(active, bool):
            raise ConfigValidationError(
                "Rule 'active' must be true or false",
                field=f"{prefix}.active",
                expected="boolean",
                actual=repr(active)
            )

        return cls(
            id=data["id"].strip(),
            name=data["name"].strip(),
            condition=data["condition"],
            description=data.get("description") or "",
            severity=severity,
            columns=tuple(columns),
            active=active
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "condition": self.condition,
            "description": self.description,
            "severity": self.severity.value,
            "columns": list(self.columns),
            "active": self.active,
        }


class RuleSet:
    """
    Immutable, ordered collection of custom rules with unique ids.

    Example:
        >>> rules = RuleSet().add(CustomRule("r1", "No negative ages", "age < 0"))
        >>> rules = rules.toggle("r1")
        >>> rules.active_rules()
        []
    """

    def __init__(self, rules: Iterable[CustomRule] = ()):
        rules = tuple(rules)
        ids = [r.id for r in rules]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"Duplicate rule id(s): {', '.join(duplicates)}")
        self._rules = rules

    @classmethod
    def from_dicts(cls, items: Iterable[Dict[str, Any]]) -> "RuleSet":
        """Build from config dictionaries (the 'rules' list of a YAML file)."""
        rules = [CustomRule.from_dict(item, index) for index, item in enumerate(items)]
        try:
            return cls(rules)
        except ValueError as e:
            raise ConfigValidationError(str(e), field="rules")

    def to_dicts(self) -> List[Dict[str, Any]]:
        return [rule.to_dict() for rule in self._rules]

    def get(self, rule_id: str) -> CustomRule:
        for rule in self._rules:
            if rule.id == rule_id:
                return rule
        raise KeyError(f"Rule '{rule_id}' not found")

    def add(self, rule: CustomRule) -> "RuleSet":
        if any(r.id == rule.id for r in self._rules):
            raise ValueError(f"Rule id '{rule.id}' already exists")
        return RuleSet(self._rules + (rule,))

    def update(self, rule_id: str, **changes) -> "RuleSet":
        """Return a set where the rule with rule_id has the given fields replaced."""
        if "id" in changes and changes["id"] != rule_id:
            raise ValueError("Rule id cannot be changed")
        if "severity" in changes:
            changes["severity"] = Severity.parse(changes["severity"])
        if "columns" in changes:
            changes["columns"] = tuple(changes["columns"] or ())
        target = self.get(rule_id)
        updated = replace(target, **changes)
        return RuleSet(updated if r.id == rule_id else r for r in self._rules)

    def delete(self, rule_id: str) -> "RuleSet":
        self.get(rule_id)
        return RuleSet(r for r in self._rules if r.id != rule_id)

    def toggle(self, rule_id: str) -> "RuleSet":
        return self.update(rule_id, active=not self.get(rule_id).active)

    def active_rules(self) -> List[CustomRule]:
        return [r for r in self._rules if r.active]

    def __iter__(self):
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __eq__(self, other) -> bool:
        return isinstance(other, RuleSet) and self._rules == other._rules

    def __repr__(self) -> str:
        return f"RuleSet({[r.id for r in self._rules]!r})"


class InMemoryRuleRepository:
    """
    Per-dataset storage of rules and the latest validation results.

    Stands in for any persistence collaborator offering get/set semantics.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._rules: Dict[str, RuleSet] = {}
        self._results: Dict[str, List[ValidationResult]] = {}

    def get_rules(self, dataset_id: str) -> RuleSet:
        with self._lock:
            return self._rules.get(dataset_id, RuleSet())

    def set_rules(self, dataset_id: str, rules: RuleSet) -> None:
        with self._lock:
            self._rules[dataset_id] = rules

    def get_results(self, dataset_id: str) -> List[ValidationResult]:
        with self._lock:
            return list(self._results.get(dataset_id, []))

    def set_results(self, dataset_id: str, results: List[ValidationResult]) -> None:
        with self._lock:
            self._results[dataset_id] = list(results)


class CustomRuleEngine:
    """
    Evaluates custom rules against a dataset.

    A rule that raises while being evaluated is logged and skipped; the
    rest of the run continues. Custom results are never auto-fixable.

    Example:
        >>> ds = Dataset.from_records([{"age": -1}, {"age": 5}])
        >>> rule = CustomRule("r1", "No negative ages", "age < 0", columns=("age",))
        >>> [r.affected_rows for r in CustomRuleEngine().evaluate(ds, [rule])]
        [(0,)]
    """

    PASS_NAME = "custom_rules"

    def __init__(
        self,
        matcher: Optional[RuleMatcher] = None,
        max_affected_rows: int = constants.MAX_AFFECTED_ROWS,
        batch_size: int = constants.DEFAULT_BATCH_SIZE
    ):
        self.matcher = matcher or KeywordRuleMatcher()
        self.max_affected_rows = max_affected_rows
        self.batch_size = batch_size
        self.errors: List[RuleEvaluationError] = []

    def evaluate(
        self,
        dataset: Dataset,
        rules: Iterable[CustomRule],
        cancel_token: Optional[CancellationToken] = None
    ) -> List[ValidationResult]:
        """
        Evaluate every active rule.

        Failed rules are collected in self.errors (reset on each call).

        Returns:
            One result per active rule with at least one affected row
        """
        self.errors = []
        results = []
        for rule in rules:
            if not rule.active:
                continue
            try:
                result = self.evaluate_rule(dataset, rule, cancel_token)
            except AnalysisCancelledError:
                raise
            except RuleEvaluationError as e:
                self._record_failure(e)
                continue
            except Exception as e:
                self._record_failure(RuleEvaluationError(
                    f"Rule '{getattr(rule, 'name', '?')}' failed: {e}",
                    rule_id=getattr(rule, 'id', None),
                    rule_name=getattr(rule, 'name', None),
                    original_exception=e
                ))
                continue
            if result is not None:
                results.append(result)
        return results

    def evaluate_rule(
        self,
        dataset: Dataset,
        rule: CustomRule,
        cancel_token: Optional[CancellationToken] = None
    ) -> Optional[ValidationResult]:
        """
        Evaluate one rule regardless of its active flag.

        Raises:
            RuleEvaluationError: If the rule's columns are malformed
            ColumnNotFoundError: If a target column is not in the dataset

        Returns:
            ValidationResult, or None when no row is affected
        """
        columns = self._resolve_columns(dataset, rule)

        affected = []
        for row_index, row in enumerate(dataset.rows):
            if cancel_token is not None and row_index % self.batch_size == 0:
                cancel_token.raise_if_cancelled(self.PASS_NAME, row_index)
            if self.matcher.matches(rule.condition, row, columns):
                affected.append(row_index)

        if not affected:
            return None

        total = len(affected)
        logger.debug(f"Rule '{rule.name}' affected {total} row(s)")

        return ValidationResult(
            id=f"custom_{rule.id}",
            rule=rule.name,
            severity=rule.severity,
            affected_rows=tuple(affected[:self.max_affected_rows]),
            description=rule.description or f"{total} row(s) match condition: {rule.condition}",
            suggestion=CUSTOM_RULE_SUGGESTION,
            can_auto_fix=False,
            rule_type=self.matcher.classify(rule.condition),
            columns=tuple(rule.columns)
        )

    @staticmethod
    def _resolve_columns(dataset: Dataset, rule: CustomRule) -> Tuple[str, ...]:
        columns = rule.columns
        if isinstance(columns, str) or not all(isinstance(c, str) for c in columns):
            raise RuleEvaluationError(
                "Rule columns must be a list of column names",
                rule_id=rule.id,
                rule_name=rule.name
            )
        if not columns:
            return dataset.headers
        for column in columns:
            if column not in dataset.headers:
                raise ColumnNotFoundError(column, list(dataset.headers))
        return tuple(columns)

    def _record_failure(self, error: RuleEvaluationError) -> None:
        logger.warning(
            f"Skipping rule '{error.rule_name}': {error.message}",
            extra={'rule_id': error.rule_id}
        )
        self.errors.append(error)
