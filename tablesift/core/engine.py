"""
Profiling engine - orchestrates the analysis passes.

analyze() runs the passes in a fixed order over an immutable dataset and
produces an AnalysisResult snapshot:

    type_inference -> null_counts -> statistics -> outliers -> duplicates
    -> contextual_validation -> cross_field_validation -> quality_score

validate() runs the built-in checks and the active custom rules. Fix
option generation and fix application are exposed here as well so that a
caller needs a single collaborator.
"""

from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from tablesift.core.config import EngineConfig
from tablesift.core.dataset import Dataset, is_blank
from tablesift.core.exceptions import AnalysisCancelledError, AnalysisPassError, DatasetShapeError
from tablesift.core.logging_config import get_logger
from tablesift.core.observers import AnalysisObserver, CancellationToken
from tablesift.core.results import AnalysisResult, FixOption, ValidationResult
from tablesift.fixes.fix_applicator import FixApplicator
from tablesift.fixes.fix_options import generate_fix_options
from tablesift.profiler.duplicate_detector import DuplicateDetector
from tablesift.profiler.outlier_detector import OutlierDetector
from tablesift.profiler.quality_scorer import QualityScorer
from tablesift.profiler.statistics_calculator import StatisticsCalculator
from tablesift.profiler.type_inferrer import TypeInferrer
from tablesift.validations.builtin_checks import BUILTIN_RULES
from tablesift.validations.contextual_validator import ContextualValidator
from tablesift.validations.cross_field_validator import CrossFieldValidator
from tablesift.validations.custom_rules import CustomRule, CustomRuleEngine, RuleSet

logger = get_logger(__name__)

PASS_TYPE_INFERENCE = "type_inference"
PASS_NULL_COUNTS = "null_counts"
PASS_STATISTICS = "statistics"
PASS_OUTLIERS = "outliers"
PASS_DUPLICATES = "duplicates"
PASS_CONTEXTUAL = ContextualValidator.PASS_NAME
PASS_CROSS_FIELD = CrossFieldValidator.PASS_NAME
PASS_QUALITY_SCORE = "quality_score"

ANALYSIS_PASSES = (
    PASS_TYPE_INFERENCE,
    PASS_NULL_COUNTS,
    PASS_STATISTICS,
    PASS_OUTLIERS,
    PASS_DUPLICATES,
    PASS_CONTEXTUAL,
    PASS_CROSS_FIELD,
    PASS_QUALITY_SCORE,
)


class ProfilingEngine:
    """
    Main profiling and validation engine.

    Example:
        >>> engine = ProfilingEngine()
        >>> result = engine.analyze(Dataset.from_records([{"age": -5}, {"age": 30}]))
        >>> result.data_types
        {'age': 'number'}
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        observers: Optional[List[AnalysisObserver]] = None
    ):
        """
        Initialize the engine.

        Args:
            config: Engine configuration (defaults when None)
            observers: Optional list of observers to receive engine events
        """
        self.config = config or EngineConfig()
        self.observers: List[AnalysisObserver] = observers if observers is not None else []

        self.type_inferrer = TypeInferrer(self.config)
        self.statistics_calculator = StatisticsCalculator()
        self.outlier_detector = OutlierDetector(self.config)
        self.duplicate_detector = DuplicateDetector()
        self.contextual_validator = ContextualValidator(self.config)
        self.cross_field_validator = CrossFieldValidator(self.config)
        self.quality_scorer = QualityScorer()
        self.custom_rule_engine = CustomRuleEngine(
            max_affected_rows=self.config.max_affected_rows,
            batch_size=self.config.batch_size
        )
        self.fix_applicator = FixApplicator(self.config)

    # ------------------------------------------------------------------
    # Observer notification
    # ------------------------------------------------------------------

    def _notify(self, event: str, *args) -> None:
        for observer in self.observers:
            try:
                getattr(observer, event)(*args)
            except Exception as e:
                logger.warning(f"Observer {observer.__class__.__name__} failed {event}: {e}")

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------

    def analyze(self, dataset: Dataset, cancel_token: Optional[CancellationToken] = None) -> AnalysisResult:
        """
        Profile a dataset.

        Args:
            dataset: Dataset to analyze
            cancel_token: Optional token checked between passes and row batches

        Returns:
            AnalysisResult snapshot

        Raises:
            DatasetShapeError: Dataset has no columns or no rows
            AnalysisCancelledError: The token was cancelled
            AnalysisPassError: A pass failed unexpectedly
        """
        if not dataset.headers:
            raise DatasetShapeError("Dataset has no columns", reason="empty_headers")
        if dataset.row_count == 0:
            raise DatasetShapeError("Dataset has no rows", reason="empty_rows")

        logger.info(f"Starting analysis of {dataset.name or 'dataset'}: "
                    f"{dataset.row_count} rows x {dataset.column_count} columns")
        self._notify("on_analysis_start", dataset.name, dataset.row_count, dataset.column_count)

        state: Dict[str, Any] = {}
        passes: List[Callable[[Dataset, Dict[str, Any], Optional[CancellationToken]], Any]] = [
            lambda ds, st, tok: self.type_inferrer.infer_types(ds),
            lambda ds, st, tok: self._count_nulls(ds),
            lambda ds, st, tok: self.statistics_calculator.calculate_all(ds, st[PASS_TYPE_INFERENCE]),
            lambda ds, st, tok: self.outlier_detector.detect_all(ds, st[PASS_TYPE_INFERENCE]),
            lambda ds, st, tok: self.duplicate_detector.count_duplicates(ds),
            lambda ds, st, tok: self.contextual_validator.validate(ds, st[PASS_TYPE_INFERENCE], tok),
            lambda ds, st, tok: self.cross_field_validator.validate(ds, st[PASS_TYPE_INFERENCE], tok),
            lambda ds, st, tok: self._score(ds, st),
        ]

        for index, (pass_name, run_pass) in enumerate(zip(ANALYSIS_PASSES, passes), 1):
            state[pass_name] = self._run_pass(pass_name, run_pass, dataset, state, cancel_token)
            self._notify("on_pass_complete", pass_name, index / len(ANALYSIS_PASSES))

        result = AnalysisResult(
            total_rows=dataset.row_count,
            total_columns=dataset.column_count,
            null_values=state[PASS_NULL_COUNTS],
            duplicates=state[PASS_DUPLICATES],
            data_types=state[PASS_TYPE_INFERENCE],
            statistics=state[PASS_STATISTICS],
            outliers=state[PASS_OUTLIERS],
            contextual_issues=state[PASS_CONTEXTUAL],
            cross_field_issues=state[PASS_CROSS_FIELD],
            quality_score=state[PASS_QUALITY_SCORE],
        )

        logger.info(f"Analysis complete: quality score {result.quality_score}, {result.total_issues} issue(s)")
        self._notify("on_analysis_complete", result)
        return result

    def _run_pass(self, pass_name, run_pass, dataset, state, cancel_token):
        try:
            if cancel_token is not None:
                cancel_token.raise_if_cancelled(pass_name)
            self._notify("on_pass_start", pass_name)
            logger.debug(f"Running pass: {pass_name}")
            return run_pass(dataset, state, cancel_token)
        except AnalysisCancelledError as e:
            logger.info(f"Analysis cancelled during '{pass_name}'")
            self._notify("on_error", e, {'pass_name': pass_name})
            raise
        except Exception as e:
            logger.error(f"Analysis pass '{pass_name}' failed: {e}")
            error = AnalysisPassError(pass_name, e)
            self._notify("on_error", error, {'pass_name': pass_name})
            raise error from e

    @staticmethod
    def _count_nulls(dataset: Dataset) -> Dict[str, int]:
        return {
            header: sum(1 for value in dataset.column(header) if is_blank(value))
            for header in dataset.headers
        }

    def _score(self, dataset: Dataset, state: Dict[str, Any]) -> int:
        return self.quality_scorer.calculate_score(
            total_rows=dataset.row_count,
            total_columns=dataset.column_count,
            null_count=sum(state[PASS_NULL_COUNTS].values()),
            duplicates=state[PASS_DUPLICATES],
            issue_count=len(state[PASS_CONTEXTUAL]) + len(state[PASS_CROSS_FIELD]),
            data_types=state[PASS_TYPE_INFERENCE],
        )

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(
        self,
        dataset: Dataset,
        rules: Union[RuleSet, Iterable[CustomRule], None] = None,
        cancel_token: Optional[CancellationToken] = None
    ) -> List[ValidationResult]:
        """
        Run the built-in checks followed by the active custom rules.

        Custom rules that fail are logged and skipped (see
        custom_rule_engine.errors).

        Returns:
            Built-in results first, then custom results in rule order
        """
        context = {'max_affected_rows': self.config.max_affected_rows}
        results: List[ValidationResult] = []

        for rule_class in BUILTIN_RULES:
            rule = rule_class()
            logger.debug(f"Running built-in check: {rule.get_description()}")
            results.extend(rule.validate(dataset, context))

        if rules is not None:
            results.extend(self.custom_rule_engine.evaluate(dataset, rules, cancel_token))

        logger.info(f"Validation complete: {len(results)} result(s)")
        self._notify("on_validation_complete", results)
        return results

    # ------------------------------------------------------------------
    # Fixes
    # ------------------------------------------------------------------

    def fix_options(self, result: ValidationResult, data_types: Optional[Dict[str, str]] = None) -> List[FixOption]:
        """Fix options for one result (see fixes.fix_options)."""
        return generate_fix_options(result, data_types)

    def apply_fix(self, dataset: Dataset, result: ValidationResult, option: Union[FixOption, str]) -> Dataset:
        """Apply one fix option, returning a new dataset."""
        return self.fix_applicator.apply(dataset, result, option)
