"""
Observer Pattern for Engine Event Notifications.

The profiling engine reports progress at fixed checkpoints (one per analysis
pass) to any number of observers. Observers handle presentation concerns
such as terminal progress, logging and metrics, so the engine itself stays
free of output code.

Cancellation travels the other way: the caller hands the engine a
CancellationToken and sets it from a UI callback or another thread; the
engine checks it between passes and between row batches.
"""

import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Any, List, Optional

from tablesift.core.exceptions import AnalysisCancelledError
from tablesift.core.results import AnalysisResult, ValidationResult


class AnalysisObserver(ABC):
    """
    Abstract base class for engine event observers.

    All methods are called synchronously by the engine. An exception raised
    by an observer is logged by the engine and never aborts the analysis.

    Example:
        >>> class PrintObserver(AnalysisObserver):
        ...     def on_pass_complete(self, pass_name, progress):
        ...         print(f"{pass_name}: {progress:.0%}")
        ...
        >>> engine = ProfilingEngine(observers=[PrintObserver()])
    """

    @abstractmethod
    def on_analysis_start(self, dataset_name: Optional[str], row_count: int, column_count: int) -> None:
        """Called once before the first pass."""
        pass

    @abstractmethod
    def on_pass_start(self, pass_name: str) -> None:
        """Called when an analysis pass starts."""
        pass

    @abstractmethod
    def on_pass_complete(self, pass_name: str, progress: float) -> None:
        """
        Called when an analysis pass completes.

        Args:
            pass_name: Name of the finished pass
            progress: Fraction of the analysis completed, 0.0 to 1.0
        """
        pass

    @abstractmethod
    def on_analysis_complete(self, result: AnalysisResult) -> None:
        """Called with the finished snapshot."""
        pass

    def on_validation_complete(self, results: List[ValidationResult]) -> None:
        """Called after a validation run (built-in plus custom rules)."""
        pass

    @abstractmethod
    def on_error(self, error: Exception, context: Dict[str, Any]) -> None:
        """
        Called when a pass fails or is cancelled.

        Args:
            error: Exception that occurred
            context: Context dict (pass name, dataset name)
        """
        pass


class LoggingObserver(AnalysisObserver):
    """
    Observer for structured logging of analysis events.

    Example:
        >>> import logging
        >>> logging.basicConfig(level=logging.INFO)
        >>> engine = ProfilingEngine(observers=[LoggingObserver()])
    """

    def __init__(self):
        self.logger = logging.getLogger('tablesift.engine')

    def on_analysis_start(self, dataset_name: Optional[str], row_count: int, column_count: int) -> None:
        self.logger.info(
            f"Analysis started: {dataset_name or '<dataset>'} ({row_count} rows, {column_count} columns)",
            extra={'dataset_name': dataset_name, 'row_count': row_count, 'column_count': column_count}
        )

    def on_pass_start(self, pass_name: str) -> None:
        self.logger.debug(f"Pass started: {pass_name}", extra={'pass_name': pass_name})

    def on_pass_complete(self, pass_name: str, progress: float) -> None:
        self.logger.debug(
            f"Pass completed: {pass_name} ({progress:.0%})",
            extra={'pass_name': pass_name, 'progress': progress}
        )

    def on_analysis_complete(self, result: AnalysisResult) -> None:
        self.logger.info(
            f"Analysis completed - quality score {result.quality_score}",
            extra={
                'quality_score': result.quality_score,
                'duplicates': result.duplicates,
                'total_issues': result.total_issues
            }
        )

    def on_validation_complete(self, results: List[ValidationResult]) -> None:
        self.logger.info(f"Validation completed - {len(results)} result(s)")

    def on_error(self, error: Exception, context: Dict[str, Any]) -> None:
        self.logger.error(f"Analysis error: {str(error)}", extra=context)


class CLIProgressObserver(AnalysisObserver):
    """
    Observer for CLI progress output.

    Attributes:
        verbose (bool): Whether to print per-pass progress
        po (PrettyOutput): Pretty output utility class
    """

    def __init__(self, verbose: bool = True):
        self.verbose = verbose

        # Import here to avoid circular dependency
        from tablesift.core.pretty_output import PrettyOutput
        self.po = PrettyOutput

    def on_analysis_start(self, dataset_name: Optional[str], row_count: int, column_count: int) -> None:
        if self.verbose:
            self.po.header("DATA PROFILE")
            self.po.key_value("Dataset", dataset_name or "<dataset>", indent=2)
            self.po.key_value("Rows", f"{row_count:,}", indent=2)
            self.po.key_value("Columns", column_count, indent=2)
            self.po.blank_line()

    def on_pass_start(self, pass_name: str) -> None:
        pass

    def on_pass_complete(self, pass_name: str, progress: float) -> None:
        if self.verbose:
            self.po.progress(int(round(progress * 100)), 100, pass_name)

    def on_analysis_complete(self, result: AnalysisResult) -> None:
        if self.verbose:
            self.po.analysis_summary(result)

    def on_validation_complete(self, results: List[ValidationResult]) -> None:
        if self.verbose:
            self.po.validation_summary(results)

    def on_error(self, error: Exception, context: Dict[str, Any]) -> None:
        if self.verbose:
            self.po.error(f"Error in pass '{context.get('pass_name', 'unknown')}': {str(error)}")


class MetricsCollectorObserver(AnalysisObserver):
    """
    Observer that records pass timings and outcome counts.

    Example:
        >>> metrics = MetricsCollectorObserver()
        >>> engine = ProfilingEngine(observers=[metrics])
        >>> result = engine.analyze(dataset)
        >>> metrics.metrics['passes_completed']
        ['type_inference', 'null_counts', ...]
    """

    def __init__(self):
        self.metrics: Dict[str, Any] = {
            'dataset_name': None,
            'start_time': None,
            'end_time': None,
            'passes_completed': [],
            'quality_score': None,
            'errors': []
        }

    def on_analysis_start(self, dataset_name: Optional[str], row_count: int, column_count: int) -> None:
        self.metrics['dataset_name'] = dataset_name
        self.metrics['start_time'] = datetime.now()

    def on_pass_start(self, pass_name: str) -> None:
        pass

    def on_pass_complete(self, pass_name: str, progress: float) -> None:
        self.metrics['passes_completed'].append(pass_name)

    def on_analysis_complete(self, result: AnalysisResult) -> None:
        self.metrics['end_time'] = datetime.now()
        self.metrics['quality_score'] = result.quality_score

    def on_error(self, error: Exception, context: Dict[str, Any]) -> None:
        self.metrics['errors'].append({
            'error_type': type(error).__name__,
            'error_message': str(error),
            'context': context,
            'timestamp': datetime.now().isoformat()
        })


class CancellationToken:
    """
    Thread-safe cancellation flag.

    Example:
        >>> token = CancellationToken()
        >>> token.cancel()
        >>> token.cancelled
        True
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self, pass_name: Optional[str] = None, rows_processed: Optional[int] = None) -> None:
        """Raise AnalysisCancelledError when cancel() has been called."""
        if self.cancelled:
            raise AnalysisCancelledError(pass_name, rows_processed)
