"""
Accessibility monitoring service: entry point tying aggregation, history and reporting together
"""

from typing import List, Dict, Any, Optional, Iterable
import logging

from a11y_monitor.component_attribution import AttributionStrategy, create_strategy
from a11y_monitor.component_registry import ComponentRegistry
from a11y_monitor.coverage_estimator import CoverageEstimator, TotalProvider
from a11y_monitor.history_store import HistoryStore, JsonFileStorageBackend
from a11y_monitor.metrics_aggregator import MetricsAggregator
from a11y_monitor.models import MetricsSnapshot, AccessibilityReport, ViolationTrend
from a11y_monitor.report_generator import ReportGenerator

logger = logging.getLogger(__name__)


class AccessibilityMonitoringService:
    """Processes scan results, keeps their history and reports on them"""

    def __init__(self, history: HistoryStore = None, total_components: TotalProvider = 0,
                 attribution: AttributionStrategy = None, clock=None):
        """
        Initialize monitoring service

        Args:
            history: History store (in-memory when omitted)
            total_components: Known component count, registry or provider for coverage
            attribution: Strategy mapping violations to components
            clock: Returns the current aware datetime
        """
        self.history = history or HistoryStore(clock=clock)
        self.aggregator = MetricsAggregator(
            history=self.history,
            coverage=CoverageEstimator(total_components),
            attribution=attribution,
            clock=clock
        )
        self.report_generator = ReportGenerator()

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "AccessibilityMonitoringService":
        """
        Build a service from a configuration dictionary (see ConfigLoader)

        Args:
            config: Configuration dictionary

        Returns:
            AccessibilityMonitoringService persisting history to disk
        """
        history_config = config.get('history', {})
        history = HistoryStore(
            backend=JsonFileStorageBackend(history_config.get('storage_dir', 'output/history')),
            storage_key=history_config.get('storage_key', 'accessibility-metrics-history'),
            max_entries=int(history_config.get('max_entries', 100))
        )

        coverage_config = config.get('coverage', {})
        registry_file = coverage_config.get('registry_file')
        if registry_file:
            total_components = ComponentRegistry.from_file(
                registry_file, coverage_config.get('registry_column', 'component')
            )
        else:
            total_components = int(coverage_config.get('total_components') or 0)

        attribution = create_strategy(config.get('attribution', {}).get('strategy', 'regex'))
        return cls(history=history, total_components=total_components, attribution=attribution)

    def process_results(self, raw_violations: Iterable[Any], component_name: Optional[str] = None,
                        execution_time: Optional[float] = None) -> MetricsSnapshot:
        """Compute a metrics snapshot from a list of raw violations"""
        return self.aggregator.process_results(raw_violations, component_name, execution_time)

    def process_axe_results(self, results: Dict[str, Any],
                            component_name: Optional[str] = None) -> MetricsSnapshot:
        """
        Compute a metrics snapshot from a whole axe results object

        Args:
            results: axe results (or AxeScanner output) holding 'violations'
            component_name: Scope component metrics to this single component

        Returns:
            MetricsSnapshot
        """
        execution_time = results.get('executionTime')
        return self.process_results(
            results.get('violations') or [],
            component_name,
            float(execution_time) if execution_time is not None else None
        )

    def generate_report(self, snapshot: MetricsSnapshot,
                        violations: Optional[Iterable[Any]] = None) -> AccessibilityReport:
        """Generate a report for a snapshot against the stored history"""
        return self.report_generator.generate_report(snapshot, self.history.get_history(), violations)

    def store_metrics(self, snapshot: MetricsSnapshot):
        """Add a snapshot to the history"""
        self.history.store(snapshot)

    def get_metrics_history(self) -> List[MetricsSnapshot]:
        return self.history.get_history()

    def get_trend_data(self, days: int = 30) -> List[ViolationTrend]:
        return self.history.get_trend_data(days)

    def get_component_trends(self, component_name: str, days: int = 30) -> List[ViolationTrend]:
        return self.history.get_component_trends(component_name, days)
