"""
Reduction of raw axe violations into a metrics snapshot
"""

import time
from typing import List, Dict, Any, Optional, Iterable
import logging

from a11y_monitor.component_attribution import (
    AttributionStrategy, RegexAttributionStrategy, NamedComponentAttributionStrategy
)
from a11y_monitor.coverage_estimator import CoverageEstimator
from a11y_monitor.history_store import HistoryStore, format_timestamp, utc_now
from a11y_monitor.models import (
    MetricsSnapshot, ComponentMetric, ComponentTrend, ComponentStatus, RawViolation,
    ViolationsByLevel, WcagCompliance, PerformanceMetrics
)
from a11y_monitor.violation_classifier import (
    parse_violations, count_by_level,
    is_level_a_violation, is_level_aa_violation, is_level_aaa_violation
)

logger = logging.getLogger(__name__)

# Nominal number of WCAG checks the compliance percentages are measured against.
# It does not track how many rules actually ran.
TOTAL_WCAG_CHECKS = 50
FALLBACK_COMPONENT = 'Application'
COMPONENT_VIOLATION_PENALTY = 5


def calculate_wcag_compliance(violations: List[RawViolation]) -> WcagCompliance:
    """
    Calculate per-level compliance percentages

    Args:
        violations: Parsed violations

    Returns:
        WcagCompliance, each level floored at 0
    """
    def percentage(violating: int) -> float:
        return max(0.0, (TOTAL_WCAG_CHECKS - violating) / TOTAL_WCAG_CHECKS * 100)

    return WcagCompliance(
        level_a=percentage(sum(1 for v in violations if is_level_a_violation(v))),
        level_aa=percentage(sum(1 for v in violations if is_level_aa_violation(v))),
        level_aaa=percentage(sum(1 for v in violations if is_level_aaa_violation(v)))
    )


def component_wcag_score(violation_count: int) -> int:
    return max(0, 100 - COMPONENT_VIOLATION_PENALTY * violation_count)


def component_status(violations_by_level: ViolationsByLevel) -> ComponentStatus:
    if violations_by_level.critical > 0:
        return ComponentStatus.FAILING
    if violations_by_level.serious > 0:
        return ComponentStatus.WARNING
    return ComponentStatus.PASSING


class MetricsAggregator:
    """Turns scan results into MetricsSnapshot objects"""

    def __init__(self, history: HistoryStore = None, coverage: CoverageEstimator = None,
                 attribution: AttributionStrategy = None, clock=None):
        """
        Initialize metrics aggregator

        Args:
            history: Store consulted for each component's prior metric
            coverage: Coverage estimator (zero known components when omitted)
            attribution: Strategy mapping violations to components
            clock: Returns the current aware datetime
        """
        self.history = history
        self.coverage = coverage or CoverageEstimator(0)
        self.attribution = attribution or RegexAttributionStrategy()
        self.clock = clock or utc_now

    def process_results(self, raw_violations: Iterable[Any], component_name: Optional[str] = None,
                        execution_time: Optional[float] = None) -> MetricsSnapshot:
        """
        Build a metrics snapshot from one scan run

        Args:
            raw_violations: axe violation dictionaries or RawViolation objects
            component_name: Scope component metrics to this single component
            execution_time: Scan duration in seconds (aggregation time when omitted)

        Returns:
            MetricsSnapshot
        """
        started = time.perf_counter()
        violations = parse_violations(raw_violations)
        timestamp = format_timestamp(self.clock())

        violations_by_level = count_by_level(violations)
        wcag_compliance = calculate_wcag_compliance(violations)

        grouped = self._group_by_component(violations, component_name)
        # The synthetic fallback component is not counted as tested
        observed = list(grouped)
        if not grouped:
            grouped = {FALLBACK_COMPONENT: list(violations)}

        component_metrics = tuple(
            self._build_component_metric(name, component_violations, timestamp)
            for name, component_violations in grouped.items()
        )

        test_coverage = self.coverage.estimate(observed)

        if execution_time is None:
            execution_time = time.perf_counter() - started

        performance_metrics = PerformanceMetrics(
            test_execution_time=float(execution_time),
            average_violations_per_component=(
                len(violations) / len(component_metrics) if component_metrics else 0.0
            )
        )

        snapshot = MetricsSnapshot(
            timestamp=timestamp,
            total_violations=len(violations),
            violations_by_level=violations_by_level,
            wcag_compliance=wcag_compliance,
            component_metrics=component_metrics,
            test_coverage=test_coverage,
            performance_metrics=performance_metrics
        )
        logger.info(
            f"Processed {snapshot.total_violations} violations across "
            f"{len(component_metrics)} components"
        )
        return snapshot

    def _group_by_component(self, violations: List[RawViolation],
                            component_name: Optional[str]) -> Dict[str, List[RawViolation]]:
        """Group violations per attributed component, keeping first-seen order"""
        if component_name:
            strategy = NamedComponentAttributionStrategy(component_name)
            return {
                component_name: [v for v in violations if strategy.attribute(v)]
            }

        grouped: Dict[str, List[RawViolation]] = {}
        unattributed = 0
        for violation in violations:
            names = self.attribution.attribute(violation)
            if not names:
                unattributed += 1
            for name in sorted(names):
                grouped.setdefault(name, []).append(violation)

        if unattributed and grouped:
            logger.debug(f"{unattributed} violations could not be attributed to a component")
        return grouped

    def _build_component_metric(self, name: str, violations: List[RawViolation],
                                timestamp: str) -> ComponentMetric:
        violations_by_level = count_by_level(violations)
        violation_count = len(violations)

        return ComponentMetric(
            component_name=name,
            violation_count=violation_count,
            violations_by_level=violations_by_level,
            wcag_score=component_wcag_score(violation_count),
            status=component_status(violations_by_level),
            last_tested=timestamp,
            trends=self._component_trend(name, violation_count)
        )

    def _component_trend(self, name: str, violation_count: int) -> ComponentTrend:
        if self.history is None:
            return ComponentTrend()

        previous = self.history.latest_component_metric(name)
        if previous is None:
            return ComponentTrend()

        delta = violation_count - previous.violation_count
        return ComponentTrend(improving=delta < 0, violation_delta=delta)
