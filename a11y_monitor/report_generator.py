"""
Accessibility report composition
"""

from typing import List, Iterable, Any, Optional
import logging

from a11y_monitor.evaluators import (
    calculate_overall_score, determine_compliance_level, analyze_trend
)
from a11y_monitor.history_store import parse_timestamp
from a11y_monitor.models import (
    AccessibilityReport, ReportSummary, MetricsSnapshot, ComponentStatus
)
from a11y_monitor.violation_classifier import parse_violations

logger = logging.getLogger(__name__)

SERIOUS_ISSUE_THRESHOLD = 5
LOW_COVERAGE_ISSUE_THRESHOLD = 80
COVERAGE_RECOMMENDATION_THRESHOLD = 90


def format_percentage(value: float) -> str:
    """
    Render a percentage without a trailing .0, e.g. 80 or 83.3

    Values are rounded to one decimal, so a raw coverage of 33.333... reads
    as 33.3 rather than the full float.
    """
    value = round(value, 1)
    if value == int(value):
        return str(int(value))
    return str(value)


def identify_key_issues(snapshot: MetricsSnapshot) -> List[str]:
    """List the headline problems of a snapshot"""
    issues = []
    levels = snapshot.violations_by_level
    coverage = snapshot.test_coverage.coverage_percentage

    if levels.critical > 0:
        issues.append(f"{levels.critical} critical accessibility violations")
    if levels.serious > SERIOUS_ISSUE_THRESHOLD:
        issues.append(f"High number of serious violations ({levels.serious})")
    if coverage < LOW_COVERAGE_ISSUE_THRESHOLD:
        issues.append(f"Low test coverage ({format_percentage(coverage)}%)")

    return issues


def generate_recommendations(snapshot: MetricsSnapshot) -> List[str]:
    """Suggest remediation steps for a snapshot"""
    recommendations = []
    levels = snapshot.violations_by_level

    if levels.critical > 0:
        recommendations.append("Address critical accessibility violations immediately")
    if levels.serious > 0:
        recommendations.append("Review and fix serious accessibility issues")
    if snapshot.test_coverage.coverage_percentage < COVERAGE_RECOMMENDATION_THRESHOLD:
        recommendations.append("Increase accessibility test coverage")

    failing = sum(1 for c in snapshot.component_metrics if c.status == ComponentStatus.FAILING)
    if failing > 0:
        recommendations.append(f"Focus on {failing} failing components")

    return recommendations


def report_id(snapshot: MetricsSnapshot) -> str:
    """Report identifier derived from the snapshot timestamp (epoch milliseconds)"""
    try:
        millis = int(parse_timestamp(snapshot.timestamp).timestamp() * 1000)
    except ValueError:
        return f"report-{snapshot.timestamp}"
    return f"report-{millis}"


class ReportGenerator:
    """Composes AccessibilityReport objects from a snapshot and the stored history"""

    def generate_report(self, snapshot: MetricsSnapshot, history: List[MetricsSnapshot],
                        violations: Optional[Iterable[Any]] = None) -> AccessibilityReport:
        """
        Generate a report for a snapshot

        Does not modify the snapshot or the history.

        Args:
            snapshot: Newest metrics snapshot
            history: Stored snapshots, newest first
            violations: Raw violations of the scan, attached to the report when given

        Returns:
            AccessibilityReport
        """
        summary = ReportSummary(
            overall_score=calculate_overall_score(snapshot),
            compliance_level=determine_compliance_level(snapshot.wcag_compliance),
            trend_direction=analyze_trend(snapshot, history),
            key_issues=tuple(identify_key_issues(snapshot)),
            recommendations=tuple(generate_recommendations(snapshot))
        )

        report = AccessibilityReport(
            id=report_id(snapshot),
            timestamp=snapshot.timestamp,
            metrics=snapshot,
            summary=summary,
            violations=tuple(parse_violations(violations or []))
        )
        logger.info(
            f"Generated report {report.id}: score {summary.overall_score}, "
            f"compliance {summary.compliance_level.value}, trend {summary.trend_direction.value}"
        )
        return report
