"""
Overall score, compliance tier and trend direction derived from snapshots
"""

from typing import List, Optional

from a11y_monitor.models import (
    MetricsSnapshot, WcagCompliance, ComplianceLevel, TrendDirection
)

SEVERITY_PENALTIES = {
    'critical': 10,
    'serious': 5,
    'moderate': 2,
    'minor': 1
}
COVERAGE_BONUS_FACTOR = 0.1
COMPLIANCE_THRESHOLD = 95


def calculate_overall_score(snapshot: MetricsSnapshot) -> int:
    """
    Calculate the 0-100 accessibility health score

    The Level AA percentage is the base, severity-weighted violations are
    subtracted and a tenth of the coverage percentage is added back.

    Args:
        snapshot: Metrics snapshot

    Returns:
        Integer score clamped to [0, 100]
    """
    levels = snapshot.violations_by_level
    penalty = (
        levels.critical * SEVERITY_PENALTIES['critical'] +
        levels.serious * SEVERITY_PENALTIES['serious'] +
        levels.moderate * SEVERITY_PENALTIES['moderate'] +
        levels.minor * SEVERITY_PENALTIES['minor']
    )
    coverage_bonus = snapshot.test_coverage.coverage_percentage * COVERAGE_BONUS_FACTOR

    score = snapshot.wcag_compliance.level_aa - penalty + coverage_bonus
    score = min(100.0, max(0.0, score))
    # Half-up rounding, round() would send 92.5 to 92
    return int(score + 0.5)


def determine_compliance_level(compliance: WcagCompliance) -> ComplianceLevel:
    """Highest tier whose percentage reaches the threshold, AAA checked first"""
    if compliance.level_aaa >= COMPLIANCE_THRESHOLD:
        return ComplianceLevel.AAA
    if compliance.level_aa >= COMPLIANCE_THRESHOLD:
        return ComplianceLevel.AA
    if compliance.level_a >= COMPLIANCE_THRESHOLD:
        return ComplianceLevel.A
    return ComplianceLevel.NON_COMPLIANT


def previous_snapshot(snapshot: MetricsSnapshot,
                      history: List[MetricsSnapshot]) -> Optional[MetricsSnapshot]:
    """
    Find the snapshot preceding ``snapshot`` in a newest-first history

    When ``snapshot`` has already been stored it sits at the head of the
    history and its predecessor is the second entry.
    """
    if not history:
        return None
    if history[0] == snapshot:
        return history[1] if len(history) > 1 else None
    return history[0]


def analyze_trend(snapshot: MetricsSnapshot, history: List[MetricsSnapshot]) -> TrendDirection:
    """
    Compare total violations of a snapshot against the previous one

    Severity mix is ignored.

    Args:
        snapshot: Newest snapshot
        history: Stored snapshots, newest first

    Returns:
        TrendDirection, STABLE when no previous snapshot exists
    """
    previous = previous_snapshot(snapshot, history)
    if previous is None:
        return TrendDirection.STABLE

    if snapshot.total_violations < previous.total_violations:
        return TrendDirection.IMPROVING
    if snapshot.total_violations > previous.total_violations:
        return TrendDirection.DECLINING
    return TrendDirection.STABLE
