"""
Data models for accessibility scan results, metrics snapshots and reports
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Tuple
from enum import Enum


class Impact(str, Enum):
    """Severity bucket reported by axe for a violation"""
    CRITICAL = "critical"
    SERIOUS = "serious"
    MODERATE = "moderate"
    MINOR = "minor"


class ComponentStatus(str, Enum):
    """Accessibility standing of a single component"""
    PASSING = "passing"
    WARNING = "warning"
    FAILING = "failing"


class ComplianceLevel(str, Enum):
    """Discrete WCAG compliance tier"""
    A = "A"
    AA = "AA"
    AAA = "AAA"
    NON_COMPLIANT = "Non-compliant"


class TrendDirection(str, Enum):
    """Direction of violation counts between the two newest snapshots"""
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


@dataclass(frozen=True)
class ViolationNode:
    """A DOM node affected by a violation"""
    html: str = ""
    target: Tuple[str, ...] = ()
    failure_summary: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            'html': self.html,
            'target': list(self.target),
            'failureSummary': self.failure_summary
        }


@dataclass(frozen=True)
class RawViolation:
    """A single failed rule as produced by the axe scanner"""
    id: str
    impact: Impact
    tags: Tuple[str, ...] = ()
    nodes: Tuple[ViolationNode, ...] = ()
    description: str = ""
    help: str = ""
    help_url: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'impact': self.impact.value,
            'tags': list(self.tags),
            'description': self.description,
            'help': self.help,
            'helpUrl': self.help_url,
            'nodes': [node.to_dict() for node in self.nodes]
        }


@dataclass(frozen=True)
class ViolationsByLevel:
    """Violation counts per severity bucket"""
    critical: int = 0
    serious: int = 0
    moderate: int = 0
    minor: int = 0

    @property
    def total(self) -> int:
        return self.critical + self.serious + self.moderate + self.minor

    def to_dict(self) -> Dict[str, int]:
        return {
            'critical': self.critical,
            'serious': self.serious,
            'moderate': self.moderate,
            'minor': self.minor
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ViolationsByLevel":
        return cls(
            critical=int(data.get('critical', 0)),
            serious=int(data.get('serious', 0)),
            moderate=int(data.get('moderate', 0)),
            minor=int(data.get('minor', 0))
        )


@dataclass(frozen=True)
class WcagCompliance:
    """Compliance percentages per WCAG level, each in [0, 100]"""
    level_a: float = 100.0
    level_aa: float = 100.0
    level_aaa: float = 100.0

    def to_dict(self) -> Dict[str, float]:
        return {
            'levelA': self.level_a,
            'levelAA': self.level_aa,
            'levelAAA': self.level_aaa
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WcagCompliance":
        return cls(
            level_a=float(data.get('levelA', 100.0)),
            level_aa=float(data.get('levelAA', 100.0)),
            level_aaa=float(data.get('levelAAA', 100.0))
        )


@dataclass(frozen=True)
class ComponentTrend:
    """Change of a component's violation count since its prior recorded metric"""
    improving: bool = False
    violation_delta: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'improving': self.improving,
            'violationDelta': self.violation_delta
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ComponentTrend":
        return cls(
            improving=bool(data.get('improving', False)),
            violation_delta=int(data.get('violationDelta', 0))
        )


@dataclass(frozen=True)
class ComponentMetric:
    """Accessibility standing of one UI component within a snapshot"""
    component_name: str
    violation_count: int
    violations_by_level: ViolationsByLevel
    wcag_score: int
    status: ComponentStatus
    last_tested: str
    trends: ComponentTrend = field(default_factory=ComponentTrend)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'componentName': self.component_name,
            'violationCount': self.violation_count,
            'violationsByLevel': self.violations_by_level.to_dict(),
            'wcagScore': self.wcag_score,
            'lastTested': self.last_tested,
            'status': self.status.value,
            'trends': self.trends.to_dict()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ComponentMetric":
        return cls(
            component_name=data['componentName'],
            violation_count=int(data.get('violationCount', 0)),
            violations_by_level=ViolationsByLevel.from_dict(data.get('violationsByLevel', {})),
            wcag_score=int(data.get('wcagScore', 100)),
            status=ComponentStatus(data.get('status', ComponentStatus.PASSING.value)),
            last_tested=data.get('lastTested', ''),
            trends=ComponentTrend.from_dict(data.get('trends', {}))
        )


@dataclass(frozen=True)
class TestCoverage:
    """How many known components the scanner exercised"""
    total_components: int = 0
    tested_components: int = 0
    coverage_percentage: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'totalComponents': self.total_components,
            'testedComponents': self.tested_components,
            'coveragePercentage': self.coverage_percentage
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TestCoverage":
        return cls(
            total_components=int(data.get('totalComponents', 0)),
            tested_components=int(data.get('testedComponents', 0)),
            coverage_percentage=float(data.get('coveragePercentage', 0.0))
        )


@dataclass(frozen=True)
class PerformanceMetrics:
    """Timing of the scan run and violation density"""
    test_execution_time: float = 0.0
    average_violations_per_component: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            'testExecutionTime': self.test_execution_time,
            'averageViolationsPerComponent': self.average_violations_per_component
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PerformanceMetrics":
        return cls(
            test_execution_time=float(data.get('testExecutionTime', 0.0)),
            average_violations_per_component=float(data.get('averageViolationsPerComponent', 0.0))
        )


@dataclass(frozen=True)
class MetricsSnapshot:
    """Metrics computed from one full scan run. Immutable once created."""
    timestamp: str
    total_violations: int
    violations_by_level: ViolationsByLevel
    wcag_compliance: WcagCompliance
    component_metrics: Tuple[ComponentMetric, ...]
    test_coverage: TestCoverage
    performance_metrics: PerformanceMetrics

    def find_component(self, component_name: str) -> Optional[ComponentMetric]:
        """Return the metric recorded for a component, if any"""
        for metric in self.component_metrics:
            if metric.component_name == component_name:
                return metric
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted (camelCase) JSON layout"""
        return {
            'timestamp': self.timestamp,
            'totalViolations': self.total_violations,
            'violationsByLevel': self.violations_by_level.to_dict(),
            'wcagCompliance': self.wcag_compliance.to_dict(),
            'componentMetrics': [metric.to_dict() for metric in self.component_metrics],
            'testCoverage': self.test_coverage.to_dict(),
            'performanceMetrics': self.performance_metrics.to_dict()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MetricsSnapshot":
        """Rebuild a snapshot from its persisted layout"""
        return cls(
            timestamp=data['timestamp'],
            total_violations=int(data.get('totalViolations', 0)),
            violations_by_level=ViolationsByLevel.from_dict(data.get('violationsByLevel', {})),
            wcag_compliance=WcagCompliance.from_dict(data.get('wcagCompliance', {})),
            component_metrics=tuple(
                ComponentMetric.from_dict(item) for item in data.get('componentMetrics', [])
            ),
            test_coverage=TestCoverage.from_dict(data.get('testCoverage', {})),
            performance_metrics=PerformanceMetrics.from_dict(data.get('performanceMetrics', {}))
        )


@dataclass(frozen=True)
class ViolationTrend:
    """One charting point of violation counts"""
    date: str
    critical: int
    serious: int
    moderate: int
    minor: int
    total: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': self.date,
            'critical': self.critical,
            'serious': self.serious,
            'moderate': self.moderate,
            'minor': self.minor,
            'total': self.total
        }


@dataclass(frozen=True)
class ReportSummary:
    """Qualitative summary attached to a report"""
    overall_score: int
    compliance_level: ComplianceLevel
    trend_direction: TrendDirection
    key_issues: Tuple[str, ...] = ()
    recommendations: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'overallScore': self.overall_score,
            'complianceLevel': self.compliance_level.value,
            'trendDirection': self.trend_direction.value,
            'keyIssues': list(self.key_issues),
            'recommendations': list(self.recommendations)
        }


@dataclass(frozen=True)
class AccessibilityReport:
    """User-facing view of one snapshot. Derived, never persisted by the engine."""
    id: str
    timestamp: str
    metrics: MetricsSnapshot
    summary: ReportSummary
    violations: Tuple[RawViolation, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'timestamp': self.timestamp,
            'metrics': self.metrics.to_dict(),
            'violations': [violation.to_dict() for violation in self.violations],
            'summary': self.summary.to_dict()
        }
