"""Tests for the metrics aggregator."""

from datetime import timedelta

import pytest

from a11y_monitor.component_attribution import MarkupAttributionStrategy
from a11y_monitor.coverage_estimator import CoverageEstimator
from a11y_monitor.metrics_aggregator import (
    FALLBACK_COMPONENT,
    MetricsAggregator,
    calculate_wcag_compliance,
    component_wcag_score,
)
from a11y_monitor.models import ComponentStatus
from a11y_monitor.violation_classifier import parse_violations

from conftest import make_violation


def _card(name, impact="minor", tags=()):
    return make_violation(impact=impact, tags=tags, html=f'<div class="{name}"></div>')


class TestWcagCompliance:
    def test_no_violations_is_fully_compliant(self):
        compliance = calculate_wcag_compliance([])
        assert compliance.level_a == 100
        assert compliance.level_aa == 100
        assert compliance.level_aaa == 100

    def test_fifty_check_universe(self):
        violations = parse_violations([make_violation(tags=("color-contrast",))] * 5)
        compliance = calculate_wcag_compliance(violations)
        assert compliance.level_a == pytest.approx(90.0)
        assert compliance.level_aa == 100

    def test_floor_at_zero(self):
        violations = parse_violations([make_violation(tags=("context-help",))] * 60)
        compliance = calculate_wcag_compliance(violations)
        assert compliance.level_aaa == 0
        assert compliance.level_a == 100


class TestComponentScore:
    @pytest.mark.parametrize("count,expected", [(0, 100), (1, 95), (10, 50), (20, 0), (35, 0)])
    def test_score(self, count, expected):
        assert component_wcag_score(count) == expected


class TestProcessResults:
    def test_empty_input(self, clock):
        snapshot = MetricsAggregator(clock=clock).process_results([])
        assert snapshot.total_violations == 0
        assert snapshot.violations_by_level.total == 0
        assert snapshot.wcag_compliance.level_a == 100
        assert [c.component_name for c in snapshot.component_metrics] == [FALLBACK_COMPONENT]
        placeholder = snapshot.component_metrics[0]
        assert placeholder.violation_count == 0
        assert placeholder.status == ComponentStatus.PASSING
        assert snapshot.performance_metrics.average_violations_per_component == 0
        assert snapshot.test_coverage.tested_components == 0

    def test_timestamp_format(self, clock):
        snapshot = MetricsAggregator(clock=clock).process_results([])
        assert snapshot.timestamp == "2026-10-19T12:00:00.000Z"

    def test_counts_sum_to_total(self, clock):
        raw = [_card("PlayerCard", "critical"), _card("PlayerCard", "serious"),
               _card("DraftBoard", "moderate"), make_violation(impact=None)]
        snapshot = MetricsAggregator(clock=clock).process_results(raw)
        levels = snapshot.violations_by_level
        assert levels.critical + levels.serious + levels.moderate + levels.minor == snapshot.total_violations == 4

    def test_components_from_markup(self, clock):
        raw = [_card("PlayerCard", "critical"), _card("PlayerCard", "minor"),
               _card("DraftBoard", "serious"), _card("ChatPanel", "moderate")]
        snapshot = MetricsAggregator(clock=clock).process_results(raw)

        by_name = {c.component_name: c for c in snapshot.component_metrics}
        assert set(by_name) == {"PlayerCard", "DraftBoard", "ChatPanel"}
        assert by_name["PlayerCard"].violation_count == 2
        assert by_name["PlayerCard"].wcag_score == 90
        assert by_name["PlayerCard"].status == ComponentStatus.FAILING
        assert by_name["DraftBoard"].status == ComponentStatus.WARNING
        assert by_name["ChatPanel"].status == ComponentStatus.PASSING
        assert by_name["ChatPanel"].last_tested == snapshot.timestamp

    def test_unattributed_violations_stay_in_totals(self, clock):
        raw = [_card("PlayerCard"), make_violation(html="<div></div>")]
        snapshot = MetricsAggregator(clock=clock).process_results(raw)
        assert snapshot.total_violations == 2
        assert [c.component_name for c in snapshot.component_metrics] == ["PlayerCard"]
        assert snapshot.component_metrics[0].violation_count == 1

    def test_fallback_component_owns_everything(self, clock):
        raw = [make_violation("critical"), make_violation("minor")]
        snapshot = MetricsAggregator(clock=clock).process_results(raw)
        assert len(snapshot.component_metrics) == 1
        application = snapshot.component_metrics[0]
        assert application.component_name == FALLBACK_COMPONENT
        assert application.violation_count == 2
        assert application.status == ComponentStatus.FAILING
        assert snapshot.performance_metrics.average_violations_per_component == 2

    def test_named_component_scope(self, clock):
        raw = [_card("PlayerCard", "serious"), _card("DraftBoard", "critical")]
        snapshot = MetricsAggregator(clock=clock).process_results(raw, "PlayerCard")
        assert [c.component_name for c in snapshot.component_metrics] == ["PlayerCard"]
        assert snapshot.component_metrics[0].violation_count == 1
        assert snapshot.component_metrics[0].status == ComponentStatus.WARNING
        assert snapshot.total_violations == 2

    def test_named_component_without_violations(self, clock):
        snapshot = MetricsAggregator(clock=clock).process_results([_card("DraftBoard")], "PlayerCard")
        assert snapshot.component_metrics[0].component_name == "PlayerCard"
        assert snapshot.component_metrics[0].violation_count == 0
        assert snapshot.component_metrics[0].wcag_score == 100

    def test_coverage_from_attributed_components(self, clock):
        aggregator = MetricsAggregator(coverage=CoverageEstimator(4), clock=clock)
        snapshot = aggregator.process_results([_card("PlayerCard"), _card("DraftBoard")])
        assert snapshot.test_coverage.tested_components == 2
        assert snapshot.test_coverage.coverage_percentage == pytest.approx(50.0)

    def test_explicit_execution_time(self, clock):
        snapshot = MetricsAggregator(clock=clock).process_results([], execution_time=2.5)
        assert snapshot.performance_metrics.test_execution_time == 2.5

    def test_pluggable_attribution(self, clock):
        raw = [make_violation(html='<div data-component="TradeWidget"></div>')]
        aggregator = MetricsAggregator(attribution=MarkupAttributionStrategy(), clock=clock)
        snapshot = aggregator.process_results(raw)
        assert [c.component_name for c in snapshot.component_metrics] == ["TradeWidget"]


class TestComponentTrends:
    def test_no_history_means_no_trend(self, clock):
        snapshot = MetricsAggregator(clock=clock).process_results([_card("PlayerCard")])
        trend = snapshot.component_metrics[0].trends
        assert trend.improving is False
        assert trend.violation_delta == 0

    def test_delta_against_prior_metric(self, store, clock):
        aggregator = MetricsAggregator(history=store, clock=clock)
        store.store(aggregator.process_results([_card("PlayerCard")] * 3))

        clock.advance(timedelta(hours=1))
        snapshot = aggregator.process_results([_card("PlayerCard")])
        trend = snapshot.find_component("PlayerCard").trends
        assert trend.violation_delta == -2
        assert trend.improving is True

    def test_regression_is_not_improving(self, store, clock):
        aggregator = MetricsAggregator(history=store, clock=clock)
        store.store(aggregator.process_results([_card("PlayerCard")]))

        clock.advance(timedelta(hours=1))
        snapshot = aggregator.process_results([_card("PlayerCard")] * 4)
        trend = snapshot.find_component("PlayerCard").trends
        assert trend.violation_delta == 3
        assert trend.improving is False

    def test_prior_metric_found_in_older_snapshot(self, store, clock):
        aggregator = MetricsAggregator(history=store, clock=clock)
        store.store(aggregator.process_results([_card("PlayerCard")] * 2))
        clock.advance(timedelta(hours=1))
        store.store(aggregator.process_results([_card("DraftBoard")]))

        clock.advance(timedelta(hours=1))
        snapshot = aggregator.process_results([_card("PlayerCard")] * 2)
        trend = snapshot.find_component("PlayerCard").trends
        assert trend.violation_delta == 0
        assert trend.improving is False
