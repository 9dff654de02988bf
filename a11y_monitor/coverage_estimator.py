"""
Test coverage estimation against the component registry
"""

from typing import Callable, Iterable, Union
import logging

from a11y_monitor.component_registry import ComponentRegistry
from a11y_monitor.models import TestCoverage

logger = logging.getLogger(__name__)

TotalProvider = Union[int, ComponentRegistry, Callable[[], int]]


class CoverageEstimator:
    """Reports how many known components were exercised by a scan"""

    def __init__(self, total_components: TotalProvider = 0):
        """
        Initialize coverage estimator

        Args:
            total_components: Constant total, a ComponentRegistry, or a callable returning the total
        """
        self._provider = total_components

    def total_components(self) -> int:
        provider = self._provider
        if isinstance(provider, ComponentRegistry):
            return provider.total_components
        if callable(provider):
            return max(0, int(provider()))
        return max(0, int(provider or 0))

    def estimate(self, observed_components: Iterable[str]) -> TestCoverage:
        """
        Compute coverage for one aggregation pass

        Args:
            observed_components: Component names attributed during the pass

        Returns:
            TestCoverage with the percentage clamped to [0, 100]
        """
        total = self.total_components()
        tested = len(set(observed_components))

        if total == 0:
            percentage = 0.0
        else:
            percentage = min(100.0, max(0.0, 100.0 * tested / total))

        if tested > total > 0:
            logger.warning(f"Observed {tested} components but registry only knows {total}")

        return TestCoverage(
            total_components=total,
            tested_components=tested,
            coverage_percentage=percentage
        )
