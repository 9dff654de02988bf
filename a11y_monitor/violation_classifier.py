"""
Parsing and classification of raw axe violations
"""

from typing import List, Dict, Any, Iterable, FrozenSet
import logging

from a11y_monitor.models import RawViolation, ViolationNode, ViolationsByLevel, Impact

logger = logging.getLogger(__name__)

# Impact used when the scanner omits or garbles the field
DEFAULT_IMPACT = Impact.MINOR

LEVEL_A_RULES: FrozenSet[str] = frozenset({'color-contrast', 'image-alt', 'label', 'keyboard'})
LEVEL_AA_RULES: FrozenSet[str] = frozenset({'color-contrast-enhanced', 'focus-order-semantics'})
LEVEL_AAA_RULES: FrozenSet[str] = frozenset({'color-contrast-enhanced', 'context-help'})


def parse_impact(value: Any) -> Impact:
    """
    Map an axe impact value to a severity bucket

    Args:
        value: Raw impact (string, Impact or None)

    Returns:
        Impact, DEFAULT_IMPACT when missing or unknown
    """
    if isinstance(value, Impact):
        return value
    if not value:
        return DEFAULT_IMPACT
    try:
        return Impact(str(value).strip().lower())
    except ValueError:
        logger.debug(f"Unknown impact '{value}', defaulting to {DEFAULT_IMPACT.value}")
        return DEFAULT_IMPACT


def _parse_node(node: Dict[str, Any]) -> ViolationNode:
    target = node.get('target') or []
    if isinstance(target, str):
        target = [target]
    return ViolationNode(
        html=node.get('html') or '',
        # axe nests selectors for iframes/shadow DOM, flatten them to strings
        target=tuple(
            ' '.join(str(part) for part in item) if isinstance(item, (list, tuple)) else str(item)
            for item in target
        ),
        failure_summary=node.get('failureSummary') or ''
    )


def parse_violation(violation: Any) -> RawViolation:
    """
    Convert one axe violation dictionary into a RawViolation

    This is the only place where missing fields are defaulted.

    Args:
        violation: Violation dictionary (axe schema) or an already parsed RawViolation

    Returns:
        RawViolation
    """
    if isinstance(violation, RawViolation):
        return violation

    return RawViolation(
        id=violation.get('id') or '',
        impact=parse_impact(violation.get('impact')),
        tags=tuple(str(tag) for tag in (violation.get('tags') or [])),
        nodes=tuple(_parse_node(node) for node in (violation.get('nodes') or [])),
        description=violation.get('description') or '',
        help=violation.get('help') or '',
        help_url=violation.get('helpUrl') or ''
    )


def parse_violations(violations: Iterable[Any]) -> List[RawViolation]:
    """Parse a list of axe violations"""
    return [parse_violation(v) for v in (violations or [])]


def _matches(violation: RawViolation, rules: FrozenSet[str]) -> bool:
    return any(tag in rules for tag in violation.tags)


def is_level_a_violation(violation: RawViolation) -> bool:
    return _matches(violation, LEVEL_A_RULES)


def is_level_aa_violation(violation: RawViolation) -> bool:
    return _matches(violation, LEVEL_AA_RULES)


def is_level_aaa_violation(violation: RawViolation) -> bool:
    return _matches(violation, LEVEL_AAA_RULES)


def count_by_level(violations: Iterable[RawViolation]) -> ViolationsByLevel:
    """
    Partition violations into severity buckets

    Args:
        violations: Parsed violations

    Returns:
        ViolationsByLevel whose total equals the number of violations
    """
    counts = {impact: 0 for impact in Impact}
    for violation in violations:
        counts[violation.impact] += 1

    return ViolationsByLevel(
        critical=counts[Impact.CRITICAL],
        serious=counts[Impact.SERIOUS],
        moderate=counts[Impact.MODERATE],
        minor=counts[Impact.MINOR]
    )
