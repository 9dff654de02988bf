"""Tests for violation parsing and WCAG level classification."""

import pytest

from a11y_monitor.models import Impact, RawViolation
from a11y_monitor.violation_classifier import (
    DEFAULT_IMPACT,
    count_by_level,
    is_level_a_violation,
    is_level_aa_violation,
    is_level_aaa_violation,
    parse_impact,
    parse_violation,
    parse_violations,
)

from conftest import make_violation


class TestParseImpact:
    @pytest.mark.parametrize("value,expected", [
        ("critical", Impact.CRITICAL),
        ("serious", Impact.SERIOUS),
        ("Moderate", Impact.MODERATE),
        ("minor", Impact.MINOR),
        (Impact.SERIOUS, Impact.SERIOUS),
    ])
    def test_known_values(self, value, expected):
        assert parse_impact(value) == expected

    @pytest.mark.parametrize("value", [None, "", "catastrophic"])
    def test_missing_or_unknown_defaults_to_minor(self, value):
        assert parse_impact(value) == Impact.MINOR
        assert DEFAULT_IMPACT == Impact.MINOR


class TestParseViolation:
    def test_missing_impact_defaults(self):
        violation = parse_violation(make_violation(impact=None))
        assert violation.impact == Impact.MINOR

    def test_fields_are_carried(self):
        raw = make_violation(
            impact="serious",
            tags=("wcag2a", "label"),
            html='<input class="SearchBar">',
            target=("#search",),
            rule_id="label",
        )
        violation = parse_violation(raw)
        assert violation.id == "label"
        assert violation.tags == ("wcag2a", "label")
        assert violation.nodes[0].html == '<input class="SearchBar">'
        assert violation.nodes[0].target == ("#search",)
        assert violation.help_url.endswith("/label")

    def test_nested_iframe_targets_are_flattened(self):
        raw = {"id": "x", "nodes": [{"html": "", "target": [["iframe", ".Card"]]}]}
        violation = parse_violation(raw)
        assert violation.nodes[0].target == ("iframe .Card",)

    def test_missing_lists_become_empty(self):
        violation = parse_violation({"id": "bare"})
        assert violation.tags == ()
        assert violation.nodes == ()

    def test_parsed_violation_passes_through(self):
        parsed = parse_violation(make_violation())
        assert parse_violation(parsed) is parsed

    def test_parse_violations_handles_none(self):
        assert parse_violations(None) == []


class TestLevelClassification:
    def _violation(self, *tags):
        return RawViolation(id="r", impact=Impact.MINOR, tags=tuple(tags))

    def test_level_a_keywords(self):
        for tag in ("color-contrast", "image-alt", "label", "keyboard"):
            violation = self._violation(tag)
            assert is_level_a_violation(violation)
            assert not is_level_aa_violation(violation)

    def test_enhanced_contrast_counts_for_aa_and_aaa(self):
        violation = self._violation("color-contrast-enhanced")
        assert not is_level_a_violation(violation)
        assert is_level_aa_violation(violation)
        assert is_level_aaa_violation(violation)

    def test_context_help_is_aaa_only(self):
        violation = self._violation("context-help")
        assert is_level_aaa_violation(violation)
        assert not is_level_aa_violation(violation)

    def test_unrecognised_tags_match_no_level(self):
        violation = self._violation("wcag2a", "best-practice")
        assert not is_level_a_violation(violation)
        assert not is_level_aa_violation(violation)
        assert not is_level_aaa_violation(violation)


class TestCountByLevel:
    def test_counts_sum_to_total(self):
        violations = parse_violations([
            make_violation("critical"),
            make_violation("serious"),
            make_violation("serious"),
            make_violation("moderate"),
            make_violation(None),
        ])
        counts = count_by_level(violations)
        assert counts.critical == 1
        assert counts.serious == 2
        assert counts.moderate == 1
        assert counts.minor == 1
        assert counts.total == len(violations)

    def test_empty(self):
        counts = count_by_level([])
        assert counts.total == 0
