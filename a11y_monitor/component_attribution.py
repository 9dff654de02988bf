"""
Strategies for attributing violations to named UI components
"""

import re
from typing import List, Set
import logging

from bs4 import BeautifulSoup

from a11y_monitor.models import RawViolation

logger = logging.getLogger(__name__)

# Capitalized identifier such as "PlayerCard" or "PlayerCardComponent"
COMPONENT_NAME_PATTERN = re.compile(r'^[A-Z][A-Za-z0-9]*$')
CLASS_ATTRIBUTE_PATTERN = re.compile(r'class="([^"]*)"')
SELECTOR_TOKEN_PATTERN = re.compile(r'[.#]([A-Z][A-Za-z0-9]*)')


class AttributionStrategy:
    """Maps a violation to the component names it affects"""

    def attribute(self, violation: RawViolation) -> Set[str]:
        """
        Find the components a violation belongs to

        Args:
            violation: Parsed violation

        Returns:
            Set of component names, empty when nothing can be attributed
        """
        raise NotImplementedError


class RegexAttributionStrategy(AttributionStrategy):
    """Looks for capitalized class names in node markup and target selectors"""

    def attribute(self, violation: RawViolation) -> Set[str]:
        names = set()
        for node in violation.nodes:
            for class_list in CLASS_ATTRIBUTE_PATTERN.findall(node.html):
                names.update(
                    token for token in class_list.split() if COMPONENT_NAME_PATTERN.match(token)
                )
            for selector in node.target:
                names.update(SELECTOR_TOKEN_PATTERN.findall(selector))
        return names


class MarkupAttributionStrategy(AttributionStrategy):
    """
    Reads explicit component tagging from node markup

    Elements tagged with one of ``attributes`` (``data-component`` by default)
    win; untagged nodes fall back to capitalized class names.
    """

    def __init__(self, attributes: List[str] = None):
        """
        Initialize markup attribution

        Args:
            attributes: Attribute names carrying a component name, in priority order
        """
        self.attributes = attributes or ['data-component', 'data-testid']
        self._fallback = RegexAttributionStrategy()

    def attribute(self, violation: RawViolation) -> Set[str]:
        names = set()
        for node in violation.nodes:
            if not node.html:
                continue
            soup = BeautifulSoup(node.html, 'html.parser')
            tagged = self._tagged_names(soup)
            if tagged:
                names.update(tagged)
                continue
            for element in soup.find_all(class_=True):
                names.update(
                    token for token in element.get('class', [])
                    if COMPONENT_NAME_PATTERN.match(token)
                )

        if not names:
            names = self._fallback.attribute(violation)
        return names

    def _tagged_names(self, soup: BeautifulSoup) -> Set[str]:
        for attribute in self.attributes:
            values = {
                element.get(attribute).strip()
                for element in soup.find_all(attrs={attribute: True})
                if element.get(attribute, '').strip()
            }
            if values:
                return values
        return set()


class NamedComponentAttributionStrategy(AttributionStrategy):
    """Attributes a violation to one known component by name"""

    def __init__(self, component_name: str):
        self.component_name = component_name
        self._needle = component_name.lower()

    def attribute(self, violation: RawViolation) -> Set[str]:
        for node in violation.nodes:
            if self._needle in node.html.lower():
                return {self.component_name}
            if any(self._needle in selector.lower() for selector in node.target):
                return {self.component_name}
        return set()


def create_strategy(name: str = 'regex') -> AttributionStrategy:
    """
    Build an attribution strategy from its configured name

    Args:
        name: 'regex' or 'markup'

    Returns:
        AttributionStrategy
    """
    strategies = {
        'regex': RegexAttributionStrategy,
        'markup': MarkupAttributionStrategy
    }
    if name not in strategies:
        raise ValueError(f"Unknown attribution strategy '{name}'. Expected one of: {', '.join(strategies)}")
    return strategies[name]()
