"""
Registry of known UI components, optionally read from an Excel or CSV file
"""

import pandas as pd
from pathlib import Path
from typing import List, Iterable
import logging

logger = logging.getLogger(__name__)


class ComponentRegistry:
    """Holds the list of UI components that accessibility coverage is measured against"""

    def __init__(self, components: Iterable[str] = None, total_components: int = None):
        """
        Initialize component registry

        Args:
            components: Known component names
            total_components: Explicit total, used when the names themselves are not tracked
        """
        self._components: List[str] = []
        for name in components or []:
            name = str(name).strip()
            if name and name not in self._components:
                self._components.append(name)
        self._total_override = total_components

    @property
    def components(self) -> List[str]:
        return list(self._components)

    @property
    def total_components(self) -> int:
        if self._total_override is not None:
            return max(0, int(self._total_override))
        return len(self._components)

    def __contains__(self, name: str) -> bool:
        return name in self._components

    def __len__(self) -> int:
        return self.total_components

    @classmethod
    def from_file(cls, path: str, column: str = "component") -> "ComponentRegistry":
        """
        Read component names from a spreadsheet column

        Args:
            path: Path to an .xlsx/.xls or .csv file
            column: Name of the column holding component names

        Returns:
            ComponentRegistry with the unique names of that column
        """
        try:
            if Path(path).suffix.lower() == '.csv':
                df = pd.read_csv(path)
            else:
                df = pd.read_excel(path)

            if column not in df.columns:
                raise ValueError(f"Column '{column}' not found in component registry {path}")

            names = [
                name for name in df[column].dropna().unique().tolist()
                if isinstance(name, str) and name.strip()
            ]
            logger.info(f"Loaded {len(names)} components from {path}")
            return cls(names)

        except Exception as e:
            logger.error(f"Error reading component registry: {e}")
            raise
