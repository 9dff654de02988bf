"""
Configuration loader for YAML config files
"""

import copy
import yaml
from pathlib import Path
from typing import Dict, Any
import logging
import os

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Loads and manages configuration"""

    @staticmethod
    def load_config(config_path: str = None) -> Dict[str, Any]:
        """
        Load configuration from YAML file

        Values missing from the file are filled in from the built-in defaults.

        Args:
            config_path: Path to config file (defaults to config/default_config.yaml)

        Returns:
            Configuration dictionary
        """
        if config_path is None:
            default_path = Path(__file__).parent.parent / "config" / "default_config.yaml"
            if default_path.exists():
                config_path = str(default_path)
            else:
                return ConfigLoader._apply_env_overrides(ConfigLoader._get_default_config())

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f) or {}

            config = ConfigLoader._merge(ConfigLoader._get_default_config(), loaded)
            config = ConfigLoader._apply_env_overrides(config)

            logger.info(f"Loaded configuration from {config_path}")
            return config

        except Exception as e:
            logger.warning(f"Error loading config from {config_path}: {e}. Using defaults.")
            return ConfigLoader._apply_env_overrides(ConfigLoader._get_default_config())

    @staticmethod
    def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge override into a copy of base"""
        merged = copy.deepcopy(base)
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = ConfigLoader._merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    @staticmethod
    def _apply_env_overrides(config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides"""
        if os.getenv('A11Y_HISTORY_DIR'):
            config.setdefault('history', {})['storage_dir'] = os.getenv('A11Y_HISTORY_DIR')

        if os.getenv('A11Y_HISTORY_MAX_ENTRIES'):
            config.setdefault('history', {})['max_entries'] = int(os.getenv('A11Y_HISTORY_MAX_ENTRIES'))

        if os.getenv('A11Y_TOTAL_COMPONENTS'):
            config.setdefault('coverage', {})['total_components'] = int(os.getenv('A11Y_TOTAL_COMPONENTS'))

        if os.getenv('A11Y_REPORTS_DIR'):
            config.setdefault('output', {})['reports_dir'] = os.getenv('A11Y_REPORTS_DIR')

        if os.getenv('BROWSER_HEADLESS'):
            config.setdefault('browser', {})['headless'] = os.getenv('BROWSER_HEADLESS').lower() == 'true'

        if os.getenv('BROWSER_TIMEOUT'):
            config.setdefault('browser', {})['timeout'] = int(os.getenv('BROWSER_TIMEOUT'))

        return config

    @staticmethod
    def _get_default_config() -> Dict[str, Any]:
        """Get minimal default configuration"""
        return {
            'history': {
                'storage_dir': 'output/history',
                'storage_key': 'accessibility-metrics-history',
                'max_entries': 100
            },
            'coverage': {
                'total_components': 0,
                'registry_file': None,
                'registry_column': 'component'
            },
            'attribution': {
                'strategy': 'regex'
            },
            'scanner': {
                'tags': ['wcag2a', 'wcag2aa', 'wcag21aa'],
                'timeout': 30.0
            },
            'browser': {
                'headless': True,
                'timeout': 30000,
                'viewport': {'width': 1920, 'height': 1080}
            },
            'output': {
                'reports_dir': 'output/reports'
            },
            'logging': {
                'level': 'INFO',
                'file': 'a11y_monitor.log'
            }
        }
