"""
Configuration management for the LOTRO combat log parser
"""

import copy
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, Union
import logging

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    'parser': {
        'patterns_file': None,
        'reference_year': 2000,
        'check_ambiguity': True
    },
    'report': {
        'max_failure_samples': 10
    },
    'logging': {
        'level': 'INFO',
        'file': None
    }
}

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class ConfigError(Exception):
    """Configuration-related errors."""
    pass


class Config:
    """Configuration manager for the LOTRO combat log parser."""

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """Initialize configuration from YAML file.

        Args:
            config_path: Path to configuration file (defaults only if None)

        Raises:
            ConfigError: If configuration is invalid or cannot be loaded
        """
        self.config_path = Path(config_path) if config_path else None
        self.config = self._load_config()
        self._validate_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file over the defaults.

        Returns:
            Configuration dictionary

        Raises:
            ConfigError: If file cannot be loaded
        """
        config = copy.deepcopy(DEFAULT_CONFIG)

        if self.config_path is None:
            return config

        if not self.config_path.exists():
            logger.warning(f"Config file {self.config_path} not found, using defaults")
            return config

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logger.error(f"Invalid YAML in config file: {e}")
            raise ConfigError(f"Invalid YAML in config file: {e}")
        except OSError as e:
            logger.error(f"Failed to load config: {e}")
            raise ConfigError(f"Failed to load config: {e}")

        if not isinstance(loaded, dict):
            raise ConfigError("Config file must contain a mapping")

        _merge(config, loaded)
        logger.info(f"Loaded configuration from {self.config_path}")
        return config

    def _validate_config(self) -> None:
        """Validate configuration values.

        Raises:
            ConfigError: If configuration is invalid
        """
        for key in DEFAULT_CONFIG:
            if not isinstance(self.config.get(key), dict):
                raise ConfigError(f"Config section '{key}' must be a mapping")

        year = self.get('parser.reference_year')
        if isinstance(year, bool) or not isinstance(year, int) or not 1 <= year <= 9999:
            raise ConfigError(f"parser.reference_year must be a year between 1 and 9999, got {year!r}")

        if not isinstance(self.get('parser.check_ambiguity'), bool):
            raise ConfigError("parser.check_ambiguity must be true or false")

        patterns_file = self.get('parser.patterns_file')
        if patterns_file is not None and not Path(patterns_file).exists():
            logger.warning(f"Patterns file does not exist: {patterns_file}")

        samples = self.get('report.max_failure_samples')
        if isinstance(samples, bool) or not isinstance(samples, int) or samples < 0:
            raise ConfigError(f"report.max_failure_samples must be a non-negative integer, got {samples!r}")

        level = str(self.get('logging.level', 'INFO')).upper()
        if level not in LOG_LEVELS:
            logger.warning(f"Unknown log level: {level}")

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key using dot notation.

        Args:
            key: Configuration key (supports dot notation like 'parser.reference_year')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def get_parser_config(self) -> Dict[str, Any]:
        """Get parser configuration.

        Returns:
            Parser configuration dictionary
        """
        return self.config.get('parser', {})

    def get_report_config(self) -> Dict[str, Any]:
        """Get report configuration.

        Returns:
            Report configuration dictionary
        """
        return self.config.get('report', {})

    def get_logging_config(self) -> Dict[str, Any]:
        """Get logging configuration.

        Returns:
            Logging configuration dictionary
        """
        return self.config.get('logging', {})

    def reload(self) -> None:
        """Reload configuration from file.

        Raises:
            ConfigError: If configuration cannot be reloaded
        """
        logger.info("Reloading configuration...")
        self.config = self._load_config()
        self._validate_config()

    def is_valid(self) -> bool:
        """Check if configuration is valid.

        Returns:
            True if configuration is valid
        """
        try:
            self._validate_config()
            return True
        except ConfigError:
            return False


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    """Recursively merge ``override`` into ``base`` in place."""
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
