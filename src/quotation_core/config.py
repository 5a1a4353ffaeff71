"""
Engine configuration for the quotation composition engine.

Settings come from dataclass defaults, ``QUOTATION_CORE_*`` environment
variables, or a YAML file.
"""

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .exceptions import QuotationCoreError

logger = logging.getLogger(__name__)


class ConfigurationError(QuotationCoreError):
    """Raised when an engine configuration file cannot be used."""
    pass


@dataclass
class EngineConfig:
    """Configuration for document generation."""

    # Locale used for currency grouping (Babel locale identifier)
    locale: str = "en_IN"

    # Seal image loading
    seal_fetch_timeout: Optional[float] = None  # seconds; None waits indefinitely
    seal_size: int = 100  # rendered width/height in pixels
    seal_max_bytes: int = 2 * 1024 * 1024
    user_agent: str = "quotation-core/1.0"

    # Per-template palette/typography overrides, keyed by template type
    style_overrides: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Build a configuration from ``QUOTATION_CORE_*`` environment variables."""
        config = cls()

        locale = os.getenv('QUOTATION_CORE_LOCALE')
        if locale:
            config.locale = locale

        timeout = os.getenv('QUOTATION_CORE_SEAL_TIMEOUT')
        if timeout:
            try:
                config.seal_fetch_timeout = float(timeout)
            except ValueError:
                logger.warning(f"Ignoring invalid QUOTATION_CORE_SEAL_TIMEOUT: {timeout}")

        seal_size = os.getenv('QUOTATION_CORE_SEAL_SIZE')
        if seal_size:
            try:
                config.seal_size = int(seal_size)
            except ValueError:
                logger.warning(f"Ignoring invalid QUOTATION_CORE_SEAL_SIZE: {seal_size}")

        return config

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "EngineConfig":
        """
        Load configuration from a YAML file.

        Args:
            path: Path to a YAML document with top-level keys matching
                  the dataclass fields

        Returns:
            EngineConfig populated from the file

        Raises:
            ConfigurationError: If the file is missing or not valid YAML
        """
        config_path = Path(path)
        if not config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                raw_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logger.error(f"Invalid YAML in engine config {config_path}: {e}")
            raise ConfigurationError(f"Invalid engine configuration: {e}")

        if not isinstance(raw_config, dict):
            raise ConfigurationError("Engine configuration must be a mapping")

        known = {f.name for f in fields(cls)}
        unknown = set(raw_config) - known
        if unknown:
            logger.warning(f"Ignoring unknown configuration keys: {sorted(unknown)}")

        return cls(**{key: value for key, value in raw_config.items() if key in known})
