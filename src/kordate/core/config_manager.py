"""Configuration Management for kordate

Handles loading and validation of extractor configuration. Supports
hierarchical YAML files with environment variable overrides.
"""

import logging
import os
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dateutil import tz
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .error_handler import ConfigurationError

DEFAULT_LOCATION = "Asia/Seoul"
ENV_PREFIX = "KORDATE_"

FILL_POLICY_PATTERN = "^(fill_from_now|zero_on_missing|error_on_missing)$"


class LoggingConfig(BaseModel):
    """Configuration for logging."""
    level: str = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    file_path: Optional[str] = None
    max_file_size: str = Field(default="10MB")
    backup_count: int = Field(default=5, ge=1, le=20)
    log_to_console: bool = Field(default=True)

    @field_validator('level', mode='before')
    @classmethod
    def normalize_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @field_validator('max_file_size')
    @classmethod
    def validate_file_size(cls, v):
        """Validate file size format"""
        import re
        if not re.match(r'^\d+[KMG]B$', v.upper()):
            raise ValueError("File size must be in format: 10KB, 10MB, or 1GB")
        return v.upper()

    @property
    def max_bytes(self) -> int:
        units = {'KB': 1024, 'MB': 1024 ** 2, 'GB': 1024 ** 3}
        return int(self.max_file_size[:-2]) * units[self.max_file_size[-2:]]


class ExtractorConfig(BaseModel):
    """Main extractor configuration."""
    location: str = Field(default=DEFAULT_LOCATION)
    verbose: bool = Field(default=False)
    date_fill_policy: str = Field(default="zero_on_missing", pattern=FILL_POLICY_PATTERN)
    time_fill_policy: str = Field(default="zero_on_missing", pattern=FILL_POLICY_PATTERN)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(validate_assignment=True)

    @field_validator('location')
    @classmethod
    def validate_location(cls, v):
        """Validate timezone identifier against the tz database"""
        if not v or not v.strip() or tz.gettz(v) is None:
            raise ValueError(f"Unknown timezone identifier: '{v}'")
        return v

    @field_validator('date_fill_policy', 'time_fill_policy', mode='before')
    @classmethod
    def normalize_policy(cls, v):
        return v.lower() if isinstance(v, str) else v


class ConfigManager:
    """Manages extractor configuration loading and validation."""

    def __init__(self, config_path: Optional[Path] = None, environment: Optional[str] = None):
        """Initialize configuration manager.

        Args:
            config_path: Optional path to the configuration directory
            environment: Environment name (development, staging, production)
        """
        self.config_base_path = Path(config_path) if config_path else self._get_default_config_path()
        self.environment = environment or os.getenv('KORDATE_ENV', 'development')
        self._config: Optional[ExtractorConfig] = None
        self._lock = threading.Lock()
        self.logger = logging.getLogger(__name__)

        # Configuration file paths
        self.config_files = self._get_config_files()

    def _get_default_config_path(self) -> Path:
        """Get the default configuration directory."""
        # Looking for config in order of precedence
        config_locations = [
            Path("config"),
            Path.home() / ".kordate",
            Path("/etc/kordate"),
        ]

        for location in config_locations:
            if location.exists() and location.is_dir():
                return location

        return Path("config")

    def _get_config_files(self) -> Dict[str, Path]:
        """Get configuration file paths for hierarchical loading."""
        base_dir = self.config_base_path

        return {
            'default': base_dir / 'default_config.yaml',
            'environment': base_dir / f'{self.environment}.yaml',
            'local': base_dir / 'local.yaml'  # For development overrides
        }

    def load_config(self) -> ExtractorConfig:
        """Load and validate configuration with hierarchical overrides.

        Returns:
            Validated extractor configuration

        Raises:
            ConfigurationError: If a file cannot be parsed or validation fails
        """
        with self._lock:
            if self._config:
                return self._config

            config_data: Dict[str, Any] = {}

            for config_type, config_file in self.config_files.items():
                if config_file.exists():
                    self.logger.info(f"Loading {config_type} config from {config_file}")
                    file_data = self._load_yaml_file(config_file)
                    self._deep_merge(config_data, file_data)

            env_overrides = self._get_env_overrides()
            if env_overrides:
                self.logger.info(f"Applying environment overrides: {list(env_overrides.keys())}")
                self._deep_merge(config_data, env_overrides)

            try:
                self._config = ExtractorConfig(**config_data)
            except ValidationError as e:
                self.logger.error(f"Configuration validation failed: {e}")
                raise ConfigurationError(f"Invalid configuration: {e}") from e

            return self._config

    def reload_config(self) -> ExtractorConfig:
        """Drop the cached configuration and load it again."""
        with self._lock:
            self._config = None
        return self.load_config()

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """Load YAML configuration file.

        Returns:
            Configuration dictionary
        """
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            self.logger.error(f"Failed to parse YAML file {file_path}: {e}")
            raise ConfigurationError(f"Invalid YAML in {file_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Expected a mapping at the top of {file_path}")
        return data

    def _get_env_overrides(self) -> Dict[str, Any]:
        """Get configuration overrides from environment variables.

        Environment variables follow pattern: KORDATE_<FIELD> for top-level
        fields and KORDATE_<SECTION>_<FIELD> for nested sections.
        Example: KORDATE_LOGGING_FILE_PATH -> logging.file_path
        """
        overrides: Dict[str, Any] = {}
        top_level = set(ExtractorConfig.model_fields)
        sections = {
            name for name, info in ExtractorConfig.model_fields.items()
            if isinstance(info.default_factory, type) and issubclass(info.default_factory, BaseModel)
        }

        for key, value in os.environ.items():
            if not key.startswith(ENV_PREFIX) or key == 'KORDATE_ENV':
                continue

            name = key[len(ENV_PREFIX):].lower()
            if name in top_level and name not in sections:
                overrides[name] = self._convert_env_value(value)
                continue

            section, _, field_name = name.partition('_')
            if section in sections and field_name:
                overrides.setdefault(section, {})[field_name] = self._convert_env_value(value)
            else:
                self.logger.warning(f"Ignoring unknown configuration variable {key}")

        return overrides

    def _convert_env_value(self, value: str) -> Union[str, int, float, bool]:
        """Convert environment variable string to appropriate type."""
        # Boolean conversion
        if value.lower() in ('true', 'false'):
            return value.lower() == 'true'

        # Numeric conversion
        try:
            if '.' in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        return value

    def _deep_merge(self, base_dict: Dict[str, Any], update_dict: Dict[str, Any]):
        """Recursively merge update_dict into base_dict."""
        for key, value in update_dict.items():
            if key in base_dict and isinstance(base_dict[key], dict) and isinstance(value, dict):
                self._deep_merge(base_dict[key], value)
            else:
                base_dict[key] = value
