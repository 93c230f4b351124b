"""kordate - Lazy Korean Date/Time Extraction

Finds dates and clock times written in Korean (with Sino-Korean units, Latin
AM/PM markers and Arabic numerals) in free-form text.

The module-level functions share one process-wide extractor. Its timezone is
set with ``set_location`` and defaults to Asia/Seoul.
"""

from pathlib import Path
from typing import Dict, List, Optional, Union

from .core.config_manager import DEFAULT_LOCATION, ConfigManager, ExtractorConfig
from .core.error_handler import (
    ConfigurationError,
    InvalidDateError,
    InvalidTimezoneError,
    KorDateError,
    MalformedNumeralError,
    NoMatchError
)
from .core.logging_manager import LoggingManager
from .processors.calendar_utils import CivilDate, FillPolicy, Hms
from .processors.temporal_extractor import TemporalExtractor, TemporalMatch

__version__ = "0.1.0"
__description__ = "Lazy Korean date/time expression extractor"

_default_extractor = TemporalExtractor(DEFAULT_LOCATION)


def get_extractor() -> TemporalExtractor:
    """Return the process-wide extractor behind the module functions."""
    return _default_extractor


def set_location(name: str):
    """Set the process-wide timezone (e.g. 'Asia/Seoul', 'UTC').

    Raises:
        InvalidTimezoneError: If the identifier is unknown
    """
    _default_extractor.set_location(name)


def get_location() -> str:
    return _default_extractor.location


def set_verbose(enabled: bool):
    """Log every match and interpretation step at DEBUG."""
    LoggingManager().set_verbose(enabled)


def extract_date(
    text: str, fill_as_today: Optional[bool] = None, policy: Optional[FillPolicy] = None
) -> CivilDate:
    return _default_extractor.extract_date(text, fill_as_today, policy)


def extract_dates(
    text: str, fill_as_today: Optional[bool] = None, policy: Optional[FillPolicy] = None
) -> Dict[str, CivilDate]:
    return _default_extractor.extract_dates(text, fill_as_today, policy)


def find_dates(
    text: str, fill_as_today: Optional[bool] = None, policy: Optional[FillPolicy] = None
) -> List[TemporalMatch]:
    return _default_extractor.find_dates(text, fill_as_today, policy)


def extract_time(
    text: str, fill_as_now: Optional[bool] = None, policy: Optional[FillPolicy] = None
) -> Hms:
    return _default_extractor.extract_time(text, fill_as_now, policy)


def extract_times(
    text: str, fill_as_now: Optional[bool] = None, policy: Optional[FillPolicy] = None
) -> Dict[str, Hms]:
    return _default_extractor.extract_times(text, fill_as_now, policy)


def find_times(
    text: str, fill_as_now: Optional[bool] = None, policy: Optional[FillPolicy] = None
) -> List[TemporalMatch]:
    return _default_extractor.find_times(text, fill_as_now, policy)


def configure(config: ExtractorConfig):
    """Apply a validated configuration to logging and the default extractor."""
    manager = LoggingManager()
    manager.configure_logging(
        level=config.logging.level,
        log_to_console=config.logging.log_to_console,
        file_path=config.logging.file_path,
        max_bytes=config.logging.max_bytes,
        backup_count=config.logging.backup_count
    )
    manager.set_verbose(config.verbose)

    _default_extractor.apply_settings(
        config.location,
        FillPolicy(config.date_fill_policy),
        FillPolicy(config.time_fill_policy)
    )


def load_config(
    config_path: Optional[Union[str, Path]] = None, environment: Optional[str] = None
) -> ExtractorConfig:
    """Load configuration files and environment overrides, then apply them."""
    config = ConfigManager(Path(config_path) if config_path else None, environment).load_config()
    configure(config)
    return config


__all__ = [
    "CivilDate",
    "Hms",
    "FillPolicy",
    "TemporalExtractor",
    "TemporalMatch",
    "ExtractorConfig",
    "KorDateError",
    "NoMatchError",
    "InvalidTimezoneError",
    "MalformedNumeralError",
    "InvalidDateError",
    "ConfigurationError",
    "get_extractor",
    "set_location",
    "get_location",
    "set_verbose",
    "extract_date",
    "extract_dates",
    "find_dates",
    "extract_time",
    "extract_times",
    "find_times",
    "configure",
    "load_config"
]
