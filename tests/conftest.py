"""
Pytest configuration and shared fixtures for kordate testing.

Provides a frozen clock, extractor factories, configuration directories and
cleanup of the process-wide extractor and logging state.
"""

import logging
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Callable

import pytest
import yaml

import kordate
from kordate.core.logging_manager import PACKAGE_LOGGER, LoggingManager
from kordate.processors.temporal_extractor import TemporalExtractor

# 2024-03-15 (Fri) 10:20:30 in whatever zone the extractor asks for
FIXED_NOW = (2024, 3, 15, 10, 20, 30)


def make_clock(*fields) -> Callable[[tzinfo], datetime]:
    """Build a clock that always returns the given wall time."""
    def clock(zone: tzinfo) -> datetime:
        return datetime(*fields, tzinfo=zone)
    return clock


@pytest.fixture
def fixed_clock():
    """Clock frozen at FIXED_NOW"""
    return make_clock(*FIXED_NOW)


@pytest.fixture
def extractor(fixed_clock):
    """Extractor in Asia/Seoul with a frozen clock"""
    return TemporalExtractor("Asia/Seoul", clock=fixed_clock)


@pytest.fixture
def extractor_at():
    """Factory for extractors frozen at an arbitrary moment"""
    def factory(*fields, location: str = "Asia/Seoul", **kwargs) -> TemporalExtractor:
        return TemporalExtractor(location, clock=make_clock(*fields), **kwargs)
    return factory


# Configuration Fixtures
@pytest.fixture
def temp_config_dir(tmp_path):
    """Temporary directory for test configuration files"""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def write_config(temp_config_dir):
    """Write a YAML file into the temporary config directory"""
    def writer(name: str, data) -> Path:
        path = temp_config_dir / name
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, allow_unicode=True)
        return path
    return writer


# Test Environment Setup
@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """Isolate tests from KORDATE_* variables of the host"""
    import os
    for key in list(os.environ):
        if key.startswith("KORDATE_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("KORDATE_ENV", "testing")


@pytest.fixture(autouse=True)
def restore_global_state():
    """Put the default extractor and logging back the way they were"""
    default = kordate.get_extractor()
    location = default.location
    date_policy, time_policy = default.date_policy, default.time_policy

    yield

    default.set_location(location)
    default.date_policy, default.time_policy = date_policy, time_policy

    manager = LoggingManager()
    manager._remove_handlers()
    manager.verbose = False
    manager.level = "WARNING"
    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.NOTSET)


# Custom pytest markers
def pytest_configure(config):
    """Configure custom pytest markers"""
    config.addinivalue_line(
        "markers", "unit: mark test as unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as integration test"
    )
    config.addinivalue_line(
        "markers", "performance: mark test as performance test"
    )


# Test Collection Hooks
def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on file location"""
    for item in items:
        path = str(item.path)
        if "unit" in path:
            item.add_marker(pytest.mark.unit)
        elif "integration" in path:
            item.add_marker(pytest.mark.integration)
        elif "performance" in path:
            item.add_marker(pytest.mark.performance)
