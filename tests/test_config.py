"""Unit tests for extractor configuration."""

from datetime import date

import pytest

from important_dates.config import ExtractorConfig


def test_defaults():
    """Test default settings."""
    config = ExtractorConfig()
    assert config.timezone == "UTC"
    assert config.year_window == 2
    assert config.fallback_scope == "course"
    assert config.use_enhanced_parser is False
    assert config.reference_year == date.today().year


def test_invalid_fallback_scope():
    """Test that an unknown fallback scope is rejected."""
    with pytest.raises(ValueError):
        ExtractorConfig(fallback_scope="global")


def test_with_overrides_skips_none(config):
    """Test that None overrides keep the current value."""
    updated = config.with_overrides(timezone="America/Toronto", fallback_scope=None)
    assert updated.timezone == "America/Toronto"
    assert updated.fallback_scope == "course"
    assert updated.reference_year == 2024
    assert config.timezone == "UTC"


def test_from_env():
    """Test reading settings from environment variables."""
    config = ExtractorConfig.from_env({
        "IMPORTANT_DATES_TIMEZONE": "Europe/Berlin",
        "IMPORTANT_DATES_YEAR_WINDOW": "3",
        "IMPORTANT_DATES_ENHANCED_PARSER": "true",
        "IMPORTANT_DATES_FALLBACK_SCOPE": "Batch",
    })
    assert config.timezone == "Europe/Berlin"
    assert config.year_window == 3
    assert config.use_enhanced_parser is True
    assert config.fallback_scope == "batch"


def test_from_env_empty():
    """Test that an empty environment gives the defaults."""
    assert ExtractorConfig.from_env({}) == ExtractorConfig()


def test_from_env_bad_scope():
    """Test that a bad scope in the environment is rejected."""
    with pytest.raises(ValueError):
        ExtractorConfig.from_env({"IMPORTANT_DATES_FALLBACK_SCOPE": "everything"})


def test_invalid_timezone():
    """Test that an unknown timezone is rejected as a ValueError."""
    with pytest.raises(ValueError):
        ExtractorConfig(timezone="Mars/Olympus")
    with pytest.raises(ValueError):
        ExtractorConfig().with_overrides(timezone="Mars/Olympus")
    with pytest.raises(ValueError):
        ExtractorConfig.from_env({"IMPORTANT_DATES_TIMEZONE": "Mars/Olympus"})
