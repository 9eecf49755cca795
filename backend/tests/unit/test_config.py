"""Tests for configuration settings."""

import pytest

from solarsys.core.config import LoaderSettings


def test_loader_settings_defaults():
    """Test loader configuration defaults."""
    settings = LoaderSettings(_env_file=None)

    assert settings.max_frame_depth == 50
    assert settings.default_albedo == 0.5
    assert settings.default_obliquity == 0.0
    assert settings.synthesize_default_orbit is True
    assert settings.log_level == "INFO"


def test_loader_settings_from_environment(monkeypatch):
    """Test that SSC_ environment variables override defaults."""
    monkeypatch.setenv("SSC_MAX_FRAME_DEPTH", "10")
    monkeypatch.setenv("SSC_SYNTHESIZE_DEFAULT_ORBIT", "false")

    settings = LoaderSettings(_env_file=None)

    assert settings.max_frame_depth == 10
    assert settings.synthesize_default_orbit is False


def test_per_instance_settings_are_independent():
    """Test that settings passed to a loader do not affect each other."""
    strict = LoaderSettings(max_frame_depth=5, _env_file=None)
    default = LoaderSettings(_env_file=None)

    assert strict.max_frame_depth == 5
    assert default.max_frame_depth == 50


def test_invalid_setting_value(monkeypatch):
    """Test that a malformed environment value is rejected."""
    monkeypatch.setenv("SSC_MAX_FRAME_DEPTH", "deep")
    with pytest.raises(ValueError):
        LoaderSettings(_env_file=None)
