"""
Environment configuration tests.
"""

import logging

import pytest

from erp_ui import config
from erp_ui.services import DemoBackend, UnconfiguredBackend, create_backend


KEY = "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9.payload.signature"


def test_load_settings_defaults():
    """Test the values used when nothing is set."""
    settings = config.load_settings({})

    assert settings.supabase_url == ""
    assert settings.service == "supabase"
    assert settings.port == 8000
    assert settings.missing == ["SUPABASE_URL", "SUPABASE_ANON_KEY"]
    assert not settings.backend_configured


def test_load_settings_from_environment():
    """Test reading every variable."""
    settings = config.load_settings(
        {
            "SUPABASE_URL": " https://project.supabase.co ",
            "SUPABASE_ANON_KEY": KEY,
            "ERP_UI_SERVICE": "Demo",
            "ERP_UI_PORT": "3001",
        }
    )

    assert settings.supabase_url == "https://project.supabase.co"
    assert settings.supabase_anon_key == KEY
    assert settings.service == "demo"
    assert settings.port == 3001
    assert settings.backend_configured


def test_invalid_port_falls_back():
    """Test that a malformed port does not stop the application."""
    assert config.load_settings({"ERP_UI_PORT": "http"}).port == 8000


def test_missing_configuration_warns(caplog):
    """Test that missing credentials are reported as a warning."""
    with caplog.at_level(logging.WARNING, logger="config"):
        config.load_settings({"SUPABASE_URL": "https://project.supabase.co"})

    assert "SUPABASE_ANON_KEY" in caplog.text


def test_key_is_logged_masked(caplog):
    """Test that the anon key never appears in full in the logs."""
    with caplog.at_level(logging.INFO, logger="config"):
        config.load_settings({"SUPABASE_URL": "https://project.supabase.co", "SUPABASE_ANON_KEY": KEY})

    assert KEY not in caplog.text
    assert KEY[:20] in caplog.text


def test_suspicious_values_warn(caplog):
    """Test the warnings for a non-Supabase URL and a non-JWT key."""
    with caplog.at_level(logging.WARNING, logger="config"):
        config.load_settings({"SUPABASE_URL": "https://example.com", "SUPABASE_ANON_KEY": "plain"})

    assert "does not look like a Supabase project URL" in caplog.text
    assert "does not look like a JWT" in caplog.text


def test_create_backend_unconfigured():
    """Test that missing credentials yield a backend that returns errors."""
    backend = create_backend(config.load_settings({}))

    assert isinstance(backend, UnconfiguredBackend)
    assert not backend.configured
    result = backend.select("clients")
    assert not result.ok
    assert result.error.code == "config_missing"
    assert "SUPABASE_URL" in result.error.message


def test_create_backend_demo():
    backend = create_backend(config.load_settings({"ERP_UI_SERVICE": "demo"}))

    assert isinstance(backend, DemoBackend)


def test_create_backend_unknown_kind():
    """Test that an unknown backend kind is a programming error."""
    with pytest.raises(ValueError, match="Unknown backend kind"):
        create_backend(config.Settings(), kind="mongo")
