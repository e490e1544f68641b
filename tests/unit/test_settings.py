"""Unit tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from adexchange_seller.api.service import AdExchangeSellerService
from adexchange_seller.config import (
    DEFAULT_BASE_URL,
    READONLY_SCOPE,
    READWRITE_SCOPE,
    Settings,
    get_settings,
)


def test_settings_read_environment():
    settings = get_settings()
    assert settings.base_url == "https://adx.test/adexchangeseller/v1/"
    assert settings.access_token.get_secret_value() == "env-token"
    assert settings.scope == "readonly"
    assert settings.oauth_scope == READONLY_SCOPE
    assert settings.timeout == 30.0
    assert settings.log_level == "INFO"


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


def test_defaults_without_environment(monkeypatch):
    monkeypatch.delenv("ADX_SELLER_BASE_URL")
    monkeypatch.delenv("ADX_SELLER_ACCESS_TOKEN")
    settings = Settings()
    assert settings.base_url == DEFAULT_BASE_URL
    assert settings.access_token is None


def test_base_url_gets_trailing_slash(monkeypatch):
    monkeypatch.setenv("ADX_SELLER_BASE_URL", "http://localhost:8080/v1")
    assert Settings().base_url == "http://localhost:8080/v1/"


def test_readwrite_scope_and_log_level(monkeypatch):
    monkeypatch.setenv("ADX_SELLER_SCOPE", "readwrite")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    settings = Settings()
    assert settings.oauth_scope == READWRITE_SCOPE
    assert settings.log_level == "DEBUG"


def test_invalid_timeout_rejected(monkeypatch):
    monkeypatch.setenv("ADX_SELLER_TIMEOUT", "0")
    with pytest.raises(ValidationError):
        Settings()


def test_token_not_exposed_in_repr():
    assert "env-token" not in repr(get_settings())


def test_service_from_settings(monkeypatch):
    monkeypatch.setenv("ADX_SELLER_USER_AGENT", "nightly-sync")
    monkeypatch.setenv("ADX_SELLER_TIMEOUT", "12.5")
    service = AdExchangeSellerService.from_settings(Settings())
    assert service.base_url == "https://adx.test/adexchangeseller/v1/"
    assert service.timeout == 12.5
    assert service.user_agent.endswith(" nightly-sync")
    assert service.auth is not None
