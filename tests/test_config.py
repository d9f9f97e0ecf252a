"""
Configuration loading and OIDC TLS verification resolution
"""

import pytest

from config import ConfigLoader, GatewayConfig, parse_bool, resolve_oidc_verify

VERIFY_VARS = (
    "AMAZONQ_CA_BUNDLE",
    "AWS_CA_BUNDLE",
    "REQUESTS_CA_BUNDLE",
    "DISABLE_AMAZONQ_SSL_VERIFY",
    "DISABLE_OIDC_SSL_VERIFY",
    "DISABLE_SSL_VERIFY",
    "AMAZONQ_SSL_VERIFY",
    "OIDC_SSL_VERIFY",
)


@pytest.fixture
def loader(monkeypatch, tmp_path):
    for var in VERIFY_VARS:
        monkeypatch.delenv(var, raising=False)
    return ConfigLoader(env_path=str(tmp_path / "missing.env"))


def test_get_coerces_to_default_type(loader, monkeypatch):
    monkeypatch.setenv("TOKEN_REFRESH_MARGIN", "120")
    monkeypatch.setenv("READ_TIMEOUT", "2.5")
    monkeypatch.setenv("LOG_REQUESTS", "off")

    assert loader.get("TOKEN_REFRESH_MARGIN", 300) == 120
    assert loader.get("READ_TIMEOUT", 60.0) == 2.5
    assert loader.get("LOG_REQUESTS", True) is False
    assert loader.get("UNSET_GATEWAY_VALUE", "fallback") == "fallback"


def test_get_keeps_default_on_bad_number(loader, monkeypatch):
    monkeypatch.setenv("BUFFER_MAX_SIZE", "lots")

    assert loader.get("BUFFER_MAX_SIZE", 10240) == 10240


def test_env_file_is_loaded(tmp_path, monkeypatch):
    # Registered so the value dotenv sets is removed afterwards
    monkeypatch.setenv("GATEWAY_TEST_FROM_FILE", "placeholder")
    monkeypatch.delenv("GATEWAY_TEST_FROM_FILE")
    env_file = tmp_path / ".env"
    env_file.write_text("GATEWAY_TEST_FROM_FILE=from-dotenv\n")

    loader = ConfigLoader(env_path=str(env_file))

    assert loader.get("GATEWAY_TEST_FROM_FILE", "default") == "from-dotenv"


@pytest.mark.parametrize(
    "value,expected",
    [("1", True), ("Yes", True), ("off", False), ("FALSE", False), ("maybe", None), (None, None)],
)
def test_parse_bool(value, expected):
    assert parse_bool(value) is expected


def test_oidc_verify_defaults_on(loader):
    assert resolve_oidc_verify(loader) is True


def test_ca_bundle_wins(loader, monkeypatch):
    monkeypatch.setenv("AWS_CA_BUNDLE", "/etc/ssl/corp.pem")
    monkeypatch.setenv("DISABLE_OIDC_SSL_VERIFY", "true")

    assert resolve_oidc_verify(loader) == "/etc/ssl/corp.pem"


def test_disable_flag_beats_verify_flag(loader, monkeypatch):
    monkeypatch.setenv("DISABLE_OIDC_SSL_VERIFY", "1")
    monkeypatch.setenv("OIDC_SSL_VERIFY", "true")

    assert resolve_oidc_verify(loader) is False


def test_explicit_verify_flag(loader, monkeypatch):
    monkeypatch.setenv("OIDC_SSL_VERIFY", "no")

    assert resolve_oidc_verify(loader) is False


def test_gateway_config_defaults():
    config = GatewayConfig()

    assert config.token_refresh_margin_seconds == 300
    assert config.buffer_max_size == 10240
    assert config.buffer_overflow_policy == "truncate"
    assert config.credentials_key == "amazonq-credentials"


def test_gateway_config_from_settings_strips_trailing_slash(monkeypatch):
    import settings

    monkeypatch.setattr(settings, "AMAZONQ_ENDPOINT", "https://q.example/")

    config = GatewayConfig.from_settings()

    assert config.amazonq_endpoint == "https://q.example"
