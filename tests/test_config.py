from pathlib import Path

from faucet.core.config import Settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("FAUCET_SECURITY__CLAIM_COOLDOWN", raising=False)
    settings = Settings(_env_file=None)

    assert settings.claim_cooldown == 86400
    assert settings.amount_per_request == 1.0
    assert settings.port == 8080
    assert settings.solana.rpc_url == "https://api.testnet.solana.com"
    assert settings.solana.wallet_path == Path("wallet.json")
    assert settings.security.verification_provider == "turnstile"


def test_nested_environment_overrides(monkeypatch):
    monkeypatch.setenv("FAUCET_SECURITY__CLAIM_COOLDOWN", "60")
    monkeypatch.setenv("FAUCET_SOLANA__AMOUNT_PER_REQUEST", "0.5")
    monkeypatch.setenv("FAUCET_SERVER__PORT", "9000")

    settings = Settings(_env_file=None)

    assert settings.claim_cooldown == 60
    assert settings.amount_per_request == 0.5
    assert settings.port == 9000


def test_allowed_origins_accept_comma_separated_list(monkeypatch):
    monkeypatch.setenv("FAUCET_CORS__ALLOWED_ORIGINS", "http://localhost:3000, https://faucet.example")

    settings = Settings(_env_file=None)

    assert settings.cors.allowed_origins == ["http://localhost:3000", "https://faucet.example"]


def test_allowed_origins_accept_json_list(monkeypatch):
    monkeypatch.setenv("FAUCET_CORS__ALLOWED_ORIGINS", '["https://faucet.example"]')

    settings = Settings(_env_file=None)

    assert settings.cors.allowed_origins == ["https://faucet.example"]


def test_frontend_only_keys_are_not_settings(monkeypatch):
    monkeypatch.setenv("FAUCET_SECURITY__TURNSTILE_SITE_KEY", "0x4AAAAAAA")
    monkeypatch.setenv("FAUCET_ENVIRONMENT", "production")

    settings = Settings(_env_file=None)

    assert "turnstile_site_key" not in settings.security.model_dump()
    assert "environment" not in settings.model_dump()
