from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from faucet.core.config import CorsSettings, DatabaseSettings, SecuritySettings, Settings
from faucet.core.container import ApplicationContainer
from faucet.main import create_app

from .conftest import OTHER_WALLET, WALLET

ORIGIN = "http://localhost:3000"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database=DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'api.db'}"),
        security=SecuritySettings(claim_cooldown=86400),
        cors=CorsSettings(allowed_origins=[ORIGIN]),
    )


@pytest.fixture
def client(settings, distributor, verifier):
    container = ApplicationContainer.build(settings, distributor=distributor, verifier=verifier)
    with TestClient(create_app(container=container)) as client:
        yield client


def _claim(client, wallet=WALLET, token="token", **kwargs):
    return client.post(
        "/api/request-funds",
        json={"wallet_address": wallet, "cf_turnstile_response": token},
        **kwargs,
    )


# ── Health ────────────────────────────────────────────────────────

def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True}


# ── Balance ───────────────────────────────────────────────────────

class TestBalance:
    def test_fresh_then_cached(self, client, distributor):
        first = client.get("/api/balance")
        second = client.get("/api/balance")

        assert first.status_code == 200
        assert first.json() == {"balance": 12.5, "cached": False}
        assert second.json() == {"balance": 12.5, "cached": True}
        assert distributor.balance_calls == 1

    def test_upstream_failure(self, client, distributor):
        distributor.fail_balance = True

        response = client.get("/api/balance")

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Failed to get balance"}


# ── Claims ────────────────────────────────────────────────────────

class TestRequestFunds:
    def test_success(self, client, distributor):
        response = _claim(client)

        assert response.status_code == 200
        assert response.json() == {"success": True, "amount": 1.0, "transaction_hash": "sig1"}
        assert distributor.transfers == [(WALLET, 1.0)]

    def test_forwarded_for_is_used_as_source_ip(self, client, verifier):
        _claim(client, headers={"X-Forwarded-For": "203.0.113.7, 10.0.0.1"})
        assert verifier.calls == [("token", "203.0.113.7")]

    def test_cooldown_returns_429_with_next_claim_time(self, client):
        before = datetime.now(timezone.utc).timestamp()
        _claim(client)

        response = _claim(client)

        assert response.status_code == 429
        body = response.json()
        assert body["success"] is False
        assert body["error"].startswith("Please wait until ")
        assert body["error"].endswith(" before requesting funds again")
        assert isinstance(body["nextClaimTime"], int)
        assert before + 86400 - 1 <= body["nextClaimTime"] <= before + 86400 + 60

    def test_other_wallet_not_blocked(self, client):
        _claim(client)
        assert _claim(client, wallet=OTHER_WALLET).status_code == 200

    @pytest.mark.parametrize(
        "payload, error",
        [
            ({"wallet_address": "", "cf_turnstile_response": "token"}, "Wallet address is required"),
            ({"cf_turnstile_response": "token"}, "Wallet address is required"),
            ({"wallet_address": "bogus!", "cf_turnstile_response": "token"}, "Invalid Solana wallet address format"),
            ({"wallet_address": WALLET, "cf_turnstile_response": ""}, "Turnstile response is required"),
            ({"wallet_address": WALLET}, "Turnstile response is required"),
        ],
    )
    def test_invalid_input(self, client, distributor, payload, error):
        response = client.post("/api/request-funds", json=payload)

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": error}
        assert distributor.transfers == []

    def test_malformed_body(self, client):
        response = client.post(
            "/api/request-funds",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Invalid request format"}

    def test_failed_verification(self, client, verifier):
        verifier.result = False
        response = _claim(client)
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid Turnstile token"

    def test_verification_unavailable(self, client, verifier):
        verifier.unavailable = True
        response = _claim(client)
        assert response.status_code == 500
        assert response.json()["error"] == "Failed to verify Turnstile token"

    def test_transfer_failure(self, client, distributor):
        distributor.fail_transfer = True
        response = _claim(client)

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Failed to send transaction"}
        assert client.get("/api/transactions").json()["transactions"] == []

    def test_recipient_refused_by_distributor(self, client, distributor):
        distributor.reject_recipient = True
        response = _claim(client)

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Invalid Solana wallet address format"}


# ── Transactions ──────────────────────────────────────────────────

class TestTransactions:
    def test_empty(self, client):
        response = client.get("/api/transactions")
        assert response.status_code == 200
        assert response.json() == {"success": True, "transactions": []}

    def test_lists_recent_claims_without_ip(self, client):
        _claim(client, headers={"X-Forwarded-For": "203.0.113.7"})
        _claim(client, wallet=OTHER_WALLET)

        transactions = client.get("/api/transactions").json()["transactions"]

        assert [tx["walletAddress"] for tx in transactions] == [OTHER_WALLET, WALLET]
        first = transactions[1]
        assert first["txHash"] == "sig1"
        assert first["status"] == "completed"
        assert first["amount"] == 1.0
        assert set(first) == {"id", "walletAddress", "amount", "status", "txHash", "timestamp"}

    def test_repeated_reads_are_identical(self, client):
        _claim(client)
        assert client.get("/api/transactions").json() == client.get("/api/transactions").json()

    def test_filter_by_wallet(self, client):
        _claim(client)
        _claim(client, wallet=OTHER_WALLET)

        response = client.get("/api/transactions", params={"wallet_address": WALLET})

        assert [tx["walletAddress"] for tx in response.json()["transactions"]] == [WALLET]


def test_cors_preflight_allows_configured_origin(client):
    response = client.options(
        "/api/request-funds",
        headers={"Origin": ORIGIN, "Access-Control-Request-Method": "POST"},
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == ORIGIN
