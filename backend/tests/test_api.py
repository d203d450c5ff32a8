"""HTTP tests for the FastAPI app (TestClient, settings overridden, in-memory cache)."""

from __future__ import annotations

import copy

from conftest import FINAL_SALE_TEXT

from policycheck.core.config import Settings, get_settings
from policycheck.engine.pipeline import analyze_text


def test_root_and_health(client):
    assert client.get("/api/").status_code == 200
    response = client.get("/api/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["registry_version"] == "1.1.0"
    assert body["signing_available"] is True
    assert body["generative_available"] is False


def test_clause_registry_endpoint(client):
    response = client.get("/api/clause-registry")
    assert response.status_code == 200
    assert response.headers["cache-control"] == "public, max-age=86400"
    body = response.json()
    assert body["version"] == "1.1.0"
    assert len(body["clause_types"]) == 24
    assert body["clause_types"]["no_returns"]["typical_severity"] == "high"


def test_jwks_endpoint(client):
    response = client.get("/.well-known/jwks.json")
    assert response.status_code == 200
    assert response.headers["cache-control"] == "public, max-age=3600"
    (key,) = response.json()["keys"]
    assert key["kty"] == "OKP"
    assert key["crv"] == "Ed25519"
    assert key["kid"] == "policycheck-1"


def test_check_with_text(client):
    response = client.post("/api/check", json={"text": FINAL_SALE_TEXT})
    assert response.status_code == 200
    body = response.json()
    assert body["risk_score"] == 8.0
    assert body["risk_level"] == "high"
    assert body["buyer_protection_rating"] == "D"
    assert body["flags"] == ["no_returns", "final_sale", "no_refund", "no_exchanges"]
    assert body["analysis_status"] == "text_provided"
    assert body["seller_url"] is None
    factor = body["risk_factors"][0]
    assert {"factor", "severity", "detail", "source", "found_in", "severity_note"} <= set(factor)


def test_check_requires_input(client):
    assert client.post("/api/check", json={}).status_code == 400
    assert client.post("/api/check", json={"policy_text": "   "}).status_code == 400


def test_check_rejects_non_http_url(client):
    assert client.post("/api/check", json={"url": "ftp://example.com/terms"}).status_code == 400


def test_url_only_checks_are_cached_by_domain(client, memory_cache, monkeypatch):
    import policycheck.api.check as check_module

    calls = []

    async def fake_run_analysis(**kwargs):
        calls.append(kwargs["seller_url"])
        return analyze_text(FINAL_SALE_TEXT).model_copy(update={"analysis_status": "complete"})

    monkeypatch.setattr(check_module, "run_analysis", fake_run_analysis)

    first = client.post("/api/check", json={"seller_url": "https://shop.example.com"})
    second = client.post("/api/check", json={"seller_url": "https://www.example.com/returns"})
    assert first.status_code == second.status_code == 200
    assert calls == ["https://shop.example.com"]
    assert len(memory_cache) == 1
    assert second.json()["seller_url"] == "https://www.example.com/returns"


def test_signed_assessment_round_trip(client):
    response = client.post(
        "/api/v1/signed-assessment",
        json={"seller_url": "https://shop.example.com", "policy_text": FINAL_SALE_TEXT},
    )
    assert response.status_code == 200
    envelope = response.json()
    assert envelope["verification_url"] == "https://policycheck.tools/api/v1/verify"
    assert envelope["jwks_url"] == "https://policycheck.tools/.well-known/jwks.json"
    assert envelope["signed_assessment"]["seller"]["domain"] == "example.com"

    verified = client.post(
        "/api/v1/verify",
        json={
            "signed_assessment": envelope["signed_assessment"],
            "signature": envelope["signature"],
            "signed_payload_hash": envelope["signed_payload_hash"],
        },
    )
    assert verified.status_code == 200
    body = verified.json()
    assert body["valid"] is True
    assert body["seller_domain"] == "example.com"
    assert "reason" not in body

    tampered = copy.deepcopy(envelope["signed_assessment"])
    tampered["result"]["buyer_protection_rating"] = "A+"
    rejected = client.post("/api/v1/verify", json={"signed_assessment": tampered, "signature": envelope["signature"]})
    assert rejected.status_code == 200
    assert rejected.json() == {
        "valid": False,
        "reason": "signature_mismatch",
        "assessment_id": envelope["signed_assessment"]["assessment_id"],
        "seller_domain": "example.com",
        "expires_at": envelope["signed_assessment"]["expires_at"],
        "verified_at": rejected.json()["verified_at"],
    }


def test_verify_reports_garbage_as_invalid(client):
    response = client.post("/api/v1/verify", json={"signed_assessment": "nope", "signature": 5})
    assert response.status_code == 200
    assert response.json()["valid"] is False
    assert response.json()["reason"] == "malformed_assessment"

    response = client.post("/api/v1/verify", json={})
    assert response.status_code == 200
    assert response.json()["reason"] == "missing_fields"


def test_signing_unavailable_without_key_in_production(client):
    from policycheck.main import app

    app.dependency_overrides[get_settings] = lambda: Settings(
        _env_file=None, environment="production", signing_key=None, generative_enabled=False
    )
    response = client.post("/api/v1/signed-assessment", json={"text": FINAL_SALE_TEXT})
    assert response.status_code == 503
    assert client.get("/.well-known/jwks.json").status_code == 503
    assert client.get("/api/health").json()["signing_available"] is False
