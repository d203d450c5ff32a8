"""Tests for canonical JSON, Ed25519 keys, signing and verification."""

from __future__ import annotations

import copy
import math
from datetime import timedelta

import pytest
from conftest import FINAL_SALE_TEXT, SIGNING_SEED

from policycheck.engine.models import utc_now
from policycheck.engine.pipeline import analyze_text
from policycheck.signing import (
    AssessmentSigner,
    AssessmentSubject,
    SigningKeyError,
    canonical_json,
    generate_signing_key_hex,
    jwks,
    load_private_key,
    payload_hash,
    public_key_from_jwk,
    verify_assessment,
)
from policycheck.signing.canonical import b64url_decode
from policycheck.signing.protocol import clauses_summary, parse_timestamp

SUBJECT = AssessmentSubject(domain="example.com", url="https://shop.example.com")


@pytest.fixture
def key():
    return load_private_key(SIGNING_SEED)


@pytest.fixture
def signer(key):
    return AssessmentSigner(key, issuer="policycheck.tools", ttl_seconds=300)


@pytest.fixture
def envelope(signer):
    return signer.sign(analyze_text(FINAL_SALE_TEXT), SUBJECT)


def test_canonical_json_is_order_independent():
    assert canonical_json({"b": 1, "a": {"d": 2, "c": 3}}) == b'{"a":{"c":3,"d":2},"b":1}'
    assert canonical_json({"a": 1, "b": 2}) == canonical_json({"b": 2, "a": 1})


def test_canonical_json_keeps_unicode_and_rejects_nan():
    assert canonical_json({"t": "café"}) == '{"t":"café"}'.encode("utf-8")
    with pytest.raises(ValueError):
        canonical_json({"x": math.nan})


def test_payload_fields(envelope):
    payload = envelope.signed_assessment
    assert payload["version"] == "1.0"
    assert payload["issuer"] == "policycheck.tools"
    assert payload["registry_version"] == "1.1.0"
    assert payload["seller"] == {"domain": "example.com", "url": "https://shop.example.com"}
    assert payload["flags"] == ["no_returns", "final_sale", "no_refund", "no_exchanges"]
    assert payload["clauses_summary"]["returns"] == 4
    assert payload["clauses_summary"]["legal"] == 0
    assert payload["result"]["buyer_protection_rating"] == "D"
    issued = parse_timestamp(payload["issued_at"])
    expires = parse_timestamp(payload["expires_at"])
    assert expires - issued == timedelta(seconds=300)
    assert envelope.signed_payload_hash == payload_hash(canonical_json(payload))
    assert "=" not in envelope.signature


def test_assessment_ids_are_unique(signer):
    result = analyze_text(FINAL_SALE_TEXT)
    first = signer.sign(result, SUBJECT).signed_assessment["assessment_id"]
    second = signer.sign(result, SUBJECT).signed_assessment["assessment_id"]
    assert first != second


def test_round_trip_verifies(envelope, key):
    result = verify_assessment(
        envelope.signed_assessment,
        envelope.signature,
        key.public_key(),
        expected_hash=envelope.signed_payload_hash,
    )
    assert result.valid
    assert result.reason is None
    assert result.assessment_id == envelope.signed_assessment["assessment_id"]
    assert result.seller_domain == "example.com"
    assert result.expires_at == envelope.signed_assessment["expires_at"]
    assert result.verified_at is not None


def test_tampered_payload_is_signature_mismatch(envelope, key):
    tampered = copy.deepcopy(envelope.signed_assessment)
    tampered["result"]["risk_score"] = 0.0
    result = verify_assessment(tampered, envelope.signature, key.public_key())
    assert not result.valid
    assert result.reason == "signature_mismatch"


def test_hash_mismatch(envelope, key):
    result = verify_assessment(
        envelope.signed_assessment, envelope.signature, key.public_key(), expected_hash="sha256:" + "0" * 64
    )
    assert result.reason == "hash_mismatch"


def test_expired(envelope, key):
    later = utc_now() + timedelta(seconds=301)
    result = verify_assessment(envelope.signed_assessment, envelope.signature, key.public_key(), now=later)
    assert not result.valid
    assert result.reason == "expired"
    assert result.seller_domain == "example.com"


def test_tampered_and_expired_reports_tampering(envelope, key):
    tampered = copy.deepcopy(envelope.signed_assessment)
    tampered["seller"]["domain"] = "evil.example"
    later = utc_now() + timedelta(days=1)
    result = verify_assessment(tampered, envelope.signature, key.public_key(), now=later)
    assert result.reason == "signature_mismatch"


def test_wrong_key_is_signature_mismatch(envelope):
    other = load_private_key(generate_signing_key_hex())
    result = verify_assessment(envelope.signed_assessment, envelope.signature, other.public_key())
    assert result.reason == "signature_mismatch"


@pytest.mark.parametrize(
    "assessment, signature, reason",
    [
        (None, "abc", "missing_fields"),
        ({"version": "1.0"}, None, "missing_fields"),
        ({"version": "1.0"}, "", "missing_fields"),
        ("not an object", "abc", "malformed_assessment"),
        ([1, 2, 3], "abc", "malformed_assessment"),
        ({"version": "1.0"}, "abc", "missing_fields"),
    ],
)
def test_structural_failures(key, assessment, signature, reason):
    result = verify_assessment(assessment, signature, key.public_key())
    assert not result.valid
    assert result.reason == reason


def test_unsupported_version(envelope, key):
    payload = dict(envelope.signed_assessment, version="2.0")
    assert verify_assessment(payload, envelope.signature, key.public_key()).reason == "unsupported_version"


@pytest.mark.parametrize("signature", ["!!!not base64!!!", "c2hvcnQ", 12345])
def test_malformed_signature(envelope, key, signature):
    result = verify_assessment(envelope.signed_assessment, signature, key.public_key())
    assert result.reason == "malformed_signature"


def test_non_finite_number_is_malformed(envelope, key):
    payload = copy.deepcopy(envelope.signed_assessment)
    payload["result"]["risk_score"] = math.inf
    assert verify_assessment(payload, envelope.signature, key.public_key()).reason == "malformed_assessment"


def test_jwks_round_trip(envelope, key):
    document = jwks(key.public_key(), "policycheck-1")
    (entry,) = document["keys"]
    assert entry["kty"] == "OKP"
    assert entry["crv"] == "Ed25519"
    assert entry["use"] == "sig"
    assert entry["kid"] == "policycheck-1"
    public_key = public_key_from_jwk(entry)
    assert verify_assessment(envelope.signed_assessment, envelope.signature, public_key).valid


def test_jwk_of_wrong_type_rejected():
    with pytest.raises(SigningKeyError):
        public_key_from_jwk({"kty": "RSA", "n": "abc"})


@pytest.mark.parametrize("seed", ["zz" * 32, "11" * 16, ""])
def test_bad_seed_rejected(seed):
    with pytest.raises(SigningKeyError):
        load_private_key(seed)


def test_generated_seed_loads():
    seed = generate_signing_key_hex()
    assert len(seed) == 64
    load_private_key(seed)


def test_clauses_summary_covers_every_category():
    summary = clauses_summary(analyze_text(FINAL_SALE_TEXT))
    assert summary == {"legal": 0, "returns": 4, "pricing": 0, "privacy": 0, "shipping": 0}


def test_canonical_json_writes_integral_floats_without_fraction():
    assert canonical_json({"risk_score": 8.0, "cap_usd": 100.0, "percent": 15.5}) == (
        b'{"cap_usd":100,"percent":15.5,"risk_score":8}'
    )
    assert canonical_json({"nested": [{"x": 0.0}, 2.5]}) == b'{"nested":[{"x":0},2.5]}'


def test_signed_payload_bytes_match_json_stringify_form(envelope):
    data = canonical_json(envelope.signed_assessment)
    assert b'"risk_score":8,' in data
    assert b'"risk_score":8.0' not in data


def test_integer_form_of_payload_verifies(envelope, key):
    relayed = copy.deepcopy(envelope.signed_assessment)
    relayed["result"]["risk_score"] = 8
    assert verify_assessment(relayed, envelope.signature, key.public_key()).valid


@pytest.mark.parametrize(
    "field, value",
    [
        ("issuer", "evil.example"),
        ("assessment_id", "00000000-0000-0000-0000-000000000000"),
        ("issued_at", "2020-01-01T00:00:00Z"),
        ("expires_at", "2099-01-01T00:00:00Z"),
        ("registry_version", "9.9.9"),
        ("flags", []),
        ("clauses_summary", {"legal": 0, "returns": 0, "pricing": 0, "privacy": 0, "shipping": 0}),
        ("seller", {"domain": "evil.example", "url": None}),
        ("result", {}),
    ],
)
def test_any_top_level_change_is_signature_mismatch(envelope, key, field, value):
    tampered = dict(envelope.signed_assessment, **{field: value})
    result = verify_assessment(tampered, envelope.signature, key.public_key())
    assert not result.valid
    assert result.reason == "signature_mismatch"


def test_changed_version_is_rejected(envelope, key):
    tampered = dict(envelope.signed_assessment, version="1.1")
    result = verify_assessment(tampered, envelope.signature, key.public_key())
    assert not result.valid
    assert result.reason == "unsupported_version"


@pytest.mark.parametrize("expected_hash", [123, b"sha256:00", ["sha256:00"]])
def test_non_string_expected_hash_is_hash_mismatch(envelope, key, expected_hash):
    result = verify_assessment(
        envelope.signed_assessment, envelope.signature, key.public_key(), expected_hash=expected_hash
    )
    assert not result.valid
    assert result.reason == "hash_mismatch"


def test_standard_alphabet_signature_is_malformed(envelope, key):
    standard = envelope.signature.replace("-", "+").replace("_", "/")
    if standard == envelope.signature:
        standard = "+" + envelope.signature[1:]
    result = verify_assessment(envelope.signed_assessment, standard, key.public_key())
    assert result.reason == "malformed_signature"


@pytest.mark.parametrize("value", ["ab+c", "ab/c", "ab c", "a=b"])
def test_b64url_decode_rejects_foreign_characters(value):
    with pytest.raises(ValueError):
        b64url_decode(value)
