"""
Signed assessments: a canonical JSON payload wrapping an `AnalysisResult`, signed with Ed25519.

Verification never raises. It reports one reason code, checked in this order: structure,
version, signature encoding, payload hash, signature, expiry. A tampered payload is therefore
always reported as tampered, never as merely expired.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Literal, Optional

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey, Ed25519PublicKey
from pydantic import BaseModel, ConfigDict, Field

from policycheck.engine.models import AnalysisResult, format_timestamp, utc_now
from policycheck.engine.registry import DEFAULT_REGISTRY, ClauseRegistry
from policycheck.signing.canonical import b64url_decode, b64url_encode, canonical_json, hashes_match, payload_hash

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "1.0"
DEFAULT_TTL_SECONDS = 300
SIGNATURE_BYTES = 64

REQUIRED_FIELDS = (
    "version",
    "issuer",
    "assessment_id",
    "issued_at",
    "expires_at",
    "seller",
    "registry_version",
    "flags",
    "result",
)

VerificationReason = Literal[
    "missing_fields",
    "malformed_assessment",
    "unsupported_version",
    "malformed_signature",
    "hash_mismatch",
    "signature_mismatch",
    "expired",
]


class AssessmentSubject(BaseModel):
    model_config = ConfigDict(frozen=True)

    domain: str = Field(..., description="Registered domain of the seller")
    url: Optional[str] = None


class SignedEnvelope(BaseModel):
    signed_assessment: dict[str, Any]
    signature: str = Field(..., description="Unpadded base64url Ed25519 signature of the canonical payload")
    signed_payload_hash: str = Field(..., description="sha256:<hex> of the canonical payload bytes")


class VerificationResult(BaseModel):
    valid: bool
    reason: Optional[VerificationReason] = None
    assessment_id: Optional[str] = None
    seller_domain: Optional[str] = None
    expires_at: Optional[str] = None
    verified_at: Optional[str] = None


def parse_timestamp(value: str) -> datetime:
    return datetime.strptime(value, "%Y-%m-%dT%H:%M:%SZ").replace(tzinfo=timezone.utc)


def clauses_summary(result: AnalysisResult, registry: ClauseRegistry = DEFAULT_REGISTRY) -> dict[str, int]:
    """Number of risk factors per registry category, every category present."""
    counts: dict[str, int] = {}
    for clause_type in registry.list_clause_types():
        counts.setdefault(clause_type.category, 0)
    for factor in result.risk_factors:
        counts[factor.source] = counts.get(factor.source, 0) + 1
    return counts


class AssessmentSigner:
    def __init__(
        self,
        private_key: Ed25519PrivateKey,
        *,
        issuer: str,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        registry: ClauseRegistry = DEFAULT_REGISTRY,
    ) -> None:
        self._key = private_key
        self._issuer = issuer
        self._ttl = timedelta(seconds=ttl_seconds)
        self._registry = registry

    @property
    def public_key(self) -> Ed25519PublicKey:
        return self._key.public_key()

    def build_payload(self, result: AnalysisResult, subject: AssessmentSubject, *, now: datetime) -> dict[str, Any]:
        return {
            "version": SCHEMA_VERSION,
            "issuer": self._issuer,
            "assessment_id": str(uuid.uuid4()),
            "issued_at": format_timestamp(now),
            "expires_at": format_timestamp(now + self._ttl),
            "seller": {"domain": subject.domain, "url": subject.url},
            "registry_version": self._registry.version,
            "flags": list(result.flags),
            "clauses_summary": clauses_summary(result, self._registry),
            "result": result.model_dump(mode="json"),
        }

    def sign(self, result: AnalysisResult, subject: AssessmentSubject, *, now: datetime | None = None) -> SignedEnvelope:
        payload = self.build_payload(result, subject, now=now or utc_now())
        data = canonical_json(payload)
        signature = self._key.sign(data)
        logger.info("Signed assessment %s for %s", payload["assessment_id"], subject.domain)
        return SignedEnvelope(
            signed_assessment=payload,
            signature=b64url_encode(signature),
            signed_payload_hash=payload_hash(data),
        )


def _failure(reason: VerificationReason, now: datetime, assessment: dict[str, Any] | None = None) -> VerificationResult:
    details = _identity(assessment) if assessment is not None else {}
    return VerificationResult(valid=False, reason=reason, verified_at=format_timestamp(now), **details)


def _identity(assessment: dict[str, Any]) -> dict[str, Optional[str]]:
    seller = assessment.get("seller")
    domain = seller.get("domain") if isinstance(seller, dict) else None
    return {
        "assessment_id": assessment.get("assessment_id") if isinstance(assessment.get("assessment_id"), str) else None,
        "seller_domain": domain if isinstance(domain, str) else None,
        "expires_at": assessment.get("expires_at") if isinstance(assessment.get("expires_at"), str) else None,
    }


def verify_assessment(
    signed_assessment: Any,
    signature: Any,
    public_key: Ed25519PublicKey,
    *,
    now: datetime | None = None,
    expected_hash: str | None = None,
) -> VerificationResult:
    """Check a signed assessment against *public_key*. Total: every input yields a result."""
    now = now or utc_now()
    if signed_assessment is None or signature is None or signature == "":
        return _failure("missing_fields", now)
    if not isinstance(signed_assessment, dict):
        return _failure("malformed_assessment", now)
    if any(name not in signed_assessment for name in REQUIRED_FIELDS):
        return _failure("missing_fields", now)
    if signed_assessment.get("version") != SCHEMA_VERSION:
        return _failure("unsupported_version", now)

    try:
        raw_signature = b64url_decode(signature)
    except ValueError:
        return _failure("malformed_signature", now)
    if len(raw_signature) != SIGNATURE_BYTES:
        return _failure("malformed_signature", now)

    try:
        data = canonical_json(signed_assessment)
    except (TypeError, ValueError):
        return _failure("malformed_assessment", now)

    if expected_hash is not None and not hashes_match(expected_hash, payload_hash(data)):
        return _failure("hash_mismatch", now, signed_assessment)

    try:
        public_key.verify(raw_signature, data)
    except InvalidSignature:
        return _failure("signature_mismatch", now, signed_assessment)

    expires_at = signed_assessment.get("expires_at")
    try:
        expiry = parse_timestamp(expires_at)
    except (TypeError, ValueError):
        return _failure("malformed_assessment", now, signed_assessment)
    if now > expiry:
        return _failure("expired", now, signed_assessment)

    return VerificationResult(valid=True, verified_at=format_timestamp(now), **_identity(signed_assessment))
