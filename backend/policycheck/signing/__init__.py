"""Ed25519-signed, independently verifiable assessments."""

from policycheck.signing.canonical import canonical_json, payload_hash
from policycheck.signing.keys import (
    SigningKeyError,
    generate_signing_key_hex,
    jwks,
    load_private_key,
    public_key_from_jwk,
    resolve_signing_key,
)
from policycheck.signing.protocol import (
    SCHEMA_VERSION,
    AssessmentSigner,
    AssessmentSubject,
    SignedEnvelope,
    VerificationResult,
    verify_assessment,
)

__all__ = [
    "AssessmentSigner",
    "AssessmentSubject",
    "SCHEMA_VERSION",
    "SignedEnvelope",
    "SigningKeyError",
    "VerificationResult",
    "canonical_json",
    "generate_signing_key_hex",
    "jwks",
    "load_private_key",
    "payload_hash",
    "public_key_from_jwk",
    "resolve_signing_key",
    "verify_assessment",
]
