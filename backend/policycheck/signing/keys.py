"""Ed25519 key loading and JWKS publication."""

import logging
import secrets
from functools import lru_cache

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey, Ed25519PublicKey
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from policycheck.signing.canonical import b64url_decode, b64url_encode

logger = logging.getLogger(__name__)

SEED_BYTES = 32


class SigningKeyError(ValueError):
    """A configured or published key could not be loaded."""


def generate_signing_key_hex() -> str:
    """New random 32-byte seed, hex encoded, suitable for POLICYCHECK_SIGNING_KEY."""
    return secrets.token_hex(SEED_BYTES)


def load_private_key(seed_hex: str) -> Ed25519PrivateKey:
    try:
        seed = bytes.fromhex(seed_hex.strip())
    except ValueError as e:
        raise SigningKeyError("Signing key must be hex encoded") from e
    if len(seed) != SEED_BYTES:
        raise SigningKeyError(f"Signing key must be {SEED_BYTES} bytes, got {len(seed)}")
    return Ed25519PrivateKey.from_private_bytes(seed)


def public_key_bytes(public_key: Ed25519PublicKey) -> bytes:
    return public_key.public_bytes(Encoding.Raw, PublicFormat.Raw)


def jwk(public_key: Ed25519PublicKey, kid: str) -> dict[str, str]:
    return {
        "kty": "OKP",
        "crv": "Ed25519",
        "use": "sig",
        "kid": kid,
        "x": b64url_encode(public_key_bytes(public_key)),
    }


def jwks(public_key: Ed25519PublicKey, kid: str) -> dict[str, list[dict[str, str]]]:
    """Public key set as served at /.well-known/jwks.json."""
    return {"keys": [jwk(public_key, kid)]}


def public_key_from_jwk(entry: dict) -> Ed25519PublicKey:
    """Load a verifier key from a published JWK entry."""
    if entry.get("kty") != "OKP" or entry.get("crv") != "Ed25519":
        raise SigningKeyError("JWK is not an Ed25519 OKP key")
    try:
        raw = b64url_decode(entry.get("x", ""))
        return Ed25519PublicKey.from_public_bytes(raw)
    except ValueError as e:
        raise SigningKeyError(f"Invalid JWK public key: {e}") from e


@lru_cache
def resolve_signing_key(seed_hex: str | None, environment: str) -> Ed25519PrivateKey | None:
    """
    Configured key if present. In development an ephemeral key is generated so signing works
    out of the box; signatures made with it do not survive a restart. Elsewhere None.
    """
    if seed_hex:
        return load_private_key(seed_hex)
    if environment == "development":
        logger.warning("No signing key configured; using an ephemeral development key")
        return Ed25519PrivateKey.generate()
    return None
