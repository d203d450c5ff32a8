"""Public key set for verifying signed assessments offline."""

from fastapi import APIRouter, Depends, HTTPException, Response

from policycheck.api.deps import get_signer
from policycheck.core.config import Settings, get_settings
from policycheck.signing import AssessmentSigner, jwks

router = APIRouter(tags=["well-known"])

JWKS_CACHE_CONTROL = "public, max-age=3600"


@router.get("/.well-known/jwks.json")
def jwks_document(
    response: Response,
    settings: Settings = Depends(get_settings),
    signer: AssessmentSigner | None = Depends(get_signer),
) -> dict:
    if signer is None:
        raise HTTPException(status_code=503, detail="Signing key is not configured")
    response.headers["Cache-Control"] = JWKS_CACHE_CONTROL
    return jwks(signer.public_key, settings.signing_key_id)
