"""Signed assessment issuance and verification."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from policycheck.api.check import perform_analysis, validate_request
from policycheck.api.deps import get_signer, get_validator
from policycheck.core.config import Settings, get_settings
from policycheck.engine.hybrid import HybridValidator
from policycheck.schemas.analysis import AnalysisRequest, SignedAssessmentResponse, VerifyRequest
from policycheck.signing import AssessmentSigner, AssessmentSubject, VerificationResult, verify_assessment
from policycheck.utils.url_utils import get_domain

router = APIRouter(prefix="/v1", tags=["assessments"])
logger = logging.getLogger(__name__)


@router.post("/signed-assessment", response_model=SignedAssessmentResponse)
async def signed_assessment(
    body: AnalysisRequest,
    settings: Settings = Depends(get_settings),
    validator: HybridValidator = Depends(get_validator),
    signer: AssessmentSigner | None = Depends(get_signer),
) -> SignedAssessmentResponse:
    """Analyse, then return the result wrapped in a short-lived Ed25519-signed envelope."""
    if signer is None:
        raise HTTPException(status_code=503, detail="Signing key is not configured")
    seller_url, policy_text = validate_request(body)
    result = await perform_analysis(seller_url, policy_text, settings, validator)
    subject = AssessmentSubject(domain=get_domain(seller_url) if seller_url else "", url=seller_url)
    envelope = signer.sign(result, subject)
    base = settings.public_base_url.rstrip("/")
    return SignedAssessmentResponse(
        **envelope.model_dump(),
        verification_url=f"{base}/api/v1/verify",
        jwks_url=f"{base}/.well-known/jwks.json",
    )


@router.post("/verify", response_model=VerificationResult, response_model_exclude_none=True)
def verify(
    body: VerifyRequest,
    signer: AssessmentSigner | None = Depends(get_signer),
) -> VerificationResult:
    """Verify a signed assessment against this service's key. Always 200; see `valid` and `reason`."""
    if signer is None:
        raise HTTPException(status_code=503, detail="Signing key is not configured")
    result = verify_assessment(
        body.signed_assessment,
        body.signature,
        signer.public_key,
        expected_hash=body.signed_payload_hash,
    )
    logger.info("Verification of %s: valid=%s reason=%s", result.assessment_id, result.valid, result.reason)
    return result
