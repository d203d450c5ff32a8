"""Request and response schemas for analysis, signing and verification."""

from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field

from policycheck.engine.models import (
    AnalysisMethod,
    AnalysisResult,
    AnalysisStatus,
    Confidence,
    Grade,
    RiskFactor,
    RiskLevel,
)
from policycheck.signing import SignedEnvelope

MAX_POLICY_TEXT_CHARS = 500_000


class AnalysisRequest(BaseModel):
    """Body for /check and /v1/signed-assessment. At least one of the two fields is required."""

    seller_url: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("seller_url", "url"),
        description="Seller storefront URL; policy pages are discovered from it",
    )
    policy_text: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("policy_text", "text"),
        max_length=MAX_POLICY_TEXT_CHARS,
        description="Raw policy text; analysed directly when present",
    )


class CheckResponse(BaseModel):
    """Flat analysis response."""

    seller_url: Optional[str] = None
    risk_score: Optional[float] = None
    risk_level: RiskLevel
    buyer_protection_rating: Optional[Grade] = None
    buyer_protection_score: Optional[int] = None
    risk_factors: list[RiskFactor] = Field(default_factory=list)
    positives: list[str] = Field(default_factory=list)
    flags: list[str] = Field(default_factory=list, description="Clause ids, de-duplicated")
    summary: str = ""
    analysis_status: AnalysisStatus
    confidence: Confidence
    analysis_method: AnalysisMethod
    policies_analyzed: dict[str, str] = Field(default_factory=dict)
    analyzed_at: str

    @classmethod
    def from_result(cls, result: AnalysisResult, seller_url: Optional[str]) -> "CheckResponse":
        return cls.model_validate({**result.model_dump(), "seller_url": seller_url})


class SignedAssessmentResponse(SignedEnvelope):
    verification_url: str = Field(..., description="POST the envelope here to verify it")
    jwks_url: str = Field(..., description="Public key set for offline verification")


class VerifyRequest(BaseModel):
    """Any JSON is accepted; malformed input comes back as a verification reason code."""

    signed_assessment: Any = None
    signature: Any = None
    signed_payload_hash: Optional[str] = None
