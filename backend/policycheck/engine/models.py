"""Pydantic models for findings, risk factors and the analysis result."""

from datetime import datetime, timezone
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from policycheck.engine.registry import Category, Severity

FoundIn = Literal["return_policy", "shipping_policy", "terms_of_service", "privacy_policy", "unknown"]
RiskLevel = Literal["low", "medium", "high", "critical", "unknown"]
Grade = Literal["A+", "A", "B+", "B", "C+", "C", "D+", "D", "F"]
AnalysisStatus = Literal["complete", "partial", "no_content", "text_provided"]
Confidence = Literal["high", "medium", "low", "none"]
AnalysisMethod = Literal["deterministic", "deterministic_plus_generative", "none"]

BOILERPLATE_NOTE = "standard_tos_boilerplate"

# Policy category (as fetched) -> found_in label on risk factors.
CATEGORY_TO_FOUND_IN: dict[str, FoundIn] = {
    "returns": "return_policy",
    "shipping": "shipping_policy",
    "terms": "terms_of_service",
    "privacy": "privacy_policy",
}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Fixed ISO-8601 form used everywhere: UTC, second precision, Z suffix."""
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class Span(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: int
    end: int


class Finding(BaseModel):
    """Raw extractor output: one clause type detected in one cleaned text."""

    model_config = ConfigDict(frozen=True)

    clause_id: str
    detail: str = ""
    facts: dict[str, Any] = Field(default_factory=dict)
    evidence: str = Field("", description="Sentence containing the match")
    span: Span
    rule_index: int = Field(0, description="Index of the matcher that fired, in priority order")


class RiskFactor(BaseModel):
    """A detected clause as reported to callers and used for scoring."""

    model_config = ConfigDict(frozen=True)

    factor: str = Field(..., description="Clause type identifier")
    severity: Severity
    detail: str = ""
    source: Category = Field(..., description="Registry category of the clause")
    found_in: FoundIn = "unknown"
    severity_note: Optional[str] = None
    facts: dict[str, Any] = Field(default_factory=dict)
    evidence: str = ""
    origin: Literal["deterministic", "generative"] = "deterministic"
    review: Optional[Literal["confirmed", "disputed"]] = None
    suggested_severity: Optional[Severity] = None


class ScoreCard(BaseModel):
    model_config = ConfigDict(frozen=True)

    risk_score: Optional[float]
    risk_level: RiskLevel
    grade: Optional[Grade]
    buyer_protection_score: Optional[int]


class AnalysisResult(BaseModel):
    """Outcome of one analysis request. Never mutated after construction."""

    model_config = ConfigDict(frozen=True)

    risk_score: Optional[float] = Field(None, ge=0, le=10)
    risk_level: RiskLevel = "unknown"
    buyer_protection_rating: Optional[Grade] = None
    buyer_protection_score: Optional[int] = Field(None, ge=0, le=100)
    risk_factors: tuple[RiskFactor, ...] = ()
    positives: tuple[str, ...] = ()
    summary: str = ""
    analysis_status: AnalysisStatus
    confidence: Confidence
    analysis_method: AnalysisMethod
    policies_analyzed: dict[str, str] = Field(default_factory=dict)
    analyzed_at: str = Field(default_factory=lambda: format_timestamp(utc_now()))

    @computed_field  # type: ignore[prop-decorator]
    @property
    def flags(self) -> list[str]:
        seen: list[str] = []
        for rf in self.risk_factors:
            if rf.factor not in seen:
                seen.append(rf.factor)
        return seen

    @model_validator(mode="after")
    def _no_content_has_no_scores(self) -> "AnalysisResult":
        if self.analysis_status == "no_content" and (
            self.risk_score is not None
            or self.buyer_protection_score is not None
            or self.buyer_protection_rating is not None
        ):
            raise ValueError("no_content results must not carry scores")
        return self

    def with_scorecard(self, card: ScoreCard, **changes: Any) -> "AnalysisResult":
        """Copy with the four score fields replaced from *card* (plus any other changes)."""
        return self.model_copy(
            update={
                "risk_score": card.risk_score,
                "risk_level": card.risk_level,
                "buyer_protection_rating": card.grade,
                "buyer_protection_score": card.buyer_protection_score,
                **changes,
            }
        )


# -----------------------------
# Generative review reply
# -----------------------------

class ReviewedFactor(BaseModel):
    factor: str = Field(..., description="Clause type id from the allowed list")
    confirmed: bool = Field(True, description="False when the quoted text does not support the finding")
    severity: Optional[Severity] = Field(None, description="Suggested severity, if different from the registry's")
    found_in: FoundIn = "unknown"
    detail: str = Field("", description="One short sentence, facts only")


class AdditionalFactor(BaseModel):
    factor: str = Field(..., description="Clause type id from the allowed list")
    found_in: FoundIn = "unknown"
    detail: str = ""
    evidence: str = Field("", description="Direct quote from the policy text")


class GenerativeReview(BaseModel):
    """Structured reply expected from the generative model."""

    validated: list[ReviewedFactor] = Field(default_factory=list)
    additional: list[AdditionalFactor] = Field(default_factory=list)
    positives: list[str] = Field(default_factory=list)
