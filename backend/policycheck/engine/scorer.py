"""Risk scoring: severity weights, level and grade thresholds, boilerplate discount."""

from collections.abc import Iterable

from policycheck.engine.models import BOILERPLATE_NOTE, Finding, FoundIn, RiskFactor, ScoreCard
from policycheck.engine.registry import DEFAULT_REGISTRY, ClauseRegistry, Severity

SEVERITY_WEIGHTS: dict[str, float] = {"high": 2.0, "medium": 1.0, "low": 0.5}
MAX_SCORE = 10.0

# Clauses nearly every terms-of-service page carries; fetched from a ToS page they count as low.
BOILERPLATE_CLAUSES = frozenset(
    {"binding_arbitration", "class_action_waiver", "termination_at_will", "liability_cap"}
)

_LEVELS = ((2.0, "low"), (6.0, "medium"), (8.0, "high"))
_GRADES = ((1.0, "A+"), (2.0, "A"), (3.0, "B+"), (4.0, "B"), (5.0, "C+"), (6.0, "C"), (7.0, "D+"), (8.0, "D"))


def severity_weight(severity: Severity) -> float:
    return SEVERITY_WEIGHTS[severity]


def risk_level_for(score: float) -> str:
    for ceiling, level in _LEVELS:
        if score <= ceiling:
            return level
    return "critical"


def grade_for(score: float) -> str:
    for ceiling, grade in _GRADES:
        if score <= ceiling:
            return grade
    return "F"


def buyer_protection_for(score: float) -> int:
    return max(0, min(100, round(100 - score * 10)))


def score(factors: Iterable[RiskFactor]) -> ScoreCard:
    """Sum severity weights, cap at 10, round to one decimal; derive level, grade and protection score."""
    total = sum(severity_weight(f.severity) for f in factors)
    risk_score = round(min(total, MAX_SCORE), 1)
    return ScoreCard(
        risk_score=risk_score,
        risk_level=risk_level_for(risk_score),
        grade=grade_for(risk_score),
        buyer_protection_score=buyer_protection_for(risk_score),
    )


def null_scorecard() -> ScoreCard:
    return ScoreCard(risk_score=None, risk_level="unknown", grade=None, buyer_protection_score=None)


def to_risk_factors(
    findings: Iterable[Finding],
    found_in: FoundIn = "unknown",
    *,
    registry: ClauseRegistry = DEFAULT_REGISTRY,
) -> tuple[RiskFactor, ...]:
    """Attach registry category and typical severity to raw findings."""
    factors = []
    for finding in findings:
        clause_type = registry.get(finding.clause_id)
        factors.append(
            RiskFactor(
                factor=finding.clause_id,
                severity=clause_type.typical_severity,
                detail=finding.detail or clause_type.description,
                source=clause_type.category,
                found_in=found_in,
                facts=finding.facts,
                evidence=finding.evidence,
            )
        )
    return tuple(factors)


def apply_boilerplate_discount(factors: Iterable[RiskFactor], *, url_sourced: bool) -> tuple[RiskFactor, ...]:
    """
    Downgrade standard ToS boilerplate to low severity.
    Only applies to text fetched from a seller's terms page; caller-supplied text is never discounted.
    """
    factors = tuple(factors)
    if not url_sourced:
        return factors
    return tuple(
        f.model_copy(update={"severity": "low", "severity_note": BOILERPLATE_NOTE})
        if f.factor in BOILERPLATE_CLAUSES and f.found_in == "terms_of_service"
        else f
        for f in factors
    )
