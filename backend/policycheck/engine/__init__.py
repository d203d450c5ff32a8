"""Policy analysis engine: clause registry, deterministic extraction, scoring and generative review."""

from policycheck.engine.extractor import extract, extract_positives
from policycheck.engine.hybrid import HybridValidator, should_enhance
from policycheck.engine.models import AnalysisResult, Finding, RiskFactor, ScoreCard
from policycheck.engine.pipeline import analyze_policies, analyze_text, run_analysis
from policycheck.engine.registry import DEFAULT_REGISTRY, ClauseRegistry, ClauseType, list_clause_types
from policycheck.engine.scorer import apply_boilerplate_discount, null_scorecard, score

__all__ = [
    "AnalysisResult",
    "ClauseRegistry",
    "ClauseType",
    "DEFAULT_REGISTRY",
    "Finding",
    "HybridValidator",
    "RiskFactor",
    "ScoreCard",
    "analyze_policies",
    "analyze_text",
    "apply_boilerplate_discount",
    "extract",
    "extract_positives",
    "list_clause_types",
    "null_scorecard",
    "run_analysis",
    "score",
    "should_enhance",
]
