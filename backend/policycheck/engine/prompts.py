"""Prompt for the generative review of deterministic findings."""

import json
from collections.abc import Iterable

from policycheck.engine.models import RiskFactor

MAX_PROMPT_TEXT_CHARS = 15_000

POLICY_REVIEW_PROMPT = """
You are reviewing a consumer-protection analysis of an online seller's policies.

A rule-based extractor has already found the clauses listed under FINDINGS. Your job:
• For each finding, set "confirmed" to false if the policy text does not actually support it.
• Optionally suggest a different severity (high, medium, low) for a finding.
• List clauses the extractor missed under "additional", quoting evidence directly from the text.
• List buyer-friendly terms (e.g. "Free return shipping") under "positives".

Rules:
• Use ONLY these clause ids: {allowed_ids}
• "found_in" must be one of: return_policy, shipping_policy, terms_of_service, privacy_policy, unknown
• Never invent clauses that are not in the text.
• Return ONLY valid JSON matching the schema:
{{
  "validated": [{{"factor": "...", "confirmed": true, "severity": null, "found_in": "...", "detail": "..."}}],
  "additional": [{{"factor": "...", "found_in": "...", "detail": "...", "evidence": "..."}}],
  "positives": ["..."]
}}

FINDINGS:
{findings}

POLICY TEXT:
{policy_text}
"""


def _findings_json(factors: Iterable[RiskFactor]) -> str:
    seed = [
        {"factor": f.factor, "severity": f.severity, "found_in": f.found_in, "evidence": f.evidence}
        for f in factors
    ]
    return json.dumps(seed, indent=2, ensure_ascii=False)


def build_review_prompt(text: str, factors: Iterable[RiskFactor], allowed_ids: Iterable[str]) -> str:
    """Fill the review prompt; policy text is truncated to MAX_PROMPT_TEXT_CHARS."""
    return POLICY_REVIEW_PROMPT.format(
        allowed_ids=", ".join(allowed_ids),
        findings=_findings_json(factors),
        policy_text=text[:MAX_PROMPT_TEXT_CHARS],
    )
