"""Deterministic clause extraction: run the rule table over policy text."""

import logging

from policycheck.engine.models import Finding, Span
from policycheck.engine.normalize import clean_text
from policycheck.engine.registry import DEFAULT_REGISTRY, ClauseRegistry
from policycheck.engine.rules import CLAUSE_RULES, POSITIVE_RULES, ClauseRule, PositiveRule, check_rules

logger = logging.getLogger(__name__)

check_rules(CLAUSE_RULES, DEFAULT_REGISTRY.ids())


def extract(
    text: str,
    *,
    registry: ClauseRegistry = DEFAULT_REGISTRY,
    rules: tuple[ClauseRule, ...] = CLAUSE_RULES,
) -> tuple[Finding, ...]:
    """
    Detect clause types in *text*.
    At most one finding per clause type, ordered by the registry's published order.
    Same input, same registry and same rules always produce the same findings.
    """
    if rules is not CLAUSE_RULES or registry is not DEFAULT_REGISTRY:
        check_rules(rules, registry.ids())
    cleaned = clean_text(text)
    if not cleaned:
        return ()

    findings: list[Finding] = []
    for rule in rules:
        hit = rule.evaluate(cleaned)
        if hit is None:
            continue
        findings.append(
            Finding(
                clause_id=rule.clause_id,
                detail=rule.describe(hit.facts),
                facts=hit.facts,
                evidence=hit.evidence,
                span=Span(start=hit.start, end=hit.end),
                rule_index=hit.rule_index,
            )
        )
    findings.sort(key=lambda f: registry.order_of(f.clause_id))
    logger.debug("Extracted %d findings: %s", len(findings), [f.clause_id for f in findings])
    return tuple(findings)


def extract_positives(text: str, *, rules: tuple[PositiveRule, ...] = POSITIVE_RULES) -> tuple[str, ...]:
    """Buyer-friendly terms found in *text*, in rule order, without duplicates."""
    cleaned = clean_text(text)
    positives: list[str] = []
    for rule in rules:
        label = rule.evaluate(cleaned)
        if label and label not in positives:
            positives.append(label)
    return tuple(positives)
