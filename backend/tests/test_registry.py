"""Tests for the clause registry and its consistency with the rule table."""

from __future__ import annotations

import pytest

from policycheck.engine.registry import (
    DEFAULT_REGISTRY,
    REGISTRY_VERSION,
    ClauseRegistry,
    ClauseType,
    list_clause_types,
)
from policycheck.engine.rules import CLAUSE_RULES, check_rules


def test_list_clause_types_is_stable():
    first = list_clause_types()
    second = list_clause_types()
    assert first == second
    assert [ct.id for ct in first] == list(DEFAULT_REGISTRY.ids())


def test_default_registry_contents():
    assert DEFAULT_REGISTRY.version == REGISTRY_VERSION == "1.1.0"
    assert len(DEFAULT_REGISTRY) == 24
    assert DEFAULT_REGISTRY.get("no_returns").typical_severity == "high"
    assert DEFAULT_REGISTRY.get("jurisdiction_clause").category == "legal"
    assert "no_exchanges" in DEFAULT_REGISTRY
    assert "no_warranty" in DEFAULT_REGISTRY
    assert "made_up_clause" not in DEFAULT_REGISTRY


def test_get_unknown_id_raises():
    with pytest.raises(KeyError):
        DEFAULT_REGISTRY.get("made_up_clause")


def test_as_table_shape():
    table = DEFAULT_REGISTRY.as_table()
    assert table["version"] == "1.1.0"
    entry = table["clause_types"]["binding_arbitration"]
    assert entry == {
        "category": "legal",
        "description": "Disputes must be resolved through binding arbitration, not courts",
        "typical_severity": "high",
    }
    assert list(table["clause_types"]) == list(DEFAULT_REGISTRY.ids())


def test_duplicate_ids_rejected():
    ct = ClauseType(id="x", category="legal", description="x", typical_severity="low")
    with pytest.raises(ValueError, match="Duplicate"):
        ClauseRegistry("0.0.1", [ct, ct])


def test_clause_type_is_frozen():
    ct = DEFAULT_REGISTRY.get("no_refund")
    with pytest.raises(Exception):
        ct.typical_severity = "low"


def test_every_rule_targets_a_registered_clause():
    check_rules(CLAUSE_RULES, DEFAULT_REGISTRY.ids())
    assert {r.clause_id for r in CLAUSE_RULES} <= set(DEFAULT_REGISTRY.ids())


def test_check_rules_rejects_unknown_ids():
    small = ClauseRegistry("0.1.0", [DEFAULT_REGISTRY.get("no_returns")])
    with pytest.raises(ValueError, match="unregistered"):
        check_rules(CLAUSE_RULES, small.ids())
