"""Versioned clause-type registry: the stable taxonomy every other component keys on."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Category = Literal["legal", "returns", "pricing", "privacy", "shipping"]
Severity = Literal["high", "medium", "low"]

# Bump the minor version for additions, the major version for removals or renames.
REGISTRY_VERSION = "1.1.0"


class ClauseType(BaseModel):
    """One detectable clause type. `id` is a contract key, `description` is display text."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Stable snake_case identifier")
    category: Category
    description: str
    typical_severity: Severity


class ClauseRegistry:
    """Immutable, ordered set of clause types published under a single version."""

    def __init__(self, version: str, clause_types: Iterable[ClauseType]) -> None:
        table: dict[str, ClauseType] = {}
        for clause_type in clause_types:
            if clause_type.id in table:
                raise ValueError(f"Duplicate clause type id: {clause_type.id}")
            table[clause_type.id] = clause_type
        self._version = version
        self._table: Mapping[str, ClauseType] = MappingProxyType(table)

    @property
    def version(self) -> str:
        return self._version

    def __contains__(self, clause_id: object) -> bool:
        return clause_id in self._table

    def __len__(self) -> int:
        return len(self._table)

    def get(self, clause_id: str) -> ClauseType:
        """Return the clause type for *clause_id*; KeyError if it is not registered."""
        return self._table[clause_id]

    def ids(self) -> tuple[str, ...]:
        return tuple(self._table)

    def list_clause_types(self) -> tuple[ClauseType, ...]:
        return tuple(self._table.values())

    def order_of(self, clause_id: str) -> int:
        """Position of *clause_id* in the published table (used to order findings)."""
        return self.ids().index(clause_id)

    def as_table(self) -> dict:
        """JSON table served by the clause-registry endpoint."""
        return {
            "version": self._version,
            "clause_types": {
                ct.id: {
                    "category": ct.category,
                    "description": ct.description,
                    "typical_severity": ct.typical_severity,
                }
                for ct in self._table.values()
            },
        }


def _ct(clause_id: str, category: Category, description: str, severity: Severity) -> ClauseType:
    return ClauseType(id=clause_id, category=category, description=description, typical_severity=severity)


DEFAULT_REGISTRY = ClauseRegistry(
    REGISTRY_VERSION,
    [
        # legal
        _ct("binding_arbitration", "legal", "Disputes must be resolved through binding arbitration, not courts", "high"),
        _ct("class_action_waiver", "legal", "Buyer waives right to participate in class action lawsuits", "high"),
        _ct("liability_cap", "legal", "Seller limits maximum liability, often to purchase price or a fixed amount", "medium"),
        _ct("termination_at_will", "legal", "Seller can terminate account or service at any time without cause", "medium"),
        _ct("jurisdiction_clause", "legal", "Disputes must be resolved in a specific jurisdiction chosen by seller", "low"),
        _ct("auto_renewal", "legal", "Subscription or service automatically renews unless cancelled", "low"),
        _ct("no_warranty", "legal", "Products are sold as-is without any warranty", "medium"),
        # returns
        _ct("no_returns", "returns", "Seller does not accept returns at all", "high"),
        _ct("final_sale", "returns", "All sales are final, no refunds or exchanges", "high"),
        _ct("no_refund", "returns", "All sales are final, no refunds provided", "high"),
        _ct("no_exchanges", "returns", "Seller does not accept exchanges", "high"),
        _ct("no_refund_opened", "returns", "Opened or used items cannot be returned for a refund", "high"),
        _ct("restocking_fee", "returns", "A percentage fee is deducted from refund on returned items", "medium"),
        _ct("return_shipping_fee", "returns", "Buyer must pay shipping costs to return items", "medium"),
        _ct("short_return_window", "returns", "Return window is shorter than the industry standard 30 days", "low"),
        _ct("exchange_only", "returns", "Returns result in exchange or store credit only, no cash refund", "medium"),
        _ct("store_credit_only", "returns", "Refunds issued as store credit rather than original payment method", "medium"),
        _ct("non_refundable_categories", "returns", "Certain product categories are excluded from returns/refunds", "medium"),
        # pricing
        _ct("price_adjustment_clause", "pricing", "Seller reserves right to adjust prices after purchase", "high"),
        _ct("hidden_fees", "pricing", "Additional fees not clearly disclosed upfront", "high"),
        # privacy
        _ct("data_selling", "privacy", "Seller sells or shares personal data with third parties for profit", "high"),
        _ct("broad_data_collection", "privacy", "Seller collects more personal data than necessary for the transaction", "medium"),
        # shipping
        _ct("no_tracking", "shipping", "No shipment tracking provided", "medium"),
        _ct("long_handling_time", "shipping", "Unusually long handling or processing time before shipment", "low"),
    ],
)


def list_clause_types(registry: ClauseRegistry = DEFAULT_REGISTRY) -> tuple[ClauseType, ...]:
    """Return every clause type of *registry* in published order."""
    return registry.list_clause_types()
