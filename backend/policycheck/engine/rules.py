"""
Rule table for deterministic clause extraction.

Each clause type owns one `ClauseRule`: an ordered tuple of matchers (first hit wins and
supplies the facts), optional `unless` guards whose affirmative hits veto the rule, and an
optional predicate over the extracted facts.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Optional

from policycheck.engine.normalize import parse_amount, parse_int, sentence_around

FactFn = Callable[["re.Match[str]", str], dict[str, Any]]
DescribeFn = Callable[[dict[str, Any]], str]

# A negation word up to three words before a hit turns "we share ... with third parties"
# into "we do not share ...".
_NEGATED_TAIL = re.compile(
    r"(?:\b(?:not|never|no|without|cannot)|n't)\s+(?:[\w'-]+\s+){0,3}$",
    re.IGNORECASE,
)
_NEGATION_WINDOW = 48


def _rx(pattern: str) -> "re.Pattern[str]":
    return re.compile(pattern, re.IGNORECASE)


def is_negated(text: str, start: int) -> bool:
    """True when the words right before *start* negate whatever begins there."""
    return bool(_NEGATED_TAIL.search(text[max(0, start - _NEGATION_WINDOW):start]))


@dataclass(frozen=True)
class Matcher:
    pattern: "re.Pattern[str]"
    facts: Optional[FactFn] = None
    negatable: bool = False

    def first_hit(self, text: str) -> Optional["re.Match[str]"]:
        for match in self.pattern.finditer(text):
            if self.negatable and is_negated(text, match.start()):
                continue
            return match
        return None


@dataclass(frozen=True)
class Hit:
    """A rule that fired: which matcher, where, and the facts it extracted."""

    rule_index: int
    start: int
    end: int
    facts: dict[str, Any]
    evidence: str


@dataclass(frozen=True)
class ClauseRule:
    clause_id: str
    matchers: tuple[Matcher, ...]
    describe: DescribeFn
    unless: tuple[Matcher, ...] = ()
    requires: Optional[Callable[[dict[str, Any]], bool]] = None

    def evaluate(self, text: str) -> Optional[Hit]:
        """Run the rule over cleaned *text*; return the winning hit or None."""
        if any(guard.first_hit(text) for guard in self.unless):
            return None
        for index, matcher in enumerate(self.matchers):
            match = matcher.first_hit(text)
            if match is None:
                continue
            facts = matcher.facts(match, text) if matcher.facts else {}
            if self.requires is not None and not self.requires(facts):
                return None
            return Hit(
                rule_index=index,
                start=match.start(),
                end=match.end(),
                facts=facts,
                evidence=sentence_around(text, match.start(), match.end()),
            )
        return None


@dataclass(frozen=True)
class PositiveRule:
    key: str
    matchers: tuple[Matcher, ...]
    describe: DescribeFn
    requires: Optional[Callable[[dict[str, Any]], bool]] = None

    def evaluate(self, text: str) -> Optional[str]:
        for matcher in self.matchers:
            match = matcher.first_hit(text)
            if match is None:
                continue
            facts = matcher.facts(match, text) if matcher.facts else {}
            if self.requires is not None and not self.requires(facts):
                return None
            return self.describe(facts)
        return None


def _m(pattern: str, facts: Optional[FactFn] = None, *, negatable: bool = False) -> Matcher:
    return Matcher(_rx(pattern), facts, negatable)


def _fixed(text: str) -> DescribeFn:
    return lambda _facts: text


def _usd(amount: float) -> str:
    return f"${amount:,.0f}" if float(amount).is_integer() else f"${amount:,.2f}"


def _group(match: "re.Match[str]", name: str) -> Optional[str]:
    return match.groupdict().get(name)


# ---------------------------------------------------------------------------
# Fact extractors
# ---------------------------------------------------------------------------

_ARBITRATION_PROVIDER = _rx(
    r"\b(JAMS|AAA|ICC|American\s+Arbitration\s+Association"
    r"|Judicial\s+Arbitration\s+and\s+Mediation\s+Services"
    r"|International\s+Chamber\s+of\s+Commerce)\b"
)
_PROVIDER_NAMES = {
    "jams": "JAMS",
    "judicial arbitration and mediation services": "JAMS",
    "aaa": "AAA",
    "american arbitration association": "AAA",
    "icc": "ICC",
    "international chamber of commerce": "ICC",
}
_OPT_OUT = (
    _rx(r"\bopt[-\s]?out\b[^.\d]{0,60}?\b(\d{1,3})\s*(?:calendar\s+)?days?\b"),
    _rx(r"\b(\d{1,3})\s*(?:calendar\s+)?days?\s+to\s+opt[-\s]?out\b"),
)


def _arbitration_facts(_match: "re.Match[str]", text: str) -> dict[str, Any]:
    provider = None
    m = _ARBITRATION_PROVIDER.search(text)
    if m:
        provider = _PROVIDER_NAMES.get(re.sub(r"\s+", " ", m.group(1)).lower())
    opt_out_days = None
    for pattern in _OPT_OUT:
        m = pattern.search(text)
        if m:
            opt_out_days = parse_int(m.group(1))
            break
    return {"provider": provider, "opt_out_days": opt_out_days}


def _describe_arbitration(facts: dict[str, Any]) -> str:
    detail = "Binding arbitration required for disputes"
    if facts.get("provider"):
        detail += f" ({facts['provider']})"
    detail += "."
    if facts.get("opt_out_days") is not None:
        detail += f" {facts['opt_out_days']}-day opt-out window."
    return detail


def _cap_facts(match: "re.Match[str]", _text: str) -> dict[str, Any]:
    return {"cap_usd": parse_amount(_group(match, "amount"))}


def _describe_cap(facts: dict[str, Any]) -> str:
    if facts.get("cap_usd") is not None:
        return f"Seller liability capped at {_usd(facts['cap_usd'])}."
    return "Seller liability is capped."


def _place_facts(match: "re.Match[str]", _text: str) -> dict[str, Any]:
    place = _group(match, "place")
    return {"governing_law": place.strip() if place else None}


def _describe_place(facts: dict[str, Any]) -> str:
    if facts.get("governing_law"):
        return f"Disputes governed by {facts['governing_law']} law or courts."
    return "Disputes must be brought in a jurisdiction chosen by the seller."


def _restocking_facts(match: "re.Match[str]", _text: str) -> dict[str, Any]:
    pct = _group(match, "pct")
    amount = _group(match, "amount")
    return {
        "percent": float(pct) if pct else None,
        "amount_usd": parse_amount(amount) if amount else None,
    }


def _describe_restocking(facts: dict[str, Any]) -> str:
    if facts.get("percent") is not None:
        return f"{facts['percent']:g}% restocking fee deducted from refunds."
    if facts.get("amount_usd") is not None:
        return f"{_usd(facts['amount_usd'])} restocking fee deducted from refunds."
    return "Restocking fee deducted from refunds."


def _days_facts(match: "re.Match[str]", _text: str) -> dict[str, Any]:
    return {"window_days": parse_int(_group(match, "days"))}


def _handling_facts(match: "re.Match[str]", _text: str) -> dict[str, Any]:
    low = parse_int(_group(match, "min"))
    high = parse_int(_group(match, "max"))
    return {"handling_days_min": low, "handling_days_max": high if high is not None else low}


_EXCLUDED_ITEMS = _rx(
    r"\b(?P<items>gift\s+cards?|sale\s+items?|clearance\s+items?|personali[sz]ed\s+items?"
    r"|custom(?:ized)?\s+(?:items?|orders?)|perishable\s+(?:goods|items?)|intimates|underwear|swimwear"
    r"|earrings|downloadable\s+(?:software|products?)|digital\s+(?:products?|downloads?))\b"
    r"[^.]{0,60}?\b(?:non[-\s]?refundable|non[-\s]?returnable|cannot\s+be\s+(?:returned|refunded)|final\s+sale)\b"
)


def _excluded_items_facts(_match: "re.Match[str]", text: str) -> dict[str, Any]:
    items: list[str] = []
    for m in _EXCLUDED_ITEMS.finditer(text):
        item = re.sub(r"\s+", " ", m.group("items")).lower()
        if item not in items:
            items.append(item)
    return {"categories": items}


def _describe_excluded(facts: dict[str, Any]) -> str:
    if facts.get("categories"):
        return "Excluded from returns/refunds: " + ", ".join(facts["categories"]) + "."
    return "Some product categories cannot be returned or refunded."


def _threshold_facts(match: "re.Match[str]", _text: str) -> dict[str, Any]:
    return {"threshold_usd": parse_amount(_group(match, "amount"))}


def _describe_free_shipping(facts: dict[str, Any]) -> str:
    threshold = facts.get("threshold_usd")
    if threshold:
        return f"Free shipping on orders over {_usd(threshold)}"
    return "Free shipping on all orders"


# ---------------------------------------------------------------------------
# Shared patterns
# ---------------------------------------------------------------------------

# Return window, in priority order. Refund processing times ("refunds are processed within
# 5 days") are not return windows.
RETURN_WINDOW = (
    r"\b(?:return|exchange)(?:s|ed)?\b(?:(?!process|issu|credit|ship)[^.]){0,60}?"
    r"\bwithin\s+(?P<days>\d{1,3})\s*(?:calendar\s+|business\s+)?days?\b",
    r"\b(?P<days>\d{1,3})[-\s]day\s+(?:return|money[-\s]?back|refund|exchange)",
    r"\b(?:return|refund)\s+(?:policy|period|window)\s*(?:is|of|:)?\s*(?P<days>\d{1,3})\s*(?:calendar\s+)?days?\b",
)

# "not accepted after 30 days" limits a window rather than refusing returns.
_TIME_LIMITED = r"(?!\s+(?:after|beyond|past|outside(?:\s+(?:of|the))?|more\s+than|later\s+than|once)\b)"

_ACCEPTS_RETURNS = (
    _m(r"\b(?:accept|accepts|offer|offers|allow|allows|welcome|welcomes|provide|provides)\b[^.]{0,40}?\breturns?\b", negatable=True),
    _m(r"\breturns?\s+(?:are\s+|is\s+)?(?:accepted|allowed|welcome)\b", negatable=True),
    _m(RETURN_WINDOW[0], negatable=True),
    _m(r"\b\d{1,3}[-\s]day\s+returns?\b", negatable=True),
    _m(r"\bfree\s+returns?\b", negatable=True),
)

_AFFIRMS_REFUNDS = (
    _m(r"\bfull\s+refunds?\b", negatable=True),
    _m(r"\brefunds?\s+(?:will\s+be|are)\s+(?:issued|processed|credited)\b", negatable=True),
    _m(r"\bmoney[-\s]back\b", negatable=True),
    _m(r"\b(?:offer|offers|issue|issues|provide|provides)\s+(?:a\s+)?(?:full\s+)?refunds?\b", negatable=True),
)

_AFFIRMS_EXCHANGES = (
    _m(r"\b(?:accept|accepts|offer|offers|allow|allows|welcome|welcomes)\b[^.]{0,40}?\bexchanges?\b", negatable=True),
    _m(r"\bexchanges?\s+(?:are\s+|is\s+)?(?:accepted|allowed|welcome)\b", negatable=True),
    _m(r"\b(?:free|hassle[-\s]free|easy)\s+exchanges?\b", negatable=True),
)

_NAMES_WARRANTY = (
    _m(r"\b(?:\d+[-\s](?:year|month|day)|lifetime|limited|manufacturer'?s?)\s+warranty\b", negatable=True),
)


# ---------------------------------------------------------------------------
# Clause rules
# ---------------------------------------------------------------------------

CLAUSE_RULES: tuple[ClauseRule, ...] = (
    # legal
    ClauseRule(
        "binding_arbitration",
        (
            _m(r"\b(?:binding|mandatory)\s+(?:individual\s+)?arbitration\b", _arbitration_facts, negatable=True),
            _m(r"\bresolved\s+(?:exclusively\s+|solely\s+)?(?:by|through)\s+(?:final\s+and\s+)?(?:binding\s+)?arbitration\b", _arbitration_facts, negatable=True),
            _m(r"\barbitration\b[^.]{0,120}?\b(?:JAMS|AAA|American\s+Arbitration\s+Association)\b", _arbitration_facts, negatable=True),
        ),
        _describe_arbitration,
    ),
    ClauseRule(
        "class_action_waiver",
        (
            _m(r"\b(?:class|representative|collective)\s+actions?\b[^.]{0,80}?\bwaive[sd]?\b"),
            _m(r"\bwaive[sd]?\b[^.]{0,80}?\b(?:class|representative|collective)\s+(?:action|arbitration|proceeding)s?\b"),
            _m(r"\bno\s+class\s+(?:actions?|arbitrations?)\b"),
            _m(r"\b(?:not|never)\s+(?:participate|join|bring)\b[^.]{0,40}?\bclass\s+(?:action|claim|proceeding)s?\b"),
        ),
        _fixed("Class action lawsuits are waived; claims must be brought individually."),
    ),
    ClauseRule(
        "liability_cap",
        (
            _m(
                r"\b(?:maximum|aggregate|total|entire)\s+liability\b[^.]{0,160}?"
                r"(?P<amount>(?:US\$|\$)\s?[\d,]+(?:\.\d+)?|[\d,]+(?:\.\d+)?\s*(?:dollars|USD)\b)",
                _cap_facts,
            ),
            _m(
                r"\bliability\b[^.]{0,160}?\b(?:shall|will|does|may)\s+not\s+exceed\b"
                r"(?:[^.]{0,60}?(?P<amount>(?:US\$|\$)\s?[\d,]+(?:\.\d+)?))?",
                _cap_facts,
            ),
            _m(
                r"\bliability\b[^.]{0,120}?\b(?:is\s+|shall\s+be\s+|will\s+be\s+)?limited\s+to\b"
                r"(?:[^.]{0,60}?(?P<amount>(?:US\$|\$)\s?[\d,]+(?:\.\d+)?))?",
                _cap_facts,
            ),
        ),
        _describe_cap,
    ),
    ClauseRule(
        "termination_at_will",
        (
            _m(
                r"\b(?:terminate|suspend)\b[^.]{0,120}?"
                r"\b(?:at\s+any\s+time|(?:in\s+our\s+)?sole\s+discretion|without\s+(?:prior\s+)?notice|for\s+any\s+reason)\b",
                negatable=True,
            ),
        ),
        _fixed("Account or service can be terminated at any time without notice."),
    ),
    ClauseRule(
        "jurisdiction_clause",
        (
            _m(
                r"\bgoverned\s+by\b[^.]{0,60}?\blaws?\s+of\b(?:\s+the)?(?:\s+State\s+of)?"
                r"(?:\s+(?P<place>(?-i:[A-Z][a-z]+(?:\s+[A-Z][a-z]+)?)))?",
                _place_facts,
            ),
            _m(r"\bexclusive\s+jurisdiction\b[^.]{0,80}?\bcourts?\b", _place_facts),
            _m(r"\bcourts?\s+located\s+in\b(?:\s+the)?(?:\s+State\s+of)?(?:\s+(?P<place>(?-i:[A-Z][a-z]+(?:\s+[A-Z][a-z]+)?)))?", _place_facts),
        ),
        _describe_place,
    ),
    ClauseRule(
        "auto_renewal",
        (
            _m(r"\bauto(?:matically)?[-\s]?renew(?:s|ed|al|ing)?\b", negatable=True),
            _m(r"\bsubscriptions?\s+(?:will\s+)?(?:automatically\s+)?renews?\b", negatable=True),
        ),
        _fixed("Subscription or service renews automatically unless cancelled."),
    ),
    ClauseRule(
        "no_warranty",
        (
            _m(r"\bsold\s+[\"']?as[-\s]is\b"),
            _m(r"\bno\s+warrant(?:y|ies)\s+(?:is\s+|are\s+)?(?:provided|offered|given|included)\b"),
            _m(r"\b(?:comes?|sold)\s+with(?:out|\s+no)\s+(?:any\s+)?warrant(?:y|ies)\b"),
        ),
        _fixed("Products are sold as-is with no warranty."),
        unless=_NAMES_WARRANTY,
    ),
    # returns
    ClauseRule(
        "no_returns",
        (
            _m(r"\bno\s+returns?\b(?!\s+(?:shipping|fees?|costs?|charges?|labels?|(?:on|for)\s+(?:opened|used|worn|sale|clearance)))" + _TIME_LIMITED),
            _m(r"(?:\b(?:do|does)\s+not|\bdon'?t)\s+accept\s+returns?\b" + _TIME_LIMITED),
            _m(r"\breturns?\s+(?:are|is)\s+not\s+(?:accepted|allowed|permitted)\b" + _TIME_LIMITED),
            _m(r"\b(?:items?|products?|merchandise|orders?|purchases?)\s+(?:cannot|can\s*not|may\s+not)\s+be\s+returned\b" + _TIME_LIMITED),
            _m(r"\bnon[-\s]?returnable\b" + _TIME_LIMITED),
        ),
        _fixed("Seller does not accept returns."),
        unless=_ACCEPTS_RETURNS,
    ),
    ClauseRule(
        "final_sale",
        (
            _m(r"\ball\s+sales?\s+(?:are\s+)?final\b"),
            _m(r"\bfinal[-\s]sale\b", negatable=True),
        ),
        _fixed("Sales are final; no refunds or exchanges."),
    ),
    ClauseRule(
        "no_refund",
        (
            _m(r"\bno\s+refunds?\b(?!\s+(?:on|for)\s+(?:opened|used|worn))"),
            _m(r"\ball\s+sales?\s+(?:are\s+)?final\b"),
            _m(r"\brefunds?\s+(?:are|will)\s+not\s+be\s+(?:issued|given|provided|offered|made)\b"),
            _m(r"\b(?:do|does)\s+not\s+(?:offer|issue|provide|give)\s+refunds?\b"),
        ),
        _fixed("No refunds are provided."),
        unless=_AFFIRMS_REFUNDS,
    ),
    ClauseRule(
        "no_exchanges",
        (
            _m(r"\bno\s+(?:returns?\s*(?:or|and|/)\s*)?exchanges?\b"),
            _m(r"\bexchanges?\s+(?:are|is)\s+not\s+(?:accepted|allowed|permitted|offered)\b"),
            _m(r"\b(?:do|does)\s+not\s+(?:accept|offer|allow)\s+exchanges?\b"),
        ),
        _fixed("Seller does not accept exchanges."),
        unless=_AFFIRMS_EXCHANGES,
    ),
    ClauseRule(
        "no_refund_opened",
        (
            _m(
                r"\b(?:opened|used|worn|unsealed|washed)\s+(?:items?|products?|merchandise|goods|software)\b"
                r"[^.]{0,60}?\b(?:cannot|can\s*not|will\s+not|may\s+not|are\s+not\s+eligible\s+to)\s+be\s+(?:returned|refunded)\b"
            ),
            _m(r"\bno\s+(?:returns?|refunds?)\s+(?:on|for)\s+(?:opened|used|worn)\b"),
            _m(r"\bonly\s+(?:unopened|unused|unworn)\s+(?:items?|products?|merchandise)\b[^.]{0,40}?\b(?:returned|refunded|eligible)\b"),
        ),
        _fixed("Opened or used items cannot be returned for a refund."),
    ),
    ClauseRule(
        "restocking_fee",
        (
            _m(r"\b(?P<pct>\d{1,2}(?:\.\d+)?)\s*%\s*restocking\s+fee\b", _restocking_facts, negatable=True),
            _m(r"(?P<amount>\$\s?[\d,]+(?:\.\d+)?)\s+restocking\s+fee\b", _restocking_facts, negatable=True),
            _m(r"\brestocking\s+fee\b[^.]{0,40}?(?P<pct>\d{1,2}(?:\.\d+)?)\s*%", _restocking_facts, negatable=True),
            _m(r"\brestocking\s+fees?\b", _restocking_facts, negatable=True),
        ),
        _describe_restocking,
    ),
    ClauseRule(
        "return_shipping_fee",
        (
            _m(
                r"\b(?:customers?|buyers?|you)\s+(?:are\s+|is\s+|will\s+be\s+)?(?:pay|pays|responsible\s+for|cover|covers)\b"
                r"[^.]{0,30}?\breturn\s+shipping\b"
            ),
            _m(
                r"\breturn\s+shipping\s+(?:costs?|fees?|charges?)\s+(?:are|is|will\s+be)\s+(?:the\s+)?"
                r"(?:responsibility\s+of\s+the\s+(?:customer|buyer)|(?:customer|buyer)'?s?\s+responsibility"
                r"|deducted|non[-\s]?refundable|paid\s+by\s+the\s+(?:customer|buyer))"
            ),
        ),
        _fixed("Buyer pays return shipping costs."),
    ),
    ClauseRule(
        "short_return_window",
        tuple(_m(p, _days_facts) for p in RETURN_WINDOW),
        lambda facts: f"{facts['window_days']}-day return window is shorter than the 30-day standard.",
        requires=lambda facts: facts.get("window_days") is not None and facts["window_days"] < 30,
    ),
    ClauseRule(
        "exchange_only",
        (
            _m(r"\bexchanges?\s+only\b"),
            _m(r"\bonly\s+(?:offer|accept|provide)s?\s+exchanges?\b"),
            _m(r"\b(?:returns?|refunds?)\s+(?:are\s+)?(?:limited\s+to|only\s+for)\s+exchanges?\b"),
        ),
        _fixed("Returns are exchange-only; no cash refunds."),
    ),
    ClauseRule(
        "store_credit_only",
        (
            _m(r"\bstore\s+credit\s+only\b"),
            _m(r"\brefunds?\b[^.]{0,40}?\b(?:issued|given|provided|made)\s+(?:only\s+)?(?:as|in\s+the\s+form\s+of)\s+(?:a\s+)?store\s+credit\b"),
            _m(r"\bonly\s+(?:offer|issue|provide)s?\s+store\s+credit\b"),
            _m(r"\brefunds?\s+(?:are|will\s+be)\s+(?:issued\s+)?(?:in\s+)?store\s+credit\b"),
        ),
        _fixed("Refunds are issued as store credit rather than to the original payment method."),
    ),
    ClauseRule(
        "non_refundable_categories",
        (Matcher(_EXCLUDED_ITEMS, _excluded_items_facts),),
        _describe_excluded,
    ),
    # pricing
    ClauseRule(
        "price_adjustment_clause",
        (
            _m(r"\breserves?\s+the\s+right\s+to\s+(?:change|modify|adjust|correct)\s+(?:our\s+|the\s+|any\s+)?prices?\b"),
            _m(r"\bprices?\s+(?:are\s+)?subject\s+to\s+change\b"),
            _m(r"\bprices?\s+may\s+(?:change|be\s+(?:changed|adjusted))\b[^.]{0,60}?\bafter\b"),
        ),
        _fixed("Seller may change prices after an order is placed."),
    ),
    ClauseRule(
        "hidden_fees",
        (
            _m(r"\b(?:additional|other|extra)\s+(?:fees|charges)\s+may\s+apply\b"),
            _m(
                r"\b(?:handling|processing|service|convenience|administrative)\s+fees?\s+"
                r"(?:may|will)\s+(?:be\s+)?(?:added|charged|applied|apply)\b",
                negatable=True,
            ),
        ),
        _fixed("Additional fees may apply that are not disclosed upfront."),
    ),
    # privacy
    ClauseRule(
        "data_selling",
        (
            _m(r"\bwe\s+(?:may\s+)?(?:sell|rent|trade|license)\b[^.]{0,60}?\b(?:personal\s+)?(?:data|information)\b", negatable=True),
            _m(
                r"\b(?:share|disclose|provide)\b[^.]{0,80}?\bthird[-\s]part(?:y|ies)\b[^.]{0,60}?"
                r"\b(?:marketing|advertising|promotional|their\s+own\s+purposes)\b",
                negatable=True,
            ),
        ),
        _fixed("Personal data may be sold or shared with third parties for their own purposes."),
    ),
    ClauseRule(
        "broad_data_collection",
        (
            _m(r"\bcollect\b[^.]{0,80}?\bincluding\s+(?:but\s+not\s+limited\s+to|without\s+limitation)\b", negatable=True),
            _m(r"\bcollect\b[^.]{0,40}?\b(?:any\s+and\s+all|all)\s+(?:information|data)\b", negatable=True),
            _m(r"\b(?:biometric|precise\s+geo[-\s]?location|precise\s+location)\s+(?:data|information|identifiers)\b", negatable=True),
        ),
        _fixed("Collects more personal data than the transaction needs."),
    ),
    # shipping
    ClauseRule(
        "no_tracking",
        (
            _m(r"\bno\s+tracking\b"),
            _m(r"\bwithout\s+tracking\b"),
            _m(r"\btracking\s+(?:information\s+|numbers?\s+)?(?:is\s+|are\s+)?not\s+(?:provided|available|included)\b"),
        ),
        _fixed("Shipments are not tracked."),
    ),
    ClauseRule(
        "long_handling_time",
        (
            _m(
                r"\b(?:processing|handling)\s+(?:time|period)s?\b[^.\d]{0,30}?(?P<min>\d{1,2})"
                r"(?:\s*(?:-|–|to)\s*(?P<max>\d{1,2}))?\s*(?:business\s+|working\s+)?days?\b",
                _handling_facts,
            ),
            _m(r"\b(?:ships?|dispatche[sd]|dispatch)\s+within\s+(?P<max>\d{1,2})\s*(?:business\s+|working\s+)?days?\b", _handling_facts),
        ),
        lambda facts: f"Handling time up to {facts['handling_days_max']} days before shipment.",
        requires=lambda facts: facts.get("handling_days_max") is not None and facts["handling_days_max"] > 5,
    ),
)


POSITIVE_RULES: tuple[PositiveRule, ...] = (
    PositiveRule(
        "free_returns",
        (
            _m(r"\bfree\s+returns?\b", negatable=True),
            _m(r"\bprepaid\s+(?:return\s+)?(?:shipping\s+)?label\b", negatable=True),
            _m(r"\bwe\s+(?:pay|cover)\s+(?:for\s+)?(?:the\s+)?return\s+shipping\b"),
        ),
        _fixed("Free return shipping"),
    ),
    PositiveRule(
        "extended_return_window",
        tuple(_m(p, _days_facts) for p in RETURN_WINDOW),
        lambda facts: f"Extended {facts['window_days']}-day return window",
        requires=lambda facts: facts.get("window_days") is not None and facts["window_days"] >= 60,
    ),
    PositiveRule(
        "full_refund",
        (
            _m(r"\bfull\s+refunds?\b", negatable=True),
            _m(r"\brefund(?:ed|s)?\b[^.]{0,30}?\bto\s+(?:the\s+|your\s+)?original\s+(?:form\s+of\s+)?payment\b", negatable=True),
        ),
        _fixed("Full refund to original payment method"),
    ),
    PositiveRule(
        "free_shipping",
        (
            _m(r"\bfree\s+(?:standard\s+)?shipping\s+on\s+(?:all|every)\s+orders?\b", _threshold_facts, negatable=True),
            _m(
                r"\bfree\s+(?:standard\s+)?shipping\s+(?:on\s+)?(?:all\s+)?(?:orders?\s+)?(?:over|above|of)\s+"
                r"(?P<amount>\$?\s?[\d,]+(?:\.\d+)?)",
                _threshold_facts,
                negatable=True,
            ),
        ),
        _describe_free_shipping,
    ),
    PositiveRule("money_back", (_m(r"\bmoney[-\s]back\s+guarantee\b", negatable=True),), _fixed("Money-back guarantee")),
    PositiveRule("price_match", (_m(r"\bprice[-\s]match(?:ing)?\b", negatable=True),), _fixed("Price match guarantee")),
    PositiveRule("satisfaction", (_m(r"\bsatisfaction\s+guaranteed?\b", negatable=True),), _fixed("Satisfaction guarantee")),
    PositiveRule(
        "no_restocking_fee",
        (
            _m(r"\bno\s+restocking\s+fees?\b"),
            _m(r"\bwithout\s+(?:a\s+|any\s+)?restocking\s+fees?\b"),
            _m(r"\bnever\s+charge\s+(?:a\s+|any\s+)?restocking\s+fees?\b"),
        ),
        _fixed("No restocking fees"),
    ),
    PositiveRule("lifetime_warranty", (_m(r"\blifetime\s+warranty\b", negatable=True),), _fixed("Lifetime warranty")),
    PositiveRule(
        "easy_exchanges",
        (_m(r"\b(?:free|hassle[-\s]free|easy)\s+exchanges?\b", negatable=True),),
        _fixed("Hassle-free exchanges"),
    ),
    PositiveRule(
        "tracking_provided",
        (
            _m(
                r"\btracking\s+(?:numbers?|information|details)\s+(?:is\s+|are\s+|will\s+be\s+)?"
                r"(?:provided|sent|emailed|included)\b",
                negatable=True,
            ),
        ),
        _fixed("Tracking provided for shipments"),
    ),
    PositiveRule(
        "cancel_anytime",
        (_m(r"\byou\s+(?:can|may)\s+cancel\b[^.]{0,30}?\b(?:at\s+)?any\s*time\b"),),
        _fixed("Cancel anytime"),
    ),
)


def check_rules(rules: tuple[ClauseRule, ...], clause_ids: tuple[str, ...]) -> None:
    """Raise ValueError if a rule names a clause id the registry does not publish."""
    unknown = [r.clause_id for r in rules if r.clause_id not in clause_ids]
    if unknown:
        raise ValueError(f"Rules reference unregistered clause types: {', '.join(unknown)}")
