"""Deterministic, ordered rule-table categorization.

Rules are data: an ordered tuple of :class:`CategoryRule` evaluated top to
bottom by a single matcher, first match wins. Order is part of the contract,
e.g. ``"uber eats"`` must resolve to Dining Out before the broader ``"uber"``
Transport rule gets a chance.

The Income rule only applies to inflows and sits first, so salary, refund
and interest credits are Income whatever else their text mentions.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Literal

UNCATEGORIZED = "Uncategorized"

type Direction = Literal["any", "inflow", "outflow"]


@dataclass(frozen=True, slots=True)
class CategoryRule:
    pattern: re.Pattern[str]
    category: str
    direction: Direction = "any"

    def matches(self, text: str, amount: Decimal) -> bool:
        if self.direction == "inflow" and not amount > 0:
            return False
        if self.direction == "outflow" and not amount < 0:
            return False
        return self.pattern.search(text) is not None


def rule(pattern: str, category: str, direction: Direction = "any") -> CategoryRule:
    """Build a rule from a lower-case alternation pattern."""

    return CategoryRule(re.compile(pattern), category, direction)


DEFAULT_RULES: tuple[CategoryRule, ...] = (
    rule(r"salary|wage|refund|interest", "Income", "inflow"),
    rule(
        r"restaurant|cafe|coffee|pizza|mcdonald|kfc|subway|domino|uber eats|deliveroo|menulog",
        "Dining Out",
    ),
    rule(r"woolworths|coles|iga|aldi|grocery|supermarket|food", "Groceries"),
    rule(r"uber|taxi|metro|train|bus|petrol|shell|bp|caltex|ampol|costco", "Transport"),
    rule(r"netflix|spotify|amazon prime|disney|cinema|movie|gym|fitness", "Entertainment"),
    rule(r"electricity|gas|water|internet|phone|telstra|optus|energy", "Utilities"),
    rule(r"pharmacy|medical|doctor|dentist|hospital|health", "Healthcare"),
    rule(r"amazon|ebay|target|kmart|bunnings|harvey norman|jb hi-fi", "Shopping"),
    rule(r"insurance|bank fee|loan|mortgage|rent", "Bills & Finance"),
)

CATEGORY_NAMES: tuple[str, ...] = tuple(
    dict.fromkeys([r.category for r in DEFAULT_RULES] + [UNCATEGORIZED])
)


def categorize(
    description: str,
    merchant: str,
    amount: Decimal,
    *,
    rules: Sequence[CategoryRule] = DEFAULT_RULES,
) -> str:
    """Return the category of the first matching rule, else ``Uncategorized``.

    Matching runs on the lower-cased description; the merchant label is only
    consulted when the description is blank.
    """

    text = (description or "").strip() or (merchant or "").strip()
    text = text.lower()
    if not text:
        return UNCATEGORIZED
    for r in rules:
        if r.matches(text, amount):
            return r.category
    return UNCATEGORIZED


# Inter-account transfer phrasing seen in Australian bank exports
_TRANSFER_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"transfer to .* account",
        r"transfer from .* account",
        r"fast transfer (to|from)",
        r"payid (payment|transfer)",
        r"osko payment",
        r"bpay transfer",
        r"internal transfer",
        r"account transfer",
        r"transfer - .* to .*",
        r"own account transfer",
    )
)


def is_transfer(description: str) -> bool:
    return any(p.search(description or "") for p in _TRANSFER_PATTERNS)


__all__ = [
    "CATEGORY_NAMES",
    "DEFAULT_RULES",
    "UNCATEGORIZED",
    "CategoryRule",
    "categorize",
    "is_transfer",
    "rule",
]
