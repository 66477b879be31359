"""Heuristic merchant labels from free-text bank descriptions.

The label is best-effort: it may be imperfect, but it is never empty and
extraction never raises.
"""

from __future__ import annotations

import re

UNKNOWN = "Unknown"
UNKNOWN_MERCHANT = "Unknown Merchant"

_PREFIX_RE = re.compile(r"^(?:EFTPOS|CARD|ATM|TRANSFER|DIRECT DEBIT|DD|PAYMENT)\b\s*", re.IGNORECASE)
_TRAILING_DATE_RE = re.compile(r"\s+\d{2}/\d{2}/?\d{0,4}.*$")
_TRAILING_DIGITS_RE = re.compile(r"\s+\d{4,}.*$")
_COUNTRY_RE = re.compile(r"\s+(?:AUS|AUSTRALIA|AU)\s*$")
_NSF_RE = re.compile(r"\s+NSF.*$")
_NUMERIC_RE = re.compile(r"^\d+$")
_SHORT_CODE_RE = re.compile(r"^[A-Z]{1,2}\d+$")

_MAX_WORDS = 3


def _keep(word: str) -> bool:
    return len(word) > 1 and not _NUMERIC_RE.match(word) and not _SHORT_CODE_RE.match(word)


def extract_merchant(description: str | None) -> str:
    """Return a short merchant label (1–3 words) for ``description``."""

    if not description or not description.strip():
        return UNKNOWN

    cleaned = description.strip()
    cleaned = _PREFIX_RE.sub("", cleaned)
    cleaned = _TRAILING_DATE_RE.sub("", cleaned)
    cleaned = _TRAILING_DIGITS_RE.sub("", cleaned)
    cleaned = _COUNTRY_RE.sub("", cleaned)
    cleaned = _NSF_RE.sub("", cleaned)

    words = [w for w in cleaned.split() if _keep(w)]
    return " ".join(words[:_MAX_WORDS]) or UNKNOWN_MERCHANT


__all__ = ["UNKNOWN", "UNKNOWN_MERCHANT", "extract_merchant"]
