# src/factorynear/features/risk.py
"""
High-risk classification (facility-level).

A facility is "high risk" when its category code belongs to a fixed set of codes
whose impact could be severe, wide-reaching and hard to remediate. Membership is
static configuration (`risk.category_codes` in defaults.yaml); it is never
derived from the dataset.
"""

from __future__ import annotations

from collections.abc import Iterable

HIGH_RISK_CATEGORY_CODES: frozenset[str] = frozenset(
    {
        "10100",
        "10500",
        "10600",
        "05309",
        "05305",
        "05900",
        "06000",
        "08802",
        "03801",
        "03802",
        "02202",
        "05004",
        "04201",
    }
)


def risk_code_set(codes: Iterable[str] | None) -> frozenset[str]:
    """Normalize configured codes; an empty/missing config means the built-in set."""
    cleaned = frozenset(str(c).strip() for c in (codes or []) if str(c).strip())
    return cleaned or HIGH_RISK_CATEGORY_CODES


def is_high_risk(category_code: str, *, codes: frozenset[str] | None = None) -> bool:
    """Return True iff `category_code` is a member of the high-risk set."""
    return category_code in (HIGH_RISK_CATEGORY_CODES if codes is None else codes)
