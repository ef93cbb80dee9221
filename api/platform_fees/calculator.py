"""
Tiered platform-fee calculation.

Pure functions over a snapshot of the tier table. No I/O here; the service
layer loads the tiers and passes them in.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class FeeTier:
    name: str
    min_value: float
    max_value: float
    fee_percentage: float

    def contains(self, amount: float) -> bool:
        return self.min_value <= amount <= self.max_value

    @classmethod
    def from_row(cls, row: dict) -> "FeeTier":
        return cls(
            name=str(row["tier_name"]),
            min_value=float(row["min_value"]),
            max_value=float(row["max_value"]),
            fee_percentage=float(row["platform_fee_percentage"]),
        )


@dataclass(frozen=True)
class FeeQuote:
    base_amount: float
    fee_amount: float
    final_amount: float
    tier_name: str | None = None


def find_tier(base_amount: float, tiers: Iterable[FeeTier]) -> FeeTier | None:
    """
    First tier, by ascending `min_value`, whose range contains the amount.

    Overlapping ranges are not rejected anywhere, so the lowest-starting
    matching tier wins.
    """
    for tier in sorted(tiers, key=lambda t: t.min_value):
        if tier.contains(base_amount):
            return tier
    return None


def compute_fee(base_amount: float, tiers: Iterable[FeeTier]) -> FeeQuote:
    """
    Fee and final price for `base_amount`.

    No matching tier (or an empty table) is not an error: the fee is 0 and
    the final amount equals the base amount.
    """
    amount = float(base_amount)
    if not math.isfinite(amount) or amount <= 0:
        return FeeQuote(base_amount=amount, fee_amount=0.0, final_amount=amount)

    tier = find_tier(amount, tiers)
    if tier is None:
        return FeeQuote(base_amount=amount, fee_amount=0.0, final_amount=amount)

    fee_amount = amount * tier.fee_percentage / 100
    return FeeQuote(
        base_amount=amount,
        fee_amount=fee_amount,
        final_amount=amount + fee_amount,
        tier_name=tier.name,
    )
