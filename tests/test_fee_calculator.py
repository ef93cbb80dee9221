import math

import pytest

from platform_fees.calculator import FeeTier, compute_fee, find_tier

BASIC = FeeTier(name="BASIC", min_value=0, max_value=1000, fee_percentage=5.5)
STANDARD = FeeTier(name="STANDARD", min_value=1001, max_value=5000, fee_percentage=7.5)
PREMIUM = FeeTier(name="PREMIUM", min_value=5001, max_value=10000, fee_percentage=10)

TABLE = [PREMIUM, BASIC, STANDARD]


class TestComputeFee:
    def test_basic_tier_scenario(self):
        quote = compute_fee(500, [BASIC])
        assert quote.fee_amount == pytest.approx(27.5)
        assert quote.final_amount == pytest.approx(527.5)
        assert quote.tier_name == "BASIC"

    def test_empty_table_is_zero_fee(self):
        quote = compute_fee(500, [])
        assert quote.fee_amount == 0
        assert quote.final_amount == 500
        assert quote.tier_name is None

    @pytest.mark.parametrize(
        "amount,expected_tier,pct",
        [
            (1, "BASIC", 5.5),
            (1000, "BASIC", 5.5),
            (1001, "STANDARD", 7.5),
            (5000, "STANDARD", 7.5),
            (5001, "PREMIUM", 10),
            (10000, "PREMIUM", 10),
        ],
    )
    def test_bounds_are_inclusive(self, amount, expected_tier, pct):
        quote = compute_fee(amount, TABLE)
        assert quote.tier_name == expected_tier
        assert quote.fee_amount == pytest.approx(amount * pct / 100)
        assert quote.final_amount == pytest.approx(amount + amount * pct / 100)

    @pytest.mark.parametrize("amount", [1000.5, 10000.01, 250000])
    def test_amount_outside_all_ranges_is_zero_fee(self, amount):
        quote = compute_fee(amount, TABLE)
        assert quote.fee_amount == 0
        assert quote.final_amount == amount

    def test_fee_and_final_are_non_negative(self):
        for amount in (0.01, 1, 999.99, 4321, 9999):
            quote = compute_fee(amount, TABLE)
            assert quote.fee_amount >= 0
            assert quote.final_amount >= amount

    @pytest.mark.parametrize("amount", [0, -10, math.inf, math.nan])
    def test_invalid_amounts_degrade_to_zero_fee(self, amount):
        quote = compute_fee(amount, TABLE)
        assert quote.fee_amount == 0

    def test_zero_percent_tier(self):
        free = FeeTier(name="BASIC", min_value=0, max_value=100, fee_percentage=0)
        quote = compute_fee(50, [free])
        assert quote.fee_amount == 0
        assert quote.final_amount == 50
        assert quote.tier_name == "BASIC"


class TestFindTier:
    def test_overlap_lowest_min_value_wins(self):
        wide = FeeTier(name="STANDARD", min_value=0, max_value=5000, fee_percentage=7.5)
        narrow = FeeTier(name="BASIC", min_value=100, max_value=200, fee_percentage=5)
        assert find_tier(150, [narrow, wide]).name == "STANDARD"

    def test_single_point_tier(self):
        point = FeeTier(name="BASIC", min_value=500, max_value=500, fee_percentage=1)
        assert find_tier(500, [point]) is point
        assert find_tier(500.5, [point]) is None

    def test_from_row_coerces_numbers(self):
        from decimal import Decimal

        tier = FeeTier.from_row(
            {
                "tier_name": "BASIC",
                "min_value": 0,
                "max_value": 1000,
                "platform_fee_percentage": Decimal("5.50"),
            }
        )
        assert tier.fee_percentage == 5.5
        assert tier.contains(1000)
