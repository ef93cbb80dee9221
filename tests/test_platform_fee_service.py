from decimal import Decimal

import pytest
from unittest.mock import AsyncMock, patch

from core.errors import BadRequest, Conflict, NotFound
from platform_fees import service
from platform_fees.schemas import PlatformFeeCreate, PlatformFeeUpdate, TierName
from pydantic import ValidationError

BASIC_ROW = {
    "id": "tier-basic",
    "tier_name": "BASIC",
    "min_value": 0,
    "max_value": 1000,
    "platform_fee_percentage": 5.5,
}
STANDARD_ROW = {
    "id": "tier-standard",
    "tier_name": "STANDARD",
    "min_value": 1001,
    "max_value": 5000,
    "platform_fee_percentage": 7.5,
}


class TestCreatePlatformFee:
    @pytest.mark.asyncio
    async def test_creates_tier(self):
        with patch("platform_fees.repository.get_tier_by_name", new_callable=AsyncMock, return_value=None), patch(
            "platform_fees.repository.create_tier", new_callable=AsyncMock, return_value=BASIC_ROW
        ) as mock_create:
            row = await service.create_platform_fee(
                tier_name=TierName.BASIC,
                min_value=0,
                max_value=1000,
                platform_fee_percentage=5.5,
            )

        assert row == BASIC_ROW
        mock_create.assert_awaited_once_with(
            tier_name="BASIC", min_value=0, max_value=1000, platform_fee_percentage=5.5
        )

    @pytest.mark.asyncio
    async def test_equal_bounds_are_allowed(self):
        with patch("platform_fees.repository.get_tier_by_name", new_callable=AsyncMock, return_value=None), patch(
            "platform_fees.repository.create_tier", new_callable=AsyncMock, return_value=BASIC_ROW
        ) as mock_create:
            await service.create_platform_fee(
                tier_name="BASIC", min_value=500, max_value=500, platform_fee_percentage=1
            )
        mock_create.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_inverted_range(self):
        with patch("platform_fees.repository.create_tier", new_callable=AsyncMock) as mock_create:
            with pytest.raises(BadRequest):
                await service.create_platform_fee(
                    tier_name="BASIC", min_value=1000, max_value=10, platform_fee_percentage=5
                )
        mock_create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_duplicate_tier_name(self):
        with patch(
            "platform_fees.repository.get_tier_by_name", new_callable=AsyncMock, return_value=BASIC_ROW
        ), patch("platform_fees.repository.create_tier", new_callable=AsyncMock) as mock_create:
            with pytest.raises(Conflict) as exc_info:
                await service.create_platform_fee(
                    tier_name="BASIC", min_value=0, max_value=1000, platform_fee_percentage=5
                )
        assert exc_info.value.status_code == 409
        mock_create.assert_not_awaited()


class TestUpdatePlatformFee:
    @pytest.mark.asyncio
    async def test_missing_tier(self):
        with patch("platform_fees.repository.get_tier_by_id", new_callable=AsyncMock, return_value=None):
            with pytest.raises(NotFound):
                await service.update_platform_fee("nope", {"platform_fee_percentage": 3})

    @pytest.mark.asyncio
    async def test_range_checked_against_stored_values(self):
        with patch(
            "platform_fees.repository.get_tier_by_id", new_callable=AsyncMock, return_value=BASIC_ROW
        ), patch("platform_fees.repository.update_tier", new_callable=AsyncMock) as mock_update:
            with pytest.raises(BadRequest):
                await service.update_platform_fee("tier-basic", {"min_value": 2000})
        mock_update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self):
        updated = {**BASIC_ROW, "platform_fee_percentage": 6.0}
        with patch(
            "platform_fees.repository.get_tier_by_id", new_callable=AsyncMock, return_value=BASIC_ROW
        ), patch(
            "platform_fees.repository.update_tier", new_callable=AsyncMock, return_value=updated
        ) as mock_update:
            row = await service.update_platform_fee("tier-basic", {"platform_fee_percentage": 6.0})

        assert row == updated
        mock_update.assert_awaited_once_with(
            "tier-basic", tier_name="BASIC", min_value=0, max_value=1000, platform_fee_percentage=6.0
        )

    @pytest.mark.asyncio
    async def test_rename_into_existing_tier(self):
        with patch(
            "platform_fees.repository.get_tier_by_id", new_callable=AsyncMock, return_value=BASIC_ROW
        ), patch(
            "platform_fees.repository.get_tier_by_name", new_callable=AsyncMock, return_value=STANDARD_ROW
        ):
            with pytest.raises(Conflict):
                await service.update_platform_fee("tier-basic", {"tier_name": TierName.STANDARD})


class TestDeleteAndGet:
    @pytest.mark.asyncio
    async def test_get_missing(self):
        with patch("platform_fees.repository.get_tier_by_id", new_callable=AsyncMock, return_value=None):
            with pytest.raises(NotFound) as exc_info:
                await service.get_platform_fee("nope")
        assert exc_info.value.message == "Platform fee not found"

    @pytest.mark.asyncio
    async def test_delete_missing(self):
        with patch("platform_fees.repository.delete_tier", new_callable=AsyncMock, return_value=None):
            with pytest.raises(NotFound):
                await service.delete_platform_fee("nope")


class TestQuote:
    @pytest.mark.asyncio
    async def test_quote_uses_tier_table(self):
        rows = [
            {**BASIC_ROW, "platform_fee_percentage": Decimal("5.5")},
            STANDARD_ROW,
        ]
        with patch(
            "platform_fees.repository.list_tiers_by_min_value", new_callable=AsyncMock, return_value=rows
        ):
            result = await service.quote(2000)

        assert result.tier_name == "STANDARD"
        assert result.fee_amount == pytest.approx(150)
        assert result.final_amount == pytest.approx(2150)

    @pytest.mark.asyncio
    async def test_quote_with_empty_table(self):
        with patch(
            "platform_fees.repository.list_tiers_by_min_value", new_callable=AsyncMock, return_value=[]
        ):
            result = await service.quote(500)
        assert result.fee_amount == 0
        assert result.final_amount == 500


class TestSchemas:
    def test_create_rejects_inverted_range(self):
        with pytest.raises(ValidationError):
            PlatformFeeCreate(tier_name="BASIC", min_value=100, max_value=10, platform_fee_percentage=5)

    @pytest.mark.parametrize("pct", [-1, 100.5])
    def test_create_rejects_percentage_out_of_bounds(self, pct):
        with pytest.raises(ValidationError):
            PlatformFeeCreate(tier_name="BASIC", min_value=0, max_value=10, platform_fee_percentage=pct)

    def test_create_rejects_unknown_tier(self):
        with pytest.raises(ValidationError):
            PlatformFeeCreate(tier_name="GOLD", min_value=0, max_value=10, platform_fee_percentage=5)

    def test_update_allows_single_bound(self):
        patch_body = PlatformFeeUpdate(min_value=50)
        assert patch_body.model_dump(exclude_unset=True) == {"min_value": 50}
