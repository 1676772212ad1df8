"""Integration tests for expense API endpoints"""

from decimal import Decimal
from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient

from app.services.cache_service import CacheService


def amounts(splits: dict) -> dict:
    """Decimal view of a JSON splits mapping"""
    return {member_id: Decimal(str(value)) for member_id, value in splits.items()}


class TestCreateExpense:
    """Test expense creation"""

    @pytest.mark.asyncio
    async def test_create_equal_expense(self, test_group: dict, create_expense):
        response = await create_expense(test_group["id"])

        assert response.status_code == 201
        data = response.json()
        assert data["group_id"] == test_group["id"]
        assert data["split_type"] == "equal"
        assert data["currency"] == "INR"
        assert Decimal(str(data["amount"])) == Decimal("300.00")
        assert amounts(data["splits"]) == {
            "alice": Decimal("100"),
            "bob": Decimal("100"),
            "carol": Decimal("100"),
        }
        assert data["split_inputs"] == {}

    @pytest.mark.asyncio
    async def test_create_equal_expense_with_leftover_cent(self, test_group: dict, create_expense):
        response = await create_expense(test_group["id"], amount="100.00")

        assert response.status_code == 201
        assert list(amounts(response.json()["splits"]).values()) == [
            Decimal("33.34"),
            Decimal("33.33"),
            Decimal("33.33"),
        ]

    @pytest.mark.asyncio
    async def test_create_exact_expense(self, test_group: dict, create_expense):
        response = await create_expense(
            test_group["id"],
            amount="150.00",
            split_type="exact",
            split_inputs={"alice": "50", "bob": "70", "carol": "30"},
        )

        assert response.status_code == 201
        assert amounts(response.json()["splits"]) == {
            "alice": Decimal("50"),
            "bob": Decimal("70"),
            "carol": Decimal("30"),
        }

    @pytest.mark.asyncio
    async def test_create_percentage_expense(self, test_group: dict, create_expense):
        response = await create_expense(
            test_group["id"],
            amount="1000.00",
            split_type="percentage",
            split_inputs={"alice": 60, "bob": 40},
        )

        assert response.status_code == 201
        data = response.json()
        assert amounts(data["splits"]) == {"alice": Decimal("600"), "bob": Decimal("400")}
        assert amounts(data["split_inputs"]) == {"alice": Decimal("60"), "bob": Decimal("40")}

    @pytest.mark.asyncio
    async def test_create_shares_expense(self, test_group: dict, create_expense):
        response = await create_expense(
            test_group["id"],
            amount="50",
            paid_by="bob",
            split_type="shares",
            split_inputs={"alice": 1, "bob": 3},
        )

        assert response.status_code == 201
        assert amounts(response.json()["splits"]) == {
            "alice": Decimal("12.50"),
            "bob": Decimal("37.50"),
        }

    @pytest.mark.asyncio
    async def test_exact_amounts_must_match_total(self, test_group: dict, create_expense):
        response = await create_expense(
            test_group["id"],
            amount="100.00",
            split_type="exact",
            split_inputs={"alice": "50", "bob": "30"},
        )

        assert response.status_code == 400
        assert "must equal total amount" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_percentages_must_sum_to_100(self, test_group: dict, create_expense):
        response = await create_expense(
            test_group["id"],
            split_type="percentage",
            split_inputs={"alice": 50, "bob": 40},
        )

        assert response.status_code == 400
        assert "Percentages must sum to 100" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_zero_total_shares(self, test_group: dict, create_expense):
        response = await create_expense(
            test_group["id"], split_type="shares", split_inputs={"alice": 0, "bob": 0}
        )

        assert response.status_code == 400
        assert "zero total shares" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_unknown_member_in_split(self, test_group: dict, create_expense):
        response = await create_expense(
            test_group["id"], split_type="exact", split_inputs={"alice": 200, "mallory": 100}
        )

        assert response.status_code == 400
        assert "mallory" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_payer_not_in_group(self, test_group: dict, create_expense):
        response = await create_expense(test_group["id"], paid_by="mallory")

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_non_positive_amount(self, test_group: dict, create_expense):
        response = await create_expense(test_group["id"], amount="0")

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_amount_below_one_cent(self, test_group: dict, create_expense):
        response = await create_expense(test_group["id"], amount="0.004")

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_amount_too_large(self, test_group: dict, create_expense):
        """Amounts beyond the stored column width are rejected before saving"""
        response = await create_expense(test_group["id"], amount="1e30")

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_unknown_split_type(self, test_group: dict, create_expense):
        response = await create_expense(test_group["id"], split_type="itemized")

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_unknown_group(self, create_expense):
        response = await create_expense("missing")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_rejected_expense_is_not_saved(
        self, client: AsyncClient, test_group: dict, create_expense
    ):
        await create_expense(
            test_group["id"], split_type="exact", split_inputs={"alice": 1}
        )

        response = await client.get(f"/api/v1/groups/{test_group['id']}/expenses")

        assert response.json()["pagination"]["total_items"] == 0


class TestIdempotency:
    """Test Idempotency-Key handling"""

    @pytest.mark.asyncio
    async def test_repeated_key_returns_original(self, client: AsyncClient, test_group: dict):
        store = {}

        async def fake_get(key):
            return store.get(key)

        async def fake_set(key, value, ttl=None):
            store[key] = value
            return True

        expense_data = {
            "description": "Groceries",
            "amount": "90.00",
            "paid_by": "bob",
            "expense_date": "2024-03-02",
        }
        url = f"/api/v1/groups/{test_group['id']}/expenses"
        headers = {"Idempotency-Key": "groceries-1"}

        with patch.object(CacheService, "get", AsyncMock(side_effect=fake_get)), \
                patch.object(CacheService, "set", AsyncMock(side_effect=fake_set)):
            first = await client.post(url, json=expense_data, headers=headers)
            second = await client.post(url, json=expense_data, headers=headers)

        assert first.status_code == 201
        assert second.status_code == 201
        assert first.json()["id"] == second.json()["id"]

        listing = await client.get(url)
        assert listing.json()["pagination"]["total_items"] == 1

    @pytest.mark.asyncio
    async def test_cache_outage_does_not_block_creation(
        self, client: AsyncClient, test_group: dict, create_expense
    ):
        with patch.object(CacheService, "get", AsyncMock(return_value=None)), \
                patch.object(CacheService, "set", AsyncMock(return_value=False)):
            response = await client.post(
                f"/api/v1/groups/{test_group['id']}/expenses",
                json={"description": "Taxi", "amount": "30", "paid_by": "carol"},
                headers={"Idempotency-Key": "taxi-1"},
            )

        assert response.status_code == 201


class TestReadExpenses:
    """Test listing, fetching and deleting expenses"""

    @pytest.mark.asyncio
    async def test_list_expenses_newest_first(
        self, client: AsyncClient, test_group: dict, create_expense
    ):
        await create_expense(test_group["id"], description="Older", expense_date="2024-01-01")
        await create_expense(test_group["id"], description="Newer", expense_date="2024-02-01")

        response = await client.get(f"/api/v1/groups/{test_group['id']}/expenses")

        assert response.status_code == 200
        assert [e["description"] for e in response.json()["items"]] == ["Newer", "Older"]

    @pytest.mark.asyncio
    async def test_list_expenses_by_category(
        self, client: AsyncClient, test_group: dict, create_expense
    ):
        await create_expense(test_group["id"], category="Travel")
        await create_expense(test_group["id"], category="Food & Dining")

        response = await client.get(
            f"/api/v1/groups/{test_group['id']}/expenses", params={"category": "Travel"}
        )

        data = response.json()
        assert data["pagination"]["total_items"] == 1
        assert data["items"][0]["category"] == "Travel"

    @pytest.mark.asyncio
    async def test_list_expenses_pagination(
        self, client: AsyncClient, test_group: dict, create_expense
    ):
        for day in range(1, 4):
            await create_expense(test_group["id"], expense_date=f"2024-03-0{day}")

        response = await client.get(
            f"/api/v1/groups/{test_group['id']}/expenses", params={"page": 2, "page_size": 2}
        )

        pagination = response.json()["pagination"]
        assert pagination["total_items"] == 3
        assert pagination["total_pages"] == 2
        assert len(response.json()["items"]) == 1

    @pytest.mark.asyncio
    async def test_get_expense(self, client: AsyncClient, test_group: dict, create_expense):
        created = (await create_expense(test_group["id"])).json()

        response = await client.get(
            f"/api/v1/groups/{test_group['id']}/expenses/{created['id']}"
        )

        assert response.status_code == 200
        assert response.json()["splits"] == created["splits"]

    @pytest.mark.asyncio
    async def test_get_expense_not_found(self, client: AsyncClient, test_group: dict):
        response = await client.get(f"/api/v1/groups/{test_group['id']}/expenses/missing")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_expense(self, client: AsyncClient, test_group: dict, create_expense):
        created = (await create_expense(test_group["id"])).json()
        url = f"/api/v1/groups/{test_group['id']}/expenses/{created['id']}"

        response = await client.delete(url)

        assert response.status_code == 204
        assert (await client.get(url)).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_expense_not_found(self, client: AsyncClient, test_group: dict):
        response = await client.delete(f"/api/v1/groups/{test_group['id']}/expenses/missing")

        assert response.status_code == 404


class TestSplitPreview:
    """Test split preview"""

    @pytest.mark.asyncio
    async def test_preview_flags_bad_percentages(self, client: AsyncClient, test_group: dict):
        response = await client.post(
            f"/api/v1/groups/{test_group['id']}/splits/preview",
            json={"amount": "100", "split_type": "percentage", "split_inputs": {"alice": 50, "bob": 40}},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total_valid"] is False
        assert Decimal(str(data["input_total"])) == Decimal("90")
        assert amounts(data["splits"]) == {"alice": Decimal("50"), "bob": Decimal("40")}

    @pytest.mark.asyncio
    async def test_preview_shares(self, client: AsyncClient, test_group: dict):
        response = await client.post(
            f"/api/v1/groups/{test_group['id']}/splits/preview",
            json={"amount": "50", "split_type": "shares", "split_inputs": {"alice": 1, "bob": 3}},
        )

        data = response.json()
        assert data["total_valid"] is True
        assert amounts(data["splits"]) == {"alice": Decimal("12.50"), "bob": Decimal("37.50")}

    @pytest.mark.asyncio
    async def test_preview_rejects_sub_cent_amount(self, client: AsyncClient, test_group: dict):
        response = await client.post(
            f"/api/v1/groups/{test_group['id']}/splits/preview",
            json={"amount": "0.004", "split_type": "equal"},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_preview_does_not_save(self, client: AsyncClient, test_group: dict):
        await client.post(
            f"/api/v1/groups/{test_group['id']}/splits/preview",
            json={"amount": "50", "split_type": "equal"},
        )

        response = await client.get(f"/api/v1/groups/{test_group['id']}/expenses")

        assert response.json()["pagination"]["total_items"] == 0

    @pytest.mark.asyncio
    async def test_preview_unknown_member(self, client: AsyncClient, test_group: dict):
        response = await client.post(
            f"/api/v1/groups/{test_group['id']}/splits/preview",
            json={"amount": "50", "split_type": "shares", "split_inputs": {"zoe": 1}},
        )

        assert response.status_code == 400
