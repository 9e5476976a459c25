# tests/test_inventory.py
"""
Tests for inventory items and stock movements.
"""

from decimal import Decimal

import pytest
from django.core.exceptions import PermissionDenied

from inventory import stock
from inventory.commands import create_item, create_sub_unit, delete_item, record_consumption, update_item
from inventory.models import InventoryConsumption, InventoryItem
from transactions.commands import create_income


class TestWeightedAverageCost:

    def test_blends_existing_and_incoming(self):
        assert stock.weighted_average_cost(Decimal("10"), Decimal("2"), Decimal("10"), Decimal("4")) == Decimal("3.00")

    def test_empty_stock_takes_incoming_price(self):
        assert stock.weighted_average_cost(Decimal("0"), Decimal("9"), Decimal("0"), Decimal("1.5")) == Decimal("1.50")


@pytest.mark.django_db
class TestInventoryItems:

    def test_create_item(self, accountant_actor, branch):
        result = create_item(accountant_actor, "Sugar", "KG", Decimal("20"), Decimal("1.25"))

        assert result.success
        assert result.data.branch == branch

    def test_same_name_and_unit_conflicts(self, accountant_actor, flour):
        result = create_item(accountant_actor, "Flour", "KG", Decimal("1"), Decimal("1"))

        assert not result.success
        assert result.status_code == 409

    def test_same_name_other_unit_is_allowed(self, accountant_actor, flour):
        assert create_item(accountant_actor, "Flour", "PIECE", Decimal("1"), Decimal("1")).success

    def test_negative_quantity_is_refused(self, accountant_actor):
        result = create_item(accountant_actor, "Salt", "KG", Decimal("-1"), Decimal("1"))

        assert not result.success

    def test_rename_into_existing_item_conflicts(self, accountant_actor, flour):
        sugar = create_item(accountant_actor, "Sugar", "KG", Decimal("1"), Decimal("1")).data

        result = update_item(accountant_actor, sugar.pk, name="Flour")

        assert result.status_code == 409

    def test_other_branch_cannot_update(self, other_accountant_actor, flour):
        with pytest.raises(PermissionDenied):
            update_item(other_accountant_actor, flour.pk, quantity=Decimal("0"))

    def test_item_used_by_transaction_cannot_be_deleted(self, accountant_actor, flour):
        create_income(
            accountant_actor,
            category="SALES",
            items=[{"inventory_item_id": flour.pk, "quantity": Decimal("1"), "unit_price": Decimal("3")}],
        )

        result = delete_item(accountant_actor, flour.pk)

        assert not result.success
        assert InventoryItem.objects.filter(pk=flour.pk).exists()

    def test_sub_unit_name_is_unique_per_item(self, accountant_actor, flour):
        assert create_sub_unit(accountant_actor, flour.pk, "Bag", Decimal("25"), Decimal("70")).success

        result = create_sub_unit(accountant_actor, flour.pk, "Bag", Decimal("50"), Decimal("140"))

        assert result.status_code == 409


@pytest.mark.django_db
class TestConsumption:

    def test_consumption_reduces_stock(self, accountant_actor, flour):
        result = record_consumption(accountant_actor, flour.pk, Decimal("12.5"), "KG", reason="spoiled")

        assert result.success
        flour.refresh_from_db()
        assert flour.quantity == Decimal("87.500")
        assert result.event.changes["previous_quantity"] == Decimal("100")

    def test_unit_mismatch_is_refused(self, accountant_actor, flour):
        result = record_consumption(accountant_actor, flour.pk, Decimal("1"), "LITER")

        assert not result.success
        assert "Unit mismatch" in result.error

    def test_cannot_consume_more_than_available(self, accountant_actor, flour):
        result = record_consumption(accountant_actor, flour.pk, Decimal("100.001"), "KG")

        assert not result.success
        assert InventoryConsumption.objects.count() == 0


@pytest.mark.django_db
class TestInventoryAPI:

    def test_value_endpoint(self, accountant_client, flour):
        response = accountant_client.get("/api/inventory/value/")

        assert response.status_code == 200
        assert Decimal(str(response.data["total_value"])) == Decimal("200.00")
        assert response.data["item_count"] == 1

    def test_consumption_endpoint_validates_quantity(self, accountant_client, flour):
        response = accountant_client.post(
            "/api/inventory/consumption/",
            {"inventory_item_id": flour.pk, "quantity": "0", "unit": "KG"},
            format="json",
        )

        assert response.status_code == 400
