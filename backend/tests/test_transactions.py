# tests/test_transactions.py
"""
Tests for income/expense transactions.

Tests cover:
- Simple and partially paid transactions (remainder becomes a debt)
- Multi-item transactions moving stock, with rollback on failure
- Discounts
- Branch scoping of writes, reads and the daily summary
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from django.core.exceptions import PermissionDenied

from core.models import AuditLog
from debts.models import AccountPayable, AccountReceivable, DebtStatus
from inventory.models import InventoryConsumption
from transactions.commands import (
    create_discount_reason,
    create_expense,
    create_income,
    delete_transaction,
    update_transaction,
)
from transactions.models import Transaction, TransactionInventoryItem
from transactions.pricing import calculate_discount, calculate_item_total


# =============================================================================
# Pricing
# =============================================================================

class TestPricing:

    def test_percentage_discount(self):
        breakdown = calculate_discount(Decimal("200"), "PERCENTAGE", Decimal("10"))

        assert breakdown.discount_amount == Decimal("20.00")
        assert breakdown.total == Decimal("180.00")

    def test_amount_discount_never_exceeds_subtotal(self):
        breakdown = calculate_discount(Decimal("50"), "AMOUNT", Decimal("80"))

        assert breakdown.total == Decimal("0.00")

    def test_no_discount_without_type(self):
        assert calculate_discount(Decimal("12.5")).total == Decimal("12.50")

    def test_item_total(self):
        assert calculate_item_total(Decimal("3"), Decimal("2.50")).total == Decimal("7.50")


# =============================================================================
# Create
# =============================================================================

@pytest.mark.django_db
class TestCreateTransaction:

    def test_simple_income(self, accountant_actor, branch):
        result = create_income(accountant_actor, amount=Decimal("150.00"), category="SALES")

        assert result.success
        txn = result.data
        assert txn.branch == branch
        assert txn.amount == Decimal("150.00")
        assert txn.total_amount is None
        assert txn.currency == "USD"
        assert AuditLog.objects.filter(entity_type="TRANSACTION", entity_id=str(txn.pk)).exists()

    def test_arabic_category_label_is_normalized(self, accountant_actor):
        result = create_income(accountant_actor, amount=Decimal("10"), category="مبيعات")

        assert result.data.category == "SALES"

    def test_amount_must_be_positive(self, accountant_actor):
        result = create_income(accountant_actor, amount=Decimal("0"))

        assert not result.success
        assert "Amount" in result.error

    def test_admin_must_name_branch(self, admin_actor):
        with pytest.raises(PermissionDenied):
            create_expense(admin_actor, amount=Decimal("10"))

    def test_accountant_cannot_write_to_other_branch(self, accountant_actor, branch, other_branch):
        result = create_expense(accountant_actor, amount=Decimal("10"), branch_id=other_branch.pk)

        assert result.data.branch == branch

    def test_partial_income_opens_receivable(self, accountant_actor, customer):
        due = date.today() + timedelta(days=30)
        result = create_income(
            accountant_actor,
            amount=Decimal("100.00"),
            category="SALES",
            paid_amount=Decimal("40.00"),
            contact_id=customer.pk,
            receivable_due_date=due,
        )

        assert result.success
        txn = result.data
        assert txn.amount == Decimal("40.00")
        assert txn.total_amount == Decimal("100.00")
        receivable = AccountReceivable.objects.get(pk=txn.linked_receivable_id)
        assert receivable.remaining_amount == Decimal("60.00")
        assert receivable.status == DebtStatus.ACTIVE
        assert receivable.due_date == due
        assert receivable.linked_sale_transaction_id == txn.pk

    def test_partial_expense_opens_payable(self, accountant_actor, supplier):
        result = create_expense(
            accountant_actor,
            amount=Decimal("300.00"),
            category="RENT",
            paid_amount=Decimal("100.00"),
            contact_id=supplier.pk,
        )

        assert result.success
        payable = AccountPayable.objects.get(pk=result.data.linked_payable_id)
        assert payable.original_amount == Decimal("200.00")
        assert payable.contact == supplier

    def test_unpaid_remainder_requires_contact(self, accountant_actor):
        result = create_expense(accountant_actor, amount=Decimal("300.00"), paid_amount=Decimal("100.00"))

        assert not result.success
        assert Transaction.objects.count() == 0

    def test_paid_amount_cannot_exceed_total(self, accountant_actor, supplier):
        result = create_expense(
            accountant_actor,
            amount=Decimal("50.00"),
            paid_amount=Decimal("60.00"),
            contact_id=supplier.pk,
        )

        assert not result.success

    def test_contact_of_other_branch_is_refused(self, accountant_actor, other_branch_contact):
        with pytest.raises(PermissionDenied):
            create_expense(
                accountant_actor,
                amount=Decimal("50.00"),
                paid_amount=Decimal("10.00"),
                contact_id=other_branch_contact.pk,
            )

    def test_due_date_before_transaction_date_rolls_back(self, accountant_actor, customer):
        result = create_income(
            accountant_actor,
            amount=Decimal("100.00"),
            paid_amount=Decimal("10.00"),
            contact_id=customer.pk,
            date=date(2025, 5, 10),
            receivable_due_date=date(2025, 5, 1),
        )

        assert not result.success
        assert Transaction.objects.count() == 0
        assert AccountReceivable.objects.count() == 0

    def test_discount_on_sales(self, accountant_actor):
        result = create_income(
            accountant_actor,
            amount=Decimal("200.00"),
            category="SALES",
            discount_type="PERCENTAGE",
            discount_value=Decimal("25"),
            discount_reason="Loyal customer",
        )

        assert result.success
        txn = result.data
        assert txn.subtotal == Decimal("200.00")
        assert txn.amount == Decimal("150.00")
        assert txn.discount_reason == "Loyal customer"

    def test_discount_not_allowed_on_other_income(self, accountant_actor):
        result = create_income(
            accountant_actor,
            amount=Decimal("200.00"),
            category="OTHER_INCOME",
            discount_type="AMOUNT",
            discount_value=Decimal("5"),
        )

        assert not result.success


# =============================================================================
# Multi-item
# =============================================================================

@pytest.mark.django_db
class TestMultiItemTransactions:

    def test_sale_consumes_stock(self, accountant_actor, flour):
        result = create_income(
            accountant_actor,
            category="SALES",
            items=[{"inventory_item_id": flour.pk, "quantity": Decimal("10"), "unit_price": Decimal("3.00")}],
        )

        assert result.success
        txn = result.data
        assert txn.amount == Decimal("30.00")
        assert txn.subtotal == Decimal("30.00")
        flour.refresh_from_db()
        assert flour.quantity == Decimal("90.000")
        line = TransactionInventoryItem.objects.get(transaction=txn)
        assert line.operation_type == TransactionInventoryItem.OperationType.CONSUMPTION
        assert InventoryConsumption.objects.filter(inventory_item=flour).count() == 1

    def test_purchase_receives_stock_at_weighted_cost(self, accountant_actor, flour):
        result = create_expense(
            accountant_actor,
            category="INVENTORY",
            items=[{
                "inventory_item_id": flour.pk,
                "quantity": Decimal("100"),
                "unit_price": Decimal("4.00"),
                "operation_type": TransactionInventoryItem.OperationType.PURCHASE,
            }],
        )

        assert result.success
        flour.refresh_from_db()
        assert flour.quantity == Decimal("200.000")
        assert flour.cost_per_unit == Decimal("3.00")

    def test_insufficient_stock_rolls_back_everything(self, accountant_actor, flour):
        result = create_income(
            accountant_actor,
            category="SALES",
            items=[{"inventory_item_id": flour.pk, "quantity": Decimal("500"), "unit_price": Decimal("3.00")}],
        )

        assert not result.success
        assert "Insufficient" in result.error
        assert Transaction.objects.count() == 0
        flour.refresh_from_db()
        assert flour.quantity == Decimal("100.000")

    def test_category_without_items_support(self, accountant_actor, flour):
        result = create_expense(
            accountant_actor,
            category="RENT",
            items=[{"inventory_item_id": flour.pk, "quantity": Decimal("1"), "unit_price": Decimal("1")}],
        )

        assert not result.success

    def test_update_items_recomputes_amount(self, accountant_actor, flour):
        txn = create_income(
            accountant_actor,
            category="SALES",
            items=[{"inventory_item_id": flour.pk, "quantity": Decimal("2"), "unit_price": Decimal("3.00")}],
        ).data
        line = txn.inventory_items.get()

        result = update_transaction(
            accountant_actor, txn.pk, items=[{"id": line.pk, "quantity": Decimal("4")}],
        )

        assert result.success
        assert result.data.amount == Decimal("12.00")

    def test_update_items_refuses_non_positive_quantity(self, accountant_actor, flour):
        txn = create_income(
            accountant_actor,
            category="SALES",
            items=[{"inventory_item_id": flour.pk, "quantity": Decimal("2"), "unit_price": Decimal("3.00")}],
        ).data
        line = txn.inventory_items.get()

        result = update_transaction(
            accountant_actor, txn.pk, items=[{"id": line.pk, "quantity": Decimal("-5")}],
        )

        assert not result.success
        txn.refresh_from_db()
        line.refresh_from_db()
        assert txn.amount == Decimal("6.00")
        assert line.quantity == Decimal("2")

    def test_update_items_refuses_zero_total(self, accountant_actor, flour):
        txn = create_income(
            accountant_actor,
            category="SALES",
            items=[{"inventory_item_id": flour.pk, "quantity": Decimal("2"), "unit_price": Decimal("3.00")}],
        ).data
        line = txn.inventory_items.get()

        result = update_transaction(
            accountant_actor, txn.pk, items=[{"id": line.pk, "unit_price": Decimal("0")}],
        )

        assert not result.success
        assert "greater than 0" in result.error
        line.refresh_from_db()
        assert line.unit_price == Decimal("3.00")
        txn.refresh_from_db()
        assert txn.amount == Decimal("6.00")

    def test_patch_with_negative_quantity_is_400(self, accountant_client, accountant_actor, flour):
        txn = create_income(
            accountant_actor,
            category="SALES",
            items=[{"inventory_item_id": flour.pk, "quantity": Decimal("2"), "unit_price": Decimal("3.00")}],
        ).data
        line = txn.inventory_items.get()

        response = accountant_client.patch(
            f"/api/transactions/{txn.pk}/",
            {"items": [{"id": line.pk, "quantity": "-5"}]},
            format="json",
        )

        assert response.status_code == 400
        txn.refresh_from_db()
        assert txn.amount == Decimal("6.00")


# =============================================================================
# Update / delete
# =============================================================================

@pytest.mark.django_db
class TestUpdateDeleteTransaction:

    def test_update_writes_diff(self, accountant_actor):
        txn = create_income(accountant_actor, amount=Decimal("10")).data

        result = update_transaction(accountant_actor, txn.pk, amount=Decimal("25"), notes="fixed")

        assert result.success
        entry = result.event
        assert entry.action == AuditLog.Action.UPDATE
        assert "amount" in entry.changes

    def test_other_branch_accountant_cannot_edit(self, accountant_actor, other_accountant_actor):
        txn = create_income(accountant_actor, amount=Decimal("10")).data

        with pytest.raises(PermissionDenied):
            update_transaction(other_accountant_actor, txn.pk, notes="mine now")

    def test_delete_is_soft(self, accountant_actor, admin_actor):
        txn = create_income(accountant_actor, amount=Decimal("10")).data

        result = delete_transaction(admin_actor, txn.pk)

        assert result.success
        assert not Transaction.objects.filter(pk=txn.pk).exists()
        assert Transaction.all_objects.get(pk=txn.pk).is_deleted


@pytest.mark.django_db
class TestDiscountReasons:

    def test_duplicate_reason_is_refused(self, admin_actor):
        assert create_discount_reason(admin_actor, "Staff").success

        result = create_discount_reason(admin_actor, "Staff")

        assert not result.success

    def test_accountant_cannot_manage_reasons(self, accountant_actor):
        with pytest.raises(PermissionDenied):
            create_discount_reason(accountant_actor, "Staff")


# =============================================================================
# API
# =============================================================================

@pytest.mark.django_db
class TestTransactionAPI:

    def test_create_income_endpoint(self, accountant_client):
        response = accountant_client.post(
            "/api/transactions/income/",
            {"amount": "75.50", "category": "SERVICES", "payment_method": "MASTER"},
            format="json",
        )

        assert response.status_code == 201
        assert response.data["amount"] == "75.50"
        assert response.data["category_label"] == "خدمات"

    def test_list_is_branch_scoped(self, accountant_client, accountant_actor, admin_actor, other_branch):
        create_income(accountant_actor, amount=Decimal("10"))
        create_income(admin_actor, amount=Decimal("20"), branch_id=other_branch.pk)

        response = accountant_client.get("/api/transactions/")

        assert response.status_code == 200
        assert response.data["meta"]["total"] == 1
        assert response.data["data"][0]["amount"] == "10.00"

    def test_daily_summary(self, admin_client, accountant_actor):
        create_income(accountant_actor, amount=Decimal("100"), payment_method="CASH")
        create_income(accountant_actor, amount=Decimal("50"), payment_method="MASTER")
        create_expense(accountant_actor, amount=Decimal("30"))

        response = admin_client.get("/api/transactions/summary/")

        assert response.status_code == 200
        assert Decimal(response.data["total_income"]) == Decimal("150")
        assert Decimal(response.data["total_expense"]) == Decimal("30")
        assert Decimal(response.data["net"]) == Decimal("120")

    def test_unauthenticated_is_refused(self, api_client):
        assert api_client.get("/api/transactions/").status_code == 401
