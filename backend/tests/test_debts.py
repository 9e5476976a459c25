# tests/test_debts.py
"""
Tests for payables, receivables and legacy debts.

Tests cover:
- Creating balances against contacts
- Payments: status transitions, cash transaction, notification
- Guards: overpayment, deleting paid balances, foreign branches
- The legacy debt migration command
"""

from datetime import date, timedelta
from decimal import Decimal
from io import StringIO

import pytest
from django.core.exceptions import PermissionDenied
from django.core.management import call_command
from django.core.management.base import CommandError

from contacts.models import Contact
from debts.commands import (
    collect_receivable,
    create_debt,
    create_payable,
    create_receivable,
    delete_payable,
    pay_debt,
    pay_payable,
    update_payable,
)
from debts.models import AccountPayable, Debt, DebtStatus, PayablePayment
from notifications.models import Notification
from transactions.categories import PAYABLE_PAYMENT_CATEGORY, RECEIVABLE_COLLECTION_CATEGORY
from transactions.commands import create_income
from transactions.models import Transaction, TransactionType


@pytest.fixture
def payable(accountant_actor, supplier):
    return create_payable(
        accountant_actor,
        supplier.pk,
        Decimal("1000.00"),
        due_date=date.today() + timedelta(days=10),
        invoice_number="INV-1",
    ).data


@pytest.fixture
def receivable(accountant_actor, customer):
    return create_receivable(accountant_actor, customer.pk, Decimal("400.00")).data


# =============================================================================
# Payables
# =============================================================================

@pytest.mark.django_db
class TestPayables:

    def test_create_payable(self, payable, supplier, branch):
        assert payable.contact == supplier
        assert payable.branch == branch
        assert payable.remaining_amount == Decimal("1000.00")
        assert payable.status == DebtStatus.ACTIVE

    def test_amount_must_be_positive(self, accountant_actor, supplier):
        result = create_payable(accountant_actor, supplier.pk, Decimal("-5"))

        assert not result.success

    def test_due_date_before_date_is_refused(self, accountant_actor, supplier):
        result = create_payable(
            accountant_actor, supplier.pk, Decimal("5"), date=date(2025, 3, 10), due_date=date(2025, 3, 1),
        )

        assert not result.success

    def test_accountant_cannot_use_other_branch_contact(self, accountant_actor, other_branch_contact):
        result = create_payable(accountant_actor, other_branch_contact.pk, Decimal("10"))

        assert result.status_code == 404

    def test_partial_payment(self, accountant_actor, payable, branch):
        result = pay_payable(accountant_actor, payable.pk, Decimal("300.00"))

        assert result.success
        payable.refresh_from_db()
        assert payable.remaining_amount == Decimal("700.00")
        assert payable.status == DebtStatus.PARTIAL

        txn = result.data["transaction"]
        assert txn.type == TransactionType.EXPENSE
        assert txn.category == PAYABLE_PAYMENT_CATEGORY
        assert txn.amount == Decimal("300.00")
        assert txn.branch == branch
        assert txn.linked_payable_id == payable.pk

        notification = Notification.objects.get(type="payable_payment")
        assert notification.related_id == str(payable.pk)
        assert notification.branch == branch

    def test_full_payment_marks_paid(self, accountant_actor, payable):
        pay_payable(accountant_actor, payable.pk, Decimal("400.00"))
        pay_payable(accountant_actor, payable.pk, Decimal("600.00"))

        payable.refresh_from_db()
        assert payable.remaining_amount == Decimal("0.00")
        assert payable.status == DebtStatus.PAID
        assert PayablePayment.objects.filter(payable=payable).count() == 2

    def test_overpayment_is_refused(self, accountant_actor, payable):
        result = pay_payable(accountant_actor, payable.pk, Decimal("1000.01"))

        assert not result.success
        assert "exceeds" in result.error
        assert Transaction.objects.count() == 0

    def test_other_branch_cannot_pay(self, other_accountant_actor, payable):
        with pytest.raises(PermissionDenied):
            pay_payable(other_accountant_actor, payable.pk, Decimal("1"))

    def test_amount_is_immutable(self, accountant_actor, payable):
        result = update_payable(accountant_actor, payable.pk, amount=Decimal("5"))

        assert not result.success

    def test_update_notes(self, accountant_actor, payable):
        result = update_payable(accountant_actor, payable.pk, notes="call before friday")

        assert result.success
        assert result.event.changes["notes"]["new"] == "call before friday"

    def test_cannot_delete_with_payments(self, accountant_actor, payable):
        pay_payable(accountant_actor, payable.pk, Decimal("1"))

        result = delete_payable(accountant_actor, payable.pk)

        assert not result.success
        assert AccountPayable.objects.filter(pk=payable.pk).exists()

    def test_delete_without_payments(self, accountant_actor, payable):
        result = delete_payable(accountant_actor, payable.pk)

        assert result.success
        assert not AccountPayable.objects.filter(pk=payable.pk).exists()


# =============================================================================
# Receivables
# =============================================================================

@pytest.mark.django_db
class TestReceivables:

    def test_collection_writes_income(self, accountant_actor, receivable):
        result = collect_receivable(accountant_actor, receivable.pk, Decimal("400.00"), payment_method="MASTER")

        assert result.success
        receivable.refresh_from_db()
        assert receivable.status == DebtStatus.PAID
        txn = result.data["transaction"]
        assert txn.type == TransactionType.INCOME
        assert txn.category == RECEIVABLE_COLLECTION_CATEGORY
        assert txn.payment_method == "MASTER"

    def test_unassigned_accountant_cannot_collect(self, unassigned_accountant, receivable):
        from accounts.authz import actor_for_user

        result = collect_receivable(actor_for_user(unassigned_accountant), receivable.pk, Decimal("1"))

        assert not result.success


# =============================================================================
# Legacy debts
# =============================================================================

@pytest.mark.django_db
class TestLegacyDebts:

    def test_pay_debt(self, accountant_actor):
        debt = create_debt(accountant_actor, "Old Creditor", Decimal("90")).data

        result = pay_debt(accountant_actor, debt.pk, Decimal("30"))

        assert result.success
        debt.refresh_from_db()
        assert debt.remaining_amount == Decimal("60")
        assert debt.status == DebtStatus.PARTIAL

    def test_migration_moves_debts_to_payables(self, accountant_actor, branch):
        first = create_debt(accountant_actor, "Old Creditor", Decimal("90")).data
        create_debt(accountant_actor, " Old Creditor ", Decimal("10"))
        pay_debt(accountant_actor, first.pk, Decimal("30"))

        call_command("migrate_debts_to_contacts", verbosity=0)

        contacts = Contact.objects.filter(branch=branch, name="Old Creditor")
        assert contacts.count() == 1
        payables = AccountPayable.objects.filter(contact=contacts.get())
        assert payables.count() == Debt.objects.count()
        migrated = payables.get(original_amount=Decimal("90"))
        assert migrated.remaining_amount == Decimal("60")
        assert migrated.payments.count() == 1

    def test_dry_run_rolls_back(self, accountant_actor):
        create_debt(accountant_actor, "Old Creditor", Decimal("90"))
        create_income(accountant_actor, amount=Decimal("10"))
        out = StringIO()

        call_command("migrate_debts_to_contacts", dry_run=True, stdout=out)

        assert "Dry run" in out.getvalue()
        assert AccountPayable.all_objects.count() == 0
        assert not Contact.objects.filter(name="Old Creditor").exists()
        assert Transaction.objects.count() == 1

    def test_keep_transactions(self, accountant_actor):
        create_debt(accountant_actor, "Old Creditor", Decimal("90"))
        create_income(accountant_actor, amount=Decimal("10"))

        call_command("migrate_debts_to_contacts", keep_transactions=True, stdout=StringIO())

        assert Transaction.objects.count() == 1
        assert AccountPayable.objects.count() == 1

    def test_transactions_are_cleared_by_default(self, accountant_actor):
        create_debt(accountant_actor, "Old Creditor", Decimal("90"))
        create_income(accountant_actor, amount=Decimal("10"))

        call_command("migrate_debts_to_contacts", stdout=StringIO())

        assert Transaction.all_objects.count() == 0
        assert AccountPayable.objects.count() == 1

    def test_verification_passes_after_migration(self, accountant_actor):
        debt = create_debt(accountant_actor, "Old Creditor", Decimal("90")).data
        pay_debt(accountant_actor, debt.pk, Decimal("30"))
        call_command("migrate_debts_to_contacts", stdout=StringIO())
        out = StringIO()

        call_command("verify_debt_migration", stdout=out)

        assert "All checks passed" in out.getvalue()

    def test_verification_fails_on_mismatch(self, accountant_actor, supplier):
        create_debt(accountant_actor, "Old Creditor", Decimal("90"))
        call_command("migrate_debts_to_contacts", stdout=StringIO())
        create_payable(accountant_actor, supplier.pk, Decimal("5"))
        out = StringIO()

        with pytest.raises(CommandError, match="Verification failed"):
            call_command("verify_debt_migration", keep_transactions=True, stdout=out)

        assert "payable count mismatch" in out.getvalue()


# =============================================================================
# API
# =============================================================================

@pytest.mark.django_db
class TestDebtAPI:

    def test_pay_endpoint(self, accountant_client, payable):
        response = accountant_client.post(
            f"/api/payables/{payable.pk}/pay/",
            {"amount_paid": "250.00"},
            format="json",
        )

        assert response.status_code in (200, 201)
        payable.refresh_from_db()
        assert payable.remaining_amount == Decimal("750.00")

    def test_list_is_branch_scoped(self, api_client, other_accountant, payable):
        api_client.force_authenticate(user=other_accountant)

        response = api_client.get("/api/payables/")

        assert response.status_code == 200
        assert response.data["meta"]["total"] == 0

    def test_missing_payable_in_arabic(self, accountant_client):
        response = accountant_client.delete("/api/payables/999999/", HTTP_ACCEPT_LANGUAGE="ar")

        assert response.status_code == 404
        assert response.data["detail"] == "الحساب الدائن غير موجود"

    def test_missing_payable_in_english(self, accountant_client):
        response = accountant_client.delete("/api/payables/999999/")

        assert response.data["detail"] == "Payable not found"
