# debts/commands.py
"""
Commands for payables, receivables and legacy debts.

Payables and receivables follow the same rules with the money flowing
the other way, so each operation is written once against a BalanceKind
and exposed through a payable_* and a receivable_* entry point.
"""

import logging
from dataclasses import dataclass

from django.db import transaction
from django.utils import timezone
from django.utils.translation import gettext as _
from django.utils.translation import gettext_noop

from accounts.authz import (
    ActorContext,
    assert_branch_access,
    optional_branch_for_write,
    require,
    resolve_branch_for_write,
)
from configuration.models import default_currency_code
from contacts.models import Contact
from core.audit import EntityType, log_create, log_delete, log_payment, log_update, snapshot
from core.commands import CommandResult
from notifications.models import Notification
from notifications.services import broadcast, notify
from transactions.categories import PAYABLE_PAYMENT_CATEGORY, RECEIVABLE_COLLECTION_CATEGORY
from transactions.models import Transaction, TransactionType

from .models import (
    AccountPayable,
    AccountReceivable,
    Debt,
    DebtPayment,
    DebtStatus,
    PayablePayment,
    ReceivablePayment,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BalanceKind:
    name: str
    model: type
    payment_model: type
    parent_field: str
    link_field: str
    entity_type: str
    payment_entity_type: str
    manage_perm: str
    pay_perm: str
    transaction_type: str
    category: str
    payment_note: str
    notification_type: str
    notification_title: str


PAYABLE = BalanceKind(
    name=gettext_noop("payable"),
    model=AccountPayable,
    payment_model=PayablePayment,
    parent_field="payable",
    link_field="linked_payable",
    entity_type=EntityType.ACCOUNT_PAYABLE,
    payment_entity_type=EntityType.PAYABLE_PAYMENT,
    manage_perm="payables.manage",
    pay_perm="payables.pay",
    transaction_type=TransactionType.EXPENSE,
    category=PAYABLE_PAYMENT_CATEGORY,
    payment_note="دفعة حساب دائن - {contact}",
    notification_type="payable_payment",
    notification_title="دفعة حساب دائن",
)

RECEIVABLE = BalanceKind(
    name=gettext_noop("receivable"),
    model=AccountReceivable,
    payment_model=ReceivablePayment,
    parent_field="receivable",
    link_field="linked_receivable",
    entity_type=EntityType.ACCOUNT_RECEIVABLE,
    payment_entity_type=EntityType.RECEIVABLE_PAYMENT,
    manage_perm="receivables.manage",
    pay_perm="receivables.collect",
    transaction_type=TransactionType.INCOME,
    category=RECEIVABLE_COLLECTION_CATEGORY,
    payment_note="تحصيل حساب مدين - {contact}",
    notification_type="receivable_collection",
    notification_title="تحصيل حساب مدين",
)

BALANCE_FIELDS = ("date", "due_date", "description", "invoice_number", "notes", "status")


def _next_status(remaining) -> str:
    return DebtStatus.PAID if remaining == 0 else DebtStatus.PARTIAL


def _due_date_error(date, due_date):
    if due_date and date and due_date < date:
        return _("Due date must be on or after the date")
    return None


# =============================================================================
# Shared implementation
# =============================================================================

def _create_balance(kind: BalanceKind, actor, contact_id, amount, date=None, due_date=None,
                    branch_id=None, linked_transaction_id=None, **fields) -> CommandResult:
    require(actor, kind.manage_perm)

    branch = optional_branch_for_write(actor, branch_id)
    if amount is None or amount <= 0:
        return CommandResult.fail(_("Amount must be greater than 0"))

    contacts = Contact.objects.filter(pk=contact_id)
    if branch is not None:
        contacts = contacts.filter(branch=branch)
    contact = contacts.first()
    if contact is None:
        return CommandResult.not_found(_("Contact not found"))

    date = date or timezone.localdate()
    error = _due_date_error(date, due_date)
    if error:
        return CommandResult.fail(error)

    link_name = "linked_purchase_transaction_id" if kind is PAYABLE else "linked_sale_transaction_id"
    balance = kind.model.objects.create(
        contact=contact,
        branch=branch,
        original_amount=amount,
        remaining_amount=amount,
        date=date,
        due_date=due_date,
        status=DebtStatus.ACTIVE,
        created_by=actor.user,
        **{link_name: linked_transaction_id},
        **{k: v for k, v in fields.items() if k in ("description", "invoice_number", "notes")},
    )
    entry = log_create(actor, kind.entity_type, balance)
    return CommandResult.ok(balance, event=entry)


def _update_balance(kind: BalanceKind, actor, balance_id, **updates) -> CommandResult:
    require(actor, kind.manage_perm)

    balance = kind.model.objects.select_for_update().filter(pk=balance_id).first()
    if balance is None:
        return CommandResult.not_found(_("%(kind)s not found") % {"kind": _(kind.name).capitalize()})
    assert_branch_access(actor, balance)

    if "amount" in updates:
        return CommandResult.fail(_("Cannot update %(kind)s amount after creation") % {"kind": _(kind.name)})
    if "contact_id" in updates:
        return CommandResult.fail(_("Cannot update %(kind)s contact after creation") % {"kind": _(kind.name)})

    error = _due_date_error(updates.get("date", balance.date), updates.get("due_date", balance.due_date))
    if error:
        return CommandResult.fail(error)

    before = snapshot(balance)
    for field in BALANCE_FIELDS:
        if field in updates:
            setattr(balance, field, updates[field])
    balance.save()

    entry = log_update(actor, kind.entity_type, balance, before)
    return CommandResult.ok(balance, event=entry)


def _delete_balance(kind: BalanceKind, actor, balance_id) -> CommandResult:
    require(actor, kind.manage_perm)

    balance = kind.model.objects.filter(pk=balance_id).first()
    if balance is None:
        return CommandResult.not_found(_("%(kind)s not found") % {"kind": _(kind.name).capitalize()})
    assert_branch_access(actor, balance)

    if balance.payments.exists():
        return CommandResult.fail(
            _("Cannot delete %(kind)s with existing payments. Delete payments first.") % {"kind": _(kind.name)}
        )

    balance.soft_delete(actor.user)
    entry = log_delete(actor, kind.entity_type, balance)
    message = _("%(kind)s deleted successfully") % {"kind": _(kind.name).capitalize()}
    return CommandResult.ok({"message": message}, event=entry)


def _settle_balance(kind: BalanceKind, actor, balance_id, amount_paid, payment_date=None,
                    payment_method="CASH", notes="") -> CommandResult:
    """Record one payment against a balance and the cash movement behind it."""
    require(actor, kind.pay_perm)

    if not actor.is_admin and actor.branch is None:
        return CommandResult.fail(_("Accountant must be assigned to branch to record payments"))

    balance = kind.model.objects.select_for_update().select_related("contact", "branch").filter(pk=balance_id).first()
    if balance is None:
        return CommandResult.not_found(_("%(kind)s not found") % {"kind": _(kind.name).capitalize()})
    assert_branch_access(actor, balance)

    if amount_paid is None or amount_paid <= 0:
        return CommandResult.fail(_("Payment amount must be greater than 0"))
    if amount_paid > balance.remaining_amount:
        return CommandResult.fail(
            _("Payment amount %(paid)s exceeds remaining amount %(remaining)s")
            % {"paid": amount_paid, "remaining": balance.remaining_amount}
        )

    branch = balance.branch or actor.branch
    if branch is None:
        return CommandResult.fail(_("A branch is required to record the payment"))

    payment_date = payment_date or timezone.localdate()
    before = snapshot(balance)
    balance.remaining_amount = balance.remaining_amount - amount_paid
    balance.status = _next_status(balance.remaining_amount)
    balance.save(update_fields=["remaining_amount", "status", "updated_at"])

    txn = Transaction.objects.create(
        branch=branch,
        type=kind.transaction_type,
        amount=amount_paid,
        currency=default_currency_code(),
        payment_method=payment_method,
        category=kind.category,
        date=payment_date,
        notes=notes or kind.payment_note.format(contact=balance.contact.name),
        contact=balance.contact,
        created_by=actor.user,
        **{kind.link_field: balance},
    )
    payment = kind.payment_model.objects.create(
        amount_paid=amount_paid,
        payment_date=payment_date,
        payment_method=payment_method,
        notes=notes,
        transaction=txn,
        recorded_by=actor.user,
        **{kind.parent_field: balance},
    )

    entry = log_payment(actor, kind.entity_type, balance, {
        "payment_id": payment.pk,
        "transaction_id": txn.pk,
        "amount_paid": amount_paid,
        "remaining_amount": {"old": before["remaining_amount"], "new": balance.remaining_amount},
        "status": {"old": before["status"], "new": balance.status},
    })
    log_create(actor, kind.payment_entity_type, payment)

    notify(
        type=kind.notification_type,
        title=kind.notification_title,
        message=f"{balance.contact.name}: {amount_paid} (المتبقي {balance.remaining_amount})",
        severity=Notification.Severity.INFO,
        related_id=balance.pk,
        related_type=f"account_{kind.name}",
        branch=branch,
        created_by=actor.user,
        amount=amount_paid,
    )
    broadcast(f"{kind.name}.paid", {
        "id": balance.pk,
        "paymentId": payment.pk,
        "transactionId": txn.pk,
        "remainingAmount": str(balance.remaining_amount),
        "status": balance.status,
    }, branch_id=branch.pk)

    logger.info(
        "Balance settled",
        extra={"kind": kind.name, "balance_id": balance.pk, "amount": str(amount_paid), "status": balance.status},
    )
    return CommandResult.ok({"balance": balance, "payment": payment, "transaction": txn}, event=entry)


# =============================================================================
# Payables
# =============================================================================

@transaction.atomic
def create_payable(actor: ActorContext, contact_id: int, amount, **fields) -> CommandResult:
    return _create_balance(PAYABLE, actor, contact_id, amount, **fields)


@transaction.atomic
def update_payable(actor: ActorContext, payable_id: int, **updates) -> CommandResult:
    return _update_balance(PAYABLE, actor, payable_id, **updates)


@transaction.atomic
def delete_payable(actor: ActorContext, payable_id: int) -> CommandResult:
    return _delete_balance(PAYABLE, actor, payable_id)


@transaction.atomic
def pay_payable(actor: ActorContext, payable_id: int, amount_paid, **fields) -> CommandResult:
    return _settle_balance(PAYABLE, actor, payable_id, amount_paid, **fields)


# =============================================================================
# Receivables
# =============================================================================

@transaction.atomic
def create_receivable(actor: ActorContext, contact_id: int, amount, **fields) -> CommandResult:
    return _create_balance(RECEIVABLE, actor, contact_id, amount, **fields)


@transaction.atomic
def update_receivable(actor: ActorContext, receivable_id: int, **updates) -> CommandResult:
    return _update_balance(RECEIVABLE, actor, receivable_id, **updates)


@transaction.atomic
def delete_receivable(actor: ActorContext, receivable_id: int) -> CommandResult:
    return _delete_balance(RECEIVABLE, actor, receivable_id)


@transaction.atomic
def collect_receivable(actor: ActorContext, receivable_id: int, amount_paid, **fields) -> CommandResult:
    return _settle_balance(RECEIVABLE, actor, receivable_id, amount_paid, **fields)


# =============================================================================
# Legacy debts
# =============================================================================

@transaction.atomic
def create_debt(
    actor: ActorContext,
    creditor_name: str,
    amount,
    date=None,
    due_date=None,
    notes: str = "",
    branch_id=None,
) -> CommandResult:
    require(actor, "debts.manage")

    branch = resolve_branch_for_write(actor, branch_id)
    if amount is None or amount <= 0:
        return CommandResult.fail(_("Amount must be greater than 0"))

    date = date or timezone.localdate()
    error = _due_date_error(date, due_date)
    if error:
        return CommandResult.fail(error)

    debt = Debt.objects.create(
        creditor_name=creditor_name,
        branch=branch,
        original_amount=amount,
        remaining_amount=amount,
        date=date,
        due_date=due_date,
        status=DebtStatus.ACTIVE,
        notes=notes,
        created_by=actor.user,
    )
    entry = log_create(actor, EntityType.DEBT, debt)
    return CommandResult.ok(debt, event=entry)


@transaction.atomic
def pay_debt(actor: ActorContext, debt_id: int, amount_paid, payment_date=None, notes: str = "") -> CommandResult:
    require(actor, "debts.manage")

    debt = Debt.objects.select_for_update().filter(pk=debt_id).first()
    if debt is None:
        return CommandResult.not_found(_("Debt not found"))
    assert_branch_access(actor, debt)

    if amount_paid is None or amount_paid <= 0:
        return CommandResult.fail(_("Payment amount must be greater than 0"))
    if amount_paid > debt.remaining_amount:
        return CommandResult.fail(
            _("Payment amount %(paid)s exceeds remaining amount %(remaining)s")
            % {"paid": amount_paid, "remaining": debt.remaining_amount}
        )

    debt.remaining_amount = debt.remaining_amount - amount_paid
    debt.status = _next_status(debt.remaining_amount)
    debt.save(update_fields=["remaining_amount", "status", "updated_at"])

    payment = DebtPayment.objects.create(
        debt=debt,
        amount_paid=amount_paid,
        payment_date=payment_date or timezone.localdate(),
        notes=notes,
        recorded_by=actor.user,
    )
    entry = log_payment(actor, EntityType.DEBT, debt, {
        "payment_id": payment.pk,
        "amount_paid": amount_paid,
        "remaining_amount": debt.remaining_amount,
        "status": debt.status,
    })
    return CommandResult.ok(payment, event=entry)
