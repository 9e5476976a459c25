# transactions/commands.py
"""
Commands for income/expense transactions and discount reasons.

create_income and create_expense validate their own inputs, then hand off
to _record_transaction, which writes the row together with any stock
movement and the payable/receivable for an unpaid remainder. Everything
happens in one database transaction: a failing item rolls back the whole
sale or purchase.
"""

import logging
from decimal import Decimal

from django.db import transaction
from django.utils import timezone
from django.utils.translation import gettext as _

from accounts.authz import ActorContext, assert_branch_access, require, resolve_branch_for_write
from configuration.models import default_currency_code
from contacts.models import Contact
from core.audit import EntityType, log_create, log_delete, log_update, snapshot
from core.commands import CommandResult
from debts.models import AccountPayable, AccountReceivable, DebtStatus
from employees.models import Employee
from inventory import stock
from notifications.services import broadcast, notify_new_transaction
from ops.metrics import record_transaction_created

from .categories import (
    DEFAULT_EXPENSE_CATEGORY,
    DEFAULT_INCOME_CATEGORY,
    SALARY_CATEGORY,
    normalize_category,
    supports_discount,
    supports_multi_item,
)
from .models import DiscountReason, PaymentMethod, Transaction, TransactionInventoryItem, TransactionType
from .policies import discount_reason_taken
from .pricing import calculate_discount, calculate_item_total

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class _Abort(Exception):
    """Raised inside the atomic block to roll back and return a failure."""

    def __init__(self, result: CommandResult):
        self.result = result
        super().__init__(result.error)


# =============================================================================
# Validation helpers
# =============================================================================

def _check_items_and_discount(category, items, discount_type=None, discount_value=None, allow_discount=True):
    """Return an error message, or None when the combination is allowed."""
    if items and not supports_multi_item(category):
        return _("Category %(category)s does not support multiple items") % {"category": category}
    if discount_type or discount_value:
        if not allow_discount:
            return _("Expenses do not support a transaction-level discount")
        if not supports_discount(category):
            return _("Category %(category)s does not support discounts") % {"category": category}
    for item in items:
        if item.get("unit_price") is None:
            return _("Unit price is required for every item")
        if Decimal(item["quantity"]) <= 0:
            return _("Item quantity must be greater than 0")
    return None


def _items_subtotal(items) -> Decimal:
    return sum(
        (
            calculate_item_total(
                item["quantity"], item["unit_price"], item.get("discount_type"), item.get("discount_value"),
            ).total
            for item in items
        ),
        ZERO,
    )


def _get_contact(actor, branch, contact_id):
    contact = Contact.objects.filter(pk=contact_id).first()
    if contact is None:
        raise _Abort(CommandResult.not_found(_("Contact not found")))
    assert_branch_access(actor, contact)
    if contact.branch_id != branch.pk:
        raise _Abort(CommandResult.fail(_("Contact belongs to another branch")))
    return contact


def _check_payment_method(payment_method):
    if payment_method and payment_method not in PaymentMethod.values:
        return _("Payment method must be CASH or MASTER")
    return None


# =============================================================================
# Create
# =============================================================================

@transaction.atomic
def create_income(
    actor: ActorContext,
    amount=None,
    category=None,
    payment_method=PaymentMethod.CASH,
    date=None,
    notes: str = "",
    currency=None,
    branch_id=None,
    items=None,
    discount_type=None,
    discount_value=None,
    discount_reason: str = "",
    paid_amount=None,
    contact_id=None,
    receivable_due_date=None,
) -> CommandResult:
    require(actor, "transactions.create")

    branch = resolve_branch_for_write(actor, branch_id)
    category = normalize_category(category) or DEFAULT_INCOME_CATEGORY
    items = items or []

    error = _check_payment_method(payment_method) or _check_items_and_discount(
        category, items, discount_type, discount_value,
    )
    if error:
        return CommandResult.fail(error)
    if not items and (amount is None or amount <= 0):
        return CommandResult.fail(_("Amount must be greater than 0"))

    subtotal = _items_subtotal(items) if items else Decimal(amount)
    total = calculate_discount(subtotal, discount_type, discount_value).total
    has_discount = bool(discount_type and discount_value)

    return _record_transaction(
        actor,
        branch,
        TransactionType.INCOME,
        category=category,
        total=total,
        subtotal=subtotal if (items or has_discount) else None,
        paid_amount=paid_amount,
        payment_method=payment_method,
        date=date,
        notes=notes,
        currency=currency,
        items=items,
        discount={"type": discount_type, "value": discount_value, "reason": discount_reason} if has_discount else None,
        contact_id=contact_id,
        due_date=receivable_due_date,
    )


@transaction.atomic
def create_expense(
    actor: ActorContext,
    amount=None,
    category=None,
    payment_method=PaymentMethod.CASH,
    date=None,
    notes: str = "",
    currency=None,
    branch_id=None,
    items=None,
    paid_amount=None,
    contact_id=None,
    payable_due_date=None,
    employee_id=None,
) -> CommandResult:
    require(actor, "transactions.create")

    branch = resolve_branch_for_write(actor, branch_id)
    category = normalize_category(category) or DEFAULT_EXPENSE_CATEGORY
    items = items or []

    error = _check_payment_method(payment_method) or _check_items_and_discount(category, items)
    if error:
        return CommandResult.fail(error)
    if not items and (amount is None or amount <= 0):
        return CommandResult.fail(_("Amount must be greater than 0"))

    employee = None
    if employee_id:
        employee = Employee.objects.filter(pk=employee_id).first()
        if employee is None:
            return CommandResult.not_found(_("Employee not found"))
        assert_branch_access(actor, employee)
        if category == SALARY_CATEGORY and employee.status == Employee.Status.RESIGNED:
            return CommandResult.fail(_("Cannot create a salary expense for a resigned employee"))

    subtotal = _items_subtotal(items) if items else Decimal(amount)

    return _record_transaction(
        actor,
        branch,
        TransactionType.EXPENSE,
        category=category,
        total=subtotal,
        subtotal=subtotal if items else None,
        paid_amount=paid_amount,
        payment_method=payment_method,
        date=date,
        notes=notes,
        currency=currency,
        items=items,
        contact_id=contact_id,
        due_date=payable_due_date,
        employee=employee,
    )


def _record_transaction(
    actor,
    branch,
    txn_type,
    category,
    total,
    subtotal=None,
    paid_amount=None,
    payment_method=None,
    date=None,
    notes="",
    currency=None,
    items=(),
    discount=None,
    contact_id=None,
    due_date=None,
    employee=None,
) -> CommandResult:
    """
    Write a transaction with its stock lines and remainder debt.

    Must run inside the caller's atomic block. Business failures found
    after rows were written roll back through a savepoint.
    """
    paid = total if paid_amount is None else Decimal(paid_amount)
    if paid < 0:
        return CommandResult.fail(_("Paid amount cannot be negative"))
    if paid > total:
        return CommandResult.fail(_("Paid amount cannot exceed the total amount"))
    remainder = total - paid

    try:
        with transaction.atomic():
            contact = _get_contact(actor, branch, contact_id) if contact_id else None
            if remainder > 0 and contact is None:
                return CommandResult.fail(_("A contact is required when part of the amount is left unpaid"))

            txn = Transaction.objects.create(
                branch=branch,
                type=txn_type,
                amount=paid,
                total_amount=total if remainder > 0 else None,
                paid_amount=paid if remainder > 0 else None,
                subtotal=subtotal,
                currency=currency or default_currency_code(),
                payment_method=payment_method or None,
                category=category,
                date=date or timezone.localdate(),
                notes=notes or "",
                discount_type=discount["type"] if discount else None,
                discount_value=discount["value"] if discount else None,
                discount_reason=(discount or {}).get("reason") or "",
                contact=contact,
                employee=employee,
                created_by=actor.user,
            )

            if remainder > 0:
                _open_remainder(actor, txn, contact, remainder, due_date)

            for item in items:
                _apply_item(actor, txn, item)
    except _Abort as exc:
        return exc.result

    entry = log_create(actor, EntityType.TRANSACTION, txn)
    notify_new_transaction(txn, actor.user)
    broadcast("transaction.created", {
        "id": txn.pk,
        "type": txn.type,
        "amount": str(txn.amount),
        "category": txn.category,
        "branchId": txn.branch_id,
    }, branch_id=txn.branch_id)
    record_transaction_created(txn.type)

    logger.info(
        "Transaction created",
        extra={"transaction_id": txn.pk, "type": txn.type, "branch_id": txn.branch_id, "amount": str(txn.amount)},
    )
    return CommandResult.ok(txn, event=entry)


def _open_remainder(actor, txn, contact, remainder, due_date):
    """Unpaid part of an expense becomes a payable, of an income a receivable."""
    common = {
        "contact": contact,
        "branch": txn.branch,
        "original_amount": remainder,
        "remaining_amount": remainder,
        "date": txn.date,
        "due_date": due_date,
        "status": DebtStatus.ACTIVE,
        "description": f"auto debt from transaction {txn.category}",
        "notes": txn.notes or "المبلغ المتبقي من المعاملة",
        "created_by": actor.user,
    }
    if due_date and due_date < txn.date:
        raise _Abort(CommandResult.fail(_("Due date must be on or after the transaction date")))

    if txn.type == TransactionType.EXPENSE:
        payable = AccountPayable.objects.create(linked_purchase_transaction=txn, **common)
        txn.linked_payable = payable
        txn.save(update_fields=["linked_payable"])
        log_create(actor, EntityType.ACCOUNT_PAYABLE, payable)
    else:
        receivable = AccountReceivable.objects.create(linked_sale_transaction=txn, **common)
        txn.linked_receivable = receivable
        txn.save(update_fields=["linked_receivable"])
        log_create(actor, EntityType.ACCOUNT_RECEIVABLE, receivable)


def _apply_item(actor, txn, item):
    inventory_item = stock.lock_item(item["inventory_item_id"], branch_id=txn.branch_id)
    if inventory_item is None:
        raise _Abort(CommandResult.not_found(
            _("Inventory item %(id)s not found in this branch") % {"id": item["inventory_item_id"]}
        ))

    operation = item.get("operation_type") or TransactionInventoryItem.OperationType.CONSUMPTION
    quantity = Decimal(item["quantity"])
    if operation == TransactionInventoryItem.OperationType.CONSUMPTION:
        try:
            stock.consume(inventory_item, quantity, actor.user, reason=f"transaction: {txn.pk}")
        except stock.InsufficientStock as exc:
            raise _Abort(CommandResult.fail(str(exc)))
    else:
        stock.receive(inventory_item, quantity, item["unit_price"])

    pricing = calculate_item_total(quantity, item["unit_price"], item.get("discount_type"), item.get("discount_value"))
    TransactionInventoryItem.objects.create(
        transaction=txn,
        inventory_item=inventory_item,
        quantity=quantity,
        operation_type=operation,
        unit_price=item["unit_price"],
        subtotal=pricing.subtotal,
        discount_type=item.get("discount_type") or None,
        discount_value=item.get("discount_value") or None,
        total=pricing.total,
        notes=item.get("notes") or "",
    )


# =============================================================================
# Update / delete
# =============================================================================

UPDATABLE_FIELDS = ("type", "amount", "payment_method", "category", "date", "notes",
                    "discount_type", "discount_value", "discount_reason", "currency")


@transaction.atomic
def update_transaction(actor: ActorContext, transaction_id: int, items=None, **updates) -> CommandResult:
    """
    Edit a transaction.

    `items` updates existing stock lines by id (quantity and unit price
    only); the amount is then recomputed from every line's total. Stock
    levels are not re-balanced.
    """
    require(actor, "transactions.edit")

    txn = Transaction.objects.select_for_update().filter(pk=transaction_id).first()
    if txn is None:
        return CommandResult.not_found(_("Transaction not found"))
    assert_branch_access(actor, txn)

    if updates.get("amount") is not None and updates["amount"] <= 0:
        return CommandResult.fail(_("Amount must be greater than 0"))
    error = _check_payment_method(updates.get("payment_method"))
    if error:
        return CommandResult.fail(error)
    if "category" in updates:
        updates["category"] = normalize_category(updates["category"])
    if items and any(item.get("quantity") is not None and item["quantity"] <= 0 for item in items):
        return CommandResult.fail(_("Quantity must be greater than 0"))

    before = snapshot(txn)
    for field in UPDATABLE_FIELDS:
        if field in updates:
            setattr(txn, field, updates[field])

    if items:
        changes = {item["id"]: item for item in items}
        new_total = ZERO
        for line in txn.inventory_items.all():
            change = changes.pop(line.pk, None)
            if change is not None:
                line.quantity = change.get("quantity", line.quantity)
                line.unit_price = change.get("unit_price", line.unit_price)
                pricing = calculate_item_total(line.quantity, line.unit_price or ZERO, line.discount_type, line.discount_value)
                line.subtotal = pricing.subtotal
                line.total = pricing.total
                line.save(update_fields=["quantity", "unit_price", "subtotal", "total"])
            new_total += line.total or ZERO
        if changes:
            transaction.set_rollback(True)
            return CommandResult.fail(
                _("Item %(id)s does not belong to this transaction") % {"id": next(iter(changes))}
            )
        if new_total <= 0:
            transaction.set_rollback(True)
            return CommandResult.fail(_("Amount must be greater than 0"))
        txn.amount = new_total

    txn.save()
    entry = log_update(actor, EntityType.TRANSACTION, txn, before)
    return CommandResult.ok(txn, event=entry)


@transaction.atomic
def delete_transaction(actor: ActorContext, transaction_id: int) -> CommandResult:
    require(actor, "transactions.delete")

    txn = Transaction.objects.filter(pk=transaction_id).first()
    if txn is None:
        return CommandResult.not_found(_("Transaction not found"))
    assert_branch_access(actor, txn)

    txn.soft_delete(actor.user)
    entry = log_delete(actor, EntityType.TRANSACTION, txn)
    broadcast("transaction.deleted", {"id": txn.pk, "branchId": txn.branch_id}, branch_id=txn.branch_id)
    return CommandResult.ok({"message": "Transaction deleted successfully", "id": txn.pk}, event=entry)


# =============================================================================
# Discount reasons (admin only)
# =============================================================================

@transaction.atomic
def create_discount_reason(actor: ActorContext, reason: str, **fields) -> CommandResult:
    require(actor, "discount_reasons.manage")

    if discount_reason_taken(reason):
        return CommandResult.fail(_("Discount reason already exists"))

    discount_reason = DiscountReason.objects.create(
        reason=reason,
        **{k: v for k, v in fields.items() if k in ("description", "is_default", "sort_order")},
    )
    entry = log_create(actor, EntityType.DISCOUNT_REASON, discount_reason)
    return CommandResult.ok(discount_reason, event=entry)


@transaction.atomic
def update_discount_reason(actor: ActorContext, reason_id: int, **updates) -> CommandResult:
    require(actor, "discount_reasons.manage")

    discount_reason = DiscountReason.objects.filter(pk=reason_id).first()
    if discount_reason is None:
        return CommandResult.not_found(_("Discount reason not found"))

    new_reason = updates.get("reason")
    if new_reason and new_reason != discount_reason.reason and discount_reason_taken(new_reason, exclude_id=reason_id):
        return CommandResult.fail(_("Discount reason already exists"))

    before = snapshot(discount_reason)
    for field in ("reason", "description", "is_default", "sort_order"):
        if field in updates:
            setattr(discount_reason, field, updates[field])
    discount_reason.save()

    entry = log_update(actor, EntityType.DISCOUNT_REASON, discount_reason, before)
    return CommandResult.ok(discount_reason, event=entry)


@transaction.atomic
def delete_discount_reason(actor: ActorContext, reason_id: int) -> CommandResult:
    require(actor, "discount_reasons.manage")

    discount_reason = DiscountReason.objects.filter(pk=reason_id).first()
    if discount_reason is None:
        return CommandResult.not_found(_("Discount reason not found"))

    discount_reason.soft_delete(actor.user)
    entry = log_delete(actor, EntityType.DISCOUNT_REASON, discount_reason)
    return CommandResult.ok({"message": "Discount reason deleted"}, event=entry)
