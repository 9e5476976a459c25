"""
Notification creation and live broadcasting.

notify() persists a Notification and pushes it to connected clients once
the surrounding database transaction commits. broadcast() is also used on
its own for entity events ("transaction.created", "payable.paid", ...)
that do not need a stored notification.

Groups:
    notifications   every admin connection
    branch_<id>     accountant connections of that branch
"""
import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction

from core.dates import today
from debts.models import AccountPayable, AccountReceivable
from ops.metrics import record_notification_created

from .models import Notification, NotificationSetting

logger = logging.getLogger(__name__)

ADMIN_GROUP = "notifications"

OVERDUE_PAYABLE = "overdue_payable"
OVERDUE_RECEIVABLE = "overdue_receivable"
BACKUP_REMINDER = "backup_reminder"
NEW_TRANSACTION = "new_transaction"


def branch_group(branch_id) -> str:
    return f"branch_{branch_id}"


def serialize_notification(notification: Notification) -> dict:
    return {
        "id": notification.pk,
        "type": notification.type,
        "title": notification.title,
        "message": notification.message,
        "severity": notification.severity,
        "relatedId": notification.related_id,
        "relatedType": notification.related_type,
        "branchId": notification.branch_id,
        "isRead": notification.is_read,
        "createdAt": notification.created_at.isoformat() if notification.created_at else None,
    }


def _send(event: str, payload: dict, branch_id=None):
    layer = get_channel_layer()
    if layer is None:
        return
    message = {"type": "push.event", "event": event, "data": payload}
    groups = [ADMIN_GROUP]
    if branch_id is not None:
        groups.append(branch_group(branch_id))
    try:
        for group in groups:
            async_to_sync(layer.group_send)(group, message)
    except Exception:
        # runs after commit; the write already succeeded
        logger.exception("Broadcast failed", extra={"event": event, "branch_id": branch_id})


def broadcast(event: str, payload: dict, branch_id=None) -> None:
    """Push `{"type": event, "data": payload}` to subscribers after commit."""
    transaction.on_commit(lambda: _send(event, payload, branch_id))


def _admin_settings(notification_type: str):
    return NotificationSetting.objects.filter(
        notification_type=notification_type,
        user__role="ADMIN",
        user__is_active=True,
    )


def should_broadcast(notification_type: str, amount=None, branch_id=None) -> bool:
    """
    False when admins configured this type and none of their settings
    accepts the amount/branch. No settings at all means broadcast.
    """
    configured = list(_admin_settings(notification_type))
    if not configured:
        return True
    return any(s.accepts(amount=amount, branch_id=branch_id) for s in configured)


def notify(
    type: str,
    title: str,
    message: str,
    severity: str = Notification.Severity.INFO,
    related_id=None,
    related_type: str = "",
    branch=None,
    created_by=None,
    amount=None,
) -> Notification:
    """Store a notification and broadcast it unless admin settings filter it out."""
    notification = Notification.objects.create(
        type=type,
        title=title,
        message=message,
        severity=severity,
        related_id="" if related_id is None else str(related_id),
        related_type=related_type,
        branch=branch,
        created_by=created_by,
    )
    record_notification_created(type)
    logger.info(
        "Notification created",
        extra={"notification_id": notification.pk, "type": type, "severity": severity},
    )

    branch_id = branch.pk if branch is not None else None
    if should_broadcast(type, amount=amount, branch_id=branch_id):
        broadcast("notification.created", serialize_notification(notification), branch_id=branch_id)
    return notification


def notify_new_transaction(txn, user):
    """
    Opt-in notice for new transactions.

    Only created when at least one admin enabled the "new_transaction" type
    and that setting accepts the transaction's amount and branch.
    """
    wanted = any(
        s.accepts(amount=txn.amount, branch_id=txn.branch_id)
        for s in _admin_settings(NEW_TRANSACTION)
    )
    if not wanted:
        return None

    kind = "دخل" if txn.type == "INCOME" else "مصروف"
    return notify(
        type=NEW_TRANSACTION,
        title=f"معاملة جديدة - {kind}",
        message=f"{txn.category}: {txn.amount} {txn.currency} ({txn.branch.name})",
        severity=Notification.Severity.INFO,
        related_id=txn.pk,
        related_type="transaction",
        branch=txn.branch,
        created_by=user,
        amount=txn.amount,
    )


# =============================================================================
# Scheduled checks
# =============================================================================

def system_user():
    """The account automated notifications are attributed to."""
    User = get_user_model()
    username = getattr(settings, "SYSTEM_USERNAME", "system")
    user = User.all_objects.filter(username=username).first()
    if user is None:
        user = User(username=username, role=User.Role.ADMIN, is_active=False)
        user.set_unusable_password()
        user.save()
        logger.info("System user created", extra={"username": username})
    return user


def _already_notified(notification_type: str, related_id) -> bool:
    return Notification.objects.filter(
        type=notification_type,
        related_id=str(related_id),
        created_at__date=today(),
    ).exists()


def _overdue(model):
    return (
        model.objects.filter(
            status__in=["ACTIVE", "PARTIAL"],
            due_date__lt=today(),
        )
        .filter(contact__is_deleted=False)
        .select_related("contact", "branch")
    )


def check_overdue_accounts() -> dict:
    """
    Notify about every open payable/receivable past its due date.

    Each record is notified at most once per day.

    Returns:
        {"payables": <created>, "receivables": <created>}
    """
    creator = system_user()
    created = {"payables": 0, "receivables": 0}
    current = today()

    for payable in _overdue(AccountPayable):
        if _already_notified(OVERDUE_PAYABLE, payable.pk):
            continue
        days = (current - payable.due_date).days
        notify(
            type=OVERDUE_PAYABLE,
            title="دين متأخر - حسابات دائنة",
            message=(
                f"الدين المستحق لـ {payable.contact.name} متأخر {days} يوم. "
                f"المبلغ المتبقي: {payable.remaining_amount}. "
                f"تاريخ الاستحقاق: {payable.due_date.isoformat()}"
            ),
            severity=Notification.Severity.WARNING,
            related_id=payable.pk,
            related_type="account_payable",
            branch=payable.branch,
            created_by=creator,
            amount=payable.remaining_amount,
        )
        created["payables"] += 1

    for receivable in _overdue(AccountReceivable):
        if _already_notified(OVERDUE_RECEIVABLE, receivable.pk):
            continue
        days = (current - receivable.due_date).days
        notify(
            type=OVERDUE_RECEIVABLE,
            title="ذمة متأخرة - حسابات مدينة",
            message=(
                f"المبلغ المستحق من {receivable.contact.name} متأخر {days} يوم. "
                f"المبلغ المتبقي: {receivable.remaining_amount}. "
                f"تاريخ الاستحقاق: {receivable.due_date.isoformat()}"
            ),
            severity=Notification.Severity.INFO,
            related_id=receivable.pk,
            related_type="account_receivable",
            branch=receivable.branch,
            created_by=creator,
            amount=receivable.remaining_amount,
        )
        created["receivables"] += 1

    logger.info("Overdue check finished", extra=created)
    return created


def remind_backup() -> Notification:
    return notify(
        type=BACKUP_REMINDER,
        title="تذكير: نسخ احتياطي للبيانات",
        message=f"يرجى أخذ نسخة احتياطية من قاعدة البيانات ({today().isoformat()}).",
        severity=Notification.Severity.WARNING,
        created_by=system_user(),
    )
