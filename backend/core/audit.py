# core/audit.py
"""
Audit trail helpers.

Commands call these right after a state change, inside the same
database transaction, so a rolled-back command leaves no audit row.
"""

import logging

from django.forms.models import model_to_dict

from core.models import AuditLog

logger = logging.getLogger(__name__)


class EntityType:
    USER = "USER"
    BRANCH = "BRANCH"
    TRANSACTION = "TRANSACTION"
    CONTACT = "CONTACT"
    ACCOUNT_PAYABLE = "ACCOUNT_PAYABLE"
    ACCOUNT_RECEIVABLE = "ACCOUNT_RECEIVABLE"
    PAYABLE_PAYMENT = "PAYABLE_PAYMENT"
    RECEIVABLE_PAYMENT = "RECEIVABLE_PAYMENT"
    DEBT = "DEBT"
    DEBT_PAYMENT = "DEBT_PAYMENT"
    INVENTORY_ITEM = "INVENTORY_ITEM"
    INVENTORY_SUB_UNIT = "INVENTORY_SUB_UNIT"
    INVENTORY_CONSUMPTION = "INVENTORY_CONSUMPTION"
    EMPLOYEE = "EMPLOYEE"
    SALARY_PAYMENT = "SALARY_PAYMENT"
    SALARY_INCREASE = "SALARY_INCREASE"
    EMPLOYEE_ADJUSTMENT = "EMPLOYEE_ADJUSTMENT"
    DISCOUNT_REASON = "DISCOUNT_REASON"
    SETTINGS = "SETTINGS"
    REPORT_TEMPLATE = "REPORT_TEMPLATE"


def snapshot(instance, exclude=("is_deleted", "deleted_at", "deleted_by")) -> dict:
    """Flat dict of a model instance's editable fields."""
    data = model_to_dict(instance, exclude=list(exclude))
    data["id"] = instance.pk
    return data


def _user_or_none(user):
    # Accept an ActorContext as well as a bare user.
    return getattr(user, "user", user)


def log_action(user, action, entity_type, entity_id, changes=None, ip_address=None) -> AuditLog:
    entry = AuditLog.objects.create(
        user=_user_or_none(user),
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id) if entity_id is not None else "",
        changes=changes or {},
        ip_address=ip_address,
    )
    logger.debug(
        "audit %s %s#%s",
        action,
        entity_type,
        entity_id,
        extra={"audit_id": entry.id},
    )
    return entry


def log_create(user, entity_type, instance, extra=None) -> AuditLog:
    changes = snapshot(instance)
    if extra:
        changes.update(extra)
    return log_action(user, AuditLog.Action.CREATE, entity_type, instance.pk, changes)


def log_update(user, entity_type, instance, before: dict) -> AuditLog:
    """Record only the fields that actually changed since `before`."""
    after = snapshot(instance)
    diff = {
        field: {"old": before.get(field), "new": value}
        for field, value in after.items()
        if before.get(field) != value
    }
    return log_action(user, AuditLog.Action.UPDATE, entity_type, instance.pk, diff)


def log_delete(user, entity_type, instance) -> AuditLog:
    return log_action(user, AuditLog.Action.DELETE, entity_type, instance.pk, snapshot(instance))


def log_payment(user, entity_type, instance, details: dict) -> AuditLog:
    return log_action(user, AuditLog.Action.PAYMENT, entity_type, instance.pk, details)


def client_ip(request):
    """Best-effort client address, honouring one X-Forwarded-For hop."""
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR")
