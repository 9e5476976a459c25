# notifications/commands.py
"""
Command layer for notifications.

Reading state and preferences are per user; notifications themselves are
shared, so marking one read marks it for everyone who can see it.
"""
import logging

from django.db import transaction
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext as _

from accounts.authz import ActorContext, assert_branch_access, effective_branch_filter, require
from core.commands import CommandResult

from .models import Notification, NotificationSetting

logger = logging.getLogger(__name__)


def visible_notifications(actor: ActorContext):
    """Admins see everything; accountants see their branch plus branch-less notices."""
    require(actor, "notifications.view")
    qs = Notification.objects.select_related("branch")
    branch_id = effective_branch_filter(actor)
    if branch_id is None:
        return qs
    return qs.filter(Q(branch_id=branch_id) | Q(branch__isnull=True))


@transaction.atomic
def mark_read(actor: ActorContext, notification_id: int) -> CommandResult:
    require(actor, "notifications.view")

    notification = Notification.objects.select_for_update().filter(pk=notification_id).first()
    if notification is None:
        return CommandResult.not_found(_("Notification not found"))
    assert_branch_access(actor, notification)

    if not notification.is_read:
        notification.is_read = True
        notification.read_at = timezone.now()
        notification.save(update_fields=["is_read", "read_at"])
    return CommandResult.ok(notification)


@transaction.atomic
def mark_all_read(actor: ActorContext) -> CommandResult:
    updated = visible_notifications(actor).filter(is_read=False).update(
        is_read=True,
        read_at=timezone.now(),
    )
    logger.info("Notifications marked read", extra={"user_id": actor.user.pk, "count": updated})
    return CommandResult.ok({"updated": updated})


# =============================================================================
# Settings
# =============================================================================

_SETTING_FIELDS = ("is_enabled", "min_amount", "selected_branches", "display_method")


@transaction.atomic
def upsert_setting(actor: ActorContext, notification_type: str, **fields) -> CommandResult:
    """Create the caller's setting for a type, or update the given fields."""
    require(actor, "notifications.manage_settings")

    notification_type = notification_type.strip()
    if not notification_type:
        return CommandResult.fail(_("notification_type is required"))

    setting, created = NotificationSetting.objects.select_for_update().get_or_create(
        user=actor.user,
        notification_type=notification_type,
    )
    changed = [name for name in _SETTING_FIELDS if name in fields]
    for name in changed:
        setattr(setting, name, fields[name])
    if changed:
        setting.save()

    logger.info(
        "Notification setting saved",
        extra={"user_id": actor.user.pk, "type": notification_type, "is_new": created},
    )
    return CommandResult.ok(setting)


@transaction.atomic
def delete_setting(actor: ActorContext, notification_type: str) -> CommandResult:
    require(actor, "notifications.manage_settings")

    deleted = NotificationSetting.objects.filter(
        user=actor.user,
        notification_type=notification_type,
    ).delete()[0]
    if not deleted:
        return CommandResult.not_found(_("Notification setting not found"))
    return CommandResult.ok({"notification_type": notification_type})
