# accounts/commands.py
"""
Commands for users and branches.

Every command:
1. Checks the actor's permission (require)
2. Applies policies
3. Writes the change and its audit entry in one transaction
4. Returns a CommandResult
"""

import logging

from django.db import transaction
from django.utils import timezone
from django.utils.translation import gettext as _

from accounts.authz import ActorContext, require
from accounts.models import Branch, User
from accounts.policies import can_delete_branch, can_delete_user
from core.audit import EntityType, log_action, log_create, log_delete, log_update, snapshot
from core.commands import CommandResult
from core.models import AuditLog

logger = logging.getLogger(__name__)

USER_AUDIT_EXCLUDE = ("password", "is_deleted", "deleted_at", "deleted_by", "groups", "user_permissions")


def _user_snapshot(user: User) -> dict:
    return snapshot(user, exclude=USER_AUDIT_EXCLUDE)


# =============================================================================
# Users
# =============================================================================

@transaction.atomic
def create_user(
    actor: ActorContext,
    username: str,
    password: str,
    role: str = User.Role.ACCOUNTANT,
    branch_id: int = None,
    email: str = "",
) -> CommandResult:
    """
    Create a login for a new user.

    Returns:
        CommandResult with the created User, 409 on a taken username
    """
    require(actor, "users.manage")

    if User.all_objects.filter(username=username).exists():
        return CommandResult.conflict(_("Username already exists"))

    branch = None
    if branch_id:
        branch = Branch.objects.filter(pk=branch_id).first()
        if branch is None:
            return CommandResult.not_found(_("Branch not found"))

    user = User.objects.create_user(
        username=username,
        email=email or "",
        password=password,
        role=role,
        branch=branch,
    )
    entry = log_action(actor, AuditLog.Action.CREATE, EntityType.USER, user.pk, _user_snapshot(user))
    logger.info("User created", extra={"user_id": user.pk, "role": role})
    return CommandResult.ok(user, event=entry)


@transaction.atomic
def update_user(actor: ActorContext, user_id: int, **updates) -> CommandResult:
    """
    Update username, role, branch, email, active flag or password.

    A new password is hashed, never stored as given.
    """
    require(actor, "users.manage")

    user = User.objects.select_for_update().filter(pk=user_id).first()
    if user is None:
        return CommandResult.not_found(_("User not found"))

    before = _user_snapshot(user)

    new_username = updates.get("username")
    if new_username and new_username != user.username:
        if User.all_objects.filter(username=new_username).exclude(pk=user.pk).exists():
            return CommandResult.conflict(_("Username already exists"))
        user.username = new_username

    if "branch_id" in updates:
        branch_id = updates["branch_id"]
        if branch_id:
            branch = Branch.objects.filter(pk=branch_id).first()
            if branch is None:
                return CommandResult.not_found(_("Branch not found"))
            user.branch = branch
        else:
            user.branch = None

    for field in ("role", "email", "is_active"):
        if field in updates and updates[field] is not None:
            setattr(user, field, updates[field])

    password = updates.get("password")
    if password:
        user.set_password(password)

    user.save()
    entry = log_update(actor, EntityType.USER, user, before)
    return CommandResult.ok(user, event=entry)


def assign_branch(actor: ActorContext, user_id: int, branch_id) -> CommandResult:
    return update_user(actor, user_id, branch_id=branch_id)


@transaction.atomic
def deactivate_user(actor: ActorContext, user_id: int) -> CommandResult:
    """Soft-delete a user. The account can no longer log in."""
    require(actor, "users.manage")

    user = User.objects.filter(pk=user_id).first()
    if user is None:
        return CommandResult.not_found(_("User not found"))

    allowed, reason = can_delete_user(actor, user)
    if not allowed:
        return CommandResult.fail(reason)

    user.is_active = False
    user.is_deleted = True
    user.deleted_at = timezone.now()
    user.deleted_by = actor.user
    user.save(update_fields=["is_active", "is_deleted", "deleted_at", "deleted_by", "updated_at"])

    entry = log_action(actor, AuditLog.Action.DELETE, EntityType.USER, user.pk, _user_snapshot(user))
    logger.info("User deactivated", extra={"user_id": user.pk})
    return CommandResult.ok(user, event=entry)


@transaction.atomic
def reactivate_user(actor: ActorContext, user_id: int) -> CommandResult:
    require(actor, "users.manage")

    user = User.all_objects.filter(pk=user_id).first()
    if user is None:
        return CommandResult.not_found(_("User not found"))
    if not user.is_deleted and user.is_active:
        return CommandResult.fail(_("User is already active"))

    user.is_active = True
    user.is_deleted = False
    user.deleted_at = None
    user.deleted_by = None
    user.save(update_fields=["is_active", "is_deleted", "deleted_at", "deleted_by", "updated_at"])

    entry = log_action(actor, AuditLog.Action.RESTORE, EntityType.USER, user.pk, _user_snapshot(user))
    return CommandResult.ok(user, event=entry)


# =============================================================================
# Branches
# =============================================================================

@transaction.atomic
def create_branch(
    actor: ActorContext,
    name: str,
    location: str = "",
    manager_name: str = "",
    phone: str = "",
    is_active: bool = True,
) -> CommandResult:
    require(actor, "branches.manage")

    branch = Branch.objects.create(
        name=name,
        location=location,
        manager_name=manager_name,
        phone=phone,
        is_active=is_active,
    )
    entry = log_create(actor, EntityType.BRANCH, branch)
    return CommandResult.ok(branch, event=entry)


@transaction.atomic
def update_branch(actor: ActorContext, branch_id: int, **updates) -> CommandResult:
    require(actor, "branches.manage")

    branch = Branch.objects.filter(pk=branch_id).first()
    if branch is None:
        return CommandResult.not_found(_("Branch not found"))

    before = snapshot(branch)
    for field in ("name", "location", "manager_name", "phone", "is_active"):
        if field in updates and updates[field] is not None:
            setattr(branch, field, updates[field])
    branch.save()

    entry = log_update(actor, EntityType.BRANCH, branch, before)
    return CommandResult.ok(branch, event=entry)


@transaction.atomic
def delete_branch(actor: ActorContext, branch_id: int) -> CommandResult:
    require(actor, "branches.manage")

    branch = Branch.objects.filter(pk=branch_id).first()
    if branch is None:
        return CommandResult.not_found(_("Branch not found"))

    allowed, reason = can_delete_branch(branch)
    if not allowed:
        return CommandResult.fail(reason)

    branch.soft_delete(actor.user)
    entry = log_delete(actor, EntityType.BRANCH, branch)
    return CommandResult.ok({"deleted": True}, event=entry)
