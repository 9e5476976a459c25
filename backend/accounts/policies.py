# accounts/policies.py
"""
Business policy functions for users and branches.

Policies answer: "Is this action allowed given the current state?"
They do NOT perform the action; that's the command's job.

Usage:
    allowed, reason = can_delete_user(actor, user)
    if not allowed:
        return CommandResult.fail(reason)
"""

from django.utils.translation import gettext as _

from accounts.models import Branch, User


def can_delete_user(actor, user: User) -> tuple[bool, str]:
    if user.pk == actor.user.pk:
        return False, _("You cannot delete your own account")
    return True, ""


def can_delete_branch(branch: Branch) -> tuple[bool, str]:
    active_users = User.objects.filter(branch=branch, is_active=True).count()
    if active_users:
        return False, _("Branch still has %(count)s active user(s) assigned") % {"count": active_users}
    return True, ""
