# accounts/authz.py
"""
Authorization utilities.

Provides:
- ActorContext: Immutable context for the current request
- resolve_actor: Extract actor context from request
- require: Check permissions and raise if not granted
- Branch scoping helpers used by every branch-bearing command

Permissions are derived from the user's role (ROLE_DEFAULTS). Data access
is additionally scoped by branch: an ACCOUNTANT only ever reads or writes
rows of their own branch, an ADMIN sees every branch.
"""

from dataclasses import dataclass
from typing import FrozenSet, Optional

from django.core.exceptions import PermissionDenied
from django.http import Http404
from django.utils.translation import gettext as _
from rest_framework.exceptions import NotAuthenticated, ValidationError

from accounts.models import Branch, User
from accounts.permission_defaults import ROLE_DEFAULTS


@dataclass(frozen=True)
class ActorContext:
    """
    Immutable context for the current actor.

    This is passed to commands and policies to provide context
    about who is performing an action and from which branch.

    Attributes:
        user: The authenticated user
        role: ADMIN or ACCOUNTANT
        branch: The user's assigned branch (None when unassigned)
        perms: Set of permission codes granted by the role
    """
    user: User
    role: str
    branch: Optional[Branch]
    perms: FrozenSet[str]

    def has(self, code: str) -> bool:
        return code in self.perms

    @property
    def is_authenticated(self) -> bool:
        """Mirror Django's user.is_authenticated for compatibility."""
        return bool(getattr(self.user, "is_authenticated", False))

    @property
    def is_admin(self) -> bool:
        return self.role == User.Role.ADMIN

    @property
    def branch_id(self):
        return self.branch.pk if self.branch else None


def actor_for_user(user: User) -> ActorContext:
    """Build an ActorContext for a user loaded outside a request (tasks, scripts)."""
    branch = user.branch if user.branch_id else None
    if branch is not None and branch.is_deleted:
        branch = None
    return ActorContext(
        user=user,
        role=user.role,
        branch=branch,
        perms=frozenset(ROLE_DEFAULTS.get(user.role, set())),
    )


def resolve_actor(request) -> ActorContext:
    """
    Extract ActorContext from the current request.

    The user row is re-read EVERY request so that role or branch changes
    take effect immediately, without waiting for the access token to expire.

    Raises:
        NotAuthenticated: If user is not authenticated
        PermissionDenied: If the user was disabled after the token was issued
    """
    user = getattr(request, "user", None)

    if not user or not user.is_authenticated:
        raise NotAuthenticated("Authentication required.")

    fresh = User.objects.select_related("branch").filter(pk=user.pk, is_active=True).first()
    if fresh is None:
        raise PermissionDenied(_("Account is disabled"))

    return actor_for_user(fresh)


def require(actor: ActorContext, code: str) -> None:
    """
    Require that the actor has a specific permission.

    Raises PermissionDenied if the permission is not granted.

    Example:
        require(actor, "users.manage")
        # If we get here, permission is granted
    """
    if not actor.has(code):
        raise PermissionDenied(_("Permission denied: %(code)s") % {"code": code})


def require_admin(actor: ActorContext) -> None:
    if not actor.is_admin:
        raise PermissionDenied(_("Admin role required"))


# =============================================================================
# Branch scoping
# =============================================================================

def _coerce_branch_id(branch_id):
    if branch_id in (None, ""):
        return None
    if isinstance(branch_id, Branch):
        return branch_id.pk
    try:
        return int(branch_id)
    except (TypeError, ValueError):
        raise ValidationError({"branchId": "Invalid branch id"})


def resolve_branch_for_write(actor: ActorContext, branch_id=None) -> Branch:
    """
    Pick the branch a new row is written to.

    ADMIN must name a branch explicitly. ACCOUNTANT always writes to their
    own branch, whatever was requested.

    Raises:
        PermissionDenied: when no branch can be determined
        Http404: when an admin names an unknown branch
    """
    if actor.is_admin:
        requested = _coerce_branch_id(branch_id)
        if requested is None:
            raise PermissionDenied(_("Admin must specify branchId"))
        branch = Branch.objects.filter(pk=requested).first()
        if branch is None:
            raise Http404(_("Branch not found"))
        return branch

    if actor.branch is None:
        raise PermissionDenied(_("Accountant must be assigned to branch"))
    return actor.branch


def optional_branch_for_write(actor: ActorContext, branch_id=None) -> Optional[Branch]:
    """Like resolve_branch_for_write, but an admin may leave the branch empty."""
    if actor.is_admin and _coerce_branch_id(branch_id) is None:
        return None
    return resolve_branch_for_write(actor, branch_id)


def effective_branch_filter(actor: ActorContext, branch_id=None):
    """
    Branch id to filter list queries by.

    Returns None when an admin asked for every branch.
    """
    if actor.is_admin:
        return _coerce_branch_id(branch_id)

    if actor.branch is None:
        raise PermissionDenied(_("Accountant must be assigned to branch"))
    return actor.branch.pk


def scope_queryset(queryset, actor: ActorContext, branch_id=None, field: str = "branch"):
    """Apply effective_branch_filter to a queryset on `field`."""
    effective = effective_branch_filter(actor, branch_id)
    if effective is None:
        return queryset
    return queryset.filter(**{f"{field}_id": effective})


def assert_branch_access(actor: ActorContext, obj, field: str = "branch_id") -> None:
    """
    Refuse access to a row of another branch.

    Rows without a branch are readable by everyone who reached them.
    """
    if actor.is_admin:
        return
    owner_branch = getattr(obj, field, None)
    if owner_branch is None:
        return
    if owner_branch != actor.branch_id:
        raise PermissionDenied(_("Access denied: Resource belongs to another branch"))
