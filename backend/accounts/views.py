# accounts/views.py
"""
Authentication, user and branch endpoints.

Views handle: HTTP parsing, authentication, response formatting.
Commands handle: business rules, audit.
"""

import logging

from django.db.models import Count, Q
from django.http import Http404
from django.utils.translation import gettext as _
from rest_framework import permissions, status
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenRefreshView

from core.audit import EntityType, client_ip, log_action
from core.models import AuditLog

from .authz import resolve_actor, require
from .commands import (
    assign_branch,
    create_branch,
    create_user,
    deactivate_user,
    delete_branch,
    reactivate_user,
    update_branch,
    update_user,
)
from .models import Branch, User
from .serializers import (
    AssignBranchSerializer,
    BranchSerializer,
    BranchWriteSerializer,
    LoginSerializer,
    ProfileSerializer,
    UserCreateSerializer,
    UserSerializer,
    UserUpdateSerializer,
)
from .throttles import LoginLockout, LoginThrottle

logger = logging.getLogger(__name__)


def _result_response(result, serializer_class=None, success_status=status.HTTP_200_OK):
    if not result.success:
        return Response({"detail": result.error}, status=result.status_code)
    if serializer_class is None:
        return Response(result.data, status=success_status)
    return Response(serializer_class(result.data).data, status=success_status)


# =============================================================================
# Authentication
# =============================================================================

class LoginView(APIView):
    """
    POST /api/auth/login/ -> {access, refresh, user}

    Failed attempts are counted per IP; too many of them block the IP.
    """
    permission_classes = [permissions.AllowAny]
    authentication_classes = []
    throttle_classes = [LoginThrottle]

    def get_authenticate_header(self, request):
        # no authenticators here, so DRF would otherwise answer 403
        return 'Bearer realm="api"'

    def post(self, request):
        ip = client_ip(request)
        lockout = LoginLockout(ip)
        if lockout.is_blocked():
            return Response(
                {"detail": _("Too many failed login attempts. Try again later.")},
                status=status.HTTP_429_TOO_MANY_REQUESTS,
            )

        serializer = LoginSerializer(data=request.data, context={"request": request})
        try:
            serializer.is_valid(raise_exception=True)
        except AuthenticationFailed:
            attempts = lockout.register_failure()
            logger.info("Login failed", extra={"ip": ip, "attempts": attempts})
            raise

        lockout.reset()
        data = serializer.validated_data
        log_action(
            User.objects.get(pk=data["user"]["id"]),
            AuditLog.Action.LOGIN,
            EntityType.USER,
            data["user"]["id"],
            ip_address=ip,
        )
        return Response(data, status=status.HTTP_200_OK)


class LedgerTokenRefreshView(TokenRefreshView):
    """POST /api/auth/refresh/ -> rotated token pair (old refresh blacklisted)."""
    pass


class LogoutView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        refresh_token = request.data.get("refresh")
        if not refresh_token:
            return Response({"detail": _("Refresh token required")}, status=status.HTTP_400_BAD_REQUEST)
        try:
            token = RefreshToken(refresh_token)
            token.blacklist()
        except TokenError:
            return Response({"detail": _("Invalid token")}, status=status.HTTP_400_BAD_REQUEST)

        log_action(
            request.user,
            AuditLog.Action.LOGOUT,
            EntityType.USER,
            request.user.pk,
            ip_address=client_ip(request),
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


class MeView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        return Response(ProfileSerializer(actor.user).data)


# =============================================================================
# Users
# =============================================================================

class UserListCreateView(APIView):
    """
    GET /api/users/ -> list users (admin)
    POST /api/users/ -> create user (admin)
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        require(actor, "users.manage")

        qs = User.all_objects.select_related("branch").order_by("-date_joined")
        params = request.query_params
        is_active = params.get("is_active")
        if is_active in ("true", "1"):
            qs = qs.filter(is_deleted=False)
        elif is_active in ("false", "0"):
            qs = qs.filter(is_deleted=True)
        if params.get("role"):
            qs = qs.filter(role=params["role"])
        if params.get("branch"):
            qs = qs.filter(branch_id=params["branch"])
        if params.get("search"):
            qs = qs.filter(username__icontains=params["search"])

        return Response(UserSerializer(qs, many=True).data)

    def post(self, request):
        actor = resolve_actor(request)

        serializer = UserCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = create_user(actor, **serializer.validated_data)
        return _result_response(result, UserSerializer, status.HTTP_201_CREATED)


class UserDetailView(APIView):
    """
    GET/PATCH/DELETE /api/users/<pk>/

    DELETE deactivates (soft delete) the account.
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        actor = resolve_actor(request)
        require(actor, "users.manage")

        user = User.objects.select_related("branch").filter(pk=pk).first()
        if user is None:
            raise Http404(_("User not found"))
        return Response(UserSerializer(user).data)

    def patch(self, request, pk):
        actor = resolve_actor(request)

        serializer = UserUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = update_user(actor, pk, **serializer.validated_data)
        return _result_response(result, UserSerializer)

    def delete(self, request, pk):
        actor = resolve_actor(request)
        result = deactivate_user(actor, pk)
        if not result.success:
            return Response({"detail": result.error}, status=result.status_code)
        return Response(status=status.HTTP_204_NO_CONTENT)


class UserReactivateView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        actor = resolve_actor(request)
        result = reactivate_user(actor, pk)
        return _result_response(result, UserSerializer)


class UserAssignBranchView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        actor = resolve_actor(request)

        serializer = AssignBranchSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = assign_branch(actor, pk, serializer.validated_data["branch_id"])
        return _result_response(result, UserSerializer)


# =============================================================================
# Branches
# =============================================================================

class BranchListCreateView(APIView):
    """
    GET /api/branches/ -> branches visible to the caller
    POST /api/branches/ -> create branch (admin)
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        require(actor, "branches.view")

        qs = Branch.objects.annotate(
            _users_count=Count("users", filter=Q(users__is_deleted=False)),
        ).order_by("name")
        if not actor.is_admin:
            qs = qs.filter(pk=actor.branch_id) if actor.branch_id else qs.none()
        if request.query_params.get("active") in ("true", "1"):
            qs = qs.filter(is_active=True)
        return Response(BranchSerializer(qs, many=True).data)

    def post(self, request):
        actor = resolve_actor(request)

        serializer = BranchWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = create_branch(actor, **serializer.validated_data)
        return _result_response(result, BranchSerializer, status.HTTP_201_CREATED)


class BranchDetailView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        actor = resolve_actor(request)
        require(actor, "branches.view")

        branch = Branch.objects.filter(pk=pk).first()
        if branch is None or (not actor.is_admin and branch.pk != actor.branch_id):
            raise Http404(_("Branch not found"))
        return Response(BranchSerializer(branch).data)

    def patch(self, request, pk):
        actor = resolve_actor(request)

        serializer = BranchWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        result = update_branch(actor, pk, **serializer.validated_data)
        return _result_response(result, BranchSerializer)

    def delete(self, request, pk):
        actor = resolve_actor(request)
        result = delete_branch(actor, pk)
        if not result.success:
            return Response({"detail": result.error}, status=result.status_code)
        return Response(status=status.HTTP_204_NO_CONTENT)
