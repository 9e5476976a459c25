# tests/test_accounts.py
"""
Tests for the accounts module.

Tests cover:
- Role permissions and branch scoping helpers
- User and branch commands
- Login / me endpoints, login lockout, logout and refresh rotation
"""

import pytest
from django.contrib.auth import get_user_model
from django.core.exceptions import PermissionDenied
from django.http import Http404

from accounts.authz import (
    actor_for_user,
    assert_branch_access,
    effective_branch_filter,
    optional_branch_for_write,
    require,
    resolve_branch_for_write,
    scope_queryset,
)
from accounts.commands import create_branch, create_user, delete_branch, update_user
from accounts.models import Branch
from contacts.models import Contact
from core.models import AuditLog


User = get_user_model()


# =============================================================================
# Permissions
# =============================================================================

@pytest.mark.django_db
class TestRolePermissions:

    def test_admin_has_admin_only_codes(self, admin_actor):
        assert admin_actor.is_admin is True
        assert admin_actor.has("users.manage")
        assert admin_actor.has("reports.manage_templates")

    def test_accountant_lacks_admin_only_codes(self, accountant_actor):
        assert accountant_actor.is_admin is False
        assert accountant_actor.has("transactions.create")
        assert not accountant_actor.has("users.manage")

        with pytest.raises(PermissionDenied):
            require(accountant_actor, "branches.manage")

    def test_deleted_branch_is_not_carried_on_actor(self, accountant, branch):
        branch.soft_delete()
        accountant.refresh_from_db()

        actor = actor_for_user(accountant)

        assert actor.branch is None
        assert actor.branch_id is None


# =============================================================================
# Branch scoping
# =============================================================================

@pytest.mark.django_db
class TestBranchScoping:

    def test_admin_sees_every_branch_by_default(self, admin_actor, branch):
        assert effective_branch_filter(admin_actor) is None
        assert effective_branch_filter(admin_actor, str(branch.pk)) == branch.pk

    def test_accountant_is_pinned_to_own_branch(self, accountant_actor, branch, other_branch):
        assert effective_branch_filter(accountant_actor, other_branch.pk) == branch.pk

    def test_unassigned_accountant_is_refused(self, unassigned_accountant):
        actor = actor_for_user(unassigned_accountant)

        with pytest.raises(PermissionDenied):
            effective_branch_filter(actor)

    def test_scope_queryset_filters_rows(self, accountant_actor, supplier, other_branch_contact):
        names = set(scope_queryset(Contact.objects.all(), accountant_actor).values_list("name", flat=True))

        assert names == {supplier.name}

    def test_admin_must_name_a_branch_for_writes(self, admin_actor, branch):
        with pytest.raises(PermissionDenied):
            resolve_branch_for_write(admin_actor)

        assert resolve_branch_for_write(admin_actor, branch.pk) == branch
        assert optional_branch_for_write(admin_actor) is None

    def test_admin_naming_unknown_branch_gets_404(self, admin_actor):
        with pytest.raises(Http404):
            resolve_branch_for_write(admin_actor, 999999)

    def test_accountant_writes_to_own_branch_whatever_requested(self, accountant_actor, branch, other_branch):
        assert resolve_branch_for_write(accountant_actor, other_branch.pk) == branch

    def test_assert_branch_access(self, accountant_actor, supplier, other_branch_contact):
        assert_branch_access(accountant_actor, supplier)

        with pytest.raises(PermissionDenied):
            assert_branch_access(accountant_actor, other_branch_contact)


# =============================================================================
# Commands
# =============================================================================

@pytest.mark.django_db
class TestUserCommands:

    def test_create_user_hashes_password_and_audits(self, admin_actor, branch):
        result = create_user(admin_actor, "newbie", "secret123", role=User.Role.ACCOUNTANT, branch_id=branch.pk)

        assert result.success
        user = result.data
        assert user.check_password("secret123")
        assert user.branch == branch
        assert AuditLog.objects.filter(entity_type="USER", entity_id=str(user.pk)).exists()

    def test_duplicate_username_conflicts(self, admin_actor, accountant):
        result = create_user(admin_actor, accountant.username, "secret123")

        assert not result.success
        assert result.status_code == 409

    def test_accountant_cannot_create_users(self, accountant_actor):
        with pytest.raises(PermissionDenied):
            create_user(accountant_actor, "sneaky", "secret123")

    def test_update_user_changes_password(self, admin_actor, accountant):
        result = update_user(admin_actor, accountant.pk, password="changed123")

        assert result.success
        accountant.refresh_from_db()
        assert accountant.check_password("changed123")


@pytest.mark.django_db
class TestBranchCommands:

    def test_create_branch(self, admin_actor):
        result = create_branch(admin_actor, "Erbil", location="Erbil")

        assert result.success
        assert Branch.objects.filter(name="Erbil").exists()

    def test_branch_with_active_users_cannot_be_deleted(self, admin_actor, branch, accountant):
        result = delete_branch(admin_actor, branch.pk)

        assert not result.success
        assert Branch.objects.filter(pk=branch.pk).exists()


# =============================================================================
# Auth API
# =============================================================================

@pytest.mark.django_db
class TestAuthAPI:

    def test_login_returns_token_pair(self, api_client, accountant):
        response = api_client.post(
            "/api/auth/login/",
            {"username": "accountant", "password": "testpass123"},
            format="json",
        )

        assert response.status_code == 200
        assert "access" in response.data
        assert "refresh" in response.data
        assert AuditLog.objects.filter(action=AuditLog.Action.LOGIN).exists()

    def test_login_with_bad_password_is_refused(self, api_client, accountant):
        response = api_client.post(
            "/api/auth/login/",
            {"username": "accountant", "password": "wrong-password"},
            format="json",
        )

        assert response.status_code == 401

    def test_disabled_user_cannot_log_in(self, api_client, accountant):
        accountant.is_active = False
        accountant.save()

        response = api_client.post(
            "/api/auth/login/",
            {"username": "accountant", "password": "testpass123"},
            format="json",
        )

        assert response.status_code == 401
        assert response.data["detail"] == "Account is disabled"

    def test_user_list_is_admin_only(self, admin_client, accountant_client):
        assert admin_client.get("/api/users/").status_code == 200
        assert accountant_client.get("/api/users/").status_code == 403


@pytest.mark.django_db
class TestLoginLockout:

    def _login(self, client, password):
        return client.post(
            "/api/auth/login/",
            {"username": "accountant", "password": password},
            format="json",
        )

    def test_repeated_failures_block_the_ip(self, api_client, accountant, settings):
        settings.LOGIN_MAX_ATTEMPTS = 5

        codes = [self._login(api_client, "wrong-password").status_code for _ in range(6)]

        assert codes == [401, 401, 401, 401, 401, 429]

    def test_blocked_ip_is_refused_even_with_the_right_password(self, api_client, accountant, settings):
        settings.LOGIN_MAX_ATTEMPTS = 2
        self._login(api_client, "wrong-password")
        self._login(api_client, "wrong-password")

        response = self._login(api_client, "testpass123")

        assert response.status_code == 429

    def test_successful_login_resets_the_counter(self, api_client, accountant, settings):
        settings.LOGIN_MAX_ATTEMPTS = 5
        for _ in range(4):
            self._login(api_client, "wrong-password")

        assert self._login(api_client, "testpass123").status_code == 200

        codes = [self._login(api_client, "wrong-password").status_code for _ in range(4)]
        assert codes == [401, 401, 401, 401]


@pytest.mark.django_db
class TestTokenLifecycle:

    def _token_pair(self, client):
        response = client.post(
            "/api/auth/login/",
            {"username": "accountant", "password": "testpass123"},
            format="json",
        )
        return response.data["access"], response.data["refresh"]

    def test_logout_blacklists_refresh_token(self, api_client, accountant):
        from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken

        access, refresh = self._token_pair(api_client)
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")

        response = api_client.post("/api/auth/logout/", {"refresh": refresh}, format="json")

        assert response.status_code == 204
        assert BlacklistedToken.objects.count() == 1
        assert AuditLog.objects.filter(action=AuditLog.Action.LOGOUT, user=accountant).exists()

        api_client.credentials()
        refreshed = api_client.post("/api/auth/refresh/", {"refresh": refresh}, format="json")
        assert refreshed.status_code == 401

    def test_logout_without_token_is_400(self, accountant_client):
        response = accountant_client.post("/api/auth/logout/", {}, format="json")

        assert response.status_code == 400
        assert response.data["detail"] == "Refresh token required"

    def test_logout_with_invalid_token_is_400(self, accountant_client):
        response = accountant_client.post("/api/auth/logout/", {"refresh": "not-a-token"}, format="json")

        assert response.status_code == 400
        assert response.data["detail"] == "Invalid token"

    def test_refresh_rotates_and_blacklists_old_token(self, api_client, accountant):
        _, refresh = self._token_pair(api_client)

        response = api_client.post("/api/auth/refresh/", {"refresh": refresh}, format="json")

        assert response.status_code == 200
        assert response.data["refresh"] != refresh
        assert "access" in response.data

        reused = api_client.post("/api/auth/refresh/", {"refresh": refresh}, format="json")
        assert reused.status_code == 401
