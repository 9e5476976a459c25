# accounts/urls.py
"""
URL configuration for accounts/auth API.

Endpoints:
- /auth/ - Authentication (login, refresh, logout, me)
- /users/ - User management (admin)
- /branches/ - Branches
"""

from django.urls import path

from .views import (
    BranchDetailView,
    BranchListCreateView,
    LedgerTokenRefreshView,
    LoginView,
    LogoutView,
    MeView,
    UserAssignBranchView,
    UserDetailView,
    UserListCreateView,
    UserReactivateView,
)

app_name = "accounts"

urlpatterns = [
    # ==========================================================================
    # Authentication
    # ==========================================================================
    path("auth/login/", LoginView.as_view(), name="login"),
    path("auth/refresh/", LedgerTokenRefreshView.as_view(), name="token-refresh"),
    path("auth/logout/", LogoutView.as_view(), name="logout"),
    path("auth/me/", MeView.as_view(), name="me"),

    # ==========================================================================
    # Users
    # ==========================================================================
    path("users/", UserListCreateView.as_view(), name="user-list"),
    path("users/<int:pk>/", UserDetailView.as_view(), name="user-detail"),
    path("users/<int:pk>/reactivate/", UserReactivateView.as_view(), name="user-reactivate"),
    path("users/<int:pk>/assign-branch/", UserAssignBranchView.as_view(), name="user-assign-branch"),

    # ==========================================================================
    # Branches
    # ==========================================================================
    path("branches/", BranchListCreateView.as_view(), name="branch-list"),
    path("branches/<int:pk>/", BranchDetailView.as_view(), name="branch-detail"),
]
