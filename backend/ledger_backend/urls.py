from django.contrib import admin
from django.urls import include, path

from ops.urls import metrics_patterns

urlpatterns = [
    # Operations endpoints (no auth required)
    path("_health/", include("ops.urls")),
    path("_metrics/", include(metrics_patterns)),

    # Admin and API
    path("admin/", admin.site.urls),
    path("api/", include("accounts.urls")),
    path("api/", include("core.urls")),
    path("api/settings/", include("configuration.urls")),
    path("api/contacts/", include("contacts.urls")),
    path("api/inventory/", include("inventory.urls")),
    path("api/employees/", include("employees.urls")),
    path("api/", include("transactions.urls")),
    path("api/", include("debts.urls")),
    path("api/notifications/", include("notifications.urls")),
    path("api/", include("reports.urls")),
]
