from django.urls import path

from .views import (
    CheckOverdueView,
    EnabledTypesView,
    MarkAllReadView,
    MarkReadView,
    NotificationSettingDetailView,
    NotificationSettingListView,
    UnreadCountView,
    UnreadNotificationsView,
)

app_name = "notifications"

urlpatterns = [
    path("unread/", UnreadNotificationsView.as_view(), name="unread"),
    path("unread/count/", UnreadCountView.as_view(), name="unread-count"),
    path("read-all/", MarkAllReadView.as_view(), name="read-all"),
    path("check-overdue/", CheckOverdueView.as_view(), name="check-overdue"),
    path("settings/", NotificationSettingListView.as_view(), name="settings"),
    path("settings/enabled/types/", EnabledTypesView.as_view(), name="enabled-types"),
    path("settings/<str:notification_type>/", NotificationSettingDetailView.as_view(), name="setting-detail"),
    path("<int:pk>/read/", MarkReadView.as_view(), name="mark-read"),
]
