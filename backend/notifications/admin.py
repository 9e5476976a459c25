from django.contrib import admin

from .models import Notification, NotificationSetting


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("title", "type", "severity", "branch", "is_read", "created_at")
    list_filter = ("severity", "is_read", "type")
    search_fields = ("title", "message")


@admin.register(NotificationSetting)
class NotificationSettingAdmin(admin.ModelAdmin):
    list_display = ("user", "notification_type", "is_enabled", "min_amount", "display_method")
    list_filter = ("notification_type", "is_enabled")
