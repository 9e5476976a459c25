# notifications/models.py
from django.conf import settings
from django.db import models


class Notification(models.Model):
    """An in-app notice shown to admins (and branch staff for their branch)."""

    class Severity(models.TextChoices):
        INFO = "INFO", "Info"
        WARNING = "WARNING", "Warning"
        ERROR = "ERROR", "Error"
        CRITICAL = "CRITICAL", "Critical"

    type = models.CharField(max_length=50, db_index=True)
    title = models.CharField(max_length=255)
    message = models.TextField()
    severity = models.CharField(max_length=10, choices=Severity.choices, default=Severity.INFO)
    related_id = models.CharField(max_length=64, blank=True, default="")
    related_type = models.CharField(max_length=50, blank=True, default="")
    branch = models.ForeignKey(
        "accounts.Branch",
        null=True,
        blank=True,
        on_delete=models.CASCADE,
        related_name="notifications",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        on_delete=models.SET_NULL,
        related_name="created_notifications",
    )
    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["is_read", "created_at"], name="notification_unread_idx"),
            models.Index(fields=["type", "related_id"], name="notification_related_idx"),
        ]

    def __str__(self):
        return f"{self.type}: {self.title}"


class NotificationSetting(models.Model):
    """Per-user preferences for one notification type."""

    class DisplayMethod(models.TextChoices):
        POPUP = "POPUP", "Popup"
        TOAST = "TOAST", "Toast"
        EMAIL = "EMAIL", "Email"
        SMS = "SMS", "SMS"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notification_settings",
    )
    notification_type = models.CharField(max_length=50)
    is_enabled = models.BooleanField(default=True)
    min_amount = models.DecimalField(max_digits=15, decimal_places=2, null=True, blank=True)
    # list of branch ids; empty or null means every branch
    selected_branches = models.JSONField(null=True, blank=True)
    display_method = models.CharField(
        max_length=10,
        choices=DisplayMethod.choices,
        default=DisplayMethod.POPUP,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["notification_type"]
        constraints = [
            models.UniqueConstraint(fields=["user", "notification_type"], name="uniq_user_notification_type"),
        ]

    def __str__(self):
        return f"{self.user_id}:{self.notification_type}"

    def accepts(self, amount=None, branch_id=None) -> bool:
        """Whether a notification with this amount/branch passes the filters."""
        if not self.is_enabled:
            return False
        if self.min_amount is not None and amount is not None and amount < self.min_amount:
            return False
        if self.selected_branches and branch_id is not None:
            return str(branch_id) in {str(b) for b in self.selected_branches}
        return True
