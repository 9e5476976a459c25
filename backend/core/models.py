# core/models.py
"""
Shared model bases and the audit trail.

Soft delete
===========
Financial rows are never physically removed by the API. Deleting a row
sets is_deleted/deleted_at/deleted_by and the default manager hides it.
`all_objects` is the escape hatch for migrations, reports and admin.

Audit log
=========
Every command that changes state writes one AuditLog row through the
helpers in core/audit.py.
"""

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
from django.utils import timezone


class SoftDeleteQuerySet(models.QuerySet):
    def alive(self):
        return self.filter(is_deleted=False)

    def dead(self):
        return self.filter(is_deleted=True)


class SoftDeleteManager(models.Manager.from_queryset(SoftDeleteQuerySet)):
    """Default manager: hides soft-deleted rows."""

    def get_queryset(self):
        return super().get_queryset().filter(is_deleted=False)


class AllObjectsManager(models.Manager.from_queryset(SoftDeleteQuerySet)):
    """Sees every row, deleted or not."""


class SoftDeleteModel(models.Model):
    """
    Abstract base for rows that are soft-deleted.

    Subclasses get `objects` (live rows) and `all_objects` (everything).
    """

    is_deleted = models.BooleanField(default=False, db_index=True)
    deleted_at = models.DateTimeField(null=True, blank=True)
    deleted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="+",
    )

    objects = SoftDeleteManager()
    all_objects = AllObjectsManager()

    class Meta:
        abstract = True

    def soft_delete(self, user=None):
        self.is_deleted = True
        self.deleted_at = timezone.now()
        self.deleted_by = user
        self.save(update_fields=["is_deleted", "deleted_at", "deleted_by"])


class AuditLog(models.Model):
    """
    Append-only audit trail entry.

    `changes` holds the full snapshot for CREATE/DELETE and an
    {"field": {"old": ..., "new": ...}} diff for UPDATE.
    """

    class Action(models.TextChoices):
        CREATE = "CREATE", "Create"
        UPDATE = "UPDATE", "Update"
        DELETE = "DELETE", "Delete"
        PAYMENT = "PAYMENT", "Payment"
        LOGIN = "LOGIN", "Login"
        LOGOUT = "LOGOUT", "Logout"
        RESTORE = "RESTORE", "Restore"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="audit_logs",
    )
    action = models.CharField(max_length=20, choices=Action.choices)
    entity_type = models.CharField(max_length=50)
    entity_id = models.CharField(max_length=64, blank=True, default="")
    changes = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["entity_type", "entity_id"], name="core_auditl_entity__idx"),
            models.Index(fields=["user", "created_at"], name="core_auditl_user_cr_idx"),
        ]

    def __str__(self):
        return f"{self.action} {self.entity_type}#{self.entity_id}"
