# contacts/models.py
from django.conf import settings
from django.db import models
from django.db.models import Q

from core.models import SoftDeleteModel


class Contact(SoftDeleteModel):
    """A supplier or customer of one branch. Payables and receivables hang off it."""

    class ContactType(models.TextChoices):
        SUPPLIER = "SUPPLIER", "مورد"
        CUSTOMER = "CUSTOMER", "عميل"
        BOTH = "BOTH", "مورد وعميل"
        OTHER = "OTHER", "أخرى"

    name = models.CharField(max_length=200)
    type = models.CharField(max_length=20, choices=ContactType.choices, default=ContactType.SUPPLIER)
    phone = models.CharField(max_length=50, blank=True, default="")
    email = models.EmailField(blank=True, default="")
    address = models.CharField(max_length=255, blank=True, default="")
    credit_limit = models.DecimalField(max_digits=15, decimal_places=2, null=True, blank=True)
    notes = models.TextField(blank=True, default="")
    is_active = models.BooleanField(default=True)
    branch = models.ForeignKey("accounts.Branch", on_delete=models.PROTECT, related_name="contacts")
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        on_delete=models.SET_NULL,
        related_name="created_contacts",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["branch", "name"],
                condition=Q(is_deleted=False),
                name="uniq_live_contact_name_per_branch",
            ),
        ]

    def __str__(self):
        return self.name
