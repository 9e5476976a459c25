# inventory/models.py
from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

from core.models import SoftDeleteModel


class InventoryUnit(models.TextChoices):
    KG = "KG", "كيلوغرام"
    PIECE = "PIECE", "قطعة"
    LITER = "LITER", "لتر"
    OTHER = "OTHER", "أخرى"


class InventoryItem(SoftDeleteModel):
    """
    A stock line of one branch.

    quantity is kept in the item's own unit; cost_per_unit is the
    weighted-average purchase cost.
    """

    branch = models.ForeignKey("accounts.Branch", on_delete=models.PROTECT, related_name="inventory_items")
    name = models.CharField(max_length=200)
    quantity = models.DecimalField(max_digits=12, decimal_places=3, default=0)
    unit = models.CharField(max_length=10, choices=InventoryUnit.choices)
    cost_per_unit = models.DecimalField(max_digits=15, decimal_places=2, default=0)
    selling_price = models.DecimalField(max_digits=15, decimal_places=2, null=True, blank=True)
    allow_sub_units = models.BooleanField(default=False)
    include_in_revenue = models.BooleanField(default=True)
    last_updated = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-last_updated"]
        constraints = [
            models.UniqueConstraint(
                fields=["branch", "name", "unit"],
                condition=Q(is_deleted=False),
                name="uniq_live_inventory_item",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.unit})"

    @property
    def stock_value(self):
        return self.quantity * self.cost_per_unit


class InventorySubUnit(models.Model):
    """An alternative selling unit, e.g. a 'box' of 12 pieces (ratio=12)."""

    inventory_item = models.ForeignKey(InventoryItem, on_delete=models.CASCADE, related_name="sub_units")
    unit_name = models.CharField(max_length=50)
    ratio = models.DecimalField(max_digits=12, decimal_places=3)
    selling_price = models.DecimalField(max_digits=15, decimal_places=2)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["unit_name"]
        constraints = [
            models.UniqueConstraint(fields=["inventory_item", "unit_name"], name="uniq_sub_unit_per_item"),
        ]

    def __str__(self):
        return f"{self.unit_name} x{self.ratio}"


class InventoryConsumption(models.Model):
    inventory_item = models.ForeignKey(InventoryItem, on_delete=models.CASCADE, related_name="consumptions")
    branch = models.ForeignKey("accounts.Branch", on_delete=models.PROTECT, related_name="inventory_consumptions")
    quantity = models.DecimalField(max_digits=12, decimal_places=3)
    unit = models.CharField(max_length=10, choices=InventoryUnit.choices)
    reason = models.CharField(max_length=255, blank=True, default="")
    consumed_at = models.DateTimeField(default=timezone.now)
    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        on_delete=models.SET_NULL,
        related_name="inventory_consumptions",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-consumed_at"]
        indexes = [
            models.Index(fields=["branch", "consumed_at"], name="inv_consumption_branch_idx"),
        ]
