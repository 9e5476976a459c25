# transactions/models.py
from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

from core.models import SoftDeleteModel


class TransactionType(models.TextChoices):
    INCOME = "INCOME", "دخل"
    EXPENSE = "EXPENSE", "مصروف"


class PaymentMethod(models.TextChoices):
    CASH = "CASH", "نقدي"
    MASTER = "MASTER", "ماستر"


class DiscountType(models.TextChoices):
    PERCENTAGE = "PERCENTAGE", "نسبة مئوية"
    AMOUNT = "AMOUNT", "مبلغ ثابت"


class Currency(models.TextChoices):
    USD = "USD", "US Dollar"
    EUR = "EUR", "Euro"
    IQD = "IQD", "Iraqi Dinar"
    SAR = "SAR", "Saudi Riyal"
    AED = "AED", "UAE Dirham"


class Transaction(SoftDeleteModel):
    """
    One movement of money in or out of a branch.

    `amount` is what was actually paid or received. When only part of the
    total changed hands, total_amount/paid_amount hold both figures and the
    remainder lives on the linked payable or receivable.
    """

    branch = models.ForeignKey("accounts.Branch", on_delete=models.PROTECT, related_name="transactions")
    type = models.CharField(max_length=10, choices=TransactionType.choices)
    amount = models.DecimalField(max_digits=15, decimal_places=2)
    currency = models.CharField(max_length=3, choices=Currency.choices, default=Currency.USD)
    payment_method = models.CharField(max_length=10, choices=PaymentMethod.choices, null=True, blank=True)
    category = models.CharField(max_length=100, blank=True, default="")
    date = models.DateField(default=timezone.localdate)
    notes = models.TextField(blank=True, default="")

    # Partial payment
    total_amount = models.DecimalField(max_digits=15, decimal_places=2, null=True, blank=True)
    paid_amount = models.DecimalField(max_digits=15, decimal_places=2, null=True, blank=True)

    # Discount
    subtotal = models.DecimalField(max_digits=15, decimal_places=2, null=True, blank=True)
    discount_type = models.CharField(max_length=10, choices=DiscountType.choices, null=True, blank=True)
    discount_value = models.DecimalField(max_digits=15, decimal_places=2, null=True, blank=True)
    discount_reason = models.CharField(max_length=255, blank=True, default="")

    contact = models.ForeignKey(
        "contacts.Contact",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="transactions",
    )
    linked_payable = models.ForeignKey(
        "debts.AccountPayable",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="linked_transactions",
    )
    linked_receivable = models.ForeignKey(
        "debts.AccountReceivable",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="linked_transactions",
    )
    employee = models.ForeignKey(
        "employees.Employee",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="transactions",
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        on_delete=models.SET_NULL,
        related_name="created_transactions",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date", "-created_at"]
        indexes = [
            models.Index(fields=["branch", "date"], name="txn_branch_date_idx"),
            models.Index(fields=["type", "date"], name="txn_type_date_idx"),
            models.Index(fields=["category"], name="txn_category_idx"),
        ]

    def __str__(self):
        return f"{self.type} {self.amount} {self.category}"


class TransactionInventoryItem(models.Model):
    """One stock line of a multi-item transaction."""

    class OperationType(models.TextChoices):
        PURCHASE = "PURCHASE", "شراء"
        CONSUMPTION = "CONSUMPTION", "استهلاك"

    transaction = models.ForeignKey(Transaction, on_delete=models.CASCADE, related_name="inventory_items")
    inventory_item = models.ForeignKey(
        "inventory.InventoryItem",
        on_delete=models.PROTECT,
        related_name="transaction_links",
    )
    quantity = models.DecimalField(max_digits=12, decimal_places=3)
    operation_type = models.CharField(max_length=12, choices=OperationType.choices)
    unit_price = models.DecimalField(max_digits=15, decimal_places=2, null=True, blank=True)
    subtotal = models.DecimalField(max_digits=15, decimal_places=2, null=True, blank=True)
    discount_type = models.CharField(max_length=10, choices=DiscountType.choices, null=True, blank=True)
    discount_value = models.DecimalField(max_digits=15, decimal_places=2, null=True, blank=True)
    total = models.DecimalField(max_digits=15, decimal_places=2, null=True, blank=True)
    notes = models.CharField(max_length=255, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.operation_type} {self.quantity} x {self.inventory_item_id}"


class DiscountReason(SoftDeleteModel):
    reason = models.CharField(max_length=100)
    description = models.CharField(max_length=255, blank=True, default="")
    is_default = models.BooleanField(default=False)
    sort_order = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["sort_order", "reason"]
        constraints = [
            models.UniqueConstraint(
                fields=["reason"],
                condition=Q(is_deleted=False),
                name="uniq_live_discount_reason",
            ),
        ]

    def __str__(self):
        return self.reason
