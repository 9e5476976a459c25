# debts/models.py
"""
Money owed to suppliers (payables) and by customers (receivables).

Both sides share the same lifecycle: a balance starts ACTIVE with
remaining == original, every payment lowers remaining, and it ends PAID
at zero. Payments also write a Transaction so that the cash movement
shows up in the branch totals.

Debt/DebtPayment are the pre-contact model, kept so that
migrate_debts_to_contacts can read them.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone

from core.models import SoftDeleteModel


class DebtStatus(models.TextChoices):
    ACTIVE = "ACTIVE", "نشط"
    PARTIAL = "PARTIAL", "مدفوع جزئياً"
    PAID = "PAID", "مدفوع"


class PaymentMethod(models.TextChoices):
    CASH = "CASH", "نقدي"
    MASTER = "MASTER", "ماستر"


class OpenBalance(SoftDeleteModel):
    original_amount = models.DecimalField(max_digits=15, decimal_places=2)
    remaining_amount = models.DecimalField(max_digits=15, decimal_places=2)
    date = models.DateField(default=timezone.localdate)
    due_date = models.DateField(null=True, blank=True)
    status = models.CharField(max_length=10, choices=DebtStatus.choices, default=DebtStatus.ACTIVE)
    description = models.CharField(max_length=255, blank=True, default="")
    invoice_number = models.CharField(max_length=100, blank=True, default="")
    notes = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ["-date", "-created_at"]

    @property
    def paid_amount(self):
        return self.original_amount - self.remaining_amount

    @property
    def is_overdue(self) -> bool:
        return (
            self.due_date is not None
            and self.status != DebtStatus.PAID
            and self.due_date < timezone.localdate()
        )


class AccountPayable(OpenBalance):
    contact = models.ForeignKey("contacts.Contact", on_delete=models.PROTECT, related_name="payables")
    branch = models.ForeignKey(
        "accounts.Branch",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="payables",
    )
    linked_purchase_transaction = models.ForeignKey(
        "transactions.Transaction",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="purchase_payables",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        on_delete=models.SET_NULL,
        related_name="created_payables",
    )

    class Meta(OpenBalance.Meta):
        indexes = [
            models.Index(fields=["status", "due_date"], name="payable_status_due_idx"),
            models.Index(fields=["branch", "date"], name="payable_branch_date_idx"),
        ]

    def __str__(self):
        return f"{self.contact_id} owed {self.remaining_amount}"


class AccountReceivable(OpenBalance):
    contact = models.ForeignKey("contacts.Contact", on_delete=models.PROTECT, related_name="receivables")
    branch = models.ForeignKey(
        "accounts.Branch",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="receivables",
    )
    linked_sale_transaction = models.ForeignKey(
        "transactions.Transaction",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="sale_receivables",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        on_delete=models.SET_NULL,
        related_name="created_receivables",
    )

    class Meta(OpenBalance.Meta):
        indexes = [
            models.Index(fields=["status", "due_date"], name="receivable_status_due_idx"),
            models.Index(fields=["branch", "date"], name="receivable_branch_date_idx"),
        ]

    def __str__(self):
        return f"{self.contact_id} owes {self.remaining_amount}"


class PayablePayment(SoftDeleteModel):
    payable = models.ForeignKey(AccountPayable, on_delete=models.PROTECT, related_name="payments")
    amount_paid = models.DecimalField(max_digits=15, decimal_places=2)
    payment_date = models.DateField(default=timezone.localdate)
    payment_method = models.CharField(max_length=10, choices=PaymentMethod.choices, default=PaymentMethod.CASH)
    notes = models.TextField(blank=True, default="")
    transaction = models.ForeignKey(
        "transactions.Transaction",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="payable_payments",
    )
    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        on_delete=models.SET_NULL,
        related_name="recorded_payable_payments",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-payment_date", "-created_at"]


class ReceivablePayment(SoftDeleteModel):
    receivable = models.ForeignKey(AccountReceivable, on_delete=models.PROTECT, related_name="payments")
    amount_paid = models.DecimalField(max_digits=15, decimal_places=2)
    payment_date = models.DateField(default=timezone.localdate)
    payment_method = models.CharField(max_length=10, choices=PaymentMethod.choices, default=PaymentMethod.CASH)
    notes = models.TextField(blank=True, default="")
    transaction = models.ForeignKey(
        "transactions.Transaction",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="receivable_payments",
    )
    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        on_delete=models.SET_NULL,
        related_name="recorded_receivable_payments",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-payment_date", "-created_at"]


# =============================================================================
# Legacy debts
# =============================================================================

class Debt(SoftDeleteModel):
    creditor_name = models.CharField(max_length=200)
    branch = models.ForeignKey("accounts.Branch", on_delete=models.PROTECT, related_name="debts")
    original_amount = models.DecimalField(max_digits=15, decimal_places=2)
    remaining_amount = models.DecimalField(max_digits=15, decimal_places=2)
    date = models.DateField(default=timezone.localdate)
    due_date = models.DateField(null=True, blank=True)
    status = models.CharField(max_length=10, choices=DebtStatus.choices, default=DebtStatus.ACTIVE)
    notes = models.TextField(blank=True, default="")
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        on_delete=models.SET_NULL,
        related_name="created_debts",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date", "-created_at"]

    def __str__(self):
        return f"{self.creditor_name} {self.remaining_amount}"


class DebtPayment(SoftDeleteModel):
    debt = models.ForeignKey(Debt, on_delete=models.PROTECT, related_name="payments")
    amount_paid = models.DecimalField(max_digits=15, decimal_places=2)
    payment_date = models.DateField(default=timezone.localdate)
    notes = models.TextField(blank=True, default="")
    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        on_delete=models.SET_NULL,
        related_name="recorded_debt_payments",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-payment_date", "-created_at"]
