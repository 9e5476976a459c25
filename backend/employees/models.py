# employees/models.py
from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

from core.models import SoftDeleteModel


class Employee(SoftDeleteModel):
    class Status(models.TextChoices):
        ACTIVE = "ACTIVE", "نشط"
        RESIGNED = "RESIGNED", "مستقيل"

    branch = models.ForeignKey("accounts.Branch", on_delete=models.PROTECT, related_name="employees")
    name = models.CharField(max_length=200)
    position = models.CharField(max_length=150)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.ACTIVE)
    base_salary = models.DecimalField(max_digits=15, decimal_places=2)
    allowance = models.DecimalField(max_digits=15, decimal_places=2, default=0)
    hire_date = models.DateField()
    resign_date = models.DateField(null=True, blank=True)
    notes = models.TextField(blank=True, default="")
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        on_delete=models.SET_NULL,
        related_name="created_employees",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-hire_date"]
        indexes = [
            models.Index(fields=["branch", "status"], name="employee_branch_status_idx"),
        ]

    def __str__(self):
        return self.name

    @property
    def gross_salary(self):
        return self.base_salary + self.allowance


class SalaryPayment(SoftDeleteModel):
    """One month's salary paid to an employee. A month is paid at most once."""

    employee = models.ForeignKey(Employee, on_delete=models.PROTECT, related_name="salary_payments")
    amount = models.DecimalField(max_digits=15, decimal_places=2)
    payment_date = models.DateField(default=timezone.localdate)
    salary_month = models.CharField(max_length=7)  # YYYY-MM
    notes = models.TextField(blank=True, default="")
    transaction = models.ForeignKey(
        "transactions.Transaction",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="salary_payments",
    )
    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        on_delete=models.SET_NULL,
        related_name="recorded_salary_payments",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-payment_date", "-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["employee", "salary_month"],
                condition=Q(is_deleted=False),
                name="uniq_live_salary_month",
            ),
        ]

    def __str__(self):
        return f"{self.employee_id} {self.salary_month} {self.amount}"


class SalaryIncrease(models.Model):
    employee = models.ForeignKey(Employee, on_delete=models.CASCADE, related_name="salary_increases")
    old_salary = models.DecimalField(max_digits=15, decimal_places=2)
    new_salary = models.DecimalField(max_digits=15, decimal_places=2)
    increase_amount = models.DecimalField(max_digits=15, decimal_places=2)
    effective_date = models.DateField()
    reason = models.CharField(max_length=255, blank=True, default="")
    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        on_delete=models.SET_NULL,
        related_name="recorded_salary_increases",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-effective_date", "-created_at"]


class EmployeeAdjustment(models.Model):
    """
    Bonus, deduction or advance applied to the salary of the month it is dated in.

    PENDING adjustments are folded into the next salary payment of that
    month and become PROCESSED.
    """

    class AdjustmentType(models.TextChoices):
        BONUS = "BONUS", "مكافأة"
        DEDUCTION = "DEDUCTION", "خصم"
        ADVANCE = "ADVANCE", "سلفة"

    class Status(models.TextChoices):
        PENDING = "PENDING", "معلق"
        PROCESSED = "PROCESSED", "تمت المعالجة"
        CANCELLED = "CANCELLED", "ملغى"

    employee = models.ForeignKey(Employee, on_delete=models.CASCADE, related_name="adjustments")
    type = models.CharField(max_length=10, choices=AdjustmentType.choices)
    amount = models.DecimalField(max_digits=15, decimal_places=2)
    date = models.DateField(default=timezone.localdate)
    description = models.CharField(max_length=255, blank=True, default="")
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING)
    salary_payment = models.ForeignKey(
        SalaryPayment,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="adjustments",
    )
    transaction = models.ForeignKey(
        "transactions.Transaction",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="employee_adjustments",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        on_delete=models.SET_NULL,
        related_name="created_adjustments",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-date", "-created_at"]
        indexes = [
            models.Index(fields=["employee", "status", "date"], name="adjustment_month_idx"),
        ]
