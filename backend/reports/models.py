# reports/models.py
from django.conf import settings
from django.db import models

from core.models import SoftDeleteModel


class ReportFieldMetadata(models.Model):
    """One reportable column of a data source. Seeded by seed_report_fields."""

    class DataType(models.TextChoices):
        STRING = "string", "String"
        NUMBER = "number", "Number"
        DATE = "date", "Date"
        BOOLEAN = "boolean", "Boolean"
        ENUM = "enum", "Enum"

    data_source = models.CharField(max_length=30)
    field_name = models.CharField(max_length=100)
    display_name = models.CharField(max_length=150)
    description = models.TextField(blank=True, default="")
    data_type = models.CharField(max_length=10, choices=DataType.choices)
    filterable = models.BooleanField(default=True)
    sortable = models.BooleanField(default=True)
    aggregatable = models.BooleanField(default=False)
    groupable = models.BooleanField(default=False)
    default_visible = models.BooleanField(default=True)
    default_order = models.PositiveIntegerField(default=0)
    category = models.CharField(max_length=50, blank=True, default="")
    format = models.CharField(max_length=20, blank=True, default="")
    enum_values = models.JSONField(null=True, blank=True)

    class Meta:
        ordering = ["data_source", "default_order", "display_name"]
        constraints = [
            models.UniqueConstraint(fields=["data_source", "field_name"], name="uniq_report_field"),
        ]

    def __str__(self):
        return f"{self.data_source}.{self.field_name}"


class ReportTemplate(SoftDeleteModel):
    class ReportType(models.TextChoices):
        FINANCIAL = "FINANCIAL", "Financial"
        DEBTS = "DEBTS", "Debts"
        INVENTORY = "INVENTORY", "Inventory"
        SALARY = "SALARY", "Salary"
        BRANCHES = "BRANCHES", "Branches"
        CUSTOM = "CUSTOM", "Custom"

    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, default="")
    report_type = models.CharField(max_length=20, choices=ReportType.choices, default=ReportType.CUSTOM)
    config = models.JSONField()
    is_public = models.BooleanField(default=False)
    is_default = models.BooleanField(default=False)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        on_delete=models.SET_NULL,
        related_name="report_templates",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-is_default", "-updated_at"]
        indexes = [
            models.Index(fields=["report_type", "is_default"], name="report_template_type_idx"),
        ]

    def __str__(self):
        return self.name


class ReportExecution(models.Model):
    """Log row written for every smart report run or export."""

    template = models.ForeignKey(
        ReportTemplate,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="executions",
    )
    config = models.JSONField()
    applied_filters = models.JSONField(default=list)
    result_count = models.PositiveIntegerField(default=0)
    execution_time = models.PositiveIntegerField(default=0)  # ms
    export_format = models.CharField(max_length=10, blank=True, default="")
    file_size = models.PositiveIntegerField(null=True, blank=True)
    executed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        on_delete=models.SET_NULL,
        related_name="report_executions",
    )
    executed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-executed_at"]

    def __str__(self):
        return f"execution {self.pk} ({self.result_count} rows)"
