import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="ReportFieldMetadata",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("data_source", models.CharField(max_length=30)),
                ("field_name", models.CharField(max_length=100)),
                ("display_name", models.CharField(max_length=150)),
                ("description", models.TextField(blank=True, default="")),
                ("data_type", models.CharField(choices=[("string", "String"), ("number", "Number"), ("date", "Date"), ("boolean", "Boolean"), ("enum", "Enum")], max_length=10)),
                ("filterable", models.BooleanField(default=True)),
                ("sortable", models.BooleanField(default=True)),
                ("aggregatable", models.BooleanField(default=False)),
                ("groupable", models.BooleanField(default=False)),
                ("default_visible", models.BooleanField(default=True)),
                ("default_order", models.PositiveIntegerField(default=0)),
                ("category", models.CharField(blank=True, default="", max_length=50)),
                ("format", models.CharField(blank=True, default="", max_length=20)),
                ("enum_values", models.JSONField(blank=True, null=True)),
            ],
            options={
                "ordering": ["data_source", "default_order", "display_name"],
                "constraints": [
                    models.UniqueConstraint(fields=("data_source", "field_name"), name="uniq_report_field"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ReportTemplate",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("is_deleted", models.BooleanField(db_index=True, default=False)),
                ("deleted_at", models.DateTimeField(blank=True, null=True)),
                ("name", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True, default="")),
                ("report_type", models.CharField(choices=[("FINANCIAL", "Financial"), ("DEBTS", "Debts"), ("INVENTORY", "Inventory"), ("SALARY", "Salary"), ("BRANCHES", "Branches"), ("CUSTOM", "Custom")], default="CUSTOM", max_length=20)),
                ("config", models.JSONField()),
                ("is_public", models.BooleanField(default=False)),
                ("is_default", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("created_by", models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="report_templates", to=settings.AUTH_USER_MODEL)),
                ("deleted_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-is_default", "-updated_at"],
                "abstract": False,
                "indexes": [
                    models.Index(fields=["report_type", "is_default"], name="report_template_type_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ReportExecution",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("config", models.JSONField()),
                ("applied_filters", models.JSONField(default=list)),
                ("result_count", models.PositiveIntegerField(default=0)),
                ("execution_time", models.PositiveIntegerField(default=0)),
                ("export_format", models.CharField(blank=True, default="", max_length=10)),
                ("file_size", models.PositiveIntegerField(blank=True, null=True)),
                ("executed_at", models.DateTimeField(auto_now_add=True)),
                ("executed_by", models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="report_executions", to=settings.AUTH_USER_MODEL)),
                ("template", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="executions", to="reports.reporttemplate")),
            ],
            options={
                "ordering": ["-executed_at"],
            },
        ),
    ]
