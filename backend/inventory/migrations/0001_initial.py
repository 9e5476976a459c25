import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

UNIT_CHOICES = [("KG", "كيلوغرام"), ("PIECE", "قطعة"), ("LITER", "لتر"), ("OTHER", "أخرى")]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="InventoryItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("is_deleted", models.BooleanField(db_index=True, default=False)),
                ("deleted_at", models.DateTimeField(blank=True, null=True)),
                ("name", models.CharField(max_length=200)),
                ("quantity", models.DecimalField(decimal_places=3, default=0, max_digits=12)),
                ("unit", models.CharField(choices=UNIT_CHOICES, max_length=10)),
                ("cost_per_unit", models.DecimalField(decimal_places=2, default=0, max_digits=15)),
                ("selling_price", models.DecimalField(blank=True, decimal_places=2, max_digits=15, null=True)),
                ("allow_sub_units", models.BooleanField(default=False)),
                ("include_in_revenue", models.BooleanField(default=True)),
                ("last_updated", models.DateTimeField(default=django.utils.timezone.now)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("branch", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="inventory_items", to="accounts.branch")),
                ("deleted_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-last_updated"],
            },
        ),
        migrations.AddConstraint(
            model_name="inventoryitem",
            constraint=models.UniqueConstraint(condition=models.Q(("is_deleted", False)), fields=("branch", "name", "unit"), name="uniq_live_inventory_item"),
        ),
        migrations.CreateModel(
            name="InventorySubUnit",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("unit_name", models.CharField(max_length=50)),
                ("ratio", models.DecimalField(decimal_places=3, max_digits=12)),
                ("selling_price", models.DecimalField(decimal_places=2, max_digits=15)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("inventory_item", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="sub_units", to="inventory.inventoryitem")),
            ],
            options={
                "ordering": ["unit_name"],
            },
        ),
        migrations.AddConstraint(
            model_name="inventorysubunit",
            constraint=models.UniqueConstraint(fields=("inventory_item", "unit_name"), name="uniq_sub_unit_per_item"),
        ),
        migrations.CreateModel(
            name="InventoryConsumption",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.DecimalField(decimal_places=3, max_digits=12)),
                ("unit", models.CharField(choices=UNIT_CHOICES, max_length=10)),
                ("reason", models.CharField(blank=True, default="", max_length=255)),
                ("consumed_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("branch", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="inventory_consumptions", to="accounts.branch")),
                ("inventory_item", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="consumptions", to="inventory.inventoryitem")),
                ("recorded_by", models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="inventory_consumptions", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-consumed_at"],
                "indexes": [models.Index(fields=["branch", "consumed_at"], name="inv_consumption_branch_idx")],
            },
        ),
    ]
