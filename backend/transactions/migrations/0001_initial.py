import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
        ("contacts", "0001_initial"),
        ("inventory", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="DiscountReason",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("is_deleted", models.BooleanField(db_index=True, default=False)),
                ("deleted_at", models.DateTimeField(blank=True, null=True)),
                ("reason", models.CharField(max_length=100)),
                ("description", models.CharField(blank=True, default="", max_length=255)),
                ("is_default", models.BooleanField(default=False)),
                ("sort_order", models.IntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("deleted_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["sort_order", "reason"],
            },
        ),
        migrations.CreateModel(
            name="Transaction",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("is_deleted", models.BooleanField(db_index=True, default=False)),
                ("deleted_at", models.DateTimeField(blank=True, null=True)),
                ("type", models.CharField(choices=[("INCOME", "دخل"), ("EXPENSE", "مصروف")], max_length=10)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=15)),
                ("currency", models.CharField(choices=[("USD", "US Dollar"), ("EUR", "Euro"), ("IQD", "Iraqi Dinar"), ("SAR", "Saudi Riyal"), ("AED", "UAE Dirham")], default="USD", max_length=3)),
                ("payment_method", models.CharField(blank=True, choices=[("CASH", "نقدي"), ("MASTER", "ماستر")], max_length=10, null=True)),
                ("category", models.CharField(blank=True, default="", max_length=100)),
                ("date", models.DateField(default=django.utils.timezone.localdate)),
                ("notes", models.TextField(blank=True, default="")),
                ("total_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=15, null=True)),
                ("paid_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=15, null=True)),
                ("subtotal", models.DecimalField(blank=True, decimal_places=2, max_digits=15, null=True)),
                ("discount_type", models.CharField(blank=True, choices=[("PERCENTAGE", "نسبة مئوية"), ("AMOUNT", "مبلغ ثابت")], max_length=10, null=True)),
                ("discount_value", models.DecimalField(blank=True, decimal_places=2, max_digits=15, null=True)),
                ("discount_reason", models.CharField(blank=True, default="", max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("branch", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="transactions", to="accounts.branch")),
                ("contact", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="transactions", to="contacts.contact")),
                ("created_by", models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="created_transactions", to=settings.AUTH_USER_MODEL)),
                ("deleted_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-date", "-created_at"],
            },
        ),
        migrations.CreateModel(
            name="TransactionInventoryItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.DecimalField(decimal_places=3, max_digits=12)),
                ("operation_type", models.CharField(choices=[("PURCHASE", "شراء"), ("CONSUMPTION", "استهلاك")], max_length=12)),
                ("unit_price", models.DecimalField(blank=True, decimal_places=2, max_digits=15, null=True)),
                ("subtotal", models.DecimalField(blank=True, decimal_places=2, max_digits=15, null=True)),
                ("discount_type", models.CharField(blank=True, choices=[("PERCENTAGE", "نسبة مئوية"), ("AMOUNT", "مبلغ ثابت")], max_length=10, null=True)),
                ("discount_value", models.DecimalField(blank=True, decimal_places=2, max_digits=15, null=True)),
                ("total", models.DecimalField(blank=True, decimal_places=2, max_digits=15, null=True)),
                ("notes", models.CharField(blank=True, default="", max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("inventory_item", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="transaction_links", to="inventory.inventoryitem")),
                ("transaction", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="inventory_items", to="transactions.transaction")),
            ],
            options={
                "ordering": ["id"],
            },
        ),
        migrations.AddIndex(
            model_name="transaction",
            index=models.Index(fields=["branch", "date"], name="txn_branch_date_idx"),
        ),
        migrations.AddIndex(
            model_name="transaction",
            index=models.Index(fields=["type", "date"], name="txn_type_date_idx"),
        ),
        migrations.AddIndex(
            model_name="transaction",
            index=models.Index(fields=["category"], name="txn_category_idx"),
        ),
        migrations.AddConstraint(
            model_name="discountreason",
            constraint=models.UniqueConstraint(condition=models.Q(("is_deleted", False)), fields=("reason",), name="uniq_live_discount_reason"),
        ),
    ]
