import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

STATUS_CHOICES = [("ACTIVE", "نشط"), ("PARTIAL", "مدفوع جزئياً"), ("PAID", "مدفوع")]
METHOD_CHOICES = [("CASH", "نقدي"), ("MASTER", "ماستر")]


def soft_delete_fields():
    return [
        ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
        ("is_deleted", models.BooleanField(db_index=True, default=False)),
        ("deleted_at", models.DateTimeField(blank=True, null=True)),
        ("deleted_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
    ]


def balance_fields():
    return [
        ("original_amount", models.DecimalField(decimal_places=2, max_digits=15)),
        ("remaining_amount", models.DecimalField(decimal_places=2, max_digits=15)),
        ("date", models.DateField(default=django.utils.timezone.localdate)),
        ("due_date", models.DateField(blank=True, null=True)),
        ("status", models.CharField(choices=STATUS_CHOICES, default="ACTIVE", max_length=10)),
        ("description", models.CharField(blank=True, default="", max_length=255)),
        ("invoice_number", models.CharField(blank=True, default="", max_length=100)),
        ("notes", models.TextField(blank=True, default="")),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
    ]


def payment_fields():
    return [
        ("amount_paid", models.DecimalField(decimal_places=2, max_digits=15)),
        ("payment_date", models.DateField(default=django.utils.timezone.localdate)),
        ("payment_method", models.CharField(choices=METHOD_CHOICES, default="CASH", max_length=10)),
        ("notes", models.TextField(blank=True, default="")),
        ("created_at", models.DateTimeField(auto_now_add=True)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
        ("contacts", "0001_initial"),
        ("transactions", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="AccountPayable",
            fields=soft_delete_fields() + balance_fields() + [
                ("contact", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="payables", to="contacts.contact")),
                ("branch", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="payables", to="accounts.branch")),
                ("linked_purchase_transaction", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="purchase_payables", to="transactions.transaction")),
                ("created_by", models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="created_payables", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-date", "-created_at"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="AccountReceivable",
            fields=soft_delete_fields() + balance_fields() + [
                ("contact", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="receivables", to="contacts.contact")),
                ("branch", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="receivables", to="accounts.branch")),
                ("linked_sale_transaction", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="sale_receivables", to="transactions.transaction")),
                ("created_by", models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="created_receivables", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-date", "-created_at"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="PayablePayment",
            fields=soft_delete_fields() + payment_fields() + [
                ("payable", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="payments", to="debts.accountpayable")),
                ("transaction", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="payable_payments", to="transactions.transaction")),
                ("recorded_by", models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="recorded_payable_payments", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-payment_date", "-created_at"],
            },
        ),
        migrations.CreateModel(
            name="ReceivablePayment",
            fields=soft_delete_fields() + payment_fields() + [
                ("receivable", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="payments", to="debts.accountreceivable")),
                ("transaction", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="receivable_payments", to="transactions.transaction")),
                ("recorded_by", models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="recorded_receivable_payments", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-payment_date", "-created_at"],
            },
        ),
        migrations.CreateModel(
            name="Debt",
            fields=soft_delete_fields() + [
                ("creditor_name", models.CharField(max_length=200)),
                ("original_amount", models.DecimalField(decimal_places=2, max_digits=15)),
                ("remaining_amount", models.DecimalField(decimal_places=2, max_digits=15)),
                ("date", models.DateField(default=django.utils.timezone.localdate)),
                ("due_date", models.DateField(blank=True, null=True)),
                ("status", models.CharField(choices=STATUS_CHOICES, default="ACTIVE", max_length=10)),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("branch", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="debts", to="accounts.branch")),
                ("created_by", models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="created_debts", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-date", "-created_at"],
            },
        ),
        migrations.CreateModel(
            name="DebtPayment",
            fields=soft_delete_fields() + [
                ("amount_paid", models.DecimalField(decimal_places=2, max_digits=15)),
                ("payment_date", models.DateField(default=django.utils.timezone.localdate)),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("debt", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="payments", to="debts.debt")),
                ("recorded_by", models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="recorded_debt_payments", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-payment_date", "-created_at"],
            },
        ),
        migrations.AddIndex(
            model_name="accountpayable",
            index=models.Index(fields=["status", "due_date"], name="payable_status_due_idx"),
        ),
        migrations.AddIndex(
            model_name="accountpayable",
            index=models.Index(fields=["branch", "date"], name="payable_branch_date_idx"),
        ),
        migrations.AddIndex(
            model_name="accountreceivable",
            index=models.Index(fields=["status", "due_date"], name="receivable_status_due_idx"),
        ),
        migrations.AddIndex(
            model_name="accountreceivable",
            index=models.Index(fields=["branch", "date"], name="receivable_branch_date_idx"),
        ),
    ]
