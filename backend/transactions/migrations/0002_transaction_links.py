import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("transactions", "0001_initial"),
        ("employees", "0001_initial"),
        ("debts", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="transaction",
            name="employee",
            field=models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="transactions", to="employees.employee"),
        ),
        migrations.AddField(
            model_name="transaction",
            name="linked_payable",
            field=models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="linked_transactions", to="debts.accountpayable"),
        ),
        migrations.AddField(
            model_name="transaction",
            name="linked_receivable",
            field=models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="linked_transactions", to="debts.accountreceivable"),
        ),
    ]
