from django.db import migrations, models

SEED_CURRENCIES = [
    ("USD", "دولار أمريكي", "US Dollar", "$", True),
    ("EUR", "يورو", "Euro", "€", False),
    ("IQD", "دينار عراقي", "Iraqi Dinar", "د.ع", False),
    ("SAR", "ريال سعودي", "Saudi Riyal", "ر.س", False),
    ("AED", "درهم إماراتي", "UAE Dirham", "د.إ", False),
]


def seed_currencies(apps, schema_editor):
    CurrencySetting = apps.get_model("configuration", "CurrencySetting")
    for code, name_ar, name_en, symbol, is_default in SEED_CURRENCIES:
        CurrencySetting.objects.get_or_create(
            code=code,
            defaults={"name_ar": name_ar, "name_en": name_en, "symbol": symbol, "is_default": is_default},
        )


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="AppSetting",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("login_background_url", models.CharField(blank=True, max_length=500, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
        ),
        migrations.CreateModel(
            name="CurrencySetting",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=3, unique=True)),
                ("name_ar", models.CharField(max_length=100)),
                ("name_en", models.CharField(max_length=100)),
                ("symbol", models.CharField(max_length=10)),
                ("is_default", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-is_default", "code"],
            },
        ),
        migrations.RunPython(seed_currencies, migrations.RunPython.noop),
    ]
