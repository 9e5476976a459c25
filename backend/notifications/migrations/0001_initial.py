import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Notification",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("type", models.CharField(db_index=True, max_length=50)),
                ("title", models.CharField(max_length=255)),
                ("message", models.TextField()),
                ("severity", models.CharField(choices=[("INFO", "Info"), ("WARNING", "Warning"), ("ERROR", "Error"), ("CRITICAL", "Critical")], default="INFO", max_length=10)),
                ("related_id", models.CharField(blank=True, default="", max_length=64)),
                ("related_type", models.CharField(blank=True, default="", max_length=50)),
                ("is_read", models.BooleanField(default=False)),
                ("read_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("branch", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name="notifications", to="accounts.branch")),
                ("created_by", models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="created_notifications", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["is_read", "created_at"], name="notification_unread_idx"),
                    models.Index(fields=["type", "related_id"], name="notification_related_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="NotificationSetting",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("notification_type", models.CharField(max_length=50)),
                ("is_enabled", models.BooleanField(default=True)),
                ("min_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=15, null=True)),
                ("selected_branches", models.JSONField(blank=True, null=True)),
                ("display_method", models.CharField(choices=[("POPUP", "Popup"), ("TOAST", "Toast"), ("EMAIL", "Email"), ("SMS", "SMS")], default="POPUP", max_length=10)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="notification_settings", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["notification_type"],
                "constraints": [
                    models.UniqueConstraint(fields=("user", "notification_type"), name="uniq_user_notification_type"),
                ],
            },
        ),
    ]
