"""
Celery app for scheduled notification jobs.

The beat schedule (overdue account scan, backup reminder) lives in
CELERY_BEAT_SCHEDULE in settings; django_celery_beat stores it.

    celery -A ledger_backend worker -l INFO
    celery -A ledger_backend beat -l INFO
"""
import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "ledger_backend.settings")

app = Celery("ledger_backend")
app.config_from_object("django.conf:settings", namespace="CELERY")

# picks up notifications.tasks
app.autodiscover_tasks()
