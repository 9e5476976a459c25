"""
Seed the smart report field catalogue.

Idempotent: rows are upserted on (data_source, field_name).

Usage:
    python manage.py seed_report_fields
"""
from django.core.management.base import BaseCommand
from django.db import transaction

from reports.catalog import FIELD_CATALOG
from reports.models import ReportFieldMetadata


class Command(BaseCommand):
    help = "Create or update ReportFieldMetadata rows for every data source"

    @transaction.atomic
    def handle(self, *args, **options):
        created = 0
        for entry in FIELD_CATALOG:
            values = dict(entry)
            _, was_created = ReportFieldMetadata.objects.update_or_create(
                data_source=values.pop("data_source"),
                field_name=values.pop("field_name"),
                defaults=values,
            )
            created += int(was_created)

        self.stdout.write(self.style.SUCCESS(
            f"Seeded {len(FIELD_CATALOG)} report fields ({created} new)"
        ))
