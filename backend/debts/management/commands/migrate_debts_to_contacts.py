"""
Move legacy debts onto contacts and payables.

One-time migration from the creditor-name based Debt/DebtPayment tables
to Contact + AccountPayable + PayablePayment:

1. Delete every transaction and the rows that hang off transactions
   (stock lines, salary payments, employee adjustments), unless
   --keep-transactions is given.
2. Create one SUPPLIER contact per unique (creditor_name, branch). An
   existing contact with that name in the branch is reused.
3. Create one AccountPayable per Debt.
4. Create one PayablePayment per DebtPayment.

Creators and timestamps are carried over. Everything runs in a single
database transaction; --dry-run rolls it back at the end.

Usage:
    python manage.py migrate_debts_to_contacts --dry-run
    python manage.py migrate_debts_to_contacts
    python manage.py verify_debt_migration
"""
from django.core.management.base import BaseCommand
from django.db import transaction

from contacts.models import Contact
from debts.models import AccountPayable, Debt, DebtPayment, PayablePayment
from employees.models import EmployeeAdjustment, SalaryPayment
from transactions.models import Transaction, TransactionInventoryItem


def creditor_key(debt):
    return (debt.creditor_name.strip(), debt.branch_id)


class Command(BaseCommand):
    help = "Migrate legacy Debt/DebtPayment rows to Contact/AccountPayable/PayablePayment"

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Run the whole migration, print the summary, then roll back",
        )
        parser.add_argument(
            "--keep-transactions",
            action="store_true",
            help="Do not delete existing transactions",
        )

    def handle(self, *args, **options):
        dry_run = options["dry_run"]

        with transaction.atomic():
            if options["keep_transactions"]:
                self.stdout.write("Step 1: keeping existing transactions")
            else:
                self._delete_transactions()

            debts = list(Debt.all_objects.select_related("branch").order_by("created_at", "pk"))
            self.stdout.write(f"Step 2: found {len(debts)} debt records")

            contacts = self._create_contacts(debts)
            payables = self._create_payables(debts, contacts)
            migrated_payments = self._create_payments(payables)

            self.stdout.write("")
            self.stdout.write(self.style.MIGRATE_HEADING("Migration summary"))
            self.stdout.write(f"  Contacts:  {len(contacts)}")
            self.stdout.write(f"  Payables:  {len(payables)}")
            self.stdout.write(f"  Payments:  {migrated_payments}")

            if dry_run:
                transaction.set_rollback(True)
                self.stdout.write(self.style.WARNING("Dry run: all changes rolled back"))
                return

        self.stdout.write(self.style.SUCCESS("Debt migration completed"))
        self.stdout.write("Next: python manage.py verify_debt_migration")

    # ------------------------------------------------------------------

    def _delete_transactions(self):
        self.stdout.write("Step 1: deleting transactions and dependent rows")
        steps = (
            ("transaction inventory items", TransactionInventoryItem.objects.all()),
            ("employee adjustments", EmployeeAdjustment.objects.all()),
            ("salary payments", SalaryPayment.all_objects.all()),
            ("transactions", Transaction.all_objects.all()),
        )
        for label, queryset in steps:
            deleted, _ = queryset.delete()
            self.stdout.write(f"  Deleted {deleted} {label}")

    def _create_contacts(self, debts):
        self.stdout.write("Step 3: creating contacts")
        contacts = {}
        for debt in debts:
            key = creditor_key(debt)
            if key in contacts:
                continue
            name, branch_id = key
            contact = Contact.objects.filter(name=name, branch_id=branch_id).first()
            if contact is None:
                contact = Contact.objects.create(
                    name=name,
                    type=Contact.ContactType.SUPPLIER,
                    branch_id=branch_id,
                    created_by_id=debt.created_by_id,
                )
                Contact.all_objects.filter(pk=contact.pk).update(created_at=debt.created_at)
                self.stdout.write(f"  Created contact {name!r} (branch {branch_id})")
            else:
                self.stdout.write(f"  Reused contact {name!r} (branch {branch_id})")
            contacts[key] = contact
        return contacts

    def _create_payables(self, debts, contacts):
        self.stdout.write("Step 4: creating payables")
        payables = {}
        for debt in debts:
            contact = contacts[creditor_key(debt)]
            payable = AccountPayable.objects.create(
                contact=contact,
                branch_id=debt.branch_id,
                original_amount=debt.original_amount,
                remaining_amount=debt.remaining_amount,
                date=debt.date,
                due_date=debt.due_date,
                status=debt.status,
                description=debt.notes or f"Migrated from debt: {debt.creditor_name}",
                created_by_id=debt.created_by_id,
                is_deleted=debt.is_deleted,
                deleted_at=debt.deleted_at,
                deleted_by_id=debt.deleted_by_id,
            )
            AccountPayable.all_objects.filter(pk=payable.pk).update(
                created_at=debt.created_at,
                updated_at=debt.updated_at,
            )
            payables[debt.pk] = payable
        self.stdout.write(f"  Migrated {len(payables)} debts")
        return payables

    def _create_payments(self, payables):
        self.stdout.write("Step 5: creating payable payments")
        migrated = 0
        for payment in DebtPayment.all_objects.order_by("created_at", "pk"):
            payable = payables.get(payment.debt_id)
            if payable is None:
                self.stdout.write(self.style.WARNING(
                    f"  No payable for debt payment {payment.pk} (debt {payment.debt_id})"
                ))
                continue
            created = PayablePayment.objects.create(
                payable=payable,
                amount_paid=payment.amount_paid,
                payment_date=payment.payment_date,
                notes=payment.notes,
                recorded_by_id=payment.recorded_by_id,
                is_deleted=payment.is_deleted,
                deleted_at=payment.deleted_at,
                deleted_by_id=payment.deleted_by_id,
            )
            PayablePayment.all_objects.filter(pk=created.pk).update(created_at=payment.created_at)
            migrated += 1
        self.stdout.write(f"  Migrated {migrated} payments")
        return migrated
