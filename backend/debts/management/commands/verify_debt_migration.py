"""
Verify the result of migrate_debts_to_contacts.

Compares record counts and amount sums between the legacy Debt/DebtPayment
tables and Contact/AccountPayable/PayablePayment, and checks that no
payment or payable was left dangling.

Exits with a CommandError when any check fails; warnings do not fail.

Usage:
    python manage.py verify_debt_migration
    python manage.py verify_debt_migration --keep-transactions
"""
from decimal import Decimal

from django.core.management.base import BaseCommand, CommandError
from django.db.models import Sum

from contacts.models import Contact
from debts.models import AccountPayable, Debt, DebtPayment, PayablePayment
from employees.models import EmployeeAdjustment, SalaryPayment
from transactions.models import Transaction, TransactionInventoryItem

TOLERANCE = Decimal("0.01")


def _total(queryset, field):
    return queryset.aggregate(total=Sum(field))["total"] or Decimal("0")


class Command(BaseCommand):
    help = "Verify that legacy debts were migrated to contacts and payables"

    def add_arguments(self, parser):
        parser.add_argument(
            "--keep-transactions",
            action="store_true",
            help="Skip the check that transaction tables are empty",
        )

    def handle(self, *args, **options):
        self.errors = []
        self.warnings = []

        if not options["keep_transactions"]:
            self._check_transactions_cleared()
        self._check_contacts()
        self._check_payables()
        self._check_payments()
        self._check_orphans()

        self.stdout.write("")
        for warning in self.warnings:
            self.stdout.write(self.style.WARNING(f"WARNING: {warning}"))
        if self.errors:
            for error in self.errors:
                self.stdout.write(self.style.ERROR(f"ERROR: {error}"))
            raise CommandError(f"Verification failed with {len(self.errors)} error(s)")

        self.stdout.write(self.style.SUCCESS("All checks passed"))

    def _ok(self, message):
        self.stdout.write(f"  OK  {message}")

    def _expect_equal(self, label, expected, found):
        if expected == found:
            self._ok(f"{label}: {found}")
        else:
            self.errors.append(f"{label} mismatch: expected {expected}, found {found}")

    def _expect_close(self, label, expected, found):
        if abs(expected - found) < TOLERANCE:
            self._ok(f"{label}: {found}")
        else:
            self.errors.append(
                f"{label} mismatch: expected {expected}, found {found} "
                f"(difference {abs(expected - found)})"
            )

    # ------------------------------------------------------------------

    def _check_transactions_cleared(self):
        self.stdout.write(self.style.MIGRATE_HEADING("Check 1: transaction tables are empty"))
        for label, model_qs in (
            ("transactions", Transaction.all_objects.all()),
            ("transaction inventory items", TransactionInventoryItem.objects.all()),
            ("salary payments", SalaryPayment.all_objects.all()),
            ("employee adjustments", EmployeeAdjustment.objects.all()),
        ):
            self._expect_equal(label, 0, model_qs.count())

    def _check_contacts(self):
        self.stdout.write(self.style.MIGRATE_HEADING("Check 2: one contact per creditor"))
        pairs = set(
            Debt.all_objects.values_list("creditor_name", "branch_id").distinct()
        )
        pairs = {(name.strip(), branch_id) for name, branch_id in pairs}
        matched = [
            contact
            for contact in Contact.objects.filter(name__in={name for name, _ in pairs})
            if (contact.name, contact.branch_id) in pairs
        ]
        self._expect_equal("contacts for unique creditors", len(pairs), len(matched))

        non_suppliers = [c for c in matched if c.type != Contact.ContactType.SUPPLIER]
        if non_suppliers:
            self.warnings.append(f"{len(non_suppliers)} migrated contact(s) are not SUPPLIER")

    def _check_payables(self):
        self.stdout.write(self.style.MIGRATE_HEADING("Check 3: payables match debts"))
        debts = Debt.all_objects.all()
        payables = AccountPayable.all_objects.all()
        self._expect_equal("payable count", debts.count(), payables.count())
        self._expect_close(
            "original amount total",
            _total(debts, "original_amount"),
            _total(payables, "original_amount"),
        )
        self._expect_close(
            "remaining amount total",
            _total(debts, "remaining_amount"),
            _total(payables, "remaining_amount"),
        )

    def _check_payments(self):
        self.stdout.write(self.style.MIGRATE_HEADING("Check 4: payments match debt payments"))
        debt_payments = DebtPayment.all_objects.all()
        payable_payments = PayablePayment.all_objects.all()
        self._expect_equal("payment count", debt_payments.count(), payable_payments.count())
        self._expect_close(
            "payment amount total",
            _total(debt_payments, "amount_paid"),
            _total(payable_payments, "amount_paid"),
        )

    def _check_orphans(self):
        self.stdout.write(self.style.MIGRATE_HEADING("Check 5: no orphans"))
        orphan_payments = PayablePayment.all_objects.filter(payable__isnull=True).count()
        self._expect_equal("payments without a payable", 0, orphan_payments)
        without_contact = AccountPayable.all_objects.filter(contact__isnull=True).count()
        self._expect_equal("payables without a contact", 0, without_contact)
