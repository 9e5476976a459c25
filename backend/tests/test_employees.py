# tests/test_employees.py
"""
Tests for employees and payroll.

Tests cover:
- Salary details for a month (bonuses, deductions, advances)
- Paying a month once, and the expense it writes
- Advances paid out immediately
- Deleting a salary payment reopens its adjustments
"""

from datetime import date
from decimal import Decimal

import pytest
from django.core.exceptions import PermissionDenied

from employees import payroll
from employees.commands import (
    cancel_adjustment,
    create_adjustment,
    delete_salary_payment,
    pay_salary,
    record_salary_increase,
    resign_employee,
)
from employees.models import Employee, EmployeeAdjustment
from transactions.categories import SALARY_CATEGORY
from transactions.models import Transaction, TransactionType

JUNE = "2025-06"


@pytest.fixture
def june_adjustments(accountant_actor, employee):
    create_adjustment(accountant_actor, employee.pk, "BONUS", Decimal("100"), date=date(2025, 6, 3))
    create_adjustment(accountant_actor, employee.pk, "DEDUCTION", Decimal("20"), date=date(2025, 6, 10))
    create_adjustment(accountant_actor, employee.pk, "ADVANCE", Decimal("80"), date=date(2025, 6, 12))
    # outside the month, must not count
    create_adjustment(accountant_actor, employee.pk, "BONUS", Decimal("999"), date=date(2025, 7, 1))


@pytest.mark.django_db
class TestSalaryDetails:

    def test_month_key_normalizes(self):
        assert payroll.month_key("2025-6") == "2025-06"

    def test_invalid_month(self):
        with pytest.raises(ValueError):
            payroll.month_key("June")

    def test_net_salary(self, employee, june_adjustments):
        details = payroll.salary_details(employee, JUNE)

        assert details["gross_salary"] == Decimal("550.00")
        assert details["total_bonuses"] == Decimal("100")
        assert details["total_deductions"] == Decimal("20")
        assert details["total_advances"] == Decimal("80")
        assert details["net_salary"] == Decimal("550.00")
        assert len(details["adjustments"]) == 3
        assert details["is_paid"] is False


@pytest.mark.django_db
class TestAdjustments:

    def test_advance_is_paid_out_immediately(self, accountant_actor, employee, branch):
        result = create_adjustment(accountant_actor, employee.pk, "ADVANCE", Decimal("80"), date=date(2025, 6, 12))

        assert result.success
        txn = result.data.transaction
        assert txn.type == TransactionType.EXPENSE
        assert txn.category == SALARY_CATEGORY
        assert txn.amount == Decimal("80")
        assert txn.branch == branch

    def test_bonus_writes_no_transaction(self, accountant_actor, employee):
        result = create_adjustment(accountant_actor, employee.pk, "BONUS", Decimal("10"))

        assert result.data.transaction is None
        assert Transaction.objects.count() == 0

    def test_resigned_employee_gets_no_adjustments(self, accountant_actor, employee):
        resign_employee(accountant_actor, employee.pk)

        result = create_adjustment(accountant_actor, employee.pk, "BONUS", Decimal("10"))

        assert not result.success

    def test_cancel_only_pending(self, accountant_actor, employee):
        adjustment = create_adjustment(accountant_actor, employee.pk, "BONUS", Decimal("10")).data

        assert cancel_adjustment(accountant_actor, adjustment.pk).success
        assert not cancel_adjustment(accountant_actor, adjustment.pk).success


@pytest.mark.django_db
class TestPaySalary:

    def test_pay_salary_settles_adjustments(self, accountant_actor, employee, june_adjustments):
        result = pay_salary(accountant_actor, employee.pk, JUNE, payment_date=date(2025, 6, 30))

        assert result.success
        payment = result.data
        assert payment.amount == Decimal("550.00")
        assert payment.transaction.category == SALARY_CATEGORY
        assert payment.transaction.amount == Decimal("550.00")
        assert result.event.changes["adjustments_processed"] == 3
        assert EmployeeAdjustment.objects.filter(status=EmployeeAdjustment.Status.PROCESSED).count() == 3
        assert EmployeeAdjustment.objects.filter(
            status=EmployeeAdjustment.Status.PENDING, date=date(2025, 7, 1),
        ).count() == 1

    def test_month_is_paid_once(self, accountant_actor, employee):
        assert pay_salary(accountant_actor, employee.pk, JUNE).success

        result = pay_salary(accountant_actor, employee.pk, JUNE)

        assert result.status_code == 409

    def test_bad_month_format(self, accountant_actor, employee):
        result = pay_salary(accountant_actor, employee.pk, "2025/06")

        assert not result.success

    def test_net_salary_must_be_positive(self, accountant_actor, employee):
        create_adjustment(accountant_actor, employee.pk, "DEDUCTION", Decimal("600"), date=date(2025, 6, 1))

        result = pay_salary(accountant_actor, employee.pk, JUNE)

        assert not result.success

    def test_other_branch_cannot_pay(self, other_accountant_actor, employee):
        with pytest.raises(PermissionDenied):
            pay_salary(other_accountant_actor, employee.pk, JUNE)

    def test_delete_payment_reopens_month(self, accountant_actor, employee, june_adjustments):
        payment = pay_salary(accountant_actor, employee.pk, JUNE).data

        result = delete_salary_payment(accountant_actor, payment.pk)

        assert result.success
        assert EmployeeAdjustment.objects.filter(status=EmployeeAdjustment.Status.PROCESSED).count() == 0
        assert not Transaction.objects.filter(pk=payment.transaction_id).exists()
        assert pay_salary(accountant_actor, employee.pk, JUNE).success


@pytest.mark.django_db
class TestEmployeeLifecycle:

    def test_salary_increase(self, accountant_actor, employee):
        result = record_salary_increase(accountant_actor, employee.pk, Decimal("650"))

        assert result.success
        assert result.data.increase_amount == Decimal("150.00")
        employee.refresh_from_db()
        assert employee.base_salary == Decimal("650")

    def test_salary_cannot_decrease(self, accountant_actor, employee):
        assert not record_salary_increase(accountant_actor, employee.pk, Decimal("400")).success

    def test_resign_twice(self, accountant_actor, employee):
        assert resign_employee(accountant_actor, employee.pk).success
        employee.refresh_from_db()
        assert employee.status == Employee.Status.RESIGNED

        assert not resign_employee(accountant_actor, employee.pk).success


@pytest.mark.django_db
class TestEmployeeAPI:

    def test_salary_details_endpoint(self, accountant_client, employee):
        response = accountant_client.get(f"/api/employees/{employee.pk}/salary-details/?month={JUNE}")

        assert response.status_code == 200
        assert Decimal(str(response.data["net_salary"])) == Decimal("550.00")

    def test_other_branch_employee_is_hidden(self, api_client, other_accountant, employee):
        api_client.force_authenticate(user=other_accountant)

        response = api_client.get("/api/employees/")

        assert response.status_code == 200
        assert response.data["meta"]["total"] == 0
