# employees/commands.py
"""
Commands for employees and payroll.

Money that leaves the till for staff (advances, salaries) is always
written as an EMPLOYEE_SALARIES expense through transactions.commands,
so it shows up in the branch totals like any other expense.
"""

import logging
from decimal import Decimal

from django.db import transaction
from django.utils import timezone
from django.utils.translation import gettext as _

from accounts.authz import ActorContext, assert_branch_access, require, resolve_branch_for_write
from core.audit import EntityType, log_action, log_create, log_delete, log_update, snapshot
from core.commands import CommandResult
from core.models import AuditLog
from transactions.categories import SALARY_CATEGORY
from transactions.commands import create_expense
from transactions.models import PaymentMethod

from . import payroll
from .models import Employee, EmployeeAdjustment, SalaryIncrease, SalaryPayment

logger = logging.getLogger(__name__)

EMPLOYEE_FIELDS = ("name", "position", "base_salary", "allowance", "hire_date", "notes")

ADVANCE_NOTE = "صرف سلفة نقدية"


def _get_employee(actor, employee_id, lock=False):
    qs = Employee.objects.select_for_update() if lock else Employee.objects.all()
    employee = qs.filter(pk=employee_id).first()
    if employee is not None:
        assert_branch_access(actor, employee)
    return employee


# =============================================================================
# Employees
# =============================================================================

@transaction.atomic
def create_employee(
    actor: ActorContext,
    name: str,
    position: str,
    base_salary,
    hire_date,
    allowance=Decimal("0"),
    notes: str = "",
    branch_id=None,
) -> CommandResult:
    require(actor, "employees.manage")

    branch = resolve_branch_for_write(actor, branch_id)
    if base_salary <= 0:
        return CommandResult.fail(_("Base salary must be greater than 0"))
    if allowance < 0:
        return CommandResult.fail(_("Allowance must be greater than or equal to 0"))

    employee = Employee.objects.create(
        branch=branch,
        name=name,
        position=position,
        base_salary=base_salary,
        allowance=allowance,
        hire_date=hire_date,
        notes=notes,
        created_by=actor.user,
    )
    entry = log_create(actor, EntityType.EMPLOYEE, employee)
    return CommandResult.ok(employee, event=entry)


@transaction.atomic
def update_employee(actor: ActorContext, employee_id: int, **updates) -> CommandResult:
    require(actor, "employees.manage")

    employee = _get_employee(actor, employee_id, lock=True)
    if employee is None:
        return CommandResult.not_found(_("Employee not found"))

    if updates.get("base_salary") is not None and updates["base_salary"] <= 0:
        return CommandResult.fail(_("Base salary must be greater than 0"))
    if updates.get("allowance") is not None and updates["allowance"] < 0:
        return CommandResult.fail(_("Allowance must be greater than or equal to 0"))

    before = snapshot(employee)
    for field in EMPLOYEE_FIELDS:
        if field in updates:
            setattr(employee, field, updates[field])
    employee.save()

    entry = log_update(actor, EntityType.EMPLOYEE, employee, before)
    return CommandResult.ok(employee, event=entry)


@transaction.atomic
def delete_employee(actor: ActorContext, employee_id: int) -> CommandResult:
    require(actor, "employees.manage")

    employee = _get_employee(actor, employee_id)
    if employee is None:
        return CommandResult.not_found(_("Employee not found"))

    employee.soft_delete(actor.user)
    entry = log_delete(actor, EntityType.EMPLOYEE, employee)
    return CommandResult.ok({"message": "Employee deleted successfully", "id": employee.pk}, event=entry)


@transaction.atomic
def resign_employee(actor: ActorContext, employee_id: int, resign_date=None) -> CommandResult:
    require(actor, "employees.manage")

    employee = _get_employee(actor, employee_id, lock=True)
    if employee is None:
        return CommandResult.not_found(_("Employee not found"))
    if employee.status == Employee.Status.RESIGNED:
        return CommandResult.fail(_("Employee has already resigned"))

    before = snapshot(employee)
    employee.status = Employee.Status.RESIGNED
    employee.resign_date = resign_date or timezone.localdate()
    employee.save(update_fields=["status", "resign_date", "updated_at"])

    entry = log_update(actor, EntityType.EMPLOYEE, employee, before)
    return CommandResult.ok(employee, event=entry)


# =============================================================================
# Salary increases
# =============================================================================

@transaction.atomic
def record_salary_increase(
    actor: ActorContext,
    employee_id: int,
    new_salary,
    effective_date=None,
    reason: str = "",
) -> CommandResult:
    require(actor, "payroll.manage")

    if new_salary <= 0:
        return CommandResult.fail(_("New salary must be greater than 0"))

    employee = _get_employee(actor, employee_id, lock=True)
    if employee is None:
        return CommandResult.not_found(_("Employee not found"))

    old_salary = employee.base_salary
    if new_salary < old_salary:
        return CommandResult.fail(_("New salary cannot be less than the current salary"))

    increase = SalaryIncrease.objects.create(
        employee=employee,
        old_salary=old_salary,
        new_salary=new_salary,
        increase_amount=new_salary - old_salary,
        effective_date=effective_date or timezone.localdate(),
        reason=reason,
        recorded_by=actor.user,
    )
    employee.base_salary = new_salary
    employee.save(update_fields=["base_salary", "updated_at"])

    entry = log_create(actor, EntityType.SALARY_INCREASE, increase)
    return CommandResult.ok(increase, event=entry)


# =============================================================================
# Adjustments
# =============================================================================

@transaction.atomic
def create_adjustment(
    actor: ActorContext,
    employee_id: int,
    type: str,
    amount,
    date=None,
    description: str = "",
) -> CommandResult:
    """
    Record a bonus, deduction or advance.

    An ADVANCE is cash handed out now: it is paid through an expense
    immediately and deducted from the salary of its month later.
    """
    require(actor, "payroll.manage")

    if amount <= 0:
        return CommandResult.fail(_("Amount must be greater than 0"))

    employee = _get_employee(actor, employee_id)
    if employee is None:
        return CommandResult.not_found(_("Employee not found"))
    if employee.status == Employee.Status.RESIGNED:
        return CommandResult.fail(_("Cannot add adjustments for a resigned employee"))

    date = date or timezone.localdate()
    expense = None
    if type == EmployeeAdjustment.AdjustmentType.ADVANCE:
        result = create_expense(
            actor,
            amount=amount,
            category=SALARY_CATEGORY,
            payment_method=PaymentMethod.CASH,
            date=date,
            notes=description or ADVANCE_NOTE,
            branch_id=employee.branch_id,
            employee_id=employee.pk,
        )
        if not result.success:
            transaction.set_rollback(True)
            return result
        expense = result.data

    adjustment = EmployeeAdjustment.objects.create(
        employee=employee,
        type=type,
        amount=amount,
        date=date,
        description=description,
        status=EmployeeAdjustment.Status.PENDING,
        transaction=expense,
        created_by=actor.user,
    )
    entry = log_create(actor, EntityType.EMPLOYEE_ADJUSTMENT, adjustment)
    return CommandResult.ok(adjustment, event=entry)


@transaction.atomic
def cancel_adjustment(actor: ActorContext, adjustment_id: int) -> CommandResult:
    require(actor, "payroll.manage")

    adjustment = (
        EmployeeAdjustment.objects.select_for_update()
        .select_related("employee")
        .filter(pk=adjustment_id)
        .first()
    )
    if adjustment is None:
        return CommandResult.not_found(_("Adjustment not found"))
    assert_branch_access(actor, adjustment.employee)
    if adjustment.status != EmployeeAdjustment.Status.PENDING:
        return CommandResult.fail(_("Only pending adjustments can be cancelled"))

    before = snapshot(adjustment)
    adjustment.status = EmployeeAdjustment.Status.CANCELLED
    adjustment.save(update_fields=["status"])

    entry = log_update(actor, EntityType.EMPLOYEE_ADJUSTMENT, adjustment, before)
    return CommandResult.ok(adjustment, event=entry)


# =============================================================================
# Salary payments
# =============================================================================

@transaction.atomic
def pay_salary(
    actor: ActorContext,
    employee_id: int,
    salary_month: str,
    payment_date=None,
    notes: str = "",
) -> CommandResult:
    """Pay the net salary of one month and settle that month's pending adjustments."""
    require(actor, "payroll.manage")

    try:
        salary_month = payroll.month_key(salary_month)
    except ValueError:
        return CommandResult.fail(_("Salary month must be in YYYY-MM format"))

    employee = _get_employee(actor, employee_id, lock=True)
    if employee is None:
        return CommandResult.not_found(_("Employee not found"))

    if employee.salary_payments.filter(salary_month=salary_month).exists():
        return CommandResult.conflict(_("Salary for %(month)s has already been paid") % {"month": salary_month})

    details = payroll.salary_details(employee, salary_month)
    net = details["net_salary"]
    if net <= 0:
        return CommandResult.fail(_("Net salary must be greater than 0"))

    payment_date = payment_date or timezone.localdate()
    notes = notes or f"صرف راتب شهر {salary_month}"

    result = create_expense(
        actor,
        amount=net,
        category=SALARY_CATEGORY,
        payment_method=PaymentMethod.CASH,
        date=payment_date,
        notes=notes,
        branch_id=employee.branch_id,
        employee_id=employee.pk,
    )
    if not result.success:
        transaction.set_rollback(True)
        return result

    payment = SalaryPayment.objects.create(
        employee=employee,
        amount=net,
        payment_date=payment_date,
        salary_month=salary_month,
        notes=notes,
        transaction=result.data,
        recorded_by=actor.user,
    )
    processed = payroll.pending_adjustments(employee, salary_month).update(
        status=EmployeeAdjustment.Status.PROCESSED,
        salary_payment=payment,
    )

    entry = log_create(actor, EntityType.SALARY_PAYMENT, payment, extra={
        "gross_salary": details["gross_salary"],
        "total_bonuses": details["total_bonuses"],
        "total_deductions": details["total_deductions"],
        "total_advances": details["total_advances"],
        "adjustments_processed": processed,
    })
    logger.info(
        "Salary paid",
        extra={"employee_id": employee.pk, "month": salary_month, "amount": str(net)},
    )
    return CommandResult.ok(payment, event=entry)


@transaction.atomic
def delete_salary_payment(actor: ActorContext, payment_id: int) -> CommandResult:
    """
    Soft delete a salary payment and its expense.

    The adjustments it settled go back to PENDING so the month can be paid again.
    """
    require(actor, "payroll.manage")

    payment = SalaryPayment.objects.select_related("employee", "transaction").filter(pk=payment_id).first()
    if payment is None:
        return CommandResult.not_found(_("Salary payment not found"))
    assert_branch_access(actor, payment.employee)

    payment.adjustments.update(status=EmployeeAdjustment.Status.PENDING, salary_payment=None)
    payment.soft_delete(actor.user)
    if payment.transaction is not None and not payment.transaction.is_deleted:
        payment.transaction.soft_delete(actor.user)
        log_action(actor, AuditLog.Action.DELETE, EntityType.TRANSACTION, payment.transaction_id, {
            "reason": "salary payment deleted",
            "salary_payment_id": payment.pk,
        })

    entry = log_delete(actor, EntityType.SALARY_PAYMENT, payment)
    return CommandResult.ok({"message": "Salary payment deleted successfully", "id": payment.pk}, event=entry)
