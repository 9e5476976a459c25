# employees/payroll.py
"""Salary arithmetic for one employee and one month."""

from decimal import Decimal

from core.dates import month_bounds, parse_month

from .models import Employee, EmployeeAdjustment

ZERO = Decimal("0.00")


def month_key(value) -> str:
    """Validate a 'YYYY-MM' string and return it in canonical form. Raises ValueError."""
    start = parse_month(value)
    return f"{start.year:04d}-{start.month:02d}"


def pending_adjustments(employee: Employee, salary_month: str):
    start, end = month_bounds(parse_month(salary_month))
    return employee.adjustments.filter(
        status=EmployeeAdjustment.Status.PENDING,
        date__range=(start, end),
    )


def salary_details(employee: Employee, salary_month: str) -> dict:
    """
    Gross and net salary for `salary_month`.

    net = base + allowance + bonuses - deductions - advances, counting only
    the PENDING adjustments dated inside the month.
    """
    totals = {choice: ZERO for choice in EmployeeAdjustment.AdjustmentType.values}
    adjustments = list(pending_adjustments(employee, salary_month).order_by("date", "pk"))
    for adjustment in adjustments:
        totals[adjustment.type] += adjustment.amount

    gross = employee.base_salary + employee.allowance
    bonuses = totals[EmployeeAdjustment.AdjustmentType.BONUS]
    deductions = totals[EmployeeAdjustment.AdjustmentType.DEDUCTION]
    advances = totals[EmployeeAdjustment.AdjustmentType.ADVANCE]

    return {
        "employee_id": employee.pk,
        "employee_name": employee.name,
        "month": salary_month,
        "base_salary": employee.base_salary,
        "allowance": employee.allowance,
        "gross_salary": gross,
        "total_bonuses": bonuses,
        "total_deductions": deductions,
        "total_advances": advances,
        "net_salary": gross + bonuses - deductions - advances,
        "adjustments": adjustments,
        "is_paid": employee.salary_payments.filter(salary_month=salary_month).exists(),
    }
