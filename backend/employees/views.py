"""Employee and payroll endpoints. Mutations go through employees.commands."""

from decimal import Decimal

from django.db.models import Q, Sum
from django.http import Http404
from django.utils.translation import gettext as _
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.authz import assert_branch_access, effective_branch_filter, require, resolve_actor, scope_queryset
from core.dates import today
from core.pagination import page_params, paginate, paginated_response_data

from . import payroll
from .commands import (
    cancel_adjustment,
    create_adjustment,
    create_employee,
    delete_employee,
    delete_salary_payment,
    pay_salary,
    record_salary_increase,
    resign_employee,
    update_employee,
)
from .models import Employee, SalaryPayment
from .serializers import (
    AdjustmentCreateSerializer,
    EmployeeAdjustmentSerializer,
    EmployeeCreateSerializer,
    EmployeeSerializer,
    EmployeeUpdateSerializer,
    PaySalarySerializer,
    ResignSerializer,
    SalaryDetailsSerializer,
    SalaryIncreaseCreateSerializer,
    SalaryIncreaseSerializer,
    SalaryPaymentSerializer,
)


def _fail(result):
    return Response({"detail": result.error}, status=result.status_code)


def _get_employee(actor, pk):
    employee = Employee.objects.select_related("branch").filter(pk=pk).first()
    if employee is None:
        raise Http404(_("Employee not found"))
    assert_branch_access(actor, employee)
    return employee


def _current_month() -> str:
    return today().strftime("%Y-%m")


# =============================================================================
# Employees
# =============================================================================

class EmployeeListCreateView(APIView):
    """
    GET /api/employees/ -> paginated employees (status, search, branch)
    POST /api/employees/ -> create employee
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        require(actor, "employees.view")

        params = request.query_params
        qs = scope_queryset(Employee.objects.select_related("branch"), actor, params.get("branch"))
        if params.get("status"):
            qs = qs.filter(status=params["status"])
        if params.get("search"):
            qs = qs.filter(Q(name__icontains=params["search"]) | Q(position__icontains=params["search"]))

        page, limit = page_params(request, default_limit=10)
        items, meta = paginate(qs.order_by("-hire_date", "-pk"), page, limit)
        return Response(paginated_response_data(items, meta, EmployeeSerializer))

    def post(self, request):
        actor = resolve_actor(request)

        serializer = EmployeeCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = create_employee(actor, **serializer.validated_data)
        if not result.success:
            return _fail(result)
        return Response(EmployeeSerializer(result.data).data, status=status.HTTP_201_CREATED)


class ActiveEmployeesView(APIView):
    """GET /api/employees/active/?branch=<id>"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        require(actor, "employees.view")

        qs = scope_queryset(
            Employee.objects.select_related("branch").filter(status=Employee.Status.ACTIVE),
            actor,
            request.query_params.get("branch"),
        )
        return Response(EmployeeSerializer(qs.order_by("name"), many=True).data)


class EmployeeDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        actor = resolve_actor(request)
        require(actor, "employees.view")
        return Response(EmployeeSerializer(_get_employee(actor, pk)).data)

    def patch(self, request, pk):
        actor = resolve_actor(request)

        serializer = EmployeeUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = update_employee(actor, pk, **serializer.validated_data)
        if not result.success:
            return _fail(result)
        return Response(EmployeeSerializer(result.data).data)

    def delete(self, request, pk):
        actor = resolve_actor(request)
        result = delete_employee(actor, pk)
        if not result.success:
            return _fail(result)
        return Response(result.data)


class EmployeeResignView(APIView):
    """POST /api/employees/<pk>/resign/"""
    permission_classes = [IsAuthenticated]

    def post(self, request, pk):
        actor = resolve_actor(request)

        serializer = ResignSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = resign_employee(actor, pk, **serializer.validated_data)
        if not result.success:
            return _fail(result)
        return Response(EmployeeSerializer(result.data).data)


# =============================================================================
# Payroll
# =============================================================================

class SalaryIncreaseListCreateView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        actor = resolve_actor(request)
        require(actor, "employees.view")
        employee = _get_employee(actor, pk)
        return Response(SalaryIncreaseSerializer(employee.salary_increases.all(), many=True).data)

    def post(self, request, pk):
        actor = resolve_actor(request)

        serializer = SalaryIncreaseCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = record_salary_increase(actor, pk, **serializer.validated_data)
        if not result.success:
            return _fail(result)
        return Response(SalaryIncreaseSerializer(result.data).data, status=status.HTTP_201_CREATED)


class AdjustmentListCreateView(APIView):
    """
    GET /api/employees/<pk>/adjustments/?status=PENDING
    POST /api/employees/<pk>/adjustments/
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        actor = resolve_actor(request)
        require(actor, "employees.view")

        qs = _get_employee(actor, pk).adjustments.all()
        if request.query_params.get("status"):
            qs = qs.filter(status=request.query_params["status"])
        return Response(EmployeeAdjustmentSerializer(qs, many=True).data)

    def post(self, request, pk):
        actor = resolve_actor(request)

        serializer = AdjustmentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = create_adjustment(actor, pk, **serializer.validated_data)
        if not result.success:
            return _fail(result)
        return Response(EmployeeAdjustmentSerializer(result.data).data, status=status.HTTP_201_CREATED)


class AdjustmentCancelView(APIView):
    """POST /api/employees/adjustments/<pk>/cancel/"""
    permission_classes = [IsAuthenticated]

    def post(self, request, pk):
        actor = resolve_actor(request)
        result = cancel_adjustment(actor, pk)
        if not result.success:
            return _fail(result)
        return Response(EmployeeAdjustmentSerializer(result.data).data)


class SalaryDetailsView(APIView):
    """GET /api/employees/<pk>/salary-details/?month=YYYY-MM"""
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        actor = resolve_actor(request)
        require(actor, "employees.view")

        employee = _get_employee(actor, pk)
        try:
            month = payroll.month_key(request.query_params.get("month") or _current_month())
        except ValueError:
            return Response({"detail": _("Month must be in YYYY-MM format")}, status=status.HTTP_400_BAD_REQUEST)
        return Response(SalaryDetailsSerializer(payroll.salary_details(employee, month)).data)


class SalaryPaymentListCreateView(APIView):
    """
    GET /api/employees/<pk>/salary-payments/
    POST /api/employees/<pk>/salary-payments/ -> pay one month
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        actor = resolve_actor(request)
        require(actor, "employees.view")

        employee = _get_employee(actor, pk)
        qs = employee.salary_payments.select_related("employee")
        return Response(SalaryPaymentSerializer(qs, many=True).data)

    def post(self, request, pk):
        actor = resolve_actor(request)

        serializer = PaySalarySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = pay_salary(actor, pk, **serializer.validated_data)
        if not result.success:
            return _fail(result)
        return Response(SalaryPaymentSerializer(result.data).data, status=status.HTTP_201_CREATED)


class SalaryPaymentDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def delete(self, request, pk):
        actor = resolve_actor(request)
        result = delete_salary_payment(actor, pk)
        if not result.success:
            return _fail(result)
        return Response(result.data)


class PayrollSummaryView(APIView):
    """GET /api/employees/payroll-summary/?branch=<id>&month=YYYY-MM"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        require(actor, "employees.view")

        try:
            month = payroll.month_key(request.query_params.get("month") or _current_month())
        except ValueError:
            return Response({"detail": _("Month must be in YYYY-MM format")}, status=status.HTTP_400_BAD_REQUEST)

        branch_id = effective_branch_filter(actor, request.query_params.get("branch"))
        employees = Employee.objects.filter(status=Employee.Status.ACTIVE)
        payments = SalaryPayment.objects.filter(salary_month=month)
        if branch_id is not None:
            employees = employees.filter(branch_id=branch_id)
            payments = payments.filter(employee__branch_id=branch_id)

        totals = employees.aggregate(base=Sum("base_salary"), allowance=Sum("allowance"))
        zero = Decimal("0.00")
        return Response({
            "branchId": branch_id,
            "month": month,
            "employee_count": employees.count(),
            "total_base_salary": totals["base"] or zero,
            "total_allowances": totals["allowance"] or zero,
            "paid_this_month": payments.aggregate(total=Sum("amount"))["total"] or zero,
            "payments_count": payments.count(),
        })
