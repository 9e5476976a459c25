"""Transaction and discount reason endpoints. Mutations go through transactions.commands."""

from decimal import Decimal

from django.db.models import Q, Sum
from django.http import Http404
from django.utils.translation import gettext as _
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.authz import assert_branch_access, effective_branch_filter, require, resolve_actor, scope_queryset
from core.dates import parse_date, today
from core.pagination import page_params, paginate, paginated_response_data

from .categories import SALARY_CATEGORY, categories_for, normalize_category
from .commands import (
    create_discount_reason,
    create_expense,
    create_income,
    delete_discount_reason,
    delete_transaction,
    update_discount_reason,
    update_transaction,
)
from .models import DiscountReason, PaymentMethod, Transaction, TransactionType
from .serializers import (
    DiscountReasonSerializer,
    DiscountReasonUpdateSerializer,
    DiscountReasonWriteSerializer,
    ExpenseCreateSerializer,
    IncomeCreateSerializer,
    TransactionFilterSerializer,
    TransactionSerializer,
    TransactionUpdateSerializer,
)


def _fail(result):
    return Response({"detail": result.error}, status=result.status_code)


def _transactions():
    return Transaction.objects.select_related("branch", "created_by", "contact", "employee").prefetch_related(
        "inventory_items__inventory_item",
    )


def _sum(qs) -> Decimal:
    return qs.aggregate(total=Sum("amount"))["total"] or Decimal("0")


# =============================================================================
# Transactions
# =============================================================================

class TransactionListView(APIView):
    """GET /api/transactions/ -> paginated, filtered, branch-scoped list"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        require(actor, "transactions.view")

        filters = TransactionFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        f = filters.validated_data

        qs = scope_queryset(_transactions(), actor, f.get("branch"))
        if f.get("type"):
            qs = qs.filter(type=f["type"])
        if f.get("category"):
            qs = qs.filter(category=normalize_category(f["category"]))
        if f.get("payment_method"):
            qs = qs.filter(payment_method=f["payment_method"])
        if f.get("start_date"):
            qs = qs.filter(date__gte=f["start_date"])
        if f.get("end_date"):
            qs = qs.filter(date__lte=f["end_date"])
        if f.get("employee"):
            qs = qs.filter(employee_id=f["employee"])
        if f.get("search"):
            qs = qs.filter(Q(category__icontains=f["search"]) | Q(notes__icontains=f["search"]))

        page, limit = page_params(request, default_limit=50)
        items, meta = paginate(qs.order_by("-date", "-created_at"), page, limit)
        return Response(paginated_response_data(items, meta, TransactionSerializer))


class IncomeCreateView(APIView):
    """POST /api/transactions/income/"""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        actor = resolve_actor(request)

        serializer = IncomeCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = create_income(actor, **serializer.validated_data)
        if not result.success:
            return _fail(result)
        return Response(TransactionSerializer(result.data).data, status=status.HTTP_201_CREATED)


class ExpenseCreateView(APIView):
    """POST /api/transactions/expense/"""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        actor = resolve_actor(request)

        serializer = ExpenseCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = create_expense(actor, **serializer.validated_data)
        if not result.success:
            return _fail(result)
        return Response(TransactionSerializer(result.data).data, status=status.HTTP_201_CREATED)


class TransactionDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        actor = resolve_actor(request)
        require(actor, "transactions.view")

        txn = _transactions().filter(pk=pk).first()
        if txn is None:
            raise Http404(_("Transaction not found"))
        assert_branch_access(actor, txn)
        return Response(TransactionSerializer(txn).data)

    def patch(self, request, pk):
        actor = resolve_actor(request)

        serializer = TransactionUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = update_transaction(actor, pk, **serializer.validated_data)
        if not result.success:
            return _fail(result)
        return Response(TransactionSerializer(result.data).data)

    def delete(self, request, pk):
        actor = resolve_actor(request)
        result = delete_transaction(actor, pk)
        if not result.success:
            return _fail(result)
        return Response(result.data)


class TransactionSummaryView(APIView):
    """GET /api/transactions/summary/?date=YYYY-MM-DD&branch=<id> -> one day's totals"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        require(actor, "transactions.view")

        day = parse_date(request.query_params.get("date"), default=today())
        branch_id = effective_branch_filter(actor, request.query_params.get("branch"))

        qs = Transaction.objects.filter(date=day)
        if branch_id is not None:
            qs = qs.filter(branch_id=branch_id)

        income = qs.filter(type=TransactionType.INCOME)
        income_cash = _sum(income.filter(payment_method=PaymentMethod.CASH))
        income_master = _sum(income.filter(payment_method=PaymentMethod.MASTER))
        total_income = income_cash + income_master
        total_expense = _sum(qs.filter(type=TransactionType.EXPENSE))

        return Response({
            "date": day.isoformat(),
            "branchId": branch_id,
            "income_cash": income_cash,
            "income_master": income_master,
            "total_income": total_income,
            "total_expense": total_expense,
            "net": total_income - total_expense,
        })


class ExpensesByCategoryView(APIView):
    """
    GET /api/transactions/expenses-by-category/?category=RENT&start_date&end_date&branch

    Subclasses pin the category.
    """
    permission_classes = [IsAuthenticated]
    category = None

    def get(self, request):
        actor = resolve_actor(request)
        require(actor, "transactions.view")

        params = request.query_params
        category = self.category or normalize_category(params.get("category"))
        if not category:
            return Response({"detail": _("category is required")}, status=status.HTTP_400_BAD_REQUEST)

        qs = scope_queryset(
            Transaction.objects.select_related("branch"),
            actor,
            params.get("branch"),
        ).filter(type=TransactionType.EXPENSE, category=category)
        start = parse_date(params.get("start_date"))
        end = parse_date(params.get("end_date"))
        if start:
            qs = qs.filter(date__gte=start)
        if end:
            qs = qs.filter(date__lte=end)

        qs = qs.order_by("-date", "-created_at")
        return Response({
            "category": category,
            "total": _sum(qs),
            "count": qs.count(),
            "transactions": [
                {
                    "id": txn.pk,
                    "amount": txn.amount,
                    "date": txn.date.isoformat(),
                    "description": txn.notes,
                    "paymentMethod": txn.payment_method,
                    "branchId": txn.branch_id,
                    "branchName": txn.branch.name,
                    "employeeId": txn.employee_id,
                }
                for txn in qs
            ],
        })


class SalaryExpensesView(ExpensesByCategoryView):
    """GET /api/transactions/salary-expenses/"""
    category = SALARY_CATEGORY


class CategoryListView(APIView):
    """GET /api/transactions/categories/?type=INCOME|EXPENSE"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        resolve_actor(request)
        txn_type = request.query_params.get("type")
        if txn_type:
            return Response(categories_for(txn_type))
        return Response({
            TransactionType.INCOME: categories_for(TransactionType.INCOME),
            TransactionType.EXPENSE: categories_for(TransactionType.EXPENSE),
        })


# =============================================================================
# Discount reasons
# =============================================================================

class DiscountReasonListCreateView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        require(actor, "discount_reasons.view")
        qs = DiscountReason.objects.order_by("sort_order", "reason")
        return Response(DiscountReasonSerializer(qs, many=True).data)

    def post(self, request):
        actor = resolve_actor(request)

        serializer = DiscountReasonWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = create_discount_reason(actor, **serializer.validated_data)
        if not result.success:
            return _fail(result)
        return Response(DiscountReasonSerializer(result.data).data, status=status.HTTP_201_CREATED)


class DiscountReasonDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def patch(self, request, pk):
        actor = resolve_actor(request)

        serializer = DiscountReasonUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = update_discount_reason(actor, pk, **serializer.validated_data)
        if not result.success:
            return _fail(result)
        return Response(DiscountReasonSerializer(result.data).data)

    def delete(self, request, pk):
        actor = resolve_actor(request)
        result = delete_discount_reason(actor, pk)
        if not result.success:
            return _fail(result)
        return Response(result.data)
