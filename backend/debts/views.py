"""
Payable, receivable and legacy debt endpoints.

Payable and receivable views share one implementation; the concrete
classes only name their model, serializers, permissions and commands.
"""

from decimal import Decimal

from django.db.models import Q, Sum
from django.http import Http404
from django.utils.translation import gettext as _
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.authz import assert_branch_access, require, resolve_actor, scope_queryset
from core.pagination import page_params, paginate, paginated_response_data
from transactions.serializers import TransactionSerializer

from . import commands
from .models import AccountPayable, AccountReceivable, Debt, DebtStatus
from .serializers import (
    AccountPayableDetailSerializer,
    AccountPayableSerializer,
    AccountReceivableDetailSerializer,
    AccountReceivableSerializer,
    BalanceCreateSerializer,
    BalanceFilterSerializer,
    BalancePaymentSerializer,
    BalanceUpdateSerializer,
    DebtCreateSerializer,
    DebtPaymentCreateSerializer,
    DebtPaymentSerializer,
    DebtSerializer,
    PayablePaymentSerializer,
    ReceivablePaymentSerializer,
)


def _fail(result):
    return Response({"detail": result.error}, status=result.status_code)


class _BalanceViewMixin:
    permission_classes = [IsAuthenticated]
    model = None
    serializer_class = None
    detail_serializer_class = None
    payment_serializer_class = None
    view_perm = None
    not_found = "Not found"

    def get_queryset(self):
        return self.model.objects.select_related("contact", "branch", "created_by")

    def get_object(self, actor, pk):
        balance = self.get_queryset().filter(pk=pk).first()
        if balance is None:
            raise Http404(self.not_found)
        assert_branch_access(actor, balance)
        return balance


class _BalanceListCreateView(_BalanceViewMixin, APIView):
    create_command = None

    def get(self, request):
        actor = resolve_actor(request)
        require(actor, self.view_perm)

        filters = BalanceFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        f = filters.validated_data

        qs = scope_queryset(self.get_queryset(), actor, f.get("branch"))
        if f.get("status"):
            qs = qs.filter(status=f["status"])
        if f.get("contact"):
            qs = qs.filter(contact_id=f["contact"])
        if f.get("start_date"):
            qs = qs.filter(date__gte=f["start_date"])
        if f.get("end_date"):
            qs = qs.filter(date__lte=f["end_date"])
        if f.get("search"):
            term = f["search"]
            qs = qs.filter(
                Q(description__icontains=term)
                | Q(invoice_number__icontains=term)
                | Q(contact__name__icontains=term)
            )

        page, limit = page_params(request, default_limit=50)
        items, meta = paginate(qs.order_by("-date", "-created_at"), page, limit)
        return Response(paginated_response_data(items, meta, self.serializer_class))

    def post(self, request):
        actor = resolve_actor(request)

        serializer = BalanceCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        result = self.create_command(actor, data.pop("contact_id"), data.pop("amount"), **data)
        if not result.success:
            return _fail(result)
        return Response(self.serializer_class(result.data).data, status=status.HTTP_201_CREATED)


class _BalanceDetailView(_BalanceViewMixin, APIView):
    update_command = None
    delete_command = None

    def get(self, request, pk):
        actor = resolve_actor(request)
        require(actor, self.view_perm)
        return Response(self.detail_serializer_class(self.get_object(actor, pk)).data)

    def patch(self, request, pk):
        actor = resolve_actor(request)

        serializer = BalanceUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = self.update_command(actor, pk, **serializer.validated_data)
        if not result.success:
            return _fail(result)
        return Response(self.serializer_class(result.data).data)

    def delete(self, request, pk):
        actor = resolve_actor(request)
        result = self.delete_command(actor, pk)
        if not result.success:
            return _fail(result)
        return Response(result.data)


class _BalancePaymentView(_BalanceViewMixin, APIView):
    settle_command = None

    def post(self, request, pk):
        actor = resolve_actor(request)

        serializer = BalancePaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        result = self.settle_command(actor, pk, data.pop("amount_paid"), **data)
        if not result.success:
            return _fail(result)
        return Response({
            "balance": self.serializer_class(result.data["balance"]).data,
            "payment": self.payment_serializer_class(result.data["payment"]).data,
            "transaction": TransactionSerializer(result.data["transaction"]).data,
        }, status=status.HTTP_201_CREATED)


class _BalanceSummaryView(_BalanceViewMixin, APIView):
    """Counts per status and amount totals."""

    def get(self, request):
        actor = resolve_actor(request)
        require(actor, self.view_perm)

        qs = scope_queryset(self.model.objects.all(), actor, request.query_params.get("branch"))
        sums = qs.aggregate(total=Sum("original_amount"), remaining=Sum("remaining_amount"))
        total = sums["total"] or Decimal("0")
        remaining = sums["remaining"] or Decimal("0")
        return Response({
            "total": qs.count(),
            "byStatus": {
                "pending": qs.filter(status=DebtStatus.ACTIVE).count(),
                "partial": qs.filter(status=DebtStatus.PARTIAL).count(),
                "paid": qs.filter(status=DebtStatus.PAID).count(),
            },
            "amounts": {
                "total": total,
                "remaining": remaining,
                "paid": total - remaining,
            },
        })


# =============================================================================
# Payables
# =============================================================================

class _PayableMixin:
    model = AccountPayable
    serializer_class = AccountPayableSerializer
    detail_serializer_class = AccountPayableDetailSerializer
    payment_serializer_class = PayablePaymentSerializer
    view_perm = "payables.view"
    not_found = "Payable not found"


class PayableListCreateView(_PayableMixin, _BalanceListCreateView):
    create_command = staticmethod(commands.create_payable)


class PayableDetailView(_PayableMixin, _BalanceDetailView):
    update_command = staticmethod(commands.update_payable)
    delete_command = staticmethod(commands.delete_payable)


class PayablePayView(_PayableMixin, _BalancePaymentView):
    settle_command = staticmethod(commands.pay_payable)


class PayableSummaryView(_PayableMixin, _BalanceSummaryView):
    pass


# =============================================================================
# Receivables
# =============================================================================

class _ReceivableMixin:
    model = AccountReceivable
    serializer_class = AccountReceivableSerializer
    detail_serializer_class = AccountReceivableDetailSerializer
    payment_serializer_class = ReceivablePaymentSerializer
    view_perm = "receivables.view"
    not_found = "Receivable not found"


class ReceivableListCreateView(_ReceivableMixin, _BalanceListCreateView):
    create_command = staticmethod(commands.create_receivable)


class ReceivableDetailView(_ReceivableMixin, _BalanceDetailView):
    update_command = staticmethod(commands.update_receivable)
    delete_command = staticmethod(commands.delete_receivable)


class ReceivableCollectView(_ReceivableMixin, _BalancePaymentView):
    settle_command = staticmethod(commands.collect_receivable)


class ReceivableSummaryView(_ReceivableMixin, _BalanceSummaryView):
    pass


# =============================================================================
# Legacy debts
# =============================================================================

class DebtListCreateView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        require(actor, "debts.view")

        qs = scope_queryset(
            Debt.objects.select_related("branch").prefetch_related("payments"),
            actor,
            request.query_params.get("branch"),
        )
        if request.query_params.get("status"):
            qs = qs.filter(status=request.query_params["status"])

        page, limit = page_params(request, default_limit=50)
        items, meta = paginate(qs.order_by("-date", "-created_at"), page, limit)
        return Response(paginated_response_data(items, meta, DebtSerializer))

    def post(self, request):
        actor = resolve_actor(request)

        serializer = DebtCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = commands.create_debt(actor, **serializer.validated_data)
        if not result.success:
            return _fail(result)
        return Response(DebtSerializer(result.data).data, status=status.HTTP_201_CREATED)


class DebtDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        actor = resolve_actor(request)
        require(actor, "debts.view")

        debt = Debt.objects.select_related("branch").filter(pk=pk).first()
        if debt is None:
            raise Http404(_("Debt not found"))
        assert_branch_access(actor, debt)
        return Response(DebtSerializer(debt).data)


class DebtPayView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, pk):
        actor = resolve_actor(request)

        serializer = DebtPaymentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        result = commands.pay_debt(actor, pk, data.pop("amount_paid"), **data)
        if not result.success:
            return _fail(result)
        return Response(DebtPaymentSerializer(result.data).data, status=status.HTTP_201_CREATED)
