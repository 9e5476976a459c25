# inventory/views.py
"""Inventory endpoints. Mutations go through inventory.commands."""

from datetime import datetime, time
from decimal import Decimal

from django.db.models import DecimalField, ExpressionWrapper, F, Sum
from django.http import Http404
from django.utils import timezone
from django.utils.translation import gettext as _
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.authz import assert_branch_access, require, resolve_actor, scope_queryset
from core.dates import parse_date, today
from core.pagination import page_params, paginate, paginated_response_data

from .commands import (
    create_item,
    create_sub_unit,
    delete_item,
    delete_sub_unit,
    record_consumption,
    update_item,
    update_sub_unit,
)
from .models import InventoryConsumption, InventoryItem, InventorySubUnit
from .serializers import (
    ConsumptionSerializer,
    InventoryItemCreateSerializer,
    InventoryItemSerializer,
    InventoryItemUpdateSerializer,
    InventorySubUnitSerializer,
    RecordConsumptionSerializer,
    SubUnitCreateSerializer,
    SubUnitUpdateSerializer,
)


def _fail(result):
    return Response({"detail": result.error}, status=result.status_code)


def _get_item(actor, pk):
    item = InventoryItem.objects.select_related("branch").prefetch_related("sub_units").filter(pk=pk).first()
    if item is None:
        raise Http404(_("Inventory item not found"))
    assert_branch_access(actor, item)
    return item


def _day_range(day):
    tz = timezone.get_current_timezone()
    return (
        timezone.make_aware(datetime.combine(day, time.min), tz),
        timezone.make_aware(datetime.combine(day, time.max), tz),
    )


# =============================================================================
# Items
# =============================================================================

class InventoryListCreateView(APIView):
    """
    GET /api/inventory/ -> paginated items (unit, search, branch)
    POST /api/inventory/ -> create item
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        require(actor, "inventory.view")

        params = request.query_params
        qs = scope_queryset(
            InventoryItem.objects.select_related("branch").prefetch_related("sub_units"),
            actor,
            params.get("branch"),
        )
        if params.get("unit"):
            qs = qs.filter(unit=params["unit"])
        if params.get("search"):
            qs = qs.filter(name__icontains=params["search"])

        page, limit = page_params(request, default_limit=20)
        items, meta = paginate(qs.order_by("-last_updated"), page, limit)
        return Response(paginated_response_data(items, meta, InventoryItemSerializer))

    def post(self, request):
        actor = resolve_actor(request)

        serializer = InventoryItemCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = create_item(actor, **serializer.validated_data)
        if not result.success:
            return _fail(result)
        return Response(InventoryItemSerializer(result.data).data, status=status.HTTP_201_CREATED)


class InventoryDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        actor = resolve_actor(request)
        require(actor, "inventory.view")
        return Response(InventoryItemSerializer(_get_item(actor, pk)).data)

    def patch(self, request, pk):
        actor = resolve_actor(request)

        serializer = InventoryItemUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = update_item(actor, pk, **serializer.validated_data)
        if not result.success:
            return _fail(result)
        return Response(InventoryItemSerializer(result.data).data)

    def delete(self, request, pk):
        actor = resolve_actor(request)
        result = delete_item(actor, pk)
        if not result.success:
            return _fail(result)
        return Response(result.data)


class InventoryValueView(APIView):
    """GET /api/inventory/value/ -> total stock value per branch"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        require(actor, "inventory.view")

        qs = scope_queryset(InventoryItem.objects.all(), actor, request.query_params.get("branch"))
        value = ExpressionWrapper(F("quantity") * F("cost_per_unit"), output_field=DecimalField(max_digits=30, decimal_places=5))
        rows = (
            qs.order_by()
            .values("branch_id", "branch__name")
            .annotate(total_value=Sum(value))
            .order_by("branch__name")
        )
        branches = [
            {
                "branch_id": row["branch_id"],
                "branch_name": row["branch__name"],
                "total_value": (row["total_value"] or Decimal("0")).quantize(Decimal("0.01")),
            }
            for row in rows
        ]
        total = sum((b["total_value"] for b in branches), Decimal("0.00"))
        return Response({
            "total_value": total,
            "item_count": qs.count(),
            "branches": branches,
        })


# =============================================================================
# Consumption
# =============================================================================

class ConsumptionCreateView(APIView):
    """POST /api/inventory/consumption/ -> record manual consumption"""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        actor = resolve_actor(request)

        serializer = RecordConsumptionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = record_consumption(actor, **serializer.validated_data)
        if not result.success:
            return _fail(result)
        return Response(ConsumptionSerializer(result.data).data, status=status.HTTP_201_CREATED)


class DailyConsumptionView(APIView):
    """GET /api/inventory/consumption/daily/?date=YYYY-MM-DD -> totals per item for the day"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        require(actor, "inventory.view")

        day = parse_date(request.query_params.get("date"), default=today())
        start, end = _day_range(day)
        qs = scope_queryset(
            InventoryConsumption.objects.filter(consumed_at__range=(start, end)),
            actor,
            request.query_params.get("branch"),
        )
        rows = (
            qs.order_by()
            .values("inventory_item_id", "inventory_item__name", "unit")
            .annotate(quantity=Sum("quantity"))
            .order_by("inventory_item__name")
        )
        return Response({
            "date": day.isoformat(),
            "totalConsumptions": qs.count(),
            "itemsConsumed": [
                {
                    "inventory_item_id": row["inventory_item_id"],
                    "item_name": row["inventory_item__name"],
                    "quantity": row["quantity"],
                    "unit": row["unit"],
                }
                for row in rows
            ],
        })


class ConsumptionHistoryView(APIView):
    """GET /api/inventory/<pk>/consumption/?start_date&end_date"""
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        actor = resolve_actor(request)
        require(actor, "inventory.view")

        item = _get_item(actor, pk)
        qs = item.consumptions.select_related("inventory_item", "recorded_by")
        start = parse_date(request.query_params.get("start_date"))
        end = parse_date(request.query_params.get("end_date"))
        if start:
            qs = qs.filter(consumed_at__gte=_day_range(start)[0])
        if end:
            qs = qs.filter(consumed_at__lte=_day_range(end)[1])
        return Response(ConsumptionSerializer(qs.order_by("-consumed_at"), many=True).data)


# =============================================================================
# Sub-units
# =============================================================================

class SubUnitListCreateView(APIView):
    """
    GET /api/inventory/sub-units/?inventory_item=<id>
    POST /api/inventory/sub-units/
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        require(actor, "inventory.view")

        qs = InventorySubUnit.objects.select_related("inventory_item").filter(
            inventory_item__is_deleted=False,
        )
        qs = scope_queryset(qs, actor, request.query_params.get("branch"), field="inventory_item__branch")
        item_id = request.query_params.get("inventory_item")
        if item_id:
            if not str(item_id).isdigit():
                raise ValidationError({"inventory_item": "Must be an integer id"})
            qs = qs.filter(inventory_item_id=item_id)
        return Response(InventorySubUnitSerializer(qs, many=True).data)

    def post(self, request):
        actor = resolve_actor(request)

        serializer = SubUnitCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = create_sub_unit(actor, **serializer.validated_data)
        if not result.success:
            return _fail(result)
        return Response(InventorySubUnitSerializer(result.data).data, status=status.HTTP_201_CREATED)


class SubUnitDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        actor = resolve_actor(request)
        require(actor, "inventory.view")

        sub_unit = InventorySubUnit.objects.select_related("inventory_item").filter(pk=pk).first()
        if sub_unit is None:
            raise Http404(_("Inventory sub-unit not found"))
        assert_branch_access(actor, sub_unit.inventory_item)
        return Response(InventorySubUnitSerializer(sub_unit).data)

    def patch(self, request, pk):
        actor = resolve_actor(request)

        serializer = SubUnitUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = update_sub_unit(actor, pk, **serializer.validated_data)
        if not result.success:
            return _fail(result)
        return Response(InventorySubUnitSerializer(result.data).data)

    def delete(self, request, pk):
        actor = resolve_actor(request)
        result = delete_sub_unit(actor, pk)
        if not result.success:
            return _fail(result)
        return Response(result.data)
