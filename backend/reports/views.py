"""
Dashboard, fixed exports and smart report endpoints.

    GET  /api/dashboard/
    GET  /api/reports/transactions/export/
    GET  /api/reports/payables/export/
    GET  /api/reports/inventory/export/
    GET  /api/reports/smart/data-sources/
    GET  /api/reports/smart/fields/?dataSource=
    GET  /api/reports/smart/templates/           POST (admin)
    GET  /api/reports/smart/templates/<id>/      PUT/PATCH/DELETE (admin)
    POST /api/reports/smart/execute/
    POST /api/reports/smart/export/?format=xlsx|csv|txt
"""
from django.http import Http404
from django.utils import timezone
from django.utils.translation import gettext as _
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.authz import require, resolve_actor, scope_queryset
from core.dates import parse_date
from core.exports import ExportFormat, create_export_response
from debts.models import AccountPayable
from inventory.models import InventoryItem
from transactions.models import Transaction

from . import commands
from .catalog import DATA_SOURCES, is_valid_data_source
from .dashboard import dashboard_stats
from .exports import (
    INVENTORY_EXPORT_COLUMNS,
    PAYABLE_EXPORT_COLUMNS,
    TRANSACTION_EXPORT_COLUMNS,
    prepare_inventory_export_data,
    prepare_payable_export_data,
    prepare_transaction_export_data,
)
from .models import ReportFieldMetadata
from .serializers import (
    ReportExecuteSerializer,
    ReportFieldMetadataSerializer,
    ReportTemplateCreateSerializer,
    ReportTemplateSerializer,
    ReportTemplateUpdateSerializer,
)


def _fail(result):
    return Response({"detail": result.error}, status=result.status_code)


def _invalid_format(export_format):
    if export_format not in ExportFormat.CHOICES:
        return Response(
            {"detail": _("Invalid format. Must be one of: %(formats)s") % {"formats": ", ".join(ExportFormat.CHOICES)}},
            status=status.HTTP_400_BAD_REQUEST,
        )
    return None


def _date_range(queryset, params, field="date"):
    start = parse_date(params.get("start_date"))
    end = parse_date(params.get("end_date"))
    if start:
        queryset = queryset.filter(**{f"{field}__gte": start})
    if end:
        queryset = queryset.filter(**{f"{field}__lte": end})
    return queryset


class DashboardView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        require(actor, "dashboard.view")

        day = parse_date(request.query_params.get("date"))
        return Response(dashboard_stats(actor, day=day, branch_id=request.query_params.get("branch")))


# =============================================================================
# Fixed exports
# =============================================================================

class TransactionExportView(APIView):
    """
    Query params:
        format: xlsx, csv, txt (default: xlsx)
        branch, start_date, end_date, type (optional)
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        require(actor, "reports.export")

        export_format = request.query_params.get("format", ExportFormat.EXCEL)
        invalid = _invalid_format(export_format)
        if invalid:
            return invalid

        qs = scope_queryset(
            Transaction.objects.select_related("branch", "contact", "created_by"),
            actor,
            request.query_params.get("branch"),
        )
        qs = _date_range(qs, request.query_params)
        if request.query_params.get("type"):
            qs = qs.filter(type=request.query_params["type"])

        timestamp = timezone.localtime().strftime("%Y%m%d_%H%M%S")
        return create_export_response(
            data=prepare_transaction_export_data(qs.order_by("-date", "-created_at")),
            columns=TRANSACTION_EXPORT_COLUMNS,
            format=export_format,
            filename=f"transactions_{timestamp}",
            title="المعاملات المالية",
        )


class PayableExportView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        require(actor, "reports.export")
        require(actor, "payables.view")

        export_format = request.query_params.get("format", ExportFormat.EXCEL)
        invalid = _invalid_format(export_format)
        if invalid:
            return invalid

        qs = scope_queryset(
            AccountPayable.objects.select_related("contact", "branch"),
            actor,
            request.query_params.get("branch"),
        )
        qs = _date_range(qs, request.query_params)
        if request.query_params.get("status"):
            qs = qs.filter(status=request.query_params["status"])

        timestamp = timezone.localtime().strftime("%Y%m%d_%H%M%S")
        return create_export_response(
            data=prepare_payable_export_data(qs.order_by("-date", "-created_at")),
            columns=PAYABLE_EXPORT_COLUMNS,
            format=export_format,
            filename=f"payables_{timestamp}",
            title="الحسابات الدائنة",
        )


class InventoryExportView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        require(actor, "reports.export")
        require(actor, "inventory.view")

        export_format = request.query_params.get("format", ExportFormat.EXCEL)
        invalid = _invalid_format(export_format)
        if invalid:
            return invalid

        qs = scope_queryset(
            InventoryItem.objects.select_related("branch"),
            actor,
            request.query_params.get("branch"),
        )

        timestamp = timezone.localtime().strftime("%Y%m%d_%H%M%S")
        return create_export_response(
            data=prepare_inventory_export_data(qs.order_by("name")),
            columns=INVENTORY_EXPORT_COLUMNS,
            format=export_format,
            filename=f"inventory_{timestamp}",
            title="المخزون",
        )


# =============================================================================
# Smart reports
# =============================================================================

class DataSourceListView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        require(actor, "reports.view")
        return Response([
            {"value": source.key, "label": source.label}
            for source in DATA_SOURCES.values()
        ])


class FieldListView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        require(actor, "reports.view")

        data_source = request.query_params.get("dataSource")
        if not is_valid_data_source(data_source):
            return Response({"detail": _("Invalid data source: %(source)s") % {"source": data_source}}, status=status.HTTP_400_BAD_REQUEST)

        fields = ReportFieldMetadata.objects.filter(data_source=data_source).order_by("default_order", "display_name")
        return Response(ReportFieldMetadataSerializer(fields, many=True).data)


class TemplateListCreateView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        templates = commands.visible_templates(actor).order_by("-is_default", "-updated_at")
        if request.query_params.get("report_type"):
            templates = templates.filter(report_type=request.query_params["report_type"])
        return Response(ReportTemplateSerializer(templates, many=True).data)

    def post(self, request):
        actor = resolve_actor(request)

        serializer = ReportTemplateCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        result = commands.create_template(
            actor, data.pop("name"), data.pop("report_type"), data.pop("config"), **data
        )
        if not result.success:
            return _fail(result)
        return Response(ReportTemplateSerializer(result.data).data, status=status.HTTP_201_CREATED)


class TemplateDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        actor = resolve_actor(request)
        template = commands.visible_templates(actor).filter(pk=pk).first()
        if template is None:
            raise Http404(_("Template not found"))
        return Response(ReportTemplateSerializer(template).data)

    def put(self, request, pk):
        return self._update(request, pk)

    def patch(self, request, pk):
        return self._update(request, pk)

    def _update(self, request, pk):
        actor = resolve_actor(request)

        serializer = ReportTemplateUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = commands.update_template(actor, pk, **serializer.validated_data)
        if not result.success:
            return _fail(result)
        return Response(ReportTemplateSerializer(result.data).data)

    def delete(self, request, pk):
        actor = resolve_actor(request)
        result = commands.delete_template(actor, pk)
        if not result.success:
            return _fail(result)
        return Response(result.data)


class ReportExecuteView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        actor = resolve_actor(request)

        serializer = ReportExecuteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = commands.execute_report(
            actor,
            serializer.validated_data["config"],
            template_id=serializer.validated_data.get("templateId"),
        )
        if not result.success:
            return _fail(result)
        return Response(result.data)


class ReportExportView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        actor = resolve_actor(request)

        export_format = request.query_params.get("format", ExportFormat.EXCEL)
        invalid = _invalid_format(export_format)
        if invalid:
            return invalid

        serializer = ReportExecuteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = commands.export_report(
            actor,
            serializer.validated_data["config"],
            export_format,
            template_id=serializer.validated_data.get("templateId"),
        )
        if not result.success:
            return _fail(result)
        return result.data
