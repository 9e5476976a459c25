"""
Serializers for smart reports.

The report configuration keeps the camelCase keys the report builder UI
sends; it is stored as-is in ReportTemplate.config.
"""
from django.utils.translation import gettext as _
from rest_framework import serializers

from .catalog import DATA_SOURCES
from .models import ReportExecution, ReportFieldMetadata, ReportTemplate
from .query_builder import AGGREGATIONS, FILTER_OPERATORS


class ReportFieldMetadataSerializer(serializers.ModelSerializer):
    class Meta:
        model = ReportFieldMetadata
        fields = (
            "id", "data_source", "field_name", "display_name", "description", "data_type",
            "filterable", "sortable", "aggregatable", "groupable", "default_visible",
            "default_order", "category", "format", "enum_values",
        )
        read_only_fields = fields


# =============================================================================
# Report configuration
# =============================================================================

class DataSourceConfigSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=list(DATA_SOURCES))


class ReportFieldConfigSerializer(serializers.Serializer):
    id = serializers.CharField(required=False, allow_blank=True)
    sourceField = serializers.CharField(max_length=100)
    displayName = serializers.CharField(max_length=150)
    dataType = serializers.ChoiceField(choices=ReportFieldMetadata.DataType.values, required=False)
    visible = serializers.BooleanField(default=True)
    order = serializers.IntegerField(default=0)
    width = serializers.IntegerField(required=False, min_value=1)
    format = serializers.CharField(required=False, allow_blank=True)
    aggregation = serializers.ChoiceField(choices=list(AGGREGATIONS), required=False)


class ReportFilterSerializer(serializers.Serializer):
    id = serializers.CharField(required=False, allow_blank=True)
    field = serializers.CharField(max_length=100)
    operator = serializers.ChoiceField(choices=FILTER_OPERATORS)
    value = serializers.JSONField(required=False, allow_null=True)
    logicalOperator = serializers.ChoiceField(choices=["AND", "OR"], required=False)

    def validate(self, attrs):
        if attrs["operator"] not in ("isNull", "isNotNull") and "value" not in attrs:
            raise serializers.ValidationError({"value": _("A value is required for %(operator)s") % {"operator": attrs["operator"]}})
        return attrs


class ReportOrderBySerializer(serializers.Serializer):
    field = serializers.CharField(max_length=100)
    direction = serializers.ChoiceField(choices=["asc", "desc"])


class ReportGroupBySerializer(serializers.Serializer):
    field = serializers.CharField(max_length=100)


class ReportAggregationSerializer(serializers.Serializer):
    field = serializers.CharField(max_length=100)
    function = serializers.ChoiceField(choices=list(AGGREGATIONS))
    alias = serializers.RegexField(r"^[A-Za-z][A-Za-z0-9]*(_[A-Za-z0-9]+)*$", max_length=60)


class ReportPaginationSerializer(serializers.Serializer):
    enabled = serializers.BooleanField(default=False)
    page = serializers.IntegerField(min_value=1, default=1)
    pageSize = serializers.IntegerField(min_value=1, max_value=1000, default=50)


class ReportExportOptionsSerializer(serializers.Serializer):
    fileName = serializers.CharField(required=False, allow_blank=True, max_length=255)
    includeHeaders = serializers.BooleanField(default=True)


class ReportConfigSerializer(serializers.Serializer):
    dataSource = DataSourceConfigSerializer()
    fields = ReportFieldConfigSerializer(many=True)
    filters = ReportFilterSerializer(many=True, required=False, default=list)
    orderBy = ReportOrderBySerializer(many=True, required=False, default=list)
    groupBy = ReportGroupBySerializer(many=True, required=False, default=list)
    aggregations = ReportAggregationSerializer(many=True, required=False, default=list)
    pagination = ReportPaginationSerializer(required=False)
    exportOptions = ReportExportOptionsSerializer(required=False)

    def validate_fields(self, value):
        if not value:
            raise serializers.ValidationError(_("At least one field is required"))
        return value

    def validate(self, attrs):
        aliases = [agg["alias"] for agg in attrs.get("aggregations", [])]
        if len(aliases) != len(set(aliases)):
            raise serializers.ValidationError({"aggregations": "Aggregation aliases must be unique"})
        return attrs


class ReportExecuteSerializer(serializers.Serializer):
    config = ReportConfigSerializer()
    templateId = serializers.IntegerField(required=False, allow_null=True)


# =============================================================================
# Templates
# =============================================================================

class ReportTemplateSerializer(serializers.ModelSerializer):
    created_by_username = serializers.CharField(source="created_by.username", read_only=True, default=None)

    class Meta:
        model = ReportTemplate
        fields = (
            "id", "name", "description", "report_type", "config", "is_public", "is_default",
            "created_by", "created_by_username", "created_at", "updated_at",
        )
        read_only_fields = fields


class ReportTemplateCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    report_type = serializers.ChoiceField(choices=ReportTemplate.ReportType.choices)
    config = ReportConfigSerializer()
    is_public = serializers.BooleanField(default=False)
    is_default = serializers.BooleanField(default=False)


class ReportTemplateUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    config = ReportConfigSerializer(required=False)
    is_public = serializers.BooleanField(required=False)
    is_default = serializers.BooleanField(required=False)


class ReportExecutionSerializer(serializers.ModelSerializer):
    class Meta:
        model = ReportExecution
        fields = (
            "id", "template", "result_count", "execution_time", "export_format",
            "file_size", "executed_by", "executed_at",
        )
        read_only_fields = fields
