from django.contrib import admin

from .models import ReportExecution, ReportFieldMetadata, ReportTemplate


@admin.register(ReportFieldMetadata)
class ReportFieldMetadataAdmin(admin.ModelAdmin):
    list_display = ("data_source", "field_name", "display_name", "data_type", "filterable", "sortable")
    list_filter = ("data_source", "data_type")
    search_fields = ("field_name", "display_name")


@admin.register(ReportTemplate)
class ReportTemplateAdmin(admin.ModelAdmin):
    list_display = ("name", "report_type", "is_public", "is_default", "created_by", "is_deleted")
    list_filter = ("report_type", "is_public")

    def get_queryset(self, request):
        return ReportTemplate.all_objects.select_related("created_by")


@admin.register(ReportExecution)
class ReportExecutionAdmin(admin.ModelAdmin):
    list_display = ("executed_at", "template", "result_count", "execution_time", "export_format", "executed_by")
    list_filter = ("export_format",)
