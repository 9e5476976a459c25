from django.urls import path

from .views import (
    DashboardView,
    DataSourceListView,
    FieldListView,
    InventoryExportView,
    PayableExportView,
    ReportExecuteView,
    ReportExportView,
    TemplateDetailView,
    TemplateListCreateView,
    TransactionExportView,
)

app_name = "reports"

urlpatterns = [
    path("dashboard/", DashboardView.as_view(), name="dashboard"),
    path("reports/transactions/export/", TransactionExportView.as_view(), name="transactions-export"),
    path("reports/payables/export/", PayableExportView.as_view(), name="payables-export"),
    path("reports/inventory/export/", InventoryExportView.as_view(), name="inventory-export"),
    path("reports/smart/data-sources/", DataSourceListView.as_view(), name="data-sources"),
    path("reports/smart/fields/", FieldListView.as_view(), name="fields"),
    path("reports/smart/templates/", TemplateListCreateView.as_view(), name="template-list"),
    path("reports/smart/templates/<int:pk>/", TemplateDetailView.as_view(), name="template-detail"),
    path("reports/smart/execute/", ReportExecuteView.as_view(), name="execute"),
    path("reports/smart/export/", ReportExportView.as_view(), name="export"),
]
