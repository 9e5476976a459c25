from django.urls import path

from .views import (
    ConsumptionCreateView,
    ConsumptionHistoryView,
    DailyConsumptionView,
    InventoryDetailView,
    InventoryListCreateView,
    InventoryValueView,
    SubUnitDetailView,
    SubUnitListCreateView,
)

app_name = "inventory"

urlpatterns = [
    path("", InventoryListCreateView.as_view(), name="item-list"),
    path("value/", InventoryValueView.as_view(), name="item-value"),
    path("consumption/", ConsumptionCreateView.as_view(), name="consumption-create"),
    path("consumption/daily/", DailyConsumptionView.as_view(), name="consumption-daily"),
    path("sub-units/", SubUnitListCreateView.as_view(), name="sub-unit-list"),
    path("sub-units/<int:pk>/", SubUnitDetailView.as_view(), name="sub-unit-detail"),
    path("<int:pk>/", InventoryDetailView.as_view(), name="item-detail"),
    path("<int:pk>/consumption/", ConsumptionHistoryView.as_view(), name="item-consumption"),
]
