from django.urls import path

from .views import (
    DebtDetailView,
    DebtListCreateView,
    DebtPayView,
    PayableDetailView,
    PayableListCreateView,
    PayablePayView,
    PayableSummaryView,
    ReceivableCollectView,
    ReceivableDetailView,
    ReceivableListCreateView,
    ReceivableSummaryView,
)

app_name = "debts"

urlpatterns = [
    path("payables/", PayableListCreateView.as_view(), name="payable-list"),
    path("payables/summary/", PayableSummaryView.as_view(), name="payable-summary"),
    path("payables/<int:pk>/", PayableDetailView.as_view(), name="payable-detail"),
    path("payables/<int:pk>/pay/", PayablePayView.as_view(), name="payable-pay"),
    path("receivables/", ReceivableListCreateView.as_view(), name="receivable-list"),
    path("receivables/summary/", ReceivableSummaryView.as_view(), name="receivable-summary"),
    path("receivables/<int:pk>/", ReceivableDetailView.as_view(), name="receivable-detail"),
    path("receivables/<int:pk>/collect/", ReceivableCollectView.as_view(), name="receivable-collect"),
    path("debts/", DebtListCreateView.as_view(), name="debt-list"),
    path("debts/<int:pk>/", DebtDetailView.as_view(), name="debt-detail"),
    path("debts/<int:pk>/pay/", DebtPayView.as_view(), name="debt-pay"),
]
