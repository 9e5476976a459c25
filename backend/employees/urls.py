from django.urls import path

from .views import (
    ActiveEmployeesView,
    AdjustmentCancelView,
    AdjustmentListCreateView,
    EmployeeDetailView,
    EmployeeListCreateView,
    EmployeeResignView,
    PayrollSummaryView,
    SalaryDetailsView,
    SalaryIncreaseListCreateView,
    SalaryPaymentDetailView,
    SalaryPaymentListCreateView,
)

app_name = "employees"

urlpatterns = [
    path("", EmployeeListCreateView.as_view(), name="employee-list"),
    path("active/", ActiveEmployeesView.as_view(), name="employee-active"),
    path("payroll-summary/", PayrollSummaryView.as_view(), name="payroll-summary"),
    path("adjustments/<int:pk>/cancel/", AdjustmentCancelView.as_view(), name="adjustment-cancel"),
    path("salary-payments/<int:pk>/", SalaryPaymentDetailView.as_view(), name="salary-payment-detail"),
    path("<int:pk>/", EmployeeDetailView.as_view(), name="employee-detail"),
    path("<int:pk>/resign/", EmployeeResignView.as_view(), name="employee-resign"),
    path("<int:pk>/salary-increases/", SalaryIncreaseListCreateView.as_view(), name="salary-increase-list"),
    path("<int:pk>/adjustments/", AdjustmentListCreateView.as_view(), name="adjustment-list"),
    path("<int:pk>/salary-details/", SalaryDetailsView.as_view(), name="salary-details"),
    path("<int:pk>/salary-payments/", SalaryPaymentListCreateView.as_view(), name="salary-payment-list"),
]
