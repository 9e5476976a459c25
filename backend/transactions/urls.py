from django.urls import path

from .views import (
    CategoryListView,
    DiscountReasonDetailView,
    DiscountReasonListCreateView,
    ExpenseCreateView,
    ExpensesByCategoryView,
    IncomeCreateView,
    SalaryExpensesView,
    TransactionDetailView,
    TransactionListView,
    TransactionSummaryView,
)

app_name = "transactions"

urlpatterns = [
    path("transactions/", TransactionListView.as_view(), name="transaction-list"),
    path("transactions/income/", IncomeCreateView.as_view(), name="income-create"),
    path("transactions/expense/", ExpenseCreateView.as_view(), name="expense-create"),
    path("transactions/summary/", TransactionSummaryView.as_view(), name="transaction-summary"),
    path("transactions/categories/", CategoryListView.as_view(), name="category-list"),
    path("transactions/expenses-by-category/", ExpensesByCategoryView.as_view(), name="expenses-by-category"),
    path("transactions/salary-expenses/", SalaryExpensesView.as_view(), name="salary-expenses"),
    path("transactions/<int:pk>/", TransactionDetailView.as_view(), name="transaction-detail"),
    path("discount-reasons/", DiscountReasonListCreateView.as_view(), name="discount-reason-list"),
    path("discount-reasons/<int:pk>/", DiscountReasonDetailView.as_view(), name="discount-reason-detail"),
]
