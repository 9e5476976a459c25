# reports/dashboard.py
"""Figures for the home dashboard."""
from decimal import Decimal

from django.db.models import Sum

from accounts.authz import ActorContext, effective_branch_filter
from core.dates import month_bounds, shift_month, today
from transactions.categories import category_label
from transactions.models import Transaction, TransactionType

MONTH_NAMES = [
    "كانون الثاني", "شباط", "آذار", "نيسان", "أيار", "حزيران",
    "تموز", "آب", "أيلول", "تشرين الأول", "تشرين الثاني", "كانون الأول",
]

CATEGORY_COLORS = ["#0ea5e9", "#22c55e", "#f59e0b", "#8b5cf6", "#ef4444"]

EMPTY_CATEGORY = {"name": "لا توجد بيانات", "value": 0, "color": "#e5e7eb"}


def _sum(queryset) -> Decimal:
    return queryset.aggregate(total=Sum("amount"))["total"] or Decimal("0")


def monthly_series(base, months: int = 6):
    """Revenue and expenses per month, oldest first, ending with the current month."""
    current = today()
    series = []
    for back in range(months - 1, -1, -1):
        start, end = month_bounds(shift_month(current, -back))
        in_month = base.filter(date__gte=start, date__lte=end)
        series.append({
            "month": MONTH_NAMES[start.month - 1],
            "revenue": _sum(in_month.filter(type=TransactionType.INCOME)),
            "expenses": _sum(in_month.filter(type=TransactionType.EXPENSE)),
        })
    return series


def category_breakdown(income_qs):
    """Income per category, largest first. Colors follow first appearance."""
    totals = {}
    for category, amount in income_qs.order_by("created_at").values_list("category", "amount"):
        name = category_label(category) if category else "أخرى"
        totals[name] = totals.get(name, Decimal("0")) + amount

    data = [
        {"name": name, "value": value, "color": CATEGORY_COLORS[index % len(CATEGORY_COLORS)]}
        for index, (name, value) in enumerate(totals.items())
    ]
    data.sort(key=lambda entry: entry["value"], reverse=True)
    return data or [dict(EMPTY_CATEGORY)]


def dashboard_stats(actor: ActorContext, day=None, branch_id=None) -> dict:
    day = day or today()
    branch_filter = effective_branch_filter(actor, branch_id)

    base = Transaction.objects.all()
    if branch_filter is not None:
        base = base.filter(branch_id=branch_filter)

    on_day = base.filter(date=day)
    income = on_day.filter(type=TransactionType.INCOME)
    revenue = _sum(income)
    expenses = _sum(on_day.filter(type=TransactionType.EXPENSE))

    recent = [
        {
            "id": txn.pk,
            "date": txn.date.isoformat(),
            "type": txn.type,
            "category": txn.category,
            "categoryLabel": category_label(txn.category),
            "amount": txn.amount,
            "branchName": txn.branch.name,
            "status": "completed",
        }
        for txn in base.select_related("branch").order_by("-date", "-created_at")[:5]
    ]

    return {
        "date": day.isoformat(),
        "branchId": branch_filter,
        "totalRevenue": revenue,
        "totalExpenses": expenses,
        "netProfit": revenue - expenses,
        "todayTransactions": on_day.count(),
        "revenueData": monthly_series(base),
        "categoryData": category_breakdown(income),
        "recentTransactions": recent,
    }
