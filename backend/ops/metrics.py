"""
Prometheus metrics endpoint.

Metrics exposed:
- ledger_transactions_created_total: transactions recorded, by type
- ledger_notifications_created_total: notifications raised, by type
- ledger_open_debts: open payables/receivables (count and remaining amount)
- ledger_request_duration_seconds: HTTP request duration histogram
- ledger_active_requests: requests currently being processed
"""
import logging
import re
import time

from django.db.models import Count, Sum
from django.http import HttpResponse
from django.views import View
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest

logger = logging.getLogger(__name__)

TRANSACTIONS_CREATED = Counter(
    "ledger_transactions_created_total",
    "Transactions recorded",
    ["type"],
)

NOTIFICATIONS_CREATED = Counter(
    "ledger_notifications_created_total",
    "Notifications raised",
    ["type"],
)

OPEN_DEBTS = Gauge(
    "ledger_open_debts",
    "Open payables and receivables",
    ["kind", "stat"],
)

REQUEST_DURATION = Histogram(
    "ledger_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint", "status"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

ACTIVE_REQUESTS = Gauge(
    "ledger_active_requests",
    "Number of requests currently being processed",
)


def record_transaction_created(txn_type: str):
    TRANSACTIONS_CREATED.labels(type=txn_type).inc()


def record_notification_created(notification_type: str):
    NOTIFICATIONS_CREATED.labels(type=notification_type).inc()


def collect_metrics():
    """Refresh the gauges that are computed from the database at scrape time."""
    from debts.models import AccountPayable, AccountReceivable, DebtStatus

    open_statuses = [DebtStatus.ACTIVE, DebtStatus.PARTIAL]
    for kind, model in (("payable", AccountPayable), ("receivable", AccountReceivable)):
        totals = model.objects.filter(status__in=open_statuses).aggregate(
            count=Count("id"),
            remaining=Sum("remaining_amount"),
        )
        OPEN_DEBTS.labels(kind=kind, stat="count").set(totals["count"])
        OPEN_DEBTS.labels(kind=kind, stat="remaining").set(float(totals["remaining"] or 0))


class MetricsView(View):
    """
    Prometheus metrics endpoint at /_metrics/.

    Should be protected in production (internal network only).
    """

    def get(self, request):
        collect_metrics()
        return HttpResponse(generate_latest(), content_type=CONTENT_TYPE_LATEST)


def _endpoint_label(path: str) -> str:
    # Keep label cardinality bounded
    endpoint = re.sub(r"/\d+(?=/|$)", "/{id}", path)
    return endpoint[:50]


def track_request_metrics(get_response):
    """
    Middleware to track request duration metrics.

    Add to MIDDLEWARE after SecurityMiddleware:
        "ops.metrics.track_request_metrics",
    """

    def middleware(request):
        start = time.time()
        status = 500
        ACTIVE_REQUESTS.inc()
        try:
            response = get_response(request)
            status = response.status_code
            return response
        finally:
            ACTIVE_REQUESTS.dec()
            REQUEST_DURATION.labels(
                method=request.method,
                endpoint=_endpoint_label(request.path),
                status=f"{status // 100}xx",
            ).observe(time.time() - start)

    return middleware
