# core/views.py
"""
Audit log endpoint.

The audit trail is read-only over the API; rows are written by the
command layer through core.audit.
"""

from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.authz import resolve_actor, require
from core.models import AuditLog
from core.pagination import page_params, paginate, paginated_response_data
from core.serializers import AuditLogFilterSerializer, AuditLogSerializer


class AuditLogListView(APIView):
    """
    GET /api/audit-logs/ -> paginated audit trail (admin only)

    Filters: user, entity_type, entity_id, action, start_date, end_date
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        require(actor, "audit.view")

        filters = AuditLogFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        params = filters.validated_data

        qs = AuditLog.objects.select_related("user")
        if "user" in params:
            qs = qs.filter(user_id=params["user"])
        if params.get("entity_type"):
            qs = qs.filter(entity_type=params["entity_type"])
        if params.get("entity_id"):
            qs = qs.filter(entity_id=params["entity_id"])
        if params.get("action"):
            qs = qs.filter(action=params["action"])
        if params.get("start_date"):
            qs = qs.filter(created_at__date__gte=params["start_date"])
        if params.get("end_date"):
            qs = qs.filter(created_at__date__lte=params["end_date"])

        page, limit = page_params(request)
        items, meta = paginate(qs, page, limit)
        return Response(paginated_response_data(items, meta, AuditLogSerializer))
