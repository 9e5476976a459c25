# contacts/views.py
from django.db.models import Count, Q
from django.http import Http404
from django.utils.translation import gettext as _
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.authz import assert_branch_access, require, resolve_actor, scope_queryset
from core.pagination import page_params, paginate, paginated_response_data

from .commands import create_contact, delete_contact, update_contact
from .models import Contact
from .serializers import (
    ContactCreateSerializer,
    ContactDetailSerializer,
    ContactSerializer,
    ContactUpdateSerializer,
)


class ContactListCreateView(APIView):
    """
    GET /api/contacts/ -> paginated contacts (search, type, branch)
    POST /api/contacts/ -> create contact
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        require(actor, "contacts.view")

        params = request.query_params
        qs = scope_queryset(Contact.objects.select_related("branch", "created_by"), actor, params.get("branch"))
        if params.get("search"):
            term = params["search"]
            qs = qs.filter(Q(name__icontains=term) | Q(email__icontains=term) | Q(phone__icontains=term))
        if params.get("type"):
            qs = qs.filter(type=params["type"])

        page, limit = page_params(request)
        items, meta = paginate(qs.order_by("-created_at"), page, limit)
        return Response(paginated_response_data(items, meta, ContactSerializer))

    def post(self, request):
        actor = resolve_actor(request)

        serializer = ContactCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = create_contact(actor, **serializer.validated_data)
        if not result.success:
            return Response({"detail": result.error}, status=result.status_code)
        return Response(ContactSerializer(result.data).data, status=status.HTTP_201_CREATED)


class ContactDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        actor = resolve_actor(request)
        require(actor, "contacts.view")

        contact = Contact.objects.select_related("branch", "created_by").filter(pk=pk).first()
        if contact is None:
            raise Http404(_("Contact not found"))
        assert_branch_access(actor, contact)
        return Response(ContactDetailSerializer(contact).data)

    def patch(self, request, pk):
        actor = resolve_actor(request)

        serializer = ContactUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = update_contact(actor, pk, **serializer.validated_data)
        if not result.success:
            return Response({"detail": result.error}, status=result.status_code)
        return Response(ContactSerializer(result.data).data)

    def delete(self, request, pk):
        actor = resolve_actor(request)
        result = delete_contact(actor, pk)
        if not result.success:
            return Response({"detail": result.error}, status=result.status_code)
        return Response(result.data)


class ContactSummaryView(APIView):
    """GET /api/contacts/summary/ -> {total, byType}"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        require(actor, "contacts.view")

        qs = scope_queryset(Contact.objects.all(), actor, request.query_params.get("branch"))
        counts = {
            row["type"]: row["n"]
            for row in qs.order_by().values("type").annotate(n=Count("id"))
        }
        return Response({
            "total": sum(counts.values()),
            "byType": {
                "suppliers": counts.get(Contact.ContactType.SUPPLIER, 0),
                "customers": counts.get(Contact.ContactType.CUSTOMER, 0),
                "both": counts.get(Contact.ContactType.BOTH, 0),
                "other": counts.get(Contact.ContactType.OTHER, 0),
            },
        })
