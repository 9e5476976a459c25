# configuration/views.py
from django.http import Http404
from django.utils.translation import gettext as _
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.authz import resolve_actor

from .commands import create_currency, set_default_currency, update_app_settings
from .models import AppSetting, CurrencySetting
from .serializers import (
    AppSettingSerializer,
    AppSettingUpdateSerializer,
    CurrencyCreateSerializer,
    CurrencySerializer,
    SetDefaultCurrencySerializer,
)


class CurrencyListCreateView(APIView):
    """
    GET /api/settings/currencies/ -> default first, then by code
    POST /api/settings/currencies/ -> create currency (admin)
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        currencies = CurrencySetting.objects.order_by("-is_default", "code")
        return Response(CurrencySerializer(currencies, many=True).data)

    def post(self, request):
        actor = resolve_actor(request)

        serializer = CurrencyCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = create_currency(actor, **serializer.validated_data)
        if not result.success:
            return Response({"detail": result.error}, status=result.status_code)
        return Response(CurrencySerializer(result.data).data, status=status.HTTP_201_CREATED)


class DefaultCurrencyView(APIView):
    """
    GET /api/settings/currencies/default/
    PUT /api/settings/currencies/default/ {"code": "IQD"} (admin)
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        currency = CurrencySetting.objects.filter(is_default=True).first()
        if currency is None:
            raise Http404(_("No default currency configured"))
        return Response(CurrencySerializer(currency).data)

    def put(self, request):
        actor = resolve_actor(request)

        serializer = SetDefaultCurrencySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = set_default_currency(actor, serializer.validated_data["code"])
        if not result.success:
            return Response({"detail": result.error}, status=result.status_code)
        return Response(CurrencySerializer(result.data).data)


class AppSettingView(APIView):
    """
    GET /api/settings/app/ -> public, used by the login screen
    PUT /api/settings/app/ -> admin only
    """

    def get_permissions(self):
        if self.request.method == "GET":
            return [permissions.AllowAny()]
        return [permissions.IsAuthenticated()]

    def get(self, request):
        return Response(AppSettingSerializer(AppSetting.load()).data)

    def put(self, request):
        actor = resolve_actor(request)

        serializer = AppSettingUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = update_app_settings(actor, **serializer.validated_data)
        return Response(AppSettingSerializer(result.data).data)
