from django.http import Http404
from django.utils.translation import gettext as _
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.authz import require, resolve_actor

from . import commands, services
from .models import NotificationSetting
from .serializers import (
    NotificationSerializer,
    NotificationSettingSerializer,
    NotificationSettingWriteSerializer,
)


def _fail(result):
    return Response({"detail": result.error}, status=result.status_code)


class UnreadNotificationsView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        qs = commands.visible_notifications(actor).filter(is_read=False).order_by("-created_at")
        return Response(NotificationSerializer(qs, many=True).data)


class UnreadCountView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        return Response({"count": commands.visible_notifications(actor).filter(is_read=False).count()})


class MarkReadView(APIView):
    permission_classes = [IsAuthenticated]

    def patch(self, request, pk):
        actor = resolve_actor(request)
        result = commands.mark_read(actor, pk)
        if not result.success:
            return _fail(result)
        return Response(NotificationSerializer(result.data).data)


class MarkAllReadView(APIView):
    permission_classes = [IsAuthenticated]

    def patch(self, request):
        actor = resolve_actor(request)
        result = commands.mark_all_read(actor)
        return Response(result.data)


class NotificationSettingListView(APIView):
    """GET lists the caller's settings; POST upserts one (200)."""

    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        require(actor, "notifications.view")
        qs = NotificationSetting.objects.filter(user=actor.user).select_related("user")
        return Response(NotificationSettingSerializer(qs, many=True).data)

    def post(self, request):
        actor = resolve_actor(request)

        serializer = NotificationSettingWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        result = commands.upsert_setting(actor, data.pop("notification_type"), **data)
        if not result.success:
            return _fail(result)
        return Response(NotificationSettingSerializer(result.data).data)


class NotificationSettingDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, notification_type):
        actor = resolve_actor(request)
        require(actor, "notifications.view")
        setting = NotificationSetting.objects.filter(
            user=actor.user, notification_type=notification_type
        ).select_related("user").first()
        if setting is None:
            raise Http404(_("Notification setting not found"))
        return Response(NotificationSettingSerializer(setting).data)

    def delete(self, request, notification_type):
        actor = resolve_actor(request)
        result = commands.delete_setting(actor, notification_type)
        if not result.success:
            return _fail(result)
        return Response(status=status.HTTP_204_NO_CONTENT)


class EnabledTypesView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = resolve_actor(request)
        require(actor, "notifications.view")
        types = NotificationSetting.objects.filter(
            user=actor.user, is_enabled=True
        ).values_list("notification_type", flat=True)
        return Response(list(types))


class CheckOverdueView(APIView):
    """Run the overdue scan now instead of waiting for the daily task."""

    permission_classes = [IsAuthenticated]

    def post(self, request):
        actor = resolve_actor(request)
        require(actor, "notifications.run_checks")
        created = services.check_overdue_accounts()
        return Response({"message": "Overdue check completed", **created})
