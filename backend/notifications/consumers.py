"""
WebSocket consumer for live notifications and entity events.

Clients connect to ws/notifications/?token=<access token>. Admins join the
"notifications" group; accountants join the group of their branch.
"""
import logging
from urllib.parse import parse_qs

from asgiref.sync import async_to_sync
from channels.generic.websocket import JsonWebsocketConsumer
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import User

from .services import ADMIN_GROUP, branch_group

logger = logging.getLogger(__name__)

CLOSE_UNAUTHORIZED = 4001
CLOSE_NO_BRANCH = 4003


def user_from_token(raw_token):
    """Resolve an access token to an active user, or None."""
    if not raw_token:
        return None
    try:
        token = AccessToken(raw_token)
    except TokenError:
        return None
    user_id = token.get(api_settings.USER_ID_CLAIM)
    return User.objects.select_related("branch").filter(pk=user_id, is_active=True).first()


class NotificationConsumer(JsonWebsocketConsumer):
    def connect(self):
        query = parse_qs(self.scope.get("query_string", b"").decode())
        user = user_from_token((query.get("token") or [None])[0])
        if user is None:
            self.close(code=CLOSE_UNAUTHORIZED)
            return

        if user.role == User.Role.ADMIN:
            self.group = ADMIN_GROUP
        elif user.branch_id:
            self.group = branch_group(user.branch_id)
        else:
            self.close(code=CLOSE_NO_BRANCH)
            return

        self.user_id = user.pk
        async_to_sync(self.channel_layer.group_add)(self.group, self.channel_name)
        self.accept()
        logger.debug("WebSocket connected", extra={"user_id": user.pk, "group": self.group})

    def disconnect(self, code):
        group = getattr(self, "group", None)
        if group:
            async_to_sync(self.channel_layer.group_discard)(group, self.channel_name)

    def receive_json(self, content, **kwargs):
        if content.get("type") == "ping":
            self.send_json({"type": "pong"})

    def push_event(self, message):
        self.send_json({"type": message["event"], "data": message["data"]})
