from django.utils.translation import gettext as _
from rest_framework import serializers

from accounts.serializers import BranchBriefSerializer

from .models import Notification, NotificationSetting


class NotificationSerializer(serializers.ModelSerializer):
    branch = BranchBriefSerializer(read_only=True)

    class Meta:
        model = Notification
        fields = (
            "id", "type", "title", "message", "severity", "related_id", "related_type",
            "branch_id", "branch", "created_by", "is_read", "read_at", "created_at",
        )
        read_only_fields = fields


class NotificationSettingSerializer(serializers.ModelSerializer):
    username = serializers.CharField(source="user.username", read_only=True)

    class Meta:
        model = NotificationSetting
        fields = (
            "id", "user", "username", "notification_type", "is_enabled", "min_amount",
            "selected_branches", "display_method", "created_at", "updated_at",
        )
        read_only_fields = fields


class NotificationSettingWriteSerializer(serializers.Serializer):
    notification_type = serializers.CharField(max_length=50)
    is_enabled = serializers.BooleanField(required=False)
    min_amount = serializers.DecimalField(max_digits=15, decimal_places=2, required=False, allow_null=True)
    selected_branches = serializers.ListField(child=serializers.IntegerField(), required=False, allow_null=True)
    display_method = serializers.ChoiceField(choices=NotificationSetting.DisplayMethod.choices, required=False)

    def validate_min_amount(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError(_("min_amount cannot be negative"))
        return value
