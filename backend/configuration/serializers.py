from django.conf import settings
from rest_framework import serializers

from .models import AppSetting, CurrencySetting


class CurrencySerializer(serializers.ModelSerializer):
    class Meta:
        model = CurrencySetting
        fields = ("id", "code", "name_ar", "name_en", "symbol", "is_default", "created_at", "updated_at")
        read_only_fields = ("id", "is_default", "created_at", "updated_at")


class CurrencyCreateSerializer(serializers.Serializer):
    code = serializers.RegexField(r"^[A-Za-z]{3}$", max_length=3)
    name_ar = serializers.CharField(max_length=100)
    name_en = serializers.CharField(max_length=100)
    symbol = serializers.CharField(max_length=10)

    def validate_code(self, value):
        return value.upper()


class SetDefaultCurrencySerializer(serializers.Serializer):
    code = serializers.CharField(max_length=3)

    def validate_code(self, value):
        return value.upper()


class AppSettingSerializer(serializers.ModelSerializer):
    app_name = serializers.SerializerMethodField()
    app_icon_url = serializers.SerializerMethodField()

    class Meta:
        model = AppSetting
        fields = ("id", "app_name", "app_icon_url", "login_background_url", "created_at", "updated_at")
        read_only_fields = fields

    def get_app_name(self, obj):
        return settings.APP_NAME

    def get_app_icon_url(self, obj):
        return settings.APP_ICON_URL


class AppSettingUpdateSerializer(serializers.Serializer):
    login_background_url = serializers.CharField(max_length=500, allow_null=True, allow_blank=True)
