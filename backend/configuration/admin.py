from django.contrib import admin

from .models import AppSetting, CurrencySetting


@admin.register(CurrencySetting)
class CurrencySettingAdmin(admin.ModelAdmin):
    list_display = ("code", "name_en", "name_ar", "symbol", "is_default")


@admin.register(AppSetting)
class AppSettingAdmin(admin.ModelAdmin):
    list_display = ("id", "login_background_url", "updated_at")
