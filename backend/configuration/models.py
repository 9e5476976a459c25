# configuration/models.py
from django.db import models


class CurrencySetting(models.Model):
    """
    A display currency. Exactly one row is the default at a time.

    Transactions store their own currency code; changing the default
    only affects new transactions.
    """

    code = models.CharField(max_length=3, unique=True)
    name_ar = models.CharField(max_length=100)
    name_en = models.CharField(max_length=100)
    symbol = models.CharField(max_length=10)
    is_default = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-is_default", "code"]

    def __str__(self):
        return self.code


class AppSetting(models.Model):
    """Singleton row with the editable application settings."""

    login_background_url = models.CharField(max_length=500, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    @classmethod
    def load(cls) -> "AppSetting":
        setting = cls.objects.order_by("pk").first()
        if setting is None:
            setting = cls.objects.create()
        return setting


DEFAULT_CURRENCY_CODE = "USD"


def default_currency_code() -> str:
    code = (
        CurrencySetting.objects.filter(is_default=True)
        .values_list("code", flat=True)
        .first()
    )
    return code or DEFAULT_CURRENCY_CODE
