# tests/test_configuration.py
"""
Tests for currencies and application settings.
"""

from decimal import Decimal

import pytest
from django.core.exceptions import PermissionDenied

from configuration.commands import create_currency, set_default_currency, update_app_settings
from configuration.models import AppSetting, CurrencySetting, default_currency_code
from transactions.commands import create_income


@pytest.mark.django_db
class TestCurrencies:

    def test_fallback_default_is_usd(self):
        assert default_currency_code() == "USD"

    def test_code_is_uppercased_and_unique(self, admin_actor):
        assert create_currency(admin_actor, "iqd", "دينار عراقي", "Iraqi Dinar", "د.ع").data.code == "IQD"

        assert create_currency(admin_actor, "IQD", "x", "x", "x").status_code == 409

    def test_single_default(self, admin_actor):
        create_currency(admin_actor, "IQD", "دينار عراقي", "Iraqi Dinar", "د.ع")
        create_currency(admin_actor, "EUR", "يورو", "Euro", "€")

        set_default_currency(admin_actor, "IQD")
        set_default_currency(admin_actor, "eur")

        assert list(CurrencySetting.objects.filter(is_default=True).values_list("code", flat=True)) == ["EUR"]

    def test_new_transactions_use_default_currency(self, admin_actor, accountant_actor):
        create_currency(admin_actor, "IQD", "دينار عراقي", "Iraqi Dinar", "د.ع")
        set_default_currency(admin_actor, "IQD")

        assert create_income(accountant_actor, amount=Decimal("1000")).data.currency == "IQD"

    def test_accountant_cannot_change_settings(self, accountant_actor):
        with pytest.raises(PermissionDenied):
            create_currency(accountant_actor, "GBP", "x", "x", "x")


@pytest.mark.django_db
class TestAppSettings:

    def test_singleton(self, admin_actor):
        update_app_settings(admin_actor, login_background_url="/bg.png")
        update_app_settings(admin_actor, login_background_url="")

        assert AppSetting.objects.count() == 1
        assert AppSetting.load().login_background_url is None
