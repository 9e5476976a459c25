# configuration/commands.py
"""Commands for currencies and application settings. All writes are admin only."""

from django.db import transaction
from django.utils.translation import gettext as _

from accounts.authz import ActorContext, require
from core.audit import EntityType, log_create, log_update, snapshot
from core.commands import CommandResult

from .models import AppSetting, CurrencySetting


@transaction.atomic
def create_currency(actor: ActorContext, code: str, name_ar: str, name_en: str, symbol: str) -> CommandResult:
    require(actor, "settings.manage")

    code = code.upper()
    if CurrencySetting.objects.filter(code=code).exists():
        return CommandResult.conflict(_("Currency %(code)s already exists") % {"code": code})

    currency = CurrencySetting.objects.create(
        code=code,
        name_ar=name_ar,
        name_en=name_en,
        symbol=symbol,
        is_default=False,
    )
    entry = log_create(actor, EntityType.SETTINGS, currency)
    return CommandResult.ok(currency, event=entry)


@transaction.atomic
def set_default_currency(actor: ActorContext, code: str) -> CommandResult:
    """Make `code` the only default currency."""
    require(actor, "settings.manage")

    currency = CurrencySetting.objects.select_for_update().filter(code=code.upper()).first()
    if currency is None:
        return CommandResult.not_found(_("Currency %(code)s not found") % {"code": code})
    if currency.is_default:
        return CommandResult.ok(currency)

    before = snapshot(currency)
    CurrencySetting.objects.filter(is_default=True).update(is_default=False)
    currency.is_default = True
    currency.save(update_fields=["is_default", "updated_at"])

    entry = log_update(actor, EntityType.SETTINGS, currency, before)
    return CommandResult.ok(currency, event=entry)


@transaction.atomic
def update_app_settings(actor: ActorContext, login_background_url=None) -> CommandResult:
    require(actor, "settings.manage")

    setting = AppSetting.load()
    before = snapshot(setting)
    setting.login_background_url = login_background_url or None
    setting.save()

    entry = log_update(actor, EntityType.SETTINGS, setting, before)
    return CommandResult.ok(setting, event=entry)
