# tests/test_notifications.py
"""
Tests for notifications.

Tests cover:
- Setting filters (enabled, minimum amount, branches)
- Broadcast decision from admin settings
- Opt-in new transaction notices
- Daily overdue scan and its per-day deduplication
- Read state scoped by branch
- WebSocket authentication, group routing and event shape
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from asgiref.sync import async_to_sync
from channels.db import database_sync_to_async
from channels.layers import get_channel_layer
from channels.testing import WebsocketCommunicator
from django.core.exceptions import PermissionDenied
from rest_framework_simplejwt.tokens import AccessToken

from core.dates import today
from debts.models import AccountPayable, AccountReceivable, DebtStatus
from notifications import services, tasks
from notifications.commands import mark_all_read, mark_read, upsert_setting
from notifications.consumers import CLOSE_NO_BRANCH, CLOSE_UNAUTHORIZED, NotificationConsumer
from notifications.models import Notification, NotificationSetting
from transactions.commands import create_income


@pytest.fixture
def overdue_payable(db, supplier, branch):
    return AccountPayable.objects.create(
        contact=supplier,
        branch=branch,
        original_amount=Decimal("500.00"),
        remaining_amount=Decimal("200.00"),
        date=today() - timedelta(days=40),
        due_date=today() - timedelta(days=5),
        status=DebtStatus.PARTIAL,
    )


@pytest.fixture
def overdue_receivable(db, customer, branch):
    return AccountReceivable.objects.create(
        contact=customer,
        branch=branch,
        original_amount=Decimal("80.00"),
        remaining_amount=Decimal("80.00"),
        date=today() - timedelta(days=10),
        due_date=today() - timedelta(days=1),
        status=DebtStatus.ACTIVE,
    )


def _notification(branch=None, **fields):
    fields.setdefault("type", "payable_payment")
    fields.setdefault("title", "t")
    fields.setdefault("message", "m")
    return Notification.objects.create(branch=branch, **fields)


@pytest.mark.django_db
class TestSettingFilters:

    def test_disabled_setting_accepts_nothing(self, admin_user):
        setting = NotificationSetting(user=admin_user, notification_type="x", is_enabled=False)

        assert not setting.accepts(amount=Decimal("10"))

    def test_minimum_amount(self, admin_user):
        setting = NotificationSetting(user=admin_user, notification_type="x", min_amount=Decimal("100"))

        assert not setting.accepts(amount=Decimal("99.99"))
        assert setting.accepts(amount=Decimal("100"))
        assert setting.accepts()

    def test_selected_branches(self, admin_user, branch, other_branch):
        setting = NotificationSetting(user=admin_user, notification_type="x", selected_branches=[branch.pk])

        assert setting.accepts(branch_id=branch.pk)
        assert not setting.accepts(branch_id=other_branch.pk)

    def test_no_settings_means_broadcast(self):
        assert services.should_broadcast("payable_payment", amount=Decimal("1"))

    def test_admin_settings_can_filter(self, admin_actor):
        upsert_setting(admin_actor, "payable_payment", min_amount=Decimal("1000"))

        assert not services.should_broadcast("payable_payment", amount=Decimal("5"))
        assert services.should_broadcast("payable_payment", amount=Decimal("5000"))


@pytest.mark.django_db
class TestNewTransactionNotice:

    def test_not_created_without_opt_in(self, accountant_actor):
        create_income(accountant_actor, amount=Decimal("10"))

        assert not Notification.objects.filter(type=services.NEW_TRANSACTION).exists()

    def test_created_when_admin_opts_in(self, admin_actor, accountant_actor, branch):
        upsert_setting(admin_actor, services.NEW_TRANSACTION, min_amount=Decimal("50"))

        create_income(accountant_actor, amount=Decimal("10"))
        create_income(accountant_actor, amount=Decimal("75"))

        notices = Notification.objects.filter(type=services.NEW_TRANSACTION)
        assert notices.count() == 1
        assert notices.get().branch == branch


@pytest.mark.django_db
class TestOverdueCheck:

    def test_creates_one_notification_per_record(self, overdue_payable, overdue_receivable):
        created = services.check_overdue_accounts()

        assert created == {"payables": 1, "receivables": 1}
        payable_notice = Notification.objects.get(type=services.OVERDUE_PAYABLE)
        assert payable_notice.related_id == str(overdue_payable.pk)
        assert payable_notice.severity == Notification.Severity.WARNING
        assert payable_notice.created_by.username == "system"

    def test_same_day_rerun_is_deduplicated(self, overdue_payable):
        services.check_overdue_accounts()

        assert services.check_overdue_accounts() == {"payables": 0, "receivables": 0}
        assert Notification.objects.filter(type=services.OVERDUE_PAYABLE).count() == 1

    def test_paid_and_future_balances_are_skipped(self, overdue_payable, supplier, branch):
        overdue_payable.status = DebtStatus.PAID
        overdue_payable.save()
        AccountPayable.objects.create(
            contact=supplier,
            branch=branch,
            original_amount=Decimal("5"),
            remaining_amount=Decimal("5"),
            due_date=today() + timedelta(days=1),
        )

        assert services.check_overdue_accounts()["payables"] == 0

    def test_celery_task_runs_the_scan(self, overdue_payable):
        result = tasks.check_overdue_accounts.apply().get()

        assert result["payables"] == 1

    def test_backup_reminder_task(self, db):
        result = tasks.remind_backup.apply().get()

        assert Notification.objects.get(pk=result["notification_id"]).type == services.BACKUP_REMINDER


@pytest.mark.django_db
class TestReadState:

    def test_mark_read(self, accountant_actor, branch):
        notification = _notification(branch=branch)

        result = mark_read(accountant_actor, notification.pk)

        assert result.success
        notification.refresh_from_db()
        assert notification.is_read
        assert notification.read_at is not None

    def test_cannot_mark_other_branch(self, accountant_actor, other_branch):
        notification = _notification(branch=other_branch)

        with pytest.raises(PermissionDenied):
            mark_read(accountant_actor, notification.pk)

    def test_mark_all_read_is_scoped(self, accountant_actor, branch, other_branch):
        _notification(branch=branch)
        foreign = _notification(branch=other_branch)

        assert mark_all_read(accountant_actor).data == {"updated": 1}
        foreign.refresh_from_db()
        assert not foreign.is_read

    def test_mark_all_read_includes_branchless(self, accountant_actor, branch, other_branch):
        _notification(branch=branch)
        system_wide = _notification(type="backup_reminder")
        _notification(branch=other_branch)

        assert mark_all_read(accountant_actor).data == {"updated": 2}
        system_wide.refresh_from_db()
        assert system_wide.is_read

    def test_mark_read_branchless(self, accountant_actor):
        notification = _notification(type="backup_reminder")

        assert mark_read(accountant_actor, notification.pk).success


@pytest.mark.django_db
class TestNotificationAPI:

    def test_unread_count(self, accountant_client, branch, other_branch):
        _notification(branch=branch)
        _notification(branch=branch)
        _notification(branch=other_branch)

        response = accountant_client.get("/api/notifications/unread/count/")

        assert response.status_code == 200
        assert response.data == {"count": 2}

    def test_accountant_lists_branchless_notifications(self, accountant_client, branch, other_branch):
        _notification(branch=branch, title="branch")
        _notification(title="system")
        _notification(branch=other_branch, title="foreign")

        count = accountant_client.get("/api/notifications/unread/count/")
        listing = accountant_client.get("/api/notifications/unread/")

        assert count.data == {"count": 2}
        assert {n["title"] for n in listing.data} == {"branch", "system"}

    def test_check_overdue_is_admin_only(self, admin_client, accountant_client, overdue_payable):
        assert accountant_client.post("/api/notifications/check-overdue/").status_code == 403

        response = admin_client.post("/api/notifications/check-overdue/")

        assert response.status_code == 200
        assert response.data["payables"] == 1


# =============================================================================
# WebSocket
# =============================================================================

def _ws_path(user=None, token=None):
    if user is not None:
        token = str(AccessToken.for_user(user))
    return f"/ws/notifications/?token={token}"


def _communicator(path):
    return WebsocketCommunicator(NotificationConsumer.as_asgi(), path)


@pytest.mark.django_db(transaction=True)
class TestNotificationConsumer:

    def test_bad_token_is_closed_unauthorized(self):
        async def run():
            communicator = _communicator(_ws_path(token="not-a-token"))
            connected, code = await communicator.connect()
            await communicator.disconnect()
            return connected, code

        assert async_to_sync(run)() == (False, CLOSE_UNAUTHORIZED)

    def test_unassigned_accountant_is_closed(self, unassigned_accountant):
        async def run():
            communicator = _communicator(_ws_path(unassigned_accountant))
            connected, code = await communicator.connect()
            await communicator.disconnect()
            return connected, code

        assert async_to_sync(run)() == (False, CLOSE_NO_BRANCH)

    def test_admin_joins_admin_group(self, admin_user):
        async def run():
            communicator = _communicator(_ws_path(admin_user))
            connected, _ = await communicator.connect()
            assert connected
            await get_channel_layer().group_send(
                services.ADMIN_GROUP,
                {"type": "push.event", "event": "transaction.created", "data": {"id": 7}},
            )
            message = await communicator.receive_json_from()
            await communicator.disconnect()
            return message

        assert async_to_sync(run)() == {"type": "transaction.created", "data": {"id": 7}}

    def test_accountant_gets_only_own_branch_events(self, accountant, branch, other_branch):
        async def run():
            communicator = _communicator(_ws_path(accountant))
            connected, _ = await communicator.connect()
            assert connected
            layer = get_channel_layer()
            await layer.group_send(
                services.branch_group(other_branch.pk),
                {"type": "push.event", "event": "payable.paid", "data": {"id": 1}},
            )
            assert await communicator.receive_nothing()
            await database_sync_to_async(services.broadcast)(
                "transaction.created", {"id": 2}, branch_id=branch.pk,
            )
            message = await communicator.receive_json_from()
            await communicator.disconnect()
            return message

        assert async_to_sync(run)() == {"type": "transaction.created", "data": {"id": 2}}

    def test_ping(self, accountant):
        async def run():
            communicator = _communicator(_ws_path(accountant))
            await communicator.connect()
            await communicator.send_json_to({"type": "ping"})
            message = await communicator.receive_json_from()
            await communicator.disconnect()
            return message

        assert async_to_sync(run)() == {"type": "pong"}
