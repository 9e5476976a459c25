"""
Celery tasks for scheduled notifications.

Tasks:
- check_overdue_accounts: daily scan of open payables/receivables past due
- remind_backup: weekly backup reminder

Both are registered in CELERY_BEAT_SCHEDULE and can also be triggered by
hand:

    from notifications.tasks import check_overdue_accounts
    check_overdue_accounts.delay()
"""
import logging

from celery import shared_task

from . import services

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    max_retries=3,
    autoretry_for=(Exception,),
    retry_backoff=True,
)
def check_overdue_accounts(self) -> dict:
    """
    Create overdue notifications for payables and receivables.

    Returns:
        Dict with the number of notifications created per kind
    """
    logger.info("Running overdue accounts check")
    return services.check_overdue_accounts()


@shared_task(
    bind=True,
    max_retries=3,
    autoretry_for=(Exception,),
    retry_backoff=True,
)
def remind_backup(self) -> dict:
    notification = services.remind_backup()
    return {"notification_id": notification.pk}
