"""
Admin notification service.

Request handlers call the ``notify_*`` helpers, which enqueue a Celery
task; the worker persists the row with ``record_notification``.
"""

import logging

from kombu.exceptions import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.notification import AdminNotification, NotificationKind

logger = logging.getLogger(__name__)


async def record_notification(
    session: AsyncSession,
    kind: NotificationKind,
    title: str,
    description: str,
) -> AdminNotification:
    notification = AdminNotification(kind=kind, title=title, description=description)
    session.add(notification)
    await session.flush()
    return notification


def _enqueue(kind: NotificationKind, title: str, description: str) -> None:
    from app.tasks.notification_tasks import record_admin_notification

    try:
        record_admin_notification.delay(kind.value, title, description)
    except OperationalError:
        # Best effort: a broker outage never fails the request.
        logger.exception("Could not enqueue %s notification", kind.value)


def notify_new_order(ship_from: str, ship_to: str) -> None:
    _enqueue(
        NotificationKind.NEW_ORDER,
        "New Order Created",
        f"Order from {ship_from} to {ship_to}",
    )


def notify_api_key_regenerated(display_name: str) -> None:
    _enqueue(
        NotificationKind.API_KEY_REGENERATED,
        "API Key Regenerated",
        f"{display_name} regenerated API key",
    )


def notify_new_user(display_name: str) -> None:
    _enqueue(
        NotificationKind.NEW_USER,
        "New User Registered",
        f"{display_name} joined",
    )
