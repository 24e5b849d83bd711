"""
Notification Celery tasks — persist admin notifications off the request path.
"""

import asyncio
import logging

from app.tasks.celery_app import celery_app

logger = logging.getLogger(__name__)


async def _record_admin_notification_async(kind: str, title: str, description: str) -> str:
    """
    Insert one AdminNotification row.

    Uses its own session (not FastAPI deps — Celery runs outside the
    request lifecycle).
    """
    from app.database import session_scope
    from app.models.notification import NotificationKind
    from app.services.notification_service import record_notification

    async with session_scope() as session:
        notification = await record_notification(
            session, NotificationKind(kind), title, description,
        )
        return str(notification.id)


@celery_app.task(name="app.tasks.notification_tasks.record_admin_notification")
def record_admin_notification(kind: str, title: str, description: str):
    """Store a backoffice notification (new order, new user, key regenerated)."""
    loop = asyncio.new_event_loop()
    try:
        notification_id = loop.run_until_complete(
            _record_admin_notification_async(kind, title, description)
        )
        logger.info("Recorded %s notification %s", kind, notification_id)
        return notification_id
    except Exception:
        logger.exception("Failed to record %s notification", kind)
        raise
    finally:
        loop.close()
