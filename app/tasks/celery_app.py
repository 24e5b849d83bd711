"""
Celery application configuration.

Redis-brokered worker for side effects that must not hold up an API
response (admin notifications).
"""

from celery import Celery

from app.config import settings

celery_app = Celery(
    "shipquote",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["app.tasks.notification_tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    task_ignore_result=True,
)
