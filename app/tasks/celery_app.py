"""
Celery application for deferred booking work.

Uses the same Redis instance as the cache. Start a worker with
``celery -A app.tasks.celery_app worker``.
"""

from celery import Celery

from app.core.config import CELERY_BROKER_URL

celery_app = Celery(
    "hotel_booking",
    broker=CELERY_BROKER_URL,
    include=["app.tasks.payment_tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    task_ignore_result=True,
    enable_utc=True,
    timezone="UTC",
)
