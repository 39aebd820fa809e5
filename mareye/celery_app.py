"""Celery worker for MarEye e-mail jobs.

Run with: celery -A mareye.celery_app worker -Q email
"""

from celery import Celery

from mareye.config import get_settings

settings = get_settings()

app = Celery(
    "mareye",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["mareye.tasks.email"],
)

app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_routes={"tasks.send_welcome_email": {"queue": "email"}},
    # SMTP handshakes are slow but never take minutes
    task_time_limit=60,
    task_soft_time_limit=45,
    result_expires=3600,
    broker_connection_retry_on_startup=True,
)
