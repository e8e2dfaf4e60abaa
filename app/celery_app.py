from celery import Celery
from celery.schedules import crontab

from app.config import settings

celery_app = Celery(
    "discipline",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["app.tasks.events", "app.tasks.warnings"],
)

celery_app.conf.update(
    task_always_eager=settings.celery_task_always_eager,
    task_serializer="json",
    accept_content=["json"],
    timezone=settings.organization_timezone,
    enable_utc=True,
)

celery_app.conf.beat_schedule = {
    "expire-lapsed-warnings": {
        "task": "app.tasks.warnings.expire_lapsed_warnings",
        "schedule": crontab(hour=0, minute=15),
    },
    "check-review-follow-ups": {
        "task": "app.tasks.warnings.check_review_follow_ups",
        "schedule": crontab(hour=settings.review_check_hour, minute=0),
    },
}
