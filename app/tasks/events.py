import logging

from prometheus_client import Counter

from app.celery_app import celery_app

logger = logging.getLogger(__name__)

DISCIPLINE_EVENTS = Counter(
    "discipline_events_total",
    "Discipline domain events processed",
    ["event_type"],
)


@celery_app.task(name="app.tasks.events.process_event", ignore_result=True)
def process_event(
    event_type: str,
    entity_type: str,
    entity_id: str,
    actor_id: str | None = None,
    employee_id: str | None = None,
    payload: dict | None = None,
) -> None:
    """Record a discipline event in the log and the event counter."""
    DISCIPLINE_EVENTS.labels(event_type=event_type).inc()
    logger.info(
        "Processed event %s for %s/%s actor=%s employee=%s payload=%s",
        event_type,
        entity_type,
        entity_id,
        actor_id,
        employee_id,
        payload or {},
    )
