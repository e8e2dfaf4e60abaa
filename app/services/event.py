import enum
import logging
import uuid

logger = logging.getLogger(__name__)


class EventType(enum.Enum):
    warning_issued = "warning.issued"
    warning_delivered = "warning.delivered"
    warning_overturned = "warning.overturned"
    warning_expired = "warning.expired"

    review_completed = "review.completed"
    review_due_soon = "review.due_soon"
    review_overdue = "review.overdue"
    review_auto_satisfied = "review.auto_satisfied"

    category_created = "category.created"
    category_updated = "category.updated"


def publish_event(
    event_type: EventType,
    entity_type: str,
    entity_id: str | uuid.UUID,
    actor_id: str | uuid.UUID | None = None,
    employee_id: str | uuid.UUID | None = None,
    payload: dict | None = None,
) -> None:
    """Fire-and-forget event publishing.

    Queues a Celery task for fan-out. Never raises; logs failures and continues.
    """
    try:
        from app.tasks.events import process_event

        process_event.delay(
            event_type=event_type.value,
            entity_type=entity_type,
            entity_id=str(entity_id),
            actor_id=str(actor_id) if actor_id else None,
            employee_id=str(employee_id) if employee_id else None,
            payload=payload or {},
        )
        logger.debug(
            "Published event %s for %s/%s", event_type.value, entity_type, entity_id
        )
    except Exception as e:
        logger.exception("Failed to publish event %s: %s", event_type.value, e)
