import logging
from datetime import datetime, timezone

from app.celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(name="app.tasks.warnings.expire_lapsed_warnings", ignore_result=True)
def expire_lapsed_warnings() -> None:
    """Periodic task to mark issued/delivered warnings past expiry as expired.

    Publishes warning.expired events for each. Whether a warning is active is
    always computed from its expiry date, so this only keeps the stored
    status in step for reporting.
    """
    from app.db import SessionLocal
    from app.services.discipline_warning import warnings

    db = SessionLocal()
    try:
        expired = warnings.expire_lapsed(db, datetime.now(timezone.utc))
        db.commit()
        logger.info("Marked %d warnings as expired", len(expired))
    except Exception as e:
        db.rollback()
        logger.exception("Failed to expire lapsed warnings: %s", e)
    finally:
        db.close()


@celery_app.task(name="app.tasks.warnings.check_review_follow_ups", ignore_result=True)
def check_review_follow_ups() -> None:
    """Daily task to classify open reviews.

    Publishes review.due_soon and review.overdue reminders on every run and
    review.auto_satisfied once per review that has passed its grace period.
    """
    from app.db import SessionLocal
    from app.services.discipline_warning import warnings

    db = SessionLocal()
    try:
        counts = warnings.follow_up_check(db, datetime.now(timezone.utc))
        db.commit()
        logger.info(
            "Review follow-ups: %d pending, %d overdue, %d auto-satisfied",
            counts["pending"],
            counts["overdue"],
            counts["auto-satisfied"],
        )
    except Exception as e:
        db.rollback()
        logger.exception("Failed to check review follow-ups: %s", e)
    finally:
        db.close()
