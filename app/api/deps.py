from collections.abc import Generator
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.db import SessionLocal


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_now() -> datetime:
    return datetime.now(timezone.utc)


__all__ = ["get_db", "get_now"]
