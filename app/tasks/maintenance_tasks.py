# app/tasks/maintenance_tasks.py
from datetime import date
from celery import shared_task

from app.tasks.celery_app import celery_app  # noqa: F401

from app.core.constants import CampStatus
from app.core.database import SessionLocal
from app.models.camp import Camp
from app.models.session import UserSession
from app.services.token_service import TokenService
from app.utils.helpers import utcnow
import logging

logger = logging.getLogger(__name__)


def remove_expired_tokens(db) -> dict:
    """Drop expired Token rows and sessions whose refresh window has closed."""
    tokens = TokenService.delete_expired(db)
    sessions = (
        db.query(UserSession)
        .filter(UserSession.refresh_expires_at.isnot(None), UserSession.refresh_expires_at < utcnow())
        .delete(synchronize_session=False)
    )
    db.commit()
    return {"tokens": tokens, "sessions": sessions}


def deactivate_camps(db, today: date | None = None) -> int:
    """Mark camps that ended before `today` inactive."""
    today = today or date.today()
    count = (
        db.query(Camp)
        .filter(Camp.end_date < today, Camp.status != CampStatus.INACTIVE.value)
        .update({Camp.status: CampStatus.INACTIVE.value}, synchronize_session=False)
    )
    db.commit()
    return count


@shared_task(bind=True, max_retries=3)
def cleanup_expired_tokens(self):
    """Nightly at 02:00 via Celery Beat."""
    db = SessionLocal()
    try:
        removed = remove_expired_tokens(db)
        logger.info(f"Removed {removed['tokens']} expired tokens and {removed['sessions']} expired sessions")
        return removed
    except Exception as e:
        db.rollback()
        logger.error(f"Error in cleanup_expired_tokens: {e}")
        raise self.retry(exc=e, countdown=60)
    finally:
        db.close()


@shared_task(bind=True, max_retries=3)
def deactivate_expired_camps(self):
    """Daily at midnight via Celery Beat."""
    db = SessionLocal()
    try:
        count = deactivate_camps(db)
        logger.info(f"Deactivated {count} expired camps")
        return count
    except Exception as e:
        db.rollback()
        logger.error(f"Error in deactivate_expired_camps: {e}")
        raise self.retry(exc=e, countdown=60)
    finally:
        db.close()
