"""Celery task for reset ticket housekeeping."""

import logging

from src.celery_app import app as celery_app
from src.database import SessionLocal
from src.services.password_reset import purge_expired_tickets

logger = logging.getLogger(__name__)


@celery_app.task(name="tasks.purge_expired_reset_tickets")
def purge_expired_reset_tickets() -> dict:
    """Delete reset tickets whose expiry has passed.

    Runs every 15 minutes via celery-beat. Lookups already reject expired
    tickets, so this only keeps the table small.
    """
    db = SessionLocal()
    try:
        removed = purge_expired_tickets(db)
        return {"removed": removed}
    except Exception:
        logger.exception("Failed to purge expired reset tickets")
        db.rollback()
        raise
    finally:
        db.close()
