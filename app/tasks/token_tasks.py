"""
Celery tasks for token housekeeping.
"""

import logging
from app.core.celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(name="purge_stale_tokens")
def purge_stale_tokens_task():
    """
    Periodic task to delete token records long past expiry.

    Scheduled hourly by Celery Beat (see celery_app.beat_schedule).
    """
    from app.core.database import SessionLocal
    from app.services.token_housekeeping import purge_stale_tokens

    db = SessionLocal()
    try:
        counts = purge_stale_tokens(db)
        return {"status": "success", "deleted": counts}
    except Exception as e:
        db.rollback()
        logger.error(f"Error purging stale tokens: {str(e)}")
        raise
    finally:
        db.close()
