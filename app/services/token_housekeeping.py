"""
Removal of long-dead token records.

Expiry is enforced when a code is submitted, so records nobody comes back
for would otherwise stay forever. The sweep only touches records that expired
more than TOKEN_PURGE_AFTER_HOURS ago; inside that window a submission still
gets the "expired" outcome and its normal cleanup.
"""

import logging
from datetime import datetime, timedelta
from typing import Dict, Optional
from sqlalchemy.orm import Session

from app.core.config import settings
from app.crud import user as user_crud
from app.crud.account_token import email_change_tokens, password_reset_tokens, signup_tokens

logger = logging.getLogger(__name__)


def purge_stale_tokens(db: Session, now: Optional[datetime] = None) -> Dict[str, int]:
    """
    Delete records past expiry + grace period.

    Stale signup records take their still-unverified account with them,
    the same end state an expired confirmation produces.

    Returns:
        Dict[str, int]: deleted counts per purpose plus deleted accounts
    """
    grace = timedelta(hours=settings.TOKEN_PURGE_AFTER_HOURS)
    counts = {"accounts": 0}

    for store in (signup_tokens, password_reset_tokens, email_change_tokens):
        records = store.stale_records(db, grace, now)
        for record in records:
            store.consume(db, record)
            if store is signup_tokens:
                user = user_crud.get_by_id(db, record.user_id)
                if user and not user.is_verified:
                    user_crud.delete(db, user, commit=False)
                    counts["accounts"] += 1
        counts[store.purpose.value] = len(records)

    db.commit()
    logger.info(f"Purged stale tokens: {counts}")
    return counts
