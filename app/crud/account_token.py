"""
CRUD operations for AccountToken model.

TokenStore is bound to one TokenPurpose, so each flow works against its own
token space while sharing a table. Records are keyed by account id; the
email-change store additionally matches on the pending address.
"""

import logging
import uuid
from datetime import datetime, timedelta
from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.codes import is_expired, utcnow
from app.models.account_token import AccountToken, TokenPurpose

logger = logging.getLogger(__name__)


class TokenStore:
    """Outstanding one-time codes for a single purpose."""

    def __init__(self, purpose: TokenPurpose):
        self.purpose = purpose

    def put(
        self,
        db: Session,
        user_id: uuid.UUID,
        code_hash: str,
        expires_at: datetime,
        new_email: Optional[str] = None,
    ) -> AccountToken:
        """
        Store a code for the account, replacing any outstanding one.

        Delete and insert commit together. If a concurrent put for the same
        account wins the unique constraint, the loser retries once so the
        last writer's code is the one left standing.

        Args:
            db: Database session
            user_id: Subject account id
            code_hash: bcrypt hash of the code
            expires_at: Absolute expiry timestamp
            new_email: Pending address (email change only)

        Returns:
            AccountToken: the stored record
        """
        for attempt in range(2):
            self.delete(db, user_id, commit=False)
            record = AccountToken(
                id=uuid.uuid4(),
                user_id=user_id,
                purpose=self.purpose,
                code_hash=code_hash,
                new_email=new_email,
                created_at=utcnow(),
                expires_at=expires_at,
            )
            db.add(record)
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                if attempt:
                    raise
                logger.warning(f"Concurrent {self.purpose.value} token write for user {user_id}, retrying")
                continue
            db.refresh(record)
            return record

    def get(self, db: Session, user_id: uuid.UUID, new_email: Optional[str] = None) -> Optional[AccountToken]:
        """
        Find the outstanding record for the account.

        When `new_email` is given, a record pending a different address
        is treated as absent.
        """
        query = db.query(AccountToken).filter(
            AccountToken.user_id == user_id,
            AccountToken.purpose == self.purpose,
        )
        if new_email is not None:
            query = query.filter(AccountToken.new_email == new_email)
        return query.first()

    def delete(self, db: Session, user_id: uuid.UUID, commit: bool = True) -> int:
        """Remove the account's record for this purpose. Absence is not an error."""
        deleted = db.query(AccountToken).filter(
            AccountToken.user_id == user_id,
            AccountToken.purpose == self.purpose,
        ).delete(synchronize_session=False)
        if commit:
            db.commit()
        return deleted

    def consume(self, db: Session, record: AccountToken) -> bool:
        """
        Delete exactly this record (not a newer one that superseded it).

        Does not commit. Returns False when the row is already gone, i.e.
        another request consumed or replaced it first.
        """
        deleted = db.query(AccountToken).filter(
            AccountToken.id == record.id,
        ).delete(synchronize_session=False)
        return deleted > 0

    @staticmethod
    def is_expired(record: AccountToken, now: Optional[datetime] = None) -> bool:
        return is_expired(record.expires_at, now)

    def stale_records(self, db: Session, older_than: timedelta, now: Optional[datetime] = None) -> List[AccountToken]:
        """Records whose expiry passed more than `older_than` ago."""
        cutoff = (now or utcnow()) - older_than
        return db.query(AccountToken).filter(
            AccountToken.purpose == self.purpose,
            AccountToken.expires_at < cutoff,
        ).all()


# One store per purpose
signup_tokens = TokenStore(TokenPurpose.SIGNUP)
password_reset_tokens = TokenStore(TokenPurpose.PASSWORD_RESET)
email_change_tokens = TokenStore(TokenPurpose.EMAIL_CHANGE)
