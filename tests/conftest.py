"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown (in-memory SQLite)
- FastAPI test client with overridden dependencies
- A fake SES client that records outgoing emails
"""

import os

# Must be set before app modules read Settings
os.environ.setdefault("SQLALCHEMY_DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JSON_LOGS", "false")

import re
import uuid
from datetime import timedelta

import pytest
from botocore.exceptions import ClientError
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core import codes
from app.core.config import settings
from app.core.database import Base, get_db
from app.core.deps import get_email_service
from app.core.security import get_password_hash
from app.models.account_token import AccountToken, TokenPurpose
from app.models.user import User
from app.services.email_service import EmailService
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeSESClient:
    """Stands in for boto3's SES client; records messages instead of sending."""

    def __init__(self):
        self.messages = []
        self.fail = False

    def send_email(self, Source, Destination, Message):
        if self.fail:
            raise ClientError(
                {"Error": {"Code": "MessageRejected", "Message": "Email address is not verified"}},
                "SendEmail",
            )
        self.messages.append({
            "source": Source,
            "to": Destination["ToAddresses"][0],
            "subject": Message["Subject"]["Data"],
            "text": Message["Body"]["Text"]["Data"],
            "html": Message["Body"]["Html"]["Data"],
        })
        return {"MessageId": f"msg-{len(self.messages)}"}

    def last_code(self, to=None) -> str:
        """Plaintext code from the most recent email (optionally to one address)."""
        messages = [m for m in self.messages if to is None or m["to"] == to]
        assert messages, f"no email sent to {to}"
        match = re.search(r"^\s*(\d{4})\s*$", messages[-1]["text"], re.MULTILINE)
        assert match, "no code in email body"
        return match.group(1)


@pytest.fixture
def db_session():
    """
    Create a fresh database for each test.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def ses():
    return FakeSESClient()


@pytest.fixture
def email_service(ses):
    return EmailService(settings, ses_client=ses)


@pytest.fixture
def client(db_session, email_service):
    """
    FastAPI test client with overridden database and email dependencies.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_service] = lambda: email_service

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def fixed_codes(monkeypatch):
    """
    Make generate_code hand out the given codes in order.

    Usage: fixed_codes("1111", "2222")
    """
    def _set(*values):
        queue = list(values)
        monkeypatch.setattr(codes, "generate_code", lambda: queue.pop(0))
    return _set


@pytest.fixture
def make_user(db_session):
    """Factory inserting an account directly."""
    def _make(
        email="test@example.com",
        phone_number="5550100",
        password="TestPass123!",
        verified=True,
    ) -> User:
        user = User(
            id=uuid.uuid4(),
            first_name="Test",
            last_name="User",
            email=email,
            phone_number=phone_number,
            hashed_password=get_password_hash(password),
            is_verified=verified,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _make


@pytest.fixture
def expire_token(db_session):
    """Move a stored token's expiry into the past."""
    def _expire(user_id, purpose: TokenPurpose, ago=timedelta(minutes=1)):
        record = db_session.query(AccountToken).filter(
            AccountToken.user_id == user_id,
            AccountToken.purpose == purpose,
        ).one()
        record.expires_at = codes.utcnow() - ago
        db_session.commit()
    return _expire


@pytest.fixture
def other_session(db_session):
    """Second session on the same database, acting as a concurrent request."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def after_code_check(monkeypatch, other_session):
    """
    Run `action(other_session)` right after a submitted code matches,
    before the flow consumes the record.

    Usage: after_code_check(lambda db: signup_tokens.put(db, ...))
    """
    def _set(action):
        real_check = codes.check_code

        def check_then_act(code, code_hash):
            matched = real_check(code, code_hash)
            if matched:
                action(other_session)
            return matched

        monkeypatch.setattr(codes, "check_code", check_then_act)
    return _set


@pytest.fixture
def signup_data():
    """Valid signup payload"""
    return {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "a@x.com",
        "phone_number": "5550123",
        "password": "SecurePass123",
    }
