"""
Tests for password reset by emailed code.
"""

from datetime import timedelta

from app.core.config import settings
from app.core import codes
from app.core.security import verify_password
from app.crud.account_token import password_reset_tokens
from app.models.account_token import AccountToken, TokenPurpose
from app.services import password_reset_flow


def _request_reset(client, email):
    return client.post("/api/v1/user/request-password-reset", json={"email": email})


def _reset(client, user_id, code, new_password="NewPass456"):
    return client.post("/api/v1/user/reset-password", json={
        "user_id": str(user_id),
        "reset_code": code,
        "new_password": new_password,
    })


class TestRequestReset:
    """Test starting a reset"""

    def test_unverified_account_cannot_reset(self, client, make_user, ses):
        make_user(verified=False)

        body = _request_reset(client, "test@example.com").json()

        assert body["status"] == "Failed"
        assert body["reason"] == "not_verified"
        assert ses.messages == []

    def test_unknown_email(self, client):
        body = _request_reset(client, "nobody@example.com").json()
        assert body["status"] == "Failed"
        assert body["reason"] == "not_found"
        assert body["message"] == "No account with the given email exists"

    def test_verified_account_receives_code(self, client, make_user, ses):
        user = make_user()

        body = _request_reset(client, "test@example.com").json()

        assert body["status"] == "Pending"
        assert body["data"] == str(user.id)
        assert ses.messages[-1]["to"] == "test@example.com"
        assert ses.messages[-1]["subject"] == "Reset your password"

    def test_new_request_supersedes_previous_code(self, client, db_session, make_user, fixed_codes):
        user = make_user()
        fixed_codes("1111", "2222")
        _request_reset(client, "test@example.com")
        _request_reset(client, "test@example.com")

        assert _reset(client, user.id, "1111").json()["reason"] == "invalid_code"
        assert _reset(client, user.id, "2222").json()["status"] == "Success"

    def test_dispatch_failure(self, client, make_user, ses):
        make_user()
        ses.fail = True

        body = _request_reset(client, "test@example.com").json()

        assert body["status"] == "Failed"
        assert body["reason"] == "dispatch_error"


class TestCompleteReset:
    """Test finishing a reset"""

    def test_wrong_code_keeps_record_then_right_code_succeeds(self, client, db_session, make_user, ses):
        user = make_user(password="OldPass123")
        user_id = user.id
        _request_reset(client, "test@example.com")
        code = ses.last_code()
        wrong = "1000" if code != "1000" else "1001"

        body = _reset(client, user_id, wrong).json()
        assert body["reason"] == "invalid_code"
        assert password_reset_tokens.get(db_session, user_id) is not None

        body = _reset(client, user_id, code).json()
        assert body["status"] == "Success"
        assert password_reset_tokens.get(db_session, user_id) is None

        db_session.refresh(user)
        assert verify_password("NewPass456", user.hashed_password)
        assert not verify_password("OldPass123", user.hashed_password)

    def test_code_is_single_use(self, client, make_user, ses):
        user = make_user()
        _request_reset(client, "test@example.com")
        code = ses.last_code()

        assert _reset(client, user.id, code).json()["status"] == "Success"
        again = _reset(client, user.id, code, new_password="Another789").json()
        assert again["status"] == "Failed"
        assert again["reason"] == "no_pending_request"

    def test_expired_code_is_removed(self, client, db_session, make_user, ses, expire_token):
        user = make_user()
        user_id = user.id
        _request_reset(client, "test@example.com")
        code = ses.last_code()
        expire_token(user_id, TokenPurpose.PASSWORD_RESET, ago=timedelta(minutes=5))

        body = _reset(client, user_id, code).json()

        assert body["status"] == "Failed"
        assert body["reason"] == "expired"
        assert password_reset_tokens.get(db_session, user_id) is None
        db_session.refresh(user)
        assert verify_password("TestPass123!", user.hashed_password)

    def test_no_request(self, db_session, make_user):
        user = make_user()
        result = password_reset_flow.complete_password_reset(db_session, user.id, "1234", "Whatever1")
        assert result.reason == "no_pending_request"
        assert result.message == "Password reset request not found"

    def test_new_password_skips_signup_strength_rules(self, client, db_session, make_user, ses):
        user = make_user()
        _request_reset(client, "test@example.com")

        body = _reset(client, user.id, ses.last_code(), new_password="abc").json()

        assert body["status"] == "Success"
        db_session.refresh(user)
        assert verify_password("abc", user.hashed_password)

    def test_new_password_uses_full_work_factor(self, client, db_session, make_user, ses):
        user = make_user()
        _request_reset(client, "test@example.com")
        _reset(client, user.id, ses.last_code())

        db_session.refresh(user)
        rounds = int(user.hashed_password.split("$")[2])
        assert rounds == settings.BCRYPT_ROUNDS

    def test_accepts_original_field_names(self, client, make_user, ses):
        user = make_user()
        _request_reset(client, "test@example.com")

        response = client.post("/api/v1/user/reset-password", json={
            "userId": str(user.id),
            "resetString": ses.last_code(),
            "newPassword": "NewPass456",
        })
        assert response.json()["status"] == "Success"

    def test_concurrent_reset_with_same_code_applies_once(self, db_session, make_user, after_code_check):
        user = make_user(password="OldPass123")
        user_id = user.id
        record = password_reset_tokens.put(db_session, user_id, codes.hash_code("4821"), codes.expiry_from())
        record_id = record.id

        def consume_elsewhere(other):
            password_reset_tokens.consume(other, AccountToken(id=record_id))
            other.commit()

        after_code_check(consume_elsewhere)

        result = password_reset_flow.complete_password_reset(db_session, user_id, "4821", "NewPass456")

        assert result.reason == "no_pending_request"
        db_session.refresh(user)
        assert verify_password("OldPass123", user.hashed_password)
        assert password_reset_tokens.get(db_session, user_id) is None
