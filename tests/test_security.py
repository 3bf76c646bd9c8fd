"""
Tests for credential hashing and the validation error envelope.
"""

from app.core.config import settings
from app.core.security import get_password_hash, verify_password


class TestPasswordHashing:
    """Test bcrypt hashing helpers"""

    def test_hash_verifies(self):
        hashed = get_password_hash("TestPass123!")
        assert hashed != "TestPass123!"
        assert verify_password("TestPass123!", hashed)
        assert not verify_password("TestPass123?", hashed)

    def test_hash_uses_configured_rounds(self):
        hashed = get_password_hash("TestPass123!")
        assert int(hashed.split("$")[2]) == settings.BCRYPT_ROUNDS

    def test_same_secret_hashes_differently(self):
        assert get_password_hash("1234") != get_password_hash("1234")

    def test_long_secret_is_truncated_to_72_bytes(self):
        secret = "x" * 72
        hashed = get_password_hash(secret + "tail")
        assert verify_password(secret, hashed)


class TestValidationErrors:
    """Test malformed request bodies"""

    def test_missing_field_returns_tagged_body(self, client):
        response = client.post("/api/v1/user/request-password-reset", json={})

        assert response.status_code == 422
        body = response.json()
        assert body["status"] == "Failed"
        assert body["reason"] == "invalid_input"

    def test_bad_email_rejected(self, client):
        response = client.post("/api/v1/user/request-password-reset", json={"email": "not-an-email"})
        assert response.status_code == 422

    def test_non_numeric_code_rejected(self, client, make_user):
        user = make_user(verified=False)
        response = client.post(f"/api/v1/user/verify-email/{user.id}", json={"confirmation_code": "12a4"})
        assert response.status_code == 422
