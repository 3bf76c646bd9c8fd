"""
Unit tests for one-time code generation, hashing and expiry.
"""

from datetime import datetime, timedelta, timezone

from app.core import codes
from app.core.config import Settings, settings
from app.core.security import pwd_context
from app.schemas.verification import VerifyEmailRequest


class TestGenerateCode:
    """Test code generation"""

    def test_codes_are_four_digit_strings_in_range(self):
        for _ in range(200):
            code = codes.generate_code()
            assert isinstance(code, str)
            assert len(code) == 4
            assert 1000 <= int(code) <= 9999

    def test_range_bounds_are_inclusive(self, monkeypatch):
        monkeypatch.setattr(codes.secrets, "randbelow", lambda n: 0)
        assert codes.generate_code() == "1000"

        monkeypatch.setattr(codes.secrets, "randbelow", lambda n: n - 1)
        assert codes.generate_code() == "9999"

    def test_code_length_matches_range(self):
        assert codes.code_length() == 4

    def test_short_values_are_zero_padded_and_accepted(self, monkeypatch):
        monkeypatch.setattr(settings, "CODE_MIN", 0)
        monkeypatch.setattr(codes.secrets, "randbelow", lambda n: 7)

        code = codes.generate_code()

        assert code == "0007"
        assert VerifyEmailRequest(confirmation_code=code).confirmation_code == "0007"


class TestHashing:
    """Test code hashing"""

    def test_hash_is_not_plaintext_and_verifies(self):
        code_hash = codes.hash_code("4821")

        assert code_hash != "4821"
        assert "4821" not in code_hash
        assert codes.check_code("4821", code_hash) is True
        assert codes.check_code("4822", code_hash) is False

    def test_same_code_hashes_differently(self):
        assert codes.hash_code("4821") != codes.hash_code("4821")

    def test_hash_uses_configured_rounds(self):
        code_hash = codes.hash_code("4821")
        rounds = int(code_hash.split("$")[2])
        assert rounds == settings.BCRYPT_ROUNDS

    def test_default_work_factor_is_ten_rounds(self):
        assert Settings.model_fields["BCRYPT_ROUNDS"].default == 10
        assert pwd_context.identify(codes.hash_code("4821")) == "bcrypt"


class TestExpiry:
    """Test absolute expiry handling"""

    def test_expiry_is_one_hour_after_issue(self):
        issued = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
        assert codes.expiry_from(issued) == issued + timedelta(hours=1)

    def test_not_expired_at_exact_expiry_instant(self):
        expires_at = datetime(2026, 1, 1, 13, 0, tzinfo=timezone.utc)
        assert codes.is_expired(expires_at, now=expires_at) is False

    def test_expired_just_after_expiry(self):
        expires_at = datetime(2026, 1, 1, 13, 0, tzinfo=timezone.utc)
        later = expires_at + timedelta(microseconds=1)
        assert codes.is_expired(expires_at, now=later) is True

    def test_naive_timestamps_are_read_as_utc(self):
        expires_at = datetime(2026, 1, 1, 13, 0)
        now = datetime(2026, 1, 1, 13, 30, tzinfo=timezone.utc)
        assert codes.is_expired(expires_at, now=now) is True

    def test_expiry_statement(self):
        assert codes.expiry_statement() == "1 hour"
