"""Unit tests for domain value objects and entity rules.

Tests cover:
- Email normalisation and rejection
- Password complexity rules and masking
- GeoLocation display and haversine distance
- User lock state and remaining-minute rounding
- Session, RefreshToken and OneTimeToken lifecycle rules
"""

from datetime import UTC, datetime, timedelta

import pytest
from uuid_extensions import uuid7

from src.domain.entities import (
    EmailVerificationToken,
    RefreshToken,
    Session,
    User,
)
from src.domain.value_objects import Email, GeoLocation, Password, haversine_km

BOGOTA = GeoLocation(city="Bogotá", country="Colombia", latitude=4.711, longitude=-74.0721)
MEDELLIN = GeoLocation(city="Medellín", country="Colombia", latitude=6.2442, longitude=-75.5812)
MADRID = GeoLocation(city="Madrid", country="Spain", latitude=40.4168, longitude=-3.7038)
NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


@pytest.mark.unit
class TestEmail:
    def test_lower_cases_address(self):
        assert str(Email("Ana.Perez@Example.COM")) == "ana.perez@example.com"

    @pytest.mark.parametrize("value", ["", "not-an-email", "ana@", "@example.com"])
    def test_rejects_malformed_address(self, value: str):
        with pytest.raises(ValueError, match="Invalid email"):
            Email(value)


@pytest.mark.unit
class TestPassword:
    """Complexity policy, first failing rule reported."""

    def test_accepts_strong_password(self):
        assert Password("SecureP@ssw0rd1").value == "SecureP@ssw0rd1"

    @pytest.mark.parametrize(
        ("value", "message"),
        [
            ("Sh0rt!", "at least 8 characters"),
            ("securep@ssw0rd", "uppercase"),
            ("SECUREP@SSW0RD", "lowercase"),
            ("SecureP@ssword", "digit"),
            ("SecurePassw0rd", "special character"),
        ],
    )
    def test_rejects_weak_password(self, value: str, message: str):
        with pytest.raises(ValueError, match=message):
            Password(value)

    def test_plaintext_never_rendered(self):
        password = Password("SecureP@ssw0rd1")

        assert "SecureP" not in str(password)
        assert "SecureP" not in repr(password)
        assert str(password) == "*" * 15


@pytest.mark.unit
class TestGeoLocation:
    def test_display_city_and_country(self):
        assert BOGOTA.display == "Bogotá, Colombia"

    def test_display_local_network(self):
        assert GeoLocation.local_network().display == "Local Network"

    def test_display_unknown(self):
        assert GeoLocation().display == "Unknown"

    def test_local_network_has_no_coordinates(self):
        assert GeoLocation.local_network().has_coordinates is False

    def test_bogota_to_medellin(self):
        distance = haversine_km(BOGOTA, MEDELLIN)

        assert 230 <= distance <= 250

    def test_bogota_to_madrid(self):
        distance = haversine_km(BOGOTA, MADRID)

        assert 7900 <= distance <= 8100

    def test_distance_is_symmetric_and_zero_for_same_point(self):
        assert haversine_km(BOGOTA, MADRID) == haversine_km(MADRID, BOGOTA)
        assert haversine_km(BOGOTA, BOGOTA) == 0

    def test_distance_requires_coordinates(self):
        with pytest.raises(ValueError, match="latitude and longitude"):
            haversine_km(BOGOTA, GeoLocation(city="Nowhere"))


def make_user(**overrides: object) -> User:
    values: dict[str, object] = {
        "id": uuid7(),
        "email": "ana@example.com",
        "password_hash": "$2b$04$hash",
    }
    values.update(overrides)
    return User(**values)  # type: ignore[arg-type]


@pytest.mark.unit
class TestUserLockState:
    def test_never_locked(self):
        user = make_user()

        assert user.is_locked(NOW) is False
        assert user.lock_remaining_minutes(NOW) == 0
        assert user.can_login(NOW) is True

    def test_locked_until_future(self):
        user = make_user(locked_until=NOW + timedelta(minutes=119, seconds=10))

        assert user.is_locked(NOW) is True
        assert user.lock_remaining_minutes(NOW) == 120
        assert user.can_login(NOW) is False

    def test_lock_expired(self):
        user = make_user(locked_until=NOW - timedelta(seconds=1))

        assert user.is_locked(NOW) is False
        assert user.can_login(NOW) is True

    def test_inactive_user_cannot_login(self):
        assert make_user(is_active=False).can_login(NOW) is False

    def test_pending_two_factor_secret(self):
        assert make_user(two_factor_secret="ABC").has_pending_two_factor_secret() is True
        assert (
            make_user(two_factor_secret="ABC", two_factor_enabled=True)
            .has_pending_two_factor_secret()
            is False
        )

    def test_profile_omits_credentials(self):
        user = make_user(first_name="Ana", last_name="Pérez", two_factor_secret="SECRET")

        profile = user.to_profile()

        assert profile.email == "ana@example.com"
        assert not hasattr(profile, "password_hash")
        assert not hasattr(profile, "two_factor_secret")
        assert user.full_name == "Ana Pérez"


@pytest.mark.unit
class TestSessionLifecycle:
    def make_session(self, expires_at: datetime) -> Session:
        return Session(
            id=uuid7(),
            user_id=uuid7(),
            access_token_hash="a" * 64,
            refresh_token_hash="r" * 64,
            expires_at=expires_at,
        )

    def test_active_until_expiry(self):
        session = self.make_session(NOW + timedelta(days=7))

        assert session.is_active(NOW) is True
        assert session.is_active(NOW + timedelta(days=7)) is False

    def test_revoke_keeps_first_reason(self):
        session = self.make_session(NOW + timedelta(days=7))

        session.revoke("User logout")
        session.revoke("Password changed")

        assert session.is_revoked is True
        assert session.revoked_reason == "User logout"
        assert session.is_active(NOW) is False

    def test_rotate_swaps_digests(self):
        session = self.make_session(NOW + timedelta(days=1))
        new_expiry = NOW + timedelta(days=7)

        session.rotate("b" * 64, "s" * 64, new_expiry)

        assert session.access_token_hash == "b" * 64
        assert session.refresh_token_hash == "s" * 64
        assert session.expires_at == new_expiry


@pytest.mark.unit
class TestTokenRecords:
    def test_refresh_token_revoke_records_successor(self):
        record = RefreshToken(
            id=uuid7(),
            user_id=uuid7(),
            session_id=uuid7(),
            token_hash="r" * 64,
            expires_at=NOW + timedelta(days=7),
        )

        record.mark_used()
        record.revoke("Rotated", replaced_by="n" * 64)

        assert record.usage_count == 1
        assert record.is_valid(NOW) is False
        assert record.replaced_by_token_hash == "n" * 64

    def test_one_time_token_single_use(self):
        token = EmailVerificationToken(
            id=uuid7(),
            user_id=uuid7(),
            email="ana@example.com",
            token="t" * 64,
            expires_at=NOW + timedelta(hours=24),
        )

        assert token.is_valid(NOW) is True
        token.mark_used()
        assert token.is_valid(NOW) is False

    def test_one_time_token_expires(self):
        token = EmailVerificationToken(
            id=uuid7(),
            user_id=uuid7(),
            email="ana@example.com",
            token="t" * 64,
            expires_at=NOW,
        )

        assert token.is_valid(NOW) is False
