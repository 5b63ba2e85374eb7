"""TOTP adapter built on pyotp.

RFC 6238 codes: 6 digits, 30 second steps. Verification accepts codes from
up to ``valid_window`` steps before or after the current one to absorb
clock drift on the user's device (±2 steps, about ±60 seconds, by default).
"""

import pyotp

SECRET_LENGTH = 32


class PyOTPService:
    """TOTP secret generation, provisioning and verification.

    Usage:
        totp = PyOTPService()
        secret = totp.generate_secret()
        uri = totp.provisioning_uri(secret, account_name=user.email, issuer="Membership Auth")
        totp.verify(secret, "492039")
    """

    def __init__(self, valid_window: int = 2) -> None:
        """Initialize the adapter.

        Args:
            valid_window: Accepted drift in 30 second steps on either side.
        """
        self._valid_window = valid_window

    def generate_secret(self) -> str:
        """Random base32 secret (32 characters, 160 bits)."""
        return pyotp.random_base32(length=SECRET_LENGTH)

    def provisioning_uri(self, secret: str, *, account_name: str, issuer: str) -> str:
        """``otpauth://totp/...`` URI for authenticator apps."""
        return pyotp.TOTP(secret).provisioning_uri(name=account_name, issuer_name=issuer)

    def verify(self, secret: str, code: str) -> bool:
        """Check a 6 digit code within the allowed drift."""
        return pyotp.TOTP(secret).verify(code, valid_window=self._valid_window)
