"""Time-based one-time password protocol."""

from typing import Protocol


class TOTPProtocol(Protocol):
    """TOTP primitives (RFC 6238, 30 second steps, 6 digits)."""

    def generate_secret(self) -> str:
        """Return a new random base32 secret."""
        ...

    def provisioning_uri(self, secret: str, *, account_name: str, issuer: str) -> str:
        """Return an ``otpauth://`` URI for QR enrollment."""
        ...

    def verify(self, secret: str, code: str) -> bool:
        """Check a code against the secret within the allowed drift."""
        ...
