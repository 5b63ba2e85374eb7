"""Random secret generation protocols.

Covers the opaque secrets of the auth core: verification and reset tokens,
device remember tokens, and two-factor backup codes.
"""

from typing import Protocol
from uuid import UUID


class SecureTokenGenerator(Protocol):
    """Opaque high-entropy tokens."""

    def generate_token(self) -> str:
        """Return 64 hex characters (32 random bytes)."""
        ...


class BackupCodeProtocol(Protocol):
    """Two-factor backup code generation and hashing.

    Codes are 8 upper-case hex characters. Only salted hashes are stored;
    the salt binds a hash to its owner so identical codes of different
    users never share a hash.
    """

    def generate_codes(self, count: int = 10) -> list[str]:
        """Return ``count`` fresh plaintext codes."""
        ...

    def hash_code(self, user_id: UUID, code: str) -> str:
        """Hash a code for storage or lookup (case-insensitive input)."""
        ...
