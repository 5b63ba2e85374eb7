"""Password hashing protocol.

Hashing is deliberately slow, so the port is async: implementations run the
work off the event loop.

Architecture:
    - Domain defines protocol (port)
    - Infrastructure implements adapter (BcryptPasswordService)
"""

from typing import Protocol


class PasswordHashingProtocol(Protocol):
    """Password hashing and verification interface.

    Usage:
        password_hash = await password_service.hash_password("SecureP@ssw0rd123")
        ok = await password_service.verify_password("SecureP@ssw0rd123", password_hash)
    """

    async def hash_password(self, password: str) -> str:
        """Hash a plaintext password.

        Returns:
            Hash string (bcrypt format: $2b$12$...).
        """
        ...

    async def verify_password(self, password: str, password_hash: str) -> bool:
        """Verify a plaintext password against a hash.

        Returns:
            True if it matches. False for mismatches and malformed hashes
            (never raises).
        """
        ...
