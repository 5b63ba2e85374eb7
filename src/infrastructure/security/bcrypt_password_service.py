"""Bcrypt password hashing service (adapter).

Implements PasswordHashingProtocol with bcrypt. Hashing is CPU-bound and
deliberately slow, so both operations run in a worker thread
(``asyncio.to_thread``) and never block the event loop serving other
requests.

Security:
    - Cost factor 12 by default (~250ms per hash)
    - Random salt per hash
    - bcrypt only reads the first 72 bytes of a password

Performance:
    - Cost factor is logarithmic: each +1 doubles computation time
    - Tests use cost 4 (bcrypt's minimum)
"""

import asyncio

import bcrypt


class BcryptPasswordService:
    """Bcrypt password hashing service.

    Usage:
        from src.core.container import get_password_service

        password_service = get_password_service()
        password_hash = await password_service.hash_password("SecureP@ssw0rd123")
        ok = await password_service.verify_password("SecureP@ssw0rd123", password_hash)
    """

    def __init__(self, cost_factor: int = 12) -> None:
        """Initialize bcrypt password service.

        Args:
            cost_factor: bcrypt rounds (4-20).

        Raises:
            ValueError: If cost_factor is outside 4-20.
        """
        if cost_factor < 4:
            msg = "Cost factor must be at least 4 (bcrypt minimum)"
            raise ValueError(msg)
        if cost_factor > 20:
            msg = "Cost factor above 20 is impractically slow"
            raise ValueError(msg)
        self._cost_factor = cost_factor

    async def hash_password(self, password: str) -> str:
        """Hash a plaintext password in a worker thread.

        Returns:
            60-character bcrypt hash ($2b$<cost>$<salt><hash>).
        """
        return await asyncio.to_thread(self._hash, password)

    async def verify_password(self, password: str, password_hash: str) -> bool:
        """Verify a password against a bcrypt hash in a worker thread.

        Returns:
            True on match. False on mismatch or malformed hash.
        """
        return await asyncio.to_thread(self._verify, password, password_hash)

    def _hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._cost_factor)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    @staticmethod
    def _verify(password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except (ValueError, AttributeError):
            # Malformed hash
            return False
