"""Opaque token and backup code generation.

Verification tokens, reset tokens and device remember tokens are 32 random
bytes rendered as 64 hex characters; they are unguessable, so they are
stored as-is and looked up by value.

Backup codes are 8 upper-case hex characters. They are short enough to
type, so only an HMAC-SHA256 of them is stored. The HMAC key is a server
pepper and the message includes the owner's id, which salts every hash per
user.
"""

import hashlib
import hmac
import secrets
from uuid import UUID

TOKEN_BYTES = 32
BACKUP_CODE_BYTES = 4


class SecureTokenService:
    """High-entropy token generator.

    Example:
        >>> token = SecureTokenService().generate_token()
        >>> len(token)
        64
    """

    def __init__(self, token_bytes: int = TOKEN_BYTES) -> None:
        self._token_bytes = token_bytes

    def generate_token(self) -> str:
        """Return a random hex token."""
        return secrets.token_hex(self._token_bytes)


class BackupCodeService:
    """Backup code generation and salted hashing.

    Usage:
        service = BackupCodeService(pepper=settings.backup_code_pepper)
        codes = service.generate_codes()          # shown to the user once
        hashes = [service.hash_code(user.id, c) for c in codes]  # persisted
    """

    def __init__(self, pepper: str) -> None:
        """Initialize with the server-side pepper.

        Raises:
            ValueError: If the pepper is empty.
        """
        if not pepper:
            raise ValueError("Backup code pepper must not be empty")
        self._pepper = pepper.encode("utf-8")

    def generate_codes(self, count: int = 10) -> list[str]:
        """Return ``count`` distinct codes of 8 upper-case hex characters."""
        codes: set[str] = set()
        while len(codes) < count:
            codes.add(secrets.token_hex(BACKUP_CODE_BYTES).upper())
        return sorted(codes)

    def hash_code(self, user_id: UUID, code: str) -> str:
        """HMAC-SHA256 of ``user_id:CODE`` keyed by the pepper."""
        message = f"{user_id}:{code.strip().upper()}".encode("utf-8")
        return hmac.new(self._pepper, message, hashlib.sha256).hexdigest()
