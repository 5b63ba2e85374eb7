"""Two-factor management commands (CQRS write operations).

All of them act on the authenticated caller.
"""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, kw_only=True)
class SetupTwoFactor:
    """Generate an unconfirmed TOTP secret.

    Attributes:
        user_id: Authenticated user.
    """

    user_id: UUID
    ip_address: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True, kw_only=True)
class EnableTwoFactor:
    """Confirm the pending secret with a TOTP code.

    Attributes:
        user_id: Authenticated user.
        code: Six-digit TOTP code.
    """

    user_id: UUID
    code: str
    ip_address: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True, kw_only=True)
class DisableTwoFactor:
    """Turn two-factor off.

    Attributes:
        user_id: Authenticated user.
        code: TOTP code or backup code.
    """

    user_id: UUID
    code: str
    ip_address: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True, kw_only=True)
class RegenerateBackupCodes:
    """Replace every backup code.

    Attributes:
        user_id: Authenticated user.
        code: Six-digit TOTP code.
    """

    user_id: UUID
    code: str
    ip_address: str | None = None
    user_agent: str | None = None
