"""Two-factor engine.

TOTP enrollment and verification plus single-use backup codes.

States per user:
    disabled -> secret_generated -> enabled -> disabled

Flow (enrollment):
1. generate_secret: store an unconfirmed base32 secret, return the
   provisioning URI for the authenticator app
2. enable: confirm with a TOTP code, flip the flag, issue 10 backup codes
   (plaintext returned once, salted hashes stored)

Malformed codes are rejected before the store is read.
"""

import re
from dataclasses import dataclass
from uuid import UUID

from src.core.enums import ErrorCode
from src.core.errors import (
    AuthenticationError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from src.core.result import Failure, Result, Success
from src.domain.entities import User
from src.domain.protocols import (
    BackupCodeProtocol,
    LoggerProtocol,
    TOTPProtocol,
    UserRepository,
)

TOTP_CODE_PATTERN = re.compile(r"^\d{6}$")
BACKUP_CODE_PATTERN = re.compile(r"^[A-Fa-f0-9]{8}$")

BACKUP_CODE_COUNT = 10
LOW_BACKUP_CODES_THRESHOLD = 2


@dataclass(frozen=True, slots=True, kw_only=True)
class TwoFactorSetup:
    """Enrollment material shown to the user once.

    Attributes:
        secret: Base32 secret (manual entry).
        provisioning_uri: ``otpauth://`` URI (QR code).
    """

    secret: str
    provisioning_uri: str


@dataclass(frozen=True, slots=True, kw_only=True)
class BackupCodeVerification:
    """Outcome of consuming a backup code.

    Attributes:
        remaining: Unused codes left.
        low_backup_codes: True when two or fewer remain.
    """

    remaining: int
    low_backup_codes: bool


def is_totp_format(code: str) -> bool:
    """True for six ASCII digits."""
    return bool(TOTP_CODE_PATTERN.match(code))


def is_backup_code_format(code: str) -> bool:
    """True for eight hex characters (any case)."""
    return bool(BACKUP_CODE_PATTERN.match(code))


def _invalid_format(field: str = "code") -> ValidationError:
    return ValidationError(
        code=ErrorCode.INVALID_TWO_FACTOR_CODE_FORMAT,
        message="Invalid verification code format",
        field=field,
    )


def _invalid_code() -> AuthenticationError:
    return AuthenticationError(
        code=ErrorCode.INVALID_TWO_FACTOR_CODE,
        message="Invalid verification code",
    )


def _user_not_found(user_id: UUID) -> NotFoundError:
    return NotFoundError(
        code=ErrorCode.USER_NOT_FOUND,
        message="User not found",
        resource_type="User",
        resource_id=str(user_id),
    )


class TwoFactorService:
    """TOTP and backup-code operations for one user at a time.

    Usage:
        service = TwoFactorService(user_repo, totp, backup_codes, logger, issuer="Club")

        match await service.generate_secret(user.id):
            case Success(value=setup):
                render_qr(setup.provisioning_uri)
    """

    def __init__(
        self,
        user_repo: UserRepository,
        totp: TOTPProtocol,
        backup_codes: BackupCodeProtocol,
        logger: LoggerProtocol,
        *,
        issuer: str,
        backup_code_count: int = BACKUP_CODE_COUNT,
    ) -> None:
        self._user_repo = user_repo
        self._totp = totp
        self._backup_codes = backup_codes
        self._logger = logger
        self._issuer = issuer
        self._backup_code_count = backup_code_count

    async def generate_secret(self, user_id: UUID) -> Result[TwoFactorSetup, DomainError]:
        """Store a fresh unconfirmed secret.

        Calling it again before ``enable`` replaces the pending secret.

        Returns:
            Success(TwoFactorSetup), or Failure(ConflictError) if 2FA is
            already enabled.
        """
        user = await self._user_repo.find_by_id(user_id)
        if user is None:
            return Failure(error=_user_not_found(user_id))
        if user.two_factor_enabled:
            return Failure(
                error=ConflictError(
                    code=ErrorCode.TWO_FACTOR_ALREADY_ENABLED,
                    message="Two-factor authentication is already enabled",
                    resource_type="User",
                    conflicting_field="two_factor_enabled",
                )
            )

        secret = self._totp.generate_secret()
        uri = self._totp.provisioning_uri(secret, account_name=user.email, issuer=self._issuer)
        await self._user_repo.update_fields(user.id, two_factor_secret=secret)

        self._logger.info("Two-factor secret generated", user_id=str(user.id))
        return Success(value=TwoFactorSetup(secret=secret, provisioning_uri=uri))

    async def enable(self, user_id: UUID, code: str) -> Result[list[str], DomainError]:
        """Confirm the pending secret and turn 2FA on.

        Returns:
            Success(plaintext backup codes), shown once and never stored.
        """
        if not is_totp_format(code):
            return Failure(error=_invalid_format())

        user = await self._user_repo.find_by_id(user_id)
        if user is None:
            return Failure(error=_user_not_found(user_id))
        if user.two_factor_enabled:
            return Failure(
                error=ConflictError(
                    code=ErrorCode.TWO_FACTOR_ALREADY_ENABLED,
                    message="Two-factor authentication is already enabled",
                    resource_type="User",
                    conflicting_field="two_factor_enabled",
                )
            )
        if user.two_factor_secret is None:
            return Failure(
                error=ConflictError(
                    code=ErrorCode.TWO_FACTOR_SECRET_MISSING,
                    message="Generate a two-factor secret first",
                    resource_type="User",
                    conflicting_field="two_factor_secret",
                )
            )

        if not self._totp.verify(user.two_factor_secret, code):
            self._logger.warning("Two-factor enable rejected", user_id=str(user.id))
            return Failure(error=_invalid_code())

        codes = self._backup_codes.generate_codes(self._backup_code_count)
        await self._user_repo.update_fields(
            user.id,
            two_factor_enabled=True,
            backup_code_hashes=self._hash_all(user.id, codes),
        )

        self._logger.info("Two-factor enabled", user_id=str(user.id))
        return Success(value=codes)

    async def verify_totp(self, user_id: UUID, code: str) -> bool:
        """Check a TOTP code for an enabled user. Does not consume anything."""
        if not is_totp_format(code):
            return False
        user = await self._user_repo.find_by_id(user_id)
        if user is None or not user.two_factor_enabled or user.two_factor_secret is None:
            return False
        return self._totp.verify(user.two_factor_secret, code)

    async def verify_backup_code(
        self,
        user_id: UUID,
        code: str,
    ) -> Result[BackupCodeVerification, DomainError]:
        """Consume one backup code.

        The matched hash is removed atomically, so a code never works twice
        even under concurrent submissions.
        """
        if not is_backup_code_format(code):
            return Failure(error=_invalid_format())

        remaining = await self._user_repo.consume_backup_code(
            user_id, self._backup_codes.hash_code(user_id, code.upper())
        )
        if remaining is None:
            return Failure(error=_invalid_code())

        low = remaining <= LOW_BACKUP_CODES_THRESHOLD
        if low:
            self._logger.warning(
                "Backup codes running low",
                user_id=str(user_id),
                remaining=remaining,
            )
        else:
            self._logger.info("Backup code used", user_id=str(user_id), remaining=remaining)
        return Success(value=BackupCodeVerification(remaining=remaining, low_backup_codes=low))

    async def verify_code(self, user_id: UUID, code: str) -> bool:
        """Accept a TOTP code, or else consume a backup code."""
        if is_totp_format(code):
            return await self.verify_totp(user_id, code)
        if is_backup_code_format(code):
            result = await self.verify_backup_code(user_id, code)
            return isinstance(result, Success)
        return False

    async def disable(self, user_id: UUID, code: str) -> Result[None, DomainError]:
        """Turn 2FA off after a valid TOTP or backup code.

        Clears the secret and every backup code.
        """
        if not (is_totp_format(code) or is_backup_code_format(code)):
            return Failure(error=_invalid_format())

        user = await self._user_repo.find_by_id(user_id)
        if user is None:
            return Failure(error=_user_not_found(user_id))
        if not user.two_factor_enabled:
            return Failure(error=self._not_enabled())

        if not await self.verify_code(user.id, code):
            self._logger.warning("Two-factor disable rejected", user_id=str(user.id))
            return Failure(error=_invalid_code())

        await self._user_repo.update_fields(
            user.id,
            two_factor_enabled=False,
            two_factor_secret=None,
            backup_code_hashes=[],
        )
        self._logger.info("Two-factor disabled", user_id=str(user.id))
        return Success(value=None)

    async def regenerate_backup_codes(
        self,
        user_id: UUID,
        code: str,
    ) -> Result[list[str], DomainError]:
        """Replace the whole backup code set (requires a TOTP code)."""
        if not is_totp_format(code):
            return Failure(error=_invalid_format())

        user = await self._user_repo.find_by_id(user_id)
        if user is None:
            return Failure(error=_user_not_found(user_id))
        if not user.two_factor_enabled or user.two_factor_secret is None:
            return Failure(error=self._not_enabled())

        if not self._totp.verify(user.two_factor_secret, code):
            return Failure(error=_invalid_code())

        codes = self._backup_codes.generate_codes(self._backup_code_count)
        await self._user_repo.update_fields(
            user.id, backup_code_hashes=self._hash_all(user.id, codes)
        )
        self._logger.info("Backup codes regenerated", user_id=str(user.id))
        return Success(value=codes)

    async def is_enabled(self, user_id: UUID) -> bool:
        user = await self._user_repo.find_by_id(user_id)
        return user is not None and user.two_factor_enabled

    async def remaining_backup_codes(self, user_id: UUID) -> int:
        user = await self._user_repo.find_by_id(user_id)
        return len(user.backup_code_hashes) if user is not None else 0

    def _hash_all(self, user_id: UUID, codes: list[str]) -> list[str]:
        return [self._backup_codes.hash_code(user_id, code) for code in codes]

    @staticmethod
    def _not_enabled() -> ConflictError:
        return ConflictError(
            code=ErrorCode.TWO_FACTOR_NOT_ENABLED,
            message="Two-factor authentication is not enabled",
            resource_type="User",
            conflicting_field="two_factor_enabled",
        )


def requires_second_factor(user: User) -> bool:
    """True if the user has 2FA switched on with a confirmed secret."""
    return user.two_factor_enabled and user.two_factor_secret is not None
