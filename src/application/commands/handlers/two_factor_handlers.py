"""Two-factor management handlers (authenticated user).

- SetupTwoFactorHandler: generate a pending secret and provisioning URI
- EnableTwoFactorHandler: confirm enrollment with a TOTP code, return the
  one-time backup codes
- DisableTwoFactorHandler: turn 2FA off after a TOTP or backup code
- RegenerateBackupCodesHandler: replace every backup code after a TOTP code

Backup codes are shown exactly once, in the enable and regenerate results.
"""

from src.application.commands.two_factor_commands import (
    DisableTwoFactor,
    EnableTwoFactor,
    RegenerateBackupCodes,
    SetupTwoFactor,
)
from src.application.services import TwoFactorService, TwoFactorSetup
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success
from src.domain.enums import AuditAction
from src.domain.protocols import AuditProtocol, LoggerProtocol


class SetupTwoFactorHandler:
    """Handler for SetupTwoFactor command."""

    def __init__(self, two_factor: TwoFactorService) -> None:
        self._two_factor = two_factor

    async def handle(self, cmd: SetupTwoFactor) -> Result[TwoFactorSetup, DomainError]:
        """Start enrollment. Calling it again replaces the pending secret."""
        return await self._two_factor.generate_secret(cmd.user_id)


class EnableTwoFactorHandler:
    """Handler for EnableTwoFactor command."""

    def __init__(
        self,
        two_factor: TwoFactorService,
        audit: AuditProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._two_factor = two_factor
        self._audit = audit
        self._logger = logger

    async def handle(self, cmd: EnableTwoFactor) -> Result[list[str], DomainError]:
        """Confirm enrollment.

        Returns:
            Success(plaintext backup codes), or the service's Failure.
        """
        result = await self._two_factor.enable(cmd.user_id, cmd.code)
        if isinstance(result, Failure):
            return result

        await self._audit.record(
            action=AuditAction.TWO_FACTOR_ENABLED,
            resource_type="user",
            user_id=cmd.user_id,
            resource_id=cmd.user_id,
            ip_address=cmd.ip_address,
            user_agent=cmd.user_agent,
            context={"backup_codes": len(result.value)},
        )
        return result


class DisableTwoFactorHandler:
    """Handler for DisableTwoFactor command."""

    def __init__(
        self,
        two_factor: TwoFactorService,
        audit: AuditProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._two_factor = two_factor
        self._audit = audit
        self._logger = logger

    async def handle(self, cmd: DisableTwoFactor) -> Result[None, DomainError]:
        """Turn 2FA off (clears the secret and every backup code)."""
        result = await self._two_factor.disable(cmd.user_id, cmd.code)
        if isinstance(result, Failure):
            return result

        await self._audit.record(
            action=AuditAction.TWO_FACTOR_DISABLED,
            resource_type="user",
            user_id=cmd.user_id,
            resource_id=cmd.user_id,
            ip_address=cmd.ip_address,
            user_agent=cmd.user_agent,
        )
        self._logger.warning("Two-factor authentication disabled", user_id=str(cmd.user_id))
        return Success(value=None)


class RegenerateBackupCodesHandler:
    """Handler for RegenerateBackupCodes command."""

    def __init__(
        self,
        two_factor: TwoFactorService,
        audit: AuditProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._two_factor = two_factor
        self._audit = audit
        self._logger = logger

    async def handle(self, cmd: RegenerateBackupCodes) -> Result[list[str], DomainError]:
        """Replace the backup codes. Old codes stop working immediately."""
        result = await self._two_factor.regenerate_backup_codes(cmd.user_id, cmd.code)
        if isinstance(result, Failure):
            return result

        await self._audit.record(
            action=AuditAction.BACKUP_CODES_REGENERATED,
            resource_type="user",
            user_id=cmd.user_id,
            resource_id=cmd.user_id,
            ip_address=cmd.ip_address,
            user_agent=cmd.user_agent,
        )
        return result
