"""Complete two-factor login handler.

Flow:
1. Verify the pending token (type ``2fa_pending``, 5 minute lifetime)
2. Load the user (must be active, unlocked, with 2FA enabled)
3. Verify the code: TOTP first, then backup code (consumed)
4. On a bad code: ``failed_2fa`` security event, audit, reject
5. Optionally trust the device (remember token returned)
6. Finalize the login
"""

from uuid import UUID

from src.application.commands.auth_commands import CompleteTwoFactorLogin
from src.application.dtos import LoginTokens
from src.application.errors import token_failure
from src.application.services import (
    DeviceTrustService,
    LoginContext,
    LoginFinalizer,
    RiskEngine,
    TrustDeviceInput,
    TrustedDeviceGrant,
    TwoFactorService,
)
from src.application.services.two_factor_service import (
    is_backup_code_format,
    is_totp_format,
    requires_second_factor,
)
from src.core.enums import ErrorCode
from src.core.errors import AuthenticationError, DomainError, ValidationError
from src.core.result import Failure, Result, Success
from src.domain.enums import AuditAction, SecurityEventType, SecuritySeverity
from src.domain.errors import TokenError
from src.domain.protocols import (
    AuditProtocol,
    GeolocationResolver,
    LoggerProtocol,
    TokenServiceProtocol,
    TokenType,
    UserRepository,
)


class CompleteTwoFactorLoginHandler:
    """Handler for CompleteTwoFactorLogin command."""

    def __init__(
        self,
        user_repo: UserRepository,
        token_service: TokenServiceProtocol,
        two_factor: TwoFactorService,
        device_trust: DeviceTrustService,
        risk_engine: RiskEngine,
        geolocation: GeolocationResolver,
        finalizer: LoginFinalizer,
        audit: AuditProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._user_repo = user_repo
        self._token_service = token_service
        self._two_factor = two_factor
        self._device_trust = device_trust
        self._risk_engine = risk_engine
        self._geolocation = geolocation
        self._finalizer = finalizer
        self._audit = audit
        self._logger = logger

    async def handle(self, cmd: CompleteTwoFactorLogin) -> Result[LoginTokens, DomainError]:
        """Handle the second login step.

        Returns:
            Success(LoginTokens), Failure(ValidationError) for a malformed
            code, Failure(AuthenticationError) otherwise.
        """
        # Step 1: Verify pending token
        match self._token_service.verify(cmd.pending_token, TokenType.TWO_FACTOR_PENDING):
            case Failure(error=reason):
                return Failure(error=token_failure(reason))
            case Success(value=claims):
                pass

        # Step 2: Load user
        try:
            user_id = UUID(claims.subject.user_id)
        except ValueError:
            return Failure(error=token_failure(TokenError.INVALID_TOKEN))
        user = await self._user_repo.find_by_id(user_id)
        if user is None or not user.can_login() or not requires_second_factor(user):
            return Failure(error=token_failure(TokenError.INVALID_TOKEN))

        # Step 3: Verify code
        code = cmd.code.strip()
        if not (is_totp_format(code) or is_backup_code_format(code)):
            return Failure(
                error=ValidationError(
                    code=ErrorCode.INVALID_TWO_FACTOR_CODE_FORMAT,
                    message="Invalid verification code format",
                    field="code",
                )
            )
        login_context = LoginContext(
            user_id=user.id,
            email=user.email,
            ip_address=cmd.ip_address,
            user_agent=cmd.user_agent,
            device_fingerprint=cmd.device_fingerprint,
        )
        if not await self._two_factor.verify_code(user.id, code):
            # Step 4: Record the failure
            await self._risk_engine.record_event(
                login_context,
                SecurityEventType.FAILED_2FA,
                SecuritySeverity.MEDIUM,
                metadata={"method": "totp" if is_totp_format(code) else "backup_code"},
            )
            await self._audit.record(
                action=AuditAction.TWO_FACTOR_FAILED,
                resource_type="user",
                user_id=user.id,
                resource_id=user.id,
                ip_address=cmd.ip_address,
                user_agent=cmd.user_agent,
            )
            return Failure(
                error=AuthenticationError(
                    code=ErrorCode.INVALID_TWO_FACTOR_CODE,
                    message="Invalid verification code",
                )
            )

        location = (
            await self._geolocation.resolve(cmd.ip_address) if cmd.ip_address else None
        )

        # Step 5: Trust device
        grant: TrustedDeviceGrant | None = None
        if cmd.trust_device and cmd.device_fingerprint:
            grant = await self._device_trust.trust(
                user.id,
                TrustDeviceInput(
                    email=user.email,
                    device_fingerprint=cmd.device_fingerprint,
                    user_agent=cmd.user_agent,
                    ip_address=cmd.ip_address,
                    location=location.display if location else None,
                    city=location.city if location and not location.is_local else None,
                    country=location.country if location and not location.is_local else None,
                ),
            )
            await self._audit.record(
                action=AuditAction.DEVICE_TRUSTED,
                resource_type="device",
                user_id=user.id,
                resource_id=grant.device_id,
                ip_address=cmd.ip_address,
                user_agent=cmd.user_agent,
            )

        # Step 6: Finalize
        tokens = await self._finalizer.finalize(
            user,
            remember_me=claims.remember_me,
            ip_address=cmd.ip_address,
            user_agent=cmd.user_agent,
            device_fingerprint=cmd.device_fingerprint,
            location=location,
            method="totp" if is_totp_format(code) else "backup_code",
            trusted_device=grant,
        )
        return Success(value=tokens)
