"""Login user handler.

Orchestrates the full login flow on top of AuthenticateUserHandler.

Flow:
1. Authenticate credentials (lockout counting happens there)
2. Run the risk engine; a denial rejects the login
3. Second-factor gate: a 2FA user on an untrusted device gets a
   LoginChallenge when the risk requires verification or the device is new
4. Otherwise finalize: tokens, session, refresh-token record, audit

States:
    anonymous -> credentials_validated -> [2fa_pending] -> session_established
"""

from src.application.commands.auth_commands import AuthenticateUser, LoginUser
from src.application.commands.handlers.authenticate_user_handler import (
    AuthenticateUserHandler,
    LoginError,
)
from src.application.dtos import LoginChallenge, LoginOutcome
from src.application.services import (
    DeviceTrustService,
    LoginContext,
    LoginFinalizer,
    RiskEngine,
    token_subject,
)
from src.application.services.two_factor_service import requires_second_factor
from src.core.enums import ErrorCode
from src.core.errors import AuthenticationError, DomainError
from src.core.result import Failure, Result, Success
from src.domain.entities import User
from src.domain.enums import AuditAction
from src.domain.protocols import AuditProtocol, LoggerProtocol, TokenServiceProtocol

NEW_DEVICE_REASON = "New device"


class LoginUserHandler:
    """Handler for LoginUser command."""

    def __init__(
        self,
        authenticate: AuthenticateUserHandler,
        risk_engine: RiskEngine,
        device_trust: DeviceTrustService,
        token_service: TokenServiceProtocol,
        finalizer: LoginFinalizer,
        audit: AuditProtocol,
        logger: LoggerProtocol,
        *,
        pending_expire_minutes: int = 5,
    ) -> None:
        """Initialize login handler with dependencies.

        Args:
            authenticate: Credential check.
            risk_engine: Login risk scoring.
            device_trust: Trusted device lookups.
            token_service: Issues the pending two-factor token.
            finalizer: Session establishment.
            audit: Audit trail.
            logger: Structured logger.
            pending_expire_minutes: Lifetime of the pending token.
        """
        self._authenticate = authenticate
        self._risk_engine = risk_engine
        self._device_trust = device_trust
        self._token_service = token_service
        self._finalizer = finalizer
        self._audit = audit
        self._logger = logger
        self._pending_expires_in = pending_expire_minutes * 60

    async def handle(self, cmd: LoginUser) -> Result[LoginOutcome, DomainError]:
        """Handle login.

        Returns:
            Success(LoginTokens) when the session is established,
            Success(LoginChallenge) when a second factor is required,
            Failure(AuthenticationError) otherwise.
        """
        # Step 1: Authenticate
        auth_result = await self._authenticate.handle(
            AuthenticateUser(
                email=cmd.email,
                password=cmd.password,
                ip_address=cmd.ip_address,
                user_agent=cmd.user_agent,
            )
        )
        if isinstance(auth_result, Failure):
            return auth_result
        user = auth_result.value.user

        # Step 2: Risk analysis
        assessment = await self._risk_engine.analyze_login_attempt(
            LoginContext(
                user_id=user.id,
                email=user.email,
                ip_address=cmd.ip_address,
                user_agent=cmd.user_agent,
                device_fingerprint=cmd.device_fingerprint,
            )
        )
        if not assessment.allowed:
            await self._audit.record(
                action=AuditAction.USER_LOGIN_FAILED,
                resource_type="session",
                user_id=user.id,
                ip_address=cmd.ip_address,
                user_agent=cmd.user_agent,
                context={
                    "reason": LoginError.DENIED_BY_RISK,
                    "risk_score": assessment.risk_score,
                    "alerts": assessment.alerts,
                },
            )
            self._logger.warning(
                "Login denied by risk engine",
                user_id=str(user.id),
                risk_score=assessment.risk_score,
            )
            return Failure(
                error=AuthenticationError(
                    code=ErrorCode.LOGIN_DENIED_BY_RISK,
                    message="Login blocked due to suspicious activity. Check your email.",
                )
            )

        # Step 3: Second-factor gate
        if requires_second_factor(user):
            trusted = cmd.remember_token is not None and await self._device_trust.is_trusted(
                user.id, cmd.device_fingerprint, cmd.remember_token
            )
            if not trusted:
                new_device = await self._device_trust.is_new_device(
                    user.id, cmd.device_fingerprint
                )
                if assessment.requires_additional_verification or new_device:
                    reasons = list(assessment.alerts)
                    if new_device:
                        reasons.append(NEW_DEVICE_REASON)
                    return Success(value=await self._challenge(cmd, user, reasons))

        # Step 4: Finalize
        tokens = await self._finalizer.finalize(
            user,
            remember_me=cmd.remember_me,
            ip_address=cmd.ip_address,
            user_agent=cmd.user_agent,
            device_fingerprint=cmd.device_fingerprint,
            location=assessment.location,
        )
        return Success(value=tokens)

    async def _challenge(
        self,
        cmd: LoginUser,
        user: User,
        reasons: list[str],
    ) -> LoginChallenge:
        pending_token = self._token_service.issue_two_factor_pending_token(
            token_subject(user), remember_me=cmd.remember_me
        )
        await self._audit.record(
            action=AuditAction.USER_LOGIN_CHALLENGED,
            resource_type="session",
            user_id=user.id,
            ip_address=cmd.ip_address,
            user_agent=cmd.user_agent,
            context={"reasons": reasons},
        )
        self._logger.info("Second factor required", user_id=str(user.id), reasons=reasons)
        return LoginChallenge(
            pending_token=pending_token,
            expires_in=self._pending_expires_in,
            reasons=tuple(reasons),
        )
