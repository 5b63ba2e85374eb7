"""Authentication handler dependency factories.

Request-scoped handler instances for authentication operations:
- Registration, login (with the second-factor step), logout
- Token refresh, email verification, password reset and change
- Session and trusted device management
- Two-factor enrollment and status
- Security event review and statistics (admin routes)

Every factory depends on ``get_auth_services``, so FastAPI builds one
session, one set of repositories and one set of services per request.

Usage:
    @router.post("/auth/login")
    async def login(
        data: LoginRequest,
        handler: LoginUserHandler = Depends(get_login_user_handler),
    ):
        result = await handler.handle(LoginUser(...))
"""

from fastapi import Depends

from src.application.commands.handlers.authenticate_user_handler import (
    AuthenticateUserHandler,
)
from src.application.commands.handlers.change_password_handler import (
    ChangePasswordHandler,
)
from src.application.commands.handlers.complete_two_factor_login_handler import (
    CompleteTwoFactorLoginHandler,
)
from src.application.commands.handlers.confirm_password_reset_handler import (
    ConfirmPasswordResetHandler,
)
from src.application.commands.handlers.login_user_handler import LoginUserHandler
from src.application.commands.handlers.mark_security_event_reviewed_handler import (
    MarkSecurityEventReviewedHandler,
)
from src.application.commands.handlers.logout_user_handler import LogoutUserHandler
from src.application.commands.handlers.refresh_access_token_handler import (
    RefreshAccessTokenHandler,
)
from src.application.commands.handlers.register_user_handler import (
    RegisterUserHandler,
)
from src.application.commands.handlers.request_password_reset_handler import (
    RequestPasswordResetHandler,
)
from src.application.commands.handlers.resend_verification_handler import (
    ResendVerificationHandler,
)
from src.application.commands.handlers.revoke_all_sessions_handler import (
    RevokeAllSessionsHandler,
)
from src.application.commands.handlers.revoke_session_handler import (
    RevokeSessionHandler,
)
from src.application.commands.handlers.trusted_device_handlers import (
    RevokeAllTrustedDevicesHandler,
    RevokeTrustedDeviceHandler,
    TrustCurrentDeviceHandler,
)
from src.application.commands.handlers.two_factor_handlers import (
    DisableTwoFactorHandler,
    EnableTwoFactorHandler,
    RegenerateBackupCodesHandler,
    SetupTwoFactorHandler,
)
from src.application.commands.handlers.verify_email_handler import VerifyEmailHandler
from src.application.queries.handlers.get_security_stats_handler import (
    GetSecurityStatsHandler,
)
from src.application.queries.handlers.get_two_factor_status_handler import (
    GetTwoFactorStatusHandler,
)
from src.application.queries.handlers.list_devices_handler import ListDevicesHandler
from src.application.queries.handlers.list_security_events_handler import (
    ListSecurityEventsHandler,
)
from src.application.queries.handlers.list_sessions_handler import ListSessionsHandler
from src.core.config import settings
from src.core.container.infrastructure import (
    get_audit,
    get_geolocation,
    get_logger,
    get_notification_dispatcher,
    get_password_service,
    get_token_service,
)
from src.core.container.services import AuthServices, get_auth_services


# ============================================================================
# Login Flow
# ============================================================================


def build_authenticate_user_handler(services: AuthServices) -> AuthenticateUserHandler:
    return AuthenticateUserHandler(
        user_repo=services.repos.users,
        password_service=get_password_service(),
        audit=get_audit(),
        logger=get_logger(),
        max_login_attempts=settings.max_login_attempts,
        lock_minutes=settings.account_lock_minutes,
    )


async def get_register_user_handler(
    services: AuthServices = Depends(get_auth_services),
) -> RegisterUserHandler:
    """Get RegisterUser command handler (request-scoped)."""
    return RegisterUserHandler(
        user_repo=services.repos.users,
        password_service=get_password_service(),
        email_tokens=services.email_tokens,
        audit=get_audit(),
        logger=get_logger(),
    )


async def get_authenticate_user_handler(
    services: AuthServices = Depends(get_auth_services),
) -> AuthenticateUserHandler:
    """Get AuthenticateUser command handler (request-scoped).

    Credential check only, no session. Also used inside the login handler.
    """
    return build_authenticate_user_handler(services)


async def get_login_user_handler(
    services: AuthServices = Depends(get_auth_services),
) -> LoginUserHandler:
    """Get LoginUser command handler (request-scoped)."""
    return LoginUserHandler(
        authenticate=build_authenticate_user_handler(services),
        risk_engine=services.risk,
        device_trust=services.devices,
        token_service=get_token_service(),
        finalizer=services.finalizer,
        audit=get_audit(),
        logger=get_logger(),
        pending_expire_minutes=settings.two_factor_pending_expire_minutes,
    )


async def get_complete_two_factor_login_handler(
    services: AuthServices = Depends(get_auth_services),
) -> CompleteTwoFactorLoginHandler:
    """Get CompleteTwoFactorLogin command handler (request-scoped)."""
    return CompleteTwoFactorLoginHandler(
        user_repo=services.repos.users,
        token_service=get_token_service(),
        two_factor=services.two_factor,
        device_trust=services.devices,
        risk_engine=services.risk,
        geolocation=get_geolocation(),
        finalizer=services.finalizer,
        audit=get_audit(),
        logger=get_logger(),
    )


async def get_refresh_token_handler(
    services: AuthServices = Depends(get_auth_services),
) -> RefreshAccessTokenHandler:
    """Get RefreshAccessToken command handler (request-scoped).

    Rotation runs inside the request's single unit of work.
    """
    return RefreshAccessTokenHandler(
        user_repo=services.repos.users,
        refresh_token_repo=services.repos.refresh_tokens,
        session_registry=services.sessions,
        token_service=get_token_service(),
        audit=get_audit(),
        logger=get_logger(),
        access_expire_minutes=settings.access_token_expire_minutes,
    )


async def get_logout_user_handler(
    services: AuthServices = Depends(get_auth_services),
) -> LogoutUserHandler:
    """Get LogoutUser command handler (request-scoped)."""
    return LogoutUserHandler(
        session_registry=services.sessions,
        audit=get_audit(),
        logger=get_logger(),
    )


# ============================================================================
# Email Verification and Passwords
# ============================================================================


async def get_verify_email_handler(
    services: AuthServices = Depends(get_auth_services),
) -> VerifyEmailHandler:
    """Get VerifyEmail command handler (request-scoped)."""
    return VerifyEmailHandler(
        user_repo=services.repos.users,
        verification_repo=services.repos.verification_tokens,
        notifications=get_notification_dispatcher(),
        audit=get_audit(),
        logger=get_logger(),
    )


async def get_resend_verification_handler(
    services: AuthServices = Depends(get_auth_services),
) -> ResendVerificationHandler:
    """Get ResendVerification command handler (request-scoped)."""
    return ResendVerificationHandler(
        user_repo=services.repos.users,
        email_tokens=services.email_tokens,
        logger=get_logger(),
    )


async def get_request_password_reset_handler(
    services: AuthServices = Depends(get_auth_services),
) -> RequestPasswordResetHandler:
    """Get RequestPasswordReset command handler (request-scoped)."""
    return RequestPasswordResetHandler(
        user_repo=services.repos.users,
        email_tokens=services.email_tokens,
        audit=get_audit(),
        logger=get_logger(),
    )


async def get_confirm_password_reset_handler(
    services: AuthServices = Depends(get_auth_services),
) -> ConfirmPasswordResetHandler:
    """Get ConfirmPasswordReset command handler (request-scoped)."""
    return ConfirmPasswordResetHandler(
        user_repo=services.repos.users,
        reset_repo=services.repos.reset_tokens,
        password_change=services.password_change,
        audit=get_audit(),
        logger=get_logger(),
    )


async def get_change_password_handler(
    services: AuthServices = Depends(get_auth_services),
) -> ChangePasswordHandler:
    """Get ChangePassword command handler (request-scoped)."""
    return ChangePasswordHandler(
        user_repo=services.repos.users,
        password_service=get_password_service(),
        password_change=services.password_change,
        audit=get_audit(),
        logger=get_logger(),
    )


# ============================================================================
# Sessions, Devices, Security Events
# ============================================================================


async def get_list_sessions_handler(
    services: AuthServices = Depends(get_auth_services),
) -> ListSessionsHandler:
    """Get ListUserSessions query handler (request-scoped)."""
    return ListSessionsHandler(session_registry=services.sessions)


async def get_revoke_session_handler(
    services: AuthServices = Depends(get_auth_services),
) -> RevokeSessionHandler:
    """Get RevokeSession command handler (request-scoped)."""
    return RevokeSessionHandler(
        session_registry=services.sessions,
        audit=get_audit(),
        logger=get_logger(),
    )


async def get_revoke_all_sessions_handler(
    services: AuthServices = Depends(get_auth_services),
) -> RevokeAllSessionsHandler:
    """Get RevokeAllSessions command handler (request-scoped)."""
    return RevokeAllSessionsHandler(
        session_registry=services.sessions,
        audit=get_audit(),
        logger=get_logger(),
    )


async def get_list_devices_handler(
    services: AuthServices = Depends(get_auth_services),
) -> ListDevicesHandler:
    """Get ListTrustedDevices query handler (request-scoped)."""
    return ListDevicesHandler(device_trust=services.devices)


async def get_trust_current_device_handler(
    services: AuthServices = Depends(get_auth_services),
) -> TrustCurrentDeviceHandler:
    """Get TrustCurrentDevice command handler (request-scoped)."""
    return TrustCurrentDeviceHandler(
        device_trust=services.devices,
        geolocation=get_geolocation(),
        audit=get_audit(),
    )


async def get_revoke_trusted_device_handler(
    services: AuthServices = Depends(get_auth_services),
) -> RevokeTrustedDeviceHandler:
    """Get RevokeTrustedDevice command handler (request-scoped)."""
    return RevokeTrustedDeviceHandler(device_trust=services.devices, audit=get_audit())


async def get_revoke_all_trusted_devices_handler(
    services: AuthServices = Depends(get_auth_services),
) -> RevokeAllTrustedDevicesHandler:
    """Get RevokeAllTrustedDevices command handler (request-scoped)."""
    return RevokeAllTrustedDevicesHandler(device_trust=services.devices, audit=get_audit())


async def get_list_security_events_handler(
    services: AuthServices = Depends(get_auth_services),
) -> ListSecurityEventsHandler:
    """Get ListSecurityEvents query handler (request-scoped)."""
    return ListSecurityEventsHandler(risk_engine=services.risk)


# ============================================================================
# Two-Factor Enrollment
# ============================================================================


async def get_setup_two_factor_handler(
    services: AuthServices = Depends(get_auth_services),
) -> SetupTwoFactorHandler:
    """Get SetupTwoFactor command handler (request-scoped)."""
    return SetupTwoFactorHandler(two_factor=services.two_factor)


async def get_enable_two_factor_handler(
    services: AuthServices = Depends(get_auth_services),
) -> EnableTwoFactorHandler:
    """Get EnableTwoFactor command handler (request-scoped)."""
    return EnableTwoFactorHandler(
        two_factor=services.two_factor, audit=get_audit(), logger=get_logger()
    )


async def get_disable_two_factor_handler(
    services: AuthServices = Depends(get_auth_services),
) -> DisableTwoFactorHandler:
    """Get DisableTwoFactor command handler (request-scoped)."""
    return DisableTwoFactorHandler(
        two_factor=services.two_factor, audit=get_audit(), logger=get_logger()
    )


async def get_regenerate_backup_codes_handler(
    services: AuthServices = Depends(get_auth_services),
) -> RegenerateBackupCodesHandler:
    """Get RegenerateBackupCodes command handler (request-scoped)."""
    return RegenerateBackupCodesHandler(
        two_factor=services.two_factor, audit=get_audit(), logger=get_logger()
    )


async def get_two_factor_status_handler(
    services: AuthServices = Depends(get_auth_services),
) -> GetTwoFactorStatusHandler:
    """Get GetTwoFactorStatus query handler (request-scoped)."""
    return GetTwoFactorStatusHandler(two_factor=services.two_factor)


# ============================================================================
# Security Review (admin)
# ============================================================================


async def get_security_stats_handler(
    services: AuthServices = Depends(get_auth_services),
) -> GetSecurityStatsHandler:
    """Get GetSecurityStats query handler (request-scoped).

    Mount behind ``require_admin``.
    """
    return GetSecurityStatsHandler(risk_engine=services.risk)


async def get_mark_security_event_reviewed_handler(
    services: AuthServices = Depends(get_auth_services),
) -> MarkSecurityEventReviewedHandler:
    """Get MarkSecurityEventReviewed command handler (request-scoped).

    Mount behind ``require_admin``.
    """
    return MarkSecurityEventReviewedHandler(
        risk_engine=services.risk, audit=get_audit(), logger=get_logger()
    )
