"""Commands - Write operations that change state.

Commands represent user intent to perform an action. They are immutable
dataclasses with imperative names (RegisterUser, ChangePassword).

Each command has a corresponding handler that contains the business logic
to execute the command.
"""

from src.application.commands.auth_commands import (
    AuthenticateUser,
    ChangePassword,
    CompleteTwoFactorLogin,
    ConfirmPasswordReset,
    LoginUser,
    LogoutUser,
    RefreshAccessToken,
    RegisterUser,
    RequestPasswordReset,
    ResendVerification,
    VerifyEmail,
)
from src.application.commands.security_commands import MarkSecurityEventReviewed
from src.application.commands.session_commands import (
    RevokeAllSessions,
    RevokeAllTrustedDevices,
    RevokeSession,
    RevokeTrustedDevice,
    TrustCurrentDevice,
)
from src.application.commands.two_factor_commands import (
    DisableTwoFactor,
    EnableTwoFactor,
    RegenerateBackupCodes,
    SetupTwoFactor,
)

__all__ = [
    # Auth commands
    "AuthenticateUser",
    "ChangePassword",
    "CompleteTwoFactorLogin",
    "ConfirmPasswordReset",
    "LoginUser",
    "LogoutUser",
    "RefreshAccessToken",
    "RegisterUser",
    "RequestPasswordReset",
    "ResendVerification",
    "VerifyEmail",
    # Session and device commands
    "RevokeAllSessions",
    "RevokeAllTrustedDevices",
    "RevokeSession",
    "RevokeTrustedDevice",
    "TrustCurrentDevice",
    # Security review commands
    "MarkSecurityEventReviewed",
    # Two-factor commands
    "DisableTwoFactor",
    "EnableTwoFactor",
    "RegenerateBackupCodes",
    "SetupTwoFactor",
]
