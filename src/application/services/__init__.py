"""Application services.

Engines shared by several command handlers. Each depends only on domain
protocols.

Usage:
    from src.application.services import RiskEngine, SessionRegistry
"""

from src.application.services.device_trust_service import (
    DeviceTrustService,
    TrustDeviceInput,
    TrustedDeviceGrant,
)
from src.application.services.email_token_service import EmailTokenService
from src.application.services.login_finalizer import LoginFinalizer, token_subject
from src.application.services.notifications import notify
from src.application.services.password_change_service import PasswordChangeService
from src.application.services.risk_engine import (
    LoginContext,
    RiskAssessment,
    RiskEngine,
    RiskThresholds,
)
from src.application.services.session_registry import (
    SessionRegistry,
    SessionRevokeReason,
    digest_token,
)
from src.application.services.two_factor_service import (
    BackupCodeVerification,
    TwoFactorService,
    TwoFactorSetup,
)

__all__ = [
    "BackupCodeVerification",
    "DeviceTrustService",
    "EmailTokenService",
    "LoginContext",
    "LoginFinalizer",
    "PasswordChangeService",
    "RiskAssessment",
    "RiskEngine",
    "RiskThresholds",
    "SessionRegistry",
    "SessionRevokeReason",
    "TrustDeviceInput",
    "TrustedDeviceGrant",
    "TwoFactorService",
    "TwoFactorSetup",
    "digest_token",
    "notify",
    "token_subject",
]
