"""Security infrastructure adapters.

- Password hashing (bcrypt, off the event loop)
- JWT issuance/verification (RS256 or HS256)
- TOTP (pyotp)
- Opaque tokens and backup codes
"""

from src.infrastructure.security.bcrypt_password_service import BcryptPasswordService
from src.infrastructure.security.jwt_service import (
    JWTService,
    SigningKeys,
    load_signing_keys,
)
from src.infrastructure.security.secure_token_service import (
    BackupCodeService,
    SecureTokenService,
)
from src.infrastructure.security.totp_service import PyOTPService

__all__ = [
    "BackupCodeService",
    "BcryptPasswordService",
    "JWTService",
    "PyOTPService",
    "SecureTokenService",
    "SigningKeys",
    "load_signing_keys",
]
