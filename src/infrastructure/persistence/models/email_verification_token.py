"""Email verification token database model.

Security:
    - token: 32 random bytes as hex (unguessable)
    - expires_at: 24 hours after issue
    - is_used: single use, permanently invalid once set
"""

from src.infrastructure.persistence.base import BaseModel
from src.infrastructure.persistence.models.one_time_token import OneTimeTokenColumns


class EmailVerificationToken(OneTimeTokenColumns, BaseModel):
    """Token emailed at registration (and on resend).

    Lifecycle:
        1. Created on registration or resend (older unused tokens superseded)
        2. Link followed, token marked used
        3. User.is_email_verified set to True
    """

    __tablename__ = "email_verification_tokens"

    def __repr__(self) -> str:
        return (
            f"<EmailVerificationToken("
            f"id={self.id}, "
            f"user_id={self.user_id}, "
            f"expires_at={self.expires_at}, "
            f"is_used={self.is_used}"
            f")>"
        )
