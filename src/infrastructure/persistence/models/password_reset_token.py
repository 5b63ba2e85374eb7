"""Password reset token database model.

Security:
    - token: 32 random bytes as hex (unguessable)
    - expires_at: 1 hour after issue
    - is_used: single use; consuming it revokes every session of the user
"""

from src.infrastructure.persistence.base import BaseModel
from src.infrastructure.persistence.models.one_time_token import OneTimeTokenColumns


class PasswordResetToken(OneTimeTokenColumns, BaseModel):
    """Token emailed on a password reset request."""

    __tablename__ = "password_reset_tokens"

    def __repr__(self) -> str:
        return (
            f"<PasswordResetToken("
            f"id={self.id}, "
            f"user_id={self.user_id}, "
            f"expires_at={self.expires_at}, "
            f"is_used={self.is_used}"
            f")>"
        )
