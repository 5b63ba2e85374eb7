"""Security review commands (admin write operations)."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, kw_only=True)
class MarkSecurityEventReviewed:
    """Mark a security event as reviewed.

    Attributes:
        event_id: Security event to acknowledge.
        reviewer_id: Admin performing the review.
        ip_address: Client IP.
        user_agent: Client user agent.
    """

    event_id: UUID
    reviewer_id: UUID
    ip_address: str | None = None
    user_agent: str | None = None
