"""Mark security event reviewed handler (admin).

Stamps the reviewer and review time on the event. Authorization is
enforced at the route (``require_admin``).
"""

from src.application.commands.security_commands import MarkSecurityEventReviewed
from src.application.services import RiskEngine
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success
from src.domain.enums import AuditAction
from src.domain.protocols import AuditProtocol, LoggerProtocol


class MarkSecurityEventReviewedHandler:
    """Handler for MarkSecurityEventReviewed command."""

    def __init__(
        self,
        risk_engine: RiskEngine,
        audit: AuditProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._risk_engine = risk_engine
        self._audit = audit
        self._logger = logger

    async def handle(self, cmd: MarkSecurityEventReviewed) -> Result[None, DomainError]:
        """Handle the review.

        Returns:
            Success(None), or Failure(NotFoundError) with
            SECURITY_EVENT_NOT_FOUND.
        """
        result = await self._risk_engine.mark_reviewed(cmd.event_id, cmd.reviewer_id)
        if isinstance(result, Failure):
            return result

        await self._audit.record(
            action=AuditAction.SECURITY_EVENT_REVIEWED,
            resource_type="security_event",
            user_id=cmd.reviewer_id,
            resource_id=cmd.event_id,
            ip_address=cmd.ip_address,
            user_agent=cmd.user_agent,
        )
        self._logger.info(
            "Security event reviewed",
            event_id=str(cmd.event_id),
            reviewer_id=str(cmd.reviewer_id),
        )
        return Success(value=None)
