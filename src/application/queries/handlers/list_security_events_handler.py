"""List security events query handler."""

from src.application.queries.session_queries import ListSecurityEvents
from src.application.services import RiskEngine
from src.core.errors import DomainError
from src.core.result import Result, Success
from src.domain.entities import SecurityEvent

MAX_EVENTS_LIMIT = 200


class ListSecurityEventsHandler:
    """Handler for a user's recent security events, newest first."""

    def __init__(self, risk_engine: RiskEngine) -> None:
        self._risk_engine = risk_engine

    async def handle(self, query: ListSecurityEvents) -> Result[list[SecurityEvent], DomainError]:
        limit = max(1, min(query.limit, MAX_EVENTS_LIMIT))
        events = await self._risk_engine.get_user_security_events(query.user_id, limit=limit)
        return Success(value=events)
