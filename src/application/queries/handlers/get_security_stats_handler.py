"""Security statistics query handler (admin).

Authorization is enforced at the route (``require_admin``); the handler
only bounds the window.
"""

from src.application.queries.session_queries import GetSecurityStats
from src.application.services import RiskEngine
from src.core.errors import DomainError
from src.core.result import Result, Success
from src.domain.protocols import SecurityStats

MIN_STATS_HOURS = 1
MAX_STATS_HOURS = 720


class GetSecurityStatsHandler:
    """Handler for GetSecurityStats query."""

    def __init__(self, risk_engine: RiskEngine) -> None:
        self._risk_engine = risk_engine

    async def handle(self, query: GetSecurityStats) -> Result[SecurityStats, DomainError]:
        hours = max(MIN_STATS_HOURS, min(query.hours, MAX_STATS_HOURS))
        stats = await self._risk_engine.get_security_stats(hours=hours)
        return Success(value=stats)
