"""Two-factor status query handler."""

from src.application.dtos import TwoFactorStatus
from src.application.queries.session_queries import GetTwoFactorStatus
from src.application.services import TwoFactorService
from src.core.errors import DomainError
from src.core.result import Result, Success


class GetTwoFactorStatusHandler:
    """Handler for GetTwoFactorStatus query."""

    def __init__(self, two_factor: TwoFactorService) -> None:
        self._two_factor = two_factor

    async def handle(self, query: GetTwoFactorStatus) -> Result[TwoFactorStatus, DomainError]:
        if not await self._two_factor.is_enabled(query.user_id):
            return Success(value=TwoFactorStatus(enabled=False, backup_codes_remaining=0))
        remaining = await self._two_factor.remaining_backup_codes(query.user_id)
        return Success(value=TwoFactorStatus(enabled=True, backup_codes_remaining=remaining))
