"""Structured logging protocol.

Every service and handler of the auth core receives a logger through its
constructor. Messages are static strings; variable data goes into keyword
context so logs stay machine-searchable.

Security:
    - NEVER log passwords, raw tokens, TOTP secrets or backup codes
    - Log user ids, not emails, where an id is available

Usage:
    from src.core.container import get_logger

    logger = get_logger()
    logger.info("Login succeeded", user_id=str(user.id), session_id=str(session.id))

    request_logger = logger.bind(ip_address=ip_address)
    request_logger.warning("Login denied by risk engine", risk_score=85)
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Structured logger with five levels and context binding."""

    def debug(self, message: str, /, **context: Any) -> None:
        """Log diagnostic detail."""
        ...

    def info(self, message: str, /, **context: Any) -> None:
        """Log a normal operational event."""
        ...

    def warning(self, message: str, /, **context: Any) -> None:
        """Log a denial, degradation or suspicious condition."""
        ...

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log a failed operation.

        Args:
            message: Static message.
            error: Optional exception; its type and message are added to context.
            **context: Structured key-value context.
        """
        ...

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log a failure that needs immediate attention."""
        ...

    def bind(self, **context: Any) -> LoggerProtocol:
        """Return a logger that adds ``context`` to every entry.

        The original logger is unchanged.
        """
        ...

    def with_context(self, **context: Any) -> LoggerProtocol:
        """Alias for ``bind``."""
        ...
