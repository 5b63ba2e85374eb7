"""Severity levels for security events."""

from enum import Enum


class SecuritySeverity(str, Enum):
    """Security event severity (ascending)."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    def is_high_or_above(self) -> bool:
        """True for HIGH and CRITICAL."""
        return self in {SecuritySeverity.HIGH, SecuritySeverity.CRITICAL}
