"""Device enricher protocol.

Parses user agents into the device descriptions shown in session lists
and trusted-device names.
"""

from dataclasses import dataclass
from typing import Protocol

from src.domain.enums import DeviceType


@dataclass(frozen=True, slots=True, kw_only=True)
class DeviceDetails:
    """Parsed user agent.

    Attributes:
        device_name: Display name ("Chrome 120 on Windows 10", "Apple - iOS 17").
        device_type: Form factor.
        browser: "name version".
        os: "name version".
        vendor: Device brand (mobile and tablet only).
        is_bot: Whether the agent looks like a crawler.
    """

    device_name: str
    device_type: DeviceType = DeviceType.DESKTOP
    browser: str | None = None
    os: str | None = None
    vendor: str | None = None
    is_bot: bool = False


class DeviceEnricher(Protocol):
    """User agent parser.

    Behavior:
        - Fail-open: unparseable agents yield a generic description
        - Synchronous and fast (pure parsing, no I/O)
    """

    def enrich(self, user_agent: str | None) -> DeviceDetails:
        """Parse a user agent string."""
        ...
