"""Device form factors derived from the user agent."""

from enum import Enum


class DeviceType(str, Enum):
    """Device form factor."""

    DESKTOP = "desktop"
    MOBILE = "mobile"
    TABLET = "tablet"
