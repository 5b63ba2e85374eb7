"""Device enricher implementation using the user-agents library.

Turns user agent strings into the device descriptions used for session
lists and trusted-device names. Implements DeviceEnricher with fail-open
behavior.
"""

from user_agents import parse as parse_user_agent  # type: ignore[import-untyped]
from user_agents.parsers import UserAgent  # type: ignore[import-untyped]

from src.domain.enums import DeviceType
from src.domain.protocols import DeviceDetails, LoggerProtocol

UNKNOWN_DEVICE = "Unknown device"


class UserAgentDeviceEnricher:
    """Device enricher using the user-agents library.

    Naming:
        - Mobile: "{vendor or 'Mobile'} - {os}"
        - Tablet: "{vendor or 'Tablet'} - {os}"
        - Otherwise: "{browser} on {os}"

    Behavior:
        - Fail-open: unparseable agents yield a generic desktop description
        - Non-blocking: pure string parsing
    """

    def __init__(self, logger: LoggerProtocol | None = None) -> None:
        self._logger = logger

    def enrich(self, user_agent: str | None) -> DeviceDetails:
        """Parse a user agent string.

        Args:
            user_agent: Raw User-Agent header.

        Returns:
            DeviceDetails. Empty or unparseable input yields
            ``DeviceDetails(device_name="Unknown device")``.
        """
        if not user_agent:
            return DeviceDetails(device_name=UNKNOWN_DEVICE)

        try:
            ua: UserAgent = parse_user_agent(user_agent)
        except (TypeError, ValueError, AttributeError) as e:
            if self._logger is not None:
                self._logger.warning(
                    "Failed to parse user agent",
                    user_agent=user_agent[:100],
                    error_message=str(e),
                )
            return DeviceDetails(device_name=UNKNOWN_DEVICE)

        browser = _join(ua.browser.family, ua.browser.version_string)
        os_name = _join(ua.os.family, ua.os.version_string)
        vendor = ua.device.brand or None
        device_type = self._determine_device_type(ua)

        return DeviceDetails(
            device_name=self._build_device_name(device_type, browser, os_name, vendor),
            device_type=device_type,
            browser=browser,
            os=os_name,
            vendor=vendor if device_type != DeviceType.DESKTOP else None,
            is_bot=bool(ua.is_bot),
        )

    def _determine_device_type(self, ua: UserAgent) -> DeviceType:
        # Tablets also report is_mobile on some platforms; check tablet first
        if ua.is_tablet:
            return DeviceType.TABLET
        if ua.is_mobile:
            return DeviceType.MOBILE
        return DeviceType.DESKTOP

    def _build_device_name(
        self,
        device_type: DeviceType,
        browser: str | None,
        os_name: str | None,
        vendor: str | None,
    ) -> str:
        os_label = os_name or "Unknown OS"
        if device_type == DeviceType.MOBILE:
            return f"{vendor or 'Mobile'} - {os_label}"
        if device_type == DeviceType.TABLET:
            return f"{vendor or 'Tablet'} - {os_label}"
        return f"{browser or 'Unknown browser'} on {os_label}"


def _join(name: str | None, version: str | None) -> str | None:
    """Combine family and version ("Chrome 120.0")."""
    if not name or name == "Other":
        return None
    return f"{name} {version}".strip() if version else name
