"""Unit tests for the login context enrichers.

Tests cover:
- UserAgentDeviceEnricher: desktop, mobile, tablet, empty agents
- GeoIPResolver: private and invalid addresses, missing database, cache hits
"""

from dataclasses import asdict
from unittest.mock import AsyncMock, Mock

import pytest

from src.core.result import Success
from src.domain.enums import DeviceType
from src.domain.value_objects import GeoLocation
from src.infrastructure.enrichers import GeoIPResolver, UserAgentDeviceEnricher
from tests.conftest import CHROME_UA

IPHONE_UA = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_1 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.1 Mobile/15E148 Safari/604.1"
)
IPAD_UA = (
    "Mozilla/5.0 (iPad; CPU OS 16_6 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/16.6 Mobile/15E148 Safari/604.1"
)


@pytest.mark.unit
class TestUserAgentDeviceEnricher:
    def test_desktop_browser(self):
        details = UserAgentDeviceEnricher().enrich(CHROME_UA)

        assert details.device_type == DeviceType.DESKTOP
        assert details.browser is not None and details.browser.startswith("Chrome 120")
        assert details.os == "Windows 10"
        assert details.device_name == f"{details.browser} on Windows 10"
        assert details.vendor is None

    def test_mobile_device(self):
        details = UserAgentDeviceEnricher().enrich(IPHONE_UA)

        assert details.device_type == DeviceType.MOBILE
        assert details.device_name.startswith("Apple - iOS")

    def test_tablet_device(self):
        details = UserAgentDeviceEnricher().enrich(IPAD_UA)

        assert details.device_type == DeviceType.TABLET
        assert details.device_name.startswith("Apple - iOS")

    @pytest.mark.parametrize("user_agent", [None, ""])
    def test_missing_agent(self, user_agent):
        details = UserAgentDeviceEnricher().enrich(user_agent)

        assert details.device_name == "Unknown device"


@pytest.mark.unit
class TestGeoIPResolver:
    @pytest.mark.parametrize(
        "ip_address", ["192.168.0.10", "10.1.2.3", "172.16.0.1", "127.0.0.1", "::1"]
    )
    async def test_private_ranges_are_local(self, ip_address: str):
        cache = Mock()
        cache.get_json = AsyncMock()
        resolver = GeoIPResolver(Mock(), cache=cache)

        location = await resolver.resolve(ip_address)

        assert location == GeoLocation.local_network()
        cache.get_json.assert_not_awaited()

    @pytest.mark.parametrize("ip_address", ["", "not-an-ip", "999.1.1.1"])
    async def test_invalid_address_resolves_to_none(self, ip_address: str):
        assert await GeoIPResolver(Mock()).resolve(ip_address) is None

    async def test_missing_database_resolves_to_none(self):
        resolver = GeoIPResolver(Mock(), db_path=None)

        assert await resolver.resolve("190.24.10.1") is None

    async def test_missing_database_file_logs_warning(self, tmp_path):
        logger = Mock()
        resolver = GeoIPResolver(logger, db_path=str(tmp_path / "missing.mmdb"))

        assert await resolver.resolve("190.24.10.1") is None
        logger.warning.assert_called_once()

    async def test_cached_location_returned_without_lookup(self):
        bogota = GeoLocation(
            city="Bogotá",
            country="Colombia",
            country_code="CO",
            latitude=4.711,
            longitude=-74.0721,
        )
        cache = Mock()
        cache.get_json = AsyncMock(return_value=Success(value=asdict(bogota)))
        resolver = GeoIPResolver(Mock(), cache=cache, db_path=None)

        location = await resolver.resolve("190.24.10.1")

        assert location == bogota
        cache.get_json.assert_awaited_once_with("geo:ip:190.24.10.1")
