"""Geolocation resolver protocol."""

from typing import Protocol

from src.domain.value_objects import GeoLocation


class GeolocationResolver(Protocol):
    """Resolve IP addresses to approximate locations.

    Behavior:
        - Private and loopback ranges return ``GeoLocation.local_network()``
          without any lookup
        - Fail-open: lookup errors return None
        - Results may be cached (about 24 hours per IP)
    """

    async def resolve(self, ip_address: str) -> GeoLocation | None:
        """Resolve an IP address.

        Returns:
            GeoLocation, or None when the address is unknown or invalid.
        """
        ...
