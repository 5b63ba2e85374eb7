"""Geographic location value object and great-circle distance.

Usage:
    from src.domain.value_objects import GeoLocation, haversine_km

    bogota = GeoLocation(city="Bogotá", country="Colombia", latitude=4.71, longitude=-74.07)
    madrid = GeoLocation(city="Madrid", country="Spain", latitude=40.4, longitude=-3.7)
    haversine_km(bogota, madrid)  # ~8000
"""

import math
from dataclasses import dataclass

EARTH_RADIUS_KM = 6371

LOCAL_NETWORK_LABEL = "Local Network"


@dataclass(frozen=True, slots=True, kw_only=True)
class GeoLocation:
    """Resolved location of an IP address.

    Attributes:
        city: City name.
        region: Region or state.
        country: Country name.
        country_code: ISO country code.
        latitude: Degrees north.
        longitude: Degrees east.
        timezone: IANA timezone.
        is_local: True for private and loopback addresses.
    """

    city: str | None = None
    region: str | None = None
    country: str | None = None
    country_code: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    timezone: str | None = None
    is_local: bool = False

    @classmethod
    def local_network(cls) -> "GeoLocation":
        """Location used for private and loopback addresses."""
        return cls(city="Local", country="Local", is_local=True)

    @property
    def has_coordinates(self) -> bool:
        """True if both coordinates are known."""
        return self.latitude is not None and self.longitude is not None

    @property
    def display(self) -> str:
        """Human-readable summary ("City, Country")."""
        if self.is_local:
            return LOCAL_NETWORK_LABEL
        parts = [part for part in (self.city, self.country) if part]
        return ", ".join(parts) if parts else "Unknown"


def haversine_km(origin: GeoLocation, destination: GeoLocation) -> int:
    """Great-circle distance between two locations.

    Args:
        origin: Location with coordinates in degrees.
        destination: Location with coordinates in degrees.

    Returns:
        Distance in kilometres, rounded to the nearest km.

    Raises:
        ValueError: If either location lacks coordinates.
    """
    if not (origin.has_coordinates and destination.has_coordinates):
        raise ValueError("Both locations need latitude and longitude")
    assert origin.latitude is not None and origin.longitude is not None
    assert destination.latitude is not None and destination.longitude is not None

    lat1 = math.radians(origin.latitude)
    lat2 = math.radians(destination.latitude)
    d_lat = math.radians(destination.latitude - origin.latitude)
    d_lon = math.radians(destination.longitude - origin.longitude)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return round(EARTH_RADIUS_KM * c)
