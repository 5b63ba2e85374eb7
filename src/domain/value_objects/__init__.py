"""Domain value objects.

Immutable, self-validating values.
"""

from src.domain.value_objects.email import Email
from src.domain.value_objects.geo_location import (
    EARTH_RADIUS_KM,
    GeoLocation,
    haversine_km,
)
from src.domain.value_objects.password import Password

__all__ = [
    "EARTH_RADIUS_KM",
    "Email",
    "GeoLocation",
    "Password",
    "haversine_km",
]
