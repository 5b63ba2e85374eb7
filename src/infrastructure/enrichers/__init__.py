"""Login context enrichers.

Enrichers:
    - UserAgentDeviceEnricher: Parses user agent strings (user-agents library)
    - GeoIPResolver: IP geolocation (geoip2, cached in Redis)
"""

from src.infrastructure.enrichers.device_enricher import UserAgentDeviceEnricher
from src.infrastructure.enrichers.geoip_resolver import GeoIPResolver

__all__ = [
    "GeoIPResolver",
    "UserAgentDeviceEnricher",
]
