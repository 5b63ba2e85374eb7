"""IP geolocation resolver backed by MaxMind GeoIP2 and the Redis cache.

Implements GeolocationResolver for the risk engine.

Implementation:
    - GeoLite2-City database (local file, lazily opened)
    - Private, loopback and link-local addresses short-circuit to
      ``GeoLocation.local_network()`` before any cache or database access
    - Resolved locations are cached per IP (24 hours by default)
    - Fail-open: unknown IPs, missing database and cache outages all
      degrade to "no location" rather than an error
"""

import ipaddress
from dataclasses import asdict
from pathlib import Path

import geoip2.database
import geoip2.errors
from maxminddb.errors import InvalidDatabaseError

from src.core.result import Success
from src.domain.protocols import CacheProtocol, LoggerProtocol
from src.domain.value_objects import GeoLocation

CACHE_KEY_PREFIX = "geo:ip:"


class GeoIPResolver:
    """Resolve IP addresses with GeoIP2, caching results.

    Args:
        logger: Logger for lookup diagnostics.
        cache: Cache for resolved locations (None disables caching).
        db_path: Path to GeoLite2-City.mmdb (None disables lookups).
        cache_ttl_seconds: Lifetime of cached entries.
    """

    def __init__(
        self,
        logger: LoggerProtocol,
        cache: CacheProtocol | None = None,
        db_path: str | None = None,
        cache_ttl_seconds: int = 86400,
    ) -> None:
        self._logger = logger
        self._cache = cache
        self._db_path = db_path
        self._cache_ttl = cache_ttl_seconds
        self._reader: geoip2.database.Reader | None = None

    async def resolve(self, ip_address: str) -> GeoLocation | None:
        """Resolve an IP address.

        Returns:
            GeoLocation, ``GeoLocation.local_network()`` for private ranges,
            or None when the address is invalid or unknown.
        """
        if not ip_address:
            return None

        try:
            parsed = ipaddress.ip_address(ip_address)
        except ValueError:
            self._logger.debug("Invalid IP address for geolocation", ip_address=ip_address)
            return None

        if parsed.is_private or parsed.is_loopback or parsed.is_link_local:
            return GeoLocation.local_network()

        cached = await self._from_cache(ip_address)
        if cached is not None:
            return cached

        location = self._lookup(ip_address)
        if location is not None and self._cache is not None:
            await self._cache.set_json(
                f"{CACHE_KEY_PREFIX}{ip_address}",
                asdict(location),
                ttl=self._cache_ttl,
            )
        return location

    async def _from_cache(self, ip_address: str) -> GeoLocation | None:
        if self._cache is None:
            return None
        result = await self._cache.get_json(f"{CACHE_KEY_PREFIX}{ip_address}")
        if isinstance(result, Success) and result.value is not None:
            return GeoLocation(**result.value)
        return None

    def _lookup(self, ip_address: str) -> GeoLocation | None:
        reader = self._get_reader()
        if reader is None:
            return None

        try:
            response = reader.city(ip_address)
        except geoip2.errors.AddressNotFoundError:
            self._logger.debug("IP not found in GeoIP database", ip_address=ip_address)
            return None
        except (ValueError, InvalidDatabaseError) as e:
            self._logger.warning(
                "GeoIP lookup failed",
                ip_address=ip_address,
                error_message=str(e),
            )
            return None

        subdivision = response.subdivisions.most_specific
        return GeoLocation(
            city=response.city.name,
            region=subdivision.name if subdivision else None,
            country=response.country.name,
            country_code=response.country.iso_code,
            latitude=response.location.latitude,
            longitude=response.location.longitude,
            timezone=response.location.time_zone,
        )

    def _get_reader(self) -> geoip2.database.Reader | None:
        """Open the database on first use."""
        if self._reader is not None:
            return self._reader
        if not self._db_path:
            self._logger.debug("GeoIP database not configured")
            return None

        db_file = Path(self._db_path)
        if not db_file.exists():
            self._logger.warning("GeoIP database file not found", db_path=self._db_path)
            return None

        try:
            self._reader = geoip2.database.Reader(str(db_file))
        except (OSError, InvalidDatabaseError) as e:
            self._logger.warning(
                "Failed to open GeoIP database",
                db_path=self._db_path,
                error_message=str(e),
            )
            return None

        self._logger.info("GeoIP database loaded", db_path=self._db_path)
        return self._reader

    def close(self) -> None:
        """Close the database reader."""
        if self._reader is not None:
            self._reader.close()
            self._reader = None
