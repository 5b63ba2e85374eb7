"""Infrastructure-specific error codes.

Internal codes for tracking adapter failures. They travel alongside the
domain ErrorCode in InfrastructureError and are only used in logs.

Categories:
- Cache errors (CACHE_*)
- Queue errors (QUEUE_*)
- Geolocation errors (GEOIP_*)
"""

from enum import Enum


class InfrastructureErrorCode(Enum):
    """Infrastructure-specific error codes."""

    # Cache errors
    CACHE_CONNECTION_ERROR = "cache_connection_error"
    CACHE_GET_ERROR = "cache_get_error"
    CACHE_SET_ERROR = "cache_set_error"
    CACHE_DELETE_ERROR = "cache_delete_error"
    CACHE_SERIALIZATION_ERROR = "cache_serialization_error"

    # Queue errors
    QUEUE_PUSH_ERROR = "queue_push_error"

    # Geolocation errors
    GEOIP_LOOKUP_ERROR = "geoip_lookup_error"
