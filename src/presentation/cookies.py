"""Authentication cookies.

Browser clients receive the token pair as httpOnly cookies:
- ``access_token``: lives as long as the access JWT (15 minutes)
- ``refresh_token``: 7 days, or 30 with remember-me
- ``trusted_device``: remember-device token (30 days)

Every cookie shares ``settings.cookie_path`` and ``settings.cookie_domain``;
clearing uses the identical path and domain, otherwise browsers keep the
original cookie.

Usage:
    result = await handler.handle(LoginUser(...))
    if isinstance(result.value, LoginTokens):
        set_auth_cookies(response, result.value.access_token,
                         result.value.refresh_token, remember_me=True)
"""

from typing import Literal, cast

from fastapi import Response

from src.core.config import Settings, settings

ACCESS_TOKEN_COOKIE = "access_token"
REFRESH_TOKEN_COOKIE = "refresh_token"
TRUSTED_DEVICE_COOKIE = "trusted_device"

SECONDS_PER_DAY = 86400

SameSite = Literal["lax", "strict", "none"]


def _samesite(config: Settings) -> SameSite:
    return cast(SameSite, config.cookie_samesite.lower())


def _set(
    response: Response,
    key: str,
    value: str,
    max_age: int,
    config: Settings,
) -> None:
    response.set_cookie(
        key=key,
        value=value,
        max_age=max_age,
        path=config.cookie_path,
        domain=config.cookie_domain,
        secure=config.cookie_secure,
        httponly=True,
        samesite=_samesite(config),
    )


def _clear(response: Response, key: str, config: Settings) -> None:
    response.delete_cookie(
        key=key,
        path=config.cookie_path,
        domain=config.cookie_domain,
        secure=config.cookie_secure,
        httponly=True,
        samesite=_samesite(config),
    )


def access_cookie_max_age(config: Settings = settings) -> int:
    return config.access_token_expire_minutes * 60


def refresh_cookie_max_age(*, remember_me: bool, config: Settings = settings) -> int:
    days = config.refresh_token_remember_days if remember_me else config.refresh_token_expire_days
    return days * SECONDS_PER_DAY


def set_auth_cookies(
    response: Response,
    access_token: str,
    refresh_token: str,
    *,
    remember_me: bool = False,
    config: Settings = settings,
) -> None:
    """Set the access and refresh cookies.

    Args:
        response: Outgoing response.
        access_token: Access JWT.
        refresh_token: Refresh JWT.
        remember_me: Use the 30 day refresh lifetime.
        config: Settings (defaults to the global settings).
    """
    _set(response, ACCESS_TOKEN_COOKIE, access_token, access_cookie_max_age(config), config)
    _set(
        response,
        REFRESH_TOKEN_COOKIE,
        refresh_token,
        refresh_cookie_max_age(remember_me=remember_me, config=config),
        config,
    )


def clear_auth_cookies(response: Response, *, config: Settings = settings) -> None:
    """Expire the access and refresh cookies (logout)."""
    _clear(response, ACCESS_TOKEN_COOKIE, config)
    _clear(response, REFRESH_TOKEN_COOKIE, config)


def set_trusted_device_cookie(
    response: Response,
    remember_token: str,
    *,
    config: Settings = settings,
) -> None:
    """Set the remember-device cookie for ``trusted_device_days``."""
    _set(
        response,
        TRUSTED_DEVICE_COOKIE,
        remember_token,
        config.trusted_device_days * SECONDS_PER_DAY,
        config,
    )


def clear_trusted_device_cookie(response: Response, *, config: Settings = settings) -> None:
    _clear(response, TRUSTED_DEVICE_COOKIE, config)
