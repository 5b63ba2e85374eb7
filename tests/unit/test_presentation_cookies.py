"""Unit tests for auth cookie helpers.

Tests cover:
- Access/refresh cookie lifetimes (15 min, 7 or 30 days)
- httpOnly, Secure, SameSite, path and domain attributes
- Clearing uses the same path and domain as setting
- Trusted device cookie
"""

import pytest
from fastapi import Response

from src.core.config import Settings
from src.presentation.cookies import (
    ACCESS_TOKEN_COOKIE,
    REFRESH_TOKEN_COOKIE,
    TRUSTED_DEVICE_COOKIE,
    clear_auth_cookies,
    clear_trusted_device_cookie,
    refresh_cookie_max_age,
    set_auth_cookies,
    set_trusted_device_cookie,
)


@pytest.fixture
def config() -> Settings:
    return Settings(cookie_domain="club.example.com", cookie_path="/", cookie_samesite="Lax")


def set_cookie_headers(response: Response) -> dict[str, str]:
    """Map cookie name to its Set-Cookie header."""
    headers = {}
    for name, value in response.raw_headers:
        if name == b"set-cookie":
            text = value.decode("latin-1")
            headers[text.split("=", 1)[0]] = text
    return headers


@pytest.mark.unit
class TestAuthCookies:
    def test_set_auth_cookies(self, config):
        response = Response()

        set_auth_cookies(response, "access.jwt", "refresh.jwt", config=config)

        cookies = set_cookie_headers(response)
        access = cookies[ACCESS_TOKEN_COOKIE]
        refresh = cookies[REFRESH_TOKEN_COOKIE]
        assert access.startswith("access_token=access.jwt;")
        assert "Max-Age=900" in access
        assert "Max-Age=604800" in refresh
        for header in (access, refresh):
            assert "HttpOnly" in header
            assert "Secure" in header
            assert "SameSite=lax" in header
            assert "Domain=club.example.com" in header
            assert "Path=/" in header

    def test_remember_me_lifetime(self, config):
        response = Response()

        set_auth_cookies(response, "a", "r", remember_me=True, config=config)

        assert "Max-Age=2592000" in set_cookie_headers(response)[REFRESH_TOKEN_COOKIE]

    @pytest.mark.parametrize(("remember_me", "days"), [(False, 7), (True, 30)])
    def test_refresh_max_age(self, config, remember_me, days):
        assert refresh_cookie_max_age(remember_me=remember_me, config=config) == days * 86400

    def test_clear_uses_same_path_and_domain(self, config):
        response = Response()

        clear_auth_cookies(response, config=config)

        cookies = set_cookie_headers(response)
        for name in (ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE):
            assert "Max-Age=0" in cookies[name]
            assert "Domain=club.example.com" in cookies[name]
            assert "Path=/" in cookies[name]

    def test_host_only_when_domain_unset(self):
        response = Response()

        set_auth_cookies(response, "a", "r", config=Settings(cookie_domain=None))

        assert "Domain=" not in set_cookie_headers(response)[ACCESS_TOKEN_COOKIE]


@pytest.mark.unit
class TestTrustedDeviceCookie:
    def test_thirty_days(self, config):
        response = Response()

        set_trusted_device_cookie(response, "f" * 64, config=config)

        header = set_cookie_headers(response)[TRUSTED_DEVICE_COOKIE]
        assert header.startswith(f"trusted_device={'f' * 64};")
        assert "Max-Age=2592000" in header
        assert "HttpOnly" in header

    def test_clear(self, config):
        response = Response()

        clear_trusted_device_cookie(response, config=config)

        assert "Max-Age=0" in set_cookie_headers(response)[TRUSTED_DEVICE_COOKIE]
