"""Presentation layer - HTTP-facing helpers.

Route handlers themselves live with the host application; this package
provides the pieces they share:
- cookies: auth and trusted-device cookies
- guards: authentication and capability checks as FastAPI dependencies
- error_mapping: DomainError to Problem Details responses
"""
