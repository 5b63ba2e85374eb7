"""Infrastructure layer - adapters for the domain protocols.

Structure:
- persistence/: SQLAlchemy models and repositories, in-memory repositories
- cache/: Redis adapter
- security/: JWT, bcrypt, TOTP, secure random tokens
- enrichers/: User agent parsing, GeoIP resolution
- notifications/: Notification queue dispatchers
- audit/: Audit sinks
- logging/: Structlog adapter

The infrastructure layer depends on the domain layer (implements its
protocols); the domain layer does NOT depend on infrastructure.
"""
