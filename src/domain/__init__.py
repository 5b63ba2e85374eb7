"""Domain layer - auth and session-security rules.

No framework or infrastructure imports: entities and value objects are plain
dataclasses, and storage, tokens, hashing and delivery are reached through
protocols.

Structure:
- entities/: User, Session, RefreshToken, TrustedDevice, SecurityEvent, one-time tokens
- enums/: Audit actions, security event types and severities, roles
- errors/: Token, audit and notification errors
- value_objects/: Email, Password, GeoLocation
- protocols/: Repository and service ports
"""
