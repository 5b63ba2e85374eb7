"""Token validation error constants.

These are NOT exceptions: they are the error values carried by
``Failure`` when a JWT cannot be accepted.

Usage:
    from src.domain.errors import TokenError

    match jwt_service.verify(token, TokenType.ACCESS):
        case Success(value=claims):
            ...
        case Failure(error=TokenError.EXPIRED_TOKEN):
            ...
"""


class TokenError:
    """Token validation failure reasons.

    Error Categories:
        - Signature / structure: INVALID_TOKEN
        - Lifetime: EXPIRED_TOKEN
        - Purpose: WRONG_TOKEN_TYPE (refresh token presented as access, ...)
    """

    INVALID_TOKEN = "invalid_token"
    EXPIRED_TOKEN = "token_expired"
    WRONG_TOKEN_TYPE = "wrong_token_type"
