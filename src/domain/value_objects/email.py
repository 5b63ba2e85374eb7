"""Email value object.

Emails are the login identifier, so they are normalized once here
(validated, lower-cased) and compared case-insensitively everywhere else.
"""

from dataclasses import dataclass

from email_validator import EmailNotValidError, validate_email


@dataclass(frozen=True)
class Email:
    """Validated, lower-cased email address.

    Uses email-validator for RFC-compliant syntax checks (no DNS lookups).

    Raises:
        ValueError: If the address is malformed.

    Example:
        >>> str(Email("Ana.Perez@Example.com"))
        'ana.perez@example.com'
    """

    value: str

    def __post_init__(self) -> None:
        try:
            validated = validate_email(self.value, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email: {e}") from e
        # Frozen dataclass: bypass __setattr__ to store the normalized form
        object.__setattr__(self, "value", validated.normalized.lower())

    def __str__(self) -> str:
        return self.value
