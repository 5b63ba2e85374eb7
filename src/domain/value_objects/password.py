"""Password value object with complexity rules.

Applied at registration, password change and password reset. Never used for
login: existing passwords are verified as-is against their hash.
"""

import re
from dataclasses import dataclass

SPECIAL_CHARACTERS = r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]"


@dataclass(frozen=True)
class Password:
    """Plaintext password that satisfies the complexity policy.

    Password Requirements:
        - At least 8 characters
        - At least one uppercase letter
        - At least one lowercase letter
        - At least one digit
        - At least one special character

    Raises:
        ValueError: With the first unmet requirement.

    Example:
        >>> Password("SecureP@ssw0rd123")
        Password('*****************')
        >>> Password("weak")
        Traceback (most recent call last):
        ...
        ValueError: Password must be at least 8 characters
    """

    value: str

    def __post_init__(self) -> None:
        if len(self.value) < 8:
            raise ValueError("Password must be at least 8 characters")
        if not re.search(r"[A-Z]", self.value):
            raise ValueError("Password must contain an uppercase letter")
        if not re.search(r"[a-z]", self.value):
            raise ValueError("Password must contain a lowercase letter")
        if not re.search(r"\d", self.value):
            raise ValueError("Password must contain a digit")
        if not re.search(SPECIAL_CHARACTERS, self.value):
            raise ValueError("Password must contain a special character")

    def __str__(self) -> str:
        """Masked value; plaintext never reaches logs."""
        return "*" * len(self.value)

    def __repr__(self) -> str:
        return f"Password('{'*' * len(self.value)}')"
