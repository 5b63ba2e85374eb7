"""Result types for railway-oriented programming.

Every fallible operation in the auth core returns a Result instead of
raising. Handlers branch on the variant with isinstance checks or pattern
matching, which keeps denial paths explicit and easy to test.

Usage:
    def check_code(code: str) -> Result[str, str]:
        if len(code) != 6:
            return Failure(error="Malformed code")
        return Success(value=code)

    match check_code("123456"):
        case Success(value=code):
            print(f"Accepted {code}")
        case Failure(error=reason):
            print(f"Rejected: {reason}")
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Successful outcome.

    Attributes:
        value: Payload produced by the operation.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Failed outcome.

    Attributes:
        error: Error describing why the operation failed.
    """

    error: E


type Result[T, E] = Success[T] | Failure[E]
