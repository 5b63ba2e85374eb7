"""Database persistence infrastructure.

- Declarative bases for the auth tables
- Async engine and per-request session management
- SQLAlchemy repositories (repositories/) and dict-backed test doubles (in_memory/)
"""

from src.infrastructure.persistence.base import BaseModel
from src.infrastructure.persistence.database import Database

__all__ = [
    "BaseModel",
    "Database",
]
