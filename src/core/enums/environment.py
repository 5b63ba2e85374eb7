"""Runtime environments.

Settings use the environment to pick the log renderer and to refuse
development-only secrets in production.
"""

from enum import Enum


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    CI = "ci"
    PRODUCTION = "production"
