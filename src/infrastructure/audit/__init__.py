"""Audit sink implementations.

- PostgresAuditAdapter: immutable ``audit_logs`` table
- InMemoryAuditAdapter: list-backed (tests and development)
"""

from src.infrastructure.audit.in_memory_adapter import AuditEntry, InMemoryAuditAdapter
from src.infrastructure.audit.postgres_adapter import PostgresAuditAdapter

__all__ = ["AuditEntry", "InMemoryAuditAdapter", "PostgresAuditAdapter"]
