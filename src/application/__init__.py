"""Application layer - Use cases and orchestration.

This layer contains the auth core's use cases following the CQRS pattern:
- Commands: Write operations that change state (login, refresh, reset, ...)
- Queries: Read operations that fetch data (sessions, devices)
- Services: Engines shared by several handlers (sessions, two-factor,
  device trust, risk scoring, login finalization)

Structure:
- commands/: Command dataclasses and handlers (write operations)
- queries/: Query dataclasses and handlers (read operations)
- services/: Stateless services built on domain protocols
- dtos/: Handler results

The application layer depends only on domain protocols; adapters are
injected by the container.
"""
