"""Infrastructure layer - Adapters and external integrations.

This layer contains implementations of domain protocols (ports):
- Attempt stores (in-process, PostgreSQL, Redis)
- Structured logging (structlog)

Structure:
- rate_limit/: Attempt store adapters and backend factory
- persistence/: Database engine, declarative base, auth_attempts model
- logging/: Console logging adapter

The infrastructure layer depends on the domain layer (implements protocols)
but the domain layer does NOT depend on infrastructure.
"""
