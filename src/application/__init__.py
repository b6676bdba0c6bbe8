"""Application layer - Abuse-control orchestration.

Structure:
- services/: Client IP resolution across the proxy trust boundary and the
  authentication attempt rate limiter

The application layer orchestrates domain rules over protocols; it never
imports infrastructure.
"""
