"""Presentation layer - HTTP concerns.

The presentation layer is thin: it resolves the client IP from the request,
asks the application layer for a verdict and translates the result into an
HTTP response (429/503 with Retry-After).

Structure:
- routers/api/middleware/: Guards used by authentication routes

The presentation layer depends on the application layer but contains NO
business logic.
"""
