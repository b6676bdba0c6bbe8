"""Router-level helpers for authentication endpoints.

Login and signup handlers obtain an AuthAttemptGuard from the container:

    from src.core.container import get_auth_attempt_guard
"""
