"""Rate limit scope enumeration.

A scope is the namespace that partitions attempt counters and locks by the
kind of key being rate limited. The scope value is part of every storage key
and of the durable table's primary key, so the values are persisted and must
not change.

Usage:
    from src.domain.enums import RateLimitScope

    await store.increment_counter(RateLimitScope.IP, "203.0.113.7", 60)
"""

from enum import Enum


class RateLimitScope(str, Enum):
    """Namespaces for attempt counters and locks.

    String Enum:
        Inherits from str so members can be passed wherever a scope string
        is expected and serialize to their value.

    Key Formats (in-process / redis):
        IP: ip:{address}:w{window_seconds}
        IDENTIFIER: id:{identifier_hash}:w{window_seconds}
    """

    IP = "ip"
    """Counters keyed by the resolved client IP address.

    Only used when the trust boundary produced an IP. A request with no
    trusted IP is never counted against this scope.
    """

    IDENTIFIER = "id"
    """Counters and locks keyed by the hashed account identifier.

    Holds the 60s attempt window, the consecutive-failure window and the
    lockout record for one account.
    """
