"""Application environment types.

Defines the runtime environments the abuse-control subsystem runs in.
Used by Settings and the attempt store factory to decide which storage
backends are acceptable.

Environments:
- DEVELOPMENT: Local development, in-process store allowed
- TESTING: Automated test execution
- CI: Continuous integration environment
- PRODUCTION: Production deployment; in-process store requires explicit opt-in
"""

from enum import Enum


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    CI = "ci"
    PRODUCTION = "production"
