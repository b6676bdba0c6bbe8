"""Domain layer - Pure abuse-control rules.

This layer contains enums, value objects, error types and protocols
(ports). It has NO dependencies on any framework or infrastructure.

Structure:
- enums/: Scopes, denial reasons, proxy modes, store backends
- errors/: Domain error types carried in Failure results
- value_objects/: Immutable configuration and verdicts
- protocols/: Attempt store and logger ports
"""
