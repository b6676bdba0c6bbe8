"""Test suite for the authentication abuse-control subsystem.

Test structure follows the test pyramid:
- unit/: Unit tests - value objects, resolver, limiter, stores with mocked drivers
- integration/: Integration tests - SQL attempt store on a real async engine
"""
