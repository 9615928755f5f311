"""
Testing utilities module.

Provides helpers for testing applications built on the simplemvvm host.
"""

from .utilities import MockScope, TestHost, create_test_host

__all__ = [
    "TestHost",
    "create_test_host",
    "MockScope",
]
