"""
FastAPI integration module.

Provides helpers for handing out host services to FastAPI endpoints.
"""

from .integration import (
    SCOPE_STATE_ATTRIBUTE,
    ScopedHostMiddleware,
    create_fastapi_dependency,
    create_scoped_dependency,
)

__all__ = [
    "SCOPE_STATE_ATTRIBUTE",
    "create_fastapi_dependency",
    "create_scoped_dependency",
    "ScopedHostMiddleware",
]
