"""
Domain layer - Core models and rules.

This layer contains the lifetimes, errors and value objects of the service host.
It has no dependencies on other layers.
"""

from .enums import Lifetime
from .exceptions import (
    CaptiveDependencyError,
    CyclicDependencyError,
    DIException,
    DisposalError,
    RegistrationError,
    ScopeDisposedError,
    ScopeError,
    UnresolvableError,
)
from .interfaces import IHost, IResolver, IScope
from .models import ConstructorParameter, Registration, ResolutionContext, ServiceDescriptor

__all__ = [
    # Enums
    "Lifetime",
    # Exceptions
    "DIException",
    "RegistrationError",
    "CyclicDependencyError",
    "CaptiveDependencyError",
    "UnresolvableError",
    "ScopeError",
    "ScopeDisposedError",
    "DisposalError",
    # Interfaces
    "IHost",
    "IResolver",
    "IScope",
    # Models
    "ConstructorParameter",
    "Registration",
    "ServiceDescriptor",
    "ResolutionContext",
]
