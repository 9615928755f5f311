"""
simplemvvm: Service host with lifetime management for presentation layers.

Public API exports for the simplemvvm package.
"""

# Application exports
from simplemvvm.application.host import Host
from simplemvvm.application.registry import ServiceRegistry, default_registry, scoped, singleton, transient
from simplemvvm.application.scope import Scope
from simplemvvm.application.settings import HostSettings

# Content helper
from simplemvvm.content import Content, Element, Named

# Domain exports
from simplemvvm.domain.enums import Lifetime
from simplemvvm.domain.exceptions import (
    CaptiveDependencyError,
    CyclicDependencyError,
    DIException,
    DisposalError,
    RegistrationError,
    ScopeDisposedError,
    ScopeError,
    UnresolvableError,
)

__version__ = "0.1.0"

__all__ = [
    # Host
    "Host",
    "HostSettings",
    "Scope",
    # Registration
    "ServiceRegistry",
    "default_registry",
    "singleton",
    "scoped",
    "transient",
    # Content
    "Content",
    "Element",
    "Named",
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
]
