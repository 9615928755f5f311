"""
Application layer - Use cases and orchestration.

This layer contains the registry, descriptor table, resolver, scopes and host.
It depends only on the Domain layer.
"""

from .descriptor_table import ServiceDescriptorTable, describe, inspect_constructor
from .host import Host
from .registry import ServiceRegistry, default_registry, scoped, singleton, transient
from .resolver import DependencyResolver
from .scope import Scope
from .settings import HostSettings

__all__ = [
    "Host",
    "HostSettings",
    "Scope",
    "DependencyResolver",
    "ServiceDescriptorTable",
    "describe",
    "inspect_constructor",
    "ServiceRegistry",
    "default_registry",
    "singleton",
    "scoped",
    "transient",
]
