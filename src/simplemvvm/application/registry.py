"""Application layer - Lifetime markers and the registration surface."""

import inspect
import logging
import threading
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar

from simplemvvm.domain import Lifetime, Registration, RegistrationError

logger = logging.getLogger(__name__)

C = TypeVar("C", bound=type)


class ServiceRegistry:
    """Mapping from concrete types to their lifetime tag and exposed types.

    The registry is the input of the descriptor table. It is usually filled by the
    ``@singleton``, ``@scoped`` and ``@transient`` markers at import time, and read
    once when the host is built.

    Attributes:
        _registrations: Registrations keyed by implementation type, in insertion order.
    """

    def __init__(self) -> None:
        self._registrations: Dict[Type, Registration] = {}
        self._lock = threading.Lock()

    def add(self, implementation_type: Type, lifetime: Lifetime, exposes: Iterable[Type] = ()) -> Registration:
        """Record a lifetime tag for a concrete type.

        Registering a type again with the same lifetime merges the exposed types.

        Args:
            implementation_type: The concrete class to register.
            lifetime: How long instances should live.
            exposes: Interface or base types the class may be requested as.

        Returns:
            The stored registration.

        Raises:
            RegistrationError: If the type is not a class or is already registered
                with a different lifetime.
        """
        if not inspect.isclass(implementation_type):
            raise RegistrationError(f"Only classes can be registered, got {implementation_type!r}")
        lifetime = Lifetime(lifetime)

        with self._lock:
            existing = self._registrations.get(implementation_type)
            if existing is not None:
                if existing.lifetime != lifetime:
                    raise RegistrationError(
                        f"Service {implementation_type.__name__} is already registered "
                        f"with lifetime {existing.lifetime.value}, "
                        f"cannot re-register with {lifetime.value}"
                    )
                exposes = existing.exposes.union(exposes)

            registration = Registration(
                implementation_type=implementation_type,
                lifetime=lifetime,
                exposes=frozenset(exposes),
            )
            self._registrations[implementation_type] = registration

        logger.debug("Registered %s as %s", implementation_type.__name__, lifetime)
        return registration

    def registrations(self) -> List[Registration]:
        """Snapshot of the registrations in the order they were added."""
        with self._lock:
            return list(self._registrations.values())

    def clear(self) -> None:
        with self._lock:
            self._registrations.clear()

    def __contains__(self, implementation_type: object) -> bool:
        return implementation_type in self._registrations

    def __len__(self) -> int:
        return len(self._registrations)


default_registry = ServiceRegistry()


def _lifetime_marker(
    lifetime: Lifetime,
    target: Optional[C],
    exposes: Iterable[Type],
    registry: Optional[ServiceRegistry],
) -> Any:
    exposes = tuple(exposes)

    def decorator(inner: C) -> C:
        (registry if registry is not None else default_registry).add(inner, lifetime, exposes)
        return inner

    if target is None:
        return decorator
    return decorator(target)


def singleton(
    target: Optional[C] = None,
    *,
    exposes: Iterable[Type] = (),
    registry: Optional[ServiceRegistry] = None,
) -> Any:
    """Mark a class as a process-wide singleton service.

    Can be used bare (``@singleton``) or with arguments
    (``@singleton(exposes=(IRepository,))``).

    Args:
        target: The class (supplied automatically when used bare).
        exposes: Interface or base types the class may be requested as.
        registry: Registry to record into. Defaults to ``default_registry``.

    Returns:
        The class, unmodified.

    Example:
        >>> @singleton
        ... class DatabaseService:
        ...     pass
    """
    return _lifetime_marker(Lifetime.SINGLETON, target, exposes, registry)


def scoped(
    target: Optional[C] = None,
    *,
    exposes: Iterable[Type] = (),
    registry: Optional[ServiceRegistry] = None,
) -> Any:
    """Mark a class as a scoped service, one instance per scope.

    Example:
        >>> @scoped
        ... class UserService:
        ...     def __init__(self, db: DatabaseService):
        ...         self.db = db
    """
    return _lifetime_marker(Lifetime.SCOPED, target, exposes, registry)


def transient(
    target: Optional[C] = None,
    *,
    exposes: Iterable[Type] = (),
    registry: Optional[ServiceRegistry] = None,
) -> Any:
    """Mark a class as a transient service, a new instance per request."""
    return _lifetime_marker(Lifetime.TRANSIENT, target, exposes, registry)

