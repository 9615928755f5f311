import logging
import threading
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Type, TypeVar

from simplemvvm.domain import (
    DisposalError,
    IScope,
    ResolutionContext,
    ScopeDisposedError,
    ServiceDescriptor,
)

if TYPE_CHECKING:
    from simplemvvm.application.host import Host

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING = object()


def is_disposable(instance: Any) -> bool:
    """Whether an instance exposes a ``dispose()`` or ``close()`` method."""
    return callable(getattr(instance, "dispose", None)) or callable(getattr(instance, "close", None))


def release(instance: Any) -> None:
    """Release an instance through ``dispose()``, falling back to ``close()``."""
    dispose = getattr(instance, "dispose", None)
    if callable(dispose):
        dispose()
        return
    close = getattr(instance, "close", None)
    if callable(close):
        close()


class Scope(IScope):
    """Instance cache and disposal list for a bounded unit of work.

    Scoped instances live in the cache of the scope that created them. Singletons
    always live in the host's root scope, whichever scope requested them. Transient
    instances are never cached, but disposable ones are released with the scope
    that requested them.

    Construction of a cached service is guarded by a lock per (scope, type): a thread
    losing the race waits for the winner and returns its instance. Unrelated types
    are constructed concurrently.

    Attributes:
        _host: The host this scope belongs to.
        _is_root: Whether this is the host's root scope.
        _cache: Constructed instances keyed by implementation type.
        _disposables: Disposable instances in creation order.
        _disposed: Set once the scope is disposed, never reset.
    """

    def __init__(self, host: "Host", is_root: bool = False) -> None:
        self._host = host
        self._is_root = is_root
        self._cache: Dict[Type, Any] = {}
        self._disposables: List[Any] = []
        self._disposed = False
        self._state_lock = threading.Lock()
        self._type_locks: Dict[Type, threading.RLock] = {}

    @property
    def host(self) -> "Host":
        return self._host

    @property
    def is_root(self) -> bool:
        return self._is_root

    @property
    def root(self) -> "Scope":
        """The scope that owns singleton instances."""
        return self if self._is_root else self._host.root_scope

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def get_or_create(self, service_type: Type[T]) -> T:
        """Return the cached instance of a service or resolve a new one.

        A service whose constructor fails is never cached. Dependencies that were
        fully constructed before the failure remain cached, so a retry reuses them.

        Args:
            service_type: The type to resolve, either an implementation or an exposed type.

        Returns:
            The instance according to the service's lifetime.

        Raises:
            ScopeDisposedError: If the scope has been disposed.

        Example:
            >>> with host.create_scope() as scope:
            ...     service = scope.get_or_create(UserService)
            ...     assert service is scope.get_or_create(UserService)
        """
        self._ensure_live()

        descriptor = self._host.descriptors.find(service_type)
        if descriptor is not None:
            instance = self._cache.get(descriptor.implementation_type, _MISSING)
            if instance is not _MISSING:
                return instance

        return self._host.resolver.resolve(service_type, ResolutionContext(scope=self))

    def get_or_construct(self, descriptor: ServiceDescriptor, factory: Callable[[], Any]) -> Any:
        """Return the cached instance of a descriptor or construct it at most once.

        The instance is published to the cache only after the factory returns.

        Args:
            descriptor: The service owned by this scope.
            factory: Builds a fully resolved instance.

        Raises:
            ScopeDisposedError: If the scope is disposed before or during construction.
        """
        key = descriptor.implementation_type
        instance = self._cache.get(key, _MISSING)
        if instance is not _MISSING:
            return instance

        with self._lock_for(key):
            instance = self._cache.get(key, _MISSING)
            if instance is not _MISSING:
                return instance

            self._ensure_live()
            instance = factory()

            with self._state_lock:
                published = not self._disposed
                if published:
                    self._cache[key] = instance
                    if is_disposable(instance):
                        self._disposables.append(instance)

            if not published:
                release(instance)
                raise ScopeDisposedError(
                    f"Scope was disposed while constructing {descriptor.name}; the instance was released."
                )

        return instance

    def track(self, instance: Any) -> None:
        """Record a transient instance for release when the scope is disposed."""
        if not is_disposable(instance):
            return
        with self._state_lock:
            if self._disposed:
                raise ScopeDisposedError("Cannot track instances in a disposed scope.")
            self._disposables.append(instance)

    def dispose(self) -> None:
        """Release every disposable instance in reverse creation order.

        Release is best-effort: every instance is attempted even if some fail.

        Raises:
            ScopeDisposedError: If the scope is already disposed.
            DisposalError: If one or more instances failed to release.
        """
        with self._state_lock:
            if self._disposed:
                raise ScopeDisposedError("Scope is already disposed.")
            self._disposed = True
            disposables = list(reversed(self._disposables))
            self._disposables.clear()
            self._cache.clear()

        errors: List[BaseException] = []
        for instance in disposables:
            try:
                release(instance)
            except Exception as e:
                logger.warning("Failed to dispose %s", type(instance).__name__, exc_info=True)
                errors.append(e)

        logger.debug(
            "Disposed %s scope, released %d instance(s)",
            "root" if self._is_root else "child",
            len(disposables) - len(errors),
        )
        if errors:
            raise DisposalError(errors)

    def _lock_for(self, key: Type) -> threading.RLock:
        with self._state_lock:
            lock = self._type_locks.get(key)
            if lock is None:
                lock = self._type_locks[key] = threading.RLock()
            return lock

    def _ensure_live(self) -> None:
        if self._disposed:
            raise ScopeDisposedError("Cannot resolve services from a disposed scope.")

    def __enter__(self) -> "Scope":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        if not self._disposed:
            self.dispose()
        return False
