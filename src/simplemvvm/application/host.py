import logging
import threading
from typing import ClassVar, Optional, Type, TypeVar, Union

from simplemvvm.application.descriptor_table import ServiceDescriptorTable
from simplemvvm.application.registry import ServiceRegistry, default_registry
from simplemvvm.application.resolver import DependencyResolver
from simplemvvm.application.scope import Scope
from simplemvvm.application.settings import HostSettings
from simplemvvm.domain import IHost, ScopeDisposedError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Host(IHost):
    """Composition root owning the descriptor table and the root scope.

    ``Host.initialize()`` returns the process-wide host and is idempotent. A host
    can also be built directly from a registry, which is how tests and explicit
    composition roots create isolated hosts.

    Attributes:
        _settings: Host options.
        _descriptors: Immutable descriptor table built from the registry.
        _resolver: Resolver bound to the descriptor table.
        _root_scope: Scope owning singleton instances.

    Example:
        >>> @singleton
        ... class DatabaseService:
        ...     pass
        >>>
        >>> @scoped
        ... class UserService:
        ...     def __init__(self, db: DatabaseService):
        ...         self.db = db
        >>>
        >>> host = Host.initialize()
        >>> with host.create_scope() as scope:
        ...     users = scope.get_or_create(UserService)
        ...     assert users.db is host.get(DatabaseService)
    """

    _instance: ClassVar[Optional["Host"]] = None
    _instance_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(
        self,
        registry: Union[ServiceRegistry, ServiceDescriptorTable, None] = None,
        settings: Optional[HostSettings] = None,
    ) -> None:
        """Build the descriptor table and the root scope.

        Args:
            registry: Registry or prebuilt table. Defaults to ``default_registry``.
            settings: Host options. Defaults to ``HostSettings()`` read from the environment.

        Raises:
            RegistrationError: If the registry cannot be turned into a descriptor table.
        """
        self._settings = settings if settings is not None else HostSettings()

        if isinstance(registry, ServiceDescriptorTable):
            self._descriptors = registry
        else:
            source = registry if registry is not None else default_registry
            self._descriptors = ServiceDescriptorTable.build(source.registrations())

        self._resolver = DependencyResolver(self._descriptors, self._settings)
        self._root_scope = Scope(self, is_root=True)

        if self._settings.validate_on_build:
            self.validate()

    @classmethod
    def initialize(
        cls,
        registry: Optional[ServiceRegistry] = None,
        settings: Optional[HostSettings] = None,
    ) -> "Host":
        """Return the process-wide host, building it on the first call.

        Later calls return the same host and ignore their arguments.

        Args:
            registry: Registry used on the first call. Defaults to ``default_registry``.
            settings: Host options used on the first call.
        """
        with Host._instance_lock:
            if Host._instance is None:
                Host._instance = cls(registry, settings)
                logger.info("Host initialized with %d service(s)", len(Host._instance.descriptors))
            else:
                logger.debug("Host already initialized, returning the existing instance")
            return Host._instance

    @property
    def descriptors(self) -> ServiceDescriptorTable:
        return self._descriptors

    @property
    def resolver(self) -> DependencyResolver:
        return self._resolver

    @property
    def root_scope(self) -> Scope:
        return self._root_scope

    @property
    def settings(self) -> HostSettings:
        return self._settings

    @property
    def is_disposed(self) -> bool:
        return self._root_scope.is_disposed

    def get(self, service_type: Type[T]) -> T:
        """Resolve a service from the root scope.

        Disposable transient services resolved here are tracked by the root scope
        and are released only when the host is disposed. Resolve short-lived
        disposable transients from a scope created with create_scope().

        Args:
            service_type: The type to resolve.

        Returns:
            Instance of the requested type with all dependencies injected.

        Raises:
            UnresolvableError: If the service cannot be resolved.
            CyclicDependencyError: If a circular dependency is detected.
            CaptiveDependencyError: If a lifetime rule is violated.
            ScopeError: If the service needs a scope.
            ScopeDisposedError: If the host has been disposed.
        """
        return self._root_scope.get_or_create(service_type)

    def create_scope(self) -> Scope:
        """Create a scope with an empty cache bound to this host.

        Raises:
            ScopeDisposedError: If the host has been disposed.
        """
        if self._root_scope.is_disposed:
            raise ScopeDisposedError("Cannot create a scope from a disposed host.")
        scope = Scope(self)
        logger.debug("Created scope %#x", id(scope))
        return scope

    def validate(self) -> None:
        """Check the dependency graph of every registered service.

        Raises:
            CyclicDependencyError: If any graph contains a cycle.
            CaptiveDependencyError: If any service depends on a shorter-lived one.
            UnresolvableError: If any dependency has no registration.
        """
        for descriptor in self._descriptors:
            self._resolver.verify(descriptor)
        logger.debug("Validated %d service graph(s)", len(self._descriptors))

    def dispose(self) -> None:
        """Tear down the host, releasing singleton instances in reverse creation order.

        Raises:
            ScopeDisposedError: If the host is already disposed.
            DisposalError: If one or more instances failed to release.
        """
        self._root_scope.dispose()
