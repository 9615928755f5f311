import inspect
import logging
import threading
from typing import TYPE_CHECKING, Any, Dict, List, Type

from simplemvvm.application.descriptor_table import ServiceDescriptorTable, describe
from simplemvvm.application.settings import HostSettings
from simplemvvm.domain import (
    CaptiveDependencyError,
    DIException,
    IResolver,
    Lifetime,
    RegistrationError,
    ResolutionContext,
    ScopeError,
    ServiceDescriptor,
    UnresolvableError,
)

if TYPE_CHECKING:
    from simplemvvm.application.scope import Scope

logger = logging.getLogger(__name__)


class DependencyResolver(IResolver):
    """Resolves services by recursively resolving their constructor parameters.

    Before anything is constructed for a top-level request, the dependency graph
    of the requested service is walked over descriptors only, so that cycles,
    captive dependencies and missing registrations fail without touching any
    cache. Verified graphs are remembered.

    Attributes:
        _descriptors: The host's descriptor table.
        _settings: Host options.
        _verified: Implementation types whose graph has been checked, mapped to
            whether that graph contains a scoped service.
        _auto_wired: Descriptors built on the fly for unregistered types.
    """

    def __init__(self, descriptors: ServiceDescriptorTable, settings: HostSettings) -> None:
        self._descriptors = descriptors
        self._settings = settings
        self._verified: Dict[Type, bool] = {}
        self._auto_wired: Dict[Type, ServiceDescriptor] = {}
        self._lock = threading.Lock()

    def find_descriptor(self, service_type: Type) -> ServiceDescriptor:
        """Return the descriptor satisfying a requested type.

        Raises:
            UnresolvableError: If no registration exists and the type cannot be auto-wired.
        """
        descriptor = self._descriptors.find(service_type)
        if descriptor is not None:
            return descriptor
        if not self._settings.auto_wire:
            raise UnresolvableError(service_type, "No registration exists for this type.")
        return self._auto_wire(service_type)

    def _auto_wire(self, service_type: Type) -> ServiceDescriptor:
        if not inspect.isclass(service_type) or service_type.__module__ == "builtins":
            raise UnresolvableError(service_type, "Only concrete user-defined classes can be auto-wired.")

        with self._lock:
            descriptor = self._auto_wired.get(service_type)
            if descriptor is None:
                try:
                    descriptor = describe(service_type, Lifetime.TRANSIENT)
                except RegistrationError as e:
                    raise UnresolvableError(service_type, str(e)) from e
                self._auto_wired[service_type] = descriptor
                logger.debug("Auto-wired %s as transient", descriptor.name)
        return descriptor

    def verify(self, descriptor: ServiceDescriptor) -> bool:
        """Check the dependency graph of a service without constructing anything.

        Args:
            descriptor: The service to check.

        Returns:
            Whether the graph contains a scoped service.

        Raises:
            CyclicDependencyError: If the graph contains a cycle.
            CaptiveDependencyError: If a service depends on a shorter-lived one.
            UnresolvableError: If a dependency has no registration.
        """
        needs_scope = self._verified.get(descriptor.implementation_type)
        if needs_scope is None:
            needs_scope = self._walk(descriptor, ResolutionContext())
        return needs_scope

    def _walk(self, descriptor: ServiceDescriptor, context: ResolutionContext) -> bool:
        context.push(descriptor.implementation_type)
        try:
            needs_scope = descriptor.lifetime is Lifetime.SCOPED
            for parameter in descriptor.parameters:
                try:
                    dependency = self.find_descriptor(parameter.service_type)
                except UnresolvableError as e:
                    raise UnresolvableError(
                        descriptor.implementation_type,
                        f"Failed to resolve dependency for parameter '{parameter.name}': {e}",
                    ) from e

                if not descriptor.lifetime.can_depend_on(dependency.lifetime):
                    raise CaptiveDependencyError(
                        context.path() + [dependency.implementation_type],
                        descriptor.lifetime.value,
                        dependency.lifetime.value,
                    )

                known = self._verified.get(dependency.implementation_type)
                if known is None:
                    known = self._walk(dependency, context)
                needs_scope = needs_scope or known
        finally:
            context.pop()

        with self._lock:
            self._verified[descriptor.implementation_type] = needs_scope
        return needs_scope

    def resolve(self, service_type: Type, context: ResolutionContext) -> Any:
        """Resolve a service within the scope held by the context.

        Singletons are cached by the host's root scope, scoped services by the
        context's scope, and transient services are never cached but are tracked
        for disposal by the context's scope.

        Args:
            service_type: The type to resolve.
            context: Resolution context of the current request.

        Returns:
            Instance with all dependencies injected.

        Raises:
            UnresolvableError: If a dependency cannot be resolved or a constructor fails.
            CyclicDependencyError: If a circular dependency is detected.
            CaptiveDependencyError: If a lifetime rule is violated.
            ScopeError: If the context carries no scope, or a scoped service is
                requested from the root scope.

        Example:
            >>> class UserService:
            ...     def __init__(self, db: DatabaseService):
            ...         self.db = db
            >>>
            >>> resolver.resolve(UserService, ResolutionContext(scope=scope))
        """
        descriptor = self.find_descriptor(service_type)
        scope: "Scope" = context.scope
        if scope is None:
            raise ScopeError(f"Cannot resolve {descriptor.name} without a scope in the resolution context.")

        if context.depth == 0:
            needs_scope = self.verify(descriptor)
            if needs_scope and scope.is_root and not self._settings.allow_scoped_from_root:
                raise ScopeError(
                    f"Service {descriptor.name} requires a scoped service and cannot be "
                    "resolved from the root scope. Create a scope first."
                )

        if descriptor.lifetime is Lifetime.SINGLETON:
            return scope.root.get_or_construct(descriptor, lambda: self._construct(descriptor, context))
        if descriptor.lifetime is Lifetime.SCOPED:
            return scope.get_or_construct(descriptor, lambda: self._construct(descriptor, context))

        instance = self._construct(descriptor, context)
        scope.track(instance)
        return instance

    def _construct(self, descriptor: ServiceDescriptor, context: ResolutionContext) -> Any:
        context.push(descriptor.implementation_type)
        try:
            args: List[Any] = []
            kwargs: Dict[str, Any] = {}
            for parameter in descriptor.parameters:
                value = self.resolve(parameter.service_type, context)
                if parameter.positional:
                    args.append(value)
                else:
                    kwargs[parameter.name] = value

            try:
                instance = descriptor.implementation_type(*args, **kwargs)
            except DIException:
                raise
            except Exception as e:
                raise UnresolvableError(
                    descriptor.implementation_type,
                    f"Failed to create instance: {e}",
                ) from e
        finally:
            context.pop()

        logger.debug("Constructed %s (%s)", descriptor.name, descriptor.lifetime)
        return instance
