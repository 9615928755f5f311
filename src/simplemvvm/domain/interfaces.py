from abc import ABC, abstractmethod
from typing import Any, Type, TypeVar

from simplemvvm.domain.models import ResolutionContext

T = TypeVar("T")


class IScope(ABC):
    """Abstract interface for a unit of instance sharing and disposal."""

    @abstractmethod
    def get_or_create(self, service_type: Type[T]) -> T:
        """Return the cached instance of a service or create it.

        Args:
            service_type: The type to resolve.
        """

    @abstractmethod
    def dispose(self) -> None:
        """Release every disposable instance created within this scope."""

    @property
    @abstractmethod
    def is_disposed(self) -> bool:
        """Whether the scope has been disposed."""


class IResolver(ABC):
    """Abstract interface for dependency resolution operations."""

    @abstractmethod
    def resolve(self, service_type: Type, context: ResolutionContext) -> Any:
        """Resolve constructor dependencies and produce an instance.

        Args:
            service_type: The type to resolve.
            context: The resolution context of the current request.

        Returns:
            Instance with all dependencies injected.

        Raises:
            UnresolvableError: If a dependency cannot be resolved.
            CyclicDependencyError: If the type depends on itself.
            CaptiveDependencyError: If a lifetime rule is violated.
        """


class IHost(ABC):
    """Abstract interface for the service host entry points."""

    @abstractmethod
    def get(self, service_type: Type[T]) -> T:
        """Resolve a service from the root scope.

        Args:
            service_type: The type to resolve.
        """

    @abstractmethod
    def create_scope(self) -> IScope:
        """Create a new scope with an empty cache."""

    @abstractmethod
    def dispose(self) -> None:
        """Tear down the host, disposing singleton instances."""
