from typing import List, Optional, Sequence, Type


def _names(chain: Sequence[Type]) -> str:
    return " -> ".join(getattr(cls, "__name__", repr(cls)) for cls in chain)


class DIException(Exception):
    """Base exception for service host errors."""


class RegistrationError(DIException):
    """Raised while building the descriptor table.

    This occurs when:
    - Two implementations claim the same exposed type.
    - A type has no suitable constructor (required parameter without a type hint).
    - A registered type is abstract.
    - An exposed type is not a base of the implementation.
    - The same type is registered with two different lifetimes.
    """


class CyclicDependencyError(DIException):
    """Raised when a type depends on itself transitively.

    Attributes:
        cycle: Types involved in the cycle, the first one repeated at the end.
    """

    def __init__(self, cycle: List[Type]) -> None:
        self.cycle = cycle
        super().__init__(f"Cyclic dependency detected: {_names(cycle)}")


class CaptiveDependencyError(DIException):
    """Raised when a longer-lived service would capture a shorter-lived one.

    Attributes:
        chain: Dependency path ending with the captured type.
        dependent_lifetime: Lifetime of the capturing service.
        dependency_lifetime: Lifetime of the captured service.
    """

    def __init__(self, chain: List[Type], dependent_lifetime: str, dependency_lifetime: str) -> None:
        self.chain = chain
        self.dependent_lifetime = dependent_lifetime
        self.dependency_lifetime = dependency_lifetime
        super().__init__(
            f"Captive dependency: {dependent_lifetime} service cannot depend on "
            f"{dependency_lifetime} service ({_names(chain)})"
        )


class UnresolvableError(DIException):
    """Raised when a dependency cannot be resolved.

    This occurs when:
    - No registration exists for the requested type.
    - The constructor of the type raised an exception.

    Attributes:
        cls: The class type that could not be resolved.
        reason: Optional reason for the failure.
    """

    def __init__(self, cls: Type, reason: Optional[str] = None) -> None:
        self.cls = cls
        self.reason = reason
        message = f"Cannot resolve dependency for type: {getattr(cls, '__name__', repr(cls))}"
        if reason:
            message += f". Reason: {reason}"
        super().__init__(message)


class ScopeError(DIException):
    """Raised for invalid scope operations.

    This occurs when a scoped service is requested from the root scope
    and the host does not allow it.
    """


class ScopeDisposedError(ScopeError):
    """Raised when an operation is attempted against a disposed scope."""


class DisposalError(DIException):
    """Raised after disposal when one or more instances failed to release.

    Attributes:
        errors: Every underlying exception, in the order they occurred.
    """

    def __init__(self, errors: List[BaseException]) -> None:
        self.errors = errors
        details = "; ".join(f"{type(error).__name__}: {error}" for error in errors)
        super().__init__(f"{len(errors)} instance(s) failed to dispose: {details}")
