from typing import Any, FrozenSet, List, Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field

from simplemvvm.domain.enums import Lifetime
from simplemvvm.domain.exceptions import CyclicDependencyError


class ConstructorParameter(BaseModel):
    """A constructor parameter the resolver has to supply.

    Attributes:
        name: Parameter name in the constructor signature.
        service_type: Declared type hint of the parameter.
        positional: Whether the parameter is positional-only.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(..., description="Name of the constructor parameter.")
    service_type: Any = Field(..., description="Type requested by the parameter.")
    positional: bool = Field(default=False, description="Whether the parameter is positional-only.")


class Registration(BaseModel):
    """Value object representing a lifetime tag placed on a concrete type.

    Attributes:
        implementation_type: The concrete type being registered.
        lifetime: How long the instance should live.
        exposes: Additional base or interface types the service is requested as.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    implementation_type: Type = Field(..., description="The concrete type to be registered.")
    lifetime: Lifetime = Field(..., description="The lifetime of the registered service.")
    exposes: FrozenSet[Type] = Field(
        default_factory=frozenset,
        description="Interface or base types the service is exposed as.",
    )


class ServiceDescriptor(BaseModel):
    """Immutable metadata describing how to build and cache a service.

    Attributes:
        implementation_type: The concrete class to instantiate.
        lifetime: How long an instance lives.
        exposed_types: Types the implementation may be requested as, itself included.
        parameters: Injectable parameters of the selected constructor.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    implementation_type: Type = Field(..., description="The concrete type to instantiate.")
    lifetime: Lifetime = Field(..., description="The lifetime of the service.")
    exposed_types: FrozenSet[Type] = Field(
        default_factory=frozenset,
        description="Types under which the implementation may be requested.",
    )
    parameters: Tuple[ConstructorParameter, ...] = Field(
        default_factory=tuple,
        description="Constructor parameters resolved from the host.",
    )

    @property
    def name(self) -> str:
        return self.implementation_type.__name__


class ResolutionContext(BaseModel):
    """Tracks the implementation types under construction on the current call stack.

    Created fresh for each top-level request and discarded when it returns.

    Attributes:
        stack: Implementation types currently being constructed, outermost first.
        scope: The scope the request was issued against.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    stack: List[Type] = Field(
        default_factory=list,
        description="Stack of implementation types currently being constructed.",
    )
    scope: Optional[Any] = Field(default=None, description="Scope the request was issued against.")

    def push(self, implementation_type: Type) -> None:
        """Add a type to the resolution stack.

        Args:
            implementation_type: The type about to be constructed.

        Raises:
            CyclicDependencyError: If the type is already in the stack.
        """
        if implementation_type in self.stack:
            cycle = self.stack[self.stack.index(implementation_type) :] + [implementation_type]
            raise CyclicDependencyError(cycle)
        self.stack.append(implementation_type)

    def pop(self) -> None:
        """Remove the most recent type from the stack."""
        if self.stack:
            self.stack.pop()

    def path(self) -> List[Type]:
        """Return a copy of the current stack."""
        return list(self.stack)

    def clear(self) -> None:
        self.stack.clear()

    @property
    def depth(self) -> int:
        return len(self.stack)
