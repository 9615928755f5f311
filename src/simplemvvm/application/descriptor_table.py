"""Application layer - Immutable table of service descriptors."""

import inspect
import logging
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Type, get_type_hints

from simplemvvm.domain import (
    ConstructorParameter,
    Lifetime,
    Registration,
    RegistrationError,
    ServiceDescriptor,
)

logger = logging.getLogger(__name__)


def inspect_constructor(implementation_type: Type) -> Tuple[ConstructorParameter, ...]:
    """Collect the injectable parameters of a class constructor.

    Parameters with defaults and variadic parameters are left to the constructor.
    Every other parameter must carry a type hint.

    Args:
        implementation_type: The class to inspect.

    Returns:
        The parameters the resolver has to supply, in signature order.

    Raises:
        RegistrationError: If the class is abstract, a protocol, or has a required
            parameter without a usable type hint.
    """
    name = implementation_type.__name__
    if inspect.isabstract(implementation_type) or getattr(implementation_type, "_is_protocol", False):
        raise RegistrationError(f"Service {name} is not a concrete type and cannot be instantiated.")

    init = implementation_type.__init__
    # Constructors implemented in C (object.__init__ and friends) take nothing injectable.
    if not (inspect.isfunction(init) or inspect.ismethod(init)):
        return ()

    try:
        signature = inspect.signature(init)
        type_hints = get_type_hints(init)
    except (NameError, TypeError, ValueError) as e:
        raise RegistrationError(f"Service {name} has no inspectable constructor: {e}") from e

    parameters: List[ConstructorParameter] = []
    for param_name, param in signature.parameters.items():
        if param_name == "self":
            continue
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        if param.default is not inspect.Parameter.empty:
            continue
        if param_name not in type_hints:
            raise RegistrationError(
                f"Service {name} has no suitable constructor: parameter '{param_name}' "
                "lacks a type hint and has no default value."
            )
        parameters.append(
            ConstructorParameter(
                name=param_name,
                service_type=type_hints[param_name],
                positional=param.kind is inspect.Parameter.POSITIONAL_ONLY,
            )
        )
    return tuple(parameters)


def _check_exposed_type(implementation_type: Type, exposed_type: Type) -> None:
    if not inspect.isclass(exposed_type):
        raise RegistrationError(
            f"Service {implementation_type.__name__} exposes {exposed_type!r}, which is not a type."
        )
    try:
        is_subtype = issubclass(implementation_type, exposed_type)
    except TypeError:
        # Non runtime-checkable protocols are matched structurally.
        return
    if not is_subtype:
        raise RegistrationError(
            f"Service {implementation_type.__name__} cannot be exposed as "
            f"{exposed_type.__name__}: it is not a subtype of it."
        )


def describe(
    implementation_type: Type,
    lifetime: Lifetime,
    exposes: Iterable[Type] = (),
) -> ServiceDescriptor:
    """Build the descriptor of a single concrete type.

    Raises:
        RegistrationError: If the type cannot be described.
    """
    exposed = set(exposes)
    for exposed_type in exposed:
        _check_exposed_type(implementation_type, exposed_type)
    exposed.add(implementation_type)

    return ServiceDescriptor(
        implementation_type=implementation_type,
        lifetime=lifetime,
        exposed_types=frozenset(exposed),
        parameters=inspect_constructor(implementation_type),
    )


class ServiceDescriptorTable:
    """Read-only lookup from requested types to service descriptors.

    Built once when the host starts. Each implementation type has exactly one
    descriptor, and each exposed type maps to at most one implementation.
    Concurrent reads need no synchronization.

    Attributes:
        _by_implementation: Descriptors keyed by implementation type.
        _by_exposed: Descriptors keyed by every type they can satisfy.
    """

    def __init__(self, descriptors: Iterable[ServiceDescriptor] = ()) -> None:
        self._by_implementation: Dict[Type, ServiceDescriptor] = {}
        self._by_exposed: Dict[Type, ServiceDescriptor] = {}

        for descriptor in descriptors:
            implementation_type = descriptor.implementation_type
            if implementation_type in self._by_implementation:
                raise RegistrationError(f"Service {descriptor.name} is described more than once.")
            self._by_implementation[implementation_type] = descriptor

            for exposed_type in descriptor.exposed_types:
                claimed_by = self._by_exposed.get(exposed_type)
                if claimed_by is not None:
                    raise RegistrationError(
                        f"Ambiguous registration: {exposed_type.__name__} is exposed by both "
                        f"{claimed_by.name} and {descriptor.name}."
                    )
                self._by_exposed[exposed_type] = descriptor

    @classmethod
    def build(cls, registrations: Iterable[Registration]) -> "ServiceDescriptorTable":
        """Describe and validate every registration.

        Args:
            registrations: Registrations to describe, usually ``registry.registrations()``.

        Returns:
            The frozen table.

        Raises:
            RegistrationError: On the first registration that cannot be described,
                or on an ambiguous exposed type.
        """
        table = cls(
            describe(registration.implementation_type, registration.lifetime, registration.exposes)
            for registration in registrations
        )
        logger.debug(
            "Built descriptor table with %d service(s) and %d exposed type(s)",
            len(table._by_implementation),
            len(table._by_exposed),
        )
        return table

    def find(self, service_type: object) -> Optional[ServiceDescriptor]:
        """Return the descriptor satisfying the requested type, if any."""
        try:
            return self._by_exposed.get(service_type)  # type: ignore[arg-type]
        except TypeError:
            # Unhashable type hints cannot be registered.
            return None

    def descriptors(self) -> List[ServiceDescriptor]:
        return list(self._by_implementation.values())

    def __contains__(self, service_type: object) -> bool:
        return self.find(service_type) is not None

    def __iter__(self) -> Iterator[ServiceDescriptor]:
        return iter(self.descriptors())

    def __len__(self) -> int:
        return len(self._by_implementation)
