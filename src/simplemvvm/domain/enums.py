from enum import Enum


class Lifetime(str, Enum):
    """Defines the lifetime of a service instance.

    Attributes:
        SINGLETON: Single instance shared across the entire process.
        SCOPED: Single instance per scope.
        TRANSIENT: New instance created on each request.
    """

    TRANSIENT = "transient"
    SCOPED = "scoped"
    SINGLETON = "singleton"

    @property
    def durability(self) -> int:
        """Rank of the lifetime, higher lives longer."""
        return _DURABILITY[self]

    def can_depend_on(self, other: "Lifetime") -> bool:
        """Whether a service of this lifetime may hold a service of `other`.

        Singleton may depend on Singleton only, Scoped on Singleton or Scoped,
        Transient on anything.
        """
        if self is Lifetime.TRANSIENT:
            return True
        return other.durability >= self.durability

    def __str__(self) -> str:
        return self.value


_DURABILITY = {
    Lifetime.TRANSIENT: 0,
    Lifetime.SCOPED: 1,
    Lifetime.SINGLETON: 2,
}
