"""Static collections of named items that can be registered as services."""

from typing import Generic, Iterator, Protocol, Sequence, Tuple, TypeVar, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field


@runtime_checkable
class Named(Protocol):
    """Anything with a display name and a description."""

    name: str
    description: str


class Element(BaseModel):
    """A named item of a content collection."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Display name of the element.")
    description: str = Field(default="", description="Human readable description.")


T = TypeVar("T", bound=Named)


class Content(Generic[T]):
    """Immutable collection of named items.

    Subclasses declare their items as a class attribute and are typically
    registered as singletons. The collection takes part in resolution only as
    a leaf dependency.

    Example:
        >>> @singleton
        ... class Elements(Content[Element]):
        ...     items = (Element(name="Element 1", description="Description of Element 1"),)
    """

    items: Sequence[T] = ()

    @property
    def all(self) -> Tuple[T, ...]:
        return tuple(self.items)

    def by_name(self, name: str) -> T:
        """Return the first item with the given name.

        Raises:
            KeyError: If no item has that name.
        """
        for item in self.items:
            if item.name == name:
                return item
        raise KeyError(name)

    def names(self) -> Tuple[str, ...]:
        return tuple(item.name for item in self.items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> T:
        return self.items[index]
