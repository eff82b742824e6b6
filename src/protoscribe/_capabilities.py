"""Capabilities a model node may implement, checked during traversal."""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, Self, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from .imports import ImportSpec
    from .writer import ProtoWriter

T_co = TypeVar("T_co", covariant=True)


@dataclass(frozen=True)
class FieldIdentity:
    """Identifies a declared field for collision purposes.

    Attributes:
        name: Field name.
        number: Field number, or None for fields without one (e.g. rpc methods).
    """

    name: str
    number: int | None = None


@runtime_checkable
class Emittable(Protocol):
    """Something that writes itself as proto source."""

    def emit(self: Self, writer: "ProtoWriter") -> None:
        """Write this node using the writer."""


@runtime_checkable
class Buildable(Protocol[T_co]):
    """A builder, or an already built node, that produces a model node."""

    def build(self: Self) -> T_co:
        """Return the built node."""


@runtime_checkable
class NamedType(Protocol):
    """A declaration whose name must be unique in its enclosing file or message."""

    def type_name(self: Self) -> str:
        """Return the declared name."""


@runtime_checkable
class SingleField(Protocol):
    """A single field whose name and number must be unique in its scope."""

    def field_identity(self: Self) -> FieldIdentity:
        """Return the field's identity."""


@runtime_checkable
class FieldGroup(Protocol):
    """A named group of fields propagated into the enclosing scope."""

    def group_name(self: Self) -> str:
        """Return the name of the group."""

    def member_identities(self: Self) -> list[FieldIdentity]:
        """Return the identities of the fields in the group."""


@runtime_checkable
class FieldReservations(Protocol):
    """A block of field numbers and names that may not be used."""

    def reserved_numbers(self: Self) -> Iterable[int]:
        """Return the distinct reserved numbers."""

    def reserved_names(self: Self) -> Iterable[str]:
        """Return the distinct reserved names."""


@runtime_checkable
class Importable(Protocol):
    """A declaration that requires imports in the file that contains it."""

    def imports(self: Self) -> list["ImportSpec"]:
        """Return the imports this declaration needs."""
