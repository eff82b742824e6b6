"""Message declarations."""

from typing import Any, Self

from pydantic import PrivateAttr, model_validator

from ._base import ProtoSpec, build_all, emit_each
from ._capabilities import Buildable, FieldGroup, NamedType, SingleField
from ._monitors import FieldMonitor, NameMonitor
from .enums import EnumSpec
from .fields import MapFieldSpec, MessageField, MessageFieldSpec, OneofFieldSpec
from .options import OptionLike, OptionSpec, build_options, check_option_types
from .reservations import ReservationSpec
from .types import Comment, OptionType
from .writer import ProtoWriter, Section

_FIELD_TYPES = (MessageFieldSpec, MapFieldSpec, OneofFieldSpec)


class MessageSpec(ProtoSpec):
    """A ``message`` declaration.

    The body is made of blocks. Each block holds the elements added together
    in one builder call, and blocks are separated by a blank line.

    Attributes:
        name: Message name.
        comment: Comment lines written above the message.
        options: Message options, written first in the body.
        reservations: Reserved numbers and names, written after the options.
        blocks: Fields, oneofs, nested messages and nested enums in caller order.
    """

    name: str
    comment: Comment = ()
    options: tuple[OptionSpec, ...] = ()
    reservations: tuple[ReservationSpec, ...] = ()
    blocks: "tuple[tuple[MessageField | MessageSpec | EnumSpec, ...], ...]" = ()

    _field_monitor: FieldMonitor = PrivateAttr(default_factory=FieldMonitor)
    _name_monitor: NameMonitor = PrivateAttr(default_factory=NameMonitor)

    def model_post_init(self: Self, context: Any, /) -> None:
        """Scope the name monitor to this message."""
        self._name_monitor = NameMonitor(self.name)

    @model_validator(mode="after")
    def _check_options(self: Self) -> Self:
        check_option_types(self.options, OptionType.MESSAGE)
        return self

    @classmethod
    def builder(cls, name: str) -> "MessageSpecBuilder":
        """Start building a message."""
        return MessageSpecBuilder(name)

    def type_name(self: Self) -> str:
        """Return the message name."""
        return self.name

    def emit(self: Self, writer: ProtoWriter) -> None:
        """Write the message and everything nested in it.

        Nested type names are checked against this message's other nested
        types only, and fields (including oneof members) against this
        message's other fields and reservations.

        Raises:
            UsageError: On the first reused or reserved name or number.
        """
        self._field_monitor.reset()
        self._name_monitor.reset()
        if self.comment:
            writer.emit_comment(self.comment)

        sections: list[Section] = []
        if self.options:
            sections.append(emit_each(self.options))
        if self.reservations:
            sections.append(self._emit_reservations)
        sections.extend(self._block_section(block) for block in self.blocks)
        writer.emit_scope(f"message {self.name}", sections)

    def _emit_reservations(self: Self, writer: ProtoWriter) -> None:
        for reservation in self.reservations:
            self._field_monitor.register_reservation(reservation)
            reservation.emit(writer)

    def _block_section(self: Self, block: tuple[Any, ...]) -> Section:
        def section(writer: ProtoWriter) -> None:
            for element in block:
                self._register(element)
                element.emit(writer)

        return section

    def _register(self: Self, element: object) -> None:
        if isinstance(element, NamedType):
            self._name_monitor.register(element.type_name())
        if isinstance(element, FieldGroup):
            self._field_monitor.register_field_group(
                element.group_name(), element.member_identities()
            )
        elif isinstance(element, SingleField):
            self._field_monitor.register_field(element.field_identity())


def _check_message_field(field: object) -> None:
    if not isinstance(field, _FIELD_TYPES):
        raise ValueError(f"'{type(field).__name__}' is not a message field")


class MessageSpecBuilder:
    """Builder for a :class:`MessageSpec`."""

    def __init__(self: Self, name: str) -> None:
        """Initialize the builder."""
        self._name = name
        self._comment: Comment = ()
        self._options: list[OptionSpec] = []
        self._reservations: list[ReservationSpec] = []
        self._blocks: list[tuple[Any, ...]] = []

    def set_comment(self: Self, *lines: str) -> Self:
        """Set the comment written above the message."""
        self._comment = lines
        return self

    def add_options(self: Self, *options: OptionLike) -> Self:
        """Add message options.

        Raises:
            ValueError: If an option isn't a message option.
        """
        self._options.extend(build_options(options, OptionType.MESSAGE))
        return self

    def add_reservations(self: Self, *reservations: Buildable[ReservationSpec]) -> Self:
        """Add reserved numbers or names."""
        self._reservations.extend(build_all(reservations))
        return self

    def add_fields(self: Self, *fields: Buildable[MessageField]) -> Self:
        """Add a block of fields, map fields or oneofs.

        Raises:
            ValueError: If an item isn't a message field.
        """
        return self._add_block(build_all(fields, _check_message_field))

    def add_messages(self: Self, *messages: Buildable["MessageSpec"]) -> Self:
        """Add a block of nested messages."""
        return self._add_block(build_all(messages))

    def add_enums(self: Self, *enums: Buildable[EnumSpec]) -> Self:
        """Add a block of nested enums."""
        return self._add_block(build_all(enums))

    def _add_block(self: Self, block: tuple[Any, ...]) -> Self:
        if block:
            self._blocks.append(block)
        return self

    def build(self: Self) -> MessageSpec:
        """Build the message."""
        return MessageSpec(
            name=self._name,
            comment=self._comment,
            options=tuple(self._options),
            reservations=tuple(self._reservations),
            blocks=tuple(self._blocks),
        )
