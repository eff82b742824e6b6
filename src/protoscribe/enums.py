"""Enum declarations and their values."""

from typing import Self

from pydantic import PrivateAttr, model_validator

from ._base import ProtoSpec, build_all, emit_each
from ._capabilities import Buildable, FieldIdentity
from ._monitors import FieldMonitor
from .options import (
    OptionLike,
    OptionSpec,
    build_options,
    check_option_types,
    emit_inline_options,
)
from .reservations import ReservationSpec
from .types import Comment, OptionType
from .writer import ProtoWriter, Section


class EnumFieldSpec(ProtoSpec):
    """A single value of an enum.

    Attributes:
        name: Value name.
        number: Value number, may be zero but not negative.
        comment: Comment lines written above the value.
        options: Enum value options written inline.
    """

    name: str
    number: int
    comment: Comment = ()
    options: tuple[OptionSpec, ...] = ()

    @model_validator(mode="after")
    def _check_value(self: Self) -> Self:
        if self.number < 0:
            raise ValueError("field number may not be negative")
        check_option_types(self.options, OptionType.ENUM_VALUE)
        return self

    @classmethod
    def builder(cls, name: str, number: int) -> "EnumFieldSpecBuilder":
        """Start building an enum value."""
        return EnumFieldSpecBuilder(name, number)

    def field_identity(self: Self) -> FieldIdentity:
        """Return the value's name and number."""
        return FieldIdentity(self.name, self.number)

    def emit(self: Self, writer: ProtoWriter) -> None:
        """Write ``NAME = N;`` with any inline options."""
        if self.comment:
            writer.emit_comment(self.comment)
        writer.emit(f"{self.name} = {self.number}")
        emit_inline_options(writer, self.options)
        writer.emit(";\n")


class EnumFieldSpecBuilder:
    """Builder for an :class:`EnumFieldSpec`."""

    def __init__(self: Self, name: str, number: int) -> None:
        """Initialize the builder.

        Raises:
            ValueError: If the number is negative.
        """
        if number < 0:
            raise ValueError("field number may not be negative")
        self._name = name
        self._number = number
        self._comment: Comment = ()
        self._options: list[OptionSpec] = []

    def set_comment(self: Self, *lines: str) -> Self:
        """Set the comment written above the value."""
        self._comment = lines
        return self

    def add_options(self: Self, *options: OptionLike) -> Self:
        """Add enum value options.

        Raises:
            ValueError: If an option isn't an enum value option.
        """
        self._options.extend(build_options(options, OptionType.ENUM_VALUE))
        return self

    def build(self: Self) -> EnumFieldSpec:
        """Build the enum value."""
        return EnumFieldSpec(
            name=self._name,
            number=self._number,
            comment=self._comment,
            options=tuple(self._options),
        )


class EnumSpec(ProtoSpec):
    """An ``enum`` declaration.

    Attributes:
        name: Enum name.
        comment: Comment lines written above the enum.
        options: Enum options, written first in the body.
        reservations: Reserved numbers and names, written after the options.
        enum_values: Values in declaration order.
    """

    name: str
    comment: Comment = ()
    options: tuple[OptionSpec, ...] = ()
    reservations: tuple[ReservationSpec, ...] = ()
    enum_values: tuple[EnumFieldSpec, ...] = ()

    _field_monitor: FieldMonitor = PrivateAttr(default_factory=FieldMonitor)

    @model_validator(mode="after")
    def _check_options(self: Self) -> Self:
        check_option_types(self.options, OptionType.ENUM)
        return self

    @classmethod
    def builder(cls, name: str) -> "EnumSpecBuilder":
        """Start building an enum."""
        return EnumSpecBuilder(name)

    def type_name(self: Self) -> str:
        """Return the enum name."""
        return self.name

    def emit(self: Self, writer: ProtoWriter) -> None:
        """Write the enum, checking values against reservations and each other.

        Raises:
            UsageError: If a value name or number is reused or reserved.
        """
        monitor = self._field_monitor
        monitor.reset()
        if self.comment:
            writer.emit_comment(self.comment)

        def reservations(w: ProtoWriter) -> None:
            for reservation in self.reservations:
                monitor.register_reservation(reservation)
                reservation.emit(w)

        def enum_values(w: ProtoWriter) -> None:
            for value in self.enum_values:
                monitor.register_field(value.field_identity())
                value.emit(w)

        sections: list[Section] = []
        if self.options:
            sections.append(emit_each(self.options))
        if self.reservations:
            sections.append(reservations)
        if self.enum_values:
            sections.append(enum_values)
        writer.emit_scope(f"enum {self.name}", sections)


class EnumSpecBuilder:
    """Builder for an :class:`EnumSpec`."""

    def __init__(self: Self, name: str) -> None:
        """Initialize the builder."""
        self._name = name
        self._comment: Comment = ()
        self._options: list[OptionSpec] = []
        self._reservations: list[ReservationSpec] = []
        self._values: list[EnumFieldSpec] = []

    def set_comment(self: Self, *lines: str) -> Self:
        """Set the comment written above the enum."""
        self._comment = lines
        return self

    def add_options(self: Self, *options: OptionLike) -> Self:
        """Add enum options.

        Raises:
            ValueError: If an option isn't an enum option.
        """
        self._options.extend(build_options(options, OptionType.ENUM))
        return self

    def add_reservations(self: Self, *reservations: Buildable[ReservationSpec]) -> Self:
        """Add reserved numbers or names."""
        self._reservations.extend(build_all(reservations))
        return self

    def add_values(self: Self, *values: Buildable[EnumFieldSpec]) -> Self:
        """Add enum values."""
        self._values.extend(build_all(values))
        return self

    def build(self: Self) -> EnumSpec:
        """Build the enum."""
        return EnumSpec(
            name=self._name,
            comment=self._comment,
            options=tuple(self._options),
            reservations=tuple(self._reservations),
            enum_values=tuple(self._values),
        )
