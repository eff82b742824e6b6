"""Fields that may appear in a message body: plain, map and oneof fields."""

from collections.abc import Iterable
from typing import Any, Self, TypeAlias

from pydantic import field_validator, model_validator

from ._base import ProtoSpec, build_all, emit_each
from ._capabilities import Buildable, FieldIdentity
from .options import (
    OptionLike,
    OptionSpec,
    build_options,
    check_option_types,
    emit_inline_options,
)
from .types import MAP_KEY_TYPES, Comment, FieldModifier, FieldType, OptionType
from .writer import ProtoWriter, Section

_CUSTOM_TYPE_ERROR = "custom type names only supported for MESSAGE and ENUM types"


def _check_field_number(number: int) -> None:
    if number <= 0:
        raise ValueError("field number must be positive")


def _check_custom_type(
    name: str, field_type: FieldType, custom_type_name: str | None
) -> None:
    if custom_type_name is not None and not field_type.is_user_defined:
        raise ValueError(_CUSTOM_TYPE_ERROR)
    if custom_type_name is None and field_type.is_user_defined:
        raise ValueError(
            f"'{name}' type is {field_type} and needs a custom type name "
            "associated with it"
        )


class MessageFieldSpec(ProtoSpec):
    """A plain field of a message, oneof or extension.

    Attributes:
        field_type: Type of the field.
        name: Field name.
        number: Field number, must be positive.
        modifier: ``repeated``, ``optional`` or no label.
        custom_type_name: Type name written for ``MESSAGE`` and ``ENUM`` fields.
        comment: Comment lines written above the field.
        options: Field options written inline.
    """

    field_type: FieldType
    name: str
    number: int
    modifier: FieldModifier = FieldModifier.NONE
    custom_type_name: str | None = None
    comment: Comment = ()
    options: tuple[OptionSpec, ...] = ()

    @model_validator(mode="after")
    def _check_field(self: Self) -> Self:
        _check_field_number(self.number)
        _check_custom_type(self.name, self.field_type, self.custom_type_name)
        check_option_types(self.options, OptionType.FIELD)
        return self

    @classmethod
    def builder(
        cls, field_type: FieldType, name: str, number: int
    ) -> "MessageFieldSpecBuilder":
        """Start building a field without a label."""
        return MessageFieldSpecBuilder(field_type, name, number)

    @classmethod
    def repeated(
        cls, field_type: FieldType, name: str, number: int
    ) -> "MessageFieldSpecBuilder":
        """Start building a ``repeated`` field."""
        return MessageFieldSpecBuilder(field_type, name, number).set_repeated()

    @classmethod
    def optional(
        cls, field_type: FieldType, name: str, number: int
    ) -> "MessageFieldSpecBuilder":
        """Start building an ``optional`` field."""
        return MessageFieldSpecBuilder(field_type, name, number).set_optional()

    @classmethod
    def message(
        cls, type_name: str, name: str, number: int
    ) -> "MessageFieldSpecBuilder":
        """Start building a field whose type is the named message."""
        builder = MessageFieldSpecBuilder(FieldType.MESSAGE, name, number)
        return builder.set_custom_type_name(type_name)

    @classmethod
    def enum(
        cls, type_name: str, name: str, number: int
    ) -> "MessageFieldSpecBuilder":
        """Start building a field whose type is the named enum."""
        builder = MessageFieldSpecBuilder(FieldType.ENUM, name, number)
        return builder.set_custom_type_name(type_name)

    @property
    def type_label(self: Self) -> str:
        """Type as written in the declaration."""
        return self.custom_type_name or str(self.field_type)

    def field_identity(self: Self) -> FieldIdentity:
        """Return the field's name and number."""
        return FieldIdentity(self.name, self.number)

    def emit(self: Self, writer: ProtoWriter) -> None:
        """Write the field declaration."""
        if self.comment:
            writer.emit_comment(self.comment)
        prefix = f"{self.modifier} " if self.modifier != FieldModifier.NONE else ""
        writer.emit(f"{prefix}{self.type_label} {self.name} = {self.number}")
        emit_inline_options(writer, self.options)
        writer.emit(";\n")


class MessageFieldSpecBuilder:
    """Builder for a :class:`MessageFieldSpec`."""

    def __init__(self: Self, field_type: FieldType, name: str, number: int) -> None:
        """Initialize the builder.

        Args:
            field_type: Type of the field.
            name: Field name.
            number: Field number.

        Raises:
            ValueError: If the number isn't positive.
        """
        _check_field_number(number)
        self._field_type = field_type
        self._name = name
        self._number = number
        self._modifier = FieldModifier.NONE
        self._custom_type_name: str | None = None
        self._comment: Comment = ()
        self._options: list[OptionSpec] = []

    def set_comment(self: Self, *lines: str) -> Self:
        """Set the comment written above the field."""
        self._comment = lines
        return self

    def set_repeated(self: Self, repeated: bool = True) -> Self:
        """Mark the field ``repeated``.

        Raises:
            ValueError: If the field is already optional.
        """
        if self._modifier == FieldModifier.OPTIONAL:
            raise ValueError("optional fields cannot be repeated")
        self._modifier = FieldModifier.REPEATED if repeated else FieldModifier.NONE
        return self

    def set_optional(self: Self, optional: bool = True) -> Self:
        """Mark the field ``optional``.

        Raises:
            ValueError: If the field is already repeated.
        """
        if self._modifier == FieldModifier.REPEATED:
            raise ValueError("repeated fields cannot be explicitly optional")
        self._modifier = FieldModifier.OPTIONAL if optional else FieldModifier.NONE
        return self

    def set_custom_type_name(self: Self, custom_type_name: str) -> Self:
        """Set the message or enum type name of the field.

        Raises:
            ValueError: If the field type is neither ``MESSAGE`` nor ``ENUM``.
        """
        if not self._field_type.is_user_defined:
            raise ValueError(_CUSTOM_TYPE_ERROR)
        self._custom_type_name = custom_type_name
        return self

    def add_options(self: Self, *options: OptionLike) -> Self:
        """Add field options.

        Raises:
            ValueError: If an option isn't a field option.
        """
        self._options.extend(build_options(options, OptionType.FIELD))
        return self

    def build(self: Self) -> MessageFieldSpec:
        """Build the field.

        Raises:
            ValueError: If a ``MESSAGE`` or ``ENUM`` field has no type name.
        """
        return MessageFieldSpec(
            field_type=self._field_type,
            name=self._name,
            number=self._number,
            modifier=self._modifier,
            custom_type_name=self._custom_type_name,
            comment=self._comment,
            options=tuple(self._options),
        )


class MapFieldSpec(ProtoSpec):
    """A ``map<K, V>`` field of a message.

    Attributes:
        key_type: Key type, limited to integral types, ``bool`` and ``string``.
        value_type: Value type.
        name: Field name.
        number: Field number, must be positive.
        custom_type_name: Type name written for ``MESSAGE`` and ``ENUM`` values.
        comment: Comment lines written above the field.
        options: Field options written inline.
    """

    key_type: FieldType
    value_type: FieldType
    name: str
    number: int
    custom_type_name: str | None = None
    comment: Comment = ()
    options: tuple[OptionSpec, ...] = ()

    @field_validator("key_type")
    @classmethod
    def _validate_key_type(cls, key_type: FieldType) -> FieldType:
        if key_type not in MAP_KEY_TYPES:
            raise ValueError(f"key type must be of an acceptable type, not {key_type}")
        return key_type

    @model_validator(mode="after")
    def _check_field(self: Self) -> Self:
        _check_field_number(self.number)
        _check_custom_type(self.name, self.value_type, self.custom_type_name)
        check_option_types(self.options, OptionType.FIELD)
        return self

    @classmethod
    def builder(
        cls, key_type: FieldType, value_type: FieldType, name: str, number: int
    ) -> "MapFieldSpecBuilder":
        """Start building a map field."""
        return MapFieldSpecBuilder(key_type, value_type, name, number)

    def field_identity(self: Self) -> FieldIdentity:
        """Return the field's name and number."""
        return FieldIdentity(self.name, self.number)

    def emit(self: Self, writer: ProtoWriter) -> None:
        """Write the map field declaration."""
        if self.comment:
            writer.emit_comment(self.comment)
        value_label = self.custom_type_name or str(self.value_type)
        writer.emit(
            f"map<{self.key_type}, {value_label}> {self.name} = {self.number}"
        )
        emit_inline_options(writer, self.options)
        writer.emit(";\n")


class MapFieldSpecBuilder:
    """Builder for a :class:`MapFieldSpec`."""

    def __init__(
        self: Self, key_type: FieldType, value_type: FieldType, name: str, number: int
    ) -> None:
        """Initialize the builder.

        Raises:
            ValueError: If the key type isn't allowed or the number isn't
                positive.
        """
        if key_type not in MAP_KEY_TYPES:
            raise ValueError(f"key type must be of an acceptable type, not {key_type}")
        _check_field_number(number)
        self._key_type = key_type
        self._value_type = value_type
        self._name = name
        self._number = number
        self._custom_type_name: str | None = None
        self._comment: Comment = ()
        self._options: list[OptionSpec] = []

    def set_comment(self: Self, *lines: str) -> Self:
        """Set the comment written above the field."""
        self._comment = lines
        return self

    def set_custom_type_name(self: Self, custom_type_name: str) -> Self:
        """Set the message or enum type name of the map values.

        Raises:
            ValueError: If the value type is neither ``MESSAGE`` nor ``ENUM``.
        """
        if not self._value_type.is_user_defined:
            raise ValueError(_CUSTOM_TYPE_ERROR)
        self._custom_type_name = custom_type_name
        return self

    def add_options(self: Self, *options: OptionLike) -> Self:
        """Add field options."""
        self._options.extend(build_options(options, OptionType.FIELD))
        return self

    def build(self: Self) -> MapFieldSpec:
        """Build the map field."""
        return MapFieldSpec(
            key_type=self._key_type,
            value_type=self._value_type,
            name=self._name,
            number=self._number,
            custom_type_name=self._custom_type_name,
            comment=self._comment,
            options=tuple(self._options),
        )


def check_oneof_member(field: Any) -> None:
    """Verify a field may appear directly inside a oneof.

    Args:
        field: A built message field.

    Raises:
        ValueError: For maps, nested oneofs, and repeated or optional fields.
    """
    if isinstance(field, MapFieldSpec):
        raise ValueError(f"map field '{field.name}' not allowed in oneof")
    if isinstance(field, OneofFieldSpec):
        raise ValueError(f"immediate inner oneof field '{field.name}' disallowed")
    if isinstance(field, MessageFieldSpec):
        if field.modifier == FieldModifier.REPEATED:
            raise ValueError(f"repeated field '{field.name}' not allowed in oneof")
        if field.modifier == FieldModifier.OPTIONAL:
            raise ValueError(f"optional field '{field.name}' not allowed in oneof")


class OneofFieldSpec(ProtoSpec):
    """A ``oneof`` group inside a message.

    A oneof has no scope of its own: its name and its members are registered
    with the enclosing message's field monitor.

    Attributes:
        name: Name of the oneof.
        comment: Comment lines written above the oneof.
        options: Oneof options.
        members: Plain, non repeated fields of the oneof.
    """

    name: str
    comment: Comment = ()
    options: tuple[OptionSpec, ...] = ()
    members: tuple[MessageFieldSpec, ...] = ()

    @field_validator("members", mode="before")
    @classmethod
    def _validate_members(cls, members: Iterable[Any]) -> Iterable[Any]:
        for member in members:
            check_oneof_member(member)
        return members

    @model_validator(mode="after")
    def _check_options(self: Self) -> Self:
        check_option_types(self.options, OptionType.ONEOF)
        return self

    @classmethod
    def builder(cls, name: str) -> "OneofFieldSpecBuilder":
        """Start building a oneof."""
        return OneofFieldSpecBuilder(name)

    def group_name(self: Self) -> str:
        """Return the oneof name."""
        return self.name

    def member_identities(self: Self) -> list[FieldIdentity]:
        """Return the identities of the member fields."""
        return [member.field_identity() for member in self.members]

    def emit(self: Self, writer: ProtoWriter) -> None:
        """Write the oneof with its options and members."""
        if self.comment:
            writer.emit_comment(self.comment)

        sections: list[Section] = []
        if self.options:
            sections.append(emit_each(self.options))
        if self.members:
            sections.append(emit_each(self.members))
        writer.emit_scope(f"oneof {self.name}", sections)


class OneofFieldSpecBuilder:
    """Builder for a :class:`OneofFieldSpec`."""

    def __init__(self: Self, name: str) -> None:
        """Initialize the builder."""
        self._name = name
        self._comment: Comment = ()
        self._options: list[OptionSpec] = []
        self._members: list[MessageFieldSpec] = []

    def set_comment(self: Self, *lines: str) -> Self:
        """Set the comment written above the oneof."""
        self._comment = lines
        return self

    def add_fields(self: Self, *fields: Buildable[Any]) -> Self:
        """Add member fields.

        Raises:
            ValueError: For maps, nested oneofs, and repeated or optional fields.
        """
        self._members.extend(build_all(fields, check_oneof_member))
        return self

    def add_options(self: Self, *options: OptionLike) -> Self:
        """Add oneof options.

        Raises:
            ValueError: If an option isn't a oneof option.
        """
        self._options.extend(build_options(options, OptionType.ONEOF))
        return self

    def build(self: Self) -> OneofFieldSpec:
        """Build the oneof."""
        return OneofFieldSpec(
            name=self._name,
            comment=self._comment,
            options=tuple(self._options),
            members=tuple(self._members),
        )


MessageField: TypeAlias = MessageFieldSpec | MapFieldSpec | OneofFieldSpec
