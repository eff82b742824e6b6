"""Options attached to files, messages, fields, enums, services and methods."""

from collections.abc import Iterable
from typing import Self

from pydantic import BaseModel, ConfigDict, model_validator

from ._base import ProtoSpec, build_all
from ._capabilities import Buildable
from .types import INTEGER_RANGES, Comment, FieldType, OptionType, ScalarValue
from .writer import ProtoWriter

WELL_KNOWN_OPTIONS: dict[OptionType, frozenset[str]] = {
    OptionType.FILE: frozenset(
        {
            "java_package",
            "java_outer_classname",
            "java_multiple_files",
            "java_generate_equals_and_hash",
            "java_string_check_utf8",
            "optimize_for",
            "go_package",
            "cc_generic_services",
            "java_generic_services",
            "py_generic_services",
            "php_generic_services",
            "deprecated",
            "cc_enable_arenas",
            "objc_class_prefix",
            "csharp_namespace",
            "swift_prefix",
            "php_class_prefix",
            "php_namespace",
            "php_metadata_namespace",
            "ruby_package",
        }
    ),
    OptionType.MESSAGE: frozenset(
        {"message_set_wire_format", "no_standard_descriptor_accessor", "deprecated"}
    ),
    OptionType.FIELD: frozenset(
        {"ctype", "packed", "jstype", "lazy", "deprecated", "weak", "debug_redact"}
    ),
    OptionType.ENUM: frozenset({"allow_alias", "deprecated"}),
    OptionType.ENUM_VALUE: frozenset({"deprecated", "debug_redact"}),
    OptionType.SERVICE: frozenset({"deprecated"}),
    OptionType.ONEOF: frozenset(),
    OptionType.METHOD: frozenset({"deprecated", "idempotency_level"}),
}


def check_value(value_type: FieldType, value: object) -> None:
    """Verify a scalar value can be written as a literal of the given type.

    Args:
        value_type: Declared type of the value.
        value: Python value.

    Raises:
        ValueError: If the value doesn't fit the type.
    """
    kind = type(value).__name__
    if value_type == FieldType.MESSAGE:
        raise ValueError("message values must be a sequence of field values")

    if value_type in INTEGER_RANGES:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"'{kind}' invalid type for {value_type} values")
        low, high = INTEGER_RANGES[value_type]
        if not low <= value <= high:
            raise ValueError(f"{value} is out of range for {value_type} values")
        return

    if value_type in (FieldType.FLOAT, FieldType.DOUBLE):
        valid = isinstance(value, int | float) and not isinstance(value, bool)
    elif value_type == FieldType.BOOL:
        valid = isinstance(value, bool)
    elif value_type == FieldType.BYTES:
        valid = isinstance(value, str | bytes)
    else:
        valid = isinstance(value, str)

    if not valid:
        raise ValueError(f"'{kind}' invalid type for {value_type} values")


class FieldValue(BaseModel):
    """A named scalar entry inside a message-typed option value.

    Attributes:
        name: Field name inside the option message.
        value_type: Type of the value.
        value: The value.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    value_type: FieldType
    value: ScalarValue

    @classmethod
    def of(cls, name: str, value_type: FieldType, value: ScalarValue) -> Self:
        """Create a field value with an explicit type."""
        return cls(name=name, value_type=value_type, value=value)

    @classmethod
    def infer(cls, name: str, value: ScalarValue) -> Self:
        """Create a field value, guessing the type from the Python value."""
        return cls(name=name, value_type=FieldType.infer_from(value), value=value)

    @model_validator(mode="after")
    def _check_value(self: Self) -> Self:
        check_value(self.value_type, self.value)
        return self

    def formatted_value(self: Self) -> str:
        """Return the value as a proto literal."""
        return self.value_type.format_value(self.value)


class OptionSpec(ProtoSpec):
    """A single option on a file, message, field, enum, service or method.

    Field and enum value options are written inline inside the field's
    brackets and cannot carry comments. All other options are written as
    ``option ...;`` statements.

    Attributes:
        option_type: Construct the option applies to.
        name: Option name. Names outside the well known set are custom options
            and are wrapped in parentheses unless they already start with one.
        comment: Comment lines written above a statement option.
        value_type: Type of the value.
        value: Scalar value, or the entries of a message value.
    """

    option_type: OptionType
    name: str
    comment: Comment = ()
    value_type: FieldType
    value: ScalarValue | tuple[FieldValue, ...]

    @model_validator(mode="after")
    def _check_option(self: Self) -> Self:
        if self.comment and self.option_type.is_inline:
            raise ValueError("comments aren't available for field options")
        if self.value_type == FieldType.MESSAGE:
            if not isinstance(self.value, tuple):
                raise ValueError("message values must be a sequence of field values")
        else:
            check_value(self.value_type, self.value)
        return self

    @classmethod
    def builder(cls, option_type: OptionType, name: str) -> "OptionSpecBuilder":
        """Start building an option for the given construct."""
        return OptionSpecBuilder(option_type, name)

    @classmethod
    def file_option(cls, name: str) -> "OptionSpecBuilder":
        """Start building a file option."""
        return OptionSpecBuilder(OptionType.FILE, name)

    @classmethod
    def message_option(cls, name: str) -> "OptionSpecBuilder":
        """Start building a message option."""
        return OptionSpecBuilder(OptionType.MESSAGE, name)

    @classmethod
    def field_option(cls, name: str) -> "OptionSpecBuilder":
        """Start building a field option."""
        return OptionSpecBuilder(OptionType.FIELD, name)

    @classmethod
    def enum_option(cls, name: str) -> "OptionSpecBuilder":
        """Start building an enum option."""
        return OptionSpecBuilder(OptionType.ENUM, name)

    @classmethod
    def enum_value_option(cls, name: str) -> "OptionSpecBuilder":
        """Start building an enum value option."""
        return OptionSpecBuilder(OptionType.ENUM_VALUE, name)

    @classmethod
    def service_option(cls, name: str) -> "OptionSpecBuilder":
        """Start building a service option."""
        return OptionSpecBuilder(OptionType.SERVICE, name)

    @classmethod
    def oneof_option(cls, name: str) -> "OptionSpecBuilder":
        """Start building a oneof option."""
        return OptionSpecBuilder(OptionType.ONEOF, name)

    @classmethod
    def method_option(cls, name: str) -> "OptionSpecBuilder":
        """Start building a method option."""
        return OptionSpecBuilder(OptionType.METHOD, name)

    def formatted_name(self: Self) -> str:
        """Return the name as written, parenthesized for custom options."""
        well_known = WELL_KNOWN_OPTIONS[self.option_type]
        if self.name in well_known or self.name.startswith("("):
            return self.name
        return f"({self.name})"

    def emit(self: Self, writer: ProtoWriter) -> None:
        """Write the option as a statement, or inline for field options."""
        name = self.formatted_name()
        inline = self.option_type.is_inline
        if self.comment and not inline:
            writer.emit_comment(self.comment)

        if isinstance(self.value, tuple):
            self._emit_message_value(writer, name, self.value, inline)
            return

        formatted = self.value_type.format_value(self.value)
        if inline:
            writer.emit(f"{name} = {formatted}")
        else:
            writer.emit(f"option {name} = {formatted};\n")

    @staticmethod
    def _emit_message_value(
        writer: ProtoWriter, name: str, entries: tuple[FieldValue, ...], inline: bool
    ) -> None:
        if inline:
            writer.emit(f"{name} = {{ ")
            for entry in entries:
                writer.emit(f"{entry.name}: {entry.formatted_value()} ")
            writer.emit("}")
            return

        writer.emit(f"option {name} = {{\n").indent()
        for entry in entries:
            writer.emit(f"{entry.name}: {entry.formatted_value()}\n")
        writer.unindent().emit("};\n")


class OptionSpecBuilder:
    """Builder for an :class:`OptionSpec`."""

    def __init__(self: Self, option_type: OptionType, name: str) -> None:
        """Initialize the builder.

        Args:
            option_type: Construct the option applies to.
            name: Option name.
        """
        self.option_type = option_type
        self._name = name
        self._comment: Comment = ()
        self._value_type: FieldType | None = None
        self._value: ScalarValue | tuple[FieldValue, ...] | None = None

    def set_comment(self: Self, *lines: str) -> Self:
        """Set the comment written above the option.

        Raises:
            ValueError: For field and enum value options, which render inline.
        """
        if self.option_type.is_inline:
            raise ValueError("comments aren't available for field options")
        self._comment = lines
        return self

    def set_value(
        self: Self, value_type: FieldType, value: ScalarValue | Iterable[FieldValue]
    ) -> Self:
        """Set the option value.

        Args:
            value_type: Type of the value. ``MESSAGE`` takes field values.
            value: Scalar value, or field values for a message value.

        Returns:
            This builder.

        Raises:
            ValueError: If the value doesn't fit the type.
        """
        if value_type == FieldType.MESSAGE:
            if isinstance(value, str | bytes) or not isinstance(value, Iterable):
                raise ValueError("message values must be a sequence of field values")
            self._value = tuple(value)
        else:
            check_value(value_type, value)
            self._value = value  # type: ignore[assignment]
        self._value_type = value_type
        return self

    def set_message_value(self: Self, *entries: FieldValue) -> Self:
        """Set a message value from field values."""
        return self.set_value(FieldType.MESSAGE, entries)

    def build(self: Self) -> OptionSpec:
        """Build the option.

        Raises:
            ValueError: If no value was set.
        """
        if self._value_type is None or self._value is None:
            raise ValueError(f"option '{self._name}' has no value")
        return OptionSpec(
            option_type=self.option_type,
            name=self._name,
            comment=self._comment,
            value_type=self._value_type,
            value=self._value,
        )


OptionLike = OptionSpec | OptionSpecBuilder


def build_options(
    options: Iterable[Buildable[OptionSpec]], option_type: OptionType
) -> tuple[OptionSpec, ...]:
    """Build options, requiring each to apply to the given construct.

    Args:
        options: Option builders or built options.
        option_type: Construct the options are attached to.

    Returns:
        Built options.

    Raises:
        ValueError: If an option applies to a different construct.
    """

    def check(option: OptionSpec) -> None:
        check_option_types([option], option_type)

    return build_all(options, check)


def check_option_types(
    options: Iterable[OptionSpec], option_type: OptionType
) -> None:
    """Verify every option applies to the given construct.

    Raises:
        ValueError: If an option applies to a different construct.
    """
    label = option_type.name.lower().replace("_", " ")
    for option in options:
        if option.option_type != option_type:
            raise ValueError(f"option must be {label} type")


def emit_inline_options(writer: ProtoWriter, options: tuple[OptionSpec, ...]) -> None:
    """Write field options as a bracketed list, or nothing when empty."""
    if not options:
        return
    writer.emit(" [")
    for index, option in enumerate(options):
        if index > 0:
            writer.emit(", ")
        option.emit(writer)
    writer.emit("]")
