"""Enumerations and type aliases shared by the model nodes."""

from enum import Enum, StrEnum
from typing import Any, Self, TypeAlias

Comment: TypeAlias = tuple[str, ...]
ScalarValue: TypeAlias = bool | int | float | str | bytes

INT32_RANGE = (-(2**31), 2**31 - 1)
UINT32_RANGE = (0, 2**32 - 1)
INT64_RANGE = (-(2**63), 2**63 - 1)
UINT64_RANGE = (0, 2**64 - 1)


class FieldType(StrEnum):
    """All field types a proto3 field may have.

    ``MESSAGE`` and ``ENUM`` stand for user defined types and need a custom type
    name wherever they are used as a field type.
    """

    DOUBLE = "double"
    FLOAT = "float"
    INT32 = "int32"
    INT64 = "int64"
    UINT32 = "uint32"
    UINT64 = "uint64"
    SINT32 = "sint32"
    SINT64 = "sint64"
    FIXED32 = "fixed32"
    FIXED64 = "fixed64"
    SFIXED32 = "sfixed32"
    SFIXED64 = "sfixed64"
    BOOL = "bool"
    STRING = "string"
    BYTES = "bytes"
    MESSAGE = "message"
    ENUM = "enum"

    @classmethod
    def infer_from(cls, value: Any) -> "FieldType":
        """Guess a field type from a Python value.

        Integers become ``INT32`` when they fit in 32 bits and ``INT64``
        otherwise. Use explicit types when a more specific numeric type matters.

        Args:
            value: Python value.

        Returns:
            Best matching field type.
        """
        if isinstance(value, bool):
            return cls.BOOL
        if isinstance(value, int):
            low, high = INT32_RANGE
            return cls.INT32 if low <= value <= high else cls.INT64
        if isinstance(value, float):
            return cls.DOUBLE
        if isinstance(value, str):
            return cls.STRING
        if isinstance(value, bytes):
            return cls.BYTES
        if isinstance(value, Enum):
            return cls.ENUM
        return cls.MESSAGE

    @property
    def is_user_defined(self: Self) -> bool:
        """Whether this type refers to a message or enum by name."""
        return self in (FieldType.MESSAGE, FieldType.ENUM)

    def format_value(self: Self, value: ScalarValue) -> str:
        """Format a scalar value as a proto literal of this type.

        Bytes are written with octal escapes for anything outside printable
        ASCII.

        Args:
            value: Value to format.

        Returns:
            Literal text.
        """
        if isinstance(value, bytes):
            return f'"{_escape_bytes(value)}"'
        if self in (FieldType.STRING, FieldType.BYTES):
            escaped = (
                str(value)
                .replace("\\", "\\\\")
                .replace('"', '\\"')
                .replace("\n", "\\n")
            )
            return f'"{escaped}"'
        if self == FieldType.BOOL:
            return "true" if value else "false"
        if self in (FieldType.FLOAT, FieldType.DOUBLE):
            return repr(float(value))
        return str(value)


def _escape_bytes(value: bytes) -> str:
    escaped = []
    for byte in value:
        char = chr(byte)
        if char in "\\\"":
            escaped.append("\\" + char)
        elif char == "\n":
            escaped.append("\\n")
        elif 0x20 <= byte < 0x7F:
            escaped.append(char)
        else:
            escaped.append(f"\\{byte:03o}")
    return "".join(escaped)


INTEGER_RANGES: dict[FieldType, tuple[int, int]] = {
    FieldType.INT32: INT32_RANGE,
    FieldType.SINT32: INT32_RANGE,
    FieldType.SFIXED32: INT32_RANGE,
    FieldType.UINT32: UINT32_RANGE,
    FieldType.FIXED32: UINT32_RANGE,
    FieldType.INT64: INT64_RANGE,
    FieldType.SINT64: INT64_RANGE,
    FieldType.SFIXED64: INT64_RANGE,
    FieldType.UINT64: UINT64_RANGE,
    FieldType.FIXED64: UINT64_RANGE,
}

MAP_KEY_TYPES: frozenset[FieldType] = frozenset(
    {
        FieldType.INT32,
        FieldType.INT64,
        FieldType.UINT32,
        FieldType.UINT64,
        FieldType.SINT32,
        FieldType.SINT64,
        FieldType.FIXED32,
        FieldType.FIXED64,
        FieldType.SFIXED32,
        FieldType.SFIXED64,
        FieldType.BOOL,
        FieldType.STRING,
    }
)


class OptionType(StrEnum):
    """Constructs an option may be attached to.

    Each value is the name of the descriptor message that defines the options of
    that construct.
    """

    FILE = "FileOptions"
    MESSAGE = "MessageOptions"
    FIELD = "FieldOptions"
    ENUM = "EnumOptions"
    ENUM_VALUE = "EnumValueOptions"
    SERVICE = "ServiceOptions"
    ONEOF = "OneofOptions"
    METHOD = "MethodOptions"

    @property
    def descriptor_name(self: Self) -> str:
        """Fully qualified name of the descriptor message, used by extensions."""
        return f"google.protobuf.{self.value}"

    @property
    def is_inline(self: Self) -> bool:
        """Whether options of this type render inside a field's brackets."""
        return self in (OptionType.FIELD, OptionType.ENUM_VALUE)


class FieldModifier(StrEnum):
    """Label written in front of a message field's type."""

    NONE = ""
    REPEATED = "repeated"
    OPTIONAL = "optional"


class ImportModifier(StrEnum):
    """Modifier written between ``import`` and the imported path."""

    NONE = ""
    WEAK = "weak"
    PUBLIC = "public"
