"""Extensions of the descriptor option messages, used to declare custom options."""

from typing import Any, Self

from pydantic import PrivateAttr, field_validator

from ._base import ProtoSpec, build_all
from ._capabilities import Buildable
from ._monitors import FieldMonitor
from .fields import MessageFieldSpec
from .imports import DESCRIPTOR_PROTO, ImportSpec
from .types import Comment, OptionType
from .writer import ProtoWriter


def _check_extension_field(field: Any) -> None:
    if not isinstance(field, MessageFieldSpec):
        raise ValueError("complex fields not allowed (eg: oneofs or maps)")


class ExtensionSpec(ProtoSpec):
    """An ``extend google.protobuf.XOptions { ... }`` block.

    Files containing an extension import ``google/protobuf/descriptor.proto``
    automatically.

    Attributes:
        option_type: Construct whose options are extended.
        comment: Comment lines written above the block.
        extension_fields: Plain fields declaring the custom options.
    """

    option_type: OptionType
    comment: Comment = ()
    extension_fields: tuple[MessageFieldSpec, ...] = ()

    _field_monitor: FieldMonitor = PrivateAttr(default_factory=FieldMonitor)

    @field_validator("extension_fields", mode="before")
    @classmethod
    def _validate_fields(cls, fields: Any) -> Any:
        for field in fields:
            _check_extension_field(field)
        return fields

    @classmethod
    def builder(cls, option_type: OptionType) -> "ExtensionSpecBuilder":
        """Start building an extension of the given option type."""
        return ExtensionSpecBuilder(option_type)

    def type_name(self: Self) -> str:
        """Return the extended descriptor's name."""
        return self.option_type.descriptor_name

    def imports(self: Self) -> list[ImportSpec]:
        """Return the descriptor import every extension needs."""
        return [ImportSpec.of(DESCRIPTOR_PROTO)]

    def emit(self: Self, writer: ProtoWriter) -> None:
        """Write the extension block.

        Raises:
            UsageError: If two fields share a name or number.
        """
        self._field_monitor.reset()
        if self.comment:
            writer.emit_comment(self.comment)

        def extension_fields(w: ProtoWriter) -> None:
            for field in self.extension_fields:
                self._field_monitor.register_field(field.field_identity())
                field.emit(w)

        sections = [extension_fields] if self.extension_fields else []
        writer.emit_scope(f"extend {self.type_name()}", sections)


class ExtensionSpecBuilder:
    """Builder for an :class:`ExtensionSpec`."""

    def __init__(self: Self, option_type: OptionType) -> None:
        """Initialize the builder."""
        self._option_type = option_type
        self._comment: Comment = ()
        self._fields: list[MessageFieldSpec] = []

    def set_comment(self: Self, *lines: str) -> Self:
        """Set the comment written above the extension."""
        self._comment = lines
        return self

    def add_fields(self: Self, *fields: Buildable[Any]) -> Self:
        """Add fields.

        Raises:
            ValueError: For map fields and oneofs.
        """
        self._fields.extend(build_all(fields, _check_extension_field))
        return self

    def build(self: Self) -> ExtensionSpec:
        """Build the extension."""
        return ExtensionSpec(
            option_type=self._option_type,
            comment=self._comment,
            extension_fields=tuple(self._fields),
        )
