"""Import statements."""

from typing import Self

from pydantic import field_validator

from ._base import ProtoSpec
from .types import ImportModifier
from .writer import ProtoWriter

DESCRIPTOR_PROTO = "google/protobuf/descriptor.proto"


class ImportSpec(ProtoSpec):
    """An ``import`` statement.

    Attributes:
        path: Path of the imported file, must end with ``.proto``.
        modifier: Optional ``weak`` or ``public`` modifier.
    """

    path: str
    modifier: ImportModifier = ImportModifier.NONE

    @classmethod
    def of(cls, path: str, modifier: ImportModifier = ImportModifier.NONE) -> Self:
        """Create an import of the given path."""
        return cls(path=path, modifier=modifier)

    @field_validator("path")
    @classmethod
    def _validate_path(cls, path: str) -> str:
        if not path.endswith(".proto"):
            raise ValueError("path must be a file ending with .proto")
        return path

    def emit(self: Self, writer: ProtoWriter) -> None:
        """Write the import statement."""
        if self.modifier == ImportModifier.NONE:
            writer.emit(f'import "{self.path}";\n')
        else:
            writer.emit(f'import {self.modifier} "{self.path}";\n')
