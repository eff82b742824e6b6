"""The top level ``.proto`` file."""

from typing import Any, Self

from pydantic import PrivateAttr, model_validator

from ._base import ProtoSpec, build_all
from ._capabilities import Buildable, Importable, NamedType
from ._monitors import NameMonitor
from .enums import EnumSpec
from .extension import ExtensionSpec
from .imports import ImportSpec
from .message import MessageSpec
from .options import OptionLike, OptionSpec, build_options, check_option_types
from .service import ServiceSpec
from .types import Comment, OptionType
from .writer import ProtoWriter

Declaration = MessageSpec | EnumSpec | ServiceSpec | ExtensionSpec


class ProtoFile(ProtoSpec):
    """A proto3 source file.

    Output order is fixed: comment, syntax, package, imports, options and
    then declarations. Imports required by declarations are added to the
    explicit ones, deduplicated by path and sorted. Declarations are grouped in
    blocks, one per builder call, and each block is preceded by a blank line.

    Attributes:
        comment: Comment lines written at the top of the file.
        package: Package name, if any.
        explicit_imports: Imports added by the caller.
        options: File options.
        blocks: Top level declarations in caller order.
    """

    comment: Comment = ()
    package: str | None = None
    explicit_imports: tuple[ImportSpec, ...] = ()
    options: tuple[OptionSpec, ...] = ()
    blocks: tuple[tuple[Declaration, ...], ...] = ()

    _name_monitor: NameMonitor = PrivateAttr(default_factory=NameMonitor)

    @model_validator(mode="after")
    def _check_options(self: Self) -> Self:
        check_option_types(self.options, OptionType.FILE)
        return self

    @classmethod
    def builder(cls) -> "ProtoFileBuilder":
        """Start building a file."""
        return ProtoFileBuilder()

    def imports(self: Self) -> list[ImportSpec]:
        """Return explicit and implied imports, unique by path and sorted.

        When the same path is imported more than once, the first import wins,
        and explicit imports come before implied ones.
        """
        by_path: dict[str, ImportSpec] = {}
        candidates = list(self.explicit_imports)
        for block in self.blocks:
            for declaration in block:
                if isinstance(declaration, Importable):
                    candidates.extend(declaration.imports())
        for candidate in candidates:
            by_path.setdefault(candidate.path, candidate)
        return sorted(by_path.values(), key=lambda spec: spec.path)

    def emit(self: Self, writer: ProtoWriter) -> None:
        """Write the whole file.

        Raises:
            UsageError: On the first reused name or field number anywhere in
                the file.
        """
        self._name_monitor.reset()
        if self.comment:
            writer.emit_comment(self.comment)

        writer.emit('syntax = "proto3";\n')
        if self.package is not None:
            writer.emit(f"\npackage {self.package};\n")

        imports = self.imports()
        if imports:
            writer.emit("\n")
            for spec in imports:
                spec.emit(writer)

        if self.options:
            writer.emit("\n")
            for option in self.options:
                option.emit(writer)

        for block in self.blocks:
            writer.emit("\n")
            for declaration in block:
                if isinstance(declaration, NamedType):
                    self._name_monitor.register(declaration.type_name())
                declaration.emit(writer)


class ProtoFileBuilder:
    """Builder for a :class:`ProtoFile`."""

    def __init__(self: Self) -> None:
        """Initialize an empty file builder."""
        self._comment: Comment = ()
        self._package: str | None = None
        self._imports: list[ImportSpec] = []
        self._options: list[OptionSpec] = []
        self._blocks: list[tuple[Any, ...]] = []

    def set_comment(self: Self, *lines: str) -> Self:
        """Set the comment written at the top of the file."""
        self._comment = lines
        return self

    def set_package(self: Self, package: str) -> Self:
        """Set the package name."""
        self._package = package
        return self

    def add_imports(self: Self, *imports: Buildable[ImportSpec]) -> Self:
        """Add explicit imports."""
        self._imports.extend(build_all(imports))
        return self

    def add_options(self: Self, *options: OptionLike) -> Self:
        """Add file options.

        Raises:
            ValueError: If an option isn't a file option.
        """
        self._options.extend(build_options(options, OptionType.FILE))
        return self

    def add_messages(self: Self, *messages: Buildable[MessageSpec]) -> Self:
        """Add a block of messages."""
        return self._add_block(build_all(messages))

    def add_enums(self: Self, *enums: Buildable[EnumSpec]) -> Self:
        """Add a block of enums."""
        return self._add_block(build_all(enums))

    def add_services(self: Self, *services: Buildable[ServiceSpec]) -> Self:
        """Add a block of services."""
        return self._add_block(build_all(services))

    def add_extensions(self: Self, *extensions: Buildable[ExtensionSpec]) -> Self:
        """Add a block of extensions."""
        return self._add_block(build_all(extensions))

    def _add_block(self: Self, block: tuple[Any, ...]) -> Self:
        if block:
            self._blocks.append(block)
        return self

    def build(self: Self) -> ProtoFile:
        """Build the file."""
        return ProtoFile(
            comment=self._comment,
            package=self._package,
            explicit_imports=tuple(self._imports),
            options=tuple(self._options),
            blocks=tuple(self._blocks),
        )
