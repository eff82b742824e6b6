"""Indentation and comment aware writer used by every model node."""

from collections.abc import Callable, Iterable, Sequence
from typing import Self, TypedDict

from ._line_wrapper import LineWrapper, TextSink


class WriterConfig(TypedDict, total=False):
    """Configuration options for rendering proto source."""

    indent_value: str
    indent_size: int
    line_width: int


DEFAULT_CONFIG: WriterConfig = {
    "indent_value": " ",
    "indent_size": 2,
    "line_width": 80,
}


class _DiscardSink:
    """Sink that drops everything written to it."""

    def write(self: Self, text: str, /) -> int:
        return len(text)


Section = Callable[["ProtoWriter"], object]


class ProtoWriter:
    """Turns emit, indent and comment operations into formatted proto text.

    Continuation lines of a wrapped statement are indented two extra steps, and
    continuation lines of a wrapped comment repeat the ``//`` marker.
    """

    @classmethod
    def discard(cls, config: WriterConfig | None = None) -> Self:
        """Create a writer that validates but writes nowhere.

        Args:
            config: Optional writer configuration.

        Returns:
            Writer over a sink that discards all output.
        """
        return cls(_DiscardSink(), config)

    def __init__(self: Self, out: TextSink, config: WriterConfig | None = None) -> None:
        """Initialize the writer.

        Args:
            out: Sink receiving the rendered text.
            config: Optional writer configuration, missing keys use defaults.
        """
        settings: WriterConfig = {**DEFAULT_CONFIG, **(config or {})}
        if settings["indent_size"] <= 0:
            raise ValueError("indent size must be positive")

        self._out = LineWrapper(out, settings["line_width"])
        self._indent_value = settings["indent_value"]
        self._indent_size = settings["indent_size"]
        self._indent_level = 0
        self._trailing_newline = True
        self._comment = False

    @property
    def indent_level(self: Self) -> int:
        """Number of indent units currently applied."""
        return self._indent_level

    def indent(self: Self, levels: int | None = None) -> Self:
        """Increase the indentation.

        Args:
            levels: Indent units to add, defaults to one indent step.

        Returns:
            This writer.
        """
        levels = self._indent_size if levels is None else levels
        if levels <= 0:
            raise ValueError("indent level must be greater than 0")
        self._indent_level += levels
        return self

    def unindent(self: Self, levels: int | None = None) -> Self:
        """Decrease the indentation.

        Args:
            levels: Indent units to remove, defaults to one indent step.

        Returns:
            This writer.

        Raises:
            ValueError: If the indentation would drop below zero.
        """
        levels = self._indent_size if levels is None else levels
        if self._indent_level - levels < 0:
            raise ValueError(f"cannot unindent {levels} from {self._indent_level}")
        self._indent_level -= levels
        return self

    def emit_comment(self: Self, lines: Iterable[str]) -> Self:
        """Write each line as a ``//`` comment on its own line.

        Args:
            lines: Comment lines; a line may itself contain newlines.

        Returns:
            This writer.
        """
        for line in lines:
            # Force the prefix even if the previous emit left us mid-line.
            self._trailing_newline = True
            self._comment = True
            try:
                self.emit(line)
                self.emit("\n")
            finally:
                self._comment = False
        return self

    def emit(self: Self, text: str) -> Self:
        """Write text, indenting every line it starts.

        Args:
            text: Text to write, may contain newlines.

        Returns:
            This writer.
        """
        for index, line in enumerate(text.split("\n")):
            if index > 0:
                # Blank lines inside a comment keep the comment contiguous.
                if self._comment and self._trailing_newline:
                    self._out.append(self._indentation() + "//")
                self._out.append("\n")
                self._trailing_newline = True

            if not line:
                continue

            if self._trailing_newline:
                self._out.append(self._indentation())
                if self._comment:
                    self._out.append("// ")

            self._out.append_wrapping(
                line, self._continuation(), quote_aware=not self._comment
            )
            self._trailing_newline = False
        return self

    def emit_scope(self: Self, header: str, sections: Sequence[Section]) -> Self:
        """Write a braced body made of blank-line separated sections.

        The indentation level is restored even when a section raises.

        Args:
            header: Text preceding the opening brace, e.g. ``message Foo``.
            sections: Callables that each write one indented section.

        Returns:
            This writer.
        """
        self.emit(f"{header} {{")
        if sections:
            self.emit("\n")
            for section in sections:
                self.emit("\n").indent()
                try:
                    section(self)
                finally:
                    self.unindent()
        return self.emit("}\n")

    def _indentation(self: Self) -> str:
        return self._indent_value * self._indent_level

    def _continuation(self: Self) -> str:
        if self._comment:
            return self._indentation() + "// "
        return self._indentation() + self._indent_value * (2 * self._indent_size)
