"""Column-aware text sink that soft-wraps long runs of literal text."""

from typing import Any, Protocol, Self


class TextSink(Protocol):
    """Anything text can be appended to, such as ``io.StringIO``."""

    def write(self: Self, text: str, /) -> Any:
        """Append text to the sink."""


def split_at_spaces(text: str, quote_aware: bool = True) -> list[tuple[str, str]]:
    """Split text into words, keeping the spaces that precede each word.

    Spaces inside a double-quoted string literal are part of the word when
    ``quote_aware`` is set, so a literal is never broken apart. The same mode
    keeps a ``key: value`` pair of a message literal together.

    Args:
        text: Text without newlines.
        quote_aware: Whether double-quoted literals and ``key: value`` pairs
            are kept whole.

    Returns:
        List of ``(separator, word)`` pairs. The last word may be empty when the
        text ends with spaces.
    """
    segments: list[tuple[str, str]] = []
    separator = ""
    word: list[str] = []
    in_quote = False
    escaped = False

    for char in text:
        if char == " " and quote_aware and word and word[-1] == ":":
            word.append(char)
            continue
        if char == " " and not in_quote:
            if word:
                segments.append((separator, "".join(word)))
                separator, word = "", []
            separator += char
            continue

        word.append(char)
        if not quote_aware:
            continue
        if escaped:
            escaped = False
        elif char == "\\" and in_quote:
            escaped = True
        elif char == '"':
            in_quote = not in_quote

    segments.append((separator, "".join(word)))
    return segments


class LineWrapper:
    """Writes text to a sink, breaking overlong lines at safe spaces.

    Newlines written by the caller are passed through untouched; the wrapper only
    ever adds breaks inside runs handed to ``append_wrapping``. Spaces ending such
    a run are held back until the next write, so the following run may break
    there instead.
    """

    def __init__(self: Self, out: TextSink, line_width: int = 80) -> None:
        """Initialize the wrapper.

        Args:
            out: Sink receiving the text.
            line_width: Column at which long runs are broken.
        """
        if line_width <= 0:
            raise ValueError("line width must be positive")
        self._out = out
        self._line_width = line_width
        self._column = 0
        self._pending_space = ""

    @property
    def column(self: Self) -> int:
        """Current column of the line being written."""
        return self._column

    def append(self: Self, text: str) -> None:
        """Write text verbatim, after any space held back by the last run.

        Args:
            text: Text to write, may contain newlines.
        """
        text = self._pending_space + text
        self._pending_space = ""
        if not text:
            return
        self._out.write(text)
        last_newline = text.rfind("\n")
        if last_newline == -1:
            self._column += len(text)
        else:
            self._column = len(text) - last_newline - 1

    def append_wrapping(
        self: Self, text: str, continuation: str, quote_aware: bool = True
    ) -> None:
        """Write a run of literal text, wrapping it when it overflows the line.

        Args:
            text: Text without newlines.
            continuation: Prefix written at the start of every wrapped line.
            quote_aware: Whether double-quoted literals and ``key: value`` pairs
                are kept whole.
        """
        pending, self._pending_space = self._pending_space, ""
        for separator, word in split_at_spaces(text, quote_aware):
            separator, pending = pending + separator, ""
            if not word:
                self._pending_space = separator
                continue

            fits = self._column + len(separator) + len(word) <= self._line_width
            can_break = bool(separator) and self._column > len(continuation)
            if fits or not can_break:
                self.append(separator + word)
            else:
                self.append("\n" + continuation + word)
