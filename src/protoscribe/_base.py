"""Base class shared by all model nodes."""

import io
import logging
from collections.abc import Callable, Iterable
from typing import Self, TypeVar

from pydantic import BaseModel, ConfigDict

from ._capabilities import Buildable, Emittable
from ._line_wrapper import TextSink
from .exceptions import RenderError, UsageError
from .writer import ProtoWriter, Section, WriterConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


def build_all(
    items: Iterable[Buildable[T]], check: Callable[[T], None] | None = None
) -> tuple[T, ...]:
    """Build every item, running an optional check on each built node.

    Args:
        items: Builders or already built nodes.
        check: Callable raising ``ValueError`` for nodes that don't belong.

    Returns:
        Tuple of built nodes.
    """
    built = []
    for item in items:
        node = item.build()
        if check is not None:
            check(node)
        built.append(node)
    return tuple(built)


def emit_each(nodes: Iterable[Emittable]) -> Section:
    """Return a writer section that emits the nodes in order."""

    def section(writer: ProtoWriter) -> None:
        for node in nodes:
            node.emit(writer)

    return section


class ProtoSpec(BaseModel):
    """Immutable model node that knows how to write itself as proto source.

    Rendering resets the usage monitors a node owns, so the same node can be
    rendered any number of times. Concurrent renders of the same node are not
    supported.

    Equality and hashing consider the declared fields only, never the
    monitors.
    """

    model_config = ConfigDict(frozen=True)

    def __eq__(self: Self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.__dict__ == other.__dict__

    def __hash__(self: Self) -> int:
        return hash((type(self), *self.__dict__.values()))

    def build(self: Self) -> Self:
        """Return this node, so built nodes can be used wherever builders are."""
        return self

    def emit(self: Self, writer: ProtoWriter) -> None:
        """Write this node using the writer.

        Args:
            writer: Writer receiving the output.

        Raises:
            UsageError: If a name or field number is used twice.
        """
        raise NotImplementedError

    def render(self: Self, writer: ProtoWriter) -> None:
        """Write this node, surfacing usage conflicts as a render failure.

        Args:
            writer: Writer receiving the output.

        Raises:
            RenderError: If a name or field number is used twice. Output written
                before the conflict was found is not rolled back.
        """
        logger.debug("Rendering %s", type(self).__name__)
        try:
            self.emit(writer)
        except UsageError as e:
            logger.debug("Rendering %s failed: %s", type(self).__name__, e)
            raise RenderError(str(e)) from e

    def write_to(self: Self, out: TextSink, config: WriterConfig | None = None) -> None:
        """Write this node as proto source to a text sink.

        Args:
            out: Sink receiving the output, e.g. an open file or ``io.StringIO``.
            config: Optional writer configuration.

        Raises:
            RenderError: If a name or field number is used twice.
        """
        self.render(ProtoWriter(out, config))

    def to_proto(self: Self, config: WriterConfig | None = None) -> str:
        """Render this node as proto source.

        Args:
            config: Optional writer configuration.

        Returns:
            Proto source text.

        Raises:
            RenderError: If a name or field number is used twice.
        """
        out = io.StringIO()
        self.write_to(out, config)
        return out.getvalue()

    def check(self: Self) -> None:
        """Run render-time validation without producing output.

        Raises:
            RenderError: If a name or field number is used twice.
        """
        self.render(ProtoWriter.discard())
