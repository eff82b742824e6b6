"""Service declarations and their rpc methods."""

from typing import Self

from pydantic import PrivateAttr, model_validator

from ._base import ProtoSpec, build_all, emit_each
from ._capabilities import Buildable, FieldIdentity
from ._monitors import FieldMonitor
from .options import OptionLike, OptionSpec, build_options, check_option_types
from .types import Comment, OptionType
from .writer import ProtoWriter, Section


class RpcFieldSpec(ProtoSpec):
    """An ``rpc`` method of a service.

    Methods have no number, so only their names take part in collision checks.

    Attributes:
        name: Method name.
        request: Request message name.
        response: Response message name.
        request_streaming: Whether the request is a stream.
        response_streaming: Whether the response is a stream.
        comment: Comment lines written above the method.
        options: Method options, written in a body after the signature.
    """

    name: str
    request: str
    response: str
    request_streaming: bool = False
    response_streaming: bool = False
    comment: Comment = ()
    options: tuple[OptionSpec, ...] = ()

    @model_validator(mode="after")
    def _check_options(self: Self) -> Self:
        check_option_types(self.options, OptionType.METHOD)
        return self

    @classmethod
    def builder(cls, name: str) -> "RpcFieldSpecBuilder":
        """Start building an rpc method."""
        return RpcFieldSpecBuilder(name)

    def field_identity(self: Self) -> FieldIdentity:
        """Return the method name without a number."""
        return FieldIdentity(self.name)

    def emit(self: Self, writer: ProtoWriter) -> None:
        """Write the method signature and its options."""
        if self.comment:
            writer.emit_comment(self.comment)
        request = f"stream {self.request}" if self.request_streaming else self.request
        response = (
            f"stream {self.response}" if self.response_streaming else self.response
        )
        writer.emit(f"rpc {self.name} ({request}) returns ({response})")
        if not self.options:
            writer.emit(";\n")
            return

        writer.emit(" {\n").indent()
        for option in self.options:
            option.emit(writer)
        writer.unindent().emit("}\n")


class RpcFieldSpecBuilder:
    """Builder for an :class:`RpcFieldSpec`."""

    def __init__(self: Self, name: str) -> None:
        """Initialize the builder."""
        self._name = name
        self._request: str | None = None
        self._response: str | None = None
        self._request_streaming = False
        self._response_streaming = False
        self._comment: Comment = ()
        self._options: list[OptionSpec] = []

    def set_comment(self: Self, *lines: str) -> Self:
        """Set the comment written above the method."""
        self._comment = lines
        return self

    def set_request(self: Self, message_name: str, streaming: bool = False) -> Self:
        """Set the request message, optionally streamed."""
        self._request = message_name
        self._request_streaming = streaming
        return self

    def set_response(self: Self, message_name: str, streaming: bool = False) -> Self:
        """Set the response message, optionally streamed."""
        self._response = message_name
        self._response_streaming = streaming
        return self

    def add_options(self: Self, *options: OptionLike) -> Self:
        """Add method options.

        Raises:
            ValueError: If an option isn't a method option.
        """
        self._options.extend(build_options(options, OptionType.METHOD))
        return self

    def build(self: Self) -> RpcFieldSpec:
        """Build the method.

        Raises:
            ValueError: If the request or response message is missing.
        """
        if self._request is None:
            raise ValueError("request message must be set")
        if self._response is None:
            raise ValueError("response message must be set")
        return RpcFieldSpec(
            name=self._name,
            request=self._request,
            response=self._response,
            request_streaming=self._request_streaming,
            response_streaming=self._response_streaming,
            comment=self._comment,
            options=tuple(self._options),
        )


class ServiceSpec(ProtoSpec):
    """A ``service`` declaration.

    Attributes:
        name: Service name.
        comment: Comment lines written above the service.
        options: Service options, written first in the body.
        rpcs: Methods in declaration order.
    """

    name: str
    comment: Comment = ()
    options: tuple[OptionSpec, ...] = ()
    rpcs: tuple[RpcFieldSpec, ...] = ()

    _field_monitor: FieldMonitor = PrivateAttr(default_factory=FieldMonitor)

    @model_validator(mode="after")
    def _check_options(self: Self) -> Self:
        check_option_types(self.options, OptionType.SERVICE)
        return self

    @classmethod
    def builder(cls, name: str) -> "ServiceSpecBuilder":
        """Start building a service."""
        return ServiceSpecBuilder(name)

    def type_name(self: Self) -> str:
        """Return the service name."""
        return self.name

    def emit(self: Self, writer: ProtoWriter) -> None:
        """Write the service.

        Raises:
            UsageError: If two methods share a name.
        """
        self._field_monitor.reset()
        if self.comment:
            writer.emit_comment(self.comment)

        sections: list[Section] = []
        if self.options:
            sections.append(emit_each(self.options))
        if self.rpcs:
            sections.append(self._emit_rpcs)
        writer.emit_scope(f"service {self.name}", sections)

    def _emit_rpcs(self: Self, writer: ProtoWriter) -> None:
        for rpc in self.rpcs:
            self._field_monitor.register_field(rpc.field_identity())
            rpc.emit(writer)


class ServiceSpecBuilder:
    """Builder for a :class:`ServiceSpec`."""

    def __init__(self: Self, name: str) -> None:
        """Initialize the builder."""
        self._name = name
        self._comment: Comment = ()
        self._options: list[OptionSpec] = []
        self._rpcs: list[RpcFieldSpec] = []

    def set_comment(self: Self, *lines: str) -> Self:
        """Set the comment written above the service."""
        self._comment = lines
        return self

    def add_options(self: Self, *options: OptionLike) -> Self:
        """Add service options.

        Raises:
            ValueError: If an option isn't a service option.
        """
        self._options.extend(build_options(options, OptionType.SERVICE))
        return self

    def add_rpcs(self: Self, *rpcs: Buildable[RpcFieldSpec]) -> Self:
        """Add methods."""
        self._rpcs.extend(build_all(rpcs))
        return self

    def build(self: Self) -> ServiceSpec:
        """Build the service."""
        return ServiceSpec(
            name=self._name,
            comment=self._comment,
            options=tuple(self._options),
            rpcs=tuple(self._rpcs),
        )
