"""protoscribe - build proto3 source files from Python.

A package for assembling an immutable model of a ``.proto`` file and
rendering it as deterministically formatted proto3 source, checking name and
field number usage along the way.
"""

from ._version import __version__
from .enums import EnumFieldSpec, EnumFieldSpecBuilder, EnumSpec, EnumSpecBuilder
from .exceptions import ProtoscribeError, RenderError, UsageError
from .extension import ExtensionSpec, ExtensionSpecBuilder
from .fields import (
    MapFieldSpec,
    MapFieldSpecBuilder,
    MessageField,
    MessageFieldSpec,
    MessageFieldSpecBuilder,
    OneofFieldSpec,
    OneofFieldSpecBuilder,
)
from .imports import ImportSpec
from .message import MessageSpec, MessageSpecBuilder
from .options import FieldValue, OptionSpec, OptionSpecBuilder
from .proto_file import ProtoFile, ProtoFileBuilder
from .reservations import FieldRange, ReservationSpec, ReservationSpecBuilder
from .service import RpcFieldSpec, RpcFieldSpecBuilder, ServiceSpec, ServiceSpecBuilder
from .types import FieldModifier, FieldType, ImportModifier, OptionType
from .writer import ProtoWriter, WriterConfig

__all__ = [
    "EnumFieldSpec",
    "EnumFieldSpecBuilder",
    "EnumSpec",
    "EnumSpecBuilder",
    "ExtensionSpec",
    "ExtensionSpecBuilder",
    "FieldModifier",
    "FieldRange",
    "FieldType",
    "FieldValue",
    "ImportModifier",
    "ImportSpec",
    "MapFieldSpec",
    "MapFieldSpecBuilder",
    "MessageField",
    "MessageFieldSpec",
    "MessageFieldSpecBuilder",
    "MessageSpec",
    "MessageSpecBuilder",
    "OneofFieldSpec",
    "OneofFieldSpecBuilder",
    "OptionSpec",
    "OptionSpecBuilder",
    "OptionType",
    "ProtoFile",
    "ProtoFileBuilder",
    "ProtoWriter",
    "ProtoscribeError",
    "RenderError",
    "ReservationSpec",
    "ReservationSpecBuilder",
    "RpcFieldSpec",
    "RpcFieldSpecBuilder",
    "ServiceSpec",
    "ServiceSpecBuilder",
    "UsageError",
    "WriterConfig",
    "__version__",
]
