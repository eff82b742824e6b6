"""Exceptions raised while building or rendering proto files."""


class ProtoscribeError(Exception):
    """Base exception for all protoscribe errors."""


class UsageError(ProtoscribeError):
    """Raised when a name or field number is used twice within one scope.

    Reservation violations are usage errors as well. These can only be detected
    once every sibling in a scope has been walked, so they are raised during
    rendering rather than while the model is being built.
    """


class RenderError(ProtoscribeError, OSError):
    """Raised at the render boundary when the model could not be written.

    The originating ``UsageError`` is available as ``__cause__``.
    """
