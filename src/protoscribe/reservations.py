"""Reserved field numbers and names."""

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any, Self

from pydantic import field_validator, model_validator

from ._base import ProtoSpec
from .types import Comment
from .writer import ProtoWriter


def _check_reserved(
    names: Sequence[str], numbers: Sequence[int], has_ranges: bool
) -> None:
    if names and (numbers or has_ranges):
        raise ValueError("cannot reserve field names and numbers together")
    if not (names or numbers or has_ranges):
        raise ValueError("a reservation needs at least one name or number")
    if any(number <= 0 for number in numbers):
        raise ValueError("negative field numbers are invalid")


def _reject_bools(numbers: Iterable[Any]) -> None:
    for number in numbers:
        if isinstance(number, bool):
            raise ValueError(f"{number} is not a field number")


@dataclass(frozen=True)
class FieldRange:
    """An inclusive range of reserved field numbers.

    Attributes:
        low: First number of the range.
        high: Last number of the range.
    """

    low: int
    high: int

    def __post_init__(self: Self) -> None:
        """Validate the bounds."""
        if self.low <= 0:
            raise ValueError("low number cannot be negative")
        if self.high <= 0:
            raise ValueError("high number cannot be negative")
        if self.high <= self.low:
            raise ValueError("high value must be higher than low value")

    @classmethod
    def of(cls, low: int, high: int) -> Self:
        """Create a range from ``low`` to ``high`` inclusive."""
        return cls(low, high)

    def __iter__(self: Self) -> Iterator[int]:
        return iter(range(self.low, self.high + 1))

    def __str__(self: Self) -> str:
        return f"{self.low} to {self.high}"


class ReservationSpec(ProtoSpec):
    """A ``reserved`` statement in a message or enum.

    A reservation holds either names or numbers and ranges, never both, which
    matches how proto3 requires them to be declared.

    Attributes:
        field_names: Reserved field names.
        field_numbers: Reserved field numbers.
        field_ranges: Reserved ranges of field numbers.
        comment: Comment lines written above the statement.
    """

    field_names: tuple[str, ...] = ()
    field_numbers: tuple[int, ...] = ()
    field_ranges: tuple[FieldRange, ...] = ()
    comment: Comment = ()

    @field_validator("field_numbers", mode="before")
    @classmethod
    def _validate_numbers(cls, numbers: Any) -> Any:
        _reject_bools(numbers)
        return numbers

    @model_validator(mode="after")
    def _check_reservation(self: Self) -> Self:
        _check_reserved(self.field_names, self.field_numbers, bool(self.field_ranges))
        return self

    @classmethod
    def builder(cls, *reserved: int | str) -> "ReservationSpecBuilder":
        """Start building a reservation of numbers or of names.

        Args:
            *reserved: Field numbers, or field names. Duplicates are dropped.

        Returns:
            A reservation builder.

        Raises:
            ValueError: If numbers and names are mixed or a number is not
                positive.
        """
        return ReservationSpecBuilder(*reserved)

    def reserved_numbers(self: Self) -> list[int]:
        """Return every distinct reserved number, ranges expanded."""
        numbers = list(self.field_numbers)
        for field_range in self.field_ranges:
            numbers.extend(field_range)
        return list(dict.fromkeys(numbers))

    def reserved_names(self: Self) -> list[str]:
        """Return the reserved names."""
        return list(self.field_names)

    def emit(self: Self, writer: ProtoWriter) -> None:
        """Write names first, then numbers, then ranges."""
        if self.comment:
            writer.emit_comment(self.comment)
        reserved = [
            *(f'"{name}"' for name in self.field_names),
            *(str(number) for number in self.field_numbers),
            *(str(field_range) for field_range in self.field_ranges),
        ]
        writer.emit(f"reserved {', '.join(reserved)};\n")


class ReservationSpecBuilder:
    """Builder for a :class:`ReservationSpec`."""

    def __init__(self: Self, *reserved: int | str) -> None:
        """Initialize the builder.

        Args:
            *reserved: Field numbers, or field names.

        Raises:
            ValueError: If numbers and names are mixed or a number is not
                positive.
        """
        names = [item for item in reserved if isinstance(item, str)]
        numbers = [item for item in reserved if not isinstance(item, str)]
        _reject_bools(numbers)
        if names and numbers:
            raise ValueError("cannot reserve field names and numbers together")
        if any(number <= 0 for number in numbers):
            raise ValueError("negative field numbers are invalid")

        self._names = tuple(dict.fromkeys(names))
        self._numbers = tuple(dict.fromkeys(numbers))
        self._ranges: list[FieldRange] = []
        self._comment: Comment = ()

    def set_comment(self: Self, *lines: str) -> Self:
        """Set the comment written above the reservation."""
        self._comment = lines
        return self

    def add_ranges(self: Self, *ranges: FieldRange) -> Self:
        """Add ranges of reserved field numbers.

        Raises:
            ValueError: If this reservation holds names.
        """
        if self._names:
            raise ValueError("ranges are only allowed when reserving field numbers")
        self._ranges.extend(ranges)
        return self

    def add_range(self: Self, low: int, high: int) -> Self:
        """Add a single range of reserved field numbers."""
        return self.add_ranges(FieldRange.of(low, high))

    def build(self: Self) -> ReservationSpec:
        """Build the reservation.

        Raises:
            ValueError: If nothing was reserved.
        """
        return ReservationSpec(
            field_names=self._names,
            field_numbers=self._numbers,
            field_ranges=tuple(self._ranges),
            comment=self._comment,
        )
