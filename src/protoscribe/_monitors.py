"""Usage monitors that enforce name and field number uniqueness per scope."""

from collections.abc import Iterable
from typing import Self

from ._capabilities import FieldIdentity, FieldReservations
from .exceptions import UsageError


class FieldMonitor:
    """Tracks used field names and numbers within one scope.

    Names and numbers live in two maps. A numberless field only occupies the
    name map, and entries that came from a reservation are remembered in side
    sets so conflicts with them can be reported as such.
    """

    def __init__(self: Self) -> None:
        """Initialize an empty monitor."""
        self._names: dict[str, int | None] = {}
        self._numbers: dict[int, str | None] = {}
        self._reserved_names: set[str] = set()
        self._reserved_numbers: set[int] = set()

    def register_reservation(self: Self, reservation: FieldReservations) -> None:
        """Record every name and number of a reservation as used.

        Args:
            reservation: Reserved field numbers and names.

        Raises:
            UsageError: If a reserved name or number was already used.
        """
        for number in reservation.reserved_numbers():
            self._ensure_number_unused(number)
            self._numbers[number] = None
            self._reserved_numbers.add(number)

        for name in reservation.reserved_names():
            self._ensure_name_unused(FieldIdentity(name))
            self._names[name] = None
            self._reserved_names.add(name)

    def register_field(self: Self, field: FieldIdentity) -> None:
        """Record a field as used.

        Args:
            field: Identity of the field.

        Raises:
            UsageError: If the name or number was already used or reserved.
        """
        self.ensure_unused(field)
        self._names[field.name] = field.number
        if field.number is not None:
            self._numbers[field.number] = field.name

    def register_field_group(
        self: Self, group_name: str, members: Iterable[FieldIdentity]
    ) -> None:
        """Record a group of fields, such as a oneof, in this scope.

        The group name shares the namespace of the fields around it, so it is
        recorded first as a field without a number.

        Args:
            group_name: Name of the group.
            members: Identities of the fields inside the group.

        Raises:
            UsageError: If the group name or any member was already used.
        """
        self.register_field(FieldIdentity(group_name))
        for member in members:
            self.register_field(member)

    def ensure_unused(self: Self, field: FieldIdentity) -> None:
        """Verify a field hasn't been used in this scope.

        Args:
            field: Identity of the field.

        Raises:
            UsageError: If the name or number was already used or reserved.
        """
        self._ensure_name_unused(field)
        if field.number is not None:
            self._ensure_number_unused(field.number)

    def reset(self: Self) -> None:
        """Clear all recorded state."""
        self._names.clear()
        self._numbers.clear()
        self._reserved_names.clear()
        self._reserved_numbers.clear()

    def _ensure_name_unused(self: Self, field: FieldIdentity) -> None:
        name = field.name
        if name not in self._names:
            return

        if name in self._reserved_names:
            raise UsageError(f"field name '{name}' is reserved and cannot be used")

        used_number = self._names[name]
        if used_number is None:
            raise UsageError(f"field name '{name}' is not unique")
        if field.number is None:
            raise UsageError(
                f"field name '{name}' not unique, used by field number {used_number}"
            )
        raise UsageError(
            f"field name '{name}' (number={field.number}) not unique, "
            f"used by field number {used_number}"
        )

    def _ensure_number_unused(self: Self, number: int) -> None:
        if number not in self._numbers:
            return

        if number in self._reserved_numbers:
            raise UsageError(f"field number {number} is reserved and cannot be used")
        raise UsageError(
            f"field number {number} already used by field named "
            f"'{self._numbers[number]}'"
        )


class NameMonitor:
    """Tracks type names declared directly inside one file or message."""

    def __init__(self: Self, usage_context: str | None = None) -> None:
        """Initialize an empty monitor.

        Args:
            usage_context: Name of the enclosing scope, used in error messages.
        """
        self._usage_context = usage_context
        self._names: set[str] = set()

    def register(self: Self, name: str) -> None:
        """Record a name as used.

        Args:
            name: Declared type name.

        Raises:
            UsageError: If the name was already used.
        """
        self.ensure_unused(name)
        self._names.add(name)

    def ensure_unused(self: Self, name: str) -> None:
        """Verify a name hasn't been used in this scope.

        Args:
            name: Declared type name.

        Raises:
            UsageError: If the name was already used.
        """
        if name not in self._names:
            return
        if self._usage_context is None:
            raise UsageError(f"'{name}' name already used")
        raise UsageError(f"'{name}' name already used in '{self._usage_context}'")

    def reset(self: Self) -> None:
        """Clear all recorded state."""
        self._names.clear()
