"""Tests for the field and name usage monitors."""

from dataclasses import dataclass, field

import pytest

from protoscribe._capabilities import FieldIdentity
from protoscribe._monitors import FieldMonitor, NameMonitor
from protoscribe.exceptions import UsageError


@dataclass
class FakeReservation:
    """Reservation stand-in for monitor tests."""

    numbers: list[int] = field(default_factory=list)
    names: list[str] = field(default_factory=list)

    def reserved_numbers(self) -> list[int]:
        return self.numbers

    def reserved_names(self) -> list[str]:
        return self.names


@pytest.fixture
def monitor() -> FieldMonitor:
    """Create an empty field monitor."""
    return FieldMonitor()


# ============================================================================
# Field Monitor
# ============================================================================


def test_empty_monitor_accepts_anything(monitor: FieldMonitor) -> None:
    """Test that nothing is used in a fresh monitor."""
    monitor.ensure_unused(FieldIdentity("a", 1))


def test_used_field_name(monitor: FieldMonitor) -> None:
    """Test that a reused name reports the number that holds it."""
    monitor.register_field(FieldIdentity("a", 1))

    message = r"field name 'a' \(number=2\) not unique, used by field number 1"
    with pytest.raises(UsageError, match=message):
        monitor.ensure_unused(FieldIdentity("a", 2))


def test_used_field_name_without_number(monitor: FieldMonitor) -> None:
    """Test that a numberless field colliding with a numbered one is reported."""
    monitor.register_field(FieldIdentity("a", 1))

    with pytest.raises(
        UsageError, match="field name 'a' not unique, used by field number 1"
    ):
        monitor.register_field(FieldIdentity("a"))


def test_used_field_number(monitor: FieldMonitor) -> None:
    """Test that a reused number reports the name that holds it."""
    monitor.register_field(FieldIdentity("a", 1))

    with pytest.raises(
        UsageError, match="field number 1 already used by field named 'a'"
    ):
        monitor.ensure_unused(FieldIdentity("b", 1))


def test_numberless_fields_only_collide_by_name(monitor: FieldMonitor) -> None:
    """Test that fields without numbers are checked by name alone."""
    monitor.register_field(FieldIdentity("a"))
    monitor.register_field(FieldIdentity("b"))

    with pytest.raises(UsageError, match="field name 'a' is not unique"):
        monitor.register_field(FieldIdentity("a"))


def test_reserved_number(monitor: FieldMonitor) -> None:
    """Test that a reserved number cannot be used."""
    monitor.register_reservation(FakeReservation(numbers=[1, 4, 5]))

    with pytest.raises(
        UsageError, match="field number 1 is reserved and cannot be used"
    ):
        monitor.ensure_unused(FieldIdentity("a", 1))


def test_reserved_name(monitor: FieldMonitor) -> None:
    """Test that a reserved name cannot be used."""
    monitor.register_reservation(FakeReservation(names=["a"]))

    with pytest.raises(
        UsageError, match="field name 'a' is reserved and cannot be used"
    ):
        monitor.ensure_unused(FieldIdentity("a", 1))


def test_overlapping_reservations(monitor: FieldMonitor) -> None:
    """Test that two reservations of the same number conflict."""
    monitor.register_reservation(FakeReservation(numbers=[3]))

    with pytest.raises(UsageError, match="field number 3 is reserved"):
        monitor.register_reservation(FakeReservation(numbers=[3]))


def test_reservation_after_field(monitor: FieldMonitor) -> None:
    """Test that reserving a used number is reported against the field."""
    monitor.register_field(FieldIdentity("a", 7))

    with pytest.raises(
        UsageError, match="field number 7 already used by field named 'a'"
    ):
        monitor.register_reservation(FakeReservation(numbers=[7]))


def test_reset_state(monitor: FieldMonitor) -> None:
    """Test that a reset forgets every registration."""
    monitor.register_field(FieldIdentity("a", 1))
    monitor.register_reservation(FakeReservation(numbers=[2], names=["b"]))

    monitor.reset()

    monitor.register_field(FieldIdentity("a", 1))
    monitor.register_field(FieldIdentity("b", 2))


def test_group_name_collides_with_later_field(monitor: FieldMonitor) -> None:
    """Test that a group name occupies the name space of its scope."""
    monitor.register_field_group("test", [])

    with pytest.raises(UsageError, match="field name 'test' is not unique"):
        monitor.register_field(FieldIdentity("test", 2))


def test_group_members_are_registered(monitor: FieldMonitor) -> None:
    """Test that group members collide with sibling fields."""
    monitor.register_field_group("choice", [FieldIdentity("a", 1)])

    with pytest.raises(
        UsageError, match="field number 1 already used by field named 'a'"
    ):
        monitor.register_field(FieldIdentity("b", 1))


def test_group_member_named_like_group(monitor: FieldMonitor) -> None:
    """Test that a member sharing its group's name is rejected."""
    with pytest.raises(UsageError, match="field name 'choice' is not unique"):
        monitor.register_field_group("choice", [FieldIdentity("choice", 1)])


# ============================================================================
# Name Monitor
# ============================================================================


def test_name_used_in_context() -> None:
    """Test that duplicate names mention the enclosing scope."""
    monitor = NameMonitor("A")
    monitor.register("B")

    with pytest.raises(UsageError, match="'B' name already used in 'A'"):
        monitor.register("B")


def test_name_used_without_context() -> None:
    """Test that file level duplicates name only the offending type."""
    monitor = NameMonitor()
    monitor.register("B")

    with pytest.raises(UsageError, match="^'B' name already used$"):
        monitor.ensure_unused("B")


def test_name_monitor_reset() -> None:
    """Test that a reset forgets registered names."""
    monitor = NameMonitor()
    monitor.register("B")

    monitor.reset()

    monitor.register("B")
