"""Tests for options and option values."""

import pytest

from protoscribe import FieldType, FieldValue, OptionSpec, OptionType
from protoscribe.options import WELL_KNOWN_OPTIONS, build_options

# ============================================================================
# Scalar Values
# ============================================================================


@pytest.mark.parametrize(
    ("value_type", "value", "literal"),
    [
        (FieldType.INT32, 2147483647, "2147483647"),
        (FieldType.INT64, 9223372036854775807, "9223372036854775807"),
        (FieldType.UINT64, 18446744073709551615, "18446744073709551615"),
        (FieldType.DOUBLE, 1.5, "1.5"),
        (FieldType.FLOAT, 2, "2.0"),
        (FieldType.ENUM, "FOO", "FOO"),
        (FieldType.STRING, "hello", '"hello"'),
        (FieldType.BOOL, True, "true"),
    ],
)
def test_statement_option_values(
    value_type: FieldType, value: bool | int | float | str, literal: str
) -> None:
    """Test statement options for every kind of scalar value."""
    option = (
        OptionSpec.message_option("foo")
        .set_comment("comment")
        .set_value(value_type, value)
        .build()
    )

    assert option.to_proto() == f"// comment\noption (foo) = {literal};\n"


def test_inline_option_value() -> None:
    """Test that field options render without the statement wrapping."""
    option = OptionSpec.field_option("foo").set_value(FieldType.INT32, 1).build()

    assert option.to_proto() == "(foo) = 1"


def test_string_values_are_escaped() -> None:
    """Test that quotes, backslashes and newlines are escaped."""
    option = (
        OptionSpec.file_option("foo")
        .set_value(FieldType.STRING, 'a "b" \\ c\nd')
        .build()
    )

    assert option.to_proto() == 'option (foo) = "a \\"b\\" \\\\ c\\nd";\n'


def test_bytes_values() -> None:
    """Test that bytes values render with octal escapes."""
    option = (
        OptionSpec.file_option("foo")
        .set_value(FieldType.BYTES, b'ab"\x00\n')
        .build()
    )

    assert option.to_proto() == 'option (foo) = "ab\\"\\000\\n";\n'


def test_inferred_bytes_value_renders() -> None:
    """Test that a value inferred from bytes can be written."""
    value = FieldValue.infer("a", b"ab")

    assert value.value_type == FieldType.BYTES
    assert value.formatted_value() == '"ab"'


def test_int32_out_of_range() -> None:
    """Test that integer values are checked against their type's range."""
    with pytest.raises(ValueError, match="2147483648 is out of range for int32"):
        OptionSpec.file_option("foo").set_value(FieldType.INT32, 2**31)


def test_unsigned_rejects_negative() -> None:
    """Test that unsigned types reject negative values."""
    with pytest.raises(ValueError, match="out of range for uint32"):
        OptionSpec.file_option("foo").set_value(FieldType.UINT32, -1)


@pytest.mark.parametrize(
    ("value_type", "value", "kind"),
    [
        (FieldType.INT32, "1", "str"),
        (FieldType.INT64, True, "bool"),
        (FieldType.BOOL, 1, "int"),
        (FieldType.STRING, 1.0, "float"),
        (FieldType.DOUBLE, "1.0", "str"),
        (FieldType.STRING, b"x", "bytes"),
    ],
)
def test_invalid_value_types(
    value_type: FieldType, value: object, kind: str
) -> None:
    """Test that values of the wrong Python type are rejected."""
    builder = OptionSpec.file_option("foo")
    with pytest.raises(ValueError, match=f"'{kind}' invalid type for {value_type}"):
        builder.set_value(value_type, value)  # type: ignore[arg-type]


def test_missing_value() -> None:
    """Test that an option needs a value to be built."""
    with pytest.raises(ValueError, match="option 'foo' has no value"):
        OptionSpec.file_option("foo").build()


# ============================================================================
# Names
# ============================================================================


def test_well_known_names_are_bare() -> None:
    """Test that standard option names are not parenthesized."""
    option = (
        OptionSpec.file_option("java_package")
        .set_comment("comment")
        .set_value(FieldType.STRING, "com.whatever")
        .build()
    )

    assert option.to_proto() == '// comment\noption java_package = "com.whatever";\n'


def test_well_known_names_depend_on_owner() -> None:
    """Test that a name is only well known for its own construct."""
    option = OptionSpec.message_option("java_package").set_value(
        FieldType.STRING, "x"
    )

    assert option.build().formatted_name() == "(java_package)"


def test_parenthesized_names_kept() -> None:
    """Test that names already in parentheses are not wrapped again."""
    option = OptionSpec.field_option("(foo).bar").set_value(FieldType.BOOL, True)

    assert option.build().to_proto() == "(foo).bar = true"


def test_every_option_type_has_well_known_entry() -> None:
    """Test that the well known table covers every construct."""
    assert set(WELL_KNOWN_OPTIONS) == set(OptionType)
    assert "deprecated" in WELL_KNOWN_OPTIONS[OptionType.METHOD]


# ============================================================================
# Message Values
# ============================================================================


def test_message_value_statement() -> None:
    """Test that message values render one entry per line as a statement."""
    option = (
        OptionSpec.method_option("foo")
        .set_message_value(
            FieldValue.of("bar", FieldType.STRING, "hello"),
            FieldValue.of("baz", FieldType.BOOL, True),
        )
        .build()
    )

    assert option.to_proto() == (
        'option (foo) = {\n  bar: "hello"\n  baz: true\n};\n'
    )


def test_message_value_inline() -> None:
    """Test that message values render on one line inline."""
    option = (
        OptionSpec.field_option("foo")
        .set_value(
            FieldType.MESSAGE,
            [FieldValue.infer("bar", "hello"), FieldValue.infer("baz", True)],
        )
        .build()
    )

    assert option.to_proto() == '(foo) = { bar: "hello" baz: true }'


def test_message_value_requires_entries() -> None:
    """Test that a message value must be a sequence of field values."""
    with pytest.raises(ValueError, match="sequence of field values"):
        OptionSpec.file_option("foo").set_value(FieldType.MESSAGE, "bar")


def test_field_value_infer() -> None:
    """Test that field value types are guessed from Python values."""
    assert FieldValue.infer("a", 1).value_type == FieldType.INT32
    assert FieldValue.infer("a", 2**40).value_type == FieldType.INT64
    assert FieldValue.infer("a", 1.5).value_type == FieldType.DOUBLE
    assert FieldValue.infer("a", False).value_type == FieldType.BOOL
    assert FieldValue.infer("a", "x").value_type == FieldType.STRING


def test_field_value_checks_type() -> None:
    """Test that field values are validated on construction."""
    with pytest.raises(ValueError, match="invalid type for bool"):
        FieldValue.of("a", FieldType.BOOL, "yes")


# ============================================================================
# Owner Checks
# ============================================================================


def test_comments_rejected_for_field_options() -> None:
    """Test that inline options cannot carry comments."""
    with pytest.raises(ValueError, match="comments aren't available for field options"):
        OptionSpec.field_option("foo").set_comment("comment")


def test_comments_rejected_for_enum_value_options() -> None:
    """Test that enum value options are inline too."""
    with pytest.raises(ValueError, match="comments aren't available for field options"):
        OptionSpec.enum_value_option("foo").set_comment("comment")


def test_build_options_checks_owner() -> None:
    """Test that options attached to the wrong construct are rejected."""
    with pytest.raises(ValueError, match="option must be enum value type"):
        build_options(
            [OptionSpec.enum_option("foo").set_value(FieldType.BOOL, True)],
            OptionType.ENUM_VALUE,
        )


def test_build_options_accepts_built_options() -> None:
    """Test that built options and builders can be mixed."""
    built = OptionSpec.oneof_option("a").set_value(FieldType.BOOL, True).build()
    builder = OptionSpec.oneof_option("b").set_value(FieldType.BOOL, False)

    options = build_options([built, builder], OptionType.ONEOF)

    assert [option.name for option in options] == ["a", "b"]
    assert options[0] is built


def test_option_spec_is_immutable() -> None:
    """Test that built options cannot be modified."""
    option = OptionSpec.file_option("foo").set_value(FieldType.BOOL, True).build()

    with pytest.raises(ValueError):
        option.name = "bar"  # type: ignore[misc]
