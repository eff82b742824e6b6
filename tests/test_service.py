"""Tests for services and rpc methods."""

import pytest

from protoscribe import (
    FieldType,
    OptionSpec,
    RenderError,
    RpcFieldSpec,
    ServiceSpec,
)

# ============================================================================
# RPC Methods
# ============================================================================


def test_unary_rpc() -> None:
    """Test a method without streaming or options."""
    rpc = RpcFieldSpec.builder("Test").set_request("Foo").set_response("Bar")

    assert rpc.build().to_proto() == "rpc Test (Foo) returns (Bar);\n"


@pytest.mark.parametrize(
    ("request_streaming", "response_streaming", "expected"),
    [
        (True, False, "rpc Test (stream Foo) returns (Bar);\n"),
        (False, True, "rpc Test (Foo) returns (stream Bar);\n"),
        (True, True, "rpc Test (stream Foo) returns (stream Bar);\n"),
    ],
)
def test_streaming_rpc(
    request_streaming: bool, response_streaming: bool, expected: str
) -> None:
    """Test that streamed messages get the stream keyword."""
    rpc = (
        RpcFieldSpec.builder("Test")
        .set_request("Foo", streaming=request_streaming)
        .set_response("Bar", streaming=response_streaming)
    )

    assert rpc.build().to_proto() == expected


def test_rpc_with_options() -> None:
    """Test that method options render in a body after the signature."""
    rpc = (
        RpcFieldSpec.builder("Test")
        .set_comment("comment")
        .set_request("Foo")
        .set_response("Bar")
        .add_options(
            OptionSpec.method_option("foo").set_value(FieldType.STRING, "bar"),
            OptionSpec.method_option("baz").set_value(FieldType.BOOL, True),
        )
    )

    assert rpc.build().to_proto() == (
        "// comment\n"
        "rpc Test (Foo) returns (Bar) {\n"
        '  option (foo) = "bar";\n'
        "  option (baz) = true;\n"
        "}\n"
    )


def test_rpc_requires_request() -> None:
    """Test that a method cannot be built without a request."""
    with pytest.raises(ValueError, match="request message must be set"):
        RpcFieldSpec.builder("Test").set_response("Bar").build()


def test_rpc_requires_response() -> None:
    """Test that a method cannot be built without a response."""
    with pytest.raises(ValueError, match="response message must be set"):
        RpcFieldSpec.builder("Test").set_request("Foo").build()


def test_rpc_option_owner_enforced() -> None:
    """Test that only method options attach to methods."""
    with pytest.raises(ValueError, match="option must be method type"):
        RpcFieldSpec.builder("Test").add_options(
            OptionSpec.service_option("foo").set_value(FieldType.BOOL, True)
        )


# ============================================================================
# Services
# ============================================================================


def test_empty_service() -> None:
    """Test a service without methods."""
    service = ServiceSpec.builder("Empty").set_comment("comment").build()

    assert service.to_proto() == "// comment\nservice Empty {}\n"


def test_service_with_options_and_rpcs() -> None:
    """Test that options are hoisted above the methods."""
    service = (
        ServiceSpec.builder("Greeter")
        .add_rpcs(
            RpcFieldSpec.builder("Hello").set_request("Req").set_response("Resp"),
            RpcFieldSpec.builder("Bye").set_request("Req").set_response("Resp"),
        )
        .add_options(
            OptionSpec.service_option("deprecated").set_value(FieldType.BOOL, True)
        )
        .build()
    )

    assert service.to_proto() == (
        "service Greeter {\n"
        "\n"
        "  option deprecated = true;\n"
        "\n"
        "  rpc Hello (Req) returns (Resp);\n"
        "  rpc Bye (Req) returns (Resp);\n"
        "}\n"
    )


def test_service_option_owner_enforced() -> None:
    """Test that only service options attach to services."""
    with pytest.raises(ValueError, match="option must be service type"):
        ServiceSpec.builder("A").add_options(
            OptionSpec.method_option("foo").set_value(FieldType.BOOL, True)
        )


def test_duplicate_rpc_names() -> None:
    """Test that methods in one service need unique names."""
    service = (
        ServiceSpec.builder("A")
        .add_rpcs(
            RpcFieldSpec.builder("B").set_request("Foo").set_response("Bar"),
            RpcFieldSpec.builder("B").set_request("Baz").set_response("Qux"),
        )
        .build()
    )

    with pytest.raises(RenderError, match="field name 'B' is not unique"):
        service.check()
