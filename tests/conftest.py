"""Shared fixtures."""

import io

import pytest

from protoscribe.writer import ProtoWriter


@pytest.fixture
def out() -> io.StringIO:
    """Create an in-memory sink."""
    return io.StringIO()


@pytest.fixture
def writer(out: io.StringIO) -> ProtoWriter:
    """Create a writer with the default configuration over the sink."""
    return ProtoWriter(out)
