"""
Unit tests for message decoding, routing and response building.
"""

import pytest

from echoserver.protocol import (
    Message,
    Decision,
    decode,
    route,
    build_response,
    SENTINEL,
    ECHO_PREFIX,
    GOODBYE,
)


class TestDecode:
    """Tests for decode() and Message."""

    def test_decode_keeps_bytes(self):
        """Test that decoding performs no parsing or stripping."""
        message = decode(b"  hello world \n")

        assert message.data == b"  hello world \n"
        assert message.text == "  hello world \n"
        assert len(message) == 15

    def test_is_line(self):
        """Test newline detection."""
        assert decode(b"hello\n").is_line is True
        assert decode(b"hello").is_line is False

    def test_invalid_utf8_text_view(self):
        """Test that undecodable bytes still give a text view."""
        message = decode(b"\xff\xfeabc\n")

        assert message.data == b"\xff\xfeabc\n"
        assert message.text.endswith("abc\n")

    def test_message_is_immutable(self):
        """Test that messages are frozen."""
        message = Message(b"x")

        with pytest.raises(AttributeError):
            message.data = b"y"


class TestRoute:
    """Tests for the sentinel decision."""

    def test_sentinel_terminates(self):
        """Test that exactly b"exit\\n" selects TERMINATE."""
        assert route(decode(b"exit\n")) is Decision.TERMINATE
        assert SENTINEL == b"exit\n"

    @pytest.mark.parametrize("data", [
        b"exit",
        b"EXIT\n",
        b"Exit\n",
        b"exit\r\n",
        b" exit\n",
        b"exit \n",
        b"exit\nexit\n",
        b"hello\n",
        b"\n",
    ])
    def test_everything_else_echoes(self, data):
        """Test that the comparison is byte-exact and needs the newline."""
        assert route(decode(data)) is Decision.ECHO


class TestBuildResponse:
    """Tests for response bytes."""

    def test_echo_response(self):
        """Test that echo prefixes the original bytes."""
        message = decode(b"hello\n")
        assert build_response(message, Decision.ECHO) == b"Echo: hello\n"

    def test_echo_preserves_missing_newline(self):
        """Test that a read without newline is echoed as-is."""
        message = decode(b"partial")
        assert build_response(message, Decision.ECHO) == ECHO_PREFIX + b"partial"

    def test_terminate_response(self):
        """Test the goodbye literal."""
        message = decode(SENTINEL)
        assert build_response(message, route(message)) == GOODBYE == b"Goodbye.\n"
