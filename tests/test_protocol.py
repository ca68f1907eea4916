"""Protocol message tests."""

import base64
import json

import pytest

from mljboard_client.core.exceptions import DecodeError, ProtocolError
from mljboard_client.core.protocol import (
    ClientEnvelope,
    ServerEnvelope,
    decode_message,
    encode_content,
    encode_message,
    pairing_envelope,
    response_envelope,
)


class TestClientEnvelope:
    """Outbound message serialization."""

    def test_pairing_with_code(self):
        """Pairing carries only type and code."""
        data = json.loads(encode_message(pairing_envelope("abc123")))
        assert data == {"type": "pairing", "code": "abc123"}

    def test_pairing_without_code(self):
        """No code means no code key, not null."""
        raw = encode_message(pairing_envelope(None))
        assert json.loads(raw) == {"type": "pairing"}
        assert "null" not in raw

    def test_pairing_exact_wire_form(self):
        """Key order follows the wire format."""
        raw = encode_message(pairing_envelope("abc"))
        assert raw == '{"type":"pairing","code":"abc"}'

    def test_response_with_code(self):
        """Response carries every field."""
        msg = response_envelope(id="42", code="abc", status=200, body=b"ok")
        data = json.loads(encode_message(msg))
        assert data == {
            "type": "response",
            "id": "42",
            "code": "abc",
            "status": 200,
            "content": "b2s=",
        }

    def test_response_without_code(self):
        """Code is omitted when there is no pairing token."""
        msg = response_envelope(id="7", code=None, status=404, body=b"")
        data = json.loads(encode_message(msg))
        assert set(data) == {"type", "id", "status", "content"}
        assert data["content"] == ""

    def test_kind_is_type_on_the_wire(self):
        """The kind attribute serializes as type."""
        msg = ClientEnvelope(kind="pairing")
        assert msg.kind == "pairing"
        assert json.loads(encode_message(msg)) == {"type": "pairing"}

    def test_encode_content_is_binary_safe(self):
        """Arbitrary bytes survive the base64 leg."""
        body = bytes(range(256))
        assert base64.b64decode(encode_content(body)) == body


class TestServerEnvelope:
    """Inbound message decoding."""

    def test_decode_request(self):
        """Decode a full GET command."""
        msg = decode_message(
            '{"type":"request","method":"GET","url":"status","id":"42"}'
        )
        assert isinstance(msg, ServerEnvelope)
        assert msg.kind == "request"
        assert msg.method == "GET"
        assert msg.url == "status"
        assert msg.id == "42"

    def test_decode_without_id(self):
        """The id is optional."""
        msg = decode_message('{"type":"request","method":"GET","url":"x"}')
        assert msg.id is None

    def test_decode_bytes(self):
        """Binary frames are read as UTF-8."""
        msg = decode_message(b'{"type":"request","method":"GET","url":"x"}')
        assert msg.url == "x"

    def test_decode_ignores_extra_keys(self):
        """Unknown keys are dropped."""
        msg = decode_message(
            '{"type":"request","method":"GET","url":"x","extra":1}'
        )
        assert msg.url == "x"

    def test_decode_unknown_kind(self):
        """Unknown kinds decode; dispatch decides to ignore them."""
        msg = decode_message('{"type":"hello","method":"GET","url":"x"}')
        assert msg.kind == "hello"

    @pytest.mark.parametrize(
        "frame",
        [
            '{"type":"request","url":"x","id":"1"}',
            '{"type":"request","method":"GET","id":"1"}',
            '{"method":"GET","url":"x"}',
            '{"type":"request","method":"GET","url":"x","id":5}',
            "not json",
            "[]",
            "",
            b"\xff\xfe",
            '{"kind":"request","method":"GET","url":"x"}',
        ],
    )
    def test_decode_malformed(self, frame):
        """Malformed frames raise DecodeError."""
        with pytest.raises(DecodeError):
            decode_message(frame)

    def test_decode_error_is_protocol_error(self):
        """DecodeError sits under ProtocolError."""
        with pytest.raises(ProtocolError):
            decode_message("{}")

    def test_round_trip(self):
        """Encoding then decoding keeps every present field."""
        original = ServerEnvelope(
            kind="request", method="GET", url="a/b?c=d", id="9"
        )
        assert decode_message(encode_message(original)) == original

    def test_round_trip_without_id(self):
        """Absent id stays absent."""
        original = ServerEnvelope(kind="request", method="GET", url="")
        raw = encode_message(original)
        assert "id" not in json.loads(raw)
        assert decode_message(raw) == original
