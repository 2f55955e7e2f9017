"""
Tests for the JSON body reader.
"""

import pytest
from starlette.requests import Request

from http_exercise_server.core.body import read_json_body, MalformedBodyError
from http_exercise_server.core.responses import render_json


def make_request(*chunks: bytes) -> Request:
    """Build a POST request whose body arrives in the given chunks."""
    messages = [
        {"type": "http.request", "body": chunk, "more_body": i < len(chunks) - 1}
        for i, chunk in enumerate(chunks or (b"",))
    ]

    async def receive():
        return messages.pop(0)

    scope = {
        "type": "http",
        "method": "POST",
        "path": "/users",
        "raw_path": b"/users",
        "query_string": b"",
        "headers": [(b"content-type", b"application/json")],
    }
    return Request(scope, receive)


@pytest.mark.asyncio
class TestReadJsonBody:
    """Test read_json_body"""

    async def test_empty_body_is_empty_dict(self):
        assert await read_json_body(make_request(b"")) == {}

    async def test_whitespace_body_is_empty_dict(self):
        assert await read_json_body(make_request(b"  \n")) == {}

    async def test_object_body(self):
        body = await read_json_body(make_request(b'{"name": "Ann", "email": "a@x.com"}'))
        assert body == {"name": "Ann", "email": "a@x.com"}

    async def test_body_accumulated_from_chunks(self):
        """The whole stream is read before parsing"""
        body = await read_json_body(make_request(b'{"name": ', b'"Ann"', b"}"))
        assert body == {"name": "Ann"}

    async def test_malformed_json_raises(self):
        with pytest.raises(MalformedBodyError):
            await read_json_body(make_request(b"{not json"))

    async def test_non_object_json_raises(self):
        with pytest.raises(MalformedBodyError):
            await read_json_body(make_request(b"[1, 2, 3]"))

    async def test_invalid_utf8_raises(self):
        with pytest.raises(MalformedBodyError):
            await read_json_body(make_request(b"\xff\xfe"))

    @pytest.mark.parametrize("payload", [
        b'{"name": NaN, "email": "n@x.com"}',
        b'{"name": Infinity}',
        b'{"name": -Infinity}',
    ])
    async def test_non_json_constants_raise(self, payload):
        """NaN/Infinity are JavaScript, not JSON"""
        with pytest.raises(MalformedBodyError):
            await read_json_body(make_request(payload))

    async def test_overflowing_number_raises(self):
        with pytest.raises(MalformedBodyError, match="out of range"):
            await read_json_body(make_request(b'{"ratio": 1e400}'))

    async def test_finite_floats_accepted(self):
        assert await read_json_body(make_request(b'{"ratio": 1.5, "big": 1e300}')) == {"ratio": 1.5, "big": 1e300}


class TestRenderJson:
    """Test render_json"""

    def test_indented(self):
        assert render_json({"a": 1}) == '{\n  "a": 1\n}'

    def test_refuses_non_finite_numbers(self):
        with pytest.raises(ValueError):
            render_json({"ratio": float("nan")})
