"""Unit tests for HTTP response serialization."""

import gzip
import http.client
import io

import pytest

import response as response_module
from headers import HeaderMap
from response import EncodingFailure, HTTPResponse, encode_response, text_response


class _FakeSocket:
    def __init__(self, payload: bytes) -> None:
        self._payload = payload

    def makefile(self, *_args: object, **_kwargs: object) -> io.BytesIO:
        return io.BytesIO(self._payload)


def _reference_parse(raw: bytes) -> tuple[int, dict[str, str], bytes]:
    parsed = http.client.HTTPResponse(_FakeSocket(raw))  # type: ignore[arg-type]
    parsed.begin()
    body = parsed.read()
    return parsed.status, {name.lower(): value for name, value in parsed.getheaders()}, body


def test_response_serialization_sets_length_and_default_content_type() -> None:
    response = HTTPResponse(status_code=200, body="hello")

    raw = response.to_bytes()

    assert raw == (
        b"HTTP/1.1 200 OK\r\n"
        b"Content-Type: text/plain\r\n"
        b"Content-Length: 5\r\n"
        b"\r\n"
        b"hello"
    )


def test_response_serialization_preserves_custom_content_type() -> None:
    response = text_response(200, b"\x00\x01binary", content_type="application/octet-stream")

    raw = encode_response(response)

    assert raw.startswith(b"HTTP/1.1 200 OK\r\n")
    assert b"Content-Type: application/octet-stream\r\n" in raw
    assert b"Content-Length: 8\r\n" in raw
    assert raw.endswith(b"\r\n\r\n\x00\x01binary")


@pytest.mark.parametrize(
    ("status_code", "expected_line"),
    [
        (200, b"HTTP/1.1 200 OK\r\n"),
        (201, b"HTTP/1.1 201 Created\r\n"),
        (404, b"HTTP/1.1 404 Not Found\r\n"),
        (405, b"HTTP/1.1 405 Method Not Allowed\r\n"),
        (500, b"HTTP/1.1 500 Internal Server Error\r\n"),
        (418, b"HTTP/1.1 400 Bad Request\r\n"),
        (503, b"HTTP/1.1 400 Bad Request\r\n"),
    ],
)
def test_status_line_uses_table_with_bad_request_fallback(
    status_code: int, expected_line: bytes
) -> None:
    raw = encode_response(HTTPResponse(status_code=status_code, body=""))

    assert raw.startswith(expected_line)


def test_header_order_is_deterministic() -> None:
    response = HTTPResponse(
        status_code=405,
        headers=HeaderMap({"Allow": "GET", "Content-Length": "999", "Content-Type": "text/plain"}),
        body="Method Not Allowed",
    )

    head = encode_response(response, "gzip").split(b"\r\n\r\n", 1)[0]

    assert head.split(b"\r\n")[1:] == [
        b"Content-Type: text/plain",
        b"Allow: GET",
        b"Content-Encoding: gzip",
        b"Content-Length: " + str(len(gzip.compress(b"Method Not Allowed", mtime=0))).encode(),
    ]


@pytest.mark.parametrize("accept_encoding", ["gzip", "deflate, gzip", "br,GZIP", "  gzip ,br"])
def test_gzip_is_negotiated_and_length_counts_compressed_bytes(accept_encoding: str) -> None:
    raw = encode_response(text_response(200, "Hello, World!"), accept_encoding)

    status, headers, body = _reference_parse(raw)

    assert status == 200
    assert headers["content-encoding"] == "gzip"
    assert int(headers["content-length"]) == len(body)
    assert gzip.decompress(body) == b"Hello, World!"


@pytest.mark.parametrize("accept_encoding", [None, "", "deflate", "br, identity", "gzipped"])
def test_gzip_not_negotiated_keeps_plain_body(accept_encoding: str | None) -> None:
    raw = encode_response(text_response(200, "abc"), accept_encoding)

    assert b"Content-Encoding" not in raw
    assert b"Content-Length: 3\r\n" in raw
    assert raw.endswith(b"\r\n\r\nabc")


def test_gzip_output_is_deterministic() -> None:
    response = text_response(200, "same body")

    assert encode_response(response, "gzip") == encode_response(response, "gzip")


def test_hex_gzip_body_renders_pairs_but_reports_compressed_length() -> None:
    compressed = gzip.compress(b"abc", mtime=0)

    raw = encode_response(text_response(200, "abc"), "gzip", hex_gzip_body=True)
    head, body = raw.split(b"\r\n\r\n", 1)

    assert f"Content-Length: {len(compressed)}".encode() in head
    assert body == " ".join(f"{byte:02X}" for byte in compressed).encode()
    assert body.startswith(b"1F 8B")


def test_compression_failure_raises_encoding_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    def _broken_compress(*_args: object, **_kwargs: object) -> bytes:
        raise OSError("disk full")

    monkeypatch.setattr(response_module.gzip, "compress", _broken_compress)

    with pytest.raises(EncodingFailure):
        encode_response(text_response(200, "abc"), "gzip")


@pytest.mark.parametrize(
    "response",
    [
        text_response(200, "Hello, World!"),
        text_response(201, "Created"),
        text_response(404, "Not Found"),
        text_response(405, "Method Not Allowed", headers={"Allow": "GET, POST"}),
        text_response(200, b"\x00\xffdata", content_type="application/octet-stream"),
    ],
)
def test_reference_client_round_trip(response: HTTPResponse) -> None:
    status, headers, body = _reference_parse(encode_response(response))

    assert status == response.status_code
    assert body == response.body
    for name, value in response.headers.items():
        assert headers[name.lower()] == value
    assert headers["content-length"] == str(len(response.body))
