"""HTTP response model and serializer."""

from __future__ import annotations

import gzip
import zlib
from collections.abc import Mapping
from dataclasses import dataclass, field

from headers import HeaderMap

DEFAULT_CONTENT_TYPE = "text/plain"
FALLBACK_STATUS_CODE = 400

REASON_PHRASES: dict[int, str] = {
    200: "OK",
    201: "Created",
    400: "Bad Request",
    404: "Not Found",
    405: "Method Not Allowed",
    500: "Internal Server Error",
}


class EncodingFailure(RuntimeError):
    """Raised when a response body cannot be content-encoded."""


@dataclass(slots=True)
class HTTPResponse:
    status_code: int
    headers: HeaderMap = field(default_factory=HeaderMap)
    body: bytes | str = b""

    def __post_init__(self) -> None:
        if isinstance(self.body, str):
            self.body = self.body.encode("utf-8")
        if not isinstance(self.headers, HeaderMap):
            self.headers = HeaderMap(self.headers)

    @property
    def reason_phrase(self) -> str:
        return REASON_PHRASES.get(self.status_code, REASON_PHRASES[FALLBACK_STATUS_CODE])

    def to_bytes(self, accept_encoding: str | None = None) -> bytes:
        """Serialize the response into HTTP/1.1 wire format bytes."""
        return encode_response(self, accept_encoding)


def text_response(
    status_code: int,
    body: bytes | str,
    *,
    content_type: str = DEFAULT_CONTENT_TYPE,
    headers: Mapping[str, str] | None = None,
) -> HTTPResponse:
    response_headers = HeaderMap({"Content-Type": content_type})
    if headers is not None:
        response_headers.update(headers)
    return HTTPResponse(status_code=status_code, headers=response_headers, body=body)


def status_line(status_code: int) -> str:
    if status_code not in REASON_PHRASES:
        status_code = FALLBACK_STATUS_CODE
    return f"HTTP/1.1 {status_code} {REASON_PHRASES[status_code]}"


def accepts_gzip(accept_encoding: str | None) -> bool:
    if not accept_encoding:
        return False
    tokens = (token.strip().lower() for token in accept_encoding.split(","))
    return "gzip" in tokens


def gzip_body(body: bytes) -> bytes:
    try:
        return gzip.compress(body, mtime=0)
    except (OSError, zlib.error, ValueError) as exc:
        raise EncodingFailure(f"gzip compression failed: {exc}") from exc


def to_hex_pairs(data: bytes) -> bytes:
    return " ".join(f"{byte:02X}" for byte in data).encode("ascii")


def encode_response(
    response: HTTPResponse,
    accept_encoding: str | None = None,
    *,
    hex_gzip_body: bool = False,
) -> bytes:
    """Serialize a response, applying gzip when the client negotiated it.

    Header order is fixed: Content-Type, the remaining response headers in
    insertion order, Content-Encoding, Content-Length. Content-Length always
    counts the compressed bytes when gzip applies, including in the hex debug
    rendering where the written text is longer.
    """
    body = bytes(response.body)
    content_type = response.headers.get("Content-Type", DEFAULT_CONTENT_TYPE)
    headers = HeaderMap({"Content-Type": content_type})
    for name, value in response.headers.items():
        if name.lower() in {"content-type", "content-encoding", "content-length"}:
            continue
        headers[name] = value

    content_length = len(body)
    if accepts_gzip(accept_encoding):
        compressed = gzip_body(body)
        content_length = len(compressed)
        body = to_hex_pairs(compressed) if hex_gzip_body else compressed
        headers["Content-Encoding"] = "gzip"
    headers["Content-Length"] = str(content_length)

    header_lines = [status_line(response.status_code)]
    header_lines.extend(f"{name}: {value}" for name, value in headers.items())
    head = "\r\n".join(header_lines).encode("utf-8") + b"\r\n\r\n"
    return head + body
