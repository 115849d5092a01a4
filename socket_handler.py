"""Low-level request read and response write helpers."""

from __future__ import annotations

from collections.abc import Callable

from config import BUFFER_SIZE, MAX_BODY_BYTES
from request import MalformedRequestError

ReadBytes = Callable[[int], bytes]
WriteBytes = Callable[[bytes], object]


class PayloadTooLargeError(MalformedRequestError):
    """Raised when the declared body exceeds the configured maximum size."""


class IncompleteBodyError(MalformedRequestError):
    """Raised when the peer closes before the declared body arrived."""


def _extract_content_length(header_bytes: bytes) -> int | None:
    headers = header_bytes.decode("iso-8859-1").split("\r\n")
    for line in headers[1:]:
        if ":" not in line:
            continue
        name, value = line.split(":", 1)
        if name.strip().lower() == "content-length":
            try:
                parsed_length = int(value.strip())
            except ValueError:
                return None
            return parsed_length if parsed_length >= 0 else None
    return None


def read_http_request(
    read: ReadBytes,
    *,
    buffer_size: int = BUFFER_SIZE,
    max_body_bytes: int = MAX_BODY_BYTES,
) -> bytes:
    """Read one request: a single fixed-size read, then the declared body.

    Further reads happen only when the header block is complete and declares
    a Content-Length the first read did not cover. Bytes past the declared
    body are dropped. Other framing problems are left for the parser.
    """
    first_chunk = read(buffer_size)
    if not first_chunk:
        return b""

    header_end_index = first_chunk.find(b"\r\n\r\n")
    if header_end_index == -1:
        return first_chunk

    expected_body_length = _extract_content_length(first_chunk[:header_end_index])
    if expected_body_length is None:
        return first_chunk

    if expected_body_length > max_body_bytes:
        raise PayloadTooLargeError(
            f"Content-Length {expected_body_length} exceeds {max_body_bytes} bytes"
        )

    request_length = header_end_index + 4 + expected_body_length
    buffer = bytearray(first_chunk)
    while len(buffer) < request_length:
        chunk = read(buffer_size)
        if not chunk:
            raise IncompleteBodyError("Connection closed before request body completed")
        buffer.extend(chunk)
    return bytes(buffer[:request_length])


def write_http_response(write: WriteBytes, payload: bytes) -> int:
    """Write the complete response payload in one call."""
    write(payload)
    return len(payload)
