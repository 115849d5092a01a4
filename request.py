"""HTTP request model and parser."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from headers import HeaderMap

HEADER_SEPARATOR = ": "


class HTTPMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


class HTTPRequestParseError(ValueError):
    """Request parse error carrying an HTTP status code."""

    def __init__(self, message: str, *, status_code: int = 400) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedRequestError(HTTPRequestParseError):
    """Raised when the request line or the head/body framing is broken."""


class UnsupportedMethodError(HTTPRequestParseError):
    """Raised when the method token is outside the supported set."""


class MalformedHeaderLineError(HTTPRequestParseError):
    """Raised when a header line is not exactly ``name: value``."""


@dataclass(frozen=True, slots=True)
class HTTPRequest:
    method: HTTPMethod
    path: str
    http_version: str = "HTTP/1.1"
    headers: HeaderMap = field(default_factory=HeaderMap)
    body: bytes = b""

    @classmethod
    def from_bytes(cls, raw: bytes) -> "HTTPRequest":
        """Parse raw HTTP request bytes into a structured request object.

        The body is everything after the blank line that ends the header
        block, including any padding the read left behind.
        """
        start_line_bytes, separator, remainder = raw.partition(b"\r\n")
        if not separator:
            raise MalformedRequestError("Missing CRLF after request line")

        if remainder.startswith(b"\r\n"):
            header_bytes, body = b"", remainder[2:]
        else:
            header_bytes, separator, body = remainder.partition(b"\r\n\r\n")
            if not separator:
                raise MalformedRequestError("Missing CRLF CRLF request separator")

        try:
            start_line = start_line_bytes.decode("utf-8")
            header_block = header_bytes.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedRequestError("Request head is not valid UTF-8") from exc

        start_line_parts = start_line.split(" ")
        if len(start_line_parts) != 3:
            raise MalformedRequestError("Invalid request line")
        method_token, path, http_version = start_line_parts

        try:
            method = HTTPMethod(method_token)
        except ValueError as exc:
            raise UnsupportedMethodError(f"Unsupported method: {method_token!r}") from exc

        headers = HeaderMap()
        if header_block:
            for line in header_block.split("\r\n"):
                parts = line.split(HEADER_SEPARATOR)
                if len(parts) != 2:
                    raise MalformedHeaderLineError(f"Malformed header line: {line!r}")
                name, value = parts
                headers[name.lower()] = value

        return cls(
            method=method,
            path=path,
            http_version=http_version,
            headers=headers,
            body=body,
        )

    @property
    def body_data(self) -> bytes:
        """Body with trailing NUL padding from a fixed-size read removed."""
        return self.body.rstrip(b"\x00")
