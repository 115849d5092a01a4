"""Per-connection request/response exchange."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import asdict, dataclass

from config import ANSWER_PARSE_ERRORS, BUFFER_SIZE, GZIP_HEX_BODY, LOG_FORMAT, MAX_BODY_BYTES
from request import HTTPRequest, HTTPRequestParseError
from response import EncodingFailure, HTTPResponse, encode_response, text_response
from router import Router
from socket_handler import ReadBytes, WriteBytes, read_http_request, write_http_response

logger = logging.getLogger(__name__)

ClientAddress = tuple[str, int]


@dataclass(slots=True)
class ExchangeRecord:
    """Outcome of one connection, as written to the access log."""

    client: str
    method: str
    path: str
    status: int
    bytes_in: int
    bytes_out: int
    duration_ms: float


class ConnectionHandler:
    def __init__(
        self,
        router: Router,
        *,
        buffer_size: int = BUFFER_SIZE,
        max_body_bytes: int = MAX_BODY_BYTES,
        hex_gzip_body: bool = GZIP_HEX_BODY,
        answer_parse_errors: bool = ANSWER_PARSE_ERRORS,
        log_format: str = LOG_FORMAT,
    ) -> None:
        self.router = router
        self.buffer_size = buffer_size
        self.max_body_bytes = max_body_bytes
        self.hex_gzip_body = hex_gzip_body
        self.answer_parse_errors = answer_parse_errors
        self.log_format = log_format

    def handle(
        self,
        read: ReadBytes,
        write: WriteBytes,
        address: ClientAddress = ("-", 0),
    ) -> ExchangeRecord | None:
        """Run read, parse, route, encode and write once for one connection.

        Returns the logged record, or None when nothing was written.
        """
        started_at = time.perf_counter()
        raw_request = b""
        method = "-"
        path = "-"
        accept_encoding: str | None = None
        try:
            raw_request = read_http_request(
                read,
                buffer_size=self.buffer_size,
                max_body_bytes=self.max_body_bytes,
            )
            if not raw_request:
                return None
            request = HTTPRequest.from_bytes(raw_request)
        except OSError as exc:
            logger.debug("Read from %s failed: %s", address[0], exc)
            return None
        except HTTPRequestParseError as exc:
            logger.warning("Rejected request from %s: %s", address[0], exc)
            if not self.answer_parse_errors:
                return None
            response = text_response(exc.status_code, "Bad Request")
        else:
            method = request.method.value
            path = request.path
            accept_encoding = request.headers.get("accept-encoding")
            response = self.router.route(request)

        try:
            payload = encode_response(
                response,
                accept_encoding,
                hex_gzip_body=self.hex_gzip_body,
            )
        except EncodingFailure:
            logger.exception("Dropping connection from %s without a response", address[0])
            return None

        if logger.isEnabledFor(logging.DEBUG):
            head = payload.split(b"\r\n\r\n", 1)[0]
            logger.debug("Response head:\n%s", head.decode("utf-8", errors="replace"))

        try:
            bytes_sent = write_http_response(write, payload)
        except OSError as exc:
            logger.debug("Write to %s failed: %s", address[0], exc)
            return None

        return self._record_and_log(
            address=address,
            method=method,
            path=path,
            response=response,
            bytes_in=len(raw_request),
            bytes_out=bytes_sent,
            started_at=started_at,
        )

    def _record_and_log(
        self,
        *,
        address: ClientAddress,
        method: str,
        path: str,
        response: HTTPResponse,
        bytes_in: int,
        bytes_out: int,
        started_at: float,
    ) -> ExchangeRecord:
        duration_ms = (time.perf_counter() - started_at) * 1000
        record = ExchangeRecord(
            client=address[0],
            method=method,
            path=path,
            status=response.status_code,
            bytes_in=bytes_in,
            bytes_out=bytes_out,
            duration_ms=round(duration_ms, 3),
        )
        if self.log_format == "json":
            logger.info(json.dumps(asdict(record), sort_keys=True))
            return record

        logger.info(
            "client=%s method=%s path=%s status=%s bytes_in=%s bytes_out=%s duration_ms=%.2f",
            record.client,
            record.method,
            record.path,
            record.status,
            record.bytes_in,
            record.bytes_out,
            duration_ms,
        )
        return record
