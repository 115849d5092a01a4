"""Main HTTP server entry point and connection lifecycle orchestration."""

from __future__ import annotations

import argparse
import itertools
import logging
import socket
import threading

from config import (
    ACCEPT_TIMEOUT_SECS,
    ANSWER_PARSE_ERRORS,
    FILES_DIRECTORY,
    GZIP_HEX_BODY,
    HOST,
    LISTEN_BACKLOG,
    LOG_FORMAT,
    LOG_LEVEL,
    PORT,
)
from connection import ConnectionHandler
from handlers.route_handlers import build_router
from router import Router

logger = logging.getLogger(__name__)


class Listener:
    """Owns the listening socket from bind until close."""

    def __init__(
        self,
        host: str,
        port: int,
        *,
        backlog: int = LISTEN_BACKLOG,
        accept_timeout: float | None = ACCEPT_TIMEOUT_SECS,
    ) -> None:
        self._socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            self._socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            self._socket.bind((host, port))
            self._socket.listen(backlog)
            self._socket.settimeout(accept_timeout)
        except OSError:
            self._socket.close()
            raise
        self._closed = False

    @property
    def address(self) -> tuple[str, int]:
        host, port = self._socket.getsockname()[:2]
        return host, port

    @property
    def closed(self) -> bool:
        return self._closed

    def accept(self) -> tuple[socket.socket, tuple[str, int]]:
        client_socket, address = self._socket.accept()
        client_socket.settimeout(None)
        return client_socket, address

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._socket.close()

    def __enter__(self) -> "Listener":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class HTTPServer:
    def __init__(
        self,
        host: str = HOST,
        port: int = PORT,
        router: Router | None = None,
        *,
        files_directory: str | None = FILES_DIRECTORY,
        log_format: str = LOG_FORMAT,
        hex_gzip_body: bool = GZIP_HEX_BODY,
        answer_parse_errors: bool = ANSWER_PARSE_ERRORS,
    ) -> None:
        self.host = host
        self.port = port
        self.files_directory = files_directory
        self.router = router or build_router(files_directory)
        self.connection_handler = ConnectionHandler(
            self.router,
            hex_gzip_body=hex_gzip_body,
            answer_parse_errors=answer_parse_errors,
            log_format=log_format,
        )

        self._listener: Listener | None = None
        self._connection_ids = itertools.count(1)
        self._running = False

    def start(self) -> None:
        """Bind, then accept clients until stop() is called."""
        with Listener(self.host, self.port) as listener:
            self._listener = listener
            self.port = listener.address[1]
            self._running = True
            logger.info("Listening on %s:%s", self.host, self.port)
            try:
                self._serve(listener)
            finally:
                self._running = False
                self._listener = None

    def _serve(self, listener: Listener) -> None:
        while self._running:
            try:
                client_socket, address = listener.accept()
            except socket.timeout:
                continue
            except OSError:
                if self._running:
                    logger.exception("Accept failed; stopping server")
                break

            worker = threading.Thread(
                target=self._handle_client,
                args=(client_socket, address),
                name=f"http-conn-{next(self._connection_ids)}",
                daemon=True,
            )
            worker.start()

    def stop(self) -> None:
        self._running = False
        if self._listener is not None:
            self._listener.close()

    def _handle_client(self, client_socket: socket.socket, address: tuple[str, int]) -> None:
        with client_socket:
            try:
                self.connection_handler.handle(client_socket.recv, client_socket.sendall, address)
            except Exception:
                logger.exception("Unhandled error while serving %s", address[0])


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run custom HTTP server")
    parser.add_argument("--host", default=HOST)
    parser.add_argument("--port", type=int, default=PORT)
    parser.add_argument(
        "--directory",
        default=FILES_DIRECTORY,
        help="base directory for /files/{name} routes",
    )
    parser.add_argument("--log-format", choices=["plain", "json"], default=LOG_FORMAT)
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=LOG_LEVEL,
    )
    parser.add_argument(
        "--gzip-hex-body",
        action="store_true",
        default=GZIP_HEX_BODY,
        help="render gzip bodies as space-separated hex pairs",
    )
    return parser.parse_args()


def main() -> None:
    args = _parse_args()
    logging.basicConfig(level=args.log_level)
    server = HTTPServer(
        host=args.host,
        port=args.port,
        files_directory=args.directory,
        log_format=args.log_format,
        hex_gzip_body=args.gzip_hex_body,
    )
    try:
        server.start()
    except KeyboardInterrupt:
        server.stop()


if __name__ == "__main__":
    main()
