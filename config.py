"""Configuration constants for the custom HTTP server."""

HOST: str = "127.0.0.1"
PORT: int = 4221
BUFFER_SIZE: int = 2048
MAX_BODY_BYTES: int = 524_288
FILES_DIRECTORY: str | None = None
LISTEN_BACKLOG: int = 128
ACCEPT_TIMEOUT_SECS: float = 0.2
LOG_FORMAT: str = "plain"
LOG_LEVEL: str = "INFO"
GZIP_HEX_BODY: bool = False
ANSWER_PARSE_ERRORS: bool = True
