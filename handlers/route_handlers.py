"""Route handlers for the fixed route table."""

from __future__ import annotations

from file_store import FileStore
from request import HTTPRequest
from response import HTTPResponse, text_response
from router import MissingHeaderError, RouteParams, Router

OCTET_STREAM = "application/octet-stream"


def home(request: HTTPRequest, params: RouteParams) -> HTTPResponse:
    _ = request, params
    return text_response(200, "Hello, World!")


def user_agent(request: HTTPRequest, params: RouteParams) -> HTTPResponse:
    _ = params
    agent = request.headers.get("user-agent")
    if agent is None:
        raise MissingHeaderError("User-Agent")
    return text_response(200, agent)


def echo(request: HTTPRequest, params: RouteParams) -> HTTPResponse:
    _ = request
    return text_response(200, params["msg"])


class FileHandlers:
    def __init__(self, store: FileStore) -> None:
        self._store = store

    def read_file(self, request: HTTPRequest, params: RouteParams) -> HTTPResponse:
        _ = request
        try:
            data = self._store.read(params["name"])
        except OSError:
            return text_response(404, "Not Found")
        return text_response(200, data, content_type=OCTET_STREAM)

    def write_file(self, request: HTTPRequest, params: RouteParams) -> HTTPResponse:
        try:
            self._store.write(params["name"], request.body_data)
        except OSError as exc:
            return text_response(500, str(exc))
        return text_response(201, "Created")


def build_router(files_directory: str | None = None) -> Router:
    file_handlers = FileHandlers(FileStore(files_directory))

    router = Router()
    router.add_route("GET", "/", home)
    router.add_route("GET", "/user-agent", user_agent)
    router.add_route("GET", "/echo/{msg}", echo)
    router.add_route("GET", "/files/{name}", file_handlers.read_file)
    router.add_route("POST", "/files/{name}", file_handlers.write_file)
    return router
