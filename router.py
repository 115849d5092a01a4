"""Routing table for method/path handlers."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from request import HTTPMethod, HTTPRequest
from response import HTTPResponse, text_response
from utils import route_segment

logger = logging.getLogger(__name__)

RouteParams = dict[str, str]
Handler = Callable[[HTTPRequest, RouteParams], HTTPResponse]


class RoutingError(Exception):
    """Raised by handlers for request problems that map to a 500 response."""


class MissingHeaderError(RoutingError):
    def __init__(self, header_name: str) -> None:
        super().__init__(f"Missing required header: {header_name}")
        self.header_name = header_name


@dataclass(slots=True)
class Route:
    pattern: str
    prefix: str
    param_name: str | None
    handlers: dict[HTTPMethod, Handler] = field(default_factory=dict)

    @classmethod
    def from_pattern(cls, pattern: str) -> "Route":
        if not pattern.startswith("/"):
            raise ValueError("path must start with '/'")

        if "{" not in pattern and "}" not in pattern:
            return cls(pattern=pattern, prefix=pattern, param_name=None)

        prefix, _brace, placeholder = pattern.partition("{")
        if not prefix.endswith("/") or not placeholder.endswith("}"):
            raise ValueError("placeholder must be a whole trailing segment")
        param_name = placeholder[:-1]
        if not param_name or "{" in param_name or "}" in param_name or "/" in param_name:
            raise ValueError(f"invalid placeholder in pattern {pattern!r}")
        return cls(pattern=pattern, prefix=prefix, param_name=param_name)

    def match(self, path: str) -> RouteParams | None:
        if self.param_name is None:
            return {} if path == self.prefix else None
        if not path.startswith(self.prefix):
            return None
        return {self.param_name: route_segment(path, self.prefix)}

    @property
    def allow_header(self) -> str:
        return ", ".join(method.value for method in self.handlers)


class Router:
    """Resolves requests against patterns in registration order."""

    def __init__(self) -> None:
        self._routes: dict[str, Route] = {}

    def add_route(self, method: str | HTTPMethod, pattern: str, handler: Handler) -> None:
        normalized_method = method if isinstance(method, HTTPMethod) else method.upper().strip()
        if not normalized_method:
            raise ValueError("method cannot be empty")
        try:
            http_method = HTTPMethod(normalized_method)
        except ValueError as exc:
            raise ValueError(f"unsupported method: {method!r}") from exc

        route = self._routes.get(pattern)
        if route is None:
            route = Route.from_pattern(pattern)
            self._routes[pattern] = route
        route.handlers[http_method] = handler

    def resolve(self, path: str) -> tuple[Route, RouteParams] | None:
        for route in self._routes.values():
            params = route.match(path)
            if params is not None:
                return route, params
        return None

    def route(self, request: HTTPRequest) -> HTTPResponse:
        """Produce exactly one response for any request; never raises."""
        resolved = self.resolve(request.path)
        if resolved is None:
            return text_response(404, "Not Found")

        route, params = resolved
        handler = route.handlers.get(request.method)
        if handler is None:
            return text_response(
                405,
                "Method Not Allowed",
                headers={"Allow": route.allow_header},
            )

        try:
            return handler(request, params)
        except RoutingError as exc:
            logger.warning("Route %s failed: %s", route.pattern, exc)
            return text_response(500, "Internal Server Error")
        except Exception:
            logger.exception("Unhandled error in route handler")
            return text_response(500, "Internal Server Error")
