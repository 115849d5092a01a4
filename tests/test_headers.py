"""Unit tests for the case-insensitive header map."""

from headers import HeaderMap


def test_lookup_ignores_case() -> None:
    headers = HeaderMap({"Content-Type": "text/plain"})

    assert headers["content-type"] == "text/plain"
    assert headers["CONTENT-TYPE"] == "text/plain"
    assert "Content-type" in headers
    assert headers.get("x-missing") is None


def test_last_value_wins_on_duplicate_names() -> None:
    headers = HeaderMap()
    headers["X-Trace"] = "first"
    headers["x-trace"] = "second"

    assert len(headers) == 1
    assert headers["X-TRACE"] == "second"
    assert list(headers.items()) == [("x-trace", "second")]


def test_iteration_preserves_insertion_order_and_spelling() -> None:
    headers = HeaderMap([("Content-Type", "text/plain"), ("Allow", "GET")])

    assert list(headers) == ["Content-Type", "Allow"]


def test_delete_and_equality_are_case_insensitive() -> None:
    headers = HeaderMap({"Allow": "GET", "Server": "x"})
    del headers["server"]

    assert headers == {"allow": "GET"}
    assert headers == HeaderMap({"ALLOW": "GET"})
    assert headers != HeaderMap({"allow": "POST"})
