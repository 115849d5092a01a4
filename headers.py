"""Case-insensitive HTTP header mapping."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, MutableMapping


class HeaderMap(MutableMapping[str, str]):
    """Header names compare case-insensitively; the last value set wins.

    Iteration yields the spelling used by the most recent assignment, so
    response headers keep ``Content-Type`` style names for serialization while
    parsed request headers (stored lower-cased) iterate lower-cased.
    """

    __slots__ = ("_items",)

    def __init__(
        self,
        initial: Mapping[str, str] | Iterable[tuple[str, str]] | None = None,
    ) -> None:
        self._items: dict[str, tuple[str, str]] = {}
        if initial is not None:
            self.update(initial)

    def __getitem__(self, name: str) -> str:
        return self._items[name.lower()][1]

    def __setitem__(self, name: str, value: str) -> None:
        self._items[name.lower()] = (name, value)

    def __delitem__(self, name: str) -> None:
        del self._items[name.lower()]

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return name.lower() in self._items

    def __iter__(self) -> Iterator[str]:
        for name, _value in self._items.values():
            yield name

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, HeaderMap):
            return {key: value for key, (_, value) in self._items.items()} == {
                key: value for key, (_, value) in other._items.items()
            }
        if isinstance(other, Mapping):
            return self == HeaderMap(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"HeaderMap({dict(self.items())!r})"
