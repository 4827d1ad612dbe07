"""Identity-keyed containers used by the memoizing caches."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, MutableMapping
from typing import Generic, TypeVar

K = TypeVar("K")
V = TypeVar("V")


class IdentityDict(MutableMapping[K, V], Generic[K, V]):
    """Mapping that compares keys by ``id()`` instead of ``__eq__``.

    Keys are kept referenced by the mapping, so an id can't be recycled for
    a different object while its entry exists.
    """

    def __init__(self) -> None:
        self._entries: dict[int, tuple[K, V]] = {}

    def __getitem__(self, key: K) -> V:
        try:
            return self._entries[id(key)][1]
        except KeyError:
            raise KeyError(key) from None

    def __setitem__(self, key: K, value: V) -> None:
        self._entries[id(key)] = (key, value)

    def __delitem__(self, key: K) -> None:
        try:
            del self._entries[id(key)]
        except KeyError:
            raise KeyError(key) from None

    def __contains__(self, key: object) -> bool:
        return id(key) in self._entries

    def __iter__(self) -> Iterator[K]:
        return (key for key, _ in self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)


def unique_by_identity(items: Iterable[K]) -> list[K]:
    """Drop repeated objects (by identity), keeping first-seen order."""
    seen: set[int] = set()
    result: list[K] = []
    for item in items:
        if id(item) not in seen:
            seen.add(id(item))
            result.append(item)
    return result
