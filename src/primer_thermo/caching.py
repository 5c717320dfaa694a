from __future__ import annotations
from collections import OrderedDict
from typing import Any, Dict, Hashable, Optional, Protocol, Tuple, runtime_checkable

from primer_thermo.errors import InvalidConfigurationError

CacheKey = Tuple[Hashable, ...]

__all__ = ["CacheKey", "ResultCache", "DictCache", "LRUCache", "make_cache_key"]


@runtime_checkable
class ResultCache(Protocol):
    """
    Interface of a memoization store for calculator results.

    Keys always embed the identity of the parameter set that produced the
    value, so a cache never serves a result computed under another set.
    """
    def get(self, key: CacheKey) -> Optional[Any]: ...

    def put(self, key: CacheKey, value: Any) -> None: ...

    def clear(self) -> None: ...

    def __len__(self) -> int: ...


class DictCache:
    """Unbounded cache backed by a plain dict."""
    __slots__ = ("_data",)

    def __init__(self) -> None:
        self._data: Dict[CacheKey, Any] = {}

    def get(self, key: CacheKey) -> Optional[Any]:
        return self._data.get(key)

    def put(self, key: CacheKey, value: Any) -> None:
        self._data[key] = value

    def clear(self) -> None:
        self._data.clear()

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data


class LRUCache:
    """
    Bounded cache that evicts the least recently used entry.

    Parameters
    ----------
    maxsize : int
        Maximum number of entries kept. Must be positive.

    Raises
    ------
    InvalidConfigurationError
        If ``maxsize`` is not a positive integer.
    """
    __slots__ = ("_data", "_maxsize")

    def __init__(self, maxsize: int = 1024) -> None:
        if not isinstance(maxsize, int) or maxsize <= 0:
            raise InvalidConfigurationError(f"LRUCache maxsize must be a positive integer, got {maxsize!r}.")
        self._maxsize = maxsize
        self._data: OrderedDict[CacheKey, Any] = OrderedDict()

    @property
    def maxsize(self) -> int:
        return self._maxsize

    def get(self, key: CacheKey) -> Optional[Any]:
        if key not in self._data:
            return None
        self._data.move_to_end(key)
        return self._data[key]

    def put(self, key: CacheKey, value: Any) -> None:
        self._data[key] = value
        self._data.move_to_end(key)
        while len(self._data) > self._maxsize:
            self._data.popitem(last=False)

    def clear(self) -> None:
        self._data.clear()

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data


def make_cache_key(operation: str, parameter_identity: str, *parts: Hashable) -> CacheKey:
    """
    Build a composite cache key ``(operation, parts..., parameter identity)``.

    Parameters
    ----------
    operation : str
        Name of the cached operation, e.g. ``"tm"`` or ``"fold"``.
    parameter_identity : str
        ``"<name>@<version>"`` of the active parameter set.
    *parts : Hashable
        Sequences and conditions the result depends on.
    """
    return (operation, *parts, parameter_identity)
