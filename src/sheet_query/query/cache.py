from enum import Enum
from typing import Callable, Generic, TypeVar

T = TypeVar("T")


class CacheState(str, Enum):
    EMPTY = "empty"
    LOADED = "loaded"


class CachedValue(Generic[T]):
    """One memoized field: EMPTY until first ``get``, then LOADED until ``clear``.

    While EMPTY, ``value`` returns a fresh copy of the empty default so callers
    can always treat it as a sequence.
    """

    def __init__(self, empty: Callable[[], T]):
        self._empty = empty
        self._value: T = empty()
        self.state = CacheState.EMPTY

    @property
    def loaded(self) -> bool:
        return self.state is CacheState.LOADED

    @property
    def value(self) -> T:
        return self._value

    def get(self, loader: Callable[[], T]) -> T:
        if self.state is CacheState.EMPTY:
            self._value = loader()
            self.state = CacheState.LOADED
        return self._value

    def clear(self) -> None:
        self._value = self._empty()
        self.state = CacheState.EMPTY
