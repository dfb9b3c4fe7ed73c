"""In-memory key-value store, for tests and throwaway sessions."""

import copy
from typing import Any, Optional

from commtrack.database.base import Database


class InMemoryDatabase(Database):
    """Dictionary-backed implementation of the Database interface.

    Values are deep-copied on the way in and out so callers never share
    mutable state with the store, the same as with a real backend.
    """

    def __init__(self):
        self._data: dict[str, Any] = {}

    def connect(self) -> None:
        pass

    def disconnect(self) -> None:
        pass

    def initialize_schema(self) -> None:
        pass

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def list_keys(self) -> list[str]:
        return sorted(self._data)
