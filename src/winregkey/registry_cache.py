"""In-memory cache of the named values read from a single registry key."""

from typing import Any, Dict, Optional
import logging

from .registry_translation import ValueType

logger = logging.getLogger(__name__)


def _fold(name: str) -> str:
    # Value names are case-insensitive: "Version" and "VERSION" are one entry
    return name.lower()


class ValueCache:
    """
    Maps value names to their type and decoded data.

    A type can be known without data: enumerating a key learns the type of
    every value but only fetches data on demand. Names are matched
    case-insensitively, as the registry matches them. The cache has no
    eviction policy and no locking; it belongs to exactly one RegistryKey.
    """
    def __init__(self):
        self._value_types: Dict[str, ValueType] = {}
        self._value_data: Dict[str, Any] = {}

    def has_value(self, name: str) -> bool:
        """Return True if the data of the named value is cached."""
        return _fold(name) in self._value_data

    def has_type(self, name: str) -> bool:
        """Return True if the type of the named value is cached."""
        return _fold(name) in self._value_types

    def get_value_type(self, name: str) -> Optional[ValueType]:
        return self._value_types.get(_fold(name))

    def get_value_data(self, name: str) -> Any:
        return self._value_data.get(_fold(name))

    def store_value(self, name: str, value_type: ValueType, data: Any) -> None:
        """Store a named value, overwriting any cached entry under any spelling of the name."""
        key = _fold(name)
        self._value_types[key] = value_type
        self._value_data[key] = data

    def store_type(self, name: str, value_type: ValueType) -> None:
        """Record the type of a named value. Cached data of a different type is dropped."""
        key = _fold(name)
        if self._value_types.get(key) != value_type:
            self._value_data.pop(key, None)
        self._value_types[key] = value_type

    def remove_value(self, name: str) -> None:
        """Purge a named value from the cache, if present."""
        key = _fold(name)
        self._value_types.pop(key, None)
        self._value_data.pop(key, None)

    def clear(self) -> None:
        """Clear the cache of all values."""
        self._value_types.clear()
        self._value_data.clear()

    def __contains__(self, name: str) -> bool:
        return self.has_value(name)

    def __len__(self) -> int:
        return len(self._value_data)

    def __repr__(self):
        return f"ValueCache({len(self._value_data)} values, {len(self._value_types)} types)"
