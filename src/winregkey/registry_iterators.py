"""
Iterators over the subkeys and named values of a registry key.

Both iterators follow the provider's two-phase protocol: rewind() issues a
single enumeration round trip and captures the names, then each step works
from the captured arrays. A failed or malformed enumeration is treated as
an empty key rather than an error, because the provider reports "no
subkeys" and "could not enumerate" in ways that cannot be told apart, and
a tree walk must not abort on one unreadable key.

An iterator instance holds a single cursor. Starting a new ``for`` loop
over the same instance rewinds it (and repeats the round trip).
"""

from typing import TYPE_CHECKING, Any, Iterator, List, Optional
import logging

from .registry_errors import RegistryInvalidTypeError
from .registry_translation import ValueType, normalize_value_type
from .registry_types import RegistryValue

if TYPE_CHECKING:
    from .registry_key import RegistryKey

logger = logging.getLogger(__name__)


def _is_array(data: Any) -> bool:
    return isinstance(data, (list, tuple))


class SubKeyIterator:
    """
    Iterates over the subkeys of a registry key.

    Supports the manual protocol (rewind, valid, key, current, advance) and
    Python iteration, which yields RegistryKey objects.
    """
    def __init__(self, registry_key: "RegistryKey"):
        self._registry_key = registry_key
        self._pointer = 0
        self._count = 0
        self._sub_key_names: List[str] = []

    @property
    def registry_key(self) -> "RegistryKey":
        """The key whose subkeys are iterated."""
        return self._registry_key

    def rewind(self) -> None:
        """Enumerate the subkeys (one round trip) and move to the first one."""
        self._pointer = 0
        self._count = 0
        self._sub_key_names = []

        key = self._registry_key
        result = key.provider.enum_key(key.hive, key.qualified_name)

        if result.ok and _is_array(result.data):
            self._sub_key_names = [str(name) for name in result.data]
            self._count = len(self._sub_key_names)
        else:
            logger.debug(
                "Enumerating subkeys of '%s' returned status %s with %s payload; treating as empty",
                key.qualified_name, result.status, type(result.data).__name__
            )

    def valid(self) -> bool:
        """Return True if the iterator points at a subkey."""
        return self._pointer < self._count

    def key(self) -> str:
        """The name of the subkey at the current position."""
        return self._sub_key_names[self._pointer]

    def current(self) -> "RegistryKey":
        """The subkey at the current position."""
        return self._registry_key.sub_key(self.key())

    def advance(self) -> None:
        """Move to the next subkey."""
        self._pointer += 1

    def has_children(self) -> bool:
        """
        Return True if the current subkey has subkeys of its own.

        This is not free: it enumerates the current subkey (one round trip).
        """
        iterator = self.get_children()
        iterator.rewind()
        return iterator.valid()

    def get_children(self) -> "SubKeyIterator":
        """Get an iterator over the subkeys of the current subkey."""
        return SubKeyIterator(self.current())

    def __iter__(self) -> "SubKeyIterator":
        self.rewind()
        return self

    def __next__(self) -> "RegistryKey":
        if not self.valid():
            raise StopIteration
        sub_key = self.current()
        self.advance()
        return sub_key

    def __len__(self) -> int:
        """Number of subkeys found by the last rewind."""
        return self._count


class ValueIterator:
    """
    Iterates over the named values of a registry key.

    The enumeration returns names and type codes in one round trip; data is
    fetched per value through RegistryKey.get_value, so iterating also warms
    the key's value cache. Python iteration yields RegistryValue objects and
    skips values whose type is not supported.
    """
    def __init__(self, registry_key: "RegistryKey"):
        self._registry_key = registry_key
        self._pointer = 0
        self._count = 0
        self._value_names: List[str] = []
        self._value_types: List[Any] = []

    @property
    def registry_key(self) -> "RegistryKey":
        """The key whose values are iterated."""
        return self._registry_key

    def rewind(self) -> None:
        """Enumerate the values (one round trip) and move to the first one."""
        self._pointer = 0
        self._count = 0
        self._value_names = []
        self._value_types = []

        key = self._registry_key
        result = key.provider.enum_values(key.hive, key.qualified_name)

        names, types = result.data if _is_array(result.data) and len(result.data) == 2 else (None, None)
        if result.ok and _is_array(names) and _is_array(types):
            if len(names) != len(types):
                logger.warning(
                    "Value enumeration of '%s' returned %d names but %d types; treating as empty",
                    key.qualified_name, len(names), len(types)
                )
                return
            self._value_names = [str(name) for name in names]
            self._value_types = list(types)
            self._count = len(self._value_names)
        else:
            logger.debug(
                "Enumerating values of '%s' returned status %s; treating as empty",
                key.qualified_name, result.status
            )

    def valid(self) -> bool:
        """Return True if the iterator points at a value."""
        return self._pointer < self._count

    def key(self) -> str:
        """The name of the value at the current position."""
        return self._value_names[self._pointer]

    def current_type(self, strict: bool = True) -> Optional[ValueType]:
        """
        The type of the value at the current position.

        Known types are recorded in the owning key's cache.

        Args:
            strict (bool): If False, return None for an unsupported type code instead of raising.

        Raises:
            RegistryInvalidTypeError: If strict and the type code is not supported.
        """
        code = self._value_types[self._pointer]
        try:
            value_type = normalize_value_type(int(code))
        except (RegistryInvalidTypeError, TypeError, ValueError):
            if strict:
                raise RegistryInvalidTypeError(
                    f"Registry value '{self.key()}' has unsupported type code {code!r}."
                ) from None
            return None

        if self._registry_key.cache_values:
            self._registry_key.cache.store_type(self.key(), value_type)
        return value_type

    def current(self) -> Any:
        """The data of the value at the current position (fetched via get_value)."""
        return self._registry_key.get_value(self.key(), self.current_type())

    def advance(self) -> None:
        """Move to the next value."""
        self._pointer += 1

    def __iter__(self) -> "ValueIterator":
        self.rewind()
        return self

    def __next__(self) -> RegistryValue:
        while self.valid():
            value_type = self.current_type(strict=False)
            if value_type is None:
                logger.debug("Skipping value '%s' with unsupported type code %r",
                             self.key(), self._value_types[self._pointer])
                self.advance()
                continue
            value = RegistryValue(self.key(), self._registry_key.get_value(self.key(), value_type), value_type)
            self.advance()
            return value
        raise StopIteration

    def __len__(self) -> int:
        """Number of values found by the last rewind, including unsupported ones."""
        return self._count


def walk(registry_key: "RegistryKey", max_depth: Optional[int] = None) -> Iterator["RegistryKey"]:
    """
    Yield all descendants of a key, depth-first, parents before children.

    Args:
        registry_key (RegistryKey): The key to start from (not yielded itself).
        max_depth (Optional[int]): Maximum depth to descend; 1 yields only the direct subkeys.
    """
    if max_depth is not None and max_depth < 1:
        return
    child_depth = None if max_depth is None else max_depth - 1
    for sub_key in SubKeyIterator(registry_key):
        yield sub_key
        yield from walk(sub_key, child_depth)
