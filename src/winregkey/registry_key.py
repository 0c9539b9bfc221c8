"""Registry keys addressed by hive and path.

A RegistryKey is a lightweight, immutable handle: it names a location in a
hive and issues provider calls on demand. Creating one never touches the
provider, and navigating (sub_key, parent) returns new instances. Whether
the key exists on the provider side is only checked when asked (see
sub_key(verify=True) and exists()).

Each key owns a ValueCache of the values read or written through it. The
cache is never shared: a write through one RegistryKey instance is not seen
by another instance addressing the same path.
"""

from typing import Any, Iterator, Optional
import logging

from .registry_cache import ValueCache
from .registry_errors import RegistryKeyNotFoundError, RegistryValueNotFoundError, _raise_for_status
from .registry_hive import RegistryHive, get_hive_name, normalize_root_key
from .registry_iterators import SubKeyIterator, ValueIterator, walk
from .registry_provider import NOT_FOUND_STATUSES, RegistryProvider, STATUS_ACCESS_DENIED, STATUS_TYPE_MISMATCH
from .registry_translation import ValueType, infer_value_type, normalize_value_type, decode_value, \
    round_trip_value, get_value_type_name

logger = logging.getLogger(__name__)

PATH_SEPARATOR = "\\"


def _normalize_path(path: str) -> str:
    """Collapse a key path to its non-empty backslash-separated segments."""
    return PATH_SEPARATOR.join(segment for segment in path.split(PATH_SEPARATOR) if segment)


def _join_registry_paths(prefix: str, path: str) -> str:
    """Join a key path and a relative subpath into a single normalized key path.

    Args:
        prefix (str): The base registry path (may be empty).
        path (str): The sub-path to append (may be empty).

    Returns:
        str: The combined registry path, using backslashes.
    """
    return _normalize_path(f"{prefix}{PATH_SEPARATOR}{path}")


class RegistryKey:
    """
    A single key in a registry hive.

    Attributes:
        provider (RegistryProvider): The provider all round trips go through.
        hive (RegistryHive): The hive the key lives in.
        qualified_name (str): The backslash-separated path within the hive ("" for the hive root).
    """
    def __init__(
        self,
        provider: RegistryProvider,
        hive: int | str,
        path: str = "",
        cache_values: bool = True,
    ):
        """Initializes a RegistryKey instance.

        Args:
            provider (RegistryProvider): The provider used for all operations on the key.
            hive (int | str): The hive identifier or name (e.g. RegistryHive.LOCAL_MACHINE, "HKLM").
            path (str): Path of the key within the hive. Empty segments are dropped.
            cache_values (bool): If False, values are never memoized and every read is a round trip.
        """
        self._provider = provider
        self._hive: RegistryHive = normalize_root_key(hive)
        self._path = _normalize_path(path)
        self._cache_values = cache_values
        self._cache = ValueCache()

    @property
    def provider(self) -> RegistryProvider:
        return self._provider

    @property
    def hive(self) -> RegistryHive:
        return self._hive

    @property
    def qualified_name(self) -> str:
        """The fully-qualified path of the key ("" for the hive root)."""
        return self._path

    @property
    def name(self) -> str:
        """The local (last) path component of the key ("" for the hive root)."""
        return self._path.rpartition(PATH_SEPARATOR)[2]

    @property
    def is_root(self) -> bool:
        return not self._path

    @property
    def cache(self) -> ValueCache:
        return self._cache

    @property
    def cache_values(self) -> bool:
        return self._cache_values

    def _derive(self, path: str) -> "RegistryKey":
        return RegistryKey(self._provider, self._hive, path, cache_values=self._cache_values)

    # --- Navigation ---

    def sub_key(self, name: str, verify: bool = False) -> "RegistryKey":
        """
        Get the subkey with the given name or relative path.

        Args:
            name (str): Name or backslash-separated relative path of the subkey.
            verify (bool): If True, check with the provider that the key exists (one round trip).

        Returns:
            RegistryKey: The subkey.

        Raises:
            RegistryKeyNotFoundError: If verify is True and the key does not exist.
            RegistryOperationFailedError: If verify is True and the provider check fails otherwise.
        """
        key = self._derive(_join_registry_paths(self._path, name))
        if verify:
            key._verify_exists()
        return key

    def parent(self) -> Optional["RegistryKey"]:
        """Get the parent key, or None for the hive root."""
        if self.is_root:
            return None
        return self._derive(self._path.rpartition(PATH_SEPARATOR)[0])

    def _probe_key(self) -> int:
        """Enumerate the key's subkeys and return the status, raising for unexpected failures."""
        result = self._provider.enum_key(self._hive, self._path)
        if result.ok or result.status in NOT_FOUND_STATUSES:
            return result.status
        _raise_for_status(result.status, "open key", self._path)

    def _verify_exists(self) -> None:
        status = self._probe_key()
        if status in NOT_FOUND_STATUSES:
            _raise_for_status(status, "open key", self._path, error_type=RegistryKeyNotFoundError)

    def exists(self) -> bool:
        """Check with the provider whether the key exists (one round trip)."""
        return self._probe_key() not in NOT_FOUND_STATUSES

    # --- Key management ---

    def create_sub_key(self, name: str) -> "RegistryKey":
        """
        Create a subkey, including any missing intermediate keys.

        Args:
            name (str): Name or relative path of the subkey.

        Returns:
            RegistryKey: The created key.

        Raises:
            ValueError: If name is empty.
            RegistryOperationFailedError: If the provider fails to create the key.
        """
        path = _join_registry_paths(self._path, name)
        if path == self._path:
            raise ValueError("Subkey name must not be empty.")

        result = self._provider.create_key(self._hive, path)
        if not result.ok:
            _raise_for_status(result.status, "create key", path)
        logger.debug("Created key '%s' in %s", path, get_hive_name(self._hive))
        return self._derive(path)

    def delete(self) -> None:
        """
        Delete this key.

        Caches of other RegistryKey instances addressing this key or its
        descendants are left untouched.

        Raises:
            ValueError: If the key is the hive root.
            RegistryOperationFailedError: If the provider fails to delete the key.
        """
        if self.is_root:
            raise ValueError("Cannot delete the root registry key.")

        result = self._provider.delete_key(self._hive, self._path)
        if not result.ok:
            _raise_for_status(result.status, "delete key", self._path)
        logger.debug("Deleted key '%s' in %s", self._path, get_hive_name(self._hive))

    def delete_sub_key(self, name: str) -> None:
        """Delete the subkey with the given name or relative path."""
        key = self.sub_key(name)
        if key.qualified_name == self._path:
            raise ValueError("Subkey name must not be empty.")
        key.delete()

    def check_access(self, required: int) -> bool:
        """
        Check whether the caller holds the required access rights on this key.

        Args:
            required (int): A combination of RegistryAccess flags.

        Raises:
            RegistryKeyNotFoundError: If the key does not exist.
            RegistryOperationFailedError: If the provider check fails otherwise.
        """
        result = self._provider.check_access(self._hive, self._path, int(required))
        if result.ok:
            return bool(result.data)
        if result.status == STATUS_ACCESS_DENIED:
            return False
        if result.status in NOT_FOUND_STATUSES:
            _raise_for_status(result.status, "check access", self._path, error_type=RegistryKeyNotFoundError)
        _raise_for_status(result.status, "check access", self._path)

    # --- Values ---

    def _probe_value(self, name: str) -> bool:
        """Attempt a string read of the value and classify the status."""
        result = self._provider.get_value(self._hive, self._path, name, ValueType.STRING)
        if result.ok:
            if self._cache_values:
                self._cache.store_value(name, ValueType.STRING, decode_value(result.data, ValueType.STRING))
            return True
        if result.status == STATUS_TYPE_MISMATCH:
            # The value is there, it just is not a string
            return True
        if result.status in NOT_FOUND_STATUSES:
            return False
        _raise_for_status(result.status, "read value", self._path, name)

    def value_exists(self, name: str) -> bool:
        """
        Check whether a named value exists (one round trip).

        Raises:
            RegistryOperationFailedError: If the provider fails with a status other than "not found".
        """
        return self._probe_value(name)

    def get_value_type(self, name: str) -> ValueType:
        """
        Get the type of a named value.

        If the type is not cached this enumerates every value of the key, which is
        expensive for keys holding many values. The types of all values visited on
        the way are cached.

        Raises:
            RegistryValueNotFoundError: If the key has no value with that name.
            RegistryInvalidTypeError: If the value has an unsupported type.
        """
        if self._cache_values and self._cache.has_type(name):
            return self._cache.get_value_type(name)

        wanted = name.lower()
        iterator = self.value_iterator()
        iterator.rewind()
        while iterator.valid():
            value_type = iterator.current_type(strict=False)
            if iterator.key().lower() == wanted:
                if value_type is None:
                    # Raises RegistryInvalidTypeError for the unsupported code
                    value_type = iterator.current_type()
                if self._cache_values:
                    self._cache.store_type(name, value_type)
                return value_type
            iterator.advance()

        raise RegistryValueNotFoundError(f"Registry value '{name}' not found in key '{self._path}'.")

    def get_value(self, name: str, value_type: Optional[int | str] = None) -> Any:
        """
        Get the data of a named value.

        Args:
            name (str): Name of the value ("" for the default value).
            value_type (Optional[int | str]): The value type. If None, it is looked up with
                                              get_value_type, which may enumerate all values.

        Returns:
            Any: The decoded data (see registry_translation for the per-type forms).

        Raises:
            RegistryValueNotFoundError: If value_type is None and the value does not exist.
            RegistryInvalidTypeError: If value_type is not a supported value type.
            RegistryOperationFailedError: If the provider read fails.
        """
        if value_type is None:
            value_type = self.get_value_type(name)
        else:
            value_type = normalize_value_type(value_type)

        if self._cache_values and self._cache.has_value(name) and self._cache.get_value_type(name) == value_type:
            logger.debug("Cache hit for value '%s' in key '%s'", name, self._path)
            data = self._cache.get_value_data(name)
            return list(data) if isinstance(data, list) else data

        result = self._provider.get_value(self._hive, self._path, name, value_type)
        if not result.ok:
            _raise_for_status(result.status, "read value", self._path, name)

        data = decode_value(result.data, value_type)
        logger.debug("Read %s value '%s' from key '%s'", get_value_type_name(value_type), name, self._path)
        if self._cache_values:
            self._cache.store_value(name, value_type, data)
            return list(data) if isinstance(data, list) else data
        return data

    def set_value(self, name: str, value: Any, value_type: Optional[int | str] = None) -> None:
        """
        Create or update a named value.

        Args:
            name (str): Name of the value ("" for the default value).
            value (Any): The data to write.
            value_type (Optional[int | str]): The value type. If None it is inferred: lists and
                                              tuples become MULTI_STRING, bytes BINARY, integers
                                              and numeric strings DWORD, anything else STRING.

        Raises:
            RegistryInvalidTypeError: If value_type is not a supported value type.
            TypeError: If value is incompatible with the value type.
            ValueError: If value is out of range for the value type.
            RegistryOperationFailedError: If the provider write fails.
        """
        if value_type is None:
            value_type = infer_value_type(value)
        else:
            value_type = normalize_value_type(value_type)

        raw, data = round_trip_value(value, value_type)

        result = self._provider.set_value(self._hive, self._path, name, value_type, raw)
        if not result.ok:
            _raise_for_status(result.status, "write value", self._path, name)

        logger.debug("Wrote %s value '%s' to key '%s'", get_value_type_name(value_type), name, self._path)
        if self._cache_values:
            self._cache.store_value(name, value_type, data)

    def delete_value(self, name: str) -> None:
        """
        Delete a named value.

        Raises:
            RegistryValueNotFoundError: If the value does not exist.
            RegistryOperationFailedError: If the provider fails to delete an existing value.
        """
        result = self._provider.delete_value(self._hive, self._path, name)
        if not result.ok:
            # The delete status alone cannot tell a missing value from other failures
            if not self._probe_value(name):
                self._cache.remove_value(name)
                raise RegistryValueNotFoundError(
                    f"Registry value '{name}' not found in key '{self._path}'.", status=result.status
                )
            _raise_for_status(result.status, "delete value", self._path, name)

        self._cache.remove_value(name)
        logger.debug("Deleted value '%s' from key '%s'", name, self._path)

    def clear_cache(self) -> None:
        """Forget all cached values of this key."""
        self._cache.clear()

    # --- Iteration ---

    def sub_key_iterator(self) -> SubKeyIterator:
        """Get an iterator over the subkeys of this key."""
        return SubKeyIterator(self)

    def value_iterator(self) -> ValueIterator:
        """Get an iterator over the named values of this key."""
        return ValueIterator(self)

    def walk(self, max_depth: Optional[int] = None) -> Iterator["RegistryKey"]:
        """Yield every descendant key depth-first (one enumeration per visited key)."""
        return walk(self, max_depth=max_depth)

    def __eq__(self, other):
        if not isinstance(other, RegistryKey):
            return NotImplemented
        # Registry names are case-insensitive
        return self._hive == other.hive and self._path.lower() == other.qualified_name.lower()

    def __hash__(self):
        return hash((self._hive, self._path.lower()))

    def __str__(self):
        hive_name = get_hive_name(self._hive)
        return f"{hive_name}{PATH_SEPARATOR}{self._path}" if self._path else hive_name

    def __repr__(self):
        return f"RegistryKey(hive={self._hive.name}, path={self._path!r})"
