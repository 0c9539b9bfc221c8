"""
An in-process registry provider backed by dictionaries.

MemoryProvider reproduces the status conventions of the WMI StdRegProv
class so that code written against it behaves the same against a real
back end:

* a missing key is status 2, a missing value on an existing key status 1;
* reading a value with the wrong type is STATUS_TYPE_MISMATCH;
* enumerating a key without subkeys (or values) succeeds with a null payload
  instead of an empty array;
* deleting a key that still has subkeys is denied.

Names are matched case-insensitively and keep the case they were created with.
"""

import copy
import threading
from typing import Any, Dict, Optional, Tuple
import logging

from .registry_hive import RegistryHive
from .registry_provider import (
    RegistryProvider,
    ProviderResult,
    STATUS_SUCCESS,
    STATUS_VALUE_NOT_FOUND,
    STATUS_FILE_NOT_FOUND,
    STATUS_ACCESS_DENIED,
    STATUS_INVALID_PARAMETER,
    STATUS_TYPE_MISMATCH,
)

logger = logging.getLogger(__name__)


class _Node:
    """One key of the in-memory tree."""
    __slots__ = ("name", "sub_keys", "values")

    def __init__(self, name: str):
        self.name = name
        self.sub_keys: Dict[str, "_Node"] = {}
        # lower-cased name -> (name, type code, raw data)
        self.values: Dict[str, Tuple[str, int, Any]] = {}


def _segments(path: str):
    return [segment for segment in path.split("\\") if segment]


class MemoryProvider(RegistryProvider):
    """Dictionary-backed RegistryProvider. Safe to share between threads."""

    def __init__(self):
        self._lock = threading.RLock()
        self._hives = {hive: _Node("") for hive in RegistryHive}
        # (hive, lower-cased path) -> access rights that are refused
        self._denied: Dict[Tuple[int, str], int] = {}

    def deny_access(self, hive: int, path: str, rights: int) -> None:
        """Make check_access refuse the given rights on a key."""
        logger.debug("Denying access %#x on hive %#x key '%s'", int(rights), int(hive), path)
        with self._lock:
            self._denied[(int(hive), "\\".join(_segments(path)).lower())] = int(rights)

    def _find(self, hive: int, path: str) -> Optional[_Node]:
        try:
            node = self._hives[RegistryHive(hive)]
        except ValueError:
            return None
        for segment in _segments(path):
            node = node.sub_keys.get(segment.lower())
            if node is None:
                return None
        return node

    def create_key(self, hive: int, path: str) -> ProviderResult:
        with self._lock:
            node = self._find(hive, "")
            if node is None:
                return ProviderResult(STATUS_INVALID_PARAMETER)
            for segment in _segments(path):
                node = node.sub_keys.setdefault(segment.lower(), _Node(segment))
            return ProviderResult(STATUS_SUCCESS)

    def delete_key(self, hive: int, path: str) -> ProviderResult:
        segments = _segments(path)
        if not segments:
            return ProviderResult(STATUS_INVALID_PARAMETER)
        with self._lock:
            parent = self._find(hive, "\\".join(segments[:-1]))
            node = parent.sub_keys.get(segments[-1].lower()) if parent is not None else None
            if node is None:
                return ProviderResult(STATUS_FILE_NOT_FOUND)
            if node.sub_keys:
                return ProviderResult(STATUS_ACCESS_DENIED)
            del parent.sub_keys[segments[-1].lower()]
            return ProviderResult(STATUS_SUCCESS)

    def enum_key(self, hive: int, path: str) -> ProviderResult:
        with self._lock:
            node = self._find(hive, path)
            if node is None:
                return ProviderResult(STATUS_FILE_NOT_FOUND)
            if not node.sub_keys:
                return ProviderResult(STATUS_SUCCESS, None)
            return ProviderResult(STATUS_SUCCESS, [child.name for child in node.sub_keys.values()])

    def enum_values(self, hive: int, path: str) -> ProviderResult:
        with self._lock:
            node = self._find(hive, path)
            if node is None:
                return ProviderResult(STATUS_FILE_NOT_FOUND, (None, None))
            if not node.values:
                return ProviderResult(STATUS_SUCCESS, (None, None))
            names = [name for name, _, _ in node.values.values()]
            types = [value_type for _, value_type, _ in node.values.values()]
            return ProviderResult(STATUS_SUCCESS, (names, types))

    def get_value(self, hive: int, path: str, name: str, value_type: int) -> ProviderResult:
        with self._lock:
            node = self._find(hive, path)
            if node is None:
                return ProviderResult(STATUS_FILE_NOT_FOUND)
            entry = node.values.get(name.lower())
            if entry is None:
                return ProviderResult(STATUS_VALUE_NOT_FOUND)
            if entry[1] != int(value_type):
                return ProviderResult(STATUS_TYPE_MISMATCH)
            return ProviderResult(STATUS_SUCCESS, copy.copy(entry[2]))

    def set_value(self, hive: int, path: str, name: str, value_type: int, raw: Any) -> ProviderResult:
        with self._lock:
            node = self._find(hive, path)
            if node is None:
                return ProviderResult(STATUS_FILE_NOT_FOUND)
            existing = node.values.get(name.lower())
            stored_name = existing[0] if existing is not None else name
            node.values[name.lower()] = (stored_name, int(value_type), copy.copy(raw))
            return ProviderResult(STATUS_SUCCESS)

    def delete_value(self, hive: int, path: str, name: str) -> ProviderResult:
        with self._lock:
            node = self._find(hive, path)
            if node is None or name.lower() not in node.values:
                return ProviderResult(STATUS_FILE_NOT_FOUND)
            del node.values[name.lower()]
            return ProviderResult(STATUS_SUCCESS)

    def check_access(self, hive: int, path: str, required: int) -> ProviderResult:
        with self._lock:
            if self._find(hive, path) is None:
                return ProviderResult(STATUS_FILE_NOT_FOUND, False)
            denied = self._denied.get((int(hive), "\\".join(_segments(path)).lower()), 0)
            if denied & int(required):
                return ProviderResult(STATUS_ACCESS_DENIED, False)
            return ProviderResult(STATUS_SUCCESS, True)
