"""A registry provider backed by the Windows winreg API.

WinregProvider talks to the local registry, or to a remote machine's
registry through winreg.ConnectRegistry (which only exposes HKEY_LOCAL_MACHINE
and HKEY_USERS and relies on the caller's existing network credentials).
winreg errors are translated into the provider status codes instead of
being raised, so RegistryKey sees the same protocol as with any other
provider. Windows only.
"""

import winreg
from typing import Any, Dict, Optional

import logging

from .registry_context_managers import RegistryKeyHandle
from .registry_provider import (
    RegistryProvider,
    ProviderResult,
    STATUS_SUCCESS,
    STATUS_INVALID_PARAMETER,
    STATUS_TYPE_MISMATCH,
)
from .registry_translation import ValueType

logger = logging.getLogger(__name__)

ERROR_NO_MORE_ITEMS = 259

_LOCAL_HOSTS = {None, "", ".", "localhost"}


def _status_from_oserror(e: OSError) -> int:
    """Return the Windows error code carried by an OSError raised from winreg."""
    status = getattr(e, "winerror", None) or e.errno
    if not status:
        return STATUS_INVALID_PARAMETER
    return status


def _to_raw(data: Any, value_type: int) -> Any:
    """Convert winreg data to the provider's raw transport form."""
    if value_type == ValueType.BINARY and isinstance(data, (bytes, bytearray)):
        return list(data)
    if value_type == ValueType.QWORD and isinstance(data, int):
        return str(data)
    if value_type == ValueType.EXPANDED_STRING and isinstance(data, str):
        return winreg.ExpandEnvironmentStrings(data)
    return data


def _from_raw(raw: Any, value_type: int) -> Any:
    """Convert raw transport data to what winreg.SetValueEx expects."""
    if value_type == ValueType.BINARY:
        return bytes(raw or [])
    if value_type in (ValueType.DWORD, ValueType.QWORD):
        return int(raw)
    if value_type == ValueType.MULTI_STRING:
        return list(raw or [])
    return raw


class WinregProvider(RegistryProvider):
    def __init__(self, host: Optional[str] = None, access_32bit_view: bool = False):
        """Initializes a WinregProvider.

        Args:
            host (Optional[str]): Computer whose registry to use. None, "" or "." for the local machine.
            access_32bit_view (bool): If True, access the 32-bit registry view on 64-bit Windows.
        """
        self._host = None if host in _LOCAL_HOSTS else host
        self._access_32bit_view = access_32bit_view
        self._remote_roots: Dict[int, Any] = {}

    @property
    def host(self) -> Optional[str]:
        return self._host

    def _root(self, hive: int) -> Any:
        """Return the root handle for a hive, connecting to the remote registry on first use."""
        if self._host is None:
            return int(hive)
        if hive not in self._remote_roots:
            computer = self._host if self._host.startswith("\\\\") else f"\\\\{self._host}"
            logger.debug("Connecting to remote registry %s hive %#x", computer, int(hive))
            self._remote_roots[hive] = winreg.ConnectRegistry(computer, int(hive))
        return self._remote_roots[hive]

    def _open(self, hive: int, path: str, access: int) -> RegistryKeyHandle:
        return RegistryKeyHandle(self._root(hive), path, access, access_32bit_view=self._access_32bit_view)

    def close(self) -> None:
        """Close any remote registry connections."""
        for handle in self._remote_roots.values():
            winreg.CloseKey(handle)
        self._remote_roots.clear()

    def create_key(self, hive: int, path: str) -> ProviderResult:
        effective_access = winreg.KEY_WRITE
        if self._access_32bit_view:
            effective_access |= winreg.KEY_WOW64_32KEY
        try:
            # CreateKeyEx opens the key if it exists and creates intermediate keys as needed
            handle = winreg.CreateKeyEx(self._root(hive), path, 0, effective_access)
            winreg.CloseKey(handle)
        except OSError as e:
            return ProviderResult(_status_from_oserror(e))
        return ProviderResult(STATUS_SUCCESS)

    def delete_key(self, hive: int, path: str) -> ProviderResult:
        parent_path, _, name = path.rpartition("\\")
        if not name:
            return ProviderResult(STATUS_INVALID_PARAMETER)
        try:
            # The parent handle's view decides which view the key is deleted from
            with self._open(hive, parent_path, winreg.KEY_CREATE_SUB_KEY) as parent:
                winreg.DeleteKey(parent, name)
        except OSError as e:
            return ProviderResult(_status_from_oserror(e))
        return ProviderResult(STATUS_SUCCESS)

    def enum_key(self, hive: int, path: str) -> ProviderResult:
        names = []
        try:
            with self._open(hive, path, winreg.KEY_ENUMERATE_SUB_KEYS) as key:
                i = 0
                while True:
                    try:
                        names.append(winreg.EnumKey(key, i))
                        i += 1
                    except OSError as e:
                        if getattr(e, "winerror", None) == ERROR_NO_MORE_ITEMS:
                            break
                        raise
        except OSError as e:
            return ProviderResult(_status_from_oserror(e))
        return ProviderResult(STATUS_SUCCESS, names)

    def enum_values(self, hive: int, path: str) -> ProviderResult:
        names = []
        types = []
        try:
            with self._open(hive, path, winreg.KEY_QUERY_VALUE) as key:
                i = 0
                while True:
                    try:
                        name, _, value_type = winreg.EnumValue(key, i)
                        names.append(name)
                        types.append(value_type)
                        i += 1
                    except OSError as e:
                        if getattr(e, "winerror", None) == ERROR_NO_MORE_ITEMS:
                            break
                        raise
        except OSError as e:
            return ProviderResult(_status_from_oserror(e), (None, None))
        return ProviderResult(STATUS_SUCCESS, (names, types))

    def get_value(self, hive: int, path: str, name: str, value_type: int) -> ProviderResult:
        try:
            with self._open(hive, path, winreg.KEY_QUERY_VALUE) as key:
                data, actual_type = winreg.QueryValueEx(key, name)
        except OSError as e:
            return ProviderResult(_status_from_oserror(e))
        if actual_type != int(value_type):
            logger.debug("Value '%s' in '%s' has type %s, not %s", name, path, actual_type, int(value_type))
            return ProviderResult(STATUS_TYPE_MISMATCH)
        return ProviderResult(STATUS_SUCCESS, _to_raw(data, actual_type))

    def set_value(self, hive: int, path: str, name: str, value_type: int, raw: Any) -> ProviderResult:
        try:
            with self._open(hive, path, winreg.KEY_SET_VALUE) as key:
                winreg.SetValueEx(key, name, 0, int(value_type), _from_raw(raw, value_type))
        except OSError as e:
            return ProviderResult(_status_from_oserror(e))
        return ProviderResult(STATUS_SUCCESS)

    def delete_value(self, hive: int, path: str, name: str) -> ProviderResult:
        try:
            with self._open(hive, path, winreg.KEY_SET_VALUE) as key:
                winreg.DeleteValue(key, name)
        except OSError as e:
            return ProviderResult(_status_from_oserror(e))
        return ProviderResult(STATUS_SUCCESS)

    def check_access(self, hive: int, path: str, required: int) -> ProviderResult:
        # Opening the key with the required rights is the access check
        try:
            with self._open(hive, path, int(required)):
                pass
        except OSError as e:
            status = _status_from_oserror(e)
            return ProviderResult(status, False)
        return ProviderResult(STATUS_SUCCESS, True)
