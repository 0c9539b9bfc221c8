import winreg
from typing import Optional, Any, Type
import logging

logger = logging.getLogger(__name__)

class RegistryKeyHandle:
    """Context manager for winreg key handles.

    Ensures that OpenKey is closed via CloseKey on exit, even if errors occur
    inside the with-block. OSErrors raised while opening propagate unchanged so
    callers can read their winerror code.

    Attributes:
        _root_key (Any): The hive handle (a predefined HKEY integer or a connected remote handle).
        _subkey (str): The subkey path under the root.
        _access (int): Desired access rights.
        _access_32bit_view (bool): Whether to access the 32-bit registry view on 64-bit Windows.
        _key_handle (Optional[winreg.HKEYType]): The open key handle.
    """
    def __init__(self, root_key: Any, subkey: str, access: int, access_32bit_view: bool = False):
        self._root_key = root_key
        self._subkey = subkey
        self._access = access
        self._access_32bit_view = access_32bit_view
        self._key_handle: Optional[Any] = None

    def __enter__(self) -> Any:
        """Open the registry key and return its handle.

        Raises:
            OSError: If the key cannot be opened.
        """
        effective_access = self._access
        if self._access_32bit_view:
            effective_access |= winreg.KEY_WOW64_32KEY

        self._key_handle = winreg.OpenKey(
            self._root_key,
            self._subkey,
            0, # Reserved, must be zero
            effective_access
        )
        return self._key_handle

    def __exit__(self,
                 exc_type: Optional[Type[BaseException]],
                 exc_val: Optional[BaseException],
                 exc_tb: Optional[Any]) -> None:
        """Close the registry key handle on context exit."""
        if self._key_handle:
            try:
                winreg.CloseKey(self._key_handle)
            except OSError as e:
                logger.debug(
                    "Failed to close registry key handle for '%s': WinError %s: %s",
                    self._subkey,
                    getattr(e, "winerror", None),
                    e.strerror or e,
                )
            finally:
                self._key_handle = None # Ensure it's not closed again
