"""
The registry provider capability.

A provider performs the actual reads, writes and enumerations against a
registry store, for example the WMI StdRegProv class, the local winreg API
or an in-memory tree. Every operation returns a ProviderResult carrying the
provider's numeric status (0 for success) and, for reads, the raw out data.
Providers never raise for a failed registry operation; RegistryKey decides
what a status means.
"""

from abc import ABC, abstractmethod
from enum import IntFlag
from typing import Any, NamedTuple

# Status codes returned by providers
STATUS_SUCCESS = 0
STATUS_VALUE_NOT_FOUND = 1          # StdRegProv reports a missing value as 1
STATUS_FILE_NOT_FOUND = 2           # ERROR_FILE_NOT_FOUND (missing key, or missing value via winreg)
STATUS_ACCESS_DENIED = 5            # ERROR_ACCESS_DENIED
STATUS_INVALID_PARAMETER = 87       # ERROR_INVALID_PARAMETER
STATUS_TYPE_MISMATCH = 0x80041005   # WBEM_E_TYPE_MISMATCH, value exists with another type

NOT_FOUND_STATUSES = frozenset({STATUS_VALUE_NOT_FOUND, STATUS_FILE_NOT_FOUND})


class RegistryAccess(IntFlag):
    """Access rights that can be passed to check_access."""
    QUERY_VALUE = 0x0001
    SET_VALUE = 0x0002
    CREATE_SUB_KEY = 0x0004
    ENUMERATE_SUB_KEYS = 0x0008
    NOTIFY = 0x0010
    CREATE_LINK = 0x0020
    DELETE = 0x10000
    READ_CONTROL = 0x20000
    WRITE_DAC = 0x40000
    WRITE_OWNER = 0x80000


class ProviderResult(NamedTuple):
    """Outcome of one provider round trip."""
    status: int
    data: Any = None

    @property
    def ok(self) -> bool:
        return self.status == STATUS_SUCCESS


class RegistryProvider(ABC):
    """
    Closed interface of the operations a registry back end must offer.

    hive is the numeric hive identifier (see RegistryHive), path the
    backslash-separated key path ("" for the hive root) and value_type the
    numeric value type code (see ValueType). Raw data follows the transport
    forms documented in registry_translation.
    """

    @abstractmethod
    def create_key(self, hive: int, path: str) -> ProviderResult:
        """Create a key, including any missing intermediate keys."""

    @abstractmethod
    def delete_key(self, hive: int, path: str) -> ProviderResult:
        """Delete a key."""

    @abstractmethod
    def enum_key(self, hive: int, path: str) -> ProviderResult:
        """Enumerate subkey names. data is an array of names, or None when there are none."""

    @abstractmethod
    def enum_values(self, hive: int, path: str) -> ProviderResult:
        """Enumerate named values. data is a (names, type codes) pair of parallel arrays."""

    @abstractmethod
    def get_value(self, hive: int, path: str, name: str, value_type: int) -> ProviderResult:
        """Read a named value of the given type. data is the raw value."""

    @abstractmethod
    def set_value(self, hive: int, path: str, name: str, value_type: int, raw: Any) -> ProviderResult:
        """Write a named value of the given type."""

    @abstractmethod
    def delete_value(self, hive: int, path: str, name: str) -> ProviderResult:
        """Delete a named value."""

    @abstractmethod
    def check_access(self, hive: int, path: str, required: int) -> ProviderResult:
        """Check whether the caller holds the required access rights. data is the granted flag."""
