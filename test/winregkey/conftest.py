import sys
import pytest
from unittest.mock import MagicMock

from winregkey.registry_interface import RegistryRoot
from winregkey.registry_memory import MemoryProvider
from winregkey.registry_provider import RegistryProvider, ProviderResult, STATUS_SUCCESS, STATUS_VALUE_NOT_FOUND

# The winreg provider tests need the real winreg module for its constants
collect_ignore = [] if sys.platform == "win32" else ["test_registry_winreg"]


@pytest.fixture
def provider():
    """A fresh in-memory provider for each test."""
    return MemoryProvider()


@pytest.fixture
def registry(provider):
    return RegistryRoot(provider)


@pytest.fixture
def hklm(registry):
    return registry.local_machine()


@pytest.fixture
def mock_provider():
    """A provider mock whose operations succeed by default.

    Enumerations return the null payloads a provider sends for an empty key and
    reads report the value as missing; individual tests override these.
    """
    mock = MagicMock(spec=RegistryProvider, name="provider")
    for method in ("create_key", "delete_key", "set_value", "delete_value"):
        getattr(mock, method).return_value = ProviderResult(STATUS_SUCCESS)
    mock.enum_key.return_value = ProviderResult(STATUS_SUCCESS, None)
    mock.enum_values.return_value = ProviderResult(STATUS_SUCCESS, (None, None))
    mock.get_value.return_value = ProviderResult(STATUS_VALUE_NOT_FOUND)
    mock.check_access.return_value = ProviderResult(STATUS_SUCCESS, True)
    return mock
