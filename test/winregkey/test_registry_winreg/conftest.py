import pytest
from unittest.mock import MagicMock
import winreg # Real constants for the mock


def _winerror(code, message):
    error = OSError(code, message)
    error.winerror = code
    return error


@pytest.fixture
def no_more_items():
    return _winerror(259, "No more data is available.")


@pytest.fixture
def file_not_found():
    return _winerror(2, "The system cannot find the file specified.")


@pytest.fixture
def access_denied():
    return _winerror(5, "Access is denied.")


@pytest.fixture
def mock_winreg(mocker, no_more_items):
    """
    A single winreg mock patched into both modules that import winreg.

    OpenKey returns handle1 and CreateKeyEx returns handle2. Enumeration
    ends immediately unless a test overrides EnumKey/EnumValue.
    """
    mock = MagicMock(name="winreg")
    mocker.patch("winregkey.registry_winreg.winreg", new=mock)
    mocker.patch("winregkey.registry_context_managers.winreg", new=mock)

    mock.KEY_READ = winreg.KEY_READ
    mock.KEY_WRITE = winreg.KEY_WRITE
    mock.KEY_QUERY_VALUE = winreg.KEY_QUERY_VALUE
    mock.KEY_SET_VALUE = winreg.KEY_SET_VALUE
    mock.KEY_CREATE_SUB_KEY = winreg.KEY_CREATE_SUB_KEY
    mock.KEY_ENUMERATE_SUB_KEYS = winreg.KEY_ENUMERATE_SUB_KEYS
    mock.KEY_WOW64_32KEY = winreg.KEY_WOW64_32KEY

    mock.mock_handle_1 = MagicMock(name="handle1")
    mock.mock_handle_2 = MagicMock(name="handle2")
    # Keep truthiness checks in the context manager out of the call records
    mock.mock_handle_1.__bool__ = MagicMock(return_value=True)
    mock.mock_handle_2.__bool__ = MagicMock(return_value=True)

    mock.OpenKey.return_value = mock.mock_handle_1
    mock.CreateKeyEx.return_value = mock.mock_handle_2
    mock.CloseKey.return_value = None
    mock.EnumKey.side_effect = no_more_items
    mock.EnumValue.side_effect = no_more_items
    mock.ExpandEnvironmentStrings.side_effect = lambda s: s.replace("%SystemRoot%", "C:\\Windows")

    yield mock
