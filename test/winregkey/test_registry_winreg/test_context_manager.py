import pytest
import winreg

from winregkey.registry_context_managers import RegistryKeyHandle
from winregkey.registry_hive import RegistryHive


def test_open_and_close(mock_winreg):
    with RegistryKeyHandle(RegistryHive.LOCAL_MACHINE, "Software\\Acme", winreg.KEY_READ) as handle:
        assert handle is mock_winreg.mock_handle_1
        mock_winreg.CloseKey.assert_not_called()

    mock_winreg.OpenKey.assert_called_once_with(RegistryHive.LOCAL_MACHINE, "Software\\Acme", 0, winreg.KEY_READ)
    mock_winreg.CloseKey.assert_called_once_with(mock_winreg.mock_handle_1)


def test_32bit_view_adds_wow64_flag(mock_winreg):
    with RegistryKeyHandle(RegistryHive.LOCAL_MACHINE, "Software", winreg.KEY_READ, access_32bit_view=True):
        pass

    mock_winreg.OpenKey.assert_called_once_with(
        RegistryHive.LOCAL_MACHINE, "Software", 0, winreg.KEY_READ | winreg.KEY_WOW64_32KEY
    )


def test_open_error_propagates(mock_winreg, file_not_found):
    mock_winreg.OpenKey.side_effect = file_not_found

    with pytest.raises(OSError) as excinfo:
        with RegistryKeyHandle(RegistryHive.LOCAL_MACHINE, "Missing", winreg.KEY_READ):
            pass

    assert excinfo.value.winerror == 2
    mock_winreg.CloseKey.assert_not_called()


def test_closes_when_block_raises(mock_winreg):
    with pytest.raises(RuntimeError):
        with RegistryKeyHandle(RegistryHive.LOCAL_MACHINE, "Software", winreg.KEY_READ):
            raise RuntimeError("boom")

    mock_winreg.CloseKey.assert_called_once_with(mock_winreg.mock_handle_1)


def test_close_error_is_logged_not_raised(mock_winreg, access_denied, caplog):
    mock_winreg.CloseKey.side_effect = access_denied

    with caplog.at_level("DEBUG", logger="winregkey.registry_context_managers"):
        with RegistryKeyHandle(RegistryHive.LOCAL_MACHINE, "Software", winreg.KEY_READ):
            pass

    assert "Failed to close registry key handle" in caplog.text
