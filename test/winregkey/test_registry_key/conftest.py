import pytest

from winregkey.registry_hive import RegistryHive
from winregkey.registry_key import RegistryKey


@pytest.fixture
def mocked_key(mock_provider):
    """HKLM\\Software bound to the provider mock."""
    return RegistryKey(mock_provider, RegistryHive.LOCAL_MACHINE, "Software")


@pytest.fixture
def acme_key(hklm):
    """HKLM\\Software\\Acme created in the in-memory provider."""
    return hklm.create_sub_key("Software\\Acme")
