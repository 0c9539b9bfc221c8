import pytest

from winregkey.registry_errors import RegistryInvalidTypeError
from winregkey.registry_hive import RegistryHive
from winregkey.registry_iterators import SubKeyIterator, ValueIterator, walk
from winregkey.registry_key import RegistryKey
from winregkey.registry_provider import ProviderResult, STATUS_SUCCESS, STATUS_ACCESS_DENIED, \
    STATUS_FILE_NOT_FOUND
from winregkey.registry_translation import ValueType
from winregkey.registry_types import RegistryValue


@pytest.fixture
def software(mock_provider):
    return RegistryKey(mock_provider, RegistryHive.LOCAL_MACHINE, "Software")


@pytest.fixture
def tree(hklm):
    """HKLM\\Software with a small tree of keys and values."""
    software = hklm.create_sub_key("Software")
    software.create_sub_key("Acme\\Tools\\Hammer")
    software.create_sub_key("Acme\\Docs")
    software.create_sub_key("Zeta")
    acme = software.sub_key("Acme")
    acme.set_value("Version", "1.0", ValueType.STRING)
    acme.set_value("Count", 3, ValueType.DWORD)
    acme.set_value("Paths", ["a", "b"], ValueType.MULTI_STRING)
    return software

# --- SubKeyIterator ---

def test_sub_key_iteration(tree):
    keys = list(tree.sub_key_iterator())
    assert [key.qualified_name for key in keys] == ["Software\\Acme", "Software\\Zeta"]


def test_sub_key_iterator_manual_protocol(software, mock_provider):
    mock_provider.enum_key.return_value = ProviderResult(STATUS_SUCCESS, ["A", "B"])
    iterator = SubKeyIterator(software)

    iterator.rewind()
    assert len(iterator) == 2
    assert iterator.valid()
    assert iterator.key() == "A"
    assert iterator.current() == software.sub_key("A")
    iterator.advance()
    assert iterator.key() == "B"
    iterator.advance()
    assert not iterator.valid()
    mock_provider.enum_key.assert_called_once_with(RegistryHive.LOCAL_MACHINE, "Software")


@pytest.mark.parametrize("result", [
    ProviderResult(STATUS_SUCCESS, None),            # No subkeys
    ProviderResult(STATUS_SUCCESS, "garbage"),       # Not an array
    ProviderResult(STATUS_FILE_NOT_FOUND, None),     # Missing key
    ProviderResult(STATUS_ACCESS_DENIED, ["A"]),     # Failure with a stray payload
])
def test_sub_key_iterator_empty_on_failed_or_malformed_enumeration(software, mock_provider, result):
    mock_provider.enum_key.return_value = result
    iterator = software.sub_key_iterator()
    assert list(iterator) == []
    assert len(iterator) == 0


def test_sub_key_iterator_rewinds_on_each_loop(software, mock_provider):
    mock_provider.enum_key.return_value = ProviderResult(STATUS_SUCCESS, ["A"])
    iterator = software.sub_key_iterator()

    assert len(list(iterator)) == 1
    assert len(list(iterator)) == 1
    assert mock_provider.enum_key.call_count == 2


def test_has_children_and_get_children(tree):
    iterator = tree.sub_key_iterator()
    iterator.rewind()

    assert iterator.key() == "Acme"
    assert iterator.has_children()
    children = iterator.get_children()
    assert isinstance(children, SubKeyIterator)
    assert [key.name for key in children] == ["Tools", "Docs"]

    iterator.advance()
    assert iterator.key() == "Zeta"
    assert not iterator.has_children()


def test_has_children_costs_one_round_trip(tree, provider, mocker):
    iterator = tree.sub_key_iterator()
    iterator.rewind()
    spy = mocker.spy(provider, "enum_key")

    iterator.has_children()

    spy.assert_called_once_with(RegistryHive.LOCAL_MACHINE, "Software\\Acme")

# --- walk ---

def test_walk_depth_first(tree):
    names = [key.qualified_name for key in walk(tree)]
    assert names == [
        "Software\\Acme",
        "Software\\Acme\\Tools",
        "Software\\Acme\\Tools\\Hammer",
        "Software\\Acme\\Docs",
        "Software\\Zeta",
    ]


def test_walk_max_depth(tree):
    assert [key.name for key in tree.walk(max_depth=1)] == ["Acme", "Zeta"]
    assert len(list(tree.walk(max_depth=2))) == 4
    assert list(tree.walk(max_depth=0)) == []

# --- ValueIterator ---

def test_value_iteration(tree):
    acme = tree.sub_key("Acme")
    values = list(acme.value_iterator())
    assert values == [
        RegistryValue("Version", "1.0", ValueType.STRING),
        RegistryValue("Count", 3, ValueType.DWORD),
        RegistryValue("Paths", ["a", "b"], ValueType.MULTI_STRING),
    ]


def test_value_iteration_warms_cache(tree, provider, mocker):
    acme = RegistryKey(provider, RegistryHive.LOCAL_MACHINE, "Software\\Acme")
    list(acme.value_iterator())

    spy = mocker.spy(provider, "get_value")
    assert acme.get_value("Version") == "1.0"
    assert acme.get_value("Count") == 3
    spy.assert_not_called()


def test_value_iterator_manual_protocol(software, mock_provider):
    mock_provider.enum_values.return_value = ProviderResult(STATUS_SUCCESS, (["Name", "Size"], [1, 4]))
    mock_provider.get_value.return_value = ProviderResult(STATUS_SUCCESS, 10)
    iterator = software.value_iterator()

    iterator.rewind()
    assert len(iterator) == 2
    assert iterator.key() == "Name"
    assert iterator.current_type() == ValueType.STRING
    iterator.advance()
    assert iterator.key() == "Size"
    assert iterator.current_type() == ValueType.DWORD
    # Data is only fetched when asked for
    mock_provider.get_value.assert_not_called()
    assert iterator.current() == 10
    mock_provider.get_value.assert_called_once_with(RegistryHive.LOCAL_MACHINE, "Software", "Size", ValueType.DWORD)
    iterator.advance()
    assert not iterator.valid()


@pytest.mark.parametrize("result", [
    ProviderResult(STATUS_SUCCESS, (None, None)),              # No values
    ProviderResult(STATUS_SUCCESS, (["A"], None)),             # Types missing
    ProviderResult(STATUS_SUCCESS, (["A", "B"], [1])),         # Unequal lengths
    ProviderResult(STATUS_SUCCESS, None),                      # No payload at all
    ProviderResult(STATUS_SUCCESS, "garbage"),                 # Not a pair of arrays
    ProviderResult(STATUS_FILE_NOT_FOUND, (None, None)),       # Missing key
    ProviderResult(STATUS_ACCESS_DENIED, (["A"], [1])),        # Failure with a stray payload
])
def test_value_iterator_empty_on_failed_or_malformed_enumeration(software, mock_provider, result):
    mock_provider.enum_values.return_value = result
    iterator = software.value_iterator()
    assert list(iterator) == []
    assert len(iterator) == 0
    mock_provider.get_value.assert_not_called()


def test_value_iteration_skips_unsupported_types(software, mock_provider):
    mock_provider.enum_values.return_value = ProviderResult(STATUS_SUCCESS, (["None", "Name"], [0, 1]))
    mock_provider.get_value.return_value = ProviderResult(STATUS_SUCCESS, "x")

    values = list(software.value_iterator())

    assert values == [RegistryValue("Name", "x", ValueType.STRING)]


def test_current_type_strict(software, mock_provider):
    mock_provider.enum_values.return_value = ProviderResult(STATUS_SUCCESS, (["Link"], [6]))
    iterator = software.value_iterator()
    iterator.rewind()

    assert iterator.current_type(strict=False) is None
    with pytest.raises(RegistryInvalidTypeError):
        iterator.current_type()
