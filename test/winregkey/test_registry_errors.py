import re
import pytest

from winregkey.registry_errors import (
    RegistryError,
    RegistryKeyNotFoundError,
    RegistryValueNotFoundError,
    RegistryOperationFailedError,
    RegistryInvalidTypeError,
    _raise_for_status,
)


def test_error_hierarchy():
    assert issubclass(RegistryKeyNotFoundError, LookupError)
    assert issubclass(RegistryValueNotFoundError, LookupError)
    assert issubclass(RegistryInvalidTypeError, ValueError)
    for error_type in (RegistryKeyNotFoundError, RegistryValueNotFoundError,
                       RegistryOperationFailedError, RegistryInvalidTypeError):
        assert issubclass(error_type, RegistryError)


def test_raise_for_status_known_code():
    expected_message = "Failed to delete key on key 'Software\\Acme' (status 5: Access is denied)"
    with pytest.raises(RegistryOperationFailedError, match=re.escape(expected_message)) as exc_info:
        _raise_for_status(5, "delete key", "Software\\Acme")
    assert exc_info.value.status == 5
    assert exc_info.value.description == "Access is denied"


def test_raise_for_status_unknown_code_with_value_name():
    expected_message = "Failed to read value on key 'Software', value 'Version' (status 1234)"
    with pytest.raises(RegistryOperationFailedError, match=re.escape(expected_message)) as exc_info:
        _raise_for_status(1234, "read value", "Software", "Version")
    assert exc_info.value.description is None


def test_raise_for_status_custom_error_type():
    with pytest.raises(RegistryKeyNotFoundError) as exc_info:
        _raise_for_status(2, "open key", "Missing", error_type=RegistryKeyNotFoundError)
    assert exc_info.value.status == 2


def test_str_without_message():
    assert str(RegistryError("")) == ""
    assert str(RegistryOperationFailedError("boom", status=87)) == "boom"
