"""
The record yielded when iterating over the values of a registry key.

A RegistryValue holds data in its decoded form (see registry_translation), so
values built from raw-looking data compare equal to those read back from a
provider: a QWORD given as an int is held as its decimal string, BINARY data
given as a byte list is held as bytes, and MULTI_STRING data as a tuple.
"""

from typing import Any

from .registry_translation import ValueType, decode_value, get_value_type_name, normalize_value_type


class RegistryValue:
    """
    A named value of a registry key: name, decoded data and ValueType.

    Names compare case-insensitively, as the registry compares them. The
    record unpacks like a tuple (name, data, value_type = value) and compares
    equal to such a tuple.
    """
    def __init__(self, name: str, data: Any, value_type: int | str):
        """
        Args:
            name (str): The value name ("" for the default value).
            data (Any): Decoded or raw data; normalized to the decoded form of value_type.
            value_type (int | str): A ValueType, its code, or a name such as "REG_QWORD".

        Raises:
            RegistryInvalidTypeError: If value_type is not a supported value type.
        """
        self._name = name
        self._value_type = normalize_value_type(value_type)
        self._data = self._normalize_data(data, self._value_type)

    @staticmethod
    def _normalize_data(data: Any, value_type: ValueType) -> Any:
        if value_type in (ValueType.STRING, ValueType.EXPANDED_STRING) and not isinstance(data, str):
            return data # Leave odd data visible rather than stringifying it
        decoded = decode_value(data, value_type)
        if value_type == ValueType.MULTI_STRING:
            return tuple(decoded)
        return decoded

    @property
    def name(self) -> str:
        return self._name

    @property
    def data(self) -> Any:
        """The decoded data. MULTI_STRING data is a tuple of strings."""
        return self._data

    @property
    def type(self) -> ValueType:
        return self._value_type

    @property
    def type_name(self) -> str:
        """The REG_* name of the value type (e.g. "REG_SZ")."""
        return get_value_type_name(self._value_type)

    def __iter__(self):
        yield self._name
        yield self._data
        yield self._value_type

    def __repr__(self):
        return f"RegistryValue(name={self._name!r}, data={self._data!r}, value_type={self._value_type!r})"

    def __str__(self):
        if self._value_type == ValueType.BINARY:
            shown = self._data.hex(" ")
        elif self._value_type == ValueType.MULTI_STRING:
            shown = "; ".join(self._data)
        else:
            shown = self._data
        return f"'{self._name}': {shown} (Type: {self.type_name})"

    def __eq__(self, other):
        if isinstance(other, tuple) and len(other) == 3:
            try:
                other = RegistryValue(*other)
            except (TypeError, ValueError):
                return False
        if not isinstance(other, RegistryValue):
            return NotImplemented
        return (self._name.lower() == other.name.lower() and
                self._value_type == other.type and
                self._data == other.data)

    def __hash__(self):
        return hash((self._name.lower(), self._data, self._value_type))
