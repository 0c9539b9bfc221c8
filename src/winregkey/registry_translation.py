"""
Translation between Python data and the registry provider's raw transport
representation.

Each ValueType fixes how data travels to and from the provider:

    STRING, EXPANDED_STRING   str                  <-> str
    BINARY                    array of byte ints   <-> bytes
    DWORD                     int                  <-> int (unsigned 32-bit)
    QWORD                     decimal str          <-> decimal str
    MULTI_STRING              array of str         <-> list of str

QWORD data travels as a decimal string in both directions so that values
above the signed 64-bit range survive transports that only speak signed
integers. decode_value also accepts an int from providers that return one.
"""

from enum import IntEnum
import math
import re
from typing import Any, Tuple
import logging

from .registry_errors import RegistryInvalidTypeError

logger = logging.getLogger(__name__)


class ValueType(IntEnum):
    """Supported registry value kinds, numbered as the standard REG_* constants."""
    STRING = 1
    EXPANDED_STRING = 2
    BINARY = 3
    DWORD = 4
    MULTI_STRING = 7
    QWORD = 11


_DWORD_MAX = 2**32 - 1
_QWORD_MAX = 2**64 - 1

_REG_TYPE_NAMES = {
    ValueType.STRING: "REG_SZ",
    ValueType.EXPANDED_STRING: "REG_EXPAND_SZ",
    ValueType.BINARY: "REG_BINARY",
    ValueType.DWORD: "REG_DWORD",
    ValueType.MULTI_STRING: "REG_MULTI_SZ",
    ValueType.QWORD: "REG_QWORD",
}

# Accept both the REG_* names and the enum member names
_REG_NAME_TO_TYPE = {name: value for value, name in _REG_TYPE_NAMES.items()}
_REG_NAME_TO_TYPE.update({member.name: member for member in ValueType})
_REG_NAME_TO_TYPE["REG_DWORD_LITTLE_ENDIAN"] = ValueType.DWORD
_REG_NAME_TO_TYPE["REG_QWORD_LITTLE_ENDIAN"] = ValueType.QWORD

# Strings that look like numbers are written as DWORD when no type is given
_NUMERIC_STRING = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")
_INTEGER_STRING = re.compile(r"^\s*[+-]?\d+\s*$")


def get_value_type_name(value_type: int) -> str:
    """Helper to get the REG_* name for a value type code."""
    return _REG_TYPE_NAMES.get(value_type, f"UnknownType({value_type})")


def normalize_value_type(type_input: int | str) -> ValueType:
    """
    Normalizes a value type input (ValueType, int code or string name) to a ValueType.

    Args:
        type_input (int | str): A ValueType member, an integer REG_* code, or a name
                                such as "REG_SZ" or "DWORD" (case-insensitive).

    Returns:
        ValueType: The matching value type.

    Raises:
        TypeError: If the input is not an int or a string.
        RegistryInvalidTypeError: If the code or name is not a supported value type.
    """
    if isinstance(type_input, ValueType):
        return type_input

    if isinstance(type_input, bool):
        raise TypeError("Value type input must be an integer or a string name, but got type <class 'bool'>.")

    if isinstance(type_input, int):
        try:
            return ValueType(type_input)
        except ValueError:
            raise RegistryInvalidTypeError(
                f"Value type code {type_input} is not a supported registry value type."
            ) from None
    elif isinstance(type_input, str):
        upper_name = type_input.upper()
        if upper_name in _REG_NAME_TO_TYPE:
            return _REG_NAME_TO_TYPE[upper_name]
        raise RegistryInvalidTypeError(
            f"Value type name '{type_input}' is not a supported registry value type "
            f"(e.g., 'REG_SZ', 'REG_DWORD')."
        )
    else:
        raise TypeError(
            f"Value type input must be an integer or a string name, "
            f"but got type {type(type_input)}."
        )


def is_numeric_string(data: Any) -> bool:
    """Return True if data is a string holding a decimal number."""
    return isinstance(data, str) and _NUMERIC_STRING.match(data) is not None


def infer_value_type(data: Any) -> ValueType:
    """
    Infers the value type to use when writing data without an explicit type.

    Sequences become MULTI_STRING, bytes become BINARY, integers and numeric
    strings become DWORD and anything else is written as STRING. Numeric
    strings are narrowed to DWORD, so callers that need string typing for
    "123" must pass the type explicitly.

    Raises:
        TypeError: For booleans, which are ambiguous.
    """
    if isinstance(data, bool):
        raise TypeError("Cannot infer a registry value type for bool data. Please specify value_type.")

    if isinstance(data, (list, tuple)):
        inferred = ValueType.MULTI_STRING
    elif isinstance(data, (bytes, bytearray)):
        inferred = ValueType.BINARY
    elif isinstance(data, int) or is_numeric_string(data):
        inferred = ValueType.DWORD
    else:
        inferred = ValueType.STRING

    logger.debug("Inferred value type %s for data %r", get_value_type_name(inferred), data)
    return inferred


def _to_integer(data: Any, value_type: ValueType) -> int:
    """Convert an int or numeric string to int for the integer value types."""
    if isinstance(data, bool):
        raise TypeError(f"Data must be an integer for registry type {get_value_type_name(value_type)}, but got {type(data)}.")
    if isinstance(data, int):
        return data
    if isinstance(data, str):
        if _INTEGER_STRING.match(data):
            return int(data)
        if value_type == ValueType.DWORD and is_numeric_string(data):
            number = float(data)
            if not math.isfinite(number):
                raise ValueError(f"String data {data!r} is out of range for registry type {get_value_type_name(value_type)}.")
            # "1.5" style input is truncated as a numeric cast would
            return int(number)
        raise ValueError(f"String data {data!r} is not a valid number for registry type {get_value_type_name(value_type)}.")
    raise TypeError(
        f"Data must be an integer for registry type {get_value_type_name(value_type)}, "
        f"but got {type(data)}."
    )


def encode_value(data: Any, value_type: int) -> Any:
    """
    Validates Python data against a value type and converts it to the provider's raw form.

    Args:
        data: The Python data to write.
        value_type: The target value type.

    Returns:
        Any: The raw data as expected by RegistryProvider.set_value.

    Raises:
        RegistryInvalidTypeError: If value_type is not supported.
        TypeError: If data is incompatible with the value type.
        ValueError: If data is out of range for integer types.
    """
    value_type = normalize_value_type(value_type)
    logger.debug("Encoding data %r (type: %s) as %s", data, type(data), get_value_type_name(value_type))

    if value_type in (ValueType.STRING, ValueType.EXPANDED_STRING):
        if not isinstance(data, str):
            raise TypeError(
                f"Data must be a string for registry type {get_value_type_name(value_type)}, "
                f"but got {type(data)}."
            )
        return data

    elif value_type == ValueType.DWORD:
        number = _to_integer(data, value_type)
        if not (-2**31 <= number <= _DWORD_MAX):
            raise ValueError(f"Integer data {number} is out of range for a 32-bit registry type (REG_DWORD).")
        return number & _DWORD_MAX

    elif value_type == ValueType.QWORD:
        number = _to_integer(data, value_type)
        if not (-2**63 <= number <= _QWORD_MAX):
            raise ValueError(f"Integer data {number} is out of range for a 64-bit registry type (REG_QWORD).")
        return str(number & _QWORD_MAX)

    elif value_type == ValueType.BINARY:
        if isinstance(data, (bytes, bytearray)):
            return list(data)
        if isinstance(data, str):
            # Each character is one byte, as in a byte string
            try:
                return list(data.encode("latin-1"))
            except UnicodeEncodeError as e:
                raise ValueError(f"String data {data!r} contains characters outside the byte range.") from e
        if isinstance(data, (list, tuple)):
            if not all(isinstance(item, int) and not isinstance(item, bool) and 0 <= item <= 255 for item in data):
                raise ValueError("Binary data given as a sequence must contain integers in the range 0-255.")
            return list(data)
        raise TypeError(
            f"Data must be bytes for registry type {get_value_type_name(value_type)}, "
            f"but got {type(data)}."
        )

    # MULTI_STRING is the only remaining member
    if not isinstance(data, (list, tuple)) or not all(isinstance(item, str) for item in data):
        raise TypeError(
            f"Data must be a list of strings for registry type {get_value_type_name(value_type)}, "
            f"but got {type(data)}."
        )
    return list(data)


def decode_value(raw: Any, value_type: int) -> Any:
    """
    Converts the provider's raw data for a value type into its Python form.

    Missing payloads decode to the empty value of the type, and non-array
    payloads for BINARY and MULTI_STRING decode to an empty bytes/list.

    Raises:
        RegistryInvalidTypeError: If value_type is not supported.
    """
    value_type = normalize_value_type(value_type)

    if value_type in (ValueType.STRING, ValueType.EXPANDED_STRING):
        return "" if raw is None else str(raw)

    elif value_type == ValueType.DWORD:
        # Transports that only know signed 32-bit integers hand back negatives
        return 0 if raw is None else int(raw) & _DWORD_MAX

    elif value_type == ValueType.QWORD:
        return "0" if raw is None else str(int(raw) & _QWORD_MAX)

    elif value_type == ValueType.BINARY:
        if isinstance(raw, (bytes, bytearray)):
            return bytes(raw)
        if isinstance(raw, (list, tuple)):
            return bytes(int(item) & 0xFF for item in raw)
        if raw is not None:
            logger.debug("Non-array BINARY payload %r decoded as empty bytes", raw)
        return b""

    if isinstance(raw, (list, tuple)):
        return [str(item) for item in raw]
    if raw is not None:
        logger.debug("Non-array MULTI_STRING payload %r decoded as an empty list", raw)
    return []


def round_trip_value(data: Any, value_type: int) -> Tuple[Any, Any]:
    """Return (raw, decoded) for data, i.e. what is sent and what a later read yields."""
    raw = encode_value(data, value_type)
    return raw, decode_value(raw, value_type)
