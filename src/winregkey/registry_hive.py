"""
Registry hive identifiers.

The numeric values are the well-known predefined root key handles
(HKEY_CLASSES_ROOT and friends) and must not be renumbered: real back ends
compare them bit for bit.
"""

from enum import IntEnum
import logging

logger = logging.getLogger(__name__)


class RegistryHive(IntEnum):
    """The five standard registry hives."""
    CLASSES_ROOT = 0x80000000
    CURRENT_USER = 0x80000001
    LOCAL_MACHINE = 0x80000002
    USERS = 0x80000003
    CURRENT_CONFIG = 0x80000005


def _create_root_key_mapping():
    """
    Create a mapping of root key names to hives. Used so users can specify the hive by name in
    addition to int.
    """
    mapping = {}

    for hive in RegistryHive:
        mapping[hive.name] = hive
        mapping[f"HKEY_{hive.name}"] = hive

    # Common abbreviations
    mapping['HKCR'] = RegistryHive.CLASSES_ROOT
    mapping['HKCU'] = RegistryHive.CURRENT_USER
    mapping['HKLM'] = RegistryHive.LOCAL_MACHINE
    mapping['HKU'] = RegistryHive.USERS
    mapping['HKCC'] = RegistryHive.CURRENT_CONFIG

    return mapping


ROOT_KEY_MAPPING = _create_root_key_mapping()

# Reverse mapping used for display (e.g. str(RegistryKey))
_HIVE_TO_SHORT_NAME = {
    RegistryHive.CLASSES_ROOT: "HKCR",
    RegistryHive.CURRENT_USER: "HKCU",
    RegistryHive.LOCAL_MACHINE: "HKLM",
    RegistryHive.USERS: "HKU",
    RegistryHive.CURRENT_CONFIG: "HKCC",
}


def get_hive_name(hive: RegistryHive) -> str:
    """Return the short display name of a hive (e.g. "HKLM")."""
    return _HIVE_TO_SHORT_NAME.get(hive, f"UnknownRoot({int(hive)})")


def normalize_root_key(key_identifier: int | str) -> RegistryHive:
    """
    Helper function to get the hive from a string or int.
    Allows users to specify the hive by name ("HKLM", "HKEY_LOCAL_MACHINE", "LOCAL_MACHINE")
    in addition to its numeric identifier.
    """
    if isinstance(key_identifier, RegistryHive):
        return key_identifier
    elif isinstance(key_identifier, bool):
        raise TypeError("Root key must be an integer or string")
    elif isinstance(key_identifier, int):
        try:
            return RegistryHive(key_identifier)
        except ValueError:
            raise ValueError(f"Unknown root key: {key_identifier:#x}. Valid keys are: "
                             f"{', '.join(f'{h.value:#x}' for h in RegistryHive)}") from None
    elif isinstance(key_identifier, str):
        key_upper = key_identifier.upper()
        if key_upper in ROOT_KEY_MAPPING:
            return ROOT_KEY_MAPPING[key_upper]
        else:
            raise ValueError(f"Unknown root key: {key_identifier}. Valid keys are: {', '.join(ROOT_KEY_MAPPING.keys())}")
    else:
        raise TypeError("Root key must be an integer or string")
