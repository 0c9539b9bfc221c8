import sys

# Import the public interface components
from .registry_interface import RegistryRoot
from .registry_key import RegistryKey
from .registry_iterators import SubKeyIterator, ValueIterator
from .registry_cache import ValueCache
from .registry_errors import (
    RegistryError,
    RegistryKeyNotFoundError,
    RegistryValueNotFoundError,
    RegistryOperationFailedError,
    RegistryInvalidTypeError,
)
from .registry_types import RegistryValue # noqa: F401 # Imported for __all__ and type hints
from .registry_hive import RegistryHive, normalize_root_key
from .registry_translation import ValueType, normalize_value_type
from .registry_provider import RegistryProvider, ProviderResult, RegistryAccess
from .registry_memory import MemoryProvider

__all__ = [
    "RegistryRoot",
    "RegistryKey",
    "SubKeyIterator",
    "ValueIterator",
    "ValueCache",
    "RegistryValue",
    "RegistryHive",
    "ValueType",
    "normalize_root_key",
    "normalize_value_type",
    "RegistryProvider",
    "ProviderResult",
    "RegistryAccess",
    "MemoryProvider",
    # Exception classes
    "RegistryError",
    "RegistryKeyNotFoundError",
    "RegistryValueNotFoundError",
    "RegistryOperationFailedError",
    "RegistryInvalidTypeError",
]

if sys.platform == "win32":
    # The winreg provider is only importable where the winreg module exists
    from .registry_winreg import WinregProvider # noqa: F401 # Imported for __all__
    __all__.append("WinregProvider")

#Version Attribute
__version__ = "0.1.0"
