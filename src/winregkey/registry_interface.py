"""Provides the primary public interface for working with a registry.

This module defines the `RegistryRoot` class, the main entry point of the
`winregkey` package. A RegistryRoot binds one RegistryProvider connection
and hands out the root RegistryKey of each of the five standard hives, from
which keys are navigated, enumerated, read and written.

Usage typically involves connecting (or wrapping an existing provider) and
then navigating from a hive:

    registry = RegistryRoot.connect()
    key = registry.local_machine().sub_key("Software\\Acme", verify=True)
    version = key.get_value("Version")
"""
from typing import Callable, Optional
import logging

from .registry_hive import RegistryHive, normalize_root_key
from .registry_key import RegistryKey
from .registry_provider import RegistryProvider

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[str, Optional[str], Optional[str]], RegistryProvider]


class RegistryRoot:
    def __init__(
        self,
        provider: RegistryProvider,
        cache_values: bool = True,
    ):
        """Initializes a RegistryRoot instance.

        Args:
            provider (RegistryProvider): The provider connection all keys will use.
            cache_values (bool): Passed to every RegistryKey created from this root.
                                 If False, values are never memoized.
        """
        self._provider = provider
        self._cache_values = cache_values

    @classmethod
    def connect(
        cls,
        host: str = ".",
        username: Optional[str] = None,
        password: Optional[str] = None,
        *,
        provider_factory: Optional[ProviderFactory] = None,
        access_32bit_view: bool = False,
        cache_values: bool = True,
    ) -> "RegistryRoot":
        """
        Connect to the registry of a computer.

        Args:
            host (str): Host name or address of the computer. "." for the local computer.
            username (Optional[str]): User name for the connection.
            password (Optional[str]): Password for the connection.
            provider_factory (Optional[ProviderFactory]): Called as provider_factory(host, username, password)
                                                          to build the provider. Defaults to the winreg provider.
            access_32bit_view (bool): For the default provider, access the 32-bit registry view.
            cache_values (bool): Whether keys memoize the values they read.

        Raises:
            ValueError: If credentials are given without a provider_factory.
            NotImplementedError: If the default provider is used on a platform without winreg.
        """
        if provider_factory is not None:
            provider = provider_factory(host, username, password)
        else:
            if username is not None or password is not None:
                raise ValueError(
                    "The winreg provider uses the credentials of the current session; "
                    "pass a provider_factory to connect with explicit credentials."
                )
            try:
                from .registry_winreg import WinregProvider
            except ImportError as e:
                raise NotImplementedError("The winreg provider requires Windows APIs and only runs on Windows.") from e
            provider = WinregProvider(host, access_32bit_view=access_32bit_view)

        logger.debug("Connected to registry on host %r using %s", host, type(provider).__name__)
        return cls(provider, cache_values=cache_values)

    @property
    def provider(self) -> RegistryProvider:
        """The provider used to access the registry."""
        return self._provider

    def hive(self, hive: int | str) -> RegistryKey:
        """Get the root key of a hive given by identifier or name (e.g. "HKLM")."""
        return RegistryKey(self._provider, normalize_root_key(hive), "", cache_values=self._cache_values)

    def classes_root(self) -> RegistryKey:
        """Get the root key of the CLASSES_ROOT hive."""
        return self.hive(RegistryHive.CLASSES_ROOT)

    def current_config(self) -> RegistryKey:
        """Get the root key of the CURRENT_CONFIG hive."""
        return self.hive(RegistryHive.CURRENT_CONFIG)

    def current_user(self) -> RegistryKey:
        """Get the root key of the CURRENT_USER hive."""
        return self.hive(RegistryHive.CURRENT_USER)

    def local_machine(self) -> RegistryKey:
        """Get the root key of the LOCAL_MACHINE hive."""
        return self.hive(RegistryHive.LOCAL_MACHINE)

    def users(self) -> RegistryKey:
        """Get the root key of the USERS hive."""
        return self.hive(RegistryHive.USERS)
